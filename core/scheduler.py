# core/scheduler.py
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.config import settings
from core.logging_config import logger
from core.store import DocumentStore
from services.agreement_lifecycle import AgreementLifecycle
from services.tenancy_store import TenancyStore


def run_reconciliation(store: DocumentStore) -> Optional[dict]:
    """Runs one reconciliation pass; failures are logged, never raised."""
    try:
        logger.info("[SCHEDULER] Starting tenancy reconciliation...")
        report = AgreementLifecycle(TenancyStore(store)).reconcile()
        return report.to_dict()
    except Exception as e:
        logger.error(f"[SCHEDULER] Reconciliation failed: {e}", exc_info=True)
        return None


def start_scheduler(store: DocumentStore) -> Optional[BackgroundScheduler]:
    """
    Start the background reconciliation job.
    Returns None when RECONCILE_INTERVAL_MINUTES is 0.
    """
    minutes = settings.RECONCILE_INTERVAL_MINUTES
    if minutes <= 0:
        return None

    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_reconciliation,
        trigger=IntervalTrigger(minutes=minutes),
        args=[store],
        id="tenancy_reconcile_job",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(f"Scheduler started. Reconciliation every {minutes} minutes.")
    return scheduler
