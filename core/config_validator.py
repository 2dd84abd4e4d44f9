# core/config_validator.py

from typing import List
from core.config import settings, DEFAULT_TOKEN_SECRET
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")
    if not settings.ACCESS_TOKEN_SECRET or settings.ACCESS_TOKEN_SECRET == DEFAULT_TOKEN_SECRET:
        missing.append("ACCESS_TOKEN_SECRET")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns list of warnings.
    """
    warnings = []

    if settings.ACCESS_TOKEN_EXPIRE_MINUTES != 60:
        warnings.append(
            f"ACCESS_TOKEN_EXPIRE_MINUTES={settings.ACCESS_TOKEN_EXPIRE_MINUTES} (expected 60)"
        )
    if settings.RECONCILE_INTERVAL_MINUTES <= 0:
        warnings.append("RECONCILE_INTERVAL_MINUTES (reconciliation runs on demand only)")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    In production a missing required variable raises RuntimeError;
    in every other environment it is logged and startup continues.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.is_production:
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        logger.warning(error_msg)

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    if not missing_required:
        logger.info("Configuration validation passed")
