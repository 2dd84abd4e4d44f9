# tests/test_auth.py

"""
Tests for token endpoints and the authorization guards.
"""

from datetime import timedelta

from fastapi.testclient import TestClient

from core.tokens import create_access_token
from tests.conftest import TENANT_EMAIL, OTHER_EMAIL, auth_headers


def test_jwt_sets_http_only_cookie(client: TestClient):
    response = client.post("/jwt", json={"email": TENANT_EMAIL, "name": "Tenant"})

    assert response.status_code == 200
    assert response.json() == {"success": True}

    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("token=")
    assert "httponly" in set_cookie
    assert "samesite=strict" in set_cookie


def test_cookie_authenticates_following_requests(client: TestClient):
    client.post("/jwt", json={"email": TENANT_EMAIL})

    response = client.get(f"/user/role/{TENANT_EMAIL}")

    assert response.status_code == 200
    assert response.json() == {"role": "user"}


def test_logout_clears_cookie(client: TestClient):
    client.post("/jwt", json={"email": TENANT_EMAIL})
    response = client.post("/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get(f"/user/role/{TENANT_EMAIL}").status_code == 401


def test_jwt_requires_email(client: TestClient):
    response = client.post("/jwt", json={"name": "no email"})
    assert response.status_code == 422


def test_missing_token_is_401(client: TestClient):
    response = client.get(f"/user/role/{TENANT_EMAIL}")

    assert response.status_code == 401
    assert response.json() == {"detail": "unauthorized access"}


def test_expired_token_is_401(client: TestClient):
    token = create_access_token({"email": TENANT_EMAIL}, expires_delta=timedelta(seconds=-1))

    response = client.get(
        f"/user/role/{TENANT_EMAIL}",
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 401


def test_non_admin_is_403(client: TestClient, tenant_headers):
    response = client.get("/members", headers=tenant_headers)

    assert response.status_code == 403
    assert response.json() == {"detail": "forbidden access"}


def test_unknown_user_is_not_admin(client: TestClient):
    response = client.get("/members", headers=auth_headers("ghost@example.com"))
    assert response.status_code == 403


def test_admin_check_is_live(client: TestClient, store, tenant_headers):
    """Promoting a user in the store takes effect on the very next call."""
    assert client.get("/members", headers=tenant_headers).status_code == 403

    store.collections["users"]["u-tenant"]["role"] = "admin"

    assert client.get("/members", headers=tenant_headers).status_code == 200


def test_self_scope_blocks_other_identity(client: TestClient, other_headers):
    assert client.get(f"/user/role/{TENANT_EMAIL}", headers=other_headers).status_code == 403
    assert client.get(f"/agreements/{TENANT_EMAIL}", headers=other_headers).status_code == 403
    assert client.get(f"/payments?email={TENANT_EMAIL}", headers=other_headers).status_code == 403


def test_self_scope_applies_to_admins_too(client: TestClient, admin_headers):
    assert client.get(f"/agreements/{TENANT_EMAIL}", headers=admin_headers).status_code == 403
    assert client.get(f"/payments?email={OTHER_EMAIL}", headers=admin_headers).status_code == 403


def test_self_scope_ignores_email_case(client: TestClient, tenant_headers):
    response = client.get(f"/user/role/{TENANT_EMAIL.upper()}", headers=tenant_headers)
    assert response.status_code == 200
