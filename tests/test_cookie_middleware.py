"""End-to-end tests through FastAPI: CookieMiddleware, dependencies and the cookies router."""
from __future__ import annotations

from fastapi.testclient import TestClient

from main import create_app
from signed_cookies.services.cookie_service import CookieService
from signed_cookies.utils.signer import Signer


class TestCookieMiddleware:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers.get_list("set-cookie") == []

    def test_request_cookies_are_parsed(self, client):
        response = client.get("/api/cookies", headers={"Cookie": "a=1; b=%7B%22x%22%3A1%7D; flag"})
        assert response.status_code == 200
        assert response.json() == {"a": "1", "b": '{"x":1}', "flag": ""}

    def test_set_cookie(self, client):
        response = client.put("/api/cookies/theme", json={"value": "dark", "max_age": 60})
        assert response.status_code == 200
        assert response.headers.get_list("set-cookie") == ["theme=dark; Max-Age=60; Path=/; HttpOnly; Secure"]

    def test_set_signed_cookie(self, client):
        response = client.put("/api/cookies/sid", json={"value": "ada", "signed": True})
        assert response.json()["signed"] is True
        assert response.headers.get_list("set-cookie") == [f"sid={Signer('s3cr3t').sign('ada')}; Path=/; HttpOnly; Secure"]

    def test_clear_cookie(self, client):
        response = client.delete("/api/cookies/sid")
        assert response.headers.get_list("set-cookie") == [
            "sid=; Expires=Thu, 01 Jan 1970 00:00:00 GMT; Path=/; HttpOnly; Secure"
        ]

    def test_verify_current_cookie(self, client):
        signed = Signer("s3cr3t").sign("ada")
        response = client.get("/api/cookies/sid/verify", headers={"Cookie": f"sid={signed}"})
        assert response.json() == {"valid": True, "renew": False, "value": "ada"}
        assert response.headers.get_list("set-cookie") == []

    def test_verify_rotated_cookie_reissues_it(self, client):
        signed = Signer("old-s3cr3t").sign("ada")
        response = client.get("/api/cookies/sid/verify", headers={"Cookie": f"sid={signed}"})
        assert response.json() == {"valid": True, "renew": True, "value": "ada"}
        assert response.headers.get_list("set-cookie") == [f"sid={Signer('s3cr3t').sign('ada')}; Path=/; HttpOnly; Secure"]

    def test_verify_forged_cookie(self, client):
        response = client.get("/api/cookies/sid/verify", headers={"Cookie": "sid=ada.forged"})
        assert response.json() == {"valid": False, "renew": False, "value": None}

    def test_verify_missing_cookie(self, client):
        response = client.get("/api/cookies/sid/verify")
        assert response.status_code == 404

    def test_invalid_name_is_a_client_error(self, client):
        response = client.put("/api/cookies/bad name", json={"value": "x"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_COOKIE_NAME"
        assert response.headers.get_list("set-cookie") == []

    def test_clearing_invalid_name_is_a_client_error(self, client):
        response = client.delete("/api/cookies/bad;name")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_COOKIE_NAME"

    def test_signing_without_secret_is_reported(self):
        client = TestClient(create_app(CookieService()))
        response = client.put("/api/cookies/sid", json={"value": "ada", "signed": True})
        assert response.status_code == 500
        assert response.json()["code"] == "SIGNER_NOT_CONFIGURED"


class TestTransportSecurity:
    """secure='auto' follows the connection scheme."""

    def _auto_client(self, base_url: str, trust_forwarded_proto: bool = False) -> TestClient:
        service = CookieService({"secret": "k", "parse_options": {"secure": "auto"}})
        return TestClient(create_app(service, trust_forwarded_proto=trust_forwarded_proto), base_url=base_url)

    def test_https_gets_secure_cookie(self):
        response = self._auto_client("https://testserver").put("/api/cookies/a", json={"value": "1"})
        assert response.headers.get_list("set-cookie") == ["a=1; Path=/; HttpOnly; Secure"]

    def test_http_gets_plain_cookie(self):
        response = self._auto_client("http://testserver").put("/api/cookies/a", json={"value": "1"})
        assert response.headers.get_list("set-cookie") == ["a=1; Path=/; HttpOnly; SameSite=Lax"]

    def test_forwarded_proto_counts_as_secure_behind_trusted_proxy(self):
        client = self._auto_client("http://testserver", trust_forwarded_proto=True)
        response = client.put("/api/cookies/a", json={"value": "1"}, headers={"X-Forwarded-Proto": "https"})
        assert response.headers.get_list("set-cookie") == ["a=1; Path=/; HttpOnly; Secure"]

    def test_forwarded_proto_is_ignored_without_trusted_proxy(self):
        client = self._auto_client("http://testserver")
        response = client.put("/api/cookies/a", json={"value": "1"}, headers={"X-Forwarded-Proto": "https"})
        assert response.headers.get_list("set-cookie") == ["a=1; Path=/; HttpOnly; SameSite=Lax"]
