"""Shared fixtures: signers, services and a test client wired with CookieMiddleware."""
import pytest
from fastapi.testclient import TestClient

from main import create_app
from signed_cookies.models.cookie import CookiePluginOptions
from signed_cookies.services.cookie_service import CookieService
from signed_cookies.utils.signer import Signer

SECRET = "s3cr3t"
OLD_SECRET = "old-s3cr3t"


@pytest.fixture
def signer():
    return Signer(SECRET)


@pytest.fixture
def rotated_signer():
    """Current secret first, previous secret kept for verification."""
    return Signer([SECRET, OLD_SECRET])


@pytest.fixture
def service():
    return CookieService(CookiePluginOptions(secret=[SECRET, OLD_SECRET]))


@pytest.fixture
def unsigned_service():
    return CookieService()


@pytest.fixture
def client(service):
    return TestClient(create_app(service))
