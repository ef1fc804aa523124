"""
Pytest Configuration and Shared Fixtures.

Provides common test fixtures for the admin kernel unit tests.
"""

import pytest
import bcrypt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa


ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "larke-pass-123"
JWT_SECRET = "test-secret-key-0123456789abcdef0123456789"


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    """bcrypt hash of ADMIN_PASSWORD (low cost to keep tests fast)."""
    return bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture
def admin_credentials() -> dict[str, str]:
    return {"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}


@pytest.fixture
def mock_env_vars(monkeypatch, admin_password_hash):
    """Set up mock environment variables for testing."""
    env_vars = {
        "SERVER_HOST": "127.0.0.1",
        "SERVER_PORT": "8000",
        "BASE_URL": "https://test.example.com",
        "APP_DEBUG": "true",
        "APP_LOG_LEVEL": "DEBUG",
        "APP_HTTPS": "false",
        "APP_SECURE": "false",
        "JWT_ALG": "HS256",
        "JWT_ISS": "larke",
        "JWT_AUD": "admin",
        "JWT_SUB": "",
        "JWT_JTI": "",
        "JWT_EXPTIME": "3600",
        "JWT_NOTBEFORETIME": "0",
        "JWT_SIGNER_TYPE": "symmetric",
        "JWT_SECRECT": JWT_SECRET,
        "JWT_PRIVATE_KEY": "",
        "JWT_PUBLIC_KEY": "",
        "RESPONSE_IS_ALLOW_ORIGIN": "false",
        "ADMIN_USERNAME": ADMIN_USERNAME,
        "ADMIN_PASSWORD_HASH": admin_password_hash,
        "EXTENSION_DIR": "extensions",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("JWT_PRIVATE_KEY_FILE", raising=False)
    monkeypatch.delenv("JWT_PUBLIC_KEY_FILE", raising=False)

    return env_vars


@pytest.fixture
def config_loader(mock_env_vars):
    """Create a ConfigLoader instance with mock environment."""
    from core.app_context import ConfigLoader

    return ConfigLoader().load()


@pytest.fixture
def app_context(config_loader):
    """Create an AppContext instance with mock environment."""
    from core.app_context import AppContext

    return AppContext(config_loader)


# =============================================================================
# Key Material Fixtures
# =============================================================================


def _pem_pair(private_key) -> tuple[str, str]:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture(scope="session")
def rsa_key_pair() -> tuple[str, str]:
    """(private_pem, public_pem) for RS* algorithms."""
    return _pem_pair(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def ec_key_pair() -> tuple[str, str]:
    """(private_pem, public_pem) on P-256 for ES256."""
    return _pem_pair(ec.generate_private_key(ec.SECP256R1()))


# =============================================================================
# Clock Fixtures
# =============================================================================


class FixedClock:
    """Manually advanced clock for JwtService and CacheService."""

    def __init__(self, now: float = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def services(app_context):
    """Registered and booted AdminServices with the bundled extensions."""
    from core.providers import ServiceProvider

    provider = ServiceProvider(app_context)
    bundle = provider.register()
    provider.boot(bundle)
    return bundle


@pytest.fixture
def app(services):
    """FastAPI application built from the test services."""
    from core.server import create_base_app

    return create_base_app(services)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def auth_headers(client, admin_credentials) -> dict[str, str]:
    """Authorization header for a freshly logged-in admin."""
    response = client.post("/admin/passport/login", json=admin_credentials)
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}
