import pathlib
import sys
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from marketplace.documents import JsonFileDocumentStore
from marketplace.main import create_app
from marketplace.payments import PaymentConfig, PaymentIntentIssuer
from marketplace.security import JwtAuthConfig
from marketplace.store import MarketplaceStore, store

JWT_TEST_SECRET = "jwt_test_secret"


def issue_test_token(*, email: str, user_id: str = "u_test", role: str = "supplier", ttl_minutes: int = 30) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=ttl_minutes)).timestamp()),
    }
    return jwt.encode(payload, JWT_TEST_SECRET, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_store(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MARKET_STORE_BACKEND", "json")
    monkeypatch.setenv("MARKET_DB_PATH", str(tmp_path / "api-db.json"))
    monkeypatch.setenv("JWT_SECRET", JWT_TEST_SECRET)
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    monkeypatch.delenv("PLATFORM_FEE_PERCENT", raising=False)
    store.reset()
    yield


@pytest.fixture
def db_path(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "dev-db.json"


@pytest.fixture
def market(db_path: pathlib.Path) -> MarketplaceStore:
    return MarketplaceStore(
        documents=JsonFileDocumentStore(db_path),
        payments=PaymentIntentIssuer(PaymentConfig()),
        auth_config=JwtAuthConfig.from_env(),
    )


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def auth_headers():
    def _headers(email: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_test_token(email=email)}"}

    return _headers
