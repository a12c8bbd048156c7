import pytest
from fastapi.testclient import TestClient

from fieldbase.core.rate_limit import limiter
from fieldbase.database.supabase_client import SupabaseClient
from fieldbase.main import app
from fieldbase.modules.auth.schemas import CurrentUser
from tests.fake_supabase import FakeSupabase

PASSWORD = "correct-horse-42"


@pytest.fixture
def fake(monkeypatch):
    fake = FakeSupabase()
    SupabaseClient._client = fake
    SupabaseClient._service_client = fake
    monkeypatch.setattr(SupabaseClient, "new_session_client", fake.session_client)
    yield fake
    SupabaseClient.reset_client()


@pytest.fixture
def client(fake):
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True


class TestUser:
    __test__ = False

    def __init__(self, current: CurrentUser, token: str):
        self.current = current
        self.token = token

    @property
    def id(self) -> str:
        return self.current.id

    @property
    def email(self) -> str:
        return self.current.email

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def make_user(fake):
    """Create a signed-up user with a profile and a valid access token"""
    def _make_user(email: str, full_name: str = "Test User") -> TestUser:
        auth = fake.session_client().auth
        signed_up = auth.sign_up({
            "email": email,
            "password": PASSWORD,
            "options": {"data": {"full_name": full_name}},
        })
        session = auth.sign_in_with_password({"email": email, "password": PASSWORD})
        current = CurrentUser(id=signed_up.user.id, email=signed_up.user.email, full_name=full_name)
        return TestUser(current, session.session.access_token)
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", "Alice Martin")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", "Bob Durand")
