import json

import pytest

from factories import ADMIN_EMAIL, ADMIN_PASSWORD
from jobboard.constants import ADMIN_SESSION_KEY_PREFIX
from jobboard.errors import AuthenticationError
from jobboard.services.admin_auth_service import AdminAuthPolicy, static_credential_check
from jobboard.utils.session_storage import FileSessionStorage, InMemorySessionStorage


def session_key(token):
    return f"{ADMIN_SESSION_KEY_PREFIX}:{token}"


def test_login_stores_session_under_its_token(admin_policy, clock):
    session = admin_policy.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert session.email == ADMIN_EMAIL
    assert session.login_time == clock.now
    assert (session.expires_at - session.login_time).total_seconds() == 24 * 3600
    assert len(session.token) >= 32
    stored = json.loads(admin_policy.storage.get_item(session_key(session.token)))
    assert set(stored) == {"email", "authenticated", "loginTime", "expiresAt"}
    assert admin_policy.is_authenticated(session.token)
    assert admin_policy.current_session(session.token).token == session.token


@pytest.mark.parametrize("email, password", [
    (ADMIN_EMAIL, "wrong"),
    ("someone@example.com", ADMIN_PASSWORD),
    ("", ""),
])
def test_invalid_credentials_are_rejected(admin_policy, email, password):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        admin_policy.login(email, password)

    assert admin_policy.storage._items == {}


@pytest.mark.parametrize("token", [None, "", "guessed-token"])
def test_unknown_token_is_not_authenticated(admin_policy, token):
    admin_policy.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert not admin_policy.is_authenticated(token)


def test_each_login_gets_its_own_session(admin_policy):
    first = admin_policy.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    second = admin_policy.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert first.token != second.token

    admin_policy.logout(first.token)

    assert not admin_policy.is_authenticated(first.token)
    assert admin_policy.is_authenticated(second.token)


def test_session_expires_after_ttl(admin_policy, clock):
    session = admin_policy.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    clock.advance(hours=23, minutes=59)
    assert admin_policy.is_authenticated(session.token)

    clock.advance(minutes=1)
    assert not admin_policy.is_authenticated(session.token)
    assert admin_policy.storage.get_item(session_key(session.token)) is None


def test_unreadable_session_is_cleared(admin_policy):
    admin_policy.storage.set_item(session_key("abc"), "{not json")

    assert admin_policy.current_session("abc") is None
    assert admin_policy.storage.get_item(session_key("abc")) is None


def test_session_for_other_email_is_cleared(admin_policy):
    session = admin_policy.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    key = session_key(session.token)
    record = json.loads(admin_policy.storage.get_item(key))
    record["email"] = "intruder@example.com"
    admin_policy.storage.set_item(key, json.dumps(record))

    assert not admin_policy.is_authenticated(session.token)
    assert admin_policy.storage.get_item(key) is None


def test_require_session_raises_without_login(admin_policy):
    with pytest.raises(AuthenticationError):
        admin_policy.require_session(None)


def test_logout_removes_the_session(admin_policy):
    session = admin_policy.login(ADMIN_EMAIL, ADMIN_PASSWORD)

    admin_policy.logout(session.token)

    assert admin_policy.storage.get_item(session_key(session.token)) is None
    with pytest.raises(AuthenticationError):
        admin_policy.require_session(session.token)


def test_unconfigured_credentials_reject_everything():
    check = static_credential_check("", "")

    assert check("", "") is False
    assert check("admin@example.com", "anything") is False


def test_session_survives_restart_with_file_storage(tmp_path, clock):
    session_file = tmp_path / "session" / "admin.json"

    def policy():
        return AdminAuthPolicy(
            credential_check=static_credential_check(ADMIN_EMAIL, ADMIN_PASSWORD),
            storage=FileSessionStorage(session_file),
            admin_email=ADMIN_EMAIL,
            clock=clock
        )

    session = policy().login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert session_file.exists()
    assert policy().is_authenticated(session.token)
    assert not policy().is_authenticated("another-token")


def test_in_memory_storage_round_trip():
    storage = InMemorySessionStorage()
    storage.set_item("key", "value")
    storage.remove_item("key")
    storage.remove_item("never-set")

    assert storage.get_item("key") is None


def test_file_storage_ignores_corrupt_file(tmp_path):
    session_file = tmp_path / "admin.json"
    session_file.write_text("corrupt")

    assert FileSessionStorage(session_file).get_item(session_key("abc")) is None
