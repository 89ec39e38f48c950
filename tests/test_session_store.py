from datetime import datetime, timedelta, timezone

import jwt

from phoneauth.application.ports.session_store import SessionHandle
from phoneauth.infrastructure.session import InMemorySessionStore, SignedCookieSessionStore


def cookie_pair(set_cookie):
    return set_cookie.split(";")[0]


def test_flash_is_consumed_by_first_read():
    session = SessionHandle()
    session.flash("twilio:phone", "+15551234567")
    assert session.has("twilio:phone")
    assert session.get("twilio:phone") == "+15551234567"
    assert session.get("twilio:phone") is None
    assert not session.has("twilio:phone")


def test_unset_removes_plain_and_flashed_values():
    session = SessionHandle()
    session.set("user", 1)
    session.flash("auth:error", {"message": "x"})
    session.unset("user")
    session.unset("auth:error")
    assert session.data == {}


def test_signed_cookie_round_trip():
    store = SignedCookieSessionStore(secret_key="s3cret", cookie_name="sid")
    session = store.get(None)
    store.set(session, "user", {"id": 7})
    store.flash(session, "twilio:phone", "+15551234567")

    header = store.persist(session)
    assert header.startswith("sid=")
    assert "HttpOnly" in header
    assert "Path=/" in header

    restored = store.get(cookie_pair(header))
    assert restored.get("user") == {"id": 7}
    assert restored.get("twilio:phone") == "+15551234567"


def test_signed_cookie_rejects_tampering():
    store = SignedCookieSessionStore(secret_key="s3cret", cookie_name="sid")
    session = store.get(None)
    store.set(session, "user", {"id": 7})
    header = store.persist(session)

    other = SignedCookieSessionStore(secret_key="other", cookie_name="sid")
    assert other.get(cookie_pair(header)).data == {}
    assert store.get("sid=not-a-token").data == {}


def test_signed_cookie_expired_starts_fresh_session():
    store = SignedCookieSessionStore(secret_key="s3cret", cookie_name="sid")
    token = jwt.encode(
        {"data": {"user": 1}, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        "s3cret",
        algorithm="HS256",
    )
    assert store.get(f"sid={token}").data == {}


def test_signed_cookie_ignores_other_cookies():
    store = SignedCookieSessionStore(secret_key="s3cret", cookie_name="sid")
    assert store.get("theme=dark").data == {}


def test_destroy_expires_cookie():
    store = SignedCookieSessionStore(secret_key="s3cret", cookie_name="sid")
    session = store.get(None)
    session.set("user", 1)
    header = store.destroy(session)
    assert "Max-Age=0" in header
    assert session.data == {}


def test_memory_store_keeps_data_server_side():
    store = InMemorySessionStore(cookie_name="sid")
    session = store.get(None)
    store.set(session, "user", "alice")
    header = store.persist(session)

    restored = store.get(cookie_pair(header))
    assert restored.id == session.id
    assert restored.get("user") == "alice"
    assert "alice" not in header


def test_memory_store_destroy_forgets_session():
    store = InMemorySessionStore(cookie_name="sid")
    session = store.get(None)
    session.set("user", "alice")
    header = store.persist(session)
    store.destroy(store.get(cookie_pair(header)))
    assert store.get(cookie_pair(header)).data == {}


def test_memory_store_unknown_id_gives_empty_session():
    store = InMemorySessionStore(cookie_name="sid")
    assert store.get("sid=missing").data == {}


def test_malformed_neighbouring_cookies_do_not_hide_session():
    store = SignedCookieSessionStore(secret_key="s3cret", cookie_name="_session")
    session = store.get(None)
    store.set(session, "user", {"id": 1})
    pair = cookie_pair(store.persist(session))

    assert store.get(f"a=b c; {pair}").peek("user") == {"id": 1}
    assert store.get(f'theme="dark; {pair}').peek("user") == {"id": 1}
    assert store.get(f"{pair}; a=b c").peek("user") == {"id": 1}
