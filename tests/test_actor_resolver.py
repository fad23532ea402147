"""Tests for bearer credential -> actor resolution."""

import asyncio
from datetime import timedelta

from jose import jwt

from app.models.user import Role
from app.visibility.actor import ANONYMOUS, ActorResolver, Anonymous, Identified, parse_role
from app.visibility.tokens import JWT_ALGORITHM, create_access_token, decode_token

from conftest import FakeVolunteerStore, identity


def _resolve(credential, store=None, timeout=1.0, retries=0):
    store = store if store is not None else FakeVolunteerStore()
    return asyncio.run(ActorResolver(store, timeout, retries).resolve(credential))


def test_missing_credential_is_anonymous():
    assert _resolve(None) == ANONYMOUS
    assert _resolve("") == ANONYMOUS


def test_garbage_credential_is_anonymous():
    assert isinstance(_resolve("not.a.jwt"), Anonymous)


def test_expired_token_is_anonymous():
    token = create_access_token("u-1", expires_delta=timedelta(seconds=-5))
    assert _resolve(token) == ANONYMOUS


def test_wrong_signature_is_anonymous():
    token = jwt.encode({"userId": "u-1"}, "some-other-secret", algorithm=JWT_ALGORITHM)
    assert _resolve(token) == ANONYMOUS


def test_token_without_actor_id_is_anonymous():
    token = jwt.encode({"role": "super_admin"}, "test-secret-for-bearer-tokens-0123456789", algorithm=JWT_ALGORITHM)
    assert decode_token(token) is not None
    assert _resolve(token) == ANONYMOUS


def test_invalid_token_does_not_touch_the_store():
    store = FakeVolunteerStore()
    _resolve("not.a.jwt", store)
    assert store.calls == []


def test_valid_token_looks_up_role():
    store = FakeVolunteerStore(users={"u-1": identity("grid_coordinator")})
    assert _resolve(create_access_token("u-1"), store) == Identified("u-1", Role.GRID_COORDINATOR)


def test_role_comes_from_store_not_claims():
    store = FakeVolunteerStore(users={"u-1": identity("regular_user")})
    token = create_access_token("u-1", role="super_admin")
    assert _resolve(token, store) == Identified("u-1", Role.REGULAR_USER)


def test_sub_claim_is_accepted():
    store = FakeVolunteerStore(users={"u-2": identity("super_admin")})
    token = jwt.encode({"sub": "u-2"}, "test-secret-for-bearer-tokens-0123456789", algorithm=JWT_ALGORITHM)
    assert _resolve(token, store) == Identified("u-2", Role.SUPER_ADMIN)


def test_unknown_user_keeps_id_without_role():
    assert _resolve(create_access_token("ghost")) == Identified("ghost", None)


def test_suspended_and_inactive_accounts_have_no_role():
    store = FakeVolunteerStore(users={
        "s": identity("super_admin", status="suspended"),
        "i": identity("super_admin", status="inactive"),
    })
    assert _resolve(create_access_token("s"), store) == Identified("s", None)
    assert _resolve(create_access_token("i"), store) == Identified("i", None)


def test_unknown_role_string_has_no_role():
    store = FakeVolunteerStore(users={"u-1": identity("volunteer_lead")})
    assert _resolve(create_access_token("u-1"), store) == Identified("u-1", None)


def test_store_failure_degrades_to_no_role():
    store = FakeVolunteerStore(users={"u-1": identity("super_admin")})
    store.fail.add("lookup_role")
    assert _resolve(create_access_token("u-1"), store) == Identified("u-1", None)


def test_store_timeout_degrades_to_no_role():
    store = FakeVolunteerStore(users={"u-1": identity("super_admin")})
    store.stall["lookup_role"] = 0.3
    actor = _resolve(create_access_token("u-1"), store, timeout=0.05)
    assert actor == Identified("u-1", None)
    assert store.calls == ["lookup_role"]


def test_timeout_is_retried():
    store = FakeVolunteerStore(users={"u-1": identity("super_admin")})
    store.stall["lookup_role"] = 0.3
    _resolve(create_access_token("u-1"), store, timeout=0.05, retries=1)
    assert store.calls == ["lookup_role", "lookup_role"]


def test_parse_role():
    assert parse_role("regional_admin") is Role.REGIONAL_ADMIN
    assert parse_role(None) is None
    assert parse_role("root") is None
