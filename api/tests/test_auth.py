import pytest

from jobly.core.auth import (
    Principal,
    UnauthorizedError,
    ensure_admin,
    ensure_logged_in,
    ensure_self_or_admin,
    principal_from_claims,
)


def test_ensure_logged_in_requires_principal() -> None:
    with pytest.raises(UnauthorizedError):
        ensure_logged_in(None)

    principal = Principal(username="u1")
    assert ensure_logged_in(principal) is principal


def test_ensure_admin_accepts_boolean_true() -> None:
    principal = Principal(username="admin", is_admin=True)
    assert ensure_admin(principal) is principal


@pytest.mark.parametrize("flag", [False, "true", 1, "yes", None])
def test_ensure_admin_requires_exactly_true(flag) -> None:
    with pytest.raises(UnauthorizedError):
        ensure_admin(Principal(username="u1", is_admin=flag))


def test_ensure_admin_rejects_anonymous() -> None:
    with pytest.raises(UnauthorizedError):
        ensure_admin(None)


def test_ensure_self_or_admin_accepts_same_user_without_admin_flag() -> None:
    principal = Principal(username="u1", is_admin=False)
    assert ensure_self_or_admin(principal, "u1") is principal


def test_ensure_self_or_admin_accepts_any_admin() -> None:
    principal = Principal(username="admin", is_admin=True)
    assert ensure_self_or_admin(principal, "u1") is principal


def test_ensure_self_or_admin_rejects_other_user() -> None:
    with pytest.raises(UnauthorizedError):
        ensure_self_or_admin(Principal(username="u2", is_admin="true"), "u1")


def test_ensure_self_or_admin_rejects_anonymous() -> None:
    with pytest.raises(UnauthorizedError):
        ensure_self_or_admin(None, "u1")


def test_principal_from_claims_keeps_raw_admin_flag_and_claims() -> None:
    principal = principal_from_claims({"username": "u1", "isAdmin": "true", "iat": 1700000000})

    assert principal is not None
    assert principal.username == "u1"
    assert principal.is_admin == "true"
    assert principal.has_admin_flag is False
    assert principal.claims["iat"] == 1700000000


@pytest.mark.parametrize("claims", [None, [], {}, {"username": ""}, {"username": 42}])
def test_principal_from_claims_requires_username(claims) -> None:
    assert principal_from_claims(claims) is None
