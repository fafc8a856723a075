from __future__ import annotations

from qr_attendance.core.guard import AccessOutcome, evaluate_access
from qr_attendance.core.session import UserSession
from qr_attendance.core.exceptions import StoreError
from tests.conftest import make_profile, make_session


def test_no_session_redirects_to_sign_in():
    for allowed in (None, [], ["admin"], ["admin", "user"]):
        decision = evaluate_access(None, None, allowed)
        assert decision.outcome == AccessOutcome.REDIRECT_SIGN_IN
        assert decision.redirect_to == "/auth"


def test_user_role_outside_allowed_redirects_to_landing():
    decision = evaluate_access({"access_token": "t"}, {"role": "user"}, ["admin"])

    assert decision.outcome == AccessOutcome.REDIRECT_LANDING
    assert decision.redirect_to == "/me"


def test_admin_role_renders():
    decision = evaluate_access({"access_token": "t"}, {"role": "admin"}, ["admin"])

    assert decision.outcome == AccessOutcome.RENDER
    assert decision.allowed


def test_joined_profile_role_is_used():
    profile = make_profile("u1", "admin")

    assert evaluate_access(object(), profile, ["admin"]).allowed
    assert not evaluate_access(object(), make_profile("u1", "user"), ["admin"]).allowed


def test_missing_profile_or_role_is_not_allowed_when_roles_required():
    assert evaluate_access(object(), None, ["admin"]).outcome == AccessOutcome.REDIRECT_LANDING
    assert evaluate_access(object(), make_profile("u1", None), ["admin"]).outcome == AccessOutcome.REDIRECT_LANDING


def test_no_role_restriction_renders_for_any_session():
    assert evaluate_access(object(), None, None).allowed


def test_loading_state_does_not_redirect():
    decision = evaluate_access(None, None, ["admin"], loading=True)

    assert decision.outcome == AccessOutcome.LOADING
    assert decision.redirect_to is None


def test_session_loads_profile_once_until_refresh():
    calls = []

    def loader(uid):
        calls.append(uid)
        return make_profile(uid, "user" if len(calls) == 1 else "admin")

    session = UserSession({"id": "u1"}, loader)

    assert session.role_name == "user"
    assert session.role_name == "user"
    assert calls == ["u1"]

    session.refresh()
    assert session.role_name == "admin"
    assert session.authorize(["admin"]).allowed
    assert calls == ["u1", "u1"]


def test_session_store_failure_yields_no_profile():
    def loader(uid):
        raise StoreError("Error fetching profile: timeout")

    session = UserSession({"id": "u1"}, loader)

    assert session.profile is None
    assert session.authorize(["admin"]).outcome == AccessOutcome.REDIRECT_LANDING


def test_anonymous_session_authorize():
    session = UserSession(None, lambda uid: None)

    assert not session.is_authenticated
    assert session.authorize().outcome == AccessOutcome.REDIRECT_SIGN_IN
    assert make_session("admin").authorize(["admin"]).allowed
