from __future__ import annotations

import logging

import pytest

from qr_attendance.core.exceptions import AuthError, MissingField, StoreError
from qr_attendance.modules.accounts.schemas import CreateAccountRequest
from qr_attendance.modules.accounts.service import AccountService


def _request(**overrides) -> CreateAccountRequest:
    data = {
        "email": "ana.quispe@example.edu",
        "password": "s3cret-pass",
        "nombres": "Ana",
        "apellidos": "Quispe",
        "correo_institucional": "ana.quispe@example.edu",
        "id_rol": "role-user",
        "id_facultad": "fac-1",
        "id_carrera": "car-1",
    }
    data.update(overrides)
    return CreateAccountRequest(**data)


def test_provision_creates_account_and_populates_profile(directory, store):
    service = AccountService(directory, store)

    user_id = service.provision_account(_request())

    assert directory.accounts[user_id]["email"] == "ana.quispe@example.edu"
    assert directory.accounts[user_id]["email_confirmed"] is True
    profile = store.rows[user_id]
    assert profile["nombres"] == "Ana"
    assert profile["id_carrera"] == "car-1"
    # avatar_url was not supplied, so it is not written
    assert "avatar_url" not in store.update_calls[0][1]


def test_provision_partial_body_updates_only_supplied_fields(directory, store):
    store.defaults = {"id_rol": "role-default"}
    service = AccountService(directory, store)

    user_id = service.provision_account(
        CreateAccountRequest(email="a@x.edu", password="pw", nombres="Ana", avatar_url=None)
    )

    assert store.update_calls[0][1] == {"nombres": "Ana", "avatar_url": None}
    assert store.rows[user_id]["id_rol"] == "role-default"


@pytest.mark.parametrize("field", ["email", "password"])
@pytest.mark.parametrize("value", [None, ""])
def test_provision_missing_credentials_has_no_side_effects(directory, store, field, value):
    service = AccountService(directory, store)

    with pytest.raises(MissingField):
        service.provision_account(_request(**{field: value}))

    assert directory.create_calls == 0
    assert directory.accounts == {}
    assert store.update_calls == []


def test_provision_auth_failure_leaves_nothing_behind(directory, store):
    service = AccountService(directory, store)
    service.provision_account(_request())

    with pytest.raises(AuthError) as exc_info:
        service.provision_account(_request(nombres="Duplicate"))

    assert "already been registered" in exc_info.value.message
    assert len(directory.accounts) == 1
    assert len(store.update_calls) == 1


def test_provision_store_failure_deletes_created_account(directory, store):
    store.fail_update = True
    service = AccountService(directory, store)

    with pytest.raises(StoreError) as exc_info:
        service.provision_account(_request())

    assert directory.accounts == {}
    assert len(directory.delete_calls) == 1
    assert exc_info.value.compensation_error is None


def test_provision_missing_profile_row_is_compensated(store):
    from tests.conftest import FakeDirectory

    # no trigger wired: the blank row never appears
    directory = FakeDirectory(store=None)
    service = AccountService(directory, store)

    with pytest.raises(StoreError):
        service.provision_account(_request())

    assert directory.accounts == {}


def test_failed_compensation_reports_original_error_and_logs_orphan(directory, store, caplog):
    store.fail_update = True
    directory.fail_delete = True
    service = AccountService(directory, store)

    with caplog.at_level(logging.ERROR, logger="qr_attendance.modules.accounts.service"):
        with pytest.raises(StoreError) as exc_info:
            service.provision_account(_request())

    err = exc_info.value
    assert err.message.startswith("Error updating profile")
    assert isinstance(err.compensation_error, AuthError)
    orphan_id = directory.delete_calls[0]
    assert orphan_id in directory.accounts
    assert any("Orphaned account" in r.getMessage() and orphan_id in r.getMessage() for r in caplog.records)


def test_deprovision_removes_account_and_profile(directory, store):
    service = AccountService(directory, store)
    user_id = service.provision_account(_request())

    service.deprovision_account(user_id)

    assert user_id not in directory.accounts
    assert user_id not in store.rows


def test_deprovision_unknown_id_raises_auth_error(directory, store):
    service = AccountService(directory, store)

    with pytest.raises(AuthError):
        service.deprovision_account("00000000-0000-0000-0000-000000000000")


def test_deprovision_twice_second_call_fails_cleanly(directory, store):
    service = AccountService(directory, store)
    user_id = service.provision_account(_request())

    service.deprovision_account(user_id)
    with pytest.raises(AuthError) as exc_info:
        service.deprovision_account(user_id)

    assert exc_info.value.message == "User not found"


def test_deprovision_requires_user_id(directory, store):
    service = AccountService(directory, store)

    with pytest.raises(MissingField):
        service.deprovision_account("")
    assert directory.delete_calls == []
