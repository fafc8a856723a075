from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from qr_attendance.core.exceptions import AuthError, StoreError
from qr_attendance.core.session import UserSession
from qr_attendance.modules.profiles.schemas import ProfileResponse


class FakeStore:
    """In-memory profiles table. Rows appear via the directory's creation trigger."""

    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}
        # column defaults the trigger-created row starts with
        self.defaults: Dict[str, Any] = {}
        self.fail_update = False
        self.update_calls = []

    def insert_blank(self, account_id: str) -> None:
        self.rows[account_id] = {"id": account_id, **self.defaults}

    def update(self, account_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.update_calls.append((account_id, dict(fields)))
        if self.fail_update:
            raise StoreError("Error updating profile: permission denied for table perfiles")
        if account_id not in self.rows:
            raise StoreError(
                "Error updating profile: no profile row for account",
                details={"account_id": account_id},
            )
        self.rows[account_id].update(fields)
        return self.rows[account_id]

    def get(self, account_id: str) -> Optional[ProfileResponse]:
        row = self.rows.get(account_id)
        return ProfileResponse(**row) if row else None


class FakeDirectory:
    """In-memory auth directory. Creating an account fires the blank-profile trigger on the store."""

    def __init__(self, store: Optional[FakeStore] = None):
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.store = store
        self.fail_create = False
        self.fail_delete = False
        self.create_calls = 0
        self.delete_calls = []

    def create_account(self, email: str, password: str, confirmed: bool = True) -> str:
        self.create_calls += 1
        if self.fail_create:
            raise AuthError("Database error creating new user")
        if any(a["email"] == email for a in self.accounts.values()):
            raise AuthError("A user with this email address has already been registered", details="email_exists")
        account_id = str(uuid.uuid4())
        self.accounts[account_id] = {"email": email, "password": password, "email_confirmed": confirmed}
        if self.store is not None:
            self.store.insert_blank(account_id)
        return account_id

    def delete_account(self, account_id: str) -> None:
        self.delete_calls.append(account_id)
        if self.fail_delete:
            raise AuthError("Service unavailable")
        if account_id not in self.accounts:
            raise AuthError("User not found", details="user_not_found")
        del self.accounts[account_id]
        if self.store is not None:
            self.store.rows.pop(account_id, None)


def make_profile(user_id: str, role: Optional[str]) -> ProfileResponse:
    roles = {"id": f"role-{role}", "nombre": role} if role else None
    return ProfileResponse(id=user_id, nombres="Ana", apellidos="Quispe", roles_usuarios=roles)


def make_session(role: Optional[str] = "admin", user_id: str = "admin-1") -> UserSession:
    user = {"id": user_id, "email": f"{user_id}@example.edu"}
    return UserSession(user, lambda uid: make_profile(uid, role))


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def directory(store) -> FakeDirectory:
    return FakeDirectory(store)


@pytest.fixture
def app():
    from qr_attendance.main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
