"""
Role-gated access decision.

Pure function of (session presence, profile role, allowed roles): no I/O,
so the same rule backs both the API dependencies and client-side page
gating via /auth/authorize.
"""

from enum import Enum
from typing import Any, Iterable, Optional
from pydantic import BaseModel

from qr_attendance.config import settings


class AccessOutcome(str, Enum):
    LOADING = "loading"
    RENDER = "render"
    REDIRECT_SIGN_IN = "redirect_sign_in"
    REDIRECT_LANDING = "redirect_landing"


class AccessDecision(BaseModel):
    outcome: AccessOutcome
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.RENDER


def evaluate_access(
    session: Any,
    profile: Any,
    allowed_roles: Optional[Iterable[str]] = None,
    loading: bool = False,
) -> AccessDecision:
    """Decide whether a page may render for this session/profile, else where to redirect."""
    if loading:
        return AccessDecision(outcome=AccessOutcome.LOADING)

    if not session:
        return AccessDecision(outcome=AccessOutcome.REDIRECT_SIGN_IN, redirect_to=settings.sign_in_path)

    if allowed_roles is not None:
        role_name = _role_name(profile)
        if role_name is None or role_name not in set(allowed_roles):
            return AccessDecision(outcome=AccessOutcome.REDIRECT_LANDING, redirect_to=settings.landing_path)

    return AccessDecision(outcome=AccessOutcome.RENDER)


def _role_name(profile: Any) -> Optional[str]:
    # Accepts a ProfileResponse or a plain dict with either a joined
    # roles_usuarios relation or a bare "role" name
    if profile is None:
        return None
    if isinstance(profile, dict):
        joined = profile.get("roles_usuarios")
        if isinstance(joined, dict):
            return joined.get("nombre")
        return profile.get("role")
    return getattr(profile, "role_name", None)
