from typing import Any, Callable, Dict, Iterable, Optional
import logging

from qr_attendance.core.exceptions import StoreError
from qr_attendance.core.guard import AccessDecision, evaluate_access
from qr_attendance.modules.profiles.schemas import ProfileResponse

logger = logging.getLogger(__name__)

ProfileLoader = Callable[[str], Optional[ProfileResponse]]


class UserSession:
    """
    The authenticated user of one request and their joined profile.

    Built per request by the get_user_session dependency and passed to
    whatever needs it. The profile is loaded on first access; refresh()
    is the only way to re-read it.
    """

    def __init__(self, user: Optional[Dict[str, Any]], profile_loader: ProfileLoader):
        self.user = user
        self._profile_loader = profile_loader
        self._profile: Optional[ProfileResponse] = None
        self._loaded = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user["id"] if self.user else None

    @property
    def profile(self) -> Optional[ProfileResponse]:
        if not self._loaded:
            self.refresh()
        return self._profile

    @property
    def role_name(self) -> Optional[str]:
        return self.profile.role_name if self.profile else None

    def refresh(self) -> Optional[ProfileResponse]:
        """Re-read the profile from the store"""
        if self.user is None:
            self._profile = None
        else:
            try:
                self._profile = self._profile_loader(self.user["id"])
            except StoreError as e:
                logger.error(f"Error fetching profile for {self.user['id']}: {e.message}")
                self._profile = None
        self._loaded = True
        return self._profile

    def authorize(self, allowed_roles: Optional[Iterable[str]] = None) -> AccessDecision:
        if not self.is_authenticated:
            return evaluate_access(None, None, allowed_roles)
        return evaluate_access(self.user, self.profile, allowed_roles)

    def is_self(self, user_id: str) -> bool:
        return self.user_id is not None and self.user_id == user_id
