from qr_attendance.core.exceptions import AuthError, MissingField, StoreError
from qr_attendance.modules.accounts.directory import AuthDirectory
from qr_attendance.modules.accounts.schemas import CreateAccountRequest
from qr_attendance.modules.auth.service import evict_cached_user
from qr_attendance.modules.profiles.store import ProfileStore
import logging

logger = logging.getLogger(__name__)


class AccountService:
    """
    Creates and removes accounts across Supabase Auth and the profiles table.

    The two systems share no transaction. Creation is create-then-update
    with a compensating delete when the profile update fails; a failed
    compensation leaves an orphaned account, which is logged as such and
    attached to the raised StoreError.
    """

    def __init__(self, directory: AuthDirectory, store: ProfileStore):
        self.directory = directory
        self.store = store

    def provision_account(self, request: CreateAccountRequest) -> str:
        """Create the auth account, fill in its profile and return the account id"""
        if not request.email or not request.password:
            raise MissingField("Email and password are required")

        user_id = self.directory.create_account(request.email, request.password, confirmed=True)
        logger.info(f"Auth user created. Now updating profile for ID: {user_id}")

        try:
            self.store.update(user_id, request.profile_fields())
        except StoreError as store_error:
            logger.error(f"Error updating profile after creation for {user_id}: {store_error.message}")
            self._compensate(user_id, store_error)
            raise

        logger.info(f"Profile populated for user {user_id}")
        return user_id

    def _compensate(self, user_id: str, store_error: StoreError) -> None:
        try:
            self.directory.delete_account(user_id)
        except AuthError as auth_error:
            store_error.compensation_error = auth_error
            logger.error(
                f"Orphaned account {user_id}: profile update failed ({store_error.message}) "
                f"and compensating delete failed ({auth_error.message})"
            )
            return
        logger.warning(f"Rolled back auth user {user_id} after profile update failure")

    def deprovision_account(self, user_id: str) -> None:
        """Delete the auth account; the profile row cascades"""
        if not user_id:
            raise MissingField("userId is required")
        self.directory.delete_account(user_id)
        evict_cached_user(user_id)
        logger.info(f"Auth user {user_id} deleted")
