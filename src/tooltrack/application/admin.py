"""
AdminGate - shared-credential gate in front of the admin tab.

A single row in the ``login`` table holds the admin username and a bcrypt
hash of the password (the hash string carries its own salt).
"""

from typing import Any

from passlib.context import CryptContext

from tooltrack.domain.errors import CredentialError
from tooltrack.domain.protocols import RecordStore
from tooltrack.logger import get_logger

logger = get_logger("admin_gate")

LOGIN_TABLE = "login"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__ident="2b")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, stored_hash: str) -> tuple[bool, str | None]:
    """
    Check ``password`` against a stored hash.

    Returns:
        (matches, replacement hash when the stored one uses outdated settings)
    """
    if not stored_hash or pwd_context.identify(stored_hash, required=False) is None:
        return False, None
    return pwd_context.verify_and_update(password, stored_hash)


class AdminGate:
    """Verifies the shared admin credential and tracks whether the admin tab is unlocked."""

    def __init__(self, store: RecordStore):
        self._store = store
        self._unlocked = False

    @property
    def is_unlocked(self) -> bool:
        return self._unlocked

    async def ensure_default_credentials(self, username: str, password: str) -> bool:
        """
        Seed the credential row on first run.

        Returns:
            True if a row was created, False if one already existed
        """
        if await self._store.select_where(LOGIN_TABLE, limit=1):
            return False
        await self._store.insert(LOGIN_TABLE, self._credential_record(username, password))
        logger.info(f"Seeded default admin credentials for '{username}'")
        return True

    async def verify(self, username: str, password: str) -> bool:
        row = await self._find(username)
        if row is None:
            return False
        matches, upgraded = verify_password(password, row.get("password_hash", ""))
        if matches and upgraded:
            await self._store.update(LOGIN_TABLE, row["id"], {"password_hash": upgraded})
            logger.info(f"Rehashed admin password for '{username}'")
        return matches

    async def unlock(self, username: str, password: str) -> bool:
        """Unlock the admin area if the credential matches."""
        self._unlocked = await self.verify(username.strip(), password)
        if self._unlocked:
            logger.info(f"Admin area unlocked by '{username.strip()}'")
        else:
            logger.warning(f"Rejected admin login for '{username.strip()}'")
        return self._unlocked

    def lock(self) -> None:
        self._unlocked = False
        logger.info("Admin area locked")

    async def change_credentials(
        self,
        current_username: str,
        current_password: str,
        new_username: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        """
        Replace the admin credential after checking the current one.

        Raises:
            CredentialError: If a field is empty, the confirmation differs,
                or the current credential is wrong
        """
        fields = (current_username, current_password, new_username, new_password, confirm_password)
        if not all(field.strip() for field in fields):
            raise CredentialError("All fields are required")
        if new_password != confirm_password:
            raise CredentialError("New password and confirmation do not match")

        row = await self._find(current_username.strip())
        if row is None or not await self.verify(current_username.strip(), current_password):
            raise CredentialError("Current credentials are incorrect")

        await self._store.update(LOGIN_TABLE, row["id"], self._credential_record(new_username.strip(), new_password))
        logger.info(f"Admin credentials changed: '{current_username.strip()}' -> '{new_username.strip()}'")

    async def _find(self, username: str) -> dict[str, Any] | None:
        rows = await self._store.select_where(LOGIN_TABLE, equals={"username": username}, limit=1)
        return rows[0] if rows else None

    def _credential_record(self, username: str, password: str) -> dict[str, str]:
        return {"username": username, "password_hash": hash_password(password)}
