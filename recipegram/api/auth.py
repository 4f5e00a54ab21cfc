import sqlite3
import logging
from typing import Dict, Any, Optional

from ..db.connection import Database
from ..utils.media import MediaStore
from ..models.db_models import ErrorCode, error_result
from .credentials import CredentialPolicy, get_credential_policy

logger = logging.getLogger(__name__)

# Columns safe to hand back to callers (the stored credential stays inside the service)
USER_COLUMNS = "id, username, profile_image"


class AuthService:
    """Registers and authenticates users against the users table."""

    def __init__(self, db: Database, media: MediaStore, credentials: Optional[CredentialPolicy] = None):
        self.db = db
        self.media = media
        self.credentials = credentials or get_credential_policy()

    def register(self, username: str, password: str, image_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a new user account.

        Usernames are unique regardless of letter case. A profile picture that
        cannot be copied is dropped and the account is created without one.

        Args:
            username: Login name
            password: Password, stored through the credential policy
            image_path: Optional transient path of a profile picture

        Returns:
            Dict with success=True and the new user_id, or success=False with
            error and error_code (VALIDATION_ERROR, USER_ALREADY_EXISTS,
            STORAGE_ERROR)
        """
        if not username or not password:
            return error_result("Username and password are required", ErrorCode.VALIDATION_ERROR)

        try:
            existing = self.db.fetch_one(
                "SELECT id FROM users WHERE casefold(username) = casefold(?)",
                (username,)
            )
            if existing:
                return error_result("User already exists", ErrorCode.USER_ALREADY_EXISTS)

            saved_image_path = self.media.persist(image_path)

            cursor = self.db.execute(
                "INSERT INTO users (username, password, profile_image) VALUES (?, ?, ?)",
                (username, self.credentials.hash(password), saved_image_path)
            )
            logger.info(f"Registered user {username} (id {cursor.lastrowid})")
            return {"success": True, "user_id": cursor.lastrowid}

        except sqlite3.IntegrityError as e:
            # Unique constraint caught a duplicate the pre-check missed
            logger.error(f"Integrity error registering {username}: {e}")
            return error_result("User already exists", ErrorCode.USER_ALREADY_EXISTS)
        except sqlite3.Error as e:
            logger.error(f"SQLite error registering {username}: {e}")
            return error_result("Database error", ErrorCode.STORAGE_ERROR)

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Check a username/password pair.

        Returns:
            Dict with success=True and the user record (id, username,
            profile_image), or success=False with INVALID_CREDENTIALS or
            STORAGE_ERROR
        """
        try:
            row = self.db.fetch_one(
                f"SELECT {USER_COLUMNS}, password FROM users WHERE casefold(username) = casefold(?)",
                (username,)
            )
        except sqlite3.Error as e:
            logger.error(f"SQLite error during login for {username}: {e}")
            return error_result("Login failed", ErrorCode.STORAGE_ERROR)

        if row is None or not self.credentials.verify(password, row.pop("password")):
            return error_result("Invalid credentials", ErrorCode.INVALID_CREDENTIALS)

        return {"success": True, "user": row}

    def get_user(self, user_id: int) -> Dict[str, Any]:
        """Fetch the public profile of a user for the profile view."""
        try:
            row = self.db.fetch_one(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,))
        except sqlite3.Error as e:
            logger.error(f"SQLite error loading user {user_id}: {e}")
            return error_result("Could not load user", ErrorCode.STORAGE_ERROR)

        if row is None:
            return error_result("User not found", ErrorCode.NOT_FOUND)
        return {"success": True, "user": row}
