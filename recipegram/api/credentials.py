"""
Password handling for user accounts.

The authentication service only asks two questions of a credential policy:
what to store for a new password, and whether a claimed password matches a
stored one. The storage layer never sees the algorithm.
"""

import hmac
import logging
from passlib.context import CryptContext

from ..config import PASSWORD_SCHEME

logger = logging.getLogger(__name__)


class CredentialPolicy:
    """Interface for turning passwords into stored credentials and checking them."""

    def hash(self, password: str) -> str:
        raise NotImplementedError

    def verify(self, password: str, stored: str) -> bool:
        raise NotImplementedError


class PasslibCredentialPolicy(CredentialPolicy):
    """Salted, iterated hashes through passlib."""

    def __init__(self, scheme: str = "pbkdf2_sha256"):
        self.pwd_context = CryptContext(schemes=[scheme], deprecated="auto")

    def hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify(self, password: str, stored: str) -> bool:
        try:
            return self.pwd_context.verify(password, stored)
        except ValueError:
            # Stored value is not a hash this context recognises (e.g. a legacy plaintext row)
            logger.warning("Stored credential has an unrecognised format")
            return False


class PlaintextCredentialPolicy(CredentialPolicy):
    """
    Stores passwords verbatim and compares them exactly.

    Only for databases written before hashing was introduced.
    """

    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return hmac.compare_digest(password.encode('utf-8'), stored.encode('utf-8'))


def get_credential_policy(scheme: str = PASSWORD_SCHEME) -> CredentialPolicy:
    """Build the credential policy named by the configuration."""
    if scheme == "plaintext":
        logger.warning("Passwords are stored in plaintext (RECIPEGRAM_PASSWORD_SCHEME=plaintext)")
        return PlaintextCredentialPolicy()
    return PasslibCredentialPolicy(scheme)
