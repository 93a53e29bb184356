from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ..utils.config import get_config
from ..utils.logger import get_logger

logger = get_logger("security.auth")


class AuthManager:
    def __init__(self):
        config = get_config().security
        self.hasher = PasswordHasher(
            time_cost=config.argon2_time_cost,
            memory_cost=config.argon2_memory_cost,
            parallelism=config.argon2_parallelism,
        )

    async def hash_password(self, password: str) -> str:
        try:
            return self.hasher.hash(password)
        except Exception as e:
            logger.error(f"Error hashing password: {e}")
            raise

    async def verify_password(self, password: str, hash: str) -> tuple[bool, bool]:
        """
        Check a password against a stored hash.

        Returns:
            (valid, needs_rehash) - needs_rehash is only meaningful when valid.
        """
        try:
            self.hasher.verify(hash, password)
        except (VerifyMismatchError, VerificationError):
            return False, False
        except InvalidHash:
            logger.warning("Invalid password hash format")
            return False, False

        return True, self.hasher.check_needs_rehash(hash)
