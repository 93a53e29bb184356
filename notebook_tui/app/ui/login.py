from ..exceptions import AuthenticationError
from ..security.auth import AuthManager
from ..storage.models import User
from ..utils.config import get_config
from ..utils.logger import get_logger
from .base import Page
from .state_machine import PageState

logger = get_logger("ui.login")


class LoginPage(Page):
    title = "Log in"

    @property
    def requires_login(self) -> bool:
        return False

    async def authenticate(self, username: str, password: str) -> User:
        """Return the matching user or raise AuthenticationError."""
        user = await self.repos.users.get_by_username(username) if username else None
        if not user:
            raise AuthenticationError(f"Unknown user {username!r}", code="unknown_user")

        auth_manager = AuthManager()
        valid, needs_rehash = await auth_manager.verify_password(password, user.password_hash)
        if not valid:
            raise AuthenticationError(f"Wrong password for {username!r}", code="bad_password")

        # Rehash password if using outdated parameters
        if needs_rehash:
            new_hash = await auth_manager.hash_password(password)
            await self.repos.users.update_password(user.id, new_hash)
            logger.info(f"Rehashed password for user {user.username}")

        return user

    async def show(self) -> PageState:
        username = await self.console.readline("Username: ")
        password = await self.console.read_password("Password: ")

        await self.console.writeline(f"Trying to log in {username}...")

        try:
            user = await self.authenticate(username, password)
        except AuthenticationError as e:
            return await self.login_failed(e)

        self.session.login(user.id, user.username)
        await self.repos.users.update_last_login(user.id)
        return PageState.MENU

    async def login_failed(self, error: AuthenticationError) -> PageState:
        max_attempts = get_config().security.max_login_attempts
        attempts = self.session.record_failed_login()
        logger.warning(f"Failed login: {error} ({attempts}/{max_attempts}, Session: {self.session.id})")

        await self.console.writeline("Invalid username or password.")

        if attempts >= max_attempts:
            await self.console.writeline("Too many failed attempts. Goodbye!")
            return PageState.END

        await self.console.wait_for_any()
        return PageState.LOGIN
