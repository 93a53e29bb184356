"""
Repository container for dependency injection.

Provides a single point of access to all repositories, enabling:
- Lazy initialization of repositories
- Easy mocking for tests
- Consistent access patterns across pages
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .repositories import NoteRepository, UserRepository


@dataclass
class RepositoryContainer:
    """
    Dependency injection container for repositories.

    Repositories are lazily initialized on first access.
    """

    _user_repo: Optional["UserRepository"] = field(default=None, init=False)
    _note_repo: Optional["NoteRepository"] = field(default=None, init=False)

    @property
    def users(self) -> "UserRepository":
        """Get user repository (lazy initialized)."""
        if self._user_repo is None:
            from .repositories import UserRepository
            self._user_repo = UserRepository()
        return self._user_repo

    @property
    def notes(self) -> "NoteRepository":
        """Get note repository (lazy initialized)."""
        if self._note_repo is None:
            from .repositories import NoteRepository
            self._note_repo = NoteRepository()
        return self._note_repo


# Global singleton instance
_container: Optional[RepositoryContainer] = None


def get_repos() -> RepositoryContainer:
    """
    Get the global repository container singleton.

    Returns:
        The shared RepositoryContainer instance.
    """
    global _container
    if _container is None:
        _container = RepositoryContainer()
    return _container


def reset_repos() -> None:
    """
    Reset the global repository container (for testing).
    """
    global _container
    _container = None
