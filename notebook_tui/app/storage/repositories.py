from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError

from .db import get_session
from .models import Note, User
from ..exceptions import StorageError
from ..utils.logger import get_logger

logger = get_logger("storage.repositories")


class UserRepository:
    async def create(self, username: str, password_hash: str) -> User:
        try:
            async with get_session() as session:
                user = User(
                    username=username,
                    password_hash=password_hash,
                    created_at=datetime.utcnow(),
                )
                session.add(user)
                await session.commit()
                await session.refresh(user)
                return user
        except SQLAlchemyError as e:
            logger.error(f"Failed to create user {username}: {e}")
            raise StorageError(f"Could not create user {username}") from e

    async def get_by_id(self, user_id: int) -> Optional[User]:
        async with get_session() as session:
            result = await session.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        async with get_session() as session:
            result = await session.execute(
                select(User).where(User.username == username)
            )
            return result.scalar_one_or_none()

    async def update_last_login(self, user_id: int) -> None:
        async with get_session() as session:
            await session.execute(
                update(User)
                .where(User.id == user_id)
                .values(
                    last_login_at=datetime.utcnow(),
                    login_count=User.login_count + 1,
                )
            )
            await session.commit()

    async def update_password(self, user_id: int, password_hash: str) -> None:
        async with get_session() as session:
            await session.execute(
                update(User)
                .where(User.id == user_id)
                .values(password_hash=password_hash)
            )
            await session.commit()


class NoteRepository:
    async def create(self, user_id: int, title: str, text: str) -> Note:
        try:
            async with get_session() as session:
                note = Note(
                    user_id=user_id,
                    title=title,
                    text=text,
                    updated=datetime.now(),
                )
                session.add(note)
                await session.commit()
                await session.refresh(note)
                return note
        except SQLAlchemyError as e:
            logger.error(f"Failed to create note for user {user_id}: {e}")
            raise StorageError("Could not save note") from e

    async def get_by_id(self, note_id: int) -> Optional[Note]:
        async with get_session() as session:
            result = await session.execute(select(Note).where(Note.id == note_id))
            return result.scalar_one_or_none()

    async def get_for_user(self, user_id: int) -> List[Note]:
        async with get_session() as session:
            result = await session.execute(
                select(Note)
                .where(Note.user_id == user_id)
                .order_by(Note.id)
            )
            return list(result.scalars().all())

    async def has_notes(self, user_id: int) -> bool:
        async with get_session() as session:
            result = await session.execute(
                select(func.count(Note.id)).where(Note.user_id == user_id)
            )
            return result.scalar_one() > 0
