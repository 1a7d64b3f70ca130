"""Unit of Work implementation with async session support"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import PersistenceError
from ...domain.repositories.unit_of_work import IUnitOfWork
from .property_repository_impl import PropertyRepositoryImpl
from .user_repository_impl import UserRepositoryImpl


class UnitOfWorkImpl(IUnitOfWork):

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepositoryImpl(session)
        self.properties = PropertyRepositoryImpl(session)
        self._committed = False

    async def __aenter__(self):
        self._committed = False
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            await self.rollback()
        elif not self._committed:
            await self.commit()

    async def commit(self) -> None:
        """Commit transaction"""
        try:
            await self.session.commit()
            self._committed = True
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError("Failed to commit transaction") from e

    async def rollback(self) -> None:
        """Rollback transaction"""
        await self.session.rollback()
