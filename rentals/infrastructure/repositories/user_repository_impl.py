"""User repository implementation"""

import logging
import math
from typing import Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import DuplicateEmailError, NotFoundError, PersistenceError
from ...domain.entities.user import User
from ...domain.repositories.user_repository import IUserRepository, UserPage
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import UserId
from ..orm.user_model import UserModel

logger = logging.getLogger(__name__)

NO_FILTER = "all"


def _is_email_conflict(exc: IntegrityError) -> bool:
    return "email" in str(exc.orig).lower()


class UserRepositoryImpl(IUserRepository):
    """Repository implementation for User aggregate"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID"""
        model = await self._get_model(user_id)
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: Email) -> Optional[User]:
        """Get user by email"""
        try:
            result = await self.session.execute(select(UserModel).where(UserModel.email == str(email)))
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load user") from e
        model = result.scalars().first()
        return self._map_to_entity(model) if model else None

    async def exists_by_email(self, email: Email, exclude_id: Optional[UserId] = None) -> bool:
        """Check if another user holds the email"""
        stmt = select(UserModel.id).where(UserModel.email == str(email))
        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id.value)
        try:
            result = await self.session.execute(stmt.limit(1))
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to check email") from e
        return result.first() is not None

    async def add(self, user: User) -> User:
        """Add a new user"""
        model = self._create_model_from_entity(user)
        self.session.add(model)
        await self._flush(str(user.email))
        return user

    async def update(self, user: User) -> User:
        """Update an existing user"""
        model = await self._get_model(user.id)
        if model is None:
            raise NotFoundError("User", str(user.id))
        self._update_model_from_entity(model, user)
        await self._flush(str(user.email))
        return user

    async def set_active(self, user_id: UserId, isactive: bool) -> Optional[User]:
        """Flip the active flag without touching other fields"""
        model = await self._get_model(user_id)
        if model is None:
            return None
        user = self._map_to_entity(model)
        user.set_active(isactive)
        model.isactive = user.isactive
        model.updated_at = user.updated_at
        await self._flush()
        return user

    async def delete(self, user_id: UserId) -> bool:
        """Delete user"""
        try:
            result = await self.session.execute(delete(UserModel).where(UserModel.id == user_id.value))
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to delete user") from e
        return result.rowcount > 0

    async def list(self, query: Optional[str], page: int, page_size: int) -> UserPage:
        """Newest first, optionally filtered by a case-insensitive substring"""
        stmt = select(UserModel)
        count_stmt = select(func.count()).select_from(UserModel)

        term = (query or "").strip()
        if term and term.lower() != NO_FILTER:
            term = term.lower()
            condition = or_(
                func.lower(UserModel.first_name).contains(term, autoescape=True),
                func.lower(UserModel.last_name).contains(term, autoescape=True),
                func.lower(UserModel.email).contains(term, autoescape=True),
            )
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)

        skip = (page - 1) * page_size
        stmt = stmt.order_by(UserModel.created_at.desc(), UserModel.id).offset(skip).limit(page_size)

        try:
            total = (await self.session.execute(count_stmt)).scalar_one()
            models = (await self.session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list users") from e

        return UserPage(
            records=[self._map_to_entity(model) for model in models],
            total_pages=math.ceil(total / page_size),
            total=total,
        )

    async def _get_model(self, user_id: UserId) -> Optional[UserModel]:
        try:
            return await self.session.get(UserModel, user_id.value)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load user") from e

    async def _flush(self, email: Optional[str] = None) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            if email is not None and _is_email_conflict(e):
                logger.info("Email uniqueness constraint rejected write")
                raise DuplicateEmailError(email) from e
            raise PersistenceError("Failed to save user") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError("Failed to save user") from e

    def _create_model_from_entity(self, user: User) -> UserModel:
        """Create ORM model from domain entity"""
        return UserModel(
            id=user.id.value,
            email=str(user.email),
            hashed_password=user.hashed_password,
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.name,
            isadmin=user.isadmin,
            isactive=user.isactive,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _update_model_from_entity(self, model: UserModel, user: User) -> None:
        """Update ORM model from domain entity"""
        model.email = str(user.email)
        model.hashed_password = user.hashed_password
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.name = user.name
        model.isadmin = user.isadmin
        model.isactive = user.isactive
        model.updated_at = user.updated_at

    def _map_to_entity(self, model: UserModel) -> User:
        """Map ORM model to domain entity"""
        return User(
            id=UserId(model.id),
            email=Email(model.email),
            hashed_password=model.hashed_password,
            first_name=model.first_name,
            last_name=model.last_name,
            name=model.name,
            isadmin=model.isadmin,
            isactive=model.isactive,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
