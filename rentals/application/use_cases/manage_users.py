"""Administrative user management use cases"""

import logging
from typing import Any, Mapping, Optional, Union

from ...api.event_broadcaster import InvalidationBroadcaster
from ...core.config import settings
from ...core.exceptions import (
    DuplicateEmailError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailure,
)
from ...core.security import hash_password_async
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import UserId
from ...domain.value_objects.session import SessionIdentity
from ..dtos.results import ActionResult, ErrorKind, ValidationResult, action_error, failure
from ..dtos.user_dtos import EmailAvailability, UserDto, UserListResult
from ..validation import CreateUserForm, UpdateUserForm, UserStatusForm, validate_fields

logger = logging.getLogger(__name__)

USERS_PATH = "/admin/users"
PROPERTY_PATHS = ("/properties", "/")


def require_admin(actor: Optional[SessionIdentity]) -> SessionIdentity:
    if actor is None or not actor.isadmin:
        raise PermissionDeniedError("Admin access required")
    return actor


def parse_user_id(user_id: Union[str, UserId]) -> UserId:
    """Raises NotFoundError for identifiers that cannot name a user"""
    if isinstance(user_id, UserId):
        return user_id
    try:
        return UserId.from_str(user_id)
    except (ValueError, TypeError):
        raise NotFoundError("User", str(user_id))


class ListUsersUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(
        self,
        actor: SessionIdentity,
        page: int = 1,
        page_size: int = settings.DEFAULT_PAGE_SIZE,
        query: Optional[str] = None,
    ) -> UserListResult:
        """Newest first; ``query`` of None, empty or "all" returns everyone"""
        require_admin(actor)
        page = max(page, 1)
        page_size = min(max(page_size, 1), settings.MAX_PAGE_SIZE)

        async with self.unit_of_work:
            result = await self.unit_of_work.users.list(query, page, page_size)

        return UserListResult(
            records=[UserDto.from_entity(user) for user in result.records],
            total_pages=result.total_pages,
        )


class GetUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, actor: SessionIdentity, user_id: str) -> UserDto:
        require_admin(actor)
        uid = parse_user_id(user_id)
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(uid)
        if user is None:
            raise NotFoundError("User", str(user_id))
        return UserDto.from_entity(user)


class CreateUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, invalidator: InvalidationBroadcaster):
        self.unit_of_work = unit_of_work
        self.invalidator = invalidator

    async def execute(self, actor: SessionIdentity, fields: Mapping[str, Any]) -> Union[ActionResult, ValidationResult]:
        try:
            require_admin(actor)
            form = validate_fields(CreateUserForm, fields)
        except PermissionDeniedError as e:
            return failure(str(e), ErrorKind.PERMISSION)
        except ValidationFailure as e:
            return ValidationResult.from_failure(e)

        email = Email(form.email)
        try:
            async with self.unit_of_work:
                if await self.unit_of_work.users.exists_by_email(email):
                    return self._conflict(email)

                user = User.create(
                    email=email,
                    first_name=form.first_name,
                    last_name=form.last_name,
                    hashed_password=await hash_password_async(form.password),
                    isadmin=form.isadmin,
                )
                await self.unit_of_work.users.add(user)
                await self.unit_of_work.commit()
        except DuplicateEmailError:
            return self._conflict(email)
        except Exception as e:
            return action_error(logger, e, "Failed to create user")

        logger.info("User %s created by admin %s (isadmin=%s)", user.id, actor.id, user.isadmin)
        await self.invalidator.revalidate(USERS_PATH)
        return ActionResult(
            success=True,
            message="User created successfully",
            data=UserDto.from_entity(user).model_dump(mode="json"),
        )

    @staticmethod
    def _conflict(email: Email) -> ActionResult:
        return failure(f'User with email "{email}" already exists', ErrorKind.CONFLICT)


class UpdateUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, invalidator: InvalidationBroadcaster):
        self.unit_of_work = unit_of_work
        self.invalidator = invalidator

    async def execute(
        self,
        actor: SessionIdentity,
        user_id: str,
        fields: Mapping[str, Any],
    ) -> Union[ActionResult, ValidationResult]:
        try:
            require_admin(actor)
            form = validate_fields(UpdateUserForm, fields)
            uid = parse_user_id(user_id)
        except PermissionDeniedError as e:
            return failure(str(e), ErrorKind.PERMISSION)
        except ValidationFailure as e:
            return ValidationResult.from_failure(e)
        except NotFoundError:
            return failure("User not found", ErrorKind.NOT_FOUND)

        email = Email(form.email)
        try:
            async with self.unit_of_work:
                user = await self.unit_of_work.users.get_by_id(uid)
                if user is None:
                    return failure("User not found", ErrorKind.NOT_FOUND)

                if email != user.email and await self.unit_of_work.users.exists_by_email(email, exclude_id=uid):
                    return self._taken(email)

                user.rename(form.first_name, form.last_name)
                user.change_email(email)
                user.set_admin(form.isadmin)
                user.set_active(form.isactive)
                if form.password is not None:
                    user.set_password_digest(await hash_password_async(form.password))

                await self.unit_of_work.users.update(user)
                await self.unit_of_work.commit()
        except DuplicateEmailError:
            return self._taken(email)
        except NotFoundError:
            return failure("User not found", ErrorKind.NOT_FOUND)
        except Exception as e:
            return action_error(logger, e, "Failed to update user")

        logger.info(
            "User %s updated by admin %s (password changed: %s)",
            user.id, actor.id, form.password is not None,
        )
        await self.invalidator.revalidate(USERS_PATH)
        return ActionResult(
            success=True,
            message="User updated successfully",
            data=UserDto.from_entity(user).model_dump(mode="json"),
        )

    @staticmethod
    def _taken(email: Email) -> ActionResult:
        return failure(f"Email {email} is already taken by another user", ErrorKind.CONFLICT)


class DeleteUserUseCase:
    """Removes a user and every listing they own. Irreversible."""

    def __init__(self, unit_of_work: IUnitOfWork, invalidator: InvalidationBroadcaster):
        self.unit_of_work = unit_of_work
        self.invalidator = invalidator

    async def execute(self, actor: SessionIdentity, user_id: str) -> None:
        require_admin(actor)
        try:
            uid = parse_user_id(user_id)
        except NotFoundError:
            logger.warning("Delete requested for malformed user id %r", user_id)
            return

        async with self.unit_of_work:
            removed_properties = await self.unit_of_work.properties.delete_by_owner(uid)
            removed = await self.unit_of_work.users.delete(uid)
            await self.unit_of_work.commit()

        if removed:
            logger.info(
                "User %s deleted by admin %s along with %d propert%s",
                uid, actor.id, removed_properties, "y" if removed_properties == 1 else "ies",
            )
        else:
            logger.warning("Delete requested for unknown user %s", uid)

        await self.invalidator.revalidate(USERS_PATH, *PROPERTY_PATHS)


class SetUserActiveUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, invalidator: InvalidationBroadcaster):
        self.unit_of_work = unit_of_work
        self.invalidator = invalidator

    async def execute(
        self, actor: SessionIdentity, user_id: str, fields: Mapping[str, Any]
    ) -> Union[ActionResult, ValidationResult]:
        try:
            require_admin(actor)
            isactive = validate_fields(UserStatusForm, fields).isactive
            uid = parse_user_id(user_id)
            async with self.unit_of_work:
                user = await self.unit_of_work.users.set_active(uid, isactive)
                if user is None:
                    return failure("User not found", ErrorKind.NOT_FOUND)
                await self.unit_of_work.commit()
        except PermissionDeniedError as e:
            return failure(str(e), ErrorKind.PERMISSION)
        except ValidationFailure as e:
            return ValidationResult.from_failure(e)
        except NotFoundError:
            return failure("User not found", ErrorKind.NOT_FOUND)
        except Exception as e:
            return action_error(logger, e, "Failed to update user status")

        logger.info("User %s %s by admin %s", uid, "activated" if isactive else "deactivated", actor.id)
        await self.invalidator.revalidate(USERS_PATH)
        return ActionResult(
            success=True,
            message=f"User {'activated' if isactive else 'deactivated'} successfully",
            data={
                "id": str(user.id),
                "first_name": user.first_name,
                "last_name": user.last_name,
                "isactive": user.isactive,
            },
        )


class CheckEmailAvailabilityUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, email: str, exclude_user_id: Optional[str] = None) -> EmailAvailability:
        """An address is available when no user other than ``exclude_user_id`` holds it"""
        try:
            email_vo = Email(email)
        except ValueError:
            return EmailAvailability(available=False, message="Invalid email address")

        exclude_id = None
        if exclude_user_id:
            try:
                exclude_id = UserId.from_str(exclude_user_id)
            except ValueError:
                exclude_id = None

        async with self.unit_of_work:
            taken = await self.unit_of_work.users.exists_by_email(email_vo, exclude_id=exclude_id)

        return EmailAvailability(
            available=not taken,
            message="Email is already taken" if taken else "Email is available",
        )
