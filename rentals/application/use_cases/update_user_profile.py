"""Self-service profile update"""

import logging
from typing import Any, Mapping, Union

from ...api.event_broadcaster import InvalidationBroadcaster
from ...core.exceptions import NotFoundError, ValidationFailure
from ...core.security import create_session_token, read_session_token
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.session import SessionIdentity
from ..dtos.results import ErrorKind, ValidationResult, action_error, failure
from ..dtos.user_dtos import SessionDto, SignInResult, UserDto
from ..validation import UpdateProfileForm, validate_fields
from .manage_users import USERS_PATH, parse_user_id

logger = logging.getLogger(__name__)


class UpdateProfileUseCase:
    """Lets a signed-in user change their own name.

    The session token carries the display name, so a fresh one is issued.
    """

    def __init__(self, unit_of_work: IUnitOfWork, invalidator: InvalidationBroadcaster):
        self.unit_of_work = unit_of_work
        self.invalidator = invalidator

    async def execute(
        self,
        identity: SessionIdentity,
        fields: Mapping[str, Any],
    ) -> Union[SignInResult, ValidationResult]:
        try:
            form = validate_fields(UpdateProfileForm, fields)
        except ValidationFailure as e:
            return ValidationResult.from_failure(e)

        try:
            uid = parse_user_id(identity.id)
            async with self.unit_of_work:
                user = await self.unit_of_work.users.get_by_id(uid)
                if user is None:
                    raise NotFoundError("User", identity.id)
                user.rename(form.first_name, form.last_name)
                await self.unit_of_work.users.update(user)
                await self.unit_of_work.commit()
        except NotFoundError:
            return SignInResult(**failure("User not found", ErrorKind.NOT_FOUND).model_dump())
        except Exception as e:
            return SignInResult(**action_error(logger, e, "Failed to update profile").model_dump())

        token = create_session_token(str(user.id), user.name, user.isadmin)
        await self.invalidator.revalidate(USERS_PATH)
        return SignInResult(
            success=True,
            message="Profile updated successfully",
            identity=SessionDto.from_identity(read_session_token(token)),
            token=token,
            data=UserDto.from_entity(user).model_dump(mode="json"),
        )


class GetProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, identity: SessionIdentity) -> UserDto:
        """Raises NotFoundError when the account behind the session is gone"""
        uid = parse_user_id(identity.id)
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(uid)
        if user is None:
            raise NotFoundError("User", identity.id)
        return UserDto.from_entity(user)
