"""Register user use case"""

import logging
from typing import Any, Mapping

from ...api.event_broadcaster import InvalidationBroadcaster
from ...core.exceptions import DuplicateEmailError, ValidationFailure
from ...core.security import hash_password_async
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ..dtos.results import ActionResult, ErrorKind, action_error, failure
from ..validation import SignUpForm, validate_fields

logger = logging.getLogger(__name__)

USERS_PATH = "/admin/users"


class SignUpUseCase:
    """Creates a regular, active account. Does not sign the user in."""

    def __init__(self, unit_of_work: IUnitOfWork, invalidator: InvalidationBroadcaster):
        self.unit_of_work = unit_of_work
        self.invalidator = invalidator

    async def execute(self, fields: Mapping[str, Any]) -> ActionResult:
        try:
            form = validate_fields(SignUpForm, fields)
        except ValidationFailure as e:
            return failure(
                "Please check all required fields and try again",
                ErrorKind.VALIDATION,
                data={"field_errors": e.field_errors},
            )

        email = Email(form.email)
        try:
            async with self.unit_of_work:
                # Fast path only; the unique constraint decides
                if await self.unit_of_work.users.exists_by_email(email):
                    return self._conflict(email)

                user = User.create(
                    email=email,
                    first_name=form.first_name,
                    last_name=form.last_name,
                    hashed_password=await hash_password_async(form.password),
                )
                await self.unit_of_work.users.add(user)
                await self.unit_of_work.commit()
        except DuplicateEmailError:
            return self._conflict(email)
        except Exception as e:
            return action_error(logger, e, "Account creation failed")

        logger.info("New user %s created via sign-up", user.id)
        await self.invalidator.revalidate(USERS_PATH)
        return ActionResult(success=True, message="Account created successfully")

    @staticmethod
    def _conflict(email: Email) -> ActionResult:
        return failure(f"An account with email {email} already exists", ErrorKind.CONFLICT)
