"""Sign in user use case"""

import logging
from typing import Any, Mapping

from ...core.exceptions import AuthFailure, ValidationFailure
from ...core.security import create_session_token, read_session_token
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.results import ErrorKind, action_error
from ..dtos.user_dtos import SessionDto, SignInResult
from ..validation import SignInForm, validate_fields
from .authenticate_user import AuthenticateUserUseCase

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


def issue_session(user) -> SignInResult:
    """Build a successful sign-in result with a fresh session token"""
    identity = user.to_identity()
    token = create_session_token(identity.id, identity.name, identity.isadmin)
    signed = read_session_token(token)
    return SignInResult(
        success=True,
        message="Signed in successfully",
        identity=SessionDto.from_identity(signed),
        token=token,
        data={"id": str(user.id), "email": str(user.email), "name": user.name},
    )


def rejected(reason: AuthFailure) -> SignInResult:
    return SignInResult(success=False, message=INVALID_CREDENTIALS, error=ErrorKind.AUTH, reason=reason)


class SignInUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, fields: Mapping[str, Any]) -> SignInResult:
        try:
            form = validate_fields(SignInForm, fields)
        except ValidationFailure as e:
            return SignInResult(
                success=False,
                message="Please check your email and password format",
                error=ErrorKind.VALIDATION,
                data={"field_errors": e.field_errors},
            )

        try:
            user, reason = await AuthenticateUserUseCase(self.unit_of_work).execute(form.email, form.password)
        except Exception as e:
            result = action_error(logger, e, "Sign in failed")
            return SignInResult(**result.model_dump())

        if reason is not None:
            logger.info(
                "Sign-in rejected (%s) for user %s",
                reason.value,
                user.id if user is not None else "<unknown>",
            )
            return rejected(reason)

        logger.info("User %s signed in", user.id)
        return issue_session(user)
