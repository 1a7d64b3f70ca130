"""Credential check behind sign-in"""

import logging
from typing import Optional, Tuple

from ...core.exceptions import AuthFailure
from ...core.security import verify_password_async
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email

logger = logging.getLogger(__name__)


class AuthenticateUserUseCase:
    """Checks, in order: user exists, is active, has a password, password matches.

    Every rejected attempt spends one password verification so response time
    does not reveal which check failed.
    """

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, email: str, password: str) -> Tuple[Optional[User], Optional[AuthFailure]]:
        try:
            email_vo = Email(email)
        except ValueError:
            await verify_password_async(password, None)
            return None, AuthFailure.USER_NOT_FOUND

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(email_vo)

        if user is None:
            await verify_password_async(password, None)
            return None, AuthFailure.USER_NOT_FOUND

        if not user.isactive:
            await verify_password_async(password, None)
            return user, AuthFailure.ACCOUNT_DEACTIVATED

        if not user.has_password:
            await verify_password_async(password, None)
            return user, AuthFailure.NO_PASSWORD_CONFIGURED

        if not await verify_password_async(password, user.hashed_password):
            return user, AuthFailure.INVALID_PASSWORD

        return user, None
