"""Third-party sign-in use case"""

import logging

from ...core.exceptions import AuthFailure, ExternalProviderError
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...infrastructure.external_services.identity_providers import (
    ExternalIdentity,
    IdentityProviderRegistry,
)
from ..dtos.results import ErrorKind, action_error
from ..dtos.user_dtos import SignInResult, SocialSignInResult
from .sign_in_user import issue_session, rejected

logger = logging.getLogger(__name__)

GENERIC_PROVIDER_ERROR = "Authentication failed"


def provider_message(error: ExternalProviderError) -> str:
    return str(error) if error.safe else GENERIC_PROVIDER_ERROR


class SocialSignInUseCase:
    """Delegates identity verification to a registered provider.

    ``start`` hands back the provider's authorization URL; ``complete``
    exchanges the returned code and signs the matching local user in,
    creating a password-less account on first sign-in.
    """

    def __init__(self, unit_of_work: IUnitOfWork, providers: IdentityProviderRegistry):
        self.unit_of_work = unit_of_work
        self.providers = providers

    def start(self, provider_name: str, state: str, redirect_uri: str) -> SocialSignInResult:
        try:
            provider = self.providers.get(provider_name)
            url = provider.authorization_url(state, redirect_uri)
        except ExternalProviderError as e:
            logger.warning("Social sign-in with %s not started: %s", provider_name, e)
            return SocialSignInResult(error=provider_message(e))
        return SocialSignInResult(url=url)

    async def complete(self, provider_name: str, code: str, redirect_uri: str) -> SignInResult:
        try:
            provider = self.providers.get(provider_name)
            external = await provider.exchange_code(code, redirect_uri)
        except ExternalProviderError as e:
            logger.warning("Identity exchange with %s failed: %s", provider_name, e)
            return SignInResult(success=False, message=provider_message(e), error=ErrorKind.PROVIDER)

        if not external.email_verified:
            logger.warning("Refusing %s sign-in: provider has not verified %s", external.provider, external.email)
            return SignInResult(success=False, message=GENERIC_PROVIDER_ERROR, error=ErrorKind.PROVIDER)

        try:
            user = await self._find_or_create(external)
        except Exception as e:
            result = action_error(logger, e, GENERIC_PROVIDER_ERROR)
            return SignInResult(**result.model_dump())

        if not user.isactive:
            logger.info("Social sign-in rejected (%s) for user %s", AuthFailure.ACCOUNT_DEACTIVATED.value, user.id)
            return rejected(AuthFailure.ACCOUNT_DEACTIVATED)

        logger.info("User %s signed in with %s", user.id, external.provider)
        return issue_session(user)

    async def _find_or_create(self, external: ExternalIdentity) -> User:
        email = Email(external.email)
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(email)
            if user is not None:
                return user

            user = User.create(
                email=email,
                first_name=external.first_name or email.value.split("@")[0],
                last_name=external.last_name,
            )
            await self.unit_of_work.users.add(user)
            await self.unit_of_work.commit()

        logger.info("New user %s created via %s sign-in", user.id, external.provider)
        return user
