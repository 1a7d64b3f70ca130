from rentals.application.dtos.results import ErrorKind
from rentals.application.use_cases.social_sign_in import SocialSignInUseCase
from rentals.core.exceptions import AuthFailure
from rentals.domain.value_objects.email import Email
from rentals.infrastructure.external_services.identity_providers import (
    ExternalIdentity,
    GitHubIdentityProvider,
    GoogleIdentityProvider,
    IdentityProviderRegistry,
)

from .factories import StubIdentityProvider, add_user

REDIRECT = "http://testserver/api/v1/auth/callback/google"


def test_start_returns_authorization_url(uow, providers):
    result = SocialSignInUseCase(uow, providers).start("google", "state123", REDIRECT)
    assert result.error is None
    assert "state=state123" in result.url


def test_start_unknown_provider(uow, providers):
    result = SocialSignInUseCase(uow, providers).start("myspace", "s", REDIRECT)
    assert result.url is None
    assert result.error == "Unknown sign-in provider: myspace"


def test_start_unconfigured_provider(uow, external_identity):
    registry = IdentityProviderRegistry([StubIdentityProvider(external_identity, client_id=None)])
    result = SocialSignInUseCase(uow, registry).start("google", "s", REDIRECT)
    assert result.error == "Sign in with google is not configured"


async def test_first_sign_in_creates_password_less_user(uow, providers):
    result = await SocialSignInUseCase(uow, providers).complete("google", StubIdentityProvider.VALID_CODE, REDIRECT)

    assert result.success
    assert result.identity.name == "Social User"

    async with uow:
        user = await uow.users.get_by_email(Email("social.user@rentals.io"))
    assert user.hashed_password is None
    assert user.isadmin is False
    assert user.isactive is True
    assert result.identity.id == str(user.id)


async def test_existing_user_is_reused(uow, providers):
    existing = await add_user(uow, email="social.user@rentals.io", first_name="Pat", last_name="Kim")

    result = await SocialSignInUseCase(uow, providers).complete("google", StubIdentityProvider.VALID_CODE, REDIRECT)

    assert result.identity.id == str(existing.id)
    async with uow:
        page = await uow.users.list("social.user", 1, 10)
    assert len(page.records) == 1


async def test_deactivated_account_is_rejected(uow, providers):
    await add_user(uow, email="social.user@rentals.io", isactive=False)

    result = await SocialSignInUseCase(uow, providers).complete("google", StubIdentityProvider.VALID_CODE, REDIRECT)

    assert not result.success
    assert result.reason is AuthFailure.ACCOUNT_DEACTIVATED
    assert result.token is None


async def test_unsafe_provider_error_is_hidden(uow, providers):
    result = await SocialSignInUseCase(uow, providers).complete("google", "bad-code", REDIRECT)

    assert not result.success
    assert result.error is ErrorKind.PROVIDER
    assert result.message == "Authentication failed"


async def test_unverified_email_does_not_take_over_account(uow, admin_user):
    unverified = ExternalIdentity(
        provider="google",
        subject="google-sub-9",
        email=admin_user.email.value,
        first_name="Olive",
        last_name="Owner",
        email_verified=False,
    )
    registry = IdentityProviderRegistry([StubIdentityProvider(unverified)])

    result = await SocialSignInUseCase(uow, registry).complete("google", StubIdentityProvider.VALID_CODE, REDIRECT)

    assert not result.success
    assert result.identity is None and result.token is None
    assert result.error is ErrorKind.PROVIDER
    assert result.message == "Authentication failed"


def test_github_email_must_be_verified():
    emails = [
        {"email": "public@rentals.io", "verified": False, "primary": False},
        {"email": "main@rentals.io", "verified": True, "primary": True},
    ]
    pick = GitHubIdentityProvider._verified_email

    assert pick("public@rentals.io", emails) == "main@rentals.io"
    assert pick("Main@rentals.io", emails) == "main@rentals.io"
    assert pick(None, [{"email": "x@rentals.io", "verified": False, "primary": True}]) is None


def test_default_providers_build_urls():
    google = GoogleIdentityProvider("gid", "gsecret")
    github = GitHubIdentityProvider("hid", "hsecret")
    registry = IdentityProviderRegistry([google, github])

    assert registry.names() == ["github", "google"]
    assert registry.get("GitHub") is github
    assert google.authorization_url("st", REDIRECT).startswith(GoogleIdentityProvider.AUTHORIZE_URL)
    assert "client_id=hid" in github.authorization_url("st", REDIRECT)
