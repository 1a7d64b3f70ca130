"""Third-party identity providers.

Each provider turns an OAuth authorization code into an ``ExternalIdentity``.
Providers are looked up by name in an ``IdentityProviderRegistry``.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, Optional
from urllib.parse import urlencode

import httpx
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from ...core.config import Settings
from ...core.exceptions import (
    ExternalProviderError,
    ProviderNotConfiguredError,
    UnknownProviderError,
)
from ...domain.enums import IdentityProviderName

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 10.0


@dataclass(frozen=True)
class ExternalIdentity:
    """Identity confirmed by a provider"""
    provider: str
    subject: str
    email: str
    first_name: str = ""
    last_name: str = ""
    email_verified: bool = False


class IdentityProvider(ABC):
    """One OAuth identity provider"""

    name: str

    def __init__(self, client_id: Optional[str], client_secret: Optional[str]):
        self.client_id = client_id
        self.client_secret = client_secret

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise ProviderNotConfiguredError(self.name)

    @abstractmethod
    def authorization_url(self, state: str, redirect_uri: str) -> str:
        pass

    @abstractmethod
    async def exchange_code(self, code: str, redirect_uri: str) -> ExternalIdentity:
        pass


class GoogleIdentityProvider(IdentityProvider):
    name = IdentityProviderName.GOOGLE.value

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        self.ensure_configured()
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> ExternalIdentity:
        self.ensure_configured()
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
                response = await client.post(self.TOKEN_URL, data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": redirect_uri,
                    "grant_type": "authorization_code",
                })
                response.raise_for_status()
                token = response.json().get("id_token")
        except httpx.HTTPError as e:
            raise ExternalProviderError(self.name, f"Google token exchange failed: {e}") from e

        if not token:
            raise ExternalProviderError(self.name, "Google did not return an ID token")

        try:
            # verify_oauth2_token does blocking I/O for the signing certs
            idinfo = await asyncio.to_thread(
                id_token.verify_oauth2_token,
                token,
                google_requests.Request(),
                self.client_id,
            )
        except ValueError as e:
            raise ExternalProviderError(self.name, "Invalid Google credentials", safe=True) from e

        if not idinfo.get("email"):
            raise ExternalProviderError(self.name, "Google account has no email address", safe=True)

        return ExternalIdentity(
            provider=self.name,
            subject=idinfo["sub"],
            email=idinfo["email"],
            first_name=idinfo.get("given_name", ""),
            last_name=idinfo.get("family_name", ""),
            email_verified=bool(idinfo.get("email_verified", False)),
        )


class GitHubIdentityProvider(IdentityProvider):
    name = IdentityProviderName.GITHUB.value

    AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
    TOKEN_URL = "https://github.com/login/oauth/access_token"
    API_URL = "https://api.github.com"

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        self.ensure_configured()
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": "read:user user:email",
            "state": state,
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> ExternalIdentity:
        self.ensure_configured()
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
                response = await client.post(
                    self.TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": redirect_uri,
                    },
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                payload = response.json()
                if "error" in payload:
                    raise ExternalProviderError(
                        self.name, payload.get("error_description") or payload["error"], safe=True
                    )

                headers = {
                    "Authorization": f"Bearer {payload['access_token']}",
                    "Accept": "application/vnd.github+json",
                }
                profile_response = await client.get(f"{self.API_URL}/user", headers=headers)
                profile_response.raise_for_status()
                profile = profile_response.json()
                emails_response = await client.get(f"{self.API_URL}/user/emails", headers=headers)
                emails_response.raise_for_status()
                email = self._verified_email(profile.get("email"), emails_response.json())
        except (httpx.HTTPError, KeyError) as e:
            raise ExternalProviderError(self.name, f"GitHub token exchange failed: {e}") from e

        if not email:
            raise ExternalProviderError(self.name, "GitHub account has no verified email address", safe=True)

        first_name, _, last_name = (profile.get("name") or profile.get("login") or "").partition(" ")
        return ExternalIdentity(
            provider=self.name,
            subject=str(profile["id"]),
            email=email,
            first_name=first_name,
            last_name=last_name,
            email_verified=True,
        )

    @staticmethod
    def _verified_email(public_email: Optional[str], emails: list) -> Optional[str]:
        """Public profile email if GitHub lists it as verified, else the verified primary"""
        verified = [e for e in emails if e.get("verified")]
        for entry in verified:
            if public_email and entry.get("email", "").lower() == public_email.lower():
                return entry["email"]
        primary = next((e for e in verified if e.get("primary")), None)
        return primary["email"] if primary else None


class IdentityProviderRegistry:
    """Providers keyed by name"""

    def __init__(self, providers: Iterable[IdentityProvider] = ()):
        self._providers: Dict[str, IdentityProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: IdentityProvider) -> None:
        self._providers[provider.name] = provider

    def get(self, name: str) -> IdentityProvider:
        provider = self._providers.get((name or "").lower())
        if provider is None:
            raise UnknownProviderError(name)
        return provider

    def names(self) -> list:
        return sorted(self._providers)


def build_default_registry(settings: Settings) -> IdentityProviderRegistry:
    registry = IdentityProviderRegistry([
        GoogleIdentityProvider(settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET),
        GitHubIdentityProvider(settings.GITHUB_CLIENT_ID, settings.GITHUB_CLIENT_SECRET),
    ])
    for name in registry.names():
        if not registry.get(name).is_configured:
            logger.info("Identity provider %s has no client credentials; sign-in with it is disabled", name)
    return registry
