"""Test data builders and fakes"""

from urllib.parse import urlencode

from rentals.core.exceptions import ExternalProviderError
from rentals.core.security import get_password_hash
from rentals.domain.entities.user import User
from rentals.domain.value_objects.email import Email
from rentals.infrastructure.external_services.identity_providers import IdentityProvider


class StubIdentityProvider(IdentityProvider):
    """Provider that accepts one fixed code and returns a canned identity"""

    name = "google"
    VALID_CODE = "good-code"

    def __init__(self, identity, client_id="client", client_secret="secret"):
        super().__init__(client_id, client_secret)
        self.identity = identity
        self.exchanged = []

    def authorization_url(self, state, redirect_uri):
        self.ensure_configured()
        return "https://accounts.rentals.io/authorize?" + urlencode({"state": state, "redirect_uri": redirect_uri})

    async def exchange_code(self, code, redirect_uri):
        self.ensure_configured()
        self.exchanged.append((code, redirect_uri))
        if code != self.VALID_CODE:
            raise ExternalProviderError(self.name, "token endpoint said: invalid_grant (debug id 42)")
        return self.identity


async def add_user(
    uow,
    email="owner@rentals.io",
    password="secret1",
    first_name="Olive",
    last_name="Owner",
    isadmin=False,
    isactive=True,
) -> User:
    user = User.create(
        email=Email(email),
        first_name=first_name,
        last_name=last_name,
        hashed_password=get_password_hash(password) if password else None,
        isadmin=isadmin,
    )
    user.isactive = isactive
    async with uow:
        await uow.users.add(user)
        await uow.commit()
    return user


def listing_fields(**overrides) -> dict:
    fields = {
        "name": "Cozy Cabin",
        "type": "Cabin Or Cottage",
        "description": "Quiet spot in the woods",
        "location": {"street": "1 Pine Rd", "city": "Boulder", "state": "CO", "zipcode": "80302"},
        "beds": 2,
        "baths": 1,
        "square_feet": 800,
        "amenities": ["Wifi", "Fireplace"],
        "rates": {"nightly": 120},
        "seller_info": {"name": "Olive", "email": "olive@rentals.io", "phone": "555-0100"},
        "images": ["cabin-1.jpg"],
    }
    fields.update(overrides)
    return fields
