from urllib.parse import parse_qs, urlparse

from rentals.core.config import settings
from rentals.core.security import read_session_token
from rentals.db.database import engine

from .factories import StubIdentityProvider, add_user

API = settings.API_V1_PREFIX
COOKIE = settings.SESSION_COOKIE_NAME


async def sign_in(client, email, password="secret1"):
    return await client.post(f"{API}/auth/signin", json={"email": email, "password": password})


async def test_sign_up_via_form_then_sign_in(client):
    response = await client.post(f"{API}/auth/signup", data={
        "first_name": "Ann",
        "last_name": "Lee",
        "email": "ann@rentals.io",
        "password": "secret1",
    })
    assert response.status_code == 201
    assert response.json()["success"] is True
    assert COOKIE not in client.cookies

    response = await sign_in(client, "ann@rentals.io")
    body = response.json()
    assert response.status_code == 200
    assert body["identity"]["name"] == "Ann Lee"
    assert "token" not in body and "reason" not in body
    assert read_session_token(client.cookies[COOKIE]).name == "Ann Lee"


async def test_sign_up_conflict_and_validation_statuses(client, uow):
    await add_user(uow, email="taken@rentals.io")

    conflict = await client.post(f"{API}/auth/signup", json={
        "first_name": "T", "last_name": "K", "email": "taken@rentals.io", "password": "secret1",
    })
    invalid = await client.post(f"{API}/auth/signup", json={"email": "x"})

    assert conflict.status_code == 409
    assert invalid.status_code == 422
    assert "first_name" in invalid.json()["data"]["field_errors"]


async def test_failed_sign_in_is_generic(client, uow):
    await add_user(uow, email="a@rentals.io", isactive=False)

    for email, password in (("a@rentals.io", "secret1"), ("ghost@rentals.io", "secret1")):
        response = await sign_in(client, email, password)
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password."
    assert COOKIE not in client.cookies


async def test_session_endpoint_slides_and_sign_out_clears(client, uow):
    await add_user(uow, email="a@rentals.io", first_name="Al", last_name="Bo")

    assert (await client.get(f"{API}/auth/session")).status_code == 401

    await sign_in(client, "a@rentals.io")
    response = await client.get(f"{API}/auth/session")
    assert response.status_code == 200
    assert response.json()["name"] == "Al Bo"
    assert COOKIE in response.headers.get("set-cookie", "")

    response = await client.post(f"{API}/auth/signout")
    assert response.json()["message"] == "Signed out successfully"
    assert COOKIE not in client.cookies
    assert (await client.get(f"{API}/auth/session")).status_code == 401

    # signing out again is fine
    assert (await client.post(f"{API}/auth/signout")).status_code == 200


async def test_bearer_token_is_accepted(client, uow):
    await add_user(uow, email="a@rentals.io")
    await sign_in(client, "a@rentals.io")
    token = client.cookies[COOKIE]
    client.cookies.clear()

    response = await client.get(f"{API}/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


async def test_clear_cookies(client):
    response = await client.get(f"{API}/auth/clear-cookies", headers={"Cookie": "theme=dark; tracking=1"})

    assert response.json()["message"] == "All cookies cleared"
    assert set(response.json()["cleared"]) == {"theme", "tracking"}


async def test_admin_routes_require_admin(client, uow):
    await add_user(uow, email="a@rentals.io")

    assert (await client.get(f"{API}/admin/users")).status_code == 401
    await sign_in(client, "a@rentals.io")
    assert (await client.get(f"{API}/admin/users")).status_code == 403


async def test_admin_user_lifecycle(client, uow):
    await add_user(uow, email="boss@rentals.io", isadmin=True)
    await sign_in(client, "boss@rentals.io")

    created = await client.post(f"{API}/admin/users", data={
        "first_name": "New", "last_name": "Hire", "email": "new@rentals.io", "password": "secret1",
    })
    assert created.status_code == 201
    user = created.json()["data"]
    assert user["isadmin"] is False

    duplicate = await client.post(f"{API}/admin/users", json={
        "first_name": "New", "last_name": "Hire", "email": "new@rentals.io", "password": "secret1",
    })
    assert duplicate.status_code == 409

    listed = await client.get(f"{API}/admin/users", params={"query": "hire", "page": 1})
    assert listed.json()["total_pages"] == 1
    assert [r["email"] for r in listed.json()["records"]] == ["new@rentals.io"]

    # form submission with the active box unchecked
    updated = await client.put(f"{API}/admin/users/{user['id']}", data={
        "first_name": "Renamed", "last_name": "Hire", "email": "new@rentals.io", "password": "",
    })
    assert updated.status_code == 200
    assert updated.json()["data"]["isactive"] is False
    assert updated.json()["data"]["name"] == "Renamed Hire"

    status = await client.put(f"{API}/admin/users/{user['id']}/status", json={"isactive": True})
    assert status.json()["message"] == "User activated successfully"

    fetched = await client.get(f"{API}/admin/users/{user['id']}")
    assert fetched.json()["isactive"] is True

    deleted = await client.delete(f"{API}/admin/users/{user['id']}")
    assert deleted.status_code == 204
    assert deleted.headers["location"] == "/admin/users"
    assert (await client.get(f"{API}/admin/users/{user['id']}")).status_code == 404


async def test_status_without_flag_is_rejected(client, uow):
    await add_user(uow, email="boss@rentals.io", isadmin=True)
    user = await add_user(uow, email="a@rentals.io")
    await sign_in(client, "boss@rentals.io")

    response = await client.put(f"{API}/admin/users/{user.id}/status", json={})

    assert response.status_code == 422
    assert "isactive" in response.json()["field_errors"]
    assert (await client.get(f"{API}/admin/users/{user.id}")).json()["isactive"] is True


async def test_email_available_endpoint(client, uow):
    user = await add_user(uow, email="a@rentals.io")

    taken = await client.get(f"{API}/users/email-available", params={"email": "a@rentals.io"})
    own = await client.get(f"{API}/users/email-available", params={"email": "a@rentals.io", "exclude_id": str(user.id)})

    assert taken.json() == {"available": False, "message": "Email is already taken"}
    assert own.json()["available"] is True


async def test_profile_update_refreshes_session_name(client, uow):
    await add_user(uow, email="a@rentals.io", first_name="Old", last_name="Name")
    await sign_in(client, "a@rentals.io")

    response = await client.put(f"{API}/users/me", json={"first_name": "New", "last_name": "Name"})

    assert response.status_code == 200
    assert read_session_token(client.cookies[COOKIE]).name == "New Name"
    assert (await client.get(f"{API}/users/me")).json()["name"] == "New Name"


async def test_property_form_submission(client, uow):
    owner = await add_user(uow, email="a@rentals.io")

    anonymous = await client.post(f"{API}/properties", json={})
    assert anonymous.status_code == 401

    await sign_in(client, "a@rentals.io")
    created = await client.post(f"{API}/properties", data={
        "name": "Beach House",
        "type": "House",
        "location.street": "5 Shore Dr",
        "location.city": "Malibu",
        "location.state": "CA",
        "location.zipcode": "90265",
        "beds": "4",
        "baths": "3",
        "square_feet": "2400",
        "amenities": ["Wifi", "Pool"],
        "rates.weekly": "3500",
        "seller_info.name": "Olive",
        "seller_info.email": "",
        "images": ["a.jpg", "b.jpg"],
    })
    assert created.status_code == 201, created.text
    listing = created.json()["data"]
    assert listing["owner"] == str(owner.id)
    assert listing["amenities"] == ["Wifi", "Pool"]
    assert listing["rates"]["weekly"] == 3500

    found = await client.get(f"{API}/properties", params={"location": "malibu", "type": "All"})
    assert [p["name"] for p in found.json()["properties"]] == ["Beach House"]

    by_owner = await client.get(f"{API}/properties/owner/{owner.id}")
    assert len(by_owner.json()) == 1

    assert (await client.get(f"{API}/properties/{listing['id']}")).status_code == 200
    assert (await client.get(f"{API}/properties/not-an-id")).status_code == 404

    deleted = await client.delete(f"{API}/properties/{listing['id']}")
    assert deleted.json() == {"success": True, "error": None}


async def test_property_validation_and_featuring(client, uow):
    await add_user(uow, email="boss@rentals.io", isadmin=True)
    await sign_in(client, "boss@rentals.io")

    invalid = await client.post(f"{API}/properties", json={"name": "No details"})
    assert invalid.status_code == 422
    assert invalid.json()["error"] == "validation"

    created = await client.post(f"{API}/properties", json={
        "name": "Loft", "type": "Apartment", "location": {"city": "Denver", "state": "CO"},
        "beds": 1, "baths": 1, "square_feet": 600, "rates": {"monthly": 2100},
    })
    listing_id = created.json()["data"]["id"]

    toggled = await client.post(f"{API}/properties/{listing_id}/featured")
    assert toggled.json()["is_featured"] is True
    featured = await client.get(f"{API}/properties/featured")
    assert [p["id"] for p in featured.json()] == [listing_id]


async def test_social_sign_in_flow(client, stub_provider):
    started = await client.post(f"{API}/auth/social/google")
    assert started.status_code == 200
    url = started.json()["url"]
    state = parse_qs(urlparse(url).query)["state"][0]
    assert client.cookies[settings.OAUTH_STATE_COOKIE_NAME] == state

    response = await client.get(
        f"{API}/auth/callback/google",
        params={"code": StubIdentityProvider.VALID_CODE, "state": state},
    )

    assert response.status_code == 302
    assert response.headers["location"] == settings.FRONTEND_URL
    assert read_session_token(client.cookies[COOKIE]).name == "Social User"
    assert stub_provider.exchanged[0][1].endswith(f"{API}/auth/callback/google")


async def test_social_callback_rejects_state_mismatch(client, stub_provider):
    await client.post(f"{API}/auth/social/google")

    response = await client.get(
        f"{API}/auth/callback/google",
        params={"code": StubIdentityProvider.VALID_CODE, "state": "forged"},
    )

    assert response.status_code == 302
    assert "error=Authentication+failed" in response.headers["location"]
    assert stub_provider.exchanged == []
    assert COOKIE not in client.cookies


async def test_social_unknown_provider(client):
    response = await client.post(f"{API}/auth/social/myspace")
    assert response.status_code == 400
    assert response.json()["error"] == "Unknown sign-in provider: myspace"


async def test_health(client):
    try:
        response = await client.get(f"{API}/health")
    finally:
        await engine.dispose()
    assert response.status_code == 200
    assert response.json()["database"] == "healthy"


async def test_providers_lists_registered_names(client):
    response = await client.get(f"{API}/auth/providers")

    assert response.status_code == 200
    assert response.json() == {"providers": [{"name": "google", "configured": True}]}
