from rentals.application.dtos.results import ErrorKind, ValidationResult
from rentals.application.use_cases.property_use_cases import PropertyUseCases
from rentals.domain.value_objects.entity_ids import PropertyId

from .factories import add_user, listing_fields


async def _owner_and_use_cases(uow, invalidator):
    owner = await add_user(uow, email="owner@rentals.io")
    return owner, owner.to_identity(), PropertyUseCases(uow, invalidator)


async def test_add_property_owned_by_session_user(uow, invalidator):
    owner, identity, properties = await _owner_and_use_cases(uow, invalidator)
    queue = await invalidator.subscribe()

    result = await properties.add_property(identity, listing_fields())

    assert result.success
    assert result.data["owner"] == str(owner.id)
    assert result.data["rates"] == {"nightly": 120.0, "weekly": None, "monthly": None}
    assert result.data["location"]["city"] == "Boulder"
    assert [queue.get_nowait()["path"] for _ in range(2)] == ["/properties", "/"]


async def test_add_property_requires_session_and_valid_fields(uow, invalidator):
    _, identity, properties = await _owner_and_use_cases(uow, invalidator)

    anonymous = await properties.add_property(None, listing_fields())
    assert anonymous.error is ErrorKind.AUTH

    invalid = await properties.add_property(identity, listing_fields(rates={}, beds=-1))
    assert isinstance(invalid, ValidationResult)
    assert set(invalid.field_errors) == {"rates", "beds"}


async def test_fetch_pages_newest_first(uow, invalidator):
    _, identity, properties = await _owner_and_use_cases(uow, invalidator)
    for i in range(5):
        await properties.add_property(identity, listing_fields(name=f"Place {i}"))

    first = await properties.fetch_properties(page=1, page_size=2)
    last = await properties.fetch_properties(page=3, page_size=2)
    everything = await properties.fetch_properties()

    assert first.total == 5
    assert [p.name for p in first.properties] == ["Place 4", "Place 3"]
    assert [p.name for p in last.properties] == ["Place 0"]
    assert len(everything.properties) == 5


async def test_search_by_location_and_type(uow, invalidator):
    _, identity, properties = await _owner_and_use_cases(uow, invalidator)
    await properties.add_property(identity, listing_fields(name="Cabin"))
    await properties.add_property(identity, listing_fields(
        name="Loft", type="Apartment",
        location={"street": "9 Main St", "city": "Denver", "state": "CO", "zipcode": "80202"},
    ))

    assert {p.name for p in await properties.search_properties("co", "All")} == {"Cabin", "Loft"}
    assert [p.name for p in await properties.search_properties("denver", None)] == ["Loft"]
    assert [p.name for p in await properties.search_properties("80302", "all")] == ["Cabin"]
    assert [p.name for p in await properties.search_properties(None, "Apartment")] == ["Loft"]
    assert await properties.search_properties("Boulder", "Apartment") == []


async def test_only_owner_or_admin_may_edit_or_delete(uow, invalidator, admin_identity, regular_identity):
    _, identity, properties = await _owner_and_use_cases(uow, invalidator)
    added = await properties.add_property(identity, listing_fields())
    listing_id = added.data["id"]

    refused = await properties.update_property(regular_identity, listing_id, listing_fields(name="Mine now"))
    assert refused.error is ErrorKind.PERMISSION
    not_deleted = await properties.delete_property(regular_identity, listing_id)
    assert not not_deleted.success

    updated = await properties.update_property(identity, listing_id, listing_fields(name="Renamed"))
    assert updated.success
    assert updated.data["name"] == "Renamed"
    assert updated.data["owner"] == identity.id

    deleted = await properties.delete_property(admin_identity, listing_id)
    assert deleted.success
    assert await properties.fetch_property_by_id(listing_id) is None

    missing = await properties.delete_property(identity, listing_id)
    assert missing.error == "Property not found"


async def test_toggle_featured_is_admin_only(uow, invalidator, admin_identity):
    _, identity, properties = await _owner_and_use_cases(uow, invalidator)
    added = await properties.add_property(identity, listing_fields())
    listing_id = added.data["id"]

    assert await properties.toggle_featured_property(identity, listing_id) is None
    assert await properties.fetch_featured_properties() == []

    featured = await properties.toggle_featured_property(admin_identity, listing_id)
    assert featured.is_featured
    assert [p.id for p in await properties.fetch_featured_properties()] == [listing_id]

    unfeatured = await properties.toggle_featured_property(admin_identity, listing_id)
    assert not unfeatured.is_featured


async def test_unknown_ids_read_as_empty(uow, invalidator):
    properties = PropertyUseCases(uow, invalidator)
    assert await properties.fetch_property_by_id("nope") is None
    assert await properties.fetch_property_by_id(str(PropertyId.generate())) is None
    assert await properties.fetch_properties_by_owner("nope") == []
    assert await properties.toggle_featured_property(None, "nope") is None
