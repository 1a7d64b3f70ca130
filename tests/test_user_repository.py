import math

import pytest

from rentals.core.exceptions import DuplicateEmailError, NotFoundError
from rentals.domain.entities.user import User
from rentals.domain.value_objects.email import Email
from rentals.domain.value_objects.entity_ids import UserId

from .factories import add_user


async def test_add_and_find(uow):
    user = await add_user(uow, email="Find.Me@Rentals.io")

    async with uow:
        by_email = await uow.users.get_by_email(Email("find.me@rentals.io"))
        by_id = await uow.users.get_by_id(user.id)

    assert by_email.id == user.id
    assert by_id.email == Email("find.me@rentals.io")
    assert by_id.name == "Olive Owner"


async def test_unique_constraint_is_the_conflict_signal(uow):
    await add_user(uow, email="dup@x.com")

    clash = User.create(email=Email("dup@x.com"), first_name="Dup", last_name="Licate")
    with pytest.raises(DuplicateEmailError):
        async with uow:
            await uow.users.add(clash)

    async with uow:
        page = await uow.users.list("dup@x.com", 1, 10)
    assert len(page.records) == 1


async def test_exists_by_email_can_exclude_a_user(uow):
    user = await add_user(uow, email="mine@x.com")

    async with uow:
        assert await uow.users.exists_by_email(Email("mine@x.com"))
        assert not await uow.users.exists_by_email(Email("mine@x.com"), exclude_id=user.id)
        assert not await uow.users.exists_by_email(Email("nobody@x.com"))


async def test_update_unknown_user_raises(uow):
    ghost = User.create(email=Email("ghost@x.com"), first_name="G", last_name="Host")
    with pytest.raises(NotFoundError):
        async with uow:
            await uow.users.update(ghost)


async def test_set_active_touches_only_the_flag(uow):
    user = await add_user(uow, email="flip@x.com")

    async with uow:
        updated = await uow.users.set_active(user.id, False)
        await uow.commit()
    async with uow:
        stored = await uow.users.get_by_id(user.id)

    assert updated.isactive is False
    assert stored.isactive is False
    assert stored.hashed_password == user.hashed_password
    assert stored.email == user.email

    async with uow:
        assert await uow.users.set_active(UserId.generate(), True) is None


async def test_delete_reports_whether_a_row_went(uow):
    user = await add_user(uow, email="gone@x.com")
    async with uow:
        assert await uow.users.delete(user.id) is True
        assert await uow.users.delete(user.id) is False
        await uow.commit()


@pytest.mark.parametrize("count,page_size", [(7, 3), (9, 3), (1, 10), (10, 10)])
async def test_pagination_math(uow, count, page_size):
    for i in range(count):
        await add_user(uow, email=f"user{i}@x.com", first_name=f"User{i}")

    total_pages = math.ceil(count / page_size)
    seen = set()
    for page in range(1, total_pages + 1):
        async with uow:
            result = await uow.users.list(None, page, page_size)
        assert result.total_pages == total_pages
        expected = page_size if page < total_pages else count - page_size * (total_pages - 1)
        assert len(result.records) == expected
        seen.update(str(u.id) for u in result.records)

    assert len(seen) == count


async def test_list_filter_is_case_insensitive_over_names_and_email(uow):
    await add_user(uow, email="alice@x.com", first_name="Alice", last_name="Smith")
    await add_user(uow, email="bob@x.com", first_name="Bob", last_name="Jones")
    await add_user(uow, email="carol@smithco.io", first_name="Carol", last_name="White")

    async with uow:
        smiths = await uow.users.list("SMITH", 1, 10)
        everyone = await uow.users.list("all", 1, 10)
        blank = await uow.users.list("", 1, 10)
        literal = await uow.users.list("%", 1, 10)

    assert {str(u.email) for u in smiths.records} == {"alice@x.com", "carol@smithco.io"}
    assert everyone.total == 3
    assert blank.total == 3
    assert literal.total == 0
