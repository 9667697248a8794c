import pytest

from app.config import get_settings
from app.db import crud
from app.errors import (
    AlreadySubscribedDinerError, CompanyNotChosenError, DinerImageNotFoundError,
    DinerMaxImageCountExceedError, DinerNotFoundError, DinerSubscriptionNotFoundError,
    DuplicateDinerTagError, ImageDeleteFailError, ImageUploadFailError, ImageWithNoExtensionError,
)
from app.schemas import DinerSort
from app.services import diners
from app.services.auth import AuthContext
from app.services.location import distance_m


async def _diner(db, auth, name="Noodle Bar", lat=37.5668, lon=126.9786, tags=None):
    return await diners.create_diner(db, auth, name, "https://maps.example.com", lat, lon, tags or [])


def test_distance_between_known_points():
    # Seoul City Hall to Gangnam Station, roughly 8.8 km
    d = distance_m(37.5663, 126.9779, 37.4979, 127.0276)
    assert 8_500 < d < 9_000
    assert distance_m(37.5, 127.0, 37.5, 127.0) == 0


async def test_create_diner_in_member_company(db, company, editor):
    diner = await _diner(db, editor, tags=["noodles"])
    assert diner.company_id == company.id
    assert diner.tags == ["noodles"]


async def test_create_diner_without_company(db, make_member):
    member = await make_member("solo@lunch.test", role="editor")
    with pytest.raises(CompanyNotChosenError):
        await _diner(db, AuthContext.from_member(member))


async def test_other_company_diner_is_not_found(db, editor, make_member):
    other = await crud.create_company(db, "Globex", "", 37.5, 127.0, "globex.com")
    outsider = await make_member("eve@globex.com", role="editor", company=other)
    diner = await _diner(db, editor)

    with pytest.raises(DinerNotFoundError):
        await diners.get_diner_detail(db, AuthContext.from_member(outsider), diner.id)


async def test_diner_list_sorting(db, editor, viewer):
    near = await _diner(db, editor, "Bravo", 37.5664, 126.9780)
    far = await _diner(db, editor, "Alpha", 37.6000, 127.0500)
    await crud.create_comment(db, far.id, viewer.member_id, "good", "COMPANY")

    items, total = await diners.get_diner_list(db, viewer, 0, 10)
    assert total == 2
    assert [i.name for i in items] == ["Alpha", "Bravo"]

    items, _ = await diners.get_diner_list(db, viewer, 0, 10, sort=DinerSort.DISTANCE_ASC)
    assert [i.id for i in items] == [near.id, far.id]
    assert items[0].distance < items[1].distance

    items, _ = await diners.get_diner_list(db, viewer, 0, 10, sort=DinerSort.COMMENTS_COUNT_DESC)
    assert items[0].id == far.id
    assert items[0].comment_count == 1


async def test_diner_list_paging_and_keyword(db, editor):
    for name in ["Alpha", "Bravo", "Charlie"]:
        await _diner(db, editor, name)

    items, total = await diners.get_diner_list(db, editor, page=1, size=2)
    assert total == 3
    assert [i.name for i in items] == ["Charlie"]

    items, total = await diners.get_diner_list(db, editor, 0, 10, keyword="rav")
    assert total == 1
    assert items[0].name == "Bravo"


async def test_update_diner_keeps_unset_fields(db, editor):
    diner = await _diner(db, editor)
    updated = await diners.update_diner(db, editor, diner.id, link="https://new.example.com")
    assert updated.link == "https://new.example.com"
    assert updated.latitude == diner.latitude


async def test_tags(db, editor):
    diner = await _diner(db, editor, tags=["noodles"])

    diner = await diners.add_diner_tags(db, editor, diner.id, ["spicy", "cheap"])
    assert diner.tags == ["noodles", "spicy", "cheap"]

    with pytest.raises(DuplicateDinerTagError):
        await diners.add_diner_tags(db, editor, diner.id, ["spicy"])

    diner = await diners.remove_diner_tags(db, editor, diner.id, ["noodles", "missing"])
    assert diner.tags == ["spicy", "cheap"]


async def test_image_orders_step(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    first = await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)
    second = await diners.add_diner_image(db, editor, diner.id, "b.jpg", jpeg_bytes)

    assert first.orders == diners.IMAGE_ORDER_STEP
    assert second.orders == 2 * diners.IMAGE_ORDER_STEP
    assert first.link in fake_s3.objects
    assert first.thumbnail_link in fake_s3.objects


async def test_image_order_follows_max_after_removal(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    first = await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)
    second = await diners.add_diner_image(db, editor, diner.id, "b.jpg", jpeg_bytes)
    await diners.remove_diner_image(db, editor, first.id)

    third = await diners.add_diner_image(db, editor, diner.id, "c.jpg", jpeg_bytes)
    assert third.orders == second.orders + diners.IMAGE_ORDER_STEP


async def test_image_count_cap(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    cap = get_settings().s3.diner_max_image_count
    for n in range(cap):
        await crud.create_diner_image(db, diner.id, f"k{n}", f"t{n}", (n + 1) * 100)

    with pytest.raises(DinerMaxImageCountExceedError):
        await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)


async def test_image_without_extension(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    with pytest.raises(ImageWithNoExtensionError):
        await diners.add_diner_image(db, editor, diner.id, "photo", jpeg_bytes)


async def test_image_upload_failure(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    fake_s3.fail_puts = True
    with pytest.raises(ImageUploadFailError):
        await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)
    assert await crud.count_images_for_diner(db, diner.id) == 0


async def test_remove_image(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    img = await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)

    fake_s3.fail_deletes = True
    with pytest.raises(ImageDeleteFailError):
        await diners.remove_diner_image(db, editor, img.id)
    assert await crud.get_diner_image(db, img.id) is not None

    fake_s3.fail_deletes = False
    await diners.remove_diner_image(db, editor, img.id)
    assert fake_s3.objects == {}
    with pytest.raises(DinerImageNotFoundError):
        await diners.remove_diner_image(db, editor, img.id)


async def test_detail_lists_images_in_order(db, editor, viewer, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)
    await diners.add_diner_image(db, editor, diner.id, "b.png", jpeg_bytes)

    detail = await diners.get_diner_detail(db, viewer, diner.id)
    assert [i.orders for i in detail.images] == [100, 200]
    assert detail.images[1].url.endswith(".png")
    assert detail.subscribed is False


async def test_remove_diner_removes_objects(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)

    await diners.remove_diner(db, editor, diner.id)
    assert fake_s3.objects == {}
    assert await crud.get_diner(db, diner.id) is None


async def test_remove_diner_survives_storage_failure(db, editor, jpeg_bytes, fake_s3):
    diner = await _diner(db, editor)
    first = await diners.add_diner_image(db, editor, diner.id, "a.jpg", jpeg_bytes)
    second = await diners.add_diner_image(db, editor, diner.id, "b.jpg", jpeg_bytes)
    fake_s3.fail_deletes = True

    await diners.remove_diner(db, editor, diner.id)
    db.expunge_all()

    assert await crud.get_diner(db, diner.id) is None
    assert await crud.get_diner_image(db, first.id) is None
    assert await crud.get_diner_image(db, second.id) is None
    assert len(fake_s3.objects) == 4


async def test_subscriptions(db, editor, viewer):
    diner = await _diner(db, editor)

    await diners.subscribe_diner(db, viewer, diner.id)
    with pytest.raises(AlreadySubscribedDinerError):
        await diners.subscribe_diner(db, viewer, diner.id)
    assert (await diners.get_diner_detail(db, viewer, diner.id)).subscribed is True

    await diners.unsubscribe_diner(db, viewer, diner.id)
    with pytest.raises(DinerSubscriptionNotFoundError):
        await diners.unsubscribe_diner(db, viewer, diner.id)
