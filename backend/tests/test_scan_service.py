"""Scan history persistence, validation and ownership."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.services import scan_service
from app.services.scan_service import ScanFilter
from app.utils.dates import utcnow


def _item(**overrides):
    data = {
        "image_url": "https://cdn.example.com/scans/1.jpg",
        "item_name": "Denim jacket",
        "item_category": "clothing",
        "item_brand": "Levi's",
        "price_range": "$25-$40",
        "platform_prices": {"ebay": 32, "poshmark": 28},
        "confidence_score": 80,
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize("score", [0, 1, 50, 99, 100, None])
async def test_confidence_in_range_is_accepted(db, user, score):
    scan = await scan_service.record_scan(db, user.id, _item(confidence_score=score))
    await db.commit()
    assert scan.confidence_score == score


@pytest.mark.parametrize("score", [-1, 101, 1000])
async def test_confidence_out_of_range_is_rejected(db, user, score):
    with pytest.raises(ValidationError) as exc_info:
        await scan_service.record_scan(db, user.id, _item(confidence_score=score))
    assert exc_info.value.field == "confidence_score"

    items, total = await scan_service.list_scans(db, user.id)
    assert total == 0


def test_confidence_must_be_integer():
    with pytest.raises(ValidationError):
        scan_service.validate_confidence(True)
    with pytest.raises(ValidationError):
        scan_service.validate_confidence(50.5)


async def test_record_scan_requires_item_name(db, user):
    with pytest.raises(ValidationError) as exc_info:
        await scan_service.record_scan(db, user.id, _item(item_name=""))
    assert exc_info.value.field == "item_name"


async def test_record_scan_normalizes_scanned_at(db, user):
    aware = datetime(2026, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    scan = await scan_service.record_scan(db, user.id, _item(scanned_at=aware))
    await db.commit()
    assert scan.scanned_at == datetime(2026, 5, 1, 12, 0)
    assert scan.is_favorite is False
    assert scan.platform_prices == {"ebay": 32, "poshmark": 28}


async def test_favorite_only_listing_is_newest_first(db, user):
    now = utcnow()
    scans = []
    for hours_ago in (3, 1, 2, 5):
        scans.append(await scan_service.record_scan(
            db, user.id, _item(item_name=f"item-{hours_ago}", scanned_at=now - timedelta(hours=hours_ago))
        ))
    await db.commit()

    for scan in scans[:3]:
        await scan_service.toggle_favorite(db, scan.id, user.id)
    await db.commit()

    items, total = await scan_service.list_scans(db, user.id, ScanFilter(favorite_only=True))

    assert total == 3
    assert [s.item_name for s in items] == ["item-1", "item-2", "item-3"]
    assert all(s.is_favorite for s in items)
    await db.rollback()


async def test_list_filters_and_pagination(db, user, other_user):
    now = utcnow()
    await scan_service.record_scan(db, user.id, _item(item_category="shoes", scanned_at=now - timedelta(days=10)))
    await scan_service.record_scan(db, user.id, _item(item_category="shoes", scanned_at=now - timedelta(days=1)))
    await scan_service.record_scan(db, user.id, _item(item_category="books", scanned_at=now))
    await scan_service.record_scan(db, other_user.id, _item(item_category="shoes"))
    await db.commit()

    _, total = await scan_service.list_scans(db, user.id, ScanFilter(category="shoes"))
    assert total == 2

    recent, total = await scan_service.list_scans(db, user.id, ScanFilter(since=now - timedelta(days=2)))
    assert total == 2
    assert [s.item_category for s in recent] == ["books", "shoes"]

    page, total = await scan_service.list_scans(db, user.id, page=2, page_size=2)
    assert total == 3
    assert len(page) == 1
    assert page[0].scanned_at == now - timedelta(days=10)
    await db.rollback()


async def test_toggle_favorite_of_other_users_scan_is_not_found(db, user, other_user):
    scan = await scan_service.record_scan(db, user.id, _item())
    await db.commit()
    scan_id = scan.id

    with pytest.raises(NotFoundError):
        await scan_service.toggle_favorite(db, scan_id, other_user.id)
    await db.rollback()

    unchanged = await scan_service.get_scan(db, scan_id, user.id)
    assert unchanged.is_favorite is False
    await db.rollback()


async def test_toggle_favorite_flips(db, user):
    scan = await scan_service.record_scan(db, user.id, _item())
    await db.commit()

    assert (await scan_service.toggle_favorite(db, scan.id, user.id)).is_favorite is True
    assert (await scan_service.toggle_favorite(db, scan.id, user.id)).is_favorite is False
    await db.commit()


async def test_update_notes_and_delete(db, user, other_user):
    scan = await scan_service.record_scan(db, user.id, _item())
    await db.commit()
    scan_id = scan.id

    updated = await scan_service.update_notes(db, scan_id, user.id, "Listed on eBay")
    await db.commit()
    assert updated.notes == "Listed on eBay"

    with pytest.raises(NotFoundError):
        await scan_service.delete_scan(db, scan_id, other_user.id)
    await db.rollback()

    await scan_service.delete_scan(db, scan_id, user.id)
    await db.commit()

    with pytest.raises(NotFoundError):
        await scan_service.get_scan(db, scan_id, user.id)
    await db.rollback()


async def test_get_missing_scan(db, user):
    with pytest.raises(NotFoundError):
        await scan_service.get_scan(db, uuid.uuid4(), user.id)
