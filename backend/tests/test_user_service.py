"""Registration, authentication, profile updates and account deletion."""

import uuid

import pytest
from sqlalchemy import func, select

from app.exceptions import (
    ConflictError,
    InactiveUserError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from app.models.refresh_token import RefreshToken
from app.models.scan import ScanHistory
from app.models.user import User
from app.services import scan_service, token_service, user_service

from tests.conftest import DEFAULT_PASSWORD


async def test_register_normalizes_and_hashes(db):
    user = await user_service.register(db, email="  Carol@Example.COM ", username="Carol", password=DEFAULT_PASSWORD)
    await db.commit()

    assert user.email == "carol@example.com"
    assert user.username == "carol"
    assert user.password_hash != DEFAULT_PASSWORD
    assert user.role == "user"
    assert user.is_active is True
    assert user.email_verified is False
    assert user.preferences == {}


async def test_register_duplicate_email(db, user):
    with pytest.raises(ConflictError) as exc_info:
        await user_service.register(db, email="ALICE@example.com", username="alice2", password=DEFAULT_PASSWORD)
    assert exc_info.value.field == "email"


async def test_register_duplicate_username(db, user):
    with pytest.raises(ConflictError) as exc_info:
        await user_service.register(db, email="alice2@example.com", username="Alice", password=DEFAULT_PASSWORD)
    assert exc_info.value.field == "username"


@pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "NoDigits!!", "NoSymbol123", "Password1"])
async def test_register_weak_password(db, password):
    with pytest.raises(ValidationError) as exc_info:
        await user_service.register(db, email="dave@example.com", username="dave", password=password)
    assert exc_info.value.field == "password"


async def test_authenticate_by_email_or_username(db, user):
    by_email = await user_service.authenticate(db, "Alice@Example.com", DEFAULT_PASSWORD)
    assert by_email.id == user.id
    assert by_email.last_login_at is not None

    by_username = await user_service.authenticate(db, "alice", DEFAULT_PASSWORD)
    assert by_username.id == user.id
    await db.commit()


async def test_authenticate_wrong_password(db, user):
    with pytest.raises(InvalidCredentialsError):
        await user_service.authenticate(db, "alice", "Wr0ng!Pass")


async def test_authenticate_unknown_user(db):
    with pytest.raises(InvalidCredentialsError):
        await user_service.authenticate(db, "nobody", DEFAULT_PASSWORD)


async def test_inactive_user_cannot_log_in(db, user):
    record = await db.get(User, user.id)
    record.is_active = False
    await db.commit()

    with pytest.raises(InactiveUserError):
        await user_service.authenticate(db, "alice", DEFAULT_PASSWORD)
    assert await user_service.get_active_user(db, user.id) is None


async def test_update_profile_ignores_unknown_fields(db, user):
    record = await db.get(User, user.id)
    updated = await user_service.update_profile(
        db, record, {"full_name": "Alice A.", "preferences": {"currency": "USD"}, "role": "admin"}
    )
    await db.commit()

    assert updated.full_name == "Alice A."
    assert updated.preferences == {"currency": "USD"}
    assert updated.role == "user"


async def test_delete_user_cascades(db, user, other_user):
    user_id = user.id
    await scan_service.record_scan(db, user_id, {"image_url": "https://x/1.jpg", "item_name": "Lamp"})
    await scan_service.record_scan(db, user_id, {"image_url": "https://x/2.jpg", "item_name": "Vase"})
    await scan_service.record_scan(db, other_user.id, {"image_url": "https://x/3.jpg", "item_name": "Rug"})
    await token_service.issue(db, user_id)
    await token_service.issue(db, other_user.id)
    await db.commit()

    await user_service.delete_user(db, user_id)
    await db.commit()

    assert await db.scalar(select(func.count()).select_from(ScanHistory).where(ScanHistory.user_id == user_id)) == 0
    assert await db.scalar(select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == user_id)) == 0
    assert await db.scalar(select(func.count()).select_from(ScanHistory)) == 1
    assert await db.scalar(select(func.count()).select_from(RefreshToken)) == 1
    await db.rollback()


async def test_delete_missing_user(db):
    with pytest.raises(NotFoundError):
        await user_service.delete_user(db, uuid.uuid4())
