"""Tests for SQLAlchemyExternalUserRepository."""

from unittest.mock import patch

import pytest

from app.exceptions import PersistenceError
from app.models import ExternalUser
from app.repositories import SQLAlchemyExternalUserRepository
from app.schemas.external_user import ExternalUserCreate, ExternalUserUpdate


@pytest.fixture
def repo(db):
    return SQLAlchemyExternalUserRepository(db)


def test_find_or_create_is_idempotent(db, repo, setup_channel):
    data = ExternalUserCreate(channel_id=setup_channel.id, platform_user_id="wa-42")
    first, created = repo.find_or_create(data)
    second, created_again = repo.find_or_create(data)

    assert created is True
    assert created_again is False
    assert first.id == second.id
    assert db.query(ExternalUser).count() == 1


def test_find_or_create_touches_last_seen(repo, setup_external_user):
    setup_external_user.last_seen_at = None
    user, created = repo.find_or_create(
        ExternalUserCreate(
            channel_id=setup_external_user.channel_id,
            platform_user_id=setup_external_user.platform_user_id,
        )
    )
    assert created is False
    assert user.last_seen_at is not None


def test_create_stores_metadata(repo, setup_channel):
    user = repo.create(
        ExternalUserCreate(
            channel_id=setup_channel.id,
            platform_user_id="tg-1",
            email="ana@example.com",
            metadata={"locale": "pt"},
        )
    )
    assert user.extra == {"locale": "pt"}
    assert user.first_seen_at is not None
    assert user.is_blocked is False


def test_update(repo, setup_external_user):
    user = repo.update(
        setup_external_user.id, ExternalUserUpdate(is_blocked=True, display_name="Bo")
    )
    assert user.is_blocked is True
    assert user.display_name == "Bo"
    assert repo.update(999, ExternalUserUpdate(is_blocked=True)) is None


def test_get_by_channel_and_platform_id_is_scoped(repo, setup_external_user, setup_secret_channel):
    assert (
        repo.get_by_channel_and_platform_id(
            setup_secret_channel.id, setup_external_user.platform_user_id
        )
        is None
    )
    found = repo.get_by_channel_and_platform_id(
        setup_external_user.channel_id, setup_external_user.platform_user_id
    )
    assert found.id == setup_external_user.id


def test_touch_last_seen(repo, setup_external_user):
    repo.touch_last_seen(setup_external_user.id)
    assert repo.get_by_id(setup_external_user.id).last_seen_at is not None


def test_lost_create_race_reuses_winner(db, repo, setup_external_user):
    # The first lookup misses as if a concurrent insert had not committed yet
    with patch.object(
        SQLAlchemyExternalUserRepository,
        "get_by_channel_and_platform_id",
        side_effect=[None, setup_external_user],
    ):
        user, created = repo.find_or_create(
            ExternalUserCreate(
                channel_id=setup_external_user.channel_id,
                platform_user_id=setup_external_user.platform_user_id,
            )
        )
    assert created is False
    assert user.id == setup_external_user.id
    assert user.last_seen_at is not None
    assert db.query(ExternalUser).count() == 1


def test_find_or_create_propagates_other_failures(repo, setup_channel):
    with patch.object(
        SQLAlchemyExternalUserRepository,
        "create",
        side_effect=PersistenceError("failed to create external user: down"),
    ):
        with pytest.raises(PersistenceError):
            repo.find_or_create(
                ExternalUserCreate(channel_id=setup_channel.id, platform_user_id="x-1")
            )
