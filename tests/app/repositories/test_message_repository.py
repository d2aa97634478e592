"""Tests for SQLAlchemyMessageRepository."""

from datetime import datetime

import pytest

from app.constants.chat import MessageDirection, MessageStatus, SenderType
from app.repositories import SQLAlchemyMessageRepository
from app.schemas.message import MessageCreate


@pytest.fixture
def repo(db):
    return SQLAlchemyMessageRepository(db)


def _create(repo, conversation_id, content, created_at=None):
    return repo.create(
        MessageCreate(
            conversation_id=conversation_id,
            sender_type=SenderType.SYSTEM,
            content=content,
            direction=MessageDirection.OUTBOUND,
            status=MessageStatus.SENT,
            created_at=created_at,
        )
    )


def test_ids_are_monotonic(repo, setup_conversation):
    first = _create(repo, setup_conversation.id, "a")
    second = _create(repo, setup_conversation.id, "b")
    assert second.id > first.id


def test_history_ties_on_created_at_break_by_id(repo, setup_conversation):
    same_instant = datetime(2026, 1, 1, 12, 0, 0)
    older = _create(repo, setup_conversation.id, "older", datetime(2025, 12, 31))
    a = _create(repo, setup_conversation.id, "a", same_instant)
    b = _create(repo, setup_conversation.id, "b", same_instant)

    history = repo.list_by_conversation(setup_conversation.id, limit=10)
    assert [m.id for m in history] == [b.id, a.id, older.id]


def test_history_offset_and_before(repo, setup_conversation):
    created = [_create(repo, setup_conversation.id, str(i)) for i in range(4)]
    assert [m.id for m in repo.list_by_conversation(setup_conversation.id, 2, 1)] == [
        created[2].id,
        created[1].id,
    ]
    before = repo.list_by_conversation(
        setup_conversation.id, 10, 0, before_id=created[1].id
    )
    assert [m.id for m in before] == [created[0].id]


def test_update_status_stamps_timestamps(repo, setup_message):
    delivered = repo.update_status(setup_message.id, MessageStatus.DELIVERED)
    assert delivered.status == "delivered"
    assert delivered.delivered_at is not None
    assert delivered.read_at is None

    read = repo.update_status(setup_message.id, MessageStatus.READ)
    assert read.read_at is not None


def test_update_status_failed_stamps_nothing(repo, setup_message):
    failed = repo.update_status(setup_message.id, MessageStatus.FAILED)
    assert failed.status == "failed"
    assert failed.delivered_at is None
    assert failed.read_at is None


def test_update_status_missing(repo):
    assert repo.update_status(777, MessageStatus.READ) is None
