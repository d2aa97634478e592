import pytest

from app.utils.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_MESSAGE_LIMIT,
    MAX_LIMIT,
    normalize_limit,
    normalize_offset,
)


@pytest.mark.parametrize(
    "limit, expected",
    [(0, DEFAULT_LIMIT), (-5, DEFAULT_LIMIT), (500, DEFAULT_LIMIT), (None, DEFAULT_LIMIT), (1, 1), (MAX_LIMIT, MAX_LIMIT)],
)
def test_normalize_limit(limit, expected):
    assert normalize_limit(limit) == expected


def test_normalize_limit_message_default():
    assert normalize_limit(0, default=DEFAULT_MESSAGE_LIMIT) == 50
    assert normalize_limit(101, default=DEFAULT_MESSAGE_LIMIT) == 50


@pytest.mark.parametrize("offset, expected", [(-1, 0), (None, 0), (0, 0), (40, 40)])
def test_normalize_offset(offset, expected):
    assert normalize_offset(offset) == expected
