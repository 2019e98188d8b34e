import uuid

import pytest

from app.api.deps import clamp_window_days, parse_uuid
from app.core.errors import BadRequest


def test_parse_uuid_accepts_canonical_form():
    value = uuid.uuid4()

    assert parse_uuid(str(value), "project ID") == value


@pytest.mark.parametrize("raw", ["not-a-uuid", "", None])
def test_parse_uuid_keeps_the_original_error(raw):
    with pytest.raises(BadRequest) as exc_info:
        parse_uuid(raw, "project ID")

    assert exc_info.value.detail == "Invalid project ID"
    assert isinstance(exc_info.value.__cause__, (ValueError, AttributeError, TypeError))


@pytest.mark.parametrize("days,expected", [(None, 30), (0, 1), (365, 365), (366, 365)])
def test_clamp_window_days(days, expected):
    assert clamp_window_days(days) == expected
