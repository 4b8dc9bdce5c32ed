from __future__ import annotations

import pytest

from incident_map.core.exceptions import UnauthorizedError
from incident_map.services.admin_auth import extract_bearer_token, verify_admin_token

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("Bearer s3cret", "s3cret"),
        ("bearer s3cret ", "s3cret"),
        ("Basic s3cret", None),
        ("Bearer ", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected) -> None:
    assert extract_bearer_token(header) == expected


def test_verify_admin_token_accepts_matching_secret() -> None:
    verify_admin_token("s3cret", "s3cret")


@pytest.mark.parametrize(
    ("presented", "configured"),
    [("wrong", "s3cret"), (None, "s3cret"), ("", "s3cret"), ("s3cret", None), ("", "")],
)
def test_verify_admin_token_rejects(presented, configured) -> None:
    with pytest.raises(UnauthorizedError):
        verify_admin_token(presented, configured)
