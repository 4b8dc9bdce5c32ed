"""Shared-secret admin gate."""

from __future__ import annotations

import hmac

from incident_map.core.exceptions import UnauthorizedError


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def verify_admin_token(presented: str | None, configured: str | None) -> None:
    """Raise UnauthorizedError unless ``presented`` matches the configured secret.

    An unset secret disables every admin operation rather than accepting any token.
    """
    if not configured or not presented:
        raise UnauthorizedError("unauthorized")
    if not hmac.compare_digest(presented.encode(), configured.encode()):
        raise UnauthorizedError("unauthorized")
