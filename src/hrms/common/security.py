"""Per-session anti-forgery tokens."""

from __future__ import annotations

import hmac
import secrets
from typing import MutableMapping, Optional

from ..core.exceptions import AuthorizationError

CSRF_SESSION_KEY = "csrf_token"


def issue_csrf_token(session: MutableMapping) -> str:
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_hex(32)
        session[CSRF_SESSION_KEY] = token
    return token


def validate_csrf_token(expected: Optional[str], submitted: Optional[str]) -> None:
    if not expected or not submitted or not hmac.compare_digest(str(expected), str(submitted)):
        raise AuthorizationError("Invalid CSRF token.")
