"""
JWT creation and verification.

Tokens are HS256 JWTs carrying only ``sub`` (the user id), ``iat`` and
``exp``.  There is no revocation list: validity depends solely on the
signature and the expiry.
"""

from __future__ import annotations

from datetime import datetime, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from config.settings import Settings


class TokenError(Exception):
    """Token rejected.  ``reason`` is for logs, never for the client."""

    def __init__(self, reason: str, detail: str = "") -> None:
        super().__init__(f"{reason}: {detail}" if detail else reason)
        self.reason = reason


def create_token(user_id: str, settings: Settings) -> str:
    """Create a signed token containing ``user_id`` and expiry."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + settings.token_lifetime).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> str:
    """
    Verify token and return the subject (``user_id``).

    Raises ``TokenError`` with reason ``expired``, ``invalid_signature``
    or ``malformed``.
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as exc:
        raise TokenError("malformed", str(exc)) from exc
    if header.get("alg") != settings.jwt_algorithm:
        raise TokenError("malformed", f"unexpected alg {header.get('alg')!r}")

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as exc:
        raise TokenError("expired", str(exc)) from exc
    except JWTError as exc:
        reason = "invalid_signature" if "signature" in str(exc).lower() else "malformed"
        raise TokenError(reason, str(exc)) from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise TokenError("malformed", "missing subject")
    return subject
