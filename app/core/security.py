import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Header, HTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedCaller:
    id: str
    email: str
    name: Optional[str] = None


class AuthenticationError(Exception):
    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def decode_token(token: str, secret: Optional[str], algorithm: str = "HS256") -> AuthenticatedCaller:
    """Resolve a bearer token to the caller it identifies.

    Two formats are accepted: a signed JWT (``header.payload.signature``) and
    the legacy base64 ``"<userId>:<timestamp>"`` token issued at login.
    """
    if len(token.split(".")) == 3:
        if not secret:
            raise AuthenticationError("Server misconfiguration", status_code=500)
        try:
            payload = jwt.decode(token, secret, algorithms=[algorithm])
        except jwt.PyJWTError as e:
            logger.warning("JWT verify error: %s", e)
            raise AuthenticationError("Invalid token")

        return AuthenticatedCaller(
            id=payload.get("sub") or payload.get("kid") or "unknown",
            email=payload.get("email") or payload.get("em") or "unknown",
            name=payload.get("name") or payload.get("given_name"),
        )

    try:
        raw = base64.b64decode(token).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.warning("Custom token decode error: %s", e)
        raise AuthenticationError("Invalid token format")

    user_id, _, issued_at = raw.partition(":")
    if not user_id or not issued_at:
        raise AuthenticationError("Invalid token format")

    return AuthenticatedCaller(id=user_id, email="unknown")


def get_current_caller(authorization: Optional[str] = Header(default=None)) -> AuthenticatedCaller:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid authorization header")

    try:
        caller = decode_token(
            authorization[len("Bearer "):],
            settings.JWT_SECRET,
            settings.JWT_ALGORITHM,
        )
    except AuthenticationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if not caller.id or caller.id == "unknown":
        raise HTTPException(status_code=401, detail="Invalid token subject")

    return caller
