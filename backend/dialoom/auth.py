# backend/dialoom/auth.py
"""
Verification of Supabase-issued access tokens.

Sessions are created by Supabase; this API only checks the HS256 signature,
expiry and audience of the bearer token and reads the user id from ``sub``.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from jwt import PyJWTError

from .core.config import settings

logger = logging.getLogger(__name__)

bearer_scheme_optional = HTTPBearer(auto_error=False)


def _secret_value() -> str:
    return settings.supabase_jwt_secret.get_secret_value()


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode a Supabase JWT, enforcing the audience when one is configured."""
    audience = settings.supabase_jwt_audience
    if audience:
        payload_raw = jwt.decode(
            token,
            _secret_value(),
            algorithms=[settings.jwt_algorithm],
            audience=audience,
        )
    else:
        payload_raw = jwt.decode(
            token,
            _secret_value(),
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(
    subject: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    **claims: Any,
) -> str:
    """
    Issue a token shaped like Supabase's.

    Used by local tooling and tests; production tokens come from Supabase.
    """
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": subject,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
        "role": "authenticated",
        **claims,
    }
    if email:
        payload["email"] = email
    if settings.supabase_jwt_audience:
        payload["aud"] = settings.supabase_jwt_audience
    return jwt.encode(payload, _secret_value(), algorithm=settings.jwt_algorithm)


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme_optional),
) -> Dict[str, Any]:
    """
    Dependency returning the verified claims of the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    not_authenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    invalid_credentials = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise not_authenticated
    try:
        payload = decode_access_token(credentials.credentials)
    except PyJWTError as e:
        logger.info(f"JWT validation error: {str(e)}")
        raise invalid_credentials

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        logger.warning("Token payload missing 'sub' field")
        raise invalid_credentials
    return payload
