"""
Session resolution for authenticated routes.

Callers authenticate with an `Authorization: Bearer <token>` header; the
injected SessionProvider maps the token to a user id.
"""
from typing import Optional

from fastapi import Depends, Request

from ..errors import AuthenticationError
from ..services.sessions import SessionProvider
from .dependencies import get_session_provider


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def optional_user(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
) -> Optional[str]:
    """User id of the caller, or None for anonymous requests."""
    token = bearer_token(request)
    if token is None:
        return None
    return provider.resolve(token)


def require_user(user_id: Optional[str] = Depends(optional_user)) -> str:
    """User id of the caller; raises AuthenticationError when there is none."""
    if not user_id:
        raise AuthenticationError()
    return user_id
