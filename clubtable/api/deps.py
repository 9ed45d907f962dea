"""Request-scoped dependencies for the gateway"""

from typing import AsyncIterator, Optional

import httpx
from fastapi import Depends, Header, HTTPException, Request, status

from clubtable.auth.token import bearer_token
from clubtable.state import AppState


def get_http(request: Request) -> httpx.AsyncClient:
    """Shared upstream client created in the app lifespan"""
    return request.app.state.http


async def get_state(
    authorization: Optional[str] = Header(None),
    http: httpx.AsyncClient = Depends(get_http),
) -> AsyncIterator[AppState]:
    """Application state for the caller's bearer token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = bearer_token(authorization)
    if token is None:
        raise credentials_exception

    state = AppState.create(token=token, http=http)
    if not state.session.is_authenticated:
        raise credentials_exception

    try:
        yield state
    finally:
        await state.close()


async def get_public_state(
    http: httpx.AsyncClient = Depends(get_http),
) -> AsyncIterator[AppState]:
    """Application state without credentials (login and signup)"""
    state = AppState.create(http=http)
    try:
        yield state
    finally:
        await state.close()
