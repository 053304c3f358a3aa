"""Client key and admin token checks."""

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.dependencies import get_key_store
from app.services.client_keys import ClientKeyStore

security = HTTPBearer(auto_error=False)


async def get_client_id(
    request: Request,
    key_store: Annotated[ClientKeyStore, Depends(get_key_store)],
) -> str:
    """
    Client identity from the configured header, falling back to the `client`
    query parameter. The key doubles as the name of the client's namespace.
    """
    header_key = request.app.state.client_header_key
    client_key = request.headers.get(header_key) or request.query_params.get("client")
    if not client_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing client identifier. Provide header '{header_key}' or query 'client'.",
        )
    if not await key_store.is_authorized(client_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or revoked client key",
        )
    return client_key


async def require_admin(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> None:
    """Guard for /admin routes; a no-op when no admin token is configured."""
    admin_token = request.app.state.admin_token
    if not admin_token:
        return
    if not credentials or not secrets.compare_digest(
        credentials.credentials.encode("utf-8"), admin_token.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
