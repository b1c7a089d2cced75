import logging
from typing import Dict
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .utils import verify_token

logger = logging.getLogger("uvicorn")

# auto_error off so a missing header is a 401 rather than FastAPI's 403
security = HTTPBearer(auto_error=False)


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict:
    """
    Resolve the bearer token to the acting user.

    Returns ``{"user_id": UUID, "claims": dict}``.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_token(credentials.credentials)

    raw_user_id = payload.get("user_id")
    try:
        user_id = UUID(str(raw_user_id))
    except (TypeError, ValueError):
        logger.error(f"Token carries an unusable user_id: {raw_user_id!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        )

    return {"user_id": user_id, "claims": payload}
