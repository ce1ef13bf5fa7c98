"""
API key route handlers.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from motoscout.core import SearchSession

from ..dependencies import get_session
from ..models import ApiKeyIn, ApiKeyStatus, ApiKeyValidation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["credentials"])


@router.get("/credentials", response_model=ApiKeyStatus)
async def get_credentials_status(session: SearchSession = Depends(get_session)):
    """Tell whether an API key is stored."""
    return ApiKeyStatus(configured=session.has_api_key())


@router.post("/credentials", response_model=ApiKeyValidation)
async def set_credentials(body: ApiKeyIn, session: SearchSession = Depends(get_session)):
    """Validate an API key and store it when it works."""
    if not body.api_key.strip():
        raise HTTPException(status_code=400, detail="Please enter a valid API key")

    valid = await session.configure_api_key(body.api_key)
    if not valid:
        logger.warning("Rejected an invalid API key")
    return ApiKeyValidation(valid=valid)


@router.delete("/credentials", response_model=ApiKeyStatus)
async def delete_credentials(session: SearchSession = Depends(get_session)):
    """Forget the stored API key."""
    session.clear_api_key()
    await session.aclose()
    return ApiKeyStatus(configured=False)
