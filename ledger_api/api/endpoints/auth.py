"""
Sign-in endpoint.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledger_api.core.database import get_db
from ledger_api.core.exceptions import APIError, InternalError
from ledger_api.schemas.user import SignInRequest, TokenResponse
from ledger_api.services import auth_service

router = APIRouter(prefix="/api", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/signin", response_model=TokenResponse)
def signin(request: SignInRequest, db: Session = Depends(get_db)):
    """
    Authenticate with username/password.

    Returns a bearer token valid for ACCESS_TOKEN_EXPIRE_DAYS.
    """
    try:
        token = auth_service.sign_in(db, request.username, request.password)
    except APIError:
        raise
    except Exception as e:
        logger.exception(f"Error during sign-in: {e}")
        raise InternalError()

    return TokenResponse(token=token, username=request.username)
