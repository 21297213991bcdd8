# Залежності (Dependencies) для FastAPI
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings
from core.firebase import FirebaseIdentityVerifier, IdentityError, ProviderUnavailable
from database import Database, get_db
from models.record import RecordKind
from services.record_repository import RecordRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_verifier() -> FirebaseIdentityVerifier:
    return FirebaseIdentityVerifier()


def get_owner_email(
    email: Optional[str] = Query(default=None),
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    verifier: FirebaseIdentityVerifier = Depends(get_identity_verifier),
) -> Optional[str]:
    """
    Визначає власника записів для запиту.
    Email з перевіреного токена завжди має пріоритет над параметром ?email=.
    У мультитенантному режимі без валідного токена: 401.
    """
    if not creds or not creds.credentials:
        if settings.MULTI_TENANT:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return email or None

    try:
        return verifier.verify(creds.credentials)
    except ProviderUnavailable as e:
        logger.error(f"Identity provider unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity provider unavailable",
        )
    except IdentityError as e:
        logger.warning(f"Token validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalid or expired",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_income_repository(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RecordRepository:
    return RecordRepository(db, RecordKind.INCOME, settings)


def get_expense_repository(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RecordRepository:
    return RecordRepository(db, RecordKind.EXPENSE, settings)
