# Ініціалізація Firebase Admin та перевірка ID токенів.
import logging

import firebase_admin
from firebase_admin import auth, credentials

from core.config import Settings

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Токен невалідний, прострочений або без email."""


class ProviderUnavailable(Exception):
    """Firebase Auth не ініціалізований."""


def initialize_firebase(settings: Settings) -> firebase_admin.App:
    if firebase_admin._apps:
        return firebase_admin.get_app()

    options = {}
    if settings.FIREBASE_PROJECT_ID:
        options["projectId"] = settings.FIREBASE_PROJECT_ID

    if settings.FIREBASE_SERVICE_ACCOUNT_KEY_PATH:
        cred = credentials.Certificate(settings.FIREBASE_SERVICE_ACCOUNT_KEY_PATH)
    else:
        cred = credentials.ApplicationDefault()

    app = firebase_admin.initialize_app(cred, options or None)
    logger.info("Firebase Admin initialized")
    return app


class FirebaseIdentityVerifier:
    def verify(self, token: str) -> str:
        """
        Перевіряє Firebase ID Token і повертає email користувача.
        """
        if not firebase_admin._apps:
            raise ProviderUnavailable("Firebase not initialized")

        try:
            # Невеликий допуск по часу (макс 60 сек за Firebase SDK)
            decoded_token = auth.verify_id_token(token, clock_skew_seconds=60)
        except (auth.ExpiredIdTokenError, auth.InvalidIdTokenError) as e:
            raise IdentityError("Token invalid or expired") from e
        except auth.CertificateFetchError as e:
            raise ProviderUnavailable("Could not fetch token certificates") from e
        except ValueError as e:
            raise IdentityError("Could not validate credentials") from e

        email = decoded_token.get("email")
        if not email:
            raise IdentityError("Token has no email claim")
        return email
