import logging

from fastapi import Request
from firebase_admin import firestore

from core.config import Settings
from core.firebase import initialize_firebase

logger = logging.getLogger(__name__)


class Database:
    """
    Явний хендл на Firestore: відкривається на старті застосунку,
    закривається на завершенні (див. lifespan у main.py).

    firebase-admin кешує клієнт Firestore на рівні застосунку Firebase,
    тому після close() повторний connect() у тому ж процесі отримає
    вже закритий клієнт. Один connect/close на процес.
    """

    def __init__(self, client):
        self._client = client

    @classmethod
    def connect(cls, settings: Settings) -> "Database":
        initialize_firebase(settings)
        client = firestore.client()
        # Пінг: дешевий запит, щоб одразу побачити проблеми з доступом
        list(client.collection(settings.INCOME_COLLECTION).limit(1).stream())
        logger.info("Firestore connected")
        return cls(client)

    def collection(self, name: str):
        return self._client.collection(name)

    def close(self):
        if self._client is not None:
            close = getattr(self._client, "close", None)
            if close:
                close()
            self._client = None
            logger.info("Firestore connection closed")


# Dependency helper

def get_db(request: Request) -> Database:
    return request.app.state.db
