# Файл конфігурації, завантажує змінні з .env
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(extra="ignore", env_file=".env")

    # 1. Firebase
    # Без ключа використовуються Application Default Credentials
    FIREBASE_SERVICE_ACCOUNT_KEY_PATH: str | None = None
    FIREBASE_PROJECT_ID: str | None = None

    # 2. Колекції Firestore
    INCOME_COLLECTION: str = "incomes"
    EXPENSE_COLLECTION: str = "expenses"

    # 3. Мультитенантність: кожен запис належить власнику (userEmail)
    MULTI_TENANT: bool = False

    # 4. Іконка за замовчуванням
    DEFAULT_ICON: str = "💰"

    # 5. CORS (кома-сепарейтед)
    FRONTEND_ORIGIN: str = ""

    # 6. Логи
    LOG_LEVEL: str = "INFO"


settings = Settings()


def get_settings() -> Settings:
    return settings
