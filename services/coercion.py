import math
from datetime import date, datetime


def coerce_amount(value) -> float:
    """
    Приводить amount до float. Все, що не є скінченним числом, дає 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def parse_record_date(value) -> date:
    """
    Дата запису для сортування. Нерозпізнане значення вважаємо найранішою датою.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            # "2024-01-01T00:00:00Z" та подібні форми
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    return date.min
