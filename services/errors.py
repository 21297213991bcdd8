from models.record import RecordKind


class FinanceError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NotFound(FinanceError):
    status_code = 404

    def __init__(self, kind: RecordKind):
        super().__init__(f"{kind.value.capitalize()} not found")


class MissingParameter(FinanceError):
    status_code = 400

    def __init__(self, name: str = "email"):
        super().__init__(f"Missing required parameter: {name}")


class InvalidIdentifier(FinanceError):
    status_code = 400
    message = "Invalid record id"


class StoreUnavailable(FinanceError):
    status_code = 503
    message = "Storage is temporarily unavailable"
