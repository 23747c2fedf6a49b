"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  9xxx: System / configuration
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class CronUnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(1101, "Unauthorized", 401)


# --- 9xxx: System ---

class CronSecretNotConfiguredError(AppError):
    def __init__(self) -> None:
        super().__init__(9101, "Cron secret not configured", 500)


class PriceFeedNotConfiguredError(AppError):
    def __init__(self) -> None:
        super().__init__(9102, "Price feed credentials not configured", 500)


class SettlementRunError(AppError):
    """Pass-wide failure: the open market set could not be loaded."""

    def __init__(self, detail: str) -> None:
        super().__init__(9103, f"Settlement pass failed: {detail}", 500)


class SettlementConfigError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9104, f"Invalid settlement configuration: {detail}", 500)
