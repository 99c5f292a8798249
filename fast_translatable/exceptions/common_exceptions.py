from typing import Optional

from fast_translatable.utils.serialisation import get_exception_error_type


class AppException(Exception):
    def __init__(self,
        message: str,
        *,
        error_type: Optional[str] = None,
        data: Optional[dict] = None
    ):
        """
        Universal package exception.

        Args:
            message: The error message.
            error_type: Machine readable error type (inferred from the class name if not provided).
            data: Extra context for the caller.
        """
        self.message = message
        self.error_type = error_type or get_exception_error_type(self)
        self.data = data
        super().__init__(message)

    def dict(self) -> dict:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "data": self.data,
        }


class DatabaseNotInitializedException(RuntimeError):
    def __init__(self):
        super().__init__("Database is not initialized.")


class EnvMissingException(ValueError):
    def __init__(self, env_name: str):
        super().__init__(f"[ENV MISSING] Missing required environment variable: `{env_name}`")
