from typing import Optional

from fast_translatable.exceptions.common_exceptions import AppException


class ModelException(AppException):
    def __init__(self, message: str, *, data: Optional[dict] = None):
        super().__init__(message, data=data)


class ModelNotFoundException(ModelException):
    def __init__(self, model_name: str, *, data: Optional[dict] = None):
        super().__init__(f"Model '{model_name}' not found", data=data)
