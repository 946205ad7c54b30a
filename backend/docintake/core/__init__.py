# docintake/core/__init__.py
from docintake.core.errors import AppError
from docintake.core.error_codes import ErrorCode
from docintake.core.error_reasons import ErrorReason

__all__ = ["AppError", "ErrorCode", "ErrorReason"]
