"""
Application exceptions and their translation into dispatcher responses.
Every error raised by a domain service is an AppError subclass; anything else
reaching the dispatcher is treated as an infrastructure failure.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

GENERIC_ERROR_MESSAGE = "Error de comunicación con la base de datos. Intente nuevamente."


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Registro no encontrado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class BusinessRuleViolationException(AppError):
    """Business logic violation error."""
    def __init__(self, message: str = "Operación no permitida", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class UnauthorizedException(AppError):
    """The active session lacks the permission required by the operation."""
    def __init__(self, message: str = "No autorizado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidCredentialsException(AppError):
    """Password did not match the stored hash."""
    def __init__(self, message: str = "Contraseña incorrecta", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class DuplicateKeyException(AppError):
    """A unique column already holds the submitted value."""
    def __init__(self, message: str = "El registro ya existe", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class RequestValidationException(AppError):
    """Malformed or out-of-range request payload."""
    def __init__(self, message: str = "Datos inválidos", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "RequestValidationException":
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        fields = {".".join(str(p) for p in err["loc"]) or "payload": err["msg"] for err in errors}
        first = errors[0]["msg"] if errors else "Datos inválidos"
        return cls(first, {"fields": fields})


class MigrationError(AppError):
    """A schema migration failed; the application must not start."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


def error_response(exc: Exception, channel: str) -> Dict[str, Any]:
    """Build the failure envelope sent back to the UI."""
    if isinstance(exc, AppError):
        return {
            "success": False,
            "error": {
                "code": exc.__class__.__name__,
                "message": exc.message,
                "details": exc.details,
                "channel": channel,
            },
        }

    return {
        "success": False,
        "error": {
            "code": "InternalError",
            "message": GENERIC_ERROR_MESSAGE,
            "details": {},
            "channel": channel,
        },
    }
