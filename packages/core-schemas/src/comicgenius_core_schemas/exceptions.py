"""Exceptions shared by generators, services and the API."""

from typing import Optional


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(ServiceError):
    """Resource not found."""

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code="NOT_FOUND",
        )


class ValidationError(ServiceError):
    """Validation error."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message, code="VALIDATION_ERROR")


class WizardError(ServiceError):
    """Requested wizard transition is not allowed from the current step."""

    def __init__(self, message: str, current_step: int):
        self.current_step = current_step
        super().__init__(message, code="WIZARD_ERROR")


class GenerationError(ServiceError):
    """Error during AI generation."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.details = details or {}
        super().__init__(message, code="GENERATION_ERROR")
