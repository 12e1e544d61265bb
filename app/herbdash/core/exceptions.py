from http import HTTPStatus

HTTP_400_BAD_REQUEST = HTTPStatus.BAD_REQUEST.value
HTTP_500_INTERNAL_SERVER_ERROR = HTTPStatus.INTERNAL_SERVER_ERROR.value
HTTP_422_UNPROCESSABLE_ENTITY = HTTPStatus.UNPROCESSABLE_ENTITY.value


class AppException(Exception):
    """Base exception for the engine."""
    def __init__(self, message: str, status_code: int = HTTP_400_BAD_REQUEST):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# Classification exceptions
class ClassificationException(AppException):
    """Raised for errors during classification."""
    def __init__(self, message: str = "Classification failed."):
        super().__init__(message, status_code=HTTP_400_BAD_REQUEST)


# Validation exceptions
class ValidationException(AppException):
    """Raised for validation errors."""
    def __init__(self, message: str = "Validation failed."):
        super().__init__(message, status_code=HTTP_422_UNPROCESSABLE_ENTITY)


class InputValidationException(ValidationException):
    """Raised when an input mapping holds values that cannot be read as numbers."""
    def __init__(self, message: str = "Input validation failed."):
        super().__init__(message)


class InputShapeException(ValidationException):
    """Raised when a feature vector does not match its modality's feature count."""
    def __init__(self, modality: str, expected: int, actual: int):
        super().__init__(
            f"{modality} sample requires {expected} feature values, got {actual}."
        )
        self.modality = modality
        self.expected = expected
        self.actual = actual


# Configuration and setup exceptions
class ConfigurationException(AppException):
    """Raised for configuration errors."""
    def __init__(self, message: str = "Configuration error."):
        super().__init__(message, status_code=HTTP_500_INTERNAL_SERVER_ERROR)


class ReferenceDataException(ConfigurationException):
    """Raised when the bundled reference data is missing or malformed."""
    def __init__(self, message: str = "Reference data is malformed."):
        super().__init__(message)


class ModelConfigurationException(ConfigurationException):
    """Raised for model configuration errors."""
    def __init__(self, message: str = "Model configuration error."):
        super().__init__(message)
