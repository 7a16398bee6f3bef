from typing import Optional, Any

class SpendWiseError(Exception):
    """
    Base exception for SpendWise application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(SpendWiseError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class UserNotFoundError(ResourceNotFoundError):
    """
    Raised when a signin or lookup targets an unregistered phone number.
    """
    def __init__(self, message: str = "User not found", details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "USER_NOT_FOUND"

class UserNotRegisteredError(SpendWiseError):
    """
    Raised when an expense is written for a user that does not exist.
    """
    def __init__(self, message: str = "User not found. Please signup.", details: Optional[Any] = None):
        super().__init__(message, code="USER_NOT_REGISTERED", status_code=404, details=details)

class ValidationError(SpendWiseError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class InvalidOtpError(SpendWiseError):
    """
    Raised when the OTP provider rejects a code.
    """
    def __init__(self, message: str = "Invalid OTP", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_OTP", status_code=400, details=details)

class NoChallengeFoundError(SpendWiseError):
    """
    Raised when verifying a number with no pending OTP request.
    """
    def __init__(self, message: str = "No OTP request found for this number", details: Optional[Any] = None):
        super().__init__(message, code="NO_CHALLENGE_FOUND", status_code=400, details=details)

class OtpSendError(SpendWiseError):
    """
    Raised when the OTP provider refuses to start a verification.
    """
    def __init__(self, message: str = "Error in sending otp", details: Optional[Any] = None):
        super().__init__(message, code="OTP_SEND_FAILED", status_code=400, details=details)

class UserAlreadyExistsError(SpendWiseError):
    """
    Raised when a signup targets an already registered phone number.
    """
    def __init__(self, message: str = "User already exists", details: Optional[Any] = None):
        super().__init__(message, code="USER_ALREADY_EXISTS", status_code=409, details=details)

class StoreError(SpendWiseError):
    """
    Raised when a database read or write fails.
    """
    def __init__(self, message: str = "Database error", details: Optional[Any] = None):
        super().__init__(message, code="STORE_ERROR", status_code=500, details=details)

class ExternalServiceError(SpendWiseError):
    """
    Raised when an external service (e.g., Gemini, Vonage) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)
