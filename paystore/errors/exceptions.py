class AppError(Exception):
    status_code = 500
    error = "Application error"

    def __init__(self, message, status_code=None):
        super().__init__(message)
        if status_code:
            self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    status_code = 400
    error = "Validation error"


class UnsupportedPhoneFormat(ValidationError):
    error = "Unsupported phone format"


class ConfigurationError(AppError):
    status_code = 500
    error = "Configuration missing"
