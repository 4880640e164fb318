from paystore.errors.exceptions import AppError, ValidationError, UnsupportedPhoneFormat, ConfigurationError

__all__= [
    'AppError',
    'ValidationError',
    'UnsupportedPhoneFormat',
    'ConfigurationError',
]
