from .exceptions import DuplicateError

FRIENDLY_MESSAGES = {
    "DuplicateError": "This record already exists.",
    "StorageBackendError": "Temporary issue while accessing data. Please try again shortly.",
    "ValidationError": "Invalid data received. Please check your input and try again.",
    "ValueError": "Invalid data received. Please check your input and try again.",
    "KeyError": "Some required information is missing.",
}

DUPLICATE_FIELD_MESSAGES = {
    "username": "Username already exists",
    "email": "Email already registered",
}


def get_friendly_message(error: Exception) -> str:
    if isinstance(error, DuplicateError):
        return DUPLICATE_FIELD_MESSAGES.get(
            error.field, FRIENDLY_MESSAGES["DuplicateError"]
        )
    for key, msg in FRIENDLY_MESSAGES.items():
        if key.lower() in str(type(error)).lower():
            return msg
    return "Something went wrong on our end. Please try again."
