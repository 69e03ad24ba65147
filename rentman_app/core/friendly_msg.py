from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

DEFAULT_MESSAGE = "Something went wrong on our end. Please try again."

# first match wins, so subclasses come before their bases
FRIENDLY_MESSAGES = (
    (IntegrityError, "The change conflicts with existing data."),
    (OperationalError, "Temporary issue while accessing data. Please try again shortly."),
    (DBAPIError, "Temporary issue while accessing data. Please try again shortly."),
    (TimeoutError, "The request took too long. Please try again later."),
    (ConnectionError, "Unable to connect to a required service. Please try again later."),
    (PermissionError, "You don't have permission to perform this action."),
    (ValueError, "Invalid data received. Please check your input and try again."),
    (KeyError, "Some required information is missing."),
)


def get_friendly_message(error: Exception) -> str:
    for error_type, message in FRIENDLY_MESSAGES:
        if isinstance(error, error_type):
            return message
    return DEFAULT_MESSAGE
