"""User-facing text for error kinds returned by the services."""
from typing import Optional

from ..models import ErrorKind
from ..utils import EMAIL, PHONE

ERROR_MESSAGES = {
    ErrorKind.NOT_REGISTERED: "Please create an account first",
    ErrorKind.INCORRECT_CREDENTIAL: "Incorrect password",
    ErrorKind.ACCOUNT_EXISTS: "Account already exists. Please log in instead.",
    ErrorKind.INCORRECT_SECURITY_ANSWER: "Incorrect answer to the security question",
    ErrorKind.NO_SECURITY_QUESTION: "No security question is set for this account",
    ErrorKind.INVALID_INPUT: "Please check the details and try again",
    ErrorKind.ALREADY_RELEASED: "Invites have already been sent",
    ErrorKind.SYNC_FAILED: "Could not reach the sync service. Please try again.",
}

_NOT_FOUND = {
    EMAIL: "No account found with this email",
    PHONE: "No account found with this phone number",
}

_INVITATION_NOT_FOUND = {
    EMAIL: "No invitation found for this email. Ask your team admin to add you.",
    PHONE: "No invitation found for this phone number. Ask your team admin to add you.",
}


def error_message(error: Optional[ErrorKind], identifier_kind: str = EMAIL) -> str:
    """
    Text to show the user for a failed operation.

    Args:
        error: Error kind from a result
        identifier_kind: "email" or "phone", for messages that name the identifier

    Returns:
        Message suitable for display
    """
    if error is None:
        return ""
    if error == ErrorKind.NOT_FOUND:
        return _NOT_FOUND.get(identifier_kind, _NOT_FOUND[EMAIL])
    if error == ErrorKind.INVITATION_NOT_FOUND:
        return _INVITATION_NOT_FOUND.get(identifier_kind, _INVITATION_NOT_FOUND[EMAIL])
    return ERROR_MESSAGES.get(error, "Something went wrong")
