"""
Result types returned by fallible operations.

Expected failures are reported through these results rather than raised.
Each failure carries an ErrorKind; turning a kind into text for the user is
the presentation layer's job.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .messaging import Notification


class ErrorKind(Enum):
    """Why an operation failed."""
    NOT_FOUND = "not_found"
    NOT_REGISTERED = "not_registered"
    INCORRECT_CREDENTIAL = "incorrect_credential"
    ACCOUNT_EXISTS = "account_exists"
    INVITATION_NOT_FOUND = "invitation_not_found"
    INCORRECT_SECURITY_ANSWER = "incorrect_security_answer"
    NO_SECURITY_QUESTION = "no_security_question"
    INVALID_INPUT = "invalid_input"
    ALREADY_RELEASED = "already_released"
    SYNC_FAILED = "sync_failed"


@dataclass
class LoginResult:
    """
    Outcome of a login attempt.

    Attributes:
        success: Whether the credentials were accepted
        error: Failure reason when success is False
        player_id: Signed-in player when a single team matched
        multiple_teams: The identifier belongs to several teams and a
            choice is pending
        team_count: Number of matching teams when multiple_teams is set
    """
    success: bool
    error: Optional[ErrorKind] = None
    player_id: Optional[str] = None
    multiple_teams: bool = False
    team_count: Optional[int] = None

    @classmethod
    def failure(cls, error: ErrorKind) -> "LoginResult":
        return cls(success=False, error=error)


@dataclass
class RegistrationResult:
    """Outcome of creating or claiming an account."""
    success: bool
    error: Optional[ErrorKind] = None
    player_id: Optional[str] = None
    team_id: Optional[str] = None

    @classmethod
    def failure(cls, error: ErrorKind) -> "RegistrationResult":
        return cls(success=False, error=error)


@dataclass
class ReleaseResult:
    """Outcome of changing a game or event's invite-release option."""
    success: bool
    error: Optional[ErrorKind] = None
    notifications: List[Notification] = field(default_factory=list)


@dataclass
class SyncResult:
    """Outcome of a call to the remote sync service."""
    success: bool
    error: Optional[ErrorKind] = None
    detail: Optional[str] = None
    team_id: Optional[str] = None
    snapshot: Optional[dict] = None
