"""
AchieveTrack Errors

Structured conditions raised by the verification service, the profile
service and the store. Each carries enough detail to render a message.
"""

from achievetrack.utils.validation import SchemaValidationError


class UnauthorizedError(PermissionError):
    """Raised when the caller lacks the capability an action requires."""
    def __init__(self, action: str, required: str, principal: str | None = None):
        super().__init__(f"Unauthorized: {action} requires {required}")
        self.action = action
        self.required = required
        self.principal = principal


class StudentIdMismatchError(UnauthorizedError):
    """Raised when a student submits an achievement for another student id."""
    def __init__(self, expected: str | None, actual: str, principal: str | None = None):
        super().__init__(
            action="create achievement",
            required=f"student id matching the caller profile ({expected})",
            principal=principal,
        )
        self.expected = expected
        self.actual = actual


class InvalidTransitionError(RuntimeError):
    """Raised when a status transition is not in the transition table."""
    def __init__(self, achievement_id: str, current: str, target: str):
        super().__init__(
            f"Invalid transition for {achievement_id}: {current} -> {target}"
        )
        self.achievement_id = achievement_id
        self.current = current
        self.target = target


class NotFoundError(LookupError):
    """Raised when a referenced record does not exist in the store."""
    kind = "record"

    def __init__(self, key: str):
        super().__init__(f"{self.kind.capitalize()} not found: {key}")
        self.key = key


class AchievementNotFoundError(NotFoundError):
    kind = "achievement"


class ProfileNotFoundError(NotFoundError):
    kind = "profile"


class DuplicateAchievementError(ValueError):
    """Raised by the store when an achievement id already exists."""
    def __init__(self, achievement_id: str):
        super().__init__(f"Achievement already exists: {achievement_id}")
        self.achievement_id = achievement_id


class ImmutableFieldError(ValueError):
    """Raised when a profile update touches a field fixed at creation."""
    def __init__(self, field: str):
        super().__init__(f"Profile field '{field}' cannot be changed")
        self.field = field


def user_message(exc: BaseException) -> str:
    """
    Map a raised condition to the text shown to end users.

    Specific subclasses are matched before their parents.
    """
    if isinstance(exc, StudentIdMismatchError):
        return "Student ID does not match your profile."
    if isinstance(exc, UnauthorizedError):
        return "You do not have permission to perform this action."
    if isinstance(exc, InvalidTransitionError):
        if exc.current == "pending":
            return "An achievement can only be marked verified or rejected."
        return f"This achievement has already been {exc.current} and cannot be changed."
    if isinstance(exc, NotFoundError):
        return "The requested item was not found."
    if isinstance(exc, DuplicateAchievementError):
        return "This item already exists. Please use a different identifier."
    if isinstance(exc, ImmutableFieldError):
        return f"The {exc.field.replace('_', ' ')} of a profile cannot be changed."
    if isinstance(exc, SchemaValidationError):
        return "Invalid input. Please check your data and try again."
    return "An unexpected error occurred. Please try again."
