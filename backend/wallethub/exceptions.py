"""Domain errors raised by the service layer."""


class UserNotFoundError(LookupError):
    """Raised when an operation requires a user row that does not exist."""

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id
