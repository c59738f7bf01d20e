"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class CommentValidationError(DomainError):
    """Raised when a submission or edit fails validation.

    Carries every problem found so callers can render them together.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid comment")


class NotAuthorizedError(DomainError):
    """Raised when a caller may not mutate a comment."""

    def __init__(self, action: str, resource_id: str):
        self.action = action
        self.resource_id = resource_id
        super().__init__(f"Not authorized to {action} comment {resource_id}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidTransitionError(DomainError):
    """Raised when a moderation decision does not apply to the current status."""

    def __init__(self, comment_id: str, current: str, target: str):
        self.comment_id = comment_id
        self.current = current
        self.target = target
        super().__init__(
            f"Comment {comment_id} cannot move from {current} to {target}"
        )
