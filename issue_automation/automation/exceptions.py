"""Custom exceptions for the automation module."""


class PartialClaimError(Exception):
    """Raised when the handoff comment was posted but the doing label could not be added.

    The comment is not rolled back, so the issue must be reconciled by hand:
    either add the label or delete the comment.
    """

    def __init__(self, issue_number: int, comment_body: str, doing_label: str, cause: Exception) -> None:
        """Initialize the error with everything needed to reconcile the issue manually."""
        super().__init__(
            f"Partial claim of issue #{issue_number}: comment was posted but adding label '{doing_label}' failed ({cause}). "
            f"Add the '{doing_label}' label or remove the comment manually."
        )
        self.issue_number = issue_number
        self.comment_body = comment_body
        self.doing_label = doing_label
        self.cause = cause
