"""
Application-layer exceptions.

These exceptions are used across application, infrastructure and API layers.
Duplicate, delete and reorder raise them to the caller; counting never does.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from application.batching import CommitOutcome


class CascadeError(Exception):
    """Base class for errors raised by cascade operations."""

    pass


class SourceNotFoundError(CascadeError):
    """The scope document does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Source document not found: {path}")
        self.path = path


class OwnershipMismatchError(CascadeError):
    """The source document belongs to a different user than the caller."""

    def __init__(self, path: str, user_id: str):
        super().__init__(f"User {user_id} does not own {path}")
        self.path = path
        self.user_id = user_id


class InvalidScopeError(CascadeError):
    """The scope, selection or reorder request does not identify a valid target."""

    pass


class MalformedDocumentError(CascadeError):
    """A stored document does not match the model for its kind."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Malformed document {path}: {reason}")
        self.path = path
        self.reason = reason


class BatchCommitError(CascadeError):
    """
    One or more write batches failed to commit.

    Batches are atomic individually but not with respect to each other:
    batches that committed before the failure stay committed. ``outcome``
    tells the caller how far the operation got.
    """

    def __init__(self, message: str, outcome: Optional["CommitOutcome"] = None):
        super().__init__(message)
        self.outcome = outcome

    @property
    def partially_completed(self) -> bool:
        return bool(self.outcome and self.outcome.partially_completed)


class CascadeAbortedError(BatchCommitError):
    """
    A read failed after some write batches had already committed.

    The committed batches are not rolled back; ``outcome`` reports them and
    the original error is chained as ``__cause__``.
    """

    @property
    def partially_completed(self) -> bool:
        return bool(self.outcome and self.outcome.committed_batches)
