from enum import Enum


class FeaturepickError(Exception):
    """Base class for errors raised by featurepick."""


class GitUnavailableError(FeaturepickError):
    """Git cannot be invoked at all (missing binary, not a repository)."""


class SearchError(FeaturepickError):
    """A single history search failed. Never fatal to a selection."""

    def __init__(self, query: str, message: str):
        self.query = query
        self.message = message
        super().__init__(f"Search for '{query}' failed: {message}")


class CommitListErrorType(str, Enum):
    MISSING = "Commit list not found"
    MALFORMED = "Malformed commit list"


class CommitListError(FeaturepickError):
    def __init__(self, error_type: CommitListErrorType, message: str):
        self.error_type = error_type
        self.message = message
        super().__init__(f"{error_type.value}: {message}")


class Cancelled(FeaturepickError):
    """The operator aborted the pick session.

    Carries the session so callers can report what was applied before the
    abort. This is a deliberate termination, not a failure.
    """

    def __init__(self, session):
        self.session = session
        current = session.current_commit
        where = f" at {current.short_sha}" if current is not None else ""
        super().__init__(f"Cherry-pick session cancelled by operator{where}")
