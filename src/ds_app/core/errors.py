from __future__ import annotations

from enum import Enum


class DsAppError(Exception):
    """Base application exception."""

    pass


class BadRequest(DsAppError):
    pass


class ErrorKind(str, Enum):
    USER_CANCELLED = "user_cancelled"
    NO_ELIGIBLE_FILES = "no_eligible_files"
    FOLDER_CREATION = "folder_creation"
    PER_FILE_TRANSFER = "per_file_transfer"
    ORIGINAL_DELETION = "original_deletion"
    UNEXPECTED = "unexpected"


class OrganizeError(DsAppError):
    """
    A failure tagged with its kind plus the entry/folder it concerns and the
    underlying cause (if any).
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        name: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.name = name
        self.cause = cause

    @property
    def reason(self) -> str:
        """Short human-readable reason, preferring the underlying cause."""
        if self.cause is not None:
            return str(self.cause) or self.cause.__class__.__name__
        return str(self)


class UserCancelled(OrganizeError):
    def __init__(self, message: str = "Folder selection cancelled") -> None:
        super().__init__(ErrorKind.USER_CANCELLED, message)
