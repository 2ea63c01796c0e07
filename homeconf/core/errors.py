"""
Errors — Exceptions raised in one layer and handled in another

Only two of these are fatal to an ingestion pass (StreamError,
StructuralError). The rest are converted into failed BuildResults by
the builders and never reach the walker.
"""

from typing import Optional


class IngestError(Exception):
    """Base class for all ingestion errors."""


class StreamError(IngestError):
    """
    Raised by token readers when the document cannot be read.

    Covers malformed XML, an unexpected root tag, and I/O failures.
    The original exception is kept on ``cause``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class StructuralError(IngestError):
    """Raised when a folder contains something other than a shortcut."""

    def __init__(self, tag: str, folder_id: int):
        self.tag = tag
        self.folder_id = folder_id
        super().__init__(
            f"Folders can contain only shortcuts: found <{tag}> in folder {folder_id}"
        )


class StoreError(IngestError):
    """Raised by a placement store when an insert is rejected."""


class WidgetBindError(IngestError):
    """Raised by a widget host when an instance cannot be bound."""
