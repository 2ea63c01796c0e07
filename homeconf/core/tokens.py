"""
Token Stream — Pull-style structural events over a layout document

The walker never sees XML. It pulls Tokens (start tag, end tag, end of
document) from a TokenStream and tracks nesting through ``depth``.

XmlTokenStream is the reference reader. It feeds expat incrementally
and hands out events one at a time, so a large document is never held
in memory. Namespace processing is off: attribute names arrive exactly
as written (``launcher:screen``), whether or not the prefix is bound.

Depth follows the pull-parser convention: the root element is depth 1,
and an end tag reports the same depth as its start tag.

Usage:
    with XmlTokenStream.from_path(Path("workspace.xml")) as stream:
        stream.begin_document("favorites")
        for token in stream:
            ...
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Deque, Dict, Iterator, Optional, Union, IO
from xml.parsers import expat

from .errors import StreamError


class TokenType(Enum):
    START_TAG = "start_tag"
    END_TAG = "end_tag"
    END_DOCUMENT = "end_document"


@dataclass(frozen=True)
class Token:
    """One structural event."""
    type: TokenType
    name: str = ""
    depth: int = 0
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_start(self) -> bool:
        return self.type is TokenType.START_TAG

    @property
    def is_end(self) -> bool:
        return self.type is TokenType.END_TAG

    @property
    def is_end_document(self) -> bool:
        return self.type is TokenType.END_DOCUMENT


class TokenStream(ABC):
    """
    Abstract pull-style reader.

    Finite and not restartable. Implementations raise StreamError for
    malformed input or I/O failure. Once END_DOCUMENT has been returned
    every further call returns END_DOCUMENT again.
    """

    _consumed_depth = 0

    @abstractmethod
    def _pull(self) -> Token:
        """Produce the next structural event."""
        pass

    def next(self) -> Token:
        """Return the next structural event and update ``depth``."""
        token = self._pull()
        if token.is_start:
            self._consumed_depth = token.depth
        elif token.is_end:
            self._consumed_depth = token.depth - 1
        return token

    @property
    def depth(self) -> int:
        """
        Depth of the innermost element still open after the last token.

        1 right after the root start tag; back to 0 after its end tag.
        """
        return self._consumed_depth

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            yield token
            if token.is_end_document:
                return

    def begin_document(self, root_tag: str) -> Token:
        """
        Advance to the root start tag.

        Raises:
            StreamError: If the document has no elements or the first
                element is not ``root_tag``
        """
        token = self.next()
        while not token.is_start and not token.is_end_document:
            token = self.next()
        if token.is_end_document:
            raise StreamError("No start tag found")
        if token.name != root_tag:
            raise StreamError(
                f"Unexpected start tag: found {token.name}, expected {root_tag}"
            )
        return token


class XmlTokenStream(TokenStream):
    """TokenStream over XML text or a file, parsed incrementally with expat."""

    def __init__(self, source: Union[str, bytes, IO], chunk_size: int = 16 * 1024, name: str = "<document>"):
        """
        Args:
            source: Full document text/bytes, or an open file object
            chunk_size: Bytes fed to the parser per refill
            name: Label used in error messages
        """
        self.name = name
        self.chunk_size = chunk_size
        self._pending: Deque[Token] = deque()
        self._parse_depth = 0
        self._done = False
        self._error: Optional[StreamError] = None
        self._owned: Optional[IO] = None

        if isinstance(source, str):
            source = source.encode("utf-8")
        if isinstance(source, bytes):
            self._text: Optional[bytes] = source
            self._offset = 0
            self._file: Optional[IO] = None
        else:
            self._text = None
            self._file = source

        self._parser = expat.ParserCreate()
        self._parser.buffer_text = True
        self._parser.StartElementHandler = self._on_start
        self._parser.EndElementHandler = self._on_end

    @classmethod
    def from_path(cls, path: Path, chunk_size: int = 16 * 1024) -> "XmlTokenStream":
        """
        Open a document file for streaming.

        Raises:
            StreamError: If the file cannot be opened
        """
        try:
            handle = open(path, "rb")
        except OSError as e:
            raise StreamError(f"Cannot open {path}: {e}", cause=e)
        stream = cls(handle, chunk_size=chunk_size, name=str(path))
        stream._owned = handle
        return stream

    @classmethod
    def from_text(cls, text: Union[str, bytes]) -> "XmlTokenStream":
        return cls(text)

    # =========================================================================
    # Parser callbacks
    # =========================================================================

    def _on_start(self, name: str, attributes: Dict[str, str]) -> None:
        self._parse_depth += 1
        self._pending.append(Token(TokenType.START_TAG, name, self._parse_depth, dict(attributes)))

    def _on_end(self, name: str) -> None:
        self._pending.append(Token(TokenType.END_TAG, name, self._parse_depth))
        self._parse_depth -= 1

    # =========================================================================
    # Pulling
    # =========================================================================

    def _pull(self) -> Token:
        # Events parsed before a failure are still handed out; the error
        # surfaces only once they are drained.
        while not self._pending:
            if self._error is not None:
                raise self._error
            if self._done:
                return Token(TokenType.END_DOCUMENT)
            self._fill()
        return self._pending.popleft()

    def _read_chunk(self) -> Union[str, bytes]:
        if self._file is not None:
            return self._file.read(self.chunk_size)
        chunk = self._text[self._offset:self._offset + self.chunk_size]
        self._offset += len(chunk)
        return chunk

    def _fill(self) -> None:
        """Feed the next chunk to expat. Marks the stream done at EOF."""
        try:
            chunk = self._read_chunk()
            final = not chunk
            self._parser.Parse(chunk, final)
        except expat.ExpatError as e:
            self._error = StreamError(f"Malformed document {self.name}: {e}", cause=e)
            final = True
        except OSError as e:
            self._error = StreamError(f"Cannot read {self.name}: {e}", cause=e)
            final = True

        if final:
            self._done = True
            self.close()

    def close(self) -> None:
        """Close the underlying file if this stream opened it."""
        if self._owned is not None:
            self._owned.close()
            self._owned = None

    def __enter__(self) -> "XmlTokenStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
