"""Persistence boundary for documents and marks.

The editing workflow talks only to ``DocumentStoreProtocol``. Real
deployments back it with their own database or RPC layer;
``InMemoryDocumentStore`` implements it for tests and embedding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from readmark.marks.models import Mark
    from readmark.text.spaces import Range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredDocument:
    """A persisted document and its caller-identified non-content ranges."""

    raw: str
    excluded_ranges: tuple[Range, ...] = ()


class DocumentStoreProtocol(Protocol):
    """Protocol for document and mark persistence.

    Implementations store marks with their cleaned-space positions as given;
    they must not reinterpret them.
    """

    def load_document(self) -> StoredDocument:
        """Return the current raw document and its excluded ranges."""
        ...

    def save_document(self, document: StoredDocument) -> None:
        """Persist a new version of the document."""
        ...

    def load_marks(self) -> list[Mark]:
        """Return every mark on the document."""
        ...

    def save_marks(self, marks: Sequence[Mark]) -> None:
        """Replace the stored marks with *marks*."""
        ...


@dataclass
class InMemoryDocumentStore:
    """In-memory implementation of DocumentStoreProtocol.

    Counts saves so tests can assert that no-op edits persist nothing.
    """

    document: StoredDocument
    marks: list[Mark] = field(default_factory=list)
    document_saves: int = 0
    mark_saves: int = 0

    def load_document(self) -> StoredDocument:
        return self.document

    def save_document(self, document: StoredDocument) -> None:
        self.document = document
        self.document_saves += 1
        logger.debug("Saved document (%d chars)", len(document.raw))

    def load_marks(self) -> list[Mark]:
        return list(self.marks)

    def save_marks(self, marks: Sequence[Mark]) -> None:
        self.marks = list(marks)
        self.mark_saves += 1
        logger.debug("Saved %d mark(s)", len(self.marks))
