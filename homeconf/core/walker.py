"""
Layout Walker — Drives the token stream and dispatches item tags

Pass structure:
    1. Record the starting depth (the root element, after begin_document)
    2. Pull tokens until the root closes or the document ends
    3. For each direct child start tag: extract attributes, map the tag
       to a TagKind, hand it to that kind's builder
    4. Folders recurse one level: children must be shortcuts, and the
       folder is validated once its region is consumed

Failure policy:
    - Item failure (including any exception a collaborator raises while
      the item is built): logged, recorded, contributes nothing, walk
      goes on
    - Folder below the minimum: folder and children retracted, and the
      children's outcomes are reported as failures
    - Non-shortcut inside a folder (StructuralError) or unreadable
      document (StreamError): the pass stops and returns what it has

Re-running a pass over the same document inserts the items again under
new identities. There is no de-duplication.

Usage:
    walker = LayoutWalker(context)
    stream.begin_document("favorites")
    count = walker.ingest(stream, Container.DESKTOP)
"""

import logging
from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from .attributes import DEFAULT_NAMESPACE, extract_attributes
from .builders import BUILDERS, BuildContext, FolderValidator, ItemBuilder
from .errors import IngestError, StreamError, StructuralError
from .records import AttributeRecord, Container, FolderRecord
from .results import BuildResult, IngestResult, ItemOutcome
from .tags import TagKind, tag_kind
from .tokens import Token, TokenStream

logger = logging.getLogger(__name__)


class LayoutWalker:
    """
    Walks one layout document into placement records.

    Stateless between passes: every call to ``walk`` starts a fresh
    IngestResult, which is the only thing threaded through recursion.
    """

    def __init__(
        self,
        context: BuildContext,
        namespace: str = DEFAULT_NAMESPACE,
        builders: Optional[Dict[TagKind, ItemBuilder]] = None,
    ):
        self.context = context
        self.namespace = namespace
        self.builders = builders if builders is not None else BUILDERS
        self.validator = FolderValidator()

    # =========================================================================
    # Primary Interface
    # =========================================================================

    def ingest(self, stream: TokenStream, root_container: int = Container.DESKTOP) -> int:
        """Walk the stream and return the number of items placed."""
        return self.walk(stream, root_container).count

    def walk(self, stream: TokenStream, root_container: int = Container.DESKTOP) -> IngestResult:
        """
        Walk the stream from its current depth.

        Never raises: item errors are recorded as failed outcomes, and
        fatal document errors end the pass and are reported on the result.
        """
        result = IngestResult()
        try:
            self._walk_items(stream, root_container, result)
        except StructuralError as e:
            logger.warning("Got exception parsing favorites: %s", e)
            result.abort(str(e))
        except StreamError as e:
            logger.warning("Got exception parsing favorites.", exc_info=True)
            result.abort(str(e))
        return result

    # =========================================================================
    # Traversal
    # =========================================================================

    @staticmethod
    def _child_tags(stream: TokenStream, depth: int) -> Iterator[Token]:
        """
        Yield start tags exactly one level below ``depth``.

        Stops at the end tag that closes ``depth`` or at end of document.
        Deeper tags are consumed and ignored.
        """
        while True:
            token = stream.next()
            if token.is_end_document:
                return
            if token.is_end and token.depth <= depth:
                return
            if token.is_start and token.depth == depth + 1:
                yield token

    def _walk_items(self, stream: TokenStream, container: int, result: IngestResult) -> None:
        depth = stream.depth
        for token in self._child_tags(stream, depth):
            kind = tag_kind(token.name)
            if kind is TagKind.UNKNOWN:
                logger.debug("Skipping unknown tag <%s>", token.name)
                continue

            attrs = extract_attributes(token.attributes, self.namespace, container)
            if kind is TagKind.FOLDER:
                self._place_folder(stream, token, attrs, result)
            else:
                outcome = self._place_item(token, kind, attrs)
                result.add(outcome)

    def _build(self, token: Token, kind: TagKind, attrs: AttributeRecord) -> BuildResult:
        """Run a builder; a collaborator blowing up fails only this item."""
        try:
            return self.builders[kind].build(attrs, self.context)
        except Exception as e:
            logger.warning("Error building <%s>", token.name, exc_info=True)
            return BuildResult.failure(f"{e.__class__.__name__}: {e}")

    def _place_item(self, token: Token, kind: TagKind, attrs: AttributeRecord) -> ItemOutcome:
        built = self._build(token, kind, attrs)
        if built.failed:
            self._compensate(built)
            logger.warning("Failed to add <%s>: %s", token.name, built.reason)
        else:
            logger.debug("Added <%s> as #%s", token.name, built.identity)
        return self._outcome(token, kind, attrs.container, built)

    def _place_folder(self, stream: TokenStream, token: Token, attrs: AttributeRecord, result: IngestResult) -> None:
        built = self._build(token, TagKind.FOLDER, attrs)
        if built.failed:
            self._compensate(built)
            logger.warning("Failed to add <%s>: %s", token.name, built.reason)
            result.add(self._outcome(token, TagKind.FOLDER, attrs.container, built))
            # Nothing inside a folder that does not exist is placed
            for _ in self._child_tags(stream, token.depth):
                pass
            return

        folder = FolderRecord(built.record)
        # Child outcomes are held until the folder is known to stay
        children: List[ItemOutcome] = []
        try:
            self._walk_folder(stream, token.depth, folder, children)
        except IngestError:
            # Partial folder is removed before the error ends the pass
            self.validator.rollback(folder, self.context)
            self._add_children(result, children, retracted_with=folder.id)
            raise

        if self.validator.validate(folder, self.context):
            self._add_children(result, children)
            result.add(self._outcome(token, TagKind.FOLDER, attrs.container, built))
        else:
            self._add_children(result, children, retracted_with=folder.id)
            result.add(ItemOutcome(
                tag=token.name,
                kind=TagKind.FOLDER.name.lower(),
                success=False,
                container=attrs.container,
                reason=f"folder needs {self.context.min_folder_children} items, got {len(folder.children)}",
            ))

    def _walk_folder(self, stream: TokenStream, depth: int, folder: FolderRecord,
                     outcomes: List[ItemOutcome]) -> None:
        for token in self._child_tags(stream, depth):
            if tag_kind(token.name) is not TagKind.SHORTCUT:
                raise StructuralError(token.name, folder.id)

            attrs = extract_attributes(token.attributes, self.namespace, folder.id)
            outcome = self._place_item(token, TagKind.SHORTCUT, attrs)
            if outcome.success:
                folder.children.append(outcome.identity)
            outcomes.append(outcome)

    @staticmethod
    def _add_children(result: IngestResult, children: List[ItemOutcome],
                      retracted_with: Optional[int] = None) -> None:
        """Record folder children; none of them count toward the pass."""
        for outcome in children:
            if retracted_with is not None and outcome.success:
                outcome = replace(
                    outcome,
                    success=False,
                    identity=None,
                    reason=f"retracted with folder #{retracted_with}",
                )
            result.add(outcome, counted=False)

    # =========================================================================
    # Compensation
    # =========================================================================

    def _compensate(self, built: BuildResult) -> None:
        """Remove a row a failed builder had already written."""
        if built.persisted_id is not None:
            logger.info("Removing #%s left by a failed item", built.persisted_id)
            self.context.store.retract(built.persisted_id)

    @staticmethod
    def _outcome(token: Token, kind: TagKind, container: int, built: BuildResult) -> ItemOutcome:
        return ItemOutcome(
            tag=token.name,
            kind=kind.name.lower(),
            success=built.success,
            identity=built.identity,
            container=container,
            reason=built.reason,
        )
