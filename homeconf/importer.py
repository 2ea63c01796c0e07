"""
Layout Importer — One-call ingestion of a layout document

Wires the configured collaborators into a LayoutWalker and runs a pass
over a file or in-memory text. Document-level failures (missing file,
wrong root element, malformed XML) never raise: they come back as an
aborted IngestResult carrying whatever was placed before the failure.

Usage:
    importer = LayoutImporter.from_config(config, store, registry)
    result = importer.load_favorites(Path("default_workspace.xml"))
    print(result.summary())
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .config import Config, ConfigError, parse_span
from .core.attributes import DEFAULT_NAMESPACE
from .core.builders import DEFAULT_CLOCK_COMPONENT, BuildContext
from .core.errors import StreamError
from .core.records import Container, container_from_string
from .core.results import IngestResult
from .core.tags import ROOT_TAG
from .core.tokens import TokenStream, XmlTokenStream
from .core.walker import LayoutWalker
from .services.locale import SystemLocaleProvider
from .services.registry import ManifestRegistry
from .services.store import FavoritesStore
from .services.widgets import LocalWidgetHost

logger = logging.getLogger(__name__)


class LayoutImporter:
    """Runs ingestion passes against one build context."""

    def __init__(
        self,
        context: BuildContext,
        root_tag: str = ROOT_TAG,
        namespace: str = DEFAULT_NAMESPACE,
        root_container: int = Container.DESKTOP,
    ):
        self.context = context
        self.root_tag = root_tag
        self.root_container = root_container
        self.walker = LayoutWalker(context, namespace=namespace)

    @classmethod
    def from_config(
        cls,
        config: Config,
        store: FavoritesStore,
        registry: ManifestRegistry,
        widget_host: Optional[LocalWidgetHost] = None,
        locale: Optional[SystemLocaleProvider] = None,
    ) -> "LayoutImporter":
        """
        Build an importer whose store doubles as the identity allocator.

        Missing collaborators get reference defaults bound to ``registry``.

        Raises:
            ConfigError: If ``config`` does not validate
        """
        error = config.validate()
        if error:
            raise ConfigError(error)

        if widget_host is None:
            widget_host = LocalWidgetHost(registry)
        if locale is None:
            locale = SystemLocaleProvider(
                registry,
                language=config.locale.language,
                folder_title=config.folders.default_title,
            )
        context = BuildContext(
            store=store,
            ids=store,
            registry=registry,
            widget_host=widget_host,
            locale=locale,
            clock_component=config.widgets.clock or DEFAULT_CLOCK_COMPONENT,
            clock_span=parse_span(config.widgets.clock_span),
            search_span=parse_span(config.widgets.search_span),
            min_folder_children=config.folders.min_children,
        )
        return cls(
            context,
            root_tag=config.document.root_tag,
            namespace=config.document.namespace,
            root_container=container_from_string(config.store.container),
        )

    # =========================================================================
    # Loading
    # =========================================================================

    def load_favorites(self, path: Union[Path, str]) -> IngestResult:
        """Import a layout document file."""
        try:
            stream = XmlTokenStream.from_path(Path(path))
        except StreamError as e:
            logger.warning("Got exception parsing favorites: %s", e)
            return self._aborted(str(e))
        with stream:
            return self.load(stream)

    def load_favorites_text(self, xml: Union[str, bytes]) -> IngestResult:
        """Import a layout document held in memory."""
        return self.load(XmlTokenStream.from_text(xml))

    def load(self, stream: TokenStream) -> IngestResult:
        """Begin the document at the root element, then walk it."""
        try:
            stream.begin_document(self.root_tag)
        except StreamError as e:
            logger.warning("Got exception parsing favorites: %s", e)
            return self._aborted(str(e))

        result = self.walker.walk(stream, self.root_container)
        logger.info("Loaded favorites: %s", result.summary())
        return result

    @staticmethod
    def _aborted(reason: str) -> IngestResult:
        result = IngestResult()
        result.abort(reason)
        return result
