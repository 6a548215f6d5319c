"""
Wires the shared placement store, document session and controllers.

The UI receives one ``AppContext`` and reaches every collaborator through
it; nothing in the package keeps module-level mutable state.
"""
from dataclasses import dataclass
from typing import Optional

from inkstamp.config import AppConfig, load_config
from inkstamp.controllers import AnnotationController, DocumentController, ExportController
from inkstamp.core.annotations import PlacementStore
from inkstamp.core.document import DocumentSession, PDFExporter
from inkstamp.core.fonts import FontProvider
from inkstamp.utils import configure_logging, get_font_cache_dir


@dataclass
class AppContext:
    config: AppConfig
    store: PlacementStore
    session: DocumentSession
    annotations: AnnotationController
    documents: DocumentController
    exports: ExportController


def create_app_context(config: Optional[AppConfig] = None) -> AppContext:
    """
    Build the application objects from configuration.

    Args:
        config: Configuration to use; loaded from disk and environment when None

    Returns:
        The wired context
    """
    config = config or load_config()
    configure_logging(config.logging.level)

    store = PlacementStore(
        clone_offset=config.editor.clone_offset,
        clone_max=config.editor.clone_max,
    )
    session = DocumentSession(max_upload_bytes=config.upload.max_upload_bytes)

    font_cache = get_font_cache_dir() if config.fonts.cache_fonts else None
    exporter = PDFExporter.from_config(
        config, font_provider=FontProvider(config.fonts, cache_dir=font_cache))

    return AppContext(
        config=config,
        store=store,
        session=session,
        annotations=AnnotationController(store, config.editor),
        documents=DocumentController(session, store),
        exports=ExportController(session, store, exporter),
    )
