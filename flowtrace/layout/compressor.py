"""Session compression for export."""

import structlog

from flowtrace.differ import BlockDiffEngine
from flowtrace.layout.extractor import diff_states_by_location, extract_common_elements
from flowtrace.layout.metrics import LayoutMetrics
from flowtrace.layout.models import CompressedSession
from flowtrace.recorder.models import Session
from flowtrace.settings import AppSettings, get_settings


logger = structlog.get_logger()


def compress_session(
    session: Session,
    engine: BlockDiffEngine | None = None,
    settings: AppSettings | None = None,
    metrics: LayoutMetrics | None = None,
) -> CompressedSession:
    """Factor out shared layout and diff repeated content of a session.

    The session itself is not modified.

    Args:
        session: Finalized session.
        engine: Diff engine; built from settings if None.
        settings: Application settings; loaded from the environment if None.
        metrics: Optional metrics instance for dependency injection.

    Returns:
        CompressedSession ready for serialization.
    """
    settings = settings or get_settings()
    engine = engine or BlockDiffEngine.from_settings(settings)
    metrics = metrics or LayoutMetrics.get_instance()
    log = logger.bind(component="layout", session_id=session.id)

    elements = extract_common_elements(
        session.states,
        text_chars=settings.fingerprint_text_chars,
        metrics=metrics,
    )
    content = diff_states_by_location(
        elements.states,
        engine=engine,
        identity_chars=settings.common_block_identity_chars,
        preview_chars=settings.summary_preview_chars,
        metrics=metrics,
    )

    metrics.record_session()
    log.info(
        "session_compressed",
        state_count=len(content.states),
        layout_element_count=len(elements.layout_elements),
        diffed_count=content.diffed_count,
    )
    return CompressedSession(
        session=session,
        layout_elements=elements.layout_elements,
        common_layout=content.common_layout,
        states=content.states,
    )
