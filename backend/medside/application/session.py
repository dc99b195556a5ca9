"""
Analysis Session

Orchestrates capture/upload -> analysis -> result for one user and owns the
session state the presentation layer renders.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union
import logging
from pathlib import Path

from .services.image_source import ImageSource, FileHandle
from .services.scan_service import ScanService
from ..cross_cutting.error_handling import ErrorHandler, user_message_for
from ..domain.entities.medicine_analysis import MedicineAnalysis
from ..domain.entities.session_state import SessionState, SessionStatus
from ..domain.exceptions import ErrorKind, InvalidInputError
from ..domain.sections import get_contract
from ..domain.value_objects.canonical_image import CanonicalImage


logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]

TAB_INFO = "info"
TAB_STORIES = "stories"
VALID_TABS = (TAB_INFO, TAB_STORIES)


def _is_single_handle(files: Any) -> bool:
    # File objects are iterable, so test for them before iterating
    return isinstance(files, (str, Path)) or hasattr(files, "read") or hasattr(files, "file")


class AnalysisSession:
    """
    State machine behind the scan screen.

    Transitions:
        IDLE -> CAPTURING_PREVIEW          start_camera()
        CAPTURING_PREVIEW -> IDLE          cancel_camera()
        any but ANALYZING -> ANALYZING     capture_and_analyze() / upload_and_analyze()
        ANALYZING -> READY                 analysis parsed (possibly degraded)
        ANALYZING -> FAILED                transport/provider/timeout failure
        any but ANALYZING -> FAILED        unreadable or unsupported input

    At most one analysis is in flight: a trigger while ANALYZING is ignored.
    There is no locking; the check and the move to ANALYZING happen before
    the first await, which is enough under cooperative scheduling.

    The last good analysis survives failures and new scans until a new
    analysis replaces it.

    Usage:
        session = AnalysisSession(service)
        session.subscribe(render)
        session.start_camera()
        await session.capture_and_analyze(frame)
    """

    def __init__(self, service: ScanService, image_source: Optional[ImageSource] = None):
        self._service = service
        self._image_source = image_source or service.image_source
        self._state = SessionState.idle()
        self._last_analysis: Optional[MedicineAnalysis] = None
        self._listeners: List[StateListener] = []

        self.error_message: Optional[str] = None
        self.notice: Optional[str] = None
        self.active_tab: str = TAB_INFO

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def last_analysis(self) -> Optional[MedicineAnalysis]:
        """Analysis to display: the latest successful one, if any."""
        return self._last_analysis

    @property
    def is_loading(self) -> bool:
        return self._state.is_analyzing

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with every new state.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self) -> Dict[str, Any]:
        """Plain view of everything the presentation layer renders."""
        return {
            "state": self._state.status.value,
            "error_kind": self._state.error_kind.value if self._state.error_kind else None,
            "is_loading": self.is_loading,
            "analysis": self._last_analysis.to_dict() if self._last_analysis else None,
            "error": self.error_message,
            "notice": self.notice,
            "active_tab": self.active_tab,
        }

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def start_camera(self) -> None:
        """Open the camera preview."""
        if self._state.is_analyzing:
            self.logger.debug("start_camera ignored while analyzing")
            return
        if self._state.status == SessionStatus.CAPTURING_PREVIEW:
            return
        self.error_message = None
        self._set_state(SessionState.capturing_preview())

    def cancel_camera(self) -> None:
        """Close the camera preview. Never cancels an in-flight analysis."""
        if self._state.status != SessionStatus.CAPTURING_PREVIEW:
            self.logger.debug(f"cancel_camera ignored in state {self._state}")
            return
        self._set_state(SessionState.idle())

    async def capture_and_analyze(self, frame: Union[bytes, str]) -> Optional[MedicineAnalysis]:
        """
        Analyze a still frame from the camera.

        Returns:
            The new analysis, or None if the trigger was ignored or failed
        """
        if self._state.is_analyzing:
            self.logger.info("capture_and_analyze ignored: an analysis is already in flight")
            return None
        return await self._run("capture", lambda: self._image_source.from_capture(frame))

    async def upload_and_analyze(
        self,
        files: Union[FileHandle, Iterable[FileHandle]]
    ) -> Optional[MedicineAnalysis]:
        """
        Analyze an uploaded or dropped file. Only the first file is used.

        Returns:
            The new analysis, or None if the trigger was ignored or failed
        """
        if self._state.is_analyzing:
            self.logger.info("upload_and_analyze ignored: an analysis is already in flight")
            return None
        handles = [files] if _is_single_handle(files) else list(files or [])
        return await self._run("upload", lambda: self._image_source.from_uploads(handles))

    def select_tab(self, tab: str) -> None:
        """Switch the result view between "info" and "stories"."""
        if tab not in VALID_TABS:
            raise InvalidInputError("tab", f"must be one of {', '.join(VALID_TABS)}")
        self.active_tab = tab

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _run(
        self,
        context: str,
        load_image: Callable[[], CanonicalImage]
    ) -> Optional[MedicineAnalysis]:
        # Input stage: failures never reach the provider
        with ErrorHandler(self.logger, context=context, suppress=True) as handler:
            image = load_image()
        if handler.has_error:
            self._fail(handler.error_kind, handler.user_message)
            return None

        self.error_message = None
        self.notice = None
        self._set_state(SessionState.analyzing())

        try:
            with ErrorHandler(self.logger, context=f"{context}/analyze", suppress=True) as handler:
                analysis = await self._service.analyze(image)
        except Exception:
            # Unexpected defect: do not leave the session stuck in ANALYZING
            self._fail(ErrorKind.PROVIDER, user_message_for(None))
            raise

        if handler.has_error:
            self._fail(handler.error_kind, handler.user_message)
            return None

        self._last_analysis = analysis
        self.notice = self._notice_for(analysis)
        self._set_state(SessionState.ready(analysis))
        return analysis

    def _fail(self, kind: Optional[ErrorKind], message: Optional[str]) -> None:
        kind = kind or ErrorKind.PROVIDER
        self.error_message = message or user_message_for(kind)
        self._set_state(SessionState.failed(kind))

    @staticmethod
    def _notice_for(analysis: MedicineAnalysis) -> Optional[str]:
        if not analysis.degraded:
            return None
        titles = {s.field_name: s.title for s in get_contract(analysis.prompt_version)}
        missing = ", ".join(titles.get(name, name) for name in analysis.missing_fields)
        return f"Some details could not be read from the analysis: {missing}."

    def _set_state(self, state: SessionState) -> None:
        previous = self._state
        self._state = state
        self.logger.info(f"Session state {previous} -> {state}")

        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                self.logger.exception(f"State listener {listener!r} failed")
