"""
Pointer interaction state machine shared by drag and resize.

States and legal transitions are declared in ``TRANSITIONS``; each controller
declares which handler runs for a (state, event kind) pair. Pointer events with
no handler in the current state are ignored, so a stray event never raises.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

from planboard.core.config import Settings, get_settings
from planboard.core.exceptions import SessionStateError
from planboard.core.logger import setup_logger
from planboard.models.enums import InteractionState, PointerEventKind
from planboard.models.interaction import PointerEvent

logger = setup_logger(__name__)

TRANSITIONS: dict[InteractionState, frozenset[InteractionState]] = {
    InteractionState.IDLE: frozenset({InteractionState.ARMED}),
    InteractionState.ARMED: frozenset({InteractionState.DRAGGING, InteractionState.CANCELLED}),
    InteractionState.DRAGGING: frozenset(
        {
            InteractionState.COMMITTING,
            InteractionState.REVERTING,
            InteractionState.CANCELLED,
        }
    ),
    InteractionState.COMMITTING: frozenset({InteractionState.IDLE}),
    InteractionState.REVERTING: frozenset({InteractionState.IDLE}),
    InteractionState.CANCELLED: frozenset({InteractionState.IDLE}),
}

TERMINAL_STATES = frozenset(
    {
        InteractionState.COMMITTING,
        InteractionState.REVERTING,
        InteractionState.CANCELLED,
    }
)

SessionT = TypeVar("SessionT")
PreviewT = TypeVar("PreviewT")
Handler = Callable[[PointerEvent], Any]


class InteractionCoordinator:
    """Guarantees at most one active session across controllers."""

    def __init__(self) -> None:
        self._active: Optional[InteractionController] = None

    @property
    def active(self) -> Optional[InteractionController]:
        return self._active

    def acquire(self, controller: InteractionController) -> None:
        """Make ``controller`` the active one, cancelling any other session first."""
        current = self._active
        if current is not None and current is not controller:
            logger.info(
                f"Cancelling {type(current).__name__} session to start {type(controller).__name__}"
            )
            current.cancel()
        self._active = controller

    def release(self, controller: InteractionController) -> None:
        if self._active is controller:
            self._active = None


class InteractionController(ABC, Generic[SessionT, PreviewT]):
    """
    Base class of a pointer-driven session controller.

    Subclasses provide the session payload, the event handler table and the
    commit step. The base class owns state, transitions, teardown and session
    exclusivity.
    """

    def __init__(
        self,
        coordinator: Optional[InteractionCoordinator] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.coordinator = coordinator or InteractionCoordinator()
        self.drag_threshold = self.settings.DRAG_THRESHOLD_PX
        self._state = InteractionState.IDLE
        self._session: Optional[SessionT] = None
        self._preview: Optional[PreviewT] = None
        self.last_outcome: Optional[InteractionState] = None
        self._handlers: dict[tuple[InteractionState, PointerEventKind], Handler] = {
            (InteractionState.IDLE, PointerEventKind.DOWN): self._on_pointer_down,
            (InteractionState.ARMED, PointerEventKind.MOVE): self._on_armed_move,
            (InteractionState.ARMED, PointerEventKind.UP): self._on_armed_release,
            (InteractionState.ARMED, PointerEventKind.CANCEL): self._on_cancel_event,
            (InteractionState.DRAGGING, PointerEventKind.MOVE): self._on_drag_move,
            (InteractionState.DRAGGING, PointerEventKind.UP): self._on_release,
            (InteractionState.DRAGGING, PointerEventKind.CANCEL): self._on_cancel_event,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def session(self) -> Optional[SessionT]:
        return self._session

    @property
    def preview(self) -> Optional[PreviewT]:
        return self._preview

    @property
    def is_active(self) -> bool:
        return self._state in (InteractionState.ARMED, InteractionState.DRAGGING)

    def handle(self, event: PointerEvent) -> Optional[PreviewT]:
        """
        Feed one pointer event to the state machine.

        Returns:
            The current preview (None when idle or armed)
        """
        handler = self._handlers.get((self._state, event.kind))
        if handler is None:
            logger.debug(f"{type(self).__name__}: ignoring {event.kind.value} in {self._state.value}")
            return self._preview
        handler(event)
        return self._preview

    def cancel(self) -> None:
        """Abort the running session, if any, without emitting an intent."""
        if self.is_active:
            self._finish(InteractionState.CANCELLED)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(self, target: InteractionState) -> None:
        if target not in TRANSITIONS[self._state]:
            raise SessionStateError(
                f"Illegal transition {self._state.value} -> {target.value}",
                current=self._state.value,
                target=target.value,
            )
        logger.debug(f"{type(self).__name__}: {self._state.value} -> {target.value}")
        self._state = target

    def _arm(self, session: SessionT) -> None:
        self.coordinator.acquire(self)
        self._session = session
        self._transition(InteractionState.ARMED)

    def _finish(self, terminal: InteractionState) -> None:
        """Move to a terminal state, tear down and return to IDLE."""
        if terminal not in TERMINAL_STATES:
            raise SessionStateError(
                f"{terminal.value} is not a terminal state",
                current=self._state.value,
                target=terminal.value,
            )
        self._transition(terminal)
        self._teardown()
        self.last_outcome = terminal
        self._session = None
        self._preview = None
        self.coordinator.release(self)
        self._transition(InteractionState.IDLE)

    def _passed_threshold(self, origin_x: float, origin_y: float, event: PointerEvent) -> bool:
        return math.hypot(event.x - origin_x, event.y - origin_y) > self.drag_threshold

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_armed_release(self, event: PointerEvent) -> None:
        # Released before the threshold: a click, not a drag
        self._finish(InteractionState.CANCELLED)

    def _on_cancel_event(self, event: PointerEvent) -> None:
        self._finish(InteractionState.CANCELLED)

    def _teardown(self) -> None:
        """Release per-session resources (timers). Called on every exit path."""
        pass

    @abstractmethod
    def _on_pointer_down(self, event: PointerEvent) -> None:
        """Arm a session if the event targets something this controller handles."""

    @abstractmethod
    def _on_armed_move(self, event: PointerEvent) -> None:
        """Promote to DRAGGING once the movement threshold is passed."""

    @abstractmethod
    def _on_drag_move(self, event: PointerEvent) -> None:
        """Recompute the preview."""

    @abstractmethod
    def _on_release(self, event: PointerEvent) -> None:
        """Commit or revert."""
