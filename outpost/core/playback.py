"""
Outpost Playback - Paced replay of committed action log entries

State is already final when entries arrive here; playback only tells the
presentation layer when each entry starts and finishes. While anything is
left to play, the game refuses new end-turn signals.
"""
from typing import Iterable, List, Optional

from ..config import PLAYBACK_STEP
from .events import Action, ActionFinishedEvent, ActionStartedEvent, EventBus


class ActionPlayback:
    """Drains queued actions one step at a time."""

    def __init__(self, event_bus: EventBus, step: float = PLAYBACK_STEP):
        self.event_bus = event_bus
        self.step = step
        self.pending: List[Action] = []
        self.current: Optional[Action] = None
        self.timer = 0.0

    @property
    def done(self) -> bool:
        """True when nothing is playing or queued."""
        return not self.pending and self.current is None

    def load(self, actions: Iterable[Action]) -> None:
        """Queue actions after anything already pending."""
        was_idle = self.done
        self.pending.extend(actions)
        if was_idle and self.pending:
            # Start the first entry on the next update
            self.timer = self.step

    def update(self, dt: float) -> None:
        """Advance the playback clock."""
        if self.done:
            return
        self.timer += dt
        while self.timer >= self.step and not self.done:
            self.timer -= self.step
            self._advance()
        if self.done:
            self.timer = 0.0

    def skip(self) -> None:
        """Finish everything immediately, still announcing each entry."""
        while not self.done:
            self._advance()
        self.timer = 0.0

    def clear(self) -> None:
        """Drop queued entries without announcing them."""
        self.pending.clear()
        self.current = None
        self.timer = 0.0

    def _advance(self) -> None:
        if self.current is not None:
            self.event_bus.publish(ActionFinishedEvent(action=self.current))
            self.current = None
        if self.pending:
            self.current = self.pending.pop(0)
            self.event_bus.publish(ActionStartedEvent(action=self.current))
