# panel_inputs.py

import logging
from typing import Set

from model import AdjustMode, PanelInputs

logger = logging.getLogger(__name__)

EVENTS = ("start", "pause", "stop", "increment", "decrement")


class EdgeDetector:
    """Turn a sampled level into a one-shot event on its rising edge."""

    def __init__(self) -> None:
        self.last = False

    def reset(self) -> None:
        self.last = False

    def sample(self, level: bool) -> bool:
        fired = level and not self.last
        self.last = bool(level)
        return fired


class PanelLatch:
    """
    Collects front-panel activity between samples.

    Presses are latched until the next sample() and delivered exactly once,
    however often the controller samples. Door, power enable and adjust mode
    are levels and persist until changed.
    """

    def __init__(self) -> None:
        self._pending: Set[str] = set()
        self.door_open = False
        self.power_enable = False
        self.adjust_mode = AdjustMode.SECONDS_UNITS
        self._buttons = {name: EdgeDetector() for name in EVENTS}

    def press(self, event: str) -> None:
        if event not in EVENTS:
            raise ValueError(f"unknown panel event: {event!r}")
        self._pending.add(event)

    def set_button_level(self, event: str, pressed: bool) -> None:
        """Feed a raw button level (e.g. key down/up); only the rising edge counts."""
        if event not in EVENTS:
            raise ValueError(f"unknown panel event: {event!r}")
        if self._buttons[event].sample(pressed):
            self._pending.add(event)

    def set_door_open(self, is_open: bool) -> None:
        if bool(is_open) != self.door_open:
            logger.info("door %s", "opened" if is_open else "closed")
        self.door_open = bool(is_open)

    def set_power_enable(self, enabled: bool) -> None:
        self.power_enable = bool(enabled)

    def set_adjust_mode(self, mode: AdjustMode) -> None:
        self.adjust_mode = AdjustMode(mode)

    def clear(self) -> None:
        self._pending.clear()
        for detector in self._buttons.values():
            detector.reset()

    def sample(self) -> PanelInputs:
        """Return this step's inputs and consume the latched presses."""
        pending, self._pending = self._pending, set()
        return PanelInputs(
            start="start" in pending,
            pause="pause" in pending,
            stop="stop" in pending,
            increment="increment" in pending,
            decrement="decrement" in pending,
            power_enable=self.power_enable,
            door_open=self.door_open,
            adjust_mode=self.adjust_mode,
        )
