"""
Shared fixtures for the appliance timer tests.

Provides a small-clock system and a PanelDriver that presses buttons,
holds levels and runs whole simulated seconds.
"""

import logging
from typing import List, Optional

import pytest

from controller import ApplianceSystem
from display import ScanLatch
from model import AdjustMode, ApplianceMode, PanelInputs, SystemSnapshot, TimerMode

logger = logging.getLogger(__name__)

# Small reference clock so a simulated second is only a few steps
CLOCK_HZ = 10


class PanelDriver:
    """Drive an ApplianceSystem the way a front panel would."""

    def __init__(self, clock_hz: int = CLOCK_HZ):
        self.clock_hz = clock_hz
        self.system = ApplianceSystem(reference_hz=clock_hz)
        self.view = ScanLatch()
        self.door_open = False
        self.power_enable = False
        self.adjust_mode = AdjustMode.SECONDS_UNITS
        self.history: List[SystemSnapshot] = []

    def _levels(self, **events) -> PanelInputs:
        return PanelInputs(
            power_enable=self.power_enable,
            door_open=self.door_open,
            adjust_mode=self.adjust_mode,
            **events,
        )

    def step(self, count: int = 1, **events) -> SystemSnapshot:
        """Step `count` cycles; events (start=True, ...) fire on the first only."""
        for i in range(count):
            inputs = self._levels(**events) if i == 0 else self._levels()
            self.view.feed(self.system.step(inputs))
            self.history.append(self.system.snapshot())
        return self.snapshot

    def press(self, event: str) -> SystemSnapshot:
        logger.debug(f"press {event}")
        return self.step(**{event: True})

    def press_n(self, event: str, times: int) -> SystemSnapshot:
        for _ in range(times):
            self.press(event)
        return self.snapshot

    def run_seconds(self, seconds: int) -> SystemSnapshot:
        return self.step(seconds * self.clock_hz)

    def dial(self, minutes: int, seconds: int, mode_after: Optional[AdjustMode] = None):
        """Dial MM:SS from 00:00 using increment presses on each digit group."""
        for mode, count in (
            (AdjustMode.MINUTES_TENS, minutes // 10),
            (AdjustMode.MINUTES_UNITS, minutes % 10),
            (AdjustMode.SECONDS_TENS, seconds // 10),
            (AdjustMode.SECONDS_UNITS, seconds % 10),
        ):
            self.adjust_mode = mode
            self.press_n("increment", count)
        self.adjust_mode = mode_after or AdjustMode.SECONDS_UNITS
        return self.snapshot

    def steps_until(self, predicate, limit: int = 1000) -> int:
        """Step until predicate(snapshot) holds; return the number of steps taken."""
        for n in range(1, limit + 1):
            if predicate(self.step()):
                return n
        raise AssertionError(f"condition not reached within {limit} steps")

    @property
    def snapshot(self) -> SystemSnapshot:
        return self.system.snapshot()


@pytest.fixture
def system():
    """A freshly reset system on the small test clock."""
    sys_ = ApplianceSystem(reference_hz=CLOCK_HZ)
    sys_.reset()
    return sys_


@pytest.fixture
def panel():
    """A PanelDriver on the small test clock."""
    return PanelDriver()


def assert_time(snap: SystemSnapshot, minutes: int, seconds: int):
    actual = (snap.minutes, snap.seconds)
    assert actual == (minutes, seconds), (
        f"Expected countdown {minutes:02d}:{seconds:02d}, got {snap.time_text}"
    )


def assert_modes(snap: SystemSnapshot, outer: ApplianceMode, inner: TimerMode):
    assert snap.appliance_mode is outer, f"Expected outer {outer.name}, got {snap.appliance_mode.name}"
    assert snap.timer_mode is inner, f"Expected timer {inner.name}, got {snap.timer_mode.name}"
