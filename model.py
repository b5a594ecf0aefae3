# model.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from config import (
    INDICATOR_HIGH,
    INDICATOR_LOW,
    INDICATOR_MEDIUM,
    INDICATOR_OFF,
    MAX_MINUTES,
    MAX_POWER_LEVEL,
    MAX_SECONDS,
    NUM_SLOTS,
    SEG_BLANK,
)


class TimerMode(Enum):
    """Inner (countdown) state machine."""
    IDLE = 0
    COUNTING_DOWN = 1
    PAUSED = 2


class ApplianceMode(Enum):
    """Outer (appliance) state machine. Door state only affects this one."""
    IDLE = 0
    COUNTING_DOWN = 1
    PAUSED = 2


class AdjustMode(Enum):
    SECONDS_UNITS = "seconds-units"
    SECONDS_TENS = "seconds-tens"
    MINUTES_UNITS = "minutes-units"
    MINUTES_TENS = "minutes-tens"


class PowerBracket(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def format_mmss(minutes: int, seconds: int) -> str:
    return f"{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class TimerCommands:
    # one-shot commands from the outer FSM to the countdown
    start: bool = False
    pause: bool = False
    stop: bool = False


@dataclass(frozen=True)
class PanelInputs:
    # one-shot events (already debounced, consumed once)
    start: bool = False
    pause: bool = False
    stop: bool = False
    increment: bool = False
    decrement: bool = False

    # levels / selectors
    power_enable: bool = False
    door_open: bool = False
    adjust_mode: AdjustMode = AdjustMode.SECONDS_UNITS

    def levels_only(self) -> "PanelInputs":
        """Same levels and selector, with every one-shot event cleared."""
        return PanelInputs(
            power_enable=self.power_enable,
            door_open=self.door_open,
            adjust_mode=self.adjust_mode,
        )


@dataclass(frozen=True)
class CountdownTimerState:
    mode: TimerMode = TimerMode.IDLE
    minutes: int = 0
    seconds: int = 0


@dataclass(frozen=True)
class ApplianceState:
    mode: ApplianceMode = ApplianceMode.IDLE
    target_minutes: int = 0
    target_seconds: int = 0
    power_level: int = 0
    indicator: int = INDICATOR_OFF
    last_mode_seen: ApplianceMode = ApplianceMode.IDLE


@dataclass(frozen=True)
class DisplayFrame:
    digits: Tuple[int, ...] = field(default=(SEG_BLANK,) * NUM_SLOTS)
    active_slot: int = 0
    indicator: int = INDICATOR_OFF


@dataclass(frozen=True)
class SystemSnapshot:
    appliance_mode: ApplianceMode
    timer_mode: TimerMode
    minutes: int
    seconds: int
    target_minutes: int
    target_seconds: int
    power_level: int
    indicator: int
    done: bool

    @property
    def time_text(self) -> str:
        return format_mmss(self.minutes, self.seconds)


# --------------------- time adjustment ---------------------
def increment_time(minutes: int, seconds: int, mode: AdjustMode) -> Tuple[int, int]:
    """Apply one increment press to (minutes, seconds) for the selected digit group.

    Every branch clamps instead of correcting afterwards, so the result is
    always within 0..99 minutes and 0..59 seconds.
    """
    if mode is AdjustMode.MINUTES_TENS:
        if minutes + 10 <= MAX_MINUTES:
            minutes += 10
    elif mode is AdjustMode.MINUTES_UNITS:
        if minutes < MAX_MINUTES:
            minutes += 1
    elif mode is AdjustMode.SECONDS_TENS:
        if seconds + 10 > MAX_SECONDS:
            seconds = seconds + 10 - 60
            if minutes < MAX_MINUTES:
                minutes += 1
        else:
            seconds += 10
    else:
        if seconds >= MAX_SECONDS:
            seconds = 0
            if minutes < MAX_MINUTES:
                minutes += 1
        else:
            seconds += 1
    return minutes, seconds


def decrement_time(minutes: int, seconds: int, mode: AdjustMode) -> Tuple[int, int]:
    """Mirror of increment_time: subtract with a 60 s borrow, never below 00:00."""
    if mode is AdjustMode.MINUTES_TENS:
        if minutes >= 10:
            minutes -= 10
    elif mode is AdjustMode.MINUTES_UNITS:
        if minutes >= 1:
            minutes -= 1
    elif mode is AdjustMode.SECONDS_TENS:
        if seconds >= 10:
            seconds -= 10
        elif minutes >= 1:
            seconds = seconds + 60 - 10
            minutes -= 1
    else:
        if seconds >= 1:
            seconds -= 1
        elif minutes >= 1:
            seconds = MAX_SECONDS
            minutes -= 1
    return minutes, seconds


# --------------------- power level ---------------------
def adjust_power(level: int, increment: bool, decrement: bool) -> int:
    if increment and level < MAX_POWER_LEVEL:
        level += 1
    if decrement and level > 0:
        level -= 1
    return level


def power_bracket(level: int) -> PowerBracket:
    # 3 is internal headroom and still reads as high
    if level <= 0:
        return PowerBracket.LOW
    if level == 1:
        return PowerBracket.MEDIUM
    return PowerBracket.HIGH


_INDICATOR_CODES = {
    PowerBracket.LOW: INDICATOR_LOW,
    PowerBracket.MEDIUM: INDICATOR_MEDIUM,
    PowerBracket.HIGH: INDICATOR_HIGH,
}


def indicator_code(mode: ApplianceMode, level: int) -> int:
    if mode is ApplianceMode.IDLE:
        return INDICATOR_OFF
    return _INDICATOR_CODES[power_bracket(level)]
