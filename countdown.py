# countdown.py

import logging
from typing import Tuple

from config import SEG_BLANK, SEG_MARKER
from display import encode_digit
from model import CountdownTimerState, TimerCommands, TimerMode

logger = logging.getLogger(__name__)


def next_timer_mode(state: CountdownTimerState, cmd: TimerCommands) -> TimerMode:
    mode = state.mode
    at_zero = state.minutes == 0 and state.seconds == 0

    if mode is TimerMode.IDLE:
        if cmd.start:
            return TimerMode.COUNTING_DOWN
        return TimerMode.IDLE
    elif mode is TimerMode.COUNTING_DOWN:
        if cmd.stop or at_zero:
            return TimerMode.IDLE
        if cmd.pause:
            return TimerMode.PAUSED
        return TimerMode.COUNTING_DOWN
    elif mode is TimerMode.PAUSED:
        if cmd.stop:
            return TimerMode.IDLE
        if cmd.pause:
            return TimerMode.COUNTING_DOWN
        return TimerMode.PAUSED

    # unknown encoding
    return TimerMode.IDLE


def decrement_one_second(minutes: int, seconds: int) -> Tuple[int, int]:
    if seconds > 0:
        return minutes, seconds - 1
    if minutes > 0:
        return minutes - 1, 59
    return minutes, seconds


def update_countdown(
    state: CountdownTimerState,
    cmd: TimerCommands,
    target: Tuple[int, int],
    tick: bool,
) -> CountdownTimerState:
    """Compute the countdown's next state from its current registers.

    Time is read from `state.mode` (the current mode), not the next one:
    the mode change and the time change land together on commit.
    """
    minutes, seconds = state.minutes, state.seconds

    if state.mode is TimerMode.IDLE:
        # live mirror of the target while idle
        minutes, seconds = target
    elif state.mode is TimerMode.COUNTING_DOWN and tick:
        minutes, seconds = decrement_one_second(minutes, seconds)

    return CountdownTimerState(
        mode=next_timer_mode(state, cmd),
        minutes=minutes,
        seconds=seconds,
    )


def timer_digits(minutes: int, seconds: int) -> Tuple[int, ...]:
    return (
        encode_digit(seconds % 10),
        encode_digit(seconds // 10),
        encode_digit(minutes % 10, dp=True),
        encode_digit(minutes // 10),
        SEG_BLANK,
        SEG_BLANK,
        SEG_BLANK,
        SEG_MARKER,
    )


class CountdownTimer:
    """Owns the remaining minutes/seconds and the inner Idle/CountingDown/Paused mode."""

    def __init__(self) -> None:
        self.state = CountdownTimerState()

    def reset(self) -> None:
        self.state = CountdownTimerState()

    @property
    def mode(self) -> TimerMode:
        return self.state.mode

    @property
    def done(self) -> bool:
        # level, not a pulse: also true right after reset and for a zero idle target
        s = self.state
        return s.mode is TimerMode.IDLE and s.minutes == 0 and s.seconds == 0

    def next_state(self, cmd: TimerCommands, target: Tuple[int, int], tick: bool) -> CountdownTimerState:
        return update_countdown(self.state, cmd, target, tick)

    def commit(self, new_state: CountdownTimerState) -> None:
        if new_state.mode is not self.state.mode:
            logger.debug(
                "timer %s -> %s at %02d:%02d",
                self.state.mode.name, new_state.mode.name,
                new_state.minutes, new_state.seconds,
            )
        self.state = new_state

    def digits(self) -> Tuple[int, ...]:
        return timer_digits(self.state.minutes, self.state.seconds)
