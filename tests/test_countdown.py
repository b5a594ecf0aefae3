"""
Tests for the inner countdown state machine.

Covers the Idle/CountingDown/Paused transitions, per-tick arithmetic,
the live target mirror and the level-based done output.
"""

import pytest

from config import SEG_BLANK, SEG_DP, SEG_MARKER, SEGMENT_DIGITS
from countdown import (
    CountdownTimer,
    decrement_one_second,
    next_timer_mode,
    timer_digits,
    update_countdown,
)
from model import CountdownTimerState, TimerCommands, TimerMode

NO_CMD = TimerCommands()
START = TimerCommands(start=True)
PAUSE = TimerCommands(pause=True)
STOP = TimerCommands(stop=True)


def counting(minutes, seconds):
    return CountdownTimerState(TimerMode.COUNTING_DOWN, minutes, seconds)


class TestTransitions:
    """Mode transitions on start / pause / stop."""

    @pytest.mark.parametrize("state, cmd, expected", [
        (CountdownTimerState(TimerMode.IDLE, 1, 0), START, TimerMode.COUNTING_DOWN),
        (CountdownTimerState(TimerMode.IDLE, 1, 0), PAUSE, TimerMode.IDLE),
        (CountdownTimerState(TimerMode.IDLE, 1, 0), STOP, TimerMode.IDLE),
        (counting(1, 0), NO_CMD, TimerMode.COUNTING_DOWN),
        (counting(1, 0), PAUSE, TimerMode.PAUSED),
        (counting(1, 0), STOP, TimerMode.IDLE),
        (counting(0, 0), NO_CMD, TimerMode.IDLE),
        (counting(0, 0), PAUSE, TimerMode.IDLE),
        (CountdownTimerState(TimerMode.PAUSED, 1, 0), PAUSE, TimerMode.COUNTING_DOWN),
        (CountdownTimerState(TimerMode.PAUSED, 1, 0), STOP, TimerMode.IDLE),
        (CountdownTimerState(TimerMode.PAUSED, 1, 0), START, TimerMode.PAUSED),
        (CountdownTimerState(TimerMode.PAUSED, 0, 0), NO_CMD, TimerMode.PAUSED),
    ])
    def test_transition_table(self, state, cmd, expected):
        assert next_timer_mode(state, cmd) is expected

    def test_unknown_mode_falls_back_to_idle(self):
        bogus = CountdownTimerState(mode="warming-up", minutes=3, seconds=0)
        assert next_timer_mode(bogus, START) is TimerMode.IDLE

    def test_repeated_pause_toggles(self):
        timer = CountdownTimer()
        timer.commit(counting(2, 0))
        modes = []
        for _ in range(4):
            timer.commit(timer.next_state(PAUSE, (0, 0), tick=False))
            modes.append(timer.mode)
        assert modes == [
            TimerMode.PAUSED,
            TimerMode.COUNTING_DOWN,
            TimerMode.PAUSED,
            TimerMode.COUNTING_DOWN,
        ]


class TestTimeArithmetic:
    """Once-per-tick decrement and the idle mirror."""

    @pytest.mark.parametrize("minutes", [1, 7, 99])
    def test_seconds_borrow_from_minutes(self, minutes):
        nxt = update_countdown(counting(minutes, 0), NO_CMD, (0, 0), tick=True)
        assert (nxt.minutes, nxt.seconds) == (minutes - 1, 59)

    def test_plain_decrement(self):
        nxt = update_countdown(counting(3, 30), NO_CMD, (0, 0), tick=True)
        assert (nxt.minutes, nxt.seconds) == (3, 29)

    def test_no_decrement_between_ticks(self):
        nxt = update_countdown(counting(3, 30), NO_CMD, (0, 0), tick=False)
        assert (nxt.minutes, nxt.seconds) == (3, 30)

    def test_zero_never_goes_negative(self):
        assert decrement_one_second(0, 0) == (0, 0)
        nxt = update_countdown(counting(0, 0), NO_CMD, (5, 0), tick=True)
        assert (nxt.mode, nxt.minutes, nxt.seconds) == (TimerMode.IDLE, 0, 0)

    def test_paused_holds_time(self):
        paused = CountdownTimerState(TimerMode.PAUSED, 4, 12)
        nxt = update_countdown(paused, NO_CMD, (9, 9), tick=True)
        assert (nxt.minutes, nxt.seconds) == (4, 12)

    def test_idle_mirrors_target_without_a_tick(self):
        idle = CountdownTimerState(TimerMode.IDLE, 0, 0)
        nxt = update_countdown(idle, NO_CMD, (12, 34), tick=False)
        assert (nxt.minutes, nxt.seconds) == (12, 34)

    def test_start_loads_target_on_the_same_step(self):
        idle = CountdownTimerState(TimerMode.IDLE, 0, 0)
        nxt = update_countdown(idle, START, (0, 5), tick=True)
        assert nxt == counting(0, 5)


class TestDone:
    """done is a level: Idle and 00:00."""

    def test_done_right_after_reset(self):
        timer = CountdownTimer()
        assert timer.done
        timer.commit(counting(0, 3))
        timer.reset()
        assert timer.done

    @pytest.mark.parametrize("state, expected", [
        (CountdownTimerState(TimerMode.IDLE, 0, 0), True),
        (CountdownTimerState(TimerMode.IDLE, 0, 1), False),
        (CountdownTimerState(TimerMode.IDLE, 1, 0), False),
        (counting(0, 0), False),
        (CountdownTimerState(TimerMode.PAUSED, 0, 0), False),
    ])
    def test_done_iff_idle_at_zero(self, state, expected):
        timer = CountdownTimer()
        timer.commit(state)
        assert timer.done is expected

    def test_zero_target_is_done_before_any_countdown(self):
        timer = CountdownTimer()
        timer.commit(timer.next_state(NO_CMD, (0, 0), tick=False))
        assert timer.done


class TestDigits:
    def test_layout(self):
        digits = timer_digits(12, 34)
        assert digits == (
            SEGMENT_DIGITS[4],
            SEGMENT_DIGITS[3],
            SEGMENT_DIGITS[2] | SEG_DP,
            SEGMENT_DIGITS[1],
            SEG_BLANK,
            SEG_BLANK,
            SEG_BLANK,
            SEG_MARKER,
        )

    def test_timer_digits_follow_state(self):
        timer = CountdownTimer()
        timer.commit(counting(5, 9))
        assert timer.digits() == timer_digits(5, 9)
