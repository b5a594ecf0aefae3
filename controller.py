# controller.py

import logging
from dataclasses import replace
from typing import Optional, Tuple

from config import NUM_SLOTS, REFERENCE_HZ
from countdown import CountdownTimer
from display import ScanCounter, compose_frame
from model import (
    ApplianceMode,
    ApplianceState,
    DisplayFrame,
    PanelInputs,
    SystemSnapshot,
    TimerCommands,
    TimerMode,
    adjust_power,
    decrement_time,
    increment_time,
    indicator_code,
)
from tick_generator import TickGenerator

logger = logging.getLogger(__name__)


def next_appliance_mode(mode: ApplianceMode, inputs: PanelInputs, timer_done: bool) -> ApplianceMode:
    door_closed = not inputs.door_open

    if mode is ApplianceMode.IDLE:
        if inputs.start and door_closed:
            return ApplianceMode.COUNTING_DOWN
        return ApplianceMode.IDLE
    elif mode is ApplianceMode.COUNTING_DOWN:
        if timer_done or inputs.stop:
            return ApplianceMode.IDLE
        # door open is a level: it keeps forcing the pause
        if inputs.pause or inputs.door_open:
            return ApplianceMode.PAUSED
        return ApplianceMode.COUNTING_DOWN
    elif mode is ApplianceMode.PAUSED:
        if inputs.start and door_closed:
            return ApplianceMode.COUNTING_DOWN
        if inputs.stop:
            return ApplianceMode.IDLE
        return ApplianceMode.PAUSED

    # unknown encoding
    return ApplianceMode.IDLE


def timer_commands(
    current: ApplianceMode,
    nxt: ApplianceMode,
    inputs: PanelInputs,
    timer_mode: TimerMode = TimerMode.PAUSED,
) -> TimerCommands:
    """Translate an outer transition into the one-shot commands the countdown understands.

    Resuming from Paused is a pause toggle on the countdown side, not a start.
    If the countdown reached zero on the step the pause landed, it is idle
    rather than paused, so the resume is sent as a start instead.
    Finishing on timer_done needs no command: the countdown is already idle.
    """
    if current is nxt:
        return TimerCommands()
    if nxt is ApplianceMode.COUNTING_DOWN:
        if current is ApplianceMode.PAUSED and timer_mode is TimerMode.PAUSED:
            return TimerCommands(pause=True)
        return TimerCommands(start=True)
    if nxt is ApplianceMode.PAUSED:
        return TimerCommands(pause=True)
    if nxt is ApplianceMode.IDLE and inputs.stop:
        return TimerCommands(stop=True)
    return TimerCommands()


def update_appliance(state: ApplianceState, inputs: PanelInputs, timer_done: bool) -> ApplianceState:
    """Next outer state: mode, target time and power level. Indicator is left to commit."""
    minutes, seconds = state.target_minutes, state.target_seconds
    power = state.power_level

    if inputs.power_enable:
        power = adjust_power(power, inputs.increment, inputs.decrement)
    else:
        # adjustment is accepted in every mode
        if inputs.increment:
            minutes, seconds = increment_time(minutes, seconds, inputs.adjust_mode)
        if inputs.decrement:
            minutes, seconds = decrement_time(minutes, seconds, inputs.adjust_mode)

    return replace(
        state,
        mode=next_appliance_mode(state.mode, inputs, timer_done),
        target_minutes=minutes,
        target_seconds=seconds,
        power_level=power,
    )


def refresh_indicator(state: ApplianceState) -> ApplianceState:
    """Recompute the indicator only when the mode changed since last seen.

    A power change without a mode change leaves the indicator as it was.
    """
    if state.mode is state.last_mode_seen:
        return state
    return replace(
        state,
        indicator=indicator_code(state.mode, state.power_level),
        last_mode_seen=state.mode,
    )


class ApplianceController:
    """Outer FSM: gates the countdown on door state and owns target time and power."""

    def __init__(self) -> None:
        self.state = ApplianceState()

    def reset(self) -> None:
        self.state = ApplianceState()

    @property
    def mode(self) -> ApplianceMode:
        return self.state.mode

    @property
    def target(self) -> Tuple[int, int]:
        return self.state.target_minutes, self.state.target_seconds

    def next_state(self, inputs: PanelInputs, timer_done: bool) -> ApplianceState:
        return update_appliance(self.state, inputs, timer_done)

    def timer_commands(
        self, inputs: PanelInputs, next_mode: ApplianceMode, timer_mode: TimerMode
    ) -> TimerCommands:
        return timer_commands(self.state.mode, next_mode, inputs, timer_mode)

    def commit(self, new_state: ApplianceState) -> None:
        if new_state.mode is not self.state.mode:
            logger.debug("appliance %s -> %s", self.state.mode.name, new_state.mode.name)
        self.state = new_state

    def refresh_indicator(self) -> None:
        refreshed = refresh_indicator(self.state)
        if refreshed is not self.state:
            logger.debug("indicator -> %s (power %d)", format(refreshed.indicator, "03b"), refreshed.power_level)
        self.state = refreshed


class ApplianceSystem:
    """
    Tick generator, countdown and appliance controller on one clock.

    Each step computes every next state from the current registers, then
    commits them together, so nothing decided this step is visible to
    another block until the next one.
    """

    def __init__(self, reference_hz: int = REFERENCE_HZ) -> None:
        self.ticks = TickGenerator(reference_hz)
        self.timer = CountdownTimer()
        self.appliance = ApplianceController()
        self.scan = ScanCounter()
        self.cycle = 0

    def reset(self) -> DisplayFrame:
        self.ticks.reset()
        self.timer.reset()
        self.appliance.reset()
        self.scan.reset()
        self.cycle = 0
        logger.debug("system reset")
        return self.frame()

    def step(self, inputs: Optional[PanelInputs] = None) -> DisplayFrame:
        if inputs is None:
            inputs = PanelInputs()

        # --- compute ---
        tick = self.ticks.clock()
        next_outer = self.appliance.next_state(inputs, self.timer.done)
        cmd = self.appliance.timer_commands(inputs, next_outer.mode, self.timer.mode)
        next_inner = self.timer.next_state(cmd, self.appliance.target, tick)

        # --- commit ---
        self.appliance.commit(next_outer)
        self.timer.commit(next_inner)
        self.appliance.refresh_indicator()
        self.scan.advance()
        self.cycle += 1

        return self.frame()

    def run(self, cycles: int, inputs: Optional[PanelInputs] = None) -> DisplayFrame:
        """Step `cycles` times. Events in `inputs` fire on the first step only."""
        if inputs is None:
            inputs = PanelInputs()
        frame = self.frame()
        for i in range(cycles):
            frame = self.step(inputs if i == 0 else inputs.levels_only())
        return frame

    def at_rest(self) -> bool:
        """Both machines idle and the countdown already mirroring the target."""
        inner = self.timer.state
        return (
            self.appliance.mode is ApplianceMode.IDLE
            and self.timer.mode is TimerMode.IDLE
            and (inner.minutes, inner.seconds) == self.appliance.target
        )

    def fast_forward(self, cycles: int, inputs: Optional[PanelInputs] = None) -> DisplayFrame:
        """Skip `cycles` event-free cycles.

        At rest nothing but the tick divider and the scan moves, so those are
        advanced arithmetically; otherwise this falls back to stepping.
        """
        if inputs is None:
            inputs = PanelInputs()
        inputs = inputs.levels_only()
        if not self.at_rest():
            return self.run(cycles, inputs)

        self.ticks.advance(cycles)
        self.scan.slot = (self.scan.slot + cycles) % NUM_SLOTS
        self.cycle += cycles
        return self.frame()

    def frame(self) -> DisplayFrame:
        st = self.appliance.state
        return compose_frame(self.timer.digits(), st.power_level, st.indicator, self.scan.slot)

    def snapshot(self) -> SystemSnapshot:
        outer = self.appliance.state
        inner = self.timer.state
        return SystemSnapshot(
            appliance_mode=outer.mode,
            timer_mode=inner.mode,
            minutes=inner.minutes,
            seconds=inner.seconds,
            target_minutes=outer.target_minutes,
            target_seconds=outer.target_seconds,
            power_level=outer.power_level,
            indicator=outer.indicator,
            done=self.timer.done,
        )
