# tick_generator.py

import logging

from config import REFERENCE_HZ

logger = logging.getLogger(__name__)


class TickGenerator:
    """
    Divide the reference clock down to a 1 Hz square wave.

    The derived level flips every (threshold + 1) reference cycles, so one
    full low->high->low period is 2 * (threshold + 1) == reference_hz cycles.
    Downstream work must key off the rising edge, never the level.
    """

    def __init__(self, reference_hz: int = REFERENCE_HZ) -> None:
        if reference_hz < 2:
            raise ValueError(f"reference_hz must be at least 2, got {reference_hz}")
        self.reference_hz = int(reference_hz)
        self.threshold = self.reference_hz // 2 - 1
        self.counter = 0
        self.level = False

    def reset(self) -> None:
        self.counter = 0
        self.level = False

    def clock(self) -> bool:
        """Advance one reference cycle. True on a rising edge of the 1 Hz level."""
        if self.counter >= self.threshold:
            self.counter = 0
            self.level = not self.level
            return self.level
        self.counter += 1
        return False

    def advance(self, cycles: int) -> int:
        """Fast-forward `cycles` reference cycles; return the rising edges crossed."""
        if cycles <= 0:
            return 0

        period = self.threshold + 1
        until_flip = self.threshold - self.counter + 1
        if cycles < until_flip:
            self.counter += cycles
            return 0

        flips = 1 + (cycles - until_flip) // period
        self.counter = (cycles - until_flip) % period

        rising = (flips + 1) // 2 if not self.level else flips // 2
        if flips % 2:
            self.level = not self.level

        logger.debug("advanced %d cycles: %d flips, %d ticks", cycles, flips, rising)
        return rising
