# display.py

from typing import List, Sequence

from config import (
    NUM_SLOTS,
    POWER_SLOT,
    SEG_BLANK,
    SEG_DP,
    SEG_MARKER,
    SEG_POWER_HIGH,
    SEG_POWER_LOW,
    SEG_POWER_MEDIUM,
    SEGMENT_DIGITS,
)
from model import DisplayFrame, PowerBracket, power_bracket

_POWER_CODES = {
    PowerBracket.LOW: SEG_POWER_LOW,
    PowerBracket.MEDIUM: SEG_POWER_MEDIUM,
    PowerBracket.HIGH: SEG_POWER_HIGH,
}

# code (without dp) -> printable glyph, for text rendering only
_GLYPHS = {code: str(n) for n, code in enumerate(SEGMENT_DIGITS)}
_GLYPHS.update({
    SEG_BLANK: " ",
    SEG_MARKER: "P",
    SEG_POWER_LOW: "_",
    SEG_POWER_MEDIUM: "-",
    SEG_POWER_HIGH: "‾",
})


def encode_digit(value: int, dp: bool = False) -> int:
    if not 0 <= value <= 9:
        raise ValueError(f"digit out of range: {value}")
    code = SEGMENT_DIGITS[value]
    return code | SEG_DP if dp else code


def decode_digit(code: int) -> str:
    glyph = _GLYPHS.get(code & ~SEG_DP, "?")
    return glyph + "." if code & SEG_DP else glyph


def power_code(level: int) -> int:
    return _POWER_CODES[power_bracket(level)]


def compose_frame(
    timer_digits: Sequence[int],
    power_level: int,
    indicator: int,
    active_slot: int,
) -> DisplayFrame:
    """
    Merge the countdown's digits with the power gauge.

    The power slot is shared: while the scan is on POWER_SLOT its data is the
    power code, on every other slot it carries the countdown's own digit.
    """
    if len(timer_digits) != NUM_SLOTS:
        raise ValueError(f"expected {NUM_SLOTS} digit codes, got {len(timer_digits)}")
    if not 0 <= active_slot < NUM_SLOTS:
        raise ValueError(f"active slot out of range: {active_slot}")

    digits = list(timer_digits)
    if active_slot == POWER_SLOT:
        digits[POWER_SLOT] = power_code(power_level)

    return DisplayFrame(digits=tuple(digits), active_slot=active_slot, indicator=indicator)


class ScanCounter:
    """Active-slot index of the multiplex scan; one slot per step."""

    def __init__(self) -> None:
        self.slot = 0

    def reset(self) -> None:
        self.slot = 0

    def advance(self) -> int:
        self.slot = (self.slot + 1) % NUM_SLOTS
        return self.slot


class ScanLatch:
    """
    What a viewer sees on a multiplexed display: each frame only drives its
    active slot, the others keep whatever they were last driven with.
    """

    def __init__(self) -> None:
        self.codes: List[int] = [SEG_BLANK] * NUM_SLOTS

    def feed(self, frame: DisplayFrame) -> None:
        self.codes[frame.active_slot] = frame.digits[frame.active_slot]

    def text(self) -> str:
        # slot 0 is the rightmost digit
        return "".join(decode_digit(code) for code in reversed(self.codes))
