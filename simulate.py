# simulate.py
# Headless run of the appliance timer: scripted panel actions, one status line per second.

import argparse
import csv
import logging
import os
import signal
import sys
import time
from typing import Dict, List, Optional, Tuple

from controller import ApplianceSystem
from display import ScanLatch
from model import AdjustMode, SystemSnapshot, format_mmss, power_bracket
from panel_inputs import PanelLatch

DEFAULT_CLOCK_HZ = 1000

PRESS_ACTIONS = {
    "start": "start",
    "pause": "pause",
    "stop": "stop",
    "inc": "increment",
    "dec": "decrement",
}
LEVEL_ACTIONS = ("door-open", "door-close", "power-on", "power-off")
ACTIONS = tuple(PRESS_ACTIONS) + LEVEL_ACTIONS + ("mode", "reset")

CSV_HEADER = ["second", "outer_mode", "timer_mode", "time", "power_level", "indicator", "display"]

Action = Tuple[str, Optional[str]]


# --------------------- parsing ---------------------
def parse_mmss(text: str) -> Tuple[int, int]:
    try:
        mm, ss = text.split(":")
        minutes, seconds = int(mm), int(ss)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected MM:SS, got {text!r}")
    if not (0 <= minutes <= 99 and 0 <= seconds <= 59):
        raise argparse.ArgumentTypeError(f"time out of range: {text!r}")
    return minutes, seconds


def parse_script(lines) -> Dict[int, List[Action]]:
    """
    Parse `<second> <action> [arg]` lines into {second: [(action, arg), ...]}.
    Blank lines and `#` comments are ignored. Raises ValueError with the line number.
    """
    script: Dict[int, List[Action]] = {}
    for lineno, raw in enumerate(lines, start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split()
        try:
            second = int(parts[0])
        except ValueError:
            raise ValueError(f"line {lineno}: bad second {parts[0]!r}")
        if second < 0 or len(parts) < 2:
            raise ValueError(f"line {lineno}: expected '<second> <action> [arg]'")

        action = parts[1]
        arg = parts[2] if len(parts) > 2 else None
        if action not in ACTIONS:
            raise ValueError(f"line {lineno}: unknown action {action!r}")
        if action == "mode":
            try:
                AdjustMode(arg)
            except ValueError:
                choices = ", ".join(m.value for m in AdjustMode)
                raise ValueError(f"line {lineno}: mode needs one of {choices}")
        script.setdefault(second, []).append((action, arg))
    return script


def dial_presses(minutes: int, seconds: int) -> List[Tuple[AdjustMode, int]]:
    """Increment presses per digit group that dial MM:SS up from 00:00."""
    return [
        (AdjustMode.MINUTES_TENS, minutes // 10),
        (AdjustMode.MINUTES_UNITS, minutes % 10),
        (AdjustMode.SECONDS_TENS, seconds // 10),
        (AdjustMode.SECONDS_UNITS, seconds % 10),
    ]


# --------------------- running ---------------------
class ScriptedPanel:
    def __init__(self, clock_hz: int) -> None:
        self.clock_hz = clock_hz
        self.system = ApplianceSystem(reference_hz=clock_hz)
        self.latch = PanelLatch()
        self.view = ScanLatch()

    def press(self, event: str) -> None:
        self.latch.press(event)
        self._step()

    def dial(self, minutes: int, seconds: int) -> None:
        saved = self.latch.adjust_mode
        for mode, count in dial_presses(minutes, seconds):
            self.latch.set_adjust_mode(mode)
            for _ in range(count):
                self.press("increment")
        self.latch.set_adjust_mode(saved)

    def apply(self, action: str, arg: Optional[str]) -> None:
        if action in PRESS_ACTIONS:
            self.press(PRESS_ACTIONS[action])
        elif action == "door-open":
            self.latch.set_door_open(True)
        elif action == "door-close":
            self.latch.set_door_open(False)
        elif action == "power-on":
            self.latch.set_power_enable(True)
        elif action == "power-off":
            self.latch.set_power_enable(False)
        elif action == "mode":
            self.latch.set_adjust_mode(AdjustMode(arg))
        elif action == "reset":
            self.latch.clear()
            self.view = ScanLatch()
            self.system.reset()

    def run_second(self) -> None:
        """Run the remainder of one simulated second."""
        remaining = self.clock_hz - (self.system.cycle % self.clock_hz)
        # the view needs a full scan to be current; skip the rest when idle
        scan = min(remaining, 8)
        for _ in range(scan):
            self._step()
        if remaining > scan:
            self.system.fast_forward(remaining - scan, self.latch.sample())

    def _step(self) -> None:
        frame = self.system.step(self.latch.sample())
        self.view.feed(frame)


def status_line(second: int, snap: SystemSnapshot, display_text: str) -> str:
    return (
        f"[t={second:4d}s] outer={snap.appliance_mode.name:<13} "
        f"timer={snap.timer_mode.name:<13} {snap.time_text} "
        f"power={power_bracket(snap.power_level).value:<6} ind={snap.indicator:03b} "
        f"| {display_text}"
    )


def open_csv(path: str):
    new = not os.path.exists(path)
    f = open(path, "a", newline="", encoding="utf-8")
    w = csv.writer(f)
    if new:
        w.writerow(CSV_HEADER)
    return f, w


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Run the appliance timer headless from a panel script.")
    ap.add_argument("--target", type=parse_mmss, default=None, help="Dial this MM:SS before second 0.")
    ap.add_argument("--script", type=str, default=None, help="Script file: '<second> <action> [arg]' per line.")
    ap.add_argument("--seconds", type=int, default=10, help="Simulated seconds to run (default 10).")
    ap.add_argument("--clock-hz", type=int, default=DEFAULT_CLOCK_HZ,
                    help=f"Simulated reference clock in Hz (default {DEFAULT_CLOCK_HZ}).")
    ap.add_argument("--csv", type=str, default=None, help="Append one row per second to this CSV.")
    ap.add_argument("--realtime", action="store_true", help="Pace the run to wall-clock seconds.")
    ap.add_argument("--debug", action="store_true", help="Log every state transition.")
    return ap


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.clock_hz < 2:
        ap.error("--clock-hz must be at least 2")
    if args.seconds < 0:
        ap.error("--seconds must not be negative")

    script: Dict[int, List[Action]] = {}
    if args.script:
        try:
            with open(args.script, encoding="utf-8") as f:
                script = parse_script(f)
        except OSError as e:
            ap.error(f"cannot read script: {e}")
        except ValueError as e:
            ap.error(f"{args.script}: {e}")

    panel = ScriptedPanel(args.clock_hz)
    if args.target is not None:
        panel.dial(*args.target)
        print(f"[+] Target set to {format_mmss(*args.target)}")

    csv_file, writer = open_csv(args.csv) if args.csv else (None, None)
    if csv_file is not None:
        print(f"[+] Logging to: {os.path.abspath(args.csv)}")

    def cleanup(*_):
        if csv_file is not None:
            csv_file.close()
        print("\n[+] Stopped.")
        sys.exit(0)

    previous_handler = signal.signal(signal.SIGINT, cleanup)

    next_tick = time.monotonic()
    try:
        for second in range(args.seconds):
            if args.realtime:
                now = time.monotonic()
                if now < next_tick:
                    time.sleep(next_tick - now)
                next_tick += 1.0

            for action, arg in script.get(second, []):
                panel.apply(action, arg)
            panel.run_second()

            snap = panel.system.snapshot()
            text = panel.view.text()
            print(status_line(second, snap, text))
            if writer is not None:
                writer.writerow([
                    second,
                    snap.appliance_mode.name,
                    snap.timer_mode.name,
                    snap.time_text,
                    snap.power_level,
                    f"{snap.indicator:03b}",
                    text,
                ])
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        if csv_file is not None:
            csv_file.close()

    if script and max(script) >= args.seconds:
        print(f"[i] Script actions after second {args.seconds - 1} were not reached.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
