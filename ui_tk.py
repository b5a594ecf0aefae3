# ui_tk.py

import logging
import tkinter as tk
from tkinter import END, LEFT, WORD, BooleanVar, StringVar, X

import ttkbootstrap as tb

from config import (
    BG_COLOR,
    FG_COLOR,
    FONT_DIGITS,
    FONT_MONO,
    FONT_TITLE,
    INDICATOR_COLORS,
    NUM_SLOTS,
    READ_INTERVAL_MS,
    SEGMENT_ON_COLOR,
    UI_THEME,
)
from controller import ApplianceSystem
from display import ScanLatch
from model import AdjustMode, power_bracket
from panel_inputs import PanelLatch

# one full display scan per poll; the clock is sized so ticks land on wall-clock seconds
STEPS_PER_POLL = NUM_SLOTS
SIM_CLOCK_HZ = STEPS_PER_POLL * 1000 // READ_INTERVAL_MS

KEY_BINDINGS = {
    "s": "start",
    "p": "pause",
    "x": "stop",
    "Up": "increment",
    "Down": "decrement",
}


class TextHandler(logging.Handler):
    def __init__(self, widget):
        super().__init__()
        self.widget = widget

    def emit(self, record):
        msg = self.format(record)
        self.widget.after(0, lambda: (
            self.widget.insert(END, msg + "\n"),
            self.widget.see(END),
        ))


class PanelWindow:
    def __init__(self) -> None:
        # --- Window setup ---
        style = tb.Style(theme=UI_THEME)
        self.root = style.master
        self.root.title("Appliance Timer")
        self.root.configure(bg=BG_COLOR)

        self.system = ApplianceSystem(reference_hz=SIM_CLOCK_HZ)
        self.latch = PanelLatch()
        self.view = ScanLatch()

        self.door_var = BooleanVar(value=False)
        self.power_var = BooleanVar(value=False)
        self.adjust_var = StringVar(value=AdjustMode.SECONDS_UNITS.value)

        self._build_widgets()
        self._bind_keys()

        self.logger = logging.getLogger("appliance")
        # root logger so the controller and countdown modules show up too;
        # removed again in on_close
        self.log_handler = TextHandler(self.log_txt)
        self.log_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s", "%H:%M:%S"))
        logging.getLogger().addHandler(self.log_handler)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        # Start polling
        self.root.after(READ_INTERVAL_MS, self.poll)

    def _build_widgets(self) -> None:
        # Row 0: digits + indicator
        top = tb.Frame(self.root, padding=10)
        top.pack(fill=X)

        self.label_digits = tk.Label(
            top,
            text=" " * NUM_SLOTS,
            bg=BG_COLOR,
            fg=SEGMENT_ON_COLOR,
            font=FONT_DIGITS,
        )
        self.label_digits.pack(side=LEFT, padx=(0, 20))

        self.lamp = tk.Label(top, text="  ", width=3, bg=INDICATOR_COLORS[0])
        self.lamp.pack(side=LEFT, padx=4)

        # Row 1: modes
        self.label_modes = tk.Label(self.root, text="", bg=BG_COLOR, fg=FG_COLOR, font=FONT_TITLE)
        self.label_modes.pack(fill=X, padx=10)

        self.label_status = tk.Label(self.root, text="", bg=BG_COLOR, fg=FG_COLOR, font=FONT_MONO)
        self.label_status.pack(fill=X, padx=10, pady=(0, 10))

        # Row 2: event buttons
        buttons = tb.Frame(self.root, padding=(10, 0))
        buttons.pack(fill=X)
        for text, event, look in (
            ("Start", "start", "success"),
            ("Pause", "pause", "warning"),
            ("Stop", "stop", "danger"),
            ("+", "increment", "secondary"),
            ("-", "decrement", "secondary"),
        ):
            tb.Button(
                buttons, text=text, bootstyle=look, width=7,
                command=lambda e=event: self.latch.press(e),
            ).pack(side=LEFT, padx=2)
        tb.Button(buttons, text="Reset", bootstyle="dark", command=self.on_reset).pack(side=LEFT, padx=(12, 0))

        # Row 3: levels + adjust mode
        levels = tb.Frame(self.root, padding=10)
        levels.pack(fill=X)
        tb.Checkbutton(
            levels, text="Door open", variable=self.door_var,
            command=lambda: self.latch.set_door_open(self.door_var.get()),
        ).pack(side=LEFT, padx=(0, 10))
        tb.Checkbutton(
            levels, text="Power adjust", variable=self.power_var,
            command=lambda: self.latch.set_power_enable(self.power_var.get()),
        ).pack(side=LEFT, padx=(0, 20))
        for mode in (AdjustMode.MINUTES_TENS, AdjustMode.MINUTES_UNITS,
                     AdjustMode.SECONDS_TENS, AdjustMode.SECONDS_UNITS):
            tb.Radiobutton(
                levels, text=mode.value, variable=self.adjust_var, value=mode.value,
                command=lambda: self.latch.set_adjust_mode(AdjustMode(self.adjust_var.get())),
            ).pack(side=LEFT, padx=2)

        # Row 4: log
        self.log_txt = tk.Text(self.root, height=8, wrap=WORD, bg=BG_COLOR, fg=FG_COLOR, font=FONT_MONO)
        self.log_txt.pack(fill=X, padx=10, pady=(0, 10))

    def _bind_keys(self) -> None:
        for key, event in KEY_BINDINGS.items():
            self.root.bind(f"<KeyPress-{key}>", lambda _e, ev=event: self.latch.set_button_level(ev, True))
            self.root.bind(f"<KeyRelease-{key}>", lambda _e, ev=event: self.latch.set_button_level(ev, False))

    def on_reset(self) -> None:
        self.latch.clear()
        self.view = ScanLatch()
        self.system.reset()
        self.logger.info("reset")

    def on_close(self) -> None:
        logging.getLogger().removeHandler(self.log_handler)
        self.root.destroy()

    def poll(self) -> None:
        inputs = self.latch.sample()
        before = self.system.snapshot()

        for i in range(STEPS_PER_POLL):
            frame = self.system.step(inputs if i == 0 else inputs.levels_only())
            self.view.feed(frame)

        snap = self.system.snapshot()
        if snap.appliance_mode is not before.appliance_mode:
            self.logger.info("%s -> %s", before.appliance_mode.name, snap.appliance_mode.name)

        self.label_digits.config(text=self.view.text())
        self.lamp.config(bg=INDICATOR_COLORS.get(snap.indicator, INDICATOR_COLORS[0]))
        self.label_modes.config(
            text=f"Appliance: {snap.appliance_mode.name}   Timer: {snap.timer_mode.name}"
        )
        self.label_status.config(
            text=(
                f"Target {snap.target_minutes:02d}:{snap.target_seconds:02d}   "
                f"Power {power_bracket(snap.power_level).value}   "
                f"{'DONE' if snap.done else ''}"
            )
        )

        self.root.after(READ_INTERVAL_MS, self.poll)

    def run(self) -> None:
        self.root.mainloop()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    PanelWindow().run()
