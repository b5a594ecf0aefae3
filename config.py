# config.py

# --- Clock ---
# Reference clock the tick generator divides down to one tick per second.
REFERENCE_HZ = 100_000_000

# --- Limits ---
MAX_MINUTES = 99
MAX_SECONDS = 59
MAX_POWER_LEVEL = 3          # internal headroom; displayed as "high"

# --- Display ---
NUM_SLOTS = 8
POWER_SLOT = 7               # slot shared between the timer marker and the power level

# 7-segment codes: bits 0..6 = segments a..g, bit 7 = decimal point
SEG_DP = 0x80
SEG_BLANK = 0x00
SEG_MARKER = 0x73            # "P"
SEGMENT_DIGITS = (
    0x3F,  # 0
    0x06,  # 1
    0x5B,  # 2
    0x4F,  # 3
    0x66,  # 4
    0x6D,  # 5
    0x7D,  # 6
    0x07,  # 7
    0x7F,  # 8
    0x6F,  # 9
)

# Power-level gauge: bottom bar / middle bar / top bar
SEG_POWER_LOW = 0x08
SEG_POWER_MEDIUM = 0x40
SEG_POWER_HIGH = 0x01

# Tri-color indicator (3-bit, one-hot)
INDICATOR_OFF = 0b000
INDICATOR_LOW = 0b001
INDICATOR_MEDIUM = 0b010
INDICATOR_HIGH = 0b100

# --- UI ---
READ_INTERVAL_MS = 50
BG_COLOR = "#111111"
FG_COLOR = "#E0E0E0"
SEGMENT_ON_COLOR = "#FF3B30"
FONT_DIGITS = ("Consolas", 36, "bold")
FONT_TITLE = ("Consolas", 14, "bold")
FONT_MONO = ("Consolas", 11)
INDICATOR_COLORS = {
    INDICATOR_OFF: "#333333",
    INDICATOR_LOW: "#34C759",
    INDICATOR_MEDIUM: "#FFCC00",
    INDICATOR_HIGH: "#FF3B30",
}
UI_THEME = "darkly"
