"""
Cell Capacity Kiosk — Configuration
====================================
All constants for the kiosk demo: reveal pacing, frame timing,
axis padding, colours and metric sizes.

CLI flags in main.py override the pacing values per run.
"""

# ═══════════════════════════════════════════════════════════════
# REVEAL PACING
# ═══════════════════════════════════════════════════════════════

VOLTAGE_TIME_DURATION_MS = 50 * 1000      # 100 points over 50 s
CURRENT_VOLTAGE_DURATION_MS = 25 * 1000   # IV sweep over 25 s
INITIAL_SAMPLE_COUNT = 5                  # shown before the animation begins

# Canvas timer interval for one "display frame" (~60 Hz)
FRAME_INTERVAL_MS = 16

# Per-frame progress lines ("[Reveal] 40/100 (40%)")
VERBOSE_REVEAL = False

# ═══════════════════════════════════════════════════════════════
# DATA
# ═══════════════════════════════════════════════════════════════

TIME_STEP_S = 0.5                 # voltage-time sampling interval
TIME_POINT_COUNT = 100            # 0 .. 49.5 s
CELL_NUMBERS = (1, 2, 3, 4, 5)
VARIATION_SEED = 2024             # per-cell Bode variation

# CSV replay columns (current-voltage sweep)
CSV_X_COLUMN = "voltage_v"
CSV_Y_COLUMN = "current_a"

# ═══════════════════════════════════════════════════════════════
# CHART LAYOUT
# ═══════════════════════════════════════════════════════════════

# Fractional padding added to the full-series axis range
VOLTAGE_TIME_PADDING = (0.05, 0.10)       # (time, voltage)
CURRENT_VOLTAGE_PADDING = (0.10, 0.10)    # (voltage, current)

SERIES_PRESETS = {
    "voltage-time": {
        "title": "Voltage vs Time",
        "x_label": "Time (s)",
        "y_label": "Voltage (V)",
        "duration_ms": VOLTAGE_TIME_DURATION_MS,
        "padding": VOLTAGE_TIME_PADDING,
        "sort_by_x": False,
    },
    "current-voltage": {
        "title": "Current vs Voltage Analysis",
        "x_label": "Voltage (V)",
        "y_label": "Current (A)",
        "duration_ms": CURRENT_VOLTAGE_DURATION_MS,
        "padding": CURRENT_VOLTAGE_PADDING,
        "sort_by_x": True,
    },
}

# ═══════════════════════════════════════════════════════════════
# THEME
# ═══════════════════════════════════════════════════════════════

BG_COLOR = "#f9fafb"       # gray-50 page background
PANEL_COLOR = "#ffffff"
TEXT_COLOR = "#1f2937"
MUTED_TEXT_COLOR = "#4b5563"
GRID_COLOR = "#d1d5db"
LINE_COLOR = "#2563eb"
START_BUTTON_COLOR = "#4ade80"

SOH_COLOR = "#22c55e"
RUL_COLOR = "#3b82f6"
OCV_COLOR = "#a855f7"

# ═══════════════════════════════════════════════════════════════
# METRICS (LargeMetric sizes, in px)
# ═══════════════════════════════════════════════════════════════

METRIC_SIZE_MULTIPLIER = 1.0    # scales every metric font at once

METRIC_BASE_FONT_SIZES = {
    "medium":  {"label": 24, "value": 32, "sub_value": 16},
    "large":   {"label": 28, "value": 40, "sub_value": 20},
    "xlarge":  {"label": 32, "value": 48, "sub_value": 24},
    "xxlarge": {"label": 36, "value": 56, "sub_value": 28},
}

# Headline labels use a fixed, larger label size
HEADLINE_METRIC_LABELS = ("SoH:", "RUL:", "OCV:")
HEADLINE_LABEL_SIZE = 48

SOH_TOLERANCE_TEXT = "(±2%)"
