"""Default constants for the map viewer."""

MIN_SCALE = 0.0001
MAX_SCALE = 0.5
# How far the user has to scroll (in "pixels") to go from minimum to maximum scale.
MAX_SCROLL = 8000.0

SCROLL_DURATION_MS = 100.0
JUMP_DURATION_MS = 1000.0
JUMP_LEG_DURATION_MS = 750.0

FRAME_INTERVAL_MS = 16

LABEL_TEXT_HEIGHT = 16
LABEL_GRID_RESOLUTION = 512
LABEL_FONT_FAMILY = "sans serif"

# Floats per vertex: x, y, r, g, b, a.
VERTEX_STRIDE = 6

BACKGROUND_COLOR = "#1a1a1a"

# key -> (name, x, y, width, height) in map units.
DEFAULT_PRESETS = {
    "0": ("Australia", -1863361.0, 1168642.0, 3951342.0, 3671953.0),
    "1": ("Melbourne", 1140377.0, 4187714.0, 8624.0, 8663.0),
    "2": ("Sydney", 1757198.0, 3827047.0, 5905.0, 7899.0),
}

SAVE_SLOT_KEYS = {
    "Ctrl+F1": "F1",
    "Ctrl+F2": "F2",
    "Ctrl+F3": "F3",
    "Ctrl+F4": "F4",
}
RESTORE_SLOT_KEYS = ("F1", "F2", "F3", "F4")

# Browsers report about 100 "pixels" per wheel notch; Qt reports 120 units.
SCROLL_PIXELS_PER_NOTCH = 100.0
WHEEL_UNITS_PER_NOTCH = 120.0
