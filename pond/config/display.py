"""Display and loop timing constants."""

# Default window size in pixels
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720

# Fixed simulation tick rate, in ticks per second
TARGET_TICK_RATE = 120

# Display refresh rate for the pygame window
DISPLAY_FRAME_RATE = 60

# Ticks allowed per display frame before the accumulator is dropped
MAX_TICKS_PER_ADVANCE = 10

# Used to turn surface pixels into square inches for population sizing
PIXELS_PER_INCH = 96

# Side length of a spatial grid cell; bounds how far agents can "see"
CELL_SIZE = 50

# Window resizes are applied once the size has been stable this long
RESIZE_DEBOUNCE_SECONDS = 0.25

WINDOW_CAPTION = "Koi Pond"

# Width of separator lines in console output
SEPARATOR_WIDTH = 60
