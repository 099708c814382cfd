"""Constants and configuration for romglyph."""

# Glyph dimension limits (pixels)
MIN_GLYPH_SIZE = 1
MAX_GLYPH_SIZE = 32

# Default glyph format for new character sets
DEFAULT_WIDTH = 8
DEFAULT_HEIGHT = 8

# Raster sampling defaults
DEFAULT_THRESHOLD = 128
DEFAULT_MAX_CHARACTERS = 256
MAX_ROTATION = 5.0  # degrees, either direction

# Background color used for transparent and out-of-bounds raster pixels
BACKGROUND_RGB = (255, 255, 255)
BACKGROUND_BRIGHTNESS = 255

# Perceived brightness weights (ITU-R BT.601)
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

# Historically common glyph sizes tried by grid dimension detection, in catalog order
COMMON_GLYPH_SIZES: tuple[tuple[int, int], ...] = (
    (5, 7),
    (5, 8),
    (5, 9),
    (6, 8),
    (8, 8),
    (8, 10),
    (8, 12),
    (8, 14),
    (8, 16),
    (16, 16),
    (32, 32),
)

# Character counts of well-known character generator ROMs
PREFERRED_CHARACTER_COUNTS = (64, 96, 128, 213, 256, 512)

# Grid overlay color (RGBA, semi-transparent cyan)
GRID_OVERLAY_COLOR = (0, 255, 255, 128)

# Share strings
SHARE_VERSION_PREFIX = "2:"
MAX_RECOMMENDED_URL_LENGTH = 2000
MAX_URL_LENGTH = 8000
SHARE_BASE_PATH = "/tools/character-rom-editor/shared"

# File extensions
BINARY_EXTENSIONS = (".bin", ".rom", ".chr", ".fnt", ".dat")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp")

# Valid enum values (used by CLI choices and config validation)
PADDING_CHOICES = ("left", "right")
BIT_DIRECTION_CHOICES = ("ltr", "rtl")
BYTE_ORDER_CHOICES = ("big", "little")
ANCHOR_CHOICES = ("tl", "tc", "tr", "ml", "mc", "mr", "bl", "bc", "br")
READING_ORDER_CHOICES = (
    "ltr-ttb",
    "rtl-ttb",
    "ltr-btt",
    "rtl-btt",
    "ttb-ltr",
    "ttb-rtl",
    "btt-ltr",
    "btt-rtl",
)
