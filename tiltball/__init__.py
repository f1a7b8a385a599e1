# ── Central defaults (tune here, not scattered across files) ──

# Arena
ARENA_WIDTH = 720.0
ARENA_HEIGHT = 960.0

# Ball
BALL_START = (220.0, 220.0)
BALL_RADIUS = 38.0

# Obstacles as (left, top, width, height)
OBSTACLES = (
    (80.0, 260.0, 360.0, 32.0),
    (120.0, 520.0, 32.0, 260.0),
    (260.0, 500.0, 360.0, 36.0),
    (520.0, 260.0, 36.0, 420.0),
    (180.0, 860.0, 420.0, 32.0),
)

# Frame loop
TILT_GAIN = 180.0
DAMPING = 0.985
DEFAULT_DT = 0.016
MAX_DT = 0.05

# Collision response
EDGE_PERPENDICULAR = 0.45
EDGE_PARALLEL = 0.9
OBSTACLE_BOUNCE = 0.35

# Rendering
FPS = 60
WINDOW_COLOR = (0x0F, 0x17, 0x2A)
ARENA_COLOR = (0x0F, 0x1F, 0x3F)
OBSTACLE_COLOR = (0x18, 0xCE, 0xD8)
BALL_COLOR = (0xFF, 0xC8, 0x57)
TITLE_COLOR = (0xFF, 0xE2, 0x9A)
SUBTITLE_COLOR = (0xAE, 0xD9, 0xE0)
TITLE_TEXT = 'Tilt to roll the ball'
SUBTITLE_TEXT = 'Avoid the neon walls'
LABEL_PADDING = 24

# Virtual gyroscope (desktop keyboard), rad/s per held key
KEY_RATE = 1.5
