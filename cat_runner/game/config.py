# --- Display ---
WIDTH = 800
HEIGHT = 260
FPS = 60
GROUND_MARGIN = 40
GROUND_Y = HEIGHT - GROUND_MARGIN   # y line the cat and obstacles stand on

# --- Timing ---
REFERENCE_FRAME_MS = 16.67          # nominal frame duration (60 Hz)

# --- Cat ---
CAT_X = 80                          # cat's fixed x (world scrolls left)
CAT_W = 40
CAT_H = 40
GRAVITY = 0.9                       # added to vy once per tick
JUMP_FORCE = 15.0                   # vy = -JUMP_FORCE on jump

# --- Obstacles ---
OBSTACLE_PROFILES = {
    "low": (22, 40),                # (width, height)
    "tall": (28, 60),
}
TALL_CHANCE = 0.4
SPAWN_OFFSET_X = 20                 # spawn this far beyond the right edge
DESPAWN_X = -20                     # drop once right edge is left of this
SPAWN_MIN_MS = 700.0
SPAWN_MAX_MS = 1300.0

# --- Run / difficulty ---
BASE_SPEED = 6.0
MAX_SPEED = 16.0
ACCEL_PER_MS = 0.0005
SCORE_PER_MS = 0.02

# --- Persistence ---
BEST_SCORE_KEY = "catRunnerHighScore"
SCORES_FILE_DEFAULT = "~/.cat_runner/scores.json"

# --- Text ---
TITLE = "Cat Runner"
READY_TITLE = "Kitty is ready"
READY_MESSAGE = "Press SPACE or UP to start and help the cat dodge the obstacles!"
OVER_TITLE = "Game over"

# --- Colors (RGB) ---
COLOR_BG = (15, 23, 42)
COLOR_FG = (226, 232, 240)
COLOR_MUTED = (148, 163, 184)
COLOR_GROUND = (75, 85, 99)
COLOR_GROUND_DASH = (55, 65, 81)
COLOR_CLOUD = (229, 231, 235)
COLOR_OBSTACLE = (156, 163, 175)
COLOR_CAT_BODY = (56, 189, 248)
COLOR_CAT_HEAD = (14, 165, 233)
COLOR_CAT_ACCENT = (168, 85, 247)
COLOR_CAT_LIGHT = (224, 242, 254)
COLOR_CAT_EYE = (34, 211, 238)
COLOR_CAT_DARK = (15, 23, 42)
COLOR_PANEL = (30, 41, 59)
COLOR_PANEL_EDGE = (90, 130, 180)
