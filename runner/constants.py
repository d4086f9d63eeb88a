"""Gameplay and tuning constants.

Motion values (gravity, velocities, speed) are per tick; durations are in
milliseconds. The playfield is an 800x300 base canvas scaled to the window.
"""

# Playfield
BASE_W = 800
BASE_H = 300
GROUND_OFFSET = 58  # ground line sits this far above the bottom edge
GROUND_Y = BASE_H - GROUND_OFFSET
CEILING_MARGIN = 8  # character never rises above this y

# Loop
FRAME_MS = 16.67  # nominal tick length the tuning was done against
MAX_DT_MS = 50.0  # clamp after a stall (minimised window, debugger)

# Character
CHARACTER_X = 60
CHARACTER_W = 70
CHARACTER_H = 76
CHARACTER_DUCK_H = 52

# Physics
GRAVITY = 0.6
JUMP_VELOCITY = -12.5
FLOAT_GRAVITY_FACTOR = 0.75  # gravity multiplier while jump is held on the way up
MAX_JUMP_HOLD_MS = 160.0

# Run progression
START_SPEED = 4.6
SPEED_ACCEL_PER_MS = 0.00020
SCORE_PER_MS = 0.02
PASS_BONUS = 4

# Obstacles
OBSTACLE_SPAWN_MARGIN = 30  # spawn this far past the right edge
OBSTACLE_DESPAWN_X = -20  # removed once x + w drops to this
SIGN_POST_W = 6
SIGN_POST_H_MIN = 24
SIGN_POST_H_RANGE = 10
SIGN_POST_H_DIFFICULTY = 4  # extra minimum post height at full difficulty
SIGN_BOARD_W_MIN = 44
SIGN_BOARD_W_RANGE = 12
SIGN_BOARD_H_SHORT = 16
SIGN_BOARD_H_TALL = 24
SIGN_SHORT_BOARD_CHANCE = 0.45

# Spawn cadence
PHASE_BOUNDARIES_MS = (15000, 30000, 60000)
PHASE_BASE_COOLDOWN_MS = {1: 1650, 2: 1300, 3: 1100, 4: 950}
COOLDOWN_SPEED_BASELINE = 5.0
COOLDOWN_MS_PER_SPEED = 75
COOLDOWN_MAX_REDUCTION_MS = 420
COOLDOWN_FLOOR_MS = 420
DIFFICULTY_RAMP_MS = 120000

# Clusters
SAFE_GAP_AIRTIME_MS = 600
SAFE_GAP_RUNUP_MS = 220
SAFE_GAP_MIN_PX = 80
SAFE_GAP_MAX_PX = 220
CLUSTER_JITTER_PX = 6

# Clouds (decorative)
CLOUD_INTERVAL_MS = 2000
CLOUD_SPAWN_MARGIN = 40
CLOUD_Y_MIN = 40
CLOUD_Y_RANGE = 80
CLOUD_W = 44
CLOUD_PARALLAX = 0.2

# Score service
LEADERBOARD_LIMIT = 50
TWITTER_MAX_LEN = 40
WALLET_MAX_LEN = 100

__all__ = [name for name in globals().keys() if name.isupper()]
