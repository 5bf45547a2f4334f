"""
Game constants - all magic numbers in one place.
NO UI DEPENDENCIES.
"""

# =============================================================================
# MAZE
# =============================================================================
MAZE_CELL_ROWS = 5    # characters per maze cell, including its top wall row
MAZE_CELL_COLS = 10   # characters per maze cell, including its left wall column
MIN_MAZE_CELLS = 2    # smallest cell count per axis that still forms a torus maze

# =============================================================================
# TIMING (all in milliseconds)
# =============================================================================
PLAYER_UPDATE_MS = 50
RAT_UPDATE_MS = 100
BRAT_UPDATE_MS = 75
FACTORY_UPDATE_MS = 250
BULLET_UPDATE_MS = 10

PLAYER_FIRE_RATE_MS = 1000 // 8   # 8 shots per second
RAT_SPAWN_MS = 15_000             # new_rats refill period
BRAT_SPAWN_MS = 10_000            # new_brats refill period

# =============================================================================
# SCORING
# =============================================================================
RAT_KILL = 50
BRAT_KILL = 25
FACTORY_KILL = 250

# =============================================================================
# PLAYER
# =============================================================================
MAX_HEALTH = 100
DEFAULT_LIVES = 3

# =============================================================================
# ENEMIES
# =============================================================================
WANDER_MIN_STEPS = 5
WANDER_MAX_STEPS = 15
DETECT_RADIUS_SQUARED = 15 * 15    # enemies notice the player inside this
BREED_CHANCE = 0.5                 # per eligible rat tick while brats are pending
RATS_PER_FACTORY = 1
BRATS_PER_RAT = 0.5

# =============================================================================
# COMBAT
# =============================================================================
BULLET_HARMLESS_TICKS = 4          # bullet ticks before it may hit the player
BLAST_RADIUS_SQUARED = 6 * 6       # collateral blast around a dying player
SUPER_BOOM_FRAMES = 12

# =============================================================================
# PLACEMENT
# =============================================================================
PLACEMENT_ATTEMPTS = 1000
FACTORY_PLAYER_CLEARANCE_SQUARED = 250
FACTORY_SPACING_SQUARED = 25
