# scene_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the scene
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC SCENE.
Instead, pass a configuration dictionary to the SceneGenerator instance.
================================================================================
"""

# --- Scene Selection ---
# Names are resolved case-insensitively against the enums in styles.py.
DEFAULT_STYLE = "forest"
DEFAULT_WORLD_SIZE = "medium"
DEFAULT_TIME_OF_DAY = "noon"

DEFAULT_ADD_WATER = True
DEFAULT_ADD_TREES = True
DEFAULT_ADD_PROPS = True

# --- Randomness ---
# None means a fresh, non-reproducible random source for every generator.
DEFAULT_RANDOM_SEED = None
# The per-run noise seed is drawn uniformly from [0, SEED_RANGE).
SEED_RANGE = 1000.0
# The permutation table is fixed so that the noise seed alone selects the
# terrain. It is shuffled once from this value.
PERMUTATION_SEED = 1337

# --- Terrain ---
HEIGHTMAP_RESOLUTION = 513
# Vertical extent of the terrain in world units. A normalized height of 1.0
# corresponds to this many units above the terrain origin.
TERRAIN_HEIGHT = 100.0

# Single octave by default, matching a plain Perlin lookup.
NOISE_OCTAVES = 1
NOISE_PERSISTENCE = 0.5
NOISE_LACUNARITY = 2.0

# --- Trees ---
# Candidates per world unit of terrain width.
TREE_DENSITY = 0.5
# Candidates landing below this world height are skipped, not retried.
TREE_MIN_HEIGHT = 12.0
TREE_SCALE_RANGE = (0.8, 1.5)
TRUNK_COLOR = (0.4, 0.25, 0.15)

# --- Props (rocks) ---
PROP_DENSITY = 0.2
PROP_SCALE_RANGE = (0.3, 1.5)
# Lifts rocks slightly so they do not sink into the terrain surface.
PROP_HEIGHT_OFFSET = 0.3

# --- Water ---
# The water plane primitive spans 10 world units at scale 1.
WATER_PLANE_SCALE_DIVISOR = 8.0

# --- Lighting ---
SUN_AZIMUTH_DEG = -30.0
SUN_SHADOWS = "soft"

# --- Host Scene Object Names ---
TERRAIN_NAME = "Terrain"
WATER_NAME = "Water"
TREES_GROUP_NAME = "Trees"
PROPS_GROUP_NAME = "Props"
SUN_NAME = "Sun"
TREE_TRUNK_NAME = "Trunk"
TREE_LEAVES_NAME = "Leaves"
ROCK_NAME = "Rock"

# --- Presentation ---
SHOW_PROGRESS = True
