# noise_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the noise
modules and the grid builders. These values are used if they are not
explicitly provided by the caller.

DO NOT MODIFY THIS FILE FOR A SPECIFIC GRAPH.
Instead, pass keyword arguments to the modules, or a configuration
dictionary to the builders.
================================================================================
"""

# --- Octave Generators (Perlin, Billow, RidgedMulti) ---
DEFAULT_FREQUENCY = 1.0
DEFAULT_LACUNARITY = 2.0
DEFAULT_OCTAVE_COUNT = 6
DEFAULT_PERSISTENCE = 0.5
DEFAULT_SEED = 0
# Maximum number of octaves any octave generator accepts.
MAX_OCTAVE_COUNT = 30

# RidgedMulti shaping constants. The spectral exponent controls how quickly
# the weight of each octave falls off with its frequency.
RIDGED_SPECTRAL_EXPONENT = 1.0
RIDGED_OFFSET = 1.0
RIDGED_GAIN = 2.0

# --- Cell (Voronoi) Generator ---
DEFAULT_CELL_DISPLACEMENT = 1.0
DEFAULT_CELL_ENABLE_DISTANCE = False

# --- White Noise ---
# Number of lattice cells per unit of input space.
DEFAULT_WHITE_SCALE = 256

# --- Const / Modifiers ---
DEFAULT_CONST_VALUE = 0.0
DEFAULT_CLAMP_LOWER_BOUND = -1.0
DEFAULT_CLAMP_UPPER_BOUND = 1.0
DEFAULT_SCALE = 1.0
DEFAULT_BIAS = 0.0
DEFAULT_EXPONENT = 1.0
# Curve and Terrace need a minimum number of control points to interpolate.
CURVE_MIN_CONTROL_POINTS = 4
TERRACE_MIN_CONTROL_POINTS = 2

# --- Selectors ---
DEFAULT_SELECT_LOWER_BOUND = -1.0
DEFAULT_SELECT_UPPER_BOUND = 1.0
DEFAULT_EDGE_FALLOFF = 0.0

# --- Transformers ---
DEFAULT_TURBULENCE_FREQUENCY = 1.0
DEFAULT_TURBULENCE_POWER = 1.0
DEFAULT_TURBULENCE_ROUGHNESS = 3

# --- Builder Projections ---
# Plane bounds as (lower_x, upper_x, lower_y, upper_y); z stays fixed.
DEFAULT_PLANE_BOUNDS = (-1.0, 1.0, -1.0, 1.0)
DEFAULT_PLANE_Z = 0.0
# Cylinder bounds as (lower_angle, upper_angle, lower_height, upper_height), angles in degrees.
DEFAULT_CYLINDER_BOUNDS = (-180.0, 180.0, -1.0, 1.0)
# Sphere bounds as (south_lat, north_lat, west_lon, east_lon), in degrees.
DEFAULT_SPHERE_BOUNDS = (-90.0, 90.0, -180.0, 180.0)
# Cube bounds as (lower_x, upper_x, lower_y, upper_y, lower_z, upper_z).
DEFAULT_CUBE_BOUNDS = (-1.0, 1.0, -1.0, 1.0, -1.0, 1.0)

# --- Build Execution ---
# None means "one worker per CPU, minus one for the main thread".
DEFAULT_BUILD_WORKERS = None
SHOW_BUILD_PROGRESS = False
# Opt-in: walk the graph looking for cycles before a build starts.
CHECK_GRAPH_CYCLES = False

# --- Rendering ---
# Number of entries in a pre-computed gradient lookup table.
GRADIENT_LUT_STEPS = 256
# Noise values mapped onto the first and last LUT entries.
RENDER_LOWER_VALUE = -1.0
RENDER_UPPER_VALUE = 1.0
