# scene_generator/styles.py

"""
================================================================================
STYLE AND TIME-OF-DAY TABLES
================================================================================
This module holds the enumerations a scene is configured with and the fixed
lookup tables that turn each enumeration value into concrete generation
parameters (noise frequency, height multiplier, water and vegetation colors,
sun angle).

It is a pure, stateless module with no dependencies on the host scene.

Data Contract:
---------------
- Public Enums: EnvironmentStyle, WorldSize, TimeOfDay, PrimitiveKind.
- Public Tables: STYLE_PROFILES, TIME_OF_DAY_LIGHTING.
- Invariants: Every EnvironmentStyle has a StyleProfile and every TimeOfDay
  has a lighting entry. There is no fallthrough branch.
================================================================================
"""
from enum import Enum
from typing import NamedTuple


class EnvironmentStyle(Enum):
    FOREST = "forest"
    DESERT = "desert"
    SNOW = "snow"
    TROPICAL = "tropical"
    VOLCANIC = "volcanic"


class WorldSize(Enum):
    """Terrain width and depth in world units."""
    SMALL = 250
    MEDIUM = 500
    LARGE = 1000
    HUGE = 2000


class TimeOfDay(Enum):
    DAWN = "dawn"
    NOON = "noon"
    SUNSET = "sunset"
    NIGHT = "night"


class PrimitiveKind(Enum):
    PLANE = "plane"
    CYLINDER = "cylinder"
    SPHERE = "sphere"


class StyleProfile(NamedTuple):
    noise_frequency: float
    height_multiplier: float
    water_level: float
    water_color: tuple
    leaf_color: tuple
    prop_color: tuple
    description: str


class SunProfile(NamedTuple):
    elevation_deg: float
    color: tuple
    intensity: float


# --- Shared Defaults (Rule 1) ---
# Styles without a dedicated value use these.
DEFAULT_NOISE_FREQUENCY = 0.01
DEFAULT_WATER_LEVEL = 10.0
DEFAULT_WATER_COLOR = (0.2, 0.5, 0.7, 0.8)
DEFAULT_LEAF_COLOR = (0.2, 0.5, 0.2)
DEFAULT_PROP_COLOR = (0.4, 0.4, 0.4)

STYLE_PROFILES = {
    EnvironmentStyle.FOREST: StyleProfile(
        noise_frequency=DEFAULT_NOISE_FREQUENCY,
        height_multiplier=0.25,
        water_level=DEFAULT_WATER_LEVEL,
        water_color=DEFAULT_WATER_COLOR,
        leaf_color=DEFAULT_LEAF_COLOR,
        prop_color=DEFAULT_PROP_COLOR,
        description="Green hills, lush trees, rivers",
    ),
    EnvironmentStyle.DESERT: StyleProfile(
        noise_frequency=0.008,
        height_multiplier=0.15,
        water_level=2.0,
        water_color=DEFAULT_WATER_COLOR,
        leaf_color=(0.4, 0.5, 0.2),
        prop_color=(0.8, 0.7, 0.5),
        description="Sandy dunes, cacti, oases",
    ),
    EnvironmentStyle.SNOW: StyleProfile(
        noise_frequency=0.015,
        height_multiplier=0.5,
        water_level=8.0,
        water_color=(0.7, 0.85, 0.95, 0.7),
        leaf_color=(0.15, 0.3, 0.15),
        prop_color=(0.9, 0.9, 0.95),
        description="Snowy peaks, pine trees, frozen lakes",
    ),
    EnvironmentStyle.TROPICAL: StyleProfile(
        noise_frequency=DEFAULT_NOISE_FREQUENCY,
        height_multiplier=0.1,
        water_level=DEFAULT_WATER_LEVEL,
        water_color=(0.1, 0.6, 0.8, 0.8),
        leaf_color=(0.1, 0.5, 0.1),
        prop_color=DEFAULT_PROP_COLOR,
        description="Beaches, palm trees, ocean",
    ),
    EnvironmentStyle.VOLCANIC: StyleProfile(
        noise_frequency=0.02,
        height_multiplier=0.4,
        water_level=5.0,
        water_color=(0.8, 0.2, 0.1, 0.9),
        leaf_color=(0.1, 0.1, 0.1),
        prop_color=(0.2, 0.15, 0.15),
        description="Dark terrain, lava pools, rocks",
    ),
}

TIME_OF_DAY_LIGHTING = {
    TimeOfDay.DAWN: SunProfile(elevation_deg=5.0, color=(1.0, 0.7, 0.5), intensity=0.6),
    TimeOfDay.NOON: SunProfile(elevation_deg=50.0, color=(1.0, 0.95, 0.9), intensity=1.2),
    TimeOfDay.SUNSET: SunProfile(elevation_deg=10.0, color=(1.0, 0.5, 0.3), intensity=0.7),
    TimeOfDay.NIGHT: SunProfile(elevation_deg=-30.0, color=(0.3, 0.3, 0.5), intensity=0.15),
}


def _coerce(enum_cls, value):
    """Resolves an enum member from a member, a member name, or a raw value."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        if key in enum_cls.__members__:
            return enum_cls[key]
    for member in enum_cls:
        if member.value == value:
            return member
    valid = ", ".join(member.name.lower() for member in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__} '{value}'. Expected one of: {valid}.")


def parse_style(value) -> EnvironmentStyle:
    return _coerce(EnvironmentStyle, value)


def parse_world_size(value) -> WorldSize:
    """Accepts a WorldSize, a name such as 'medium', or a width such as 500."""
    return _coerce(WorldSize, value)


def parse_time_of_day(value) -> TimeOfDay:
    return _coerce(TimeOfDay, value)


def get_style_profile(style) -> StyleProfile:
    return STYLE_PROFILES[parse_style(style)]


def describe_style(style) -> str:
    """Returns the one-line preview text shown for a style in the style picker."""
    return get_style_profile(style).description
