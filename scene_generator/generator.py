# scene_generator/generator.py

"""
================================================================================
CORE SCENE GENERATOR
================================================================================
This module contains the SceneGenerator class, responsible for turning a scene
configuration (style, world size, time of day, feature toggles) into a
host-independent description of a terrain heightmap, a water plane, tree and
rock placements, and a directional light.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'style', 'world_size',
      'time_of_day', 'add_water', 'add_trees', 'add_props', 'random_seed'.
    - logger: A configured Python logging object for runtime messages.
    - rng (optional): A numpy Generator used for every random draw.
- Outputs (from methods):
    - Heightmap, Placement, LightingSetting and SceneDescription objects.
- Side Effects: Logs messages using the provided logger. Advances the rng.
- Invariants: Given the same rng state and configuration, the output is
  deterministic. Heightmap values lie in [0, height_multiplier].
================================================================================
"""

import logging

import numpy as np

from . import config as DEFAULTS
from . import noise
from .interfaces import Heightmap, LightingSetting, Placement, PrimitivePart, SceneDescription
from .styles import (
    PrimitiveKind,
    TIME_OF_DAY_LIGHTING,
    get_style_profile,
    parse_style,
    parse_time_of_day,
    parse_world_size,
)


# Settings that must be numbers, and the type each is cast to.
# Sequence settings give (type, length).
_NUMERIC_SETTINGS = {
    'seed_range': float,
    'permutation_seed': int,
    'heightmap_resolution': int,
    'terrain_height': float,
    'noise_octaves': int,
    'noise_persistence': float,
    'noise_lacunarity': float,
    'tree_density': float,
    'tree_min_height': float,
    'tree_scale_range': (float, 2),
    'trunk_color': (float, 3),
    'prop_density': float,
    'prop_scale_range': (float, 2),
    'prop_height_offset': float,
    'water_plane_scale_divisor': float,
    'sun_azimuth_deg': float,
}


def _world_units(world_size) -> float:
    """Width of the terrain in world units from a WorldSize, a name, or a plain number."""
    if isinstance(world_size, (int, float)) and not isinstance(world_size, bool):
        if world_size <= 0:
            raise ValueError(f"World size must be positive, got {world_size}.")
        return float(world_size)
    return float(parse_world_size(world_size).value)


class SceneGenerator:
    """
    Generates the data for a procedurally generated scene.
    This class is backend-only and never touches a host scene.
    """
    def __init__(self, config: dict, logger: logging.Logger, rng: np.random.Generator = None,
                 permutation_table: np.ndarray = None):
        """
        Initializes the scene generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            rng (np.random.Generator, optional): Random source for seeds and
                scattering. If None, one is built from the 'random_seed' setting.
            permutation_table (np.ndarray, optional): A pre-computed noise
                permutation table. If None, one is built from 'permutation_seed'.
        """
        self.logger = logger
        self.user_config = config or {}

        # --- Consolidate Configuration ---
        self.settings = {
            'style': self.user_config.get('style', DEFAULTS.DEFAULT_STYLE),
            'world_size': self.user_config.get('world_size', DEFAULTS.DEFAULT_WORLD_SIZE),
            'time_of_day': self.user_config.get('time_of_day', DEFAULTS.DEFAULT_TIME_OF_DAY),
            'add_water': self.user_config.get('add_water', DEFAULTS.DEFAULT_ADD_WATER),
            'add_trees': self.user_config.get('add_trees', DEFAULTS.DEFAULT_ADD_TREES),
            'add_props': self.user_config.get('add_props', DEFAULTS.DEFAULT_ADD_PROPS),

            'random_seed': self.user_config.get('random_seed', DEFAULTS.DEFAULT_RANDOM_SEED),
            'seed_range': self.user_config.get('seed_range', DEFAULTS.SEED_RANGE),
            'permutation_seed': self.user_config.get('permutation_seed', DEFAULTS.PERMUTATION_SEED),

            'heightmap_resolution': self.user_config.get('heightmap_resolution', DEFAULTS.HEIGHTMAP_RESOLUTION),
            'terrain_height': self.user_config.get('terrain_height', DEFAULTS.TERRAIN_HEIGHT),
            'noise_octaves': self.user_config.get('noise_octaves', DEFAULTS.NOISE_OCTAVES),
            'noise_persistence': self.user_config.get('noise_persistence', DEFAULTS.NOISE_PERSISTENCE),
            'noise_lacunarity': self.user_config.get('noise_lacunarity', DEFAULTS.NOISE_LACUNARITY),

            'tree_density': self.user_config.get('tree_density', DEFAULTS.TREE_DENSITY),
            'tree_min_height': self.user_config.get('tree_min_height', DEFAULTS.TREE_MIN_HEIGHT),
            'tree_scale_range': self.user_config.get('tree_scale_range', DEFAULTS.TREE_SCALE_RANGE),
            'trunk_color': self.user_config.get('trunk_color', DEFAULTS.TRUNK_COLOR),

            'prop_density': self.user_config.get('prop_density', DEFAULTS.PROP_DENSITY),
            'prop_scale_range': self.user_config.get('prop_scale_range', DEFAULTS.PROP_SCALE_RANGE),
            'prop_height_offset': self.user_config.get('prop_height_offset', DEFAULTS.PROP_HEIGHT_OFFSET),

            'water_plane_scale_divisor': self.user_config.get('water_plane_scale_divisor', DEFAULTS.WATER_PLANE_SCALE_DIVISOR),
            'sun_azimuth_deg': self.user_config.get('sun_azimuth_deg', DEFAULTS.SUN_AZIMUTH_DEG),
            'sun_shadows': self.user_config.get('sun_shadows', DEFAULTS.SUN_SHADOWS),
        }

        self._coerce_numeric_settings()

        # --- Resolve Enumerations (fails fast on unknown names) ---
        self.style = parse_style(self.settings['style'])
        self.world_size = parse_world_size(self.settings['world_size'])
        self.time_of_day = parse_time_of_day(self.settings['time_of_day'])

        if self.settings['heightmap_resolution'] < 2:
            raise ValueError(
                f"Heightmap resolution must be at least 2, got {self.settings['heightmap_resolution']}."
            )
        if self.settings['noise_octaves'] < 1:
            raise ValueError(f"Noise octaves must be at least 1, got {self.settings['noise_octaves']}.")

        # --- Initialize Randomness ---
        if rng is not None:
            self.rng = rng
            self.logger.debug("Initialized with injected random generator.")
        else:
            self.rng = np.random.default_rng(self.settings['random_seed'])

        if permutation_table is not None:
            self._p = permutation_table
            self.logger.debug("Initialized with injected permutation table.")
        else:
            self._p = noise.create_permutation_table(self.settings['permutation_seed'])

        self.logger.info(
            f"SceneGenerator initialized: style={self.style.name}, "
            f"size={self.world_size.name} ({self.world_size.value} units), "
            f"time={self.time_of_day.name}"
        )

    def _coerce_numeric_settings(self):
        """Casts numeric settings in place. Values from JSON may arrive as strings."""
        for key, rule in _NUMERIC_SETTINGS.items():
            value = self.settings[key]
            try:
                if isinstance(rule, tuple):
                    cast, length = rule
                    if isinstance(value, str) or len(value) != length:
                        raise ValueError
                    self.settings[key] = tuple(cast(v) for v in value)
                else:
                    self.settings[key] = rule(value)
            except (TypeError, ValueError):
                raise ValueError(f"Setting '{key}' has an invalid value: {value!r}.") from None

        if self.settings['random_seed'] is not None:
            try:
                self.settings['random_seed'] = int(self.settings['random_seed'])
            except (TypeError, ValueError):
                raise ValueError(f"Setting 'random_seed' must be an integer, got {self.settings['random_seed']!r}.") from None

    def draw_seed(self) -> float:
        """Draws the per-run noise seed uniformly from [0, seed_range)."""
        return float(self.rng.uniform(0.0, self.settings['seed_range']))

    def generate_heightmap(self, style, world_size, resolution: int = None, seed: float = None) -> Heightmap:
        """
        Synthesizes the terrain grid. Cell [z, x] holds
        noise(x * freq + seed, z * freq + seed) * height_multiplier(style).
        Identical arguments always produce a bit-identical grid.
        """
        profile = get_style_profile(style)
        size_units = _world_units(world_size)
        if resolution is None:
            resolution = self.settings['heightmap_resolution']
        if seed is None:
            seed = self.draw_seed()

        raw_noise = noise.noise_grid(
            self._p, resolution, profile.noise_frequency, seed,
            octaves=self.settings['noise_octaves'],
            persistence=self.settings['noise_persistence'],
            lacunarity=self.settings['noise_lacunarity'],
        )
        heights = raw_noise * profile.height_multiplier

        self.logger.debug(
            f"Heightmap {resolution}x{resolution} for {parse_style(style).name} "
            f"(freq={profile.noise_frequency}, amplitude={profile.height_multiplier}, seed={seed:.3f})"
        )
        return Heightmap(
            heights=heights,
            world_size=size_units,
            terrain_height=float(self.settings['terrain_height']),
            seed=float(seed),
            height_multiplier=profile.height_multiplier,
        )

    def compute_water_placement(self, style, world_size, enabled: bool = True):
        """A translucent plane centered on the origin at the style's water level, or None."""
        if not enabled:
            return None

        profile = get_style_profile(style)
        plane_scale = _world_units(world_size) / self.settings['water_plane_scale_divisor']
        plane = PrimitivePart(
            kind=PrimitiveKind.PLANE,
            name=DEFAULTS.WATER_NAME,
            offset=(0.0, 0.0, 0.0),
            scale=(plane_scale, 1.0, plane_scale),
            color=profile.water_color,
        )
        return Placement(
            category="water",
            position=(0.0, float(profile.water_level), 0.0),
            scale=plane_scale,
            parts=(plane,),
        )

    def _scatter_candidates(self, heightmap: Heightmap, count: int, height_sampler=None):
        """
        Uniform terrain-local (x, z) candidates and their world heights.
        height_sampler(local_x, local_z) overrides the heightmap lookup, e.g. to
        query a host scene's own terrain.
        """
        candidates = self.rng.random((count, 2)) * heightmap.world_size
        local_x = candidates[:, 0]
        local_z = candidates[:, 1]
        sampler = height_sampler or heightmap.sample_height
        heights = np.asarray(sampler(local_x, local_z), dtype=np.float64)
        return local_x, local_z, heights

    def sample_tree_placements(self, style, heightmap: Heightmap, height_sampler=None) -> list:
        """
        Scatters round(size * tree_density) candidates and keeps those on
        terrain at least tree_min_height high. Rejected candidates are not
        replaced, so the result may hold fewer trees than the target.
        """
        profile = get_style_profile(style)
        target = int(round(heightmap.world_size * self.settings['tree_density']))
        if target <= 0:
            return []

        local_x, local_z, heights = self._scatter_candidates(heightmap, target, height_sampler)
        accepted = heights >= self.settings['tree_min_height']
        low, high = self.settings['tree_scale_range']
        scales = self.rng.uniform(low, high, int(accepted.sum()))

        origin_x, origin_y, origin_z = heightmap.origin
        trunk_color = self.settings['trunk_color']
        trees = []
        for x, z, y, scale in zip(local_x[accepted], local_z[accepted], heights[accepted], scales):
            scale = float(scale)
            trunk = PrimitivePart(
                kind=PrimitiveKind.CYLINDER,
                name=DEFAULTS.TREE_TRUNK_NAME,
                offset=(0.0, 2.0 * scale, 0.0),
                scale=(0.3 * scale, 2.0 * scale, 0.3 * scale),
                color=trunk_color,
            )
            leaves = PrimitivePart(
                kind=PrimitiveKind.SPHERE,
                name=DEFAULTS.TREE_LEAVES_NAME,
                offset=(0.0, 4.5 * scale, 0.0),
                scale=(3.0 * scale, 3.0 * scale, 3.0 * scale),
                color=profile.leaf_color,
            )
            trees.append(Placement(
                category="tree",
                position=(float(origin_x + x), float(origin_y + y), float(origin_z + z)),
                scale=scale,
                parts=(trunk, leaves),
            ))

        self.logger.debug(f"Trees: {len(trees)} of {target} candidates accepted.")
        return trees

    def sample_prop_placements(self, style, heightmap: Heightmap, height_sampler=None) -> list:
        """Scatters round(size * prop_density) rocks; every candidate is kept."""
        profile = get_style_profile(style)
        target = int(round(heightmap.world_size * self.settings['prop_density']))
        if target <= 0:
            return []

        local_x, local_z, heights = self._scatter_candidates(heightmap, target, height_sampler)
        low, high = self.settings['prop_scale_range']
        scales = self.rng.uniform(low, high, target)
        lift = self.settings['prop_height_offset']

        origin_x, origin_y, origin_z = heightmap.origin
        props = []
        for x, z, y, scale in zip(local_x, local_z, heights, scales):
            scale = float(scale)
            rock = PrimitivePart(
                kind=PrimitiveKind.SPHERE,
                name=DEFAULTS.ROCK_NAME,
                offset=(0.0, 0.0, 0.0),
                scale=(scale, scale, scale),
                color=profile.prop_color,
            )
            props.append(Placement(
                category="rock",
                position=(float(origin_x + x), float(origin_y + y + lift), float(origin_z + z)),
                scale=scale,
                parts=(rock,),
            ))
        return props

    def compute_lighting(self, time_of_day) -> LightingSetting:
        sun = TIME_OF_DAY_LIGHTING[parse_time_of_day(time_of_day)]
        return LightingSetting(
            elevation_deg=sun.elevation_deg,
            azimuth_deg=self.settings['sun_azimuth_deg'],
            color=sun.color,
            intensity=sun.intensity,
            shadows=self.settings['sun_shadows'],
        )

    def generate(self, seed: float = None) -> SceneDescription:
        """
        Runs the whole host-free pipeline from the configured settings:
        heightmap, then optional water, trees and props, then lighting.
        """
        heightmap = self.generate_heightmap(self.style, self.world_size, seed=seed)
        self.logger.info(f"Heightmap generated with seed {heightmap.seed:.3f}.")

        water = self.compute_water_placement(self.style, self.world_size, enabled=self.settings['add_water'])
        trees = self.sample_tree_placements(self.style, heightmap) if self.settings['add_trees'] else []
        props = self.sample_prop_placements(self.style, heightmap) if self.settings['add_props'] else []
        lighting = self.compute_lighting(self.time_of_day)

        self.logger.info(
            f"Scene generated: {len(trees)} trees, {len(props)} props, "
            f"water={'yes' if water is not None else 'no'}."
        )
        return SceneDescription(
            style=self.style,
            world_size=self.world_size,
            time_of_day=self.time_of_day,
            seed=heightmap.seed,
            heightmap=heightmap,
            lighting=lighting,
            water=water,
            trees=trees,
            props=props,
        )
