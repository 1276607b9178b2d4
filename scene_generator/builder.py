# scene_generator/builder.py

"""
================================================================================
SCENE BUILDER
================================================================================
This module drives a full generation run against a host scene. It asks the
SceneGenerator for each piece of the scene and pushes the result into the
host through the HostScene interface, in a fixed order:

    terrain -> water -> trees -> props -> lighting

Data Contract:
---------------
- Inputs (on initialization):
    - scene (HostScene): The host scene to mutate.
    - config (dict): Scene parameters, forwarded to the SceneGenerator.
    - logger: A configured Python logging object for runtime messages.
- Public Methods:
    - generate_world(): Runs every enabled stage, returns a SceneDescription.
    - clear_world(): Removes every generated object from the host.
- Side Effects: Mutates the host scene. Shows a progress bar.
- Invariants: A SceneGenerationError aborts the run; no stage is retried.
  Stages that need terrain are skipped when the host has none.
================================================================================
"""
import logging
import time

import numpy as np
from tqdm import tqdm

from . import config as DEFAULTS
from .generator import SceneGenerator
from .host.scene import HostScene, SceneGenerationError
from .interfaces import Heightmap, SceneDescription

# Objects removed by clear_world, in removal order.
GENERATED_OBJECT_NAMES = (
    DEFAULTS.TERRAIN_NAME,
    DEFAULTS.WATER_NAME,
    DEFAULTS.TREES_GROUP_NAME,
    DEFAULTS.PROPS_GROUP_NAME,
    DEFAULTS.SUN_NAME,
)


class SceneBuilder:
    """
    Runs the generation pipeline against a host scene.
    """
    def __init__(self, scene: HostScene, config: dict, logger: logging.Logger, generator: SceneGenerator = None):
        """
        Initializes the builder.

        Args:
            scene (HostScene): The host scene that receives generated objects.
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            generator (SceneGenerator, optional): A pre-built generator. If
                None, one is created from config and logger.
        """
        config = config or {}
        self.scene = scene
        self.logger = logger
        self.generator = generator if generator is not None else SceneGenerator(config, logger)
        self.show_progress = config.get('show_progress', DEFAULTS.SHOW_PROGRESS)

    def generate_world(self, seed: float = None) -> SceneDescription:
        """
        Generates a complete scene into the host and returns what was built.
        Host failures propagate as SceneGenerationError after being logged.
        """
        settings = self.generator.settings
        stages = []
        if settings['add_water']:
            stages.append(("Adding water", self._add_water))
        if settings['add_trees']:
            stages.append(("Planting trees", self._plant_trees))
        if settings['add_props']:
            stages.append(("Scattering props", self._scatter_props))
        stages.append(("Setting up lighting", self._setup_lighting))

        start_time = time.perf_counter()
        current_stage = "Creating terrain"
        with tqdm(total=len(stages) + 1, desc="Quick Environment", disable=not self.show_progress) as progress:
            try:
                progress.set_postfix_str(current_stage)
                self.logger.info(f"{current_stage}...")
                description = self._create_terrain(seed)
                progress.update(1)

                for current_stage, stage in stages:
                    progress.set_postfix_str(current_stage)
                    self.logger.info(f"{current_stage}...")
                    stage(description)
                    progress.update(1)
            except SceneGenerationError as e:
                self.logger.error(f"Scene generation aborted while '{current_stage}': {e}")
                raise

        elapsed = time.perf_counter() - start_time
        self.logger.info(
            f"World generated: {description.style.name.capitalize()} environment "
            f"({len(description.trees)} trees, {len(description.props)} props) in {elapsed:.2f} seconds."
        )
        return description

    def clear_world(self) -> list:
        """
        Deletes all generated objects. Missing objects are ignored, so
        calling this repeatedly is safe. Returns the names actually removed.
        """
        removed = [name for name in GENERATED_OBJECT_NAMES if self.scene.delete_named(name)]
        if removed:
            self.logger.info(f"World cleared: removed {', '.join(removed)}.")
        else:
            self.logger.info("World cleared: nothing to remove.")
        return removed

    # --- Pipeline Stages ---
    def _create_terrain(self, seed: float) -> SceneDescription:
        gen = self.generator
        heightmap = gen.generate_heightmap(gen.style, gen.world_size, seed=seed)
        self.scene.replace_terrain(heightmap)
        self.logger.debug(f"Terrain replaced (seed {heightmap.seed:.3f}, max height {heightmap.heights.max():.3f}).")
        return SceneDescription(
            style=gen.style,
            world_size=gen.world_size,
            time_of_day=gen.time_of_day,
            seed=heightmap.seed,
            heightmap=heightmap,
        )

    def _add_water(self, description: SceneDescription):
        gen = self.generator
        water = gen.compute_water_placement(gen.style, gen.world_size)
        self.scene.delete_named(DEFAULTS.WATER_NAME)
        plane = water.parts[0]
        material = self.scene.create_material(plane.color)
        self.scene.create_primitive(plane.kind, DEFAULTS.WATER_NAME, water.position, plane.scale, material)
        description.water = water

    def _plant_trees(self, description: SceneDescription):
        if not self._has_terrain("tree planting"):
            return
        gen = self.generator
        trees = gen.sample_tree_placements(gen.style, description.heightmap, self._host_height_sampler(description.heightmap))
        group = self.scene.find_or_create_group(DEFAULTS.TREES_GROUP_NAME)
        self._instantiate(trees, group)
        description.trees = trees

    def _scatter_props(self, description: SceneDescription):
        if not self._has_terrain("prop scattering"):
            return
        gen = self.generator
        props = gen.sample_prop_placements(gen.style, description.heightmap, self._host_height_sampler(description.heightmap))
        group = self.scene.find_or_create_group(DEFAULTS.PROPS_GROUP_NAME)
        self._instantiate(props, group)
        description.props = props

    def _setup_lighting(self, description: SceneDescription):
        if not self._has_terrain("lighting"):
            return
        lighting = self.generator.compute_lighting(self.generator.time_of_day)
        self.scene.configure_light(DEFAULTS.SUN_NAME, lighting)
        description.lighting = lighting

    # --- Helpers ---
    def _has_terrain(self, stage_name: str) -> bool:
        if self.scene.find_existing_terrain() is None:
            self.logger.warning(f"No terrain found in the scene. Skipping {stage_name}.")
            return False
        return True

    def _host_height_sampler(self, heightmap: Heightmap):
        """Height lookups in terrain-local coordinates, answered by the host scene."""
        origin_x, origin_y, origin_z = heightmap.origin

        def sample(local_x, local_z):
            return np.array([
                self.scene.sample_terrain_height(origin_x + x, origin_z + z) - origin_y
                for x, z in zip(local_x, local_z)
            ])
        return sample

    def _instantiate(self, placements: list, parent):
        """Creates every part of every placement, sharing one material per color."""
        materials = {}
        for placement in placements:
            for part in placement.parts:
                if part.color not in materials:
                    materials[part.color] = self.scene.create_material(part.color)
                self.scene.create_primitive(
                    part.kind,
                    part.name,
                    part.world_position(placement.position),
                    part.scale,
                    materials[part.color],
                    parent=parent,
                )
