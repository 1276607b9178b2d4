# scene_generator/interfaces.py

"""Data model shared between the generator, the builder, and host scenes."""
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import map_coordinates

from .styles import EnvironmentStyle, PrimitiveKind, TimeOfDay, WorldSize


@dataclass(frozen=True, eq=False)
class Heightmap:
    """Square terrain elevation grid.

    Attributes:
        heights: Normalized heights (resolution, resolution), indexed [z, x].
            Values lie in [0, height_multiplier] and are read-only.
        world_size: Terrain width and depth in world units.
        terrain_height: World units corresponding to a normalized height of 1.
        seed: Noise seed that produced the grid.
        height_multiplier: Style multiplier applied to the raw noise.
    """
    heights: NDArray[np.float64]
    world_size: float
    terrain_height: float
    seed: float
    height_multiplier: float

    def __post_init__(self):
        # Frozen copy; the caller keeps a writable buffer.
        heights = np.array(self.heights, dtype=np.float64)
        heights.setflags(write=False)
        object.__setattr__(self, "heights", heights)
        if self.heights.ndim != 2 or self.heights.shape[0] != self.heights.shape[1]:
            raise ValueError(f"Heightmap must be a square 2D grid, got shape {self.heights.shape}.")

    @property
    def resolution(self) -> int:
        return self.heights.shape[0]

    @property
    def origin(self) -> tuple:
        """World position of the terrain's (x=0, z=0) corner. The terrain is centered on the origin."""
        half = self.world_size / 2.0
        return (-half, 0.0, -half)

    def sample_height(self, local_x, local_z):
        """
        Bilinearly interpolated world height at terrain-local coordinates
        in [0, world_size]. Accepts scalars or arrays; coordinates outside
        the terrain clamp to the nearest edge.
        """
        scalar = np.isscalar(local_x) and np.isscalar(local_z)
        cells_per_unit = (self.resolution - 1) / self.world_size
        grid_x = np.atleast_1d(np.asarray(local_x, dtype=np.float64)) * cells_per_unit
        grid_z = np.atleast_1d(np.asarray(local_z, dtype=np.float64)) * cells_per_unit
        values = map_coordinates(self.heights, [grid_z, grid_x], order=1, mode='nearest')
        world_heights = values * self.terrain_height
        return float(world_heights[0]) if scalar else world_heights

    def sample_world_height(self, world_x, world_z):
        """Same as sample_height, but takes world (origin-centered) coordinates."""
        origin_x, _, origin_z = self.origin
        if np.isscalar(world_x) and np.isscalar(world_z):
            return self.sample_height(world_x - origin_x, world_z - origin_z)
        return self.sample_height(np.asarray(world_x) - origin_x, np.asarray(world_z) - origin_z)

    def statistics(self) -> dict:
        return {
            "resolution": self.resolution,
            "min": float(self.heights.min()),
            "max": float(self.heights.max()),
            "mean": float(self.heights.mean()),
        }


@dataclass(frozen=True)
class PrimitivePart:
    """One renderable primitive of a placement, relative to the placement's position."""
    kind: PrimitiveKind
    name: str
    offset: tuple
    scale: tuple
    color: tuple

    def world_position(self, origin: tuple) -> tuple:
        return tuple(float(o + d) for o, d in zip(origin, self.offset))


@dataclass(frozen=True)
class Placement:
    """Where and how big a generated object is, plus the primitives it is built from."""
    category: str
    position: tuple
    scale: float
    parts: tuple = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "position": list(self.position),
            "scale": self.scale,
            "parts": [
                {"kind": part.kind.value, "name": part.name, "offset": list(part.offset),
                 "scale": list(part.scale), "color": list(part.color)}
                for part in self.parts
            ],
        }


@dataclass(frozen=True)
class LightingSetting:
    """Directional sun light derived from the time of day."""
    elevation_deg: float
    azimuth_deg: float
    color: tuple
    intensity: float
    shadows: str = "soft"

    @property
    def rotation_euler(self) -> tuple:
        return (self.elevation_deg, self.azimuth_deg, 0.0)

    def to_dict(self) -> dict:
        return {
            "elevation_deg": self.elevation_deg,
            "azimuth_deg": self.azimuth_deg,
            "color": list(self.color),
            "intensity": self.intensity,
            "shadows": self.shadows,
        }


@dataclass(eq=False)
class SceneDescription:
    """Everything one generation run produced, independent of any host."""
    style: EnvironmentStyle
    world_size: WorldSize
    time_of_day: TimeOfDay
    seed: float
    heightmap: Heightmap
    lighting: Optional[LightingSetting] = None
    water: Optional[Placement] = None
    trees: list = field(default_factory=list)
    props: list = field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON-serializable summary. The heightmap is reduced to statistics."""
        return {
            "style": self.style.value,
            "world_size": self.world_size.value,
            "time_of_day": self.time_of_day.value,
            "seed": self.seed,
            "heightmap": self.heightmap.statistics(),
            "water": self.water.to_dict() if self.water is not None else None,
            "trees": [tree.to_dict() for tree in self.trees],
            "props": [prop.to_dict() for prop in self.props],
            "lighting": self.lighting.to_dict() if self.lighting is not None else None,
        }
