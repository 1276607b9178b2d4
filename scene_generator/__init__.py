# scene_generator/__init__.py

# This file makes the 'scene_generator' directory a Python package.
# It also defines the public API of the package.

from .styles import EnvironmentStyle, WorldSize, TimeOfDay, PrimitiveKind, describe_style
from .interfaces import Heightmap, Placement, PrimitivePart, LightingSetting, SceneDescription
from .generator import SceneGenerator
from .builder import SceneBuilder
from .host import HostScene, InMemoryScene, SceneGenerationError

__all__ = [
    "EnvironmentStyle", "WorldSize", "TimeOfDay", "PrimitiveKind", "describe_style",
    "Heightmap", "Placement", "PrimitivePart", "LightingSetting", "SceneDescription",
    "SceneGenerator", "SceneBuilder",
    "HostScene", "InMemoryScene", "SceneGenerationError",
]
