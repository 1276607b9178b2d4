# scene_generator/host/scene.py

"""
================================================================================
HOST SCENE INTERFACE
================================================================================
This module defines the interface the SceneBuilder expects from whatever
editor or engine owns the actual scene graph. The builder only talks to the
host through these methods, so any runtime can be targeted by writing an
adapter that provides them.

Data Contract:
---------------
- Handles returned by a host are opaque to the builder; it only passes them
  back into the same host.
- Hosts raise SceneGenerationError when a required resource (a primitive
  kind, a material) is unavailable. The builder treats this as fatal.
- delete_named never raises for a missing object.
================================================================================
"""
from typing import Any, Optional, Protocol

from ..interfaces import Heightmap, LightingSetting
from ..styles import PrimitiveKind


class SceneGenerationError(RuntimeError):
    """A host scene could not provide a resource the generation run needs."""


class HostScene(Protocol):
    """
    A protocol defining the operations a host scene-graph must provide.
    This allows users to plug in their own scene adapter as long as it
    provides these methods, adhering to the Dependency Inversion Principle.
    """

    def find_existing_terrain(self) -> Optional[Any]: ...

    def replace_terrain(self, heightmap: Heightmap) -> Any: ...

    def find_or_create_group(self, name: str) -> Any: ...

    def create_material(self, color: tuple) -> Any: ...

    def create_primitive(self, kind: PrimitiveKind, name: str, position: tuple, scale: tuple,
                         material: Any, parent: Any = None) -> Any: ...

    def configure_light(self, name: str, lighting: LightingSetting) -> Any: ...

    def sample_terrain_height(self, x: float, z: float) -> float: ...

    def delete_named(self, name: str) -> bool: ...
