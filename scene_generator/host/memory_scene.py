# scene_generator/host/memory_scene.py

"""
================================================================================
IN-MEMORY HOST SCENE
================================================================================
A self-contained HostScene implementation that keeps the scene graph as plain
Python objects. It is used by the command-line tool, and by tests as a fake
host. It can be restricted to a subset of primitive kinds, or have material
support switched off, to reproduce an incomplete host.

Data Contract:
---------------
- roots: Top-level SceneNodes in creation order.
- materials: Every Material created, shared by reference between nodes.
- Terrain nodes carry their Heightmap as payload; light nodes carry their
  LightingSetting.
- Invariants: At most one terrain exists. It is held by direct reference, so
  height sampling never traverses the scene graph.
================================================================================
"""
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .. import config as DEFAULTS
from ..interfaces import Heightmap, LightingSetting
from ..styles import PrimitiveKind
from .scene import SceneGenerationError

NODE_TERRAIN = "terrain"
NODE_GROUP = "group"
NODE_LIGHT = "light"


@dataclass(eq=False)
class Material:
    material_id: int
    color: tuple


@dataclass(eq=False)
class SceneNode:
    name: str
    kind: str
    position: tuple = (0.0, 0.0, 0.0)
    scale: tuple = (1.0, 1.0, 1.0)
    rotation: tuple = (0.0, 0.0, 0.0)
    material: Optional[Material] = None
    payload: Any = None
    parent: Optional["SceneNode"] = field(default=None, repr=False)
    children: list = field(default_factory=list, repr=False)


class InMemoryScene:
    """A scene graph held in memory that satisfies the HostScene protocol."""

    def __init__(self, logger: logging.Logger = None, supported_primitives=None, supports_materials: bool = True):
        self.logger = logger or logging.getLogger(__name__)
        if supported_primitives is None:
            supported_primitives = set(PrimitiveKind)
        self.supported_primitives = frozenset(supported_primitives)
        self.supports_materials = supports_materials

        self.roots = []
        self.materials = []
        self._terrain = None
        self._material_ids = itertools.count(1)

    # --- Traversal Helpers ---
    def walk(self) -> Iterator[SceneNode]:
        """Yields every node, depth-first, in creation order."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, name: str) -> Optional[SceneNode]:
        return next((node for node in self.walk() if node.name == name), None)

    def count(self, kind: str = None, name: str = None) -> int:
        return sum(
            1 for node in self.walk()
            if (kind is None or node.kind == kind) and (name is None or node.name == name)
        )

    def _attach(self, node: SceneNode, parent: Optional[SceneNode]):
        node.parent = parent
        if parent is None:
            self.roots.append(node)
        else:
            parent.children.append(node)
        return node

    def _detach(self, node: SceneNode):
        siblings = self.roots if node.parent is None else node.parent.children
        siblings.remove(node)
        node.parent = None
        if node is self._terrain:
            self._terrain = None

    # --- HostScene Protocol ---
    def find_existing_terrain(self) -> Optional[SceneNode]:
        return self._terrain

    def replace_terrain(self, heightmap: Heightmap) -> SceneNode:
        existing = self.find_existing_terrain()
        if existing is not None:
            self.logger.debug(f"Removing existing terrain '{existing.name}'.")
            self._detach(existing)

        terrain = SceneNode(
            name=DEFAULTS.TERRAIN_NAME,
            kind=NODE_TERRAIN,
            position=heightmap.origin,
            scale=(heightmap.world_size, heightmap.terrain_height, heightmap.world_size),
            payload=heightmap,
        )
        self._terrain = self._attach(terrain, None)
        return self._terrain

    def find_or_create_group(self, name: str) -> SceneNode:
        existing = self.find(name)
        if existing is not None:
            return existing
        return self._attach(SceneNode(name=name, kind=NODE_GROUP), None)

    def create_material(self, color: tuple) -> Material:
        if not self.supports_materials:
            raise SceneGenerationError("This scene does not support materials.")
        material = Material(material_id=next(self._material_ids), color=tuple(color))
        self.materials.append(material)
        return material

    def create_primitive(self, kind: PrimitiveKind, name: str, position: tuple, scale: tuple,
                         material: Material, parent: SceneNode = None) -> SceneNode:
        if kind not in self.supported_primitives:
            raise SceneGenerationError(f"Primitive type '{kind.value}' is not available in this scene.")
        node = SceneNode(
            name=name,
            kind=kind.value,
            position=tuple(position),
            scale=tuple(scale),
            material=material,
        )
        return self._attach(node, parent)

    def configure_light(self, name: str, lighting: LightingSetting) -> SceneNode:
        # Any existing light is reused, whatever its name.
        light = next((node for node in self.walk() if node.kind == NODE_LIGHT), None)
        if light is None:
            light = self._attach(SceneNode(name=name, kind=NODE_LIGHT), None)
        light.rotation = lighting.rotation_euler
        light.payload = lighting
        return light

    def sample_terrain_height(self, x: float, z: float) -> float:
        terrain = self.find_existing_terrain()
        if terrain is None:
            raise SceneGenerationError("Cannot sample terrain height: the scene has no terrain.")
        heightmap = terrain.payload
        return terrain.position[1] + heightmap.sample_world_height(x, z)

    def delete_named(self, name: str) -> bool:
        matches = [node for node in self.walk() if node.name == name]
        for node in matches:
            # A match may already be gone if one of its ancestors matched too.
            siblings = self.roots if node.parent is None else node.parent.children
            if node in siblings:
                self._detach(node)
        return bool(matches)
