# scene_generator/host/__init__.py

# This file makes the 'host' directory a Python package.
# It also defines the public API of the package.

from .scene import HostScene, SceneGenerationError
from .memory_scene import InMemoryScene, SceneNode, Material

__all__ = ["HostScene", "SceneGenerationError", "InMemoryScene", "SceneNode", "Material"]
