"""Tests for the in-memory host scene."""
import numpy as np
import pytest

from scene_generator.host import InMemoryScene, SceneGenerationError
from scene_generator.interfaces import Heightmap, LightingSetting
from scene_generator.styles import PrimitiveKind


@pytest.fixture
def heightmap(flat_heights):
    return Heightmap(flat_heights, world_size=100.0, terrain_height=100.0, seed=1.0, height_multiplier=0.4)


class TestTerrain:
    """Tests for terrain replacement and sampling."""

    def test_no_terrain_initially(self, scene):
        """A fresh scene has no terrain."""
        assert scene.find_existing_terrain() is None

    def test_replace_terrain_keeps_one(self, scene, heightmap):
        """Replacing terrain should never leave two terrains behind."""
        first = scene.replace_terrain(heightmap)
        second = scene.replace_terrain(heightmap)
        assert first is not second
        assert scene.find_existing_terrain() is second
        assert scene.count(kind="terrain") == 1

    def test_terrain_is_centered(self, scene, heightmap):
        """Terrain corner should sit at (-size/2, 0, -size/2)."""
        terrain = scene.replace_terrain(heightmap)
        assert terrain.name == "Terrain"
        assert terrain.position == (-50.0, 0.0, -50.0)
        assert terrain.scale == (100.0, 100.0, 100.0)

    def test_sample_terrain_height(self, scene, heightmap):
        """Host sampling uses world coordinates."""
        scene.replace_terrain(heightmap)
        assert scene.sample_terrain_height(0.0, 0.0) == pytest.approx(20.0)
        assert scene.sample_terrain_height(50.0, -50.0) == pytest.approx(40.0)

    def test_sampling_does_not_walk_the_scene(self, scene, heightmap, monkeypatch):
        """Height lookups stay constant-time however many objects the scene holds."""
        group = scene.find_or_create_group("Trees")
        for _ in range(100):
            scene.create_primitive(PrimitiveKind.CYLINDER, "Trunk", (0.0, 0.0, 0.0), (1.0, 1.0, 1.0), None, parent=group)
        scene.replace_terrain(heightmap)
        monkeypatch.setattr(scene, "walk", lambda: pytest.fail("scene graph was traversed"))
        assert scene.find_existing_terrain().name == "Terrain"
        assert scene.sample_terrain_height(0.0, 0.0) == pytest.approx(20.0)

    def test_deleted_terrain_is_forgotten(self, scene, heightmap):
        """Deleting the terrain by name should leave nothing to sample."""
        scene.replace_terrain(heightmap)
        assert scene.delete_named("Terrain") is True
        assert scene.find_existing_terrain() is None
        with pytest.raises(SceneGenerationError):
            scene.sample_terrain_height(0.0, 0.0)

    def test_sampling_without_terrain_raises(self, scene):
        """There is nothing to sample in an empty scene."""
        with pytest.raises(SceneGenerationError):
            scene.sample_terrain_height(0.0, 0.0)


class TestObjects:
    """Tests for groups, materials, primitives and lights."""

    def test_group_is_found_again(self, scene):
        """Asking twice for a group should return the same node."""
        assert scene.find_or_create_group("Trees") is scene.find_or_create_group("Trees")
        assert scene.count(name="Trees") == 1

    def test_primitive_under_parent(self, scene):
        """Primitives attach to their parent group."""
        group = scene.find_or_create_group("Props")
        material = scene.create_material((0.4, 0.4, 0.4))
        rock = scene.create_primitive(PrimitiveKind.SPHERE, "Rock", (1, 2, 3), (0.5, 0.5, 0.5), material, parent=group)
        assert rock.parent is group
        assert group.children == [rock]
        assert rock.material is material
        assert rock.kind == "sphere"

    def test_unsupported_primitive_raises(self, logger):
        """A host without spheres should refuse to create one."""
        scene = InMemoryScene(logger=logger, supported_primitives={PrimitiveKind.PLANE})
        with pytest.raises(SceneGenerationError, match="sphere"):
            scene.create_primitive(PrimitiveKind.SPHERE, "Rock", (0, 0, 0), (1, 1, 1), None)

    def test_materials_can_be_unsupported(self, logger):
        """A host without materials should refuse to create one."""
        scene = InMemoryScene(logger=logger, supports_materials=False)
        with pytest.raises(SceneGenerationError):
            scene.create_material((1.0, 1.0, 1.0))

    def test_light_is_reused(self, scene):
        """Configuring the light twice should update one light."""
        dawn = LightingSetting(5.0, -30.0, (1.0, 0.7, 0.5), 0.6)
        night = LightingSetting(-30.0, -30.0, (0.3, 0.3, 0.5), 0.15)
        first = scene.configure_light("Sun", dawn)
        second = scene.configure_light("Sun", night)
        assert first is second
        assert second.payload is night
        assert second.rotation == (-30.0, -30.0, 0.0)
        assert scene.count(kind="light") == 1


class TestDeletion:
    """Tests for name-based removal."""

    def test_delete_missing_returns_false(self, scene):
        """Deleting something absent is not an error."""
        assert scene.delete_named("Water") is False

    def test_delete_removes_subtree(self, scene):
        """Deleting a group should take its children with it."""
        group = scene.find_or_create_group("Trees")
        scene.create_primitive(PrimitiveKind.CYLINDER, "Trunk", (0, 0, 0), (1, 1, 1), None, parent=group)
        assert scene.delete_named("Trees") is True
        assert scene.find("Trees") is None
        assert scene.find("Trunk") is None
        assert scene.roots == []

    def test_walk_order(self, scene):
        """Walk visits parents before children, in creation order."""
        group = scene.find_or_create_group("Props")
        scene.create_primitive(PrimitiveKind.SPHERE, "Rock", (0, 0, 0), (1, 1, 1), None, parent=group)
        scene.find_or_create_group("Trees")
        assert [node.name for node in scene.walk()] == ["Props", "Rock", "Trees"]
