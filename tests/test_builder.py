"""Tests for the SceneBuilder pipeline."""
import logging

import pytest

from scene_generator.builder import GENERATED_OBJECT_NAMES, SceneBuilder
from scene_generator.host import InMemoryScene, SceneGenerationError
from scene_generator.styles import PrimitiveKind


class TerrainlessScene(InMemoryScene):
    """A host that accepts terrain but never reports any back."""

    def find_existing_terrain(self):
        return None


def build(scene, config, logger, **overrides):
    config = dict(config)
    config.update(overrides)
    return SceneBuilder(scene, config, logger)


class TestGenerateWorld:
    """Tests for a full generation run."""

    def test_populates_scene(self, scene, quiet_config, logger):
        """Every stage should leave its object in the host."""
        description = build(scene, quiet_config, logger, style="snow").generate_world(seed=12.0)

        assert scene.find_existing_terrain().payload is description.heightmap
        water = scene.find("Water")
        assert water.kind == "plane"
        assert water.position == (0.0, 8.0, 0.0)
        assert water.material.color == (0.7, 0.85, 0.95, 0.7)

        trees = scene.find("Trees")
        assert len(trees.children) == 2 * len(description.trees)
        props = scene.find("Props")
        assert len(props.children) == len(description.props) == 100
        assert all(node.name == "Rock" for node in props.children)

        sun = scene.find("Sun")
        assert sun.kind == "light"
        assert sun.payload == description.lighting
        assert description.seed == 12.0

    def test_trees_share_materials(self, scene, quiet_config, logger):
        """All trunks share one material and all leaves share another."""
        build(scene, quiet_config, logger, style="snow", add_water=False, add_props=False).generate_world(seed=3.0)
        children = scene.find("Trees").children
        trunk_materials = {id(node.material) for node in children if node.kind == "cylinder"}
        leaf_materials = {id(node.material) for node in children if node.kind == "sphere"}
        assert len(trunk_materials) == 1
        assert len(leaf_materials) == 1
        assert len(scene.materials) == 2

    def test_trees_stand_on_host_terrain(self, scene, quiet_config, logger):
        """The host's own height query should agree with every tree base."""
        description = build(scene, quiet_config, logger, style="snow").generate_world(seed=44.0)
        assert description.trees
        for tree in description.trees:
            x, y, z = tree.position
            assert y >= 12.0
            assert scene.sample_terrain_height(x, z) == pytest.approx(y, abs=1e-6)

    def test_disabled_features_are_skipped(self, scene, quiet_config, logger):
        """Toggles should keep their objects out of the host."""
        build(scene, quiet_config, logger, add_water=False, add_trees=False, add_props=False).generate_world()
        assert scene.find("Water") is None
        assert scene.find("Trees") is None
        assert scene.find("Props") is None
        assert scene.find("Sun") is not None

    def test_second_run_replaces_terrain_and_water(self, scene, quiet_config, logger):
        """Terrain and water are replaced; trees and rocks accumulate."""
        builder = build(scene, quiet_config, logger, style="snow")
        first = builder.generate_world(seed=1.0)
        second = builder.generate_world(seed=2.0)
        assert scene.count(kind="terrain") == 1
        assert scene.count(name="Water") == 1
        assert scene.count(kind="light") == 1
        assert len(scene.find("Props").children) == len(first.props) + len(second.props)
        assert len(scene.find("Trees").children) == 2 * (len(first.trees) + len(second.trees))

    def test_logs_completion(self, scene, quiet_config, logger, caplog):
        """A finished run should be reported."""
        with caplog.at_level(logging.INFO):
            build(scene, quiet_config, logger, style="desert").generate_world()
        assert "World generated: Desert environment" in caplog.text


class TestFailures:
    """Tests for skip and abort behavior."""

    def test_missing_primitive_aborts(self, quiet_config, logger, caplog):
        """A host without spheres should stop the run before props and lighting."""
        scene = InMemoryScene(logger=logger, supported_primitives={PrimitiveKind.PLANE, PrimitiveKind.CYLINDER})
        builder = build(scene, quiet_config, logger, style="snow")
        with caplog.at_level(logging.ERROR):
            with pytest.raises(SceneGenerationError):
                builder.generate_world(seed=5.0)
        assert "Planting trees" in caplog.text
        assert scene.find("Water") is not None
        assert scene.find("Props") is None
        assert scene.find("Sun") is None

    def test_missing_materials_abort_at_water(self, quiet_config, logger):
        """Without material support the water stage is the first to fail."""
        scene = InMemoryScene(logger=logger, supports_materials=False)
        with pytest.raises(SceneGenerationError):
            build(scene, quiet_config, logger).generate_world()
        assert scene.find("Terrain") is not None
        assert scene.find("Trees") is None

    def test_missing_terrain_skips_dependent_stages(self, quiet_config, logger, caplog):
        """Trees, props and lighting are skipped, not failed, without terrain."""
        scene = TerrainlessScene(logger=logger)
        with caplog.at_level(logging.WARNING):
            description = build(scene, quiet_config, logger).generate_world()
        assert description.trees == []
        assert description.props == []
        assert description.lighting is None
        assert description.water is not None
        assert scene.find("Trees") is None
        assert scene.find("Sun") is None
        assert "Skipping tree planting" in caplog.text
        assert "Skipping lighting" in caplog.text


class TestClearWorld:
    """Tests for removing generated objects."""

    def test_clear_removes_everything(self, scene, quiet_config, logger):
        """Clearing should remove every generated object."""
        builder = build(scene, quiet_config, logger, style="snow")
        builder.generate_world()
        removed = builder.clear_world()
        assert removed == list(GENERATED_OBJECT_NAMES)
        assert scene.roots == []

    def test_clear_is_idempotent(self, scene, quiet_config, logger):
        """Clearing twice leaves the same state as clearing once, without errors."""
        builder = build(scene, quiet_config, logger)
        builder.generate_world()
        builder.clear_world()
        state_after_first = [node.name for node in scene.walk()]
        assert builder.clear_world() == []
        assert [node.name for node in scene.walk()] == state_after_first

    def test_clear_keeps_unrelated_objects(self, scene, quiet_config, logger):
        """Objects the generator did not create should survive a clear."""
        scene.find_or_create_group("Player")
        builder = build(scene, quiet_config, logger)
        builder.generate_world()
        builder.clear_world()
        assert [node.name for node in scene.walk()] == ["Player"]
