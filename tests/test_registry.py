"""
Unit tests for scene_measure.registry module.

Tests:
- add / remove_at / clear_all / dispose
- Scene membership and resource release of removed entries
"""

import numpy as np
import pytest

from scene_measure.geometry.vector import as_point
from scene_measure.measurement import Measurement
from scene_measure.scene import SceneGraph


def _fill(registry, builder, lengths):
    items = []
    for length in lengths:
        m = builder.build((0, 0, 0), (length, 0, 0))
        registry.add(m)
        items.append(m)
    return items


class TestAdd:
    """Tests for MeasurementRegistry.add()."""

    def test_adds_group_to_scene(self, registry, builder, scene):
        m = builder.build((0, 0, 0), (1, 0, 0))
        registry.add(m)
        assert len(registry) == 1
        assert registry[0] is m
        assert m.group in scene

    def test_insertion_order(self, registry, builder):
        _fill(registry, builder, [1.0, 2.0, 3.0])
        assert [m.distance for m in registry] == pytest.approx([1.0, 2.0, 3.0])

    def test_measurement_without_group(self, registry):
        m = Measurement(as_point((0, 0, 0)), as_point((1, 0, 0)), 1.0)
        registry.add(m)
        registry.remove_at(0)
        assert len(registry) == 0


class TestRemoveAt:
    """Tests for MeasurementRegistry.remove_at()."""

    def test_removes_and_releases(self, registry, builder, scene):
        first, second, third = _fill(registry, builder, [1.0, 2.0, 3.0])
        group = second.group

        registry.remove_at(1)

        assert len(registry) == 2
        assert [m.distance for m in registry] == pytest.approx([1.0, 3.0])
        assert group not in scene
        assert group.released
        assert second.group is None
        assert second.label_text is None
        assert second.is_released
        assert first.group in scene and third.group in scene

    @pytest.mark.parametrize("index", [3, 4, -1, -3])
    def test_out_of_range_is_noop(self, registry, builder, scene, index):
        items = _fill(registry, builder, [1.0, 2.0, 3.0])
        registry.remove_at(index)
        assert len(registry) == 3
        assert all(m.group is not None and not m.group.released for m in items)
        assert len(scene) == 3

    def test_empty_registry(self, registry):
        registry.remove_at(0)
        assert len(registry) == 0

    def test_distance_survives_release(self, registry, builder):
        m = _fill(registry, builder, [2.5])[0]
        registry.remove_at(0)
        assert m.distance == pytest.approx(2.5)
        assert np.allclose(m.end_point, [2.5, 0, 0])


class TestClearAll:
    """Tests for MeasurementRegistry.clear_all()."""

    def test_clears_everything(self, registry, builder, scene):
        items = _fill(registry, builder, [1.0, 2.0])
        groups = [m.group for m in items]

        registry.clear_all()

        assert len(registry) == 0
        assert len(scene) == 0
        assert all(g.released for g in groups)
        assert all(m.group is None for m in items)

    def test_repeatable(self, registry, builder):
        _fill(registry, builder, [1.0])
        registry.clear_all()
        assert len(registry) == 0
        registry.clear_all()
        assert len(registry) == 0

    def test_shared_materials_kept(self, registry, builder, materials):
        _fill(registry, builder, [1.0])
        registry.clear_all()
        assert not any(m.disposed for m in materials.all())


class TestRebind:
    """Tests for MeasurementRegistry.rebind()."""

    def test_moves_groups(self, registry, builder, scene):
        items = _fill(registry, builder, [1.0, 2.0])
        target = SceneGraph()

        registry.rebind(target)

        assert len(scene) == 0
        assert all(m.group in target for m in items)
        registry.clear_all()
        assert len(target) == 0

    def test_same_scene_is_noop(self, registry, builder, scene):
        _fill(registry, builder, [1.0])
        registry.rebind(scene)
        assert len(scene) == 1


class TestDispose:
    """Tests for MeasurementRegistry.dispose()."""

    def test_releases_shared_materials(self, registry, builder, materials):
        _fill(registry, builder, [1.0, 2.0])
        registry.dispose()
        assert len(registry) == 0
        assert registry.disposed
        assert all(m.disposed for m in materials.all())

    def test_second_dispose_noop(self, registry, materials):
        registry.dispose()
        registry.dispose()
        assert all(m.disposed for m in materials.all())

    def test_iteration_snapshot(self, registry, builder):
        """Iterating while removing does not skip entries."""
        _fill(registry, builder, [1.0, 2.0, 3.0])
        seen = []
        for m in registry:
            seen.append(m.distance)
            registry.remove_at(0)
        assert seen == pytest.approx([1.0, 2.0, 3.0])
        assert len(registry) == 0
