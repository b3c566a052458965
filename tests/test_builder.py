"""
Unit tests for scene_measure.annotation.builder module.

Tests:
- Measurement distance and snapshots
- Main line, extension lines, arrowheads
- Label text and placement
"""

import math

import numpy as np
import pytest

from scene_measure.annotation.builder import AnnotationBuilder
from scene_measure.geometry.vector import distance, look_at_rotation, rotation_z
from scene_measure.project_config import MeasurementOptions


class TestMeasurement:
    """Distance and stored points."""

    def test_distance_345(self, builder):
        m = builder.build((0, 0, 0), (3, 4, 0))
        assert m.distance == pytest.approx(5.0)
        assert m.label_text == "5.00 m"

    @pytest.mark.parametrize("a,b", [
        ((0, 0, 0), (1, 0, 0)),
        ((1.5, -2.0, 0.3), (-4.0, 7.25, 2.0)),
        ((100, 100, 100), (100, 100, 100.001)),
        ((-3, -3, 0), (3, 3, 0)),
    ])
    def test_distance_matches_kernel(self, builder, a, b):
        m = builder.build(a, b)
        assert m.distance == pytest.approx(distance(a, b))
        assert m.distance >= 0

    def test_points_are_snapshots(self, builder):
        """Caller-owned vectors may change after build."""
        a = np.array([0.0, 0.0, 0.0])
        b = np.array([1.0, 0.0, 0.0])
        m = builder.build(a, b)
        a[0] = 10.0
        b[0] = 20.0
        assert np.allclose(m.start_point, [0, 0, 0])
        assert np.allclose(m.end_point, [1, 0, 0])
        assert m.distance == pytest.approx(1.0)

    def test_metadata(self, builder):
        m = builder.build((0, 0, 0), (0, 2, 0))
        meta = m.group.metadata
        assert meta['distance'] == pytest.approx(2.0)
        assert meta['line_angle'] == pytest.approx(90.0)
        assert np.allclose(meta['end_point'], [0, 2, 0])


class TestLines:
    """Main and extension lines."""

    def test_main_line(self, builder, materials):
        group = builder.build((1, 2, 3), (4, 6, 3)).group
        assert np.allclose(group.main_line.start, [1, 2, 3])
        assert np.allclose(group.main_line.end, [4, 6, 3])
        assert group.main_line.material is materials.dimension

    def test_extension_lines_horizontal(self, builder, materials):
        """Horizontal line → vertical extensions: -(gap+overshoot) .. +gap."""
        group = builder.build((0, 0, 0), (1, 0, 0)).group
        ext_a, ext_b = group.extension_lines

        assert np.allclose(ext_a.start, [0, -0.005, 0])
        assert np.allclose(ext_a.end, [0, 0.002, 0])
        assert np.allclose(ext_b.start, [1, -0.005, 0])
        assert np.allclose(ext_b.end, [1, 0.002, 0])
        assert ext_a.material is materials.extension

    @pytest.mark.parametrize("length", [0.5, 1.0, 100.0])
    def test_extension_length_constant(self, builder, options, length):
        """Gap on both sides plus overshoot, independent of the line length."""
        expected = 2 * options.extension_offset + options.extension_overshoot
        group = builder.build((0, 0, 0), (length, length, 0)).group
        for ext in group.extension_lines:
            assert distance(ext.start, ext.end) == pytest.approx(expected)
            assert distance(ext.start, ext.end) == pytest.approx(0.007)

    def test_extension_perpendicular(self, builder):
        group = builder.build((0, 0, 0), (3, 4, 0)).group
        ext = group.extension_lines[0]
        ext_dir = np.asarray(ext.end) - np.asarray(ext.start)
        assert np.dot(ext_dir, [3, 4, 0]) == pytest.approx(0.0, abs=1e-12)

    def test_custom_extension_options(self, materials):
        options = MeasurementOptions(extension_offset=0.1, extension_overshoot=0.2)
        group = AnnotationBuilder(options, materials).build((0, 0, 0), (1, 0, 0)).group
        ext_a = group.extension_lines[0]
        assert np.allclose(ext_a.start, [0, -0.3, 0])
        assert np.allclose(ext_a.end, [0, 0.1, 0])


class TestArrowheads:
    """Arrowhead placement and orientation."""

    def test_positions(self, builder):
        group = builder.build((0, 0, 0), (2, 0, 0)).group
        arrow_a, arrow_b = group.arrowheads
        assert np.allclose(arrow_a.position, [0, 0, 0])
        assert np.allclose(arrow_b.position, [2, 0, 0])
        assert np.allclose(arrow_a.world_vertices[0], [0, 0, 0])
        assert np.allclose(arrow_b.world_vertices[0], [2, 0, 0])

    def test_size(self, builder):
        """Base vertices sit ARROWHEAD_SIZE from the apex."""
        group = builder.build((0, 0, 0), (3, 4, 0)).group
        for arrow in group.arrowheads:
            apex = arrow.world_vertices[0]
            for vertex in arrow.world_vertices[1:]:
                assert distance(apex, vertex) == pytest.approx(0.08)

    def test_apex_angle(self, builder):
        group = builder.build((0, 0, 0), (1, 0, 0)).group
        local = group.arrowheads[0].geometry.positions
        half = math.atan2(local[1][1], local[1][0])
        assert math.degrees(half) == pytest.approx(45.0)

    def test_orientation_face_then_roll(self, builder):
        """Rotation = look-at(direction) then roll by the line angle."""
        a, b = (0, 0, 0), (1, 1, 0)
        group = builder.build(a, b).group
        direction = np.array([1.0, 1.0, 0.0])

        expected_a = look_at_rotation(direction) @ rotation_z(45.0)
        expected_b = look_at_rotation(-direction) @ rotation_z(225.0)

        assert np.allclose(group.arrowheads[0].rotation, expected_a)
        assert np.allclose(group.arrowheads[1].rotation, expected_b)

    def test_shared_material(self, builder, materials):
        group = builder.build((0, 0, 0), (1, 0, 0)).group
        assert all(arrow.material is materials.arrowhead for arrow in group.arrowheads)


class TestLabel:
    """Distance label."""

    def test_text(self, builder):
        group = builder.build((0, 0, 0), (1.2345, 0, 0)).group
        assert group.label.text == "1.23 m"

    def test_position_diagonal(self, builder):
        """53.13° line → rotated with the line, offset up from the midpoint."""
        group = builder.build((0, 0, 0), (3, 4, 0)).group
        assert np.allclose(group.label.position, [1.5, 2.15, 0.0])
        assert group.label.rotation_z == pytest.approx(math.atan2(4, 3))

    def test_position_horizontal(self, builder):
        group = builder.build((0, 0, 0), (2, 0, 0)).group
        assert np.allclose(group.label.position, [1.0, 0.15, 0.0])
        assert group.label.rotation_z == 0.0

    def test_position_negative_angle(self, builder):
        """Downward lines get no offset."""
        group = builder.build((0, 0, 0), (2, -2, 0)).group
        assert np.allclose(group.label.position, [1.0, -1.0, 0.0])
        assert group.label.rotation_z == 0.0

    def test_scale(self, builder):
        group = builder.build((0, 0, 0), (1, 0, 0)).group
        assert group.label.scale == (2.0, 0.5, 1.0)

    def test_own_material_and_texture(self, builder, materials):
        m1 = builder.build((0, 0, 0), (1, 0, 0))
        m2 = builder.build((0, 0, 0), (2, 0, 0))
        assert m1.group.label.material is not m2.group.label.material
        assert m1.group.label.material not in materials.all()
        assert "1.00 m" in m1.group.label.texture.svg
        assert "2.00 m" in m2.group.label.texture.svg
