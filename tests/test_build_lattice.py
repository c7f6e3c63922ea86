"""Tests for the lattice builder."""

import math

import pytest

from hexlight.builders import (
    _get_vertex_id,
    build_hex_lattice,
    build_lattice_from_size,
    cached_hex_lattice,
    hex_cell_count,
)
from hexlight.lattice import HexLattice
from hexlight.models import Edge, Face, Orientation, Vertex, edge_key, split_edge_key

CONFIGS = [
    (1, 1, 1, 1, Orientation.POINTY),
    (2, 2, 2, 2, Orientation.POINTY),
    (3, 2, 3, 3, Orientation.POINTY),
    (4, 4, 1, 1, Orientation.POINTY),
    (1, 1, 1, 1, Orientation.FLAT),
    (4, 4, 3, 2, Orientation.FLAT),
    (1, 1, 4, 4, Orientation.FLAT),
]


def _degrees(lattice):
    return lattice.vertex_degrees()


class TestEdgeKey:
    def test_symmetric(self):
        for a, b in [("0", "1"), ("12", "3"), ("7", "70")]:
            assert edge_key(a, b) == edge_key(b, a)

    def test_format(self):
        assert edge_key("5", "2") == "2|5"
        # Identifiers are opaque strings, ordered as strings.
        assert edge_key("9", "10") == "10|9"

    def test_split(self):
        assert split_edge_key("3|12") == ("3", "12")
        assert split_edge_key("3|") is None
        assert split_edge_key("no-separator") is None


class TestScenarios:
    def test_single_hexagon(self):
        lattice = build_hex_lattice(1, 1, 1, 1, 18, Orientation.POINTY)
        assert len(lattice.vertices) == 6
        assert len(lattice.edges) == 6
        assert set(lattice.edges) == {"0|1", "1|2", "2|3", "3|4", "4|5", "0|5"}
        assert all(d == 2 for d in _degrees(lattice).values())

    def test_first_corner_points_up(self):
        lattice = build_hex_lattice(1, 1, 1, 1, 18, Orientation.POINTY)
        first = lattice.vertices["0"]
        assert first.x == pytest.approx(math.sqrt(3) / 2 * 18)
        assert first.y == pytest.approx(0.0, abs=1e-9)

    def test_flat_first_corner_points_right(self):
        lattice = build_hex_lattice(1, 1, 1, 1, 1.0, Orientation.FLAT)
        first = lattice.vertices["0"]
        assert first.x == pytest.approx(2.0)
        assert first.y == pytest.approx(math.sqrt(3) / 2)

    def test_two_by_two_pointy(self):
        lattice = build_hex_lattice(2, 2, 2, 2, 18, Orientation.POINTY)
        assert len(lattice.faces) == 4
        assert len(lattice.vertices) == 16
        assert len(lattice.edges) == 19

    def test_row_of_two(self):
        lattice = build_hex_lattice(2, 2, 1, 1, 1.0, Orientation.POINTY)
        assert len(lattice.vertices) == 10
        assert len(lattice.edges) == 11
        shared = [e for e in lattice.edges.values() if len(e.face_ids) == 2]
        assert len(shared) == 1

    def test_ragged_cell_count(self):
        lattice = build_hex_lattice(3, 2, 3, 3, 1.0, Orientation.POINTY)
        assert len(lattice.faces) == 8
        assert hex_cell_count(3, 2, 3, 3, Orientation.POINTY) == 8

    def test_ragged_flat_cell_count(self):
        lattice = build_hex_lattice(4, 4, 3, 2, 1.0, Orientation.FLAT)
        assert len(lattice.faces) == 10
        assert hex_cell_count(4, 4, 3, 2, "flat") == 10

    def test_zero_counts_clamp(self):
        lattice = build_hex_lattice(0, 0, 0, 0, 1.0)
        assert len(lattice.faces) == 1
        assert len(lattice.edges) == 6

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            build_hex_lattice(1, 1, 1, 1, 0.0)


@pytest.mark.parametrize("cols,cols_odd,rows,rows_odd,orientation", CONFIGS)
class TestInvariants:
    def test_validates(self, cols, cols_odd, rows, rows_odd, orientation):
        lattice = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        assert lattice.validate(strict=True) == []

    def test_vertex_ids_in_discovery_order(self, cols, cols_odd, rows, rows_odd, orientation):
        lattice = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        assert list(lattice.vertices) == [str(i) for i in range(len(lattice.vertices))]

    def test_hex_closure(self, cols, cols_odd, rows, rows_odd, orientation):
        lattice = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        for face in lattice.faces.values():
            assert len(face.vertex_ids) == 6
            assert len(set(face.edge_ids)) == 6
        shares = [len(e.face_ids) for e in lattice.edges.values()]
        assert set(shares) <= {1, 2}
        assert sum(shares) == 6 * len(lattice.faces)
        boundary = {e.id for e in lattice.boundary_edges()}
        assert boundary == {k for k, e in lattice.edges.items() if len(e.face_ids) == 1}
        if len(lattice.faces) == 1:
            assert boundary == set(lattice.edges)

    def test_euler_characteristic(self, cols, cols_odd, rows, rows_odd, orientation):
        lattice = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        v, e, f = len(lattice.vertices), len(lattice.edges), len(lattice.faces)
        assert v - e + f == 1

    def test_degree_at_most_three(self, cols, cols_odd, rows, rows_odd, orientation):
        lattice = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        degrees = _degrees(lattice)
        assert max(degrees.values()) <= 3
        assert min(degrees.values()) >= 2

    def test_edges_have_unit_length(self, cols, cols_odd, rows, rows_odd, orientation):
        lattice = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        for edge in lattice.edges.values():
            a, b = (lattice.vertices[vid] for vid in edge.vertex_ids)
            assert math.hypot(a.x - b.x, a.y - b.y) == pytest.approx(18.0)

    def test_edge_ids_are_canonical(self, cols, cols_odd, rows, rows_odd, orientation):
        lattice = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        for key, edge in lattice.edges.items():
            assert key == edge_key(*edge.vertex_ids)

    def test_idempotent(self, cols, cols_odd, rows, rows_odd, orientation):
        a = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        b = build_hex_lattice(cols, cols_odd, rows, rows_odd, 18, orientation)
        assert len(a.vertices) == len(b.vertices)
        assert list(a.edges) == list(b.edges)
        assert {vid: (v.x, v.y) for vid, v in a.vertices.items()} == {
            vid: (v.x, v.y) for vid, v in b.vertices.items()
        }


class TestCaching:
    def test_cached_lattice_is_shared(self):
        a = cached_hex_lattice(2, 2, 2, 2, 30.0, Orientation.POINTY)
        b = cached_hex_lattice(2, 2, 2, 2, 30.0, Orientation.POINTY)
        assert a is b

    def test_build_from_size(self):
        lattice = build_lattice_from_size(120, 96, 18, Orientation.POINTY)
        assert len(lattice.faces) == 9
        assert lattice.metadata["cols"] == 3
        assert lattice.orientation is Orientation.POINTY


class TestVertexMerge:
    def test_offset_below_tolerance_merges(self):
        vertices = []
        assert _get_vertex_id(vertices, (0.0, 0.0)) == "0"
        assert _get_vertex_id(vertices, (0.0099, -0.0099)) == "0"
        assert len(vertices) == 1
        # First-seen position is kept.
        assert (vertices[0].x, vertices[0].y) == (0.0, 0.0)

    def test_offset_at_tolerance_is_new_vertex(self):
        vertices = []
        _get_vertex_id(vertices, (0.0, 0.0))
        assert _get_vertex_id(vertices, (0.01, 0.0)) == "1"
        assert _get_vertex_id(vertices, (0.0, 0.01)) == "2"
        assert len(vertices) == 3

    def test_both_axes_must_be_close(self):
        vertices = []
        _get_vertex_id(vertices, (1.0, 1.0))
        assert _get_vertex_id(vertices, (1.005, 1.5)) == "1"

    def test_matches_earliest_candidate(self):
        vertices = []
        _get_vertex_id(vertices, (0.0, 0.0))
        _get_vertex_id(vertices, (0.015, 0.0))
        assert _get_vertex_id(vertices, (0.008, 0.0)) == "0"


class TestReadOnly:
    def test_maps_reject_mutation(self):
        lattice = build_hex_lattice(1, 1, 1, 1, 1.0)
        with pytest.raises(TypeError):
            del lattice.edges["0|1"]
        with pytest.raises(TypeError):
            lattice.vertices["99"] = Vertex("99", 0.0, 0.0)
        with pytest.raises(TypeError):
            lattice.metadata["size"] = 2.0

    def test_cached_lattice_survives_attempted_edit(self):
        shared = cached_hex_lattice(2, 2, 2, 2, 30.0, Orientation.POINTY)
        with pytest.raises(TypeError):
            del shared.edges["0|1"]
        again = cached_hex_lattice(2, 2, 2, 2, 30.0, Orientation.POINTY)
        assert "0|1" in again.edges
        assert again.has_edge("0|1")
        assert len(again.edges) == 19

    def test_input_metadata_is_copied(self):
        metadata = {"size": 1.0}
        lattice = HexLattice([], [], metadata=metadata)
        metadata["size"] = 5.0
        assert lattice.metadata["size"] == 1.0


class TestValidate:
    def _single(self):
        return build_hex_lattice(1, 1, 1, 1, 1.0)

    def test_missing_endpoint(self):
        lattice = self._single()
        edges = list(lattice.edges.values()) + [Edge("0|9", ("0", "9"), ("h0",))]
        broken = HexLattice(lattice.vertices.values(), edges, lattice.faces.values())
        errors = broken.validate()
        assert any("unknown endpoints" in e for e in errors)

    def test_edge_without_back_reference(self):
        lattice = self._single()
        edges = [
            Edge(e.id, e.vertex_ids, e.face_ids + ("h7",)) if e.id == "0|1" else e
            for e in lattice.edges.values()
        ]
        broken = HexLattice(lattice.vertices.values(), edges, lattice.faces.values())
        assert any("does not list it back" in e for e in broken.validate())

    def test_side_out_of_ring_order(self):
        lattice = self._single()
        face = lattice.faces["h0"]
        swapped = face.edge_ids[1:] + face.edge_ids[:1]
        bad = Face(face.id, face.col, face.row, face.vertex_ids, swapped)
        broken = HexLattice(lattice.vertices.values(), lattice.edges.values(), [bad])
        assert any("corners give" in e for e in broken.validate())

    def test_strict_rejects_short_cell(self):
        lattice = self._single()
        face = lattice.faces["h0"]
        bad = Face(face.id, face.col, face.row, face.vertex_ids[:5], ())
        broken = HexLattice(lattice.vertices.values(), lattice.edges.values(), [bad])
        assert any("expected 6" in e for e in broken.validate(strict=True))
