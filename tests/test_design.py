"""Tests for the design record: toggling, filtering, evaluation."""

import pytest

from hexlight.builders import build_hex_lattice
from hexlight.design import Design, filter_enabled_edges, toggle_edges
from hexlight.mirror import mirrored_edges
from hexlight.models import MirrorMode, Orientation


@pytest.fixture
def single_hex():
    return build_hex_lattice(1, 1, 1, 1, 18, Orientation.POINTY)


@pytest.fixture
def lattice():
    return build_hex_lattice(3, 3, 3, 3, 30, Orientation.POINTY)


# ═══════════════════════════════════════════════════════════════════
# Filtering
# ═══════════════════════════════════════════════════════════════════


class TestFilter:
    def test_drops_exactly_unknown_keys(self, single_hex):
        stored = ["0|1", "7|8", "2|3", "120|121", "0|1"]
        assert filter_enabled_edges(stored, single_hex) == {"0|1", "2|3"}

    def test_order_preserved(self, single_hex):
        assert single_hex.filter_edge_keys(["3|4", "x", "0|1"]) == ["3|4", "0|1"]


# ═══════════════════════════════════════════════════════════════════
# Toggling
# ═══════════════════════════════════════════════════════════════════


class TestToggle:
    def test_toggle_on_and_off(self, single_hex):
        on = toggle_edges((), "0|1", single_hex)
        assert on == ("0|1",)
        assert toggle_edges(on, "0|1", single_hex) == ()

    def test_unknown_key_is_a_no_op(self, single_hex):
        assert toggle_edges(("0|1",), "55|56", single_hex) == ("0|1",)

    def test_mirror_group_switches_together(self, single_hex):
        on = toggle_edges((), "0|1", single_hex, MirrorMode.BOTH)
        assert set(on) == {"0|1", "0|5", "2|3", "3|4"}
        assert toggle_edges(on, "0|1", single_hex, MirrorMode.BOTH) == ()

    def test_clicked_edge_decides_direction(self, single_hex):
        # The mirror image is already on; turning the clicked edge on keeps it on.
        on = toggle_edges(("0|5",), "0|1", single_hex, MirrorMode.HORIZONTAL)
        assert set(on) == {"0|1", "0|5"}

    @pytest.mark.parametrize("mode", list(MirrorMode))
    def test_double_toggle_restores_state(self, lattice, mode):
        start = ("0|1", "1|2")
        for key in list(lattice.edges)[::5]:
            if key in start:
                continue
            if mirrored_edges(key, mode, lattice) & set(start):
                continue
            once = toggle_edges(start, key, lattice, mode)
            twice = toggle_edges(once, key, lattice, mode)
            assert set(twice) == set(start)

    def test_keeps_unrelated_keys(self, single_hex):
        result = toggle_edges(("stale|key", "3|4"), "0|1", single_hex)
        assert result == ("stale|key", "3|4", "0|1")


# ═══════════════════════════════════════════════════════════════════
# Design record
# ═══════════════════════════════════════════════════════════════════


class TestDesign:
    def test_defaults(self):
        design = Design()
        assert design.orientation is Orientation.POINTY
        assert design.mirror_mode is MirrorMode.NONE
        assert design.dimensions().counts() == (3, 3, 3, 3)

    def test_string_enums_are_parsed(self):
        design = Design(orientation="flat", mirror_mode="radial")
        assert design.orientation is Orientation.FLAT
        assert design.mirror_mode is MirrorMode.RADIAL

    def test_invalid_mirror_mode(self):
        with pytest.raises(ValueError):
            Design(mirror_mode="sideways")

    def test_invalid_spacing(self):
        with pytest.raises(ValueError):
            Design(point_spacing=0)

    def test_toggle_is_pure(self):
        design = Design()
        toggled = design.toggle("0|1")
        assert design.enabled_edges == ()
        assert toggled.enabled_edges == ("0|1",)
        assert toggled.evaluate().stats.segments == 1

    def test_toggle_uses_mirror_mode(self):
        design = Design(mirror_mode=MirrorMode.HORIZONTAL).toggle("0|1")
        assert len(design.enabled_edges) == 2

    def test_clear(self):
        design = Design().toggle("0|1").toggle("1|2").clear()
        assert design.enabled_edges == ()

    def test_shrinking_drops_stale_edges_from_view(self):
        design = Design()
        lattice = design.lattice()
        last = list(lattice.edges)[-1]
        design = design.toggle("0|1").toggle(last)
        small = design.configure(width=30, length=30)
        view = small.evaluate()
        assert view.dimensions.counts() == (1, 1, 1, 1)
        assert view.enabled_edges == {"0|1"}
        assert view.stats.segments == 1
        # The record itself keeps the key for when the grid grows back.
        assert last in small.enabled_edges
        regrown = small.configure(width=120, length=96)
        assert regrown.evaluate().stats.segments == 2

    def test_designs_share_a_read_only_lattice(self):
        first = Design().lattice()
        with pytest.raises(TypeError):
            del first.edges["0|1"]
        fresh = Design().lattice()
        assert "0|1" in fresh.edges
        assert fresh.has_edge("0|1")
        assert Design().toggle("0|1").evaluate().stats.segments == 1

    def test_limits_reported(self):
        design = Design(max_segments=1).toggle("0|1").toggle("1|2")
        view = design.evaluate()
        assert view.limits.segments
        assert not view.limits.joints2

    def test_view_box_pads_lattice(self):
        view = Design().evaluate()
        box = view.view_box()
        bounds = view.lattice.bounds()
        size = view.lattice.metadata["size"]
        assert box.min_x == -size
        assert box.max_x == pytest.approx(bounds.max_x + size)
        assert box.max_y == pytest.approx(bounds.max_y + size)

    def test_mirror_axes_from_view(self):
        view = Design().evaluate()
        axes = view.mirror_axes()
        assert axes.min_x <= axes.center_x <= axes.max_x
        assert axes.min_y <= axes.center_y <= axes.max_y


class TestPersistedForm:
    def test_round_trip(self):
        design = Design(
            width=200,
            length=150,
            orientation=Orientation.FLAT,
            mirror_mode=MirrorMode.BOTH,
            enabled_edges=("0|1", "2|3"),
            max_joints3=4,
        )
        assert Design.from_dict(design.to_dict()) == design

    def test_persisted_field_names(self):
        payload = Design().to_dict()
        assert payload["pointyTop"] is True
        assert payload["widthInches"] == 120.0
        assert payload["enabledEdges"] == []

    def test_partial_payload_keeps_defaults(self):
        design = Design.from_dict({"pointyTop": False, "enabledEdges": ["4|5"]})
        assert design.orientation is Orientation.FLAT
        assert design.enabled_edges == ("4|5",)
        assert design.width == Design().width
