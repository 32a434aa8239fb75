"""
Unit tests for design document loading and saving.
"""

import json

import pytest

from chipcarve.document import design_to_json, dump_design, load_design, validate_design
from chipcarve.errors import DesignFormatError
from chipcarve.leaf import Leaf
from chipcarve.triarc import TriArc


def _leaf_json(radius=6.5):
    return {
        "id": "leaf-1",
        "type": "LEAF",
        "selected": False,
        "vertices": [{"x": 0.0, "y": 0.0}, {"x": 10.0, "y": 0.0}],
        "radius": radius,
    }


def _tri_json():
    return {
        "id": "tri-1",
        "type": "TRI_ARC",
        "vertices": [{"x": 0.0, "y": 0.0}, {"x": 100.0, "y": 0.0}, {"x": 50.0, "y": 100.0}],
        "curvatures": [-0.25, -0.25, -0.25],
    }


class TestLoad:
    """Reading documents."""

    def test_load_dict(self):
        design = load_design({"version": "2.0", "shapes": [_leaf_json(), _tri_json()]})
        assert [type(s) for s in design.shapes] == [Leaf, TriArc]
        assert design.shapes[0].id == "leaf-1"
        assert design.shapes[1].bulges == [-0.25, -0.25, -0.25]
        assert design.background_images == []
        assert design.metadata == {}

    def test_load_text(self):
        text = json.dumps({"version": "2.0", "shapes": [_leaf_json()]})
        assert len(load_design(text).shapes) == 1

    def test_background_images_pass_through(self):
        image = {"id": "bg", "imageData": "data:image/png;base64,AAAA", "opacity": 0.5}
        design = load_design({"version": "2.0", "shapes": [], "backgroundImages": [image]})
        assert design.background_images == [image]

    def test_metadata(self):
        design = load_design({"version": "2.0", "shapes": [], "metadata": {"author": "me"}})
        assert design.metadata == {"author": "me"}

    @pytest.mark.parametrize(
        "data",
        [
            "not json",
            [],
            {"shapes": []},
            {"version": "1.0", "shapes": []},
            {"version": "2.0"},
            {"version": "2.0", "shapes": [_leaf_json(radius=2.0)]},
            {"version": "2.0", "shapes": [_leaf_json(), {"type": "LEAF"}]},
            {"version": "2.0", "shapes": [], "backgroundImages": [{"id": "bg"}]},
        ],
    )
    def test_invalid_documents(self, data):
        with pytest.raises(DesignFormatError):
            load_design(data)

    def test_legacy_array_rejected(self):
        with pytest.raises(DesignFormatError):
            validate_design([_leaf_json()])


class TestDump:
    """Writing documents."""

    def test_dump_minimal(self, leaf):
        data = dump_design([leaf])
        assert data["version"] == "2.0"
        assert data["shapes"] == [leaf.to_json()]
        assert "backgroundImages" not in data
        assert "metadata" not in data

    def test_dump_optional_sections(self, leaf):
        data = dump_design([leaf], background_images=[{"id": "a", "imageData": "x"}], metadata={"k": 1})
        assert data["backgroundImages"] == [{"id": "a", "imageData": "x"}]
        assert data["metadata"] == {"k": 1}

    def test_text_round_trip(self, leaf, triarc):
        leaf.selected = True
        design = load_design(design_to_json([leaf, triarc]))
        restored_leaf, restored_tri = design.shapes
        assert restored_leaf.id == leaf.id
        assert restored_leaf.selected
        assert restored_leaf.radius == pytest.approx(leaf.radius)
        assert restored_tri.vertices == triarc.vertices
        assert restored_tri.bulges == pytest.approx(triarc.bulges)
