"""Tests for all scenes - builds and describes each hierarchy."""

import numpy as np
import pytest

from node3d.main import SCENES, describe, main

EXPECTED_NODE_COUNTS = {
    "arm": 4,
    "solar": 4,
}


@pytest.mark.parametrize("scene_name,scene_factory", list(SCENES.items()))
def test_scene_builds(scene_name, scene_factory):
    """Test that each scene builds a connected hierarchy."""
    root = scene_factory()
    assert root.get_parent() is None

    nodes = list(root.iter_depth_first())
    assert len(nodes) == EXPECTED_NODE_COUNTS[scene_name]
    for node in nodes[1:]:
        assert node.root is root


@pytest.mark.parametrize("scene_name,scene_factory", list(SCENES.items()))
@pytest.mark.parametrize("order", ["depth", "breadth"])
def test_scene_describes(scene_name, scene_factory, order):
    """Test that each scene is described one line per node."""
    root = scene_factory()

    lines = describe(root, order)

    assert len(lines) == EXPECTED_NODE_COUNTS[scene_name]
    assert lines[0].startswith(f"- node {root.id}:")


def test_arm_world_positions_bend():
    root = SCENES["arm"]()
    tip = list(root.iter_depth_first())[-1]

    np.testing.assert_allclose(tip.get_global_position(), [0.0, 3.0, 0.0])
    assert tip.get_global_translation()[0] < 0.0


def test_main_prints_scene(capsys):
    main(["-s", "solar", "--order", "breadth", "--rotate-y", "90"])

    out = capsys.readouterr().out
    assert "Scene 'solar' contains 4 nodes (breadth-first):" in out
    assert out.count("- node ") == 4
