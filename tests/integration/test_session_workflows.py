"""Integration tests for complete editing sessions.

These tests drive a MindMapSession the way a host UI would: key presses,
typed drafts, layout and connectors after every step, then save and reload.
"""

import json
import os
import tempfile

from mindflow import (
    Item,
    LayoutDirection,
    MindMapSession,
    find,
    from_json,
    render_to_png,
    to_json,
)
from mindflow.tree import walk


def labels(root):
    return [item.label for item, _, _ in walk(root)]


class TestBuildingAMap:
    """Grow a map from the default tree with the keyboard."""

    def test_tab_type_enter(self):
        session = MindMapSession()
        session.navigation.select(session.root.id)

        assert session.handle_key("Tab") is True
        new_id = session.active_id
        assert session.editor.editing_id == new_id
        assert session.editor.draft_text == "new node"
        assert session.editor.consume_focus_request() is True

        session.editor.update_draft("Idea")
        session.handle_key("Enter")

        assert not session.editor.is_open
        assert session.root.children[-1].id == new_id
        assert session.root.children[-1].label == "Idea"
        assert session.active_id == new_id

    def test_enter_chain_builds_siblings(self):
        session = MindMapSession(Item("r", "Topic", [Item("a", "First")]))
        session.navigation.select("a")
        for text in ("Second", "Third"):
            session.handle_key("Enter")
            session.editor.update_draft(text)
            session.handle_key("Escape")
        assert [c.label for c in session.root.children] == ["First", "Second", "Third"]
        assert session.active_id == session.root.children[-1].id

    def test_delete_returns_to_parent(self, deep_tree):
        session = MindMapSession(deep_tree)
        session.navigation.select("c1")
        session.handle_key("Backspace")
        assert session.active_id == "c"
        assert find(session.root, "c1a") is None
        assert [c.id for c in session.root.children[2].children] == ["c2"]

    def test_root_cannot_be_deleted(self, deep_tree):
        session = MindMapSession(deep_tree)
        session.navigation.select("root")
        assert session.handle_key("Delete") is True
        assert session.root.id == "root"
        assert session.active_id == "root"

    def test_every_step_lays_out(self):
        """Layout and routing stay consistent while the tree grows."""
        session = MindMapSession()
        session.navigation.select(session.root.id)
        for key in ("Tab", "Enter", "Tab", "Enter", "Enter"):
            session.handle_key(key)
            session.handle_key("Enter")
            result = session.layout()
            connectors = session.connectors(result)
            assert len(result.nodes) == len(labels(session.root))
            assert len(connectors) == len(result.nodes) - 1
        assert len(labels(session.root)) == 8

    def test_long_branch_by_keyboard(self):
        """Tab then Enter, 250 times over, grows one 250-level branch."""
        session = MindMapSession(Item("r", "Start"))
        session.navigation.select("r")
        for level in range(250):
            session.handle_key("Tab")
            session.editor.update_draft(f"Step {level}")
            session.handle_key("Enter")

        assert len(labels(session.root)) == 251
        assert find(session.root, session.active_id).item.label == "Step 249"
        depths = [depth for _, _, depth in walk(session.root)]
        assert max(depths) == 250


class TestSplitNavigation:
    """Arrow keys on a HorizontalSplit map."""

    def test_walk_both_sides(self, four_child_tree, session_factory):
        session = session_factory(four_child_tree, "HS", active="root")

        session.handle_key("ArrowRight")
        assert session.active_id == "c0"
        session.handle_key("ArrowDown")
        assert session.active_id == "c2"
        session.handle_key("ArrowDown")
        assert session.active_id == "c2"
        session.handle_key("ArrowLeft")
        assert session.active_id == "root"
        session.handle_key("ArrowLeft")
        assert session.active_id == "c1"
        session.handle_key("ArrowDown")
        assert session.active_id == "c3"

    def test_left_branch_grows_left(self, four_child_tree, session_factory):
        session = session_factory(four_child_tree, "HS", active="c3")
        session.handle_key("Tab")
        session.editor.update_draft("Leftmost")
        session.handle_key("Enter")
        new_id = session.active_id

        result = session.layout()
        assert result.nodes[new_id].right < result.nodes["c3"].x
        assert result.nodes[new_id].side == "left"

        # Outward on the left side is ArrowLeft; the new leaf has no children
        session.handle_key("ArrowLeft")
        assert session.active_id == new_id
        session.handle_key("ArrowRight")
        assert session.active_id == "c3"

    def test_switch_direction_mid_session(self, deep_tree):
        session = MindMapSession(deep_tree)
        session.navigation.select("a")
        session.set_layout_direction("RL")
        session.handle_key("ArrowLeft")
        assert session.active_id == "a1"
        session.set_layout_direction("TB")
        session.handle_key("ArrowRight")
        assert session.active_id == "a2"
        session.handle_key("ArrowUp")
        assert session.active_id == "a"


class TestSaveAndReload:
    """Persist a session and continue in a new one."""

    def test_round_trip_through_json(self, deep_tree):
        session = MindMapSession(deep_tree)
        session.set_layout_direction(LayoutDirection.HORIZONTAL_SPLIT)
        session.navigation.select("d")
        session.handle_key("Tab")
        session.editor.update_draft("Retro")
        session.handle_key("Enter")

        payload = to_json(session.root)
        reloaded = MindMapSession.from_dict(json.loads(payload))

        assert reloaded.root == session.root
        assert reloaded.direction is LayoutDirection.HORIZONTAL_SPLIT
        assert reloaded.layout() == session.layout()
        assert reloaded.connectors() == session.connectors()
        assert reloaded.active_id is None

    def test_reload_then_render(self, deep_tree):
        root = from_json(to_json(deep_tree))

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            output_path = f.name

        try:
            render_to_png(root, output_path, "HS", scale=1)
            assert os.path.getsize(output_path) > 0
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)
