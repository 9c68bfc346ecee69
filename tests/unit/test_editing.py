"""Unit tests for the editing module."""

import pytest

from mindflow.models import Item
from mindflow.navigation import Key
from mindflow.session import MindMapSession
from mindflow.tree import delete_node, find


@pytest.fixture
def session():
    root = Item(
        id="root",
        label="Root",
        children=[Item(id="a", label="Alpha"), Item(id="b", label="Beta")],
    )
    return MindMapSession(root)


def label(session, item_id):
    return find(session.root, item_id).item.label


class TestBegin:
    """Tests for opening an edit."""

    def test_draft_defaults_to_label(self, session):
        assert session.editor.begin("a") is True
        assert session.editor.editing_id == "a"
        assert session.editor.draft_text == "Alpha"
        assert session.editor.is_open

    def test_requests_focus_and_select_all(self, session):
        session.editor.begin("a")
        assert session.editor.consume_focus_request() is True
        assert session.editor.consume_focus_request() is False

    def test_unknown_id(self, session):
        assert session.editor.begin("missing") is False
        assert not session.editor.is_open

    def test_switching_commits_previous(self, session):
        """Opening a second edit commits the first one."""
        session.editor.begin("a")
        session.editor.update_draft("Apple")
        session.editor.begin("b")
        assert label(session, "a") == "Apple"
        assert session.editor.editing_id == "b"
        assert session.editor.draft_text == "Beta"


class TestCommit:
    """Tests for writing drafts back."""

    def test_commit_without_changes_keeps_label(self, session):
        session.editor.begin("a")
        before = session.root
        assert session.editor.commit() is True
        assert label(session, "a") == "Alpha"
        assert not session.editor.is_open
        assert before.children[0].label == "Alpha"

    def test_commit_renames(self, session):
        session.editor.begin("b")
        session.editor.update_draft("Bravo")
        session.editor.commit()
        assert label(session, "b") == "Bravo"

    def test_empty_draft_committed_verbatim(self, session):
        session.editor.begin("b")
        session.editor.update_draft("")
        session.editor.commit()
        assert label(session, "b") == ""

    def test_update_draft_does_not_touch_tree(self, session):
        session.editor.begin("a")
        session.editor.update_draft("Changed")
        assert label(session, "a") == "Alpha"

    def test_update_without_edit_ignored(self, session):
        session.editor.update_draft("x")
        assert session.editor.draft_text == ""

    def test_commit_when_closed(self, session):
        assert session.editor.commit() is False

    def test_blur_commits(self, session):
        session.editor.begin("a")
        session.editor.update_draft("Blurred")
        assert session.editor.blur() is True
        assert label(session, "a") == "Blurred"

    def test_item_deleted_during_edit(self, session):
        """A draft for a deleted item is dropped without error."""
        session.editor.begin("a")
        session.editor.update_draft("Ghost")
        session.apply(delete_node(session.root, "a"))
        assert not session.editor.is_open
        assert session.editor.commit() is False
        assert find(session.root, "a") is None


class TestKeys:
    """Tests for key handling while editing."""

    def test_enter_commits(self, session):
        session.editor.begin("a")
        session.editor.update_draft("Entered")
        assert session.editor.handle_key(Key.ENTER) is True
        assert label(session, "a") == "Entered"

    def test_escape_commits(self, session):
        """Escape keeps the draft instead of discarding it."""
        session.editor.begin("a")
        session.editor.update_draft("Escaped")
        assert session.editor.handle_key("Escape") is True
        assert label(session, "a") == "Escaped"
        assert not session.editor.is_open

    def test_text_keys_not_consumed(self, session):
        session.editor.begin("a")
        assert session.editor.handle_key("Tab") is False
        assert session.editor.handle_key("ArrowLeft") is False
        assert session.editor.handle_key("z") is False
        assert session.editor.is_open

    def test_keys_ignored_when_closed(self, session):
        assert session.editor.handle_key("Enter") is False
