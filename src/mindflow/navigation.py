"""
Keyboard navigation and structural editing for mind maps.

The NavigationController keeps the active-node cursor and maps key presses to
tree operations and cursor moves. Arrow keys are direction-aware: on a
LeftToRight map ArrowRight goes to the first child, on a RightToLeft map the
same key goes back to the parent, and on a HorizontalSplit map the answer
depends on which side of the root the active branch sits.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from .models import Item, LayoutDirection
from .tree import (
    NEW_NODE_LABEL,
    FindResult,
    add_child,
    add_sibling,
    delete_node,
    find,
    path_to,
)

if TYPE_CHECKING:
    from .session import MindMapSession

logger = logging.getLogger(__name__)


class Key(Enum):
    """Keys the engine reacts to. Values are DOM ``KeyboardEvent.key`` names."""

    TAB = "Tab"
    ENTER = "Enter"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    ESCAPE = "Escape"
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"


ARROW_KEYS = (Key.ARROW_UP, Key.ARROW_DOWN, Key.ARROW_LEFT, Key.ARROW_RIGHT)


def coerce_key(key: Union[Key, str]) -> Optional[Key]:
    """Map a key name to a Key, or None for keys the engine ignores."""
    if isinstance(key, Key):
        return key
    try:
        return Key(key)
    except ValueError:
        return None


def branch_side(root: Item, item_id: str) -> Optional[str]:
    """
    Side of the root a HorizontalSplit branch lies on.

    Walks up to the root child the item descends from: even indices are on
    the right, odd indices on the left.

    Returns:
        "right", "left", or None for the root and unknown ids.
    """
    path = path_to(root, item_id)
    if len(path) < 2:
        return None
    top_id = path[1]
    index = next(i for i, child in enumerate(root.children) if child.id == top_id)
    return "right" if index % 2 == 0 else "left"


class NavigationController:
    """
    Active-node cursor and structural key commands.

    Attributes:
        session: Owning MindMapSession.
        active_id: Id of the active item, or None.
    """

    def __init__(self, session: "MindMapSession"):
        self.session = session
        self.active_id: Optional[str] = None

    def select(self, item_id: Optional[str]) -> bool:
        """Make an item active. Unknown ids clear nothing and return False."""
        if item_id is None:
            self.active_id = None
            return True
        if find(self.session.root, item_id) is None:
            return False
        self.active_id = item_id
        return True

    def handle_key(self, key: Union[Key, str]) -> bool:
        """
        Run the command bound to a key.

        Commands only apply while an item is active and no label edit is open.

        Returns:
            True when the key was consumed.
        """
        key = coerce_key(key)
        if key is None or self.session.editor.is_open:
            return False
        if self.active_id is None or find(self.session.root, self.active_id) is None:
            return False

        if key is Key.TAB:
            self.add_child()
        elif key is Key.ENTER:
            self.add_sibling()
        elif key in (Key.BACKSPACE, Key.DELETE):
            self.delete_active()
        elif key in ARROW_KEYS:
            self.move(key)
        else:
            return False
        return True

    def add_child(self) -> Optional[str]:
        """Add a child under the active item, activate it and start editing it."""
        new_root, new_id = add_child(self.session.root, self.active_id, NEW_NODE_LABEL)
        return self._activate_new(new_root, new_id)

    def add_sibling(self) -> Optional[str]:
        """Add a sibling after the active item (a child when it is the root)."""
        new_root, new_id = add_sibling(
            self.session.root, self.active_id, NEW_NODE_LABEL
        )
        return self._activate_new(new_root, new_id)

    def _activate_new(self, new_root: Item, new_id: Optional[str]) -> Optional[str]:
        if new_id is None:
            return None
        self.session.apply(new_root)
        self.active_id = new_id
        self.session.editor.begin(new_id)
        return new_id

    def delete_active(self) -> bool:
        """Delete the active item and move the cursor to its former parent."""
        found = find(self.session.root, self.active_id)
        if found is None or found.parent is None:
            return False
        parent_id = found.parent.id
        self.session.apply(delete_node(self.session.root, self.active_id))
        self.active_id = parent_id
        return True

    def move(self, key: Union[Key, str]) -> bool:
        """Move the cursor for an arrow key. Returns True if it moved."""
        target = self.target_for(key)
        if target is None:
            return False
        self.active_id = target
        return True

    def target_for(self, key: Union[Key, str]) -> Optional[str]:
        """Id an arrow key would move the cursor to, or None."""
        key = coerce_key(key)
        if key not in ARROW_KEYS or self.active_id is None:
            return None
        root = self.session.root
        found = find(root, self.active_id)
        if found is None:
            return None

        direction = self.session.direction
        if direction is LayoutDirection.HORIZONTAL_SPLIT:
            return self._split_target(key, root, found)

        first_child = _first_child(found.item)
        parent_id = found.parent.id if found.parent is not None else None
        if direction is LayoutDirection.TOP_TO_BOTTOM:
            targets = {
                Key.ARROW_RIGHT: _sibling(found, 1),
                Key.ARROW_LEFT: _sibling(found, -1),
                Key.ARROW_DOWN: first_child,
                Key.ARROW_UP: parent_id,
            }
        elif direction is LayoutDirection.RIGHT_TO_LEFT:
            targets = {
                Key.ARROW_LEFT: first_child,
                Key.ARROW_RIGHT: parent_id,
                Key.ARROW_DOWN: _sibling(found, 1),
                Key.ARROW_UP: _sibling(found, -1),
            }
        else:
            targets = {
                Key.ARROW_RIGHT: first_child,
                Key.ARROW_LEFT: parent_id,
                Key.ARROW_DOWN: _sibling(found, 1),
                Key.ARROW_UP: _sibling(found, -1),
            }
        return targets[key]

    def _split_target(self, key: Key, root: Item, found: FindResult) -> Optional[str]:
        item, parent = found.item, found.parent
        if parent is None:
            # Child 0 opens the right group, child 1 the left group
            if key is Key.ARROW_RIGHT and len(item.children) > 0:
                return item.children[0].id
            if key is Key.ARROW_LEFT and len(item.children) > 1:
                return item.children[1].id
            return None

        step = 2 if parent.id == root.id else 1
        if key is Key.ARROW_UP:
            return _sibling(found, -step)
        if key is Key.ARROW_DOWN:
            return _sibling(found, step)

        outward = Key.ARROW_RIGHT
        if branch_side(root, item.id) == "left":
            outward = Key.ARROW_LEFT
        if key is outward:
            return _first_child(item)
        return parent.id


def _first_child(item: Item) -> Optional[str]:
    return item.children[0].id if item.children else None


def _sibling(found: FindResult, offset: int) -> Optional[str]:
    if found.parent is None:
        return None
    siblings = found.parent.children
    index = next(i for i, c in enumerate(siblings) if c.id == found.item.id)
    target = index + offset
    if 0 <= target < len(siblings):
        return siblings[target].id
    return None
