"""
Tree operations for mind-map items.

Every mutating function is copy-on-write: it never modifies the tree it is
given and returns a new root instead. Only the items on the path from the root
to the edited item are copied; every other subtree is shared with the old tree. Operations that reference an id missing
from the tree are silent no-ops that hand back the input tree unchanged, so a
UI event that arrives after the node it targets was deleted cannot break the
session.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Tuple

from .models import Item, ItemStyle, LayoutDirection

logger = logging.getLogger(__name__)

NEW_NODE_LABEL = "new node"


@dataclass
class FindResult:
    """An item located in a tree together with its parent (None for the root)."""

    item: Item
    parent: Optional[Item]


def new_item_id() -> str:
    """Generate a fresh item id."""
    return f"node-{uuid.uuid4().hex[:12]}"


def walk(root: Item) -> Iterator[Tuple[Item, Optional[Item], int]]:
    """
    Iterate a tree in pre-order.

    Yields:
        (item, parent, depth) tuples, root first with parent None and depth 0.
    """
    stack: List[Tuple[Item, Optional[Item], int]] = [(root, None, 0)]
    while stack:
        item, parent, depth = stack.pop()
        yield item, parent, depth
        for child in reversed(item.children):
            stack.append((child, item, depth + 1))


def find(root: Item, item_id: str) -> Optional[FindResult]:
    """
    Locate an item by id.

    Args:
        root: Tree root.
        item_id: Id to look for.

    Returns:
        FindResult, or None when the id is not in the tree.
    """
    for item, parent, _ in walk(root):
        if item.id == item_id:
            return FindResult(item=item, parent=parent)
    return None


def contains(root: Item, item_id: Optional[str]) -> bool:
    if item_id is None:
        return False
    return find(root, item_id) is not None


def item_count(root: Item) -> int:
    return sum(1 for _ in walk(root))


def path_to(root: Item, item_id: str) -> List[str]:
    """Return the ids from the root down to ``item_id``, or [] if absent."""
    parents = {}
    for item, parent, _ in walk(root):
        parents[item.id] = parent.id if parent is not None else None
        if item.id == item_id:
            path = [item.id]
            while parents[path[-1]] is not None:
                path.append(parents[path[-1]])
            return list(reversed(path))
    return []


def copy_path(root: Item, item_id: str) -> List[Item]:
    """
    Copy the items from the root down to ``item_id``.

    Each copy gets its own children list, so the caller may edit the last
    copy and any children list on the path without touching the input tree.
    Subtrees off the path are shared.

    Returns:
        The copies from the new root down to the copy of ``item_id``, or []
        when the id is not in the tree.
    """
    path = path_to(root, item_id)
    if not path:
        return []

    copies = [replace(root, children=list(root.children))]
    for child_id in path[1:]:
        siblings = copies[-1].children
        index = next(i for i, c in enumerate(siblings) if c.id == child_id)
        clone = replace(siblings[index], children=list(siblings[index].children))
        siblings[index] = clone
        copies.append(clone)
    return copies


def search(root: Item, query: str) -> List[str]:
    """Return ids of items whose label contains ``query``, case-insensitive."""
    needle = query.lower()
    if not needle:
        return []
    return [item.id for item, _, _ in walk(root) if needle in item.label.lower()]


def add_child(
    root: Item, parent_id: str, label: str, item_id: Optional[str] = None
) -> Tuple[Item, Optional[str]]:
    """
    Append a new leaf to the end of a parent's children.

    Args:
        root: Tree root.
        parent_id: Id of the item receiving the child.
        label: Label of the new item.
        item_id: Id for the new item; generated when omitted.

    Returns:
        (new_root, new_id). When ``parent_id`` is unknown the input tree is
        returned unchanged with a new_id of None.
    """
    copies = copy_path(root, parent_id)
    if not copies:
        logger.debug("add_child ignored, unknown parent %r", parent_id)
        return root, None

    child = Item(id=item_id or new_item_id(), label=label)
    copies[-1].children.append(child)
    return copies[0], child.id


def add_sibling(
    root: Item, sibling_id: str, label: str, item_id: Optional[str] = None
) -> Tuple[Item, Optional[str]]:
    """
    Insert a new item directly after ``sibling_id``.

    The root has no siblings, so adding a sibling to the root appends a new
    child to the root instead.

    Returns:
        (new_root, new_id), or (root, None) when ``sibling_id`` is unknown.
    """
    found = find(root, sibling_id)
    if found is None:
        logger.debug("add_sibling ignored, unknown item %r", sibling_id)
        return root, None
    if found.parent is None:
        return add_child(root, sibling_id, label, item_id=item_id)

    copies = copy_path(root, found.parent.id)
    siblings = copies[-1].children
    index = next(i for i, c in enumerate(siblings) if c.id == sibling_id)
    sibling = Item(id=item_id or new_item_id(), label=label)
    siblings.insert(index + 1, sibling)
    return copies[0], sibling.id


def delete_node(root: Item, item_id: str) -> Item:
    """
    Remove an item and its whole subtree.

    Deleting the root or an unknown id is a no-op. Moving the active cursor to
    the former parent is up to the caller.
    """
    found = find(root, item_id)
    if found is None or found.parent is None:
        logger.debug("delete_node ignored for %r", item_id)
        return root

    copies = copy_path(root, found.parent.id)
    parent = copies[-1]
    parent.children = [c for c in parent.children if c.id != item_id]
    return copies[0]


def rename(root: Item, item_id: str, label: str) -> Item:
    """Replace an item's label verbatim. Empty labels are allowed."""
    copies = copy_path(root, item_id)
    if not copies:
        logger.debug("rename ignored, unknown item %r", item_id)
        return root

    copies[-1].label = label
    return copies[0]


def set_style(
    root: Item, item_id: str, style: Optional[ItemStyle] = None, **fields
) -> Item:
    """
    Shallow-merge a partial style into an item's style.

    The partial can be given as an ItemStyle, as keyword arguments
    (``background_color``, ``border_color``, ``text_color``, ``font_size``),
    or both, in which case the keyword arguments win. Fields left as None keep
    their current value.
    """
    copies = copy_path(root, item_id)
    if not copies:
        logger.debug("set_style ignored, unknown item %r", item_id)
        return root

    partial = (style or ItemStyle()).merged(ItemStyle(**fields))
    item = copies[-1]
    item.style = (item.style or ItemStyle()).merged(partial)
    return copies[0]


def set_layout_direction(root: Item, direction: Optional[LayoutDirection]) -> Item:
    """Set the layout mode of the whole tree. Only the root carries it."""
    return replace(root, children=list(root.children), layout_direction=direction)


def default_tree() -> Item:
    """The starter tree a freshly placed mind map begins with."""
    return Item(
        id="root",
        label="Central Topic",
        children=[
            Item(id=new_item_id(), label="Branch 1"),
            Item(id=new_item_id(), label="Branch 2"),
        ],
    )
