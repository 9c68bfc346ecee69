"""
Persistence for mind-map trees.

Handles conversion between Item trees and their JSON-compatible form:

    {"id": ..., "label": ..., "children": [...], "style": {...},
     "layoutDirection": "LR"}

Loading is defensive. A host document must not fail to open because one mind
map in it is damaged, so duplicate ids are renamed, missing ids generated,
bad fields dropped, and every repair is logged as a warning. TreeLoadError is
raised only when there is no usable item at all.

Also rebuilds trees from flat ``{id, parentId, label}`` records, the shape
streamed by content generators, using networkx to find broken parent chains.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

import networkx as nx

from .errors import TreeLoadError
from .models import Item, ItemStyle, LayoutDirection
from .tree import new_item_id, walk

logger = logging.getLogger(__name__)

# Persisted style keys and the ItemStyle field each maps to.
STYLE_KEYS = {
    "backgroundColor": "background_color",
    "borderColor": "border_color",
    "textColor": "text_color",
    "fontSize": "font_size",
}

FLAT_ROOT_PARENT = "root"
FLAT_DEFAULT_LABEL = "Node"


def to_dict(root: Item) -> Dict[str, Any]:
    """
    Convert a tree to its persisted form.

    Args:
        root: Tree root.

    Returns:
        Nested dict of plain JSON types. Empty styles and unset directions
        are omitted.
    """
    data: Dict[str, Any] = {
        "id": root.id,
        "label": root.label,
        "children": [to_dict(child) for child in root.children],
    }
    if root.style is not None and not root.style.is_empty():
        data["style"] = style_to_dict(root.style)
    if root.layout_direction is not None:
        data["layoutDirection"] = root.layout_direction.value
    return data


def style_to_dict(style: ItemStyle) -> Dict[str, Any]:
    return {
        key: getattr(style, attr)
        for key, attr in STYLE_KEYS.items()
        if getattr(style, attr) is not None
    }


def to_json(root: Item, indent: Optional[int] = None) -> str:
    return json.dumps(to_dict(root), indent=indent, ensure_ascii=False)


def from_json(text: str) -> Item:
    """
    Parse a persisted tree from JSON text.

    Raises:
        TreeLoadError: If the text is not JSON or holds no usable item.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        raise TreeLoadError(f"Invalid mind map JSON: {err}") from err
    return from_dict(data)


def from_dict(data: Any) -> Item:
    """
    Rebuild a tree from its persisted form.

    ``data`` is normally a single nested dict. A list is accepted too: a list
    of flat records (entries carrying ``parentId``) goes through
    build_tree_from_flat, otherwise the first dict in the list is the root and
    the rest are dropped.

    Raises:
        TreeLoadError: If no usable item can be found.
    """
    if isinstance(data, list):
        candidates = [entry for entry in data if isinstance(entry, Mapping)]
        if not candidates:
            raise TreeLoadError("Mind map payload holds no items")
        if any("parentId" in entry for entry in candidates):
            return build_tree_from_flat(candidates)
        if len(candidates) > 1:
            logger.warning(
                "Mind map payload has %d root candidates, using the first",
                len(candidates),
            )
        data = candidates[0]

    if not isinstance(data, Mapping):
        raise TreeLoadError(
            f"Mind map payload must be an object, got {type(data).__name__}"
        )

    loader = _TreeLoader()
    return loader.load(data)


class _TreeLoader:
    """Single-use nested-dict loader that tracks ids already handed out."""

    def __init__(self):
        self.used_ids: Set[str] = set()
        self.visiting: Set[int] = set()

    def load(self, data: Mapping) -> Item:
        root = self._load_item(data, depth=0)
        direction = _parse_direction(data.get("layoutDirection"))
        root.layout_direction = direction
        return root

    def _load_item(self, data: Mapping, depth: int) -> Item:
        self.visiting.add(id(data))
        item = Item(
            id=self._claim_id(data.get("id")),
            label=_parse_label(data.get("label"), ""),
            style=parse_style(data.get("style")),
        )
        if depth > 0 and data.get("layoutDirection") is not None:
            logger.debug("Ignoring layoutDirection on non-root item %r", item.id)

        children = data.get("children", [])
        if not isinstance(children, list):
            logger.warning("Item %r has non-list children, dropping them", item.id)
            children = []

        for child in children:
            if not isinstance(child, Mapping):
                logger.warning("Item %r has a non-object child, skipping", item.id)
                continue
            if id(child) in self.visiting:
                logger.warning("Cycle below item %r, skipping repeated child", item.id)
                continue
            item.children.append(self._load_item(child, depth + 1))

        self.visiting.discard(id(data))
        return item

    def _claim_id(self, raw: Any) -> str:
        if raw is None or raw == "":
            item_id = new_item_id()
            logger.warning("Item without id, assigned %r", item_id)
        else:
            item_id = str(raw)
        if item_id in self.used_ids:
            renamed = unique_id(item_id, self.used_ids)
            logger.warning("Duplicate item id %r renamed to %r", item_id, renamed)
            item_id = renamed
        self.used_ids.add(item_id)
        return item_id


def unique_id(base: str, used: Set[str]) -> str:
    """First of ``base-2``, ``base-3``, ... not in ``used``."""
    suffix = 2
    while f"{base}-{suffix}" in used:
        suffix += 1
    return f"{base}-{suffix}"


def parse_style(raw: Any) -> Optional[ItemStyle]:
    """Read a persisted style dict. Unknown keys and bad values are dropped."""
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring non-object style %r", raw)
        return None

    values: Dict[str, Any] = {}
    for key, attr in STYLE_KEYS.items():
        value = raw.get(key)
        if value is None:
            continue
        if attr == "font_size":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                logger.warning("Ignoring non-numeric fontSize %r", value)
                continue
            if value <= 0:
                logger.warning("Ignoring non-positive fontSize %r", value)
                continue
        elif not isinstance(value, str):
            logger.warning("Ignoring non-string %s %r", key, value)
            continue
        values[attr] = value

    style = ItemStyle(**values)
    return None if style.is_empty() else style


def _parse_direction(raw: Any) -> Optional[LayoutDirection]:
    if raw is None:
        return None
    try:
        return LayoutDirection(str(raw).upper())
    except ValueError:
        logger.warning("Ignoring unknown layoutDirection %r", raw)
        return None


def _parse_label(raw: Any, default: str) -> str:
    if raw is None:
        return default
    return raw if isinstance(raw, str) else str(raw)


def build_tree_from_flat(records: Iterable[Mapping]) -> Item:
    """
    Rebuild a tree from flat parent-pointer records.

    Each record looks like ``{"id", "parentId", "label", "backgroundColor",
    "textColor", "fontSize", "isRoot"}``. Children keep record order.

    The root is the first record with no resolvable parent that is flagged
    ``isRoot``, has no ``parentId``, or points at the placeholder parent
    ``"root"``; failing that, the first record. Parent chains that loop are
    cut at their first record, and records not reachable from the root are
    dropped. Each repair is logged.

    Args:
        records: Flat records in generation order.

    Returns:
        Root of the rebuilt tree.

    Raises:
        TreeLoadError: If there are no records.
    """
    records = [r for r in records if isinstance(r, Mapping)]
    if not records:
        raise TreeLoadError("No mind map records to build a tree from")

    items: Dict[str, Item] = {}
    order: List[str] = []
    parent_of: Dict[str, Optional[str]] = {}
    flagged_root: Dict[str, bool] = {}

    for record in records:
        raw_id = record.get("id")
        item_id = str(raw_id) if raw_id not in (None, "") else new_item_id()
        if item_id in items:
            renamed = unique_id(item_id, set(items))
            logger.warning("Duplicate record id %r renamed to %r", item_id, renamed)
            item_id = renamed

        style = parse_style({key: record.get(key) for key in STYLE_KEYS})
        items[item_id] = Item(
            id=item_id,
            label=_parse_label(record.get("label"), FLAT_DEFAULT_LABEL)
            or FLAT_DEFAULT_LABEL,
            style=style,
        )
        order.append(item_id)
        raw_parent = record.get("parentId")
        parent_of[item_id] = str(raw_parent) if raw_parent not in (None, "") else None
        flagged_root[item_id] = bool(record.get("isRoot"))

    graph = nx.DiGraph()
    graph.add_nodes_from(order)
    for item_id in order:
        parent_id = parent_of[item_id]
        if parent_id is not None and parent_id in items and parent_id != item_id:
            graph.add_edge(parent_id, item_id)

    _break_cycles(graph, order)

    root_id = None
    for item_id in order:
        if graph.in_degree(item_id) > 0:
            continue
        parent_id = parent_of[item_id]
        if flagged_root[item_id] or parent_id in (None, FLAT_ROOT_PARENT):
            root_id = item_id
            break
    if root_id is None:
        root_id = order[0]
        logger.warning("No root record found, using %r", root_id)
        graph.remove_edges_from(list(graph.in_edges(root_id)))

    reachable = {root_id} | nx.descendants(graph, root_id)
    dropped = [item_id for item_id in order if item_id not in reachable]
    if dropped:
        logger.warning(
            "Dropping %d record(s) not connected to root %r: %s",
            len(dropped),
            root_id,
            ", ".join(dropped),
        )

    for item_id in order:
        if item_id == root_id or item_id not in reachable:
            continue
        (parent_id,) = [source for source, _ in graph.in_edges(item_id)]
        items[parent_id].children.append(items[item_id])

    return items[root_id]


def _break_cycles(graph: nx.DiGraph, order: List[str]) -> None:
    """Cut every parent loop at the record that appears first in ``order``."""
    rank = {item_id: index for index, item_id in enumerate(order)}
    while True:
        try:
            cycle = nx.find_cycle(graph)
        except nx.NetworkXNoCycle:
            return
        members = [target for _, target in cycle]
        first = min(members, key=rank.__getitem__)
        parent = next(source for source, target in cycle if target == first)
        logger.warning("Parent chain of %r loops, detaching it from %r", first, parent)
        graph.remove_edge(parent, first)


def to_outline(root: Item, max_depth: int = 4) -> str:
    """
    Render a tree as an indented bullet outline.

    Args:
        root: Tree root.
        max_depth: Deepest level included; the root is depth 0.

    Returns:
        One ``"- label"`` line per item, indented two spaces per level.
    """
    lines = [
        f"{'  ' * depth}- {item.label}"
        for item, _, depth in walk(root)
        if depth <= max_depth
    ]
    return "\n".join(lines) + "\n"
