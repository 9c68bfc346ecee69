"""
Data models for mind-map layout and editing.

This module contains the dataclasses shared by every stage of the engine: the
persistent tree (Item and ItemStyle) and the ephemeral geometry produced by a
layout pass (LayoutNode, Bounds and LayoutResult).

Classes:
    LayoutDirection: The four layout modes a tree can be drawn in.
    ItemStyle: Optional per-item visual overrides.
    Item: One node of the mind-map tree.
    LayoutNode: Computed geometry for one Item.
    Bounds: Axis-aligned bounding box of a layout.
    LayoutResult: Result of a full layout pass.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional


class LayoutDirection(Enum):
    """Growth direction of a mind map. Values are the persisted codes."""

    LEFT_TO_RIGHT = "LR"
    RIGHT_TO_LEFT = "RL"
    TOP_TO_BOTTOM = "TB"
    HORIZONTAL_SPLIT = "HS"

    @property
    def is_horizontal(self) -> bool:
        """True for the modes whose subtrees grow along the x axis."""
        return self is not LayoutDirection.TOP_TO_BOTTOM


@dataclass
class ItemStyle:
    """
    Visual overrides for a single item.

    Attributes:
        background_color: Fill color of the node box.
        border_color: Outline color of the node box.
        text_color: Label color.
        font_size: Label font size; also drives node sizing during layout.
    """

    background_color: Optional[str] = None
    border_color: Optional[str] = None
    text_color: Optional[str] = None
    font_size: Optional[float] = None

    def merged(self, other: "ItemStyle") -> "ItemStyle":
        """Return a copy with every non-None field of ``other`` applied."""
        updates = {
            name: value for name, value in vars(other).items() if value is not None
        }
        return replace(self, **updates)

    def is_empty(self) -> bool:
        return all(value is None for value in vars(self).values())


@dataclass
class Item:
    """
    One node of the mind-map tree.

    Attributes:
        id: Identifier, unique within a tree.
        label: Display text.
        children: Ordered child items. Order drives layout and navigation.
        style: Optional visual overrides.
        layout_direction: Layout mode; only read on the root.
    """

    id: str
    label: str = ""
    children: List["Item"] = field(default_factory=list)
    style: Optional[ItemStyle] = None
    layout_direction: Optional[LayoutDirection] = None


@dataclass
class LayoutNode:
    """
    Computed geometry for one item.

    Coordinates are in the layout's own space with the root's top-left corner
    at the origin, so other nodes may have negative coordinates until the
    result is shifted with ``LayoutResult.with_margin``.

    Attributes:
        id: Id of the source Item.
        label: Label of the source Item.
        x: Left edge.
        y: Top edge.
        width: Box width.
        height: Box height.
        color: Branch color used for the box accent and its connector.
        depth: Distance from the root (root is 0).
        font_size: Effective font size used for sizing.
        parent_id: Id of the parent item, None for the root.
        parent_anchor_x: Parent's x coordinate.
        parent_anchor_y: Parent's y coordinate.
        parent_width: Parent's width.
        parent_height: Parent's height.
        side: "left" or "right" for HorizontalSplit branches, else None.
        branch_index: Index of the root child this node descends from.
    """

    id: str
    label: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    color: str = ""
    depth: int = 0
    font_size: float = 0.0
    parent_id: Optional[str] = None
    parent_anchor_x: Optional[float] = None
    parent_anchor_y: Optional[float] = None
    parent_width: Optional[float] = None
    parent_height: Optional[float] = None
    side: Optional[str] = None
    branch_index: Optional[int] = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass
class Bounds:
    """Axis-aligned bounding box."""

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds(
            min_x=min(self.min_x, other.min_x),
            min_y=min(self.min_y, other.min_y),
            max_x=max(self.max_x, other.max_x),
            max_y=max(self.max_y, other.max_y),
        )

    def overlaps(self, other: "Bounds") -> bool:
        """True when the two boxes share interior area."""
        return (
            self.min_x < other.max_x
            and other.min_x < self.max_x
            and self.min_y < other.max_y
            and other.min_y < self.max_y
        )


@dataclass
class LayoutResult:
    """
    Result of a layout pass.

    Attributes:
        nodes: LayoutNode per item id, in pre-order.
        order: Item ids in pre-order (root first).
        bounds: Union bounding box of every node.
        direction: Direction the layout was computed for.
    """

    nodes: Dict[str, LayoutNode] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)
    bounds: Bounds = field(default_factory=Bounds)
    direction: LayoutDirection = LayoutDirection.LEFT_TO_RIGHT

    @property
    def root(self) -> Optional[LayoutNode]:
        if not self.order:
            return None
        return self.nodes[self.order[0]]

    def translated(self, dx: float, dy: float) -> "LayoutResult":
        """Return a copy with every coordinate shifted by (dx, dy)."""
        nodes: Dict[str, LayoutNode] = {}
        for node_id in self.order:
            node = self.nodes[node_id]
            anchor_x = node.parent_anchor_x
            anchor_y = node.parent_anchor_y
            nodes[node_id] = replace(
                node,
                x=node.x + dx,
                y=node.y + dy,
                parent_anchor_x=None if anchor_x is None else anchor_x + dx,
                parent_anchor_y=None if anchor_y is None else anchor_y + dy,
            )
        bounds = Bounds(
            min_x=self.bounds.min_x + dx,
            min_y=self.bounds.min_y + dy,
            max_x=self.bounds.max_x + dx,
            max_y=self.bounds.max_y + dy,
        )
        return LayoutResult(
            nodes=nodes, order=list(self.order), bounds=bounds, direction=self.direction
        )

    def with_margin(self, margin: float = 50) -> "LayoutResult":
        """Shift the layout so its top-left corner sits at (margin, margin)."""
        return self.translated(margin - self.bounds.min_x, margin - self.bounds.min_y)
