"""
Layout module for mind-map trees.

Computes box sizes and positions for every item of a tree in two passes:

- Pass 1 (post-order) measures each node and the extent its subtree needs
  along the cross axis, and assigns branch colors.
- Pass 2 (pre-order) places each node centered in the band its parent gave
  it, laying its children out contiguously next to it.

Four modes share the sizing pass: LeftToRight, RightToLeft, TopToBottom and
HorizontalSplit. HorizontalSplit alternates the root's children between a
right group (even indices) and a left group (odd indices). The alternation does
not balance the weight of the two sides.

The layout is a pure function of the tree and the direction. Nothing is cached
between calls, so hosts recompute it after every edit.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from .models import Bounds, Item, LayoutDirection, LayoutNode, LayoutResult
from .tracer import LayoutTrace

logger = logging.getLogger(__name__)

ROOT_FONT_SIZE = 16
CHILD_FONT_SIZE = 14

# Branch colors cycle through this palette, one per root child.
DEFAULT_PALETTE = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
)
ROOT_COLOR = "#334155"


@dataclass
class MeasuredItem:
    """Pass 1 output for one item."""

    item: Item
    depth: int
    width: float
    height: float
    font_size: float
    color: str
    branch_index: Optional[int]
    extent: float = 0.0
    children: List["MeasuredItem"] = field(default_factory=list)


class MindMapLayout:
    """
    Two-pass tree layout for mind maps.

    Attributes:
        h_gap: Horizontal gap between a parent and its children
            (LeftToRight, RightToLeft, HorizontalSplit).
        v_gap: Vertical gap between sibling subtrees in horizontal modes.
        tb_sibling_gap: Horizontal gap between sibling subtrees in TopToBottom.
        tb_level_gap: Vertical gap between depth levels in TopToBottom.
        min_width: Smallest node width.
        max_width: Largest node width.
        palette: Branch colors, cycled over the root's children.
        root_color: Color of the root node.
    """

    def __init__(
        self,
        h_gap: float = 60,
        v_gap: float = 12,
        tb_sibling_gap: float = 40,
        tb_level_gap: float = 60,
        min_width: float = 80,
        max_width: float = 300,
        palette: Sequence[str] = DEFAULT_PALETTE,
        root_color: str = ROOT_COLOR,
    ):
        """
        Initialize the layout engine.

        Args:
            h_gap: Parent-to-child gap for the horizontally growing modes.
            v_gap: Gap between sibling subtrees for the horizontal modes.
            tb_sibling_gap: Gap between sibling subtrees for TopToBottom.
            tb_level_gap: Gap between depth levels for TopToBottom.
            min_width: Lower clamp for node widths.
            max_width: Upper clamp for node widths.
            palette: Non-empty sequence of branch colors.
            root_color: Color assigned to the root.
        """
        if min_width <= 0 or max_width < min_width:
            raise ValueError("min_width must be positive and not above max_width")
        if not palette:
            raise ValueError("palette must contain at least one color")

        self.h_gap = h_gap
        self.v_gap = v_gap
        self.tb_sibling_gap = tb_sibling_gap
        self.tb_level_gap = tb_level_gap
        self.min_width = min_width
        self.max_width = max_width
        self.palette = tuple(palette)
        self.root_color = root_color

    def layout(
        self,
        root: Item,
        direction: Union[LayoutDirection, str, None] = None,
        trace: Optional[LayoutTrace] = None,
    ) -> LayoutResult:
        """
        Compute positions for every item of the tree.

        Args:
            root: Tree root.
            direction: Layout mode. None uses the root's own layout_direction,
                falling back to LeftToRight. Persisted codes ("LR", "RL",
                "TB", "HS") are accepted.
            trace: Optional trace collecting intermediate pipeline data.

        Returns:
            LayoutResult with nodes in pre-order and their bounding box.
        """
        direction = resolve_direction(root, direction)
        if trace is not None:
            trace.direction = direction.value

        measured = self._measure(root, 0, None, direction)
        if trace is not None:
            trace.add_stage(
                "measure",
                {
                    "root_extent": measured.extent,
                    "root_size": (measured.width, measured.height),
                    "direction": direction.value,
                },
            )

        nodes: List[LayoutNode] = []
        if direction is LayoutDirection.TOP_TO_BOTTOM:
            band_start = -(measured.extent - measured.width) / 2
            self._place_vertical(measured, 0.0, band_start, None, nodes)
        elif direction is LayoutDirection.HORIZONTAL_SPLIT:
            self._place_split(measured, nodes)
        else:
            mirror = direction is LayoutDirection.RIGHT_TO_LEFT
            band_start = -(measured.extent - measured.height) / 2
            self._place_horizontal(measured, 0.0, band_start, mirror, None, None, nodes)

        if trace is not None:
            trace.add_stage(
                "place",
                {"positions": {n.id: (n.x, n.y) for n in nodes}},
            )

        bounds = compute_bounds(nodes)
        if trace is not None:
            trace.add_stage(
                "bounds",
                {"bounds": (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y)},
            )

        logger.debug(
            "Laid out %d nodes in %s mode, bounds %.1fx%.1f",
            len(nodes),
            direction.value,
            bounds.width,
            bounds.height,
        )
        return LayoutResult(
            nodes={n.id: n for n in nodes},
            order=[n.id for n in nodes],
            bounds=bounds,
            direction=direction,
        )

    # Pass 1

    def measure_item(
        self, item: Item, depth: int, direction: LayoutDirection
    ) -> Tuple[float, float, float]:
        """
        Size a single node box.

        Returns:
            (width, height, font_size)
        """
        font_size = None
        if item.style is not None:
            font_size = item.style.font_size
        if not font_size or font_size <= 0:
            font_size = ROOT_FONT_SIZE if depth == 0 else CHILD_FONT_SIZE

        if direction in (LayoutDirection.LEFT_TO_RIGHT, LayoutDirection.RIGHT_TO_LEFT):
            padding = 24
        else:
            padding = 30
        raw_width = len(item.label) * (font_size * 0.8) + padding
        width = min(self.max_width, max(self.min_width, raw_width))
        height = font_size * 2.5
        return width, height, font_size

    def _measure(
        self,
        item: Item,
        depth: int,
        branch_index: Optional[int],
        direction: LayoutDirection,
    ) -> MeasuredItem:
        width, height, font_size = self.measure_item(item, depth, direction)
        if depth == 0:
            color = self.root_color
        else:
            color = self.palette[branch_index % len(self.palette)]

        measured = MeasuredItem(
            item=item,
            depth=depth,
            width=width,
            height=height,
            font_size=font_size,
            color=color,
            branch_index=branch_index,
        )
        for index, child in enumerate(item.children):
            child_branch = index if depth == 0 else branch_index
            measured.children.append(
                self._measure(child, depth + 1, child_branch, direction)
            )

        if direction is LayoutDirection.TOP_TO_BOTTOM:
            own, gap = width, self.tb_sibling_gap
        else:
            own, gap = height, self.v_gap
        measured.extent = max(own, block_extent(measured.children, gap))
        return measured

    # Pass 2

    def _make_node(
        self,
        measured: MeasuredItem,
        x: float,
        y: float,
        parent: Optional[LayoutNode],
        side: Optional[str],
    ) -> LayoutNode:
        return LayoutNode(
            id=measured.item.id,
            label=measured.item.label,
            x=x,
            y=y,
            width=measured.width,
            height=measured.height,
            color=measured.color,
            depth=measured.depth,
            font_size=measured.font_size,
            parent_id=parent.id if parent else None,
            parent_anchor_x=parent.x if parent else None,
            parent_anchor_y=parent.y if parent else None,
            parent_width=parent.width if parent else None,
            parent_height=parent.height if parent else None,
            side=side,
            branch_index=measured.branch_index,
        )

    def _place_horizontal(
        self,
        measured: MeasuredItem,
        x: float,
        band_top: float,
        mirror: bool,
        parent: Optional[LayoutNode],
        side: Optional[str],
        nodes: List[LayoutNode],
    ) -> None:
        y = band_top + (measured.extent - measured.height) / 2
        node = self._make_node(measured, x, y, parent, side)
        nodes.append(node)

        total = block_extent(measured.children, self.v_gap)
        cursor = band_top + (measured.extent - total) / 2
        for child in measured.children:
            if mirror:
                child_x = node.x - self.h_gap - child.width
            else:
                child_x = node.right + self.h_gap
            self._place_horizontal(child, child_x, cursor, mirror, node, side, nodes)
            cursor += child.extent + self.v_gap

    def _place_vertical(
        self,
        measured: MeasuredItem,
        y: float,
        band_left: float,
        parent: Optional[LayoutNode],
        nodes: List[LayoutNode],
    ) -> None:
        x = band_left + (measured.extent - measured.width) / 2
        node = self._make_node(measured, x, y, parent, None)
        nodes.append(node)

        total = block_extent(measured.children, self.tb_sibling_gap)
        cursor = band_left + (measured.extent - total) / 2
        child_y = node.bottom + self.tb_level_gap
        for child in measured.children:
            self._place_vertical(child, child_y, cursor, node, nodes)
            cursor += child.extent + self.tb_sibling_gap

    def _place_split(self, measured: MeasuredItem, nodes: List[LayoutNode]) -> None:
        root = self._make_node(measured, 0.0, 0.0, None, None)
        nodes.append(root)

        groups = (
            ("right", False, measured.children[0::2]),
            ("left", True, measured.children[1::2]),
        )
        # Pre-order output must follow the original child order, so place into
        # per-child buckets and merge them by index afterwards.
        buckets = {}
        for side, mirror, children in groups:
            total = block_extent(children, self.v_gap)
            cursor = root.center_y - total / 2
            for child in children:
                if mirror:
                    child_x = root.x - self.h_gap - child.width
                else:
                    child_x = root.right + self.h_gap
                subtree: List[LayoutNode] = []
                self._place_horizontal(
                    child, child_x, cursor, mirror, root, side, subtree
                )
                buckets[child.branch_index] = subtree
                cursor += child.extent + self.v_gap

        for index in sorted(buckets):
            nodes.extend(buckets[index])


def block_extent(children: Sequence[MeasuredItem], gap: float) -> float:
    """Cross-axis space taken by a run of sibling subtrees and the gaps between."""
    if not children:
        return 0.0
    return sum(child.extent for child in children) + gap * (len(children) - 1)


def compute_bounds(nodes: Sequence[LayoutNode]) -> Bounds:
    if not nodes:
        return Bounds()
    return Bounds(
        min_x=min(n.x for n in nodes),
        min_y=min(n.y for n in nodes),
        max_x=max(n.right for n in nodes),
        max_y=max(n.bottom for n in nodes),
    )


def resolve_direction(
    root: Item, direction: Union[LayoutDirection, str, None]
) -> LayoutDirection:
    """Pick the effective direction for a layout call."""
    if direction is None:
        direction = root.layout_direction or LayoutDirection.LEFT_TO_RIGHT
    if isinstance(direction, str):
        try:
            direction = LayoutDirection(direction.upper())
        except ValueError:
            raise ValueError(
                f"direction must be one of "
                f"{', '.join(d.value for d in LayoutDirection)}, got {direction!r}"
            ) from None
    return direction


def compute_layout(
    root: Item,
    direction: Union[LayoutDirection, str, None] = None,
    trace: Optional[LayoutTrace] = None,
) -> LayoutResult:
    """
    Convenience function to lay out a tree with default settings.

    Args:
        root: Tree root.
        direction: Layout mode, or None to use the root's own.
        trace: Optional LayoutTrace to fill.

    Returns:
        LayoutResult
    """
    return MindMapLayout().layout(root, direction, trace=trace)
