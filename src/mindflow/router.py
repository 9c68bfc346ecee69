"""
Connector routing module for mind maps.

Connects every non-root node to its parent with a cubic Bezier S-curve:
- Anchor selection (which side of each box the curve leaves and enters)
- Control points that flatten the curve at both ends
- Per-branch color and stroke width
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from .models import LayoutDirection, LayoutNode, LayoutResult

Point = Tuple[float, float]

ROOT_STROKE_WIDTH = 4
STROKE_WIDTH = 2


class AnchorSide(Enum):
    """Which side of a box a connector is attached to."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class Connector:
    """A routed curve between a parent box and a child box."""

    source_id: str
    target_id: str
    start: Point
    control1: Point
    control2: Point
    end: Point
    source_side: AnchorSide
    target_side: AnchorSide
    color: str = ""
    stroke_width: float = STROKE_WIDTH

    def point_at(self, t: float) -> Point:
        """Evaluate the curve at parameter t in [0, 1]."""
        u = 1 - t
        a = u * u * u
        b = 3 * u * u * t
        c = 3 * u * t * t
        d = t * t * t
        x = a * self.start[0] + b * self.control1[0] + c * self.control2[0]
        y = a * self.start[1] + b * self.control1[1] + c * self.control2[1]
        return x + d * self.end[0], y + d * self.end[1]

    def sample(self, segments: int = 16) -> List[Point]:
        """Approximate the curve with ``segments + 1`` points."""
        if segments < 1:
            raise ValueError("segments must be at least 1")
        return [self.point_at(i / segments) for i in range(segments + 1)]

    def path_data(self) -> str:
        """SVG path string for the curve."""
        return (
            f"M {_fmt(self.start)} "
            f"C {_fmt(self.control1)}, {_fmt(self.control2)}, {_fmt(self.end)}"
        )


def _fmt(point: Point) -> str:
    return f"{point[0]:g} {point[1]:g}"


class ConnectorRouter:
    """
    Routes parent-to-child connectors.

    Attributes:
        root_stroke_width: Stroke width of connectors leaving the root.
        stroke_width: Stroke width of every other connector.
    """

    def __init__(
        self,
        root_stroke_width: float = ROOT_STROKE_WIDTH,
        stroke_width: float = STROKE_WIDTH,
    ):
        self.root_stroke_width = root_stroke_width
        self.stroke_width = stroke_width

    def route(
        self,
        parent: LayoutNode,
        child: LayoutNode,
        direction: Union[LayoutDirection, str],
    ) -> Connector:
        """
        Route one connector.

        Args:
            parent: Positioned parent node.
            child: Positioned child node.
            direction: Layout direction the nodes were placed with.

        Returns:
            Connector from the parent anchor to the child anchor.
        """
        if isinstance(direction, str):
            direction = LayoutDirection(direction.upper())

        if direction is LayoutDirection.TOP_TO_BOTTOM:
            start = (parent.center_x, parent.bottom)
            end = (child.center_x, child.y)
            mid_y = (start[1] + end[1]) / 2
            control1 = (start[0], mid_y)
            control2 = (end[0], mid_y)
            source_side, target_side = AnchorSide.BOTTOM, AnchorSide.TOP
        else:
            if child.x < parent.x:
                # Child grows leftwards: HorizontalSplit left branch, RightToLeft
                start = (parent.x, parent.center_y)
                end = (child.right, child.center_y)
                source_side, target_side = AnchorSide.LEFT, AnchorSide.RIGHT
            else:
                start = (parent.right, parent.center_y)
                end = (child.x, child.center_y)
                source_side, target_side = AnchorSide.RIGHT, AnchorSide.LEFT
            mid_x = (start[0] + end[0]) / 2
            control1 = (mid_x, start[1])
            control2 = (mid_x, end[1])

        if parent.depth == 0:
            width = self.root_stroke_width
        else:
            width = self.stroke_width

        return Connector(
            source_id=parent.id,
            target_id=child.id,
            start=start,
            control1=control1,
            control2=control2,
            end=end,
            source_side=source_side,
            target_side=target_side,
            color=child.color,
            stroke_width=width,
        )

    def route_all(self, result: LayoutResult) -> List[Connector]:
        """Route every non-root node of a layout, in layout order."""
        connectors: List[Connector] = []
        for node_id in result.order:
            node = result.nodes[node_id]
            if node.parent_id is None or node.parent_id not in result.nodes:
                continue
            parent = result.nodes[node.parent_id]
            connectors.append(self.route(parent, node, result.direction))
        return connectors


def route(
    parent: LayoutNode, child: LayoutNode, direction: Union[LayoutDirection, str]
) -> Connector:
    """Convenience function routing one connector with default strokes."""
    return ConnectorRouter().route(parent, child, direction)


def route_all(result: LayoutResult) -> List[Connector]:
    """Convenience function routing every connector of a layout."""
    return ConnectorRouter().route_all(result)
