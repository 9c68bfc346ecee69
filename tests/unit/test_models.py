"""Unit tests for the models module."""

from mindflow.models import (
    Bounds,
    Item,
    ItemStyle,
    LayoutDirection,
    LayoutNode,
    LayoutResult,
)


class TestLayoutDirection:
    """Tests for LayoutDirection enum."""

    def test_persisted_codes(self):
        """Test that enum values are the persisted codes."""
        assert LayoutDirection.LEFT_TO_RIGHT.value == "LR"
        assert LayoutDirection.RIGHT_TO_LEFT.value == "RL"
        assert LayoutDirection.TOP_TO_BOTTOM.value == "TB"
        assert LayoutDirection.HORIZONTAL_SPLIT.value == "HS"

    def test_is_horizontal(self):
        """Only TopToBottom grows vertically."""
        assert LayoutDirection.LEFT_TO_RIGHT.is_horizontal
        assert LayoutDirection.HORIZONTAL_SPLIT.is_horizontal
        assert not LayoutDirection.TOP_TO_BOTTOM.is_horizontal


class TestItemStyle:
    """Tests for ItemStyle dataclass."""

    def test_merged_keeps_unset_fields(self):
        """Merging only overrides fields set on the partial."""
        base = ItemStyle(background_color="#fff", font_size=12)
        merged = base.merged(ItemStyle(text_color="#000"))
        assert merged == ItemStyle(
            background_color="#fff", text_color="#000", font_size=12
        )
        assert base.text_color is None

    def test_is_empty(self):
        assert ItemStyle().is_empty()
        assert not ItemStyle(font_size=10).is_empty()


class TestItem:
    """Tests for Item dataclass."""

    def test_defaults(self):
        item = Item(id="x")
        assert item.label == ""
        assert item.children == []
        assert item.style is None
        assert item.layout_direction is None

    def test_children_not_shared(self):
        """Each item gets its own children list."""
        a, b = Item(id="a"), Item(id="b")
        a.children.append(Item(id="c"))
        assert b.children == []


class TestLayoutNode:
    """Tests for LayoutNode geometry helpers."""

    def test_edges_and_centers(self):
        node = LayoutNode(id="n", x=10, y=20, width=100, height=40)
        assert node.right == 110
        assert node.bottom == 60
        assert node.center_x == 60
        assert node.center_y == 40


class TestBounds:
    """Tests for Bounds dataclass."""

    def test_size(self):
        bounds = Bounds(min_x=-10, min_y=5, max_x=90, max_y=45)
        assert bounds.width == 100
        assert bounds.height == 40

    def test_union(self):
        a = Bounds(0, 0, 10, 10)
        b = Bounds(-5, 5, 8, 20)
        assert a.union(b) == Bounds(-5, 0, 10, 20)

    def test_overlaps_excludes_touching(self):
        """Boxes that only share an edge do not overlap."""
        a = Bounds(0, 0, 10, 10)
        assert a.overlaps(Bounds(5, 5, 15, 15))
        assert not a.overlaps(Bounds(10, 0, 20, 10))


class TestLayoutResult:
    """Tests for LayoutResult shifting."""

    def make_result(self):
        root = LayoutNode(id="r", x=0, y=0, width=100, height=40)
        child = LayoutNode(
            id="c",
            x=-160,
            y=-30,
            width=100,
            height=35,
            parent_id="r",
            parent_anchor_x=0,
            parent_anchor_y=0,
        )
        return LayoutResult(
            nodes={"r": root, "c": child},
            order=["r", "c"],
            bounds=Bounds(-160, -30, 100, 40),
        )

    def test_root_property(self):
        assert self.make_result().root.id == "r"
        assert LayoutResult().root is None

    def test_translated_shifts_nodes_and_anchors(self):
        """Translation moves positions, parent anchors and bounds."""
        shifted = self.make_result().translated(10, 20)
        assert (shifted.nodes["r"].x, shifted.nodes["r"].y) == (10, 20)
        assert shifted.nodes["c"].parent_anchor_x == 10
        assert shifted.nodes["c"].parent_anchor_y == 20
        assert shifted.nodes["r"].parent_anchor_x is None
        assert shifted.bounds == Bounds(-150, -10, 110, 60)

    def test_translated_does_not_modify_original(self):
        result = self.make_result()
        result.translated(5, 5)
        assert result.nodes["r"].x == 0

    def test_with_margin(self):
        """with_margin puts the top-left corner at the margin."""
        shifted = self.make_result().with_margin(50)
        assert shifted.bounds.min_x == 50
        assert shifted.bounds.min_y == 50
        assert shifted.nodes["c"].x == 50
        assert shifted.bounds.width == 260
