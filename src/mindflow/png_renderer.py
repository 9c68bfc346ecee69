"""
PNG Renderer module for mind maps.

Renders a laid-out mind map as a PNG preview: rounded node boxes with a
branch-colored outline, centered labels and smooth Bezier connectors.
"""

import os
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from .layout import MindMapLayout
from .models import Item, ItemStyle, LayoutDirection, LayoutNode, LayoutResult
from .router import Connector, ConnectorRouter
from .tree import walk

RGB = Tuple[int, int, int]


class PNGRenderer:
    """Renders mind-map layouts as PNG images."""

    def __init__(
        self,
        scale: int = 2,  # For high-resolution output
        margin: int = 50,
        corner_radius: int = 8,
        curve_segments: int = 24,
        font_path: Optional[str] = None,
        bg_color: str = "#ffffff",
        box_fill: str = "#ffffff",
        text_color: str = "#1e293b",
    ):
        if scale < 1:
            raise ValueError("scale must be at least 1")
        self.scale = scale
        self.margin = margin
        self.corner_radius = corner_radius
        self.curve_segments = curve_segments
        self.font_path = font_path
        self.bg_color = bg_color
        self.box_fill = box_fill
        self.text_color = text_color

        self.fonts: Dict[int, ImageFont.ImageFont] = {}

    def _get_font(self, size: float) -> ImageFont.ImageFont:
        """Get a font of the given point size, cached per pixel size."""
        pixel_size = max(1, int(round(size * self.scale)))
        if pixel_size in self.fonts:
            return self.fonts[pixel_size]

        font_options = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
            "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
            "/usr/share/fonts/truetype/ubuntu/Ubuntu-R.ttf",
        ]
        if self.font_path:
            font_options.insert(0, self.font_path)

        font = None
        for path in font_options:
            if os.path.exists(path):
                try:
                    font = ImageFont.truetype(path, pixel_size)
                    break
                except OSError:
                    continue

        if font is None:
            font = ImageFont.load_default()
        self.fonts[pixel_size] = font
        return font

    def _to_pixels(self, point: Tuple[float, float]) -> Tuple[float, float]:
        return point[0] * self.scale, point[1] * self.scale

    def _color(self, value: Optional[str], fallback: str) -> RGB:
        try:
            return ImageColor.getrgb(value or fallback)[:3]
        except ValueError:
            return ImageColor.getrgb(fallback)[:3]

    def render_image(
        self,
        result: LayoutResult,
        connectors: List[Connector],
        root: Optional[Item] = None,
    ) -> Image.Image:
        """
        Draw a layout onto a new image.

        Args:
            result: Layout to draw. It is shifted to the renderer's margin.
            connectors: Connectors routed for ``result`` before shifting.
            root: Optional tree, used for per-item style colors.

        Returns:
            RGB image.
        """
        dx = self.margin - result.bounds.min_x
        dy = self.margin - result.bounds.min_y
        shifted = result.translated(dx, dy)

        width = int((shifted.bounds.max_x + self.margin) * self.scale)
        height = int((shifted.bounds.max_y + self.margin) * self.scale)
        img = Image.new("RGB", (max(width, 1), max(height, 1)), self.bg_color)
        draw = ImageDraw.Draw(img)

        for connector in connectors:
            points = [
                self._to_pixels((x + dx, y + dy))
                for x, y in connector.sample(self.curve_segments)
            ]
            draw.line(
                points,
                fill=self._color(connector.color, "#94a3b8"),
                width=max(1, int(round(connector.stroke_width * self.scale))),
                joint="curve",
            )

        styles = {}
        if root is not None:
            styles = {item.id: item.style for item, _, _ in walk(root)}

        for node_id in shifted.order:
            self._draw_node(draw, shifted.nodes[node_id], styles.get(node_id))

        return img

    def _draw_node(
        self, draw: ImageDraw.ImageDraw, node: LayoutNode, style: Optional[ItemStyle]
    ) -> None:
        x0, y0 = self._to_pixels((node.x, node.y))
        x1, y1 = self._to_pixels((node.right, node.bottom))

        fill = self._color(style.background_color if style else None, self.box_fill)
        outline = self._color(style.border_color if style else None, node.color)
        text_fill = self._color(style.text_color if style else None, self.text_color)

        draw.rounded_rectangle(
            [x0, y0, x1, y1],
            radius=self.corner_radius * self.scale,
            fill=fill,
            outline=outline,
            width=(3 if node.depth == 0 else 2) * self.scale,
        )

        font = self._get_font(node.font_size)
        bbox = draw.textbbox((0, 0), node.label, font=font)
        text_w = bbox[2] - bbox[0]
        text_h = bbox[3] - bbox[1]
        text_x = x0 + (x1 - x0 - text_w) / 2 - bbox[0]
        text_y = y0 + (y1 - y0 - text_h) / 2 - bbox[1]
        draw.text((text_x, text_y), node.label, fill=text_fill, font=font)

    def render(
        self,
        root: Item,
        output_path: str = "mindmap.png",
        direction: Optional[LayoutDirection] = None,
        layout_engine: Optional[MindMapLayout] = None,
        router: Optional[ConnectorRouter] = None,
    ) -> str:
        """
        Lay out, route and render a tree to a PNG file.

        Args:
            root: Tree root.
            output_path: Path to save the PNG file.
            direction: Layout mode, or None for the root's own.
            layout_engine: Engine to use; defaults to MindMapLayout().
            router: Router to use; defaults to ConnectorRouter().

        Returns:
            Path to the saved PNG file
        """
        layout_engine = layout_engine or MindMapLayout()
        router = router or ConnectorRouter()
        result = layout_engine.layout(root, direction)
        connectors = router.route_all(result)

        img = self.render_image(result, connectors, root=root)
        img.save(output_path, "PNG")
        return output_path


def render_to_png(
    root: Item,
    output_path: str = "mindmap.png",
    direction: Optional[LayoutDirection] = None,
    **kwargs,
) -> str:
    """
    Convenience function to render a mind map to PNG.

    Args:
        root: Tree root
        output_path: Path to save the PNG file
        direction: Layout mode, or None for the root's own
        **kwargs: Additional arguments for PNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = PNGRenderer(**kwargs)
    return renderer.render(root, output_path, direction)
