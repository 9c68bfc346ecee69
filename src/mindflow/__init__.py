"""
MindFlow - Mind-map layout and editing engine

A Python library for laying out, routing and keyboard-editing hierarchical
mind maps in four layout modes.

Example:
    >>> from mindflow import Item, compute_layout, route_all
    >>> root = Item("root", "Plan", [Item("a", "Research"), Item("b", "Build")])
    >>> result = compute_layout(root, "HS").with_margin(50)
    >>> curves = route_all(result)

Session Example:
    >>> from mindflow import MindMapSession
    >>> session = MindMapSession()
    >>> session.navigation.select(session.root.id)
    >>> session.handle_key("Tab")
    >>> session.editor.update_draft("New idea")
    >>> session.handle_key("Enter")
"""

from .editing import EditSession
from .errors import MindFlowError, TreeLoadError
from .layout import MindMapLayout, compute_layout
from .models import (
    Bounds,
    Item,
    ItemStyle,
    LayoutDirection,
    LayoutNode,
    LayoutResult,
)
from .navigation import Key, NavigationController
from .png_renderer import PNGRenderer, render_to_png
from .router import AnchorSide, Connector, ConnectorRouter, route, route_all
from .serialization import (
    build_tree_from_flat,
    from_dict,
    from_json,
    to_dict,
    to_json,
    to_outline,
)
from .session import MindMapSession
from .tracer import LayoutStage, LayoutTrace
from .tree import (
    FindResult,
    add_child,
    add_sibling,
    default_tree,
    delete_node,
    find,
    rename,
    search,
    set_layout_direction,
    set_style,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "Item",
    "ItemStyle",
    "LayoutDirection",
    "LayoutNode",
    "LayoutResult",
    "Bounds",
    # Tree operations
    "FindResult",
    "find",
    "add_child",
    "add_sibling",
    "delete_node",
    "rename",
    "set_style",
    "set_layout_direction",
    "search",
    "default_tree",
    # Layout
    "MindMapLayout",
    "compute_layout",
    # Router
    "ConnectorRouter",
    "Connector",
    "AnchorSide",
    "route",
    "route_all",
    # Interaction
    "MindMapSession",
    "NavigationController",
    "EditSession",
    "Key",
    # Persistence
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    "build_tree_from_flat",
    "to_outline",
    # Errors
    "MindFlowError",
    "TreeLoadError",
    # Rendering
    "PNGRenderer",
    "render_to_png",
    # Debug/Tracing
    "LayoutTrace",
    "LayoutStage",
]
