"""
Per-mind-map session state.

A MindMapSession owns one tree together with the transient UI state that
refers into it: the navigation cursor and the label editor. Each mind map on a
canvas gets its own session, so several maps can be edited side by side.
"""

import logging
from typing import List, Optional, Union

from .editing import EditSession
from .layout import MindMapLayout
from .models import Item, LayoutDirection, LayoutResult
from .navigation import Key, NavigationController
from .router import Connector, ConnectorRouter
from .serialization import from_dict, to_dict
from .tracer import LayoutTrace
from .tree import contains, default_tree, set_layout_direction

logger = logging.getLogger(__name__)


class MindMapSession:
    """
    A mind-map tree plus its cursor and edit state.

    Example:
        >>> session = MindMapSession()
        >>> session.navigation.select(session.root.id)
        >>> session.handle_key("Tab")     # new child, label editor opens
        >>> session.editor.update_draft("Idea")
        >>> session.handle_key("Enter")   # commits the label
        >>> result = session.layout(margin=50)

    Attributes:
        root: Current tree. Replaced wholesale on every edit.
        layout_engine: Engine used by layout().
        router: Router used by connectors().
        editor: Label EditSession.
        navigation: NavigationController holding the active cursor.
    """

    def __init__(
        self,
        root: Optional[Item] = None,
        layout_engine: Optional[MindMapLayout] = None,
        router: Optional[ConnectorRouter] = None,
    ):
        self.root = root if root is not None else default_tree()
        self.layout_engine = layout_engine or MindMapLayout()
        self.router = router or ConnectorRouter()
        self.editor = EditSession(self)
        self.navigation = NavigationController(self)

    @classmethod
    def from_dict(cls, data, **kwargs) -> "MindMapSession":
        """Open a session on a persisted tree."""
        return cls(from_dict(data), **kwargs)

    def to_dict(self) -> dict:
        return to_dict(self.root)

    @property
    def active_id(self) -> Optional[str]:
        return self.navigation.active_id

    @property
    def direction(self) -> LayoutDirection:
        return self.root.layout_direction or LayoutDirection.LEFT_TO_RIGHT

    def apply(self, new_root: Item) -> None:
        """Replace the tree and drop cursor or edit state that went stale."""
        self.root = new_root
        self.revalidate()

    def revalidate(self) -> None:
        if self.navigation.active_id is not None and not contains(
            self.root, self.navigation.active_id
        ):
            logger.debug("Active item %r is gone", self.navigation.active_id)
            self.navigation.active_id = None
        if self.editor.editing_id is not None and not contains(
            self.root, self.editor.editing_id
        ):
            logger.debug("Edited item %r is gone", self.editor.editing_id)
            self.editor.clear()

    def set_layout_direction(self, direction: Union[LayoutDirection, str]) -> None:
        if isinstance(direction, str):
            direction = LayoutDirection(direction.upper())
        self.apply(set_layout_direction(self.root, direction))

    def handle_key(self, key: Union[Key, str]) -> bool:
        """
        Route a key press.

        While a label edit is open every key goes to the editor; otherwise it
        goes to navigation.

        Returns:
            True when the key was consumed.
        """
        if self.editor.is_open:
            return self.editor.handle_key(key)
        return self.navigation.handle_key(key)

    def layout(
        self, margin: Optional[float] = None, trace: Optional[LayoutTrace] = None
    ) -> LayoutResult:
        """
        Lay out the current tree.

        Args:
            margin: When given, shift the result so its top-left corner sits
                at (margin, margin).
            trace: Optional LayoutTrace to fill.
        """
        result = self.layout_engine.layout(self.root, self.direction, trace=trace)
        if margin is not None:
            result = result.with_margin(margin)
        return result

    def connectors(self, result: Optional[LayoutResult] = None) -> List[Connector]:
        if result is None:
            result = self.layout()
        return self.router.route_all(result)
