"""
In-place label editing.

An EditSession tracks which item's label is being typed and the text typed so
far. The draft is written back to the tree only on commit, which happens on
blur, on Enter and also on Escape.
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

from .navigation import Key, coerce_key
from .tree import contains, find, rename

if TYPE_CHECKING:
    from .session import MindMapSession

logger = logging.getLogger(__name__)


class EditSession:
    """
    Label editing state for one mind map.

    Attributes:
        session: Owning MindMapSession; its tree is read and replaced on commit.
        editing_id: Id of the item being edited, or None.
        draft_text: Text typed so far.
        select_all_requested: Set by begin() to ask the host to focus the
            editor and select its whole text.
    """

    def __init__(self, session: "MindMapSession"):
        self.session = session
        self.editing_id: Optional[str] = None
        self.draft_text = ""
        self.select_all_requested = False

    @property
    def is_open(self) -> bool:
        return self.editing_id is not None

    def begin(self, item_id: str) -> bool:
        """
        Start editing an item's label.

        An edit already open on another item is committed first. Unknown ids
        are ignored.

        Returns:
            True when an edit was opened.
        """
        found = find(self.session.root, item_id)
        if found is None:
            logger.debug("Edit not started, unknown item %r", item_id)
            return False
        if self.is_open and self.editing_id != item_id:
            self.commit()
            found = find(self.session.root, item_id)
            if found is None:
                return False

        self.editing_id = item_id
        self.draft_text = found.item.label
        self.select_all_requested = True
        return True

    def update_draft(self, text: str) -> None:
        if not self.is_open:
            return
        self.draft_text = text

    def consume_focus_request(self) -> bool:
        """Return and clear the pending focus/select-all request."""
        requested = self.select_all_requested
        self.select_all_requested = False
        return requested

    def commit(self) -> bool:
        """
        Write the draft back to the tree and close the edit.

        Returns:
            True when an edit was open.
        """
        if not self.is_open:
            return False
        item_id, text = self.editing_id, self.draft_text
        self.clear()
        if contains(self.session.root, item_id):
            self.session.apply(rename(self.session.root, item_id, text))
        else:
            logger.debug("Dropped draft for deleted item %r", item_id)
        return True

    def blur(self) -> bool:
        """Focus left the editor."""
        return self.commit()

    def clear(self) -> None:
        """Close the edit without touching the tree."""
        self.editing_id = None
        self.draft_text = ""
        self.select_all_requested = False

    def handle_key(self, key: Union[Key, str]) -> bool:
        """
        Handle a key press while editing.

        Enter and Escape both commit. Every other key belongs to the text
        field and is left to the host.
        """
        key = coerce_key(key)
        if not self.is_open or key not in (Key.ENTER, Key.ESCAPE):
            return False
        return self.commit()
