"""Client-side board state.

Two helpers for front ends built on :class:`kanban_client.KanbanAPI`:

* :class:`BoardState` caches one board as a list of columns, each with
  its cards sorted by position.  Edits are applied to the cache first
  and persisted afterwards.  When the server refuses, the cache is put
  back to the snapshot taken before the edit (or refetched, for card
  and column moves) and the reason is stored in :attr:`BoardState.error`.
* :class:`DragTracker` turns raw pointer events into card clicks and
  card drops.  It knows nothing about rendering: callers feed it
  pointer coordinates and column rectangles and read back the floating
  card position.
"""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)

Card = Dict[str, Any]
Rect = Tuple[float, float, float, float]


@dataclass
class Column:
    """A list of the board together with its cards.

    Attributes:
        id: Identifier of the list.
        title: Column heading.
        position: Ordering key among the board's columns.
        color: Optional accent colour.
        cards: Cards of the column, sorted by ``position``.
    """

    id: str
    title: str
    position: int
    color: Optional[str] = None
    cards: List[Card] = field(default_factory=list)


def _sorted_by_position(items: Iterable[Card]) -> List[Card]:
    return sorted(items, key=lambda item: item.get("position") or 0)


class BoardState:
    """Optimistic cache of a single board."""

    def __init__(self, api: Any, user_id: Optional[str]) -> None:
        self.api = api
        self.user_id = user_id
        self.board_id: Optional[str] = None
        self.columns: List[Column] = []
        self.labels: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.is_loading = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def fetch(self, board_id: Optional[str] = None) -> bool:
        """Load a board into the cache.

        Without ``board_id`` the user's most recently opened board is
        used; a user without boards gets a default board (with its three
        default columns) created for them.  Returns ``True`` on success.
        """
        self.is_loading = True
        self.error = None
        # Never show the previous board's content while loading another.
        self.columns = []
        self.labels = []
        try:
            if not self.user_id:
                return False
            if board_id is None:
                board_id = self._resolve_board_id()
                if board_id is None:
                    return False
            self.board_id = board_id

            lists, error = self.api.list_lists(board_id)
            if error:
                return self._fail(error, "Failed to load lists")
            cards, error = self.api.list_cards()
            if error:
                return self._fail(error, "Failed to load cards")
            labels, error = self.api.list_labels(board_id)
            if error:
                return self._fail(error, "Failed to load labels")

            self.labels = list(labels or [])
            self.columns = [
                Column(
                    id=item["id"],
                    title=item["title"],
                    position=item.get("position") or 0,
                    color=item.get("color"),
                    cards=_sorted_by_position(c for c in cards or [] if c.get("list_id") == item["id"]),
                )
                for item in _sorted_by_position(lists or [])
            ]
            return True
        finally:
            self.is_loading = False

    def _resolve_board_id(self) -> Optional[str]:
        boards, error = self.api.list_boards(self.user_id)
        if error:
            self._fail(error, "Failed to load boards")
            return None
        if boards:
            return boards[0]["id"]
        board, error = self.api.create_default_board(self.user_id)
        if error or not board or not board.get("id"):
            self._fail(error, "Failed to create default board")
            return None
        logger.info("Created default board %s for user %s", board["id"], self.user_id)
        return board["id"]

    def fetch_labels(self) -> None:
        if not self.board_id:
            return
        labels, error = self.api.list_labels(self.board_id)
        if error:
            logger.error("Error fetching labels: %s", error["message"])
            return
        self.labels = list(labels or [])

    def label_by_id(self, label_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not label_id:
            return None
        for label in self.labels:
            if label.get("id") == label_id:
                return label
        return None

    def column(self, column_id: str) -> Optional[Column]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------
    def add_column(self, title: str) -> Optional[Column]:
        """Append a column.  A placeholder is shown until the server answers."""
        if not title.strip() or not self.board_id:
            return None
        position = max((c.position for c in self.columns), default=0) + 1
        placeholder = Column(id=f"tmp-{uuid.uuid4()}", title=title, position=position)
        self.columns.append(placeholder)

        created, error = self.api.create_list({"boardId": self.board_id, "title": title, "position": position})
        if error:
            self.columns = [c for c in self.columns if c.id != placeholder.id]
            self._fail(error, "Failed to create column")
            return None
        placeholder.id = created["id"]
        placeholder.title = created.get("title", title)
        placeholder.position = created.get("position", position)
        placeholder.color = created.get("color")
        return placeholder

    def update_column(self, column_id: str, title: Optional[str] = None, color: Optional[str] = None) -> bool:
        column = self.column(column_id)
        if column is None:
            return False
        updates = {k: v for k, v in (("title", title), ("color", color)) if v}
        if not updates:
            return True
        snapshot = self._snapshot()
        for key, value in updates.items():
            setattr(column, key, value)
        _, error = self.api.update_list(column_id, updates)
        if error:
            self.columns = snapshot
            return self._fail(error, "Failed to update column")
        return True

    def delete_column(self, column_id: str) -> bool:
        snapshot = self._snapshot()
        self.columns = [c for c in self.columns if c.id != column_id]
        _, error = self.api.delete_list(column_id)
        if error:
            self.columns = snapshot
            return self._fail(error, "Failed to delete column")
        return True

    def move_column(self, column_id: str, index: int) -> bool:
        """Move a column to ``index`` and renumber every column's position.

        Positions are saved one column at a time, so a failure part way
        leaves some of them stored; the board is then fetched again.
        """
        column = self.column(column_id)
        if column is None:
            return False
        remaining = [c for c in self.columns if c.id != column_id]
        index = max(0, min(index, len(remaining)))
        remaining.insert(index, column)

        changed = []
        for position, item in enumerate(remaining):
            if item.position != position:
                item.position = position
                changed.append(item)
        self.columns = remaining

        for item in changed:
            _, error = self.api.update_list(item.id, {"position": item.position})
            if error:
                return self._refetch_after(error, "Failed to reorder columns")
        return True

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------
    def add_card(self, column_id: str, title: str) -> Optional[Card]:
        if not title.strip():
            return None
        column = self.column(column_id)
        cards = column.cards if column else []
        position = max([0] + [c.get("position") or 0 for c in cards]) + 1
        card, error = self.api.create_card({"listId": column_id, "title": title, "position": position})
        if error:
            self._fail(error, "Failed to save card")
            return None
        if column is not None:
            column.cards.append(card)
        return card

    def update_card(self, card_id: str, updates: Dict[str, Any]) -> Optional[Card]:
        """Persist ``updates`` and replace the cached card with the server's copy."""
        updated, error = self.api.update_card(card_id, updates)
        if error:
            self._fail(error, "Failed to update card")
            return None
        for column in self.columns:
            for index, card in enumerate(column.cards):
                if card.get("id") == card_id:
                    column.cards[index] = updated
                    return updated
        return updated

    def delete_card(self, card_id: str, column_id: str) -> bool:
        column = self.column(column_id)
        if column is None:
            return False
        _, error = self.api.delete_card(card_id)
        if error:
            return self._fail(error, "Failed to delete card")
        column.cards = [c for c in column.cards if c.get("id") != card_id]
        return True

    def move_card(self, card: Card, source_column_id: str, target_column_id: str, position: int) -> bool:
        """Move ``card`` locally, then persist the move.

        If the server rejects it the whole board is fetched again, since
        the local view can no longer be trusted.
        """
        source = self.column(source_column_id)
        target = self.column(target_column_id)
        if source is None or target is None:
            return False

        source.cards = [c for c in source.cards if c.get("id") != card.get("id")]
        moved = dict(card, list_id=target_column_id, position=position)
        target.cards = _sorted_by_position(target.cards + [moved])

        if source_column_id == target_column_id and card.get("position") == position:
            return True
        _, error = self.api.update_card(card["id"], {"listId": target_column_id, "position": position})
        if error:
            return self._refetch_after(error, "Failed to move card")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _snapshot(self) -> List[Column]:
        return copy.deepcopy(self.columns)

    def _refetch_after(self, error: Optional[Dict[str, Any]], fallback: str) -> bool:
        self._fail(error, fallback)
        message = self.error
        self.fetch(self.board_id)
        self.error = self.error or message
        return False

    def _fail(self, error: Optional[Dict[str, Any]], fallback: str) -> bool:
        message = (error or {}).get("message") or fallback
        logger.error("%s: %s", fallback, message)
        self.error = message
        return False


class DragTracker:
    """Pointer drag state machine for moving cards between columns.

    A press arms the tracker.  The drag only starts once the pointer has
    moved more than :attr:`THRESHOLD` pixels on either axis; releasing
    before that is a click.  While dragging, the floating card follows
    the pointer and swings with the horizontal speed.
    """

    THRESHOLD = 5
    MAX_ROTATION = 12.0
    SWING_FACTOR = 0.6
    DAMPING = 0.15

    def __init__(
        self,
        on_drag_start: Optional[Callable[[Card, str], None]] = None,
        on_drag_end: Optional[Callable[[Card, str, Optional[str]], None]] = None,
        on_card_click: Optional[Callable[[Card, str], None]] = None,
    ) -> None:
        self.on_drag_start = on_drag_start
        self.on_drag_end = on_drag_end
        self.on_card_click = on_card_click
        self._reset()

    def _reset(self) -> None:
        self.is_pressed = False
        self.has_started = False
        self.card: Optional[Card] = None
        self.source_column_id: Optional[str] = None
        self.x = self.y = 0.0
        self.start_x = self.start_y = 0.0
        self.offset_x = self.offset_y = 0.0
        self.rotation = 0.0

    def press(self, card: Card, column_id: str, x: float, y: float, card_left: float, card_top: float) -> None:
        """Arm a potential drag of ``card`` grabbed at ``(x, y)``."""
        self._reset()
        self.is_pressed = True
        self.card = card
        self.source_column_id = column_id
        self.x = self.start_x = x
        self.y = self.start_y = y
        self.offset_x = x - card_left
        self.offset_y = y - card_top

    def move(self, x: float, y: float) -> None:
        if not self.is_pressed:
            return
        if not self.has_started:
            if abs(x - self.start_x) <= self.THRESHOLD and abs(y - self.start_y) <= self.THRESHOLD:
                return
            self.has_started = True
            if self.on_drag_start is not None:
                self.on_drag_start(self.card, self.source_column_id)

        velocity = x - self.x
        target = 0.0
        if abs(velocity) > 2:
            target = max(-self.MAX_ROTATION, min(self.MAX_ROTATION, velocity * self.SWING_FACTOR))
        self.rotation += (target - self.rotation) * self.DAMPING
        if abs(self.rotation) < 0.5:
            self.rotation = 0.0
        self.x = x
        self.y = y

    def release(self, x: float, y: float, column_rects: Mapping[str, Rect]) -> Optional[str]:
        """Finish the gesture.

        ``column_rects`` maps column ids to ``(left, top, right, bottom)``;
        edges count as inside.  Returns the id of the column the card was
        dropped on, or ``None`` for clicks and drops outside any column.
        """
        if not self.is_pressed or self.card is None or self.source_column_id is None:
            return None
        card, source = self.card, self.source_column_id
        started = self.has_started
        self._reset()

        if not started:
            if self.on_card_click is not None:
                self.on_card_click(card, source)
            return None

        target = None
        for column_id, (left, top, right, bottom) in column_rects.items():
            if left <= x <= right and top <= y <= bottom:
                target = column_id
                break
        if self.on_drag_end is not None:
            self.on_drag_end(card, source, target)
        return target

    def floating_position(self) -> Tuple[float, float, float]:
        """``(left, top, rotation)`` of the card following the pointer."""
        return self.x - self.offset_x, self.y - self.offset_y, round(self.rotation, 1)
