"""
Kanban board state machine.

The board is one ordered list of production items; a column is the
subset with a given status, shown in WORKFLOW order. A drag is three
events: drag_start, drag_over (optional, remembers the hover target)
and drag_end. The input device (mouse, touch, keyboard) only has to
produce these events.

Drop rules:
  * no target, unknown id, or dropped on itself → nothing happens
  * onto a card in another column → take that card's status, move to its index
  * onto a card in the same column → move to its index
  * onto a column (status value) → take that status, keep position

Status changes are applied locally first, then persisted. If the store
rejects the change the board reverts to how it was before the drop and
the RepositoryError propagates to the caller.
"""

import logging
from dataclasses import dataclass

from .models import WORKFLOW
from .repository import RepositoryError

logger = logging.getLogger(__name__)

_COLUMN_IDS = {str(status) for status in WORKFLOW}


@dataclass(frozen=True)
class DropResult:
    item_id: object
    status: str
    status_changed: bool
    moved: bool


def array_move(items, from_index, to_index):
    """Move one element, shifting the ones in between."""
    items.insert(to_index, items.pop(from_index))
    return items


class KanbanBoard:
    def __init__(self, items, repository=None):
        self.items = list(items)
        self.repository = repository
        self.active_id = None
        self.over_id = None

    @classmethod
    def restore(cls, items, order, repository=None):
        """
        Rebuild a board from freshly fetched items and a saved id order.

        Items missing from the saved order (created since) go first, in
        fetch order; ids that no longer exist are ignored.
        """
        by_id = {str(item.id): item for item in items}
        known = [by_id.pop(item_id) for item_id in order or () if item_id in by_id]
        fresh = [item for item in items if str(item.id) in by_id]
        return cls(fresh + known, repository=repository)

    # -- events ---------------------------------------------------------

    def drag_start(self, item_id):
        self.active_id = None if item_id is None else str(item_id)
        self.over_id = None

    def drag_over(self, target_id):
        if self.active_id is not None:
            self.over_id = None if target_id is None else str(target_id)

    def drag_end(self, over_id=None):
        active_id = self.active_id
        target_id = str(over_id) if over_id is not None else self.over_id
        self.active_id = None
        self.over_id = None

        if active_id is None or target_id is None or active_id == target_id:
            return None
        return self._drop(active_id, target_id)

    def move(self, item_id, over_id):
        """A whole drag in one call (used by the JSON endpoint)."""
        self.drag_start(item_id)
        return self.drag_end(over_id)

    # -- queries --------------------------------------------------------

    def columns(self):
        return [(status, [item for item in self.items if item.status == status]) for status in WORKFLOW]

    def order(self):
        return [str(item.id) for item in self.items]

    def snapshot(self):
        """JSON-ready column layout: status → ordered item ids."""
        return [
            {"status": str(status), "items": [str(item.id) for item in items]}
            for status, items in self.columns()
        ]

    def get(self, item_id):
        index = self._index(item_id)
        return None if index is None else self.items[index]

    # -- internals ------------------------------------------------------

    def _index(self, item_id):
        item_id = str(item_id)
        for index, item in enumerate(self.items):
            if str(item.id) == item_id:
                return index
        return None

    def _drop(self, active_id, target_id):
        active_index = self._index(active_id)
        if active_index is None:
            return None
        item = self.items[active_index]

        if target_id in _COLUMN_IDS:
            if item.status == target_id:
                return None
            return self._change_status(active_index, target_id)

        over_index = self._index(target_id)
        if over_index is None:
            return None
        target = self.items[over_index]

        if item.status != target.status:
            return self._change_status(active_index, target.status, over_index)

        array_move(self.items, active_index, over_index)
        return DropResult(item.id, item.status, status_changed=False, moved=True)

    def _change_status(self, index, new_status, new_index=None):
        previous_items = list(self.items)
        item = self.items[index]
        old_status = item.status

        item.status = new_status
        if new_index is not None:
            array_move(self.items, index, new_index)

        if self.repository is not None:
            try:
                self.repository.update_item(item.id, {"status": new_status})
            except RepositoryError:
                logger.warning(
                    "Status change of %s to %s failed, reverting to %s",
                    item.id, new_status, old_status,
                )
                item.status = old_status
                self.items = previous_items
                raise

        return DropResult(item.id, new_status, status_changed=True, moved=new_index is not None)
