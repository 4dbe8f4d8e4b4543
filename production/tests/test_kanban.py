"""Tests for the kanban board state machine."""

import pytest

from production.kanban import KanbanBoard, array_move
from production.repository import InMemoryProductionRepository


@pytest.fixture
def board_items(make_item):
    return [
        make_item(model_code="A", status="IN CUTTING"),
        make_item(model_code="B", status="IN SEWING"),
        make_item(model_code="C", status="IN SEWING"),
        make_item(model_code="D", status="IN CUTTING"),
    ]


@pytest.fixture
def repo(board_items):
    return InMemoryProductionRepository(board_items)


def codes(board):
    return [item.model_code for item in board.items]


class TestArrayMove:
    def test_moves_forward(self):
        assert array_move(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]

    def test_moves_backward(self):
        assert array_move(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]


class TestDragBetweenColumns:
    def test_drop_on_card_in_other_column_takes_its_status_and_position(self, board_items, repo):
        a, b = board_items[0], board_items[1]
        board = KanbanBoard(board_items, repository=repo)
        board.drag_start(a.id)
        board.drag_over(b.id)
        result = board.drag_end()

        assert result.status_changed is True
        assert board.get(a.id).status == "IN SEWING"
        assert codes(board) == ["B", "A", "C", "D"]
        assert repo.get_item(a.id).status == "IN SEWING"

    def test_drop_on_column_changes_status_keeps_position(self, board_items, repo):
        d = board_items[3]
        board = KanbanBoard(board_items, repository=repo)
        result = board.move(d.id, "IRON/PACK")

        assert result.status == "IRON/PACK"
        assert result.moved is False
        assert codes(board) == ["A", "B", "C", "D"]
        assert repo.calls == [("update_item", d.id)]

    def test_drop_on_own_column_is_noop(self, board_items, repo):
        board = KanbanBoard(board_items, repository=repo)
        assert board.move(board_items[0].id, "IN CUTTING") is None
        assert repo.calls == []

    def test_columns_follow_workflow_order(self, board_items):
        board = KanbanBoard(board_items)
        statuses = [str(status) for status, _items in board.columns()]
        assert statuses[0] == "SAMPLE SEWN"
        assert statuses[-1] == "SHIPPED"
        sewing = dict((str(s), items) for s, items in board.columns())["IN SEWING"]
        assert [item.model_code for item in sewing] == ["B", "C"]


class TestDragWithinColumn:
    def test_reorders_without_persisting(self, board_items, repo):
        a, d = board_items[0], board_items[3]
        board = KanbanBoard(board_items, repository=repo)
        result = board.move(d.id, a.id)

        assert result.status_changed is False
        assert codes(board) == ["D", "A", "B", "C"]
        assert repo.calls == []


class TestNoOps:
    def test_drop_on_itself_leaves_list_unchanged(self, board_items, repo):
        board = KanbanBoard(board_items, repository=repo)
        before = codes(board)
        assert board.move(board_items[1].id, board_items[1].id) is None
        assert codes(board) == before

    def test_drop_without_target(self, board_items):
        board = KanbanBoard(board_items)
        board.drag_start(board_items[0].id)
        assert board.drag_end() is None

    def test_drop_on_unknown_id(self, board_items):
        board = KanbanBoard(board_items)
        assert board.move(board_items[0].id, "no-such-card") is None

    def test_drag_end_without_start(self, board_items):
        board = KanbanBoard(board_items)
        assert board.drag_end(board_items[0].id) is None

    def test_hover_without_drag_is_ignored(self, board_items):
        board = KanbanBoard(board_items)
        board.drag_over(board_items[1].id)
        assert board.over_id is None


class TestPersistenceFailure:
    def test_failed_status_update_reverts_and_raises(self, board_items, repo):
        from production.repository import RepositoryError

        a, b = board_items[0], board_items[1]
        repo.fail_on.add("update_item")
        board = KanbanBoard(board_items, repository=repo)

        with pytest.raises(RepositoryError):
            board.move(a.id, b.id)

        assert board.get(a.id).status == "IN CUTTING"
        assert codes(board) == ["A", "B", "C", "D"]
        assert repo.get_item(a.id).status == "IN CUTTING"


class TestRestore:
    def test_new_items_first_then_saved_order(self, board_items):
        a, b, c, d = board_items
        board = KanbanBoard.restore(board_items, [str(d.id), str(b.id), "gone"])
        assert codes(board) == ["A", "C", "D", "B"]

    def test_snapshot_lists_ids_per_column(self, board_items):
        board = KanbanBoard(board_items)
        snapshot = {column["status"]: column["items"] for column in board.snapshot()}
        assert snapshot["IN SEWING"] == [str(board_items[1].id), str(board_items[2].id)]
        assert snapshot["SHIPPED"] == []
