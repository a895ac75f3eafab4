"""Unit tests for board actions."""

from taskflow.models.actions import (
    CreateBoard,
    DeleteBoard,
    ImportBoards,
    ReorderBoards,
    SetBoards,
    SwitchBoard,
    UpdateBoard,
)
from taskflow.models.core import BoardUpdate, KanbanState
from taskflow.reducers import create_default_board, kanban_reducer

from conftest import make_board


class TestCreateBoard:
    """Tests for CREATE_BOARD."""

    def test_creates_default_columns_and_selects_board(self):
        state = kanban_reducer(KanbanState(), CreateBoard(title="Launch"))

        assert len(state.boards) == 1
        board = state.boards[0]
        assert board.title == "Launch"
        assert [c.title for c in board.columns] == ["To Do", "In Progress", "Done"]
        assert all(c.tasks == [] for c in board.columns)
        assert board.labels == []
        assert state.current_board is board

    def test_appends_after_existing_boards(self, sample_state):
        state = kanban_reducer(sample_state, CreateBoard(title="New"))

        assert [b.title for b in state.boards] == ["Project", "Personal", "New"]
        assert state.current_board is state.boards[-1]

    def test_default_board_ids_are_unique(self):
        board = create_default_board("A")
        ids = {board.id, *(c.id for c in board.columns)}
        assert len(ids) == 4


class TestSetAndSwitch:
    """Tests for SET_BOARDS and SWITCH_BOARD."""

    def test_set_boards_selects_first(self):
        boards = [make_board("b1", "One"), make_board("b2", "Two")]
        state = kanban_reducer(KanbanState(), SetBoards(boards=boards))

        assert state.current_board is state.boards[0]
        assert state.current_board.id == "b1"

    def test_set_boards_empty_clears_selection(self, sample_state):
        state = kanban_reducer(sample_state, SetBoards(boards=[]))

        assert state.boards == []
        assert state.current_board is None

    def test_switch_board(self, sample_state):
        state = kanban_reducer(sample_state, SwitchBoard(board_id="board-2"))

        assert state.current_board is state.boards[1]

    def test_switch_to_unknown_board_selects_nothing(self, sample_state):
        state = kanban_reducer(sample_state, SwitchBoard(board_id="missing"))

        assert state.current_board is None
        assert state.boards == sample_state.boards


class TestUpdateBoard:
    """Tests for UPDATE_BOARD."""

    def test_rename_current_board_keeps_identity(self, sample_state):
        state = kanban_reducer(
            sample_state, UpdateBoard(board_id="board-1", updates=BoardUpdate(title="Renamed"))
        )

        assert state.boards[0].title == "Renamed"
        assert state.current_board is state.boards[0]
        assert state.boards[0].updated_at > sample_state.boards[0].updated_at

    def test_rename_other_board_leaves_current_alone(self, sample_state):
        state = kanban_reducer(
            sample_state, UpdateBoard(board_id="board-2", updates=BoardUpdate(title="Home"))
        )

        assert state.boards[1].title == "Home"
        assert state.current_board is sample_state.current_board

    def test_unknown_board_is_noop(self, sample_state):
        state = kanban_reducer(
            sample_state, UpdateBoard(board_id="missing", updates=BoardUpdate(title="X"))
        )
        assert state is sample_state

    def test_empty_update_only_touches_timestamp(self, sample_state):
        state = kanban_reducer(sample_state, UpdateBoard(board_id="board-1", updates=BoardUpdate()))

        assert state.boards[0].title == "Project"


class TestDeleteBoard:
    """Tests for DELETE_BOARD."""

    def test_delete_current_selects_first_remaining(self, sample_state):
        state = kanban_reducer(sample_state, DeleteBoard(board_id="board-1"))

        assert [b.id for b in state.boards] == ["board-2"]
        assert state.current_board is state.boards[0]

    def test_delete_other_keeps_current(self, sample_state):
        state = kanban_reducer(sample_state, DeleteBoard(board_id="board-2"))

        assert state.current_board is sample_state.current_board

    def test_delete_last_board(self):
        board = make_board()
        state = KanbanState(boards=[board], current_board=board)
        state = kanban_reducer(state, DeleteBoard(board_id=board.id))

        assert state.boards == []
        assert state.current_board is None

    def test_unknown_board_is_noop(self, sample_state):
        assert kanban_reducer(sample_state, DeleteBoard(board_id="missing")) is sample_state


class TestImportBoards:
    """Tests for IMPORT_BOARDS."""

    def test_replace_all(self, sample_state):
        imported = [make_board("imported", "Imported")]
        state = kanban_reducer(sample_state, ImportBoards(boards=imported, replace_all=True))

        assert [b.id for b in state.boards] == ["imported"]
        assert state.current_board is state.boards[0]

    def test_merge_appends_and_renames_colliding_ids(self, sample_state):
        imported = [make_board("board-1", "Copy"), make_board("fresh", "Fresh")]
        state = kanban_reducer(sample_state, ImportBoards(boards=imported))

        assert len(state.boards) == 4
        copy = state.boards[2]
        assert copy.title == "Copy"
        assert copy.id != "board-1"
        assert state.boards[3].id == "fresh"
        assert len({b.id for b in state.boards}) == 4


class TestReorderBoards:
    """Tests for REORDER_BOARDS."""

    def test_reorder(self, sample_state):
        state = kanban_reducer(sample_state, ReorderBoards(board_ids=["board-2", "board-1"]))

        assert [b.id for b in state.boards] == ["board-2", "board-1"]
        assert state.current_board is state.boards[1]

    def test_unlisted_boards_keep_order_after_listed(self):
        boards = [make_board(f"b{i}", f"B{i}") for i in range(4)]
        state = KanbanState(boards=boards, current_board=boards[0])
        state = kanban_reducer(state, ReorderBoards(board_ids=["b2", "missing", "b0"]))

        assert [b.id for b in state.boards] == ["b2", "b0", "b1", "b3"]
