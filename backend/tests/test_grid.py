import pytest

from partyhost.models import GameType
from partyhost.services.games.grid import DRAW, check_winner


def _empty(size):
    return [None] * (size * size)


@pytest.mark.parametrize('size', [1, 2, 3, 4, 5])
@pytest.mark.parametrize('symbol', ['X', 'O'])
def test_every_full_line_wins(size, symbol):
    lines = []
    for row in range(size):
        lines.append([row * size + col for col in range(size)])
    for col in range(size):
        lines.append([row * size + col for row in range(size)])
    lines.append([i * (size + 1) for i in range(size)])
    lines.append([(i + 1) * (size - 1) for i in range(size)])

    for line in lines:
        board = _empty(size)
        for idx in line:
            board[idx] = symbol
        assert check_winner(board, size) == symbol


@pytest.mark.parametrize('size', [2, 3, 4, 5])
def test_partial_board_without_line_is_none(size):
    board = _empty(size)
    assert check_winner(board, size) is None
    board[0] = 'X'
    board[1] = 'O'
    assert check_winner(board, size) is None


def test_full_board_without_line_is_draw():
    board = [
        'X', 'O', 'X',
        'X', 'O', 'O',
        'O', 'X', 'X',
    ]
    assert check_winner(board, 3) == DRAW

    board = [
        'X', 'X', 'O', 'O',
        'O', 'O', 'X', 'X',
        'X', 'X', 'O', 'O',
        'O', 'O', 'X', 'X',
    ]
    assert check_winner(board, 4) == DRAW


def test_full_board_with_line_reports_winner_not_draw():
    board = [
        'X', 'X', 'X',
        'O', 'O', 'X',
        'X', 'O', 'O',
    ]
    assert check_winner(board, 3) == 'X'


def test_single_cell_board():
    assert check_winner([None], 1) is None
    assert check_winner(['O'], 1) == 'O'


def test_occupied_cell_is_ignored(make_room, transport):
    session = make_room(GameType.GRID, names=('A', 'B'), grid_size=3)
    session.move('sid-A', 4)
    board_before = list(session.room.game_data.board)
    turn_before = session.room.game_data.turn
    transport.clear()

    session.move('sid-B', 4)

    assert session.room.game_data.board == board_before
    assert session.room.game_data.turn == turn_before
    assert transport.emitted == []


def test_invalid_moves_are_ignored(make_room, transport):
    session = make_room(GameType.GRID, names=('A', 'B'))
    transport.clear()
    for bad in (-1, 9, 'x', None, 2.5, True):
        session.move('sid-A', bad)
    # Not a member of the room
    session.move('sid-Z', 0)
    assert session.room.game_data.board == [None] * 9
    assert session.room.game_data.turn == 'X'
    assert transport.emitted == []


def test_turn_alternates(make_room, transport):
    session = make_room(GameType.GRID, names=('A', 'B'))
    session.move('sid-A', 0)
    assert session.room.game_data.turn == 'O'
    session.move('sid-B', '1')
    assert session.room.game_data.board[:2] == ['X', 'O']
    assert session.room.game_data.turn == 'X'
    updates = transport.events('grid_update', to=session.code)
    assert updates[-1] == {'board': ['X', 'O'] + [None] * 7, 'turn': 'X'}


def test_win_then_reset_after_delay(make_room, transport, scheduler):
    session = make_room(GameType.GRID, names=('A', 'B'), grid_size=3)
    for idx in (0, 3, 1, 4, 2):
        session.move('sid-A', idx)

    assert 'X Wins!' in transport.messages()
    assert session.room.game_data.board[:3] == ['X', 'X', 'X']

    # Finished board is frozen until the reset
    session.move('sid-B', 8)
    assert session.room.game_data.board[8] is None

    transport.clear()
    scheduler.advance(2)
    assert transport.emitted == []
    scheduler.advance(1)

    assert session.room.game_data.board == [None] * 9
    assert session.room.game_data.turn == 'X'
    assert transport.events('grid_update', to=session.code) == [{'board': [None] * 9, 'turn': 'X'}]
    assert transport.messages() == ['New Game Started!']


def test_draw_is_announced(make_room, transport, scheduler):
    session = make_room(GameType.GRID, names=('A', 'B'))
    # X O X / X O O / O X X
    for idx in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        session.move('sid-A', idx)
    assert "It's a Draw!" in transport.messages()
    scheduler.advance(3)
    assert session.room.game_data.board == [None] * 9


def test_reset_skipped_when_room_is_gone(make_room, registry, transport, scheduler):
    session = make_room(GameType.GRID, names=('A', 'B'))
    for idx in (0, 3, 1, 4, 2):
        session.move('sid-A', idx)
    session.leave('sid-A')
    session.leave('sid-B')
    assert registry.get_room(session.code) is None

    transport.clear()
    scheduler.advance(5)
    assert transport.emitted == []


def test_join_sends_board_to_joiner(make_room, transport):
    session = make_room(GameType.GRID, names=('A',), grid_size=4)
    session.move('sid-A', 5)
    transport.clear()

    session.join('sid-B', 'B')

    assert transport.events('grid_init', to='sid-B') == [{'size': 4}]
    update = transport.events('grid_update', to='sid-B')[0]
    assert update['board'][5] == 'X'
    assert len(update['board']) == 16
    assert transport.events('grid_init', to=session.code) == []


def test_start_game_resets_board(make_room, transport):
    session = make_room(GameType.GRID, names=('A', 'B'))
    session.move('sid-A', 0)
    assert session.start_game('sid-A')
    assert session.room.game_data.board == [None] * 9
    assert 'New Game Started!' in transport.messages()
