"""High-level gameplay tests."""

import random

import pytest

from seabattle.config import GameConfig
from seabattle.engine import game as game_module
from seabattle.engine.errors import AlreadyAttackedError, PlacementError
from seabattle.engine.game import GamePhase, GameSession
from seabattle.engine.player import PlayerKind
from seabattle.engine.ship import Ship, ShipType


def _session_with_known_fleets() -> GameSession:
    """Computer has a destroyer at A1-A2; human has a carrier on row J."""
    session = GameSession(rng_seed=0)
    session.computer.board.place_ship(Ship(2), 0, 0)
    session.human.board.place_ship(Ship(5), 9, 0)
    session.start()
    return session


def test_game_flow() -> None:
    session = GameSession(rng_seed=42)
    session.setup()
    picker = random.Random(42)

    while session.get_state().phase is not GamePhase.FINISHED:
        state = session.get_state()
        if state.current_turn is PlayerKind.HUMAN:
            targets = session.valid_targets(PlayerKind.HUMAN)
            assert targets, "There should always be a valid target while the game runs."
            coord = picker.choice(targets)
            session.human_turn(coord.row, coord.col)
        else:
            result = session.computer_turn()
            assert not result.exhausted

    final_state = session.get_state()
    assert final_state.phase is GamePhase.FINISHED
    assert final_state.winner in {PlayerKind.HUMAN, PlayerKind.COMPUTER}
    loser = PlayerKind.COMPUTER if final_state.winner is PlayerKind.HUMAN else PlayerKind.HUMAN
    assert session.player(loser).board.all_ships_sunk()


def test_setup_places_both_fleets_and_starts() -> None:
    session = GameSession(rng_seed=1)
    session.setup("default")
    assert session.phase is GamePhase.IN_PROGRESS
    assert session.current_turn is PlayerKind.HUMAN
    assert len(session.human.board.ships) == 5
    assert len(session.computer.board.ships) == 5
    assert session.human.board.ship_at(0, 0).ship_type is ShipType.CARRIER


def test_manual_setup_waits_for_start() -> None:
    session = GameSession(rng_seed=1)
    session.setup("manual")
    assert session.phase is GamePhase.SETUP
    assert session.human.board.ships == []
    with pytest.raises(RuntimeError):
        session.start()

    session.human.board.place_ship(Ship(3), 0, 0)
    session.start()
    assert session.phase is GamePhase.IN_PROGRESS


def test_setup_rejects_unknown_layout() -> None:
    with pytest.raises(ValueError):
        GameSession().setup("diagonal")


def test_turns_require_game_in_progress() -> None:
    session = GameSession()
    with pytest.raises(RuntimeError):
        session.human_turn(0, 0)
    with pytest.raises(RuntimeError):
        session.computer_turn()


def test_turn_order_is_enforced() -> None:
    session = _session_with_known_fleets()
    with pytest.raises(RuntimeError):
        session.computer_turn()

    session.human_turn(5, 5)
    assert session.current_turn is PlayerKind.COMPUTER
    with pytest.raises(RuntimeError):
        session.human_turn(6, 6)

    session.computer_turn()
    assert session.current_turn is PlayerKind.HUMAN


def test_repeat_human_attack_keeps_the_turn() -> None:
    session = _session_with_known_fleets()
    session.human_turn(5, 5)
    session.computer_turn()

    with pytest.raises(AlreadyAttackedError):
        session.human_turn(5, 5)
    assert session.current_turn is PlayerKind.HUMAN


def test_sinking_last_ship_finishes_game() -> None:
    session = _session_with_known_fleets()

    first = session.human_turn(0, 0)
    assert first.hit is True
    assert first.sunk is False
    assert first.game_over is False

    session.computer_turn()
    second = session.human_turn(0, 1)
    assert second.hit is True
    assert second.sunk is True
    assert second.ship_name == "ship-2"
    assert second.game_over is True
    assert second.winner is PlayerKind.HUMAN
    assert session.phase is GamePhase.FINISHED
    assert session.valid_targets(PlayerKind.HUMAN) == []


def test_state_snapshot_reflects_attacks() -> None:
    session = _session_with_known_fleets()
    session.human_turn(4, 4)
    computer_result = session.computer_turn()

    state = session.get_state()
    assert state.boards[PlayerKind.COMPUTER].is_attacked(4, 4)
    assert state.boards[PlayerKind.HUMAN].is_attacked(computer_result.row, computer_result.col)
    assert state.current_turn is PlayerKind.HUMAN


def test_valid_targets_shrink_after_attack() -> None:
    session = _session_with_known_fleets()
    assert len(session.valid_targets(PlayerKind.HUMAN)) == 100
    session.human_turn(2, 2)
    assert len(session.valid_targets(PlayerKind.HUMAN)) == 99


def test_custom_fleet_and_board_size() -> None:
    session = GameSession(GameConfig(board_size=6, fleet=(3, 2)), rng_seed=4)
    session.setup()
    assert session.human.board.size == 6
    assert [ship.length for ship in session.computer.board.ships] == [3, 2]
    assert session.computer.board.ships[0].name == "ship-3"


def test_same_seed_same_computer_fleet() -> None:
    first = GameSession(rng_seed=99)
    second = GameSession(rng_seed=99)
    first.setup()
    second.setup()
    assert (
        first.computer.board.get_snapshot().occupied
        == second.computer.board.get_snapshot().occupied
    )


@pytest.mark.parametrize(
    "config",
    [GameConfig(fleet=(2,)), GameConfig(board_size=8)],
)
def test_default_layout_rejected_for_custom_games(config: GameConfig) -> None:
    session = GameSession(config, rng_seed=1)
    assert not session.default_layout_available

    with pytest.raises(ValueError):
        session.setup("default")

    assert session.phase is GamePhase.SETUP
    assert session.human.board.ships == []
    assert session.computer.board.ships == []


def test_random_setup_matches_custom_fleet() -> None:
    session = GameSession(GameConfig(board_size=6, fleet=(3, 2)), rng_seed=4)
    session.setup("random")
    assert sorted(ship.length for ship in session.human.board.ships) == [2, 3]
    assert sorted(ship.length for ship in session.computer.board.ships) == [2, 3]
    assert session.human.board.size == session.computer.board.size == 6


def test_failed_setup_leaves_boards_untouched_and_can_retry(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    real_place = game_module.place_fleet_randomly
    calls = {"count": 0}

    def flaky_place(board, rng, fleet):
        calls["count"] += 1
        if calls["count"] == 2:
            raise PlacementError("no room left")
        return real_place(board, rng, fleet)

    monkeypatch.setattr(game_module, "place_fleet_randomly", flaky_place)
    session = GameSession(rng_seed=5)

    with pytest.raises(PlacementError):
        session.setup("random")
    assert session.phase is GamePhase.SETUP
    assert session.computer.board.ships == []
    assert session.human.board.ships == []

    session.setup("random")
    assert session.phase is GamePhase.IN_PROGRESS
    assert len(session.computer.board.ships) == 5
    assert len(session.human.board.ships) == 5
