"""Tests for human and computer players."""

import random
from unittest.mock import MagicMock

import pytest

from seabattle.engine.board import Board
from seabattle.engine.errors import AlreadyAttackedError, WrongPlayerKindError
from seabattle.engine.player import AttackReport, Player, PlayerKind
from seabattle.engine.ship import Coordinate, Ship


def _mock_board(size: int = 10) -> MagicMock:
    board = MagicMock(spec=Board)
    board.size = size
    board.receive_attack.return_value = False
    return board


def test_players_own_their_board() -> None:
    human = Player(PlayerKind.HUMAN)
    computer = Player(PlayerKind.COMPUTER)
    assert human.kind is PlayerKind.HUMAN
    assert computer.kind is PlayerKind.COMPUTER
    assert human.board is not computer.board
    assert human.board.size == 10
    assert computer.board.owner == "computer"


def test_human_attack_delegates_to_enemy_board() -> None:
    human = Player(PlayerKind.HUMAN)
    enemy = _mock_board()
    enemy.receive_attack.return_value = True

    assert human.attack(3, 4, enemy) is True
    enemy.receive_attack.assert_called_once_with(3, 4)


def test_human_attack_propagates_board_errors() -> None:
    human = Player(PlayerKind.HUMAN)
    enemy = Board()
    human.attack(5, 5, enemy)
    with pytest.raises(AlreadyAttackedError):
        human.attack(5, 5, enemy)


def test_computer_cannot_use_human_attack() -> None:
    computer = Player(PlayerKind.COMPUTER)
    enemy = _mock_board()
    with pytest.raises(WrongPlayerKindError):
        computer.attack(0, 0, enemy)
    enemy.receive_attack.assert_not_called()


def test_human_cannot_use_computer_attack() -> None:
    human = Player(PlayerKind.HUMAN)
    enemy = _mock_board()
    with pytest.raises(WrongPlayerKindError):
        human.computer_attack(enemy)
    enemy.receive_attack.assert_not_called()


def test_computer_attack_targets_a_valid_cell() -> None:
    computer = Player(PlayerKind.COMPUTER, rng=random.Random(3))
    enemy = _mock_board()

    assert not computer.targeting.initialized
    report = computer.computer_attack(enemy)

    enemy.receive_attack.assert_called_once_with(report.row, report.col)
    assert 0 <= report.row < 10
    assert 0 <= report.col < 10
    assert report.hit is False
    assert computer.targeting.initialized


def test_computer_follows_up_a_hit_next_to_it() -> None:
    computer = Player(PlayerKind.COMPUTER, rng=random.Random(11))
    enemy = _mock_board()
    enemy.receive_attack.side_effect = [True, False]

    first = computer.computer_attack(enemy)
    second = computer.computer_attack(enemy)

    assert first.hit is True
    distance = abs(first.row - second.row) + abs(first.col - second.col)
    assert distance == 1


def test_computer_exhausts_board_without_repeats() -> None:
    computer = Player(PlayerKind.COMPUTER, rng=random.Random(5))
    enemy = Board()
    enemy.place_ship(Ship(5), 0, 0)
    enemy.place_ship(Ship(3), 6, 2, vertical=True)

    seen: set[Coordinate] = set()
    for _ in range(100):
        report = computer.computer_attack(enemy)
        assert not report.exhausted
        coord = Coordinate(report.row, report.col)
        assert coord not in seen
        seen.add(coord)

    assert len(seen) == 100
    assert enemy.all_ships_sunk()
    final = computer.computer_attack(enemy)
    assert final == AttackReport(row=None, col=None, hit=None)
    assert final.exhausted


def test_computer_attack_reports_hits_from_real_board() -> None:
    computer = Player(PlayerKind.COMPUTER, rng=random.Random(9))
    enemy = Board(size=2)
    ship = Ship(2)
    enemy.place_ship(ship, 0, 0)

    hits = [computer.computer_attack(enemy).hit for _ in range(4)]
    assert hits.count(True) == 2
    assert ship.is_sunk()
