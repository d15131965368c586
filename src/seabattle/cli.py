"""Command-line driver for playing against the hunt/target computer."""

from __future__ import annotations

import argparse
import string
import time
from typing import Sequence

from seabattle.config import GameConfig
from seabattle.engine.board import BoardSnapshot, CellState
from seabattle.engine.errors import OccupiedError, OutOfBoundsError
from seabattle.engine.game import GamePhase, GameSession, TurnResult
from seabattle.engine.instrumented_game import InstrumentedGameSession
from seabattle.engine.player import PlayerKind
from seabattle.engine.ship import Coordinate, Ship, ShipType
from seabattle.telemetry import configure_console_logging, init_telemetry, shutdown_telemetry

ROW_LABELS = string.ascii_uppercase


def _coordinate_from_input(text: str, size: int = 10) -> Coordinate:
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    last_label = ROW_LABELS[size - 1]
    if cleaned[0].isalpha():
        if cleaned[0] not in ROW_LABELS[:size]:
            raise ValueError(f"Row must be between A and {last_label}.")
        row = ROW_LABELS.index(cleaned[0])
        try:
            col = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError(f"Column must be a number between 1 and {size}.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like A5 or '1 5'.")
        try:
            row, col = (int(part) - 1 for part in parts)
        except ValueError as exc:
            raise ValueError("Row and column must be numbers.") from exc
    if row not in range(size) or col not in range(size):
        raise ValueError(f"Coordinates must be within the {size}x{size} board.")
    return Coordinate(row, col)


def _label(row: int, col: int) -> str:
    return f"{ROW_LABELS[row]}{col + 1}"


def _format_board(snapshot: BoardSnapshot, show_ships: bool) -> str:
    occupied = snapshot.as_array()
    header = "    " + " ".join(f"{col+1:>2}" for col in range(snapshot.size))
    rows = [header]
    for row in range(snapshot.size):
        symbols = []
        for col in range(snapshot.size):
            state = snapshot.cell_state(row, col)
            if state is CellState.HIT:
                symbol = "X"
            elif state is CellState.MISS:
                symbol = "o"
            else:
                symbol = "S" if show_ships and occupied[row, col] else "."
            symbols.append(f"{symbol:>2}")
        rows.append(f"{ROW_LABELS[row]} |" + " ".join(symbols))
    return "\n".join(rows)


def _describe_turn(result: TurnResult) -> str:
    who = "You" if result.player is PlayerKind.HUMAN else "Computer"
    if result.exhausted:
        return f"{who} has no coordinates left to attack."
    outcome = "hit" if result.hit else "miss"
    if result.sunk:
        whose = "the enemy's" if result.player is PlayerKind.HUMAN else "your"
        outcome = f"sank {whose} {result.ship_name}!"
    return f"{who} fired at {_label(result.row, result.col)}: {outcome}"


def _prompt_for_target(session: GameSession) -> Coordinate:
    size = session.computer.board.size
    open_targets = set(session.valid_targets(PlayerKind.HUMAN))
    while True:
        raw = input("Enter target (A5, or '1 5' as row and column) or 'q' to quit: ").strip()
        if raw.lower() == "q":
            raise SystemExit("Goodbye!")
        try:
            coord = _coordinate_from_input(raw, size)
        except ValueError as exc:
            print(f"Invalid input: {exc}")
            continue
        if coord not in open_targets:
            print("That cell has already been targeted. Choose another.")
            continue
        return coord


def _prompt_vertical(ship: Ship) -> bool:
    while True:
        raw = (
            input(f"Place your {ship.name.title()} (length {ship.length}). Orientation [H/V]: ")
            .strip()
            .upper()
        )
        if raw in {"H", "HOR", "HORIZONTAL"}:
            return False
        if raw in {"V", "VER", "VERTICAL"}:
            return True
        print("Please enter H for horizontal or V for vertical.")


def _manual_ship_placement(session: GameSession) -> None:
    board = session.human.board
    for entry in session.fleet:
        ship = Ship.from_type(entry) if isinstance(entry, ShipType) else Ship(entry)
        while True:
            print("\nCurrent layout:")
            print(_format_board(board.get_snapshot(), show_ships=True))
            vertical = _prompt_vertical(ship)
            start_raw = input("Enter starting coordinate (e.g., A1): ")
            try:
                start = _coordinate_from_input(start_raw, board.size)
            except ValueError as exc:
                print(f"Invalid coordinate: {exc}")
                continue
            try:
                board.place_ship(ship, start.row, start.col, vertical)
            except (OutOfBoundsError, OccupiedError) as exc:
                print(f"Ship cannot be placed there: {exc} Try again.")
                continue
            break


def _prompt_layout(session: GameSession) -> str:
    if session.default_layout_available:
        question = "Place your ships manually, randomly or use the default layout? [M/r/d]: "
    else:
        question = "Place your ships manually or randomly? [M/r]: "
    while True:
        raw = input(question).strip().lower()
        if raw in {"", "m", "manual"}:
            return "manual"
        if raw in {"r", "random"}:
            return "random"
        if raw in {"d", "default"} and session.default_layout_available:
            return "default"
        print("Please answer with one of the listed options.")


def play_game(session: GameSession, layout: str | None = None) -> PlayerKind | None:
    """Run one match on the terminal and return the winner (``None`` for a draw)."""
    print("Welcome to Sea Battle!\n")
    layout = layout or _prompt_layout(session)
    try:
        session.setup(layout)
    except ValueError as exc:
        print(f"{exc} Using a random layout instead.")
        layout = "random"
        session.setup(layout)
    if layout == "manual":
        _manual_ship_placement(session)
        session.start()

    while session.phase is GamePhase.IN_PROGRESS:
        if session.current_turn is PlayerKind.HUMAN:
            state = session.get_state()
            print(f"\nYour Board ({session.human.board.ships_afloat()} ships afloat):")
            print(_format_board(state.boards[PlayerKind.HUMAN], show_ships=True))
            print(f"\nEnemy Waters ({session.computer.board.ships_afloat()} ships afloat):")
            print(_format_board(state.boards[PlayerKind.COMPUTER], show_ships=False))
            coord = _prompt_for_target(session)
            result = session.human_turn(coord.row, coord.col)
        else:
            print("\nComputer's turn...")
            if session.config.computer_delay:
                time.sleep(session.config.computer_delay)
            result = session.computer_turn()
        print(_describe_turn(result))

    if session.winner is PlayerKind.HUMAN:
        print("\nCongratulations, you won! All enemy ships have been sunk.")
    elif session.winner is PlayerKind.COMPUTER:
        print("\nThe computer won this time. Better luck next battle!")
    else:
        print("\nNo attacks left. The battle ends in a draw.")
    return session.winner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Sea Battle against the computer.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to pause before each computer turn.",
    )
    parser.add_argument(
        "--layout",
        choices=("manual", "random", "default"),
        default=None,
        help="How to place your fleet; asked interactively when omitted.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log engine events to stderr.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    telemetry = init_telemetry()
    if args.verbose:
        configure_console_logging(telemetry.log_level)
    config = GameConfig.from_env(rng_seed=args.seed, computer_delay=args.delay)
    if config.board_size > len(ROW_LABELS):
        raise SystemExit(f"Boards larger than {len(ROW_LABELS)} rows cannot be shown.")
    try:
        play_game(InstrumentedGameSession(config), layout=args.layout)
    finally:
        shutdown_telemetry()


if __name__ == "__main__":
    main()
