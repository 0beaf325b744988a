"""Command-line front end: play against the computer, simulate, show scores."""

from __future__ import annotations

import argparse
import logging
import random
import string
import time
from typing import Sequence

from pydantic import ValidationError

from seabattle.config import GameConfig
from seabattle.engine.board import AttackOutcome, BoardSnapshot, PlacementStatus
from seabattle.engine.game import GameSession, TurnResult
from seabattle.engine.geometry import Coordinate, Orientation
from seabattle.engine.instrumented_game import InstrumentedGameSession
from seabattle.engine.player import Difficulty, PlayerKind
from seabattle.engine.ship import ShipClass
from seabattle.scores import JsonScoreStore, ScoreRecord
from seabattle.simulation import simulate
from seabattle.telemetry import configure_logging, init_telemetry

ROW_LABELS = string.ascii_uppercase

PLACEMENT_MESSAGES = {
    PlacementStatus.OUT_OF_BOUNDS: "The ship would stick out of the board.",
    PlacementStatus.OVERLAP: "That overlaps another ship.",
    PlacementStatus.ADJACENT: "Ships may not touch, not even diagonally.",
    PlacementStatus.INVALID_ORIENTATION: "Orientation must be H or V.",
    PlacementStatus.NO_ROOM: "There is no room left for the fleet.",
    PlacementStatus.NOT_IN_FLEET: "That ship is not part of the fleet still to place.",
}


def parse_coordinate(text: str, size: int) -> Coordinate:
    """Parse ``A5`` (row letter, 1-based column) or ``"x y"`` (0-based)."""
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    last_row = ROW_LABELS[size - 1]
    if cleaned[0].isalpha():
        if cleaned[0] not in ROW_LABELS[:size]:
            raise ValueError(f"Row must be between A and {last_row}.")
        y = ROW_LABELS.index(cleaned[0])
        try:
            x = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError(f"Column must be a number between 1 and {size}.") from exc
    else:
        parts = cleaned.replace(",", " ").split()
        if len(parts) != 2:
            raise ValueError("Use formats like A5 or '4 0'.")
        try:
            x, y = map(int, parts)
        except ValueError as exc:
            raise ValueError("Coordinates must be whole numbers.") from exc
    if x not in range(size) or y not in range(size):
        raise ValueError(f"Coordinates must be within the {size}x{size} board.")
    return Coordinate(x, y)


def format_coordinate(coord: Coordinate) -> str:
    return f"{ROW_LABELS[coord.y]}{coord.x + 1}"


def format_board(snapshot: BoardSnapshot, show_ships: bool) -> str:
    header = "    " + " ".join(f"{col + 1:>2}" for col in range(snapshot.size))
    rows = [header]
    missed = set(snapshot.missed)
    for y, cells in enumerate(snapshot.cells):
        symbols = []
        for x, view in enumerate(cells):
            if view.sunk:
                symbol = "#"
            elif view.occupied and view.attacked:
                symbol = "X"
            elif Coordinate(x, y) in missed:
                symbol = "o"
            elif view.occupied and show_ships:
                symbol = "S"
            else:
                symbol = "."
            symbols.append(f"{symbol:>2}")
        rows.append(f"{ROW_LABELS[y]} |" + " ".join(symbols))
    return "\n".join(rows)


def describe_attack(attacker: PlayerKind, outcome: AttackOutcome) -> str:
    who = "You" if attacker is PlayerKind.HUMAN else "The computer"
    label = format_coordinate(outcome.coord)
    if outcome.sunk and outcome.ship is not None:
        name = outcome.ship.type or f"length-{outcome.ship.length} ship"
        return f"{who} fired at {label}: sank a {name}!"
    return f"{who} fired at {label}: {'hit' if outcome.hit else 'miss'}"


def describe_scores(scores: ScoreRecord) -> str:
    return f"Wins: {scores.wins}  Losses: {scores.losses}  Games: {scores.total_games}"


def _prompt_orientation(ship_class: ShipClass) -> Orientation:
    while True:
        raw = input(
            f"Place your {ship_class.name} (length {ship_class.length}). Orientation [H/V]: "
        )
        orientation = Orientation.parse(raw)
        if orientation is not None:
            return orientation
        print("Please enter H for horizontal or V for vertical.")


def _manual_ship_placement(session: GameSession) -> None:
    for ship_class in session.remaining_ships():
        while True:
            print("\nCurrent layout:")
            print(format_board(session.human_board.get_grid(), show_ships=True))
            orientation = _prompt_orientation(ship_class)
            start_raw = input("Enter starting coordinate (e.g., A1): ")
            try:
                start = parse_coordinate(start_raw, session.config.board_size)
            except ValueError as exc:
                print(f"Invalid coordinate: {exc}")
                continue
            status = session.place_ship(start, ship_class.length, orientation, ship_class.key)
            if status.ok:
                break
            print(PLACEMENT_MESSAGES[status] + " Try again.")


def _prompt_yes_no(question: str) -> bool:
    while True:
        raw = input(f"{question} [Y/n]: ").strip().lower()
        if raw in {"", "y", "yes"}:
            return True
        if raw in {"n", "no"}:
            return False
        print("Please answer with 'y' or 'n'.")


def _prompt_for_target(size: int) -> Coordinate:
    while True:
        raw = input("Enter target coordinate (e.g., A5) or 'q' to quit: ").strip()
        if raw.lower() == "q":
            raise SystemExit("Goodbye!")
        try:
            return parse_coordinate(raw, size)
        except ValueError as exc:
            print(f"Invalid input: {exc}")


def _human_turn(session: GameSession) -> TurnResult:
    print("\nYour Board:")
    print(format_board(session.human_board.get_grid(), show_ships=True))
    print("\nEnemy Waters:")
    print(format_board(session.computer_board.get_grid(), show_ships=False))
    while True:
        coord = _prompt_for_target(session.config.board_size)
        result = session.play_turn(coord)
        if result.turn_consumed:
            return result
        print("That cell has already been targeted. Choose another.")


def play_game(config: GameConfig, seed: int | None = None, manual: bool | None = None) -> None:
    print("Welcome to Battleship!\n")
    session = InstrumentedGameSession(
        config=config,
        rng=random.Random(seed),
        score_store=JsonScoreStore(config.scores_path),
    )

    if manual is None:
        manual = _prompt_yes_no("Would you like to place your ships manually?")
    if manual:
        _manual_ship_placement(session)
    else:
        status = session.place_ships_randomly()
        if not status.ok:
            raise SystemExit(PLACEMENT_MESSAGES[status])
        print("Your ships have been positioned automatically.")

    session.start_game()
    while not session.is_game_over:
        if session.current_player is session.human:
            result = _human_turn(session)
        else:
            time.sleep(config.computer_delay)
            result = session.play_turn()
        print(describe_attack(result.attacker, result.outcome))

    stats = session.stats
    if session.winner is session.human:
        print("\nCongratulations, you won!")
    else:
        print("\nThe computer won this time. Better luck next battle!")
        print("\nWhere its fleet was:")
        print(format_board(session.computer_board.get_grid(), show_ships=True))
    print(f"Shots: {stats.turns}  Hits: {stats.hits}  Accuracy: {stats.accuracy:.1f}%")
    if session.scores is not None:
        print(describe_scores(session.scores))


def run_simulation(
    difficulty: Difficulty, games: int, board_size: int, seed: int | None
) -> None:
    report = simulate(difficulty=difficulty, games=games, board_size=board_size, seed=seed)
    print(
        f"[{report.difficulty.value}] games={report.games} board={report.board_size}x"
        f"{report.board_size} mean={report.mean:.1f} median={report.median:.1f} "
        f"std={report.std:.1f} best={report.best} worst={report.worst}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seabattle", description="Play Battleship via the CLI.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Verbosity of the diagnostic log written to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Play a game against the computer.")
    play.add_argument("--seed", type=int, default=None, help="Optional RNG seed.")
    play.add_argument("--difficulty", choices=[level.value for level in Difficulty])
    play.add_argument("--board-size", type=int, default=None)
    play.add_argument("--scores-path", default=None, help="JSON file holding wins and losses.")
    play.add_argument("--delay", type=float, default=None, help="Computer thinking time (s).")
    placement = play.add_mutually_exclusive_group()
    placement.add_argument("--manual", dest="manual", action="store_true", default=None)
    placement.add_argument("--random", dest="manual", action="store_false")

    sim = subparsers.add_parser("simulate", help="Measure the computer's shots-to-win.")
    sim.add_argument("--difficulty", choices=[level.value for level in Difficulty])
    sim.add_argument("--games", type=int, default=100)
    sim.add_argument("--board-size", type=int, default=None)
    sim.add_argument("--seed", type=int, default=None)

    scores = subparsers.add_parser("scores", help="Show the stored win/loss record.")
    scores.add_argument("--scores-path", default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(logging, args.log_level))
    init_telemetry()

    command = args.command or "play"
    try:
        config = GameConfig.from_env(
            difficulty=getattr(args, "difficulty", None),
            board_size=getattr(args, "board_size", None),
            scores_path=getattr(args, "scores_path", None),
            computer_delay=getattr(args, "delay", None),
        )
    except ValidationError as exc:
        parser.error(str(exc))

    if command == "simulate" and args.games <= 0:
        parser.error("--games must be a positive number.")

    if command == "simulate":
        run_simulation(config.difficulty, args.games, config.board_size, args.seed)
    elif command == "scores":
        print(describe_scores(JsonScoreStore(config.scores_path).load()))
    else:
        play_game(config, seed=getattr(args, "seed", None), manual=getattr(args, "manual", None))


if __name__ == "__main__":
    main()
