"""Command line interface for Cotejo Pairing.

``cotejo-pair`` pairs an event file, generates random events, validates
brackets and runs an interactive live-play session.
"""

# Cotejo Pairing
# Copyright (C) 2025  Cotejo Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from cotejopairing import __version__
from cotejopairing.constants import EVENT_FILE_EXTENSION, STRATEGY_EXACT, STRATEGY_GREEDY
from cotejopairing.exceptions import CotejoPairingException, FileLoadException
from cotejopairing.models.fight import Fight, Outcome, Phase
from cotejopairing.models.matching_result import MatchingResult
from cotejopairing.models.weight import format_weight
from cotejopairing.testing.generator import EventGeneratorConfig, RandomEventGenerator
from cotejopairing.tournament.tournament import Tournament
from cotejopairing.utils import set_log_level, setup_logger
from cotejopairing.validation.checker import ValidationReport, create_bracket_checker

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


OUTCOME_WORDS = {
    "first": Outcome.WIN_FIRST,
    "second": Outcome.WIN_SECOND,
    "draw": Outcome.DRAW,
}

SHELL_COMMANDS = {
    "match": "Build the main bracket draft",
    "shuffle": "Rebuild the draft trying partners in random order",
    "start": "Commit the main fights and number them",
    "individual": "Pair the unpaired competitors",
    "fights": "List all fights",
    "result": "result <fight#> <first|second|draw> <seconds>",
    "standings": "Show the team table",
    "summary": "Show event totals",
    "help": "Show this list",
    "quit": "Leave the session",
}


# ========== Event files ==========


def load_event(path: Path) -> Tournament:
    """Load an event file.

    Raises:
        FileLoadException: If the file cannot be read or is not valid JSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise FileLoadException(f"Cannot read event file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise FileLoadException(f"Event file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise FileLoadException(f"Event file {path} must hold a JSON object")
    try:
        return Tournament.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise FileLoadException(f"Malformed event file {path}: {e}") from e


def save_event(data: dict, path: Path) -> Path:
    if not path.suffix:
        path = path.with_suffix(EVENT_FILE_EXTENSION)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path


# ========== Printing ==========


def format_fight(fight: Fight, tournament: Tournament) -> str:
    unit = tournament.rules.weight_unit
    number = f"#{fight.sequence}" if fight.sequence is not None else "-"
    sides = []
    for competitor in fight.competitors:
        sides.append(
            f"{competitor.describe(unit)} [{tournament.team_name(competitor.team_id)}]"
        )
    status = fight.outcome.value
    if not fight.is_pending:
        status = f"{status} ({fight.duration:g}s)"
    diff = format_weight(fight.weight_difference, unit)
    return f"{number:>4}  {sides[0]}  vs  {sides[1]}  diff {diff}  {status}"


def print_fights(fights: Sequence[Fight], tournament: Tournament, title: str) -> None:
    print(f"\n{Colors.BOLD}{title}{Colors.ENDC}")
    if not fights:
        print("  (none)")
        return
    for fight in fights:
        print(f"  {format_fight(fight, tournament)}")


def print_unpaired(tournament: Tournament) -> None:
    unpaired = tournament.unpaired
    print(f"\n{Colors.BOLD}Unpaired ({len(unpaired)}){Colors.ENDC}")
    for competitor in unpaired:
        print(
            f"  {competitor.describe(tournament.rules.weight_unit)} "
            f"[{tournament.team_name(competitor.team_id)}]"
        )


def print_standings(tournament: Tournament) -> None:
    print(f"\n{Colors.BOLD}{'Team':24} {'W':>3} {'D':>3} {'L':>3} {'Pts':>5}{Colors.ENDC}")
    for row in tournament.standings():
        print(
            f"{row.team_name:24} {row.wins:>3} {row.draws:>3} {row.losses:>3} "
            f"{row.points:>5g}"
        )


def print_summary(tournament: Tournament) -> None:
    summary = tournament.summary()
    print(f"\n{Colors.BOLD}Summary{Colors.ENDC}")
    print(f"  Rounds per team: {summary.rounds}")
    print(f"  Main bracket competitors: {summary.main_competitors}")
    print(f"  Main fights: {summary.main_fights}")
    print(f"  Individual fights: {summary.individual_fights}")
    print(f"  Unpaired: {summary.unpaired}")
    print(f"  Pending/decided: {summary.pending_fights}/{summary.decided_fights}")
    for note in summary.notes:
        print(f"  {Colors.WARNING}Note:{Colors.ENDC} {note}")


def print_report(report: ValidationReport, title: str) -> None:
    colour = Colors.OKGREEN if report.is_valid else Colors.FAIL
    print(f"\n{Colors.BOLD}{title}{Colors.ENDC}: {colour}{report.summary}{Colors.ENDC}")
    for result in report.results:
        print(f"  {result.status.value:15} {result.check:24} {result.description}")


# ========== Commands ==========


def _matchmaking_options(args: argparse.Namespace) -> dict:
    return {
        "strategy": args.strategy,
        "shuffle": args.shuffle,
        "seed": args.seed,
        "fallback_to_greedy": args.fallback_greedy,
        "max_steps": args.max_steps,
        "time_limit": args.time_limit,
    }


def run_match_command(args: argparse.Namespace) -> int:
    """Pair an event and print (or dump) the bracket."""
    tournament = load_event(Path(args.event))
    draft = tournament.run_matchmaking(**_matchmaking_options(args))
    if args.individual:
        tournament.generate_individual_fights()

    if args.json:
        output = tournament.to_dict()
        if not tournament.is_started:
            output["draft_fights"] = [f.to_dict() for f in tournament.main_fights]
        output["unpaired"] = [c.id for c in tournament.unpaired]
        output["summary"] = tournament.summary().to_dict()
        print(json.dumps(output, indent=2))
        return 0

    title = f"Main fights ({draft.result.status.value})"
    print_fights(tournament.main_fights, tournament, title)
    if args.individual:
        print_fights(tournament.individual_fights, tournament, "Individual fights")
    print_unpaired(tournament)
    print_summary(tournament)
    return 0


def run_generate_command(args: argparse.Namespace) -> int:
    """Generate a random event file."""
    config = EventGeneratorConfig(
        num_teams=args.teams,
        roster_range=(args.min_roster, args.max_roster),
        forbidden_pair_count=args.forbidden_pairs,
        seed=args.seed,
    )
    event = RandomEventGenerator(config).generate_event()
    if args.output:
        path = save_event(event, Path(args.output))
        print(f"Event written to {path}")
    else:
        print(json.dumps(event, indent=2))
    return 0


def _phase_result(tournament: Tournament, phase: Phase) -> MatchingResult:
    return MatchingResult(fights=tournament.ledger.fights_for_phase(phase))


def run_validate_command(args: argparse.Namespace) -> int:
    """Check stored fights, or a fresh bracket when the event has none."""
    tournament = load_event(Path(args.event))
    checker = create_bracket_checker()
    reports = []

    if tournament.is_started:
        for phase in Phase:
            result = _phase_result(tournament, phase)
            pool = [c for fight in result.fights for c in fight.competitors]
            report = checker.validate(result, pool, tournament.rules)
            reports.append((f"Stored {phase.value} fights", report))
    else:
        draft = tournament.run_matchmaking(**_matchmaking_options(args))
        report = checker.validate(draft.result, draft.pool, tournament.rules)
        reports.append(("Main bracket", report))
        individual_pool = tournament.unpaired
        individual = tournament.generate_individual_fights()
        report = checker.validate(individual, individual_pool, tournament.rules)
        reports.append(("Individual round", report))

    for title, report in reports:
        print_report(report, title)
    return 0 if all(report.is_valid for _, report in reports) else 1


class ShellSession:
    """Interactive live-play session over one event."""

    def __init__(self, tournament: Tournament, seed: Optional[int] = None):
        self.tournament = tournament
        self.seed = seed
        self.shuffles = 0

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        parts = line.split()
        if not parts:
            return True
        command, args = parts[0].lstrip("/").lower(), parts[1:]

        if command in ("quit", "exit", "q"):
            return False
        if command not in SHELL_COMMANDS:
            print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC} (type help)")
            return True

        try:
            getattr(self, f"do_{command}")(args)
        except CotejoPairingException as e:
            print(f"{Colors.FAIL}Error:{Colors.ENDC} {e}")
        return True

    def do_help(self, args: List[str]) -> None:
        for name, description in SHELL_COMMANDS.items():
            print(f"  {Colors.OKGREEN}{name:12}{Colors.ENDC} {description}")

    def do_match(self, args: List[str]) -> None:
        strategy = args[0] if args else STRATEGY_EXACT
        self.tournament.run_matchmaking(strategy=strategy)
        self._show_draft()

    def do_shuffle(self, args: List[str]) -> None:
        self.shuffles += 1
        seed = None if self.seed is None else self.seed + self.shuffles
        self.tournament.run_matchmaking(shuffle=True, seed=seed)
        self._show_draft()

    def do_start(self, args: List[str]) -> None:
        fights = self.tournament.start()
        print(f"{len(fights)} main fights committed")

    def do_individual(self, args: List[str]) -> None:
        result = self.tournament.generate_individual_fights()
        print_fights(result.fights, self.tournament, "Individual fights")
        print(f"{len(result.leftovers)} competitor(s) still unpaired")

    def do_fights(self, args: List[str]) -> None:
        if self.tournament.is_started:
            print_fights(self.tournament.ledger.fights, self.tournament, "Fights")
        else:
            print_fights(self.tournament.main_fights, self.tournament, "Draft fights")

    def do_result(self, args: List[str]) -> None:
        if len(args) != 3 or args[1].lower() not in OUTCOME_WORDS:
            print("Usage: result <fight#> <first|second|draw> <seconds>")
            return
        try:
            sequence, seconds = int(args[0]), float(args[2])
        except ValueError:
            print("Fight number and seconds must be numbers")
            return
        fight = self.tournament.record_result_by_sequence(
            sequence, OUTCOME_WORDS[args[1].lower()], seconds
        )
        print(format_fight(fight, self.tournament))

    def do_standings(self, args: List[str]) -> None:
        print_standings(self.tournament)

    def do_summary(self, args: List[str]) -> None:
        print_summary(self.tournament)

    def _show_draft(self) -> None:
        print_fights(self.tournament.main_fights, self.tournament, "Draft fights")
        print_unpaired(self.tournament)
        for note in self.tournament.draft.notes:
            print(f"{Colors.WARNING}Note:{Colors.ENDC} {note}")


def run_shell_command(args: argparse.Namespace) -> int:
    """Run the interactive session with autocomplete."""
    shell = ShellSession(load_event(Path(args.event)), seed=args.seed)
    session = PromptSession(
        completer=WordCompleter(list(SHELL_COMMANDS) + list(OUTCOME_WORDS)),
        history=InMemoryHistory(),
        style=Style.from_dict({"prompt": "#00aa00 bold"}),
    )
    print(f"{Colors.BOLD}Cotejo Pairing {__version__}{Colors.ENDC} - type help for commands")

    while True:
        try:
            line = session.prompt("cotejo> ").strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            break
        if not shell.execute(line):
            break
    return 0


# ========== Parser ==========


def _add_matchmaking_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strategy",
        choices=[STRATEGY_EXACT, STRATEGY_GREEDY],
        default=STRATEGY_EXACT,
        help="Main bracket matcher (default: exact)",
    )
    parser.add_argument(
        "--shuffle", action="store_true", help="Try partners in random order"
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument(
        "--fallback-greedy",
        action="store_true",
        help="Pair greedily when no complete main bracket exists",
    )
    parser.add_argument(
        "--max-steps", type=int, help="Give up the exact search after N steps"
    )
    parser.add_argument(
        "--time-limit", type=float, help="Give up the exact search after N seconds"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="cotejo-pair",
        description="Pair roosters into fights for a derby event",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Pair an event and include the individual round
  cotejo-pair match event.json --individual

  # Generate a reproducible random event
  cotejo-pair generate --teams 8 --seed 42 --output demo.json

  # Live play
  cotejo-pair shell event.json
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser("match", help="Pair an event file")
    match_parser.add_argument("event", help="Event JSON file")
    _add_matchmaking_arguments(match_parser)
    match_parser.add_argument(
        "--individual", action="store_true", help="Also pair the unpaired competitors"
    )
    match_parser.add_argument("--json", action="store_true", help="Print JSON output")
    match_parser.set_defaults(handler=run_match_command)

    generate_parser = subparsers.add_parser("generate", help="Generate a random event")
    generate_parser.add_argument("--teams", type=int, default=6, help="Number of teams (default: 6)")
    generate_parser.add_argument("--min-roster", type=int, default=1, help="Smallest roster (default: 1)")
    generate_parser.add_argument("--max-roster", type=int, default=4, help="Largest roster (default: 4)")
    generate_parser.add_argument(
        "--forbidden-pairs", type=int, default=0, help="Random forbidden team pairs"
    )
    generate_parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    generate_parser.add_argument("--output", help="Output file path")
    generate_parser.set_defaults(handler=run_generate_command)

    validate_parser = subparsers.add_parser("validate", help="Check an event's brackets")
    validate_parser.add_argument("event", help="Event JSON file")
    _add_matchmaking_arguments(validate_parser)
    validate_parser.set_defaults(handler=run_validate_command)

    shell_parser = subparsers.add_parser("shell", help="Interactive live-play session")
    shell_parser.add_argument("event", help="Event JSON file")
    shell_parser.add_argument("--seed", type=int, help="Base seed for shuffles")
    shell_parser.set_defaults(handler=run_shell_command)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(logging.DEBUG)

    try:
        return args.handler(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except CotejoPairingException as e:
        logger.error("%s", e)
        print(f"{Colors.FAIL}Error:{Colors.ENDC} {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
