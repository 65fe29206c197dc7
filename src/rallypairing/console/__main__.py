"""Command-line interface for running Rally Pairing sessions.

``rally-session generate`` prints a schedule, ``rally-session play`` runs the
live tables interactively.
"""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
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
import random
import sys
from datetime import date
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from rallypairing.controllers.session import SessionController
from rallypairing.exceptions import RallyPairingException
from rallypairing.models.exclusion_set import ExclusionSet
from rallypairing.models.match import Match, MatchOutcome
from rallypairing.models.participant import Participant
from rallypairing.models.session_config import SessionConfig
from rallypairing.pairing.schedule_generator import count_matches, generate_schedule
from rallypairing.utils import set_log_level, setup_logger
from rallypairing.utils.storage import (
    load_config,
    load_history,
    load_roster,
    save_schedule,
)

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Interactive session commands
COMMANDS = {
    "tables": "Show the match on every table",
    "queue": "Show matches waiting for a table",
    "result": "result <table> <winner-id>: record the winner on a table",
    "finish": "End the session now, dropping unplayed matches",
    "help": "Show this list",
    "exit": "Leave the session",
}


def print_commands_list():
    """Print list of all interactive commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, description in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:10}{Colors.ENDC} - {description}")
    print()


def format_match(match: Match) -> str:
    return (
        f"#{match.sequence_number:<3} R{match.round_number:<2} "
        f"{match.player_a.name} ({round(match.player_a.rating)}) [{match.player_a.id}]"
        f"  vs  "
        f"{match.player_b.name} ({round(match.player_b.rating)}) [{match.player_b.id}]"
    )


def print_schedule(schedule: List[Match], participants: List[Participant], quota: int):
    """Print the numbered schedule and any quota shortfall."""
    print(f"\n{Colors.BOLD}Schedule ({len(schedule)} matches):{Colors.ENDC}")
    for match in schedule:
        print(f"  {format_match(match)}")

    counts = count_matches(schedule, participants)
    short = [p for p in participants if counts[p.id] < quota]
    if short:
        print(f"\n{Colors.WARNING}Fewer than {quota} matches:{Colors.ENDC}")
        for participant in short:
            print(f"  {participant.name}: {counts[participant.id]}")


def print_tables(controller: SessionController):
    state = controller.state
    print(f"\n{Colors.BOLD}Tables:{Colors.ENDC}")
    for number in range(1, state.table_count + 1):
        match = state.table(number)
        body = format_match(match) if match is not None else "(free)"
        print(f"  {Colors.OKCYAN}{number:>2}{Colors.ENDC}  {body}")


def print_queue(controller: SessionController):
    waiting = controller.state.waiting
    print(f"\n{Colors.BOLD}Waiting ({len(waiting)}):{Colors.ENDC}")
    playing = controller.state.playing_ids()
    for match in waiting:
        busy = " (player busy)" if playing & set(match.player_ids) else ""
        print(f"  {format_match(match)}{busy}")


def print_outcome(outcome: MatchOutcome):
    print(
        f"{Colors.OKGREEN}Saved: {outcome.winner.name} beat "
        f"{outcome.loser.name}{Colors.ENDC}"
    )


def handle_command(controller: SessionController, line: str) -> bool:
    """Execute one interactive command.

    Returns:
        False when the session loop should stop
    """
    parts = line.split()
    if not parts:
        return True
    command = parts[0].lstrip("/").lower()

    if command in ("exit", "quit", "q"):
        return False
    if command in ("help", "?"):
        print_commands_list()
        return True
    if command == "tables":
        print_tables(controller)
        return True
    if command == "queue":
        print_queue(controller)
        return True
    if command == "finish":
        controller.force_finish()
        print(f"{Colors.WARNING}Session finished early.{Colors.ENDC}")
        return False
    if command == "result":
        if len(parts) != 3 or not parts[1].isdigit():
            print(f"{Colors.FAIL}Usage: result <table> <winner-id>{Colors.ENDC}")
            return True
        try:
            complete = controller.record_result(int(parts[1]), parts[2])
        except RallyPairingException as e:
            print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
            return True
        if complete:
            print(f"\n{Colors.OKGREEN}All matches finished.{Colors.ENDC}\n")
            return False
        print_tables(controller)
        return True

    print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
    print(f"Type {Colors.BOLD}help{Colors.ENDC} to see available commands")
    return True


def create_completer(controller: SessionController) -> NestedCompleter:
    """Complete commands, table numbers and the ids of players at tables."""
    ids = {p.id: None for p in controller.participants}
    tables = {str(n): ids for n in range(1, controller.config.table_count + 1)}
    completions = {cmd: None for cmd in COMMANDS}
    completions["result"] = tables
    return NestedCompleter.from_nested_dict(completions)


def run_session_loop(controller: SessionController) -> int:
    """Prompt for commands until the session ends."""
    style = Style.from_dict({"prompt": "#00aa00 bold"})
    session = PromptSession(
        completer=create_completer(controller),
        history=InMemoryHistory(),
        style=style,
    )

    print_commands_list()
    print_tables(controller)
    while True:
        try:
            line = session.prompt("rally> ").strip()
        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' to leave{Colors.ENDC}")
            continue
        except EOFError:
            break
        if not handle_command(controller, line):
            break

    print(f"{Colors.OKGREEN}Goodbye!{Colors.ENDC}")
    return 0


def _build_config(args: argparse.Namespace) -> SessionConfig:
    config = load_config(args.config) if args.config else SessionConfig()
    data = config.to_dict()
    for key in ("quota", "seed"):
        if getattr(args, key) is not None:
            data[key] = getattr(args, key)
    if getattr(args, "tables", None) is not None:
        data["table_count"] = args.tables
    return SessionConfig.from_dict(data)


def _load_inputs(args: argparse.Namespace, config: SessionConfig):
    participants = load_roster(args.roster)
    if args.history:
        on_date = args.date or date.today().isoformat()
        exclusions = load_history(
            args.history,
            on_date,
            participant_ids=[p.id for p in participants],
            window_days=config.history_window_days,
        )
    else:
        exclusions = ExclusionSet()
    return participants, exclusions


def run_generate_command(args: argparse.Namespace) -> int:
    """Generate and print a schedule."""
    config = _build_config(args)
    participants, exclusions = _load_inputs(args, config)
    if len(participants) < 2:
        print(f"{Colors.FAIL}Select at least two participants.{Colors.ENDC}")
        return 1

    quota = config.quota_for(len(participants))
    schedule = generate_schedule(
        participants, exclusions, quota, rng=random.Random(config.seed)
    )
    if not schedule:
        print(f"{Colors.FAIL}No valid pairing is left for these participants.{Colors.ENDC}")
        return 1

    print_schedule(schedule, participants, quota)
    if args.output:
        save_schedule(schedule, args.output)
        print(f"\n{Colors.OKGREEN}Schedule saved to: {args.output}{Colors.ENDC}")
    return 0


def run_play_command(args: argparse.Namespace) -> int:
    """Generate a schedule and run the live tables."""
    config = _build_config(args)
    participants, exclusions = _load_inputs(args, config)
    controller = SessionController(
        participants, exclusions, config, result_sink=print_outcome
    )
    schedule = controller.start()
    print_schedule(schedule, participants, controller.quota)
    return run_session_loop(controller)


def _add_session_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--roster", required=True, help="Participants JSON file")
    parser.add_argument("--history", help="Played matches JSON file")
    parser.add_argument(
        "--date", help="Day whose history counts as already played (YYYY-MM-DD)"
    )
    parser.add_argument("--config", help="Session configuration JSON file")
    parser.add_argument(
        "--quota", type=int, help="Matches per participant (default: everyone once)"
    )
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="rally-session",
        description="Schedule and run rated pairing sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print today's schedule
  rally-session generate --roster players.json --history matches.json

  # Run four tables interactively
  rally-session play --roster players.json --tables 4
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate a schedule")
    _add_session_arguments(gen_parser)
    gen_parser.add_argument("--output", help="Write the schedule as JSON")
    gen_parser.set_defaults(func=run_generate_command)

    play_parser = subparsers.add_parser("play", help="Run live tables")
    _add_session_arguments(play_parser)
    play_parser.add_argument("--tables", type=int, help="Number of tables")
    play_parser.set_defaults(func=run_play_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for rally-session CLI."""
    parser = create_main_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    if args.verbose:
        set_log_level("DEBUG")

    try:
        return args.func(args)
    except RallyPairingException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        logger.debug("Command failed", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
