"""Command-line interface for Rooflight.

Runs the design studio on a pixel map and a design intent and prints the
resulting state (WLED payload, clarification questions or error) as JSON.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from rich.console import Console

from rooflight.core.clarification.models import ClarificationError
from rooflight.core.config.loader import (
    configure_logging,
    load_app_config,
    load_config,
    load_design_intent,
    load_pixel_map,
)
from rooflight.core.roofline.models import PixelMap
from rooflight.core.studio.orchestrator import DesignStudioOrchestrator
from rooflight.core.studio.state import StudioState, StudioStatus
from rooflight.core.utils.json import dumps, write_json

console = Console()
logger = logging.getLogger(__name__)

EXIT_CODES = {
    StudioStatus.READY: 0,
    StudioStatus.ERROR: 1,
    StudioStatus.NEEDS_CLARIFICATION: 2,
    StudioStatus.MANUAL_REQUESTED: 3,
}


def _load_answers(path: str | None) -> dict[str, str]:
    if path is None:
        return {}
    raw = load_config(path)
    return {str(k): str(v) for k, v in raw.items()}


def run_answers(
    studio: DesignStudioOrchestrator,
    state: StudioState,
    answers: dict[str, str],
    pixel_map: PixelMap,
) -> StudioState:
    """Feed answers into the studio round by round.

    Each answer is used at most once; rounds stop when no open question has
    an answer left.
    """
    remaining = dict(answers)
    while state.status == StudioStatus.NEEDS_CLARIFICATION and remaining:
        choices = {q.id: remaining.pop(q.id) for q in state.questions if q.id in remaining}
        if not choices:
            break
        state = studio.apply_clarifications(state, choices, pixel_map)
    if remaining:
        logger.warning(f"Unused answers: {sorted(remaining)}")
    return state


def compose(args: argparse.Namespace) -> int:
    """Run the studio and print the resulting state.

    Returns:
        Exit code (0 ready, 1 error, 2 needs clarification, 3 manual)
    """
    try:
        app_config = load_app_config(Path(args.config) if args.config else None)
        configure_logging(app_config)
        pixel_map = load_pixel_map(Path(args.map))
        intent = load_design_intent(Path(args.intent))
        answers = _load_answers(args.answers)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    studio = DesignStudioOrchestrator(app_config)
    try:
        state = studio.process(intent, pixel_map)
        state = run_answers(studio, state, answers, pixel_map)
    except ClarificationError as e:
        console.print(f"[red]ERROR: Invalid answer: {e}[/red]")
        return 1

    output = state.to_output()
    if args.out:
        out_path = Path(args.out)
        write_json(out_path, output)
        console.print(f"[green]Wrote {state.status.value} result to[/green] {out_path}")
    else:
        console.print_json(dumps(output))

    style = "green" if state.status == StudioStatus.READY else "yellow"
    if state.status == StudioStatus.ERROR:
        style = "red"
    console.print(f"[{style}]{state.status_message}[/{style}]")
    return EXIT_CODES[state.status]


def validate(args: argparse.Namespace) -> int:
    """Validate an intent against a map and list the findings.

    Returns:
        Exit code (0 valid, 1 blocking problems, 2 needs clarification)
    """
    try:
        app_config = load_app_config(Path(args.config) if args.config else None)
        configure_logging(app_config)
        pixel_map = load_pixel_map(Path(args.map))
        intent = load_design_intent(Path(args.intent))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    result = DesignStudioOrchestrator(app_config).validate_only(intent, pixel_map)

    for constraint in result.unsatisfied:
        marker = "[yellow]warning[/yellow]" if constraint.advisory else "[red]problem[/red]"
        layer = f" ({constraint.layer_id})" if constraint.layer_id else ""
        console.print(f"{marker} {constraint.type.value}{layer}: {constraint.failure_reason}")
        for alternative in constraint.alternatives:
            console.print(f"    - {alternative.id}: {alternative.label}")

    ambiguities = intent.ambiguities + result.additional_ambiguities
    for flag in ambiguities:
        console.print(f"[cyan]question[/cyan] {flag.type.value}: {flag.description}")

    if result.fatal:
        return 1
    if ambiguities or not result.all_satisfied:
        return 2
    console.print("[green]Design is valid[/green]")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="rooflight",
        description="Rooflight - roofline LED design composer for WLED",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    comp = sub.add_parser("compose", help="Compose a design into a WLED payload")
    comp.add_argument("--map", required=True, help="Path to roofline pixel map (JSON/YAML)")
    comp.add_argument("--intent", required=True, help="Path to design intent (JSON/YAML)")
    comp.add_argument(
        "--answers",
        default=None,
        help="Path to answers file mapping question id to option id",
    )
    comp.add_argument("--config", default=None, help="Path to app config (default: rooflight.yaml)")
    comp.add_argument("--out", default=None, help="Write result JSON here instead of stdout")

    val = sub.add_parser("validate", help="Check a design against a roofline")
    val.add_argument("--map", required=True, help="Path to roofline pixel map (JSON/YAML)")
    val.add_argument("--intent", required=True, help="Path to design intent (JSON/YAML)")
    val.add_argument("--config", default=None, help="Path to app config (default: rooflight.yaml)")

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    handlers = {"compose": compose, "validate": validate}
    sys.exit(handlers[args.cmd](args))


if __name__ == "__main__":
    main()
