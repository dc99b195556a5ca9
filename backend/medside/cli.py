"""
MedSide command line scanner.

Runs one analysis on an image file and prints the result.

Usage:
    medside scan PATH [options]       # analyze an image file (jpg/png/gif)
    medside capture PATH [options]    # analyze a saved camera frame (JPEG)

Examples:
    # Analyze a photo of a medicine box with Gemini
    medside scan box.jpg

    # Use a local Ollama model and print JSON
    medside scan box.png --provider ollama --model llava:7b --json

Exit codes:
    0  analysis returned (possibly incomplete)
    2  the image could not be used
    3  the vision model call failed
    4  configuration error
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from .application.session import AnalysisSession
from .config.settings import AppConfig
from .cross_cutting.error_handling import user_message_for
from .cross_cutting.logging import get_logger, setup_logging
from .cross_cutting.safety.disclaimers import DisclaimerInjector
from .domain.entities.medicine_analysis import MedicineAnalysis
from .domain.exceptions import ConfigurationError, ErrorKind, UnreadableFileError
from .domain.sections import SectionKind, get_contract
from .main import build_scan_service


logger = get_logger("cli")

EXIT_OK = 0
EXIT_INPUT_ERROR = 2
EXIT_CALL_ERROR = 3
EXIT_CONFIG_ERROR = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="medside",
        description="Medicine package scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    scan = subparsers.add_parser("scan", help="Analyze an image file (jpg, png, gif)")
    capture = subparsers.add_parser("capture", help="Analyze a saved camera frame (JPEG)")

    for sub in (scan, capture):
        sub.add_argument("path", type=Path, help="Image file")
        sub.add_argument(
            "--provider", choices=["gemini", "openai", "ollama", "dummy"],
            help="Vision model provider (default: MEDSIDE_PROVIDER or gemini)"
        )
        sub.add_argument("--model", help="Model name (default depends on provider)")
        sub.add_argument("--timeout", type=float, help="Seconds to wait for the model")
        sub.add_argument("--json", action="store_true", help="Print the analysis as JSON")
        sub.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
        sub.add_argument("--env-file", help="Load settings from this .env file")

    return parser


def render_text(analysis: MedicineAnalysis) -> str:
    """Render an analysis as plain text, one section per block."""
    lines = []
    for section in get_contract(analysis.prompt_version):
        value = getattr(analysis, section.field_name)
        if section.kind == SectionKind.RATING:
            value = analysis.rating_label
        if section.kind == SectionKind.LIST:
            lines.append(f"{section.title}:")
            lines.extend(f"  - {item}" for item in value or ["(none)"])
        else:
            lines.append(f"{section.title}: {value or '(unknown)'}")

    if analysis.degraded:
        lines.append("")
        lines.append(f"Note: some details could not be read ({', '.join(analysis.missing_fields)}).")
    return "\n".join(lines)


async def run_scan(session: AnalysisSession, command: str, path: Path) -> Optional[MedicineAnalysis]:
    if command == "capture":
        try:
            frame = path.read_bytes()
        except OSError as e:
            raise UnreadableFileError(f"Failed to read file: {e}", filename=path.name)
        return await session.capture_and_analyze(frame)
    return await session.upload_and_analyze([path])


def exit_code_for(kind: Optional[ErrorKind]) -> int:
    if kind is not None and kind.is_input_stage:
        return EXIT_INPUT_ERROR
    return EXIT_CALL_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, stream=sys.stderr)

    config = AppConfig.from_env(args.env_file)
    if args.provider:
        config.vision.provider = args.provider
    if args.model:
        config.vision.model = args.model
    if args.timeout is not None:
        config.vision.timeout_seconds = args.timeout

    disclaimers = DisclaimerInjector()

    try:
        session = AnalysisSession(build_scan_service(config))
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        analysis = asyncio.run(run_scan(session, args.command, args.path))
    except UnreadableFileError as e:
        logger.debug(f"Input error details: {e.details}")
        print(user_message_for(e.kind), file=sys.stderr)
        return EXIT_INPUT_ERROR

    if analysis is None:
        logger.debug(f"Scan ended in state {session.state}")
        print(session.error_message, file=sys.stderr)
        return exit_code_for(session.state.error_kind)

    if session.notice:
        logger.info(session.notice)

    if args.json:
        payload = analysis.to_dict()
        payload["disclaimer"] = disclaimers.get_short_disclaimer()
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(disclaimers.inject_disclaimer(render_text(analysis)))

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
