# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any, cast
from uuid import UUID

from dotenv import load_dotenv

from substance_import.app import (
    commit,
    dry_run,
    list_runs,
    open_configured_store,
    preview,
    run_items,
    run_seed,
    validate_catalog,
    write_seed_file,
)
from substance_import.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

DEFAULT_SEED_OUTPUT = Path("data/seed.json")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import substances into the catalog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("preview", "Show the normalized merge without touching the catalog"),
        ("dry-run", "Classify each candidate as insert, update or skip"),
        ("commit", "Apply the batch to the catalog"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument(
            "input",
            type=str,
            help="Path to a JSON request (object with items, or a bare list); '-' reads stdin",
        )
        command.add_argument(
            "--skip-secondary-source",
            action="store_true",
            help="Do not query PubChem",
        )
        command.add_argument(
            "--token",
            type=str,
            help="Admin token (required when SUBSTANCE_IMPORT_ADMIN_TOKEN is set)",
        )
        if name != "preview":
            command.add_argument(
                "--overwrite",
                action="store_true",
                help="Update entries whose slug already exists",
            )

    seed = subparsers.add_parser("seed", help="Generate seed candidates from Wikidata")
    seed.add_argument(
        "--limit",
        type=int,
        required=True,
        help="Number of candidates to collect",
    )
    seed.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_SEED_OUTPUT,
        help="Where to write the seed file (default: %(default)s)",
    )

    validate = subparsers.add_parser("validate", help="Validate catalog records")
    validate.add_argument(
        "path",
        type=Path,
        nargs="?",
        help="JSON export to check; validates the live catalog when omitted",
    )

    audit = subparsers.add_parser("audit", help="Inspect the import audit log")
    audit.add_argument(
        "--run-id",
        type=str,
        help="Show the items of one import run",
    )
    audit.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of recent runs to list (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _read_json(source: str | Path) -> object:
    if str(source) == "-":
        return json.loads(sys.stdin.read())
    return json.loads(Path(source).read_text(encoding="utf-8"))


def _load_request(args: argparse.Namespace) -> object:
    """Read the request document and apply command-line flags on top of it."""
    payload = _read_json(args.input)
    if isinstance(payload, list):
        payload = {"items": payload}
    if not isinstance(payload, dict):
        return payload
    request = cast(dict[str, Any], payload)
    if args.skip_secondary_source:
        request["skipSecondarySource"] = True
    if getattr(args, "overwrite", False):
        request["overwrite"] = True
    return request


def _emit(document: object) -> None:
    print(json.dumps(document, ensure_ascii=False, indent=2))


def _run_import(args: argparse.Namespace) -> int:
    payload = _load_request(args)
    if args.command == "preview":
        envelope = preview(payload, token=args.token)
    else:
        store = open_configured_store()
        if args.command == "dry-run":
            envelope = dry_run(payload, store=store, token=args.token)
        else:
            envelope = commit(payload, store=store, token=args.token)
    _emit(envelope)
    return 0 if envelope.get("ok") else 1


def _run_validate(args: argparse.Namespace) -> int:
    if args.path is None:
        problems = validate_catalog(store=open_configured_store())
    else:
        records = _read_json(args.path)
        if not isinstance(records, list):
            raise ValueError("Catalog export must be a JSON list of records")  # noqa: TRY004
        problems = validate_catalog(records)
    for problem in problems:
        print(problem)
    log.info("Validation finished with %s problem(s)", len(problems))
    return 1 if problems else 0


def _run_audit(args: argparse.Namespace) -> int:
    store = open_configured_store()
    if store is None:
        log.error("Catalog store is not configured or unreachable")
        return 1
    if args.run_id is not None:
        _emit(run_items(store, _parse_uuid(args.run_id)))
    else:
        _emit(list_runs(store, limit=args.limit))
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command in {"preview", "dry-run", "commit"}:
            exit_code = _run_import(parsed_args)
        elif parsed_args.command == "seed":
            if parsed_args.limit <= 0:
                raise ValueError("--limit must be positive")  # noqa: TRY301
            candidates = run_seed(limit=parsed_args.limit)
            write_seed_file(candidates, parsed_args.output)
            exit_code = 0
        elif parsed_args.command == "validate":
            exit_code = _run_validate(parsed_args)
        elif parsed_args.command == "audit":
            exit_code = _run_audit(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValueError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
