#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from maskperms.adapters.catalogue import CatalogueError
from maskperms.adapters.sqlalchemy.unit_of_work import StartupError
from maskperms.app import (
    build_reconciler,
    create_group,
    save_masks,
    select_masks,
    show_status,
    update_groups,
)
from maskperms.config import ConfigurationError, configure_logging
from maskperms.domain import GroupNotFoundError, MaskPermissionsError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from maskperms.domain import ReconcileResult

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Manage MASK element permissions of backend groups"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show which groups lack catalogue element types")

    update = subparsers.add_parser("update", help="Merge the catalogue into group allow-lists")
    update.add_argument(
        "--group",
        type=int,
        help="Only update this group id (default: every group)",
    )

    show = subparsers.add_parser("show", help="Show the element types enabled for a group")
    show.add_argument("--group", type=int, required=True, help="Group id")

    select = subparsers.add_parser("select", help="Set the element types enabled for a group")
    select.add_argument("--group", type=int, required=True, help="Group id")
    select.add_argument(
        "--mask",
        dest="masks",
        action="append",
        default=[],
        help="Element type identifier to enable; repeat for several, omit to clear",
    )

    subparsers.add_parser("catalogue", help="List the assignable element types")

    group = subparsers.add_parser("group", help="Group management commands")
    group_sub = group.add_subparsers(dest="group_command", required=True)
    group_create = group_sub.add_parser("create", help="Create a group")
    group_create.add_argument("--title", type=str, required=True, help="Group title")
    group_create.add_argument("--description", type=str, help="Optional description")
    group_create.add_argument("--uid", type=int, help="Explicit group id")

    return parser.parse_args(list(argv))


def _report(result: ReconcileResult, *, ok: str, failed: str) -> None:
    if result.succeeded:
        print(ok)
        return
    print(failed)
    for failure in result.failed:
        print(f"  group {failure.group_id}: {failure.reason}")


def _run(args: argparse.Namespace) -> int:
    if args.command == "status":
        overview = show_status()
        for status in overview.groups:
            marker = "update needed" if status.needs_update else "up to date"
            print(f"{status.group_id:>5}  {status.title:<30} {marker}")
            if status.missing:
                print(f"       missing: {', '.join(sorted(status.missing))}")
        print(f"Update all available: {'yes' if overview.can_update else 'no'}")
        return 0

    if args.command == "update":
        result = update_groups(args.group)
        _report(result, ok="Update successful!", failed="Update failed.")
        return 0 if result.succeeded else 1

    if args.command == "show":
        selection = select_masks(args.group)
        print(f"Group {selection.group_id}: {selection.title}")
        for element in selection.available:
            checked = "x" if element.identifier in selection.selected else " "
            print(f"  [{checked}] {element.identifier}  {element.label}")
        unknown = sorted(
            identifier for identifier in selection.selected if identifier not in selection.available
        )
        for identifier in unknown:
            print(f"  [x] {identifier}  (not in catalogue)")
        return 0

    if args.command == "select":
        result = save_masks(args.group, args.masks)
        _report(result, ok="MASK permissions saved.", failed="MASK permissions save failed.")
        return 0 if result.succeeded else 1

    if args.command == "catalogue":
        for element in build_reconciler().available_element_types():
            print(f"{element.identifier}\t{element.label}")
        return 0

    if args.command == "group" and args.group_command == "create":
        group = create_group(args.title, description=args.description, uid=args.uid)
        print(f"Created group {group.uid}: {group.title}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _run(parsed_args)
    except GroupNotFoundError as exc:
        print(f"Group not found: {exc.group_id}", file=sys.stderr)
        sys.exit(1)
    except (
        ConfigurationError,
        CatalogueError,
        MaskPermissionsError,
        StartupError,
        SQLAlchemyError,
    ) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
