"""Command-line interface for sdkinject."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sdkinject.errors import IntegrationError
from sdkinject.sdk import SdkModule, parse_modules
from sdkinject.steps import StepContext, apply_actions, run_steps


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    project_dir: Path
    app_secret: str
    modules: SdkModule
    remove: bool
    indent: str | None
    dry_run: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="sdkinject",
        description="Add the Mobile Center SDK to an iOS application",
    )
    p.add_argument(
        "-p",
        "--project",
        default=".",
        metavar="DIR",
        help="Path to the iOS project (default: current directory)",
    )
    p.add_argument("-s", "--app-secret", metavar="SECRET", help="Mobile Center app secret")
    p.add_argument("--analytics", action="store_true", help="Enable the Analytics module")
    p.add_argument("--crashes", action="store_true", help="Enable the Crashes module")
    p.add_argument("--distribute", action="store_true", help="Enable the Distribute module")
    p.add_argument(
        "--remove",
        action="store_true",
        help="Remove the SDK pods, imports and start call instead of adding them",
    )
    p.add_argument(
        "--indent",
        type=int,
        default=None,
        metavar="N",
        help="Spaces before an inserted start call (default: 8 Swift, 4 Objective-C)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover sdkinject.toml in the project)",
    )
    p.add_argument("--dry-run", action="store_true", help="Print a diff instead of writing")
    p.add_argument("--debug", action="store_true", help="Dump AppDelegate scan results to stderr")
    return p


def load_config(config_path: Path | None, project_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else project_dir / "sdkinject.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    project_dir = Path(args.project)
    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, project_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from None

    remove = args.remove or config.get("remove") is True

    app_secret = args.app_secret
    if app_secret is None and isinstance(config.get("app_secret"), str):
        app_secret = config["app_secret"]
    if not app_secret and not remove:
        raise argparse.ArgumentTypeError("please specify your app secret (-s)")

    # Modules: CLI flags replace the config list when any is given
    cli_modules = [
        name
        for name, enabled in (
            ("analytics", args.analytics),
            ("crashes", args.crashes),
            ("distribute", args.distribute),
        )
        if enabled
    ]
    names: list[str] = cli_modules
    cfg_modules = config.get("modules")
    if not cli_modules and isinstance(cfg_modules, list):
        names = [str(m) for m in cfg_modules]
    try:
        modules = parse_modules(names)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None
    if remove and modules == SdkModule.NONE:
        modules = SdkModule.ALL

    indent: str | None = None
    cfg_indent = config.get("indent")
    if isinstance(cfg_indent, int) and not isinstance(cfg_indent, bool):
        indent = " " * cfg_indent
    if args.indent is not None:
        indent = " " * args.indent

    return CliOptions(
        project_dir=project_dir,
        app_secret=app_secret or "",
        modules=modules,
        remove=remove,
        indent=indent,
        dry_run=args.dry_run,
        debug=args.debug,
    )


def _dump_debug(ctx: StepContext) -> None:
    from sdkinject import rules_for
    from sdkinject.debug import dump_bag, dump_scan

    if ctx.project is None or ctx.app_delegate_bag is None:
        return
    found = rules_for(ctx.project.app_delegate.name)
    if found is None:
        return
    dump_bag(ctx.app_delegate_bag, ctx.app_delegate_source)
    dump_scan(ctx.app_delegate_source, found[0].QUOTES)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    ctx = StepContext(
        root=options.project_dir,
        app_secret=options.app_secret,
        modules=options.modules,
        remove=options.remove,
        indent=options.indent,
    )
    try:
        actions = run_steps(ctx)
    except IntegrationError as exc:
        if options.debug:
            _dump_debug(ctx)
        print(str(exc), file=sys.stderr)
        return 1

    if options.debug:
        _dump_debug(ctx)

    if options.dry_run:
        for action in actions:
            sys.stdout.write(action.diff())
        return 0

    apply_actions(actions)
    for action in actions:
        status = "updated" if action.changed else "unchanged"
        print(f"{status} {action.path}", file=sys.stderr)
    return 0
