"""Command-line interface for compiling page modules."""

import argparse
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable, Optional

from .engine import Sculptor
from .io_utils import stable_json_dumps
from .models import EngineSettings, RenderConfig, load_render_config


def _load_page_module(path: Path) -> ModuleType:
    if not path.exists():
        raise SystemExit(f"Page module not found: {path}")
    spec = importlib.util.spec_from_file_location(f"sculptor_page_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise SystemExit(f"Cannot import page module: {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    if not callable(getattr(module, "build", None)):
        raise SystemExit(f"{path} must define build(app) returning the page root.")
    return module


def _render_config(args: argparse.Namespace) -> RenderConfig:
    config = load_render_config(Path(args.config)) if args.config else RenderConfig()
    if args.title:
        config = config.model_copy(update={"title": args.title})
    return config


def _handle_build(args: argparse.Namespace) -> None:
    page = _load_page_module(Path(args.page))
    app = Sculptor(EngineSettings(deterministic=args.deterministic, lenient=args.lenient))
    root = page.build(app)

    app.render(root, _render_config(args))
    if app.last_error is not None:
        raise SystemExit(f"Render failed: {app.last_error}")

    app.save(args.out)
    if app.last_error is not None:
        raise SystemExit(str(app.last_error))

    print(f"Wrote {args.out}.")


def _handle_check_config(args: argparse.Namespace) -> None:
    config = load_render_config(Path(args.config))
    sys.stdout.write(stable_json_dumps(config.model_dump()))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile fluent page modules into static HTML.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log render and save progress.",
    )
    subparsers = parser.add_subparsers(dest="command")

    build_parser = subparsers.add_parser(
        "build",
        help="Render a page module to an HTML file.",
        description="Import PAGE, call build(app), render and save the document.",
    )
    build_parser.add_argument("page", help="Python file defining build(app).")
    build_parser.add_argument("--out", default="index.html", help="Output HTML path.")
    build_parser.add_argument("--config", default=None, help="YAML file with head configuration.")
    build_parser.add_argument("--title", default=None, help="Override the page title.")
    build_parser.add_argument(
        "--deterministic",
        action="store_true",
        help="Derive generated id suffixes from counters so rebuilds are identical.",
    )
    build_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Warn and skip unsupported children instead of failing.",
    )
    build_parser.set_defaults(func=_handle_build)

    check_parser = subparsers.add_parser(
        "check-config",
        help="Validate a head configuration file.",
        description="Validate a YAML head configuration and print it normalized.",
    )
    check_parser.add_argument("config", help="YAML file with head configuration.")
    check_parser.set_defaults(func=_handle_check_config)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(message)s",
    )
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()
