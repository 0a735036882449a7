from __future__ import annotations

import argparse
import json
import sys

from .config import load_settings
from .errors import BuildConfigError
from .observability import configure_logging, get_logger
from .pipeline import run_pass
from .publisher import ConfigPublisher


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gassight-build",
        description="Resolve the effective build configuration for one variant",
    )
    p.add_argument("build_type", nargs="?", default="debug", help="build type to resolve (debug, release, ...)")
    p.add_argument("--properties", default="local.properties", help="local properties file (optional)")
    p.add_argument("--settings", default="configs/build.yaml", help="project settings YAML (optional)")
    p.add_argument("--output", default=None, help="also write the resolved configuration as JSON here")
    p.add_argument("--no-dotenv", action="store_true", help="do not load .env next to the settings file")
    p.add_argument("--log-level", default="WARNING", help="log level")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(level=args.log_level)
    log = get_logger("gassight_build.cli")

    try:
        settings = load_settings(args.settings, load_dotenv_file=not args.no_dotenv)
        publisher = ConfigPublisher(args.output)
        run_pass(args.properties, args.build_type, settings=settings, publisher=publisher)
    except BuildConfigError as e:
        log.debug("cli_abort", error=type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 2

    json.dump(dict(publisher.snapshot), sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")
    return 0
