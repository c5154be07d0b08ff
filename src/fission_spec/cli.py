"""Command-line interface for fission-spec."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fission_spec import __version__

_SPEC_DIR_ENV_VAR = "FISSION_SPEC_DIR"
_DEFAULT_SPEC_DIR = "specs"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fission-spec",
        description="Manage Fission spec directories.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser(
        "init",
        help="Create a spec directory with a README and a deployment config.",
    )
    init_parser.add_argument(
        "--specdir",
        type=Path,
        default=None,
        help=(
            "Directory to store specs in. Overrides the FISSION_SPEC_DIR env var. "
            "Default: specs."
        ),
    )
    init_parser.add_argument(
        "--name",
        type=str,
        default="",
        help="Name for the app. Defaults to the current directory name.",
    )
    init_parser.add_argument(
        "--deployid",
        dest="deploy_id",
        type=str,
        default="",
        help="Deployment ID for the spec deployment config. Default: a random UUID.",
    )
    init_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log each filesystem step to stderr.",
    )

    return parser


def resolve_spec_dir(cli_value: Path | None = None) -> Path:
    """Return the spec directory after applying precedence rules."""
    import os

    if cli_value is not None:
        return cli_value
    env_value = (os.environ.get(_SPEC_DIR_ENV_VAR) or "").strip()
    return Path(env_value or _DEFAULT_SPEC_DIR)


def _init_command(spec_dir: Path, name: str, deploy_id: str) -> int:
    """Execute the 'init' subcommand."""
    from fission_spec.init import ConfigAlreadyExistsError, SpecInitError, SpecInitializer

    initializer = SpecInitializer(spec_dir, name=name, deploy_id=deploy_id)
    print(f"Creating fission spec directory '{spec_dir}'")
    try:
        result = initializer.execute()
    except ConfigAlreadyExistsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        existing_uid = _read_existing_uid(initializer.config_path)
        if existing_uid is not None:
            print(f"Existing deployment UID: {existing_uid}", file=sys.stderr)
        return 1
    except SpecInitError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Wrote {result.readme_path}")
    print(f"Wrote {result.config_path} (name: {result.config.name}, uid: {result.config.uid})")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        if args.verbose:
            _configure_logging()
        spec_dir = resolve_spec_dir(args.specdir)
        name: str = args.name
        deploy_id: str = args.deploy_id
        return _init_command(spec_dir, name, deploy_id)

    # No subcommand, print help.
    parser.print_help()
    return 0


def _read_existing_uid(config_path: Path) -> str | None:
    from fission_spec.config import DeploymentConfigError, load_deployment_config

    try:
        return load_deployment_config(config_path).uid
    except (OSError, DeploymentConfigError):
        return None


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
