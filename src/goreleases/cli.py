# src/goreleases/cli.py

import argparse
import sys
from typing import List, Optional, Sequence, TextIO

from goreleases import log_utils
from goreleases.catalog.conflicts import find_conflicts
from goreleases.catalog.fetch import fetch_releases
from goreleases.catalog.interfaces import load_releases, releases_to_json
from goreleases.config import fetch_options_from_config, load_config
from goreleases.constants import DEFAULT_SKIP_VERSIONS
from goreleases.constraints import parse_constraints
from goreleases.exceptions import GoReleasesError, InvalidConstraintError
from goreleases.version import Version, parse_version

SELECT_DESCRIPTION = """\
Select matching go versions from a list.

For example, get the newest version of go 1.15 like so:

  goreleases fetch | jq -r '.[].version' \\
    | goreleases select -i -c '~1.15' -n 1 -
"""


def _read_candidates(
    args: Sequence[str], stdin: TextIO, ignore_invalid: bool
) -> List[Version]:
    """
    Parse candidate versions from `args`; a "-" reads the remaining candidates from stdin.

    Raises:
        InvalidVersionError: For an invalid candidate unless `ignore_invalid` is set.
    """
    raw: List[str] = []
    for arg in args:
        if arg == "-":
            raw.extend(line.strip() for line in stdin)
            break
        raw.append(arg)

    versions: List[Version] = []
    for candidate in raw:
        if not candidate:
            continue
        try:
            versions.append(parse_version(candidate))
        except GoReleasesError:
            if ignore_invalid:
                log_utils.logger.debug(f"Ignoring invalid candidate {candidate!r}")
                continue
            raise
    return versions


def run_fetch(args: argparse.Namespace) -> int:
    """Fetch the release catalog and write it as JSON."""
    config = load_config(args.config)
    if config.get("LOG_LEVEL") and not args.log_level:
        log_utils.set_log_level(str(config["LOG_LEVEL"]))
    options = fetch_options_from_config(config)
    if args.exclude is not None:
        options.skip_versions = frozenset(args.exclude)

    releases = fetch_releases(options)
    encoded = releases_to_json(releases) + "\n"
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(encoded)
        log_utils.logger.info(f"Wrote {len(releases)} releases to {args.output}")
    else:
        sys.stdout.write(encoded)
    return 0


def run_check_conflicts(args: argparse.Namespace) -> int:
    """Compare two catalog files; exit 1 when head cannot be merged into base."""
    try:
        base = load_releases(args.base)
        head = load_releases(args.head)
    except (OSError, ValueError) as exc:
        log_utils.logger.error(f"Error reading catalog: {exc}")
        return 2

    conflicts = find_conflicts(base, head)
    if not conflicts:
        log_utils.logger.info("No conflicts found")
        return 0
    sys.stdout.write(
        "found a conflict that prevents automatic merging:\n"
        + "\n".join(conflicts)
        + "\n"
    )
    return 1


def run_select(args: argparse.Namespace) -> int:
    """Print the candidates matching a constraint, newest first."""
    try:
        constraint = parse_constraints(args.constraint)
    except InvalidConstraintError:
        sys.stderr.write(f"invalid constraint: {args.constraint!r}\n")
        return 1
    if args.validate_constraint:
        sys.stdout.write(f"{constraint}\n")
        return 0

    versions = _read_candidates(args.candidates, sys.stdin, args.ignore_invalid)
    for version in constraint.select(versions, max_results=args.max_results):
        sys.stdout.write(f"{version}\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goreleases",
        description="goreleases - build and query the catalog of go releases",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR); overrides the configuration",
    )
    parser.add_argument(
        "--config",
        help="Path to a goreleases.yaml configuration file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser(
        "fetch", help="Fetch releases from the internet and print them as JSON"
    )
    fetch_parser.add_argument(
        "--exclude",
        action="append",
        metavar="VERSION",
        help=(
            "Go version to exclude (can be passed multiple times). Defaults to the "
            f"configured SKIP_VERSIONS ({', '.join(DEFAULT_SKIP_VERSIONS)} because it "
            "was retracted)."
        ),
    )
    fetch_parser.add_argument(
        "--output", "-o", help="Write the catalog to this file instead of stdout"
    )
    fetch_parser.set_defaults(func=run_fetch)

    conflicts_parser = subparsers.add_parser(
        "check-conflicts",
        help="Check that head has no conflicts with base that would prevent automatic merging",
    )
    conflicts_parser.add_argument("base", help="Path to the base catalog file")
    conflicts_parser.add_argument("head", help="Path to the head catalog file")
    conflicts_parser.set_defaults(func=run_check_conflicts)

    select_parser = subparsers.add_parser(
        "select",
        help="Select matching go versions from a list",
        description=SELECT_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    select_parser.add_argument(
        "--constraint", "-c", required=True, help="Constraint to match"
    )
    select_parser.add_argument(
        "--max-results",
        "-n",
        type=int,
        default=0,
        help="Maximum number of results to output",
    )
    select_parser.add_argument(
        "--ignore-invalid",
        "-i",
        action="store_true",
        help="Ignore invalid candidates instead of erroring",
    )
    select_parser.add_argument(
        "--validate-constraint",
        action="store_true",
        help="Just validate the constraint; exits non-zero if invalid",
    )
    select_parser.add_argument(
        "candidates",
        nargs="*",
        help='Candidate versions to consider; "-" reads them from stdin',
    )
    select_parser.set_defaults(func=run_select)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for the goreleases command-line interface.

    Dispatches the fetch, check-conflicts and select subcommands and returns the
    process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        log_utils.set_log_level(args.log_level)

    try:
        return args.func(args)
    except GoReleasesError as exc:
        log_utils.logger.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
