# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command line entry point for the ``modfs-conformance`` executable.

Example invocation::

    modfs-conformance --module=/path/to/one.py --module=my_pkg.plugin \
        --scheme= --scheme=file

An empty ``--scheme=`` value selects the local (no scheme) backend. Without
any ``--scheme`` flag every available scheme is tested.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from ..conformance import (
    SCENARIOS,
    ConformanceRunner,
    HarnessContext,
    RunReport,
    select_scenarios,
)
from ..runtime.logging import configure_logging, get_logger
from .config import ConfigError, HarnessConfig, load_config

EXIT_USAGE = 2


def main(argv: Sequence[str] | None = None) -> int:
    """Run the conformance harness and return the process exit code."""

    parser = _build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:  # argparse exits with code 2 on errors
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return int(code)

    configure_logging(level=args.log_level, json_mode=args.json_logs)
    logger = get_logger(__name__)

    if args.list_scenarios:
        for scenario in SCENARIOS:
            print(f"{scenario.name}\t{scenario.operation}")
        return 0

    try:
        config = load_config(
            Path(args.config) if args.config is not None else None,
            _cli_overrides(args),
        )
        scenarios = select_scenarios(config.scenarios)
    except (ConfigError, KeyError) as error:
        logger.error(
            "Invalid harness configuration.",
            event="modfs.cli.config_error",
            context={"error": str(error)},
        )
        print(str(error), file=sys.stderr)
        return EXIT_USAGE

    harness = HarnessContext.create(
        modules=config.modules,
        schemes=config.schemes or (),
        base_dir=config.tmp_dir,
    )
    report = ConformanceRunner(harness, scenarios=scenarios).run()
    _render(report, config, sys.stdout)
    return report.exit_code


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modfs-conformance",
        description="Check filesystem backends against the modfs conformance scenarios.",
    )
    _ = parser.add_argument(
        "--module",
        dest="modules",
        action="append",
        default=None,
        metavar="PATH",
        help="Backend plugin to load (dotted module or .py file). Repeatable.",
    )
    _ = parser.add_argument(
        "--scheme",
        dest="schemes",
        action="append",
        default=None,
        metavar="SCHEME",
        help="URI scheme to test; use an empty value for local paths. Repeatable.",
    )
    _ = parser.add_argument(
        "--scenario",
        dest="scenarios",
        action="append",
        default=None,
        metavar="NAME",
        help="Only run the named scenario. Repeatable.",
    )
    _ = parser.add_argument(
        "--list-scenarios",
        action="store_true",
        help="Print the scenario catalog and exit.",
    )
    _ = parser.add_argument(
        "--config",
        default=None,
        help="TOML or YAML configuration file (default: ~/.config/modfs/config.toml).",
    )
    _ = parser.add_argument(
        "--tmp-dir",
        default=None,
        help="Directory in which per-scenario roots are created.",
    )
    _ = parser.add_argument(
        "--format",
        dest="output_format",
        choices=("text", "json"),
        default=None,
        help="Report format written to stdout.",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"),
        default=None,
        help="Override the log level emitted by the harness.",
    )
    _ = parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit structured JSON logs on stderr (disable with --no-json-logs).",
    )
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, object]:
    return {
        "modules": tuple(args.modules) if args.modules is not None else None,
        "schemes": tuple(args.schemes) if args.schemes is not None else None,
        "scenarios": tuple(args.scenarios) if args.scenarios is not None else None,
        "tmp_dir": args.tmp_dir,
        "output_format": args.output_format,
    }


def _render(report: RunReport, config: HarnessConfig, out: TextIO) -> None:
    if config.output_format == "json":
        print(json.dumps(report.to_dict(), indent=2, sort_keys=True), file=out)
        return

    if not report.schemes:
        print("No filesystem schemes selected; nothing to test.", file=out)
    for result in report.results:
        print(result.describe(), file=out)

    summary = report.summary()
    print(
        f"\n{summary['passed']} passed, {summary['skipped']} skipped, "
        f"{summary['failed']} failed across {len(report.schemes)} scheme(s).",
        file=out,
    )
    if report.failed:
        print("Failed scenarios:", file=out)
        for result in report.failed:
            print(f"  {result.instance_name}: {result.verdict.reason}", file=out)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
