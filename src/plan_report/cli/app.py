"""Command-line interface implementation for the plan report tooling."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Sequence

from ..adapters import PlanLoaderError
from ..config import Settings, SettingsError, SettingsLoader
from ..rendering import OutputFormat, RenderOptions, UnsupportedFormatError
from ..service import PlanReportService, ReportResult

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(prog="iac-plan-report", description="Terraform plan report CLI")
    subparsers = parser.add_subparsers(dest="command")

    summary_parser = subparsers.add_parser(
        "summary", help="Summarize a Terraform plan with risk annotations."
    )
    summary_parser.add_argument(
        "plan",
        type=Path,
        help="Terraform plan exported with `terraform show -json`, or a binary plan file.",
    )
    summary_parser.add_argument(
        "--format",
        dest="output_format",
        default=OutputFormat.TABLE.value,
        help=f"Output format for the report ({', '.join(OutputFormat.names())}).",
    )
    summary_parser.add_argument(
        "--output-file",
        type=Path,
        default=None,
        help="Additionally write the report to this file.",
    )
    summary_parser.add_argument(
        "--output-file-format",
        default=None,
        help="Format used for --output-file. Defaults to --format.",
    )
    summary_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file merged over iac-plan-report.yaml.",
    )
    summary_parser.add_argument(
        "--expand-all",
        action="store_true",
        help="Expand every collapsible section and property list.",
    )
    summary_parser.add_argument(
        "--no-auto-expand-dangerous",
        dest="auto_expand_dangerous",
        action="store_false",
        default=None,
        help="Do not expand high risk rows automatically.",
    )
    summary_parser.add_argument(
        "--show-no-ops",
        action="store_true",
        help="Include resources and outputs that do not change.",
    )
    summary_parser.add_argument(
        "--no-details",
        dest="show_details",
        action="store_false",
        default=None,
        help="Only list resource changes classified as medium or high risk.",
    )
    summary_parser.add_argument(
        "--fail-on-high-risk",
        action="store_true",
        help="Exit with status 1 when the plan contains high risk changes.",
    )
    summary_parser.add_argument(
        "--terraform-bin",
        default=None,
        help="Name or path of the Terraform executable used to read binary plans.",
    )
    summary_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Emit debug logging on stderr.",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def create_service() -> PlanReportService:
    """Create a report service using the Terraform plan loader."""

    return PlanReportService()


def _render_options(settings: Settings, args: argparse.Namespace) -> RenderOptions:
    overrides: Dict[str, Any] = {}
    if args.expand_all:
        overrides["expand_all"] = True
    if args.show_no_ops:
        overrides["show_no_ops"] = True
    if args.show_details is not None:
        overrides["show_details"] = args.show_details
    if args.auto_expand_dangerous is not None:
        overrides["auto_expand_dangerous"] = args.auto_expand_dangerous
    return replace(settings.render, **overrides)


def _write_output_file(
    service: PlanReportService,
    result: ReportResult,
    path: Path,
    output_format: OutputFormat,
    options: RenderOptions,
) -> None:
    if output_format is result.output_format:
        content = result.content
    else:
        content = service.render(result.summary, output_format, options=options)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s report to %s", output_format.value, path)


def _handle_summary(args: argparse.Namespace) -> int:
    try:
        output_format = OutputFormat.parse(args.output_format)
        file_format = OutputFormat.parse(args.output_file_format or output_format)
        settings = SettingsLoader().load(args.config)
    except (UnsupportedFormatError, SettingsError) as exc:
        print(f"Error: {exc}")
        return 2

    options = _render_options(settings, args)
    service = create_service()

    try:
        result = service.generate(
            args.plan.resolve(),
            output_format=output_format,
            options=options,
            risk_settings=settings.risk,
            terraform_bin=args.terraform_bin or settings.terraform_bin,
        )
    except (PlanLoaderError, ValueError) as exc:
        print(f"Error: {exc}")
        return 2

    print(result.content, end="")

    if args.output_file is not None:
        try:
            _write_output_file(service, result, args.output_file, file_format, options)
        except OSError as exc:
            print(f"Error: Failed to write {args.output_file}: {exc}")
            return 2

    if args.fail_on_high_risk and result.summary.statistics.high_risk:
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "summary":
        configure_logging(args.verbose)
        return _handle_summary(args)

    parser.print_help()
    return 0


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
