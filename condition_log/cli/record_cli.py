"""
Command-line interface for recording device-condition observations.

Usage:
    python -m condition_log.cli.record_cli submit --field operator_id=op_1 --field device_id=dev-42 ...
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from condition_log.config import SINK_NAMES, Settings
from condition_log.core.fields import FIELD_LABELS
from condition_log.core.rules import ConfigurationError, RuleEngine
from condition_log.observability import setup_logger
from condition_log.observability.metrics import generate_metrics
from condition_log.storage import CsvSink, FormatError, JsonDocumentSink
from condition_log.store import RecordStore

logger = logging.getLogger(__name__)


def parse_fields(pairs: list[str] | None) -> dict[str, str]:
    """
    Parse repeated ``key=value`` arguments into a field map.

    Raises:
        argparse.ArgumentTypeError: If an item has no '='
    """
    fields: dict[str, str] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(f"Expected key=value, got '{pair}'")
        key, value = pair.split("=", 1)
        fields[key.strip()] = value
    return fields


def build_settings(args) -> Settings:
    overrides = {
        "destination_dir": getattr(args, "dest", None),
        "rules_path": getattr(args, "rules", None),
    }
    if getattr(args, "sink", None):
        overrides["sinks"] = args.sink
    return Settings.from_env(env_file=args.env_file, **overrides)


def print_messages(messages_by_field: dict[str, str]) -> None:
    for field_name, message in messages_by_field.items():
        print(f"  {FIELD_LABELS.get(field_name, field_name)}: {message}")


def validate_command(args, settings: Settings) -> int:
    with RecordStore(settings) as store:
        report = store.validate(parse_fields(args.field))

    if report.ok:
        print("Valid")
        return 0
    print("Invalid:")
    print_messages(report.messages_by_field)
    return 1


def submit_command(args, settings: Settings) -> int:
    with RecordStore(settings) as store:
        result = store.persist(parse_fields(args.field))

    if args.metrics_file:
        write_metrics(args.metrics_file)

    for warning in result.warnings:
        print(f"WARNING: {warning}")

    if result.ok:
        print(f"Device added successfully: {result.record_id}")
        return 0
    if result.messages_by_field:
        print("Invalid:")
        print_messages(result.messages_by_field)
        return 1

    print(f"Failed to save device data: {result.error_detail}")
    return 2


def write_metrics(path: str) -> None:
    """Write this process's counters in Prometheus text format (textfile collector style)."""
    metrics_path = Path(path)
    metrics_path.parent.mkdir(parents=True, exist_ok=True)
    metrics_path.write_bytes(generate_metrics())
    logger.info(f"Metrics written to {metrics_path}")


def show_command(args, settings: Settings) -> int:
    if args.format == "csv":
        sink = CsvSink(settings.csv_path)
        if not sink.path.exists():
            print(f"No records at {sink.path}")
            return 0
        records = sink.read_records()
    else:
        json_sink = JsonDocumentSink(settings.json_path)
        if not json_sink.path.exists():
            print(f"No records at {json_sink.path}")
            return 0
        records = json_sink.read_document()

    for record in records:
        print(json.dumps(record, ensure_ascii=False))
    return 0


def rules_command(args, settings: Settings) -> int:
    summary = RuleEngine(settings.load_rules()).get_rule_summary()
    print(json.dumps(summary, indent=2))
    return 0


COMMANDS = {
    "validate": validate_command,
    "submit": submit_command,
    "show": show_command,
    "rules": rules_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record device-condition observations to CSV and JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a submission without writing anything
  condition-log validate --field operator_id=op_1 --field device_id=dev-42

  # Persist to both sinks under ./data
  condition-log submit --field operator_id=op_1 --field device_id=dev-42 \\
      --field status=Online --field action_type=Check --dest data

  # Print the stored CSV log
  condition-log show --format csv --dest data
        """
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: ./.env)")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (("validate", "Validate a field map"), ("submit", "Validate and persist a field map")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--field",
            action="append",
            metavar="KEY=VALUE",
            help="Field value; repeat for each field",
        )
        sub.add_argument("--rules", default=None, help="Path to a rule YAML file")
        sub.add_argument("--dest", default=None, help="Destination directory for both sinks")
        if name == "submit":
            sub.add_argument(
                "--sink",
                action="append",
                choices=list(SINK_NAMES),
                help="Sink to write to; repeat for several (default: CONDITION_LOG_SINKS or all)",
            )
            sub.add_argument(
                "--metrics-file",
                default=None,
                help="Also write submission metrics to this file in Prometheus text format",
            )

    show_parser = subparsers.add_parser("show", help="Print stored records")
    show_parser.add_argument("--dest", default=None, help="Destination directory for both sinks")
    show_parser.add_argument("--format", default="csv", choices=list(SINK_NAMES), help="Which sink to read")

    rules_parser = subparsers.add_parser("rules", help="Print the active rule chains")
    rules_parser.add_argument("--rules", default=None, help="Path to a rule YAML file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = build_settings(args)
        setup_logger(
            "condition_log",
            level=args.log_level or settings.log_level,
            format_type=settings.log_format,
            log_file=settings.log_file,
        )
        return COMMANDS[args.command](args, settings)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except (ConfigurationError, FormatError, OSError, ValueError) as e:
        logger.error(f"Error running {args.command}: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
