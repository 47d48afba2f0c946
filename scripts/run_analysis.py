#!/usr/bin/env python3
"""
Run the hierarchy / intercompany analysis over two CSV exports and print a report.

Usage:
    python3 scripts/run_analysis.py --hierarchy <path> --transactions <path> [options]

Examples:
    # Bundled demo data, text report
    python3 scripts/run_analysis.py --sample

    # Own exports, JSON for a downstream tool
    python3 scripts/run_analysis.py --hierarchy entities.csv --transactions tb.csv --format json

    # Textual brief for a conversational agent, with tuned weights
    python3 scripts/run_analysis.py --sample --format brief --config strata.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate an entity hierarchy, reconcile IC balances and score entity risk.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--hierarchy",
        type=Path,
        default=None,
        help="Path to the legal-entity hierarchy CSV.",
    )
    parser.add_argument(
        "--transactions",
        type=Path,
        default=None,
        help="Path to the trial-balance / IC balances CSV.",
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Use the bundled sample hierarchy and trial balance.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file overriding analysis settings.",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json", "brief"),
        default="text",
        help="Output format (default: text).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Level for JSON logs on stderr (default: WARNING).",
    )
    return parser.parse_args(argv)


def _render_text(result) -> str:
    from strata_kernel.domain.formatting import format_amount

    lines = [f"Entities: {len(result.entities)}   GL rows: {len(result.rows)}", ""]

    lines.append(f"Hierarchy issues ({len(result.issues)}):")
    for issue in result.issues:
        lines.append(f"  [{issue.severity.value.upper()}] {issue.title}: {issue.entity}")
        lines.append(f"      {issue.desc}")
    if not result.issues:
        lines.append("  none")

    lines.append("")
    lines.append(
        f"IC pairs ({len(result.pairs)}, {len(result.unreconciled_pairs)} unreconciled, "
        f"total gap {format_amount(result.total_gap)}):"
    )
    for pair in result.pairs:
        status = "OK " if pair.reconciled else "GAP"
        flags = " MISSING" if pair.missing else (" ORPHAN" if pair.orphan_payable else "")
        lines.append(
            f"  {status} {pair.from_entity:>6} -> {pair.to_entity:<6} {pair.type:<16} "
            f"sent {format_amount(pair.sender_amt):>8}  recv {format_amount(pair.receiver_amt):>8}  "
            f"gap {format_amount(pair.gap):>8}{flags}"
        )

    lines.append("")
    lines.append("Risk scores:")
    for profile in result.profiles:
        lines.append(
            f"  {profile.score:>3} {profile.band:<8} {profile.entity} ({profile.id})"
        )

    lines.append("")
    lines.append("Audit log:")
    for entry in result.audit_log:
        lines.append(f"  {entry.time} {entry.type.value:<5} {entry.action}: {entry.detail}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.sample and (args.hierarchy is not None or args.transactions is not None):
        print("ERROR: --sample cannot be combined with --hierarchy/--transactions", file=sys.stderr)
        return 2
    if not args.sample and (args.hierarchy is None or args.transactions is None):
        print("ERROR: pass --sample or both --hierarchy and --transactions", file=sys.stderr)
        return 2

    # Lazy imports so we fail fast on args first
    import yaml

    from strata_config import get_default_config, load_config
    from strata_ingestion import load_hierarchy_csv, load_sample_dataset, load_transactions_csv
    from strata_kernel.exceptions import StrataError
    from strata_kernel.logging_config import configure_logging
    from strata_services import AnalysisService, build_context_brief

    configure_logging(level=args.log_level)

    try:
        config = load_config(args.config) if args.config else get_default_config()
        if args.sample:
            sample = load_sample_dataset()
            entities, rows = sample.entities, sample.rows
        else:
            entities = load_hierarchy_csv(args.hierarchy)
            rows = load_transactions_csv(args.transactions)
    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e.filename}", file=sys.stderr)
        return 1
    except yaml.YAMLError as e:
        print(f"ERROR: Malformed config file: {e}", file=sys.stderr)
        return 1
    except StrataError as e:
        print(f"ERROR: [{e.code}] {e}", file=sys.stderr)
        return 1

    result = AnalysisService(config=config).run(entities, rows)

    if args.format == "json":
        print(json.dumps(result.to_dict(), indent=2, default=str))
    elif args.format == "brief":
        print(build_context_brief(result.entities, result.pairs, result.issues, result.profiles))
    else:
        print(_render_text(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
