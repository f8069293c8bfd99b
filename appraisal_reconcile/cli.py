"""
Command-line interface for the reconciliation library.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .adjudicator import Adjudicator
from .config import ReviewConfig
from .core import AgreementStatus
from .errors import AppraisalReconcileError
from .evaluation import compute_statistics, differences_only
from .export import export_csv, render_html_report
from .ingestion import RESOLVERS, ExplicitColumnResolver
from .judgments import JudgmentStore
from .llm_client import get_client, list_providers
from .session import ReviewSession


def _add_inputs(parser):
    parser.add_argument("document", help="Source document (text file)")
    parser.add_argument("annotator_a", help="Annotator 1 CSV file")
    parser.add_argument("annotator_b", help="Annotator 2 CSV file")
    parser.add_argument(
        "--resolver",
        choices=sorted(RESOLVERS),
        help="Column resolver (default: heuristic, or APPRAISAL_RESOLVER)",
    )
    parser.add_argument(
        "--columns",
        help="Explicit header names, e.g. text=Span,role=Role,polarity=Polarity",
    )


def _add_judgments(parser, required=False):
    parser.add_argument(
        "--judgments", "-j",
        required=required,
        help="Reviewer judgments JSON file (default: APPRAISAL_JUDGMENTS_PATH)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appraisal-reconcile",
        description="Reconcile two annotators' appraisal annotations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Agreement table for two annotators
  appraisal-reconcile reconcile review.txt ann1.csv ann2.csv

  # Show the document with each span marked by its agreement status
  appraisal-reconcile render review.txt ann1.csv ann2.csv --format inline

  # Record a reviewer judgment and bookmark it
  appraisal-reconcile judge "food was great" --polarity positive --bookmark

  # Export an HTML report with the reviewer judgments
  appraisal-reconcile export review.txt ann1.csv ann2.csv -o report.html
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Reconcile command
    reconcile_parser = subparsers.add_parser("reconcile", help="Pair the annotators' spans")
    _add_inputs(reconcile_parser)
    reconcile_parser.add_argument(
        "--format", "-f",
        choices=["table", "json"],
        default="table",
        help="Output format",
    )
    reconcile_parser.add_argument(
        "--differences-only", "-d",
        action="store_true",
        help="Hide spans both annotators labeled identically",
    )

    # Render command
    render_parser = subparsers.add_parser("render", help="Render the document with agreement marks")
    _add_inputs(render_parser)
    render_parser.add_argument(
        "--format", "-f",
        choices=["inline", "html", "json"],
        default="inline",
        help="Output format",
    )
    render_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Agreement statistics")
    _add_inputs(stats_parser)

    # Export command
    export_parser = subparsers.add_parser("export", help="Export a review report")
    _add_inputs(export_parser)
    _add_judgments(export_parser)
    export_parser.add_argument(
        "--format", "-f",
        choices=["html", "csv"],
        default="html",
        help="Report format",
    )
    export_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    # Judge command
    judge_parser = subparsers.add_parser("judge", help="Record a reviewer judgment for a span")
    judge_parser.add_argument("text", help="Span text, exactly as annotated")
    _add_judgments(judge_parser)
    judge_parser.add_argument("--role")
    judge_parser.add_argument("--main-category")
    judge_parser.add_argument("--sub-category")
    judge_parser.add_argument("--polarity")
    judge_parser.add_argument("--notes")
    judge_parser.add_argument("--source", help="Provenance, e.g. page number")
    judge_parser.add_argument("--bookmark", action="store_true", help="Toggle the bookmark")

    # Suggest command
    suggest_parser = subparsers.add_parser("suggest", help="Draft judgments for disputed spans with an LLM")
    _add_inputs(suggest_parser)
    _add_judgments(suggest_parser)
    suggest_parser.add_argument(
        "--provider",
        choices=list_providers(),
        help="LLM provider (default: anthropic, or APPRAISAL_LLM_PROVIDER)",
    )
    suggest_parser.add_argument("--model", help="Model to use (provider-specific)")
    suggest_parser.add_argument(
        "--status",
        nargs="+",
        choices=[s.value for s in AgreementStatus],
        default=[AgreementStatus.OVERLAP.value],
        help="Statuses to adjudicate",
    )
    suggest_parser.add_argument(
        "--save",
        action="store_true",
        help="Store drafts for spans that have no judgment yet",
    )

    # List resolvers command
    subparsers.add_parser("list-resolvers", help="List available column resolvers")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    commands = {
        "reconcile": run_reconcile,
        "render": run_render,
        "stats": run_stats,
        "export": run_export,
        "judge": run_judge,
        "suggest": run_suggest,
        "list-resolvers": lambda _args: run_list_resolvers(),
    }
    if args.command not in commands:
        parser.print_help()
        return 0

    try:
        commands[args.command](args)
    except AppraisalReconcileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def _config(args) -> ReviewConfig:
    return ReviewConfig.from_env(
        document_path=getattr(args, "document", None),
        annotator_a_path=getattr(args, "annotator_a", None),
        annotator_b_path=getattr(args, "annotator_b", None),
        judgments_path=getattr(args, "judgments", None),
        resolver=getattr(args, "resolver", None),
        provider=getattr(args, "provider", None),
        model=getattr(args, "model", None),
    )


def _parse_columns(spec: str) -> dict[str, str]:
    columns = {}
    for item in spec.split(","):
        field_name, sep, header = item.partition("=")
        if not sep:
            raise ValueError(f"Expected field=header, got {item!r}")
        columns[field_name.strip()] = header.strip()
    return columns


def _load_session(args) -> ReviewSession:
    config = _config(args)
    resolver = None
    if args.columns:
        try:
            resolver = ExplicitColumnResolver(_parse_columns(args.columns))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)
    elif config.resolver == "explicit":
        print("Error: --columns is required with the explicit resolver", file=sys.stderr)
        sys.exit(2)
    return ReviewSession.load(config, resolver=resolver)


def _write(output: str, path=None):
    if path:
        Path(path).write_text(output, encoding="utf-8")
        print(f"Output written to: {path}", file=sys.stderr)
    else:
        print(output)


def run_reconcile(args):
    """Print the reconciled spans."""
    session = _load_session(args)
    spans = (
        list(differences_only(session.reconciliation))
        if args.differences_only
        else list(session.reconciliation.values())
    )

    if args.format == "json":
        print(json.dumps([span.to_dict() for span in spans], indent=2, ensure_ascii=False))
        return

    print(f"{'STATUS':<10} {'ANNOTATOR 1':<40} {'ANNOTATOR 2':<40} TEXT")
    print("-" * 110)
    for span in spans:
        labels_a = "/".join(span.annotator_a.labels()) if span.annotator_a else "-"
        labels_b = "/".join(span.annotator_b.labels()) if span.annotator_b else "-"
        print(f"{span.status.value:<10} {labels_a:<40} {labels_b:<40} {span.text}")

    print(f"\n{len(spans)} spans", file=sys.stderr)


def run_render(args):
    """Render the document with each placed span marked."""
    session = _load_session(args)
    projection = session.projection
    _write(projection.render(format=args.format), args.output)

    print("\nSummary:", file=sys.stderr)
    print(f"  Spans placed: {len(projection.placed)}", file=sys.stderr)
    print(f"  Spans not found in document: {len(projection.dropped)}", file=sys.stderr)


def run_stats(args):
    """Print agreement statistics."""
    session = _load_session(args)
    print(compute_statistics(session.reconciliation).summary())


def run_export(args):
    """Export an HTML or CSV report joined with the reviewer judgments."""
    session = _load_session(args)
    store = JudgmentStore(_config(args).judgments_path).load()

    if args.format == "csv":
        output = export_csv(session.reconciliation, store)
    else:
        output = render_html_report(session.reconciliation, store)
    _write(output, args.output)


def run_judge(args):
    """Update one reviewer judgment and save the store."""
    store = JudgmentStore(_config(args).judgments_path).load()

    updates = {
        "role": args.role,
        "main_category": args.main_category,
        "sub_category": args.sub_category,
        "polarity": args.polarity,
        "notes": args.notes,
        "source": args.source,
    }
    for field_name, value in updates.items():
        if value is not None:
            store.update(args.text, field_name, value)
    if args.bookmark:
        store.toggle_bookmark(args.text)

    path = store.save()
    judgment = store.get(args.text)
    print(json.dumps({args.text: {**judgment.to_dict(), "source": judgment.source}}, indent=2, ensure_ascii=False))
    print(f"Saved {len(store)} judgments to {path}", file=sys.stderr)


def run_suggest(args):
    """Draft judgments for disputed spans."""
    session = _load_session(args)
    config = _config(args)

    try:
        client = get_client(config.provider, **config.client_kwargs())
    except (ValueError, ImportError) as e:
        print(f"Error creating LLM client: {e}", file=sys.stderr)
        sys.exit(1)

    adjudicator = Adjudicator(client=client)
    statuses = [AgreementStatus(value) for value in args.status]
    print(f"Adjudicating spans with status: {', '.join(args.status)}", file=sys.stderr)

    results = adjudicator.suggest_all(session.reconciliation, session.document, statuses=statuses)
    print(json.dumps([r.to_dict() for r in results.values()], indent=2, ensure_ascii=False))

    if args.save:
        store = JudgmentStore(config.judgments_path).load()
        added = 0
        for text, result in results.items():
            if result.judgment is not None and text not in store:
                store.set(text, result.judgment)
                added += 1
        store.save()
        print(f"Stored {added} new drafts in {store.path}", file=sys.stderr)

    failed = sum(1 for r in results.values() if not r.succeeded)
    print(f"\nDrafted {len(results) - failed} of {len(results)} judgments", file=sys.stderr)


def run_list_resolvers():
    """List available column resolvers."""
    print("Available Column Resolvers:")
    print("-" * 40)

    for name, cls in RESOLVERS.items():
        print(f"\n{name}")
        print(f"  {cls.description}")


if __name__ == "__main__":
    sys.exit(main())
