#!/usr/bin/env python3
"""
Basic usage examples for the appraisal reconciliation library.

This script reconciles two small in-memory annotation sets, prints the
agreement statistics, and shows the document with each span marked.

Requirements:
    pip install -e .
"""

import os
import sys

# Add parent directory to path for development
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from appraisal_reconcile import AnnotationRecord, Document, JudgmentStore, project, reconcile
from appraisal_reconcile.evaluation import compute_statistics
from appraisal_reconcile.export import render_html_report


DOCUMENT = Document(
    content=(
        "The food was great but service was slow. "
        "Our waiter was friendly, though the room was too loud."
    ),
    name="restaurant_review.txt",
)

ANNOTATOR_1 = [
    AnnotationRecord("food was great", "Appreciation", "Attitude", "Reaction", "positive"),
    AnnotationRecord("slow", "Appreciation", "Attitude", "Valuation", "negative"),
    AnnotationRecord("friendly", "Judgement", "Attitude", "Propriety", "positive"),
    AnnotationRecord("too loud", "Appreciation", "Attitude", "Reaction", "negative"),
]

ANNOTATOR_2 = [
    AnnotationRecord("food was great", "Appreciation", "Attitude", "Reaction", "positive"),
    AnnotationRecord("slow", "Appreciation", "Attitude", "Reaction", "negative"),
    AnnotationRecord("friendly", "Judgement", "Attitude", "Propriety", "positive"),
    AnnotationRecord("great", "Appreciation", "Attitude", "Reaction", "positive"),
]


def example_reconcile():
    """Example: Pair the annotators' spans and classify agreement."""
    print("=" * 60)
    print("Example 1: Reconciliation")
    print("=" * 60)

    reconciliation = reconcile(ANNOTATOR_1, ANNOTATOR_2)

    for span in reconciliation.values():
        differing = ", ".join(span.differing_fields())
        suffix = f" (differs on: {differing})" if differing else ""
        print(f"  {span.status.value:<9} {span.text!r}{suffix}")

    print()
    print(compute_statistics(reconciliation).summary())
    return reconciliation


def example_projection(reconciliation):
    """Example: Lay the spans back onto the document."""
    print("\n" + "=" * 60)
    print("Example 2: Projection")
    print("=" * 60)

    projection = project(DOCUMENT, reconciliation)
    print(projection.render(format="inline"))

    # "great" only occurs inside "food was great", which is placed first
    for span in projection.dropped:
        print(f"  not placed: {span.text!r} ({span.status.value})")


def example_report(reconciliation):
    """Example: Record a judgment and render the HTML report."""
    print("\n" + "=" * 60)
    print("Example 3: Reviewer judgments and report")
    print("=" * 60)

    store = JudgmentStore()
    store.update("slow", "sub_category", "Reaction")
    store.update("slow", "notes", "Speed of service is a reaction, not a valuation")
    store.toggle_bookmark("slow")

    html = render_html_report(reconciliation, store)
    print(f"Report is {len(html)} characters; {len(store.bookmarked())} bookmarked example(s)")


def main():
    reconciliation = example_reconcile()
    example_projection(reconciliation)
    example_report(reconciliation)


if __name__ == "__main__":
    main()
