"""
LLM-assisted drafting of reviewer judgments for disputed spans.

The drafts are suggestions for a human reviewer: nothing here writes to a
JudgmentStore. Callers decide whether to keep a draft.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Union

from .core import AgreementStatus, AnnotationRecord, COMPARABLE_FIELDS, Document, ReconciledSpan
from .judgments import ReviewerJudgment
from .llm_client import LLMClient, get_client

logger = logging.getLogger(__name__)

DISPUTED = (AgreementStatus.OVERLAP,)


@dataclass
class AdjudicationResult:
    """
    A drafted judgment for one span, with the cost of producing it.
    """
    span: ReconciledSpan
    judgment: Optional[ReviewerJudgment]
    llm_calls: int = 0
    total_tokens: int = 0
    retries: int = 0
    latency_ms: float = 0.0
    errors: list[str] = field(default_factory=list)
    raw_llm_responses: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.judgment is not None

    def to_dict(self) -> dict:
        return {
            "text": self.span.text,
            "status": self.span.status.value,
            "judgment": self.judgment.to_dict() if self.judgment else None,
            "metrics": {
                "llm_calls": self.llm_calls,
                "total_tokens": self.total_tokens,
                "retries": self.retries,
                "latency_ms": self.latency_ms,
            },
            "errors": self.errors,
        }


def _describe(label: str, record: Optional[AnnotationRecord]) -> str:
    if record is None:
        return f"{label}: did not annotate this span"
    return (
        f"{label}: role={record.role!r}, main_category={record.main_category!r}, "
        f"sub_category={record.sub_category!r}, polarity={record.polarity!r}"
    )


class Adjudicator:
    """
    Drafts reviewer judgments with an LLM.

    Spans the annotators fully agree on are not sent to the model: their
    shared labels are returned as the draft directly.
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        provider: str = "anthropic",
        max_retries: int = 3,
        context_radius: int = 200,
        **client_kwargs,
    ):
        """
        Initialize the Adjudicator.

        Args:
            client: Pre-configured LLM client (optional)
            provider: LLM provider if client not provided ("anthropic", "openai", "mock")
            max_retries: Attempts per span before giving up
            context_radius: Characters of document shown either side of the span
            **client_kwargs: Additional arguments for the LLM client
        """
        self.client = client or get_client(provider, **client_kwargs)
        self.max_retries = max_retries
        self.context_radius = context_radius

    def suggest(
        self,
        span: ReconciledSpan,
        document: Optional[Union[Document, str]] = None,
    ) -> AdjudicationResult:
        """
        Draft a judgment for one span.

        Args:
            span: The reconciled span to adjudicate
            document: Source document, used to show the span in context

        Returns:
            AdjudicationResult holding the draft (None if every attempt failed)
        """
        if span.status is AgreementStatus.MATCH:
            record = span.annotator_a
            return AdjudicationResult(
                span=span,
                judgment=ReviewerJudgment(
                    role=record.role,
                    main_category=record.main_category,
                    sub_category=record.sub_category,
                    polarity=record.polarity,
                ),
            )

        if isinstance(document, str):
            document = Document(content=document)

        prompt = self._build_prompt(span, document)
        result = AdjudicationResult(span=span, judgment=None)

        for attempt in range(self.max_retries):
            result.llm_calls += 1
            try:
                parsed, response = self.client.complete_json(
                    prompt, system_prompt=self._build_system_prompt()
                )
            except Exception as e:
                result.errors.append(f"Attempt {attempt + 1}: {e}")
                result.retries += 1
                continue

            result.total_tokens += response.total_tokens
            result.latency_ms += response.latency_ms
            result.raw_llm_responses.append(response.content)

            judgment = self._to_judgment(parsed)
            if judgment is not None:
                result.judgment = judgment
                return result

            result.errors.append(f"Attempt {attempt + 1}: response had no label fields")
            result.retries += 1

        logger.warning("No judgment drafted for %r after %d attempts", span.text, self.max_retries)
        return result

    def suggest_all(
        self,
        reconciliation: Mapping[str, ReconciledSpan],
        document: Optional[Union[Document, str]] = None,
        statuses: Iterable[AgreementStatus] = DISPUTED,
    ) -> dict[str, AdjudicationResult]:
        """Draft judgments for every span whose status is in statuses."""
        statuses = set(statuses)
        if isinstance(document, str):
            document = Document(content=document)
        return {
            text: self.suggest(span, document)
            for text, span in reconciliation.items()
            if span.status in statuses
        }

    def _to_judgment(self, parsed: dict) -> Optional[ReviewerJudgment]:
        if not any(name in parsed for name in COMPARABLE_FIELDS):
            return None
        values = {name: str(parsed.get(name) or "") for name in COMPARABLE_FIELDS}
        return ReviewerJudgment(notes=str(parsed.get("notes") or ""), **values)

    def _build_prompt(self, span: ReconciledSpan, document: Optional[Document]) -> str:
        context = ""
        if document is not None:
            offset = document.find(span.text)
            if offset != -1:
                excerpt = document.context(offset, len(span.text), self.context_radius)
                context = f"\nCONTEXT:\n```\n{excerpt}\n```\n"

        return f"""Two annotators labeled the same text span using appraisal theory.
Decide which labels are correct.

SPAN: "{span.text}"
{context}
{_describe("Annotator 1", span.annotator_a)}
{_describe("Annotator 2", span.annotator_b)}

RESPONSE FORMAT (JSON only):
{{
  "role": "...",
  "main_category": "...",
  "sub_category": "...",
  "polarity": "...",
  "notes": "one sentence explaining the decision"
}}

Prefer an annotator's existing label when it is correct."""

    def _build_system_prompt(self) -> str:
        return (
            "You are an experienced linguist adjudicating appraisal-theory "
            "annotations. You compare two annotators' labels for a span and "
            "propose the labels a careful reviewer would accept."
        )
