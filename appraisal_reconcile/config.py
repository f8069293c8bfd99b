"""
Configuration for a review session.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_JUDGMENTS_PATH = "appraisal_judgments.json"


@dataclass
class ReviewConfig:
    """Inputs and settings for one reconciliation/review session."""
    document_path: Optional[str] = None
    annotator_a_path: Optional[str] = None
    annotator_b_path: Optional[str] = None
    judgments_path: str = DEFAULT_JUDGMENTS_PATH
    resolver: str = "heuristic"  # Column resolver name
    provider: str = "anthropic"  # LLM provider for the adjudication helper
    model: Optional[str] = None

    @classmethod
    def from_env(cls, **overrides) -> "ReviewConfig":
        """
        Build a config from APPRAISAL_* environment variables.

        Keyword arguments that are not None take precedence over the environment.
        """
        config = cls(
            judgments_path=os.environ.get("APPRAISAL_JUDGMENTS_PATH", DEFAULT_JUDGMENTS_PATH),
            resolver=os.environ.get("APPRAISAL_RESOLVER", "heuristic"),
            provider=os.environ.get("APPRAISAL_LLM_PROVIDER", "anthropic"),
            model=os.environ.get("APPRAISAL_LLM_MODEL") or None,
        )
        return replace(config, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def inputs_ready(self) -> bool:
        """True when the document and both annotator files are configured."""
        return all((self.document_path, self.annotator_a_path, self.annotator_b_path))

    def client_kwargs(self) -> dict:
        return {"model": self.model} if self.model else {}
