"""
Chat model clients for the adjudication helper.

Each client sends one prompt and returns the reply text with its token usage.
The provider SDKs are optional extras and are imported only when a client is
constructed.
"""

import json
import os
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class LLMResponse:
    """Reply text plus usage for one model call."""
    content: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0
    model: str = ""

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


def parse_json_content(content: str) -> dict:
    """
    Parse a JSON object out of a model reply.

    Tolerates a surrounding markdown code fence and prose around the object.
    Raises ValueError when no JSON object can be recovered.
    """
    content = content.strip()
    if content.startswith("```"):
        content = "\n".join(line for line in content.splitlines()[1:] if not line.startswith("```"))

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        match = re.search(r"\{[\s\S]*\}", content)
        if not match:
            raise ValueError(f"No JSON object in model reply: {content[:200]!r}")
        try:
            parsed = json.loads(match.group())
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON in model reply: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


class LLMClient(ABC):
    """A chat model that answers a single prompt."""

    max_tokens = 1024

    @abstractmethod
    def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Send prompt and return the reply."""

    def complete_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
    ) -> tuple[dict, LLMResponse]:
        """Send prompt and parse the reply as a JSON object."""
        response = self.complete(prompt, system_prompt=system_prompt, json_mode=True)
        return parse_json_content(response.content), response


def _api_key(explicit: Optional[str], env_var: str) -> str:
    key = explicit or os.environ.get(env_var)
    if not key:
        raise ValueError(f"{env_var} not set")
    return key


class AnthropicClient(LLMClient):
    """Anthropic Messages API."""

    def __init__(self, api_key: Optional[str] = None, model: str = "claude-sonnet-4-20250514"):
        self.model = model
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required: pip install appraisal-reconcile[anthropic]")
        self.client = anthropic.Anthropic(api_key=_api_key(api_key, "ANTHROPIC_API_KEY"))

    def complete(self, prompt, system_prompt=None, json_mode=False) -> LLMResponse:
        started = time.time()
        if json_mode:
            prompt += "\n\nReply with the JSON object only."
        kwargs = {"system": system_prompt} if system_prompt else {}
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return LLMResponse(
            content=response.content[0].text,
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
            latency_ms=(time.time() - started) * 1000,
            model=self.model,
        )


class OpenAIClient(LLMClient):
    """OpenAI Chat Completions API; JSON replies use its json_object mode."""

    def __init__(self, api_key: Optional[str] = None, model: str = "gpt-4o"):
        self.model = model
        try:
            from openai import OpenAI
        except ImportError:
            raise ImportError("openai package required: pip install appraisal-reconcile[openai]")
        self.client = OpenAI(api_key=_api_key(api_key, "OPENAI_API_KEY"))

    def complete(self, prompt, system_prompt=None, json_mode=False) -> LLMResponse:
        started = time.time()
        messages = [{"role": "system", "content": system_prompt}] if system_prompt else []
        messages.append({"role": "user", "content": prompt})
        kwargs = {"response_format": {"type": "json_object"}} if json_mode else {}
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=0.0,
            **kwargs,
        )
        return LLMResponse(
            content=response.choices[0].message.content or "",
            prompt_tokens=response.usage.prompt_tokens,
            completion_tokens=response.usage.completion_tokens,
            latency_ms=(time.time() - started) * 1000,
            model=self.model,
        )


class MockLLMClient(LLMClient):
    """Replays queued replies, then an empty judgment. Records every prompt."""

    DEFAULT_RESPONSE = '{"role": "", "main_category": "", "sub_category": "", "polarity": "", "notes": ""}'

    def __init__(self, responses: Optional[list[str]] = None):
        self.responses = list(responses or [])
        self.call_count = 0
        self.prompts: list[str] = []

    def add_response(self, response: str):
        self.responses.append(response)

    def complete(self, prompt, system_prompt=None, json_mode=False) -> LLMResponse:
        self.prompts.append(prompt)
        if self.call_count < len(self.responses):
            content = self.responses[self.call_count]
        else:
            content = self.DEFAULT_RESPONSE
        self.call_count += 1
        return LLMResponse(
            content=content,
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(content.split()),
            model="mock",
        )


PROVIDERS = {
    "anthropic": AnthropicClient,
    "openai": OpenAIClient,
    "mock": MockLLMClient,
}


def get_client(provider: str = "anthropic", **kwargs) -> LLMClient:
    """Construct the client registered under provider."""
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}. Available: {list(PROVIDERS)}")
    return PROVIDERS[provider](**kwargs)


def list_providers() -> list[str]:
    return list(PROVIDERS)
