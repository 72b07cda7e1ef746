"""Text-generation oracle: live Anthropic client, scripted stub, JSON extraction."""

import json
import logging

import anthropic
from anthropic import Anthropic
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from . import config

logger = logging.getLogger("architect.oracle")


class OracleError(Exception):
    """The oracle could not produce a usable response."""


class OracleResponseError(OracleError):
    """The oracle answered, but not with a parseable JSON object."""


# Worth another attempt; anything else fails straight through to the phase fallback.
TRANSIENT_ERRORS = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.InternalServerError,
)


class AnthropicOracle:
    """Live oracle backed by the Anthropic Messages API.

    The client is injected so tests can hand in a MagicMock; when omitted a
    real client is built with the configured timeout (retries are handled
    here, not by the SDK).
    """

    def __init__(
        self,
        client: Anthropic | None = None,
        model: str = config.MODEL_NAME,
        timeout: float = config.ORACLE_TIMEOUT_SECONDS,
        max_attempts: int = config.ORACLE_MAX_ATTEMPTS,
    ):
        self.client = client or Anthropic(timeout=timeout, max_retries=0)
        self.model = model
        self.name = model

        @retry(
            wait=wait_exponential(multiplier=1, min=2, max=20),
            stop=stop_after_attempt(max(1, max_attempts)),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        )
        def _create(**kwargs):
            return self.client.messages.create(**kwargs)

        self._create = _create

    def generate(self, system: str, prompt: str, max_tokens: int) -> str:
        try:
            response = self._create(
                model=self.model,
                max_tokens=max_tokens,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise OracleError(f"Anthropic request failed: {exc}") from exc

        logger.debug(
            "API usage - input_tokens: %d, output_tokens: %d, stop_reason: %s",
            response.usage.input_tokens, response.usage.output_tokens, response.stop_reason,
        )
        text = "\n".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise OracleResponseError("Oracle returned no text content")
        return text


class ScriptedOracle:
    """Deterministic oracle that replays a fixed script.

    Each call consumes the next item: a string is returned as the response,
    an exception instance is raised, and a callable is invoked with
    (system, prompt) and its return value used. Every call is recorded in
    `calls` as a (system, prompt, max_tokens) tuple.
    """

    def __init__(self, responses=None, name: str = "scripted"):
        self.responses = list(responses or [])
        self.name = name
        self.calls = []

    def generate(self, system: str, prompt: str, max_tokens: int) -> str:
        self.calls.append((system, prompt, max_tokens))
        if not self.responses:
            raise OracleError("Scripted oracle has no responses left")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(system, prompt)
        return item


def extract_json_object(text: str) -> dict:
    """Parse the first balanced {...} span in free text.

    Handles prose before/after the object and markdown code fences.
    Braces inside JSON strings are ignored while matching.

    Raises:
        OracleResponseError: no balanced object, or it is not valid JSON.
    """
    start = text.find("{")
    if start == -1:
        raise OracleResponseError("No JSON object found in oracle response")

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                try:
                    parsed = json.loads(text[start:i + 1])
                except json.JSONDecodeError as exc:
                    raise OracleResponseError(f"Invalid JSON in oracle response: {exc}") from exc
                if not isinstance(parsed, dict):
                    raise OracleResponseError("Oracle JSON is not an object")
                return parsed

    raise OracleResponseError("Unbalanced JSON object in oracle response")


def clamp_int(value, low: int, high: int, default: int) -> int:
    """Coerce an oracle-supplied number into [low, high]; `default` if not numeric."""
    if isinstance(value, bool):
        return default
    try:
        number = round(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(low, min(high, number))


def string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


def ask_json(oracle, system: str, prompt: str, max_tokens: int) -> dict:
    """One oracle round-trip, returning the parsed JSON object."""
    raw = oracle.generate(system, prompt, max_tokens)
    return extract_json_object(raw)
