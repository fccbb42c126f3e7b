"""
API-Based German B2 Evaluation

Sends the learner answer to a remote evaluator and normalizes the reply.
Two providers:
- http: POST {text, mode, pressureMode} to a configured endpoint
- anthropic: ask Claude for the same JSON shape

Raises on any failure; the evaluator falls back to rule-based scoring.
"""

import json
import os
from dataclasses import dataclass
from typing import Dict, Optional

import requests
from anthropic import Anthropic

from .caching import ResponseCache
from .scoring import clamp_score


PROVIDERS = ('http', 'anthropic')
DEFAULT_TIMEOUT = 15.0
DEFAULT_MODEL = "claude-sonnet-4-20250514"

ENV_ENDPOINT = 'B2COACH_AI_ENDPOINT'
ENV_PROVIDER = 'B2COACH_AI_PROVIDER'
ENV_TIMEOUT = 'B2COACH_AI_TIMEOUT'


EVALUATION_PROMPT = """
You are a strict examiner for German at CEFR level B2. Evaluate the learner answer below.

Mode: {mode}
Pressure mode (penalize avoidance of Konjunktiv II, past and passive forms): {pressure_mode}

## Learner Answer

{text}

---

Score each dimension 0-100:
- grammar_score: accuracy (cases, articles, verb forms, Konjunktiv II, Passiv)
- complexity_score: subordinate clauses, connectors, nominal style
- vocabulary_score: range and register
- argument_score: structure (introduction, arguments, conclusion)
- fluency_potential: length and flow

Respond with ONLY valid JSON (no markdown, no explanation):

{{
  "overall_score": <int 0-100, mean of the five scores>,
  "grammar_score": <int>,
  "complexity_score": <int>,
  "vocabulary_score": <int>,
  "argument_score": <int>,
  "fluency_potential": <int>,
  "weaknesses_detected": ["<short German tag>", ...],
  "missing_structures": ["<structure not used>", ...],
  "corrected_version": "<the answer with errors corrected>",
  "advanced_version": "<a B2+ rewrite of the answer>",
  "next_challenge": "<one instruction in German for the next attempt>"
}}
"""


# Accepted keys per field, first match wins
NUMERIC_FIELDS = {
    'overall_score': ('overall_score', 'overallScore'),
    'grammar_score': ('grammar_score', 'grammarScore'),
    'complexity_score': ('complexity_score', 'complexityScore'),
    'vocabulary_score': ('vocabulary_score', 'vocabularyScore'),
    'argument_score': ('argument_score', 'argumentScore'),
    'fluency_potential': ('fluency_potential', 'fluencyPotential'),
}
LIST_FIELDS = {
    'weaknesses_detected': ('weaknesses_detected', 'weakness_detected', 'weaknessesDetected'),
    'missing_structures': ('missing_structures', 'missingStructures'),
}
TEXT_FIELDS = {
    'corrected_version': ('corrected_version', 'correctedVersion'),
    'advanced_version': ('advanced_version', 'advancedVersion'),
    'next_challenge': ('next_challenge', 'nextChallenge'),
}


@dataclass
class RemoteConfig:
    """
    Remote evaluation settings

    endpoint: URL for the http provider (None disables remote evaluation)
    provider: 'http' or 'anthropic'
    timeout: seconds before a request is abandoned
    api_key: Anthropic API key (anthropic provider only)
    """
    endpoint: Optional[str] = None
    provider: str = 'http'
    timeout: float = DEFAULT_TIMEOUT
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL

    def __post_init__(self):
        if self.provider not in PROVIDERS:
            raise ValueError(
                f"Unknown provider: '{self.provider}'. Available: {', '.join(PROVIDERS)}"
            )
        if self.timeout is None or self.timeout <= 0:
            raise ValueError(f"Timeout must be a positive number of seconds, got {self.timeout}")
        if self.provider == 'anthropic':
            self.api_key = self.api_key or os.environ.get('ANTHROPIC_API_KEY')
            if not self.api_key:
                raise ValueError("ANTHROPIC_API_KEY not set. Set environment variable or pass api_key.")

    @property
    def enabled(self) -> bool:
        if self.provider == 'anthropic':
            return True
        return bool(self.endpoint)

    @classmethod
    def from_env(cls, **overrides) -> 'RemoteConfig':
        """Build config from B2COACH_AI_* variables; explicit overrides win"""

        timeout_raw = os.environ.get(ENV_TIMEOUT)
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"{ENV_TIMEOUT} must be a number, got '{timeout_raw}'")

        values = {
            'endpoint': os.environ.get(ENV_ENDPOINT) or None,
            'provider': os.environ.get(ENV_PROVIDER) or 'http',
            'timeout': timeout,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def build_request_body(text: str, mode: str, pressure_mode: bool) -> Dict:
    return {'text': text, 'mode': mode, 'pressureMode': pressure_mode}


def evaluate_with_api(
    text: str,
    mode: str,
    pressure_mode: bool,
    config: RemoteConfig,
    cache: Optional[ResponseCache] = None
) -> Dict:
    """
    Evaluate text with the configured remote provider.

    Args:
        text: Learner answer
        mode: 'discussion' or 'essay'
        pressure_mode: Pressure mode flag
        config: Remote settings (must be enabled)
        cache: Optional response cache

    Returns:
        Normalized dict with every EvaluationResult score/list/text field

    Raises:
        requests.RequestException, ValueError or anthropic errors on failure
    """

    if not config.enabled:
        raise ValueError("Remote evaluation is not configured")

    key = ResponseCache.make_key(text, mode, pressure_mode)
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            print("  ✓ Using cached remote evaluation")
            return cached

    if config.provider == 'anthropic':
        payload = _call_anthropic(text, mode, pressure_mode, config)
    else:
        payload = _call_http(text, mode, pressure_mode, config)

    result = normalize_payload(payload)

    if cache is not None:
        cache.add(key, result)

    return result


def _call_http(text: str, mode: str, pressure_mode: bool, config: RemoteConfig) -> Dict:
    response = requests.post(
        config.endpoint,
        json=build_request_body(text, mode, pressure_mode),
        headers={'Content-Type': 'application/json'},
        timeout=config.timeout
    )
    if not response.ok:
        raise ValueError(f"Endpoint returned HTTP {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise ValueError(f"Failed to parse endpoint response as JSON: {e}")


def _call_anthropic(text: str, mode: str, pressure_mode: bool, config: RemoteConfig) -> Dict:
    client = Anthropic(api_key=config.api_key, timeout=config.timeout)

    prompt = EVALUATION_PROMPT.format(
        mode=mode,
        pressure_mode='yes' if pressure_mode else 'no',
        text=text
    )

    response = client.messages.create(
        model=config.model,
        max_tokens=1500,
        messages=[{"role": "user", "content": prompt}]
    )

    response_text = response.content[0].text.strip()

    # Handle potential markdown wrapping
    if response_text.startswith('```'):
        response_text = response_text.split('```')[1]
        if response_text.startswith('json'):
            response_text = response_text[4:]

    try:
        return json.loads(response_text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse API response as JSON: {e}\nResponse: {response_text[:500]}")


def _first_present(payload: Dict, keys):
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def normalize_payload(payload) -> Dict:
    """
    Map a remote payload onto EvaluationResult fields.

    Missing numbers become 0, missing lists [], missing strings ''.
    Present numbers are clamped to 0-100.
    """

    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

    result = {}

    for field_name, keys in NUMERIC_FIELDS.items():
        value = _first_present(payload, keys)
        result[field_name] = clamp_score(float(value)) if value is not None else 0

    for field_name, keys in LIST_FIELDS.items():
        value = _first_present(payload, keys) or []
        if not isinstance(value, list):
            raise ValueError(f"Field '{field_name}' must be a list")
        result[field_name] = [str(v) for v in value]

    for field_name, keys in TEXT_FIELDS.items():
        result[field_name] = str(_first_present(payload, keys) or '')

    return result
