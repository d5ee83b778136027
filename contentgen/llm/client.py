"""Provider-specific transport client for text generation requests.

Architectural role:
    Executes one HTTP request against the configured model provider and extracts
    the completion text from the provider-specific response shape.

Model invocation flow:
    `service.generate_answer` -> `send_request(payload)` -> provider branch
    (OpenAI-compatible / Anthropic / Gemini) -> completion text.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with
    `REQUEST_TIMEOUT_SECONDS`.

Failure handling model:
    Every failure raises `GenerationError` with a sanitized, provider-labeled
    message. Raw upstream bodies are logged, never surfaced to users.
"""

import logging

import requests

from contentgen.core.errors import GenerationError
from contentgen.llm.provider_config import (
    PROVIDER,
    MODEL_NAME,
    PROVIDERS,
    ANTHROPIC_URL,
    GEMINI_URL_TEMPLATE,
    REQUEST_TIMEOUT_SECONDS,
    load_key,
)

logger = logging.getLogger(__name__)


def _label(provider_name: str | None) -> str:
    return str(provider_name or "provider").upper()


def _build_sanitized_http_error(provider_name: str, err: requests.exceptions.RequestException) -> GenerationError:
    """Build a provider-labeled HTTP error without exposing raw internals.

    Args:
        provider_name: Active provider label.
        err: Request exception instance.

    Returns:
        `GenerationError` carrying the status code when one is known.
    """
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    label = _label(provider_name)
    if status_code:
        return GenerationError(f"{label} HTTP ERROR ({status_code})", provider=provider_name, status_code=status_code)
    return GenerationError(f"{label} HTTP ERROR", provider=provider_name)


def _post_json(url: str, headers: dict, payload: dict) -> dict:
    response = requests.post(
        url,
        headers=headers,
        json=payload,
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    if not response.ok:
        logger.warning("%s returned %s: %s", _label(PROVIDER), response.status_code, response.text[:500])
    response.raise_for_status()
    return response.json()


def _send_openai_compatible(payload: dict) -> str:
    config = PROVIDERS[PROVIDER]
    headers = {
        "Content-Type": "application/json"
    }

    key_file = config["key_file"]
    if key_file:
        api_key = load_key(key_file)
        if not api_key:
            raise GenerationError(f"{_label(PROVIDER)} KEY FILE NOT FOUND", provider=PROVIDER)
        headers["Authorization"] = f"Bearer {api_key}"

    data = _post_json(config["url"], headers, payload)
    return data["choices"][0]["message"]["content"]


def _send_anthropic(payload: dict) -> str:
    api_key = load_key(PROVIDERS["anthropic"]["key_file"])
    if not api_key:
        raise GenerationError("ANTHROPIC KEY FILE NOT FOUND", provider="anthropic")

    headers = {
        "x-api-key": api_key,
        "anthropic-version": "2023-06-01",
        "Content-Type": "application/json",
    }

    system_prompt = None
    anthropic_messages = []

    for msg in payload.get("messages", []):
        if not isinstance(msg, dict):
            continue

        role = msg.get("role")
        content = msg.get("content", "")

        if role == "system":
            if isinstance(content, str) and content.strip():
                system_prompt = content.strip()
        elif role in ["user", "assistant"]:
            anthropic_messages.append({
                "role": role,
                "content": content,
            })

    anthropic_payload = {
        "model": payload.get("model", MODEL_NAME),
        "max_tokens": payload.get("max_tokens", 1024),
        "messages": anthropic_messages,
    }

    if system_prompt:
        anthropic_payload["system"] = system_prompt

    if "temperature" in payload:
        anthropic_payload["temperature"] = payload["temperature"]
    if "top_p" in payload:
        anthropic_payload["top_p"] = payload["top_p"]

    data = _post_json(ANTHROPIC_URL, headers, anthropic_payload)
    return data["content"][0]["text"]


def _send_gemini(payload: dict) -> str:
    api_key = load_key(PROVIDERS["gemini"]["key_file"])
    if not api_key:
        raise GenerationError("GEMINI KEY FILE NOT FOUND", provider="gemini")

    url = GEMINI_URL_TEMPLATE.format(model=payload.get("model", MODEL_NAME))

    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }

    system_parts = []
    gemini_contents = []

    for msg in payload.get("messages", []):
        if not isinstance(msg, dict):
            continue

        role = msg.get("role")
        content = msg.get("content", "")

        if not content:
            continue

        if role == "system":
            system_parts.append({"text": str(content)})
            continue
        if role == "assistant":
            gemini_role = "model"
        elif role == "user":
            gemini_role = "user"
        else:
            continue

        gemini_contents.append({
            "role": gemini_role,
            "parts": [{"text": str(content)}],
        })

    gemini_payload = {
        "contents": gemini_contents,
    }
    if system_parts:
        gemini_payload["systemInstruction"] = {"parts": system_parts}

    generation_config = {}
    if "temperature" in payload:
        generation_config["temperature"] = payload["temperature"]
    if "top_p" in payload:
        generation_config["topP"] = payload["top_p"]
    if generation_config:
        gemini_payload["generationConfig"] = generation_config

    data = _post_json(url, headers, gemini_payload)
    return data["candidates"][0]["content"]["parts"][0]["text"]


def send_request(payload: dict) -> str:
    """Send one request to the configured provider and return the completion text.

    Args:
        payload: OpenAI-style chat payload produced by `service.generate_answer`.

    Returns:
        Completion text with surrounding whitespace stripped.

    Provider handling:
        - OpenAI-compatible providers: payload forwarded unchanged.
        - Anthropic: message remap + optional `system` + default `max_tokens=1024`.
        - Gemini: message remap to `contents`, `systemInstruction` and
          `generationConfig`.

    Raises:
        GenerationError: missing key, unknown provider, HTTP failure, or a
            response body without completion text.
    """
    try:
        if PROVIDER == "anthropic":
            text = _send_anthropic(payload)
        elif PROVIDER == "gemini":
            text = _send_gemini(payload)
        elif PROVIDER in PROVIDERS:
            text = _send_openai_compatible(payload)
        else:
            raise GenerationError(f"INVALID PROVIDER: {PROVIDER}", provider=PROVIDER)

    except GenerationError:
        raise

    except requests.exceptions.RequestException as err:
        raise _build_sanitized_http_error(PROVIDER, err) from err

    except (KeyError, IndexError, TypeError, ValueError) as err:
        logger.exception("Malformed %s response", _label(PROVIDER))
        raise GenerationError(f"{_label(PROVIDER)} RETURNED AN UNEXPECTED RESPONSE", provider=PROVIDER) from err

    if not isinstance(text, str):
        raise GenerationError(f"{_label(PROVIDER)} RETURNED AN UNEXPECTED RESPONSE", provider=PROVIDER)

    return text.strip()
