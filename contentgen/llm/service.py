"""Prompt-to-payload adapter for text generation.

Architectural role:
    Provides the canonical text-generation entrypoint used by
    `contentgen.core.content_service`. This module bridges the user prompt to
    transport (`contentgen.llm.client`).

Model call flow:
    prompt -> payload construction -> `client.send_request(...)`.

Determinism:
    Payload construction is deterministic for fixed inputs and configuration.
    Generated output remains non-deterministic because inference runs remotely.
"""

from contentgen.llm.provider_config import SYSTEM_MESSAGE, MODEL_NAME
from contentgen.llm.client import send_request


def build_payload(prompt: str) -> dict:
    """Wrap `prompt` with the shared system message and sampling defaults.

    Parameter semantics:
        - `temperature=0.7`: creative but not erratic output.
        - `top_p=0.95`: nucleus sampling cap.
    """
    return {
        "model": MODEL_NAME,
        "messages": [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": prompt}
        ],
        "temperature": 0.7,
        "top_p": 0.95,
        "stream": False
    }


def generate_answer(prompt: str) -> str:
    """Invoke configured model with shared generation defaults.

    Args:
        prompt: User prompt, forwarded untrimmed.

    Returns:
        Completion text.

    Failure scenarios:
        Transport/provider failures raise `GenerationError` from `client.send_request`.
    """
    return send_request(build_payload(prompt))
