"""Provider/runtime configuration for the text and image generation layers.

Architectural role:
    Centralizes model/provider selection and credential lookup for `contentgen.llm`
    and `contentgen.image`.

Model call flow integration:
    - `service.generate_answer` consumes `MODEL_NAME` and `SYSTEM_MESSAGE`.
    - `client.send_request` consumes provider endpoint maps and key resolution.
    - `contentgen.image` consumes the `IMAGE_*` settings.

Determinism:
    Deterministic for a fixed process environment and key files. Values are resolved
    at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None`; callers raise `GenerationError`.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Primary model routing controls.
PROVIDER = os.getenv("PROVIDER", "gemini")
MODEL_NAME = os.getenv("MODEL_NAME", "gemini-2.5-flash")

# Per-request HTTP timeout shared by text and image transports.
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "120"))

# OpenAI-compatible and provider-specific endpoint map.
PROVIDERS = {

    "local": {
        "url": "http://127.0.0.1:8080/v1/chat/completions",
        "key_file": None
    },

    "openai": {
        "url": "https://api.openai.com/v1/chat/completions",
        "key_file": "config/openai.key"
    },

    "groq": {
        "url": "https://api.groq.com/openai/v1/chat/completions",
        "key_file": "config/groq.key"
    },

    "openrouter": {
        "url": "https://openrouter.ai/api/v1/chat/completions",
        "key_file": "config/openrouter.key"
    },

    "mistral": {
        "url": "https://api.mistral.ai/v1/chat/completions",
        "key_file": "config/mistral.key"
    },

    "anthropic": {
        "url": "https://api.anthropic.com/v1/messages",
        "key_file": "config/anthropic.key"
    },

    "gemini": {
        "url": "https://generativelanguage.googleapis.com/v1beta/models",
        "key_file": "config/gemini.key"
    },

}


ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"

GEMINI_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)


# Shared system instruction prepended to prompt content in `service.generate_answer`.
SYSTEM_MESSAGE = os.getenv(
    "SYSTEM_MESSAGE",
    "You are a creative content generator. "
    "Respond with the requested content only, without preamble.",
)


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - `None` path returns `None`.
        - Missing file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


# Image generation provider settings consumed by `contentgen.image` modules.
IMAGE_PROVIDER = os.getenv("IMAGE_PROVIDER", "ai_horde")
IMAGE_MODEL = os.getenv("IMAGE_MODEL", "dall-e-3")
IMAGE_WIDTH = int(os.getenv("IMAGE_WIDTH", "512"))
IMAGE_HEIGHT = int(os.getenv("IMAGE_HEIGHT", "512"))
IMAGE_STEPS = int(os.getenv("IMAGE_STEPS", "25"))
# OpenAI only accepts fixed sizes per model; width/height do not apply there.
IMAGE_OPENAI_SIZE = os.getenv("IMAGE_OPENAI_SIZE", "1024x1024")

# AI Horde jobs are polled until done or until this budget runs out.
IMAGE_POLL_INTERVAL_SECONDS = float(os.getenv("IMAGE_POLL_INTERVAL_SECONDS", "2"))
IMAGE_POLL_TIMEOUT_SECONDS = float(os.getenv("IMAGE_POLL_TIMEOUT_SECONDS", "300"))

IMAGE_PROVIDERS = {

    "local": {
        "url": "http://127.0.0.1:7860/sdapi/v1/txt2img",
        "key_file": None
    },

    "openai": {
        "url": "https://api.openai.com/v1/images/generations",
        "key_file": "config/openai.key"
    },

    "ai_horde": {
        "url": "https://aihorde.net/api/v2/generate/async",
        "status_url": "https://aihorde.net/api/v2/generate/status/",
        "key_file": None
    }

}
