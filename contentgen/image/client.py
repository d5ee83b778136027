"""Generic image-provider HTTP client.

Processing flow:
    1. Resolve active provider config from `contentgen.llm.provider_config`.
    2. Optionally load API key from configured key file.
    3. Submit JSON payload to provider endpoint.
    4. Return parsed JSON response or raise on non-200 status.

Base64 handling:
    - This module does not decode Base64 content. Reference extraction is done by
      `contentgen.core.content_service.extract_image_reference`.

Error handling strategy:
    - Misconfiguration and HTTP failures raise `GenerationError`.
    - Upstream response bodies are logged, not surfaced.
"""

import logging

import requests

from contentgen.core.errors import GenerationError
from contentgen.llm.provider_config import (
    IMAGE_PROVIDER,
    IMAGE_PROVIDERS,
    REQUEST_TIMEOUT_SECONDS,
    load_key,
)

logger = logging.getLogger(__name__)


def send_image_request(payload: dict) -> dict:
    """Send an image-generation request to the currently selected provider.

    Args:
        payload: Provider JSON payload (prompt/size/step parameters).

    Returns:
        Parsed JSON response from provider.

    Error handling:
        - Unknown provider -> `GenerationError`
        - Missing/empty configured API key -> `GenerationError`
        - Transport failure or non-200 HTTP response -> `GenerationError`
    """
    provider_config = IMAGE_PROVIDERS.get(IMAGE_PROVIDER)
    if not provider_config:
        raise GenerationError(f"Unknown image provider: {IMAGE_PROVIDER}", provider=IMAGE_PROVIDER)

    url = provider_config["url"]
    key_file = provider_config.get("key_file")
    headers = {}

    if key_file is not None:
        api_key = load_key(key_file)
        if not api_key:
            raise GenerationError(f"Image API key file missing or empty: {key_file}", provider=IMAGE_PROVIDER)
        headers["Authorization"] = f"Bearer {api_key}"

    try:
        response = requests.post(url, json=payload, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.exceptions.RequestException as err:
        raise GenerationError(f"Image request to {IMAGE_PROVIDER} failed.", provider=IMAGE_PROVIDER) from err

    if response.status_code != 200:
        logger.warning("Image provider %s returned %s: %s", IMAGE_PROVIDER, response.status_code, response.text[:500])
        raise GenerationError(
            f"Image request failed with status {response.status_code}",
            provider=IMAGE_PROVIDER,
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as err:
        raise GenerationError("Image provider returned a non-JSON response.", provider=IMAGE_PROVIDER) from err
