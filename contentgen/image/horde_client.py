"""AI Horde-specific image-generation client.

Processing flow:
    1. Read provider endpoint configuration.
    2. Build submission payload from prompt + generation params.
    3. Submit async generation job.
    4. Poll status endpoint until completion, fault, or poll budget exhaustion.
    5. Return first generated image URL.

Error handling strategy:
    - Configuration, provider-state and HTTP failures raise `GenerationError`.
    - HTTP 429 on the status endpoint backs off and keeps polling.

Security considerations:
    - The API key is never logged. Payloads are logged at debug level only.

Performance characteristics:
    - Uses synchronous HTTP and blocking sleep-based polling; callers run it in a
      worker thread.
    - Poll loop is bounded by `IMAGE_POLL_TIMEOUT_SECONDS`.
"""

import os
import time
import logging

import requests
from dotenv import load_dotenv

from contentgen.core.errors import GenerationError
from contentgen.llm.provider_config import (
    IMAGE_PROVIDERS,
    IMAGE_PROVIDER,
    IMAGE_POLL_INTERVAL_SECONDS,
    IMAGE_POLL_TIMEOUT_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
)

load_dotenv()

logger = logging.getLogger(__name__)

# AI Horde accepts this key for anonymous, low-priority jobs.
ANONYMOUS_API_KEY = "0000000000"
RATE_LIMIT_BACKOFF_SECONDS = 3


def _raise_for_status(response: requests.Response, stage: str) -> None:
    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as err:
        logger.warning("AI Horde %s returned %s: %s", stage, response.status_code, response.text[:500])
        raise GenerationError(
            f"AI Horde {stage} failed with status {response.status_code}",
            provider="ai_horde",
            status_code=response.status_code,
        ) from err


def send_ai_horde_request(
    prompt: str,
    width: int,
    height: int,
    steps: int,
) -> dict:
    """Submit and poll an AI Horde async image generation job.

    Args:
        prompt: User prompt forwarded to AI Horde.
        width: Requested output width.
        height: Requested output height.
        steps: Sampling/inference steps.

    Returns:
        Dict containing `{"image_url": <url>}` when generation completes.

    Failure handling:
        - Missing provider config/status URL -> `GenerationError`
        - Faulted job or exhausted poll budget -> `GenerationError`
        - Missing image URL after completion -> `GenerationError`
        - HTTP transport/status failures -> `GenerationError`
    """
    provider_config = IMAGE_PROVIDERS.get("ai_horde")
    if not provider_config:
        raise GenerationError(
            f"AI Horde provider config missing (active IMAGE_PROVIDER={IMAGE_PROVIDER})",
            provider="ai_horde",
        )

    status_url = provider_config.get("status_url")
    if not status_url:
        raise GenerationError("AI Horde status_url missing in provider config.", provider="ai_horde")

    api_key = os.getenv("AI_HORDE_API_KEY") or ANONYMOUS_API_KEY
    model_name = os.getenv("AI_HORDE_MODEL", "Anything v5")

    headers = {
        "apikey": api_key,
        "Content-Type": "application/json"
    }

    payload = {
        "prompt": prompt,
        "models": [model_name],
        "params": {
            "width": width,
            "height": height,
            "steps": steps
        }
    }

    logger.debug("AI Horde payload: %s", payload)
    try:
        submit_response = requests.post(
            provider_config["url"],
            json=payload,
            headers=headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        _raise_for_status(submit_response, "submission")
        job_id = submit_response.json().get("id")
        if not job_id:
            raise GenerationError("AI Horde did not return a job id.", provider="ai_horde")

        deadline = time.monotonic() + IMAGE_POLL_TIMEOUT_SECONDS
        while time.monotonic() < deadline:
            status_response = requests.get(
                f"{status_url}{job_id}",
                headers=headers,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            if status_response.status_code == 429:
                time.sleep(RATE_LIMIT_BACKOFF_SECONDS)
                continue
            _raise_for_status(status_response, "status check")
            status_data = status_response.json()

            if status_data.get("faulted"):
                raise GenerationError("AI Horde job faulted.", provider="ai_horde")

            finished = bool(status_data.get("done") or status_data.get("finished"))
            generations = status_data.get("generations") or []

            if finished and generations:
                image_url = generations[0].get("img") or generations[0].get("image_url")
                if not image_url:
                    raise GenerationError("AI Horde finished but no image URL returned.", provider="ai_horde")
                logger.info("AI Horde job %s finished", job_id)
                return {"image_url": image_url}

            time.sleep(IMAGE_POLL_INTERVAL_SECONDS)

    except requests.exceptions.RequestException as err:
        raise GenerationError("AI Horde request failed.", provider="ai_horde") from err

    raise GenerationError("AI Horde job timed out.", provider="ai_horde")
