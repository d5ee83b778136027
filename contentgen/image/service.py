"""Image service dispatcher used by the content service for image requests.

Role in pipeline:
    - Receives image-generation parameters from `contentgen.core.content_service`.
    - Selects provider path (`ai_horde` vs generic provider client).
    - Returns provider response payload unchanged to upstream callers.

Provider payloads:
    - `local` (Stable Diffusion WebUI): prompt/steps/width/height.
    - `openai`: model/prompt/size/n, with `IMAGE_OPENAI_SIZE` as the size
      since the API rejects arbitrary dimensions.
    - `ai_horde`: delegated to `horde_client`, which polls to completion.

Error handling strategy:
    - Exceptions from provider clients are intentionally propagated.
"""

from contentgen.image.client import send_image_request
from contentgen.image.horde_client import send_ai_horde_request
from contentgen.llm.provider_config import (
    IMAGE_HEIGHT,
    IMAGE_MODEL,
    IMAGE_OPENAI_SIZE,
    IMAGE_PROVIDER,
    IMAGE_STEPS,
    IMAGE_WIDTH,
)


def build_image_payload(prompt: str, width: int, height: int, steps: int) -> dict:
    """Build the JSON body for the generic image client."""
    if IMAGE_PROVIDER == "openai":
        return {
            "model": IMAGE_MODEL,
            "prompt": prompt,
            "size": IMAGE_OPENAI_SIZE,
            "n": 1,
        }

    return {
        "prompt": prompt,
        "steps": steps,
        "width": width,
        "height": height,
    }


def generate_image(
    prompt: str,
    width: int = IMAGE_WIDTH,
    height: int = IMAGE_HEIGHT,
    steps: int = IMAGE_STEPS,
) -> dict:
    """Generate an image via configured provider adapter.

    Args:
        prompt: Text prompt for generation.
        width: Requested width (ignored by OpenAI, see `IMAGE_OPENAI_SIZE`).
        height: Requested height (ignored by OpenAI).
        steps: Requested inference steps (ignored by OpenAI).

    Returns:
        Provider response dictionary (typically containing image reference data).
    """
    if IMAGE_PROVIDER == "ai_horde":
        return send_ai_horde_request(prompt, width, height, steps)

    return send_image_request(build_image_payload(prompt, width, height, steps))
