"""Content generation service used as the default session generator.

Role in pipeline:
    `GenerationSession.submit` -> `generate_content(prompt, response_type)`
    -> `llm.service.generate_answer` (text) or `image.service.generate_image` (image).

Image references:
    Providers answer in different shapes. `extract_image_reference` reduces them
    to a single string the display surface can load: an http(s) URL or a
    `data:` URL for inline Base64 payloads.

Error handling strategy:
    Provider failures propagate as `GenerationError`. A provider answer that
    carries no usable image reference also raises `GenerationError`.
"""

import logging

from contentgen.core.errors import GenerationError
from contentgen.core.state import ResponseType
from contentgen.image.service import generate_image
from contentgen.llm.service import generate_answer

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "The image provider did not return an image."


def _as_data_url(b64_data: str, mime_type: str = "image/png") -> str:
    if b64_data.startswith("data:"):
        return b64_data
    return f"data:{mime_type};base64,{b64_data}"


def extract_image_reference(response: dict) -> str:
    """Return a loadable image reference from a provider response.

    Accepted shapes:
        - `{"image_url": url}` (AI Horde client)
        - `{"data": [{"url": url}]}` or `{"data": [{"b64_json": ...}]}` (OpenAI)
        - `{"images": [base64, ...]}` (Stable Diffusion WebUI)

    Raises:
        GenerationError: no reference could be found.
    """
    if not isinstance(response, dict):
        raise GenerationError(NO_IMAGE_MESSAGE)

    image_url = response.get("image_url")
    if image_url:
        return image_url

    data = response.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        first = data[0]
        if first.get("url"):
            return first["url"]
        if first.get("b64_json"):
            return _as_data_url(first["b64_json"])

    images = response.get("images")
    if isinstance(images, list) and images and isinstance(images[0], str) and images[0]:
        return _as_data_url(images[0])

    logger.warning("Image response without reference; keys=%s", sorted(response))
    raise GenerationError(NO_IMAGE_MESSAGE)


def generate_content(prompt: str, response_type: ResponseType | str) -> str:
    """Generate text or an image reference for `prompt`.

    Args:
        prompt: Non-empty user prompt.
        response_type: `text` or `image`.

    Returns:
        Generated text, or an image reference string.
    """
    response_type = ResponseType(response_type)

    if response_type is ResponseType.IMAGE:
        return extract_image_reference(generate_image(prompt))

    return generate_answer(prompt)
