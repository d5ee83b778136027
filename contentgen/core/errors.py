"""Error taxonomy for generation sessions.

Failure classes:
    - `ValidationError`: empty or whitespace-only prompt. Never reaches a provider.
    - `GenerationError`: provider failure carrying a user-presentable message.
    - `SubmissionInProgressError`: a second submit while one is still loading.

Any other exception raised by a provider is treated as an unknown error and is
reduced to `GENERIC_ERROR_MESSAGE` when it carries no message of its own.
"""

EMPTY_PROMPT_MESSAGE = "Please enter a prompt."
GENERIC_ERROR_MESSAGE = "An unexpected error occurred."


class ContentGenError(Exception):
    """Base class for errors raised by this package."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ContentGenError, ValueError):
    """Raised when a prompt fails the non-empty check."""

    def __init__(self, message: str = EMPTY_PROMPT_MESSAGE) -> None:
        super().__init__(message)


class GenerationError(ContentGenError, RuntimeError):
    """Raised by provider adapters when content could not be generated.

    Attributes:
        provider: Provider label the failure originated from, when known.
        status_code: Upstream HTTP status, when the failure was an HTTP error.
    """

    def __init__(self, message: str = "", provider: str | None = None, status_code: int | None = None) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class SubmissionInProgressError(ContentGenError, RuntimeError):
    """Raised when a session is asked to submit while already loading."""

    def __init__(self, message: str = "A generation request is already in progress.") -> None:
        super().__init__(message)


def validate_prompt(prompt: str | None) -> str:
    """Return `prompt` unchanged, or raise `ValidationError` if it is blank."""
    if prompt is None or not prompt.strip():
        raise ValidationError()
    return prompt


def error_message(exc: BaseException) -> str:
    """Map an exception to the message shown to the user.

    The exception's own message wins when it is non-empty, whitespace
    included; otherwise the generic fallback is used.
    """
    message = getattr(exc, "message", None)
    if not isinstance(message, str) or not message:
        message = str(exc) if exc.args else ""
    if not message:
        return GENERIC_ERROR_MESSAGE
    return message
