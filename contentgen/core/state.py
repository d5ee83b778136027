"""Session state contracts and the event reducer for generation sessions.

Architectural role:
    Defines the immutable state snapshot held by `GenerationSession` and the pure
    `reduce(state, event)` transition function that drives it. Rendering and
    provider calls live elsewhere; nothing here performs I/O.

Control-flow model:
    edit_prompt / select_response_type -> input fields change (ignored while loading)
    submit_clicked                      -> `failed` (blank prompt) or `loading`
    generation_resolved                 -> `succeeded` with the payload verbatim
    generation_rejected                 -> `failed` with the message

Determinism:
    `reduce` is a pure function. Identical (state, event) pairs always yield
    identical states.
"""

from dataclasses import dataclass, replace
from enum import Enum

from contentgen.core.errors import ValidationError, validate_prompt


class ResponseType(str, Enum):
    """Output mode requested from the content generation service."""

    TEXT = "text"
    IMAGE = "image"


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionState:
    """Snapshot of one generation session.

    Attributes:
        prompt: Current prompt text as edited by the user.
        response_type: Currently selected output mode.
        status: Lifecycle status of the latest submission.
        result: Payload of the latest successful submission.
        error: Message of the latest failed submission.
    """

    prompt: str = ""
    response_type: ResponseType = ResponseType.TEXT
    status: SessionStatus = SessionStatus.IDLE
    result: str | None = None
    error: str | None = None

    @property
    def loading(self) -> bool:
        return self.status is SessionStatus.LOADING


# ============================================================
# Events
# ============================================================

@dataclass(frozen=True)
class EditPrompt:
    prompt: str


@dataclass(frozen=True)
class SelectResponseType:
    response_type: ResponseType


@dataclass(frozen=True)
class SubmitClicked:
    pass


@dataclass(frozen=True)
class GenerationResolved:
    payload: str


@dataclass(frozen=True)
class GenerationRejected:
    message: str


Event = EditPrompt | SelectResponseType | SubmitClicked | GenerationResolved | GenerationRejected


def reduce(state: SessionState, event: Event) -> SessionState:
    """Apply one event to a session state and return the next state.

    Edge cases:
        - Input edits and re-submission are ignored while loading.
        - Resolution events are ignored unless a request is loading.
        - A blank prompt on submit moves straight to `failed` and clears any
          previous result, without passing through `loading`.
    """
    if isinstance(event, EditPrompt):
        if state.loading:
            return state
        return replace(state, prompt=event.prompt)

    if isinstance(event, SelectResponseType):
        if state.loading:
            return state
        return replace(state, response_type=ResponseType(event.response_type))

    if isinstance(event, SubmitClicked):
        if state.loading:
            return state
        try:
            validate_prompt(state.prompt)
        except ValidationError as exc:
            return replace(
                state,
                status=SessionStatus.FAILED,
                result=None,
                error=exc.message,
            )
        return replace(
            state,
            status=SessionStatus.LOADING,
            result=None,
            error=None,
        )

    if isinstance(event, GenerationResolved):
        if not state.loading:
            return state
        return replace(state, status=SessionStatus.SUCCEEDED, result=event.payload, error=None)

    if isinstance(event, GenerationRejected):
        if not state.loading:
            return state
        return replace(
            state,
            status=SessionStatus.FAILED,
            result=None,
            error=event.message,
        )

    raise TypeError(f"Unknown session event: {event!r}")
