"""Display resolution for generation sessions.

Maps a `SessionState` to a technology-neutral description of what the result
area and the input controls should show. Both the HTTP page and the CLI render
from this description.

Priority chain for the result area:
    loading > error > text result > image result > placeholder
"""

from dataclasses import dataclass
from enum import Enum

from contentgen.core.state import ResponseType, SessionState, SessionStatus

LOADING_MESSAGE = "Generating content, please wait..."
PLACEHOLDER_MESSAGE = "Your generated content will appear here."
GENERATE_LABEL = "Generate"
GENERATING_LABEL = "Generating..."


class DisplayKind(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    TEXT = "text"
    IMAGE = "image"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class Display:
    """What the result area shows.

    Attributes:
        kind: Which branch of the priority chain matched.
        content: Message, preformatted text, or image reference for `kind`.
    """

    kind: DisplayKind
    content: str


@dataclass(frozen=True)
class Controls:
    """State of the prompt field, response-type toggle and Generate button."""

    disabled: bool
    button_label: str
    selected_response_type: ResponseType


def resolve_display(state: SessionState) -> Display:
    """Resolve the result area for `state`.

    Text results are returned verbatim and must be shown with whitespace
    preserved. Image results are references for the display surface to load.
    An empty payload falls through to the placeholder.
    """
    if state.loading:
        return Display(DisplayKind.LOADING, LOADING_MESSAGE)

    if state.status is SessionStatus.FAILED and state.error:
        return Display(DisplayKind.ERROR, state.error)

    if state.status is SessionStatus.SUCCEEDED and state.result:
        if state.response_type is ResponseType.TEXT:
            return Display(DisplayKind.TEXT, state.result)
        return Display(DisplayKind.IMAGE, state.result)

    return Display(DisplayKind.PLACEHOLDER, PLACEHOLDER_MESSAGE)


def resolve_controls(state: SessionState) -> Controls:
    loading = state.loading
    return Controls(
        disabled=loading,
        button_label=GENERATING_LABEL if loading else GENERATE_LABEL,
        selected_response_type=state.response_type,
    )
