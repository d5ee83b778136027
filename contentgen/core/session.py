"""Generation session controller.

Architectural role:
    Owns one `SessionState`, feeds user events through `state.reduce`, and runs the
    single asynchronous provider call per submission. API and CLI adapters create
    sessions and render them via `contentgen.core.display`.

Request lifecycle (`submit`):
    1. Refuse the call if a submission is already loading.
    2. Apply optional prompt/response-type edits.
    3. Dispatch `SubmitClicked`; a blank prompt ends here in `failed`.
    4. Await the content generator with the prompt and response type captured
       at submit time.
    5. Dispatch `GenerationResolved` or `GenerationRejected`.

Error handling strategy:
    Every exception raised by the generator is converted into session state.
    Cancellation is re-raised after the session is moved to `failed`, so a
    session never stays `loading` once `submit` has exited.
    Only `SubmissionInProgressError` escapes `submit`, and it is raised before
    any state change.

Concurrency:
    Cooperative asyncio only. Blocking generators run via `asyncio.to_thread`;
    coroutine generators are awaited directly.
"""

import asyncio
import inspect
import logging
import uuid
from collections import OrderedDict
from typing import Any, Awaitable, Callable

from contentgen.config import DEBUG, MAX_SESSIONS
from contentgen.core.display import Controls, Display, resolve_controls, resolve_display
from contentgen.core.errors import GENERIC_ERROR_MESSAGE, SubmissionInProgressError, error_message
from contentgen.core.state import (
    EditPrompt,
    Event,
    GenerationRejected,
    GenerationResolved,
    ResponseType,
    SelectResponseType,
    SessionState,
    SubmitClicked,
    reduce,
)

logger = logging.getLogger(__name__)

ContentGenerator = Callable[[str, ResponseType], "str | Awaitable[str]"]


def _default_generator() -> ContentGenerator:
    # Imported lazily so that sessions with injected generators never pull in
    # provider configuration.
    from contentgen.core.content_service import generate_content

    return generate_content


class GenerationSession:
    """Controller for one prompt form.

    Args:
        generator: Callable `(prompt, response_type) -> str`, sync or async.
            Defaults to `content_service.generate_content`.
        session_id: Identifier used by adapters to look the session up.
    """

    def __init__(self, generator: ContentGenerator | None = None, session_id: str | None = None) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self._generator = generator or _default_generator()
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state.loading

    def dispatch(self, event: Event) -> SessionState:
        self._state = reduce(self._state, event)
        return self._state

    def edit_prompt(self, prompt: str) -> SessionState:
        return self.dispatch(EditPrompt(prompt))

    def select_response_type(self, response_type: ResponseType | str) -> SessionState:
        return self.dispatch(SelectResponseType(ResponseType(response_type)))

    def display(self) -> Display:
        return resolve_display(self._state)

    def controls(self) -> Controls:
        return resolve_controls(self._state)

    async def submit(
        self,
        prompt: str | None = None,
        response_type: ResponseType | str | None = None,
    ) -> SessionState:
        """Run one submit-and-display cycle.

        Args:
            prompt: Replaces the current prompt when given.
            response_type: Replaces the current response type when given.

        Returns:
            The final state, which is never `loading`.

        Raises:
            SubmissionInProgressError: a previous submission has not resolved.
        """
        if self._state.loading:
            raise SubmissionInProgressError()

        if prompt is not None:
            self.edit_prompt(prompt)
        if response_type is not None:
            self.select_response_type(response_type)

        state = self.dispatch(SubmitClicked())
        if not state.loading:
            logger.info("Session %s: submission rejected (%s)", self.session_id, state.error)
            return state

        submitted_prompt = state.prompt
        submitted_type = state.response_type
        if DEBUG:
            logger.debug("Session %s: generating %s for %r", self.session_id, submitted_type.value, submitted_prompt)

        try:
            payload = await self._call_generator(submitted_prompt, submitted_type)
        except Exception as exc:
            logger.warning("Session %s: generation failed: %r", self.session_id, exc)
            self.dispatch(GenerationRejected(error_message(exc)))
        else:
            logger.info("Session %s: %s generation succeeded", self.session_id, submitted_type.value)
            self.dispatch(GenerationResolved(payload))
        finally:
            # Cancellation and other BaseExceptions still leave the session usable.
            if self._state.loading:
                logger.warning("Session %s: generation interrupted", self.session_id)
                self.dispatch(GenerationRejected(GENERIC_ERROR_MESSAGE))

        return self._state

    async def _call_generator(self, prompt: str, response_type: ResponseType) -> Any:
        if inspect.iscoroutinefunction(self._generator) or inspect.iscoroutinefunction(
            getattr(self._generator, "__call__", None)
        ):
            return await self._generator(prompt, response_type)

        result = await asyncio.to_thread(self._generator, prompt, response_type)
        if inspect.isawaitable(result):
            result = await result
        return result


class SessionRegistry:
    """In-memory lookup of sessions by id for the lifetime of the process.

    Holds at most `max_sessions` sessions. When full, the least recently used
    session that is not loading is dropped.
    """

    def __init__(self, generator: ContentGenerator | None = None, max_sessions: int = MAX_SESSIONS) -> None:
        self._generator = generator
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, GenerationSession] = OrderedDict()

    def get(self, session_id: str | None) -> GenerationSession | None:
        """Return a stored session without creating one."""
        session = self._sessions.get(session_id) if session_id else None
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def get_or_create(self, session_id: str | None) -> GenerationSession:
        session = self.get(session_id)
        if session is not None:
            return session

        # Unknown ids (stale cookies) get a fresh server-issued id.
        session = GenerationSession(generator=self._generator)
        self._sessions[session.session_id] = session
        self._evict()
        return session

    def blank(self) -> GenerationSession:
        """A fresh session that is not stored, for read-only views."""
        return GenerationSession(generator=self._generator)

    def _evict(self) -> None:
        while len(self._sessions) > self._max_sessions:
            candidates = list(self._sessions.items())[:-1]
            idle_id = next((sid for sid, session in candidates if not session.loading), None)
            if idle_id is None:
                break
            logger.info("Evicting idle session %s", idle_id)
            del self._sessions[idle_id]

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()
