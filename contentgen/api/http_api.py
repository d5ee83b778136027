"""
HTTP API adapter for generation sessions.

Architectural role:
- Serve the single-page prompt form.
- Expose JSON endpoints that drive a per-browser `GenerationSession`.
- Normalize session state to response contracts (HTML or JSON).

Endpoint responsibilities:
- `GET /`: render the form and result area from the caller's session.
- `GET /api/session`: current session view.
- `PUT /api/session/prompt`: edit the prompt.
- `PUT /api/session/response-type`: select `text` or `image`.
- `POST /api/session/generate`: run one submission and return the final view.

Session handling:
- Sessions are kept in an in-memory `SessionRegistry` keyed by the
  `session_id` cookie. Nothing survives a process restart.
- Only edits and submissions create a session and issue the cookie. Reads
  without a known cookie render the initial form and store nothing.
- Endpoints are coroutines so that every session mutation runs on the event
  loop; the loading check and the state change are never split across threads.

Error handling strategy:
- Blank prompts and provider failures are session state, returned with HTTP 200.
- A submission while the same session is loading returns HTTP 409.
- Invalid response types are rejected by request validation (HTTP 422).
"""

import html
import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from contentgen.config import DEBUG, HOST, PORT, SESSION_COOKIE, configure_logging
from contentgen.core.display import DisplayKind
from contentgen.core.errors import SubmissionInProgressError
from contentgen.core.session import GenerationSession, SessionRegistry
from contentgen.core.state import ResponseType

logger = logging.getLogger(__name__)

app = FastAPI(title="Content Generator")
sessions = SessionRegistry()


# ============================================================
# Request / Response Schemas
# ============================================================

class PromptUpdate(BaseModel):
    prompt: str


class ResponseTypeUpdate(BaseModel):
    response_type: ResponseType


class GenerateRequest(BaseModel):
    """Optional input overrides applied before submitting."""
    prompt: str | None = None
    response_type: ResponseType | None = None


class DisplayView(BaseModel):
    kind: DisplayKind
    content: str


class ControlsView(BaseModel):
    disabled: bool
    button_label: str
    selected_response_type: ResponseType


class SessionView(BaseModel):
    session_id: str | None = None
    prompt: str
    response_type: ResponseType
    status: str
    loading: bool
    result: str | None = None
    error: str | None = None
    display: DisplayView
    controls: ControlsView


def build_view(session: GenerationSession) -> SessionView:
    state = session.state
    display = session.display()
    controls = session.controls()
    return SessionView(
        session_id=session.session_id,
        prompt=state.prompt,
        response_type=state.response_type,
        status=state.status.value,
        loading=state.loading,
        result=state.result,
        error=state.error,
        display=DisplayView(kind=display.kind, content=display.content),
        controls=ControlsView(
            disabled=controls.disabled,
            button_label=controls.button_label,
            selected_response_type=controls.selected_response_type,
        ),
    )


# ============================================================
# Session Lookup
# ============================================================

def find_session(request: Request) -> GenerationSession | None:
    return sessions.get(request.cookies.get(SESSION_COOKIE))


def read_view(request: Request) -> SessionView:
    """View of the caller's session, or of a blank form if there is none."""
    session = find_session(request)
    if session is None:
        return build_view(sessions.blank()).model_copy(update={"session_id": None})
    return build_view(session)


def get_session(request: Request, response: Response) -> GenerationSession:
    """Return the caller's session, creating it and issuing a cookie if needed."""
    session = sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
    if request.cookies.get(SESSION_COOKIE) != session.session_id:
        response.set_cookie(SESSION_COOKIE, session.session_id, httponly=True, samesite="lax")
    return session


# ============================================================
# Page Rendering
# ============================================================

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Content Generator</title>
</head>
<body>
<header>
<h1>Best Content Generator</h1>
<p>Create text or images with the power of AI.</p>
</header>
<main>
<label for="prompt">Your Prompt</label>
<textarea id="prompt" rows="4" placeholder="e.g., A futuristic cityscape at sunset"{disabled}>{prompt}</textarea>
<div>
<button type="button" data-response-type="text"{text_selected}{disabled}>Text</button>
<button type="button" data-response-type="image"{image_selected}{disabled}>Image</button>
<button type="button" id="generate"{disabled}>{button_label}</button>
</div>
<section id="result">{result}</section>
</main>
<script>
let responseType = "{response_type}";
document.querySelectorAll("[data-response-type]").forEach((button) => {{
  button.addEventListener("click", async () => {{
    responseType = button.dataset.responseType;
    await fetch("/api/session/prompt", {{
      method: "PUT",
      headers: {{"Content-Type": "application/json"}},
      body: JSON.stringify({{prompt: document.getElementById("prompt").value}}),
    }});
    await fetch("/api/session/response-type", {{
      method: "PUT",
      headers: {{"Content-Type": "application/json"}},
      body: JSON.stringify({{response_type: responseType}}),
    }});
    location.reload();
  }});
}});
document.getElementById("generate").addEventListener("click", async () => {{
  document.querySelectorAll("button, textarea").forEach((el) => el.disabled = true);
  document.getElementById("generate").textContent = "Generating...";
  document.getElementById("result").textContent = "Generating content, please wait...";
  await fetch("/api/session/generate", {{
    method: "POST",
    headers: {{"Content-Type": "application/json"}},
    body: JSON.stringify({{prompt: document.getElementById("prompt").value, response_type: responseType}}),
  }});
  location.reload();
}});
</script>
</body>
</html>
"""


def render_result(view: SessionView) -> str:
    """Render the result area markup for a session view."""
    kind = view.display.kind
    content = html.escape(view.display.content)

    if kind is DisplayKind.LOADING:
        return f'<p class="loading">{content}</p>'
    if kind is DisplayKind.ERROR:
        return f'<div class="error">{content}</div>'
    if kind is DisplayKind.TEXT:
        return f'<p style="white-space: pre-wrap">{content}</p>'
    if kind is DisplayKind.IMAGE:
        return f'<img src="{html.escape(view.display.content, quote=True)}" alt="Generated content">'
    return f'<p class="placeholder">{content}</p>'


def render_page(view: SessionView) -> str:
    disabled = " disabled" if view.controls.disabled else ""
    selected = view.controls.selected_response_type
    return PAGE_TEMPLATE.format(
        disabled=disabled,
        prompt=html.escape(view.prompt),
        text_selected=' aria-pressed="true"' if selected is ResponseType.TEXT else "",
        image_selected=' aria-pressed="true"' if selected is ResponseType.IMAGE else "",
        button_label=html.escape(view.controls.button_label),
        response_type=selected.value,
        result=render_result(view),
    )


# ============================================================
# Endpoints
# ============================================================

@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return HTMLResponse(render_page(read_view(request)))


@app.get("/api/session", response_model=SessionView)
async def read_session(request: Request):
    return read_view(request)


@app.put("/api/session/prompt", response_model=SessionView)
async def update_prompt(body: PromptUpdate, request: Request, response: Response):
    session = get_session(request, response)
    session.edit_prompt(body.prompt)
    return build_view(session)


@app.put("/api/session/response-type", response_model=SessionView)
async def update_response_type(body: ResponseTypeUpdate, request: Request, response: Response):
    session = get_session(request, response)
    session.select_response_type(body.response_type)
    return build_view(session)


@app.post("/api/session/generate", response_model=SessionView)
async def generate(body: GenerateRequest, request: Request, response: Response):
    """
    Run one submission for the caller's session.

    Lifecycle:
    1. Resolve the session from the cookie (or create one).
    2. Apply optional prompt/response-type overrides.
    3. Await the provider call via `GenerationSession.submit`.
    4. Return the final session view.

    A second call while the first is still loading returns HTTP 409 with the
    current view and does not touch the in-flight submission.
    """
    session = get_session(request, response)

    if DEBUG:
        logger.debug("Generate request for session %s: %r", session.session_id, body)

    try:
        await session.submit(prompt=body.prompt, response_type=body.response_type)
    except SubmissionInProgressError as exc:
        return JSONResponse(
            status_code=409,
            content={"error": exc.message, "session": build_view(session).model_dump(mode="json")},
            headers=dict(response.headers),
        )

    return build_view(session)


def serve():
    """Run the HTTP app with uvicorn using `HOST`/`PORT`."""
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    serve()
