"""
Interactive CLI adapter for generation sessions.

Architectural role:
- Provides a terminal-only interface over one `GenerationSession`.
- Renders the session display after every submission.

Request lifecycle (per input line):
1. Read a single line from stdin.
2. Handle local control commands (`exit`/`quit`, `/text`, `/image`, `/help`).
3. Submit any other line as the prompt (blank lines included, so the
   validation message is shown).
4. Print the resolved display.

Error handling strategy:
- Handles EOF and keyboard interrupts without traceback output.
- Provider failures are already session state; nothing is raised here.
"""

import asyncio
import sys

from contentgen.config import configure_logging
from contentgen.core.display import Display, DisplayKind
from contentgen.core.session import GenerationSession
from contentgen.core.state import ResponseType


# =========================================================
# UTF-8 SAFE OUTPUT
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    except (AttributeError, ValueError):
        pass


HELP_TEXT = """Commands:
 /text   generate text (default)
 /image  generate an image
 /help   show this help
 exit    quit
Anything else is sent as the prompt."""

INTERRUPTED_MESSAGE = "Generation interrupted."


def format_display(display: Display) -> str:
    """Return terminal text for a resolved display."""
    if display.kind is DisplayKind.ERROR:
        return f"Error: {display.content}"
    if display.kind is DisplayKind.IMAGE:
        return f"Image: {display.content}"
    return display.content


def handle_line(session: GenerationSession, line: str) -> str | None:
    """Process one input line and return the text to print.

    Returns `None` when the session should end. Ctrl-C during a submission
    cancels it and leaves the session ready for the next prompt.
    """
    command = line.strip().lower()

    if command in ("exit", "quit"):
        return None

    if command == "/help":
        return HELP_TEXT

    if command in ("/text", "/image"):
        session.select_response_type(ResponseType(command[1:]))
        return f"Response type: {session.state.response_type.value}"

    try:
        asyncio.run(session.submit(prompt=line))
    except KeyboardInterrupt:
        return INTERRUPTED_MESSAGE
    return format_display(session.display())


def main():
    """Run the interactive terminal session."""
    configure_logging()
    session = GenerationSession()

    print("Best Content Generator. (Type '/help' for commands, 'exit' to quit)\n")
    print("-" * 60)

    while True:
        try:
            line = input(f"Prompt [{session.state.response_type.value}]: ")

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nInterrupted.")
            break

        output = handle_line(session, line)
        if output is None:
            print("Shutting down.")
            break

        print("\n" + output)
        print("\n" + "-" * 60 + "\n")


if __name__ == "__main__":
    main()
