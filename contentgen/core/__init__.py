"""Core session package.

Architectural role:
    Holds the generation-session state machine that sits between API/CLI
    entrypoints and the provider adapters (`contentgen.llm`, `contentgen.image`).

Composition:
    - `state`: Session snapshot, events, and the pure reducer.
    - `display`: Pure state-to-display resolution.
    - `session`: Async controller running one provider call per submission.
    - `content_service`: Text/image dispatch used as the default generator.
    - `errors`: Validation and generation error types.

Determinism and side effects:
    Package import itself is deterministic and side-effect free. Provider calls
    happen only inside `GenerationSession.submit`.
"""
