"""Content Generator adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation and response shaping.
- Delegates session state and provider calls to `contentgen.core`.
"""
