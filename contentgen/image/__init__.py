"""Image generation adapter package.

Scope:
    Provides text-to-image provider clients and a small dispatch service used by
    `contentgen.core.content_service` for `image` response types.

Non-goals:
    - No image editing or upload handling.
    - No temporary-file creation or cleanup responsibilities.
"""
