from __future__ import annotations

import os

# Backend name -> ordered list of environment variable names to probe.
# The first non-empty value wins.
_ENV_KEY_MAP: dict[str, list[str]] = {
    "google": ["GEMINI_CLIENT_API_KEY", "GOOGLE_API_KEY", "GEMINI_API_KEY"],
}


def get_env_api_key(backend: str = "google") -> str | None:
    """Return the first non-empty API key found in the environment for *backend*.

    Returns ``None`` when the backend is unknown or no matching variable is
    set.
    """
    for var in _ENV_KEY_MAP.get(backend, []):
        val = os.environ.get(var)
        if val:
            return val
    return None
