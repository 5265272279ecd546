from typing import Optional


def mask_key(key: Optional[str]) -> str:
    """Masks an API key for display, keeping the prefix and the last 4 characters."""
    if not key or len(key) <= 10:
        return "****"
    return f"{key[:7]}...{key[-4:]}"
