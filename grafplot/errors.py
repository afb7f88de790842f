from __future__ import annotations


class GrafplotConfigError(ValueError):
    """Raised when a render request cannot be honored as configured."""
