"""Name normalization for Kubernetes-style resource names."""

from __future__ import annotations

import re

__all__ = ["MAX_NAME_LENGTH", "kubify_name"]

# Kubernetes maximum name length (for some names; others can be 253 chars).
MAX_NAME_LENGTH = 63

_DEFAULT_NAME = "default"
_INVALID_CHARS = re.compile(r"[^-a-z0-9]")
_LEADING_NON_ALPHA = re.compile(r"^[^a-z]+")
_TRAILING_NON_ALNUM = re.compile(r"[^a-z0-9]+$")


def kubify_name(old: str) -> str:
    """Turn an arbitrary string into a DNS-label-safe resource name.

    >>> kubify_name("My_Project.v2")
    'my-project-v2'
    >>> kubify_name("123")
    'default'
    """
    name = old.lower()
    name = _INVALID_CHARS.sub("-", name)
    name = _LEADING_NON_ALPHA.sub("", name)
    name = _TRAILING_NON_ALNUM.sub("", name)
    # Truncating can leave a trailing "-", which a DNS label may not end with.
    name = _TRAILING_NON_ALNUM.sub("", name[:MAX_NAME_LENGTH])
    return name or _DEFAULT_NAME
