"""High level validation helpers for service descriptions."""
from __future__ import annotations

from typing import Tuple

from servicedesc.document import Document
from servicedesc.resolver import Resolver


def validate_document(doc: Document) -> Tuple[bool, str]:
    """Resolve every reference in ``doc`` without raising.

    Returns a tuple ``(ok, logs)`` where ``logs`` lists one problem per line.
    """
    problems = Resolver(doc).problems()
    if not problems:
        return True, f"{doc.name}: all references resolved"
    logs = "\n".join(f"{type(p).__name__}: {p}" for p in problems)
    return False, logs


__all__ = ["validate_document"]
