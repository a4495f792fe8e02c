"""Domain: error kinds raised while building or serializing a service description."""
from typing import Optional


class WsdlBuildError(ValueError):
    """Base class for every error raised by the document model."""


class ConstraintViolation(WsdlBuildError):
    """A locally checkable rule was broken by the offending call.

    Raised before any mutation so the graph is left as it was.
    """


class DuplicateDefinition(WsdlBuildError):
    """A name collided inside a symbol table that does not allow overwrites."""

    def __init__(self, kind: str, name: str, container: Optional[str] = None) -> None:
        self.kind = kind
        self.name = name
        self.container = container
        where = f" in {container}" if container else ""
        super().__init__(f"duplicate {kind} '{name}'{where}")


class UnresolvedReference(WsdlBuildError):
    """A symbolic reference could not be resolved at serialization time."""

    kind = "reference"

    def __init__(self, referrer: str, name: str, detail: str = "") -> None:
        self.referrer = referrer
        self.name = name
        message = f"{referrer}: unresolved {self.kind} '{name}'"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnresolvedTypeReference(UnresolvedReference):
    """A type, element group or attribute group reference is dangling."""

    kind = "type reference"


__all__ = [
    "WsdlBuildError",
    "ConstraintViolation",
    "DuplicateDefinition",
    "UnresolvedReference",
    "UnresolvedTypeReference",
]
