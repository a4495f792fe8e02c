"""Domain value objects shared by the type registry, the operation graph and the extensions."""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .enums import AddressingVersion, coerce
from .errors import ConstraintViolation


@dataclass(frozen=True)
class Documentation:
    """Human readable documentation attached to a node."""

    content: str
    lang: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class AppInfo:
    """Machine readable ``xsd:appinfo`` payload."""

    content: str
    source: Optional[str] = None


@dataclass(frozen=True)
class WsdlImport:
    namespace: str
    location: str


@dataclass(frozen=True)
class SchemaImport:
    namespace: str
    schema_location: Optional[str] = None
    prefix: Optional[str] = None


@dataclass(frozen=True)
class SchemaInclude:
    schema_location: str


@dataclass(frozen=True)
class PolicyReference:
    """External ``wsp:PolicyReference`` with an optional digest."""

    uri: str
    digest: Optional[str] = None
    digest_algorithm: Optional[str] = None


@dataclass(frozen=True)
class QualifiedValue:
    """A namespace-qualified element carrying a text value."""

    namespace: str
    local_name: str
    value: str


@dataclass(frozen=True)
class EndpointReference:
    """WS-Addressing endpoint reference."""

    address: str
    reference_parameters: Tuple[QualifiedValue, ...] = ()
    metadata: Tuple[QualifiedValue, ...] = ()
    version: AddressingVersion = AddressingVersion.ADDRESSING_2005

    def __post_init__(self) -> None:
        object.__setattr__(self, "version", coerce(AddressingVersion, self.version, "addressing version"))
        if self.version is AddressingVersion.ADDRESSING_WSDL:
            raise ConstraintViolation(
                "endpoint references use the 2004/08 or 2005/08 addressing namespace"
            )

    def with_parameter(self, namespace: str, local_name: str, value: str) -> "EndpointReference":
        """Return a copy with one more reference parameter."""
        param = QualifiedValue(namespace, local_name, value)
        return replace(self, reference_parameters=self.reference_parameters + (param,))

    def with_metadata(self, namespace: str, local_name: str, value: str) -> "EndpointReference":
        """Return a copy with one more metadata entry."""
        item = QualifiedValue(namespace, local_name, value)
        return replace(self, metadata=self.metadata + (item,))


@dataclass(frozen=True)
class MimeContent:
    part: Optional[str] = None
    type: Optional[str] = None


__all__ = [
    "Documentation",
    "AppInfo",
    "WsdlImport",
    "SchemaImport",
    "SchemaInclude",
    "PolicyReference",
    "QualifiedValue",
    "EndpointReference",
    "MimeContent",
]
