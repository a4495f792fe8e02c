"""Domain: closed value sets used across the service description model."""
from enum import Enum
from typing import Union

from .errors import ConstraintViolation


class WsdlVersion(Enum):
    WSDL11 = "1.1"
    WSDL20 = "2.0"


class SoapVersion(Enum):
    SOAP11 = "1.1"
    SOAP12 = "1.2"


class BindingStyle(Enum):
    DOCUMENT = "document"
    RPC = "rpc"


class BindingUse(Enum):
    LITERAL = "literal"
    ENCODED = "encoded"


class DerivationControl(Enum):
    ALL = "#all"
    EXTENSION = "extension"
    RESTRICTION = "restriction"
    SUBSTITUTION = "substitution"
    LIST = "list"
    UNION = "union"


class ProcessContents(Enum):
    STRICT = "strict"
    LAX = "lax"
    SKIP = "skip"


class MessageExchangePattern(Enum):
    """WSDL 2.0 message exchange pattern URIs."""

    IN_OUT = "http://www.w3.org/ns/wsdl/in-out"
    IN_ONLY = "http://www.w3.org/ns/wsdl/in-only"
    ROBUST_IN_ONLY = "http://www.w3.org/ns/wsdl/robust-in-only"
    OUT_ONLY = "http://www.w3.org/ns/wsdl/out-only"
    OUT_IN = "http://www.w3.org/ns/wsdl/out-in"
    OUT_OPTIONAL_IN = "http://www.w3.org/ns/wsdl/out-opt-in"
    IN_OPTIONAL_OUT = "http://www.w3.org/ns/wsdl/in-opt-out"
    ROBUST_OUT_ONLY = "http://www.w3.org/ns/wsdl/robust-out-only"


class AddressingVersion(Enum):
    ADDRESSING_2004 = "http://schemas.xmlsoap.org/ws/2004/08/addressing"
    ADDRESSING_2005 = "http://www.w3.org/2005/08/addressing"
    ADDRESSING_WSDL = "http://www.w3.org/2006/05/addressing/wsdl"


class XsdType(Enum):
    """Built-in XML Schema types; values are the local names."""

    STRING = "string"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"
    DURATION = "duration"
    DATE_TIME = "dateTime"
    TIME = "time"
    DATE = "date"
    HEX_BINARY = "hexBinary"
    BASE64_BINARY = "base64Binary"
    ANY_URI = "anyURI"
    QNAME = "QName"
    INTEGER = "integer"
    INT = "int"
    LONG = "long"
    SHORT = "short"
    BYTE = "byte"
    NON_NEGATIVE_INTEGER = "nonNegativeInteger"
    POSITIVE_INTEGER = "positiveInteger"
    NON_POSITIVE_INTEGER = "nonPositiveInteger"
    NEGATIVE_INTEGER = "negativeInteger"
    UNSIGNED_LONG = "unsignedLong"
    UNSIGNED_INT = "unsignedInt"
    UNSIGNED_SHORT = "unsignedShort"
    UNSIGNED_BYTE = "unsignedByte"
    NORMALIZED_STRING = "normalizedString"
    TOKEN = "token"
    LANGUAGE = "language"
    NAME = "Name"
    NCNAME = "NCName"
    ID = "ID"
    IDREF = "IDREF"
    IDREFS = "IDREFS"
    ANY_TYPE = "anyType"
    ANY_SIMPLE_TYPE = "anySimpleType"

    @property
    def ref(self) -> str:
        return f"xsd:{self.value}"


BUILTIN_TYPE_NAMES = frozenset(t.value for t in XsdType)

TypeRef = Union[XsdType, str]


def type_ref(value: TypeRef) -> str:
    """Return the symbolic reference string for ``value``."""
    if isinstance(value, XsdType):
        return value.ref
    if not isinstance(value, str) or not value:
        raise ConstraintViolation(f"type reference must be a non-empty string, got {value!r}")
    return value


def coerce(enum_cls, value, what: str):
    """Return ``value`` as a member of ``enum_cls`` or raise :class:`ConstraintViolation`."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise ConstraintViolation(f"invalid {what} {value!r}; expected one of: {allowed}") from None


__all__ = [
    "WsdlVersion",
    "SoapVersion",
    "BindingStyle",
    "BindingUse",
    "DerivationControl",
    "ProcessContents",
    "MessageExchangePattern",
    "AddressingVersion",
    "XsdType",
    "BUILTIN_TYPE_NAMES",
    "TypeRef",
    "type_ref",
    "coerce",
]
