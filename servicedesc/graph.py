"""Domain: messages, port types, bindings and services.

Nodes reference each other by name (``GetUserInput`` or ``tns:GetUserInput``)
so they can be declared in any order; the resolver checks the references when
the document is serialized.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .enums import BindingStyle, BindingUse, MessageExchangePattern, TypeRef, coerce, type_ref
from .errors import ConstraintViolation, DuplicateDefinition
from .model import Documentation, EndpointReference, MimeContent
from .policy import Policy, PolicyAttachments
from .utils import SOAP_HTTP_TRANSPORT


HTTP_VERBS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")
MIME_DIRECTIONS = ("input", "output")


@dataclass
class MessagePart:
    name: str
    type: str
    element: Optional[str] = None


class Message:
    """Named, ordered list of parts."""

    def __init__(self, name: str, parent=None) -> None:
        self.name = name
        self._parent = parent
        self.parts: Dict[str, MessagePart] = {}
        self.docs: List[Documentation] = []

    def part(self, name: str, type: TypeRef, element: Optional[str] = None) -> "Message":
        if name in self.parts:
            raise DuplicateDefinition("part", name, f"message '{self.name}'")
        self.parts[name] = MessagePart(name, type_ref(type), element)
        return self

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "Message":
        self.docs.append(Documentation(content, lang, source))
        return self

    def end(self):
        return self._parent


@dataclass
class Fault:
    name: str
    message: str


@dataclass
class InterfaceFault:
    """WSDL 2.0 interface-level fault declaration."""

    name: str
    element: str


@dataclass
class AddressingAction:
    """WS-Addressing action URIs of one operation."""

    input: Optional[str] = None
    output: Optional[str] = None
    faults: Dict[str, str] = field(default_factory=dict)


@dataclass
class PortTypeOperation:
    name: str
    input: Optional[str] = None
    output: Optional[str] = None
    faults: List[Fault] = field(default_factory=list)
    pattern: Optional[MessageExchangePattern] = None
    output_first: bool = False
    safe: bool = False
    style: Optional[str] = None

    @property
    def exchange_pattern(self) -> MessageExchangePattern:
        """The explicit pattern or the one implied by the declared directions."""
        if self.pattern is not None:
            return self.pattern
        if self.input and self.output:
            if self.output_first:
                return MessageExchangePattern.OUT_IN
            return MessageExchangePattern.IN_OUT
        if self.input:
            return MessageExchangePattern.ROBUST_IN_ONLY if self.faults else MessageExchangePattern.IN_ONLY
        return MessageExchangePattern.ROBUST_OUT_ONLY if self.faults else MessageExchangePattern.OUT_ONLY

    @property
    def directions(self) -> Tuple[str, ...]:
        """``input``/``output`` in the order they appear in the document."""
        present = [d for d in ("input", "output") if getattr(self, d)]
        if self.output_first:
            present.reverse()
        return tuple(present)


class PortType:
    """Port type (WSDL 1.1) or interface (WSDL 2.0)."""

    def __init__(self, name: str, parent=None) -> None:
        self.name = name
        self._parent = parent
        self.operations: Dict[str, PortTypeOperation] = {}
        self.actions: Dict[str, AddressingAction] = {}
        self.addressing = False
        self.base_interfaces: List[str] = []
        self.interface_faults: List[InterfaceFault] = []
        self.docs: List[Documentation] = []

    def operation(
        self,
        name: str,
        input: Optional[str] = None,
        output: Optional[str] = None,
        fault: Optional[str] = None,
        *,
        faults: Optional[List[Tuple[str, str]]] = None,
        pattern=None,
        solicit: bool = False,
        safe: bool = False,
        style: Optional[str] = None,
    ) -> "PortType":
        """Add an operation.

        ``fault`` names a fault message used as both fault name and message;
        ``faults`` takes explicit ``(name, message)`` pairs. ``solicit`` marks
        an output-first (solicit-response) operation.
        """
        if name in self.operations:
            raise DuplicateDefinition("operation", name, f"port type '{self.name}'")
        if not input and not output:
            raise ConstraintViolation(f"operation '{name}' needs an input or an output message")
        if solicit and not (input and output):
            raise ConstraintViolation(f"solicit-response operation '{name}' needs input and output")
        declared = [Fault(fault, fault)] if fault else []
        declared.extend(Fault(n, m) for n, m in (faults or []))
        mep = coerce(MessageExchangePattern, pattern, "message exchange pattern") if pattern else None
        self.operations[name] = PortTypeOperation(
            name=name,
            input=input or None,
            output=output or None,
            faults=declared,
            pattern=mep,
            output_first=solicit,
            safe=safe,
            style=style,
        )
        return self

    def using_addressing(self, enabled: bool = True) -> "PortType":
        self.addressing = enabled
        return self

    def action(self, operation: str, input: Optional[str], output: Optional[str] = None) -> "PortType":
        self.actions[operation] = AddressingAction(input, output)
        return self

    def fault_action(self, operation: str, fault: str, action: str) -> "PortType":
        if operation not in self.actions:
            raise ConstraintViolation(
                f"no action defined for operation '{operation}'; call action() first"
            )
        self.actions[operation].faults[fault] = action
        return self

    def extends(self, *interfaces: str) -> "PortType":
        """WSDL 2.0 interface inheritance."""
        self.base_interfaces.extend(interfaces)
        return self

    def interface_fault(self, name: str, element: str) -> "PortType":
        if any(f.name == name for f in self.interface_faults):
            raise DuplicateDefinition("interface fault", name, f"interface '{self.name}'")
        self.interface_faults.append(InterfaceFault(name, element))
        return self

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "PortType":
        self.docs.append(Documentation(content, lang, source))
        return self

    def end(self):
        return self._parent


@dataclass
class HeaderFault:
    message: str
    part: str
    use: BindingUse = BindingUse.LITERAL
    namespace: Optional[str] = None
    encoding_style: Optional[str] = None


@dataclass
class Header:
    """``soap:header`` bound into an operation's input."""

    message: str
    part: str
    use: BindingUse = BindingUse.LITERAL
    namespace: Optional[str] = None
    encoding_style: Optional[str] = None
    faults: List[HeaderFault] = field(default_factory=list)


class MimePart:
    def __init__(self, parent, name: Optional[str] = None) -> None:
        self._parent = parent
        self.name = name
        self.contents: List[MimeContent] = []
        self.xml_part: Optional[str] = None
        self.soap_body = False

    def content(self, part: Optional[str] = None, type: Optional[str] = None) -> "MimePart":
        self.contents.append(MimeContent(part, type))
        return self

    def mime_xml(self, part: str) -> "MimePart":
        self.xml_part = part
        return self

    def body(self) -> "MimePart":
        """Carry the SOAP body in this part."""
        self.soap_body = True
        return self

    def end(self) -> "MimeMultipartRelated":
        return self._parent


class MimeMultipartRelated:
    """``mime:multipartRelated`` replacing the SOAP body of one direction."""

    def __init__(self, parent=None) -> None:
        self._parent = parent
        self.parts: List[MimePart] = []

    def part(self, name: Optional[str] = None) -> MimePart:
        mime_part = MimePart(self, name)
        self.parts.append(mime_part)
        return mime_part

    def end(self):
        return self._parent


class BindingOperation:
    """Protocol details for one operation of a binding."""

    def __init__(self, name: str, soap_action: Optional[str], style: BindingStyle, use: BindingUse, parent=None) -> None:
        self.name = name
        self.soap_action = soap_action
        self.style = style
        self.use = use
        self._parent = parent
        self.headers: List[Header] = []
        self.input_mime: Optional[MimeMultipartRelated] = None
        self.output_mime: Optional[MimeMultipartRelated] = None
        self.http_location: Optional[str] = None
        self.http_encoding: Optional[str] = None
        self.policies = PolicyAttachments(self)
        self.docs: List[Documentation] = []

    def policy(self, id: Optional[str] = None, name: Optional[str] = None) -> Policy:
        return self.policies.policy(id=id, name=name)

    def policy_reference(self, uri: str, digest: Optional[str] = None, digest_algorithm: Optional[str] = None) -> "BindingOperation":
        self.policies.reference(uri, digest, digest_algorithm)
        return self

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "BindingOperation":
        self.docs.append(Documentation(content, lang, source))
        return self

    def end(self):
        return self._parent


class Binding:
    """Concrete SOAP or HTTP realization of a port type.

    Header, MIME and HTTP detail calls apply to the most recently added
    operation.
    """

    def __init__(
        self,
        name: str,
        port_type: str,
        parent=None,
        style=BindingStyle.DOCUMENT,
        use=BindingUse.LITERAL,
        transport: str = SOAP_HTTP_TRANSPORT,
    ) -> None:
        self.name = name
        self.port_type = port_type
        self._parent = parent
        self.style = coerce(BindingStyle, style, "binding style")
        self.use = coerce(BindingUse, use, "binding use")
        self.transport = transport
        self.operations: Dict[str, BindingOperation] = {}
        self.addressing = False
        self.http_verb: Optional[str] = None
        self.policies = PolicyAttachments(self)
        self.docs: List[Documentation] = []

    def operation(self, name: str, soap_action: Optional[str] = None, style=None, use=None) -> "Binding":
        """Bind operation ``name``.

        Without an explicit ``soap_action`` the action defaults to
        ``{targetNamespace}/{name}`` when the binding belongs to a document.
        """
        if name in self.operations:
            raise DuplicateDefinition("operation", name, f"binding '{self.name}'")
        if soap_action is None and self._parent is not None:
            soap_action = f"{self._parent.target_namespace}/{name}"
        self.operations[name] = BindingOperation(
            name,
            soap_action,
            coerce(BindingStyle, style, "binding style") if style else self.style,
            coerce(BindingUse, use, "binding use") if use else self.use,
            parent=self,
        )
        return self

    def last_operation(self, purpose: str = "operation details") -> BindingOperation:
        if not self.operations:
            raise ConstraintViolation(f"binding '{self.name}' has no operation to add {purpose} to")
        return next(reversed(self.operations.values()))

    def header(self, message: str, part: str, use=None, namespace: Optional[str] = None, encoding_style: Optional[str] = None) -> "Binding":
        operation = self.last_operation("a header")
        operation.headers.append(
            Header(
                message,
                part,
                coerce(BindingUse, use, "header use") if use else operation.use,
                namespace,
                encoding_style,
            )
        )
        return self

    def header_fault(self, message: str, part: str, use=None, namespace: Optional[str] = None, encoding_style: Optional[str] = None) -> "Binding":
        operation = self.last_operation("a header fault")
        if not operation.headers:
            raise ConstraintViolation(f"operation '{operation.name}' has no header to add a fault to")
        header = operation.headers[-1]
        header.faults.append(
            HeaderFault(
                message,
                part,
                coerce(BindingUse, use, "header fault use") if use else header.use,
                namespace,
                encoding_style,
            )
        )
        return self

    def mime_multipart(self, direction: str) -> MimeMultipartRelated:
        if direction not in MIME_DIRECTIONS:
            raise ConstraintViolation(f"invalid MIME direction {direction!r}; expected 'input' or 'output'")
        operation = self.last_operation("MIME")
        multipart = MimeMultipartRelated(self)
        setattr(operation, f"{direction}_mime", multipart)
        return multipart

    def input_mime(self) -> MimeMultipartRelated:
        return self.mime_multipart("input")

    def output_mime(self) -> MimeMultipartRelated:
        return self.mime_multipart("output")

    def http_binding(self, verb: str) -> "Binding":
        verb = verb.upper()
        if verb not in HTTP_VERBS:
            raise ConstraintViolation(f"invalid HTTP verb {verb!r}")
        self.http_verb = verb
        return self

    def http_operation(self, location: str) -> "Binding":
        self.last_operation("an HTTP location").http_location = location
        return self

    def http_url_encoded(self) -> "Binding":
        self.last_operation("HTTP URL encoding").http_encoding = "urlEncoded"
        return self

    def http_url_replacement(self) -> "Binding":
        self.last_operation("HTTP URL replacement").http_encoding = "urlReplacement"
        return self

    @property
    def is_http(self) -> bool:
        return self.http_verb is not None

    def using_addressing(self, enabled: bool = True) -> "Binding":
        self.addressing = enabled
        return self

    def policy(self, id: Optional[str] = None, name: Optional[str] = None) -> Policy:
        return self.policies.policy(id=id, name=name)

    def policy_reference(self, uri: str, digest: Optional[str] = None, digest_algorithm: Optional[str] = None) -> "Binding":
        self.policies.reference(uri, digest, digest_algorithm)
        return self

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "Binding":
        self.docs.append(Documentation(content, lang, source))
        return self

    def end(self):
        return self._parent


@dataclass
class Port:
    name: str
    binding: str
    address: str
    endpoint_reference: Optional[EndpointReference] = None


class Service:
    def __init__(self, name: str, parent=None, interface: Optional[str] = None) -> None:
        self.name = name
        self._parent = parent
        self.interface = interface
        self.ports: Dict[str, Port] = {}
        self.policies = PolicyAttachments(self)
        self.docs: List[Documentation] = []

    def port(self, name: str, binding: str, address: str, endpoint_reference: Optional[EndpointReference] = None) -> "Service":
        if name in self.ports:
            raise DuplicateDefinition("port", name, f"service '{self.name}'")
        self.ports[name] = Port(name, binding, address, endpoint_reference)
        return self

    def policy(self, id: Optional[str] = None, name: Optional[str] = None) -> Policy:
        return self.policies.policy(id=id, name=name)

    def policy_reference(self, uri: str, digest: Optional[str] = None, digest_algorithm: Optional[str] = None) -> "Service":
        self.policies.reference(uri, digest, digest_algorithm)
        return self

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "Service":
        self.docs.append(Documentation(content, lang, source))
        return self

    def end(self):
        return self._parent


__all__ = [
    "MessagePart",
    "Message",
    "Fault",
    "InterfaceFault",
    "AddressingAction",
    "PortTypeOperation",
    "PortType",
    "Header",
    "HeaderFault",
    "MimePart",
    "MimeMultipartRelated",
    "BindingOperation",
    "Binding",
    "Port",
    "Service",
]
