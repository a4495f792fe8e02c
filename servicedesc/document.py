"""Domain: the service description root and its shorthand operation builders."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .enums import (
    BindingStyle,
    BindingUse,
    SoapVersion,
    TypeRef,
    WsdlVersion,
    coerce,
    type_ref,
)
from .errors import ConstraintViolation, DuplicateDefinition
from .graph import AddressingAction, Binding, Message, PortType, Service
from .model import Documentation, SchemaImport, SchemaInclude, WsdlImport
from .policy import Policy, PolicyAttachments
from .utils import PREFERRED_PREFIXES, SOAP_HTTP_TRANSPORT, XSD_PREFIXES
from .xsd import AttributeGroup, ComplexType, ElementGroup, ListType, SimpleType, TypeRegistry, UnionType

logger = logging.getLogger(__name__)

RESERVED_PREFIXES = frozenset({"tns", "xml", "xmlns"}) | XSD_PREFIXES


class SchemaRedefine:
    """``xsd:redefine`` whose components live in their own registry."""

    def __init__(self, schema_location: str, parent=None) -> None:
        self.schema_location = schema_location
        self._parent = parent
        self.types = TypeRegistry(owner=self)

    def simple_type(self, name: str, base: TypeRef = "xsd:string", final=None) -> SimpleType:
        return self.types.simple_type(name, base, final)

    def complex_type(self, name: str, **options) -> ComplexType:
        return self.types.complex_type(name, **options)

    def attribute_group(self, name: str) -> AttributeGroup:
        return self.types.attribute_group(name)

    def group(self, name: str) -> ElementGroup:
        return self.types.element_group(name)

    def end(self):
        return self._parent


@dataclass
class Parameter:
    name: str
    type: str


class _Shorthand:
    def __init__(self, document: "Document", name: str) -> None:
        self._document = document
        self.name = name
        self.inputs: List[Parameter] = []
        self.outputs: List[Parameter] = []
        self.faults: List[Parameter] = []
        self.explicit_action: Optional[str] = None
        self.addressing: Optional[AddressingAction] = None

    def soap_action(self, action: str):
        self.explicit_action = action
        return self


class OperationBuilder(_Shorthand):
    """Request-response shorthand: ``doc.operation("GetUser").input(...).output(...).end()``."""

    def input(self, name: str, type: TypeRef) -> "OperationBuilder":
        self.inputs.append(Parameter(name, type_ref(type)))
        return self

    def output(self, name: str, type: TypeRef) -> "OperationBuilder":
        self.outputs.append(Parameter(name, type_ref(type)))
        return self

    def fault(self, name: str, type: TypeRef) -> "OperationBuilder":
        self.faults.append(Parameter(name, type_ref(type)))
        return self

    def action(self, input: str, output: Optional[str] = None) -> "OperationBuilder":
        self.addressing = AddressingAction(input, output)
        return self

    def fault_action(self, fault: str, action: str) -> "OperationBuilder":
        if self.addressing is None:
            raise ConstraintViolation(
                f"no action defined for operation '{self.name}'; call action() first"
            )
        self.addressing.faults[fault] = action
        return self

    def end(self) -> "Document":
        return self._document._commit_shorthand(self, with_input=True, with_output=True)


class OneWayBuilder(_Shorthand):
    """Input-only shorthand."""

    def input(self, name: str, type: TypeRef) -> "OneWayBuilder":
        self.inputs.append(Parameter(name, type_ref(type)))
        return self

    def end(self) -> "Document":
        return self._document._commit_shorthand(self, with_input=True, with_output=False)


class NotificationBuilder(_Shorthand):
    """Output-only shorthand."""

    def output(self, name: str, type: TypeRef) -> "NotificationBuilder":
        self.outputs.append(Parameter(name, type_ref(type)))
        return self

    def end(self) -> "Document":
        return self._document._commit_shorthand(self, with_input=False, with_output=True)


class Document:
    """Root of a service description.

    Build the graph through the factory methods, then call :meth:`build` to
    get the XML text. The target namespace is fixed at creation.
    """

    def __init__(
        self,
        name: str,
        target_namespace: str,
        *,
        wsdl_version=WsdlVersion.WSDL11,
        soap_version=SoapVersion.SOAP11,
        default_style=BindingStyle.DOCUMENT,
        default_use=BindingUse.LITERAL,
        transport: str = SOAP_HTTP_TRANSPORT,
    ) -> None:
        if not name:
            raise ConstraintViolation("a service description needs a name")
        if not target_namespace:
            raise ConstraintViolation("a service description needs a target namespace")
        self.name = name
        self._target_namespace = target_namespace
        self.wsdl_version = coerce(WsdlVersion, wsdl_version, "WSDL version")
        self.soap_version = coerce(SoapVersion, soap_version, "SOAP version")
        self.default_style = coerce(BindingStyle, default_style, "binding style")
        self.default_use = coerce(BindingUse, default_use, "binding use")
        self.transport = transport
        self.types = TypeRegistry(owner=self)
        self.messages: Dict[str, Message] = {}
        self.port_types: Dict[str, PortType] = {}
        self.bindings: Dict[str, Binding] = {}
        self.services: Dict[str, Service] = {}
        self.imports: List[WsdlImport] = []
        self.schema_imports: List[SchemaImport] = []
        self.schema_includes: List[SchemaInclude] = []
        self.redefines: List[SchemaRedefine] = []
        self.namespaces: Dict[str, str] = {}
        self.policies = PolicyAttachments(self)
        self.docs: List[Documentation] = []

    @property
    def target_namespace(self) -> str:
        return self._target_namespace

    @property
    def default_port_type_name(self) -> str:
        return f"{self.name}PortType"

    @property
    def default_binding_name(self) -> str:
        return f"{self.name}Binding"

    # XML Schema

    def simple_type(self, name: str, base: TypeRef = "xsd:string", final=None) -> SimpleType:
        return self.types.simple_type(name, base, final)

    def complex_type(self, name: str, **options) -> ComplexType:
        return self.types.complex_type(name, **options)

    def list_type(self, name: str, item_type: TypeRef) -> ListType:
        return self.types.list_type(name, item_type)

    def union_type(self, name: str, *member_types: TypeRef) -> UnionType:
        return self.types.union_type(name, *member_types)

    def element_group(self, name: str) -> ElementGroup:
        return self.types.element_group(name)

    def attribute_group(self, name: str) -> AttributeGroup:
        return self.types.attribute_group(name)

    def schema_import(self, namespace: str, schema_location: Optional[str] = None, prefix: Optional[str] = None) -> "Document":
        if prefix is not None:
            self._bind_prefix(prefix, namespace)
        self.schema_imports.append(SchemaImport(namespace, schema_location, prefix))
        return self

    def schema_include(self, schema_location: str) -> "Document":
        self.schema_includes.append(SchemaInclude(schema_location))
        return self

    def redefine(self, schema_location: str) -> SchemaRedefine:
        redefine = SchemaRedefine(schema_location, self)
        self.redefines.append(redefine)
        return redefine

    # Message/operation graph

    def message(self, name: str) -> Message:
        self.messages[name] = Message(name, self)
        return self.messages[name]

    def port_type(self, name: str) -> PortType:
        self.port_types[name] = PortType(name, self)
        return self.port_types[name]

    interface = port_type

    def binding(self, name: str, port_type: str, *, style=None, use=None, transport: Optional[str] = None) -> Binding:
        self.bindings[name] = Binding(
            name,
            port_type,
            self,
            style=style or self.default_style,
            use=use or self.default_use,
            transport=transport or self.transport,
        )
        return self.bindings[name]

    def service(self, name: str, interface: Optional[str] = None) -> Service:
        self.services[name] = Service(name, self, interface)
        return self.services[name]

    def import_wsdl(self, namespace: str, location: str) -> "Document":
        self.imports.append(WsdlImport(namespace, location))
        return self

    def namespace(self, prefix: str, uri: str) -> "Document":
        """Declare ``prefix`` for QName references into ``uri``."""
        self._bind_prefix(prefix, uri)
        return self

    def _bind_prefix(self, prefix: str, uri: str) -> None:
        if prefix in RESERVED_PREFIXES:
            raise ConstraintViolation(f"prefix '{prefix}' is reserved")
        bound = self.namespaces.get(prefix)
        if bound is not None and bound != uri:
            raise DuplicateDefinition("namespace prefix", prefix, f"document '{self.name}'")
        self.namespaces[prefix] = uri

    def prefix_uri(self, prefix: str) -> Optional[str]:
        """Return the namespace a reference prefix stands for, or ``None``."""
        if prefix == "tns":
            return self.target_namespace
        if prefix in self.namespaces:
            return self.namespaces[prefix]
        for uri, preferred in PREFERRED_PREFIXES.items():
            if preferred == prefix:
                return uri
        return None

    # Shorthand operations

    def operation(self, name: str) -> OperationBuilder:
        return OperationBuilder(self, name)

    def one_way(self, name: str) -> OneWayBuilder:
        return OneWayBuilder(self, name)

    def notification(self, name: str) -> NotificationBuilder:
        return NotificationBuilder(self, name)

    def _commit_shorthand(self, shorthand: _Shorthand, *, with_input: bool, with_output: bool) -> "Document":
        name = shorthand.name
        port_type_name = self.default_port_type_name
        binding_name = self.default_binding_name
        port_type = self.port_types.get(port_type_name)
        binding = self.bindings.get(binding_name)
        if port_type is not None and name in port_type.operations:
            raise DuplicateDefinition("operation", name, f"port type '{port_type_name}'")
        if binding is not None and name in binding.operations:
            raise DuplicateDefinition("operation", name, f"binding '{binding_name}'")

        input_message = output_message = fault_message = None
        if with_input:
            request = self.complex_type(f"{name}Request")
            for param in shorthand.inputs:
                request.element(param.name, param.type)
            input_message = f"{name}Input"
            self.message(input_message).part("parameters", f"tns:{name}Request")
        if with_output:
            response = self.complex_type(f"{name}Response")
            for param in shorthand.outputs:
                response.element(param.name, param.type)
            output_message = f"{name}Output"
            self.message(output_message).part("parameters", f"tns:{name}Response")
        if shorthand.faults:
            fault_message = f"{name}Fault"
            fault_type = self.complex_type(fault_message)
            for param in shorthand.faults:
                fault_type.element(param.name, param.type)
            self.message(fault_message).part("fault", f"tns:{fault_message}")

        if port_type is None:
            port_type = self.port_type(port_type_name)
            logger.debug("Created default port type %s", port_type_name)
        port_type.operation(name, input_message, output_message, fault_message)
        if shorthand.addressing is not None:
            port_type.action(name, shorthand.addressing.input, shorthand.addressing.output)
            for fault, action in shorthand.addressing.faults.items():
                port_type.fault_action(name, fault, action)

        if binding is None:
            binding = self.binding(binding_name, port_type_name)
            logger.debug("Created default binding %s", binding_name)
        action = shorthand.explicit_action
        if action is None:
            action = f"{self.target_namespace}/{name}"
        binding.operation(name, action)
        logger.debug("Committed shorthand operation %s (soapAction=%s)", name, action)
        return self

    # Extensions

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "Document":
        self.docs.append(Documentation(content, lang, source))
        return self

    def policy(self, id: Optional[str] = None, name: Optional[str] = None) -> Policy:
        return self.policies.policy(id=id, name=name)

    def policy_reference(self, uri: str, digest: Optional[str] = None, digest_algorithm: Optional[str] = None) -> "Document":
        self.policies.reference(uri, digest, digest_algorithm)
        return self

    def build(self) -> str:
        """Resolve every reference and return the serialized document."""
        from adapter.serializer import serialize

        return serialize(self)


__all__ = [
    "Document",
    "SchemaRedefine",
    "OperationBuilder",
    "OneWayBuilder",
    "NotificationBuilder",
    "Parameter",
]
