"""Infrastructure: lxml serializer for service descriptions.

The document is resolved first (see :class:`servicedesc.resolver.Resolver`);
any dangling reference aborts before a single element is written. Emission
then runs twice over the same graph: a dry run that records every namespace
the output touches in a :class:`NamespaceTable`, and the real run that
declares the finished table on the root element. Every prefix therefore
appears exactly once, on the root, and QName attribute values always use the
prefix declared there.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from lxml import etree

from servicedesc.enums import BindingStyle, BindingUse, SoapVersion, WsdlVersion
from servicedesc.extensions import endpoint_assertion
from servicedesc.model import PolicyReference
from servicedesc.policy import Policy, PolicyOperator
from servicedesc.resolver import Resolver
from servicedesc.utils import (
    HTTP_BINDING,
    MIME,
    PREFERRED_PREFIXES,
    SOAP11_BINDING,
    SOAP11_ENCODING,
    SOAP12_BINDING,
    SOAP12_ENCODING,
    WSAW,
    WSDL,
    WSDL2,
    WSDL2_HTTP,
    WSDL2_SOAP,
    WSDL2_SOAP11_HTTP_PROTOCOL,
    WSDL2_SOAP_HTTP_PROTOCOL,
    WSDLX,
    WSP,
    WSU,
    XML,
    XSD,
    clark,
)
from servicedesc.xsd import UNBOUNDED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vocabulary:
    """Element names that differ between WSDL versions."""

    namespace: str
    root: str
    port_type: str
    port: str
    xsd_prefix: str
    named_root: bool


@dataclass(frozen=True)
class SoapVocabulary:
    namespace: str
    prefix: str
    encoding: str
    protocol: Optional[str] = None


VOCABULARY: Dict[WsdlVersion, Vocabulary] = {
    WsdlVersion.WSDL11: Vocabulary(str(WSDL), "definitions", "portType", "port", "xsd", True),
    WsdlVersion.WSDL20: Vocabulary(str(WSDL2), "description", "interface", "endpoint", "xs", False),
}

SOAP_BINDINGS: Dict[Tuple[WsdlVersion, SoapVersion], SoapVocabulary] = {
    (WsdlVersion.WSDL11, SoapVersion.SOAP11): SoapVocabulary(str(SOAP11_BINDING), "soap", SOAP11_ENCODING),
    (WsdlVersion.WSDL11, SoapVersion.SOAP12): SoapVocabulary(str(SOAP12_BINDING), "soap12", SOAP12_ENCODING),
    (WsdlVersion.WSDL20, SoapVersion.SOAP11): SoapVocabulary(
        str(WSDL2_SOAP), "wsoap", SOAP11_ENCODING, WSDL2_SOAP11_HTTP_PROTOCOL
    ),
    (WsdlVersion.WSDL20, SoapVersion.SOAP12): SoapVocabulary(
        str(WSDL2_SOAP), "wsoap", SOAP12_ENCODING, WSDL2_SOAP_HTTP_PROTOCOL
    ),
}

WSDL2_FAULT_ANY = "#any"
WSDL2_NO_ELEMENT = "#none"


class NamespaceTable:
    """One-to-one mapping between namespace URIs and emitted prefixes.

    A URI keeps the first prefix it was bound to; a prefix already taken by
    another URI gets a numeric suffix.
    """

    def __init__(self) -> None:
        self._prefixes: Dict[str, str] = {}
        self._uris: Dict[str, str] = {}

    def bind(self, uri: str, preferred: Optional[str] = None) -> str:
        if uri == str(XML):
            return "xml"
        if uri in self._prefixes:
            return self._prefixes[uri]
        base = preferred or PREFERRED_PREFIXES.get(uri) or "ns"
        prefix = base
        counter = 1
        while prefix in self._uris:
            prefix = f"{base}{counter}"
            counter += 1
        self._prefixes[uri] = prefix
        self._uris[prefix] = uri
        return prefix

    def prefix(self, uri: str) -> Optional[str]:
        return self._prefixes.get(uri)

    def qname(self, uri: str, local: str) -> str:
        return f"{self.bind(uri)}:{local}"

    def nsmap(self) -> Dict[str, str]:
        return dict(self._uris)

    def __len__(self) -> int:
        return len(self._prefixes)


def _occurs(value: Optional[int]) -> Optional[str]:
    if value is None:
        return None
    return "unbounded" if value == UNBOUNDED else str(value)


def _flag(value: bool) -> Optional[str]:
    return "true" if value else None


class _Emitter:
    """Walk one resolved document and build its element tree."""

    def __init__(self, document, resolver: Resolver, table: NamespaceTable) -> None:
        self.doc = document
        self.resolver = resolver
        self.ns = table
        self.tns = document.target_namespace
        self.vocab = VOCABULARY[document.wsdl_version]
        self.soap = SOAP_BINDINGS[(document.wsdl_version, document.soap_version)]
        self.wsdl20 = document.wsdl_version is WsdlVersion.WSDL20
        self.registry = document.types
        self.strict = True

    # element helpers

    def _el(self, parent, uri: str, local: str, attrib: Optional[dict] = None, text: Optional[str] = None):
        self.ns.bind(uri)
        attributes = {}
        for key, value in (attrib or {}).items():
            if value is None:
                continue
            if key.startswith("{"):
                self.ns.bind(key[1:].split("}", 1)[0])
            attributes[key] = value
        tag = clark(uri, local)
        element = etree.Element(tag, attributes) if parent is None else etree.SubElement(parent, tag, attributes)
        if text is not None:
            element.text = text
        return element

    def _w(self, parent, local: str, attrib: Optional[dict] = None, text: Optional[str] = None):
        return self._el(parent, self.vocab.namespace, local, attrib, text)

    def _x(self, parent, local: str, attrib: Optional[dict] = None, text: Optional[str] = None):
        return self._el(parent, str(XSD), local, attrib, text)

    def _type(self, ref: str, where: str) -> str:
        return self.ns.qname(*self.resolver.type_qname(ref, where, self.registry, self.strict))

    def _group(self, ref: str, where: str, attribute: bool = False) -> str:
        return self.ns.qname(*self.resolver.group_qname(ref, where, self.registry, self.strict, attribute))

    def _tns(self, local: str) -> str:
        return self.ns.qname(self.tns, local)

    def _docs(self, parent, docs) -> None:
        for doc in docs:
            self._w(parent, "documentation", {"source": doc.source, clark(str(XML), "lang"): doc.lang}, doc.content)

    # document

    def emit(self, nsmap: Optional[Dict[str, str]] = None):
        attrib = {"targetNamespace": self.tns}
        if self.vocab.named_root:
            attrib = {"name": self.doc.name, "targetNamespace": self.tns}
        self.ns.bind(self.vocab.namespace)
        root = etree.Element(clark(self.vocab.namespace, self.vocab.root), attrib, nsmap=nsmap)
        self._docs(root, self.doc.docs)
        self._attachments(root, self.doc)
        for wsdl_import in self.doc.imports:
            self._w(root, "import", {"namespace": wsdl_import.namespace, "location": wsdl_import.location})
        self._types(root)
        if not self.wsdl20:
            for message in self.doc.messages.values():
                self._message(root, message)
        for port_type in self.doc.port_types.values():
            if self.wsdl20:
                self._interface(root, port_type)
            else:
                self._port_type(root, port_type)
        for binding in self.doc.bindings.values():
            if self.wsdl20:
                self._binding20(root, binding)
            else:
                self._binding11(root, binding)
        for service in self.doc.services.values():
            self._service(root, service)
        return root

    # policies

    def _attachments(self, parent, carrier) -> None:
        for item in carrier.policies:
            if isinstance(item, Policy):
                self._policy(parent, item)
            else:
                self._policy_reference(parent, item)

    def _policy(self, parent, policy: Policy) -> None:
        element = self._el(
            parent, str(WSP), "Policy", {clark(str(WSU), "Id"): policy.id, "Name": policy.name}
        )
        self._policy_children(element, policy.children)

    def _policy_children(self, parent, children) -> None:
        for child in children:
            if isinstance(child, Policy):
                self._policy(parent, child)
            elif isinstance(child, PolicyOperator):
                operator = self._el(parent, str(WSP), child.kind)
                self._policy_children(operator, child.children)
            elif isinstance(child, PolicyReference):
                self._policy_reference(parent, child)
            else:
                self._assertion(parent, child)

    def _policy_reference(self, parent, reference: PolicyReference) -> None:
        self._el(
            parent,
            str(WSP),
            "PolicyReference",
            {"URI": reference.uri, "Digest": reference.digest, "DigestAlgorithm": reference.digest_algorithm},
        )

    def _assertion(self, parent, assertion) -> None:
        element = self._el(parent, assertion.namespace, assertion.local_name, assertion.attributes, assertion.text)
        for child in assertion.children:
            self._assertion(element, child)
        if assertion.policy is not None:
            self._policy(element, assertion.policy)

    # types

    def _wrapper_names(self) -> List[str]:
        """Target namespace types that messages or faults use as global elements."""
        refs = []
        for message in self.doc.messages.values():
            for part in message.parts.values():
                refs.append((part.element or part.type, f"message '{message.name}' part '{part.name}'"))
        if self.wsdl20:
            for port_type in self.doc.port_types.values():
                refs.extend((f.element, f"interface '{port_type.name}' fault '{f.name}'") for f in port_type.interface_faults)
        names: List[str] = []
        for ref, where in refs:
            uri, local = self.resolver.type_qname(ref, where)
            if uri == self.tns and self.doc.types.lookup(local) is not None and local not in names:
                names.append(local)
        return names

    def _types(self, root) -> None:
        doc = self.doc
        wrappers = self._wrapper_names()
        if not (wrappers or doc.schema_imports or doc.schema_includes or doc.redefines or not doc.types.is_empty()):
            return
        types = self._w(root, "types")
        self.ns.bind(str(XSD), self.vocab.xsd_prefix)
        schema = self._x(types, "schema", {"targetNamespace": self.tns, "elementFormDefault": "qualified"})
        for schema_import in doc.schema_imports:
            self._x(schema, "import", {"namespace": schema_import.namespace, "schemaLocation": schema_import.schema_location})
        for include in doc.schema_includes:
            self._x(schema, "include", {"schemaLocation": include.schema_location})
        for redefine in doc.redefines:
            self._redefine(schema, redefine)
        registry = doc.types
        for group in registry.element_groups.values():
            self._element_group(schema, group)
        for group in registry.attribute_groups.values():
            self._attribute_group(schema, group)
        for simple in registry.simple_types.values():
            self._simple_type(schema, simple)
        for listed in registry.list_types.values():
            self._list_type(schema, listed)
        for union in registry.union_types.values():
            self._union_type(schema, union)
        for complex_type in registry.complex_types.values():
            self._complex_type(schema, complex_type)
        for name in wrappers:
            self._x(schema, "element", {"name": name, "type": self._tns(name)})

    def _redefine(self, schema, redefine) -> None:
        element = self._x(schema, "redefine", {"schemaLocation": redefine.schema_location})
        self.registry, self.strict = redefine.types, False
        try:
            for simple in redefine.types.simple_types.values():
                self._simple_type(element, simple)
            for listed in redefine.types.list_types.values():
                self._list_type(element, listed)
            for union in redefine.types.union_types.values():
                self._union_type(element, union)
            for complex_type in redefine.types.complex_types.values():
                self._complex_type(element, complex_type)
            for group in redefine.types.attribute_groups.values():
                self._attribute_group(element, group)
            for group in redefine.types.element_groups.values():
                self._element_group(element, group)
        finally:
            self.registry, self.strict = self.doc.types, True

    def _annotation(self, parent, docs, appinfos=()) -> None:
        if not docs and not appinfos:
            return
        annotation = self._x(parent, "annotation")
        for doc in docs:
            self._x(annotation, "documentation", {"source": doc.source, clark(str(XML), "lang"): doc.lang}, doc.content)
        for info in appinfos:
            self._x(annotation, "appinfo", {"source": info.source}, info.content)

    def _element(self, parent, element, where: str) -> None:
        substitution = None
        if element.substitution_group:
            substitution = self.ns.qname(*self.resolver.qualify(element.substitution_group, where))
        self._x(
            parent,
            "element",
            {
                "name": element.name,
                "type": self._type(element.type, f"{where} element '{element.name}'"),
                "nillable": _flag(element.nullable),
                "minOccurs": _occurs(element.min_occurs),
                "maxOccurs": _occurs(element.max_occurs),
                "substitutionGroup": substitution,
                "block": element.block,
            },
        )

    def _attribute(self, parent, attribute, where: str) -> None:
        self._x(
            parent,
            "attribute",
            {
                "name": attribute.name,
                "type": self._type(attribute.type, f"{where} attribute '{attribute.name}'"),
                "use": attribute.use,
                "default": attribute.default,
                "fixed": attribute.fixed,
                "form": attribute.form,
            },
        )

    def _any_attribute(self, parent, wildcard) -> None:
        if wildcard is not None:
            self._x(parent, "anyAttribute", {"namespace": wildcard.namespace, "processContents": wildcard.process_contents.value})

    def _facets(self, parent, simple) -> None:
        for facet, value in simple.ordered_facets():
            self._x(parent, facet, {"value": value})

    def _simple_type(self, parent, simple) -> None:
        where = f"simpleType '{simple.name}'"
        element = self._x(parent, "simpleType", {"name": simple.name, "final": simple.final})
        self._annotation(element, simple.docs)
        restriction = self._x(element, "restriction", {"base": self._type(simple.base, where)})
        self._facets(restriction, simple)

    def _list_type(self, parent, listed) -> None:
        where = f"list type '{listed.name}'"
        element = self._x(parent, "simpleType", {"name": listed.name})
        self._annotation(element, listed.docs)
        item_type = self._type(listed.item_type, where)
        if not listed.ordered_facets():
            self._x(element, "list", {"itemType": item_type})
            return
        restriction = self._x(element, "restriction")
        inner = self._x(restriction, "simpleType")
        self._x(inner, "list", {"itemType": item_type})
        self._facets(restriction, listed)

    def _union_type(self, parent, union) -> None:
        where = f"union type '{union.name}'"
        element = self._x(parent, "simpleType", {"name": union.name})
        self._annotation(element, union.docs)
        members = " ".join(self._type(ref, where) for ref in union.member_types)
        self._x(element, "union", {"memberTypes": members})

    def _compositor(self, parent, compositor, where: str) -> None:
        if compositor.kind == "any":
            self._x(
                parent,
                "any",
                {
                    "namespace": compositor.namespace,
                    "processContents": compositor.process_contents.value,
                    "minOccurs": _occurs(compositor.min_occurs),
                    "maxOccurs": _occurs(compositor.max_occurs),
                },
            )
            return
        attrib = {}
        if compositor.kind == "choice":
            attrib = {"minOccurs": _occurs(compositor.min_occurs), "maxOccurs": _occurs(compositor.max_occurs)}
        element = self._x(parent, compositor.kind, attrib)
        for child in compositor.elements:
            self._element(element, child, f"{where} {compositor.kind}")

    def _complex_type(self, parent, complex_type) -> None:
        where = f"complexType '{complex_type.name}'"
        element = self._x(
            parent,
            "complexType",
            {
                "name": complex_type.name,
                "abstract": _flag(complex_type.abstract),
                "mixed": _flag(complex_type.mixed),
                "block": complex_type.block,
                "final": complex_type.final,
            },
        )
        annotation = complex_type.annotations
        docs = list(annotation.documentation_entries) if annotation else []
        docs.extend(complex_type.docs)
        self._annotation(element, docs, annotation.appinfo_entries if annotation else ())

        if complex_type.content is not None:
            content = complex_type.content
            simple = self._x(element, "simpleContent")
            derived = self._x(simple, content.derivation, {"base": self._type(content.base, f"{where} simpleContent")})
            for attribute in content.attributes:
                self._attribute(derived, attribute, where)
            self._constraints(element, complex_type, where)
            return

        body = element
        if complex_type.base:
            complex_content = self._x(element, "complexContent")
            body = self._x(complex_content, "extension", {"base": self._type(complex_type.base, f"{where} base")})
        sequence = None
        if complex_type.elements or complex_type.group_refs:
            sequence = self._x(body, "sequence")
            for child in complex_type.elements:
                self._element(sequence, child, where)
            for ref in complex_type.group_refs:
                self._x(sequence, "group", {"ref": self._group(ref, f"{where} group ref")})
        for compositor in complex_type.compositors:
            if compositor.kind == "any":
                if sequence is None:
                    sequence = self._x(body, "sequence")
                self._compositor(sequence, compositor, where)
            else:
                self._compositor(body, compositor, where)
        for attribute in complex_type.attributes:
            self._attribute(body, attribute, where)
        for ref in complex_type.attribute_group_refs:
            self._x(body, "attributeGroup", {"ref": self._group(ref, f"{where} attributeGroup ref", True)})
        self._any_attribute(body, complex_type.wildcard_attribute)
        self._constraints(element, complex_type, where)

    def _constraints(self, parent, complex_type, where: str) -> None:
        for constraint in complex_type.constraints:
            refer = None
            if constraint.refer:
                refer = self.ns.qname(*self.resolver.qualify(constraint.refer, f"{where} keyref '{constraint.name}'"))
            element = self._x(parent, constraint.kind, {"name": constraint.name, "refer": refer})
            if constraint.selector_xpath:
                self._x(element, "selector", {"xpath": constraint.selector_xpath})
            for xpath in constraint.field_xpaths:
                self._x(element, "field", {"xpath": xpath})

    def _element_group(self, parent, group) -> None:
        where = f"group '{group.name}'"
        element = self._x(parent, "group", {"name": group.name})
        if group.compositor is not None:
            self._compositor(element, group.compositor, where)
            return
        sequence = self._x(element, "sequence")
        for child in group.elements:
            self._element(sequence, child, where)

    def _attribute_group(self, parent, group) -> None:
        where = f"attributeGroup '{group.name}'"
        element = self._x(parent, "attributeGroup", {"name": group.name})
        for attribute in group.attributes:
            self._attribute(element, attribute, where)
        self._any_attribute(element, group.wildcard_attribute)

    # messages and port types

    def _message(self, root, message) -> None:
        element = self._w(root, "message", {"name": message.name})
        self._docs(element, message.docs)
        for part in message.parts.values():
            where = f"message '{message.name}' part '{part.name}'"
            if part.element:
                attrib = {"name": part.name, "element": self.ns.qname(*self.resolver.type_qname(part.element, where))}
            else:
                uri, local = self.resolver.type_qname(part.type, where)
                kind = "element" if uri == self.tns else "type"
                attrib = {"name": part.name, kind: self.ns.qname(uri, local)}
            self._w(element, "part", attrib)

    def _message_ref(self, ref: str, where: str) -> str:
        return self.ns.qname(*self.resolver.message(ref, where)[0])

    def _action(self, value: Optional[str]) -> dict:
        return {clark(str(WSAW), "Action"): value}

    def _port_type(self, root, port_type) -> None:
        where = f"portType '{port_type.name}'"
        element = self._w(
            root,
            self.vocab.port_type,
            {"name": port_type.name, clark(str(WSAW), "UsingAddressing"): _flag(port_type.addressing)},
        )
        self._docs(element, port_type.docs)
        for operation in port_type.operations.values():
            op_where = f"{where} operation '{operation.name}'"
            actions = port_type.actions.get(operation.name)
            op_element = self._w(element, "operation", {"name": operation.name})
            for direction in operation.directions:
                attrib = {"message": self._message_ref(getattr(operation, direction), op_where)}
                if actions is not None:
                    attrib.update(self._action(getattr(actions, direction)))
                self._w(op_element, direction, attrib)
            for fault in operation.faults:
                attrib = {"name": fault.name, "message": self._message_ref(fault.message, op_where)}
                if actions is not None:
                    attrib.update(self._action(actions.faults.get(fault.name)))
                self._w(op_element, "fault", attrib)

    def _message_element(self, ref: str, where: str) -> str:
        """WSDL 2.0 element of a message: the reference of its first part."""
        _, message = self.resolver.message(ref, where)
        if message is None:
            return WSDL2_FAULT_ANY
        if not message.parts:
            return WSDL2_NO_ELEMENT
        part = next(iter(message.parts.values()))
        uri, local = self.resolver.type_qname(part.element or part.type, where)
        if uri == str(XSD):
            return WSDL2_FAULT_ANY
        return self.ns.qname(uri, local)

    def _interface_faults(self, port_type) -> List[Tuple[str, str]]:
        where = f"interface '{port_type.name}'"
        faults = [
            (f.name, self.ns.qname(*self.resolver.type_qname(f.element, f"{where} fault '{f.name}'")))
            for f in port_type.interface_faults
        ]
        names = {name for name, _ in faults}
        for operation in port_type.operations.values():
            for fault in operation.faults:
                if fault.name not in names:
                    names.add(fault.name)
                    faults.append((fault.name, self._message_element(fault.message, f"{where} operation '{operation.name}'")))
        return faults

    def _interface(self, root, port_type) -> None:
        where = f"interface '{port_type.name}'"
        extends = None
        if port_type.base_interfaces:
            extends = " ".join(
                self.ns.qname(*self.resolver.port_type(ref, f"{where} extends")[0]) for ref in port_type.base_interfaces
            )
        element = self._w(
            root,
            self.vocab.port_type,
            {
                "name": port_type.name,
                "extends": extends,
                clark(str(WSAW), "UsingAddressing"): _flag(port_type.addressing),
            },
        )
        self._docs(element, port_type.docs)
        for name, fault_element in self._interface_faults(port_type):
            self._w(element, "fault", {"name": name, "element": fault_element})
        for operation in port_type.operations.values():
            op_where = f"{where} operation '{operation.name}'"
            actions = port_type.actions.get(operation.name)
            op_element = self._w(
                element,
                "operation",
                {
                    "name": operation.name,
                    "pattern": operation.exchange_pattern.value,
                    "style": operation.style,
                    clark(str(WSDLX), "safe"): _flag(operation.safe),
                },
            )
            for direction in operation.directions:
                attrib = {"element": self._message_element(getattr(operation, direction), op_where)}
                if actions is not None:
                    attrib.update(self._action(getattr(actions, direction)))
                self._w(op_element, direction, attrib)
            fault_tag = "outfault" if operation.directions[0] == "input" else "infault"
            for fault in operation.faults:
                attrib = {"ref": self._tns(fault.name)}
                if actions is not None:
                    attrib.update(self._action(actions.faults.get(fault.name)))
                self._w(op_element, fault_tag, attrib)

    # bindings

    def _bound_operation(self, port_type, name: str):
        if port_type is None:
            return None
        return port_type.operations.get(name)

    def _binding11(self, root, binding) -> None:
        where = f"binding '{binding.name}'"
        (uri, local), port_type = self.resolver.port_type(binding.port_type, where)
        element = self._w(root, "binding", {"name": binding.name, "type": self.ns.qname(uri, local)})
        self._docs(element, binding.docs)
        self._attachments(element, binding)
        if binding.is_http:
            self._el(element, str(HTTP_BINDING), "binding", {"verb": binding.http_verb})
        else:
            self.ns.bind(self.soap.namespace, self.soap.prefix)
            self._el(
                element,
                self.soap.namespace,
                "binding",
                {"style": binding.style.value, "transport": binding.transport},
            )
        if binding.addressing:
            self._el(element, str(WSAW), "UsingAddressing", {clark(str(WSDL), "required"): "true"})
        for operation in binding.operations.values():
            self._binding_operation11(element, binding, operation, self._bound_operation(port_type, operation.name))

    def _binding_operation11(self, parent, binding, operation, declared) -> None:
        element = self._w(parent, "operation", {"name": operation.name})
        self._docs(element, operation.docs)
        self._attachments(element, operation)
        if binding.is_http:
            self._el(element, str(HTTP_BINDING), "operation", {"location": operation.http_location})
        else:
            self._el(
                element,
                self.soap.namespace,
                "operation",
                {"soapAction": operation.soap_action, "style": operation.style.value},
            )
        directions = declared.directions if declared is not None else ("input", "output")
        for direction in directions:
            body = self._w(element, direction)
            if binding.is_http:
                self._http_body(body, operation, direction)
                continue
            multipart = getattr(operation, f"{direction}_mime")
            if multipart is not None:
                self._multipart(body, multipart, operation)
            else:
                self._soap_body(body, operation)
            if direction == "input":
                self._headers(body, operation)
        for fault in declared.faults if declared is not None else ():
            fault_element = self._w(element, "fault", {"name": fault.name})
            if not binding.is_http:
                attrib = {"name": fault.name, "use": operation.use.value}
                attrib.update(self._encoding(operation.use))
                self._el(fault_element, self.soap.namespace, "fault", attrib)

    def _encoding(self, use: BindingUse, namespace: Optional[str] = None) -> dict:
        if use is not BindingUse.ENCODED:
            return {}
        return {"encodingStyle": self.soap.encoding, "namespace": namespace or self.tns}

    def _soap_body(self, parent, operation) -> None:
        attrib = {"use": operation.use.value}
        if operation.style is BindingStyle.RPC:
            attrib["namespace"] = self.tns
        attrib.update(self._encoding(operation.use))
        self._el(parent, self.soap.namespace, "body", attrib)

    def _http_body(self, parent, operation, direction: str) -> None:
        if direction == "input" and operation.http_encoding:
            self._el(parent, str(HTTP_BINDING), operation.http_encoding)
        elif direction == "output":
            self._el(parent, str(MIME), "content", {"type": "text/xml"})

    def _multipart(self, parent, multipart, operation) -> None:
        related = self._el(parent, str(MIME), "multipartRelated")
        for part in multipart.parts:
            part_element = self._el(related, str(MIME), "part", {"name": part.name})
            if part.soap_body:
                self._soap_body(part_element, operation)
            for content in part.contents:
                self._el(part_element, str(MIME), "content", {"part": content.part, "type": content.type})
            if part.xml_part:
                self._el(part_element, str(MIME), "mimeXml", {"part": part.xml_part})

    def _headers(self, parent, operation) -> None:
        where = f"binding operation '{operation.name}' header"
        for header in operation.headers:
            element = self._el(parent, self.soap.namespace, "header", self._header_attrib(header, where))
            for fault in header.faults:
                self._el(element, self.soap.namespace, "headerfault", self._header_attrib(fault, where))

    def _header_attrib(self, header, where: str) -> dict:
        return {
            "message": self._message_ref(header.message, where),
            "part": header.part,
            "use": header.use.value,
            "namespace": header.namespace,
            "encodingStyle": header.encoding_style,
        }

    def _binding20(self, root, binding) -> None:
        where = f"binding '{binding.name}'"
        (uri, local), port_type = self.resolver.port_type(binding.port_type, where)
        attrib = {"name": binding.name, "interface": self.ns.qname(uri, local)}
        if binding.is_http:
            attrib.update({"type": str(WSDL2_HTTP), clark(str(WSDL2_HTTP), "methodDefault"): binding.http_verb})
        else:
            self.ns.bind(self.soap.namespace, self.soap.prefix)
            attrib.update(
                {
                    "type": self.soap.namespace,
                    clark(self.soap.namespace, "version"): self.doc.soap_version.value,
                    clark(self.soap.namespace, "protocol"): self.soap.protocol,
                }
            )
        element = self._w(root, "binding", attrib)
        self._docs(element, binding.docs)
        self._attachments(element, binding)
        if binding.addressing:
            self._el(element, str(WSAW), "UsingAddressing", {clark(str(WSDL2), "required"): "true"})
        if port_type is not None:
            for name, _ in self._interface_faults(port_type):
                self._w(element, "fault", {"ref": self._tns(name)})
        for operation in binding.operations.values():
            if binding.is_http:
                op_attrib = {clark(str(WSDL2_HTTP), "location"): operation.http_location}
            else:
                op_attrib = {clark(self.soap.namespace, "action"): operation.soap_action}
            op_element = self._w(element, "operation", {"ref": self._tns(operation.name), **op_attrib})
            self._docs(op_element, operation.docs)
            self._attachments(op_element, operation)

    # services

    def _service_interface(self, service) -> Optional[str]:
        where = f"service '{service.name}'"
        if service.interface:
            return self.ns.qname(*self.resolver.port_type(service.interface, where)[0])
        for port in service.ports.values():
            _, binding = self.resolver.binding(port.binding, f"{where} port '{port.name}'")
            if binding is not None:
                return self.ns.qname(*self.resolver.port_type(binding.port_type, where)[0])
        return None

    def _service(self, root, service) -> None:
        where = f"service '{service.name}'"
        attrib = {"name": service.name}
        if self.wsdl20:
            attrib["interface"] = self._service_interface(service)
        element = self._w(root, "service", attrib)
        self._docs(element, service.docs)
        self._attachments(element, service)
        for port in service.ports.values():
            port_where = f"{where} port '{port.name}'"
            (uri, local), binding = self.resolver.binding(port.binding, port_where)
            if self.wsdl20:
                port_element = self._w(
                    element,
                    self.vocab.port,
                    {"name": port.name, "binding": self.ns.qname(uri, local), "address": port.address},
                )
            else:
                port_element = self._w(element, self.vocab.port, {"name": port.name, "binding": self.ns.qname(uri, local)})
                address_ns = str(HTTP_BINDING) if binding is not None and binding.is_http else self.soap.namespace
                self._el(port_element, address_ns, "address", {"location": port.address})
            if port.endpoint_reference is not None:
                reference = port.endpoint_reference
                self._assertion(
                    port_element, endpoint_assertion(reference.version.value, "EndpointReference", reference)
                )


def namespace_table(document) -> NamespaceTable:
    """Seed a table with the target namespace and the document's declared prefixes."""
    vocab = VOCABULARY[document.wsdl_version]
    table = NamespaceTable()
    table.bind(document.target_namespace, "tns")
    for prefix, uri in document.namespaces.items():
        table.bind(uri, prefix)
    table.bind(vocab.namespace)
    table.bind(str(XSD), vocab.xsd_prefix)
    return table


def serialize(document) -> str:
    """Return ``document`` as pretty-printed UTF-8 XML text.

    Raises the first :class:`~servicedesc.errors.WsdlBuildError` found by the
    resolver; nothing is returned in that case.
    """
    logger.debug(
        "Serializing %s (WSDL %s, SOAP %s)",
        document.name,
        document.wsdl_version.value,
        document.soap_version.value,
    )
    resolver = Resolver(document)
    resolver.check()
    table = namespace_table(document)
    emitter = _Emitter(document, resolver, table)
    emitter.emit()
    root = emitter.emit(nsmap=table.nsmap())
    text = etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True).decode("utf-8")
    logger.debug("Serialized %s with %d namespaces", document.name, len(table))
    return text


__all__ = ["serialize", "namespace_table", "NamespaceTable", "Vocabulary", "SoapVocabulary", "VOCABULARY", "SOAP_BINDINGS"]
