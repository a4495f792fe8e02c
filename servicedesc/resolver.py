"""Domain: second-phase resolution of the symbolic references in a document.

Building a document only records names. The :class:`Resolver` walks the
finished graph, looks every reference up and reports what is dangling. The
serializer runs it before writing anything, so a document is either emitted
in full or not at all.
"""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from .enums import BUILTIN_TYPE_NAMES
from .errors import ConstraintViolation, DuplicateDefinition, UnresolvedReference, UnresolvedTypeReference, WsdlBuildError
from .utils import XSD, XSD_PREFIXES, split_qname

logger = logging.getLogger(__name__)

QName = Tuple[str, str]


class Resolver:
    """Resolve references of ``document`` against its registries.

    ``referenced_namespaces`` collects, in first-seen order, the namespace of
    every reference resolved so far.
    """

    def __init__(self, document) -> None:
        self.document = document
        self.referenced_namespaces: List[str] = []
        self._warned: set[str] = set()

    # lookups

    def _note(self, uri: str) -> None:
        if uri not in self.referenced_namespaces:
            self.referenced_namespaces.append(uri)

    def _split(self, ref: str, referrer: str, error=UnresolvedTypeReference) -> Tuple[Optional[str], str]:
        try:
            return split_qname(ref)
        except ConstraintViolation as exc:
            raise error(referrer, ref, str(exc)) from None

    def _foreign(self, prefix: str, ref: str, referrer: str, error) -> str:
        uri = self.document.prefix_uri(prefix)
        if uri is None:
            raise error(referrer, ref, f"unknown prefix '{prefix}'")
        return uri

    def type_qname(self, ref: str, referrer: str, registry=None, strict: bool = True) -> QName:
        """Resolve a type reference to ``(namespace, local name)``.

        Unprefixed names are looked up in the registry first and then taken
        as XML Schema built-ins. ``strict=False`` accepts target namespace
        names missing from the registry (redefined external schemas).
        """
        registry = registry or self.document.types
        tns = self.document.target_namespace
        prefix, local = self._split(ref, referrer)
        if prefix is None:
            if registry.lookup(local) is not None or self.document.types.lookup(local) is not None:
                return self._resolved(tns, local)
            if local in BUILTIN_TYPE_NAMES:
                if ref not in self._warned:
                    self._warned.add(ref)
                    logger.warning("%s: unprefixed '%s' taken as the XML Schema built-in", referrer, ref)
                return self._resolved(str(XSD), local)
            if not strict:
                return self._resolved(tns, local)
            raise UnresolvedTypeReference(referrer, ref)
        if prefix in XSD_PREFIXES:
            return self._resolved(str(XSD), local)
        uri = self._foreign(prefix, ref, referrer, UnresolvedTypeReference)
        if uri == tns and strict:
            if registry.lookup(local) is None and self.document.types.lookup(local) is None:
                raise UnresolvedTypeReference(referrer, ref)
        return self._resolved(uri, local)

    def group_qname(self, ref: str, referrer: str, registry=None, strict: bool = True, attribute: bool = False) -> QName:
        """Resolve an element group (or attribute group) reference."""
        registry = registry or self.document.types
        tns = self.document.target_namespace
        prefix, local = self._split(ref, referrer)
        if prefix in XSD_PREFIXES:
            raise UnresolvedTypeReference(referrer, ref, "XML Schema defines no groups")
        uri = tns if prefix is None else self._foreign(prefix, ref, referrer, UnresolvedTypeReference)
        if uri == tns and strict:
            lookup = "lookup_attribute_group" if attribute else "lookup_group"
            if getattr(registry, lookup)(local) is None and getattr(self.document.types, lookup)(local) is None:
                raise UnresolvedTypeReference(referrer, ref)
        return self._resolved(uri, local)

    def qualify(self, ref: str, referrer: str) -> QName:
        """Resolve the prefix of a plain QName (element or key names); no registry lookup."""
        prefix, local = self._split(ref, referrer, UnresolvedReference)
        if prefix is None:
            return self._resolved(self.document.target_namespace, local)
        if prefix in XSD_PREFIXES:
            return self._resolved(str(XSD), local)
        return self._resolved(self._foreign(prefix, ref, referrer, UnresolvedReference), local)

    def _component(self, table: dict, kind: str, ref: str, referrer: str):
        prefix, local = self._split(ref, referrer, UnresolvedReference)
        uri = self.document.target_namespace
        if prefix is not None:
            uri = self._foreign(prefix, ref, referrer, UnresolvedReference)
        if uri != self.document.target_namespace:
            self._note(uri)
            return (uri, local), None
        if local not in table:
            raise UnresolvedReference(referrer, ref, f"no such {kind}")
        return (uri, local), table[local]

    def message(self, ref: str, referrer: str):
        """Return ``((namespace, local), Message or None)``; ``None`` for imported messages."""
        return self._component(self.document.messages, "message", ref, referrer)

    def port_type(self, ref: str, referrer: str):
        return self._component(self.document.port_types, "port type", ref, referrer)

    def binding(self, ref: str, referrer: str):
        return self._component(self.document.bindings, "binding", ref, referrer)

    def _resolved(self, uri: str, local: str) -> QName:
        self._note(uri)
        return uri, local

    # whole-document walk

    def check(self) -> None:
        """Raise the first problem found in the document."""
        for problem in self.iter_problems():
            raise problem

    def problems(self) -> List[WsdlBuildError]:
        return list(self.iter_problems())

    def iter_problems(self) -> Iterator[WsdlBuildError]:
        doc = self.document
        for name in doc.types.duplicate_type_names():
            yield DuplicateDefinition("type", name, "schema")
        yield from self._duplicate_policy_ids()
        yield from self._registry_problems(doc.types, "", True)
        for redefine in doc.redefines:
            yield from self._registry_problems(
                redefine.types, f"redefine '{redefine.schema_location}' ", False
            )
        for message in doc.messages.values():
            for part in message.parts.values():
                where = f"message '{message.name}' part '{part.name}'"
                yield from self._attempt(self.type_qname, part.type, where)
                if part.element:
                    yield from self._attempt(self.type_qname, part.element, where)
        for port_type in doc.port_types.values():
            yield from self._port_type_problems(port_type)
        for binding in doc.bindings.values():
            yield from self._binding_problems(binding)
        for service in doc.services.values():
            where = f"service '{service.name}'"
            if service.interface:
                yield from self._attempt(self.port_type, service.interface, where)
            for port in service.ports.values():
                yield from self._attempt(self.binding, port.binding, f"{where} port '{port.name}'")

    def _attempt(self, resolve, ref: str, referrer: str, *args, **kwargs) -> Iterator[WsdlBuildError]:
        try:
            resolve(ref, referrer, *args, **kwargs)
        except WsdlBuildError as exc:
            yield exc

    def _duplicate_policy_ids(self) -> Iterator[WsdlBuildError]:
        doc = self.document
        carriers = [doc, *doc.bindings.values(), *doc.services.values()]
        for binding in doc.bindings.values():
            carriers.extend(binding.operations.values())
        seen: set[str] = set()
        for carrier in carriers:
            for policy in carrier.policies.walk():
                if policy.id is None:
                    continue
                if policy.id in seen:
                    yield DuplicateDefinition("policy id", policy.id, f"document '{doc.name}'")
                seen.add(policy.id)

    def _registry_problems(self, registry, scope: str, strict: bool) -> Iterator[WsdlBuildError]:
        def types(ref: str, where: str):
            return self._attempt(self.type_qname, ref, scope + where, registry, strict)

        def groups(ref: str, where: str, attribute: bool = False):
            return self._attempt(self.group_qname, ref, scope + where, registry, strict, attribute)

        for simple in registry.simple_types.values():
            yield from types(simple.base, f"simpleType '{simple.name}'")
        for listed in registry.list_types.values():
            yield from types(listed.item_type, f"list type '{listed.name}'")
        for union in registry.union_types.values():
            for member in union.member_types:
                yield from types(member, f"union type '{union.name}'")
        for group in registry.element_groups.values():
            where = f"group '{group.name}'"
            elements = list(group.elements)
            if group.compositor is not None:
                elements.extend(group.compositor.elements)
            for element in elements:
                yield from types(element.type, f"{where} element '{element.name}'")
        for group in registry.attribute_groups.values():
            for attr in group.attributes:
                yield from types(attr.type, f"attributeGroup '{group.name}' attribute '{attr.name}'")
        for complex_type in registry.complex_types.values():
            where = f"complexType '{complex_type.name}'"
            if complex_type.base:
                yield from types(complex_type.base, f"{where} base")
            if complex_type.content is not None:
                yield from types(complex_type.content.base, f"{where} simpleContent")
                for attr in complex_type.content.attributes:
                    yield from types(attr.type, f"{where} attribute '{attr.name}'")
            elements = list(complex_type.elements)
            for compositor in complex_type.compositors:
                elements.extend(getattr(compositor, "elements", []))
            for element in elements:
                yield from types(element.type, f"{where} element '{element.name}'")
                if element.substitution_group:
                    yield from self._attempt(self.qualify, element.substitution_group, f"{scope}{where} element '{element.name}'")
            for constraint in complex_type.constraints:
                if constraint.refer:
                    yield from self._attempt(self.qualify, constraint.refer, f"{scope}{where} keyref '{constraint.name}'")
            for ref in complex_type.group_refs:
                yield from groups(ref, f"{where} group ref")
            for attr in complex_type.attributes:
                yield from types(attr.type, f"{where} attribute '{attr.name}'")
            for ref in complex_type.attribute_group_refs:
                yield from groups(ref, f"{where} attributeGroup ref", True)

    def _port_type_problems(self, port_type) -> Iterator[WsdlBuildError]:
        where = f"portType '{port_type.name}'"
        for base in port_type.base_interfaces:
            yield from self._attempt(self.port_type, base, f"{where} extends")
        for fault in port_type.interface_faults:
            yield from self._attempt(self.type_qname, fault.element, f"{where} fault '{fault.name}'")
        for operation in port_type.operations.values():
            op_where = f"{where} operation '{operation.name}'"
            for direction in operation.directions:
                yield from self._attempt(self.message, getattr(operation, direction), f"{op_where} {direction}")
            for fault in operation.faults:
                yield from self._attempt(self.message, fault.message, f"{op_where} fault '{fault.name}'")
        for name, action in port_type.actions.items():
            operation = port_type.operations.get(name)
            if operation is None:
                yield UnresolvedReference(f"{where} action", name, "no such operation")
                continue
            fault_names = {f.name for f in operation.faults}
            for fault in action.faults:
                if fault not in fault_names:
                    yield UnresolvedReference(f"{where} operation '{name}' fault action", fault, "no such fault")

    def _binding_problems(self, binding) -> Iterator[WsdlBuildError]:
        where = f"binding '{binding.name}'"
        try:
            _, port_type = self.port_type(binding.port_type, where)
        except WsdlBuildError as exc:
            yield exc
            port_type = None
        for operation in binding.operations.values():
            op_where = f"{where} operation '{operation.name}'"
            if port_type is not None and operation.name not in port_type.operations:
                yield UnresolvedReference(
                    op_where, operation.name, f"not declared by port type '{port_type.name}'"
                )
            for header in operation.headers:
                yield from self._header_problems(header, f"{op_where} header")
                for fault in header.faults:
                    yield from self._header_problems(fault, f"{op_where} headerfault")

    def _header_problems(self, header, where: str) -> Iterator[WsdlBuildError]:
        try:
            _, message = self.message(header.message, where)
        except WsdlBuildError as exc:
            yield exc
            return
        if message is not None and header.part not in message.parts:
            yield UnresolvedReference(where, header.part, f"message '{message.name}' has no such part")


__all__ = ["Resolver", "QName"]
