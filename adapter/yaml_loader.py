"""Infrastructure helpers to load service descriptions from YAML files."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from servicedesc.document import Document
from servicedesc.enums import SoapVersion, WsdlVersion, coerce
from servicedesc.errors import ConstraintViolation

OPERATION_KINDS = ("request-response", "one-way", "notification")
SIMPLE_FACETS = (
    "min_length",
    "max_length",
    "pattern",
    "min_inclusive",
    "max_inclusive",
    "min_exclusive",
    "max_exclusive",
)


def _as_list(value: Any) -> List[Any]:
    """Return ``value`` as a list; ``None`` becomes empty, scalars are wrapped."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _required(item: Any, key: str, what: str) -> Any:
    """Return ``item[key]``; a missing key is a :class:`ConstraintViolation`."""
    if not isinstance(item, dict) or item.get(key) is None:
        raise ConstraintViolation(f"{what} entry {item!r} is missing required key '{key}'")
    return item[key]


def _version(value: Any, enum_cls, what: str):
    """Accept ``1.1``/``2.0`` written as numbers or strings."""
    if value is None:
        return None
    if isinstance(value, float):
        value = f"{value:.1f}"
    return coerce(enum_cls, str(value), what)


def _parameters(items: Any) -> List[Dict[str, str]]:
    params = []
    for item in _as_list(items):
        if isinstance(item, dict) and len(item) == 1 and "name" not in item:
            # Short form: {id: xsd:string}
            name, type_ = next(iter(item.items()))
            params.append({"name": str(name), "type": str(type_)})
        elif isinstance(item, dict):
            params.append({"name": str(_required(item, "name", "parameter")), "type": str(item.get("type", "xsd:string"))})
        else:
            raise ConstraintViolation(f"invalid parameter entry {item!r}")
    return params


def _load_simple_types(doc: Document, items: Any) -> None:
    for item in _as_list(items):
        simple = doc.simple_type(_required(item, "name", "simple type"), item.get("base", "xsd:string"), item.get("final"))
        for facet in SIMPLE_FACETS:
            if facet in item:
                getattr(simple, facet)(item[facet])
        simple.enumeration(*_as_list(item.get("enumeration") or item.get("enum")))
        if item.get("documentation"):
            simple.documentation(str(item["documentation"]))


def _load_complex_types(doc: Document, items: Any) -> None:
    for item in _as_list(items):
        options = {k: item[k] for k in ("abstract", "mixed", "block", "final") if k in item}
        complex_type = doc.complex_type(_required(item, "name", "complex type"), **options)
        if item.get("extends"):
            complex_type.extends(item["extends"])
        for element in _as_list(item.get("elements")):
            complex_type.element(
                _required(element, "name", "element"),
                element.get("type", "xsd:string"),
                nullable=bool(element.get("nullable", False)),
                min_occurs=element.get("min_occurs"),
                max_occurs=element.get("max_occurs"),
            )
        for attribute in _as_list(item.get("attributes")):
            complex_type.attribute(
                _required(attribute, "name", "attribute"),
                attribute.get("type", "xsd:string"),
                use=attribute.get("use"),
                default=attribute.get("default"),
                fixed=attribute.get("fixed"),
            )
        if item.get("documentation"):
            complex_type.documentation(str(item["documentation"]))


def _load_operations(doc: Document, items: Any) -> None:
    for item in _as_list(items):
        kind = item.get("kind", "request-response")
        if kind not in OPERATION_KINDS:
            raise ConstraintViolation(
                f"invalid operation kind {kind!r}; expected one of: {', '.join(OPERATION_KINDS)}"
            )
        name = _required(item, "name", "operation")
        if kind == "one-way":
            builder = doc.one_way(name)
        elif kind == "notification":
            builder = doc.notification(name)
        else:
            builder = doc.operation(name)
        if kind != "notification":
            for param in _parameters(item.get("input")):
                builder.input(param["name"], param["type"])
        if kind != "one-way":
            for param in _parameters(item.get("output")):
                builder.output(param["name"], param["type"])
        if kind == "request-response":
            for param in _parameters(item.get("faults")):
                builder.fault(param["name"], param["type"])
            action = item.get("action")
            if isinstance(action, dict):
                builder.action(action.get("input"), action.get("output"))
        if item.get("soap_action"):
            builder.soap_action(str(item["soap_action"]))
        builder.end()


def _load_policies(doc: Document, items: Any) -> None:
    for item in _as_list(items):
        policy = doc.policy(id=item.get("id"), name=item.get("name"))
        for assertion in _as_list(item.get("assertions")):
            policy.assertion(
                _required(assertion, "namespace", "policy assertion"),
                _required(assertion, "local_name", "policy assertion"),
                {str(k): str(v) for k, v in (assertion.get("attributes") or {}).items()},
                assertion.get("text"),
            )
        for uri in _as_list(item.get("references")):
            policy.policy_reference(str(uri))


def _load_services(doc: Document, items: Any) -> None:
    for item in _as_list(items):
        service = doc.service(_required(item, "name", "service"), item.get("interface"))
        for port in _as_list(item.get("ports")):
            service.port(
                _required(port, "name", "port"),
                port.get("binding", doc.default_binding_name),
                _required(port, "address", "port"),
            )


def load_description(
    yaml_path: str,
    *,
    wsdl_version: Optional[str] = None,
    soap_version: Optional[str] = None,
) -> Optional[Document]:
    """Load a YAML service description into a :class:`Document`.

    Returns ``None`` when the file has no ``service`` header with a name and a
    target namespace. ``wsdl_version``/``soap_version`` override the values in
    the file. Invalid content inside a recognised file raises the model's
    :class:`~servicedesc.errors.WsdlBuildError`.
    """
    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("service"), dict):
        return None
    header = data["service"]
    name = header.get("name") or Path(yaml_path).stem
    target_namespace = header.get("target_namespace") or header.get("targetNamespace")
    if not target_namespace:
        return None

    options: Dict[str, Any] = {
        "wsdl_version": _version(wsdl_version or header.get("wsdl_version"), WsdlVersion, "WSDL version")
        or WsdlVersion.WSDL11,
        "soap_version": _version(soap_version or header.get("soap_version"), SoapVersion, "SOAP version")
        or SoapVersion.SOAP11,
    }
    if header.get("style"):
        options["default_style"] = header["style"]
    if header.get("use"):
        options["default_use"] = header["use"]
    if header.get("transport"):
        options["transport"] = header["transport"]
    doc = Document(str(name), str(target_namespace), **options)
    if header.get("documentation"):
        doc.documentation(str(header["documentation"]))

    for prefix, uri in (data.get("namespaces") or {}).items():
        doc.namespace(str(prefix), str(uri))
    types = data.get("types") or {}
    _load_simple_types(doc, types.get("simple"))
    _load_complex_types(doc, types.get("complex"))
    _load_policies(doc, data.get("policies"))
    _load_operations(doc, data.get("operations"))
    _load_services(doc, data.get("services"))
    return doc


__all__ = ["load_description", "OPERATION_KINDS"]
