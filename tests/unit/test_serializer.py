import pytest
from lxml import etree

from adapter.serializer import NamespaceTable, serialize
from servicedesc.document import Document
from servicedesc.enums import BindingStyle
from servicedesc.errors import DuplicateDefinition, UnresolvedTypeReference
from servicedesc.model import EndpointReference
from servicedesc.utils import (
    HTTP_BINDING,
    MIME,
    SOAP11_BINDING,
    SOAP12_BINDING,
    WSA,
    WSAW,
    WSDL,
    WSDL2,
    WSDL2_SOAP,
    WSP,
    WSU,
    XSD,
)

NS = {
    "wsdl": str(WSDL),
    "w2": str(WSDL2),
    "xsd": str(XSD),
    "soap": str(SOAP11_BINDING),
    "soap12": str(SOAP12_BINDING),
    "wsoap": str(WSDL2_SOAP),
    "http": str(HTTP_BINDING),
    "mime": str(MIME),
    "wsp": str(WSP),
    "wsu": str(WSU),
    "wsa": str(WSA),
    "wsaw": str(WSAW),
    "pol": "urn:example:policy",
}


def _parse(text: str):
    return etree.fromstring(text.encode("utf-8"))


def _one(root, path: str):
    (found,) = root.xpath(path, namespaces=NS)
    return found


@pytest.fixture
def doc():
    return Document("UserService", "urn:example")


def test_one_way_document(doc):
    doc.one_way("GetUser").input("id", "xsd:string").end()
    doc.service("UserService").port("UserPort", "UserServiceBinding", "http://example.com/users")
    text = doc.build()
    assert text.startswith("<?xml version='1.0' encoding='UTF-8'?>")
    root = _parse(text)
    assert root.tag == f"{{{WSDL}}}definitions"
    assert root.get("name") == "UserService"
    assert root.get("targetNamespace") == "urn:example"
    assert root.nsmap["tns"] == "urn:example"

    schema = _one(root, "wsdl:types/xsd:schema")
    assert _one(schema, "xsd:complexType[@name='GetUserRequest']/xsd:sequence/xsd:element[@name='id']/@type") == "xsd:string"
    assert _one(schema, "xsd:element[@name='GetUserRequest']/@type") == "tns:GetUserRequest"
    assert _one(root, "wsdl:message[@name='GetUserInput']/wsdl:part[@name='parameters']/@element") == "tns:GetUserRequest"

    operation = _one(root, "wsdl:portType[@name='UserServicePortType']/wsdl:operation[@name='GetUser']")
    assert _one(operation, "wsdl:input/@message") == "tns:GetUserInput"
    assert operation.xpath("wsdl:output", namespaces=NS) == []

    binding = _one(root, "wsdl:binding[@name='UserServiceBinding']")
    assert binding.get("type") == "tns:UserServicePortType"
    assert _one(binding, "soap:binding/@style") == "document"
    bound = _one(binding, "wsdl:operation[@name='GetUser']")
    assert _one(bound, "soap:operation/@soapAction") == "urn:example/GetUser"
    assert _one(bound, "wsdl:input/soap:body/@use") == "literal"
    assert bound.xpath("wsdl:output", namespaces=NS) == []

    assert _one(root, "wsdl:service/wsdl:port/soap:address/@location") == "http://example.com/users"


def test_section_order(doc):
    doc.documentation("Users")
    doc.policy(id="p").assertion("urn:example:policy", "A")
    doc.import_wsdl("urn:common", "common.wsdl")
    doc.operation("Echo").input("text", "xsd:string").output("text", "xsd:string").end()
    doc.service("UserService").port("P", "UserServiceBinding", "http://x")
    root = _parse(doc.build())
    tags = [etree.QName(child).localname for child in root]
    assert tags == ["documentation", "Policy", "import", "types", "message", "message", "portType", "binding", "service"]


def test_schema_component_order(doc):
    doc.complex_type("Z")
    doc.union_type("U", "xsd:int", "xsd:string")
    doc.list_type("L", "xsd:int")
    doc.simple_type("S").enumeration("a")
    doc.attribute_group("AG").attribute("x", "xsd:string")
    doc.element_group("G").element("e", "xsd:string")
    doc.redefine("old.xsd").simple_type("R")
    doc.schema_include("inc.xsd")
    doc.schema_import("urn:common", "common.xsd", prefix="cmn")
    schema = _one(_parse(doc.build()), "wsdl:types/xsd:schema")
    names = [(etree.QName(child).localname, child.get("name")) for child in schema]
    assert names == [
        ("import", None),
        ("include", None),
        ("redefine", None),
        ("group", "G"),
        ("attributeGroup", "AG"),
        ("simpleType", "S"),
        ("simpleType", "L"),
        ("simpleType", "U"),
        ("complexType", "Z"),
    ]
    assert _one(schema, "xsd:simpleType[@name='U']/xsd:union/@memberTypes") == "xsd:int xsd:string"


def test_unresolved_type_aborts_serialization(doc, monkeypatch):
    doc.complex_type("Order").element("line", "tns:Line")
    emitted = []
    monkeypatch.setattr("adapter.serializer._Emitter.emit", lambda self, nsmap=None: emitted.append(nsmap))
    with pytest.raises(UnresolvedTypeReference, match="tns:Line"):
        serialize(doc)
    assert emitted == []


def test_duplicate_policy_id_aborts_serialization(doc):
    doc.policy(id="dup")
    doc.service("S").policy(id="dup")
    with pytest.raises(DuplicateDefinition):
        doc.build()


def test_complex_type_layout(doc):
    doc.complex_type("Base").element("id", "xsd:string")
    doc.element_group("Extra").element("note", "xsd:string")
    doc.attribute_group("Audit").attribute("by", "xsd:string")
    (
        doc.complex_type("Order", abstract=True)
        .extends("tns:Base")
        .element("lines", "xsd:string", nullable=True, min_occurs=0, max_occurs=-1)
        .group_ref("tns:Extra")
        .choice().element("a", "xsd:int").element("b", "xsd:int").end()
        .any(namespace="##other", process_contents="lax")
        .attribute("version", "xsd:int", use="required")
        .attribute_group_ref("tns:Audit")
        .any_attribute()
        .documentation("An order")
    )
    order = _one(_parse(doc.build()), "wsdl:types/xsd:schema/xsd:complexType[@name='Order']")
    assert order.get("abstract") == "true"
    assert _one(order, "xsd:annotation/xsd:documentation/text()") == "An order"
    extension = _one(order, "xsd:complexContent/xsd:extension")
    assert extension.get("base") == "tns:Base"
    children = [etree.QName(c).localname for c in extension]
    assert children == ["sequence", "choice", "attribute", "attributeGroup", "anyAttribute"]
    lines = _one(extension, "xsd:sequence/xsd:element[@name='lines']")
    assert lines.get("maxOccurs") == "unbounded"
    assert lines.get("minOccurs") == "0"
    assert lines.get("nillable") == "true"
    sequence = [etree.QName(c).localname for c in _one(extension, "xsd:sequence")]
    assert sequence == ["element", "group", "any"]
    assert _one(extension, "xsd:sequence/xsd:group/@ref") == "tns:Extra"


def test_simple_content_and_identity_constraints(doc):
    price = doc.complex_type("Price")
    price.simple_content("xsd:decimal").attribute("currency", "xsd:string", use="required")
    price.unique("oneCurrency").selector(".").field("@currency")
    price_el = _one(_parse(doc.build()), "wsdl:types/xsd:schema/xsd:complexType[@name='Price']")
    assert _one(price_el, "xsd:simpleContent/xsd:extension/@base") == "xsd:decimal"
    assert _one(price_el, "xsd:simpleContent/xsd:extension/xsd:attribute/@name") == "currency"
    assert _one(price_el, "xsd:unique/xsd:field/@xpath") == "@currency"
    assert price_el.xpath("xsd:sequence", namespaces=NS) == []


def test_list_type_with_facets_wraps_the_list(doc):
    doc.list_type("Codes", "xsd:string").max_length(3)
    codes = _one(_parse(doc.build()), "wsdl:types/xsd:schema/xsd:simpleType[@name='Codes']")
    assert _one(codes, "xsd:restriction/xsd:simpleType/xsd:list/@itemType") == "xsd:string"
    assert _one(codes, "xsd:restriction/xsd:maxLength/@value") == "3"


def test_policy_insertion_order_in_output(doc):
    policy_ns = "urn:example:policy"
    (
        doc.policy(id="p1", name="Main")
        .all()
        .assertion(policy_ns, "A")
        .exactly_one()
        .assertion(policy_ns, "B")
        .assertion(policy_ns, "C")
    )
    root = _parse(doc.build())
    policy = _one(root, "wsp:Policy")
    assert policy.get(f"{{{WSU}}}Id") == "p1"
    assert policy.get("Name") == "Main"
    conjunction = _one(policy, "wsp:All")
    assert [etree.QName(c).localname for c in conjunction] == ["A", "ExactlyOne"]
    assert [etree.QName(c).localname for c in _one(conjunction, "wsp:ExactlyOne")] == ["B", "C"]


def test_prefixes_form_a_bijection(doc):
    doc.namespace("soap", "urn:not-soap")
    doc.namespace("ext", "urn:ext")
    doc.simple_type("Code", "ext:Base")
    doc.complex_type("Holder").element("c", "soap:Thing")
    doc.one_way("Ping").input("code", "tns:Code").end()
    doc.policy().assertion("urn:example:policy", "A", {"{urn:example:attr}flag": "1"})
    root = _parse(doc.build())
    nsmap = root.nsmap
    assert len(set(nsmap.values())) == len(nsmap)
    assert nsmap["soap"] == "urn:not-soap"
    soap_prefixes = [p for p, uri in nsmap.items() if uri == str(SOAP11_BINDING)]
    assert soap_prefixes == ["soap1"]
    for element in root.iter():
        assert element.nsmap == nsmap
    assert _one(root, "//xsd:simpleType[@name='Code']/xsd:restriction/@base") == "ext:Base"
    assert _one(root, "//xsd:complexType[@name='Holder']//xsd:element/@type") == "soap:Thing"


def test_namespace_table_suffixes_taken_prefixes():
    table = NamespaceTable()
    assert table.bind("urn:a", "p") == "p"
    assert table.bind("urn:b", "p") == "p1"
    assert table.bind("urn:a", "q") == "p"
    assert table.bind("urn:c") == "ns"
    assert table.qname("urn:b", "x") == "p1:x"
    assert table.nsmap() == {"p": "urn:a", "p1": "urn:b", "ns": "urn:c"}


def test_soap12_vocabulary():
    doc = Document("S", "urn:s", soap_version="1.2")
    doc.one_way("Ping").end()
    doc.service("S").port("P", "SBinding", "http://x")
    root = _parse(doc.build())
    assert root.nsmap["soap12"] == str(SOAP12_BINDING)
    assert str(SOAP11_BINDING) not in root.nsmap.values()
    assert _one(root, "wsdl:binding/soap12:binding/@transport") == "http://schemas.xmlsoap.org/soap/http"
    assert _one(root, "wsdl:service/wsdl:port/soap12:address/@location") == "http://x"


def test_part_reference_kinds(doc):
    doc.complex_type("Order")
    doc.message("M").part("order", "tns:Order").part("count", "xsd:int")
    root = _parse(doc.build())
    assert _one(root, "wsdl:message/wsdl:part[@name='order']/@element") == "tns:Order"
    assert _one(root, "wsdl:message/wsdl:part[@name='count']/@type") == "xsd:int"


def test_headers_faults_and_rpc_body(doc):
    doc.message("Auth").part("token", "xsd:string")
    doc.message("AuthFault").part("reason", "xsd:string")
    doc.operation("Delete").input("id", "xsd:string").output("ok", "xsd:boolean").fault("why", "xsd:string").end()
    binding = doc.bindings["UserServiceBinding"]
    binding.operations["Delete"].style = BindingStyle.RPC
    binding.header("Auth", "token").header_fault("AuthFault", "reason")
    bound = _one(_parse(doc.build()), "wsdl:binding/wsdl:operation[@name='Delete']")
    header = _one(bound, "wsdl:input/soap:header")
    assert header.get("message") == "tns:Auth"
    assert header.get("part") == "token"
    assert _one(header, "soap:headerfault/@message") == "tns:AuthFault"
    assert _one(bound, "wsdl:input/soap:body/@namespace") == "urn:example"
    assert _one(bound, "wsdl:fault[@name='DeleteFault']/soap:fault/@name") == "DeleteFault"
    assert _one(bound, "soap:operation/@style") == "rpc"


def test_mime_multipart(doc):
    doc.operation("Upload").input("data", "xsd:base64Binary").output("ok", "xsd:boolean").end()
    (
        doc.bindings["UserServiceBinding"]
        .input_mime()
        .part().body().end()
        .part("attachment").content("data", "application/octet-stream").end()
    )
    bound = _one(_parse(doc.build()), "wsdl:binding/wsdl:operation[@name='Upload']")
    parts = bound.xpath("wsdl:input/mime:multipartRelated/mime:part", namespaces=NS)
    assert len(parts) == 2
    assert _one(parts[0], "soap:body/@use") == "literal"
    assert parts[1].get("name") == "attachment"
    assert _one(parts[1], "mime:content/@type") == "application/octet-stream"
    assert _one(bound, "wsdl:output/soap:body/@use") == "literal"


def test_http_binding(doc):
    doc.operation("Echo").input("text", "xsd:string").output("text", "xsd:string").end()
    (
        doc.binding("EchoHttp", "UserServicePortType")
        .http_binding("GET")
        .operation("Echo")
        .http_operation("/echo")
        .http_url_encoded()
    )
    doc.service("S").port("HttpPort", "EchoHttp", "http://example.com")
    root = _parse(doc.build())
    binding = _one(root, "wsdl:binding[@name='EchoHttp']")
    assert _one(binding, "http:binding/@verb") == "GET"
    assert _one(binding, "wsdl:operation/http:operation/@location") == "/echo"
    assert len(binding.xpath("wsdl:operation/wsdl:input/http:urlEncoded", namespaces=NS)) == 1
    assert _one(root, "wsdl:service/wsdl:port/http:address/@location") == "http://example.com"


def test_addressing_actions_and_endpoint_reference(doc):
    doc.operation("Echo").input("t", "xsd:string").output("t", "xsd:string").action("urn:in", "urn:out").end()
    doc.port_types["UserServicePortType"].using_addressing()
    doc.bindings["UserServiceBinding"].using_addressing()
    reference = EndpointReference("http://example.com/echo").with_parameter("urn:params", "Tenant", "acme")
    doc.service("S").port("P", "UserServiceBinding", "http://example.com/echo", reference)
    root = _parse(doc.build())
    port_type = _one(root, "wsdl:portType")
    assert port_type.get(f"{{{WSAW}}}UsingAddressing") == "true"
    assert _one(port_type, "wsdl:operation/wsdl:input").get(f"{{{WSAW}}}Action") == "urn:in"
    assert _one(port_type, "wsdl:operation/wsdl:output").get(f"{{{WSAW}}}Action") == "urn:out"
    assert _one(root, "wsdl:binding/wsaw:UsingAddressing").get(f"{{{WSDL}}}required") == "true"
    epr = _one(root, "wsdl:service/wsdl:port/wsa:EndpointReference")
    assert _one(epr, "wsa:Address/text()") == "http://example.com/echo"
    (tenant,) = epr.xpath("wsa:ReferenceParameters/*", namespaces=NS)
    assert tenant.tag == "{urn:params}Tenant"
    assert tenant.text == "acme"


def test_binding_policies_come_before_protocol_binding(doc):
    doc.one_way("Ping").end()
    binding = doc.bindings["UserServiceBinding"]
    binding.documentation("SOAP binding")
    binding.policy_reference("#secure")
    binding.operations["Ping"].policy().assertion("urn:example:policy", "OpLevel")
    element = _one(_parse(doc.build()), "wsdl:binding")
    assert [etree.QName(c).localname for c in element][:3] == ["documentation", "PolicyReference", "binding"]
    assert _one(element, "wsdl:operation/wsp:Policy/pol:OpLevel") is not None


def test_wsdl20_description():
    doc = Document("Echo", "urn:echo", wsdl_version="2.0", soap_version="1.2")
    (
        doc.operation("Echo")
        .input("text", "xsd:string")
        .output("text", "xsd:string")
        .fault("reason", "xsd:string")
        .end()
    )
    doc.one_way("Log").input("line", "xsd:string").end()
    doc.port_types["EchoPortType"].operations["Echo"].safe = True
    doc.service("EchoService").port("EchoEndpoint", "EchoBinding", "http://example.com/echo")
    root = _parse(doc.build())
    assert root.tag == f"{{{WSDL2}}}description"
    assert root.get("name") is None
    assert root.nsmap["xs"] == str(XSD)
    assert root.xpath("w2:message", namespaces=NS) == []

    interface = _one(root, "w2:interface[@name='EchoPortType']")
    assert _one(interface, "w2:fault/@name") == "EchoFault"
    assert _one(interface, "w2:fault/@element") == "tns:EchoFault"
    echo = _one(interface, "w2:operation[@name='Echo']")
    assert echo.get("pattern") == "http://www.w3.org/ns/wsdl/in-out"
    assert echo.get("{http://www.w3.org/ns/wsdl-extensions}safe") == "true"
    assert _one(echo, "w2:input/@element") == "tns:EchoRequest"
    assert _one(echo, "w2:output/@element") == "tns:EchoResponse"
    assert _one(echo, "w2:outfault/@ref") == "tns:EchoFault"
    log = _one(interface, "w2:operation[@name='Log']")
    assert log.get("pattern") == "http://www.w3.org/ns/wsdl/in-only"

    binding = _one(root, "w2:binding")
    assert binding.get("interface") == "tns:EchoPortType"
    assert binding.get("type") == str(WSDL2_SOAP)
    assert binding.get(f"{{{WSDL2_SOAP}}}version") == "1.2"
    assert _one(binding, "w2:operation[@ref='tns:Echo']").get(f"{{{WSDL2_SOAP}}}action") == "urn:echo/Echo"

    service = _one(root, "w2:service")
    assert service.get("interface") == "tns:EchoPortType"
    endpoint = _one(service, "w2:endpoint")
    assert endpoint.get("binding") == "tns:EchoBinding"
    assert endpoint.get("address") == "http://example.com/echo"
    assert _one(root, "w2:types/xsd:schema/xsd:element[@name='EchoRequest']/@type") == "tns:EchoRequest"


def test_documentation_keeps_source_and_lang(doc):
    doc.documentation("hello", lang="en", source="http://docs.example/s")
    doc.one_way("GetUser").input("id", "xsd:string").end()
    doc.port_types["UserServicePortType"].documentation("operations", source="http://docs.example/pt")
    root = _parse(doc.build())
    documentation = _one(root, "wsdl:documentation")
    assert documentation.get("source") == "http://docs.example/s"
    assert documentation.get("{http://www.w3.org/XML/1998/namespace}lang") == "en"
    assert documentation.text == "hello"
    assert _one(root, "wsdl:portType/wsdl:documentation/@source") == "http://docs.example/pt"


def test_endpoint_reference_version_given_as_uri(doc):
    doc.one_way("GetUser").input("id", "xsd:string").end()
    reference = EndpointReference("http://x/svc", version="http://schemas.xmlsoap.org/ws/2004/08/addressing")
    doc.service("S").port("P", "UserServiceBinding", "http://x/svc", reference)
    root = _parse(doc.build())
    (epr,) = root.xpath(
        "wsdl:service/wsdl:port/a04:EndpointReference/a04:Address",
        namespaces={**NS, "a04": "http://schemas.xmlsoap.org/ws/2004/08/addressing"},
    )
    assert epr.text == "http://x/svc"


def test_http_only_document_declares_no_soap_namespace(doc):
    doc.message("In").part("q", "xsd:string")
    doc.port_type("Search").operation("Find", "In", "In")
    doc.binding("SearchHttp", "Search").http_binding("GET").operation("Find").http_operation("/find")
    doc.service("S").port("HttpPort", "SearchHttp", "http://example.com")
    root = _parse(doc.build())
    assert str(SOAP11_BINDING) not in root.nsmap.values()
    assert root.nsmap["http"] == str(HTTP_BINDING)
