import logging

import pytest

from servicedesc.document import Document
from servicedesc.enums import SoapVersion, WsdlVersion, XsdType
from servicedesc.errors import ConstraintViolation, DuplicateDefinition


@pytest.fixture
def doc():
    return Document("UserService", "urn:example")


def test_one_way_shorthand_builds_the_whole_cluster(doc):
    doc.one_way("GetUser").input("id", "xsd:string").end()

    request = doc.types.complex_types["GetUserRequest"]
    assert [(e.name, e.type) for e in request.elements] == [("id", "xsd:string")]
    parts = doc.messages["GetUserInput"].parts
    assert list(parts) == ["parameters"]
    assert parts["parameters"].type == "tns:GetUserRequest"
    operation = doc.port_types["UserServicePortType"].operations["GetUser"]
    assert operation.input == "GetUserInput"
    assert operation.output is None
    binding = doc.bindings["UserServiceBinding"]
    assert binding.port_type == "UserServicePortType"
    assert binding.operations["GetUser"].soap_action == "urn:example/GetUser"
    assert "GetUserOutput" not in doc.messages


def test_explicit_soap_action_overrides_default(doc):
    doc.one_way("GetUser").input("id", XsdType.STRING).soap_action("urn:custom#get").end()
    assert doc.bindings["UserServiceBinding"].operations["GetUser"].soap_action == "urn:custom#get"


def test_notification_shorthand_has_output_only(doc):
    doc.notification("UserChanged").output("id", "xsd:string").end()
    operation = doc.port_types["UserServicePortType"].operations["UserChanged"]
    assert operation.input is None
    assert operation.output == "UserChangedOutput"
    assert doc.messages["UserChangedOutput"].parts["parameters"].type == "tns:UserChangedResponse"
    assert "UserChangedRequest" not in doc.types.complex_types


def test_shorthands_share_default_containers_in_call_order(doc):
    doc.one_way("First").input("a", "xsd:string").end()
    doc.notification("Second").output("b", "xsd:int").end()
    doc.operation("Third").input("c", "xsd:string").output("d", "xsd:string").end()
    assert list(doc.port_types) == ["UserServicePortType"]
    assert list(doc.bindings) == ["UserServiceBinding"]
    assert list(doc.port_types["UserServicePortType"].operations) == ["First", "Second", "Third"]
    assert list(doc.bindings["UserServiceBinding"].operations) == ["First", "Second", "Third"]


def test_request_response_with_fault_and_actions(doc):
    (
        doc.operation("Delete")
        .input("id", "xsd:string")
        .output("ok", "xsd:boolean")
        .fault("reason", "xsd:string")
        .action("urn:example/Delete", "urn:example/DeleteResponse")
        .fault_action("DeleteFault", "urn:example/DeleteFault")
        .end()
    )
    operation = doc.port_types["UserServicePortType"].operations["Delete"]
    assert operation.faults[0].name == "DeleteFault"
    assert doc.messages["DeleteFault"].parts["fault"].type == "tns:DeleteFault"
    actions = doc.port_types["UserServicePortType"].actions["Delete"]
    assert actions.output == "urn:example/DeleteResponse"
    assert actions.faults == {"DeleteFault": "urn:example/DeleteFault"}


def test_fault_action_without_action_is_rejected(doc):
    builder = doc.operation("Delete").fault("reason", "xsd:string")
    with pytest.raises(ConstraintViolation):
        builder.fault_action("DeleteFault", "urn:x")


def test_repeated_shorthand_name_leaves_graph_untouched(doc):
    doc.one_way("Ping").end()
    messages = dict(doc.messages)
    types = dict(doc.types.complex_types)
    with pytest.raises(DuplicateDefinition):
        doc.operation("Ping").input("x", "xsd:string").output("y", "xsd:string").end()
    assert doc.messages == messages
    assert doc.types.complex_types == types


def test_shorthand_logs_default_container_creation(doc, caplog):
    with caplog.at_level(logging.DEBUG, logger="servicedesc.document"):
        doc.one_way("Ping").end()
        doc.one_way("Pong").end()
    created = [r.message for r in caplog.records if r.message.startswith("Created default")]
    assert created == ["Created default port type UserServicePortType", "Created default binding UserServiceBinding"]


def test_direct_definitions_are_last_writer_wins(doc):
    first = doc.message("M")
    doc.message("N")
    second = doc.message("M")
    assert list(doc.messages) == ["M", "N"]
    assert doc.messages["M"] is second is not first


def test_target_namespace_is_read_only(doc):
    with pytest.raises(AttributeError):
        doc.target_namespace = "urn:other"


def test_version_settings_are_closed_sets():
    doc = Document("S", "urn:s", wsdl_version="2.0", soap_version="1.2")
    assert doc.wsdl_version is WsdlVersion.WSDL20
    assert doc.soap_version is SoapVersion.SOAP12
    with pytest.raises(ConstraintViolation):
        Document("S", "urn:s", soap_version="1.3")
    with pytest.raises(ConstraintViolation):
        Document("S", "")


def test_prefix_declarations(doc):
    doc.namespace("ext", "urn:ext").namespace("ext", "urn:ext")
    assert doc.prefix_uri("ext") == "urn:ext"
    assert doc.prefix_uri("tns") == "urn:example"
    assert doc.prefix_uri("wsp") == "http://www.w3.org/ns/ws-policy"
    assert doc.prefix_uri("nope") is None
    with pytest.raises(DuplicateDefinition):
        doc.namespace("ext", "urn:other")
    with pytest.raises(ConstraintViolation):
        doc.namespace("tns", "urn:other")
    doc.schema_import("urn:common", "common.xsd", prefix="cmn")
    assert doc.prefix_uri("cmn") == "urn:common"


def test_redefine_has_its_own_registry(doc):
    redefine = doc.redefine("base.xsd")
    redefine.complex_type("Address").element("zip", "xsd:string")
    assert redefine.end() is doc
    assert "Address" in redefine.types.complex_types
    assert doc.types.lookup("Address") is None
