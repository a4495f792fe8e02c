import pytest

from servicedesc.enums import MessageExchangePattern
from servicedesc.errors import ConstraintViolation, DuplicateDefinition
from servicedesc.graph import Binding, Message, PortType, Service


def test_message_parts_are_ordered_and_unique():
    message = Message("OrderInput").part("header", "tns:Header").part("body", "tns:Order")
    assert list(message.parts) == ["header", "body"]
    with pytest.raises(DuplicateDefinition):
        message.part("body", "xsd:string")


def test_port_type_operation_patterns():
    port_type = PortType("Orders")
    port_type.operation("Place", "PlaceInput", "PlaceOutput")
    port_type.operation("Notify", output="NotifyOutput")
    port_type.operation("Submit", "SubmitInput", fault="SubmitFault")
    port_type.operation("Poll", "PollInput", "PollOutput", solicit=True)
    ops = port_type.operations
    assert ops["Place"].exchange_pattern is MessageExchangePattern.IN_OUT
    assert ops["Notify"].exchange_pattern is MessageExchangePattern.OUT_ONLY
    assert ops["Submit"].exchange_pattern is MessageExchangePattern.ROBUST_IN_ONLY
    assert ops["Poll"].exchange_pattern is MessageExchangePattern.OUT_IN
    assert ops["Poll"].directions == ("output", "input")
    assert ops["Submit"].faults[0].name == ops["Submit"].faults[0].message == "SubmitFault"


def test_port_type_operation_errors():
    port_type = PortType("Orders").operation("Place", "PlaceInput")
    with pytest.raises(DuplicateDefinition):
        port_type.operation("Place", "Other")
    with pytest.raises(ConstraintViolation):
        port_type.operation("Empty")
    with pytest.raises(ConstraintViolation):
        port_type.operation("Half", "In", solicit=True)
    with pytest.raises(ConstraintViolation):
        port_type.operation("Odd", "In", pattern="http://example.com/mep")
    assert list(port_type.operations) == ["Place"]


def test_fault_action_needs_action():
    port_type = PortType("Orders").operation("Place", "PlaceInput", fault="PlaceFault")
    with pytest.raises(ConstraintViolation):
        port_type.fault_action("Place", "PlaceFault", "urn:fault")
    port_type.action("Place", "urn:in").fault_action("Place", "PlaceFault", "urn:fault")
    assert port_type.actions["Place"].faults == {"PlaceFault": "urn:fault"}


def test_binding_details_need_an_operation():
    binding = Binding("B", "P")
    with pytest.raises(ConstraintViolation):
        binding.header("H", "h")
    binding.operation("Place")
    with pytest.raises(ConstraintViolation):
        binding.header_fault("HF", "f")
    binding.header("H", "h").header_fault("HF", "f")
    header = binding.operations["Place"].headers[0]
    assert header.faults[0].message == "HF"
    assert header.use.value == "literal"


def test_binding_operation_is_unique_and_detached_action_is_none():
    binding = Binding("B", "P").operation("Place")
    assert binding.operations["Place"].soap_action is None
    with pytest.raises(DuplicateDefinition):
        binding.operation("Place")


def test_mime_and_http_closed_sets():
    binding = Binding("B", "P").operation("Upload")
    with pytest.raises(ConstraintViolation):
        binding.mime_multipart("sideways")
    with pytest.raises(ConstraintViolation):
        binding.http_binding("FETCH")
    multipart = binding.input_mime()
    assert multipart.part().body().end().part("file").content("file", "image/png").end().end() is binding
    parts = binding.operations["Upload"].input_mime.parts
    assert parts[0].soap_body
    assert parts[1].contents[0].type == "image/png"
    binding.http_binding("get").http_operation("/upload").http_url_replacement()
    assert binding.is_http
    assert binding.http_verb == "GET"
    assert binding.operations["Upload"].http_encoding == "urlReplacement"


def test_service_ports_are_unique():
    service = Service("Shop").port("Main", "B", "http://example.com/shop")
    with pytest.raises(DuplicateDefinition):
        service.port("Main", "B", "http://example.com/other")
    assert service.ports["Main"].address == "http://example.com/shop"
