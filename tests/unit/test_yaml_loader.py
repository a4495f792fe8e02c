import pytest
import yaml

from adapter.yaml_loader import load_description
from servicedesc.enums import SoapVersion, WsdlVersion
from servicedesc.errors import ConstraintViolation

DESCRIPTION = """
service:
  name: Orders
  target_namespace: urn:orders
  documentation: Order management
namespaces:
  cmn: urn:common
types:
  simple:
    - name: Status
      enumeration: [open, closed]
      max_length: 6
  complex:
    - name: Order
      elements:
        - {name: id, type: xsd:string}
        - {name: lines, type: xsd:int, min_occurs: 0, max_occurs: unbounded}
      attributes:
        - {name: status, type: tns:Status, use: required}
policies:
  - id: secure
    assertions:
      - namespace: urn:policy
        local_name: Encrypted
operations:
  - name: PlaceOrder
    input:
      - order: tns:Order
    output:
      - {name: id, type: xsd:string}
    faults:
      - {name: reason, type: xsd:string}
    action: {input: urn:orders/Place, output: urn:orders/PlaceResponse}
  - name: CancelOrder
    kind: one-way
    soap_action: urn:orders#cancel
    input:
      - id: xsd:string
  - name: OrderShipped
    kind: notification
    output:
      - id: xsd:string
services:
  - name: OrderService
    ports:
      - {name: OrderPort, address: "http://example.com/orders"}
"""


def _write(tmp_path, text, name="orders.yaml"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_load_description_builds_document(tmp_path):
    doc = load_description(_write(tmp_path, DESCRIPTION))
    assert doc is not None
    assert doc.name == "Orders"
    assert doc.target_namespace == "urn:orders"
    assert doc.prefix_uri("cmn") == "urn:common"
    assert doc.types.simple_types["Status"].enumerations == ["open", "closed"]
    lines = doc.types.complex_types["Order"].elements[1]
    assert lines.max_occurs == -1
    operations = doc.port_types["OrdersPortType"].operations
    assert list(operations) == ["PlaceOrder", "CancelOrder", "OrderShipped"]
    assert operations["PlaceOrder"].faults[0].name == "PlaceOrderFault"
    assert operations["OrderShipped"].input is None
    binding = doc.bindings["OrdersBinding"]
    assert binding.operations["CancelOrder"].soap_action == "urn:orders#cancel"
    assert binding.operations["PlaceOrder"].soap_action == "urn:orders/PlaceOrder"
    assert doc.services["OrderService"].ports["OrderPort"].binding == "OrdersBinding"
    assert doc.policies.items[0].id == "secure"
    assert "PlaceOrderResponse" in doc.build()


def test_version_overrides(tmp_path):
    path = _write(tmp_path, DESCRIPTION.replace("  documentation:", "  wsdl_version: 1.1\n  documentation:"))
    doc = load_description(path, wsdl_version="2.0", soap_version="1.2")
    assert doc.wsdl_version is WsdlVersion.WSDL20
    assert doc.soap_version is SoapVersion.SOAP12


def test_numeric_versions_in_yaml(tmp_path):
    path = _write(tmp_path, DESCRIPTION.replace("  documentation:", "  wsdl_version: 2.0\n  documentation:"))
    assert load_description(path).wsdl_version is WsdlVersion.WSDL20


def test_unrecognized_returns_none(tmp_path):
    assert load_description(_write(tmp_path, "foo: bar")) is None
    assert load_description(_write(tmp_path, "service:\n  name: X\n", "nons.yaml")) is None


def test_invalid_yaml(tmp_path):
    with pytest.raises(yaml.YAMLError):
        load_description(_write(tmp_path, "service: [bar"))


def test_invalid_operation_kind(tmp_path):
    text = "service: {name: S, target_namespace: 'urn:s'}\noperations:\n  - {name: X, kind: broadcast}\n"
    with pytest.raises(ConstraintViolation):
        load_description(_write(tmp_path, text))


@pytest.mark.parametrize(
    "body",
    [
        "operations:\n  - {kind: one-way}\n",
        "services:\n  - name: Svc\n    ports:\n      - {name: P}\n",
        "policies:\n  - id: p\n    assertions:\n      - {local_name: Encrypted}\n",
        "types:\n  complex:\n    - elements: [{name: a}]\n",
    ],
)
def test_missing_required_keys(tmp_path, body):
    text = "service: {name: S, target_namespace: 'urn:s'}\n" + body
    with pytest.raises(ConstraintViolation, match="missing required key"):
        load_description(_write(tmp_path, text))
