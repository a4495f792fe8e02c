import pytest
from lxml import etree

from wsdlforge import cli
from servicedesc.utils import WSDL, WSDL2

DESCRIPTION = """
service:
  name: Echo
  target_namespace: urn:echo
operations:
  - name: Echo
    input:
      - text: xsd:string
    output:
      - text: xsd:string
services:
  - name: EchoService
    ports:
      - {name: EchoPort, address: "http://example.com/echo"}
"""


def _description(tmp_path, text=DESCRIPTION):
    path = tmp_path / "echo.yaml"
    path.write_text(text)
    return str(path)


def test_main_writes_wsdl(tmp_path, capsys):
    out_file = tmp_path / "echo.wsdl"
    cli.main(["--description", _description(tmp_path), "--output", str(out_file)])
    root = etree.fromstring(out_file.read_bytes())
    assert root.tag == f"{{{WSDL}}}definitions"
    assert f"Wrote {out_file}" in capsys.readouterr().out


def test_main_wsdl_version_override_to_stdout(tmp_path, capsys):
    cli.main(["--description", _description(tmp_path), "--wsdl-version", "2.0", "--soap-version", "1.2"])
    out = capsys.readouterr().out
    root = etree.fromstring(out.encode("utf-8"))
    assert root.tag == f"{{{WSDL2}}}description"


def test_main_check_reports_problems(tmp_path, capsys):
    broken = DESCRIPTION + "types:\n  complex:\n    - name: Bad\n      elements:\n        - {name: x, type: tns:Nope}\n"
    with pytest.raises(SystemExit) as exc:
        cli.main(["--description", _description(tmp_path, broken), "--check"])
    assert exc.value.code == 1
    assert "tns:Nope" in capsys.readouterr().out


def test_main_check_passes(tmp_path, capsys):
    cli.main(["--description", _description(tmp_path), "--check"])
    assert "all references resolved" in capsys.readouterr().out


def test_main_build_error_exits(tmp_path):
    broken = DESCRIPTION + "types:\n  complex:\n    - name: Bad\n      elements:\n        - {name: x, type: tns:Nope}\n"
    with pytest.raises(SystemExit, match="Cannot serialize Echo"):
        cli.main(["--description", _description(tmp_path, broken), "--output", str(tmp_path / "x.wsdl")])
    assert not (tmp_path / "x.wsdl").exists()


def test_main_invalid_description(tmp_path):
    with pytest.raises(SystemExit, match="Invalid description"):
        cli.main(["--description", _description(tmp_path, "foo: bar")])


def test_main_missing_key_is_reported(tmp_path):
    broken = DESCRIPTION.replace("address: \"http://example.com/echo\"", "port: 80")
    with pytest.raises(SystemExit, match="missing required key 'address'"):
        cli.main(["--description", _description(tmp_path, broken)])
