"""Namespace constants and QName helpers shared by the document model and the serializer."""
from typing import Optional, Tuple

from rdflib import Namespace

from .errors import ConstraintViolation

# Core vocabularies
WSDL = Namespace("http://schemas.xmlsoap.org/wsdl/")
WSDL2 = Namespace("http://www.w3.org/ns/wsdl")
XSD = Namespace("http://www.w3.org/2001/XMLSchema")
XML = Namespace("http://www.w3.org/XML/1998/namespace")

# Protocol bindings
SOAP11_BINDING = Namespace("http://schemas.xmlsoap.org/wsdl/soap/")
SOAP12_BINDING = Namespace("http://schemas.xmlsoap.org/wsdl/soap12/")
SOAP_HTTP_TRANSPORT = "http://schemas.xmlsoap.org/soap/http"
SOAP11_ENCODING = "http://schemas.xmlsoap.org/soap/encoding/"
SOAP12_ENCODING = "http://www.w3.org/2003/05/soap-encoding"
WSDL2_SOAP = Namespace("http://www.w3.org/ns/wsdl/soap")
WSDL2_HTTP = Namespace("http://www.w3.org/ns/wsdl/http")
WSDL2_SOAP_HTTP_PROTOCOL = "http://www.w3.org/2003/05/soap/bindings/HTTP/"
WSDL2_SOAP11_HTTP_PROTOCOL = "http://www.w3.org/2006/01/soap11/bindings/HTTP/"
HTTP_BINDING = Namespace("http://schemas.xmlsoap.org/wsdl/http/")
MIME = Namespace("http://schemas.xmlsoap.org/wsdl/mime/")

# WS-* extensions
WSP = Namespace("http://www.w3.org/ns/ws-policy")
WSU = Namespace(
    "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-utility-1.0.xsd"
)
WSA = Namespace("http://www.w3.org/2005/08/addressing")
WSAW = Namespace("http://www.w3.org/2006/05/addressing/wsdl")
SP = Namespace("http://docs.oasis-open.org/ws-sx/ws-securitypolicy/200702")
WST = Namespace("http://docs.oasis-open.org/ws-sx/ws-trust/200512")
WSOMA = Namespace("http://schemas.xmlsoap.org/ws/2004/09/policy/optimizedmimeserialization")
WSE = Namespace("http://schemas.xmlsoap.org/ws/2004/08/eventing")
WSNT = Namespace("http://docs.oasis-open.org/wsn/b-2")
WSTOP = Namespace("http://docs.oasis-open.org/wsn/t-1")
AUTH = Namespace("http://docs.oasis-open.org/wsfed/authorization/200706")
AUTH_CLAIMS_DIALECT = "http://docs.oasis-open.org/wsfed/authorization/200706/authclaims"
WSDLX = Namespace("http://www.w3.org/ns/wsdl-extensions")
WSAT = Namespace("http://docs.oasis-open.org/ws-tx/wsat/2006/06")
WSBA = Namespace("http://docs.oasis-open.org/ws-tx/wsba/2006/06")
WSCOOR = Namespace("http://docs.oasis-open.org/ws-tx/wscoor/2006/06")
WSD = Namespace("http://docs.oasis-open.org/ws-dd/ns/discovery/2009/01")
MEX = Namespace("http://schemas.xmlsoap.org/ws/2004/09/mex")
WSRF_R = Namespace("http://docs.oasis-open.org/wsrf/r-2")
WSRF_RP = Namespace("http://docs.oasis-open.org/wsrf/rp-2")
WSRF_RL = Namespace("http://docs.oasis-open.org/wsrf/rl-2")

# Preferred prefixes, first match wins when the serializer builds its table
PREFERRED_PREFIXES = {
    str(WSDL): "wsdl",
    str(WSDL2): "wsdl",
    str(XSD): "xsd",
    str(SOAP11_BINDING): "soap",
    str(SOAP12_BINDING): "soap12",
    str(WSDL2_SOAP): "wsoap",
    str(WSDL2_HTTP): "whttp",
    str(HTTP_BINDING): "http",
    str(MIME): "mime",
    str(WSP): "wsp",
    str(WSU): "wsu",
    str(WSA): "wsa",
    str(WSAW): "wsaw",
    str(SP): "sp",
    str(WST): "wst",
    str(WSOMA): "wsoma",
    str(WSE): "wse",
    str(WSNT): "wsnt",
    str(WSTOP): "wstop",
    str(AUTH): "auth",
    str(WSDLX): "wsdlx",
    str(WSAT): "wsat",
    str(WSBA): "wsba",
    str(WSCOOR): "wscoor",
    str(WSD): "wsd",
    str(MEX): "mex",
    str(WSRF_R): "wsrf-r",
    str(WSRF_RP): "wsrf-rp",
    str(WSRF_RL): "wsrf-rl",
}

# Prefixes that always denote the XML Schema namespace in type references
XSD_PREFIXES = frozenset({"xsd", "xs"})


def split_qname(ref: str) -> Tuple[Optional[str], str]:
    """Return ``(prefix, local)`` for ``ref``; prefix is ``None`` when absent."""
    if not ref:
        raise ConstraintViolation("empty qualified name")
    if ":" in ref:
        prefix, local = ref.split(":", 1)
        if not prefix or not local or ":" in local:
            raise ConstraintViolation(f"malformed qualified name {ref!r}")
        return prefix, local
    return None, ref


def local_name(ref: str) -> str:
    """Return the local part of ``ref``."""
    return split_qname(ref)[1]


def clark(uri: str, local: str) -> str:
    """Return the ``{uri}local`` notation used by lxml."""
    return f"{{{uri}}}{local}"


__all__ = [
    "WSDL",
    "WSDL2",
    "XSD",
    "XML",
    "SOAP11_BINDING",
    "SOAP12_BINDING",
    "SOAP_HTTP_TRANSPORT",
    "SOAP11_ENCODING",
    "SOAP12_ENCODING",
    "WSDL2_SOAP",
    "WSDL2_HTTP",
    "WSDL2_SOAP_HTTP_PROTOCOL",
    "WSDL2_SOAP11_HTTP_PROTOCOL",
    "HTTP_BINDING",
    "MIME",
    "WSP",
    "WSU",
    "WSA",
    "WSAW",
    "SP",
    "WST",
    "WSOMA",
    "WSE",
    "WSNT",
    "WSTOP",
    "AUTH",
    "AUTH_CLAIMS_DIALECT",
    "WSDLX",
    "WSAT",
    "WSBA",
    "WSCOOR",
    "WSD",
    "MEX",
    "WSRF_R",
    "WSRF_RP",
    "WSRF_RL",
    "PREFERRED_PREFIXES",
    "XSD_PREFIXES",
    "split_qname",
    "local_name",
    "clark",
]
