"""Domain: ready-made WS-* policy assertions.

Each factory returns a :class:`~servicedesc.policy.PolicyAssertion` that can
be appended to any policy or operator with ``add()``::

    doc.binding("B", "P").policy(id="secure").all() \\
        .add(TransportBinding().https_token().algorithm(AlgorithmSuite.BASIC256).build()) \\
        .add(wss11())
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .enums import coerce
from .errors import ConstraintViolation
from .model import EndpointReference
from .policy import Policy, PolicyAssertion
from .utils import (
    AUTH,
    AUTH_CLAIMS_DIALECT,
    MEX,
    SP,
    WSAT,
    WSBA,
    WSCOOR,
    WSD,
    WSE,
    WSNT,
    WSOMA,
    WSP,
    WSRF_R,
    WSRF_RL,
    WSRF_RP,
    WST,
    WSTOP,
    clark,
)

SP_NS = str(SP)


class AlgorithmSuite(Enum):
    BASIC256 = "Basic256"
    BASIC192 = "Basic192"
    BASIC128 = "Basic128"
    TRIPLE_DES = "TripleDes"
    BASIC256_SHA256 = "Basic256Sha256"
    BASIC192_SHA256 = "Basic192Sha256"
    BASIC128_SHA256 = "Basic128Sha256"
    TRIPLE_DES_SHA256 = "TripleDesSha256"
    BASIC256_RSA15 = "Basic256Rsa15"
    BASIC192_RSA15 = "Basic192Rsa15"
    BASIC128_RSA15 = "Basic128Rsa15"
    TRIPLE_DES_RSA15 = "TripleDesRsa15"
    BASIC256_SHA256_RSA15 = "Basic256Sha256Rsa15"
    BASIC192_SHA256_RSA15 = "Basic192Sha256Rsa15"
    BASIC128_SHA256_RSA15 = "Basic128Sha256Rsa15"
    TRIPLE_DES_SHA256_RSA15 = "TripleDesSha256Rsa15"


class SecurityTokenInclusion(Enum):
    NEVER = "http://docs.oasis-open.org/ws-sx/ws-securitypolicy/200702/IncludeToken/Never"
    ONCE = "http://docs.oasis-open.org/ws-sx/ws-securitypolicy/200702/IncludeToken/Once"
    ALWAYS_TO_RECIPIENT = "http://docs.oasis-open.org/ws-sx/ws-securitypolicy/200702/IncludeToken/AlwaysToRecipient"
    ALWAYS_TO_INITIATOR = "http://docs.oasis-open.org/ws-sx/ws-securitypolicy/200702/IncludeToken/AlwaysToInitiator"
    ALWAYS = "http://docs.oasis-open.org/ws-sx/ws-securitypolicy/200702/IncludeToken/Always"


class SecurityLayout(Enum):
    STRICT = "Strict"
    LAX = "Lax"
    LAX_TS_FIRST = "LaxTsFirst"
    LAX_TS_LAST = "LaxTsLast"


class KeyType(Enum):
    PUBLIC_KEY = "http://docs.oasis-open.org/ws-sx/ws-trust/200512/PublicKey"
    SYMMETRIC_KEY = "http://docs.oasis-open.org/ws-sx/ws-trust/200512/SymmetricKey"
    BEARER = "http://docs.oasis-open.org/ws-sx/ws-trust/200512/Bearer"


class TokenType(Enum):
    SAML11 = "http://docs.oasis-open.org/wss/oasis-wss-saml-token-profile-1.1#SAMLV1.1"
    SAML20 = "http://docs.oasis-open.org/wss/oasis-wss-saml-token-profile-1.1#SAMLV2.0"
    JWT = "urn:ietf:params:oauth:token-type:jwt"
    KERBEROS = "http://docs.oasis-open.org/wss/oasis-wss-kerberos-token-profile-1.1#GSS_Kerberosv5_AP_REQ"
    X509 = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-x509-token-profile-1.0#X509v3"
    USERNAME = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-username-token-profile-1.0#UsernameToken"
    OPAQUE = "http://docs.oasis-open.org/wss/oasis-wss-saml-token-profile-1.1#Opaque"


class DeliveryMode(Enum):
    PUSH = "http://schemas.xmlsoap.org/ws/2004/08/eventing/DeliveryModes/Push"
    PULL = "http://schemas.xmlsoap.org/ws/2004/08/eventing/DeliveryModes/Pull"
    WRAPPED = "http://schemas.xmlsoap.org/ws/2004/08/eventing/DeliveryModes/Wrapped"


class TopicDialect(Enum):
    SIMPLE = "http://docs.oasis-open.org/wsn/t-1/TopicExpression/Simple"
    CONCRETE = "http://docs.oasis-open.org/wsn/t-1/TopicExpression/Concrete"
    FULL = "http://docs.oasis-open.org/wsn/t-1/TopicExpression/Full"
    XPATH = "http://www.w3.org/TR/1999/REC-xpath-19991116"


class TransactionFlowType(Enum):
    MANDATORY = "Mandatory"
    SUPPORTED = "Supported"
    ALLOWED = "Allowed"
    NOT_ALLOWED = "NotAllowed"


class ScopeMatchType(Enum):
    RFC3986 = "http://docs.oasis-open.org/ws-dd/ns/discovery/2009/01/rfc3986"
    UUID = "http://docs.oasis-open.org/ws-dd/ns/discovery/2009/01/uuid"
    LDAP = "http://docs.oasis-open.org/ws-dd/ns/discovery/2009/01/ldap"
    STRCMP0 = "http://docs.oasis-open.org/ws-dd/ns/discovery/2009/01/strcmp0"
    NONE = "http://docs.oasis-open.org/ws-dd/ns/discovery/2009/01/none"


class MetadataDialect(Enum):
    WSDL = "http://schemas.xmlsoap.org/wsdl/"
    XML_SCHEMA = "http://www.w3.org/2001/XMLSchema"
    POLICY = "http://schemas.xmlsoap.org/ws/2004/09/policy"
    MEX = "http://schemas.xmlsoap.org/ws/2004/09/mex"


PASSWORD_OPTIONS = ("NoPassword", "HashPassword", "WssUsernameToken10", "WssUsernameToken11")
X509_TOKEN_TYPES = (
    "WssX509V1Token11",
    "WssX509V3Token10",
    "WssX509V3Token11",
    "WssX509Pkcs7Token10",
    "WssX509Pkcs7Token11",
    "WssX509PkiPathV1Token10",
    "WssX509PkiPathV1Token11",
)
SAML_TOKEN_TYPES = ("WssSamlV11Token10", "WssSamlV11Token11", "WssSamlV20Token11")


def _sp(local: str, **kwargs) -> PolicyAssertion:
    return PolicyAssertion(SP_NS, local, **kwargs)


def _nested(*assertions: PolicyAssertion) -> Policy:
    policy = Policy()
    for assertion in assertions:
        policy.add(assertion)
    return policy


def _wsp_optional(optional: bool) -> dict:
    return {clark(str(WSP), "Optional"): "true"} if optional else {}


def _one_of(value: Optional[str], allowed: Tuple[str, ...], what: str) -> Optional[str]:
    if value is not None and value not in allowed:
        raise ConstraintViolation(f"invalid {what} {value!r}; expected one of: {', '.join(allowed)}")
    return value


def _token(local: str, inclusion=None, *nested: PolicyAssertion, children=()) -> PolicyAssertion:
    attributes = {}
    if inclusion is not None:
        mode = coerce(SecurityTokenInclusion, inclusion, "token inclusion")
        attributes[clark(SP_NS, "IncludeToken")] = mode.value
    return _sp(local, attributes=attributes, children=tuple(children), policy=_nested(*nested))


def endpoint_assertion(namespace: str, local_name: str, endpoint: EndpointReference) -> PolicyAssertion:
    """Render ``endpoint`` as the content of ``{namespace}local_name``."""
    wsa = endpoint.version.value
    children = [PolicyAssertion(wsa, "Address", text=endpoint.address)]
    if endpoint.reference_parameters:
        children.append(
            PolicyAssertion(
                wsa,
                "ReferenceParameters",
                children=tuple(PolicyAssertion(p.namespace, p.local_name, text=p.value) for p in endpoint.reference_parameters),
            )
        )
    if endpoint.metadata:
        children.append(
            PolicyAssertion(
                wsa,
                "Metadata",
                children=tuple(PolicyAssertion(m.namespace, m.local_name, text=m.value) for m in endpoint.metadata),
            )
        )
    return PolicyAssertion(namespace, local_name, children=tuple(children))


# WS-SecurityPolicy


class TransportBinding:
    """Builder for ``sp:TransportBinding``."""

    def __init__(self) -> None:
        self.https = False
        self.require_client_certificate = False
        self.algorithm_suite: Optional[AlgorithmSuite] = None
        self.layout: Optional[SecurityLayout] = None
        self.include_timestamp = False

    def https_token(self, require_client_certificate: bool = False) -> "TransportBinding":
        self.https = True
        self.require_client_certificate = require_client_certificate
        return self

    def algorithm(self, suite) -> "TransportBinding":
        self.algorithm_suite = coerce(AlgorithmSuite, suite, "algorithm suite")
        return self

    def with_layout(self, layout) -> "TransportBinding":
        self.layout = coerce(SecurityLayout, layout, "security layout")
        return self

    def timestamp(self, include: bool = True) -> "TransportBinding":
        self.include_timestamp = include
        return self

    def build(self) -> PolicyAssertion:
        nested = []
        if self.https:
            https = _sp("HttpsToken")
            if self.require_client_certificate:
                https = _sp("HttpsToken", policy=_nested(_sp("RequireClientCertificate")))
            nested.append(_sp("TransportToken", policy=_nested(https)))
        if self.algorithm_suite is not None:
            nested.append(_sp("AlgorithmSuite", policy=_nested(_sp(self.algorithm_suite.value))))
        if self.layout is not None:
            nested.append(_sp("Layout", policy=_nested(_sp(self.layout.value))))
        if self.include_timestamp:
            nested.append(_sp("IncludeTimestamp"))
        return _sp("TransportBinding", policy=_nested(*nested))


def symmetric_binding(*nested: PolicyAssertion) -> PolicyAssertion:
    return _sp("SymmetricBinding", policy=_nested(*nested))


def asymmetric_binding(*nested: PolicyAssertion) -> PolicyAssertion:
    return _sp("AsymmetricBinding", policy=_nested(*nested))


def username_token(password: Optional[str] = None, inclusion=None) -> PolicyAssertion:
    """``sp:UsernameToken``; ``password`` is one of :data:`PASSWORD_OPTIONS`."""
    _one_of(password, PASSWORD_OPTIONS, "username token option")
    nested = [_sp(password)] if password else []
    return _token("UsernameToken", inclusion, *nested)


def x509_token(token_type: Optional[str] = None, inclusion=None) -> PolicyAssertion:
    _one_of(token_type, X509_TOKEN_TYPES, "X509 token type")
    nested = [_sp(token_type)] if token_type else []
    return _token("X509Token", inclusion, *nested)


def saml_token(token_type: Optional[str] = None, inclusion=None) -> PolicyAssertion:
    _one_of(token_type, SAML_TOKEN_TYPES, "SAML token type")
    nested = [_sp(token_type)] if token_type else []
    return _token("SamlToken", inclusion, *nested)


def issued_token(
    inclusion=None,
    issuer: Optional[EndpointReference] = None,
    token_type=None,
    key_type=None,
    claims: Optional[PolicyAssertion] = None,
) -> PolicyAssertion:
    """``sp:IssuedToken`` with an optional issuer and token request template."""
    children = []
    if issuer is not None:
        children.append(endpoint_assertion(SP_NS, "Issuer", issuer))
    children.append(request_security_token_template(token_type, key_type, claims))
    return _token("IssuedToken", inclusion, children=children)


def secure_conversation_token(inclusion=None, bootstrap: Optional[Policy] = None) -> PolicyAssertion:
    nested = [_sp("BootstrapPolicy", policy=bootstrap)] if bootstrap is not None else []
    return _token("SecureConversationToken", inclusion, *nested)


def kerberos_token(inclusion=None) -> PolicyAssertion:
    return _token("KerberosToken", inclusion)


def spnego_context_token(inclusion=None) -> PolicyAssertion:
    return _token("SpnegoContextToken", inclusion)


def _parts(local: str, body: bool, headers: Iterable[Tuple[Optional[str], str]]) -> PolicyAssertion:
    children = [_sp("Body")] if body else []
    for name, namespace in headers:
        attributes = {"Namespace": namespace}
        if name:
            attributes = {"Name": name, "Namespace": namespace}
        children.append(_sp("Header", attributes=attributes))
    return _sp(local, children=tuple(children))


def signed_parts(body: bool = True, headers: Iterable[Tuple[Optional[str], str]] = ()) -> PolicyAssertion:
    """``sp:SignedParts``; ``headers`` holds ``(name, namespace)`` pairs, name may be ``None``."""
    return _parts("SignedParts", body, headers)


def encrypted_parts(body: bool = True, headers: Iterable[Tuple[Optional[str], str]] = ()) -> PolicyAssertion:
    return _parts("EncryptedParts", body, headers)


def signed_elements(*xpaths: str) -> PolicyAssertion:
    return _sp("SignedElements", children=tuple(_sp("XPath", text=x) for x in xpaths))


def encrypted_elements(*xpaths: str) -> PolicyAssertion:
    return _sp("EncryptedElements", children=tuple(_sp("XPath", text=x) for x in xpaths))


def wss10(*options: str) -> PolicyAssertion:
    return _sp("Wss10", policy=_nested(*(_sp(o) for o in options)))


def wss11(*options: str) -> PolicyAssertion:
    return _sp("Wss11", policy=_nested(*(_sp(o) for o in options)))


def trust10(*options: str) -> PolicyAssertion:
    return _sp("Trust10", policy=_nested(*(_sp(o) for o in options)))


def trust13(*options: str) -> PolicyAssertion:
    return _sp("Trust13", policy=_nested(*(_sp(o) for o in options)))


# WS-Trust


def claims(*claim_types: str, dialect: str = AUTH_CLAIMS_DIALECT, optional: bool = False) -> PolicyAssertion:
    """``wst:Claims`` listing ``auth:ClaimType`` URIs."""
    children = []
    for uri in claim_types:
        attributes = {"Uri": uri}
        if optional:
            attributes["Optional"] = "true"
        children.append(PolicyAssertion(str(AUTH), "ClaimType", attributes))
    return PolicyAssertion(str(WST), "Claims", {"Dialect": dialect}, children=tuple(children))


def request_security_token_template(token_type=None, key_type=None, claims: Optional[PolicyAssertion] = None, key_size: Optional[int] = None) -> PolicyAssertion:
    children = []
    if token_type is not None:
        children.append(PolicyAssertion(str(WST), "TokenType", text=coerce(TokenType, token_type, "token type").value))
    if key_type is not None:
        children.append(PolicyAssertion(str(WST), "KeyType", text=coerce(KeyType, key_type, "key type").value))
    if key_size is not None:
        children.append(PolicyAssertion(str(WST), "KeySize", text=str(key_size)))
    if claims is not None:
        children.append(claims)
    return _sp("RequestSecurityTokenTemplate", children=tuple(children))


# MTOM


def optimized_mime_serialization(optional: bool = False) -> PolicyAssertion:
    return PolicyAssertion(str(WSOMA), "OptimizedMimeSerialization", _wsp_optional(optional))


# WS-Eventing


def event_source() -> PolicyAssertion:
    return PolicyAssertion(str(WSE), "EventSource")


def subscription_policy(*modes) -> PolicyAssertion:
    """``wse:SubscriptionPolicy`` advertising the supported delivery modes."""
    children = tuple(
        PolicyAssertion(str(WSE), "Delivery", {"Mode": coerce(DeliveryMode, m, "delivery mode").value})
        for m in modes
    )
    return PolicyAssertion(str(WSE), "SubscriptionPolicy", children=children)


# WS-Notification


@dataclass(frozen=True)
class TopicExpression:
    expression: str
    dialect: TopicDialect = TopicDialect.SIMPLE

    def __post_init__(self) -> None:
        object.__setattr__(self, "dialect", coerce(TopicDialect, self.dialect, "topic dialect"))

    def assertion(self) -> PolicyAssertion:
        return PolicyAssertion(str(WSNT), "TopicExpression", {"Dialect": self.dialect.value}, self.expression)


def topic(name: str, *children: PolicyAssertion, message_types: Iterable[str] = ()) -> PolicyAssertion:
    """``wstop:Topic`` node of a topic tree."""
    attributes = {"name": name}
    types = " ".join(message_types)
    if types:
        attributes["messageTypes"] = types
    return PolicyAssertion(str(WSTOP), "Topic", attributes, children=tuple(children))


def notification_producer(*topics: TopicExpression, fixed_topic_set: Optional[bool] = None) -> PolicyAssertion:
    children = [t.assertion() for t in topics]
    if fixed_topic_set is not None:
        children.append(PolicyAssertion(str(WSNT), "FixedTopicSet", text="true" if fixed_topic_set else "false"))
    dialects = []
    for t in topics:
        if t.dialect not in dialects:
            dialects.append(t.dialect)
    children.extend(PolicyAssertion(str(WSNT), "TopicExpressionDialect", text=d.value) for d in dialects)
    return PolicyAssertion(str(WSNT), "NotificationProducer", children=tuple(children))


def notification_consumer(endpoint: EndpointReference) -> PolicyAssertion:
    reference = endpoint_assertion(str(WSNT), "ConsumerReference", endpoint)
    return PolicyAssertion(str(WSNT), "NotificationConsumer", children=(reference,))


# WS-AtomicTransaction, WS-BusinessActivity, WS-Coordination


def atomic_transaction(optional: bool = False) -> PolicyAssertion:
    return PolicyAssertion(str(WSAT), "ATAssertion", _wsp_optional(optional))


def at_always_capability() -> PolicyAssertion:
    return PolicyAssertion(str(WSAT), "ATAlwaysCapability")


def business_activity(optional: bool = False) -> PolicyAssertion:
    return PolicyAssertion(str(WSBA), "BAAssertion", _wsp_optional(optional))


def ba_atomic_outcome() -> PolicyAssertion:
    return PolicyAssertion(str(WSBA), "BAAtomicOutcome")


def ba_mixed_outcome() -> PolicyAssertion:
    return PolicyAssertion(str(WSBA), "BAMixedOutcome")


def coordination_context() -> PolicyAssertion:
    return PolicyAssertion(str(WSCOOR), "CoordinationContext")


class TransactionFlow:
    """Builder for ``wsat:TransactionFlow``; the flow type defaults to ``Supported``."""

    def __init__(self) -> None:
        self.flow_type = TransactionFlowType.SUPPORTED
        self.at_assertion = False
        self.at_always_capability = False

    def flow(self, flow_type) -> "TransactionFlow":
        self.flow_type = coerce(TransactionFlowType, flow_type, "transaction flow type")
        return self

    def mandatory(self) -> "TransactionFlow":
        return self.flow(TransactionFlowType.MANDATORY)

    def supported(self) -> "TransactionFlow":
        return self.flow(TransactionFlowType.SUPPORTED)

    def allowed(self) -> "TransactionFlow":
        return self.flow(TransactionFlowType.ALLOWED)

    def not_allowed(self) -> "TransactionFlow":
        return self.flow(TransactionFlowType.NOT_ALLOWED)

    def with_at_assertion(self, enabled: bool = True) -> "TransactionFlow":
        self.at_assertion = enabled
        return self

    def with_at_always_capability(self, enabled: bool = True) -> "TransactionFlow":
        self.at_always_capability = enabled
        return self

    def build(self) -> PolicyAssertion:
        children = []
        if self.at_assertion:
            children.append(atomic_transaction())
        if self.at_always_capability:
            children.append(at_always_capability())
        return PolicyAssertion(
            str(WSAT), "TransactionFlow", {"FlowType": self.flow_type.value}, children=tuple(children)
        )


# WS-Discovery


@dataclass(frozen=True)
class Scopes:
    """Scope URIs matched with one ``MatchBy`` rule."""

    values: Tuple[str, ...] = ()
    match_by: ScopeMatchType = ScopeMatchType.RFC3986

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "match_by", coerce(ScopeMatchType, self.match_by, "scope match rule"))

    def assertion(self) -> PolicyAssertion:
        return PolicyAssertion(str(WSD), "Scopes", {"MatchBy": self.match_by.value}, " ".join(self.values))


def discoverable(*scopes: Scopes) -> PolicyAssertion:
    return PolicyAssertion(str(WSD), "Discoverable", children=tuple(s.assertion() for s in scopes))


def adhoc_discovery() -> PolicyAssertion:
    return PolicyAssertion(str(WSD), "DiscoveryMode", {"Mode": "adhoc"})


def managed_discovery(proxy_address: Optional[str] = None) -> PolicyAssertion:
    children = ()
    if proxy_address is not None:
        children = (endpoint_assertion(str(WSD), "DiscoveryProxy", EndpointReference(proxy_address)),)
    return PolicyAssertion(str(WSD), "DiscoveryMode", {"Mode": "managed"}, children=children)


def discovery_endpoint(address: str) -> PolicyAssertion:
    return endpoint_assertion(str(WSD), "DiscoveryEndpoint", EndpointReference(address))


def suppression(hello: bool = False, bye: bool = False) -> PolicyAssertion:
    """``wsd:Suppression`` switching off Hello and/or Bye announcements."""
    attributes = {"SuppressHello": "true" if hello else "false", "SuppressBye": "true" if bye else "false"}
    return PolicyAssertion(str(WSD), "Suppression", attributes)


# WS-MetadataExchange


def get_metadata_supported() -> PolicyAssertion:
    return PolicyAssertion(str(MEX), "GetMetadataSupported")


def metadata_exchange() -> PolicyAssertion:
    return PolicyAssertion(str(MEX), "MetadataExchange")


def get_metadata_request(*dialects) -> PolicyAssertion:
    children = tuple(
        PolicyAssertion(str(MEX), "Dialect", text=coerce(MetadataDialect, d, "metadata dialect").value)
        for d in dialects
    )
    return PolicyAssertion(str(MEX), "GetMetadataRequest", children=children)


# WS-ResourceFramework


class ResourceProperties:
    """Builder for ``wsrf-rp:ResourceProperties``."""

    def __init__(self) -> None:
        self.properties: List[Tuple[str, str, bool, bool]] = []
        self.query_dialects: List[str] = []

    def add_property(self, name: str, type: str, modifiable: bool = False, subscribable: bool = False) -> "ResourceProperties":
        self.properties.append((name, type, modifiable, subscribable))
        return self

    def query_expression_dialect(self, dialect: str) -> "ResourceProperties":
        self.query_dialects.append(dialect)
        return self

    def build(self) -> PolicyAssertion:
        children = []
        for name, type_, modifiable, subscribable in self.properties:
            attributes = {"name": name, "type": type_}
            if modifiable:
                attributes["modifiable"] = "true"
            if subscribable:
                attributes["subscribable"] = "true"
            children.append(PolicyAssertion(str(WSRF_RP), "ResourceProperty", attributes))
        children.extend(PolicyAssertion(str(WSRF_RP), "QueryExpressionDialect", text=d) for d in self.query_dialects)
        return PolicyAssertion(str(WSRF_RP), "ResourceProperties", children=tuple(children))


class ResourceLifetime:
    """Builder for ``wsrf-rl:ResourceLifetime``."""

    def __init__(self) -> None:
        self.current_time: Optional[datetime] = None
        self.termination_time: Optional[datetime] = None
        self.scheduled = False
        self.immediate = False

    def current(self, when: datetime) -> "ResourceLifetime":
        self.current_time = when
        return self

    def terminate_at(self, when: Optional[datetime]) -> "ResourceLifetime":
        self.termination_time = when
        return self

    def scheduled_termination(self, enabled: bool = True) -> "ResourceLifetime":
        self.scheduled = enabled
        return self

    def immediate_termination(self, enabled: bool = True) -> "ResourceLifetime":
        self.immediate = enabled
        return self

    def build(self) -> PolicyAssertion:
        children = []
        if self.immediate:
            children.append(PolicyAssertion(str(WSRF_RL), "ImmediateResourceTermination"))
        if self.scheduled:
            children.append(PolicyAssertion(str(WSRF_RL), "ScheduledResourceTermination"))
        if self.current_time is not None:
            children.append(PolicyAssertion(str(WSRF_RL), "CurrentTime", text=self.current_time.isoformat()))
        if self.termination_time is not None:
            children.append(PolicyAssertion(str(WSRF_RL), "TerminationTime", text=self.termination_time.isoformat()))
        return PolicyAssertion(str(WSRF_RL), "ResourceLifetime", children=tuple(children))


class SetResourceProperties:
    """Builder for ``wsrf-rp:SetResourceProperties``; requests keep call order."""

    def __init__(self) -> None:
        self.requests: List[PolicyAssertion] = []

    def insert(self, name: str, value: object) -> "SetResourceProperties":
        self.requests.append(PolicyAssertion(str(WSRF_RP), "Insert", {"name": name}, str(value)))
        return self

    def update(self, name: str, value: object) -> "SetResourceProperties":
        self.requests.append(PolicyAssertion(str(WSRF_RP), "Update", {"name": name}, str(value)))
        return self

    def delete(self, name: str) -> "SetResourceProperties":
        self.requests.append(PolicyAssertion(str(WSRF_RP), "Delete", {"name": name}))
        return self

    def build(self) -> PolicyAssertion:
        return PolicyAssertion(str(WSRF_RP), "SetResourceProperties", children=tuple(self.requests))


def get_resource_property(qname: str) -> PolicyAssertion:
    return PolicyAssertion(str(WSRF_RP), "GetResourceProperty", text=qname)


def resource(
    address: str,
    properties: Optional[ResourceProperties] = None,
    lifetime: Optional[ResourceLifetime] = None,
) -> PolicyAssertion:
    """``wsrf-r:Resource``: the resource's endpoint followed by its properties and lifetime."""
    children = list(endpoint_assertion(str(WSRF_R), "Resource", EndpointReference(address)).children)
    if properties is not None:
        children.append(properties.build())
    if lifetime is not None:
        children.append(lifetime.build())
    return PolicyAssertion(str(WSRF_R), "Resource", children=tuple(children))


__all__ = [
    "AlgorithmSuite",
    "SecurityTokenInclusion",
    "SecurityLayout",
    "KeyType",
    "TokenType",
    "DeliveryMode",
    "TopicDialect",
    "TransactionFlowType",
    "ScopeMatchType",
    "MetadataDialect",
    "TransportBinding",
    "TopicExpression",
    "endpoint_assertion",
    "symmetric_binding",
    "asymmetric_binding",
    "username_token",
    "x509_token",
    "saml_token",
    "issued_token",
    "secure_conversation_token",
    "kerberos_token",
    "spnego_context_token",
    "signed_parts",
    "encrypted_parts",
    "signed_elements",
    "encrypted_elements",
    "wss10",
    "wss11",
    "trust10",
    "trust13",
    "claims",
    "request_security_token_template",
    "optimized_mime_serialization",
    "event_source",
    "subscription_policy",
    "topic",
    "notification_producer",
    "notification_consumer",
    "atomic_transaction",
    "at_always_capability",
    "business_activity",
    "ba_atomic_outcome",
    "ba_mixed_outcome",
    "coordination_context",
    "TransactionFlow",
    "Scopes",
    "discoverable",
    "adhoc_discovery",
    "managed_discovery",
    "discovery_endpoint",
    "suppression",
    "get_metadata_supported",
    "metadata_exchange",
    "get_metadata_request",
    "ResourceProperties",
    "ResourceLifetime",
    "SetResourceProperties",
    "get_resource_property",
    "resource",
]
