"""Domain: WS-Policy expression trees and the capability to carry them.

Every container keeps one ordered list of children so the serializer can
reproduce exactly the sequence in which operators, assertions, nested
policies and references were added.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Protocol, Tuple, Union, runtime_checkable

from .errors import ConstraintViolation
from .model import PolicyReference


@dataclass(frozen=True)
class PolicyAssertion:
    """Leaf assertion ``{namespace}local_name``.

    ``attributes`` keys are plain names or ``{uri}local`` for qualified
    attributes. ``children`` render as direct child elements, ``policy`` as a
    nested ``wsp:Policy`` holding the assertion's own alternatives.
    """

    namespace: str
    local_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    children: Tuple["PolicyAssertion", ...] = ()
    policy: Optional["Policy"] = None

    def __post_init__(self) -> None:
        if not self.namespace or not self.local_name:
            raise ConstraintViolation("policy assertions need a namespace and a local name")


PolicyChild = Union["PolicyOperator", PolicyAssertion, "Policy", PolicyReference]


class _PolicyContainer:
    """Shared child handling for ``wsp:Policy``, ``wsp:All`` and ``wsp:ExactlyOne``."""

    def __init__(self, parent=None) -> None:
        self._parent = parent
        self.children: List[PolicyChild] = []

    def all(self) -> "PolicyOperator":
        return self._operator(PolicyOperator.ALL)

    def exactly_one(self) -> "PolicyOperator":
        return self._operator(PolicyOperator.EXACTLY_ONE)

    def _operator(self, kind: str) -> "PolicyOperator":
        operator = PolicyOperator(kind, self)
        self.children.append(operator)
        return operator

    def assertion(self, namespace: str, local_name: str, attributes: Optional[Dict[str, str]] = None, text: Optional[str] = None):
        self.children.append(PolicyAssertion(namespace, local_name, dict(attributes or {}), text))
        return self

    def add(self, assertion: PolicyAssertion):
        """Append a prebuilt assertion, e.g. one returned by :mod:`servicedesc.extensions`."""
        if not isinstance(assertion, PolicyAssertion):
            raise ConstraintViolation(f"expected a PolicyAssertion, got {type(assertion).__name__}")
        self.children.append(assertion)
        return self

    def nested_assertion(self, namespace: str, local_name: str, attributes: Optional[Dict[str, str]] = None) -> "Policy":
        """Append an assertion wrapping a nested policy and return that policy."""
        inner = Policy(parent=self)
        self.children.append(PolicyAssertion(namespace, local_name, dict(attributes or {}), policy=inner))
        return inner

    def policy(self, id: Optional[str] = None, name: Optional[str] = None) -> "Policy":
        nested = Policy(parent=self, id=id, name=name)
        self.children.append(nested)
        return nested

    def policy_reference(self, uri: str, digest: Optional[str] = None, digest_algorithm: Optional[str] = None):
        self.children.append(PolicyReference(uri, digest, digest_algorithm))
        return self

    def end(self):
        return self._parent


class PolicyOperator(_PolicyContainer):
    """``wsp:All`` (conjunction) or ``wsp:ExactlyOne`` (disjunction)."""

    ALL = "All"
    EXACTLY_ONE = "ExactlyOne"

    def __init__(self, kind: str, parent=None) -> None:
        if kind not in (self.ALL, self.EXACTLY_ONE):
            raise ConstraintViolation(f"unknown policy operator {kind!r}")
        super().__init__(parent)
        self.kind = kind


class Policy(_PolicyContainer):
    def __init__(self, parent=None, id: Optional[str] = None, name: Optional[str] = None) -> None:
        super().__init__(parent)
        self.id = id
        self.name = name

    def walk(self) -> Iterator["Policy"]:
        """Yield this policy and every policy nested below it, depth first."""
        yield self
        yield from _nested_policies(self.children)


def _nested_policies(children) -> Iterator[Policy]:
    for child in children:
        if isinstance(child, Policy):
            yield from child.walk()
        elif isinstance(child, PolicyOperator):
            yield from _nested_policies(child.children)
        elif isinstance(child, PolicyAssertion):
            if child.policy is not None:
                yield from child.policy.walk()
            yield from _nested_policies(child.children)


@runtime_checkable
class PolicyCarrier(Protocol):
    """Graph nodes that accept attached policies."""

    policies: "PolicyAttachments"

    def policy(self, id: Optional[str] = None, name: Optional[str] = None) -> Policy:
        ...

    def policy_reference(self, uri: str, digest: Optional[str] = None, digest_algorithm: Optional[str] = None):
        ...


class PolicyAttachments:
    """Ordered policies and policy references held by one carrier."""

    def __init__(self, owner) -> None:
        self.owner = owner
        self.items: List[Union[Policy, PolicyReference]] = []

    def policy(self, id: Optional[str] = None, name: Optional[str] = None) -> Policy:
        attached = Policy(parent=self.owner, id=id, name=name)
        self.items.append(attached)
        return attached

    def reference(self, uri: str, digest: Optional[str] = None, digest_algorithm: Optional[str] = None) -> None:
        self.items.append(PolicyReference(uri, digest, digest_algorithm))

    def walk(self) -> Iterator[Policy]:
        for item in self.items:
            if isinstance(item, Policy):
                yield from item.walk()

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


__all__ = [
    "PolicyAssertion",
    "PolicyOperator",
    "Policy",
    "PolicyCarrier",
    "PolicyAttachments",
]
