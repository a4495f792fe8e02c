"""Domain: XML Schema type registry embedded in the ``types`` section.

Type references are symbolic QName strings (``tns:Order``, ``xsd:string``).
Nothing here checks that a reference points at something: definitions may
appear after their first use and the resolver validates the whole registry
once the document is serialized. Only rules that can be checked on the spot
(``all`` occurrence bounds, closed value sets) are enforced while building.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from .enums import DerivationControl, ProcessContents, TypeRef, coerce, type_ref
from .errors import ConstraintViolation
from .model import AppInfo, Documentation

UNBOUNDED = -1

ATTRIBUTE_USES = ("required", "optional", "prohibited")
FORMS = ("qualified", "unqualified")
FACET_ORDER = (
    "minLength",
    "maxLength",
    "pattern",
    "enumeration",
    "minInclusive",
    "maxInclusive",
    "minExclusive",
    "maxExclusive",
)


def _occurs(value: Union[int, str, None], what: str) -> Optional[int]:
    if value is None:
        return None
    if value == "unbounded":
        return UNBOUNDED
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstraintViolation(f"{what} must be an integer or 'unbounded', got {value!r}")
    if value < UNBOUNDED:
        raise ConstraintViolation(f"{what} must not be negative, got {value}")
    return value


def _bounds(min_occurs, max_occurs) -> tuple:
    low = _occurs(min_occurs, "minOccurs")
    high = _occurs(max_occurs, "maxOccurs")
    if low == UNBOUNDED:
        raise ConstraintViolation("minOccurs cannot be unbounded")
    if low is not None and high is not None and high != UNBOUNDED and low > high:
        raise ConstraintViolation(f"minOccurs {low} exceeds maxOccurs {high}")
    return low, high


def _choice_of(value: Optional[str], allowed: tuple, what: str) -> Optional[str]:
    if value is not None and value not in allowed:
        raise ConstraintViolation(f"invalid {what} {value!r}; expected one of: {', '.join(allowed)}")
    return value


def _derivation(value) -> Optional[str]:
    if value is None:
        return None
    return coerce(DerivationControl, value, "derivation control").value


@dataclass
class Element:
    name: str
    type: str
    nullable: bool = False
    min_occurs: Optional[int] = None
    max_occurs: Optional[int] = None
    substitution_group: Optional[str] = None
    block: Optional[str] = None


def make_element(
    name: str,
    type: TypeRef,
    nullable: bool = False,
    min_occurs: Union[int, str, None] = None,
    max_occurs: Union[int, str, None] = None,
    substitution_group: Optional[str] = None,
    block=None,
) -> Element:
    """Validate the arguments and return a new :class:`Element`."""
    low, high = _bounds(min_occurs, max_occurs)
    return Element(
        name=name,
        type=type_ref(type),
        nullable=nullable,
        min_occurs=low,
        max_occurs=high,
        substitution_group=substitution_group,
        block=_derivation(block),
    )


@dataclass
class Attribute:
    name: str
    type: str
    use: Optional[str] = None
    default: Optional[str] = None
    fixed: Optional[str] = None
    form: Optional[str] = None


def make_attribute(
    name: str,
    type: TypeRef,
    use: Optional[str] = None,
    default: Optional[str] = None,
    fixed: Optional[str] = None,
    form: Optional[str] = None,
) -> Attribute:
    if default is not None and fixed is not None:
        raise ConstraintViolation(f"attribute '{name}' cannot have both default and fixed")
    return Attribute(
        name=name,
        type=type_ref(type),
        use=_choice_of(use, ATTRIBUTE_USES, "attribute use"),
        default=default,
        fixed=fixed,
        form=_choice_of(form, FORMS, "attribute form"),
    )


@dataclass(frozen=True)
class AnyAttribute:
    namespace: str = "##any"
    process_contents: ProcessContents = ProcessContents.STRICT


class Annotation:
    """``xsd:annotation`` holding documentation and appinfo entries."""

    def __init__(self, parent=None) -> None:
        self._parent = parent
        self.documentation_entries: List[Documentation] = []
        self.appinfo_entries: List[AppInfo] = []

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "Annotation":
        self.documentation_entries.append(Documentation(content, lang, source))
        return self

    def appinfo(self, content: str, source: Optional[str] = None) -> "Annotation":
        self.appinfo_entries.append(AppInfo(content, source))
        return self

    def end(self):
        return self._parent


class Choice:
    """``xsd:choice`` compositor."""

    kind = "choice"

    def __init__(self, parent=None, min_occurs=None, max_occurs=None) -> None:
        self._parent = parent
        self.min_occurs, self.max_occurs = _bounds(min_occurs, max_occurs)
        self.elements: List[Element] = []

    def element(self, name: str, type: TypeRef, nullable: bool = False, min_occurs=None, max_occurs=None) -> "Choice":
        self.elements.append(make_element(name, type, nullable, min_occurs, max_occurs))
        return self

    def end(self):
        return self._parent


class All:
    """``xsd:all`` compositor; children may occur at most once."""

    kind = "all"

    def __init__(self, parent=None) -> None:
        self._parent = parent
        self.elements: List[Element] = []

    def element(self, name: str, type: TypeRef, nullable: bool = False, min_occurs=None, max_occurs=None) -> "All":
        """Add a child element.

        Raises :class:`ConstraintViolation` unless ``min_occurs`` is 0 or 1 and
        ``max_occurs`` is 1; the element list is left untouched in that case.
        """
        if min_occurs is not None and min_occurs not in (0, 1):
            raise ConstraintViolation(
                f"element '{name}' in xsd:all must have minOccurs 0 or 1, got {min_occurs!r}"
            )
        if max_occurs is not None and max_occurs != 1:
            raise ConstraintViolation(
                f"element '{name}' in xsd:all must have maxOccurs 1, got {max_occurs!r}"
            )
        self.elements.append(make_element(name, type, nullable, min_occurs, max_occurs))
        return self

    def end(self):
        return self._parent


class Any:
    """``xsd:any`` wildcard."""

    kind = "any"

    def __init__(self, namespace: str = "##any", process_contents="strict", min_occurs=None, max_occurs=None) -> None:
        self.namespace = namespace
        self.process_contents = coerce(ProcessContents, process_contents, "processContents")
        self.min_occurs, self.max_occurs = _bounds(min_occurs, max_occurs)


Compositor = Union[Choice, All, Any]


class IdentityConstraint:
    """``xsd:key``, ``xsd:keyref`` or ``xsd:unique`` with selector and fields."""

    KINDS = ("key", "keyref", "unique")

    def __init__(self, kind: str, name: str, parent=None, refer: Optional[str] = None) -> None:
        if kind not in self.KINDS:
            raise ConstraintViolation(f"unknown identity constraint kind {kind!r}")
        if kind == "keyref" and not refer:
            raise ConstraintViolation(f"keyref '{name}' needs a 'refer' key name")
        self.kind = kind
        self.name = name
        self.refer = refer
        self._parent = parent
        self.selector_xpath: Optional[str] = None
        self.field_xpaths: List[str] = []

    def selector(self, xpath: str) -> "IdentityConstraint":
        self.selector_xpath = xpath
        return self

    def field(self, xpath: str) -> "IdentityConstraint":
        self.field_xpaths.append(xpath)
        return self

    def end(self):
        return self._parent


class SimpleContent:
    """``xsd:simpleContent``: a simple base type decorated with attributes."""

    def __init__(self, base: TypeRef, derivation: str = "extension", parent=None) -> None:
        self.base = type_ref(base)
        self.derivation = _choice_of(derivation, ("extension", "restriction"), "simpleContent derivation")
        self._parent = parent
        self.attributes: List[Attribute] = []

    def attribute(self, name: str, type: TypeRef, use=None, default=None, fixed=None, form=None) -> "SimpleContent":
        self.attributes.append(make_attribute(name, type, use, default, fixed, form))
        return self

    def end(self):
        return self._parent


class SimpleType:
    """Named simple type restricting a base type with facets."""

    def __init__(self, name: str, parent=None, base: TypeRef = "xsd:string", final=None) -> None:
        self.name = name
        self._parent = parent
        self.base = type_ref(base)
        self.final = _derivation(final)
        self.facets: Dict[str, str] = {}
        self.enumerations: List[str] = []
        self.docs: List[Documentation] = []

    def restriction(self, base: TypeRef) -> "SimpleType":
        self.base = type_ref(base)
        return self

    def _length(self, facet: str, value: int) -> "SimpleType":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConstraintViolation(f"{facet} must be a non-negative integer, got {value!r}")
        self.facets[facet] = str(value)
        return self

    def min_length(self, value: int) -> "SimpleType":
        return self._length("minLength", value)

    def max_length(self, value: int) -> "SimpleType":
        return self._length("maxLength", value)

    def pattern(self, regex: str) -> "SimpleType":
        self.facets["pattern"] = regex
        return self

    def enumeration(self, *values: object) -> "SimpleType":
        self.enumerations.extend(str(v) for v in values)
        return self

    def min_inclusive(self, value: object) -> "SimpleType":
        self.facets["minInclusive"] = str(value)
        return self

    def max_inclusive(self, value: object) -> "SimpleType":
        self.facets["maxInclusive"] = str(value)
        return self

    def min_exclusive(self, value: object) -> "SimpleType":
        self.facets["minExclusive"] = str(value)
        return self

    def max_exclusive(self, value: object) -> "SimpleType":
        self.facets["maxExclusive"] = str(value)
        return self

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "SimpleType":
        self.docs.append(Documentation(content, lang, source))
        return self

    def ordered_facets(self) -> List[tuple]:
        """Return ``(facet, value)`` pairs in schema order."""
        pairs = []
        for facet in FACET_ORDER:
            if facet == "enumeration":
                pairs.extend(("enumeration", v) for v in self.enumerations)
            elif facet in self.facets:
                pairs.append((facet, self.facets[facet]))
        return pairs

    def end(self):
        return self._parent


class ListType(SimpleType):
    """Simple type whose values are whitespace separated lists of ``item_type``."""

    def __init__(self, name: str, item_type: TypeRef, parent=None) -> None:
        super().__init__(name, parent)
        self.item_type = type_ref(item_type)

    def restriction(self, base: TypeRef) -> "ListType":
        raise ConstraintViolation(f"list type '{self.name}' derives from its item type only")

    def _range(self, facet: str):
        raise ConstraintViolation(f"{facet} does not apply to list type '{self.name}'")

    def min_inclusive(self, value: object) -> "ListType":
        return self._range("minInclusive")

    def max_inclusive(self, value: object) -> "ListType":
        return self._range("maxInclusive")

    def min_exclusive(self, value: object) -> "ListType":
        return self._range("minExclusive")

    def max_exclusive(self, value: object) -> "ListType":
        return self._range("maxExclusive")


class UnionType:
    def __init__(self, name: str, parent=None, member_types=()) -> None:
        self.name = name
        self._parent = parent
        self.member_types: List[str] = [type_ref(t) for t in member_types]
        self.docs: List[Documentation] = []

    def member_type(self, ref: TypeRef) -> "UnionType":
        self.member_types.append(type_ref(ref))
        return self

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "UnionType":
        self.docs.append(Documentation(content, lang, source))
        return self

    def end(self):
        return self._parent


class ComplexType:
    """Named complex type.

    Plain elements render inside one ``xsd:sequence`` followed by element
    group references; compositors created through :meth:`choice`, :meth:`all`
    and :meth:`any` follow in creation order.
    """

    def __init__(self, name: str, parent=None, *, abstract: bool = False, mixed: bool = False, block=None, final=None) -> None:
        self.name = name
        self._parent = parent
        self.abstract = abstract
        self.mixed = mixed
        self.block = _derivation(block)
        self.final = _derivation(final)
        self.base: Optional[str] = None
        self.elements: List[Element] = []
        self.group_refs: List[str] = []
        self.compositors: List[Compositor] = []
        self.attributes: List[Attribute] = []
        self.attribute_group_refs: List[str] = []
        self.wildcard_attribute: Optional[AnyAttribute] = None
        self.constraints: List[IdentityConstraint] = []
        self.content: Optional[SimpleContent] = None
        self.annotations: Optional[Annotation] = None
        self.docs: List[Documentation] = []

    def element(
        self,
        name: str,
        type: TypeRef,
        nullable: bool = False,
        min_occurs=None,
        max_occurs=None,
        substitution_group: Optional[str] = None,
        block=None,
    ) -> "ComplexType":
        self.elements.append(
            make_element(name, type, nullable, min_occurs, max_occurs, substitution_group, block)
        )
        return self

    def extends(self, base: TypeRef) -> "ComplexType":
        """Derive by ``complexContent`` extension of ``base``."""
        self.base = type_ref(base)
        return self

    def group_ref(self, ref: str) -> "ComplexType":
        self.group_refs.append(ref)
        return self

    def attribute(self, name: str, type: TypeRef, use=None, default=None, fixed=None, form=None) -> "ComplexType":
        self.attributes.append(make_attribute(name, type, use, default, fixed, form))
        return self

    def attribute_group_ref(self, ref: str) -> "ComplexType":
        self.attribute_group_refs.append(ref)
        return self

    def any_attribute(self, namespace: str = "##any", process_contents="strict") -> "ComplexType":
        self.wildcard_attribute = AnyAttribute(
            namespace, coerce(ProcessContents, process_contents, "processContents")
        )
        return self

    def choice(self, min_occurs=None, max_occurs=None) -> Choice:
        compositor = Choice(self, min_occurs, max_occurs)
        self.compositors.append(compositor)
        return compositor

    def all(self) -> All:
        compositor = All(self)
        self.compositors.append(compositor)
        return compositor

    def any(self, namespace: str = "##any", process_contents="strict", min_occurs=None, max_occurs=None) -> "ComplexType":
        self.compositors.append(Any(namespace, process_contents, min_occurs, max_occurs))
        return self

    def simple_content(self, base: TypeRef, derivation: str = "extension") -> SimpleContent:
        self.content = SimpleContent(base, derivation, self)
        return self.content

    def key(self, name: str) -> IdentityConstraint:
        return self._constraint("key", name)

    def keyref(self, name: str, refer: str) -> IdentityConstraint:
        return self._constraint("keyref", name, refer)

    def unique(self, name: str) -> IdentityConstraint:
        return self._constraint("unique", name)

    def _constraint(self, kind: str, name: str, refer: Optional[str] = None) -> IdentityConstraint:
        constraint = IdentityConstraint(kind, name, self, refer)
        self.constraints.append(constraint)
        return constraint

    def annotation(self) -> Annotation:
        if self.annotations is None:
            self.annotations = Annotation(self)
        return self.annotations

    def documentation(self, content: str, lang: Optional[str] = None, source: Optional[str] = None) -> "ComplexType":
        self.docs.append(Documentation(content, lang, source))
        return self

    def end(self):
        return self._parent


class ElementGroup:
    """Named model group (``xsd:group``)."""

    def __init__(self, name: str, parent=None) -> None:
        self.name = name
        self._parent = parent
        self.elements: List[Element] = []
        self.compositor: Optional[Union[Choice, All]] = None

    def element(self, name: str, type: TypeRef, nullable: bool = False, min_occurs=None, max_occurs=None) -> "ElementGroup":
        if self.compositor is not None:
            raise ConstraintViolation(f"group '{self.name}' already holds an xsd:{self.compositor.kind}")
        self.elements.append(make_element(name, type, nullable, min_occurs, max_occurs))
        return self

    def choice(self, min_occurs=None, max_occurs=None) -> Choice:
        return self._set_compositor(Choice(self, min_occurs, max_occurs))

    def all(self) -> All:
        return self._set_compositor(All(self))

    def _set_compositor(self, compositor):
        if self.elements or self.compositor is not None:
            raise ConstraintViolation(f"group '{self.name}' can hold a single model group")
        self.compositor = compositor
        return compositor

    def end(self):
        return self._parent


class AttributeGroup:
    def __init__(self, name: str, parent=None) -> None:
        self.name = name
        self._parent = parent
        self.attributes: List[Attribute] = []
        self.wildcard_attribute: Optional[AnyAttribute] = None

    def attribute(self, name: str, type: TypeRef, use=None, default=None, fixed=None, form=None) -> "AttributeGroup":
        self.attributes.append(make_attribute(name, type, use, default, fixed, form))
        return self

    def any_attribute(self, namespace: str = "##any", process_contents="strict") -> "AttributeGroup":
        self.wildcard_attribute = AnyAttribute(
            namespace, coerce(ProcessContents, process_contents, "processContents")
        )
        return self

    def end(self):
        return self._parent


class TypeRegistry:
    """Keyed tables of schema components owned by a document or a redefine.

    Defining a name twice in the same table replaces the earlier entry at its
    original position.
    """

    def __init__(self, owner=None) -> None:
        self.owner = owner
        self.simple_types: Dict[str, SimpleType] = {}
        self.list_types: Dict[str, ListType] = {}
        self.union_types: Dict[str, UnionType] = {}
        self.complex_types: Dict[str, ComplexType] = {}
        self.element_groups: Dict[str, ElementGroup] = {}
        self.attribute_groups: Dict[str, AttributeGroup] = {}

    def simple_type(self, name: str, base: TypeRef = "xsd:string", final=None) -> SimpleType:
        self.simple_types[name] = SimpleType(name, self.owner, base, final)
        return self.simple_types[name]

    def list_type(self, name: str, item_type: TypeRef) -> ListType:
        self.list_types[name] = ListType(name, item_type, self.owner)
        return self.list_types[name]

    def union_type(self, name: str, *member_types: TypeRef) -> UnionType:
        self.union_types[name] = UnionType(name, self.owner, member_types)
        return self.union_types[name]

    def complex_type(self, name: str, **options) -> ComplexType:
        self.complex_types[name] = ComplexType(name, self.owner, **options)
        return self.complex_types[name]

    def element_group(self, name: str) -> ElementGroup:
        self.element_groups[name] = ElementGroup(name, self.owner)
        return self.element_groups[name]

    def attribute_group(self, name: str) -> AttributeGroup:
        self.attribute_groups[name] = AttributeGroup(name, self.owner)
        return self.attribute_groups[name]

    def _tables(self):
        return (self.simple_types, self.list_types, self.union_types, self.complex_types)

    def lookup(self, name: str):
        """Return the type registered as ``name`` or ``None``."""
        for table in self._tables():
            if name in table:
                return table[name]
        return None

    def lookup_group(self, name: str) -> Optional[ElementGroup]:
        return self.element_groups.get(name)

    def lookup_attribute_group(self, name: str) -> Optional[AttributeGroup]:
        return self.attribute_groups.get(name)

    def duplicate_type_names(self) -> List[str]:
        """Names defined in more than one of the type tables."""
        seen: set[str] = set()
        duplicates: List[str] = []
        for table in self._tables():
            for name in table:
                if name in seen and name not in duplicates:
                    duplicates.append(name)
                seen.add(name)
        return duplicates

    def is_empty(self) -> bool:
        return not any(self._tables()) and not self.element_groups and not self.attribute_groups


__all__ = [
    "UNBOUNDED",
    "Element",
    "Attribute",
    "AnyAttribute",
    "Annotation",
    "Choice",
    "All",
    "Any",
    "IdentityConstraint",
    "SimpleContent",
    "SimpleType",
    "ListType",
    "UnionType",
    "ComplexType",
    "ElementGroup",
    "AttributeGroup",
    "TypeRegistry",
    "make_element",
    "make_attribute",
]
