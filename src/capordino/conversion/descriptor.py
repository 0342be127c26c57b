"""Framework descriptors - declarative per-framework conversion tables.

A FrameworkDescriptor names the element types, relation types and text
rewrite literals of one CPRT framework. The catalog builder is generic and
consults the descriptor by name; adding a framework means adding a
descriptor, either here or under [frameworks.<ID>] in .capordino.toml.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from capordino.conversion.text import BRACKET_PLACEHOLDER_RE

if TYPE_CHECKING:
    from capordino.cprt.models import CprtMetadataVersion


class FrameworkMismatchError(ValueError):
    """The input declares a different framework than the descriptor expects."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected framework identifier {expected}, got {actual}")


class UnknownFrameworkError(KeyError):
    """No descriptor is registered for a framework identifier."""

    def __init__(self, framework_identifier: str, known: list[str]) -> None:
        self.framework_identifier = framework_identifier
        self.known = known
        super().__init__(
            f"No descriptor for framework '{framework_identifier}' "
            f"(known: {', '.join(known) or 'none'})"
        )

    def __str__(self) -> str:
        return str(self.args[0])


_REQUIRED_KEYS = ("framework_identifier", "root_type", "requirement_type")


@dataclass(frozen=True)
class FrameworkDescriptor:
    """Conversion tables for one framework.

    Attributes:
        framework_identifier: Identity the input metadata must declare.
        root_type: Element type rendered as top-level groups.
        requirement_type: Element type rendered as controls.
        subrequirement_type: Element type rendered as sub-controls.
        item_type: Element type rendered as nested statement items.
        structural_relation: Relation type meaning "is a child of".
        discussion_type: Element type rendered as guidance parts.
        objective_type: Element type rendered as assessment objectives.
        placeholder_type: Element type of organization-defined parameters.
        method_types: Element types rendered as assessment methods.
        reference_type: Element type of supporting publications.
        withdraw_reason_type: Element type explaining a withdrawal.
        redirect_relations: Relation type -> link rel for withdrawn controls.
        external_reference_relation: Relation type to an external catalog.
        external_reference_rel: Link rel for external catalog references.
        reference_rel: Link rel for supporting publications.
        method_list_prefix: Literal opening an assessment object list.
        method_list_suffix: Literal closing an assessment object list.
        method_list_separator: Literal between assessment objects.
        bracket_pattern: Regex matching the opening of one implicit
            placeholder marker; a "[" opening runs to its balanced "]".
    """

    framework_identifier: str
    root_type: str
    requirement_type: str
    subrequirement_type: str | None = None
    item_type: str | None = None
    structural_relation: str = "projection"
    discussion_type: str | None = None
    objective_type: str | None = None
    placeholder_type: str | None = None
    method_types: tuple[str, ...] = ()
    reference_type: str | None = None
    withdraw_reason_type: str | None = None
    redirect_relations: dict[str, str] = field(default_factory=dict)
    external_reference_relation: str | None = None
    external_reference_rel: str = "related"
    reference_rel: str = "reference"
    method_list_prefix: str = "[SELECT FROM: "
    method_list_suffix: str = "]"
    method_list_separator: str = ";"
    bracket_pattern: str = BRACKET_PLACEHOLDER_RE.pattern

    def assert_framework(self, version: CprtMetadataVersion) -> None:
        """Check the declared framework identity of the input.

        Raises:
            FrameworkMismatchError: If the identities differ.
        """
        if version.framework_identifier != self.framework_identifier:
            raise FrameworkMismatchError(self.framework_identifier, version.framework_identifier)

    def compiled_bracket_pattern(self) -> re.Pattern[str]:
        return re.compile(self.bracket_pattern)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FrameworkDescriptor:
        """Create a descriptor from a configuration table.

        Args:
            data: Dict keyed by attribute name. Unknown keys are ignored.

        Returns:
            FrameworkDescriptor instance.

        Raises:
            ValueError: If a required key is missing.
        """
        missing = [k for k in _REQUIRED_KEYS if not data.get(k)]
        if missing:
            raise ValueError(f"Framework descriptor is missing: {', '.join(missing)}")

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if "method_types" in values:
            values["method_types"] = tuple(values["method_types"])
        if "redirect_relations" in values:
            values["redirect_relations"] = dict(values["redirect_relations"])
        return cls(**values)


SP_800_171_R3 = FrameworkDescriptor(
    framework_identifier="SP_800_171_3_0_0",
    root_type="family",
    requirement_type="requirement",
    subrequirement_type="security_requirement",
    item_type="security_requirement",
    discussion_type="discussion",
    objective_type="determination",
    placeholder_type="odp",
    method_types=("examine", "interview", "test"),
    reference_type="reference",
    withdraw_reason_type="withdraw_reason",
    redirect_relations={
        "incorporated_into": "incorporated-into",
        "addressed_by": "addressed-by",
    },
    external_reference_relation="external_reference",
)

CSF_2_0 = FrameworkDescriptor(
    framework_identifier="CSF_2_0_0",
    root_type="function",
    requirement_type="category",
    subrequirement_type="subcategory",
    item_type="implementation_example",
    withdraw_reason_type="withdraw_reason",
    redirect_relations={"incorporated_into": "incorporated-into"},
)

BUILTIN_DESCRIPTORS: dict[str, FrameworkDescriptor] = {
    d.framework_identifier: d for d in (SP_800_171_R3, CSF_2_0)
}


def available_descriptors(config: dict[str, Any] | None = None) -> dict[str, FrameworkDescriptor]:
    """Return built-in descriptors, extended or overridden by configuration.

    Args:
        config: Configuration dict; its "frameworks" table maps framework
                identifiers to descriptor tables.
    """
    descriptors = dict(BUILTIN_DESCRIPTORS)
    for identifier, table in (config or {}).get("frameworks", {}).items():
        data = dict(table)
        data.setdefault("framework_identifier", identifier)
        descriptors[identifier] = FrameworkDescriptor.from_dict(data)
    return descriptors


def get_descriptor(
    framework_identifier: str, config: dict[str, Any] | None = None
) -> FrameworkDescriptor:
    """Look up the descriptor for a framework.

    Raises:
        UnknownFrameworkError: If no descriptor is registered.
    """
    descriptors = available_descriptors(config)
    try:
        return descriptors[framework_identifier]
    except KeyError:
        raise UnknownFrameworkError(framework_identifier, sorted(descriptors)) from None
