"""Core data models for hermex."""

import json
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_serializable(value: Any) -> Any:
    """Convert dataclass output into JSON-compatible data with camelCase keys.

    Keys whose value is ``None`` are dropped so optional attributes only
    appear when they carry information.
    """
    if isinstance(value, dict):
        return {
            _camel_case(str(key)): to_serializable(item)
            for key, item in value.items()
            if item is not None
        }
    if isinstance(value, (list, tuple)):
        return [to_serializable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    return value


class Record:
    """Mixin giving dataclass records a stable serialized form."""

    def to_dict(self) -> dict[str, Any]:
        return to_serializable(asdict(self))  # type: ignore[call-overload]


@dataclass
class ImportRecord(Record):
    """A default, named or namespace import binding."""

    name: str
    source: str
    line: int


@dataclass
class AliasedImport(Record):
    """A named import bound under a different local name."""

    imported: str
    local: str
    source: str
    line: int


@dataclass
class PropDetail(Record):
    """Static description of one JSX attribute."""

    name: str
    type: str
    is_event_handler: bool = False
    is_complex: bool = False
    is_spread: bool = False
    warning: str | None = None


@dataclass
class PropsAnalysis(Record):
    """Attribute summary for a JSX element."""

    named_props: list[str] = field(default_factory=list)
    has_spread: bool = False
    has_complex_props: bool = False
    has_event_handlers: bool = False
    prop_details: list[PropDetail] = field(default_factory=list)

    def merge(self, other: "PropsAnalysis") -> None:
        """Fold another occurrence's analysis into this one.

        Prop names are unioned in first-seen order and every flag is OR-ed,
        so a single spread anywhere marks the component as not fully
        analyzable.
        """
        seen = {(detail.name, detail.type) for detail in self.prop_details}
        for name in other.named_props:
            if name not in self.named_props:
                self.named_props.append(name)
        for detail in other.prop_details:
            if (detail.name, detail.type) not in seen:
                self.prop_details.append(detail)
                seen.add((detail.name, detail.type))

        self.has_spread = self.has_spread or other.has_spread
        self.has_complex_props = self.has_complex_props or other.has_complex_props
        self.has_event_handlers = self.has_event_handlers or other.has_event_handlers


@dataclass
class JSXOccurrence(Record):
    """A single place where a component is rendered."""

    line: int
    context: str


@dataclass
class JSXUsage(Record):
    """All renderings of one component name.

    ``line`` and ``context`` describe the first occurrence; ``props`` is the
    union of attribute names over every occurrence.
    """

    component: str
    line: int
    context: str
    props: list[str] = field(default_factory=list)
    props_analysis: PropsAnalysis = field(default_factory=PropsAnalysis)
    count: int = 1
    occurrences: list[JSXOccurrence] = field(default_factory=list)


@dataclass
class VariableAssignment(Record):
    """A variable bound to a component reference."""

    assignment: str
    line: int


@dataclass
class DestructuredUsage(Record):
    """A property destructured from a namespace import."""

    property: str
    source: str
    line: int
    local: str | None = None


@dataclass
class ConditionalUsage(Record):
    """A ternary choosing between component references."""

    consequent: str
    alternate: str
    line: int


@dataclass
class ArrayMapping(Record):
    """An array literal holding component references."""

    components: list[str]
    line: int


@dataclass
class MappingEntry(Record):
    key: str
    component: str


@dataclass
class ObjectMapping(Record):
    """An object literal mapping keys to component references."""

    mappings: list[MappingEntry]
    line: int
    variable: str | None = None


@dataclass
class DynamicMapping(Record):
    """A component looked up from a mapping with a runtime key."""

    mapping: str
    key: str
    line: int


@dataclass
class ContextUsage(Record):
    """Values destructured from a ``useContext`` call."""

    context: str
    properties: list[str]
    line: int


@dataclass
class SourceImport(Record):
    """A lazily or dynamically imported module."""

    source: str
    line: int


@dataclass
class HOCUsage(Record):
    """A call wrapping a known component."""

    function: str
    component: str
    line: int


@dataclass
class MemoUsage(Record):
    component: str
    line: int


@dataclass
class PositionMarker(Record):
    """Occurrence of a React API with no further payload."""

    line: int


@dataclass
class UsagePatterns:
    """Every pattern collection recorded while walking one file."""

    default_imports: list[ImportRecord] = field(default_factory=list)
    named_imports: list[ImportRecord] = field(default_factory=list)
    namespace_imports: list[ImportRecord] = field(default_factory=list)
    aliased_imports: dict[str, AliasedImport] = field(default_factory=dict)
    jsx_usage: dict[str, JSXUsage] = field(default_factory=dict)
    props_analysis: dict[str, PropsAnalysis] = field(default_factory=dict)
    variable_assignments: dict[str, VariableAssignment] = field(default_factory=dict)
    destructured_usage: list[DestructuredUsage] = field(default_factory=list)
    conditional_usage: list[ConditionalUsage] = field(default_factory=list)
    array_mappings: list[ArrayMapping] = field(default_factory=list)
    object_mappings: list[ObjectMapping] = field(default_factory=list)
    dynamic_mappings: list[DynamicMapping] = field(default_factory=list)
    context_usage: list[ContextUsage] = field(default_factory=list)
    lazy_imports: list[SourceImport] = field(default_factory=list)
    dynamic_imports: list[SourceImport] = field(default_factory=list)
    hoc_usage: list[HOCUsage] = field(default_factory=list)
    memoized_components: list[MemoUsage] = field(default_factory=list)
    forwarded_refs: list[PositionMarker] = field(default_factory=list)
    portal_usage: list[PositionMarker] = field(default_factory=list)

    def total_count(self) -> int:
        """Sum of the sizes of every collection."""
        return sum(len(getattr(self, f.name)) for f in fields(self))


@dataclass
class ParserState:
    """Mutable state threaded through a single file's walk.

    ``component_names`` only grows: once a name is treated as a component it
    stays one for the rest of the file. ``all_identifiers`` holds namespace
    bindings, which are never components themselves.
    """

    usage_patterns: UsagePatterns = field(default_factory=UsagePatterns)
    component_names: set[str] = field(default_factory=set)
    all_identifiers: set[str] = field(default_factory=set)
    mapping_variables: set[str] = field(default_factory=set)

    def is_known(self, name: str) -> bool:
        """Whether ``name`` is a component or namespace binding."""
        return name in self.component_names or name in self.all_identifiers


@dataclass(frozen=True)
class ReportSummary:
    total_imports: int
    total_components: int
    total_usage_patterns: int


@dataclass(frozen=True)
class UsageReport:
    """Serialized result of analyzing one file.

    ``patterns`` is plain JSON-compatible data laid out as
    ``imports``/``usage``/``advanced`` groups plus a ``props`` list.
    """

    summary: ReportSummary
    patterns: dict[str, Any]
    components: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": to_serializable(asdict(self.summary)),
            "patterns": self.patterns,
            "components": list(self.components),
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UsageReport":
        """Rebuild a report from its serialized form."""
        summary = data.get("summary", {})
        return cls(
            summary=ReportSummary(
                total_imports=int(summary.get("totalImports", 0)),
                total_components=int(summary.get("totalComponents", 0)),
                total_usage_patterns=int(summary.get("totalUsagePatterns", 0)),
            ),
            patterns=data.get("patterns", {}),
            components=list(data.get("components", [])),
        )


class ComplexityLevel(Enum):
    """Overall complexity of a file's usage."""

    SIMPLE = "Simple"
    MODERATE = "Moderate"
    COMPLEX = "Complex"
    VERY_COMPLEX = "Very Complex"
    EXTREMELY_COMPLEX = "Extremely Complex"

    @classmethod
    def from_score(
        cls, score: int, thresholds: dict[str, int] | None = None
    ) -> "ComplexityLevel":
        """Map a raw weighted score to a level.

        Args:
            score: Weighted pattern score
            thresholds: Optional inclusive upper bounds keyed by
                ``simple``, ``moderate``, ``complex`` and ``very_complex``

        Returns:
            Complexity level
        """
        bounds = {"simple": 10, "moderate": 30, "complex": 60, "very_complex": 100}
        if thresholds:
            bounds.update(thresholds)

        if score <= bounds["simple"]:
            return cls.SIMPLE
        if score <= bounds["moderate"]:
            return cls.MODERATE
        if score <= bounds["complex"]:
            return cls.COMPLEX
        if score <= bounds["very_complex"]:
            return cls.VERY_COMPLEX
        return cls.EXTREMELY_COMPLEX


@dataclass(frozen=True)
class PatternCategory:
    """A catalog entry describing one kind of usage pattern."""

    name: str
    weight: int
    description: str
    example: str
    group: str
    bucket: str


@dataclass
class FoundPattern(Record):
    """Occurrences of one catalog category in a report."""

    count: int
    complexity: int
    examples: list[Any] = field(default_factory=list)


@dataclass
class ComplexityScore(Record):
    score: int
    max_possible: int
    percentage: int
    level: ComplexityLevel


@dataclass
class Recommendation(Record):
    type: str
    priority: str
    message: str
    action: str


@dataclass
class UsageAnalysis:
    """Classification, complexity and advice for one report."""

    found_patterns: dict[str, FoundPattern]
    complexity: ComplexityScore
    recommendations: list[Recommendation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "foundPatterns": {
                key: found.to_dict() for key, found in self.found_patterns.items()
            },
            "complexity": self.complexity.to_dict(),
            "recommendations": [rec.to_dict() for rec in self.recommendations],
        }


@dataclass
class FileResult:
    """Outcome of analyzing one file successfully."""

    file_path: Path
    report: UsageReport
    analysis: UsageAnalysis | None = None


@dataclass
class FileError(Record):
    """A file that could not be analyzed."""

    file: str
    error: str
