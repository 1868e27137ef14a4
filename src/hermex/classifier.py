"""Usage pattern classification and complexity scoring."""

import logging
import math
from typing import Any

from hermex.config import get_config
from hermex.models import (
    ComplexityLevel,
    ComplexityScore,
    FoundPattern,
    PatternCategory,
    Recommendation,
    UsageAnalysis,
    UsageReport,
)

logger = logging.getLogger(__name__)


def _category(name: str, weight: int, description: str, example: str, path: str) -> PatternCategory:
    group, bucket = path.split(".")
    return PatternCategory(name, weight, description, example, group, bucket)


# Categories in display order; weights are ordinal complexity, 1 = simplest
PATTERN_CATALOG: dict[str, PatternCategory] = {
    category.name: category
    for category in (
        _category("Direct Import & Usage", 1,
                  "Simple import and direct JSX usage",
                  'import Button from "lib"; <Button />', "imports.default"),
        _category("Named Import with Alias", 2,
                  "Named import with renaming",
                  'import { Button as MyButton } from "lib"; <MyButton />', "imports.aliased"),
        _category("Namespace Import", 2,
                  "Import entire namespace",
                  'import * as Lib from "lib"; <Lib.Button />', "imports.namespace"),
        _category("Variable Assignment", 3,
                  "Assigning components to variables",
                  "const MyButton = Button; <MyButton />", "usage.variables"),
        _category("Conditional Assignment", 4,
                  "Conditional component selection",
                  "const Comp = condition ? Button : Input; <Comp />", "usage.conditional"),
        _category("Object Mapping", 5,
                  "Components stored in objects",
                  "const map = { btn: Button }; <map.btn />", "usage.objects"),
        _category("Array Mapping", 5,
                  "Components in arrays",
                  "[Button, Input].map(Comp => <Comp />)", "usage.arrays"),
        _category("Dynamic Mapping", 6,
                  "Runtime component selection",
                  "components[type]", "usage.dynamicMappings"),
        _category("HOC Wrapping", 7,
                  "Higher-order component patterns",
                  "withProps(Button)", "advanced.hoc"),
        _category("Lazy Loading", 6,
                  "Lazy-loaded components",
                  'lazy(() => import("lib/Button"))', "advanced.lazy"),
        _category("Dynamic Import", 7,
                  "Runtime dynamic imports",
                  'await import("lib/Button")', "advanced.dynamic"),
        _category("Destructuring Usage", 4,
                  "Destructured from objects",
                  "const { Button } = Foundation; <Button />", "usage.destructuring"),
        _category("Memoized Components", 5,
                  "React.memo wrapped components",
                  "memo(Button)", "advanced.memo"),
        _category("Forward Ref", 6,
                  "forwardRef wrapped components",
                  "forwardRef((props, ref) => <Button ref={ref} />)", "advanced.forwardRef"),
        _category("Portal Usage", 8,
                  "Components rendered in portals",
                  "createPortal(<Button />, document.body)", "advanced.portal"),
        _category("Context Integration", 7,
                  "Components from React context",
                  "const { Button } = useContext(ThemeContext)", "usage.context"),
    )
}

# (categories that trigger it, type, priority, message, action)
RECOMMENDATION_RULES: list[tuple[frozenset[str], str, str, str, str]] = [
    (
        frozenset({"Dynamic Import", "Portal Usage"}),
        "Performance",
        "High",
        "Consider code splitting strategies for dynamic imports",
        "Implement lazy loading boundaries",
    ),
    (
        frozenset({"Object Mapping", "Array Mapping"}),
        "Maintainability",
        "Medium",
        "Component mappings can be hard to track",
        "Consider using TypeScript for better type safety",
    ),
]

CONSISTENCY_CATEGORY_LIMIT = 8

LEVEL_ICONS = {
    ComplexityLevel.SIMPLE: "🟢",
    ComplexityLevel.MODERATE: "🟡",
    ComplexityLevel.COMPLEX: "🟠",
    ComplexityLevel.VERY_COMPLEX: "🔴",
    ComplexityLevel.EXTREMELY_COMPLEX: "🚨",
}


def weight_icon(weight: int) -> str:
    """Traffic-light marker for a category weight."""
    if weight <= 2:
        return "🟢"
    if weight <= 4:
        return "🟡"
    if weight <= 6:
        return "🟠"
    return "🔴"


def usage_intensity(count: int) -> str:
    """Label for how often a component is rendered."""
    if count <= 10:
        return "Light"
    if count <= 30:
        return "Moderate"
    if count <= 60:
        return "Heavy"
    return "Intensive"


class UsageClassifier:
    """Classifies a usage report against the pattern catalog."""

    def __init__(self) -> None:
        """Initialize classifier from configuration."""
        config = get_config()
        self.thresholds = config.complexity_thresholds
        self.max_instances = config.max_instances_per_pattern
        self.examples_per_pattern = config.examples_per_pattern

    def classify_usage(self, report: UsageReport) -> dict[str, FoundPattern]:
        """Find which catalog categories occur in a report.

        Args:
            report: Usage report for one file or a filtered subset

        Returns:
            Found patterns keyed by category name, in catalog order
        """
        found: dict[str, FoundPattern] = {}

        for name, category in PATTERN_CATALOG.items():
            bucket: list[Any] = report.patterns.get(category.group, {}).get(category.bucket, [])
            if not bucket:
                continue
            found[name] = FoundPattern(
                count=len(bucket),
                complexity=category.weight,
                examples=list(bucket[: self.examples_per_pattern]),
            )

        logger.debug(f"Classified {len(found)} pattern categories")
        return found

    def generate_complexity_score(self, found: dict[str, FoundPattern]) -> ComplexityScore:
        """Fold found patterns into a weighted score.

        Each category contributes ``weight * count``; the maximum assumes
        every found category saturates at the configured instance count.

        Args:
            found: Found patterns

        Returns:
            Complexity score
        """
        score = sum(pattern.complexity * pattern.count for pattern in found.values())
        max_possible = sum(pattern.complexity * self.max_instances for pattern in found.values())
        # Half-up rounding
        percentage = math.floor(score / max(max_possible, 1) * 100 + 0.5)

        return ComplexityScore(
            score=score,
            max_possible=max_possible,
            percentage=percentage,
            level=ComplexityLevel.from_score(score, self.thresholds),
        )

    def generate_recommendations(
        self, found: dict[str, FoundPattern], complexity: ComplexityScore
    ) -> list[Recommendation]:
        """Apply the recommendation rules.

        Args:
            found: Found patterns
            complexity: Complexity score for the same patterns

        Returns:
            Recommendations in rule order
        """
        recommendations = [
            Recommendation(type=rec_type, priority=priority, message=message, action=action)
            for triggers, rec_type, priority, message, action in RECOMMENDATION_RULES
            if triggers & found.keys()
        ]

        if complexity.level is ComplexityLevel.EXTREMELY_COMPLEX:
            recommendations.append(
                Recommendation(
                    type="Architecture",
                    priority="High",
                    message="High complexity detected in component usage",
                    action="Consider refactoring to simpler patterns",
                )
            )

        if len(found) > CONSISTENCY_CATEGORY_LIMIT:
            recommendations.append(
                Recommendation(
                    type="Consistency",
                    priority="Medium",
                    message="Many different usage patterns found",
                    action="Standardize on 2-3 primary patterns",
                )
            )

        return recommendations

    def analyze(self, report: UsageReport) -> UsageAnalysis:
        """Classify, score and advise on one report."""
        found = self.classify_usage(report)
        complexity = self.generate_complexity_score(found)
        return UsageAnalysis(
            found_patterns=found,
            complexity=complexity,
            recommendations=self.generate_recommendations(found, complexity),
        )

    @staticmethod
    def pattern_coverage(found: dict[str, FoundPattern]) -> int:
        """Percentage of catalog categories present."""
        return math.floor(len(found) / len(PATTERN_CATALOG) * 100 + 0.5)
