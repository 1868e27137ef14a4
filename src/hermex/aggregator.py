"""Cross-file aggregation of usage reports."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from hermex.lockfiles import LockfileVersions
from hermex.models import FileResult

logger = logging.getLogger(__name__)

LOCAL = "local"
UNKNOWN = "unknown"

PATTERN_DISPLAY_NAMES = {
    "imports.default": "Default Imports",
    "imports.named": "Named Imports",
    "imports.namespace": "Namespace Imports",
    "imports.aliased": "Aliased Imports",
    "usage.jsx": "JSX Usage",
    "usage.variables": "Variable Assignments",
    "usage.destructuring": "Destructuring",
    "usage.conditional": "Conditional Usage",
    "usage.arrays": "Array Mappings",
    "usage.objects": "Object Mappings",
    "usage.dynamicMappings": "Dynamic Mappings",
    "usage.context": "Context Usage",
    "advanced.lazy": "Lazy Loading",
    "advanced.dynamic": "Dynamic Imports",
    "advanced.hoc": "Higher-Order Components",
    "advanced.memo": "Memoized Components",
    "advanced.forwardRef": "Forward Refs",
    "advanced.portal": "Portal Usage",
}


@dataclass
class ComponentUsage:
    name: str
    source: str
    count: int = 0
    files: set[str] = field(default_factory=set)


@dataclass
class PackageDistribution:
    package_name: str
    version: str
    component_count: int = 0
    usage_count: int = 0
    percentage: float = 0.0
    components: list[str] = field(default_factory=list)


@dataclass
class PatternCount:
    pattern_type: str
    display_name: str
    count: int


@dataclass
class AggregatedReport:
    """Totals and distributions over every analyzed file."""

    files_analyzed: int
    total_imports: int
    total_components: int
    total_usage_patterns: int
    pattern_counts: list[PatternCount]
    component_usage: dict[str, ComponentUsage]
    package_distribution: list[PackageDistribution]
    results: list[FileResult]

    @property
    def top_components(self) -> list[ComponentUsage]:
        """Components ordered by rendering count, most used first."""
        return sorted(self.component_usage.values(), key=lambda usage: (-usage.count, usage.name))

    @property
    def all_components(self) -> list[str]:
        return sorted(self.component_usage)

    def to_dict(self, include_files: bool = False) -> dict[str, Any]:
        """Serialize for JSON output.

        Args:
            include_files: Also include each file's full report and analysis
        """
        data: dict[str, Any] = {
            "summary": {
                "filesAnalyzed": self.files_analyzed,
                "totalImports": self.total_imports,
                "totalComponents": self.total_components,
                "totalUsagePatterns": self.total_usage_patterns,
            },
            "components": [
                {
                    "name": usage.name,
                    "source": usage.source,
                    "count": usage.count,
                    "files": sorted(usage.files),
                }
                for usage in self.top_components
            ],
            "packages": [
                {
                    "packageName": package.package_name,
                    "version": package.version,
                    "componentCount": package.component_count,
                    "usageCount": package.usage_count,
                    "percentage": round(package.percentage, 2),
                    "components": package.components,
                }
                for package in self.package_distribution
            ],
            "patterns": [
                {"patternType": p.pattern_type, "displayName": p.display_name, "count": p.count}
                for p in self.pattern_counts
            ],
        }

        if include_files:
            files = []
            for result in self.results:
                entry: dict[str, Any] = {"file": str(result.file_path), "report": result.report.to_dict()}
                if result.analysis is not None:
                    entry["analysis"] = result.analysis.to_dict()
                files.append(entry)
            data["files"] = files

        return data


def resolve_package(import_path: str, available_packages: list[str]) -> str:
    """Map an import source to the lockfile package that provides it.

    Args:
        import_path: Import source such as ``@mui/material/Button``
        available_packages: Package names known from the lockfile

    Returns:
        Package name, ``local`` for relative imports or ``unknown``
    """
    if import_path.startswith(".") or import_path.startswith("/"):
        return LOCAL

    # Most specific package first: @ds/foundation before @ds
    for package in sorted(available_packages, key=len, reverse=True):
        if import_path == package or import_path.startswith(package + "/"):
            return package

    return UNKNOWN


def find_component_source(component: str, report_patterns: dict[str, Any], available_packages: list[str]) -> str:
    """Package a rendered component was imported from."""
    imports = report_patterns.get("imports", {})

    for bucket, key in (("named", "name"), ("default", "name"), ("aliased", "local")):
        for item in imports.get(bucket, []):
            if item.get(key) == component:
                return resolve_package(item["source"], available_packages)

    if "." in component:
        root = component.split(".", 1)[0]
        for item in imports.get("namespace", []):
            if item.get("name") == root:
                return resolve_package(item["source"], available_packages)

    return UNKNOWN


def count_patterns(report_patterns: dict[str, Any], counter: Counter) -> None:
    for pattern_type in PATTERN_DISPLAY_NAMES:
        group, bucket = pattern_type.split(".")
        counter[pattern_type] += len(report_patterns.get(group, {}).get(bucket, []))


def aggregate_reports(
    results: list[FileResult],
    versions: LockfileVersions | None = None,
) -> AggregatedReport:
    """Combine per-file reports.

    Args:
        results: Successful per-file results
        versions: Lockfile versions used to resolve packages

    Returns:
        Aggregated report
    """
    versions = versions or LockfileVersions()
    available_packages = list(versions.packages)

    component_usage: dict[str, ComponentUsage] = {}
    pattern_counter: Counter = Counter()
    total_imports = 0
    total_usage_patterns = 0

    for result in results:
        report = result.report
        total_imports += report.summary.total_imports
        total_usage_patterns += report.summary.total_usage_patterns

        for jsx in report.patterns.get("usage", {}).get("jsx", []):
            name = jsx["component"]
            usage = component_usage.get(name)
            if usage is None:
                source = find_component_source(name, report.patterns, available_packages)
                usage = ComponentUsage(name=name, source=source)
                component_usage[name] = usage
            usage.count += int(jsx.get("count", 1))
            usage.files.add(str(result.file_path))

        count_patterns(report.patterns, pattern_counter)

    pattern_counts = sorted(
        (
            PatternCount(pattern_type, PATTERN_DISPLAY_NAMES[pattern_type], count)
            for pattern_type, count in pattern_counter.items()
        ),
        key=lambda p: -p.count,
    )

    logger.debug(f"Aggregated {len(results)} reports into {len(component_usage)} components")

    return AggregatedReport(
        files_analyzed=len(results),
        total_imports=total_imports,
        total_components=len(component_usage),
        total_usage_patterns=total_usage_patterns,
        pattern_counts=pattern_counts,
        component_usage=component_usage,
        package_distribution=package_distribution(component_usage, versions),
        results=results,
    )


def package_distribution(
    component_usage: dict[str, ComponentUsage], versions: LockfileVersions
) -> list[PackageDistribution]:
    """Group components by package; percentages are of external usage."""
    packages: dict[str, PackageDistribution] = {}

    for usage in component_usage.values():
        if usage.source == UNKNOWN:
            continue
        package = packages.get(usage.source)
        if package is None:
            package = PackageDistribution(
                package_name=usage.source,
                version=versions.version_of(usage.source) or UNKNOWN,
            )
            packages[usage.source] = package
        package.component_count += 1
        package.usage_count += usage.count
        package.components.append(usage.name)

    total_usage = sum(package.usage_count for package in packages.values())
    for package in packages.values():
        package.percentage = package.usage_count / total_usage * 100 if total_usage else 0.0

    return sorted(packages.values(), key=lambda package: -package.usage_count)


@dataclass
class LibraryComparison:
    library: str
    unique_components: int
    total_imports: int
    total_usage_patterns: int
    files_with_usage: int


def compare_libraries(results_by_library: dict[str, list[FileResult]]) -> list[LibraryComparison]:
    """Rank libraries by how many distinct components each contributes.

    Args:
        results_by_library: Per-library results over the same file set

    Returns:
        Comparisons sorted by unique components, highest first
    """
    comparisons = []
    for library, results in results_by_library.items():
        components: set[str] = set()
        for result in results:
            components.update(result.report.components)
        comparisons.append(
            LibraryComparison(
                library=library,
                unique_components=len(components),
                total_imports=sum(r.report.summary.total_imports for r in results),
                total_usage_patterns=sum(r.report.summary.total_usage_patterns for r in results),
                files_with_usage=sum(1 for r in results if r.report.summary.total_imports > 0),
            )
        )
    return sorted(comparisons, key=lambda c: (-c.unique_components, c.library))
