"""Turn a parser state into a serializable usage report."""

from typing import Any

from hermex.models import ParserState, Record, ReportSummary, UsageReport


def _records(items: list[Any]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]


def _keyed(items: dict[str, Record], key: str) -> list[dict[str, Any]]:
    return [{key: name, **item.to_dict()} for name, item in items.items()]


def generate_report(state: ParserState) -> UsageReport:
    """Build the report for a finished walk.

    Args:
        state: Parser state after the visitor has run

    Returns:
        Immutable usage report with summary, pattern tree and sorted components
    """
    usage = state.usage_patterns

    patterns: dict[str, Any] = {
        "imports": {
            "default": _records(usage.default_imports),
            "named": _records(usage.named_imports),
            "namespace": _records(usage.namespace_imports),
            "aliased": [item.to_dict() for item in usage.aliased_imports.values()],
        },
        "usage": {
            "jsx": [item.to_dict() for item in usage.jsx_usage.values()],
            "variables": _keyed(usage.variable_assignments, "variable"),
            "destructuring": _records(usage.destructured_usage),
            "conditional": _records(usage.conditional_usage),
            "arrays": _records(usage.array_mappings),
            "objects": _records(usage.object_mappings),
            "dynamicMappings": _records(usage.dynamic_mappings),
            "context": _records(usage.context_usage),
        },
        "advanced": {
            "lazy": _records(usage.lazy_imports),
            "dynamic": _records(usage.dynamic_imports),
            "hoc": _records(usage.hoc_usage),
            "memo": _records(usage.memoized_components),
            "forwardRef": _records(usage.forwarded_refs),
            "portal": _records(usage.portal_usage),
        },
        "props": [
            {"component": name, "analysis": analysis.to_dict()}
            for name, analysis in usage.props_analysis.items()
        ],
    }

    summary = ReportSummary(
        total_imports=(
            len(usage.default_imports) + len(usage.named_imports) + len(usage.namespace_imports)
        ),
        total_components=len(state.component_names),
        total_usage_patterns=usage.total_count(),
    )

    return UsageReport(
        summary=summary,
        patterns=patterns,
        components=sorted(state.component_names),
    )


def matches_library(source: str, library: str) -> bool:
    """Whether an import source is the library itself or one of its subpaths."""
    return source == library or source.startswith(library + "/")


def _names(reference: str) -> list[str]:
    """Root names mentioned by a rendered assignment such as ``A | Lib.B``."""
    return [part.strip().split(".", 1)[0] for part in reference.split("|") if part.strip()]


def filter_report_by_library(report: UsageReport, library: str) -> UsageReport:
    """Restrict a report to bindings that come from one library.

    Imports and lazy or dynamic sources are kept when they match the
    library or a subpath of it. Rendered components, props and variables
    are kept when their root name traces back to a matching import;
    the remaining usage groups are left as they are.

    Args:
        report: Report for a whole file
        library: Package name such as ``@mui/material``

    Returns:
        A new report; the input is not modified
    """
    imports = report.patterns.get("imports", {})
    usage = report.patterns.get("usage", {})
    advanced = report.patterns.get("advanced", {})

    kept_imports = {
        bucket: [item for item in items if matches_library(item.get("source", ""), library)]
        for bucket, items in imports.items()
    }

    bound: set[str] = set()
    for bucket in ("default", "namespace"):
        bound.update(item["name"] for item in kept_imports.get(bucket, []))
    aliased_imported = {item["imported"] for item in kept_imports.get("aliased", [])}
    bound.update(item["local"] for item in kept_imports.get("aliased", []))
    bound.update(
        item["name"] for item in kept_imports.get("named", []) if item["name"] not in aliased_imported
    )

    namespaces = {item["name"] for item in kept_imports.get("namespace", [])}
    for item in usage.get("destructuring", []):
        if item.get("source") in namespaces:
            bound.add(item.get("local") or item["property"])

    variables = []
    for item in usage.get("variables", []):
        if any(name in bound for name in _names(item.get("assignment", ""))):
            bound.add(item["variable"])
            variables.append(item)

    jsx = [item for item in usage.get("jsx", []) if _names(item["component"])[0] in bound]
    rendered = {item["component"] for item in jsx}

    filtered_usage = dict(usage)
    filtered_usage["jsx"] = jsx
    filtered_usage["variables"] = variables

    filtered_advanced = {
        bucket: (
            [item for item in items if matches_library(item.get("source", ""), library)]
            if bucket in ("lazy", "dynamic")
            else items
        )
        for bucket, items in advanced.items()
    }

    patterns = {
        "imports": kept_imports,
        "usage": filtered_usage,
        "advanced": filtered_advanced,
        "props": [item for item in report.patterns.get("props", []) if item["component"] in rendered],
    }

    components = sorted(
        name
        for name in report.components
        if name in bound or any(component.endswith("." + name) for component in rendered)
    )
    total_patterns = sum(len(items) for items in kept_imports.values())
    total_patterns += sum(len(items) for items in filtered_usage.values())
    total_patterns += sum(len(items) for items in filtered_advanced.values())
    total_patterns += len(patterns["props"])

    return UsageReport(
        summary=ReportSummary(
            total_imports=sum(
                len(kept_imports.get(bucket, [])) for bucket in ("default", "named", "namespace")
            ),
            total_components=len(components),
            total_usage_patterns=total_patterns,
        ),
        patterns=patterns,
        components=components,
    )
