"""JSX element detection and props analysis."""

from tree_sitter import Node

from hermex.models import JSXOccurrence, JSXUsage, ParserState, PropDetail, PropsAnalysis
from hermex.scanner import nodes

SPREAD_WARNING = "Spread props cannot be statically analyzed"

COMPLEX_VALUE_TYPES = frozenset({
    "object",
    "array",
    "call_expression",
    "ternary_expression",
})

# Context names keyed by the syntax node an element sits in
_CONTEXTS = {
    "ternary_expression": "conditional",
    "array": "array",
    "object": "object",
    "pair": "object",
    "arguments": "hoc",
    "call_expression": "hoc",
    "variable_declarator": "variable",
    "jsx_element": "jsx",
    "jsx_fragment": "jsx",
    "jsx_expression": "jsx",
    "jsx_attribute": "jsx",
}


def element_name(opening: Node) -> str | None:
    """Dotted name of a JSX opening or self-closing element."""
    name = opening.child_by_field_name("name")
    if name is None:
        return None
    if name.type == "nested_identifier" or name.type == "member_expression":
        return nodes.dotted_name(name)
    return "".join(nodes.text(name).split()) or None


def is_component_name(name: str, state: ParserState) -> bool:
    """Whether a rendered name refers to a tracked component.

    Dotted names count when their root is a namespace import or a known
    component, as in ``<Lib.Button>`` or ``<Tabs.Panel>``.
    """
    if name in state.component_names:
        return True
    if "." in name:
        root = name.split(".", 1)[0]
        return root in state.all_identifiers or root in state.component_names
    return False


def element_context(opening: Node) -> str:
    """Where an element appears: jsx, conditional, array, object, hoc, variable or other."""
    element = opening
    if opening.type == "jsx_opening_element" and opening.parent is not None:
        element = opening.parent
    container = nodes.parent(element)
    if container is None:
        return "other"
    return _CONTEXTS.get(container.type, "other")


def prop_type(value: Node | None) -> str:
    """Classify the value of a JSX attribute."""
    if value is None:
        return "boolean"
    if value.type == "string":
        return "string"
    if value.type != "jsx_expression":
        return "expression"

    inner = nodes.unwrap(nodes.first_child(value))
    if inner is None:
        return "expression"
    if inner.type == "number":
        return "number"
    if inner.type in ("true", "false"):
        return "boolean"
    if inner.type in ("string", "template_string"):
        return "string"
    if inner.type in nodes.FUNCTION_TYPES:
        return "function"
    if inner.type == "object":
        return "object"
    if inner.type == "array":
        return "array"
    if inner.type == "identifier":
        return "variable"
    return "expression"


def is_complex_value(value: Node | None) -> bool:
    if value is None or value.type != "jsx_expression":
        return False
    inner = nodes.unwrap(nodes.first_child(value))
    return inner is not None and inner.type in COMPLEX_VALUE_TYPES


def analyze_props(opening: Node) -> PropsAnalysis:
    """Describe the attributes of a JSX opening or self-closing element.

    Args:
        opening: ``jsx_opening_element`` or ``jsx_self_closing_element`` node

    Returns:
        Props analysis for this one occurrence
    """
    analysis = PropsAnalysis()
    name_node = opening.child_by_field_name("name")

    for attribute in nodes.children(opening):
        if name_node is not None and attribute.id == name_node.id:
            continue

        if attribute.type == "jsx_expression":
            inner = nodes.first_child(attribute)
            if inner is not None and inner.type == "spread_element":
                analysis.has_spread = True
                analysis.has_complex_props = True
                analysis.prop_details.append(
                    PropDetail(
                        name="...",
                        type="spread",
                        is_event_handler=False,
                        is_complex=True,
                        is_spread=True,
                        warning=SPREAD_WARNING,
                    )
                )
            continue

        if attribute.type != "jsx_attribute":
            continue

        parts = nodes.children(attribute)
        if not parts:
            continue
        prop_name = nodes.text(parts[0])
        value = parts[1] if len(parts) > 1 else None

        detail = PropDetail(
            name=prop_name,
            type=prop_type(value),
            is_event_handler=prop_name.startswith("on"),
            is_complex=is_complex_value(value),
        )
        if prop_name not in analysis.named_props:
            analysis.named_props.append(prop_name)
        analysis.prop_details.append(detail)
        analysis.has_event_handlers = analysis.has_event_handlers or detail.is_event_handler
        analysis.has_complex_props = analysis.has_complex_props or detail.is_complex

    return analysis


def detect_jsx_element(opening: Node, state: ParserState) -> None:
    """Record a rendering of a known component.

    The first occurrence fixes ``line`` and ``context``; later occurrences
    are appended, bump the count and merge their props analysis.
    """
    name = element_name(opening)
    if name is None or not is_component_name(name, state):
        return

    patterns = state.usage_patterns
    analysis = analyze_props(opening)
    occurrence = JSXOccurrence(line=nodes.line(opening), context=element_context(opening))

    usage = patterns.jsx_usage.get(name)
    if usage is None:
        usage = JSXUsage(
            component=name,
            line=occurrence.line,
            context=occurrence.context,
            props=list(analysis.named_props),
            props_analysis=analysis,
            count=0,
        )
        patterns.jsx_usage[name] = usage
    else:
        usage.props_analysis.merge(analysis)
        for prop in analysis.named_props:
            if prop not in usage.props:
                usage.props.append(prop)

    usage.count += 1
    usage.occurrences.append(occurrence)
    patterns.props_analysis[name] = usage.props_analysis

    # <Lib.Button> makes Button a component of this file
    if "." in name:
        root, _, member = name.partition(".")
        if root in state.all_identifiers and "." not in member:
            state.component_names.add(member)
