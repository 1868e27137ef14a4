"""Helpers for reading tree-sitter syntax nodes."""

from tree_sitter import Node

# Wrappers that do not change which value an expression refers to
TRANSPARENT_WRAPPERS = frozenset({
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
    "type_assertion",
})

FUNCTION_TYPES = frozenset({
    "arrow_function",
    "function_expression",
    "function",
})


def text(node: Node | None) -> str:
    """Source text of a node, or an empty string."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def line(node: Node) -> int:
    """1-based line on which a node starts."""
    return node.start_point[0] + 1


def children(node: Node | None) -> list[Node]:
    """Named children with comments filtered out."""
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def first_child(node: Node | None) -> Node | None:
    found = children(node)
    return found[0] if found else None


def unwrap(node: Node | None) -> Node | None:
    """Strip parentheses and TypeScript assertions around an expression."""
    while node is not None and node.type in TRANSPARENT_WRAPPERS:
        if node.type == "type_assertion":
            # <Props>value: the type comes first
            parts = children(node)
            node = parts[-1] if parts else None
        else:
            node = first_child(node)
    return node


def field(node: Node | None, name: str) -> Node | None:
    """Child for a grammar field, unwrapped."""
    if node is None:
        return None
    return unwrap(node.child_by_field_name(name))


def parent(node: Node) -> Node | None:
    """Nearest ancestor that is not a transparent wrapper."""
    current = node.parent
    while current is not None and current.type in TRANSPARENT_WRAPPERS:
        current = current.parent
    return current


def identifier_name(node: Node | None) -> str | None:
    """Name of a bare identifier, or None for anything else."""
    node = unwrap(node)
    if node is not None and node.type == "identifier":
        return text(node)
    return None


def string_value(node: Node | None) -> str | None:
    """Value of a string literal or a template string without substitutions."""
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "string":
        return text(node)[1:-1]
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return text(node)[1:-1]
    return None


def dotted_name(node: Node | None) -> str | None:
    """Dotted path of an identifier or member chain such as ``Lib.Form.Item``.

    Returns None when any link of the chain is computed or not a name.
    """
    node = unwrap(node)
    if node is None:
        return None
    if node.type in ("identifier", "property_identifier", "type_identifier", "jsx_namespace_name"):
        return text(node)
    if node.type in ("member_expression", "nested_identifier"):
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is None or prop is None:
            parts = children(node)
            if len(parts) != 2:
                return None
            obj, prop = parts
        head = dotted_name(obj)
        if head is None or prop.type == "private_property_identifier":
            return None
        return f"{head}.{text(prop)}"
    return None


def callee_name(call: Node) -> str | None:
    """Final name of a call's callee: ``memo`` for both ``memo()`` and ``React.memo()``."""
    function = field(call, "function")
    if function is None:
        return None
    if function.type == "identifier":
        return text(function)
    if function.type == "member_expression":
        prop = function.child_by_field_name("property")
        return text(prop) if prop is not None else None
    return None


def arguments(call: Node) -> list[Node]:
    """Unwrapped positional arguments of a call expression."""
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return [unwrap(arg) or arg for arg in children(args)]


def is_import_call(node: Node | None) -> bool:
    """Whether a node is a dynamic ``import(...)`` call."""
    node = unwrap(node)
    if node is None or node.type != "call_expression":
        return False
    function = node.child_by_field_name("function")
    return function is not None and function.type == "import"


def first_error_line(root: Node) -> int | None:
    """Line of the first syntax error in a tree, if any."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return line(node)
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
