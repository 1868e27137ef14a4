"""Pattern detectors.

Each detector inspects one kind of syntax node and records what it finds on
the shared :class:`ParserState`. Detectors never walk into children; the
visitor owns traversal order.
"""

import logging

from tree_sitter import Node

from hermex.models import (
    AliasedImport,
    ArrayMapping,
    ConditionalUsage,
    ContextUsage,
    DestructuredUsage,
    DynamicMapping,
    HOCUsage,
    ImportRecord,
    MappingEntry,
    MemoUsage,
    ObjectMapping,
    ParserState,
    PositionMarker,
    SourceImport,
    VariableAssignment,
)
from hermex.scanner import nodes

logger = logging.getLogger(__name__)

LAZY_FUNCTIONS = frozenset({"lazy"})
CONTEXT_HOOKS = frozenset({"useContext"})
COMPUTED_KEY = "[computed]"


# Imports

def detect_import_statement(statement: Node, state: ParserState) -> None:
    """Record default, namespace, named and aliased bindings of an import.

    Default and named locals become component names; a namespace local is
    only an identifier until one of its members is used.
    """
    source = nodes.string_value(statement.child_by_field_name("source"))
    patterns = state.usage_patterns
    lineno = nodes.line(statement)

    for clause in nodes.children(statement):
        if clause.type == "import_require_clause":
            # import X = require("lib")
            local = nodes.first_child(clause)
            require_source = nodes.string_value(clause.child_by_field_name("source"))
            if local is not None and require_source is not None:
                name = nodes.text(local)
                patterns.default_imports.append(ImportRecord(name, require_source, lineno))
                state.component_names.add(name)
            continue

        if clause.type != "import_clause" or source is None:
            continue

        for binding in nodes.children(clause):
            if binding.type == "identifier":
                name = nodes.text(binding)
                patterns.default_imports.append(ImportRecord(name, source, lineno))
                state.component_names.add(name)

            elif binding.type == "namespace_import":
                local = nodes.first_child(binding)
                if local is None:
                    continue
                name = nodes.text(local)
                patterns.namespace_imports.append(ImportRecord(name, source, lineno))
                state.all_identifiers.add(name)

            elif binding.type == "named_imports":
                for specifier in nodes.children(binding):
                    if specifier.type != "import_specifier":
                        continue
                    imported_node = specifier.child_by_field_name("name")
                    alias_node = specifier.child_by_field_name("alias")
                    if imported_node is None:
                        continue
                    imported = nodes.string_value(imported_node) or nodes.text(imported_node)
                    local = nodes.text(alias_node) if alias_node is not None else imported

                    patterns.named_imports.append(ImportRecord(imported, source, lineno))
                    if local != imported:
                        patterns.aliased_imports[local] = AliasedImport(
                            imported=imported, local=local, source=source, line=lineno
                        )
                    state.component_names.add(local)


# Variables

def _is_known_reference(value: Node | None, state: ParserState) -> bool:
    value = nodes.unwrap(value)
    if value is None:
        return False
    if value.type == "identifier":
        return state.is_known(nodes.text(value))
    if value.type == "member_expression":
        dotted = nodes.dotted_name(value)
        if dotted is None:
            return False
        return dotted in state.component_names or dotted.split(".", 1)[0] in (
            state.all_identifiers | state.component_names
        )
    if value.type == "ternary_expression":
        return _is_known_reference(
            value.child_by_field_name("consequence"), state
        ) or _is_known_reference(value.child_by_field_name("alternative"), state)
    return False


def assignment_text(value: Node | None) -> str | None:
    """Render a component reference: ``Button``, ``Lib.Button`` or ``A | B``."""
    value = nodes.unwrap(value)
    if value is None:
        return None
    if value.type == "identifier":
        return nodes.text(value)
    if value.type == "member_expression":
        return nodes.dotted_name(value)
    if value.type == "ternary_expression":
        branches = []
        for field_name in ("consequence", "alternative"):
            branch = value.child_by_field_name(field_name)
            rendered = assignment_text(branch)
            branches.append(rendered if rendered is not None else nodes.text(nodes.unwrap(branch)))
        return " | ".join(branches)
    return None


def _pattern_bindings(pattern: Node) -> list[tuple[str, str]]:
    """(property, local) pairs bound by an object destructuring pattern."""
    bindings = []
    for prop in nodes.children(pattern):
        if prop.type == "shorthand_property_identifier_pattern":
            name = nodes.text(prop)
            bindings.append((name, name))
        elif prop.type == "object_assignment_pattern":
            left = prop.child_by_field_name("left")
            if left is not None and left.type == "shorthand_property_identifier_pattern":
                name = nodes.text(left)
                bindings.append((name, name))
        elif prop.type == "pair_pattern":
            key = prop.child_by_field_name("key")
            value = prop.child_by_field_name("value")
            if key is None or key.type == "computed_property_name":
                continue
            if value is not None and value.type == "assignment_pattern":
                value = value.child_by_field_name("left")
            local = nodes.identifier_name(value)
            if local is not None:
                bindings.append((nodes.string_value(key) or nodes.text(key), local))
    return bindings


def detect_variable_declaration(declaration: Node, state: ParserState) -> None:
    """Record component aliases, namespace destructuring and context reads.

    Covers ``const C = Button``, ``const { Button } = Lib`` and
    ``const { theme } = useContext(ThemeContext)``.
    """
    patterns = state.usage_patterns

    for declarator in nodes.children(declaration):
        if declarator.type != "variable_declarator":
            continue
        target = declarator.child_by_field_name("name")
        value = nodes.field(declarator, "value")
        if target is None or value is None:
            continue
        lineno = nodes.line(declarator)

        if target.type == "identifier":
            if not _is_known_reference(value, state):
                continue
            rendered = assignment_text(value)
            if rendered is None:
                continue
            variable = nodes.text(target)
            logger.debug(f"Component alias {variable} = {rendered} at line {lineno}")
            patterns.variable_assignments[variable] = VariableAssignment(rendered, lineno)
            state.component_names.add(variable)
            if value.type == "identifier" and nodes.text(value) in state.all_identifiers:
                # const UI = Lib keeps UI.Button resolvable
                state.all_identifiers.add(variable)

        elif target.type == "object_pattern":
            namespace = nodes.identifier_name(value)
            if namespace is not None and namespace in state.all_identifiers:
                for prop, local in _pattern_bindings(target):
                    patterns.destructured_usage.append(
                        DestructuredUsage(
                            property=prop,
                            source=namespace,
                            line=lineno,
                            local=local if local != prop else None,
                        )
                    )
                    state.component_names.add(prop)
                    state.component_names.add(local)

            elif value.type == "call_expression" and nodes.callee_name(value) in CONTEXT_HOOKS:
                args = nodes.arguments(value)
                bindings = _pattern_bindings(target)
                if not args or not bindings:
                    continue
                patterns.context_usage.append(
                    ContextUsage(
                        context=nodes.dotted_name(args[0]) or nodes.text(args[0]),
                        properties=[local for _, local in bindings],
                        line=lineno,
                    )
                )
                for _, local in bindings:
                    state.component_names.add(local)


# Collections

def _mapping_variable(collection: Node) -> str | None:
    """Name of the variable a collection literal initializes, if any."""
    container = nodes.parent(collection)
    if container is None or container.type != "variable_declarator":
        return None
    value = nodes.field(container, "value")
    if value is None or value.id != collection.id:
        return None
    return nodes.identifier_name(container.child_by_field_name("name"))


def _property_key(key: Node | None) -> str:
    if key is None or key.type == "computed_property_name":
        return COMPUTED_KEY
    return nodes.string_value(key) or nodes.text(key)


def detect_array(array: Node, state: ParserState) -> None:
    """Record an array literal that holds at least one known component."""
    names = [
        name
        for name in (nodes.identifier_name(element) for element in nodes.children(array))
        if name is not None
    ]
    if not any(name in state.component_names for name in names):
        return

    state.usage_patterns.array_mappings.append(ArrayMapping(names, nodes.line(array)))
    variable = _mapping_variable(array)
    if variable is not None:
        state.mapping_variables.add(variable)


def detect_object(obj: Node, state: ParserState) -> None:
    """Record the entries of an object literal that map keys to known components."""
    mappings: list[MappingEntry] = []

    for prop in nodes.children(obj):
        if prop.type == "pair":
            component = nodes.identifier_name(prop.child_by_field_name("value"))
            if component is not None and component in state.component_names:
                key = _property_key(prop.child_by_field_name("key"))
                mappings.append(MappingEntry(key=key, component=component))
        elif prop.type == "shorthand_property_identifier":
            name = nodes.text(prop)
            if name in state.component_names:
                mappings.append(MappingEntry(key=name, component=name))

    if not mappings:
        return

    variable = _mapping_variable(obj)
    state.usage_patterns.object_mappings.append(
        ObjectMapping(mappings=mappings, line=nodes.line(obj), variable=variable)
    )
    if variable is not None:
        state.mapping_variables.add(variable)


def detect_subscript(subscript: Node, state: ParserState) -> None:
    """Record ``mapping[key]`` lookups with a runtime key on a known mapping."""
    mapping = nodes.identifier_name(subscript.child_by_field_name("object"))
    if mapping is None or mapping not in state.mapping_variables:
        return
    index = nodes.field(subscript, "index")
    if index is None or index.type in ("string", "number"):
        return
    if nodes.string_value(index) is not None:
        return
    state.usage_patterns.dynamic_mappings.append(
        DynamicMapping(mapping=mapping, key=nodes.text(index), line=nodes.line(subscript))
    )


# Conditionals

def detect_conditional(ternary: Node, state: ParserState) -> None:
    """Record a ternary where either branch is a bare known component."""
    consequent = nodes.identifier_name(ternary.child_by_field_name("consequence"))
    alternate = nodes.identifier_name(ternary.child_by_field_name("alternative"))

    if not any(name in state.component_names for name in (consequent, alternate)):
        return

    state.usage_patterns.conditional_usage.append(
        ConditionalUsage(
            consequent=consequent or "",
            alternate=alternate or "",
            line=nodes.line(ternary),
        )
    )


# Calls

def lazy_import_call(call: Node) -> Node | None:
    """The ``import()`` call inside ``lazy(() => import("..."))``, if this is one."""
    function = nodes.field(call, "function")
    if function is None or nodes.callee_name(call) not in LAZY_FUNCTIONS:
        return None

    args = nodes.arguments(call)
    if not args or args[0].type not in nodes.FUNCTION_TYPES:
        return None

    body = nodes.field(args[0], "body")
    if not nodes.is_import_call(body):
        return None
    import_args = nodes.arguments(body)
    if not import_args or nodes.string_value(import_args[0]) is None:
        return None
    return body


def detect_lazy(call: Node, state: ParserState) -> Node | None:
    """Record a lazy-loaded component.

    Returns:
        The consumed ``import()`` call so it is not also counted as dynamic
    """
    import_call = lazy_import_call(call)
    if import_call is None:
        return None
    source = nodes.string_value(nodes.arguments(import_call)[0])
    state.usage_patterns.lazy_imports.append(SourceImport(source or "", nodes.line(call)))

    # const Page = lazy(...) renders as <Page />
    container = nodes.parent(call)
    if container is not None and container.type == "variable_declarator":
        variable = nodes.identifier_name(container.child_by_field_name("name"))
        if variable is not None:
            state.component_names.add(variable)
    return import_call


def detect_dynamic_import(call: Node, state: ParserState) -> None:
    if not nodes.is_import_call(call):
        return
    args = nodes.arguments(call)
    source = nodes.string_value(args[0]) if args else None
    if source is None:
        return
    state.usage_patterns.dynamic_imports.append(SourceImport(source, nodes.line(call)))


def detect_hoc(call: Node, state: ParserState) -> None:
    """Record a plain function call that receives a known component.

    Any identifier-callee call with a component argument matches, so
    ordinary helpers such as ``console.log``-style wrappers taking a
    component are reported too.
    """
    function = nodes.field(call, "function")
    if function is None or function.type != "identifier":
        return
    for arg in nodes.arguments(call):
        name = nodes.identifier_name(arg)
        if name is not None and name in state.component_names:
            logger.debug(f"HOC {nodes.text(function)}({name}) at line {nodes.line(call)}")
            state.usage_patterns.hoc_usage.append(
                HOCUsage(function=nodes.text(function), component=name, line=nodes.line(call))
            )
            return


def detect_react_apis(call: Node, state: ParserState) -> None:
    """Record ``memo``, ``forwardRef`` and ``createPortal`` calls, bare or namespaced."""
    name = nodes.callee_name(call)
    patterns = state.usage_patterns
    lineno = nodes.line(call)

    if name == "memo":
        args = nodes.arguments(call)
        component = nodes.identifier_name(args[0]) if args else None
        if component is not None and component in state.component_names:
            patterns.memoized_components.append(MemoUsage(component, lineno))
    elif name == "forwardRef":
        patterns.forwarded_refs.append(PositionMarker(lineno))
    elif name == "createPortal":
        patterns.portal_usage.append(PositionMarker(lineno))


# Member expressions

def detect_member_expression(member: Node, state: ParserState) -> None:
    """Promote ``Lib.Button`` to a component when ``Lib`` is a namespace import."""
    obj = member.child_by_field_name("object")
    prop = member.child_by_field_name("property")
    if obj is None or prop is None:
        parts = nodes.children(member)
        if len(parts) != 2:
            return
        obj, prop = parts
    root = nodes.identifier_name(obj)
    if root is not None and root in state.all_identifiers and prop.type != "private_property_identifier":
        name = nodes.text(prop)
        if name not in state.component_names:
            logger.debug(f"Promoted {name} from namespace {root}")
        state.component_names.add(name)
