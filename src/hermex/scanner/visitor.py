"""Two-phase syntax tree walk that drives the pattern detectors."""

import logging
from collections.abc import Callable

from tree_sitter import Node

from hermex.models import ParserState
from hermex.scanner import detectors
from hermex.scanner.jsx import detect_jsx_element

logger = logging.getLogger(__name__)


class UsageVisitor:
    """Walks a syntax tree and records component usage on a parser state.

    Imports are bound first so that every later detector sees the full set
    of imported names regardless of where in the file they are used. The
    rest of the tree is then walked in document order, which lets
    assignments promote names before subsequent statements use them.
    """

    def __init__(self, state: ParserState | None = None) -> None:
        """Initialize visitor.

        Args:
            state: Optional state to accumulate into; a fresh one otherwise
        """
        self.state = state if state is not None else ParserState()
        self._consumed_imports: set[int] = set()
        self._handlers: dict[str, Callable[[Node], bool]] = {
            "import_statement": self._visit_import,
            "lexical_declaration": self._visit_declaration,
            "variable_declaration": self._visit_declaration,
            "jsx_opening_element": self._visit_jsx,
            "jsx_self_closing_element": self._visit_jsx,
            "jsx_closing_element": self._skip,
            "call_expression": self._visit_call,
            "array": self._visit_array,
            "object": self._visit_object,
            "ternary_expression": self._visit_ternary,
            "member_expression": self._visit_member,
            "nested_identifier": self._visit_member,
            "subscript_expression": self._visit_subscript,
        }

    def visit(self, root: Node) -> ParserState:
        """Walk a tree and return the populated state."""
        if root.type == "program":
            self.bind_imports(root)
            self.classify(root)
        else:
            self._walk(root)
        return self.state

    def bind_imports(self, program: Node) -> None:
        """First phase: record every top-level import."""
        for child in program.named_children:
            if child.type == "import_statement":
                detectors.detect_import_statement(child, self.state)

        logger.debug(
            f"Bound {len(self.state.component_names)} component names and "
            f"{len(self.state.all_identifiers)} namespaces"
        )

    def classify(self, program: Node) -> None:
        """Second phase: walk everything except the imports already bound."""
        for child in program.named_children:
            if child.type != "import_statement":
                self._walk(child)

    def _walk(self, root: Node) -> None:
        # Explicit stack keeps pre-order without hitting the recursion limit
        stack = [root]
        while stack:
            node = stack.pop()
            handler = self._handlers.get(node.type)
            if handler is not None and not handler(node):
                continue
            stack.extend(reversed(node.named_children))

    def _skip(self, node: Node) -> bool:
        return False

    def _visit_import(self, node: Node) -> bool:
        detectors.detect_import_statement(node, self.state)
        return False

    def _visit_declaration(self, node: Node) -> bool:
        detectors.detect_variable_declaration(node, self.state)
        return True

    def _visit_jsx(self, node: Node) -> bool:
        detect_jsx_element(node, self.state)
        return True

    def _visit_call(self, node: Node) -> bool:
        if node.id in self._consumed_imports:
            return True

        consumed = detectors.detect_lazy(node, self.state)
        if consumed is not None:
            self._consumed_imports.add(consumed.id)

        detectors.detect_dynamic_import(node, self.state)
        detectors.detect_hoc(node, self.state)
        detectors.detect_react_apis(node, self.state)
        return True

    def _visit_array(self, node: Node) -> bool:
        detectors.detect_array(node, self.state)
        return True

    def _visit_object(self, node: Node) -> bool:
        detectors.detect_object(node, self.state)
        return True

    def _visit_ternary(self, node: Node) -> bool:
        detectors.detect_conditional(node, self.state)
        return True

    def _visit_member(self, node: Node) -> bool:
        detectors.detect_member_expression(node, self.state)
        return True

    def _visit_subscript(self, node: Node) -> bool:
        detectors.detect_subscript(node, self.state)
        return True
