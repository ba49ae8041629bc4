"""
Merge missing handlers into an existing resolver module.

The module is parsed with `ast` only to locate the `*Resolvers` container,
its nested Query/Mutation registries and the handler names they already
define. New handlers are spliced into the original text after the last
statement of their registry, so everything else stays byte-for-byte intact.
"""

import ast
import textwrap
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.errors import ArtifactParseError

logger = get_logger(__name__)

CONTAINER_MARKER = "Resolvers"

_INDENT_STEP = "    "


def find_container(tree) -> Optional[ast.ClassDef]:
    """First top-level class whose name contains "Resolvers"."""
    for node in tree.body:
        if isinstance(node, ast.ClassDef) and CONTAINER_MARKER in node.name:
            return node
    return None


def find_registry(container, root) -> Optional[ast.ClassDef]:
    for node in container.body:
        if isinstance(node, ast.ClassDef) and node.name == root:
            return node
    return None


def handler_names(registry) -> set:
    """Names bound in a registry class body: methods and plain assignments."""
    names = set()
    for node in registry.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            names.add(node.name)
        elif isinstance(node, ast.Assign):
            names.update(target.id for target in node.targets if isinstance(target, ast.Name))
        elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            names.add(node.target.id)
    return names


def _body_indent(lines, node, path) -> str:
    """Indentation of the statements in *node*'s body, taken from the source text."""
    first = node.body[0]
    if first.lineno == node.lineno:
        raise ArtifactParseError(
            str(path), f"class {node.name} is written on one line and cannot be extended"
        )
    return lines[first.lineno - 1][:first.col_offset]


class _Splice:
    """Text insertions keyed by the line they follow; applied bottom-up."""

    def __init__(self, text):
        self.lines = text.splitlines(keepends=True)
        self.inserts: Dict[int, List[str]] = defaultdict(list)

    def after_line(self, lineno, text):
        self.inserts[lineno].append(text)

    def apply(self) -> str:
        lines = list(self.lines)
        for lineno in sorted(self.inserts, reverse=True):
            if lineno > 0 and not lines[lineno - 1].endswith("\n"):
                lines[lineno - 1] += "\n"
            lines[lineno:lineno] = self.inserts[lineno]
        return "".join(lines)


def _handlers_block(handlers, indent) -> str:
    return "".join("\n" + textwrap.indent(handler, indent) + "\n" for handler in handlers)


def merge_resolvers(existing: str, queries, mutations,
                    render_handler: Callable[[object], str], path="<resolvers>") -> str:
    """
    Add a handler for every operation of *queries* / *mutations* not yet
    defined in the container's Query / Mutation registry.

    *render_handler(operation)* returns the handler source at column 0.
    Missing registries are created at the end of the container. Without a
    container the text is returned unchanged. Raises ArtifactParseError when
    *existing* is not valid Python.
    """
    try:
        tree = ast.parse(existing)
    except SyntaxError as exc:
        raise ArtifactParseError(str(path), f"line {exc.lineno}: {exc.msg}") from exc

    container = find_container(tree)
    if container is None:
        logger.warning(f"[MERGE] {path}: no '*{CONTAINER_MARKER}' class found, left unchanged")
        return existing

    splice = _Splice(existing)
    added = 0

    for root, operations in (("Query", queries), ("Mutation", mutations)):
        if not operations:
            continue
        registry = find_registry(container, root)
        present = handler_names(registry) if registry is not None else set()

        missing = []
        for operation in operations:
            if operation.name in present:
                continue
            present.add(operation.name)
            missing.append(operation)
        if not missing:
            continue

        handlers = [render_handler(operation) for operation in missing]
        added += len(handlers)

        if registry is not None:
            indent = _body_indent(splice.lines, registry, path)
            splice.after_line(registry.body[-1].end_lineno, _handlers_block(handlers, indent))
        else:
            class_indent = _body_indent(splice.lines, container, path)
            block = f"\n{class_indent}class {root}:\n" + _handlers_block(
                handlers, class_indent + _INDENT_STEP
            ).lstrip("\n")
            splice.after_line(container.body[-1].end_lineno, block)
            logger.debug(f"[MERGE] {path}: created registry {container.name}.{root}")

    if not added:
        logger.info(f"[MERGE] {path}: up to date")
        return existing

    logger.info(f"[MERGE] {path}: +{added} handler(s)")
    return splice.apply()
