"""
Merge new declarations and operation fields into an existing SDL module.

The existing document is parsed with graphql-core and transformed with a
visitor whose leave_* methods return new nodes; nothing already declared is
touched. When nothing is missing the original text is returned unchanged.
"""

from typing import Dict, Iterable, List, Set

from graphql import GraphQLError, Visitor, parse, print_ast, visit
from graphql.language import (
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    NameNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
)

from prisma_graphql_gen.api.gen_logging import get_logger
from prisma_graphql_gen.errors import ArtifactParseError

logger = get_logger(__name__)

ROOT_TYPES = ("Query", "Mutation")

_INPUT_NODES = (InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode)
_OUTPUT_NODES = (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)


def _replace(node, **changes):
    """Copy of an AST node with some attributes changed."""
    values = {key: getattr(node, key) for key in node.keys}
    values.update(changes)
    return node.__class__(**values)


def declared_type_names(document) -> Dict[str, Set[str]]:
    """Names of input and object types declared or extended in *document*."""
    names = {"input": set(), "output": set()}
    for definition in document.definitions:
        if isinstance(definition, _INPUT_NODES):
            names["input"].add(definition.name.value)
        elif isinstance(definition, _OUTPUT_NODES):
            names["output"].add(definition.name.value)
    return names


def declared_root_fields(document, root) -> Set[str]:
    """Field names of every definition and extension of the *root* type."""
    fields = set()
    for definition in document.definitions:
        if isinstance(definition, _OUTPUT_NODES) and definition.name.value == root:
            fields.update(field.name.value for field in definition.fields or ())
    return fields


def _parse_definitions(snippets: Iterable[str]):
    return parse("\n\n".join(snippets)).definitions


def _parse_fields(operations):
    body = "\n".join(f"  {operation.to_sdl()}" for operation in operations)
    return parse(f"type _Fields {{\n{body}\n}}").definitions[0].fields


class _SchemaMergeVisitor(Visitor):
    """Appends pending root fields to the first Query/Mutation node, then inserts new definitions."""

    def __init__(self, entity_name, new_definitions, root_fields):
        super().__init__()
        self.entity_name = entity_name
        self.new_definitions = tuple(new_definitions)
        self.pending = dict(root_fields)

    def _extend_root(self, node, *_args):
        fields = self.pending.pop(node.name.value, None)
        if not fields:
            return None
        return _replace(node, fields=(*(node.fields or ()), *fields))

    leave_object_type_definition = _extend_root
    leave_object_type_extension = _extend_root

    def leave_document(self, node, *_args):
        definitions = list(node.definitions)

        insert_at = 0
        for index, definition in enumerate(definitions):
            if (
                isinstance(definition, ObjectTypeDefinitionNode)
                and definition.name.value == self.entity_name
            ):
                insert_at = index + 1
                break
        definitions[insert_at:insert_at] = self.new_definitions

        # no Query/Mutation anywhere in the document
        for root in ROOT_TYPES:
            fields = self.pending.pop(root, None)
            if fields:
                definitions.append(ObjectTypeExtensionNode(
                    name=NameNode(value=root),
                    interfaces=(),
                    directives=(),
                    fields=tuple(fields),
                ))

        return _replace(node, definitions=tuple(definitions))


def merge_schema(existing: str, entity_name, types, queries, mutations, path="<schema>") -> str:
    """
    Add the missing declarations of *types* and the missing *queries* /
    *mutations* fields to the SDL text *existing*.

    Raises ArtifactParseError when *existing* is not valid SDL.
    """
    try:
        document = parse(existing)
    except GraphQLError as exc:
        raise ArtifactParseError(str(path), exc.message) from exc

    declared = declared_type_names(document)
    missing_declarations = [
        declaration
        for variant in ("input", "output")
        for declaration in types.declarations(variant)
        if declaration.name not in declared[variant]
    ]

    root_fields = {}
    for root, operations in (("Query", queries), ("Mutation", mutations)):
        present = declared_root_fields(document, root)
        missing: List = []
        for operation in operations:
            if operation.name in present:
                continue
            present.add(operation.name)
            missing.append(operation)
        if missing:
            root_fields[root] = _parse_fields(missing)

    if not missing_declarations and not root_fields:
        logger.info(f"[MERGE] {path}: up to date")
        return existing

    new_definitions = (
        _parse_definitions(declaration.to_sdl() for declaration in missing_declarations)
        if missing_declarations else ()
    )
    merged = visit(document, _SchemaMergeVisitor(entity_name, new_definitions, root_fields))

    added_fields = sum(len(fields) for fields in root_fields.values())
    logger.info(
        f"[MERGE] {path}: +{len(missing_declarations)} type(s), +{added_fields} operation field(s)"
    )
    return print_ast(merged) + "\n"
