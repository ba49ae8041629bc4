"""
Read-only view of a Prisma DMMF document.

Only the parts the generator consumes are modelled:
    - datamodel.models / datamodel.enums   (entities and their fields)
    - schema.inputObjectTypes               (input type catalog)
    - schema.outputObjectTypes              (output types, incl. Query/Mutation roots)
    - schema.enumTypes                      (enumeration values)

Field names follow the DMMF JSON (camelCase) through an alias generator.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField, field_validator
from pydantic.alias_generators import to_camel

Variant = Literal["input", "output"]

SCALAR = "scalar"
INPUT_OBJECT_TYPES = "inputObjectTypes"
OUTPUT_OBJECT_TYPES = "outputObjectTypes"
ENUM_TYPES = "enumTypes"


class _DMMFRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Field(_DMMFRecord):
    """A model field: scalar, relation (object) or enum."""

    name: str
    kind: str = "scalar"
    type: str
    is_list: bool = False
    is_required: bool = False
    is_id: bool = False
    is_unique: bool = False
    documentation: Optional[str] = None


class Model(_DMMFRecord):
    """An entity of the data model."""

    name: str
    fields: List[Field] = PydanticField(default_factory=list)


class EnumType(_DMMFRecord):
    name: str
    values: List[str] = PydanticField(default_factory=list)

    @field_validator("values", mode="before")
    @classmethod
    def _value_names(cls, values):
        # datamodel enums carry {"name": ..., "dbName": ...}; schema enums carry plain strings
        return [value["name"] if isinstance(value, dict) else value for value in values or []]


class TypeRef(_DMMFRecord):
    """One candidate type of an argument/field, with its catalog location."""

    type: str
    location: str = SCALAR
    is_list: bool = False
    namespace: Optional[str] = None


class SchemaArg(_DMMFRecord):
    """An input field or an operation argument."""

    name: str
    is_required: bool = False
    is_nullable: bool = False
    input_types: List[TypeRef] = PydanticField(default_factory=list)


class InputObjectType(_DMMFRecord):
    name: str
    fields: List[SchemaArg] = PydanticField(default_factory=list)
    meta: Optional[Dict[str, Any]] = None

    @property
    def grouping(self) -> Optional[str]:
        return (self.meta or {}).get("grouping")


class SchemaField(_DMMFRecord):
    """An output field; root operation fields carry their arguments in `args`."""

    name: str
    is_nullable: bool = False
    output_type: TypeRef
    args: List[SchemaArg] = PydanticField(default_factory=list)


class OutputObjectType(_DMMFRecord):
    name: str
    fields: List[SchemaField] = PydanticField(default_factory=list)


class Datamodel(_DMMFRecord):
    models: List[Model] = PydanticField(default_factory=list)
    enums: List[EnumType] = PydanticField(default_factory=list)


class Schema(_DMMFRecord):
    input_object_types: Dict[str, List[InputObjectType]] = PydanticField(default_factory=dict)
    output_object_types: Dict[str, List[OutputObjectType]] = PydanticField(default_factory=dict)
    enum_types: Dict[str, List[EnumType]] = PydanticField(default_factory=dict)


class DataModel(_DMMFRecord):
    """The DMMF document plus the lookups the pipeline needs."""

    datamodel: Datamodel = PydanticField(default_factory=Datamodel)
    catalog: Schema = PydanticField(default_factory=Schema, alias="schema")

    # ------------------------------------------------------------------ #
    # Entities
    # ------------------------------------------------------------------ #
    def get_entity(self, name: str) -> Optional[Model]:
        for model in self.datamodel.models:
            if model.name == name:
                return model
        return None

    def entity_names(self) -> List[str]:
        return [model.name for model in self.datamodel.models]

    # ------------------------------------------------------------------ #
    # Type catalog
    # ------------------------------------------------------------------ #
    def find_type(self, name: str, variant: Variant, namespace: Optional[str] = None):
        """
        Find an input or output object type by name.

        With a namespace only that namespace is searched, otherwise all of them
        in document order. Returns None when the catalog has no such type.
        """
        catalog = (
            self.catalog.input_object_types if variant == "input"
            else self.catalog.output_object_types
        )
        if namespace:
            candidates = catalog.get(namespace, [])
        else:
            candidates = [item for group in catalog.values() for item in group]
        for candidate in candidates:
            if candidate.name == name:
                return candidate
        return None

    def operation_field(self, root: str, field_name: str) -> Optional[SchemaField]:
        """Look up a root operation field, e.g. ("Query", "findManyEmployee")."""
        root_type = self.find_type(root, "output", namespace="prisma") or self.find_type(root, "output")
        if root_type is None:
            return None
        for field in root_type.fields:
            if field.name == field_name:
                return field
        return None

    def get_enum(self, name: str) -> Optional[EnumType]:
        for group in self.catalog.enum_types.values():
            for enum in group:
                if enum.name == name:
                    return enum
        for enum in self.datamodel.enums:
            if enum.name == name:
                return enum
        return None


def load_data_model(path) -> DataModel:
    """
    Load a DMMF document from JSON.

    Accepts either a bare DMMF document or a generator `options.json`
    that wraps it under a "dmmf" key.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return data_model_from_dict(raw)


def data_model_from_dict(raw: Dict[str, Any]) -> DataModel:
    if "dmmf" in raw:
        raw = raw["dmmf"]
    return DataModel.model_validate(raw)
