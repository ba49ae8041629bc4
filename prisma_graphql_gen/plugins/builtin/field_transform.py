"""
Built-in plugin that drops or retypes fields during generation.

Options:
    exclude_fields:  ["password", "Employee.salary"]  (bare names match every type)
    type_transforms: {"DateTime": "String"}           (GraphQL type name -> replacement)
"""

import re
from dataclasses import replace

from prisma_graphql_gen.api.extractors.type_mapper import unwrap_type
from prisma_graphql_gen.plugins.types import HookName, Plugin


def _is_excluded(options, type_name, field_name) -> bool:
    excluded = options.get("exclude_fields") or []
    return field_name in excluded or f"{type_name}.{field_name}" in excluded


def _retype(sdl_type, transforms) -> str:
    base = unwrap_type(sdl_type)
    if base not in transforms:
        return sdl_type
    return re.sub(rf"\b{re.escape(base)}\b", transforms[base], sdl_type)


def _filter_entity(payload, config):
    entity = payload.entity
    fields = [f for f in entity.fields if not _is_excluded(config.options, entity.name, f.name)]
    if len(fields) == len(entity.fields):
        return None
    return replace(payload, entity=entity.model_copy(update={"fields": fields}))


def _transform_type_field(payload, config):
    options = config.options
    if _is_excluded(options, payload.type_name, payload.field.name):
        return replace(payload, include=False)
    transforms = options.get("type_transforms") or {}
    if payload.field.type_name in transforms:
        field = replace(payload.field, type_name=transforms[payload.field.type_name])
        return replace(payload, field=field)
    return None


def _transform_template_fields(payload, config):
    transforms = config.options.get("type_transforms") or {}
    fields = payload.data.get("fields")
    if not transforms or fields is None:
        return None
    data = dict(payload.data)
    data["fields"] = [{**f, "type": _retype(f["type"], transforms)} for f in fields]
    return replace(payload, data=data)


def create_field_transform_plugin() -> Plugin:
    return Plugin(
        name="field-transform",
        version="1.0.0",
        description="Excludes fields and transforms field types during generation",
        hooks={
            HookName.ON_MODEL_FOUND: _filter_entity,
            HookName.ON_PREPARED_TYPE_FIELD: _transform_type_field,
            HookName.ON_TEMPLATE_DATA_PREPARED: _transform_template_fields,
        },
    )
