"""
Generator configuration.

Defaults live on the models below; a user config file (JSON or YAML) overrides
them, and GENERATOR_* environment variables fill in anything the file leaves
out, e.g. GENERATOR_CONTENT__RESOLVER_IMPLEMENTATION__DATA_SOURCE.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from prisma_graphql_gen.errors import ConfigurationError

CONFIG_FILE_NAMES = (
    "generator.config.json",
    ".generator.config.json",
    "generator.config.yaml",
    "generator.config.yml",
)


class GeneratorInfo(BaseModel):
    pretty_name: str = "Prisma GraphQL Generator"
    default_output: str = "../generated"


class FileExtensions(BaseModel):
    graphql: str = ".graphql"
    resolver: str = ".resolvers.py"


class TemplateFiles(BaseModel):
    graphql_template: str = "module.graphql.jinja"
    resolver_template: str = "module_resolvers.py.jinja"
    handler_template: str = "handler.py.jinja"
    # None -> the templates bundled with the package
    templates_dir: Optional[str] = None


class FallbackFiles(BaseModel):
    schema_py: str = "schema.py"
    schema_graphql: str = "schema.graphql"


class FileSettings(BaseModel):
    extensions: FileExtensions = Field(default_factory=FileExtensions)
    templates: TemplateFiles = Field(default_factory=TemplateFiles)
    fallback_files: FallbackFiles = Field(default_factory=FallbackFiles)
    base_graphql_path: str = "src/subgraphs/base.graphql"


class FallbackMessages(BaseModel):
    basic: str = "# GraphQL generator fallback - please use specific model generation"
    with_operations: str = (
        "# GraphQL generator fallback - please use specific model generation "
        "with queries or mutations"
    )


# Placeholders error_message_template may use
MESSAGE_PLACEHOLDERS = ("operation_name", "field_name")


def message_template_error(template: str) -> Optional[str]:
    """Why *template* cannot be formatted with MESSAGE_PLACEHOLDERS, or None."""
    try:
        template.format(**{name: "" for name in MESSAGE_PLACEHOLDERS})
    except KeyError as exc:
        allowed = ", ".join(f"{{{name}}}" for name in MESSAGE_PLACEHOLDERS)
        return f"Error message template has an unknown placeholder {exc}; use {allowed}"
    except (IndexError, ValueError) as exc:
        return f"Error message template is malformed: {exc}"
    return None


class ResolverImplementation(BaseModel):
    data_source: str = 'info.context["prisma"]'
    error_message_template: str = "{operation_name} resolver not implemented"


class ContentSettings(BaseModel):
    fallback_messages: FallbackMessages = Field(default_factory=FallbackMessages)
    resolver_implementation: ResolverImplementation = Field(default_factory=ResolverImplementation)


DEFAULT_TYPE_MAPPINGS = {
    "Int": "Int",
    "String": "String",
    "Boolean": "Boolean",
    "Float": "Float",
    "DateTime": "DateTime",
    "Json": "JSON",
    "Decimal": "Float",
    "BigInt": "BigInt",
    "Bytes": "Bytes",
    "Unsupported": "String",
}


class TypeMappings(BaseModel):
    prisma_to_graphql: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TYPE_MAPPINGS))


class PluginEntry(BaseModel):
    name: str
    enabled: bool = True
    options: Dict[str, Any] = Field(default_factory=dict)


class Settings(BaseSettings):
    generator: GeneratorInfo = Field(default_factory=GeneratorInfo)
    files: FileSettings = Field(default_factory=FileSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    type_mappings: TypeMappings = Field(default_factory=TypeMappings)
    plugins: List[PluginEntry] = Field(default_factory=list)
    project_root: str = "."

    model_config = SettingsConfigDict(
        env_prefix="GENERATOR_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @property
    def base_graphql_file(self) -> Path:
        return Path(self.project_root) / self.files.base_graphql_path

    @property
    def templates_dir(self) -> Path:
        if self.files.templates.templates_dir:
            return Path(self.files.templates.templates_dir)
        return Path(__file__).parent / "templates"


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursive dict merge; override values win, nested dicts are merged."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def read_config_file(path) -> Dict[str, Any]:
    """Read a JSON or YAML config file into a plain dict."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(str(exc), source=str(path)) from exc
    elif path.suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(str(exc), source=str(path)) from exc
    else:
        raise ConfigurationError(f"Unsupported config file format: {path.name}", source=str(path))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("top-level value must be a mapping", source=str(path))
    return data


def find_config_file(directory=".") -> Optional[Path]:
    """Return the first conventional config file present in *directory*."""
    for name in CONFIG_FILE_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def validate_configuration(data: Dict[str, Any]) -> List[str]:
    """Check a (partial) user config for values the generator cannot work with."""
    errors = []

    generator = data.get("generator") or {}
    default_output = generator.get("default_output")
    if default_output is not None and not str(default_output).strip():
        errors.append("Default output path cannot be empty")

    files = data.get("files") or {}
    extensions = files.get("extensions") or {}
    for key in ("graphql", "resolver"):
        value = extensions.get(key)
        if value is not None and not str(value).startswith("."):
            errors.append(f"{key.capitalize()} file extension must start with a dot")

    templates = files.get("templates") or {}
    for key in ("graphql_template", "resolver_template", "handler_template"):
        value = templates.get(key)
        if value is not None and not str(value).strip():
            errors.append(f"Template '{key}' cannot be empty")

    content = data.get("content") or {}
    resolver_implementation = content.get("resolver_implementation") or {}
    message_template = resolver_implementation.get("error_message_template")
    if message_template is not None:
        error = message_template_error(str(message_template))
        if error:
            errors.append(error)

    return errors


def load_settings(config_path=None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build the effective settings.

    Priority: explicit *overrides* > config file > GENERATOR_* environment > defaults.
    Without *config_path* the conventional file names are searched in the cwd.
    """
    source = Path(config_path) if config_path else find_config_file()
    data = read_config_file(source) if source else {}
    if overrides:
        data = _merge(data, overrides)

    errors = validate_configuration(data)
    if errors:
        raise ConfigurationError(errors, source=str(source) if source else None)

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigurationError(str(exc), source=str(source) if source else None) from exc
