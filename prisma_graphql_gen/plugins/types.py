"""
Plugin contract: hook names, per-hook payloads and the plugin record.

Every hook carries its own payload class. Observers receive the current
payload plus their PluginConfig and return either None (keep the payload)
or a payload of the same class, which replaces it for later observers and
for the pipeline itself. Setting `proceed=False` stops the generation run;
`response` is handed back to the caller in that case.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class HookName(str, Enum):
    ON_GENERATE_START = "on_generate_start"
    ON_MODULE_NOT_FOUND = "on_module_not_found"
    ON_CONFIG_PARSED = "on_config_parsed"
    ON_MODEL_FOUND = "on_model_found"
    ON_OPTIONS_CREATED = "on_options_created"
    ON_PREPARED_OPERATION = "on_prepared_operation"
    ON_PREPARED_TYPE_FIELD = "on_prepared_type_field"
    ON_PREPARED_TYPE = "on_prepared_type"
    ON_TYPES_GENERATED = "on_types_generated"
    ON_TEMPLATE_DATA_PREPARED = "on_template_data_prepared"
    ON_COMPILE_TEMPLATE = "on_compile_template"
    ON_UPDATE_FILE = "on_update_file"
    ON_SDL_GENERATED = "on_sdl_generated"
    ON_RESOLVER_GENERATED = "on_resolver_generated"
    ON_FILE_WRITE = "on_file_write"
    ON_FILE_WRITTEN = "on_file_written"
    ON_GENERATION_FINISHED = "on_generation_finished"
    ON_ERROR = "on_error"


@dataclass(kw_only=True)
class HookPayload:
    timestamp: float = field(default_factory=time.time)
    proceed: bool = True
    response: Any = None


@dataclass(kw_only=True)
class GenerateStartPayload(HookPayload):
    request: Any


@dataclass(kw_only=True)
class ModuleNotFoundPayload(HookPayload):
    request: Any
    fallback_dir: str


@dataclass(kw_only=True)
class ConfigParsedPayload(HookPayload):
    settings: Any
    request: Any


@dataclass(kw_only=True)
class ModelFoundPayload(HookPayload):
    entity: Any


@dataclass(kw_only=True)
class OptionsCreatedPayload(HookPayload):
    options: Any


@dataclass(kw_only=True)
class PreparedOperationPayload(HookPayload):
    operation: Any


@dataclass(kw_only=True)
class PreparedTypeFieldPayload(HookPayload):
    type_name: str
    variant: str
    field: Any
    # False drops the field from its declaration
    include: bool = True


@dataclass(kw_only=True)
class PreparedTypePayload(HookPayload):
    declaration: Any


@dataclass(kw_only=True)
class TypesGeneratedPayload(HookPayload):
    types: Any


@dataclass(kw_only=True)
class TemplateDataPreparedPayload(HookPayload):
    template: str
    data: Dict[str, Any]


@dataclass(kw_only=True)
class CompileTemplatePayload(HookPayload):
    path: str
    template: str


@dataclass(kw_only=True)
class UpdateFilePayload(HookPayload):
    path: str
    existing: str


@dataclass(kw_only=True)
class SdlGeneratedPayload(HookPayload):
    path: str
    content: str
    merged: bool = False


@dataclass(kw_only=True)
class ResolverGeneratedPayload(HookPayload):
    path: str
    content: str
    merged: bool = False


@dataclass(kw_only=True)
class FileWritePayload(HookPayload):
    path: str
    content: str


@dataclass(kw_only=True)
class FileWrittenPayload(HookPayload):
    path: str


@dataclass(kw_only=True)
class GenerationFinishedPayload(HookPayload):
    entity_name: Optional[str]
    artifacts: List[Any] = field(default_factory=list)


@dataclass(kw_only=True)
class ErrorPayload(HookPayload):
    error: BaseException
    hook: Optional[str] = None
    plugin_name: Optional[str] = None


HOOK_PAYLOADS = {
    HookName.ON_GENERATE_START: GenerateStartPayload,
    HookName.ON_MODULE_NOT_FOUND: ModuleNotFoundPayload,
    HookName.ON_CONFIG_PARSED: ConfigParsedPayload,
    HookName.ON_MODEL_FOUND: ModelFoundPayload,
    HookName.ON_OPTIONS_CREATED: OptionsCreatedPayload,
    HookName.ON_PREPARED_OPERATION: PreparedOperationPayload,
    HookName.ON_PREPARED_TYPE_FIELD: PreparedTypeFieldPayload,
    HookName.ON_PREPARED_TYPE: PreparedTypePayload,
    HookName.ON_TYPES_GENERATED: TypesGeneratedPayload,
    HookName.ON_TEMPLATE_DATA_PREPARED: TemplateDataPreparedPayload,
    HookName.ON_COMPILE_TEMPLATE: CompileTemplatePayload,
    HookName.ON_UPDATE_FILE: UpdateFilePayload,
    HookName.ON_SDL_GENERATED: SdlGeneratedPayload,
    HookName.ON_RESOLVER_GENERATED: ResolverGeneratedPayload,
    HookName.ON_FILE_WRITE: FileWritePayload,
    HookName.ON_FILE_WRITTEN: FileWrittenPayload,
    HookName.ON_GENERATION_FINISHED: GenerationFinishedPayload,
    HookName.ON_ERROR: ErrorPayload,
}


@dataclass
class PluginConfig:
    enabled: bool = True
    options: Dict[str, Any] = field(default_factory=dict)


HookHandler = Callable[[HookPayload, PluginConfig], Optional[HookPayload]]


@dataclass
class Plugin:
    """
    A named set of hook handlers.

    `hooks` maps a HookName (or its string value) to a handler
    `handler(payload, config) -> payload | None`. `initialize(config)` and
    `cleanup()` run once per generation run.
    """

    name: str
    version: str = "1.0.0"
    description: str = ""
    hooks: Dict[HookName, HookHandler] = field(default_factory=dict)
    initialize: Optional[Callable[[PluginConfig], None]] = None
    cleanup: Optional[Callable[[], None]] = None

    def __post_init__(self):
        self.hooks = {HookName(name): handler for name, handler in self.hooks.items()}
