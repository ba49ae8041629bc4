"""
Main entry point for GraphQL module generation.

One call generates (or incrementally updates) the SDL module and the
resolver module of a single Prisma model:

    [PHASE 1] request checks, fallback files for incomplete requests
    [PHASE 2] model lookup and operation materialization
    [PHASE 3] type closure and enum registration in the base schema
    [PHASE 4] SDL module: render fresh or merge into the existing file
    [PHASE 5] resolver module: render fresh or merge into the existing file

Every intermediate value passes through the plugin hooks; every file write
goes through on_file_write / on_file_written.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from prisma_graphql_gen.config import Settings, message_template_error
from prisma_graphql_gen.errors import (
    ConfigurationError,
    EntityNotFoundError,
    GenerationHalted,
    PluginError,
)
from prisma_graphql_gen.plugins.manager import PluginManager
from prisma_graphql_gen.plugins.types import (
    CompileTemplatePayload,
    ConfigParsedPayload,
    ErrorPayload,
    FileWritePayload,
    FileWrittenPayload,
    GenerateStartPayload,
    GenerationFinishedPayload,
    HookName,
    ModelFoundPayload,
    ModuleNotFoundPayload,
    OptionsCreatedPayload,
    ResolverGeneratedPayload,
    SdlGeneratedPayload,
    TemplateDataPreparedPayload,
    TypesGeneratedPayload,
    UpdateFilePayload,
)
from .builders import entity_names, materialize_operations, register_enums, resolve_types
from .extractors import prepare_entity_fields
from .gen_logging import get_logger
from .generators import TemplateRenderer, merge_resolvers, merge_schema, render_handler
from .utils.files import read_existing_file, write_file_safely

logger = get_logger(__name__)

SCHEMA = "schema"
RESOLVERS = "resolvers"
ENUMS = "enums"
FALLBACK = "fallback"


@dataclass
class GeneratedArtifact:
    path: str
    content: str
    kind: str
    merged: bool = False


@dataclass
class GenerationOptions:
    """Resolved per-run options: the request plus the artifact paths derived from it."""

    entity_name: str
    module_path: str
    queries: List[str]
    mutations: List[str]
    custom_plurals: Dict[str, str]
    schema_path: str
    resolver_path: str


@dataclass
class GenerationResult:
    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    halted: bool = False
    halted_at: Optional[str] = None
    response: Any = None

    def get(self, kind) -> Optional[GeneratedArtifact]:
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact
        return None


def _resolve(project_root, path) -> Path:
    path = Path(path)
    return path if path.is_absolute() else Path(project_root) / path


class _GenerationRun:
    """State of one generate_module() call."""

    def __init__(self, request, data_model, settings: Settings, plugins: PluginManager):
        self.request = request
        self.data_model = data_model
        self.settings = settings
        self.plugins = plugins
        self.artifacts: List[GeneratedArtifact] = []
        # pipeline phase, reported to on_error outside of hook dispatch
        self.phase = "request"
        self.stage = self.phase

    def enter(self, phase):
        self.phase = self.stage = phase

    def dispatch(self, hook, payload):
        self.stage = HookName(hook).value
        result = self.plugins.dispatch(hook, payload)
        self.stage = self.phase
        return result

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def write(self, path, content, kind, merged=False):
        payload = self.dispatch(
            HookName.ON_FILE_WRITE, FileWritePayload(path=str(path), content=content),
        )
        write_file_safely(payload.path, payload.content)
        self.artifacts.append(
            GeneratedArtifact(path=payload.path, content=payload.content, kind=kind, merged=merged)
        )
        logger.info(f"  [OK] {payload.path}")
        self.dispatch(HookName.ON_FILE_WRITTEN, FileWrittenPayload(path=payload.path))

    def write_fallback(self, message):
        fallback_dir = _resolve(self.settings.project_root, self.settings.generator.default_output)
        names = self.settings.files.fallback_files
        for name in (names.schema_py, names.schema_graphql):
            self.write(fallback_dir / name, message + "\n", FALLBACK)

    # ------------------------------------------------------------------ #
    # Pipeline
    # ------------------------------------------------------------------ #
    def run(self):
        request = self.dispatch(
            HookName.ON_GENERATE_START, GenerateStartPayload(request=self.request),
        ).request
        messages = self.settings.content.fallback_messages

        logger.info("[PHASE 1] Checking generation request...")
        if not request.is_complete:
            logger.error("Missing model name and/or module path; no model-specific files will be generated.")
            self.dispatch(
                HookName.ON_MODULE_NOT_FOUND,
                ModuleNotFoundPayload(
                    request=request, fallback_dir=self.settings.generator.default_output,
                ),
            )
            self.write_fallback(messages.basic)
            return
        if not request.has_operations:
            logger.warning(f"No queries or mutations requested for {request.entity_name}.")
            self.write_fallback(messages.with_operations)
            return

        payload = self.dispatch(
            HookName.ON_CONFIG_PARSED, ConfigParsedPayload(settings=self.settings, request=request),
        )
        self.settings, request = payload.settings, payload.request

        self.enter("config")
        template_error = message_template_error(
            self.settings.content.resolver_implementation.error_message_template
        )
        if template_error:
            raise ConfigurationError(template_error)

        logger.info(f"[PHASE 2] Preparing model {request.entity_name}...")
        self.enter("model")
        entity = self.data_model.get_entity(request.entity_name)
        if entity is None:
            raise EntityNotFoundError(request.entity_name)
        entity = self.dispatch(HookName.ON_MODEL_FOUND, ModelFoundPayload(entity=entity)).entity

        module_dir = _resolve(self.settings.project_root, request.module_path)
        extensions = self.settings.files.extensions
        options = GenerationOptions(
            entity_name=entity.name,
            module_path=str(module_dir),
            queries=list(request.queries),
            mutations=list(request.mutations),
            custom_plurals=dict(request.custom_plurals),
            schema_path=str(module_dir / f"{entity.name}{extensions.graphql}"),
            resolver_path=str(module_dir / f"{entity.name}{extensions.resolver}"),
        )
        options = self.dispatch(
            HookName.ON_OPTIONS_CREATED, OptionsCreatedPayload(options=options),
        ).options

        self.enter("operations")
        type_mappings = self.settings.type_mappings.prisma_to_graphql
        operations = materialize_operations(
            entity.name, options.queries, options.mutations, self.data_model,
            type_mappings=type_mappings,
            custom_plurals=options.custom_plurals,
            plugins=self.plugins,
        )

        logger.info("[PHASE 3] Resolving type closure...")
        self.enter("type_closure")
        types = resolve_types(
            entity, operations.all, self.data_model,
            type_mappings=type_mappings, plugins=self.plugins,
        )
        types = self.dispatch(HookName.ON_TYPES_GENERATED, TypesGeneratedPayload(types=types)).types
        register_enums(
            types.enums, self.data_model, self.settings.base_graphql_file,
            write=lambda path, content: self.write(
                path, content, ENUMS, merged=Path(path).is_file(),
            ),
        )

        renderer = TemplateRenderer(self.settings.templates_dir)
        names = entity_names(entity.name, options.custom_plurals)

        logger.info("[PHASE 4] Generating SDL module...")
        self.enter("schema")
        self.schema_artifact(renderer, entity, names, options, operations, types)

        logger.info("[PHASE 5] Generating resolver module...")
        self.enter("resolvers")
        self.resolver_artifact(renderer, entity, names, options, operations)

        self.dispatch(
            HookName.ON_GENERATION_FINISHED,
            GenerationFinishedPayload(entity_name=entity.name, artifacts=list(self.artifacts)),
        )
        logger.info(f"Generated GraphQL module for {entity.name}")

    def compile_template(self, renderer, path, template, data):
        template = self.dispatch(
            HookName.ON_COMPILE_TEMPLATE, CompileTemplatePayload(path=path, template=template),
        ).template
        data = self.dispatch(
            HookName.ON_TEMPLATE_DATA_PREPARED,
            TemplateDataPreparedPayload(template=template, data=data),
        ).data
        return renderer.render(template, data)

    def schema_artifact(self, renderer, entity, names, options, operations, types):
        path = options.schema_path
        existing = read_existing_file(path)

        if existing is not None:
            text = self.dispatch(
                HookName.ON_UPDATE_FILE, UpdateFilePayload(path=path, existing=existing),
            ).existing
            content = merge_schema(
                text, entity.name, types, operations.queries, operations.mutations, path=path,
            )
        else:
            data = {
                "model_name": entity.name,
                "model_name_lower": names.lower,
                "model_name_singular": names.singular,
                "model_name_plural": names.plural,
                "fields": prepare_entity_fields(
                    entity, self.settings.type_mappings.prisma_to_graphql,
                ),
                "queries": operations.queries,
                "mutations": operations.mutations,
                "input_types": types.inputs,
                "output_types": types.without_output(entity.name).outputs,
            }
            content = self.compile_template(
                renderer, path, self.settings.files.templates.graphql_template, data,
            )

        merged = existing is not None
        content = self.dispatch(
            HookName.ON_SDL_GENERATED,
            SdlGeneratedPayload(path=path, content=content, merged=merged),
        ).content
        if content == existing:
            return
        self.write(path, content, SCHEMA, merged=merged)

    def resolver_artifact(self, renderer, entity, names, options, operations):
        path = options.resolver_path
        existing = read_existing_file(path)
        templates = self.settings.files.templates
        resolver_settings = self.settings.content.resolver_implementation
        delegate = entity.name.lower()

        def handler(operation):
            return render_handler(
                renderer, templates.handler_template, operation, delegate, resolver_settings,
            )

        if existing is not None:
            text = self.dispatch(
                HookName.ON_UPDATE_FILE, UpdateFilePayload(path=path, existing=existing),
            ).existing
            content = merge_resolvers(
                text, operations.queries, operations.mutations, handler, path=path,
            )
        else:
            data = {
                "model_name": entity.name,
                "model_name_lower": names.lower,
                "delegate": delegate,
                "query_handlers": [handler(operation) for operation in operations.queries],
                "mutation_handlers": [handler(operation) for operation in operations.mutations],
            }
            content = self.compile_template(renderer, path, templates.resolver_template, data)

        merged = existing is not None
        content = self.dispatch(
            HookName.ON_RESOLVER_GENERATED,
            ResolverGeneratedPayload(path=path, content=content, merged=merged),
        ).content
        if content == existing:
            return
        self.write(path, content, RESOLVERS, merged=merged)


def generate_module(request, data_model, settings: Optional[Settings] = None,
                    plugins: Optional[PluginManager] = None) -> GenerationResult:
    """
    Generate or update the GraphQL module of one Prisma model.

    Args:
        request: GenerationRequest (model name, module path, queries, mutations, plurals)
        data_model: DataModel loaded from the DMMF
        settings: generator Settings; defaults when omitted
        plugins: PluginManager for this run; an empty one when omitted

    Returns:
        GenerationResult listing the files written. When a plugin stops the
        run, `halted` is set and `response` carries the plugin's response.

    Errors other than PluginError are reported to the on_error hook and
    re-raised.
    """
    settings = settings or Settings()
    plugins = plugins or PluginManager()
    run = _GenerationRun(request, data_model, settings, plugins)

    plugins.initialize_all()
    try:
        run.run()
    except GenerationHalted as halt:
        logger.info(f"Generation stopped by a plugin at '{halt.hook}'")
        return GenerationResult(
            artifacts=run.artifacts, halted=True, halted_at=halt.hook,
            response=halt.payload.response,
        )
    except PluginError:
        raise
    except Exception as exc:
        logger.error(f"Generation failed during '{run.stage}': {exc}")
        try:
            plugins.execute(HookName.ON_ERROR, ErrorPayload(error=exc, hook=run.stage))
        except PluginError as nested:
            logger.error(f"Error hook failed: {nested}")
        raise
    finally:
        plugins.cleanup_all()

    return GenerationResult(artifacts=run.artifacts)
