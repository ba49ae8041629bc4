"""
The operation request handed to the generator by its front end.

A request names one entity, the directory of its GraphQL module and the
query/mutation kinds to support. It can come from the CLI, from the
GENERATOR_* environment of a Prisma generator run, or from a
`script-options.json` file written by an interactive front end.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from prisma_graphql_gen.api.gen_logging import get_logger

logger = get_logger(__name__)

SCRIPT_OPTIONS_FILES = ("script-options.json", ".script-options.json")


@dataclass
class GenerationRequest:
    entity_name: Optional[str] = None
    module_path: Optional[str] = None
    queries: List[str] = field(default_factory=list)
    mutations: List[str] = field(default_factory=list)
    custom_plurals: Dict[str, str] = field(default_factory=dict)

    @property
    def operations(self) -> List[str]:
        return [*self.queries, *self.mutations]

    @property
    def is_complete(self) -> bool:
        return bool(self.entity_name and self.module_path)

    @property
    def has_operations(self) -> bool:
        return bool(self.operations)


def split_list(value: Optional[str]) -> List[str]:
    """'findMany, count,' -> ['findMany', 'count']"""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_custom_plurals(value: Optional[str]) -> Dict[str, str]:
    """
    Parse "singular1:plural1,singular2:plural2".

    Keys are lower-cased; malformed pairs are skipped.
    """
    plurals = {}
    for pair in split_list(value):
        singular, _, plural = pair.partition(":")
        singular, plural = singular.strip(), plural.strip()
        if singular and plural:
            plurals[singular.lower()] = plural
        else:
            logger.warning(f"[REQUEST] Ignoring malformed custom plural '{pair}'")
    return plurals


def request_from_env(environ: Optional[Mapping[str, str]] = None) -> GenerationRequest:
    """Build a request from the GENERATOR_* variables of a generator run."""
    env = os.environ if environ is None else environ
    return GenerationRequest(
        entity_name=(env.get("GENERATOR_MODEL") or "").strip() or None,
        module_path=(env.get("GENERATOR_MODULE_PATH") or "").strip() or None,
        queries=split_list(env.get("GENERATOR_QUERIES")),
        mutations=split_list(env.get("GENERATOR_MUTATIONS")),
        custom_plurals=parse_custom_plurals(env.get("GENERATOR_CUSTOM_PLURALS")),
    )


def read_script_options(*extra_paths) -> Optional[GenerationRequest]:
    """
    Read the first existing script options file.

    The file uses the front end's camelCase keys: modelName, modulePath,
    queries, mutations, customPlurals. Returns None when no file exists.
    """
    for candidate in (*SCRIPT_OPTIONS_FILES, *extra_paths):
        if not candidate:
            continue
        path = Path(candidate)
        if not path.is_file():
            continue
        data = json.loads(path.read_text(encoding="utf-8"))
        logger.debug(f"[REQUEST] Loaded script options from {path}")
        return GenerationRequest(
            entity_name=data.get("modelName"),
            module_path=data.get("modulePath"),
            queries=list(data.get("queries") or []),
            mutations=list(data.get("mutations") or []),
            custom_plurals={
                key.lower(): value for key, value in (data.get("customPlurals") or {}).items()
            },
        )
    return None
