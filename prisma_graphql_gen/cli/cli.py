from datetime import date

import click
import yaml
from rich import pretty
from rich.console import Console
from rich.table import Table

from prisma_graphql_gen.api.builders import available_operations
from prisma_graphql_gen.api.gen_logging import configure_gen_logging
from prisma_graphql_gen.api.generator import generate_module
from prisma_graphql_gen.config import load_settings
from prisma_graphql_gen.datamodel import load_data_model
from prisma_graphql_gen.errors import GeneratorError
from prisma_graphql_gen.plugins import create_default_manager
from prisma_graphql_gen.request import (
    GenerationRequest,
    parse_custom_plurals,
    read_script_options,
    split_list,
)

pretty.install()
console = Console()


def _stamp() -> str:
    return f"[{date.today().strftime('%Y-%m-%d')}]"


def build_request(model, module_path, queries, mutations, plurals, options_file=None):
    """CLI options win; anything left unset comes from a script options file, if present."""
    request = GenerationRequest(
        entity_name=model,
        module_path=module_path,
        queries=split_list(queries),
        mutations=split_list(mutations),
        custom_plurals=parse_custom_plurals(plurals),
    )
    stored = read_script_options(options_file) if options_file else None
    if stored is None:
        return request
    return GenerationRequest(
        entity_name=request.entity_name or stored.entity_name,
        module_path=request.module_path or stored.module_path,
        queries=request.queries or stored.queries,
        mutations=request.mutations or stored.mutations,
        custom_plurals={**stored.custom_plurals, **request.custom_plurals},
    )


@click.group()
@click.pass_context
def cli(context):
    context.ensure_object(dict)


@cli.command("generate", help="Generate or update the GraphQL module of one Prisma model.")
@click.pass_context
@click.argument("dmmf_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--model", envvar="GENERATOR_MODEL", help="Prisma model name, e.g. Employee.")
@click.option("--module-path", envvar="GENERATOR_MODULE_PATH", help="Directory of the GraphQL module.")
@click.option("--queries", envvar="GENERATOR_QUERIES", default="", help="Comma separated, e.g. findMany,count.")
@click.option("--mutations", envvar="GENERATOR_MUTATIONS", default="", help="Comma separated, e.g. create,update.")
@click.option("--plural", "plurals", envvar="GENERATOR_CUSTOM_PLURALS", default="",
              help="Custom plurals, e.g. person:people,cactus:cacti.")
@click.option("--options-file", type=click.Path(dir_okay=False), default=None,
              help="script-options.json supplying values not given on the command line.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Generator config file (JSON or YAML).")
@click.option("-v", "--verbose", is_flag=True, help="Show closure and merge detail.")
@click.option("-q", "--quiet", is_flag=True, help="Only warnings and errors.")
def generate(context, dmmf_path, model, module_path, queries, mutations, plurals,
             options_file, config_path, verbose, quiet):
    configure_gen_logging(verbose=verbose, quiet=quiet)
    try:
        settings = load_settings(config_path)
        data_model = load_data_model(dmmf_path)
        request = build_request(model, module_path, queries, mutations, plurals, options_file)
        result = generate_module(request, data_model, settings, create_default_manager(settings))
    except (GeneratorError, OSError, ValueError) as e:
        console.print(f"{_stamp()} Generate failed with error(s): {e}", style="red")
        context.exit(1)
    else:
        if result.halted:
            console.print(f"{_stamp()} Generation stopped by a plugin at '{result.halted_at}'", style="yellow")
            if result.response is not None:
                console.print(result.response)
        elif not result.artifacts:
            console.print(f"{_stamp()} Nothing to do: {request.entity_name} is up to date", style="green")
        for artifact in result.artifacts:
            action = "updated" if artifact.merged else "written"
            console.print(f"{_stamp()} {artifact.kind} {action}: {artifact.path}", style="green")
        context.exit(0)


@cli.command("models", help="List the models of a DMMF document and the operations each supports.")
@click.pass_context
@click.argument("dmmf_path", type=click.Path(exists=True, dir_okay=False))
def models_cmd(context, dmmf_path):
    try:
        data_model = load_data_model(dmmf_path)
    except (OSError, ValueError) as e:
        console.print(f"{_stamp()} Could not read DMMF: {e}", style="red")
        context.exit(1)

    table = Table(title=f"Models in {dmmf_path}")
    table.add_column("Model", style="bold")
    table.add_column("Fields")
    table.add_column("Queries")
    table.add_column("Mutations")
    for name in data_model.entity_names():
        available = available_operations(name, data_model)
        table.add_row(
            name,
            str(len(data_model.get_entity(name).fields)),
            ", ".join(available["Query"]) or "-",
            ", ".join(available["Mutation"]) or "-",
        )
    console.print(table)
    context.exit(0)


@cli.command("show-config", help="Print the effective generator configuration.")
@click.pass_context
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None)
def show_config(context, config_path):
    try:
        settings = load_settings(config_path)
    except GeneratorError as e:
        console.print(f"{_stamp()} {e}", style="red")
        context.exit(1)
    console.print(yaml.safe_dump(settings.model_dump(), sort_keys=False))
    context.exit(0)


def main():
    cli(prog_name="pgg")
