import json
import logging
import sys
from pathlib import Path
from typing import Any

import rich_click as click
import yaml
from graphql import GraphQLError
from pydantic import ValidationError
from rich.markup import escape
from rich.traceback import install

from protocheck import __version__, log
from protocheck.config import ValidationSettings, load_validation_settings
from protocheck.errors import SchemaConfigurationError, UnsupportedConstraintError
from protocheck.instance import coerce_instance, load_instance
from protocheck.schema.descriptors import MessageSchema, SchemaPool
from protocheck.schema.loader import load_schema, qualified_name, resolve_graphql_files
from protocheck.schema.naming import CaseFormat
from protocheck.validation.engine import MessageValidator
from protocheck.validation.violations import ConstraintViolation, format_violations


class PathResolverOption(click.Option):
    def process_value(self, ctx: click.Context, value: Any) -> list[Path] | None:
        value = super().process_value(ctx, value)
        if not value:
            return None
        paths = set(value)
        return resolve_graphql_files(list(paths))


schema_option = click.option(
    "--schema",
    "-s",
    "schemas",
    type=click.Path(exists=True, path_type=Path),
    cls=PathResolverOption,
    required=True,
    multiple=True,
    help="The GraphQL schema file or directory containing schema files. Can be specified multiple times.",
)


def violations_as_dicts(violations: list[ConstraintViolation]) -> list[dict[str, Any]]:
    return [
        {
            "type": violation.type_name,
            "path": ".".join(violation.field_path),
            "value": violation.field_value,
            "message": violation.message.format(),
        }
        for violation in violations
    ]


def find_message_schema(pool: SchemaPool, type_name: str, package: str | None) -> MessageSchema:
    """Look a type up by full name, falling back to the name qualified with ``package``."""
    for candidate in (type_name, qualified_name(type_name, package)):
        if candidate in pool:
            return pool[candidate]
    log.error(f"Message type '{type_name}' not found in schema")
    log.hint(f"Available types: {', '.join(sorted(pool))}")
    sys.exit(1)


def load_pool_or_exit(schemas: list[Path], settings: ValidationSettings) -> SchemaPool:
    try:
        return load_schema(
            schemas,
            package=settings.package,
            accessor_case=settings.accessor_case,
            strict=settings.strict,
        )
    except SchemaConfigurationError as e:
        log.rule("Constraint Configuration Errors", style="bold red")
        for error in e.errors:
            log.error(f"- {error}")
        sys.exit(1)
    except UnsupportedConstraintError as e:
        log.error(f"Unsupported constraint: {e}")
        sys.exit(1)
    except (GraphQLError, TypeError) as e:
        log.error(f"Invalid schema: {e}")
        sys.exit(1)


@click.group(context_settings={"auto_envvar_prefix": "protocheck"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@cli.command
@schema_option
def check(schemas: list[Path]) -> None:
    """
    Check the constraint directives of a schema.
    Checks:
    - @range, @min and @max bounds
    - @pattern regular expressions
    - @requiredField expressions and @goes targets
    - constraints attached to fields of the wrong kind
    """
    pool = load_pool_or_exit(schemas, ValidationSettings(strict=True))
    log.success(f"All constraints passed! ({len(pool)} message type(s))")


@cli.command
@schema_option
@click.option("--type", "-t", "type_name", required=True, help="Message type to validate the instance against")
@click.option(
    "--instance",
    "-i",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="YAML or JSON file holding the message instance",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file containing validation settings",
)
@click.option("--package", "-p", help="Package prefix of the message type names")
@click.option(
    "--accessor-case",
    type=click.Choice([case.value for case in CaseFormat]),
    help="Case of the instance keys, derived from the schema field names",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the violations as JSON")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the violations as JSON to this file",
)
def validate(
    schemas: list[Path],
    type_name: str,
    instance: Path,
    config_path: Path | None,
    package: str | None,
    accessor_case: str | None,
    as_json: bool,
    output: Path | None,
) -> None:
    """Validate a message instance against the constraints of its type."""
    try:
        settings = load_validation_settings(config_path)
    except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
        log.error(f"Invalid settings file: {e}")
        sys.exit(1)

    overrides: dict[str, Any] = {}
    if package:
        overrides["package"] = package
    if accessor_case:
        overrides["accessor_case"] = CaseFormat(accessor_case)
    settings = settings.model_copy(update=overrides)

    pool = load_pool_or_exit(schemas, settings)
    schema = find_message_schema(pool, type_name, settings.package)

    try:
        data = coerce_instance(schema, load_instance(instance))
    except (OSError, yaml.YAMLError, TypeError) as e:
        log.error(f"Invalid instance file: {e}")
        sys.exit(1)

    violations = MessageValidator(settings).validate(schema, data)
    report = violations_as_dicts(violations)

    if output:
        with open(output, "w", encoding="utf-8") as output_file:
            json.dump(report, output_file, indent=2)
        log.info(f"Wrote {len(report)} violation(s) to {output}")

    if as_json:
        log.print_json(report)
    elif violations:
        log.rule("Constraint Violations", style="bold red")
        log.print(escape(format_violations(violations)))
    else:
        log.success(f"{schema.full_name} instance is valid")

    sys.exit(1 if violations else 0)


if __name__ == "__main__":
    cli()
