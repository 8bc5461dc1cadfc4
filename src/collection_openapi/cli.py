"""CLI entry point for collection-openapi."""

import json
import logging
from pathlib import Path

import click
import yaml

from collection_openapi.collection.loader import load_collection
from collection_openapi.config import (
    DEFAULT_API_KEY_HEADER,
    DEFAULT_OAUTH_AUTHORIZATION_URL,
    ExportOptions,
)
from collection_openapi.errors import CollectionLoadError
from collection_openapi.openapi.assembler import DocumentAssembler
from collection_openapi.openapi.validator import validate_document


class _NoAliasDumper(yaml.SafeDumper):
    """Write repeated example objects in full instead of as YAML anchors."""

    def ignore_aliases(self, data):
        return True


def _resolve_format(output: Path, fmt: str) -> str:
    if fmt == "auto":
        return "yaml" if output.suffix.lower() in (".yaml", ".yml") else "json"
    return fmt


def _dump(document: dict, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.dump(document, Dumper=_NoAliasDumper, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Collection OpenAPI — export API request collections as OpenAPI 3.1."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("collection_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file path for the OpenAPI document.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
@click.option("--title", default=None, help="Document title (defaults to the collection name).")
@click.option("--version", "doc_version", default="1.0.0", envvar="COLLECTION_OPENAPI_VERSION", help="Document version.")
@click.option("--oauth-url", default=DEFAULT_OAUTH_AUTHORIZATION_URL, envvar="COLLECTION_OPENAPI_OAUTH_URL", help="Fallback OAuth2 authorization URL.")
@click.option("--api-key-header", default=DEFAULT_API_KEY_HEADER, envvar="COLLECTION_OPENAPI_API_KEY_HEADER", help="Fallback API key header name.")
@click.option("--max-depth", default=64, type=click.IntRange(min=1), help="Maximum nesting depth for inferred schemas.")
@click.option("--strict", is_flag=True, help="Exit with an error if any request was skipped.")
def export(
    collection_path: Path,
    output: Path,
    fmt: str,
    title: str | None,
    doc_version: str,
    oauth_url: str,
    api_key_header: str,
    max_depth: int,
    strict: bool,
):
    """Export a collection file as an OpenAPI document."""
    click.echo(f"Loading {collection_path}...")
    try:
        source = load_collection(collection_path)
    except CollectionLoadError as e:
        raise click.ClickException(str(e)) from e

    options = ExportOptions(
        title=title,
        version=doc_version,
        oauth_authorization_url=oauth_url,
        api_key_header=api_key_header,
        max_schema_depth=max_depth,
    )
    assembler = DocumentAssembler(options)
    document = assembler.assemble(source)

    fmt = _resolve_format(output, fmt)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_dump(document, fmt), encoding="utf-8")

    operations = sum(len(methods) for methods in document["paths"].values())
    omissions = assembler.context.omissions
    click.echo(f"Exported {operations} operations across {len(document['paths'])} paths.")
    click.echo(
        f"  {len(document['components']['schemas'])} schemas, "
        f"{len(document['servers'])} servers, {len(omissions)} requests skipped"
    )
    for omitted in omissions:
        click.echo(f"  Skipped '{omitted.request_name}': {omitted.omitted_reason}")
    click.echo(f"OpenAPI document saved to {output}")

    if strict and omissions:
        raise click.ClickException(f"{len(omissions)} requests were skipped")


@main.command()
@click.argument("document_path", type=click.Path(exists=True, path_type=Path))
def validate(document_path: Path):
    """Check an exported OpenAPI document for dangling references and missing parameters."""
    try:
        document = yaml.safe_load(document_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot parse {document_path}: {e}") from e
    if not isinstance(document, dict):
        raise click.ClickException(f"{document_path} is not an OpenAPI document")

    errors = validate_document(document)
    if errors:
        for location, message in errors.items():
            click.echo(f"  {location}: {message}")
        raise click.ClickException(f"{len(errors)} problems found")
    click.echo(f"{document_path} is valid.")
