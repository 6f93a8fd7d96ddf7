#!/usr/bin/env python3
"""Record Editor - Entry point."""
import logging

import click
from colorama import Fore, Style, init

from config import app_config
from record_editor.api.record_client import RecordClient
from record_editor.cli.interactive import InteractiveCLI
from record_editor.exceptions import TransportError
from record_editor.introspection.rule_inferencer import RuleCache
from record_editor.sync.view_synchronizer import ViewSynchronizer

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}Record Editor{Fore.CYAN}                        ║")
    print(f"{Fore.CYAN}║   {Fore.WHITE}Schema-less collection editing{Fore.CYAN}       ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


def _load(collection: str) -> ViewSynchronizer:
    sync = ViewSynchronizer(RecordClient(app_config.api), warn_on_blur=app_config.options.warn_on_blur)
    if not sync.open(collection):
        raise click.ClickException(sync.notice or f"Could not load {collection}")
    return sync


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Record Editor - Browse and edit remote record collections."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def collections():
    """List known collections."""
    for name in app_config.endpoints:
        click.echo(name)


@cli.command()
@click.argument("collection")
def show(collection):
    """Print the list view of a collection."""
    sync = _load(collection)

    click.echo(f"{Fore.CYAN}{sync.title or collection}")
    if sync.description:
        click.echo(sync.description)

    click.echo(" | ".join(c.label for c in sync.columns))
    for row in sync.rows():
        click.echo(" | ".join(row.values))


@cli.command()
@click.argument("collection")
def rules(collection):
    """Print the field rules inferred for a collection."""
    sync = _load(collection)

    for column in sync.columns:
        rule = sync.rule_for(column.key)
        flags = []
        if rule.read_only:
            flags.append("read-only")
        if rule.required:
            flags.append("required")
        options = f" [{', '.join(rule.options)}]" if rule.options else ""
        click.echo(f"{column.key:20s} {rule.type.value:9s} {' '.join(flags)}{options}")


@cli.command()
@click.argument("collection", required=False)
def edit(collection):
    """Open the interactive editor on a collection."""
    print_banner()

    if not collection:
        collection = click.prompt(
            "Collection",
            type=click.Choice(app_config.endpoints),
            default=app_config.endpoints[0],
        )

    cli_tool = InteractiveCLI(RecordClient(app_config.api), RuleCache())
    cli_tool.run(collection)


@cli.command()
def banner():
    """Print the API banner message."""
    try:
        click.echo(RecordClient(app_config.api).fetch_banner())
    except TransportError as e:
        raise click.ClickException(str(e))


@cli.command()
def config_api():
    """Configure record API access."""
    print_banner()

    click.echo(f"{Fore.YELLOW}Record API Configuration")
    click.echo(f"{Fore.YELLOW}{'=' * 30}")

    base_url = click.prompt("API Base URL", default=app_config.api.base_url)
    api_key = click.prompt("API Key (token)", hide_input=True, default="")

    app_config.api.base_url = base_url
    app_config.api.api_key = api_key

    click.echo(f"{Fore.GREEN}✅ Configuration saved!")


if __name__ == "__main__":
    cli()
