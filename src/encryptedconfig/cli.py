"""
encryptedconfig CLI
===================

Diagnostics for metatron encrypted configs: list what would be decrypted
for each namespace, or run a full resolution pass and show the keys it
contributes.
"""

import importlib
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from encryptedconfig.application import DecryptCache, Decryptor, EncryptedConfigResolver
from encryptedconfig.domain.versioning import parse_config_version
from encryptedconfig.environment.property_sources import ConfigurableEnvironment
from encryptedconfig.loaders import FileSecretLoader, ResourceSecretLoader, SecretLoader
from encryptedconfig.shared.domain.exceptions import EncryptedConfigError
from encryptedconfig.shared.infrastructure.config import Settings
from encryptedconfig.shared.infrastructure.logging import configure_logging

app = typer.Typer(
    name="encryptedconfig",
    help="Inspect and resolve metatron encrypted configuration",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _get_installed_version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("encryptedconfig-metatron")
    except PackageNotFoundError:
        from encryptedconfig import __version__

        return __version__


def _build_loaders(roots: Optional[List[Path]]) -> List[SecretLoader]:
    return [ResourceSecretLoader(roots=roots or []), FileSecretLoader()]


def _load_decryptor(spec: Optional[str]) -> Optional[Decryptor]:
    """Import ``module:attribute``; classes are instantiated without arguments."""
    if not spec:
        return None
    module_name, _, attribute = spec.partition(":")
    if not attribute:
        raise typer.BadParameter("expected 'module:attribute'", param_hint="--decryptor")
    try:
        target = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        raise typer.BadParameter(str(e), param_hint="--decryptor") from e
    return target() if isinstance(target, type) else target


def _fail(error: EncryptedConfigError) -> None:
    console.print(f"[bold red]✗ {escape(str(error))}[/bold red]")
    for key, value in error.context.items():
        console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")
    raise typer.Exit(code=1)


@app.command()
def version():
    """Show version info."""
    table = Table(show_header=False, box=None)
    table.add_row("encryptedconfig", f"[bold green]v{_get_installed_version()}[/bold green]")
    table.add_row("Python", sys.version.split()[0])
    table.add_row("Platform", sys.platform)

    console.print(Panel(table, title="[bold blue]encryptedconfig[/bold blue]", expand=False))


@app.command()
def inspect(
    namespace: Optional[List[str]] = typer.Option(
        None, "--namespace", "-n", help="Namespace to inspect (default: configured namespaces)"
    ),
    root: Optional[List[Path]] = typer.Option(None, "--root", "-r", help="Extra resource root directory"),
):
    """List encrypted configs and their policies without decrypting."""
    namespaces = namespace or Settings().namespaces
    loaders = _build_loaders(root)

    table = Table(title="Metatron secret sources")
    table.add_column("Namespace", style="cyan")
    table.add_column("Backend", style="magenta")
    table.add_column("Config", style="bold white")
    table.add_column("Policy", style="white")
    table.add_column("Version", justify="right")

    try:
        for ns in namespaces:
            for loader in loaders:
                for pair in loader.load(ns):
                    table.add_row(
                        ns or "/",
                        loader.name,
                        pair.secret.filename,
                        pair.policy.filename,
                        str(parse_config_version(pair.secret.filename)),
                    )
    except EncryptedConfigError as e:
        _fail(e)

    if not table.row_count:
        console.print("[yellow]No metatron secret sources found[/yellow]")
        return
    console.print(table)


@app.command()
def resolve(
    profile: Optional[List[str]] = typer.Option(None, "--profile", "-p", help="Active profile, in order"),
    decryptor: Optional[str] = typer.Option(
        None, "--decryptor", "-d", help="Decryptor as module:attribute (default: passthrough)"
    ),
    root: Optional[List[Path]] = typer.Option(None, "--root", "-r", help="Extra resource root directory"),
    show_values: bool = typer.Option(False, "--show-values", help="Print decrypted values"),
):
    """Run a resolution pass and show the keys each namespace contributes."""
    configure_logging()

    settings = Settings()
    environment = ConfigurableEnvironment(active_profiles=profile or settings.active_profiles)
    resolver = EncryptedConfigResolver(
        decrypt_cache=DecryptCache(_load_decryptor(decryptor)),
        loaders=_build_loaders(root),
        settings=settings,
    )

    try:
        composites = resolver.resolve(environment)
    except EncryptedConfigError as e:
        _fail(e)

    if not composites:
        console.print("[yellow]No metatron property sources were added[/yellow]")
        return

    for composite in composites:
        table = Table(title=composite.name, show_header=True)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key in composite.keys():
            value = str(composite.get(key)) if show_values else "******"
            table.add_row(key, value)
        console.print(table)


def main():
    """Entry point for setuptools."""
    app()


if __name__ == "__main__":
    app()
