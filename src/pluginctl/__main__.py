"""CLI entry point: click commands + Rich output."""

from __future__ import annotations

import functools
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .commands import init_plugin_system
from .core.config import load_config
from .core.errors import PluginError
from .core.utils import short_path
from .plugins import LifecycleController, PluginType
from .plugins.models import PARTITION_ORDER

console = Console()
err_console = Console(stderr=True)

TYPE_CHOICE = click.Choice([t.value for t in PluginType], case_sensitive=False)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _reports_errors(f):
    """Turn a PluginError into `error: ...` and exit status 1."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except PluginError as e:
            console.print(f"error: {escape(e.message)}", style="bold")
            sys.exit(1)

    return wrapper


def _name_argument(f):
    f = click.option("--name", "-n", "name_opt", default=None, help="Plugin name")(f)
    return click.argument("name", required=False)(f)


def _resolve_name(name: str | None, name_opt: str | None) -> str:
    resolved = name or name_opt
    if not resolved:
        raise click.UsageError("plugin name required")
    return resolved


def _controller(ctx: click.Context) -> LifecycleController:
    return LifecycleController(ctx.obj)


# ── Group ───────────────────────────────────────────────────────────


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--home",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding settings.json, the activation file and plugins/",
)
@click.option(
    "--plugins-dir", type=click.Path(file_okay=False), default=None, help="Plugins root directory"
)
@click.option("--verbose", is_flag=True, help="Debug output")
@click.pass_context
def cli(ctx: click.Context, home: str | None, plugins_dir: str | None, verbose: bool):
    """Plugin manager: scaffold, install, enable and remove plugins."""
    _setup_logging(verbose)
    ctx.obj = load_config(home=home, plugins_dir=plugins_dir, verbose=verbose)


# ── System ──────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
@_reports_errors
def init(ctx: click.Context):
    """Initialize the plugin system."""
    created = init_plugin_system(ctx.obj)
    for path in created:
        console.print(f"  created [bold]{escape(str(path))}[/bold]")
    console.print("plugin system initialized", style="green")


@cli.command("list")
@click.pass_context
@_reports_errors
def list_cmd(ctx: click.Context):
    """List installed plugins by type."""
    plugins = _controller(ctx).list_plugins()
    if not plugins:
        console.print("no plugins installed", style="dim")
        console.print("use `pluginctl create <name>` to add one", style="dim")
        return
    for plugin_type in PARTITION_ORDER:
        group = [p for p in plugins if p.type is plugin_type]
        if not group:
            continue
        console.print(f"[bold]{plugin_type.partition}[/bold]")
        for p in group:
            status = "[green]on[/green]" if p.active else "[dim]off[/dim]"
            ver = f"v{escape(p.manifest.version)}" if p.manifest else ""
            desc = escape(p.manifest.description) if p.manifest else ""
            err = f" [red]({escape(p.error)})[/red]" if p.error else ""
            console.print(
                f"  [bold]{escape(p.name):<20}[/bold] {ver:<10} {status}{err}  [dim]{desc}[/dim]"
            )


@cli.command()
@click.pass_context
@_reports_errors
def status(ctx: click.Context):
    """Show plugin system status."""
    config = ctx.obj
    report = _controller(ctx).status()
    console.print(f"  plugins root    {escape(short_path(config.plugins_root))}")
    console.print(f"  active plugins  {len(report.active)}")
    console.print(f"  total plugins   {report.installed}")
    console.print()
    if not report.active:
        console.print("no active plugins", style="dim")
    for p in report.active:
        ver = escape(p.manifest.version) if p.manifest else "unknown"
        console.print(f"  [bold]{escape(p.name):<20}[/bold] {ver:<10} {p.type.value}")
    for name in report.stale:
        console.print(f"  [yellow]{escape(name):<20} not installed[/yellow]")


# ── Lifecycle ───────────────────────────────────────────────────────


def _creation_command(name: str, help_text: str, default_type: str | None):
    @cli.command(name, help=help_text)
    @_name_argument
    @click.option("--type", "-t", "plugin_type", type=TYPE_CHOICE, default=default_type)
    @click.option("--version", "-v", "version", default=None, help="Version for the new manifest")
    @click.option("--force", "-f", is_flag=True, help="Reinstall if it exists (destroys it)")
    @click.pass_context
    @_reports_errors
    def command(ctx, name, name_opt, plugin_type, version, force):
        plugin_name = _resolve_name(name, name_opt)
        p = _controller(ctx).install(plugin_name, plugin_type, force=force, version=version)
        console.print(f"installed [bold]{escape(p.name)}[/bold] ({p.type.value})")
        console.print(f"edit files in {escape(short_path(p.root))}", style="dim")

    return command


install = _creation_command("install", "Install a plugin from its type's template.", None)
create = _creation_command("create", "Create a new plugin (default type: extension).", "extension")


@cli.command()
@_name_argument
@click.option("--type", "-t", "plugin_type", type=TYPE_CHOICE, default=None)
@click.option("--version", "-v", "version", default=None, help="Version for the new manifest")
@click.pass_context
@_reports_errors
def reinstall(ctx, name, name_opt, plugin_type, version):
    """Replace a plugin with a fresh template copy. Its directory is deleted."""
    p = _controller(ctx).reinstall(_resolve_name(name, name_opt), plugin_type, version=version)
    console.print(f"reinstalled [bold]{escape(p.name)}[/bold] ({p.type.value})")


@cli.command()
@_name_argument
@click.pass_context
@_reports_errors
def uninstall(ctx, name, name_opt):
    """Disable and remove a plugin."""
    p = _controller(ctx).uninstall(_resolve_name(name, name_opt))
    console.print(f"uninstalled [bold]{escape(p.name)}[/bold]")


@cli.command()
@_name_argument
@click.pass_context
@_reports_errors
def enable(ctx, name, name_opt):
    """Validate and enable a plugin."""
    plugin_name = _resolve_name(name, name_opt)
    if _controller(ctx).enable(plugin_name):
        console.print(f"enabled [bold]{escape(plugin_name)}[/bold]")
    else:
        console.print(f"[bold]{escape(plugin_name)}[/bold] already enabled", style="dim")


@cli.command()
@_name_argument
@click.pass_context
@_reports_errors
def disable(ctx, name, name_opt):
    """Disable a plugin without removing it."""
    plugin_name = _resolve_name(name, name_opt)
    if _controller(ctx).disable(plugin_name):
        console.print(f"disabled [bold]{escape(plugin_name)}[/bold]")
    else:
        console.print(f"[bold]{escape(plugin_name)}[/bold] already disabled", style="dim")


@cli.command()
@_name_argument
@click.pass_context
@_reports_errors
def update(ctx, name, name_opt):
    """Update a plugin (no update sources yet)."""
    p = _controller(ctx).update(_resolve_name(name, name_opt))
    console.print(f"[bold]{escape(p.name)}[/bold] is up to date", style="dim")


@cli.command()
@_name_argument
@click.pass_context
@_reports_errors
def validate(ctx, name, name_opt):
    """Validate a plugin's manifest and entry point."""
    manifest = _controller(ctx).validate(_resolve_name(name, name_opt))
    console.print(f"[green]{escape(manifest.name)} v{escape(manifest.version)} is valid[/green]")


def main():
    cli(prog_name="pluginctl")


if __name__ == "__main__":
    main()
