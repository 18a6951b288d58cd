import typer
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import PROG_NAME, detect_shell, get_env_path, get_store_path
from ..domain.errors import CfSwitchError
from ..profiles import StoreManager, Switcher
from ..shell.emitter import ShellEmitter

# stdout is reserved for export statements, everything else goes to stderr
console = Console(stderr=True, soft_wrap=True)

ADD_HINT = f"Add one with: {PROG_NAME} add <name> -e <email> -t <token> [-z <zone>]"


def get_emitter() -> ShellEmitter:
    return ShellEmitter(get_env_path(), shell=detect_shell())


def get_switcher(emitter: Optional[ShellEmitter] = None) -> Switcher:
    """get switcher instance."""
    return Switcher(StoreManager(get_store_path()), emitter)


def fail(error: CfSwitchError):
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(error.exit_code)


def activate(name: Optional[str]):
    """switch profiles and print export statements for the shell to eval."""
    emitter = get_emitter()
    switcher = get_switcher(emitter)

    try:
        profile = switcher.use(name)
    except CfSwitchError as e:
        fail(e)

    if profile is None:
        console.print("[yellow]No profiles configured.[/yellow]")
        console.print(ADD_HINT)
        return

    console.print(f"[green bold]ON[/green bold] [cyan bold]{profile.name}[/cyan bold] ({profile.email})")
    typer.echo(emitter.render_exports(profile))


def use_profile(
    name: Optional[str] = typer.Argument(None, help="Profile to activate; omit to toggle back")
):
    """switch to a profile, or toggle to the previous one."""
    activate(name)


def list_profiles():
    """list all profiles."""
    try:
        profiles = get_switcher().list_profiles()
    except CfSwitchError as e:
        fail(e)

    if not profiles:
        console.print("[yellow]No profiles configured.[/yellow]")
        console.print(ADD_HINT)
        return

    table = Table(title="Cloudflare Profiles")
    table.add_column("", style="green bold")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="white")
    table.add_column("Zone", style="dim")

    for profile in profiles:
        marker = "ON" if profile.is_active else ""
        table.add_row(marker, profile.name, profile.email, profile.zone or "")

    console.print(table)


def show_current():
    """show the active profile."""
    try:
        profile = get_switcher().current()
    except CfSwitchError as e:
        fail(e)

    console.print(f"[green bold]ON[/green bold] [cyan]{profile.name}[/cyan] ({profile.email})")
    if profile.zone:
        console.print(f"  Zone: {profile.zone}")


def add_profile(
    name: str = typer.Argument(..., help="Profile name"),
    email: str = typer.Option(..., "--email", "-e", help="Cloudflare account email"),
    token: str = typer.Option(..., "--token", "-t", help="API token (recommended) or API key"),
    zone: Optional[str] = typer.Option(None, "--zone", "-z", help="Default zone, e.g. example.com"),
):
    """add a new profile."""
    try:
        profile = get_switcher().add(name, email, token, zone)
    except CfSwitchError as e:
        fail(e)

    if profile.zone:
        console.print(f"[green]✓[/green] Added profile '[cyan]{name}[/cyan]' with zone '{profile.zone}'")
    else:
        console.print(f"[green]✓[/green] Added profile '[cyan]{name}[/cyan]'")


def remove_profile(name: str = typer.Argument(..., help="Profile to remove")):
    """remove a profile."""
    try:
        get_switcher().remove(name)
    except CfSwitchError as e:
        fail(e)

    console.print(f"[green]✓[/green] Removed profile '{name}'")


def print_hook():
    """print the shell function that evaluates cf-switch output."""
    console.print("Add this to your shell config:\n", highlight=False)
    if detect_shell() == "fish":
        console.print("# ~/.config/fish/config.fish", markup=False, highlight=False)
        console.print("function cfs", markup=False, highlight=False)
        console.print(f"    {PROG_NAME} $argv | source", markup=False, highlight=False)
        console.print("end", markup=False, highlight=False)
    else:
        console.print("# ~/.bashrc or ~/.zshrc", markup=False, highlight=False)
        console.print(f'cfs() {{ eval "$({PROG_NAME} "$@")"; }}', markup=False, highlight=False)
