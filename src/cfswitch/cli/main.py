import logging
import sys
from typing import Optional

import typer

from ..config import PROG_NAME, get_client_binary, get_store_path
from ..domain.errors import CfSwitchError
from ..profiles import StoreManager
from ..services.delegated import DelegatedCommands
from .profile_commands import (
    activate,
    add_profile,
    fail,
    list_profiles,
    print_hook,
    remove_profile,
    show_current,
    use_profile,
)

app = typer.Typer(
    name=PROG_NAME,
    help="Cloudflare profile switcher for flarectl.",
    add_completion=False,
)

app.command("list")(list_profiles)
app.command("add")(add_profile)
app.command("remove")(remove_profile)
app.command("use")(use_profile)
app.command("current")(show_current)
app.command("hook")(print_hook)


def get_delegated_commands() -> DelegatedCommands:
    return DelegatedCommands(StoreManager(get_store_path()), client=get_client_binary())


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
):
    """toggle between the two most recent profiles when run without a command."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    if ctx.invoked_subcommand is None:
        activate(None)


@app.command()
def purge(
    zone: Optional[str] = typer.Argument(None, help="Zone to purge; defaults to the profile's zone")
):
    """purge the cache for a zone."""
    try:
        get_delegated_commands().purge(zone)
    except CfSwitchError as e:
        fail(e)


@app.command("add-lamdera-app")
def add_lamdera_app(
    domain: Optional[str] = typer.Argument(None, help="Domain to configure; defaults to the profile's zone")
):
    """add the Lamdera DNS record (CNAME @ -> apps.lamdera.app)."""
    try:
        get_delegated_commands().add_lamdera_app(domain)
    except CfSwitchError as e:
        fail(e)


if __name__ == "__main__":
    app()
