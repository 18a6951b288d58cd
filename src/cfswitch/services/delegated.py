import logging
import os
import subprocess
import sys
from typing import Dict, List, Optional

from rich.console import Console

from ..config import DEFAULT_CLIENT, PROG_NAME
from ..domain.errors import DelegatedCommandError, NoActiveProfileError, NoZoneSpecifiedError
from ..profiles.models import Profile
from ..profiles.store import StoreManager

console = Console(stderr=True, soft_wrap=True)
logger = logging.getLogger(__name__)

LAMDERA_TARGET = "apps.lamdera.app"
INSTALL_HINT = "Make sure flarectl is installed: brew install cloudflare/cloudflare/flarectl"


def client_environment(profile: Profile) -> Dict[str, str]:
    """credential variables passed to the external client."""
    return {
        "CF_API_EMAIL": profile.email,
        "CF_API_TOKEN": profile.token,
        "CF_API_KEY": profile.token,
    }


def relay_bytes(data: bytes) -> None:
    """write raw client output to our stderr without decoding it."""
    if not data:
        return
    sys.stderr.flush()
    sys.stderr.buffer.write(data)
    sys.stderr.buffer.flush()


def lamdera_app_url(domain: str) -> str:
    """the *.lamdera.app address Lamdera uses for a custom domain."""
    return f"https://{domain.replace('.', '-')}.lamdera.app/"


class DelegatedCommands:
    """
    commands whose real work is done by flarectl.

    the client's output is relayed unmodified to stderr, keeping stdout
    free of anything a shell wrapper might evaluate.
    """

    def __init__(self, store_manager: StoreManager, client: str = DEFAULT_CLIENT):
        self.store_manager = store_manager
        self.client = client

    def purge(self, zone: Optional[str] = None) -> str:
        """
        purge everything cached for a zone.

        args:
            zone: zone to purge, defaults to the active profile's zone

        returns:
            the zone that was purged

        raises:
            NoActiveProfileError: if no profile is active
            NoZoneSpecifiedError: if no zone was given and the profile has none
            DelegatedCommandError: if flarectl fails
        """
        profile = self._require_active()
        target = self._resolve_zone(profile, zone, f"{PROG_NAME} purge <zone>")

        console.print(
            f"[cyan]→[/cyan] Purging cache for [bold]{target}[/bold] "
            f"using profile '[cyan]{profile.name}[/cyan]'..."
        )
        self._run(profile, ["zone", "purge", "--zone", target, "--everything"])
        console.print(f"[green]✓[/green] Cache purged for [bold]{target}[/bold]")
        return target

    def add_lamdera_app(self, domain: Optional[str] = None) -> str:
        """
        point a domain at Lamdera hosting with a proxied apex CNAME.

        returns:
            the domain that was configured
        """
        profile = self._require_active()
        target = self._resolve_zone(profile, domain, f"{PROG_NAME} add-lamdera-app <domain>")

        console.print(
            f"[cyan]→[/cyan] Adding Lamdera DNS record for [bold]{target}[/bold] "
            f"using profile '[cyan]{profile.name}[/cyan]'..."
        )
        self._run(profile, [
            "dns", "create",
            "--zone", target,
            "--type", "CNAME",
            "--name", "@",
            "--content", LAMDERA_TARGET,
            "--proxy",
        ])
        console.print(
            f"[green]✓[/green] DNS record created: [bold]{target}[/bold] -> {LAMDERA_TARGET} (proxied)"
        )
        console.print("\n[bold]Next step:[/bold]")
        console.print(f"DM Lamdera team with: https://{target}/ and {lamdera_app_url(target)}")
        return target

    def _require_active(self) -> Profile:
        profile = self.store_manager.load().active_profile()
        if profile is None:
            raise NoActiveProfileError()
        return profile

    def _resolve_zone(self, profile: Profile, explicit: Optional[str], usage: str) -> str:
        target = explicit or profile.zone
        if not target:
            raise NoZoneSpecifiedError(profile.name, usage)
        return target

    def _run(self, profile: Profile, args: List[str]) -> subprocess.CompletedProcess:
        command = [self.client, *args]
        env = os.environ.copy()
        env.update(client_environment(profile))

        logger.debug(f"running {' '.join(command)} as profile '{profile.name}'")
        try:
            result = subprocess.run(command, env=env, capture_output=True)
        except FileNotFoundError as e:
            raise DelegatedCommandError(
                command, 127, f"Failed to run {self.client}: {e}\n{INSTALL_HINT}"
            ) from e
        except PermissionError as e:
            raise DelegatedCommandError(
                command, 126, f"Failed to run {self.client}: {e}"
            ) from e

        # pass the client's output through untouched
        relay_bytes(result.stdout)
        relay_bytes(result.stderr)

        logger.debug(f"{self.client} exited with status {result.returncode}")
        if result.returncode != 0:
            raise DelegatedCommandError(
                command,
                result.returncode,
                f"{self.client} exited with status {result.returncode}",
            )
        return result
