"""
rendering of the active profile for the invoking shell.

a child process cannot change its parent shell's environment, so a
successful switch prints statements that the shell wrapper evaluates
(see `cf-switch hook`). the same variables are also written to a
key=value file that other tools can source.
"""
import logging
import shlex
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from ..utils.files import atomic_write_text

if TYPE_CHECKING:
    from ..profiles.models import Profile

logger = logging.getLogger(__name__)

ZONE_VAR = "CF_ZONE"

FISH_SHELLS = {"fish"}


def credential_variables(profile: "Profile") -> Dict[str, Optional[str]]:
    """
    environment variables for a profile, in output order.

    flarectl accepts either CF_API_KEY or CF_API_TOKEN, so the token is
    exported under both. a None value means the variable should be unset.
    """
    return {
        "CF_API_EMAIL": profile.email,
        "CF_API_KEY": profile.token,
        "CF_API_TOKEN": profile.token,
        ZONE_VAR: profile.zone or None,
    }


def fish_quote(value: str) -> str:
    """
    single-quote a value for fish.

    fish treats backslash as an escape inside single quotes, so shlex.quote
    output is not safe there.
    """
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


class ShellEmitter:
    """writes the env file and renders export statements."""

    def __init__(self, env_file: Path, shell: str = "bash"):
        self.env_file = env_file
        self.shell = shell

    @property
    def is_fish(self) -> bool:
        return self.shell in FISH_SHELLS

    def render_env_file(self, profile: "Profile") -> str:
        lines = [
            f"{key}={shlex.quote(value)}"
            for key, value in credential_variables(profile).items()
            if value is not None
        ]
        return "\n".join(lines) + "\n"

    def write_env_file(self, profile: "Profile") -> None:
        """
        overwrite the env file with the profile's credentials.

        raises:
            PersistenceError: if the file cannot be written
        """
        atomic_write_text(self.env_file, self.render_env_file(profile))
        logger.debug(f"wrote credentials for '{profile.name}' to {self.env_file}")

    def export_statements(self, profile: "Profile") -> List[str]:
        statements = []
        for key, value in credential_variables(profile).items():
            if value is None:
                statements.append(f"set -e {key}" if self.is_fish else f"unset {key}")
            elif self.is_fish:
                statements.append(f"set -gx {key} {fish_quote(value)}")
            else:
                statements.append(f"export {key}={shlex.quote(value)}")
        return statements

    def render_exports(self, profile: "Profile") -> str:
        """shell code that sets the profile's variables when evaluated."""
        return "\n".join(self.export_statements(profile))
