from pathlib import Path


class CfSwitchError(Exception):
    """base class for exceptions in cf-switch."""
    exit_code = 1


class CorruptStoreError(CfSwitchError):
    """raised when the persisted profile store cannot be parsed."""
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Profile store {path} is corrupt: {reason}\n"
            f"Fix or delete the file to continue."
        )


class PersistenceError(CfSwitchError):
    """raised when a file cannot be written."""
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class ProfileError(CfSwitchError):
    """base class for user-correctable profile errors."""
    pass


class InvalidProfileNameError(ProfileError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid profile name '{name}'. "
            "Names must be non-empty and contain no whitespace."
        )


class UnknownProfileError(ProfileError):
    def __init__(self, name: str, available: list = None):
        self.name = name
        self.available = available or []
        message = f"Profile '{name}' not found."
        if self.available:
            message += f"\nAvailable profiles: {', '.join(self.available)}"
        super().__init__(message)


class DuplicateProfileError(ProfileError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Profile '{name}' already exists.")


class NoActiveProfileError(ProfileError):
    def __init__(self):
        super().__init__(
            "No profile currently active. Use 'cf-switch use <profile>' first."
        )


class NoToggleTargetError(ProfileError):
    def __init__(self, candidates: list):
        self.candidates = candidates
        super().__init__(
            "No previous profile to toggle to. "
            f"Pick one with 'cf-switch use <profile>' ({', '.join(candidates)})."
        )


class NoZoneSpecifiedError(ProfileError):
    def __init__(self, profile_name: str, usage: str):
        self.profile_name = profile_name
        self.usage = usage
        super().__init__(
            f"No zone specified and profile '{profile_name}' has no default zone.\n"
            f"Usage: {usage}"
        )


class DelegatedCommandError(CfSwitchError):
    """raised when the external client fails or cannot be started."""
    def __init__(self, command: list, returncode: int, message: str):
        self.command = command
        self.returncode = returncode
        # killed by signal N: report 128+N like the shell does
        self.exit_code = 128 - returncode if returncode < 0 else returncode
        super().__init__(message)
