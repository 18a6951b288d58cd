"""data models for the profile store."""
from typing import Dict, List, Optional
from pydantic import AliasChoices, BaseModel, Field, model_validator


def is_valid_name(name: str) -> bool:
    return bool(name) and not any(c.isspace() for c in name)


class Profile(BaseModel):
    """one named set of Cloudflare credentials."""
    # the store key; filled in by ProfileStore, never written to disk
    name: str = Field(default="", exclude=True)
    email: str
    token: str
    zone: Optional[str] = None


class ProfileSummary(BaseModel):
    """what `list` shows for a profile."""
    name: str
    email: str
    zone: Optional[str] = None
    is_active: bool = False


class ProfileStore(BaseModel):
    """complete persisted state."""
    profiles: Dict[str, Profile] = {}
    # earlier releases wrote the active profile under "current"
    active: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("active", "current")
    )
    previous: Optional[str] = None

    @model_validator(mode="after")
    def _check_references(self) -> "ProfileStore":
        for name, profile in self.profiles.items():
            if not is_valid_name(name):
                raise ValueError(f"invalid profile name {name!r}")
            profile.name = name
        if self.active is not None and self.active not in self.profiles:
            raise ValueError(f"active profile '{self.active}' does not exist")
        # a stale `previous` is allowed
        return self

    @classmethod
    def empty(cls) -> "ProfileStore":
        """create empty profile store."""
        return cls(profiles={}, active=None, previous=None)

    def names(self) -> List[str]:
        return list(self.profiles.keys())

    def get(self, name: Optional[str]) -> Optional[Profile]:
        if name is None:
            return None
        return self.profiles.get(name)

    def active_profile(self) -> Optional[Profile]:
        return self.get(self.active)

    def has_valid_previous(self) -> bool:
        return self.previous is not None and self.previous in self.profiles
