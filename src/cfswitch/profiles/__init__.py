"""profile store and switching for Cloudflare credentials."""
from .manager import Switcher
from .store import StoreManager
from .models import Profile, ProfileStore, ProfileSummary

__all__ = [
    "Switcher",
    "StoreManager",
    "Profile",
    "ProfileStore",
    "ProfileSummary",
]
