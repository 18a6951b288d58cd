import logging
from typing import List, Optional

from ..domain.errors import (
    DuplicateProfileError,
    InvalidProfileNameError,
    NoActiveProfileError,
    NoToggleTargetError,
    UnknownProfileError,
)
from ..shell.emitter import ShellEmitter
from .models import Profile, ProfileStore, ProfileSummary, is_valid_name
from .store import StoreManager

logger = logging.getLogger(__name__)


class Switcher:
    """
    switching state machine over the store's `active` / `previous` pointers.

    every operation loads the store, computes the new state in memory and
    saves it once, so a failed check never leaves a half-updated store.
    """

    def __init__(self, store_manager: StoreManager, emitter: Optional[ShellEmitter] = None):
        self.store_manager = store_manager
        self.emitter = emitter

    def use(self, name: Optional[str] = None) -> Optional[Profile]:
        """
        activate a profile, or toggle when no name is given.

        returns:
            the newly active profile, or None when there is nothing to
            activate (toggle on an empty store)

        raises:
            UnknownProfileError: if name is not in the store
            NoToggleTargetError: if toggling is ambiguous
        """
        if name is None:
            return self.toggle()

        store = self.store_manager.load()
        if name not in store.profiles:
            raise UnknownProfileError(name, store.names())

        if store.active is not None:
            store.previous = store.active
        store.active = name
        logger.debug(f"use: active={store.active} previous={store.previous}")
        return self._commit(store)

    def toggle(self) -> Optional[Profile]:
        """swap `active` and `previous`."""
        store = self.store_manager.load()

        if store.has_valid_previous():
            if store.previous == store.active:
                logger.debug(f"toggle: '{store.active}' is both active and previous")
                return self._activate(store.active_profile())
            store.active, store.previous = store.previous, store.active
            logger.debug(f"toggle: active={store.active} previous={store.previous}")
            return self._commit(store)

        names = store.names()
        if len(names) > 1:
            raise NoToggleTargetError(names)
        if not names:
            logger.debug("toggle: store is empty, nothing to do")
            return None

        sole = names[0]
        if store.active == sole:
            return self._activate(store.active_profile())
        store.active = sole
        logger.debug(f"toggle: activating sole profile '{sole}'")
        return self._commit(store)

    def list_profiles(self) -> List[ProfileSummary]:
        """list all profiles in insertion order."""
        store = self.store_manager.load()
        return [
            ProfileSummary(
                name=name,
                email=profile.email,
                zone=profile.zone,
                is_active=name == store.active,
            )
            for name, profile in store.profiles.items()
        ]

    def current(self) -> Profile:
        """
        get the active profile.

        raises:
            NoActiveProfileError: if none is set
        """
        profile = self.store_manager.load().active_profile()
        if profile is None:
            raise NoActiveProfileError()
        return profile

    def add(self, name: str, email: str, token: str, zone: Optional[str] = None) -> Profile:
        """
        append a new profile. names are case-sensitive.

        raises:
            InvalidProfileNameError: if name is empty or has whitespace
            DuplicateProfileError: if name already exists
        """
        if not is_valid_name(name):
            raise InvalidProfileNameError(name)

        store = self.store_manager.load()
        if name in store.profiles:
            raise DuplicateProfileError(name)

        profile = Profile(name=name, email=email, token=token, zone=zone or None)
        store.profiles[name] = profile
        self.store_manager.save(store)
        logger.debug(f"added profile '{name}'")
        return profile

    def remove(self, name: str) -> Profile:
        """
        delete a profile.

        clears `active` if it pointed at the removed profile. `previous` is
        left alone and may go stale.
        """
        store = self.store_manager.load()
        if name not in store.profiles:
            raise UnknownProfileError(name, store.names())

        profile = store.profiles.pop(name)
        if store.active == name:
            store.active = None
        self.store_manager.save(store)
        logger.debug(f"removed profile '{name}'")
        return profile

    def _commit(self, store: ProfileStore) -> Profile:
        # env file first: if it fails the switch is not recorded
        profile = self._activate(store.active_profile())
        self.store_manager.save(store)
        return profile

    def _activate(self, profile: Profile) -> Profile:
        if self.emitter is not None:
            self.emitter.write_env_file(profile)
        return profile
