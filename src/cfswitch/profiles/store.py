import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ..domain.errors import CorruptStoreError
from ..utils.files import atomic_write_text
from .models import ProfileStore

logger = logging.getLogger(__name__)


class StoreManager:
    """handles profile store persistence to JSON."""

    def __init__(self, store_file: Path):
        self.store_file = store_file

    def load(self) -> ProfileStore:
        """
        load the store from disk.

        a missing file yields an empty store. anything unreadable or invalid
        raises CorruptStoreError; the file is left untouched.
        """
        if not self.store_file.exists():
            logger.debug(f"no store at {self.store_file}, starting empty")
            return ProfileStore.empty()

        try:
            with open(self.store_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptStoreError(self.store_file, str(e)) from e
        except OSError as e:
            raise CorruptStoreError(self.store_file, e.strerror or str(e)) from e

        if not isinstance(data, dict):
            raise CorruptStoreError(
                self.store_file, f"expected a JSON object, got {type(data).__name__}"
            )

        try:
            store = ProfileStore.model_validate(data)
        except ValidationError as e:
            raise CorruptStoreError(self.store_file, str(e)) from e

        logger.debug(f"loaded {len(store.profiles)} profile(s) from {self.store_file}")
        return store

    def save(self, store: ProfileStore) -> None:
        """write the full store back to disk atomically."""
        content = json.dumps(store.model_dump(mode="json"), indent=2) + "\n"
        atomic_write_text(self.store_file, content)
        logger.debug(
            f"saved {len(store.profiles)} profile(s) to {self.store_file} "
            f"(active={store.active}, previous={store.previous})"
        )
