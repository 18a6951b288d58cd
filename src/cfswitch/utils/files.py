import os
import tempfile
from pathlib import Path

from ..domain.errors import PersistenceError


def atomic_write_text(path: Path, content: str) -> None:
    """
    write content to path via a temp file and rename.

    the temp file lives next to the target so os.replace stays on one
    filesystem. files are created with mode 0600.

    raises:
        PersistenceError: on any filesystem failure
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise PersistenceError(path, e.strerror or str(e)) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
