"""Repository base class used by all concrete repositories."""
import json
import logging
import os
import tempfile
from typing import Any


def atomic_write_json(path: str, data: Any) -> None:
    """Write *data* as JSON to *path* atomically (write-then-rename).

    Creates a sibling temp file, writes the JSON, then renames it over the
    target path so the file is never left in a partially-written state.

    Raises:
        OSError: If the write or rename fails.
    """
    dir_name = os.path.dirname(os.path.abspath(path))
    os.makedirs(dir_name, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=dir_name, suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as fh:
            json.dump(data, fh, indent=2)
        os.replace(tmp_path, path)
    except Exception:
        # Clean up the temp file if anything goes wrong
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class BaseRepository:
    """Provides JSON-backed persistence for a single data file.

    Nothing is cached between calls: :meth:`_load` parses the whole file on
    every read and :meth:`_save` rewrites the whole file on every mutation,
    so the file on disk is the only source of truth.  Two writers racing on
    the same file can lose an update; there is no locking.
    """

    def __init__(self, file_path: str) -> None:
        self._path = file_path
        self._log = logging.getLogger(f'travel.repository.{type(self).__name__}')

    @property
    def path(self) -> str:
        return self._path

    def _load(self, default: Any) -> Any:
        """Load JSON from *self._path*, returning *default* on missing/corrupt file."""
        if os.path.exists(self._path):
            try:
                with open(self._path, 'r', encoding='utf-8') as fh:
                    return json.load(fh)
            # ValueError covers both bad JSON and bytes that are not UTF-8
            except (ValueError, OSError) as exc:
                self._log.warning("Could not load %s: %s", self._path, exc)
        return default

    def _save(self, data: Any) -> None:
        """Atomically write *data* as JSON to *self._path*."""
        atomic_write_json(self._path, data)
