# media_optim/manifest/store.py
import logging
import os
from pathlib import Path
from typing import Callable, Dict, IO, List, TypeVar

from ..config import MANIFEST_SUFFIX, REDUCTION_SUFFIX
from ..errors import ManifestParseError, ManifestReadError, ManifestWriteError
from ..models.identity import Identity, ReductionRecord
from ..models.media_class import MediaClass
from ..utils.path import ensure_dir
from .codec import decode_identity, decode_reduction, encode_identity, encode_reduction

logger = logging.getLogger(__name__)

T = TypeVar("T")
AppendListener = Callable[[Identity], None]

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class ManifestStore:
    """Append-only manifests and reduction ledgers, one pair per media class.

    Files live in ``manifest_dir``:
        image.man, video.man, doc.man                     confirmed identities
        image_reduction.man, video_reduction.man, ...     bytes saved per file

    When disabled, ``load`` is always empty and appends are no-ops.
    """

    def __init__(self, manifest_dir: Path, enabled: bool = True):
        self.manifest_dir = Path(manifest_dir)
        self.enabled = enabled
        self._handles: Dict[Path, IO[str]] = {}
        self._listeners: Dict[MediaClass, List[AppendListener]] = {}

    def manifest_path(self, media_class: MediaClass) -> Path:
        return self.manifest_dir / f"{media_class.manifest_stem}{MANIFEST_SUFFIX}"

    def reduction_path(self, media_class: MediaClass) -> Path:
        return self.manifest_dir / f"{media_class.manifest_stem}{REDUCTION_SUFFIX}{MANIFEST_SUFFIX}"

    def load(self, media_class: MediaClass) -> List[Identity]:
        """Identities already optimized, in append order. Empty on first run."""
        if not self.enabled:
            return []
        return self._read_lines(self.manifest_path(media_class), decode_identity)

    def load_reductions(self, media_class: MediaClass) -> List[ReductionRecord]:
        """Reduction ledger for offline reporting; never read during a run."""
        return self._read_lines(self.reduction_path(media_class), decode_reduction)

    def append(self, media_class: MediaClass, identity: Identity):
        """Durably append one confirmed identity, then notify listeners."""
        if self.enabled:
            self._append_line(self.manifest_path(media_class), encode_identity(identity))
        for listener in self._listeners.get(media_class, ()):
            listener(identity)

    def append_reduction(self, media_class: MediaClass, record: ReductionRecord):
        if record.bytes_saved <= 0:
            raise ValueError(f"Only positive reductions are ledgered, got {record.bytes_saved}")
        if self.enabled:
            self._append_line(self.reduction_path(media_class), encode_reduction(record))

    def subscribe(self, media_class: MediaClass, listener: AppendListener) -> Callable[[], None]:
        """Call ``listener`` after every append for ``media_class``. Returns an unsubscribe function."""
        listeners = self._listeners.setdefault(media_class, [])
        listeners.append(listener)

        def unsubscribe():
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        for path, handle in list(self._handles.items()):
            try:
                handle.close()
            except OSError as e:
                logger.warning("Failed to close manifest %s: %s", path, e)
        self._handles.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _read_lines(self, path: Path, decode: Callable[[str], T]) -> List[T]:
        if not path.exists():
            return []
        try:
            with path.open("r", encoding=_ENCODING, errors=_ERRORS, newline="\n") as f:
                lines = f.read().split("\n")
        except OSError as e:
            raise ManifestReadError(path, e.strerror or str(e)) from e

        records: List[T] = []
        skipped = 0
        for line in lines:
            if not line.strip():
                continue
            try:
                records.append(decode(line))
            except ManifestParseError as e:
                skipped += 1
                logger.warning("Ignoring entry in %s: %s", path.name, e)
        if skipped:
            logger.warning("%d malformed entries in %s will be treated as not optimized", skipped, path)
        return records

    def _append_line(self, path: Path, line: str):
        try:
            handle = self._handles.get(path)
            if handle is None:
                handle = self._open_for_append(path)
                self._handles[path] = handle
            handle.write(line + "\n")
            handle.flush()
            os.fsync(handle.fileno())
        except OSError as e:
            raise ManifestWriteError(path, e.strerror or str(e)) from e

    def _open_for_append(self, path: Path) -> IO[str]:
        ensure_dir(path.parent)
        needs_newline = self._has_torn_tail(path)
        handle = path.open("a", encoding=_ENCODING, errors=_ERRORS, newline="\n")
        if needs_newline:
            logger.warning("Terminating incomplete last entry in %s", path)
            handle.write("\n")
        return handle

    @staticmethod
    def _has_torn_tail(path: Path) -> bool:
        """True when the file is non-empty and does not end in a newline."""
        try:
            size = path.stat().st_size
        except FileNotFoundError:
            return False
        if size == 0:
            return False
        with path.open("rb") as f:
            f.seek(-1, os.SEEK_END)
            return f.read(1) != b"\n"
