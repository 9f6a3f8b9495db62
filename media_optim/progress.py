# media_optim/progress.py
from queue import Queue
from threading import Thread
from typing import Callable, Optional

from tqdm import tqdm

from .manifest.store import ManifestStore
from .models.identity import Identity
from .models.media_class import MediaClass


class ProgressObserver:
    """Renders manifest appends for one media class against a known total.

    The store's append callback only enqueues; a background thread owns the
    tqdm bar, so rendering never delays the dispatcher.
    """

    def __init__(self, label: str, total: int, disable: bool = False, unit: str = "file"):
        self.label = label
        self.total = total
        self.disable = disable
        self.unit = unit
        self.count = 0
        self.q: "Queue[object]" = Queue()
        self._stop = object()
        self._th: Optional[Thread] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def attach(self, store: ManifestStore, media_class: MediaClass) -> "ProgressObserver":
        """Start rendering and listen to ``media_class`` appends on ``store``."""
        self._unsubscribe = store.subscribe(media_class, self.notify)
        self._th = Thread(target=self._run, name=f"progress-{media_class.key}", daemon=True)
        self._th.start()
        return self

    def notify(self, identity: Identity):
        self.q.put_nowait(identity)

    def _run(self):
        with tqdm(total=self.total, desc=self.label, unit=self.unit, disable=self.disable,
                  dynamic_ncols=True) as bar:
            while True:
                item = self.q.get()
                if item is self._stop:
                    break
                self.count += 1
                bar.update(1)

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._th is not None:
            self.q.put(self._stop)
            self._th.join()
            self._th = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
