from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List, Tuple

from ..core.exceptions import StoreError
from .repository import Snapshot, SnapshotCallback, Unsubscribe

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[str, str], Snapshot]


class FeedHub:
    """In-process live feed: fans full snapshots out to collection subscribers.

    Each listener is keyed by (collection, order_key). After a write commits the
    store calls ``publish(collection)``; every listener on that collection gets a
    freshly loaded snapshot in its own order. Load and delivery for one
    collection run under that collection's delivery lock, so a snapshot loaded
    earlier is never delivered after one loaded later. A failing listener is
    logged and does not stop delivery to the others.
    """

    def __init__(self, loader: SnapshotLoader):
        self._loader = loader
        self._lock = threading.Lock()
        self._listeners: Dict[str, List[Tuple[int, str, SnapshotCallback]]] = defaultdict(list)
        # Re-entrant: a listener may write (and so publish) to the same collection.
        self._delivery_locks: Dict[str, threading.RLock] = defaultdict(threading.RLock)
        self._next_token = 0

    def _delivery_lock(self, collection: str) -> threading.RLock:
        with self._lock:
            return self._delivery_locks[collection]

    def subscribe(self, collection: str, order_key: str, callback: SnapshotCallback) -> Unsubscribe:
        with self._delivery_lock(collection):
            with self._lock:
                self._next_token += 1
                token = self._next_token
                self._listeners[collection].append((token, order_key, callback))

            def unsubscribe() -> None:
                with self._lock:
                    entries = self._listeners.get(collection, [])
                    self._listeners[collection] = [e for e in entries if e[0] != token]
                logger.debug("feed unsubscribe collection=%s token=%s", collection, token)

            logger.debug("feed subscribe collection=%s token=%s", collection, token)
            try:
                snapshot = self._loader(collection, order_key)
            except Exception:
                unsubscribe()
                raise
            self._deliver(collection, order_key, callback, snapshot)
            return unsubscribe

    def listener_count(self, collection: str) -> int:
        with self._lock:
            return len(self._listeners.get(collection, []))

    def publish(self, collection: str) -> None:
        """Re-deliver ``collection``; a failed reload is logged, the committed write stands."""
        with self._delivery_lock(collection):
            with self._lock:
                entries = list(self._listeners.get(collection, []))
            if not entries:
                return

            snapshots: Dict[str, Snapshot] = {}
            for _, order_key, callback in entries:
                if order_key not in snapshots:
                    try:
                        snapshots[order_key] = self._loader(collection, order_key)
                    except StoreError:
                        logger.exception("feed reload failed collection=%s order_key=%s", collection, order_key)
                        continue
                self._deliver(collection, order_key, callback, snapshots[order_key])

    @staticmethod
    def _deliver(collection: str, order_key: str, callback: SnapshotCallback, snapshot: Snapshot) -> None:
        try:
            callback(snapshot)
        except Exception:
            logger.exception("feed listener failed collection=%s order_key=%s", collection, order_key)
