"""
object_pool.py
--------------
Fixed-capacity freelist for reusable sprites.

Collectibles, power-ups and obstacles are created once and recycled.
Objects must expose writable ``active`` and ``visible`` attributes; an
optional ``destroy()`` is called when an object is discarded.
"""

from typing import Callable, Generic, List, Optional, TypeVar

from birddash.core.debug.debug_logger import DebugLogger

T = TypeVar("T")


class ObjectPool(Generic[T]):
    """Reuses instances produced by ``create_fn`` up to ``max_size`` idle objects."""

    DEFAULT_WARMUP = 10

    def __init__(self, create_fn: Callable[[], T],
                 reset_fn: Optional[Callable[..., None]] = None,
                 max_size: int = 50, warmup: int = DEFAULT_WARMUP, name: str = "pool"):
        """
        Args:
            create_fn: Factory returning a new inactive object
            reset_fn: Called as reset_fn(obj, *args, **kwargs) on every get()
            max_size: Maximum number of idle objects kept for reuse
            warmup: Objects pre-created at construction (capped at max_size)
            name: Label used in log output
        """
        self.create_fn = create_fn
        self.reset_fn = reset_fn
        self.max_size = max_size
        self.name = name

        self._available: List[T] = []
        self._active: List[T] = []
        self.total_created = 0

        for _ in range(min(warmup, max_size)):
            obj = self._create()
            self._deactivate(obj)
            self._available.append(obj)

        DebugLogger.init_sub(f"ObjectPool '{name}' ready ({len(self._available)}/{max_size})")

    # ===========================================================
    # Acquire / Release
    # ===========================================================

    def get(self, *args, **kwargs) -> T:
        """
        Take an idle object (or allocate one) and activate it.

        Extra arguments are forwarded to ``reset_fn``.

        Returns:
            The activated object
        """
        if self._available:
            obj = self._available.pop()
        else:
            obj = self._create()
            DebugLogger.trace(f"'{self.name}' grew to {self.total_created}", category="pool")

        obj.active = True
        obj.visible = True
        self._active.append(obj)

        if self.reset_fn:
            self.reset_fn(obj, *args, **kwargs)
        return obj

    def release(self, obj: T) -> bool:
        """
        Deactivate an object and return it to the freelist.

        Objects that are not currently active are ignored. When the freelist
        is full the object is discarded instead.

        Returns:
            bool: True if the object was kept for reuse
        """
        try:
            self._active.remove(obj)
        except ValueError:
            return False

        self._deactivate(obj)

        if len(self._available) < self.max_size:
            self._available.append(obj)
            return True

        self._discard(obj)
        return False

    def release_all(self):
        """Return every active object to the pool."""
        for obj in list(self._active):
            self.release(obj)

    def destroy(self):
        """Discard all objects, active and idle."""
        for obj in self._active + self._available:
            self._discard(obj)
        self._active.clear()
        self._available.clear()
        DebugLogger.action(f"ObjectPool '{self.name}' destroyed", category="pool")

    # ===========================================================
    # Introspection
    # ===========================================================

    @property
    def active_count(self) -> int:
        return len(self._active)

    @property
    def available_count(self) -> int:
        return len(self._available)

    def get_active(self) -> List[T]:
        """Snapshot of active objects, safe to iterate while releasing."""
        return list(self._active)

    # ===========================================================
    # Internal
    # ===========================================================

    def _create(self) -> T:
        self.total_created += 1
        return self.create_fn()

    @staticmethod
    def _deactivate(obj):
        obj.active = False
        obj.visible = False

    @staticmethod
    def _discard(obj):
        destroy = getattr(obj, "destroy", None)
        if callable(destroy):
            destroy()
