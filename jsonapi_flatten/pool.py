#
# Object pools for the per-call buffers of the parser (resource map, circular reference guard)
#
# Pools are not thread safe: a parser instance and its pools should only be used
# by one parse() call at a time.
#
from typing import Any, Callable, Dict, Generic, List, Optional, Set, TypeVar

T = TypeVar("T")


class ObjectPool(Generic[T]):
    """
    Free list of reusable objects
    :param create_fn: creates a new object when the pool is empty
    :param reset_fn: clears an object when it's returned to the pool
    :param max_size: maximum number of idle objects kept, released objects are dropped when the pool is full
    """

    def __init__(self, create_fn: Callable[[], T], reset_fn: Optional[Callable[[T], None]] = None, max_size: int = 50) -> None:
        self._pool: List[T] = []
        self.create_fn = create_fn
        self.reset_fn = reset_fn
        self.max_size = max_size

    def get(self) -> T:
        """
        :return: an idle object from the pool or a new one
        """
        if self._pool:
            return self._pool.pop()
        return self.create_fn()

    def release(self, obj: T) -> None:
        """
        Reset obj and return it to the pool
        """
        if len(self._pool) < self.max_size:
            if self.reset_fn is not None:
                self.reset_fn(obj)
            self._pool.append(obj)

    def clear(self) -> None:
        self._pool.clear()

    @property
    def size(self) -> int:
        """
        :return: number of idle objects
        """
        return len(self._pool)


class DictPool(ObjectPool[Dict[str, Any]]):
    def __init__(self, max_size: int = 50) -> None:
        super().__init__(dict, dict.clear, max_size)


class SetPool(ObjectPool[Set[str]]):
    def __init__(self, max_size: int = 50) -> None:
        super().__init__(set, set.clear, max_size)
