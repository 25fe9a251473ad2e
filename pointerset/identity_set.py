"""
A mutable set whose notion of "the same element" is supplied by an :class:`pointerset.IdentityConfig` rather than by the
elements' own ``__eq__`` and ``__hash__``.

This makes it possible to hold unhashable objects (by identity), to deduplicate objects by a derived key, or to hold
objects weakly so that they silently leave the set when nothing else references them.

Examples:

    >>> from pointerset import IdentityConfig, IdentitySet
    >>> s = IdentitySet([1, 2, 2, 3], config=IdentityConfig.value())
    >>> len(s)
    3
    >>> sorted(s.select(lambda x: x % 2 == 1))
    [1, 3]

"""

import logging
import weakref
from collections.abc import MutableSet
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

from . import combinators
from .config import IdentityConfig, Storage

log = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class _Dead:
    """Sentinel returned by a weak slot whose referent has been garbage collected."""
    def __repr__(self):
        return "<dead>"


DEAD = _Dead()


class Slot:
    """A hash table entry that hashes and compares its element through an :class:`IdentityConfig`.

    The hash is computed once, when the slot is created, so that a slot can still be located (and purged) after a
    weakly held element has been collected.

    """

    __slots__ = ("config", "hash")

    def __init__(self, config: IdentityConfig, hash_value: int):
        self.config: IdentityConfig = config
        self.hash: int = hash_value

    @property
    def value(self) -> Any:
        raise NotImplementedError()

    @property
    def alive(self) -> bool:
        return self.value is not DEAD

    def __hash__(self):
        return self.hash

    def __eq__(self, other):
        if self is other:
            return True
        elif not isinstance(other, Slot):
            return False
        a = self.value
        if a is DEAD:
            return False
        b = other.value
        if b is DEAD:
            return False
        return bool(self.config.equal_fn(a, b))

    def __repr__(self):
        return f"{self.__class__.__name__}({self.value!r})"


class StrongSlot(Slot):
    __slots__ = ("obj",)

    def __init__(self, config: IdentityConfig, hash_value: int, obj):
        super().__init__(config, hash_value)
        self.obj = obj

    @property
    def value(self) -> Any:
        return self.obj


class WeakSlot(Slot):
    """A slot holding a weak reference to its element.

    When the element is collected, the slot appends itself to ``pending``. It never touches the owning table directly,
    because the callback can run in the middle of any operation on it.

    """

    __slots__ = ("ref",)

    def __init__(self, config: IdentityConfig, hash_value: int, obj, pending: List[Slot]):
        super().__init__(config, hash_value)

        def expired(_, slot=self):
            pending.append(slot)

        self.ref: weakref.ref = weakref.ref(obj, expired)

    @property
    def value(self) -> Any:
        obj = self.ref()
        if obj is None:
            return DEAD
        return obj


class IdentitySet(Generic[T], MutableSet):
    """An unordered set of unique elements, where uniqueness is decided by an :class:`IdentityConfig`.

    The config is fixed for the lifetime of the set. Every set derived from this one, whether by
    :meth:`copy_empty`, by set algebra (``|``, ``&``, ``-``, ``^``), or by a combinator such as :meth:`select`, shares
    it.

    Iteration order is unspecified. Iterating takes a snapshot of the set's slots, so elements may be added or removed
    while an iteration is in progress; elements removed (or, under weak storage, collected) before they are reached are
    skipped, and elements added are not visited.

    Removing an element that may be absent is spelled :meth:`discard`, which does nothing if there is no such element.
    :meth:`remove` follows the :class:`collections.abc.MutableSet` contract and raises :exc:`KeyError` instead.

    Thread safety is left to the caller.

    """
    def __init__(self, initial_objs: Iterable[T] = (), config: Optional[IdentityConfig[T]] = None):
        """Initializes the set.

        Args:
            initial_objs: Elements to add, in order. Later elements equal to earlier ones are dropped.
            config: The identity configuration. Defaults to :meth:`IdentityConfig.value`.

        Raises:
            TypeMismatch: If any of :obj:`initial_objs` is incompatible with :obj:`config`. This is checked for every
                element before any of them is added.

        """
        if config is None:
            config = IdentityConfig.value()
        self._config: IdentityConfig[T] = config
        self._slots: Dict[Slot, Slot] = {}
        self._pending: List[Slot] = []
        objs = list(initial_objs)
        hashes = [config.check_element(obj) for obj in objs]
        for obj, h in zip(objs, hashes):
            self._insert(obj, h)

    @classmethod
    def with_config(cls, config: IdentityConfig[T]) -> "IdentitySet[T]":
        """Returns a new, empty set using :obj:`config`."""
        return cls(config=config)

    @classmethod
    def from_iterable(cls, initial_objs: Iterable[T], config: IdentityConfig[T]) -> "IdentitySet[T]":
        """Builds a set from :obj:`initial_objs`, keeping the first of any elements that :obj:`config` deems equal."""
        return cls(initial_objs, config=config)

    def _from_iterable(self, it: Iterable[T]) -> "IdentitySet[T]":
        # used by the MutableSet mixins (|, &, -, ^) to build their results
        return self.__class__(it, config=self._config)

    @property
    def config(self) -> IdentityConfig[T]:
        """The identity configuration of this set."""
        return self._config

    @property
    def storage(self) -> Storage:
        return self._config.storage

    def copy_empty(self) -> "IdentitySet[T]":
        """Returns a new, empty set with the same configuration as this one."""
        return self.__class__(config=self._config)

    def copy(self) -> "IdentitySet[T]":
        return self.__class__(self, config=self._config)

    def _purge(self):
        if not self._pending:
            return
        purged = 0
        while self._pending:
            slot = self._pending.pop()
            if self._slots.get(slot) is slot:
                del self._slots[slot]
                purged += 1
        if purged:
            log.debug(f"Purged {purged} collected element(s) from {self.__class__.__name__} {id(self):#x}")

    def _new_slot(self, obj, hash_value: int) -> Slot:
        if self._config.is_weak:
            return WeakSlot(self._config, hash_value, obj, self._pending)
        return StrongSlot(self._config, hash_value, obj)

    def _insert(self, obj, hash_value: int):
        slot = self._new_slot(obj, hash_value)
        self._slots.setdefault(slot, slot)

    def _lookup_slot(self, obj) -> Optional[Slot]:
        """Returns a temporary slot for looking up :obj:`obj`, or :const:`None` if it cannot be a member."""
        element_type = self._config.element_type
        if element_type is not None and not isinstance(obj, element_type):
            return None
        try:
            h = self._config.hash_fn(obj)
        except TypeError:
            return None
        return StrongSlot(self._config, h, obj)

    def _find(self, obj) -> Optional[Slot]:
        self._purge()
        key = self._lookup_slot(obj)
        if key is None:
            return None
        slot = self._slots.get(key)
        if slot is None or not slot.alive:
            return None
        return slot

    def add(self, value: T):
        """Adds :obj:`value` unless an element equal to it (according to the config) is already present.

        If one is, the existing element is kept and :obj:`value` is ignored.

        Raises:
            TypeMismatch: If :obj:`value` is incompatible with the config. The set is not modified.

        """
        h = self._config.check_element(value)
        self._purge()
        self._insert(value, h)

    def discard(self, value: T):
        """Removes the element equal to :obj:`value`, if there is one."""
        slot = self._find(value)
        if slot is not None:
            del self._slots[slot]

    def remove(self, value: T):
        """Removes the element equal to :obj:`value`.

        Raises:
            KeyError: If there is no such element.

        """
        slot = self._find(value)
        if slot is None:
            raise KeyError(value)
        del self._slots[slot]

    def clear(self):
        self._slots = {}
        self._pending.clear()

    def get(self, value: T, default: Optional[T] = None) -> Optional[T]:
        """Returns the member of this set that is equal to :obj:`value`, or :obj:`default` if there is none."""
        slot = self._find(value)
        if slot is None:
            return default
        obj = slot.value
        if obj is DEAD:
            return default
        return obj

    def any_object(self) -> Optional[T]:
        """Returns an arbitrary member of this set, or :const:`None` if it is empty."""
        for obj in self:
            return obj
        return None

    def all_objects(self) -> List[T]:
        """Returns a list of the current members of this set."""
        return list(self)

    def __contains__(self, x: object) -> bool:
        return self._find(x) is not None

    def __len__(self) -> int:
        self._purge()
        if self._config.is_weak:
            return sum(1 for slot in self._slots if slot.alive)
        return len(self._slots)

    def __iter__(self) -> Iterator[T]:
        self._purge()
        for slot in list(self._slots):
            obj = slot.value
            if obj is DEAD:
                continue
            current = self._slots.get(slot)
            if current is None or (current is not slot and current.value is not obj):
                # removed since the iteration started; a re-inserted member lives in a new slot
                continue
            yield obj

    def __repr__(self):
        return f"{self.__class__.__name__}({list(self)!r}, config={self._config!r})"

    def __str__(self):
        return f"{{{', '.join(map(str, self))}}}"

    # Combinators. These are thin wrappers around the functions in :mod:`pointerset.combinators`.

    def each(self, func: Callable[[T], Any]):
        """Calls :obj:`func` on every member. See :func:`pointerset.combinators.each`."""
        combinators.each(self, func)

    def match(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """See :func:`pointerset.combinators.match`."""
        return combinators.match(self, predicate)

    def select(self, predicate: Callable[[T], bool]) -> "IdentitySet[T]":
        """See :func:`pointerset.combinators.select`."""
        return combinators.select(self, predicate)

    def reject(self, predicate: Callable[[T], bool]) -> "IdentitySet[T]":
        """See :func:`pointerset.combinators.reject`."""
        return combinators.reject(self, predicate)

    def map(self, func: Callable[[T], U], config: Optional[IdentityConfig[U]] = None) -> "IdentitySet[U]":
        """See :func:`pointerset.combinators.map`."""
        return combinators.map(self, func, config=config)

    def reduce(self, initial: R, func: Callable[[R, T], R]) -> R:
        """See :func:`pointerset.combinators.reduce`."""
        return combinators.reduce(self, initial, func)

    def any(self, predicate: Callable[[T], bool]) -> bool:
        """See :func:`pointerset.combinators.any`."""
        return combinators.any(self, predicate)

    def all(self, predicate: Callable[[T], bool]) -> bool:
        """See :func:`pointerset.combinators.all`."""
        return combinators.all(self, predicate)

    def none(self, predicate: Callable[[T], bool]) -> bool:
        """See :func:`pointerset.combinators.none`."""
        return combinators.none(self, predicate)

    def perform_select(self, predicate: Callable[[T], bool]):
        """Keeps only the members satisfying :obj:`predicate`. See :func:`pointerset.combinators.perform_select`."""
        combinators.perform_select(self, predicate)

    def perform_reject(self, predicate: Callable[[T], bool]):
        """Drops the members satisfying :obj:`predicate`. See :func:`pointerset.combinators.perform_reject`."""
        combinators.perform_reject(self, predicate)

    def perform_map(self, func: Callable[[T], T]):
        """Replaces every member with :obj:`func` applied to it. See :func:`pointerset.combinators.perform_map`."""
        combinators.perform_map(self, func)
