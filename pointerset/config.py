"""Identity configurations: what it means for two members of an :class:`pointerset.IdentitySet` to be "the same".

An :class:`IdentityConfig` bundles a hash function, an equality function, and a :class:`Storage` strength. It is fixed
when a set is created and is shared by every set derived from it through the :mod:`pointerset.combinators`.

Examples:

    >>> from pointerset import IdentityConfig, Storage
    >>> IdentityConfig.value()
    IdentityConfig.value(storage=Storage.STRONG)
    >>> IdentityConfig.preset("identity", "weak").storage
    <Storage.WEAK: 'weak'>

"""

import operator
import weakref
from enum import Enum
from typing import Any, Callable, Generic, Optional, Type, TypeVar, Union
from typing_extensions import Protocol

from .exceptions import InvalidConfig, TypeMismatch

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class HashFunction(Protocol[T_contra]):
    """The call shape of :attr:`IdentityConfig.hash_fn`."""
    def __call__(self, obj: T_contra) -> int:
        ...


class EqualityFunction(Protocol[T_contra]):
    """The call shape of :attr:`IdentityConfig.equal_fn`."""
    def __call__(self, a: T_contra, b: T_contra) -> bool:
        ...


class Storage(Enum):
    """How a set holds on to its members."""

    STRONG = "strong"
    """The set keeps each member alive for as long as it is in the set."""
    WEAK = "weak"
    """The set holds a weak reference; a member disappears from the set once its last strong reference is dropped."""

    @classmethod
    def parse(cls, storage: Union["Storage", str]) -> "Storage":
        if isinstance(storage, Storage):
            return storage
        try:
            return cls(str(storage).lower())
        except ValueError:
            raise InvalidConfig(f"Unknown storage strength {storage!r}; expected one of "
                                f"{', '.join(s.value for s in cls)}")


class Equality(Enum):
    """The named equality presets accepted by :meth:`IdentityConfig.preset`."""

    IDENTITY = "identity"
    """Members are the same only if they are the same object (``is``), hashed by :func:`id`."""
    VALUE = "value"
    """Members are the same object or compare equal with ``==``, and are hashed with :func:`hash`."""


def _same_or_equal(a, b) -> bool:
    # same short-cut as the builtin containers, so that an object unequal to itself (e.g. NaN) is still found
    return a is b or a == b


class IdentityConfig(Generic[T]):
    """An immutable (hash, equality, storage) triple.

    ``hash_fn`` and ``equal_fn`` must be consistent: any two elements for which ``equal_fn`` returns :const:`True`
    must have the same ``hash_fn``. This is a contract on the caller and is not checked.

    """

    __slots__ = ("_hash_fn", "_equal_fn", "_storage", "_element_type", "_name")

    def __init__(
            self,
            hash_fn: HashFunction[T],
            equal_fn: EqualityFunction[T],
            storage: Union[Storage, str] = Storage.STRONG,
            element_type: Optional[Type[T]] = None,
            name: Optional[str] = None
    ):
        """Initializes an identity configuration.

        Args:
            hash_fn: Maps an element to an integer hash.
            equal_fn: Decides whether two elements are the same member.
            storage: Whether sets using this config hold members strongly or weakly.
            element_type: If not :const:`None`, every element inserted under this config must be an instance of it.
            name: An optional label used when printing the config.

        Raises:
            InvalidConfig: If a function is not callable, the storage strength is unknown, or :obj:`element_type` is
                not a type.

        """
        if not callable(hash_fn):
            raise InvalidConfig(f"hash_fn must be callable, not {hash_fn!r}")
        if not callable(equal_fn):
            raise InvalidConfig(f"equal_fn must be callable, not {equal_fn!r}")
        if element_type is not None and not isinstance(element_type, type):
            raise InvalidConfig(f"element_type must be a type, not {element_type!r}")
        self._hash_fn: HashFunction[T] = hash_fn
        self._equal_fn: EqualityFunction[T] = equal_fn
        self._storage: Storage = Storage.parse(storage)
        self._element_type: Optional[Type[T]] = element_type
        self._name: Optional[str] = name

    @classmethod
    def identity(
            cls, storage: Union[Storage, str] = Storage.STRONG, element_type: Optional[Type[T]] = None
    ) -> "IdentityConfig[T]":
        """Members are distinct unless they are the very same object."""
        return cls(id, operator.is_, storage=storage, element_type=element_type, name="identity")

    @classmethod
    def value(
            cls, storage: Union[Storage, str] = Storage.STRONG, element_type: Optional[Type[T]] = None
    ) -> "IdentityConfig[T]":
        """Members are compared with their own ``__eq__`` and ``__hash__``."""
        return cls(hash, _same_or_equal, storage=storage, element_type=element_type, name="value")

    @classmethod
    def custom(
            cls,
            hash_fn: HashFunction[T],
            equal_fn: EqualityFunction[T],
            storage: Union[Storage, str] = Storage.STRONG,
            element_type: Optional[Type[T]] = None
    ) -> "IdentityConfig[T]":
        return cls(hash_fn, equal_fn, storage=storage, element_type=element_type)

    @classmethod
    def preset(
            cls,
            equality: Union[Equality, str] = Equality.VALUE,
            storage: Union[Storage, str] = Storage.STRONG,
            element_type: Optional[Type[T]] = None
    ) -> "IdentityConfig[T]":
        """Looks up one of the named presets.

        Args:
            equality: Either an :class:`Equality` or its string value (``"identity"`` or ``"value"``).
            storage: Either a :class:`Storage` or its string value (``"strong"`` or ``"weak"``).
            element_type: Passed through to the config.

        Raises:
            InvalidConfig: If either name is unknown.

        """
        if not isinstance(equality, Equality):
            try:
                equality = Equality(str(equality).lower())
            except ValueError:
                raise InvalidConfig(f"Unknown equality preset {equality!r}; expected one of "
                                    f"{', '.join(e.value for e in Equality)}")
        if equality == Equality.IDENTITY:
            return cls.identity(storage=storage, element_type=element_type)
        return cls.value(storage=storage, element_type=element_type)

    @property
    def hash_fn(self) -> HashFunction[T]:
        return self._hash_fn

    @property
    def equal_fn(self) -> EqualityFunction[T]:
        return self._equal_fn

    @property
    def storage(self) -> Storage:
        return self._storage

    @property
    def element_type(self) -> Optional[Type[T]]:
        return self._element_type

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def is_weak(self) -> bool:
        return self._storage == Storage.WEAK

    def replace(self, **changes) -> "IdentityConfig":
        """Returns a copy of this config with some fields swapped out.

        This is how a config is reinterpreted over a different element type, *e.g.*, for the target of
        :func:`pointerset.combinators.map`::

            config.replace(element_type=str)

        Any of ``hash_fn``, ``equal_fn``, ``storage``, ``element_type``, and ``name`` may be given.

        """
        fields = {
            "hash_fn": self._hash_fn,
            "equal_fn": self._equal_fn,
            "storage": self._storage,
            "element_type": self._element_type,
            "name": self._name
        }
        unknown = set(changes) - set(fields)
        if unknown:
            raise InvalidConfig(f"Unknown IdentityConfig field(s): {', '.join(sorted(unknown))}")
        if ("hash_fn" in changes or "equal_fn" in changes) and "name" not in changes:
            fields["name"] = None
        fields.update(changes)
        return IdentityConfig(**fields)

    def check_element(self, obj: Any) -> int:
        """Ensures that :obj:`obj` can be stored in a set using this config.

        Returns:
            int: The hash of :obj:`obj` under :attr:`hash_fn`.

        Raises:
            InvalidConfig: If :attr:`hash_fn` returns something other than an :class:`int`.
            TypeMismatch: If :obj:`obj` is not an instance of :attr:`element_type`, cannot be weakly referenced under
                :attr:`Storage.WEAK` storage, or :attr:`hash_fn` rejects it with a :exc:`TypeError`.

        """
        if self._element_type is not None and not isinstance(obj, self._element_type):
            raise TypeMismatch(f"{obj!r} is a {type(obj).__name__}, but this set holds "
                               f"{self._element_type.__name__} elements", element=obj)
        if self._storage == Storage.WEAK:
            try:
                weakref.ref(obj)
            except TypeError:
                raise TypeMismatch(f"Objects of type {type(obj).__name__} cannot be weakly referenced, so they cannot "
                                   "be stored in a set with weak storage", element=obj)
        try:
            h = self._hash_fn(obj)
        except TypeError as e:
            raise TypeMismatch(f"{obj!r} cannot be hashed by {self._describe_fn(self._hash_fn)}: {e!s}", element=obj)
        if not isinstance(h, int):
            raise InvalidConfig(f"{self._describe_fn(self._hash_fn)} returned {h!r} for {obj!r}; hash functions must "
                                "return an int")
        return h

    @staticmethod
    def _describe_fn(func: Callable) -> str:
        return getattr(func, "__qualname__", None) or repr(func)

    def _key(self):
        return self._hash_fn, self._equal_fn, self._storage, self._element_type

    def __eq__(self, other):
        if not isinstance(other, IdentityConfig):
            return False
        return self is other or self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        args = [f"storage={self._storage!s}"]
        if self._element_type is not None:
            args.append(f"element_type={self._element_type.__name__}")
        if self._name in ("identity", "value"):
            return f"{self.__class__.__name__}.{self._name}({', '.join(args)})"
        args = [f"hash_fn={self._describe_fn(self._hash_fn)}", f"equal_fn={self._describe_fn(self._equal_fn)}"] + args
        if self._name is not None:
            args.append(f"name={self._name!r}")
        return f"{self.__class__.__name__}({', '.join(args)})"
