"""Higher-order functions for searching, filtering, transforming, and accumulating the members of an
:class:`pointerset.IdentitySet`.

Every function here is also available as a method of the same name on :class:`pointerset.IdentitySet`.

None of these functions specify a traversal order, so closures passed to them should not depend on one. Traversals
visit the members present when the traversal starts: members added by a closure are not visited, and members that are
removed (or, for weakly held members, collected) before they are reached are skipped.

Functions that return a new set give it the same :class:`pointerset.IdentityConfig` as their input, so the result can
be passed straight back into another combinator.

The in-place variants (:func:`perform_select`, :func:`perform_reject`, and :func:`perform_map`) evaluate their closure
over a snapshot of the set's members before changing its membership. If the closure raises, the exception propagates
unchanged and the set is left as it was.

Examples:

    >>> from pointerset import IdentitySet, combinators
    >>> s = IdentitySet([1, 2, 3, 4])
    >>> sorted(combinators.select(s, lambda x: x % 2 == 0))
    [2, 4]
    >>> combinators.reduce(s, 0, lambda total, x: total + x)
    10
    >>> combinators.perform_map(s, lambda x: x % 2)
    >>> sorted(s)
    [0, 1]

"""

import logging
from typing import Any, Callable, List, Optional, TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from .config import IdentityConfig
    from .identity_set import IdentitySet

log = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

Predicate = Callable[[T], bool]


def each(s: "IdentitySet[T]", func: Callable[[T], Any]):
    """Calls :obj:`func` once for each member of :obj:`s`."""
    for obj in s:
        func(obj)


def match(s: "IdentitySet[T]", predicate: Predicate) -> Optional[T]:
    """Returns the first member found for which :obj:`predicate` is true.

    This stops as soon as a member matches. Since the traversal order is unspecified, if more than one member matches
    then any of them may be returned.

    Returns:
        Optional[T]: A matching member, or :const:`None` if no member matches (including when :obj:`s` is empty).

    """
    for obj in s:
        if predicate(obj):
            return obj
    return None


def select(s: "IdentitySet[T]", predicate: Predicate) -> "IdentitySet[T]":
    """Returns a new set, with the same config as :obj:`s`, of the members for which :obj:`predicate` is true."""
    result = s.copy_empty()
    for obj in s:
        if predicate(obj):
            result.add(obj)
    return result


def reject(s: "IdentitySet[T]", predicate: Predicate) -> "IdentitySet[T]":
    """Returns a new set, with the same config as :obj:`s`, of the members for which :obj:`predicate` is false.

    Given the same members and a deterministic predicate, :func:`select` and :func:`reject` partition :obj:`s`.

    """
    result = s.copy_empty()
    for obj in s:
        if not predicate(obj):
            result.add(obj)
    return result


def _check_results(config: "IdentityConfig", results: List[Any]):
    for result in results:
        config.check_element(result)


def map(s: "IdentitySet[T]", func: Callable[[T], U], config: Optional["IdentityConfig[U]"] = None) -> "IdentitySet[U]":
    """Returns a new set of :obj:`func` applied to every member of :obj:`s`.

    The result uses the config of :obj:`s` unless a different :obj:`config` is given. The config must be able to
    handle the values :obj:`func` returns; for example, a config with an ``element_type`` of :class:`int` cannot hold
    strings, and a config with weak storage cannot hold objects that do not support weak references. Every result is
    checked before the new set is built.

    If two members map to results that the config considers equal, the result set holds only one of them: the first
    one produced. The result may therefore be smaller than :obj:`s`.

    Raises:
        TypeMismatch: If any result is incompatible with the config.

    """
    if config is None:
        config = s.config
    results = [func(obj) for obj in s]
    _check_results(config, results)
    mapped = s.__class__(results, config=config)
    if len(mapped) < len(results):
        log.debug(f"map collapsed {len(results)} results into {len(mapped)} distinct members")
    return mapped


def reduce(s: "IdentitySet[T]", initial: R, func: Callable[[R, T], R]) -> R:
    """Accumulates the members of :obj:`s` into a single value.

    Starting from :obj:`initial`, this calls ``accumulated = func(accumulated, member)`` for every member and returns
    the final value. The members are visited in no particular order, so the result is only well defined if
    :obj:`func` does not care about order (*e.g.*, a sum).

    """
    accumulated = initial
    for obj in s:
        accumulated = func(accumulated, obj)
    return accumulated


def any(s: "IdentitySet[T]", predicate: Predicate) -> bool:
    """Returns whether at least one member of :obj:`s` satisfies :obj:`predicate`, stopping at the first one found."""
    for obj in s:
        if predicate(obj):
            return True
    return False


def all(s: "IdentitySet[T]", predicate: Predicate) -> bool:
    """Returns whether every member of :obj:`s` satisfies :obj:`predicate`.

    This stops at the first member that does not. It is vacuously true for an empty set.

    """
    for obj in s:
        if not predicate(obj):
            return False
    return True


def none(s: "IdentitySet[T]", predicate: Predicate) -> bool:
    """Returns whether no member of :obj:`s` satisfies :obj:`predicate`. Equivalent to ``not any(s, predicate)``."""
    return not any(s, predicate)


def _replace_members(s: "IdentitySet[T]", members: List[T]):
    _check_results(s.config, members)
    s.clear()
    for obj in members:
        s.add(obj)


def perform_select(s: "IdentitySet[T]", predicate: Predicate):
    """Removes from :obj:`s` every member for which :obj:`predicate` is false.

    The surviving members are re-inserted, so members whose hash has changed since they were added are filed under
    their current hash.

    """
    old_members = list(s)
    _replace_members(s, [obj for obj in old_members if predicate(obj)])
    log.debug(f"perform_select kept {len(s)} of {len(old_members)} member(s)")


def perform_reject(s: "IdentitySet[T]", predicate: Predicate):
    """Removes from :obj:`s` every member for which :obj:`predicate` is true."""
    old_members = list(s)
    _replace_members(s, [obj for obj in old_members if not predicate(obj)])
    log.debug(f"perform_reject kept {len(s)} of {len(old_members)} member(s)")


def perform_map(s: "IdentitySet[T]", func: Callable[[T], T]):
    """Replaces the members of :obj:`s` with the results of calling :obj:`func` on each of them.

    The config of :obj:`s` does not change. As with :func:`map`, results that the config considers equal collapse
    into one member (the first one produced), so :obj:`s` may shrink.

    All of the current members are captured, and :obj:`func` is called on every one of them, before :obj:`s` is
    modified at all. Under weak storage, results that nothing else references are collected, and so vanish from
    :obj:`s`, as soon as this function returns.

    Raises:
        TypeMismatch: If any result is incompatible with the config of :obj:`s`. :obj:`s` is left unchanged.

    """
    old_members = list(s)
    _replace_members(s, [func(obj) for obj in old_members])
    log.debug(f"perform_map replaced {len(old_members)} member(s) with {len(s)}")
