"""Exceptions raised by :mod:`pointerset`.

Lookups that find nothing (:meth:`IdentitySet.__contains__ <pointerset.IdentitySet.__contains__>`,
:func:`pointerset.combinators.match`, :meth:`IdentitySet.discard <pointerset.IdentitySet.discard>`) never raise; they
return :const:`None` or :const:`False` instead.

"""


class IdentitySetError(Exception):
    """Base class for all errors raised by this package."""
    pass


class TypeMismatch(IdentitySetError, TypeError):
    """An element is incompatible with the :class:`pointerset.IdentityConfig` of the set it is being inserted into.

    This is raised before any membership change, so the set involved is left untouched.

    """
    def __init__(self, message: str, element=None):
        super().__init__(message)
        self.element = element
        """The offending element."""


class InvalidConfig(IdentitySetError, ValueError):
    """A :class:`pointerset.IdentityConfig` was built from arguments that cannot possibly work.

    Only cheaply detectable problems are reported (*e.g.*, a hash function that is not callable). Whether ``hash_fn``
    agrees with ``equal_fn`` is a caller contract and is never checked.

    """
    pass
