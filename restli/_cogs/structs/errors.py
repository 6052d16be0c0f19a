"""
Errors of the encoding, decoding, and patching layers.

All of them indicate a caller-side mistake (a value of a wrong shape,
a malformed token, a patch that changes nothing), never a transient condition.
They are raised synchronously and are never retried or recovered internally.

The errors are also `ValueError`, so that the generic input validation
in the callers' code (``except ValueError:``) keeps working.
"""


class RestliError(Exception):
    """ The root of all errors raised by the package. """


class EncodingError(RestliError, ValueError):
    """ A value cannot be represented in the URI-encoding grammar. """


class DecodingError(RestliError, ValueError):
    """ A token does not follow the URI-encoding grammar. """


class PatchError(RestliError, ValueError):
    pass


class EmptyPatchError(PatchError):
    """ The snapshots are equal: the caller asked to update nothing. """


class InvalidPatchInputError(PatchError):
    """ The direct-set map or the diffed snapshots are empty or malformed. """


class RequestError(RestliError, ValueError):
    """ The request builders are called with inconsistent arguments. """
