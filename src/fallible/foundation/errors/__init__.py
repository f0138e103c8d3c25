"""Failure normalization for fallible.

- NormalizedError: canonical failure shape (message + original cause)
- NormalizedException: raisable wrapper around a NormalizedError
- ErrorKind: classification of the value that was normalized
- normalize: total conversion from any raised value
"""

from .errors import ErrorKind, NormalizedError, NormalizedException, normalize

__all__ = ["ErrorKind", "NormalizedError", "NormalizedException", "normalize"]
