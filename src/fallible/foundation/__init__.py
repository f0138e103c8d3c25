"""Foundation layer: failure normalization and configuration."""

from .config import FallibleSettings, clear_settings_cache, get_settings
from .errors import ErrorKind, NormalizedError, NormalizedException, normalize

__all__ = [
    "ErrorKind", "NormalizedError", "NormalizedException", "normalize",
    "FallibleSettings", "clear_settings_cache", "get_settings",
]
