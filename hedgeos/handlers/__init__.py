from .base import BaseHandler, Handler, Mounted
from .registry import (
    DEFAULT_FILE_TYPE,
    EXTENSION_FILE_TYPES,
    HandlerRegistry,
    build_default_registry,
)

__all__ = [
    "BaseHandler",
    "Handler",
    "Mounted",
    "DEFAULT_FILE_TYPE",
    "EXTENSION_FILE_TYPES",
    "HandlerRegistry",
    "build_default_registry",
]
