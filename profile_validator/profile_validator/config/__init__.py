"""Configuration file support for profile registries."""

from .loader import load_config, load_document, load_obj, load_registry, parse_replacements

__all__ = [
    "load_config",
    "load_document",
    "load_obj",
    "load_registry",
    "parse_replacements",
]
