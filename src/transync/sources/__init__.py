"""Inputs of a synchronization run: context registries and source messages.

Submodules:
    contexts - ContextRegistry, load_package_contexts
    messages - SourceMessage, MessageExtractor, collect_source_messages

Python 3.13+.
"""

from .contexts import (
    ContextRegistry,
    context_file_path,
    load_context_registry,
    load_package_contexts,
    serialize_context_entries,
)
from .messages import (
    ExtractedMessage,
    MessageExtractor,
    SourceMessage,
    collect_source_messages,
    find_package_path,
)

__all__ = [
    "ContextRegistry",
    "ExtractedMessage",
    "MessageExtractor",
    "SourceMessage",
    "collect_source_messages",
    "context_file_path",
    "find_package_path",
    "load_context_registry",
    "load_package_contexts",
    "serialize_context_entries",
]
