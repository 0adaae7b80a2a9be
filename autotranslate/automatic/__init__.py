"""
Automatic translation engine

Keeps locale variants of translated fields in sync: a committed edit in a
source locale cascades into every target locale whose value is still
automatic, while targets pinned by hand are never overwritten.
"""

from .cascade import CascadeResolver, TranslationRequest
from .declarative import (
    AutomaticTranslation,
    AutomaticTranslationMixin,
    automatic_attribute_name,
    automatic_translation,
)
from .dispatcher import TranslationDispatcher
from .orchestrator import TranslationOrchestrator
from .policy import FieldLocalePolicy, parse_options
from .registry import HostRegistry, host_registry
from .source import SourceLocaleSelector
from .state import TranslationStateCache
from .store import CommitHooks, LocalizedRecordStore, SessionCommitHooks, SqlAlchemyRecordStore

__all__ = [
    "AutomaticTranslation",
    "AutomaticTranslationMixin",
    "CascadeResolver",
    "CommitHooks",
    "FieldLocalePolicy",
    "HostRegistry",
    "LocalizedRecordStore",
    "SessionCommitHooks",
    "SourceLocaleSelector",
    "SqlAlchemyRecordStore",
    "TranslationDispatcher",
    "TranslationOrchestrator",
    "TranslationRequest",
    "TranslationStateCache",
    "automatic_attribute_name",
    "automatic_translation",
    "host_registry",
    "parse_options",
]
