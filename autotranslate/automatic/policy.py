"""
Field/locale policy

FieldLocalePolicy: immutable per-model declaration of which locales are
trusted sources and which locales are maintained targets for each
translatable field.

parse_options / validate_options turn the ``from``/``to`` options given to
``@automatic_translation`` into normalised locale tuples, failing fast on
an incomplete declaration.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from autotranslate.config import settings
from autotranslate.exceptions import ConfigurationError
from autotranslate.i18n.locale import normalize_locales


def _empty() -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({})


@dataclass(frozen=True)
class FieldLocalePolicy:
    """
    Per-field source and target locales of one host-record type.

    Attributes:
        source_locales: field → locales whose value may originate a cascade,
                        in priority order (first declared = highest).
        target_locales: field → locales kept in sync automatically, in
                        declaration order.

    Instances are never mutated; ``configure`` returns a new policy.
    """

    source_locales: Mapping[str, tuple[str, ...]] = field(default_factory=_empty)
    target_locales: Mapping[str, tuple[str, ...]] = field(default_factory=_empty)

    # ── Construction ──────────────────────────────────────────────────────────

    def configure(
        self,
        fields: Iterable[str],
        from_locales: Iterable[str],
        to_locales: Iterable[str],
    ) -> FieldLocalePolicy:
        """Return a policy with ``fields`` (re)registered; last write wins per field.

        Raises:
            ConfigurationError: if ``from_locales`` or ``to_locales`` is empty.
        """
        from_locales, to_locales = validate_options(from_locales, to_locales)
        sources = dict(self.source_locales)
        targets = dict(self.target_locales)
        for name in normalize_fields(fields):
            sources[name] = from_locales
            targets[name] = to_locales
        return replace(
            self,
            source_locales=MappingProxyType(sources),
            target_locales=MappingProxyType(targets),
        )

    # ── Lookup ────────────────────────────────────────────────────────────────

    def is_source(self, field_name: str, locale: str) -> bool:
        return locale in self.source_locales.get(field_name, ())

    def is_target(self, field_name: str, locale: str) -> bool:
        return locale in self.target_locales.get(field_name, ())

    def is_configured(self, field_name: str, locale: str) -> bool:
        return self.is_source(field_name, locale) or self.is_target(field_name, locale)

    def source_locales_for(self, field_name: str) -> tuple[str, ...]:
        return self.source_locales.get(field_name, ())

    def target_locales_for(self, field_name: str) -> tuple[str, ...]:
        return self.target_locales.get(field_name, ())

    def locales_for(self, field_name: str) -> tuple[str, ...]:
        """Sources then targets of ``field_name``, without duplicates."""
        return normalize_locales([self.source_locales_for(field_name), self.target_locales_for(field_name)])

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self.source_locales)

    @property
    def locales(self) -> tuple[str, ...]:
        return normalize_locales([self.locales_for(name) for name in self.fields])

    def default_flags(self, locale: str) -> dict[str, bool]:
        """Initial automatic flags for a new record in ``locale``.

        Fields targeted in ``locale`` default to automatic unless ``locale``
        is also one of their sources; untargeted fields are left out.
        """
        return {
            name: not self.is_source(name, locale)
            for name in self.fields
            if self.is_target(name, locale)
        }


# ── Option parsing ────────────────────────────────────────────────────────────


def normalize_fields(fields: Any) -> tuple[str, ...]:
    if isinstance(fields, str):
        return (fields,)
    return tuple(dict.fromkeys(str(name) for name in fields))


def parse_options(options: Any) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split automatic translation options into (from_locales, to_locales).

    ``{"from": ..., "to": ...}`` is used as given; any other value is taken
    as the source locales, with every supported language as target.
    """
    if isinstance(options, Mapping):
        from_locales = normalize_locales(options.get("from"))
        to_locales = normalize_locales(options.get("to"))
    else:
        from_locales = normalize_locales(options)
        to_locales = normalize_locales(settings.supported_languages)
    return from_locales, to_locales


def validate_options(from_locales: Any, to_locales: Any) -> tuple[tuple[str, ...], tuple[str, ...]]:
    from_locales = normalize_locales(from_locales)
    to_locales = normalize_locales(to_locales)
    if not from_locales:
        raise ConfigurationError("missing from option", option="from")
    if not to_locales:
        raise ConfigurationError("missing to option", option="to")
    return from_locales, to_locales
