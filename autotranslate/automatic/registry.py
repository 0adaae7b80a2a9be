"""
Host Registry

HostRegistry: in-process singleton mapping a host type key (the model's
``__tablename__``) to the model class declared with
``@automatic_translation``. Background jobs and flush listeners use it to
turn a stored ``(host_type, host_id)`` pair back into a host instance.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session  # noqa: TC002

logger = logging.getLogger(__name__)


class HostRegistry:
    def __init__(self) -> None:
        self._models: dict[str, type] = {}

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, model: type) -> None:
        host_type = host_type_of(model)
        if self._models.get(host_type) is not model:
            self._models[host_type] = model
            logger.info("Automatic translation registered: %s", host_type)

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, host_type: str) -> type | None:
        return self._models.get(host_type)

    def all_models(self) -> list[type]:
        """Return registered models in registration order."""
        return list(self._models.values())

    def load(self, session: Session, host_type: str, host_id: int) -> Any | None:
        """Return the host instance from ``session``, or None if type or row is unknown."""
        model = self.get(host_type)
        if model is None:
            logger.warning("No model registered for host type %s", host_type)
            return None
        return session.get(model, host_id)


def host_type_of(model: type) -> str:
    return model.__tablename__


# ── Global singleton ──────────────────────────────────────────────────────────
host_registry = HostRegistry()
