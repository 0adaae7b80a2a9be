"""
Automatic Translation Routes

``build_automatic_translation_router(model, get_db)`` returns an APIRouter
exposing the automatic-translation toggles of one host model:

    GET    /{host_id}/automatic                               → current toggles
    PUT    /{host_id}/automatic                               → set toggles
    POST   /{host_id}/automatic/{field}/{locale}/translate    → re-translate one target

Mount it under the model's own prefix, e.g.
``app.include_router(router, prefix="/api/v1/articles")``.
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session  # noqa: TC002

from autotranslate.automatic.registry import host_type_of
from autotranslate.exceptions import AutoTranslateException, HostRecordNotFoundError

logger = logging.getLogger(__name__)


# ── Pydantic schemas ───────────────────────────────────────────────────────────


class AutomaticFlagsUpdate(BaseModel):
    flags: dict[str, bool]


class AutomaticFlagsResponse(BaseModel):
    host_id: int
    flags: dict[str, bool]


class RetranslateRequest(BaseModel):
    from_locale: str | None = None


class RetranslateResponse(BaseModel):
    host_id: int
    field: str
    from_locale: str
    to_locale: str


# ── Router factory ─────────────────────────────────────────────────────────────


def build_automatic_translation_router(model: type, get_db: Callable[..., Any]) -> APIRouter:
    router = APIRouter(tags=["Automatic Translations"])
    host_type = host_type_of(model)

    def _load_host(db: Session, host_id: int):
        host = db.get(model, host_id)
        if host is None:
            raise HostRecordNotFoundError(host_type, host_id)
        return host

    def _http_error(exc: AutoTranslateException) -> HTTPException:
        return HTTPException(status_code=exc.status_code, detail=exc.message)

    @router.get("/{host_id}/automatic", response_model=AutomaticFlagsResponse)
    def get_automatic_flags(host_id: int, db: Session = Depends(get_db)):
        """Return every ``<field>_<locale>_automatic`` toggle of the host."""
        try:
            host = _load_host(db, host_id)
            return AutomaticFlagsResponse(host_id=host_id, flags=host.automatic_flags())
        except AutoTranslateException as exc:
            raise _http_error(exc) from exc

    @router.put("/{host_id}/automatic", response_model=AutomaticFlagsResponse)
    def update_automatic_flags(host_id: int, payload: AutomaticFlagsUpdate, db: Session = Depends(get_db)):
        """Pin (False) or release (True) targets; unknown toggle names are rejected."""
        try:
            host = _load_host(db, host_id)
            host.assign_automatic_flags(payload.flags)
            db.commit()
            logger.info("Automatic flags updated: %s %d %s", host_type, host_id, payload.flags)
            return AutomaticFlagsResponse(host_id=host_id, flags=host.automatic_flags())
        except AutoTranslateException as exc:
            db.rollback()
            raise _http_error(exc) from exc

    @router.post(
        "/{host_id}/automatic/{field}/{locale}/translate",
        response_model=RetranslateResponse,
        status_code=status.HTTP_202_ACCEPTED,
    )
    def retranslate_field(
        host_id: int,
        field: str,
        locale: str,
        payload: RetranslateRequest | None = None,
        db: Session = Depends(get_db),
    ):
        """Translate one target locale again from its best (or the given) source."""
        from_locale = payload.from_locale if payload else None
        try:
            host = _load_host(db, host_id)
            request = host.retranslate(field, locale, from_locale)
            db.commit()
        except AutoTranslateException as exc:
            db.rollback()
            raise _http_error(exc) from exc
        return RetranslateResponse(
            host_id=host_id,
            field=request.field,
            from_locale=request.from_locale,
            to_locale=request.to_locale,
        )

    return router
