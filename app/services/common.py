# app/services/common.py
#
# Plumbing shared by the category, supplier and product services:
# store error translation, lookups and the optimistic-concurrency commit.

import functools
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import (
    ConcurrencyConflict,
    Gone,
    IdMismatch,
    NotFound,
    StoreUnavailable,
    ValidationFailed,
)

logger = logging.getLogger("app.services")


def store_guard(func):
    """Turn connectivity failures raised by the store into StoreUnavailable.

    The wrapped service must take the session as its first argument; it is
    rolled back so the request can still be answered.
    """

    @functools.wraps(func)
    def wrapper(db: Session, *args, **kwargs):
        try:
            return func(db, *args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            db.rollback()
            logger.error(f"Store unavailable during {func.__name__}: {exc}")
            raise StoreUnavailable(exc) from exc

    return wrapper


def text_filter(query, q, *columns):
    # Literal substring match; % and _ in the search text are escaped
    if q:
        query = query.filter(
            or_(*[column.contains(q, autoescape=True) for column in columns])
        )
    return query


def get_or_404(db: Session, model, entity_id: int, entity_type: str):
    entity = db.get(model, entity_id)
    if entity is None:
        raise NotFound(entity_type, entity_id)
    return entity


def exists(db: Session, model, entity_id: int) -> bool:
    return (
        db.query(model.id)
        .filter(model.id == entity_id)
        .first()
        is not None
    )


def ensure_same_id(path_id: int, payload_id: int):
    if path_id != payload_id:
        raise IdMismatch(path_id, payload_id)


def ensure_version(entity, expected_version, entity_type: str):
    # Client read an older row than the one stored now
    if expected_version is not None and expected_version != entity.version:
        raise ConcurrencyConflict(entity_type, entity.id)


def validation_error(errors):
    return ValidationFailed(errors) if errors else None


def _reraise_integrity(db: Session, exc: IntegrityError, explain):
    # A concurrent write slipped past the pre-write checks; `explain`
    # re-runs them and returns the typed error, or None to re-raise
    db.rollback()
    error = explain() if explain else None
    if error is None:
        raise exc
    logger.warning(f"Integrity violation reported as {error.code}: {exc.orig}")
    raise error from exc


def commit_new(db: Session, explain=None):
    try:
        db.commit()
    except IntegrityError as exc:
        _reraise_integrity(db, exc, explain)


def commit_versioned(db: Session, model, entity_id: int, entity_type: str, explain=None):
    """Commit a change to (or the removal of) a versioned row.

    A StaleDataError means the UPDATE/DELETE matched no row with the version
    we loaded: either the row was removed (Gone) or someone else changed it
    first (ConcurrencyConflict). Nothing is retried.
    """
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        if not exists(db, model, entity_id):
            logger.warning(f"{entity_type} {entity_id} vanished before commit")
            raise Gone(entity_type, entity_id)
        logger.warning(f"Concurrent modification on {entity_type} {entity_id}")
        raise ConcurrencyConflict(entity_type, entity_id)
    except IntegrityError as exc:
        _reraise_integrity(db, exc, explain)
