from __future__ import annotations

import functools
import sqlite3
from dataclasses import dataclass
from typing import Any, Callable, Optional

# Error kinds
CONSTRAINT = "constraint"  # referential constraint (e.g. store still referenced by sales)
CONFLICT = "conflict"  # uniqueness / check rejected by the store
NOT_FOUND = "not_found"
ERROR = "error"

FOREIGN_KEY_VIOLATION_CODE = "23503"  # PostgreSQL SQLSTATE, when a driver provides one


@dataclass(frozen=True)
class StoreError:
    message: str
    kind: str = ERROR
    code: Optional[str] = None

    @property
    def is_constraint_violation(self) -> bool:
        return self.kind == CONSTRAINT

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Result:
    ok: bool
    data: Any = None
    error: Optional[StoreError] = None

    @classmethod
    def success(cls, data: Any = None) -> "Result":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: StoreError, data: Any = None) -> "Result":
        return cls(ok=False, data=data, error=error)

    @property
    def message(self) -> str:
        return self.error.message if self.error else ""


def classify_error(exc: BaseException) -> StoreError:
    """
    Map an exception raised while talking to the store onto a StoreError.

    Foreign-key failures must stay distinguishable from everything else so
    views can explain them; the message is kept verbatim.
    """
    message = str(exc) or exc.__class__.__name__
    code = getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None) or getattr(exc, "sqlite_errorname", None)
    code = str(code) if code is not None else None
    lowered = message.lower()

    if code == FOREIGN_KEY_VIOLATION_CODE or "foreign key" in lowered:
        return StoreError(message=message, kind=CONSTRAINT, code=code)
    if isinstance(exc, sqlite3.IntegrityError) and ("unique" in lowered or "check constraint" in lowered):
        return StoreError(message=message, kind=CONFLICT, code=code)
    return StoreError(message=message, kind=ERROR, code=code)


def trapped(op: str, *, empty: Any = None, log=None) -> Callable:
    """
    Decorator for data operations: the wrapped function returns its payload
    (or a ready-made Result) and raises on failure; callers always get a Result.
    """

    def deco(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> Result:
            try:
                out = fn(*args, **kwargs)
            except (sqlite3.Error, ValueError, TypeError) as e:
                err = classify_error(e)
                if log is not None:
                    log.warning("%s failed (%s): %s", op, err.kind, err.message)
                return Result.failure(err, data=empty() if callable(empty) else empty)
            if isinstance(out, Result):
                if not out.ok and log is not None:
                    log.warning("%s failed (%s): %s", op, out.error.kind, out.error.message)
                return out
            return Result.success(out)

        return wrapper

    return deco


def require_conn(conn: Optional[sqlite3.Connection]) -> sqlite3.Connection:
    if conn is None:
        raise sqlite3.OperationalError("Database is not available. Check CHIP_SALES_DB_URL / the data directory.")
    return conn
