"""Common plumbing for hand-written SQL repositories.

Each aggregate registers a ``SqlRepository`` subclass with the domain, so
``current_domain.repository_for(Aggregate)`` hands back SQL-backed
persistence instead of protean's generated ORM repository. Statements run on
the provider's SQLAlchemy session: the unit of work's session when one is in
progress, otherwise a short-lived session committed after the statement.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from protean.core.repository import BaseRepository
from protean.utils.globals import current_uow
from sqlalchemy import Row, TextClause, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, scoped_session

from storefront.exceptions import DuplicateResourceError
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.rows import db_id, db_timestamp

T = TypeVar("T")


class SqlRepository(BaseRepository):
    """Subclasses implement ``_insert`` and ``_update``; ``add`` picks one by entity state."""

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if current_uow and current_uow.in_progress:
            session = current_uow.get_session(self._provider.name)
            yield session() if isinstance(session, scoped_session) else session
            return

        session = self._provider.get_connection()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def add(self, item):
        with self._session() as session:
            if item.state_.is_persisted:
                self._update(session, item)
            else:
                self._insert(session, item)
        item.state_.mark_saved()
        return item

    def _insert(self, session: Session, item) -> None:
        raise NotImplementedError

    def _update(self, session: Session, item) -> None:
        raise NotImplementedError

    # --- Statement helpers ---

    def _execute(self, statement: str | TextClause, params: dict[str, Any] | None = None) -> int:
        """Run a write statement and return the affected row count."""
        with self._session() as session:
            return self._run(session, statement, params).rowcount

    def _first(self, statement: str | TextClause, params: dict[str, Any] | None = None) -> Row | None:
        with self._session() as session:
            return self._run(session, statement, params).first()

    def _all(self, statement: str | TextClause, params: dict[str, Any] | None = None) -> list[Row]:
        with self._session() as session:
            return list(self._run(session, statement, params).all())

    def _scalar(self, statement: str | TextClause, params: dict[str, Any] | None = None):
        with self._session() as session:
            return self._run(session, statement, params).scalar()

    @staticmethod
    def _run(session: Session, statement: str | TextClause, params: dict[str, Any] | None = None):
        clause = text(statement) if isinstance(statement, str) else statement
        return session.execute(clause, params or {})

    def _page(
        self,
        select_sql: str,
        count_sql: str,
        params: dict[str, Any],
        request: PageRequest,
        mapper: Callable[[Row], T],
    ) -> Page[T]:
        """Run a limited SELECT and its COUNT(*) twin and assemble a page."""
        total = self._scalar(count_sql, params) or 0
        rows = self._all(
            f"{select_sql} LIMIT :limit OFFSET :offset",
            {**params, "limit": request.size, "offset": request.offset},
        )
        return Page.of([mapper(row) for row in rows], request, int(total))

    @contextmanager
    def _unique(self, field: str, message: str) -> Iterator[None]:
        """Translate a unique-constraint violation into a duplicate-resource error.

        The error propagates, so the unit of work rolls back.
        """
        try:
            yield
        except IntegrityError as exc:
            raise DuplicateResourceError({field: [message]}) from exc


def stamp_params(item) -> dict[str, Any]:
    """Identity and audit columns shared by every table."""
    return {
        "id": db_id(item.id),
        "created_at": db_timestamp(item.created_at),
        "updated_at": db_timestamp(item.updated_at),
    }
