"""Generic repository with the CRUD primitives shared by every entity."""

from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, select, update

from teamhub.storage.db import Base, Database

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """CRUD operations for one ORM model.

    Each call runs in its own transaction. ``keys`` is a mapping of primary
    key columns to values. ``conditions`` are extra match clauses on
    ``update`` and ``delete``: a row that exists but fails them is reported
    exactly like a missing row, which is what makes guarded writes usable
    as optimistic concurrency control.

    Subclasses set ``model`` and add their entity-specific queries.
    """

    model: type[ModelT]

    def __init__(self, db: Database):
        self.db = db

    def create(self, entity: ModelT) -> ModelT:
        """Insert a new row. Raises IntegrityError on a duplicate key."""
        with self.db.session() as session:
            session.add(entity)
            session.flush()
        return entity

    def get(self, **keys: Any) -> ModelT | None:
        with self.db.session() as session:
            return session.scalars(select(self.model).filter_by(**keys)).first()

    def update(
        self,
        keys: dict[str, Any],
        values: dict[str, Any],
        *conditions: ColumnElement[bool],
    ) -> ModelT | None:
        """Patch a row in place.

        Returns:
            The updated entity, or None if no row matched keys and conditions
        """
        with self.db.session() as session:
            stmt = update(self.model).filter_by(**keys)
            if conditions:
                stmt = stmt.where(*conditions)
            result = session.execute(
                stmt.values(**values).execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            return session.scalars(select(self.model).filter_by(**keys)).one()

    def save(self, entity: ModelT) -> ModelT:
        """Insert or overwrite a row (upsert)."""
        with self.db.session() as session:
            merged = session.merge(entity)
            session.flush()
        return merged

    def delete(self, keys: dict[str, Any], *conditions: ColumnElement[bool]) -> ModelT | None:
        """Delete a row.

        Returns:
            The deleted entity, or None if no row matched keys and conditions
        """
        with self.db.session() as session:
            query = select(self.model).filter_by(**keys)
            stmt = delete(self.model).filter_by(**keys)
            if conditions:
                query = query.where(*conditions)
                stmt = stmt.where(*conditions)

            entity = session.scalars(query).first()
            if entity is None:
                return None

            result = session.execute(stmt.execution_options(synchronize_session=False))
            if result.rowcount == 0:
                # Deleted or changed by someone else between the two statements
                return None
            session.expunge(entity)
            return entity

    def find_many(self, *conditions: ColumnElement[bool], **filters: Any) -> list[ModelT]:
        with self.db.session() as session:
            query = select(self.model).filter_by(**filters)
            if conditions:
                query = query.where(*conditions)
            return list(session.scalars(query))

    def delete_many(self, *conditions: ColumnElement[bool], **filters: Any) -> list[ModelT]:
        """Delete every matching row.

        Returns:
            The rows that were deleted
        """
        with self.db.session() as session:
            query = select(self.model).filter_by(**filters)
            stmt = delete(self.model).filter_by(**filters)
            if conditions:
                query = query.where(*conditions)
                stmt = stmt.where(*conditions)

            entities = list(session.scalars(query))
            session.execute(stmt.execution_options(synchronize_session=False))
            session.expunge_all()
            return entities
