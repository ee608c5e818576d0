"""
Generic repository over a SQLAlchemy session.

Insert/update/delete only stage changes on the session; nothing is written
until ``save_changes()`` commits. Repositories constructed on the same session
therefore form one unit of work.
"""
from typing import Generic, Iterable, List, Optional, Type, TypeVar, Union
from uuid import UUID

from sqlalchemy import and_, inspect
from sqlalchemy.orm import Query, RelationshipDirection, Session
from sqlalchemy.orm.attributes import set_committed_value

from expense_analyzer.db.core import ArgumentError, ArgumentNullError, Base
from expense_analyzer.logging_config import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class Repository(Generic[ModelType]):
    """CRUD and query primitives for a single ORM model."""

    def __init__(self, db: Session, model: Type[ModelType]):
        if db is None:
            raise ArgumentNullError("db")
        self.db = db
        self.model = model

    # ===== READS =====

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def get_all(self) -> List[ModelType]:
        return self.get_queryable().all()

    def get_with_filter(self, *criteria) -> List[ModelType]:
        """Return rows matching all of the given SQLAlchemy boolean expressions."""
        return self.get_queryable().filter(*criteria).all()

    def get_queryable(self) -> Query:
        """Composable query over the model, for ordering/paging beyond the fixed methods."""
        return self.db.query(self.model)

    def exists(self, *criteria) -> bool:
        return bool(self.db.query(self.get_queryable().filter(*criteria).exists()).scalar())

    def count(self, *criteria) -> int:
        query = self.db.query(self.model)
        if criteria:
            query = query.filter(*criteria)
        return query.count()

    def load_related(self, entity: ModelType, name: str) -> Union[Base, List[Base], None]:
        """
        Explicitly load a navigation property of ``entity``.

        Relationships are declared ``lazy="raise"``, so touching one that was
        never loaded is an error. This issues the query, attaches the result to
        the instance without marking it modified, and returns it.

        Args:
            entity: Persistent instance of this repository's model
            name: Relationship attribute name, e.g. ``"account"``

        Returns:
            The related row (or None) for many-to-one, a list for one-to-many
        """
        if entity is None:
            raise ArgumentNullError("entity")

        mapper = inspect(self.model)
        prop = mapper.relationships.get(name)
        if prop is None:
            raise ArgumentError(f"{self.model.__name__} has no relationship named '{name}'")

        conditions = [
            remote == getattr(entity, mapper.get_property_by_column(local).key)
            for local, remote in prop.local_remote_pairs
        ]
        query = self.db.query(prop.mapper.class_).filter(and_(*conditions))

        if prop.direction is RelationshipDirection.MANYTOONE:
            value = query.first()
        elif prop.direction is RelationshipDirection.ONETOMANY:
            value = query.all()
        else:
            raise ArgumentError(f"Relationship '{name}' cannot be loaded explicitly")

        set_committed_value(entity, name, value)
        return value

    # ===== STAGED WRITES =====

    def insert(self, entity: ModelType) -> None:
        if entity is None:
            raise ArgumentNullError("entity")
        self.db.add(entity)

    def insert_range(self, entities: Iterable[ModelType]) -> None:
        if entities is None:
            raise ArgumentNullError("entities")
        self.db.add_all(list(entities))

    def update(self, entity: ModelType) -> None:
        if entity is None:
            raise ArgumentNullError("entity")
        if inspect(entity).transient:
            # Not loaded through this session: copy its state onto the stored row
            self.db.merge(entity)
        else:
            self.db.add(entity)

    def update_range(self, entities: Iterable[ModelType]) -> None:
        if entities is None:
            raise ArgumentNullError("entities")
        for entity in entities:
            self.update(entity)

    def delete(self, entity: ModelType) -> None:
        if entity is None:
            raise ArgumentNullError("entity")
        if inspect(entity).pending:
            # Staged by insert and never written: just un-stage it
            self.db.expunge(entity)
        else:
            self.db.delete(entity)

    def delete_by_id(self, entity_id: UUID) -> None:
        entity = self.get_by_id(entity_id)
        if entity is not None:
            self.delete(entity)

    def delete_range(self, entities: Iterable[ModelType]) -> None:
        if entities is None:
            raise ArgumentNullError("entities")
        for entity in entities:
            self.delete(entity)

    # ===== COMMIT =====

    def save_changes(self) -> int:
        """
        Commit every change staged on the session as one transaction.

        Returns:
            Number of staged rows inserted, updated or deleted. Rows the
            database removes on its own through ON DELETE CASCADE (an
            expense's or tag's ExpenseTag links) are not counted.

        Raises:
            sqlalchemy.exc.IntegrityError and other DBAPI errors, after rolling back
        """
        modified = [obj for obj in self.db.dirty if self.db.is_modified(obj)]
        affected = len(self.db.new) + len(modified) + len(self.db.deleted)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.debug(f"Saved {affected} change(s) via {type(self).__name__}")
        return affected
