"""
Collection Store
Generic record collection over a SQLAlchemy session: insert / get /
update plus a chainable, filterable, orderable query.

The engine reads and writes all persisted state through collections.
Writes are flushed, never committed; the calling service owns the
transaction boundary.
"""
from decimal import Decimal
from typing import Any, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from inventory_engine.core.logging import get_logger

from inventory_engine.core.exceptions import (
    LedgerImmutableError, NotFoundError, ValidationError
)

logger = get_logger("database")

T = TypeVar("T")

OPERATORS = ("=", "!=", "<", "<=", ">", ">=", "in", "isNull", "isNotNull", "between", "contains")


class CollectionQuery(Generic[T]):
    """Chainable query over one collection"""

    def __init__(self, collection: "Collection[T]"):
        self._collection = collection
        self._filters: List[Tuple[str, str, Any]] = []
        self._order_by: List[Tuple[str, str]] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    def where(self, field: str, operator: str, value: Any = None) -> "CollectionQuery[T]":
        if operator not in OPERATORS:
            raise ValueError(f"Unsupported query operator: {operator}")
        self._collection.column(field)
        self._filters.append((field, operator, value))
        return self

    def where_eq(self, field: str, value: Any) -> "CollectionQuery[T]":
        return self.where(field, "=", value)

    def order_by(self, field: str, direction: str = "asc") -> "CollectionQuery[T]":
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unsupported sort direction: {direction}")
        self._collection.column(field)
        self._order_by.append((field, direction))
        return self

    def limit(self, n: int) -> "CollectionQuery[T]":
        self._limit = n
        return self

    def offset(self, n: int) -> "CollectionQuery[T]":
        self._offset = n
        return self

    def _filtered(self):
        query = self._collection.db.query(self._collection.model)
        for field, operator, value in self._filters:
            column = self._collection.column(field)
            if operator == "=":
                query = query.filter(column.is_(None) if value is None else column == value)
            elif operator == "!=":
                query = query.filter(column.isnot(None) if value is None else column != value)
            elif operator == "<":
                query = query.filter(column < value)
            elif operator == "<=":
                query = query.filter(column <= value)
            elif operator == ">":
                query = query.filter(column > value)
            elif operator == ">=":
                query = query.filter(column >= value)
            elif operator == "in":
                query = query.filter(column.in_(list(value)))
            elif operator == "isNull":
                query = query.filter(column.is_(None))
            elif operator == "isNotNull":
                query = query.filter(column.isnot(None))
            elif operator == "between":
                low, high = value
                query = query.filter(column.between(low, high))
            elif operator == "contains":
                query = query.filter(column.ilike(f"%{value}%"))
        return query

    def _ordered(self):
        query = self._filtered()
        for field, direction in self._order_by:
            column = self._collection.column(field)
            query = query.order_by(column.desc() if direction == "desc" else column.asc())

        # Insertion order breaks ties
        pk = self._collection.primary_key
        tie_direction = self._order_by[0][1] if self._order_by else "asc"
        query = query.order_by(pk.desc() if tie_direction == "desc" else pk.asc())

        if self._offset is not None:
            query = query.offset(self._offset)
        if self._limit is not None:
            query = query.limit(self._limit)
        return query

    def execute(self) -> List[T]:
        return self._ordered().all()

    def first(self) -> Optional[T]:
        original = self._limit
        self._limit = 1
        try:
            return self._ordered().first()
        finally:
            self._limit = original

    def count(self) -> int:
        return self._filtered().count()

    def sum(self, field: str) -> Decimal:
        column = self._collection.column(field)
        total = self._filtered().with_entities(func.sum(column)).scalar()
        return Decimal(str(total)) if total is not None else Decimal("0")


class Collection(Generic[T]):
    """
    Persistent collection of one record type.

    Usage::

        items = Collection(db, InventoryItem, name="Item")
        item = items.insert(number="PIPE-4", description="4in PVC pipe")
        items.update(item.id, active=False)
        rows = items.query().where("active", "=", True).order_by("number").execute()
    """

    def __init__(self, db: Session, model: Type[T], name: Optional[str] = None):
        self.db = db
        self.model = model
        self.name = name or model.__name__
        self.primary_key = model.__mapper__.primary_key[0]

    def column(self, field: str):
        if field not in self.model.__mapper__.columns:
            raise ValueError(f"{self.name} has no field '{field}'")
        return getattr(self.model, field)

    def insert(self, **values) -> T:
        """Insert a new record and flush it so its id is assigned"""
        record = self.model(**values)
        self.db.add(record)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Rejected insert into {self.name}: {e.orig}")
            raise ValidationError(f"{self.name} violates a uniqueness or reference constraint") from e
        return record

    def get(self, record_id) -> Optional[T]:
        if record_id is None:
            return None
        return self.db.get(self.model, record_id)

    def require(self, record_id) -> T:
        """Get a record or raise NotFoundError naming the id"""
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(self.name, record_id)
        return record

    def update(self, record_id, **changes) -> T:
        record = self.require(record_id)
        for field, value in changes.items():
            self.column(field)
            setattr(record, field, value)
        self.db.flush()
        return record

    def all(self) -> List[T]:
        return self.query().execute()

    def query(self) -> CollectionQuery[T]:
        return CollectionQuery(self)

    def get_many(self, record_ids: Sequence) -> List[T]:
        ids = [record_id for record_id in record_ids if record_id is not None]
        if not ids:
            return []
        return self.query().where("id", "in", ids).execute()


class LedgerCollection(Collection[T]):
    """Append-only collection: records can be inserted and read, never edited"""

    def update(self, record_id, **changes) -> T:
        raise LedgerImmutableError(
            f"{self.name} {record_id} is a posted ledger entry and cannot be edited; "
            "post an offsetting entry instead"
        )
