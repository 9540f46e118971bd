"""
Base repository providing common CRUD operations.
"""

from typing import Generic, TypeVar, List, Optional, Type, Any
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from exceptions import StructuralConfigError

T = TypeVar('T')


class BaseRepository(Generic[T]):
    """
    Generic base repository providing common CRUD operations.
    All specific repositories should inherit from this class.

    Attribute names passed to the ``*_by`` helpers are resolved against the
    model's mapper, never interpolated into query text.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize the repository.

        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model
        self._mapper = inspect(model)

    @property
    def primary_key(self):
        """Primary key column attribute of the model."""
        return getattr(self.model, self._mapper.primary_key[0].key)

    def _attribute(self, field: str):
        """
        Resolve a mapped attribute by name.

        Raises:
            StructuralConfigError: If the model has no such mapped attribute
        """
        if field not in self._mapper.attrs:
            raise StructuralConfigError(
                f"{self.model.__name__} has no mapped attribute '{field}'",
                owner=self.model,
                field=field
            )
        return getattr(self.model, field)

    def create(self, obj: T) -> T:
        """
        Create a new record in the database.

        Args:
            obj: Model instance to create

        Returns:
            Created model instance
        """
        self.db.add(obj)
        self.db.flush()
        return obj

    def get_by_id(self, id: Any) -> Optional[T]:
        """
        Retrieve a record by its primary key.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        if id is None:
            return None
        return self.db.get(self.model, id)

    def get_all(self, limit: Optional[int] = None, offset: int = 0) -> List[T]:
        """
        Retrieve all records.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip

        Returns:
            List of model instances
        """
        query = self.db.query(self.model).order_by(self.primary_key)
        if limit:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)
        return query.all()

    def update(self, obj: T) -> T:
        """
        Write back an instance loaded (or merged) by the caller.

        Args:
            obj: Model instance with updated values

        Returns:
            Updated model instance
        """
        self.db.add(obj)
        self.db.flush()
        return obj

    def delete(self, obj: T) -> None:
        """
        Delete a record from the database.

        Args:
            obj: Model instance to delete
        """
        self.db.delete(obj)
        self.db.flush()

    def delete_by_id(self, id: Any) -> bool:
        """
        Delete a record by its ID.

        Args:
            id: Primary key value

        Returns:
            True if deleted, False if not found
        """
        obj = self.get_by_id(id)
        if obj:
            self.delete(obj)
            return True
        return False

    def count(self) -> int:
        """
        Count total records.

        Returns:
            Total number of records
        """
        return self.db.query(self.model).count()

    def exists(self, id: Any) -> bool:
        """
        Check if a record exists by ID.

        Args:
            id: Primary key value

        Returns:
            True if exists, False otherwise
        """
        return self.db.query(self.primary_key).filter(self.primary_key == id).first() is not None

    def exists_by(self, field: str, value: Any, exclude_id: Any = None) -> bool:
        """
        Check whether any record has ``field == value``.

        Args:
            field: Mapped attribute name
            value: Value to look for
            exclude_id: Primary key of a row to leave out of the check

        Returns:
            True if a matching record exists
        """
        query = self.db.query(self.primary_key).filter(self._attribute(field) == value)
        if exclude_id is not None:
            query = query.filter(self.primary_key != exclude_id)
        return query.first() is not None

    def find_one_by(self, field: str, value: Any) -> Optional[T]:
        """
        Retrieve the first record with ``field == value``.

        Args:
            field: Mapped attribute name (column or many-to-one relationship)
            value: Value to look for

        Returns:
            Model instance or None if not found
        """
        return self.db.query(self.model).filter(
            self._attribute(field) == value
        ).order_by(self.primary_key).first()

    def filter_by(self, **filters: Any) -> List[T]:
        """
        Filter records by arbitrary criteria.

        Args:
            **filters: Keyword arguments for filtering

        Returns:
            List of matching model instances
        """
        query = self.db.query(self.model)
        for key, value in filters.items():
            query = query.filter(self._attribute(key) == value)
        return query.all()
