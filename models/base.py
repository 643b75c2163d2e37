"""
===========================================================
Model base class for the fluent query builder.
===========================================================

A model declares its table metadata as class attributes; every class-level
entry point opens a fresh ``QueryBuilder`` configured from that metadata.
Fetched rows come back as model instances tracked by the builder that
loaded them, so ``instance.save()`` writes back only changed columns.

Metadata:
    __tablename__: Table name (required on concrete models)
    __primary_key__: Primary-key column, 'id' by default
    __fillable__: Columns ``create()`` may populate
    __defaults__: Values ``create()`` fills in when the caller omits them

Architecture:
    - Table names are declared, never derived from the class name
    - Metadata is checked when the class is created
    - The connection provider is injected with ``Model.bind(provider)``;
      subclasses inherit the binding unless they bind their own

Example:
    >>> from models.base import Model
    >>> from utils.database_utils import ConnectionProvider
    >>>
    >>> class User(Model):
    ...     __tablename__ = 'users'
    ...     __fillable__ = ['name', 'age']
    ...     __defaults__ = {'active': True}
    >>>
    >>> Model.bind(ConnectionProvider())
    >>> user = User.find(5)
    >>> user.name = 'Grace'
    >>> user.save()
    True
    >>> User.create({'name': 'Ada', 'age': 36})
    <User {'name': 'Ada', 'age': 36, 'active': True, 'id': 6}>
"""

from typing import Any, Callable, Dict, List, Optional

from builder.query_builder import QueryBuilder
from core.exceptions import ModelConfigurationError, NoAssociatedRecord, RecordNotFound
from logs.error_handler import ErrorLogger
from utils.database_utils import ConnectionProvider


class Model:
    """Base class for table-backed models.

    Instances keep their column values in a dict shared with the builder
    that fetched them. Columns are readable as attributes and items.
    """

    __tablename__: Optional[str] = None
    __primary_key__: str = 'id'
    __fillable__: Optional[List[str]] = None
    __defaults__: Optional[Dict[str, Any]] = None

    _connection: Optional[ConnectionProvider] = None
    _errors: Optional[ErrorLogger] = None

    def __init_subclass__(cls, abstract: bool = False, **kwargs):
        super().__init_subclass__(**kwargs)
        if abstract:
            return

        table = cls.__dict__.get('__tablename__')
        if not isinstance(table, str) or not table.strip():
            raise ModelConfigurationError(
                f"{cls.__name__} must declare __tablename__ "
                f"(or be declared with abstract=True)"
            )
        if not isinstance(cls.__primary_key__, str) or not cls.__primary_key__:
            raise ModelConfigurationError(f"{cls.__name__}.__primary_key__ must be a column name")

    def __init__(self, **attributes: Any):
        object.__setattr__(self, '_attributes', dict(attributes))
        object.__setattr__(self, '_builder', None)

    # ------------------------------------------------------------------
    # Metadata provider
    # ------------------------------------------------------------------

    @classmethod
    def get_table(cls) -> Optional[str]:
        """Declared table name."""
        return cls.__tablename__

    @classmethod
    def get_primary(cls) -> str:
        """Declared primary-key column, 'id' by default."""
        return cls.__primary_key__ or 'id'

    @classmethod
    def get_fillables(cls) -> Optional[List[str]]:
        """Columns allowed in an INSERT, None when not declared."""
        return list(cls.__fillable__) if cls.__fillable__ is not None else None

    @classmethod
    def get_defaults(cls) -> Optional[Dict[str, Any]]:
        """Default INSERT values, None when not declared."""
        return dict(cls.__defaults__) if cls.__defaults__ is not None else None

    # ------------------------------------------------------------------
    # Builder access
    # ------------------------------------------------------------------

    @classmethod
    def bind(cls, connection: ConnectionProvider, errors: Optional[ErrorLogger] = None) -> None:
        """Set the connection provider (and optionally the log sink) for this class tree."""
        cls._connection = connection
        if errors is not None:
            cls._errors = errors

    @classmethod
    def query(cls) -> QueryBuilder:
        """
        Open a fresh builder configured from this model's metadata.

        Raises:
            ModelConfigurationError: If no provider is bound or no table is declared
        """
        if cls._connection is None:
            raise ModelConfigurationError(
                f"{cls.__name__} has no connection; call Model.bind(provider) first"
            )
        if not cls.get_table():
            raise ModelConfigurationError(f"{cls.__name__} does not declare a table")

        builder = QueryBuilder(cls._connection, cls._errors)
        builder.set_data(cls.get_table(), cls.get_primary(), cls)
        builder.set_fillables(cls.get_fillables())
        builder.set_defaults(cls.get_defaults())
        return builder

    @classmethod
    def hydrate(cls, row: Dict[str, Any], builder: Optional[QueryBuilder] = None) -> 'Model':
        """Wrap a fetched row, sharing the dict with ``builder``."""
        instance = cls.__new__(cls)
        object.__setattr__(instance, '_attributes', row)
        object.__setattr__(instance, '_builder', builder)
        return instance

    # ------------------------------------------------------------------
    # Class-level entry points
    # ------------------------------------------------------------------

    @classmethod
    def find(cls, key: Any, columns: Any = None) -> Any:
        """Fetch by primary key; None when missing."""
        return cls.query().find(key, columns)

    @classmethod
    def find_or_fail(cls, key: Any, columns: Any = None) -> Any:
        """
        Fetch by primary key or raise.

        Raises:
            RecordNotFound: If no row has that key
        """
        record = cls.find(key, columns)
        if record is None:
            raise RecordNotFound(cls.get_table(), key)
        return record

    @classmethod
    def find_or(cls, key: Any, columns: Any = None, callback: Optional[Callable[[QueryBuilder], Any]] = None) -> Any:
        """Fetch by primary key, or return ``callback(fresh_builder)`` when missing."""
        if callable(columns):
            callback, columns = columns, None

        record = cls.find(key, columns)
        if record is not None:
            return record

        if callback is not None:
            return callback(cls.query())
        return None

    @classmethod
    def first_where(cls, column: Any, *args: Any) -> Any:
        """Shortcut for ``where(...).first()``."""
        builder = cls.query().where(column, *args)
        return builder.first() if builder is not None else None

    @classmethod
    def all(cls, columns: Any = None) -> Any:
        """Fetch every row as dicts."""
        return cls.query().get(columns)

    @classmethod
    def where(cls, column: Any, *args: Any, **kwargs: Any) -> Optional[QueryBuilder]:
        """Open a builder with a first predicate."""
        return cls.query().where(column, *args, **kwargs)

    @classmethod
    def or_where(cls, column: Any, *args: Any) -> Optional[QueryBuilder]:
        """Open a builder with a first OR predicate."""
        return cls.query().or_where(column, *args)

    @classmethod
    def latest(cls, column: Optional[str] = None) -> QueryBuilder:
        """Open a builder ordered newest first."""
        return cls.query().latest(column)

    @classmethod
    def from_table(cls, name: str, primary: str = 'id') -> QueryBuilder:
        """Open a builder on another table, rows materialized as this model."""
        return cls.query().set_data(name, primary, cls)

    @classmethod
    def delete(cls, key: Any) -> Optional[int]:
        """Delete by primary key; returns the deleted row count."""
        return cls.query().destroy(key)

    @classmethod
    def create(cls, data: Dict[str, Any]) -> Any:
        """Insert the fillable entries of ``data``; returns the new instance."""
        return cls.query().create(data)

    # ------------------------------------------------------------------
    # Instance behaviour
    # ------------------------------------------------------------------

    def save(self) -> Optional[bool]:
        """Write changed columns back; True when nothing changed."""
        if self._builder is None:
            error = NoAssociatedRecord(self.get_table(), self.get_primary())
            return (self._errors or ErrorLogger()).report(error)
        return self._builder.save()

    def destroy(self) -> Optional[int]:
        """Delete this row; returns the deleted row count."""
        builder = self._builder or self.query()
        return builder.destroy(self._attributes.get(self.get_primary()))

    def to_dict(self) -> Dict[str, Any]:
        """Copy of the column values."""
        return dict(self._attributes)

    def __getattr__(self, name: str) -> Any:
        attributes = self.__dict__.get('_attributes', {})
        if name in attributes:
            return attributes[name]
        raise AttributeError(
            f"Property [{name}] does not exist on the {type(self).__name__} instance."
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith('_'):
            object.__setattr__(self, name, value)
        else:
            self._attributes[name] = value

    def __getitem__(self, key: str) -> Any:
        return self._attributes[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._attributes

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return type(self) is type(other) and self._attributes == other._attributes

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._attributes!r}>"
