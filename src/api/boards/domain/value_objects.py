"""Value objects for the Boards domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from ulid import ULID


@dataclass(frozen=True)
class _UlidIdentifier:
    """Base for identifiers generated by this context.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create an identifier from its string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid {cls.__name__}: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class BoardId(_UlidIdentifier):
    """Identifier for a Board aggregate."""


@dataclass(frozen=True)
class ColumnId(_UlidIdentifier):
    """Identifier for a Column, unique within its board."""


@dataclass(frozen=True)
class GroupId(_UlidIdentifier):
    """Identifier for a Group, unique within its board."""


@dataclass(frozen=True)
class ItemId(_UlidIdentifier):
    """Identifier for an Item, unique within its board."""


@dataclass(frozen=True)
class UserId:
    """Identifier for a user.

    Users are owned by an external identity provider, so any non-empty
    string is accepted (SSO subjects are not ULIDs).
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("UserId cannot be empty")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from a string, stripping surrounding whitespace."""
        return cls(value=value.strip())


class ColumnType(StrEnum):
    """Closed set of column kinds.

    The type only tells clients how to render and edit values; the engine
    never checks item values against it.
    """

    STATUS = "status"
    TEXT = "text"
    LONG_TEXT = "long_text"
    NUMBER = "number"
    DATE = "date"
    PERSON = "person"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"
    TIMELINE = "timeline"
    LINK = "link"


class Capability(StrEnum):
    """What an actor may do on a board."""

    READ = "read"
    WRITE = "write"
    MANAGE_MEMBERS = "manage_members"
    DELETE_BOARD = "delete_board"


class AccessDecision(StrEnum):
    """Outcome of an access check."""

    ALLOWED = "allowed"
    DENIED = "denied"


class BoardOperation(StrEnum):
    """Names of committed board mutations, as seen by subscribers."""

    CREATE_BOARD = "create_board"
    UPDATE_BOARD = "update_board"
    DELETE_BOARD = "delete_board"
    ADD_MEMBER = "add_member"
    REMOVE_MEMBER = "remove_member"
    CREATE_COLUMN = "create_column"
    UPDATE_COLUMN = "update_column"
    DELETE_COLUMN = "delete_column"
    REORDER_COLUMNS = "reorder_columns"
    CREATE_GROUP = "create_group"
    UPDATE_GROUP = "update_group"
    DELETE_GROUP = "delete_group"
    REORDER_GROUPS = "reorder_groups"
    CREATE_ITEM = "create_item"
    UPDATE_ITEM = "update_item"
    DELETE_ITEM = "delete_item"
    MOVE_ITEM = "move_item"
    REORDER_ITEMS = "reorder_items"


@dataclass(frozen=True)
class Actor:
    """The authenticated identity on whose behalf an operation runs.

    Attributes:
        user_id: The verified user identifier
        roles: Role tags issued by the identity provider
    """

    user_id: UserId
    roles: frozenset[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        """Check whether the actor carries a role tag."""
        return role in self.roles


@dataclass(frozen=True)
class DeleteItems:
    """Group deletion policy: delete every item in the group."""


@dataclass(frozen=True)
class Reassign:
    """Group deletion policy: append the group's items to another group.

    Attributes:
        target_group_id: Group that receives the items, in their existing order
    """

    target_group_id: GroupId


CascadePolicy = DeleteItems | Reassign
