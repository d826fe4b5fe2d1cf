"""SQLAlchemy ORM models for board storage.

A board is stored as one row holding its whole document. The member and
group tables are lookup indexes rewritten on every save; the document is
the source of truth.
"""

from typing import Any

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class BoardModel(Base, TimestampMixin):
    """ORM model for boards table.

    ``version`` mirrors the document's version and backs the optimistic
    concurrency check in UPDATE ... WHERE version = :expected.
    """

    __tablename__ = "boards"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    document: Mapped[dict[str, Any]] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<BoardModel(id={self.id}, title={self.title}, version={self.version})>"


class BoardMemberModel(Base):
    """ORM model for board_members table (membership lookup index).

    Foreign Key Constraint:
    - board_id references boards.id with CASCADE delete
    """

    __tablename__ = "board_members"

    board_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("boards.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), primary_key=True, index=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<BoardMemberModel(board_id={self.board_id}, user_id={self.user_id})>"


class BoardGroupModel(Base):
    """ORM model for board_groups table (group ownership lookup index).

    Foreign Key Constraint:
    - board_id references boards.id with CASCADE delete
    """

    __tablename__ = "board_groups"

    group_id: Mapped[str] = mapped_column(String(26), primary_key=True)
    board_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("boards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<BoardGroupModel(group_id={self.group_id}, board_id={self.board_id})>"
