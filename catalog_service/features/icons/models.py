"""SQLAlchemy models for the icon catalog."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_service.core.database import Base, IntegerPKMixin, TimestampedBase

# Many-to-many association table for icons <-> tags
icon_tags = Table(
    "icon_tags",
    Base.metadata,
    Column("icon_id", ForeignKey("icons.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class IconSet(TimestampedBase):
    """A published collection of icons (e.g. "Material Design").

    Sets belong to a family; family filters on icons go through this table.
    """

    __tablename__ = "icon_sets"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    family_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
        comment="Family grouping related sets",
    )

    icons: Mapped[list[Icon]] = relationship("Icon", back_populates="icon_set")

    def __repr__(self) -> str:
        return f"<IconSet(id={self.id}, name={self.name!r})>"


class Tag(Base, IntegerPKMixin):
    """Keyword attached to icons for faceted search."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"


class Icon(TimestampedBase):
    """Icon asset in the catalog.

    ``popularity`` backs the bestseller sort; ``created_at`` the newest sort.
    """

    __tablename__ = "icons"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    unique_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Human-readable identifier used in URLs",
    )
    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment="0 for free icons",
    )
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    popularity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    set_id: Mapped[int | None] = mapped_column(
        ForeignKey("icon_sets.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    style_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    team_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    license_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    icon_set: Mapped[IconSet | None] = relationship("IconSet", back_populates="icons")
    tags: Mapped[list[Tag]] = relationship("Tag", secondary=icon_tags)

    def __repr__(self) -> str:
        return f"<Icon(id={self.id}, unique_id={self.unique_id!r})>"
