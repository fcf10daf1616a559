"""
SQLAlchemy-backed TreeStore.

Maps the relational schema (people, parent_child, unions, union_members, each
with an is_deleted flag) and answers the TreeStore queries with async
sessions. Only reads; the schema helper exists for tests and local setups.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy import (
    Column, Integer, String, Boolean, ForeignKey, Date, Index, select, func, or_
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import aliased, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from kinship_predict.person import Person
from kinship_predict.relationship import ParentChild, RelationshipType
from kinship_predict.union import Union, UnionMember

from .errors import DataAccessError

logger = logging.getLogger(__name__)

Base = declarative_base()


# ---------------------------
# PEOPLE
# ---------------------------
class PersonRow(Base):
    __tablename__ = "people"

    id = Column(String(36), primary_key=True)
    tree_id = Column(String(36), index=True, nullable=False)
    primary_name = Column(String(255), nullable=True)
    name_arabic = Column(String(255), nullable=True)
    sex = Column(String(16), nullable=False, default="Unknown")
    birth_date = Column(Date, nullable=True)
    family_id = Column(String(36), nullable=True, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)


# ---------------------------
# PARENT / CHILD
# ---------------------------
class ParentChildRow(Base):
    __tablename__ = "parent_child"

    id = Column(Integer, primary_key=True, autoincrement=True)
    parent_id = Column(String(36), ForeignKey("people.id"), nullable=False)
    child_id = Column(String(36), ForeignKey("people.id"), nullable=False)
    relationship_type = Column(String(16), nullable=False, default=RelationshipType.BIOLOGICAL.value)
    is_deleted = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_parent_child_parent", "parent_id"),
        Index("ix_parent_child_child", "child_id"),
    )


# ---------------------------
# UNIONS
# ---------------------------
class UnionRow(Base):
    __tablename__ = "unions"

    id = Column(String(36), primary_key=True)
    tree_id = Column(String(36), index=True, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)


class UnionMemberRow(Base):
    __tablename__ = "union_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    union_id = Column(String(36), ForeignKey("unions.id", ondelete="CASCADE"), nullable=False, index=True)
    person_id = Column(String(36), ForeignKey("people.id"), nullable=False, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)


def make_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; in-memory SQLite shares one connection."""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_async_engine(
            database_url, echo=echo, future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(database_url, echo=echo, future=True)


def make_session_maker(engine: AsyncEngine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class SqlTreeStore:
    """
    TreeStore reading through an async SQLAlchemy session factory.

    Args:
        session_maker: Callable returning an AsyncSession context manager.
        engine: Engine behind the session maker, kept when the store owns it.

    Any SQLAlchemyError surfaces as DataAccessError.
    """

    def __init__(self, session_maker, engine: Optional[AsyncEngine] = None) -> None:
        self.session_maker = session_maker
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlTreeStore":
        engine = make_engine(database_url, echo=echo)
        return cls(make_session_maker(engine), engine=engine)

    async def dispose(self) -> None:
        """Dispose the engine created by from_url()."""
        if self.engine is not None:
            await self.engine.dispose()

    async def _all(self, stmt):
        try:
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                return result.all()
        except SQLAlchemyError as e:
            logger.error(f"Tree store query failed: {e}")
            raise DataAccessError(str(e)) from e

    async def _scalar(self, stmt):
        try:
            async with self.session_maker() as session:
                return await session.scalar(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Tree store query failed: {e}")
            raise DataAccessError(str(e)) from e

    async def get_people(self, tree_id: str) -> List[Person]:
        rows = await self._all(
            select(PersonRow)
            .where(PersonRow.tree_id == tree_id, PersonRow.is_deleted.is_(False))
            .order_by(PersonRow.id)
        )
        return [
            Person(
                id=row.id,
                primary_name=row.primary_name,
                name_arabic=row.name_arabic,
                sex=row.sex,
                birth_date=row.birth_date,
                family_id=row.family_id,
                tree_id=row.tree_id,
            )
            for (row,) in rows
        ]

    async def get_parent_child_links(self, tree_id: str) -> List[ParentChild]:
        parent = aliased(PersonRow)
        child = aliased(PersonRow)
        rows = await self._all(
            select(
                ParentChildRow.parent_id,
                ParentChildRow.child_id,
                ParentChildRow.relationship_type,
                parent.primary_name,
                child.primary_name,
                parent.sex,
            )
            .join(parent, parent.id == ParentChildRow.parent_id)
            .join(child, child.id == ParentChildRow.child_id)
            .where(
                ParentChildRow.is_deleted.is_(False),
                parent.is_deleted.is_(False),
                child.is_deleted.is_(False),
                or_(parent.tree_id == tree_id, child.tree_id == tree_id),
            )
            .order_by(ParentChildRow.id)
        )
        return [
            ParentChild(parent_id, child_id, rel_type,
                        parent_name=parent_name or "?", child_name=child_name or "?", parent_sex=parent_sex)
            for parent_id, child_id, rel_type, parent_name, child_name, parent_sex in rows
        ]

    async def get_unions(self, tree_id: str) -> List[Union]:
        union_rows = await self._all(
            select(UnionRow)
            .where(UnionRow.tree_id == tree_id, UnionRow.is_deleted.is_(False))
            .order_by(UnionRow.id)
        )
        unions: Dict[str, Union] = {
            row.id: Union(row.id, row.tree_id, row.start_date, row.end_date)
            for (row,) in union_rows
        }
        if not unions:
            return []

        member_rows = await self._all(
            select(UnionMemberRow.union_id, UnionMemberRow.person_id, PersonRow.primary_name)
            .join(PersonRow, PersonRow.id == UnionMemberRow.person_id)
            .where(
                UnionMemberRow.union_id.in_(list(unions)),
                UnionMemberRow.is_deleted.is_(False),
                PersonRow.is_deleted.is_(False),
            )
            .order_by(UnionMemberRow.id)
        )
        for union_id, person_id, name in member_rows:
            unions[union_id].members.append(UnionMember(union_id, person_id, name or "?"))
        return list(unions.values())

    async def has_parent_link(self, parent_id: str, child_id: str) -> bool:
        found = await self._scalar(
            select(ParentChildRow.id)
            .where(
                ParentChildRow.parent_id == parent_id,
                ParentChildRow.child_id == child_id,
                ParentChildRow.is_deleted.is_(False),
            )
            .limit(1)
        )
        return found is not None

    async def count_biological_parents(self, child_id: str) -> int:
        count = await self._scalar(
            select(func.count())
            .select_from(ParentChildRow)
            .where(
                ParentChildRow.child_id == child_id,
                ParentChildRow.relationship_type == RelationshipType.BIOLOGICAL.value,
                ParentChildRow.is_deleted.is_(False),
            )
        )
        return int(count or 0)
