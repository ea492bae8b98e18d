"""Test models and helpers.

Usage:
    from tests.utils import AGES, InMemoryStash, Person, expected_order, people
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from keyset_pagination.core.exceptions import StashKeyError


class Base(DeclarativeBase):
    pass


class Person(Base):
    __tablename__ = "people"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(50))
    age: Mapped[int | None] = mapped_column(nullable=True)
    joined_at: Mapped[datetime] = mapped_column()


people = Person.__table__

EPOCH = datetime(2025, 1, 15, 9, 30)

# id -> age; NULL ages exercise null ordering in both directions.
AGES: dict[int, int | None] = {
    1: 30,
    2: None,
    3: 25,
    4: 30,
    5: 41,
    6: None,
    7: 25,
    8: 30,
    9: 19,
    10: 41,
    11: 33,
}


def expected_order(*, age_desc: bool) -> list[int]:
    """Ids of ``AGES`` ordered by age (nulls first ASC, last DESC), then id."""
    if age_desc:
        return sorted(AGES, key=lambda i: (AGES[i] is None, -(AGES[i] or 0), i))
    return sorted(AGES, key=lambda i: (AGES[i] is not None, AGES[i] or 0, i))


def ids(items: list) -> list[int]:
    """Ids of mapping rows or entities."""
    return [item["id"] if isinstance(item, dict) else item.id for item in items]


class InMemoryStash:
    """Dict-backed stash with the same contract as ``RedisStash``."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str:
        try:
            return self.data[key]
        except KeyError:
            raise StashKeyError(key) from None

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
