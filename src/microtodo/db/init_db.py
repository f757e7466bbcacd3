"""
microtodo.db.init_db

Table bootstrap for a single service.

Responsibilities:
- Create only the tables the calling service owns (users or tasks).
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Table
from sqlalchemy.ext.asyncio import AsyncEngine

from microtodo.db.base import Base


async def init_db(engine: AsyncEngine, tables: Sequence[Table]) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=list(tables))
