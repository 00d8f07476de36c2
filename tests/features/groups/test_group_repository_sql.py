"""Tests for the asyncpg group repository."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from neo_deploy.core.exceptions import GroupNotFoundError, NameConflictError
from neo_deploy.features.groups.entities import UpdateGroup
from neo_deploy.features.groups.repositories import AsyncPGGroupRepository


def _row(**overrides):
    row = {
        "id": 2,
        "name": "Backend",
        "path": "backend",
        "parent_id": 1,
        "traversal_ids": "1,2",
        "description": "set elsewhere",
        "visibility_level": "private",
        "created_by": 1,
        "updated_by": 1,
        "created_at": datetime.now(timezone.utc),
        "updated_at": datetime.now(timezone.utc),
    }
    row.update(overrides)
    return row


@pytest.fixture
def conn():
    """Mock connection used inside the transaction."""
    conn = AsyncMock()
    conn.fetch.return_value = []
    return conn


@pytest.fixture
def repository(conn):
    transaction = MagicMock()
    transaction.__aenter__.return_value = conn
    transaction.__aexit__.return_value = False
    db = MagicMock()
    db.transaction.return_value = transaction
    return AsyncPGGroupRepository(db, schema="deploy")


class TestUpdateBasic:
    """Test that updates are merged into the locked row."""

    @pytest.mark.asyncio
    async def test_unset_fields_come_from_locked_row(self, repository, conn):
        conn.fetchrow.side_effect = [_row(), _row(name="Backend Team", updated_by=3)]

        group = await repository.update_basic(2, UpdateGroup(name="Backend Team"), updated_by=3)

        lock_query = conn.fetchrow.call_args_list[0].args[0]
        update_args = conn.fetchrow.call_args_list[1].args
        assert "FOR UPDATE" in lock_query
        assert "deploy.groups" in update_args[0]
        assert update_args[1:7] == (2, "Backend Team", "backend", "set elsewhere", "private", 3)
        assert group.name == "Backend Team"

    @pytest.mark.asyncio
    async def test_sibling_name_conflict(self, repository, conn):
        conn.fetchrow.return_value = _row()
        conn.fetch.side_effect = [[], [{"id": 3, "name": "Backend Team", "path": "team"}]]

        with pytest.raises(NameConflictError):
            await repository.update_basic(2, UpdateGroup(name="Backend Team"), updated_by=3)

    @pytest.mark.asyncio
    async def test_unique_violation_is_name_conflict(self, repository, conn):
        conn.fetchrow.side_effect = [_row(), asyncpg.UniqueViolationError("duplicate key")]

        with pytest.raises(NameConflictError):
            await repository.update_basic(2, UpdateGroup(name="Backend Team"), updated_by=3)

    @pytest.mark.asyncio
    async def test_missing_group(self, repository, conn):
        conn.fetchrow.return_value = None

        with pytest.raises(GroupNotFoundError):
            await repository.update_basic(42, UpdateGroup(name="x"))
