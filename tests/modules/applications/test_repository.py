"""
Unit tests for the applications repository's conditional payment updates.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from scholarstream.modules.applications import repository


def _compiled_sql(mock_db) -> str:
    statement = mock_db.execute.call_args.args[0]
    return str(statement.compile(dialect=postgresql.dialect()))


class TestMarkUnpaid:
    @pytest.mark.asyncio
    async def test_skips_paid_and_rejected_rows(self, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=0)

        changed = await repository.mark_unpaid(mock_db, uuid4())

        sql = _compiled_sql(mock_db)
        assert changed is False
        assert "applications.payment_status !=" in sql
        assert "applications.application_status !=" in sql
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reports_updated_row(self, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=1)

        assert await repository.mark_unpaid(mock_db, uuid4()) is True


class TestMarkPaid:
    @pytest.mark.asyncio
    async def test_only_unpaid_rows_transition(self, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=1)

        changed = await repository.mark_paid(mock_db, uuid4(), datetime.now(UTC))

        assert changed is True
        assert "applications.payment_status !=" in _compiled_sql(mock_db)
