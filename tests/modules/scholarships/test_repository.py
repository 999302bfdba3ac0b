"""
Unit tests for scholarship listing queries.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from scholarstream.modules.scholarships import repository
from scholarstream.modules.shared import escape_like


@pytest.mark.parametrize(
    "raw,escaped",
    [("plain", "plain"), ("100%", "100\\%"), ("first_year", "first\\_year"), ("a\\b", "a\\\\b")],
)
def test_escape_like(raw, escaped):
    assert escape_like(raw) == escaped


@pytest.mark.asyncio
async def test_search_wildcards_match_literally(mock_db):
    result = MagicMock()
    result.scalar.return_value = 0
    result.scalars.return_value.all.return_value = []
    mock_db.execute.return_value = result

    await repository.list_scholarships(mock_db, search="100%_off", country="Côte_d")

    count_statement = mock_db.execute.call_args_list[0].args[0]
    compiled = count_statement.compile(dialect=postgresql.dialect())
    params = set(compiled.params.values())

    assert "%100\\%\\_off%" in params
    assert "Côte\\_d" in params
    assert "ESCAPE" in str(compiled)
