"""
HTTP-level tests for scholarship writes.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

from scholarstream.core.auth import Principal, require_admin
from scholarstream.main import app
from scholarstream.modules.users.models import UserRole


def test_null_required_field_is_400(client):
    app.dependency_overrides[require_admin] = lambda: Principal(
        email="admin@x.com", role=UserRole.ADMIN
    )
    with patch(
        "scholarstream.modules.scholarships.router.service.update_scholarship", AsyncMock()
    ) as mock_update:
        response = client.patch(f"/scholarships/{uuid4()}", json={"scholarshipName": None})

    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    mock_update.assert_not_called()
