"""Integration tests for the permission administration API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from realty_access.core.permissions import get_catalogue
from realty_access.modules.users.enums import Role
from tests.utils import bearer


pytestmark = pytest.mark.integration

API = "/api/v1/permissions"


def grants_of(response) -> list[str]:
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    return body["data"]["permissions"]


class TestAvailablePermissions:
    """GET /permissions/available"""

    async def test_admin_sees_catalogue(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{API}/available", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert "delete_post" in data["permissions"]["posts"]
        assert set(data["employeeDefaultPermissions"]) == set(
            get_catalogue().employee_defaults
        )
        assert not set(data["employeeDefaultPermissions"]) & set(
            data["employeeManageablePermissions"]
        )

    async def test_view_settings_holder_sees_catalogue(self, client: AsyncClient, make_user):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_settings"])

        response = await client.get(f"{API}/available", headers=bearer(employee))

        assert response.status_code == 200

    async def test_caller_without_view_settings_is_rejected(
        self, client: AsyncClient, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts"])

        response = await client.get(f"{API}/available", headers=bearer(employee))

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "PERMISSION_DENIED"
        assert body["required_permissions"] == ["view_settings"]


class TestUserPermissions:
    """Read, replace, create and delete a user's grant set."""

    async def test_replace_then_read(self, client: AsyncClient, admin_headers, make_user):
        emp1 = await make_user(Role.EMPLOYEE)

        response = await client.put(
            f"{API}/user/{emp1.id}",
            json={"permissions": ["view_posts", "edit_post"]},
            headers=admin_headers,
        )
        assert grants_of(response) == ["view_posts", "edit_post"]

        read = await client.get(f"{API}/user/{emp1.id}", headers=admin_headers)
        assert grants_of(read) == grants_of(response)

    async def test_replace_overwrites_rather_than_merges(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts", "edit_post"])

        await client.put(
            f"{API}/user/{employee.id}",
            json={"permissions": ["delete_post"]},
            headers=admin_headers,
        )

        read = await client.get(f"{API}/user/{employee.id}", headers=admin_headers)
        assert grants_of(read) == ["delete_post"]

    async def test_replace_collapses_duplicates(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE)

        response = await client.put(
            f"{API}/user/{employee.id}",
            json={"permissions": ["view_posts", "view_posts", "edit_post"]},
            headers=admin_headers,
        )

        assert grants_of(response) == ["view_posts", "edit_post"]

    async def test_read_without_record_returns_empty(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE)

        response = await client.get(f"{API}/user/{employee.id}", headers=admin_headers)

        assert grants_of(response) == []

    async def test_user_may_read_own_grants(self, client: AsyncClient, make_user):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_news"])

        response = await client.get(f"{API}/user/{employee.id}", headers=bearer(employee))

        assert grants_of(response) == ["view_news"]

    async def test_user_may_not_read_others_grants(self, client: AsyncClient, make_user):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_news"])
        other = await make_user(Role.EMPLOYEE)

        response = await client.get(f"{API}/user/{other.id}", headers=bearer(employee))

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    async def test_replace_requires_change_user_role(self, client: AsyncClient, make_user):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_news"])

        response = await client.put(
            f"{API}/user/{employee.id}",
            json={"permissions": ["delete_user"]},
            headers=bearer(employee),
        )

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    async def test_role_manager_may_replace_others_grants(
        self, client: AsyncClient, make_user
    ):
        manager = await make_user(Role.EMPLOYEE, permissions=["change_user_role", "view_users"])
        target = await make_user(Role.EMPLOYEE, permissions=["view_posts"])

        response = await client.put(
            f"{API}/user/{target.id}",
            json={"permissions": ["view_posts", "delete_post"]},
            headers=bearer(manager),
        )

        assert grants_of(response) == ["view_posts", "delete_post"]

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    async def test_unknown_user_is_not_found(
        self, client: AsyncClient, admin_headers, method
    ):
        kwargs = {"json": {"permissions": []}} if method == "put" else {}

        response = await getattr(client, method)(
            f"{API}/user/{uuid4()}", headers=admin_headers, **kwargs
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_malformed_grant_list_is_rejected(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts"])

        response = await client.put(
            f"{API}/user/{employee.id}",
            json={"permissions": "view_posts"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_create_once(self, client: AsyncClient, admin_headers, make_user):
        employee = await make_user(Role.EMPLOYEE)
        payload = {"userId": str(employee.id), "permissions": ["view_posts"]}

        created = await client.post(f"{API}/user", json=payload, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["data"] == {
            "userId": str(employee.id),
            "permissions": ["view_posts"],
        }

        again = await client.post(f"{API}/user", json=payload, headers=admin_headers)
        assert again.status_code == 409
        assert again.json()["code"] == "CONFLICT"

    async def test_delete_then_delete_again(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts"])

        deleted = await client.delete(f"{API}/user/{employee.id}", headers=admin_headers)
        assert deleted.status_code == 200
        assert deleted.json()["success"] is True

        again = await client.delete(f"{API}/user/{employee.id}", headers=admin_headers)
        assert again.status_code == 404

        read = await client.get(f"{API}/user/{employee.id}", headers=admin_headers)
        assert grants_of(read) == []


class TestUserListing:
    """GET /permissions/users"""

    async def test_lists_non_admins_with_grants(
        self, client: AsyncClient, admin, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts", "delete_post"])
        plain = await make_user(Role.USER)

        response = await client.get(f"{API}/users", headers=admin_headers)

        assert response.status_code == 200
        users = {item["id"]: item for item in response.json()["data"]["users"]}
        assert set(users) == {str(employee.id), str(plain.id)}
        assert users[str(employee.id)]["permissions"] == ["view_posts", "delete_post"]
        assert users[str(plain.id)]["permissions"] == []
        assert users[str(plain.id)]["role"] == "user"
        assert "createdAt" in users[str(plain.id)]

    async def test_view_users_holder_may_list(self, client: AsyncClient, make_user):
        viewer = await make_user(Role.EMPLOYEE, permissions=["view_users"])

        response = await client.get(f"{API}/users", headers=bearer(viewer))

        assert response.status_code == 200
        ids = [item["id"] for item in response.json()["data"]["users"]]
        assert str(viewer.id) in ids

    async def test_caller_without_view_users_is_rejected(
        self, client: AsyncClient, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts"])

        response = await client.get(f"{API}/users", headers=bearer(employee))

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"


class TestEmployeePermissions:
    """Employee listing and manageable updates."""

    async def test_list_splits_defaults_and_extras(
        self, client: AsyncClient, admin_headers, make_user
    ):
        defaults = list(get_catalogue().employee_defaults)
        complete = await make_user(
            Role.EMPLOYEE, permissions=[*defaults, "delete_post"]
        )
        partial = await make_user(Role.EMPLOYEE, permissions=defaults[:2])
        await make_user(Role.USER)

        response = await client.get(f"{API}/employees", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        employees = {item["id"]: item for item in data["employees"]}
        assert set(employees) == {str(complete.id), str(partial.id)}

        assert employees[str(complete.id)]["enabledPermissions"] == ["delete_post"]
        assert employees[str(complete.id)]["missingDefaultPermissions"] == []
        assert employees[str(partial.id)]["missingDefaultPermissions"] == defaults[2:]
        assert data["defaultPermissions"] == defaults

    async def test_update_adds_manageable_to_defaults(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts"])

        response = await client.put(
            f"{API}/employee/{employee.id}",
            json={"permissions": ["delete_post", "view_statistics"]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["addedPermissions"] == ["delete_post", "view_statistics"]
        expected = {*get_catalogue().employee_defaults, "delete_post", "view_statistics"}
        assert set(data["permissions"]) == expected

    async def test_empty_update_leaves_exactly_the_defaults(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["delete_post", "view_posts"])

        await client.put(
            f"{API}/employee/{employee.id}",
            json={"permissions": []},
            headers=admin_headers,
        )

        read = await client.get(f"{API}/user/{employee.id}", headers=admin_headers)
        assert set(grants_of(read)) == set(get_catalogue().employee_defaults)

    async def test_invalid_token_rejects_whole_update(
        self, client: AsyncClient, admin_headers, make_user
    ):
        emp3 = await make_user(Role.EMPLOYEE, permissions=["view_posts", "edit_post"])

        response = await client.put(
            f"{API}/employee/{emp3.id}",
            json={"permissions": ["delete_post", "not_a_real_token"]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["invalid_permissions"] == ["not_a_real_token"]

        read = await client.get(f"{API}/user/{emp3.id}", headers=admin_headers)
        assert grants_of(read) == ["view_posts", "edit_post"]

    async def test_default_token_is_not_manageable(
        self, client: AsyncClient, admin_headers, make_user
    ):
        employee = await make_user(Role.EMPLOYEE)
        default = get_catalogue().employee_defaults[0]

        response = await client.put(
            f"{API}/employee/{employee.id}",
            json={"permissions": [default]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["invalid_permissions"] == [default]

    async def test_non_employee_is_rejected(
        self, client: AsyncClient, admin_headers, make_user
    ):
        user = await make_user(Role.USER)

        response = await client.put(
            f"{API}/employee/{user.id}",
            json={"permissions": ["delete_post"]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "NOT_EMPLOYEE"

    async def test_view_users_holder_may_list_employees(self, client: AsyncClient, make_user):
        viewer = await make_user(Role.EMPLOYEE, permissions=["view_users"])

        response = await client.get(f"{API}/employees", headers=bearer(viewer))

        assert response.status_code == 200
        ids = [item["id"] for item in response.json()["data"]["employees"]]
        assert ids == [str(viewer.id)]

    async def test_employee_listing_requires_view_users(self, client: AsyncClient, make_user):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_posts"])

        response = await client.get(f"{API}/employees", headers=bearer(employee))

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    async def test_role_manager_may_update_employee(self, client: AsyncClient, make_user):
        manager = await make_user(Role.EMPLOYEE, permissions=["change_user_role"])
        target = await make_user(Role.EMPLOYEE)

        response = await client.put(
            f"{API}/employee/{target.id}",
            json={"permissions": ["delete_post"]},
            headers=bearer(manager),
        )

        assert response.status_code == 200
        assert response.json()["data"]["addedPermissions"] == ["delete_post"]

    async def test_employee_update_requires_change_user_role(
        self, client: AsyncClient, make_user
    ):
        employee = await make_user(Role.EMPLOYEE, permissions=["view_users"])
        target = await make_user(Role.EMPLOYEE)

        response = await client.put(
            f"{API}/employee/{target.id}",
            json={"permissions": ["delete_post"]},
            headers=bearer(employee),
        )

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "PERMISSION_DENIED"
        assert body["required_permissions"] == ["change_user_role"]
