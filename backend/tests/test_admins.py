"""Admin endpoint and service tests."""

import pytest
from fastapi.testclient import TestClient

from conftest import ADMIN_PASSWORD, admin_payload
from shopcart.core.security import get_password_hash, verify_password
from shopcart.models.user import AccountType, AdminProfile, User
from shopcart.services.admin_service import AdminService, split_admin_values

API = "/api/admins"


class TestCreateAdmin:
    def test_create_with_profile(self, client: TestClient):
        res = client.post(API, json=admin_payload(email="  Jane@Example.com "))
        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "Admin created successfully"
        data = body["data"]
        assert data["email"] == "jane@example.com"
        assert data["accountType"] == "admin"
        assert data["authProvider"] == "local"
        assert data["isActive"] is True
        assert data["lastPasswordChange"] is not None
        assert "password" not in data
        assert "passwordHash" not in data
        profile = data["adminProfile"]
        assert profile["userId"] == data["id"]
        assert profile["firstName"] == "Jane"
        assert profile["city"] == "Lisbon"

    def test_password_stored_hashed(self, client: TestClient, db_session):
        client.post(API, json=admin_payload())
        user = db_session.query(User).one()
        assert user.password_hash != ADMIN_PASSWORD
        assert verify_password(ADMIN_PASSWORD, user.password_hash)

    def test_duplicate_email(self, client: TestClient, admin):
        res = client.post(API, json=admin_payload(email="JANE@example.com"))
        assert res.status_code == 400
        assert res.json()["message"] == ["Email already exists for an admin"]

    def test_invalid_fields(self, client: TestClient):
        res = client.post(
            API,
            json=admin_payload(email="not-an-email", password="weak", firstName="J4ne", phoneNumber="abc"),
        )
        assert res.status_code == 400
        assert [e["field"] for e in res.json()["errors"]] == ["email", "password", "firstName", "phoneNumber"]

    def test_user_and_profile_created_together(self, db_session, monkeypatch):
        service = AdminService(db_session)

        def broken_create(values):
            raise RuntimeError("profile insert failed")

        monkeypatch.setattr(service.profiles, "create", broken_create)
        with pytest.raises(RuntimeError):
            service.create(admin_payload())
        assert db_session.query(User).count() == 0
        assert db_session.query(AdminProfile).count() == 0


class TestReadAdmins:
    def test_get_includes_profile_by_default(self, client: TestClient, admin):
        res = client.get(f"{API}/{admin.id}")
        assert res.status_code == 200
        assert res.json()["data"]["adminProfile"]["lastName"] == "Doe"

    def test_get_without_profile(self, client: TestClient, admin):
        res = client.get(f"{API}/{admin.id}", params={"includeProfile": "false"})
        assert res.status_code == 200
        assert "adminProfile" not in res.json()["data"]

    def test_customer_accounts_are_not_admins(self, client: TestClient, db_session):
        customer = User(
            email="shopper@example.com",
            password_hash=get_password_hash(ADMIN_PASSWORD),
            account_type=AccountType.customer,
        )
        db_session.add(customer)
        db_session.commit()
        res = client.get(f"{API}/{customer.id}")
        assert res.status_code == 404
        assert res.json()["message"] == "Admin not found"
        assert client.get(API).json()["data"] == []

    def test_inactive_admin_still_visible(self, client: TestClient, admin):
        client.patch(f"{API}/{admin.id}/status", json={"isActive": False})
        assert client.get(f"{API}/{admin.id}").status_code == 200
        assert client.get(API).json()["pagination"]["totalItems"] == 1

    def test_search_and_city_filter(self, client: TestClient, admin, make_admin):
        make_admin("ana@example.com", firstName="Ana", lastName="Silva", city="Porto")
        make_admin("bruno@example.com", firstName="Bruno", lastName="Costa", city="Porto")

        res = client.get(API, params={"search": "ana"})
        assert [a["email"] for a in res.json()["data"]] == ["ana@example.com"]

        res = client.get(API, params={"search": "SILVA"})
        assert [a["email"] for a in res.json()["data"]] == ["ana@example.com"]

        res = client.get(API, params={"city": "Porto", "sortBy": "email", "sortOrder": "asc"})
        body = res.json()
        assert [a["email"] for a in body["data"]] == ["ana@example.com", "bruno@example.com"]
        assert body["filters"]["city"] == "Porto"

    def test_sort_by_profile_column(self, client: TestClient, admin, make_admin):
        make_admin("ana@example.com", firstName="Ana", lastName="Silva")
        res = client.get(API, params={"sortBy": "lastName"})
        assert [a["adminProfile"]["lastName"] for a in res.json()["data"]] == ["Doe", "Silva"]

    def test_list_without_profiles(self, client: TestClient, admin):
        res = client.get(API, params={"includeProfile": "false"})
        assert "adminProfile" not in res.json()["data"][0]


class TestUpdateAdmin:
    def test_update_user_and_profile_fields(self, client: TestClient, admin):
        res = client.put(f"{API}/{admin.id}", json={"email": "janet@example.com", "firstName": "Janet", "bio": None})
        assert res.status_code == 200
        data = res.json()["data"]
        assert res.json()["message"] == "Admin updated successfully"
        assert data["email"] == "janet@example.com"
        assert data["adminProfile"]["firstName"] == "Janet"
        assert data["adminProfile"]["bio"] is None

    def test_keep_own_email(self, client: TestClient, admin):
        res = client.put(f"{API}/{admin.id}", json={"email": "jane@example.com"})
        assert res.status_code == 200

    def test_new_password_hashed(self, client: TestClient, admin, db_session):
        res = client.put(f"{API}/{admin.id}", json={"password": "Changed@789"})
        assert res.status_code == 200
        db_session.refresh(admin)
        assert verify_password("Changed@789", admin.password_hash)

    def test_auth_provider(self, client: TestClient, admin):
        res = client.put(f"{API}/{admin.id}", json={"authProvider": "google"})
        assert res.json()["data"]["authProvider"] == "google"
        res = client.put(f"{API}/{admin.id}", json={"authProvider": "myspace"})
        assert res.status_code == 400


class TestChangePassword:
    def test_change(self, client: TestClient, admin, db_session):
        changed_at = admin.last_password_change
        res = client.patch(
            f"{API}/{admin.id}/password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "Better@456", "confirmPassword": "Better@456"},
        )
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Password updated successfully"}
        db_session.refresh(admin)
        assert verify_password("Better@456", admin.password_hash)
        assert admin.last_password_change != changed_at

    def test_wrong_current_password(self, client: TestClient, admin):
        res = client.patch(
            f"{API}/{admin.id}/password",
            json={"currentPassword": "Wrong@000", "newPassword": "Better@456", "confirmPassword": "Better@456"},
        )
        assert res.status_code == 400
        assert res.json()["message"] == ["Current password is incorrect"]

    def test_confirmation_mismatch(self, client: TestClient, admin):
        res = client.patch(
            f"{API}/{admin.id}/password",
            json={"currentPassword": ADMIN_PASSWORD, "newPassword": "Better@456", "confirmPassword": "Other@456"},
        )
        assert res.status_code == 400
        assert res.json()["message"] == ["Passwords do not match"]


class TestDeleteRestoreAdmin:
    def test_user_and_profile_deleted_together(self, client: TestClient, admin):
        res = client.delete(f"{API}/{admin.id}")
        assert res.status_code == 200
        assert res.json()["message"] == "Admin deleted successfully"
        assert client.get(f"{API}/{admin.id}").status_code == 404

        data = client.get(f"{API}/{admin.id}", params={"includeDeleted": "true"}).json()["data"]
        assert data["deletedAt"] is not None
        assert data["adminProfile"]["deletedAt"] == data["deletedAt"]

        res = client.patch(f"{API}/{admin.id}/restore")
        assert res.status_code == 200
        assert res.json()["message"] == "Admin and profile restored successfully"
        assert res.json()["data"]["deletedAt"] is None
        assert res.json()["data"]["adminProfile"]["deletedAt"] is None

    def test_restore_live_admin(self, client: TestClient, admin):
        res = client.patch(f"{API}/{admin.id}/restore")
        assert res.status_code == 400
        assert res.json()["message"] == "Admin is not deleted"

    def test_deleted_email_still_reserved(self, client: TestClient, admin):
        client.delete(f"{API}/{admin.id}")
        res = client.post(API, json=admin_payload())
        assert res.status_code == 400


def test_split_admin_values():
    user_values, profile_values = split_admin_values(
        {"email": "a@b.co", "password_hash": "x", "is_active": True, "first_name": "A", "city": None}
    )
    assert user_values == {"email": "a@b.co", "password_hash": "x", "is_active": True}
    assert profile_values == {"first_name": "A", "city": None}


class TestAdminWithoutProfile:
    @pytest.fixture
    def bare_admin(self, admin, db_session):
        db_session.delete(admin.admin_profile)
        db_session.commit()
        return admin

    def test_profile_fields_rejected(self, client: TestClient, bare_admin, db_session):
        res = client.put(f"{API}/{bare_admin.id}", json={"email": "janet@example.com", "firstName": "Janet"})
        assert res.status_code == 404
        assert res.json()["message"] == "Admin profile not found"
        db_session.refresh(bare_admin)
        assert bare_admin.email == "jane@example.com"

    def test_account_fields_still_update(self, client: TestClient, bare_admin):
        res = client.put(f"{API}/{bare_admin.id}", json={"email": "janet@example.com"})
        assert res.status_code == 200
        assert res.json()["data"]["adminProfile"] is None


def test_malformed_stored_hash_is_a_mismatch():
    assert verify_password(ADMIN_PASSWORD, "not-a-bcrypt-hash") is False
