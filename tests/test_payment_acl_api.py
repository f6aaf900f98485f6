# tests/test_payment_acl_api.py
import pytest
from fastapi import status

BASE = "/api/v1/payment-methods"


@pytest.fixture
def cred_stick(client, admin_headers) -> str:
    response = client.post(
        BASE,
        json={"name": "CredStick", "description": "Pay with credits", "position": 2},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]["payment_method_id"]


class TestPaymentAcl:

    def test_requires_authentication(self, client):
        response = client.get(BASE)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_has_no_access_to_payment_module(self, client, login_as_user_with_permissions):
        headers = login_as_user_with_permissions(["product.viewer"])

        response = client.get(BASE, headers=headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        body = response.json()
        assert body["message"] == "Access denied"
        assert body["missing_privileges"] == ["payment_method:read"]

    def test_can_view_payment(self, client, cred_stick, login_as_user_with_permissions):
        headers = login_as_user_with_permissions(["payment.viewer"])

        listing = client.get(BASE, headers=headers)
        assert listing.status_code == status.HTTP_200_OK
        assert [m["name"] for m in listing.json()["data"]] == ["CredStick"]

        # viewers cannot save
        response = client.patch(
            f"{BASE}/{cred_stick}", json={"description": "My description"}, headers=headers
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_can_edit_payment(self, client, cred_stick, login_as_user_with_permissions):
        headers = login_as_user_with_permissions(["payment.viewer", "payment.editor"])

        response = client.patch(
            f"{BASE}/{cred_stick}", json={"description": "My description"}, headers=headers
        )
        assert response.status_code == status.HTTP_200_OK

        detail = client.get(f"{BASE}/{cred_stick}", headers=headers)
        assert detail.json()["data"]["description"] == "My description"

    def test_editor_dependency_grants_viewing(self, client, cred_stick, login_as_user_with_permissions):
        headers = login_as_user_with_permissions(["payment.editor"])

        assert client.get(BASE, headers=headers).status_code == status.HTTP_200_OK

    def test_can_create_payment(self, client, login_as_user_with_permissions):
        headers = login_as_user_with_permissions(
            ["payment.viewer", "payment.editor", "payment.creator"]
        )

        response = client.post(BASE, json={"name": "1 Coleur"}, headers=headers)
        assert response.status_code == status.HTTP_201_CREATED

        listing = client.get(BASE, headers=headers)
        assert "1 Coleur" in [m["name"] for m in listing.json()["data"]]

    def test_viewer_cannot_create(self, client, login_as_user_with_permissions):
        headers = login_as_user_with_permissions(["payment.viewer"])

        response = client.post(BASE, json={"name": "1 Coleur"}, headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_can_delete_payment(self, client, cred_stick, login_as_user_with_permissions):
        headers = login_as_user_with_permissions(["payment.viewer", "payment.deleter"])

        response = client.delete(f"{BASE}/{cred_stick}", headers=headers)
        assert response.status_code == status.HTTP_200_OK

        missing = client.get(f"{BASE}/{cred_stick}", headers=headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    def test_rejects_script_in_name(self, client, admin_headers):
        response = client.post(
            BASE, json={"name": "<script>alert(1)</script>"}, headers=admin_headers
        )
        assert response.status_code == 422
