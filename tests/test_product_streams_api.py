# tests/test_product_streams_api.py
from fastapi import status

BASE = "/api/v1/product-streams"

STREAM = {
    "name": "Cheap red shirts",
    "filters": [
        {
            "type": "multi",
            "operator": "OR",
            "queries": [
                {
                    "type": "multi",
                    "operator": "AND",
                    "queries": [
                        {"type": "equals", "field": "color", "value": "red", "position": 0},
                        {
                            "type": "range",
                            "field": "price",
                            "parameters": {"lte": 20},
                            "position": 1,
                        },
                    ],
                },
            ],
        }
    ],
}


def test_create_and_read_filter_tree(client, admin_headers):
    created = client.post(BASE, json=STREAM, headers=admin_headers)
    assert created.status_code == status.HTTP_201_CREATED, created.text
    stream_id = created.json()["data"]["id"]

    response = client.get(f"{BASE}/{stream_id}", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["name"] == "Cheap red shirts"
    (root,) = data["filters"]
    assert root["operator"] == "OR"
    (inner,) = root["queries"]
    assert inner["parent_id"] == root["id"]
    assert [q["type"] for q in inner["queries"]] == ["equals", "range"]
    assert inner["queries"][1]["parameters"] == {"lte": 20}


def test_delete_stream(client, admin_headers):
    stream_id = client.post(BASE, json=STREAM, headers=admin_headers).json()["data"]["id"]

    assert client.delete(f"{BASE}/{stream_id}", headers=admin_headers).status_code == 200
    response = client.get(f"{BASE}/{stream_id}", headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_leaf_filter_needs_field(client, admin_headers):
    response = client.post(
        BASE,
        json={"name": "Broken", "filters": [{"type": "equals", "value": "red"}]},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_creator_of_product_stream(client, login_as_user_with_permissions):
    headers = login_as_user_with_permissions(["product_stream.creator"])

    response = client.post(BASE, json=STREAM, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED


def test_product_viewer_cannot_create_streams(client, login_as_user_with_permissions):
    headers = login_as_user_with_permissions(["product.viewer"])

    response = client.post(BASE, json=STREAM, headers=headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["missing_privileges"] == [
        "product_stream:create",
        "product_stream_filter:create",
    ]
