import pytest


def test_create_category(client):
    r = client.post("/categories", json={"name": "  Electronics "})
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Category created successfully"
    assert body["data"]["name"] == "Electronics"
    assert len(body["data"]["_id"]) == 32
    assert "createdAt" in body["data"] and "updatedAt" in body["data"]


@pytest.mark.parametrize("duplicate", ["Electronics", "electronics", "ELECTRONICS", " eLeCtRoNiCs "])
def test_category_name_is_unique_ignoring_case(client, duplicate):
    assert client.post("/categories", json={"name": "Electronics"}).status_code == 201
    r = client.post("/categories", json={"name": duplicate})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Category already exists"}


def test_create_category_validation_error(client):
    r = client.post("/categories", json={"name": "x"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert body["errors"] == ["Category name must be at least 2 characters"]


def test_create_category_without_body(client):
    r = client.post("/categories")
    assert r.status_code == 400
    assert r.json()["errors"] == ["Request body must be a JSON object"]


def test_list_categories_sorted_by_name(client):
    for name in ["Office", "art", "Books"]:
        client.post("/categories", json={"name": name})
    r = client.get("/categories")
    assert r.status_code == 200
    body = r.json()
    assert [c["name"] for c in body["data"]] == ["Books", "Office", "art"]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 3, "pages": 1}


def test_list_categories_search(client):
    for name in ["Office", "Office Supplies", "Art"]:
        client.post("/categories", json={"name": name})
    r = client.get("/categories", params={"search": "OFFICE"})
    body = r.json()
    assert [c["name"] for c in body["data"]] == ["Office", "Office Supplies"]
    assert body["pagination"]["total"] == 2


def test_search_wildcards_match_literally(client):
    client.post("/categories", json={"name": "100% Cotton"})
    client.post("/categories", json={"name": "Cotton"})
    r = client.get("/categories", params={"search": "%"})
    assert [c["name"] for c in r.json()["data"]] == ["100% Cotton"]


def test_list_categories_pagination(client):
    for i in range(5):
        client.post("/categories", json={"name": f"Category {i}"})
    r = client.get("/categories", params={"page": 2, "limit": 2})
    body = r.json()
    assert [c["name"] for c in body["data"]] == ["Category 2", "Category 3"]
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}

    r = client.get("/categories", params={"page": 9, "limit": 2})
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["pagination"]["total"] == 5


def test_list_categories_empty(client):
    r = client.get("/categories")
    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "data": [],
        "pagination": {"page": 1, "limit": 20, "total": 0, "pages": 0},
    }


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"page": "two"}])
def test_list_categories_rejects_bad_pagination(client, params):
    r = client.get("/categories", params=params)
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert r.json()["errors"]


def test_get_category(client, electronics):
    r = client.get(f"/categories/{electronics['_id']}")
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Electronics"


def test_get_category_errors(client):
    assert client.get("/categories/not-an-id").status_code == 400
    r = client.get("/categories/" + "a" * 32)
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Category not found"}


def test_delete_category(client, electronics):
    r = client.delete(f"/categories/{electronics['_id']}")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Category deleted successfully"}
    assert client.get(f"/categories/{electronics['_id']}").status_code == 404
    assert client.delete(f"/categories/{electronics['_id']}").status_code == 404


def test_delete_category_in_use_is_rejected(client, auth, electronics):
    client.post("/products", json={"name": "Phone", "price": 10, "categoryId": electronics["_id"]}, headers=auth)
    r = client.delete(f"/categories/{electronics['_id']}")
    assert r.status_code == 400
    assert r.json()["message"] == "Category has products and cannot be deleted"
    assert client.get(f"/categories/{electronics['_id']}").status_code == 200


def test_huge_page_or_limit_is_not_a_server_error(client, electronics):
    r = client.get("/categories", params={"page": 10**19})
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["pagination"]["total"] == 1

    r = client.get("/categories", params={"limit": 10**19})
    assert r.status_code == 400
    assert r.json()["errors"] == ["Limit cannot exceed 100"]
