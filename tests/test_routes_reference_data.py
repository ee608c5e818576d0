from uuid import uuid4

import pytest


@pytest.mark.parametrize("resource", ["accounts", "categories", "tags"])
def test_named_resource_crud(client, resource):
    response = client.post(f"/api/v1/{resource}/", json={"name": "  Travel "})
    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Travel"
    assert response.headers["location"] == f"/api/v1/{resource}/{created['id']}"

    response = client.get(f"/api/v1/{resource}/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created

    response = client.put(f"/api/v1/{resource}/{created['id']}", json={"name": "Trips"})
    assert response.status_code == 204
    assert client.get(f"/api/v1/{resource}/{created['id']}").json()["name"] == "Trips"

    response = client.delete(f"/api/v1/{resource}/{created['id']}")
    assert response.status_code == 204
    assert client.get(f"/api/v1/{resource}/{created['id']}").status_code == 404


@pytest.mark.parametrize("resource", ["accounts", "categories", "tags"])
def test_named_resource_rejects_blank_and_duplicate_names(client, resource):
    response = client.post(f"/api/v1/{resource}/", json={"name": "   "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Name is required"

    first = client.post(f"/api/v1/{resource}/", json={"name": "Home"}).json()
    response = client.post(f"/api/v1/{resource}/", json={"name": "Home"})
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]

    second = client.post(f"/api/v1/{resource}/", json={"name": "Work"}).json()
    response = client.put(f"/api/v1/{resource}/{second['id']}", json={"name": "Home"})
    assert response.status_code == 400

    # Renaming to its own name is not a clash
    response = client.put(f"/api/v1/{resource}/{first['id']}", json={"name": "Home"})
    assert response.status_code == 204


@pytest.mark.parametrize("resource", ["accounts", "categories", "tags"])
def test_named_resource_missing_ids(client, resource):
    missing = uuid4()
    assert client.get(f"/api/v1/{resource}/{missing}").status_code == 404
    assert client.put(f"/api/v1/{resource}/{missing}", json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/v1/{resource}/{missing}").status_code == 404


def test_account_listing_and_search(client):
    for name in ("Savings", "Checking", "Brokerage"):
        client.post("/api/v1/accounts/", json={"name": name})

    listed = client.get("/api/v1/accounts/").json()
    assert [a["name"] for a in listed] == ["Brokerage", "Checking", "Savings"]

    found = client.get("/api/v1/accounts/search", params={"name": "ING"}).json()
    assert [a["name"] for a in found] == ["Checking", "Savings"]

    assert client.get("/api/v1/accounts/search").json() == listed

    response = client.get("/api/v1/accounts/by-name/Savings")
    assert response.status_code == 200
    assert response.json()["name"] == "Savings"
    assert client.get("/api/v1/accounts/by-name/savings").status_code == 404


def test_tag_listing_pages(client):
    for name in ("c", "a", "b"):
        client.post("/api/v1/tags/", json={"name": name})

    page = client.get("/api/v1/tags/", params={"skip": 1, "limit": 1}).json()
    assert [t["name"] for t in page] == ["b"]


def test_deleting_referenced_account_conflicts(client):
    account = client.post("/api/v1/accounts/", json={"name": "Checking"}).json()
    category = client.post("/api/v1/categories/", json={"name": "Salary"}).json()
    client.post("/api/v1/income/", json={
        "account_id": account["id"],
        "category_id": category["id"],
        "amount": "100.00",
    })

    response = client.delete(f"/api/v1/accounts/{account['id']}")
    assert response.status_code == 409
    assert client.get(f"/api/v1/accounts/{account['id']}").status_code == 200

    response = client.delete(f"/api/v1/categories/{category['id']}")
    assert response.status_code == 409
