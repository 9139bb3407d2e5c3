"""Tests for Product API endpoints."""
from decimal import Decimal
from unittest.mock import patch

LAPTOP = {"product_name": "Laptop", "price": 1200.00, "category": "Electronics", "stock_quantity": 5}


def test_create_product(client):
    """Test creating a new product."""
    response = client.post(
        "/api/v1/products",
        json={
            "product_name": "Test Product",
            "price": 99.99,
            "category": "Misc",
            "description": "A thing",
            "stock_quantity": 10
        }
    )

    assert response.status_code == 201
    data = response.json()
    assert data["product_name"] == "Test Product"
    assert Decimal(str(data["price"])) == Decimal("99.99")
    assert data["category"] == "Misc"
    assert data["description"] == "A thing"
    assert data["stock_quantity"] == 10
    assert "product_id" in data


def test_create_product_defaults_stock_to_zero(client):
    """Test the original three-field payload still works."""
    response = client.post(
        "/api/v1/products",
        json={"product_name": "Laptop", "price": 1200.00, "category": "Electronics"}
    )

    assert response.status_code == 201
    assert response.json()["stock_quantity"] == 0


def test_create_product_invalid_price(client):
    """Test creating product with invalid price fails."""
    response = client.post(
        "/api/v1/products",
        json={
            "product_name": "Test Product",
            "price": -10.00,  # Invalid: negative price
            "category": "Misc",
            "stock_quantity": 10
        }
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "validation_error"
    assert data["field"] == "price"


def test_create_product_invalid_stock(client):
    """Test creating product with negative stock fails."""
    response = client.post(
        "/api/v1/products",
        json={
            "product_name": "Test Product",
            "price": 99.99,
            "category": "Misc",
            "stock_quantity": -5  # Invalid: negative stock
        }
    )

    assert response.status_code == 400
    assert response.json()["field"] == "stock_quantity"


def test_create_product_missing_category(client):
    """Test a required field missing from the body is a 400."""
    response = client.post("/api/v1/products", json={"product_name": "Laptop", "price": 1})

    assert response.status_code == 400
    assert response.json()["field"] == "category"


def test_get_product(client):
    """Test getting a product by ID returns what was created."""
    created = client.post("/api/v1/products", json=LAPTOP).json()

    response = client.get(f"/api/v1/products/{created['product_id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_get_product_not_found(client):
    """Test getting non-existent product returns 404."""
    response = client.get("/api/v1/products/9999")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "not_found"
    assert data["entity"] == "product"


def test_list_products(client):
    """Test listing returns every product in insertion order, stably."""
    for i in range(5):
        client.post(
            "/api/v1/products",
            json={"product_name": f"Product {i}", "price": 10.00 + i, "category": "Misc"}
        )

    first = client.get("/api/v1/products")
    second = client.get("/api/v1/products")

    assert first.status_code == 200
    names = [item["product_name"] for item in first.json()]
    assert names == [f"Product {i}" for i in range(5)]
    assert first.json() == second.json()


def test_update_product(client):
    """Test updating a product only changes the replaced price."""
    created = client.post("/api/v1/products", json=LAPTOP).json()
    product_id = created["product_id"]

    response = client.put(
        f"/api/v1/products/{product_id}",
        json={"product_name": "Laptop", "price": 999.00, "category": "Electronics"}
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(str(data["price"])) == Decimal("999")
    assert data["stock_quantity"] == 5  # Stock should remain unchanged

    fetched = client.get(f"/api/v1/products/{product_id}").json()
    assert fetched == data
    assert {k: v for k, v in fetched.items() if k != "price"} == \
        {k: v for k, v in created.items() if k != "price"}


def test_update_product_invalid(client):
    """Test an invalid update is a 400 and applies nothing."""
    created = client.post("/api/v1/products", json=LAPTOP).json()
    product_id = created["product_id"]

    response = client.put(
        f"/api/v1/products/{product_id}",
        json={"product_name": "", "price": 5, "category": "Electronics"}
    )

    assert response.status_code == 400
    assert client.get(f"/api/v1/products/{product_id}").json() == created


def test_update_product_not_found(client):
    """Test updating non-existent product returns 404."""
    response = client.put(
        "/api/v1/products/9999",
        json={"product_name": "Ghost", "price": 1, "category": "None"}
    )

    assert response.status_code == 404


def test_delete_product(client):
    """Test deleting a product."""
    created = client.post("/api/v1/products", json=LAPTOP).json()
    product_id = created["product_id"]

    response = client.delete(f"/api/v1/products/{product_id}")
    assert response.status_code == 204

    get_response = client.get(f"/api/v1/products/{product_id}")
    assert get_response.status_code == 404


def test_delete_product_not_found(client):
    """Test deleting non-existent product returns 404."""
    response = client.delete("/api/v1/products/9999")

    assert response.status_code == 404


def test_delete_product_with_sales_conflicts(client, customer_id):
    """Test a product with sales is protected and its sale stays readable."""
    product_id = client.post("/api/v1/products", json=LAPTOP).json()["product_id"]
    with patch("shopease.api.sales.check_stock_level.delay"):
        sale = client.post(
            "/api/v1/sales",
            json={"customer_id": customer_id, "product_id": product_id, "quantity": 1}
        ).json()

    response = client.delete(f"/api/v1/products/{product_id}")

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"
    assert client.get(f"/api/v1/sales/{sale['sale_id']}").json() == sale
    assert client.get(f"/api/v1/products/{product_id}").status_code == 200


def test_create_product_stock_out_of_range(client):
    """Test a stock value too large for the database is a 400 naming the field."""
    response = client.post(
        "/api/v1/products",
        json={"product_name": "Bulk", "price": 1, "category": "Misc", "stock_quantity": 2**63}
    )

    assert response.status_code == 400
    assert response.json()["field"] == "stock_quantity"
    assert client.get("/api/v1/products").json() == []
