import pytest

USER_DATA = {"user_id": "12345678", "server_id": "2001"}


@pytest.fixture
def digital_package(admin_client, game_category):
    product = admin_client.post("/api/products", json={
        "category_id": game_category["id"],
        "name": "Photoshop Brushes",
        "service_type": "Digital Download",
        "input_fields": [{"name": "email", "label": "Email", "type": "email", "required": True}],
    }).json()
    response = admin_client.post("/api/packages", json={
        "product_id": product["id"],
        "name": "Brush Pack Vol. 1",
        "price": 25000,
        "download_url": "https://files.example.com/brushes.zip",
        "file_type": "zip",
    })
    return response.json()


def place_order(client, package, **fields):
    payload = {"product_id": package["product_id"], "package_id": package["id"], "user_data": USER_DATA}
    payload.update(fields)
    return client.post("/api/orders", json=payload)


def test_order_snapshot(client, package, mailer):
    response = place_order(client, package, payment_proof="/uploads/image-1.png")

    assert response.status_code == 201
    order = response.json()
    assert order["product_name"] == "Mobile Legends"
    assert order["category_name"] == "Game"
    assert order["package_name"] == "86 Diamonds"
    assert order["price"] == 100000.0
    assert order["status"] == "pending"
    assert order["user_data"] == USER_DATA
    assert order["promo_code"] is None
    assert order["discount_amount"] is None
    assert order["created_at"].endswith("Z")

    assert len(mailer.order_notifications) == 1
    assert mailer.order_notifications[0][0].id == order["id"]


def test_order_requires_fields(client, package):
    response = client.post("/api/orders", json={"product_id": package["product_id"], "package_id": package["id"]})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_order_unknown_package(client, package):
    response = place_order(client, package, package_id=9999)
    assert response.status_code == 404
    assert response.json() == {"error": "Package not found or disabled"}


def test_order_disabled_package(admin_client, package):
    admin_client.patch(f"/api/packages/{package['id']}", json={"enabled": False})

    response = place_order(admin_client, package)
    assert response.status_code == 404
    assert response.json() == {"error": "Package not found or disabled"}


def test_order_package_of_another_product(admin_client, package, digital_package):
    response = place_order(admin_client, package, package_id=digital_package["id"])
    assert response.status_code == 404


def test_order_unknown_product(client, package):
    response = place_order(client, package, product_id=9999)
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_catalog_edits_do_not_touch_existing_orders(admin_client, product, package):
    order = place_order(admin_client, package).json()

    admin_client.put(f"/api/products/{product['id']}", json={"name": "MLBB"})
    admin_client.put(f"/api/packages/{package['id']}", json={"name": "86 DM", "price": 120000})

    stored = admin_client.get(f"/api/orders/{order['id']}").json()
    assert stored["product_name"] == "Mobile Legends"
    assert stored["package_name"] == "86 Diamonds"
    assert stored["price"] == 100000.0


def test_promo_applied_and_counted(admin_client, package, create_promo):
    promo = create_promo(max_discount=5000)

    response = place_order(admin_client, package, promo_code="save10", discount_amount=99999, final_price=1)

    assert response.status_code == 201
    order = response.json()
    assert order["price"] == 95000.0
    assert order["original_price"] == 100000.0
    assert order["discount_amount"] == 5000.0
    assert order["promo_code"] == "SAVE10"
    assert admin_client.get(f"/api/promo/{promo['id']}").json()["usage_count"] == 1


def test_single_use_promo_is_used_up(admin_client, package, create_promo):
    create_promo(code="ONCE", usage_limit=1)

    first = place_order(admin_client, package, promo_code="ONCE").json()
    assert first["promo_code"] == "ONCE"
    assert first["price"] == 90000.0

    validation = admin_client.post("/api/promo/validate", json={"code": "ONCE", "price": 100000})
    assert validation.status_code == 400
    assert validation.json() == {"error": "Kode promo sudah mencapai batas penggunaan"}

    second = place_order(admin_client, package, promo_code="ONCE").json()
    assert second["promo_code"] is None
    assert second["price"] == 100000.0


def test_invalid_promo_keeps_full_price(client, package):
    order = place_order(client, package, promo_code="NOPE").json()
    assert order["price"] == 100000.0
    assert order["promo_code"] is None


def test_orders_listed_newest_first_with_status_filter(admin_client, package):
    first = place_order(admin_client, package).json()
    second = place_order(admin_client, package).json()
    admin_client.put(f"/api/orders/{first['id']}/status", json={"status": "processing"})

    assert [o["id"] for o in admin_client.get("/api/orders").json()] == [second["id"], first["id"]]
    assert [o["id"] for o in admin_client.get("/api/orders?status=processing").json()] == [first["id"]]
    assert admin_client.get("/api/orders?status=shipped").status_code == 400


def test_invalid_status(admin_client, package):
    order = place_order(admin_client, package).json()
    response = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "refunded"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status"}


def test_status_of_unknown_order(admin_client):
    response = admin_client.put("/api/orders/9999/status", json={"status": "completed"})
    assert response.status_code == 404
    assert response.json() == {"error": "Order not found"}


def test_completing_digital_order_sends_download_link(admin_client, digital_package, mailer):
    order = place_order(admin_client, digital_package, user_data={"email": "buyer@example.com"}).json()

    response = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "completed"})

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert len(mailer.deliveries) == 1
    delivered_order, download_url, _ = mailer.deliveries[0]
    assert delivered_order.id == order["id"]
    assert download_url == "https://files.example.com/brushes.zip"

    # Completing again doesn't resend
    admin_client.put(f"/api/orders/{order['id']}/status", json={"status": "completed"})
    assert len(mailer.deliveries) == 1


def test_completing_order_without_download_link_sends_nothing(admin_client, package, mailer):
    order = place_order(admin_client, package, user_data={"email": "buyer@example.com"}).json()
    admin_client.put(f"/api/orders/{order['id']}/status", json={"status": "completed"})
    assert mailer.deliveries == []


def test_deleting_package_with_orders_is_refused(admin_client, package):
    place_order(admin_client, package)
    response = admin_client.delete(f"/api/packages/{package['id']}")
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete package with existing orders"}
