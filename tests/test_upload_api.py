import os

from storefront.api.upload import UPLOAD_DIR
from storefront.config.defaults import MAX_UPLOAD_BYTES

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_admin_image_upload_is_served(admin_client):
    response = admin_client.post("/api/upload/image", files={"image": ("Banner.PNG", PNG_BYTES, "image/png")})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["filename"].startswith("image-")
    assert body["filename"].endswith(".png")
    assert body["url"] == f"/uploads/{body['filename']}"
    assert body["original_name"] == "Banner.PNG"
    assert body["size"] == len(PNG_BYTES)

    served = admin_client.get(body["url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_image_upload_requires_admin(client):
    response = client.post("/api/upload/image", files={"image": ("a.png", PNG_BYTES, "image/png")})
    assert response.status_code == 401


def test_payment_proof_is_public(client):
    response = client.post("/api/upload/payment-proof", files={"image": ("proof.jpg", PNG_BYTES, "image/jpeg")})
    assert response.status_code == 200
    assert os.path.exists(os.path.join(UPLOAD_DIR, response.json()["filename"]))


def test_rejects_non_images(client):
    response = client.post("/api/upload/payment-proof", files={"image": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid file type. Only images are allowed."}


def test_rejects_large_files(client):
    payload = b"\x00" * (MAX_UPLOAD_BYTES + 1)
    response = client.post("/api/upload/payment-proof", files={"image": ("big.png", payload, "image/png")})
    assert response.status_code == 400
    assert response.json() == {"error": "File too large"}


def test_missing_file(client):
    response = client.post("/api/upload/payment-proof", data={"note": "nothing attached"})
    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_delete_uploaded_image(admin_client):
    filename = admin_client.post(
        "/api/upload/image", files={"image": ("a.png", PNG_BYTES, "image/png")}
    ).json()["filename"]

    assert admin_client.delete(f"/api/upload/image/{filename}").json() == {"success": True, "message": "File deleted"}
    assert admin_client.delete(f"/api/upload/image/{filename}").status_code == 404


def test_delete_refuses_paths_outside_upload_dir(admin_client):
    assert admin_client.delete("/api/upload/image/..").status_code == 404
    assert admin_client.delete("/api/upload/image/..%2F..%2Fetc%2Fpasswd").status_code == 404


def test_stored_extension_follows_content_type(client):
    response = client.post(
        "/api/upload/payment-proof",
        files={"image": ("receipt.html", b"<script>alert(document.cookie)</script>", "image/png")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["filename"].endswith(".png")
    assert body["original_name"] == "receipt.html"

    served = client.get(body["url"])
    assert served.status_code == 200
    assert served.headers["content-type"] == "image/png"


def test_jpeg_upload_without_extension(client):
    response = client.post("/api/upload/payment-proof", files={"image": ("proof", PNG_BYTES, "image/jpeg")})
    assert response.json()["filename"].endswith(".jpg")


def test_payment_proof_rejects_svg(client):
    svg = b'<svg xmlns="http://www.w3.org/2000/svg"><script>alert(1)</script></svg>'
    response = client.post("/api/upload/payment-proof", files={"image": ("proof.svg", svg, "image/svg+xml")})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid file type. Only images are allowed."}


def test_admin_may_upload_svg(admin_client):
    svg = b'<svg xmlns="http://www.w3.org/2000/svg"></svg>'
    response = admin_client.post("/api/upload/image", files={"image": ("logo.svg", svg, "image/svg+xml")})
    assert response.status_code == 200
    assert response.json()["filename"].endswith(".svg")
