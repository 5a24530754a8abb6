"""FastAPI-level tests for image upload, listing, deletion and file serving."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from backend.app.api.dependencies import (
    get_base_url,
    get_image_service,
    get_upload_storage,
)
from backend.app.api.errors import register_exception_handlers
from backend.app.api.routers import gallery, images, uploads
from backend.app.domain.images import (
    ImageService,
    InMemoryImageRepository,
    LocalUploadStorage,
)

pytestmark = [pytest.mark.api]

PNG_BYTES = b"\x89PNG\r\n\x1a\n fake image payload"


def _build_client(tmp_path, *, base_url: str | None = None):
    storage = LocalUploadStorage(tmp_path / "uploads")
    storage.ensure_root()
    service = ImageService(storage=storage, repository=InMemoryImageRepository())
    app = FastAPI()
    register_exception_handlers(app)
    for router in (images.router, gallery.router, uploads.router):
        app.include_router(router)
    app.dependency_overrides[get_image_service] = lambda: service
    app.dependency_overrides[get_upload_storage] = lambda: storage
    app.dependency_overrides[get_base_url] = lambda: base_url or "http://testserver/"
    return TestClient(app), service, storage


def _upload(client: TestClient, *, field: str = "file", path: str = "/api/upload"):
    return client.post(path, files={field: ("cat.PNG", PNG_BYTES, "image/png")})


def test_upload_returns_record_and_serves_identical_bytes(tmp_path):
    client, _service, _storage = _build_client(tmp_path)

    response = _upload(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    image = body["image"]
    assert image["originalName"] == "cat.PNG"
    assert image["contentType"] == "image/png"
    assert image["sizeBytes"] == len(PNG_BYTES)
    assert image["filename"].endswith(".png")
    assert "createdAt" in image

    served = client.get(f"/uploads/{image['filename']}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES
    assert served.headers["content-type"] == "image/png"


def test_upload_without_file_part_is_rejected(tmp_path):
    client, service, _storage = _build_client(tmp_path)

    response = client.post("/api/upload", data={"note": "no file"})

    assert response.status_code == 422
    assert response.json()["error_code"] == "CD-INVALID-REQUEST"
    assert service.list() == []


def test_upload_of_empty_file_is_rejected(tmp_path):
    client, _service, storage = _build_client(tmp_path)

    response = client.post("/api/upload", files={"file": ("empty.png", b"", "image/png")})

    assert response.status_code == 422
    assert list(storage.root.iterdir()) == []


def test_list_images_projects_id_and_url(tmp_path):
    client, _service, _storage = _build_client(
        tmp_path, base_url="https://api.example.com"
    )
    image = _upload(client).json()["image"]

    response = client.get("/api/images")

    assert response.status_code == 200
    assert response.json() == [
        {"id": image["id"], "url": f"https://api.example.com/uploads/{image['filename']}"}
    ]


def test_delete_image_removes_record_and_file(tmp_path):
    client, _service, _storage = _build_client(tmp_path)
    image = _upload(client).json()["image"]

    response = client.delete(f"/api/images/{image['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Image deleted successfully"}
    assert client.get("/api/images").json() == []
    missing = client.get(f"/uploads/{image['filename']}")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "CD-NOT-FOUND"


def test_delete_unknown_image_returns_not_found(tmp_path):
    client, _service, _storage = _build_client(tmp_path)

    response = client.delete("/api/images/unknown")

    assert response.status_code == 404
    assert response.json()["details"] == {"id": "unknown", "resource": "image"}


def test_uploads_route_never_serves_files_outside_root(tmp_path):
    client, _service, _storage = _build_client(tmp_path)
    (tmp_path / "secret.txt").write_text("top secret", encoding="utf-8")

    response = client.get("/uploads/..%5Csecret.txt")

    assert response.status_code == 404
    assert "top secret" not in response.text


def test_gallery_surface_shares_the_image_service(tmp_path):
    client, service, _storage = _build_client(tmp_path)

    uploaded = _upload(client, field="image", path="/api/gallery/upload-image")
    assert uploaded.status_code == 200
    body = uploaded.json()
    assert body["message"] == "Image uploaded successfully"
    image = body["image"]

    listed = client.get("/api/gallery/get-image").json()
    assert [item["id"] for item in listed] == [image["id"]]
    assert listed[0]["filename"] == image["filename"]
    assert [link["id"] for link in client.get("/api/images").json()] == [image["id"]]

    deleted = client.delete(f"/api/gallery/delete-image/{image['id']}")
    assert deleted.json() == {"message": "Image deleted successfully"}
    assert service.list() == []
    assert client.delete(f"/api/gallery/delete-image/{image['id']}").status_code == 404
