import base64
import importlib
from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage


@pytest.fixture
def api(tmp_path, monkeypatch):
    monkeypatch.setenv("UPLOAD_FOLDER", str(tmp_path / "uploads"))
    monkeypatch.setenv("RESULTS_FOLDER", str(tmp_path / "results"))
    import edge_filter.api_server as api_server
    api_server = importlib.reload(api_server)
    api_server.app.config["TESTING"] = True
    return api_server


@pytest.fixture
def client(api):
    return api.app.test_client()


def png_bytes(pixels) -> BytesIO:
    buffer = BytesIO()
    PILImage.fromarray(np.asarray(pixels, dtype=np.uint8)).save(buffer, format="PNG")
    buffer.seek(0)
    return buffer


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_detect_edges(client, api, tmp_path, vertical_edge_pixels):
    response = client.post(
        "/api/detect-edges",
        data={"image": (png_bytes(vertical_edge_pixels), "edge.png")},
        content_type="multipart/form-data",
    )

    body = response.get_json()
    assert response.status_code == 200
    assert body["success"] is True
    assert (body["width"], body["height"]) == (3, 3)

    encoded = body["image"].split(",", 1)[1]
    with PILImage.open(BytesIO(base64.b64decode(encoded))) as decoded:
        assert np.asarray(decoded).tolist() == [[255, 255, 0]] * 3

    served = client.get(body["url"])
    assert served.status_code == 200
    assert served.mimetype == "image/png"

    # upload is cleaned up
    assert list((tmp_path / "uploads").iterdir()) == []


def test_detect_edges_requires_an_image(client):
    response = client.post("/api/detect-edges", data={}, content_type="multipart/form-data")

    assert response.status_code == 400


def test_detect_edges_rejects_extension(client, uniform_pixels):
    response = client.post(
        "/api/detect-edges",
        data={"image": (png_bytes(uniform_pixels), "flat.exe")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400


def test_detect_edges_undecodable_upload(client):
    response = client.post(
        "/api/detect-edges",
        data={"image": (BytesIO(b"not an image"), "fake.png")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_detect_edges_too_small(client, tmp_path):
    response = client.post(
        "/api/detect-edges",
        data={"image": (png_bytes(np.zeros((2, 9, 3))), "tiny.png")},
        content_type="multipart/form-data",
    )

    body = response.get_json()
    assert response.status_code == 422
    assert (body["width"], body["height"]) == (9, 2)
    assert "upload" not in body["message"]
    assert str(tmp_path) not in body["message"]


def test_unknown_result(client):
    assert client.get("/api/image/missing.png").status_code == 404


def test_allowed_extensions_are_normalised(tmp_path, monkeypatch, uniform_pixels):
    monkeypatch.setenv("ALLOWED_EXTENSIONS", "PNG, .jpg ,")
    monkeypatch.setenv("UPLOAD_FOLDER", str(tmp_path / "uploads"))
    monkeypatch.setenv("RESULTS_FOLDER", str(tmp_path / "results"))
    import edge_filter.api_server as api_server
    api_server = importlib.reload(api_server)

    assert api_server.ALLOWED_EXTENSIONS == {"png", "jpg"}
    response = api_server.app.test_client().post(
        "/api/detect-edges",
        data={"image": (png_bytes(uniform_pixels), "flat.png")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
