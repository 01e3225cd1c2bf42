"""
Integration tests for the HTTP surface
"""

import base64

import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def client():
    return TestClient(app)


def hide_request(client, cover, secret, name="secret.bin", **form):
    return client.post(
        "/stego/hide",
        files={
            "cover": ("cover.png", cover, "image/png"),
            "secret": (name, secret, "application/octet-stream"),
        },
        data=form,
    )


def unveil_request(client, image, **form):
    return client.post("/stego/unveil", files={"file": ("stego.png", image, "image/png")}, data=form)


class TestHideUnveilEndpoints:

    def test_round_trip_with_password(self, client, opaque_carrier, secret_500):
        response = hide_request(client, opaque_carrier, secret_500, password="pw")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-stego-resized"] == "false"

        unveiled = unveil_request(client, response.content, password="pw")
        assert unveiled.status_code == 200
        files = unveiled.json()["files"]
        assert len(files) == 1
        assert files[0]["name"] == "secret.bin"
        assert files[0]["size_bytes"] == 500
        assert base64.b64decode(files[0]["data_base64"]) == secret_500

    def test_wrong_password_returns_empty_list(self, client, opaque_carrier, secret_500):
        response = hide_request(client, opaque_carrier, secret_500, password="pw")
        unveiled = unveil_request(client, response.content, password="wrong")
        assert unveiled.status_code == 200
        assert unveiled.json() == {"files": []}

    def test_plain_carrier_returns_empty_list(self, client, opaque_carrier):
        unveiled = unveil_request(client, opaque_carrier)
        assert unveiled.status_code == 200
        assert unveiled.json()["files"] == []

    def test_insufficient_capacity(self, client, small_carrier):
        response = hide_request(client, small_carrier, b"\x00" * 1000, auto_resize="false")
        assert response.status_code == 413
        body = response.json()
        assert body["success"] is False
        assert body["details"]["available"] == 37
        assert body["details"]["required"] == 1000 + 6 + 1 + 2 + len("secret.bin") + 4

    def test_auto_resize(self, client, small_carrier):
        response = hide_request(client, small_carrier, b"\x07" * 1000, auto_resize="true")
        assert response.status_code == 200
        assert response.headers["x-stego-resized"] == "true"
        assert int(response.headers["x-stego-width"]) > 10

    def test_lossy_format_rejected(self, client, opaque_carrier):
        response = hide_request(client, opaque_carrier, b"abc", output_format="jpeg")
        assert response.status_code == 400
        assert "jpeg" in response.json()["error"]

    def test_invalid_image(self, client):
        response = unveil_request(client, b"definitely not an image")
        assert response.status_code == 400
        assert response.json()["success"] is False


class TestCapacityEndpoint:

    def test_capacity(self, client, small_carrier):
        response = client.post(
            "/stego/capacity",
            files={"file": ("c.png", small_carrier, "image/png")},
            data={"secret_size": "1000", "name_length": "7"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["available_bytes"] == 37
        assert body["required_bytes"] == 1020
        assert body["fits"] is False

    @pytest.mark.parametrize("field", ["secret_size", "name_length"])
    def test_negative_sizes_rejected(self, client, small_carrier, field):
        response = client.post(
            "/stego/capacity",
            files={"file": ("c.png", small_carrier, "image/png")},
            data={field: "-5"},
        )
        assert response.status_code == 422
