# tests/http_api/test_system.py
from fastapi import status

HTTP_METHODS = {"get", "post", "put", "patch", "delete"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"
    assert response.json()["env"] == "testing"


def test_unknown_route(client):
    assert client.get("/nope").status_code == status.HTTP_404_NOT_FOUND


def test_admin_operations_are_tagged_admin(app):
    """Every /admin operation carries the admin tag so the back-office is grouped in the docs."""
    paths = app.openapi()["paths"]
    admin_paths = {path: ops for path, ops in paths.items() if path.startswith("/admin")}

    assert admin_paths
    for path, operations in admin_paths.items():
        for method, operation in operations.items():
            if method not in HTTP_METHODS:
                continue
            assert "admin" in operation.get("tags", []), f"{method.upper()} {path} is missing the 'admin' tag."
