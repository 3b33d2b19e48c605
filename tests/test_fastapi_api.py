import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient

from jaops import JAOPS, Application
from jaops.fastapi import JaopsFastAPI
from dummy import STORE, make_token

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


@pytest.fixture
def client(api_app: Application) -> TestClient:
    app = FastAPI()
    JaopsFastAPI(app, api_app)
    return TestClient(app)


def test_get(client: TestClient) -> None:
    response = client.get("/api/users/42", params={"fields[user]": "email", "include": "articles"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(JSONAPI_MEDIA_TYPE)
    data = response.json()["data"]
    assert data["attributes"] == {"email": "x@y.com"}
    assert data["relationships"]["articles"][0]["id"] == "7"


def test_computed_attributes(client: TestClient) -> None:
    response = client.get("/api/users/1")
    assert response.json()["data"]["attributes"] == {
        "email": "a@b.com",
        "name": "Alice",
        "coolFactor": 3,
        "friends": [{"name": "Joel"}, {"name": "Ryan"}],
    }


def test_post(client: TestClient) -> None:
    payload = {"data": {"type": "user", "attributes": {"email": "c@d.com", "name": "Carol"}}}
    response = client.post("/api/users", json=payload, headers={"Content-Type": JSONAPI_MEDIA_TYPE})
    assert response.status_code == 201
    assert response.json()["data"]["attributes"]["name"] == "Carol"


def test_delete(client: TestClient) -> None:
    response = client.delete("/api/users/42")
    assert response.status_code == 204
    assert response.content == b""
    assert "42" not in STORE["users"]


def test_noop(client: TestClient) -> None:
    response = client.delete("/api/users")
    assert response.status_code == 204
    assert response.content == b""

    response = client.get("/api/comments")
    assert response.status_code == 204


def test_noop_status_is_configurable(monkeypatch: pytest.MonkeyPatch, client: TestClient) -> None:
    monkeypatch.setattr(JAOPS, "NOOP_STATUS", 404)
    assert client.get("/api/comments").status_code == 404


def test_not_found(client: TestClient) -> None:
    response = client.get("/api/users/404")
    assert response.status_code == 404
    assert response.json() == {"errors": [{"status": 404, "code": "not_found"}]}


def test_invalid_json(client: TestClient) -> None:
    response = client.post("/api/users", content=b"{not json", headers={"Content-Type": JSONAPI_MEDIA_TYPE})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "invalid_payload"


def test_invalid_utf8(client: TestClient) -> None:
    response = client.post("/api/users", content=b'{"data": "\xff\xfe"}', headers={"Content-Type": JSONAPI_MEDIA_TYPE})
    assert response.status_code == 400
    assert response.headers["content-type"].startswith(JSONAPI_MEDIA_TYPE)
    assert response.json()["errors"][0]["code"] == "invalid_payload"


def test_operations_and_data(client: TestClient) -> None:
    payload = {"operations": [{"op": "get", "ref": {"type": "user"}}], "data": {"type": "user"}}
    response = client.patch("/api/bulk", json=payload)
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "JSONAPI payload cannot have both 'operations' and 'data' keys"


def test_bulk(client: TestClient) -> None:
    payload = {
        "operations": [
            {"op": "get", "ref": {"type": "article", "id": "8"}, "params": {"include": ["author"]}},
            {"op": "remove", "ref": {"type": "user", "id": "1"}},
            {"op": "get", "ref": {"type": "user", "id": "404"}},
        ]
    }
    response = client.patch("/api/bulk", json=payload)
    assert response.status_code == 200
    results = response.json()["operations"]
    assert results[0]["data"]["relationships"]["author"]["id"] == "1"
    assert results[1] == {"data": None, "included": []}
    assert results[2] == {"errors": [{"status": 404, "code": "not_found"}]}


def test_paths_outside_the_namespace(client: TestClient) -> None:
    response = client.get("/users/1")
    assert response.status_code == 404
    assert response.json() == {"errors": [{"status": 404, "code": "not_found"}]}


def test_bearer_token(client: TestClient) -> None:
    headers = {"Authorization": f"Bearer {make_token({'id': '42'})}"}
    assert client.get("/api/users/1", headers=headers).status_code == 200
    assert client.get("/api/users/1", headers={"Authorization": "Bearer garbage"}).status_code == 200


def test_dependencies(api_app: Application) -> None:
    def require_key(x_api_key: str = ""):
        if x_api_key != "sesame":
            raise HTTPException(status_code=403)

    app = FastAPI()
    JaopsFastAPI(app, api_app, dependencies=[Depends(require_key)])
    client = TestClient(app)

    response = client.get("/api/users/1")
    assert response.status_code == 403
    assert response.json() == {"errors": [{"status": 403, "code": "access_denied"}]}
    assert client.get("/api/users/1", params={"x_api_key": "sesame"}).status_code == 200


def test_invalid_dependencies(api_app: Application) -> None:
    with pytest.raises(TypeError):
        JaopsFastAPI(FastAPI(), api_app, dependencies=["not callable"])


def test_without_namespace(app: Application) -> None:
    fastapi_app = FastAPI()
    JaopsFastAPI(fastapi_app, app)
    client = TestClient(fastapi_app)
    assert client.get("/articles/7").json()["data"]["attributes"]["title"] == "Hello"
