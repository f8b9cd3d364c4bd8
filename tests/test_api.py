import pytest
from fastapi.testclient import TestClient

from blogsite.core.config import get_settings
from blogsite.main import create_app
from blogsite.storage import StorageUnavailableError, VolatileStorage


@pytest.fixture
def client():
    settings = get_settings(STORAGE_BACKEND="memory", SEED_DEFAULT_DATA=False)
    with TestClient(create_app(settings, storage=VolatileStorage())) as test_client:
        yield test_client


@pytest.fixture
def blog(client):
    """An author and a category to hang posts off."""
    author = client.post(
        "/api/users", json={"username": "sarah", "password": "secret", "email": "sarah@blog.io"}
    ).json()
    category = client.post("/api/categories", json={"name": "Tech", "slug": "tech"}).json()
    return {"author_id": author["id"], "category_id": category["id"]}


def post_body(blog, slug, **fields):
    body = {
        "title": slug.title(),
        "slug": slug,
        "excerpt": "excerpt",
        "content": "content",
        "author_id": blog["author_id"],
        "category_id": blog["category_id"],
    }
    body.update(fields)
    return body


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "storage": "memory"}


def test_create_user_hides_password(client):
    response = client.post(
        "/api/users", json={"username": "sarah", "password": "secret", "email": "sarah@blog.io"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "sarah"
    assert "password" not in body

    fetched = client.get(f"/api/users/{body['id']}")
    assert fetched.status_code == 200
    assert "password" not in fetched.json()


def test_duplicate_user_is_409(client):
    payload = {"username": "sarah", "password": "secret", "email": "sarah@blog.io"}
    client.post("/api/users", json=payload)

    response = client.post("/api/users", json=payload)
    assert response.status_code == 409
    assert response.json()["detail"] == "Username is already taken"


def test_unknown_user_is_404(client):
    assert client.get("/api/users/42").status_code == 404


def test_invalid_payload_is_400(client):
    response = client.post("/api/users", json={"username": "sarah", "email": "not-an-email"})
    assert response.status_code == 400


def test_categories_and_tags(client):
    assert client.post("/api/categories", json={"name": "Tech", "slug": "tech"}).status_code == 201
    assert client.post("/api/categories", json={"name": "Tech", "slug": "tech"}).status_code == 409
    assert client.get("/api/categories").json()[0]["slug"] == "tech"
    assert client.get("/api/categories/tech").status_code == 200
    assert client.get("/api/categories/none").status_code == 404

    assert client.post("/api/tags", json={"name": "React", "slug": "react"}).status_code == 201
    assert client.get("/api/tags/react").json()["name"] == "React"
    assert client.get("/api/tags/vue").status_code == 404


def test_post_lifecycle(client, blog):
    created = client.post("/api/posts", json=post_body(blog, "hello", is_featured=True))
    assert created.status_code == 201
    post = created.json()
    assert post["views"] == 0

    assert client.get("/api/posts/hello").json()["id"] == post["id"]
    assert [p["slug"] for p in client.get("/api/posts/featured").json()] == ["hello"]
    assert [p["slug"] for p in client.get(f"/api/categories/{blog['category_id']}/posts").json()] == ["hello"]

    viewed = client.patch(f"/api/posts/{post['id']}/views")
    assert viewed.status_code == 200
    assert viewed.json()["views"] == 1

    assert client.get("/api/posts/missing").status_code == 404
    assert client.patch("/api/posts/999/views").status_code == 404


def test_post_pagination(client, blog):
    for hour in range(5):
        client.post(
            "/api/posts", json=post_body(blog, f"post-{hour}", published_at=f"2024-05-01T0{hour}:00:00Z")
        )

    page = client.get("/api/posts", params={"limit": 2, "offset": 1}).json()
    assert [p["slug"] for p in page] == ["post-3", "post-2"]
    assert client.get("/api/posts", params={"limit": -1}).status_code == 400


def test_post_with_unknown_author_is_400(client, blog):
    response = client.post("/api/posts", json=post_body(blog, "orphan", author_id=blog["author_id"] + 10))
    assert response.status_code == 400


def test_duplicate_post_slug_is_409(client, blog):
    client.post("/api/posts", json=post_body(blog, "same"))
    assert client.post("/api/posts", json=post_body(blog, "same")).status_code == 409


def test_post_tags(client, blog):
    post = client.post("/api/posts", json=post_body(blog, "tagged")).json()
    tag = client.post("/api/tags", json={"name": "React", "slug": "react"}).json()

    attached = client.post(f"/api/posts/{post['id']}/tags", json={"tag_id": tag["id"]})
    assert attached.status_code == 201
    assert client.post(f"/api/posts/{post['id']}/tags", json={"tag_id": tag["id"]}).status_code == 409
    assert client.post(f"/api/posts/{post['id']}/tags", json={"tag_id": 999}).status_code == 404

    assert [pt["tag_id"] for pt in client.get(f"/api/posts/{post['id']}/tags").json()] == [tag["id"]]
    assert [p["slug"] for p in client.get(f"/api/tags/{tag['id']}/posts").json()] == ["tagged"]


def test_comments(client, blog):
    post = client.post("/api/posts", json=post_body(blog, "discussed")).json()
    for text in ("one", "two"):
        response = client.post(
            "/api/comments", json={"content": text, "author_id": blog["author_id"], "post_id": post["id"]}
        )
        assert response.status_code == 201

    listed = client.get(f"/api/posts/{post['id']}/comments").json()
    assert [c["content"] for c in listed] == ["two", "one"]

    orphan = client.post(
        "/api/comments", json={"content": "lost", "author_id": blog["author_id"], "post_id": 999}
    )
    assert orphan.status_code == 400


def test_waitlist(client):
    payload = {"full_name": "Ada", "email": "a@x.com", "blog_type": "tech"}

    assert client.post("/api/waitlist", json=payload).status_code == 201
    duplicate = client.post("/api/waitlist", json=payload)
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Email is already on the waitlist"


class UnavailableStorage(VolatileStorage):
    async def ping(self):
        raise StorageUnavailableError("database is unreachable")

    async def get_posts(self, limit=None, offset=0):
        raise StorageUnavailableError("get_posts failed: storage unavailable")


def test_storage_outage_is_503():
    settings = get_settings(STORAGE_BACKEND="memory", SEED_DEFAULT_DATA=False)
    with TestClient(create_app(settings, storage=UnavailableStorage())) as client:
        response = client.get("/api/posts")
        assert response.status_code == 503
        assert response.json() == {"detail": "Service temporarily unavailable"}

        assert client.get("/health").status_code == 503


def test_seeded_app_serves_default_categories():
    settings = get_settings(STORAGE_BACKEND="memory", SEED_DEFAULT_DATA=True)
    with TestClient(create_app(settings, storage=VolatileStorage())) as client:
        slugs = [c["slug"] for c in client.get("/api/categories").json()]
    assert "technology" in slugs
    assert len(slugs) == 5


def test_database_backend_over_http(tmp_path):
    settings = get_settings(
        STORAGE_BACKEND="database",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        SEED_DEFAULT_DATA=True,
    )
    with TestClient(create_app(settings)) as client:
        assert client.get("/health").json() == {"status": "healthy", "storage": "database"}
        users = client.get("/api/users/1").json()
        assert users["username"] == "sarahjohnson"
        assert "password" not in users


def test_limit_above_one_hundred_is_accepted(client, blog):
    for hour in range(3):
        client.post("/api/posts", json=post_body(blog, f"post-{hour}", published_at=f"2024-05-01T0{hour}:00:00Z"))

    response = client.get("/api/posts", params={"limit": 150, "offset": 0})
    assert response.status_code == 200
    assert len(response.json()) == 3
    assert client.get("/api/posts/featured", params={"limit": 150}).status_code == 200
    assert client.get(f"/api/categories/{blog['category_id']}/posts", params={"limit": 150}).status_code == 200


class SeedFailingStorage(VolatileStorage):
    def __init__(self):
        super().__init__()
        self.closed = False

    async def get_categories(self):
        raise StorageUnavailableError("database is unreachable")

    async def close(self):
        self.closed = True
        await super().close()


@pytest.mark.asyncio
async def test_failed_startup_still_closes_storage():
    storage = SeedFailingStorage()
    app = create_app(get_settings(STORAGE_BACKEND="memory", SEED_DEFAULT_DATA=True), storage=storage)

    with pytest.raises(StorageUnavailableError):
        async with app.router.lifespan_context(app):
            pass

    assert storage.closed is True
