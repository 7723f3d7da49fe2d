import time

import pytest
from itsdangerous import TimestampSigner

from blogcms.core.config import settings
from blogcms.core.security import issue_token

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 128

POST_FORM = {
    "title": "Form post",
    "excerpt": "Posted from the admin panel",
    "content": "Multipart body",
    "category": "Travel",
    "tags": "sea, sun , sand",
    "readTime": "7",
}


# ---------------------------
# Auth gate
# ---------------------------
def test_create_without_token_is_unauthorized(client):
    response = client.post("/api/blogs", json={"title": "x"})

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "UNAUTHORIZED"
    assert body["message"]


def test_tampered_token_is_forbidden(client, token):
    tampered = ("X" if token[0] != "X" else "Y") + token[1:]
    response = client.delete(
        "/api/blogs/whatever", headers={"Authorization": f"Bearer {tampered}"}
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "INVALID_TOKEN"


def test_expired_token_is_forbidden(client, monkeypatch):
    issued_at = int(time.time()) - (settings.TOKEN_EXPIRE_HOURS + 1) * 3600
    with monkeypatch.context() as m:
        m.setattr(TimestampSigner, "get_timestamp", lambda self: issued_at)
        expired = issue_token({"id": "someone", "username": "admin"})

    response = client.put(
        "/api/blogs/whatever",
        json={"title": "New"},
        headers={"Authorization": f"Bearer {expired}"},
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "TOKEN_EXPIRED"


def test_non_bearer_scheme_is_unauthorized(client, token):
    response = client.post(
        "/api/blogs", json={}, headers={"Authorization": f"Basic {token}"}
    )
    assert response.status_code == 401


def test_auth_runs_before_validation(client):
    # An invalid body must not leak validation errors to anonymous callers.
    response = client.post("/api/blogs", json={})
    assert response.status_code == 401


# ---------------------------
# Create
# ---------------------------
def test_create_echoes_fields_and_assigns_defaults(client, auth_headers):
    payload = {
        "title": "First post",
        "excerpt": "Summary",
        "content": "Long content " * 50,
        "category": "Tech",
    }
    response = client.post("/api/blogs", json=payload, headers=auth_headers)

    assert response.status_code == 201
    post = response.json()
    assert post["id"]
    for key, value in payload.items():
        assert post[key] == value
    assert post["author"] == settings.DEFAULT_AUTHOR
    assert post["readTime"] == settings.DEFAULT_READ_TIME
    assert post["published"] is True
    assert post["tags"] == []
    assert post["image"] is None
    assert post["date"]


def test_created_ids_are_unique(make_post):
    ids = {make_post(title=f"Post {i}")["id"] for i in range(5)}
    assert len(ids) == 5


def test_ids_are_not_reused_after_delete(client, auth_headers, make_post):
    first = make_post()
    client.delete(f"/api/blogs/{first['id']}", headers=auth_headers)

    second = make_post()
    assert second["id"] != first["id"]


def test_tags_are_split_and_trimmed(client, make_post):
    created = make_post(tags="a, b, c")

    fetched = client.get(f"/api/blogs/{created['id']}").json()
    assert fetched["tags"] == ["a", "b", "c"]


def test_tags_accept_a_json_list(make_post):
    created = make_post(tags=[" x ", "y", ""])
    assert created["tags"] == ["x", "y"]


def test_explicit_optional_fields_are_kept(make_post):
    created = make_post(
        author="Guest",
        readTime=12,
        published=False,
        date="2024-03-01T09:30:00",
    )

    assert created["author"] == "Guest"
    assert created["readTime"] == 12
    assert created["published"] is False
    assert created["date"].startswith("2024-03-01T09:30:00")


@pytest.mark.parametrize("missing", ["title", "excerpt", "content", "category"])
def test_create_requires_core_fields(client, auth_headers, missing):
    payload = {"title": "T", "excerpt": "E", "content": "C", "category": "K"}
    payload.pop(missing)

    response = client.post("/api/blogs", json=payload, headers=auth_headers)

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert any(detail["field"] == missing for detail in body["error_details"])


def test_create_rejects_blank_title(client, auth_headers):
    payload = {"title": "   ", "excerpt": "E", "content": "C", "category": "K"}
    response = client.post("/api/blogs", json=payload, headers=auth_headers)

    assert response.status_code == 422
    assert client.get("/api/blogs").json()["total"] == 0


def test_create_rejects_malformed_json(client, auth_headers):
    response = client.post(
        "/api/blogs",
        content=b"{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_create_with_form_and_image(client, auth_headers, uploaded_files):
    response = client.post(
        "/api/blogs",
        data=POST_FORM,
        files={"image": ("beach.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 201, response.text
    post = response.json()
    assert post["tags"] == ["sea", "sun", "sand"]
    assert post["readTime"] == 7
    assert post["image"].startswith("/uploads/")
    assert post["image"].endswith("beach.png")
    assert len(uploaded_files()) == 1

    served = client.get(post["image"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_form_without_file_creates_post_without_image(client, auth_headers, uploaded_files):
    response = client.post(
        "/api/blogs",
        data={**POST_FORM, "readTime": "", "published": ""},
        headers=auth_headers,
    )

    assert response.status_code == 201
    post = response.json()
    assert post["image"] is None
    assert post["readTime"] == settings.DEFAULT_READ_TIME
    assert post["published"] is True
    assert uploaded_files() == []


def test_oversized_image_creates_nothing(client, auth_headers, uploaded_files):
    big = b"\x00" * (settings.MAX_UPLOAD_SIZE + 1)
    response = client.post(
        "/api/blogs",
        data=POST_FORM,
        files={"image": ("huge.png", big, "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 413
    assert response.json()["error_code"] == "PAYLOAD_TOO_LARGE"
    assert client.get("/api/blogs").json()["total"] == 0
    assert uploaded_files() == []


def test_disallowed_image_type_creates_nothing(client, auth_headers, uploaded_files):
    response = client.post(
        "/api/blogs",
        data=POST_FORM,
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )

    assert response.status_code == 415
    assert response.json()["error_code"] == "UNSUPPORTED_MEDIA"
    assert client.get("/api/blogs").json()["total"] == 0
    assert uploaded_files() == []


def test_invalid_fields_do_not_store_image(client, auth_headers, uploaded_files):
    response = client.post(
        "/api/blogs",
        data={**POST_FORM, "title": ""},
        files={"image": ("beach.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert uploaded_files() == []


# ---------------------------
# Read
# ---------------------------
def test_get_by_id(client, make_post):
    created = make_post(title="Readable")

    response = client.get(f"/api/blogs/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_get_unknown_id_is_not_found(client):
    response = client.get("/api/blogs/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"



# ---------------------------
# Update
# ---------------------------
def test_update_replaces_only_provided_fields(client, auth_headers, make_post):
    created = make_post(tags="one, two", published=False, readTime=9)

    response = client.put(
        f"/api/blogs/{created['id']}", json={"title": "Renamed"}, headers=auth_headers
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Renamed"
    assert updated["excerpt"] == created["excerpt"]
    assert updated["tags"] == ["one", "two"]
    assert updated["published"] is False
    assert updated["readTime"] == 9
    assert updated["id"] == created["id"]


def test_update_parses_published_from_form(client, auth_headers, make_post):
    created = make_post()

    response = client.put(
        f"/api/blogs/{created['id']}",
        data={"published": "false"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["published"] is False


def test_update_rejects_blank_required_field(client, auth_headers, make_post):
    created = make_post()

    response = client.put(
        f"/api/blogs/{created['id']}", json={"content": ""}, headers=auth_headers
    )

    assert response.status_code == 422
    assert client.get(f"/api/blogs/{created['id']}").json()["content"] == created["content"]


def test_update_unknown_id_is_not_found(client, auth_headers):
    response = client.put("/api/blogs/missing", json={"title": "x"}, headers=auth_headers)
    assert response.status_code == 404


def test_update_keeps_image_without_new_upload(client, auth_headers):
    created = client.post(
        "/api/blogs",
        data=POST_FORM,
        files={"image": ("first.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    ).json()

    response = client.put(
        f"/api/blogs/{created['id']}", data={"title": "Still pictured"}, headers=auth_headers
    )

    assert response.json()["image"] == created["image"]


def test_update_with_new_image_replaces_old_file(client, auth_headers, uploaded_files):
    created = client.post(
        "/api/blogs",
        data=POST_FORM,
        files={"image": ("first.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    ).json()

    response = client.put(
        f"/api/blogs/{created['id']}",
        data={"title": "New cover"},
        files={"image": ("second.jpg", PNG_BYTES, "image/jpeg")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["image"] != created["image"]
    assert updated["image"].endswith("second.jpg")
    assert uploaded_files() == [updated["image"].rsplit("/", 1)[1]]


def test_rejected_upload_leaves_post_unchanged(client, auth_headers, make_post):
    created = make_post()

    response = client.put(
        f"/api/blogs/{created['id']}",
        data={"title": "Should not stick"},
        files={"image": ("doc.pdf", b"%PDF", "application/pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 415
    assert client.get(f"/api/blogs/{created['id']}").json() == created


# ---------------------------
# Delete
# ---------------------------
def test_delete_then_fetch_is_not_found(client, auth_headers, make_post):
    created = make_post()

    response = client.delete(f"/api/blogs/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Blog post deleted successfully"}
    assert client.get(f"/api/blogs/{created['id']}").status_code == 404


def test_delete_unknown_id_is_not_found(client, auth_headers, make_post):
    created = make_post()
    client.delete(f"/api/blogs/{created['id']}", headers=auth_headers)

    again = client.delete(f"/api/blogs/{created['id']}", headers=auth_headers)
    assert again.status_code == 404
    assert again.json()["error_code"] == "NOT_FOUND"


def test_delete_removes_stored_image(client, auth_headers, uploaded_files):
    created = client.post(
        "/api/blogs",
        data=POST_FORM,
        files={"image": ("gone.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    ).json()
    assert len(uploaded_files()) == 1

    client.delete(f"/api/blogs/{created['id']}", headers=auth_headers)

    assert uploaded_files() == []
