"""
Tests for posts and their category/tag associations.
"""
import pytest
from sqlalchemy import select

from blog_api.crud import crud_category, crud_tag, sync_post_categories, sync_post_tags
from blog_api.crud.errors import MissingRelationError
from blog_api.crud.post import normalize_ids
from blog_api.models.post import Post, PostCategory, PostTag


@pytest.fixture
def categories(db):
    return [
        crud_category.create(db, obj_in={"name": f"Category {i}", "slug": f"category-{i}"})
        for i in range(1, 4)
    ]


@pytest.fixture
def tags(db):
    return [crud_tag.create(db, obj_in={"name": f"tag{i}", "slug": f"tag-{i}"}) for i in range(1, 3)]


def _create_post(client, headers, **fields):
    payload = {"title": "A post", "slug": "a-post", "content": "Body"}
    payload.update(fields)
    return client.post("/posts", json=payload, headers=headers)


def _links(db, model, post_id):
    db.expire_all()
    return list(db.scalars(select(model).where(model.post_id == post_id)).all())


class TestNormalizeIds:
    def test_coerces_numbers_and_numeric_strings(self):
        assert normalize_ids([1, "2", 3.0, " 4 "]) == [1, 2, 3, 4]

    def test_drops_invalid_values(self):
        assert normalize_ids([0, -1, 1.5, "abc", None, True, "", float("nan")]) == []

    def test_keeps_duplicates(self):
        assert normalize_ids([2, "2"]) == [2, 2]

    def test_none_is_empty(self):
        assert normalize_ids(None) == []


class TestRelationSync:
    def test_first_category_is_primary(self, db, editor, categories):
        post = Post(author_id=editor.id, title="t", slug="t", content="c")
        db.add(post)
        db.commit()

        c1, c2, c3 = categories
        sync_post_categories(db, post_id=post.id, category_ids=[c3.id, c1.id])

        links = {link.category_id: link.is_primary for link in _links(db, PostCategory, post.id)}
        assert links == {c3.id: True, c1.id: False}

    def test_empty_list_clears_associations(self, db, editor, categories):
        post = Post(author_id=editor.id, title="t", slug="t", content="c")
        db.add(post)
        db.commit()

        sync_post_categories(db, post_id=post.id, category_ids=[c.id for c in categories])
        assert sync_post_categories(db, post_id=post.id, category_ids=[]) == []
        assert _links(db, PostCategory, post.id) == []

    def test_missing_target_leaves_no_associations(self, db, editor, tags):
        post = Post(author_id=editor.id, title="t", slug="t", content="c")
        db.add(post)
        db.commit()

        sync_post_tags(db, post_id=post.id, tag_ids=[tags[0].id])
        with pytest.raises(MissingRelationError) as exc_info:
            sync_post_tags(db, post_id=post.id, tag_ids=[tags[1].id, 999])

        assert exc_info.value.missing_ids == [999]
        assert _links(db, PostTag, post.id) == []

    def test_duplicate_ids_collapse_to_one_row(self, db, editor, tags):
        post = Post(author_id=editor.id, title="t", slug="t", content="c")
        db.add(post)
        db.commit()

        sync_post_tags(db, post_id=post.id, tag_ids=[tags[0].id, str(tags[0].id)])
        assert len(_links(db, PostTag, post.id)) == 1


class TestPostEndpoints:
    def test_create_and_fetch_with_categories(self, client, editor_headers, categories):
        c1, _, c3 = categories
        created = _create_post(client, editor_headers, category_ids=[c1.id, c3.id])
        assert created.status_code == 201

        fetched = client.get(f"/posts/{created.json()['id']}")
        assert fetched.status_code == 200
        cats = fetched.json()["categories"]
        assert {c["id"] for c in cats} == {c1.id, c3.id}
        assert cats[0]["id"] == c1.id
        assert cats[0]["is_primary"] is True
        assert cats[1]["is_primary"] is False

    def test_author_defaults_to_caller(self, client, editor, editor_headers):
        response = _create_post(client, editor_headers)
        assert response.json()["author_id"] == editor.id
        assert response.json()["author"]["username"] == "editor"
        assert response.json()["status"] == "draft"
        assert response.json()["view_count"] == 0

    def test_create_with_numeric_string_ids(self, client, editor_headers, tags):
        response = _create_post(client, editor_headers, tag_ids=[str(tags[0].id), tags[1].id])
        assert response.status_code == 201
        assert {t["id"] for t in response.json()["tags"]} == {tags[0].id, tags[1].id}

    def test_create_with_missing_category_removes_post(self, client, db, editor_headers, categories):
        response = _create_post(client, editor_headers, category_ids=[categories[0].id, 999])
        assert response.status_code == 404
        assert response.json()["details"] == {"categories": [999]}

        db.expire_all()
        assert db.scalars(select(Post).where(Post.slug == "a-post")).first() is None
        assert _create_post(client, editor_headers).status_code == 201

    def test_create_unknown_author(self, client, editor_headers):
        assert _create_post(client, editor_headers, author_id=999).status_code == 404

    def test_create_duplicate_slug(self, client, editor_headers):
        assert _create_post(client, editor_headers).status_code == 201
        assert _create_post(client, editor_headers).status_code == 409

    def test_create_requires_editor_or_manager(self, client, reader_headers):
        assert _create_post(client, reader_headers).status_code == 403

    def test_create_requires_token(self, client):
        assert _create_post(client, {}).status_code == 401

    def test_create_missing_title(self, client, editor_headers):
        response = client.post("/posts", json={"slug": "x", "content": "y"}, headers=editor_headers)
        assert response.status_code == 400

    def test_update_with_missing_category_clears_categories(self, client, editor_headers, categories):
        c1, c2, _ = categories
        post_id = _create_post(client, editor_headers, category_ids=[c1.id]).json()["id"]

        response = client.put(
            f"/posts/{post_id}",
            json={"title": "Renamed", "category_ids": [c2.id, 999]},
            headers=editor_headers,
        )
        assert response.status_code == 404

        fetched = client.get(f"/posts/{post_id}").json()
        assert fetched["title"] == "Renamed"
        assert fetched["categories"] == []

    def test_update_empty_list_removes_tags(self, client, editor_headers, tags):
        post_id = _create_post(client, editor_headers, tag_ids=[t.id for t in tags]).json()["id"]
        response = client.put(f"/posts/{post_id}", json={"tag_ids": []}, headers=editor_headers)
        assert response.status_code == 200
        assert response.json()["tags"] == []

    def test_update_without_relation_fields_keeps_them(self, client, editor_headers, tags):
        post_id = _create_post(client, editor_headers, tag_ids=[tags[0].id]).json()["id"]
        response = client.put(
            f"/posts/{post_id}", json={"status": "published"}, headers=editor_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "published"
        assert [t["id"] for t in response.json()["tags"]] == [tags[0].id]

    def test_update_slug_conflict(self, client, editor_headers):
        _create_post(client, editor_headers)
        other = _create_post(client, editor_headers, slug="other").json()["id"]
        response = client.put(f"/posts/{other}", json={"slug": "a-post"}, headers=editor_headers)
        assert response.status_code == 409

    def test_reassign_author(self, client, manager, editor_headers):
        post_id = _create_post(client, editor_headers).json()["id"]
        response = client.put(
            f"/posts/{post_id}", json={"author_id": manager.id}, headers=editor_headers
        )
        assert response.json()["author_id"] == manager.id

    def test_soft_delete_hides_post(self, client, db, editor_headers):
        post_id = _create_post(client, editor_headers).json()["id"]
        assert client.delete(f"/posts/{post_id}", headers=editor_headers).status_code == 204
        assert client.get(f"/posts/{post_id}").status_code == 404
        assert client.get("/posts").json()["total"] == 0

        db.expire_all()
        assert db.get(Post, post_id).deleted_at is not None

    def test_delete_missing_post(self, client, editor_headers):
        assert client.delete("/posts/999", headers=editor_headers).status_code == 404


class TestPostListing:
    def test_filters_and_pagination(self, client, editor_headers, categories, tags):
        _create_post(client, editor_headers, slug="p1", category_ids=[categories[0].id])
        _create_post(client, editor_headers, slug="p2", tag_ids=[tags[0].id], status="published")
        _create_post(client, editor_headers, slug="p3")

        everything = client.get("/posts").json()
        assert everything["total"] == 3
        assert [p["slug"] for p in everything["posts"]] == ["p3", "p2", "p1"]

        assert [p["slug"] for p in client.get("/posts", params={"status": "published"}).json()["posts"]] == ["p2"]
        assert [p["slug"] for p in client.get("/posts", params={"category_id": categories[0].id}).json()["posts"]] == ["p1"]
        assert [p["slug"] for p in client.get("/posts", params={"tag_id": tags[0].id}).json()["posts"]] == ["p2"]

        page = client.get("/posts", params={"skip": 0, "limit": 2}).json()
        assert len(page["posts"]) == 2
        assert page["has_more"] is True

    def test_invalid_status_filter(self, client):
        assert client.get("/posts", params={"status": "archived"}).status_code == 400
