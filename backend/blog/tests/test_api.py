from datetime import timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone

from blog.constants import PostStatus
from blog.exceptions import PersistenceError
from blog.models import Post
from blog.tests.factories import PostFactory

pytestmark = pytest.mark.django_db


def editor_url(post, name="detail"):
    return reverse(f"blog:editor-{name}", kwargs={"pk": post.pk})


# ---------------------------
# Public reading
# ---------------------------
def test_index_lists_published_posts_newest_first(api_client, user):
    now = timezone.now()
    older = PostFactory(author=user, published=True, published_at=now - timedelta(days=2))
    newer = PostFactory(author=user, published=True, published_at=now - timedelta(days=1))
    PostFactory(author=user)

    response = api_client.get(reverse("blog:post-list"))

    assert response.status_code == 200
    assert response.data["count"] == 2
    slugs = [item["slug"] for item in response.data["results"]]
    assert slugs == [newer.slug, older.slug]
    assert response.data["results"][0]["author"]["username"] == user.username


def test_index_derives_excerpt_when_missing(api_client):
    PostFactory(published=True, excerpt="", content="# Heading\n\nBody **text**")

    response = api_client.get(reverse("blog:post-list"))

    assert response.data["results"][0]["excerpt"] == "Heading\n\nBody text"


def test_index_is_paginated(api_client):
    PostFactory.create_batch(12, published=True)

    response = api_client.get(reverse("blog:post-list"))

    assert response.data["count"] == 12
    assert len(response.data["results"]) == 10
    assert response.data["next"] is not None


def test_index_filters_by_author_and_search(api_client, user, other_user):
    mine = PostFactory(author=user, published=True, title="Django signals explained")
    PostFactory(author=other_user, published=True, title="Gardening notes")

    by_author = api_client.get(reverse("blog:post-list"), {"author": user.pk})
    by_text = api_client.get(reverse("blog:post-list"), {"search": "signals"})

    assert [item["slug"] for item in by_author.data["results"]] == [mine.slug]
    assert [item["slug"] for item in by_text.data["results"]] == [mine.slug]


def test_published_post_page(api_client):
    post = PostFactory(published=True, seo_keywords=["django", "blog"])

    response = api_client.get(reverse("blog:post-detail", kwargs={"slug": post.slug}))

    assert response.status_code == 200
    assert response.data["content"] == post.content
    assert response.data["meta"]["keywords"] == "django, blog"
    assert response.data["meta"]["og:type"] == "article"
    assert response.data["reading_time"] == 1


def test_draft_page_is_hidden_from_others(api_client, other_user):
    draft = PostFactory()
    url = reverse("blog:post-detail", kwargs={"slug": draft.slug})

    assert api_client.get(url).status_code == 404
    api_client.force_authenticate(user=other_user)
    assert api_client.get(url).status_code == 404


def test_draft_page_is_shown_to_its_author(author_client, user):
    draft = PostFactory(author=user)

    response = author_client.get(reverse("blog:post-detail", kwargs={"slug": draft.slug}))

    assert response.status_code == 200
    assert response.data["status"] == PostStatus.DRAFT


# ---------------------------
# Dashboard
# ---------------------------
def test_dashboard_requires_sign_in(api_client):
    response = api_client.get(reverse("blog:dashboard"))

    assert response.status_code == 401
    assert response.data["redirect"] == "/auth"


def test_dashboard_lists_own_posts_with_stats(author_client, user, other_user):
    PostFactory(author=user)
    PostFactory(author=user, published=True)
    PostFactory(author=other_user, published=True)

    response = author_client.get(reverse("blog:dashboard"))

    assert response.status_code == 200
    assert response.data["stats"] == {"total": 2, "published": 1, "drafts": 1}
    assert len(response.data["posts"]) == 2


# ---------------------------
# Editor
# ---------------------------
def test_editor_requires_sign_in(api_client):
    response = api_client.post(reverse("blog:editor-list"))

    assert response.status_code == 401
    assert response.data["redirect"] == "/auth"
    assert not Post.objects.exists()


def test_new_post_starts_as_draft(author_client, user):
    response = author_client.post(reverse("blog:editor-list"))

    assert response.status_code == 201
    assert response.data["status"] == PostStatus.DRAFT
    assert response.data["slug"].startswith("draft-")
    assert Post.objects.get(pk=response.data["id"]).author == user


def test_editor_load_of_someone_elses_post(author_client, other_user):
    post = PostFactory(author=other_user)

    response = author_client.get(editor_url(post))

    assert response.status_code == 404
    assert "detail" in response.data


def test_save_derives_slug_and_seo_title(author_client):
    created = author_client.post(reverse("blog:editor-list")).data
    post = Post.objects.get(pk=created["id"])

    response = author_client.patch(editor_url(post), {"title": "My Post"}, format="json")

    assert response.status_code == 200
    assert response.data["slug"] == "my-post"
    assert response.data["seo_title"] == "My Post"
    assert response.data["published_at"] is None


def test_publish_through_save_keeps_first_timestamp(author_client, user):
    post = PostFactory(author=user)

    first = author_client.patch(editor_url(post), {"publish": "published"}, format="json")
    second = author_client.patch(editor_url(post), {"title": "Edited", "publish": "published"}, format="json")

    assert first.data["status"] == PostStatus.PUBLISHED
    assert first.data["published_at"] is not None
    assert second.data["published_at"] == first.data["published_at"]


def test_publish_action(author_client, user):
    post = PostFactory(author=user)

    response = author_client.post(editor_url(post, "publish"), {"seo_keywords": "a, b"}, format="json")

    assert response.status_code == 200
    assert response.data["status"] == PostStatus.PUBLISHED
    assert response.data["seo_keywords"] == ["a", "b"]


@pytest.mark.parametrize(
    "payload",
    [
        {"publish": "archived"},
        {"seo_description": "x" * 161},
        {"canonical_url": "not a url"},
        {"seo_keywords": 12},
    ],
)
def test_invalid_editor_input(author_client, user, payload):
    post = PostFactory(author=user)

    response = author_client.patch(editor_url(post), payload, format="json")

    assert response.status_code == 400
    post.refresh_from_db()
    assert post.status == PostStatus.DRAFT


def test_duplicate_slug_is_a_bad_request(author_client, user, other_user):
    PostFactory(author=other_user, slug="taken")
    post = PostFactory(author=user)

    response = author_client.patch(editor_url(post), {"slug": "taken"}, format="json")

    assert response.status_code == 400
    assert "taken" in response.data["detail"]


def test_store_outage_is_service_unavailable(author_client, user, monkeypatch):
    post = PostFactory(author=user)

    def fail(*args, **kwargs):
        raise PersistenceError()

    monkeypatch.setattr("blog.views.save_post", fail)

    response = author_client.patch(editor_url(post), {"title": "x"}, format="json")

    assert response.status_code == 503


# ---------------------------
# Featured image
# ---------------------------
def test_attach_image(author_client, user, blob_store, png_upload):
    post = PostFactory(author=user)

    response = author_client.post(editor_url(post, "image"), {"file": png_upload}, format="multipart")

    assert response.status_code == 201
    [key] = blob_store.objects
    assert key.startswith(f"{user.pk}/")
    assert response.data["featured_image"] == blob_store.get_public_url(key)
    post.refresh_from_db()
    assert post.featured_image == blob_store.get_public_url(key)


def test_attach_requires_a_file(author_client, user, blob_store):
    post = PostFactory(author=user)

    response = author_client.post(editor_url(post, "image"), {}, format="multipart")

    assert response.status_code == 400


def test_attach_rejects_non_images(author_client, user, blob_store):
    post = PostFactory(author=user)
    upload = SimpleUploadedFile("notes.txt", b"plain text", content_type="text/plain")

    response = author_client.post(editor_url(post, "image"), {"file": upload}, format="multipart")

    assert response.status_code == 400
    assert blob_store.objects == {}


def test_replacing_image_removes_previous_blob(author_client, user, blob_store, png_upload):
    old_url = blob_store.put(f"{user.pk}/1.png")
    post = PostFactory(author=user, featured_image=old_url)

    response = author_client.post(editor_url(post, "image"), {"file": png_upload}, format="multipart")

    assert response.status_code == 201
    assert response.data["featured_image"] != old_url
    assert f"{user.pk}/1.png" not in blob_store.objects
    assert len(blob_store.objects) == 1


def test_failed_save_drops_the_new_blob(author_client, user, blob_store, png_upload, monkeypatch):
    post = PostFactory(author=user)

    def fail(*args, **kwargs):
        raise PersistenceError()

    monkeypatch.setattr("blog.views.save_post", fail)

    response = author_client.post(editor_url(post, "image"), {"file": png_upload}, format="multipart")

    assert response.status_code == 503
    assert blob_store.objects == {}


def test_detach_image(author_client, user, blob_store):
    post = PostFactory(author=user, featured_image=blob_store.put(f"{user.pk}/1.png"))

    response = author_client.delete(editor_url(post, "image"))

    assert response.status_code == 200
    assert response.data["featured_image"] is None
    assert blob_store.objects == {}

    again = author_client.delete(editor_url(post, "image"))
    assert again.status_code == 200
    assert blob_store.removed == [f"{user.pk}/1.png"]


def test_detach_failure_keeps_image(author_client, user, blob_store):
    url = blob_store.put(f"{user.pk}/1.png")
    post = PostFactory(author=user, featured_image=url)
    blob_store.fail_remove = True

    response = author_client.delete(editor_url(post, "image"))

    assert response.status_code == 502
    post.refresh_from_db()
    assert post.featured_image == url


def test_failed_cleanup_does_not_hide_the_save_error(author_client, user, blob_store, png_upload, monkeypatch):
    post = PostFactory(author=user)

    def fail(*args, **kwargs):
        raise PersistenceError()

    monkeypatch.setattr("blog.views.save_post", fail)
    blob_store.fail_remove = True

    response = author_client.post(editor_url(post, "image"), {"file": png_upload}, format="multipart")

    assert response.status_code == 503
