import pytest

from blog.models import Post
from blog.tests.factories import PostFactory
from blog.utils import derive_excerpt, describe_meta, generate_slug, parse_keywords


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Hello, World!", "hello-world"),
        ("  Leading and trailing  ", "leading-and-trailing"),
        ("Django & DRF -- 2024", "django-drf-2024"),
        ("already-a-slug", "already-a-slug"),
        ("Café au lait", "caf-au-lait"),
        ("---", ""),
        ("", ""),
    ],
)
def test_generate_slug(title, expected):
    assert generate_slug(title) == expected


@pytest.mark.parametrize("title", ["Hello, World!", "  A  B  ", "x__y..z", "ÜBER cool!!", ""])
def test_generate_slug_is_idempotent(title):
    once = generate_slug(title)
    assert generate_slug(once) == once


def test_derive_excerpt_strips_markdown_markers():
    assert derive_excerpt("# Title\n\nSome **bold** and `code`") == "Title\n\nSome bold and code"


def test_derive_excerpt_truncates_long_content():
    content = "a" * 200
    assert derive_excerpt(content) == "a" * 150 + "..."
    assert derive_excerpt("b" * 150) == "b" * 150
    assert derive_excerpt("") == ""


def test_parse_keywords():
    assert parse_keywords("blog, cms,, markdown , blog") == ["blog", "cms", "markdown"]
    assert parse_keywords(["seo, tips", "seo", " "]) == ["seo", "tips"]
    assert parse_keywords(None) == []


@pytest.mark.django_db
def test_describe_meta_defaults_from_content():
    post = PostFactory(published=True, title="Meta post", content="x" * 300)
    post = Post.objects.with_author().get(pk=post.pk)

    meta = describe_meta(post)

    assert meta["title"] == "Meta post"
    assert meta["description"] == "x" * 160
    assert meta["keywords"] is None
    assert meta["canonical_url"] is None
    assert meta["og:type"] == "article"
    assert meta["article:published_time"] == post.published_at.isoformat()
    assert meta["article:author"] == post.author.username


@pytest.mark.django_db
def test_describe_meta_prefers_seo_fields():
    post = PostFactory(
        published=True,
        title="Plain title",
        seo_title="SEO title",
        seo_description="Short description",
        seo_keywords=["django", "seo"],
        canonical_url="https://example.com/original",
    )
    post.author.profile.full_name = "Ada Lovelace"
    post.author.profile.save()
    post = Post.objects.with_author().get(pk=post.pk)

    meta = describe_meta(post)

    assert meta["title"] == meta["og:title"] == "SEO title"
    assert meta["description"] == meta["og:description"] == "Short description"
    assert meta["keywords"] == "django, seo"
    assert meta["canonical_url"] == "https://example.com/original"
    assert meta["article:author"] == "Ada Lovelace"
