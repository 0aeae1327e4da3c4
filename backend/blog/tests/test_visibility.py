import pytest
from django.contrib.auth.models import AnonymousUser

from blog.tests.factories import PostFactory
from blog.visibility import authored_posts, is_visible, visible_posts

pytestmark = pytest.mark.django_db


@pytest.fixture
def posts(user, other_user):
    return {
        "mine_draft": PostFactory(author=user),
        "mine_published": PostFactory(author=user, published=True),
        "theirs_draft": PostFactory(author=other_user),
        "theirs_published": PostFactory(author=other_user, published=True),
    }


def test_published_post_is_visible_to_everyone(user, other_user, posts):
    post = posts["theirs_published"]

    assert is_visible(None, post)
    assert is_visible(AnonymousUser(), post)
    assert is_visible(user, post)
    assert is_visible(other_user, post)


def test_draft_is_visible_to_its_author_only(user, other_user, posts):
    draft = posts["mine_draft"]

    assert is_visible(user, draft)
    assert not is_visible(other_user, draft)
    assert not is_visible(AnonymousUser(), draft)
    assert not is_visible(None, draft)


def test_visible_posts_for_anonymous_reader(posts):
    visible = set(visible_posts(AnonymousUser()))

    assert visible == {posts["mine_published"], posts["theirs_published"]}


def test_visible_posts_include_own_drafts_only(user, posts):
    visible = set(visible_posts(user))

    assert visible == {posts["mine_draft"], posts["mine_published"], posts["theirs_published"]}


def test_authored_posts(user, posts):
    assert set(authored_posts(user)) == {posts["mine_draft"], posts["mine_published"]}
    assert not authored_posts(AnonymousUser()).exists()
