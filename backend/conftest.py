import pytest
from rest_framework.test import APIClient

from blog.tests.fakes import InMemoryBlobStore, make_png_upload
from users.tests.factories import UserFactory


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def other_user(db):
    return UserFactory()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def author_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def blob_store(monkeypatch):
    store = InMemoryBlobStore()
    monkeypatch.setattr("blog.views.get_blob_store", lambda: store)
    return store


@pytest.fixture
def png_upload():
    return make_png_upload()
