"""Pytest configuration, fixtures and the seed/teardown harness.

The post store is opened once per test session and shared with a
single application instance.  Every test runs between a seed of ten
synthetic posts and a full wipe of the collection, so no state leaks
from one test to the next.
"""

import logging
import os
from datetime import timezone
from typing import Any, Dict, Iterator, List

import pytest
from faker import Faker
from fastapi.testclient import TestClient

from blog_api.app.core.config import Settings, settings
from blog_api.app.core.db import MEMORY_DATABASE, PostStore
from blog_api.app.main import create_app

logger = logging.getLogger("tests.harness")

SEED_SIZE = 10

fake = Faker()


def generate_post_data() -> Dict[str, Any]:
    """Return a synthetic post document with a past ``created`` date."""
    return {
        "author": {
            "firstName": fake.first_name(),
            "lastName": fake.last_name(),
        },
        "title": fake.word(),
        "content": " ".join(fake.words(nb=fake.random_int(min=3, max=8))),
        "created": fake.past_datetime(start_date="-365d", tzinfo=timezone.utc),
    }


def seed_post_data(store: PostStore, count: int = SEED_SIZE) -> List[Dict[str, Any]]:
    logger.info("seeding blog post data")
    return store.insert_many(generate_post_data() for _ in range(count))


def tear_down_db(store: PostStore) -> None:
    logger.warning("Deleting database")
    store.drop()


@pytest.fixture(scope="session")
def test_settings(tmp_path_factory: pytest.TempPathFactory) -> Settings:
    """Settings pointing at the test store location."""
    database_url = settings.test_database_url
    if database_url != MEMORY_DATABASE and not os.path.isabs(database_url):
        database_url = str(tmp_path_factory.mktemp("store") / database_url)
    return Settings(database_url=database_url, debug=True)


@pytest.fixture(scope="session")
def store(test_settings: Settings) -> Iterator[PostStore]:
    """Open the shared post store for the whole session."""
    with PostStore(test_settings.database_url) as post_store:
        yield post_store


@pytest.fixture(scope="session")
def client(test_settings: Settings, store: PostStore) -> Iterator[TestClient]:
    """Start the application once, serving from the shared store."""
    app = create_app(settings=test_settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def seeded_posts(store: PostStore) -> Iterator[List[Dict[str, Any]]]:
    """Seed posts before each test and wipe the collection afterwards."""
    posts = seed_post_data(store)
    yield posts
    tear_down_db(store)


@pytest.fixture
def post_data() -> Dict[str, Any]:
    return generate_post_data()
