"""
Shared pytest fixtures.

Uses a throwaway SQLite database so no Postgres is required for tests.
Every test starts with empty tables.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from alist_audit.db.base import Base, get_db
from alist_audit.main import app
from alist_audit.models import UserSettings, WatchRecordRow

SQLITE_URL = "sqlite:///./test_alist_audit.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


SAMPLE_FEED = """<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0" xmlns:letterboxd="https://letterboxd.com">
<channel>
  <title>Letterboxd - cinefan</title>
  <item>
    <title>Dune: Part Two, 2024 - ★★★★½</title>
    <link>https://letterboxd.com/cinefan/film/dune-part-two/</link>
    <guid isPermaLink="false">letterboxd-review-1</guid>
    <pubDate>Sun, 10 Nov 2024 03:12:00 +1300</pubDate>
    <letterboxd:watchedDate>2024-11-09</letterboxd:watchedDate>
    <letterboxd:filmTitle>Dune: Part Two</letterboxd:filmTitle>
    <letterboxd:memberRating>4.5</letterboxd:memberRating>
  </item>
  <item>
    <title><![CDATA[Tom &amp; Jerry &#8211; The Movie]]></title>
    <link>https://letterboxd.com/cinefan/film/tom-jerry-the-movie/1/</link>
    <pubDate>Mon, 02 Dec 2024 20:00:00 +0000</pubDate>
  </item>
  <item>
    <title>A list, not a film</title>
    <link>https://letterboxd.com/cinefan/list/favourites/</link>
    <pubDate>not a date</pubDate>
  </item>
  <item>
    <letterboxd:watchedDate>2024-12-20</letterboxd:watchedDate>
  </item>
</channel>
</rss>
"""


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    db = TestingSessionLocal()
    try:
        db.query(WatchRecordRow).delete()
        db.query(UserSettings).delete()
        db.commit()
    finally:
        db.close()


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def sample_feed() -> str:
    return SAMPLE_FEED
