import random
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import init_db
from repositories.kv_repo import MemoryKeyValueStore, SqlKeyValueStore
from repositories.srs_repo import SrsRepository
from repositories.unknown_words_repo import UnknownWordsRepository
from schemas.word import LoadedDictionary, Word
from services.review_session import ReviewSession
from services.set_parser import parse_word_grids


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeMonotonic:
    def __init__(self):
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def sql_store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield SqlKeyValueStore(factory)
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 18, 12, 0, 0))


@pytest.fixture
def monotonic():
    return FakeMonotonic()


@pytest.fixture
def srs_repo(store):
    return SrsRepository(store)


@pytest.fixture
def unknown_repo(store):
    return UnknownWordsRepository(store)


@pytest.fixture
def words():
    return [
        Word(native="cat", translation="кіт"),
        Word(native="dog", translation="пес"),
        Word(native="house", translation="дім"),
        Word(native="water", translation="вода"),
    ]


@pytest.fixture
def dictionary(words):
    grid = [[w.native, "", w.translation] for w in words]
    grid += [["", "", "", "", "sun", None, "сонце"]]
    return LoadedDictionary(name="animals", sets=tuple(parse_word_grids([grid])))


@pytest.fixture
def session(srs_repo, unknown_repo, clock, monotonic):
    return ReviewSession(
        srs_repo,
        unknown_repo,
        clock=clock,
        rng=random.Random(7),
        monotonic=monotonic,
    )
