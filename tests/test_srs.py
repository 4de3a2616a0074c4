import logging
from datetime import datetime, timedelta

from repositories.srs_repo import SrsRepository, srs_key
from schemas.word import Word, WordProgress
from services import srs

NOW = datetime(2026, 10, 18, 15, 30)
WORD = Word(native="cat", translation="кіт")


def test_interval_table():
    assert srs.SRS_INTERVALS_DAYS == (1, 3, 7, 14, 30, 60, 90, 180, 365)
    assert srs.MAX_STAGE == 9


def test_first_know_schedules_one_day_out():
    progress = srs.advance(None, NOW)

    assert progress.srs_stage == 1
    assert progress.next_review_date == NOW + timedelta(days=1)


def test_consecutive_knows_climb_and_clamp():
    progress_map = {}
    for n in range(1, 12):
        progress = srs.record_known(progress_map, WORD, NOW)
        assert progress.srs_stage == min(n, 9)

    assert progress_map[WORD.translation].next_review_date == NOW + timedelta(days=365)


def test_dont_know_without_record_creates_nothing():
    progress_map = {}

    assert srs.record_unknown(progress_map, WORD, NOW) is False
    assert progress_map == {}


def test_dont_know_resets_existing_record():
    progress_map = {WORD.translation: WordProgress(srs_stage=5, next_review_date=NOW + timedelta(days=30))}

    assert srs.record_unknown(progress_map, WORD, NOW) is True
    assert progress_map[WORD.translation] == WordProgress(srs_stage=0, next_review_date=NOW)


def test_due_rules_ignore_time_of_day():
    today_midnight = datetime(2026, 10, 18)

    assert srs.is_due(None, NOW)
    assert srs.is_due(WordProgress(srs_stage=1, next_review_date=today_midnight), NOW)
    assert srs.is_due(WordProgress(srs_stage=1, next_review_date=datetime(2026, 10, 18, 23, 59)), NOW)
    assert not srs.is_due(WordProgress(srs_stage=1, next_review_date=today_midnight + timedelta(days=1)), NOW)


def test_due_words_keeps_order_and_filters():
    words = [Word(native=n, translation=n.upper()) for n in ("a", "b", "c")]
    progress_map = {
        "B": WordProgress(srs_stage=2, next_review_date=NOW + timedelta(days=3)),
        "C": WordProgress(srs_stage=1, next_review_date=NOW - timedelta(days=2)),
    }

    assert [w.native for w in srs.due_words(words, progress_map, NOW)] == ["a", "c"]


def test_repository_round_trip(store):
    repo = SrsRepository(store)
    progress_map = {
        "кіт": WordProgress(srs_stage=3, next_review_date=NOW),
        "пес": WordProgress(srs_stage=0, next_review_date=NOW + timedelta(microseconds=12)),
    }

    repo.save("animals", 2, progress_map)

    assert repo.load("animals", 2) == progress_map


def test_repository_uses_pair_array_layout(store):
    SrsRepository(store).save("animals", 0, {"кіт": WordProgress(srs_stage=1, next_review_date=NOW)})

    raw = store.get(srs_key("animals", 0))
    assert raw.startswith('[["кіт",{"srsStage":1,"nextReviewDate":"2026-10-18T15:30:00"')


def test_missing_progress_loads_empty(store):
    assert SrsRepository(store).load("animals", 0) == {}


def test_corrupt_progress_loads_empty_and_logs(store, caplog):
    store.set(srs_key("animals", 0), "{not json")
    store.set(srs_key("animals", 1), '[["кіт", {"srsStage": -1}]]')
    repo = SrsRepository(store)

    with caplog.at_level(logging.WARNING):
        assert repo.load("animals", 0) == {}
        assert repo.load("animals", 1) == {}

    assert "Failed to parse SRS progress" in caplog.text


def test_clear_dictionary_only_touches_its_own_keys(store):
    repo = SrsRepository(store)
    progress = {"x": WordProgress(srs_stage=1, next_review_date=NOW)}
    repo.save("animals", 0, progress)
    repo.save("animals", 4, progress)
    repo.save("animals_extra", 0, progress)
    store.set("unrelated", "1")

    assert repo.clear_dictionary("animals") == 2
    assert sorted(store.keys()) == [srs_key("animals_extra", 0), "unrelated"]


def test_sql_store_round_trip(sql_store):
    repo = SrsRepository(sql_store)
    progress_map = {"кіт": WordProgress(srs_stage=4, next_review_date=NOW)}

    repo.save("animals", 0, progress_map)
    repo.save("animals", 0, {**progress_map, "пес": WordProgress(srs_stage=1, next_review_date=NOW)})

    assert set(repo.load("animals", 0)) == {"кіт", "пес"}
    assert sql_store.keys() == [srs_key("animals", 0)]
    sql_store.remove(srs_key("animals", 0))
    assert sql_store.get(srs_key("animals", 0)) is None
