import logging

from pydantic import ValidationError

from repositories.kv_repo import KeyValueStore
from repositories.srs_repo import dictionary_keys
from schemas.word import Word, WordList

logger = logging.getLogger(__name__)

UNKNOWN_PREFIX = "unknown_words_"


def unknown_words_key(dictionary_name: str, original_set_index: int) -> str:
    return f"{UNKNOWN_PREFIX}{dictionary_name}_{original_set_index}"


class UnknownWordsRepository:
    """Per-set list of words marked "don't know", persisted whole on every change."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, dictionary_name: str, original_set_index: int) -> list[Word]:
        if not dictionary_name:
            return []
        raw = self.store.get(unknown_words_key(dictionary_name, original_set_index))
        if raw is None:
            return []
        try:
            return WordList.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Failed to parse unknown words for %s/%s, starting empty: %s",
                dictionary_name,
                original_set_index,
                exc,
            )
            return []

    def replace(self, dictionary_name: str, original_set_index: int, words: list[Word]) -> None:
        if not dictionary_name:
            return
        self.store.set(
            unknown_words_key(dictionary_name, original_set_index),
            WordList.dump_json(list(words)).decode("utf-8"),
        )

    def add(self, dictionary_name: str, original_set_index: int, word: Word, *, current: list[Word] | None = None) -> list[Word]:
        words = list(current) if current is not None else self.load(dictionary_name, original_set_index)
        if not any(existing.same_pair(word) for existing in words):
            words.append(word)
        self.replace(dictionary_name, original_set_index, words)
        return words

    def remove(self, dictionary_name: str, original_set_index: int, word: Word, *, current: list[Word] | None = None) -> list[Word]:
        words = current if current is not None else self.load(dictionary_name, original_set_index)
        remaining = [existing for existing in words if not existing.same_pair(word)]
        self.replace(dictionary_name, original_set_index, remaining)
        return remaining

    def clear_dictionary(self, dictionary_name: str) -> int:
        keys = dictionary_keys(self.store, UNKNOWN_PREFIX, dictionary_name)
        for key in keys:
            self.store.remove(key)
        return len(keys)
