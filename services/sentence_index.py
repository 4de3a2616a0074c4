from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from repositories.kv_repo import KeyValueStore
from schemas.word import SentencePairs, Word

logger = logging.getLogger(__name__)

SENTENCES_KEY = "global_sentence_dictionary"


def _normalize_key(headword: str) -> str:
    return headword.strip().lower()


def sentences_from_mapping(data: Mapping[str, Any]) -> dict[str, str]:
    """Flat ``headword -> sentence`` object; non-string values are ignored."""
    sentences: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, str):
            sentences[_normalize_key(str(key))] = value
    return sentences


def sentences_from_grid(grid: Sequence[Sequence[Any]]) -> dict[str, str]:
    """Two-column grid: headword in column 0, sentence in column 1."""
    sentences: dict[str, str] = {}
    for row in grid:
        if not row or len(row) < 2 or not row[0] or not row[1]:
            continue
        sentences[_normalize_key(str(row[0]))] = str(row[1]).strip()
    return sentences


class SentenceIndex:
    def __init__(self, store: KeyValueStore):
        self.store = store
        self._sentences: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        raw = self.store.get(SENTENCES_KEY)
        if raw is None:
            return {}
        try:
            return dict(SentencePairs.validate_json(raw))
        except ValidationError as exc:
            logger.warning("Discarding malformed sentence index: %s", exc)
            return {}

    def _persist(self) -> None:
        self.store.set(SENTENCES_KEY, SentencePairs.dump_json(list(self._sentences.items())).decode("utf-8"))

    @property
    def is_persisted(self) -> bool:
        return self.store.get(SENTENCES_KEY) is not None

    def merge(self, sentences: Mapping[str, str]) -> None:
        self._sentences = {**self._sentences, **sentences}
        self._persist()

    def clear(self) -> None:
        self._sentences = {}
        self.store.remove(SENTENCES_KEY)

    def lookup(self, word: Word | None) -> str | None:
        if word is None:
            return None
        return self._sentences.get(_normalize_key(word.translation))

    def preload_default(self, path: str | Path | None) -> bool:
        """Seed the index from a bundled JSON file when nothing is persisted yet."""
        if not path or self.is_persisted:
            return False
        path = Path(path)
        if not path.exists():
            logger.warning("Default sentences file %s not found.", path)
            return False
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Could not pre-load sentences from %s: %s", path, exc)
            return False
        if not isinstance(data, dict):
            logger.error("Default sentences file %s is not a JSON object.", path)
            return False
        sentences = sentences_from_mapping(data)
        if not sentences:
            return False
        self._sentences = sentences
        self._persist()
        return True

    def __len__(self) -> int:
        return len(self._sentences)

    def __contains__(self, headword: str) -> bool:
        return _normalize_key(headword) in self._sentences
