import logging

from pydantic import ValidationError

from repositories.kv_repo import KeyValueStore
from schemas.word import ProgressPairs, WordProgress

logger = logging.getLogger(__name__)

SRS_PREFIX = "srs_progress_"


def srs_key(dictionary_name: str, original_set_index: int) -> str:
    return f"{SRS_PREFIX}{dictionary_name}_{original_set_index}"


def dictionary_keys(store: KeyValueStore, prefix: str, dictionary_name: str) -> list[str]:
    """Keys written for ``dictionary_name`` under ``prefix``, one per original set."""
    head = f"{prefix}{dictionary_name}_"
    return [key for key in store.keys() if key.startswith(head) and key[len(head):].isdigit()]


class SrsRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, dictionary_name: str, original_set_index: int) -> dict[str, WordProgress]:
        if not dictionary_name:
            return {}
        raw = self.store.get(srs_key(dictionary_name, original_set_index))
        if raw is None:
            return {}
        try:
            return dict(ProgressPairs.validate_json(raw))
        except ValidationError as exc:
            logger.warning(
                "Failed to parse SRS progress for %s/%s, starting empty: %s",
                dictionary_name,
                original_set_index,
                exc,
            )
            return {}

    def save(self, dictionary_name: str, original_set_index: int, progress: dict[str, WordProgress]) -> None:
        if not dictionary_name:
            return
        payload = ProgressPairs.dump_json(list(progress.items()), by_alias=True).decode("utf-8")
        self.store.set(srs_key(dictionary_name, original_set_index), payload)

    def clear_dictionary(self, dictionary_name: str) -> int:
        keys = dictionary_keys(self.store, SRS_PREFIX, dictionary_name)
        for key in keys:
            self.store.remove(key)
        return len(keys)
