import logging
from typing import Any, Sequence

from core.errors import NoDictionaryLoaded, SetNotFound
from repositories.kv_repo import KeyValueStore
from repositories.srs_repo import SrsRepository
from repositories.unknown_words_repo import UnknownWordsRepository
from schemas.session import DictionaryOut, LearnedWordOut, SessionViewOut, SetSummaryOut
from schemas.word import LoadedDictionary, Word
from services.file_readers import read_sentences, read_word_grids
from services.review_session import ReviewSession
from services.sentence_index import SentenceIndex
from services.set_parser import parse_word_grids

logger = logging.getLogger(__name__)


class TrainerService:
    def __init__(self, store: KeyValueStore, **session_options):
        self.store = store
        self.srs_repo = SrsRepository(store)
        self.unknown_repo = UnknownWordsRepository(store)
        self.sentences = SentenceIndex(store)
        self.session = ReviewSession(self.srs_repo, self.unknown_repo, **session_options)

    @property
    def dictionary(self) -> LoadedDictionary | None:
        return self.session.dictionary

    def _require_dictionary(self) -> LoadedDictionary:
        if self.dictionary is None:
            raise NoDictionaryLoaded()
        return self.dictionary

    # ---- ingestion ----
    def load_grids(
        self,
        name: str,
        grids: Sequence[Sequence[Sequence[Any]]],
        sentences: dict[str, str] | None = None,
    ) -> LoadedDictionary:
        """Install a dictionary parsed from ``grids``.

        Parsing happens before any state is touched, so a failed import
        leaves the previous dictionary and session intact.
        """
        word_sets = parse_word_grids(grids)
        dictionary = LoadedDictionary(name=name, sets=tuple(word_sets))

        self.session.load_dictionary(dictionary)
        self.session.select_set(0)
        if sentences:
            self.sentences.merge(sentences)
        logger.info("Imported dictionary '%s' with %d sets", name, len(word_sets))
        return dictionary

    def import_files(
        self,
        name: str,
        words_filename: str,
        words_data: bytes,
        sentences_filename: str | None = None,
        sentences_data: bytes | None = None,
    ) -> LoadedDictionary:
        grids = read_word_grids(words_filename, words_data)
        sentences = None
        if sentences_filename and sentences_data is not None:
            sentences = read_sentences(sentences_filename, sentences_data)
        return self.load_grids(name, grids, sentences)

    def upload_sentences(self, filename: str, data: bytes) -> int:
        self.sentences.merge(read_sentences(filename, data))
        return len(self.sentences)

    def clear_sentences(self) -> None:
        self.sentences.clear()

    # ---- queries ----
    def describe_dictionary(self) -> DictionaryOut:
        dictionary = self._require_dictionary()
        return DictionaryOut(
            name=dictionary.name,
            sets=[
                SetSummaryOut(
                    index=index,
                    name=word_set.name,
                    size=len(word_set.words),
                    original_set_index=word_set.original_set_index,
                )
                for index, word_set in enumerate(dictionary.sets)
            ],
        )

    def set_words(self, index: int) -> list[Word]:
        dictionary = self._require_dictionary()
        if not 0 <= index < len(dictionary.sets):
            raise SetNotFound(f"Set {index} does not exist in '{dictionary.name}'.")
        return list(dictionary.sets[index].words)

    def learned_words(self) -> list[LearnedWordOut]:
        """Words with at least one successful review, across all sets of the dictionary."""
        dictionary = self._require_dictionary()
        learned: dict[str, LearnedWordOut] = {}
        for original_index in dictionary.original_indices():
            progress_map = self.srs_repo.load(dictionary.name, original_index)
            if not progress_map:
                continue
            for word_set in dictionary.sets:
                if word_set.original_set_index != original_index:
                    continue
                for word in word_set.words:
                    progress = progress_map.get(word.translation)
                    if progress and progress.srs_stage > 0:
                        learned[word.translation] = LearnedWordOut(
                            native=word.native,
                            translation=word.translation,
                            srs_stage=progress.srs_stage,
                            next_review_date=progress.next_review_date,
                        )
        return sorted(learned.values(), key=lambda item: item.native.lower())

    def view(self) -> SessionViewOut:
        session = self.session
        with session.lock:
            word_set = session.current_set
            word = session.current_word
            variant = session.finish_variant
            return SessionViewOut(
                dictionary_name=self.dictionary.name if self.dictionary else None,
                selected_set_index=session.selected_set_index,
                set_name=word_set.name if word_set else None,
                set_size=len(word_set.words) if word_set else 0,
                is_training=session.is_training,
                current_word=word,
                is_flipped=session.is_flipped,
                example_sentence=self.sentences.lookup(word),
                position=session.current_word_index + 1 if word else 0,
                session_total=len(session.session_words),
                unknown_count=len(session.unknown_words),
                can_undo=session.can_undo,
                can_shuffle=session.can_shuffle,
                is_processing=session.is_processing,
                finish_variant=variant.value if variant else None,
            )
