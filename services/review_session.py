"""Study-pass state machine for one selected word set.

A session moves from idle (no set) to active (cursor inside the queue) to
finished (cursor past the end), and back to active through shuffle or
training, or to idle through ``return_to_selection``.

Decisions apply their logical effect immediately. The processing flag is then
held for ``settle_delay`` seconds (the card-flip animation window of the
front end) so that a second click cannot act on a stale card; ``settle``
releases it early.
"""
from __future__ import annotations

import logging
import random
import threading
import time
from datetime import datetime
from enum import Enum
from typing import Callable

from core.errors import NoDictionaryLoaded, SetNotFound
from repositories.srs_repo import SrsRepository
from repositories.unknown_words_repo import UnknownWordsRepository
from schemas.word import LoadedDictionary, Word, WordProgress, WordSet
from services import srs

logger = logging.getLogger(__name__)


class FinishVariant(str, Enum):
    FINISHED = "finished"
    TRAINING_REMAINING = "training_remaining"
    TRAINING_COMPLETE = "training_complete"


class ReviewSession:
    def __init__(
        self,
        srs_repo: SrsRepository,
        unknown_repo: UnknownWordsRepository,
        *,
        settle_delay: float = 0.0,
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.srs_repo = srs_repo
        self.unknown_repo = unknown_repo
        self.settle_delay = settle_delay
        self.clock = clock
        self.rng = rng or random.Random()
        self.monotonic = monotonic
        self.lock = threading.RLock()
        self.dictionary: LoadedDictionary | None = None
        self.reset()

    # ---- state ----
    def reset(self) -> None:
        with self.lock:
            self.dictionary = None
            self.selected_set_index: int | None = None
            self.session_words: list[Word] = []
            self.current_word_index = 0
            self.history: list[int] = []
            self.is_training = False
            self.is_set_finished = False
            self.is_flipped = False
            self.srs_progress: dict[str, WordProgress] = {}
            self.unknown_words: list[Word] = []
            self._busy_until = 0.0

    def load_dictionary(self, dictionary: LoadedDictionary) -> None:
        with self.lock:
            self.reset()
            self.dictionary = dictionary

    @property
    def current_set(self) -> WordSet | None:
        if self.dictionary is None or self.selected_set_index is None:
            return None
        return self.dictionary.sets[self.selected_set_index]

    @property
    def current_word(self) -> Word | None:
        if self.current_set is None or self.current_word_index >= len(self.session_words):
            return None
        return self.session_words[self.current_word_index]

    @property
    def is_processing(self) -> bool:
        return self.monotonic() < self._busy_until

    @property
    def can_undo(self) -> bool:
        return bool(self.history) and not self.is_processing

    @property
    def can_shuffle(self) -> bool:
        return len(self.session_words) >= 2

    @property
    def finish_variant(self) -> FinishVariant | None:
        if not self.is_set_finished:
            return None
        if not self.is_training:
            return FinishVariant.FINISHED
        if self.unknown_words:
            return FinishVariant.TRAINING_REMAINING
        return FinishVariant.TRAINING_COMPLETE

    def _key(self) -> tuple[str, int]:
        return self.dictionary.name, self.current_set.original_set_index

    def _hold(self) -> None:
        self._busy_until = self.monotonic() + self.settle_delay

    def settle(self) -> None:
        self._busy_until = 0.0

    def _check_finished(self) -> None:
        self.is_set_finished = bool(self.session_words) and self.current_word_index >= len(self.session_words)
        if self.is_training and not self.unknown_words:
            # Training stays complete once the queue has been emptied.
            self.is_set_finished = True

    def _shuffled(self, words) -> list[Word]:
        shuffled = list(words)
        self.rng.shuffle(shuffled)
        return shuffled

    # ---- entry ----
    def select_set(self, index: int) -> None:
        with self.lock:
            if self.dictionary is None:
                raise NoDictionaryLoaded()
            if not 0 <= index < len(self.dictionary.sets):
                raise SetNotFound(f"Set {index} does not exist in '{self.dictionary.name}'.")

            word_set = self.dictionary.sets[index]
            progress = self.srs_repo.load(self.dictionary.name, word_set.original_set_index)
            due = srs.due_words(word_set.words, progress, self.clock())

            self.selected_set_index = index
            self.session_words = self._shuffled(due)
            self.current_word_index = 0
            self.history = []
            self.is_flipped = False
            self.is_set_finished = False
            self.is_training = False
            self.srs_progress = progress
            self.unknown_words = self.unknown_repo.load(self.dictionary.name, word_set.original_set_index)
            logger.debug("Selected %s: %d of %d words due", word_set.name, len(due), len(word_set.words))

    def start_training(self) -> bool:
        with self.lock:
            if self.current_set is None:
                return False
            words = self.unknown_repo.load(*self._key())
            self.unknown_words = words
            self.session_words = self._shuffled(words)
            self.is_training = True
            self.current_word_index = 0
            self.is_set_finished = False
            self.is_flipped = False
            self.history = []
            return True

    def return_to_selection(self) -> None:
        with self.lock:
            self.selected_set_index = None
            self.session_words = []
            self.history = []
            self.is_set_finished = False
            self.current_word_index = 0
            self.is_training = False
            self.is_flipped = False

    # ---- decisions ----
    def know(self) -> bool:
        with self.lock:
            word = self.current_word
            if word is None or self.is_processing:
                logger.debug("Ignoring 'know': no current word or decision in flight")
                return False
            self._hold()
            name, original_index = self._key()

            srs.record_known(self.srs_progress, word, self.clock())
            self.srs_repo.save(name, original_index, self.srs_progress)

            self.history.append(self.current_word_index)
            self.is_flipped = False

            if self.is_training:
                self.unknown_words = self.unknown_repo.remove(name, original_index, word, current=self.unknown_words)
                # The queue shrinks under the cursor, so the next word slides into place.
                self.session_words = [w for w in self.session_words if not w.same_pair(word)]
            else:
                self.current_word_index += 1
            self._check_finished()
            return True

    def dont_know(self) -> bool:
        with self.lock:
            word = self.current_word
            if word is None or self.is_processing:
                logger.debug("Ignoring 'don't know': no current word or decision in flight")
                return False
            self._hold()
            name, original_index = self._key()

            if srs.record_unknown(self.srs_progress, word, self.clock()):
                self.srs_repo.save(name, original_index, self.srs_progress)

            self.history.append(self.current_word_index)
            self.is_flipped = False

            if not self.is_training:
                self.unknown_words = self.unknown_repo.add(name, original_index, word, current=self.unknown_words)
            self.current_word_index += 1
            self._check_finished()
            return True

    def previous(self) -> bool:
        """Rewind the cursor only; progress and unknown words stay as recorded."""
        with self.lock:
            if not self.history or self.is_processing:
                return False
            self.current_word_index = self.history.pop()
            self.is_flipped = False
            self._check_finished()
            return True

    def shuffle(self) -> bool:
        with self.lock:
            if len(self.session_words) < 2:
                return False
            self.session_words = self._shuffled(self.session_words)
            self.current_word_index = 0
            self.is_flipped = False
            self.is_set_finished = False
            self.history = []
            return True

    def flip(self) -> bool:
        with self.lock:
            if self.current_word is None:
                return False
            self.is_flipped = not self.is_flipped
            return True

    def reset_all_progress(self) -> None:
        """Wipe every SRS record and unknown word of the loaded dictionary. Irreversible."""
        with self.lock:
            if self.dictionary is None:
                raise NoDictionaryLoaded()
            name = self.dictionary.name
            removed = self.srs_repo.clear_dictionary(name) + self.unknown_repo.clear_dictionary(name)
            self.srs_progress = {}
            self.unknown_words = []
            logger.info("Reset all progress for '%s' (%d keys removed)", name, removed)

            word_set = self.current_set
            if word_set is not None:
                self.session_words = self._shuffled(word_set.words)
                self.current_word_index = 0
                self.is_flipped = False
                self.is_set_finished = False
                self.is_training = False
                self.history = []
