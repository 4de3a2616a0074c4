"""Turn loosely structured spreadsheet grids into size-bounded word sets.

Each worksheet is scanned in column groups four cells wide: native word,
a spacer column, the translation, and another spacer. A row contributes a
word only when both the native and the translation cells hold text.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from core.errors import EmptySource, NoValidWordsFound
from schemas.word import Word, WordSet

logger = logging.getLogger(__name__)

MAX_WORDS_PER_BLOCK = 30
GROUP_STRIDE = 4
GROUP_WIDTH = 3

Grid = Sequence[Sequence[Any]]


def _cell_text(row: Sequence[Any], col: int) -> str:
    if col >= len(row):
        return ""
    value = row[col]
    # Falsy cells (None, "", 0, False) count as empty.
    if not value:
        return ""
    return str(value).strip()


def _group_words(grid: Grid, col: int) -> list[Word]:
    words: list[Word] = []
    for row in grid:
        native = _cell_text(row, col)
        translation = _cell_text(row, col + 2)
        if native and translation:
            words.append(Word(native=native, translation=translation))
    return words


def _chunk(words: list[Word], original_index: int) -> list[WordSet]:
    number = original_index + 1
    if len(words) <= MAX_WORDS_PER_BLOCK:
        return [WordSet(name=f"Set {number}", words=tuple(words), original_set_index=original_index)]

    chunks = []
    for start in range(0, len(words), MAX_WORDS_PER_BLOCK):
        chunk = words[start:start + MAX_WORDS_PER_BLOCK]
        chunks.append(
            WordSet(
                name=f"Set {number} ({start + 1}-{start + len(chunk)})",
                words=tuple(chunk),
                original_set_index=original_index,
            )
        )
    return chunks


def parse_word_grids(grids: Iterable[Grid]) -> list[WordSet]:
    """Parse every grid of one import into word sets.

    The original-set counter is shared by all grids, so indices stay
    contiguous across worksheets. Raises ``EmptySource`` when no grid has a
    single row and ``NoValidWordsFound`` when rows exist but no group yields
    a word.
    """
    all_sets: list[WordSet] = []
    original_counter = 0
    saw_rows = False

    for grid in grids:
        if not grid:
            continue
        saw_rows = True
        max_cols = max(len(row) for row in grid)

        for col in range(0, max_cols - GROUP_WIDTH + 1, GROUP_STRIDE):
            words = _group_words(grid, col)
            if not words:
                continue
            all_sets.extend(_chunk(words, original_counter))
            original_counter += 1

    if not saw_rows:
        raise EmptySource()
    if not all_sets:
        raise NoValidWordsFound()

    logger.debug("Parsed %d word groups into %d sets", original_counter, len(all_sets))
    return all_sets
