"""Fixed-interval spaced repetition schedule."""
from datetime import datetime, timedelta
from typing import Iterable

from schemas.word import Word, WordProgress

# Stage 1 is reviewed after 1 day, stage 2 after 3 days, etc.
SRS_INTERVALS_DAYS = (1, 3, 7, 14, 30, 60, 90, 180, 365)
MAX_STAGE = len(SRS_INTERVALS_DAYS)


def advance(progress: WordProgress | None, now: datetime) -> WordProgress:
    previous_stage = progress.srs_stage if progress else 0
    stage = min(previous_stage + 1, MAX_STAGE)
    return WordProgress(
        srs_stage=stage,
        next_review_date=now + timedelta(days=SRS_INTERVALS_DAYS[stage - 1]),
    )


def reset(now: datetime) -> WordProgress:
    return WordProgress(srs_stage=0, next_review_date=now)


def record_known(progress_map: dict[str, WordProgress], word: Word, now: datetime) -> WordProgress:
    updated = advance(progress_map.get(word.translation), now)
    progress_map[word.translation] = updated
    return updated


def record_unknown(progress_map: dict[str, WordProgress], word: Word, now: datetime) -> bool:
    """Reset an existing record; words never reviewed get no record."""
    if word.translation not in progress_map:
        return False
    progress_map[word.translation] = reset(now)
    return True


def is_due(progress: WordProgress | None, now: datetime) -> bool:
    if progress is None:
        return True
    return progress.next_review_date.date() <= now.date()


def due_words(words: Iterable[Word], progress_map: dict[str, WordProgress], now: datetime) -> list[Word]:
    return [word for word in words if is_due(progress_map.get(word.translation), now)]
