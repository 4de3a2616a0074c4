from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from schemas.word import Word


class SetSummaryOut(BaseModel):
    index: int
    name: str
    size: int
    original_set_index: int


class DictionaryOut(BaseModel):
    name: str
    sets: list[SetSummaryOut]


class LearnedWordOut(BaseModel):
    native: str
    translation: str
    srs_stage: int
    next_review_date: datetime


class SessionViewOut(BaseModel):
    dictionary_name: str | None = None
    selected_set_index: int | None = None
    set_name: str | None = None
    set_size: int = 0
    is_training: bool = False
    current_word: Word | None = None
    is_flipped: bool = False
    example_sentence: str | None = None
    position: int = 0
    session_total: int = 0
    unknown_count: int = 0
    can_undo: bool = False
    can_shuffle: bool = False
    is_processing: bool = False
    finish_variant: Literal["finished", "training_remaining", "training_complete"] | None = None


class ResetProgressIn(BaseModel):
    confirm: bool = False


class SentenceStatsOut(BaseModel):
    count: int
