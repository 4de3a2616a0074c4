from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, conint


class Word(BaseModel):
    model_config = ConfigDict(frozen=True)

    native: str
    translation: str

    def same_pair(self, other: "Word") -> bool:
        return self.native == other.native and self.translation == other.translation


class WordSet(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    words: tuple[Word, ...]
    original_set_index: int = Field(alias="originalSetIndex")


class LoadedDictionary(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    sets: tuple[WordSet, ...]

    def original_indices(self) -> list[int]:
        seen: list[int] = []
        for word_set in self.sets:
            if word_set.original_set_index not in seen:
                seen.append(word_set.original_set_index)
        return seen


class WordProgress(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    srs_stage: conint(ge=0) = Field(alias="srsStage")
    next_review_date: datetime = Field(alias="nextReviewDate")


# Persisted shapes
ProgressPairs = TypeAdapter(list[tuple[str, WordProgress]])
WordList = TypeAdapter(list[Word])
SentencePairs = TypeAdapter(list[tuple[str, str]])
