from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from core.dependencies import get_trainer
from schemas.session import DictionaryOut, LearnedWordOut, ResetProgressIn, SessionViewOut
from schemas.word import Word
from services.trainer_service import TrainerService

router = APIRouter(prefix="/dictionary", tags=["Dictionary"])


@router.post(
    "/import",
    response_model=DictionaryOut,
    status_code=201,
)
async def import_dictionary(
    name: str = Form(...),
    words_file: UploadFile = File(...),
    sentences_file: UploadFile | None = File(None),
    trainer: TrainerService = Depends(get_trainer),
):
    name = name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Dictionary name is required.")

    words_data = await words_file.read()
    if not words_data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    sentences_name = None
    sentences_data = None
    if sentences_file is not None and sentences_file.filename:
        sentences_name = sentences_file.filename
        sentences_data = await sentences_file.read()

    trainer.import_files(
        name,
        words_file.filename or "",
        words_data,
        sentences_filename=sentences_name,
        sentences_data=sentences_data,
    )
    return trainer.describe_dictionary()


@router.get(
    "",
    response_model=DictionaryOut,
)
async def get_dictionary(trainer: TrainerService = Depends(get_trainer)):
    return trainer.describe_dictionary()


@router.get(
    "/sets/{set_index}/words",
    response_model=list[Word],
)
async def list_set_words(set_index: int, trainer: TrainerService = Depends(get_trainer)):
    return trainer.set_words(set_index)


@router.get(
    "/learned",
    response_model=list[LearnedWordOut],
)
async def list_learned_words(trainer: TrainerService = Depends(get_trainer)):
    return trainer.learned_words()


@router.post(
    "/reset-progress",
    response_model=SessionViewOut,
)
async def reset_progress(data: ResetProgressIn, trainer: TrainerService = Depends(get_trainer)):
    if not data.confirm:
        raise HTTPException(
            status_code=400,
            detail="Resetting all learning progress cannot be undone; send confirm=true to proceed.",
        )
    trainer.session.reset_all_progress()
    return trainer.view()
