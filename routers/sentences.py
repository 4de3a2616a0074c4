from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from core.dependencies import get_trainer
from schemas.session import SentenceStatsOut
from services.trainer_service import TrainerService

router = APIRouter(prefix="/sentences", tags=["Sentences"])


@router.post("/upload", response_model=SentenceStatsOut)
async def upload_sentences(
    file: UploadFile = File(...),
    trainer: TrainerService = Depends(get_trainer),
):
    raw_bytes = await file.read()
    if not raw_bytes:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    count = trainer.upload_sentences(file.filename or "", raw_bytes)
    return {"count": count}


@router.get("/stats", response_model=SentenceStatsOut)
async def sentence_stats(trainer: TrainerService = Depends(get_trainer)):
    return {"count": len(trainer.sentences)}


@router.delete("", status_code=204)
async def clear_sentences(trainer: TrainerService = Depends(get_trainer)):
    trainer.clear_sentences()
    return Response(status_code=204)
