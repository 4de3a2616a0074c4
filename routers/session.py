from fastapi import APIRouter, Depends

from core.dependencies import get_trainer
from schemas.session import SessionViewOut
from services.trainer_service import TrainerService

router = APIRouter(prefix="/session", tags=["Session"])


@router.get("", response_model=SessionViewOut)
def get_session(trainer: TrainerService = Depends(get_trainer)):
    return trainer.view()


@router.post("/select/{set_index}", response_model=SessionViewOut)
def select_set(set_index: int, trainer: TrainerService = Depends(get_trainer)):
    trainer.session.select_set(set_index)
    return trainer.view()


@router.post("/training", response_model=SessionViewOut)
def start_training(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.start_training()
    return trainer.view()


@router.post("/know", response_model=SessionViewOut)
def know(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.know()
    return trainer.view()


@router.post("/dont-know", response_model=SessionViewOut)
def dont_know(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.dont_know()
    return trainer.view()


@router.post("/previous", response_model=SessionViewOut)
def previous(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.previous()
    return trainer.view()


@router.post("/shuffle", response_model=SessionViewOut)
def shuffle(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.shuffle()
    return trainer.view()


@router.post("/flip", response_model=SessionViewOut)
def flip(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.flip()
    return trainer.view()


@router.post("/settle", response_model=SessionViewOut)
def settle(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.settle()
    return trainer.view()


@router.post("/return", response_model=SessionViewOut)
def return_to_selection(trainer: TrainerService = Depends(get_trainer)):
    trainer.session.return_to_selection()
    return trainer.view()
