from fastapi import Request

from services.trainer_service import TrainerService


def get_trainer(request: Request) -> TrainerService:
    return request.app.state.trainer
