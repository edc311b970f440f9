from typing import Annotated

from fastapi import Header, HTTPException, Request

from expense_tracker.integration.storage import TransactionStore
from expense_tracker.services.chatbot import ChatbotPipeline
from expense_tracker.services.prediction import PredictionGenerator


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    # Identity is asserted by the authenticating proxy in front of the service.
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()


def get_store(request: Request) -> TransactionStore:
    store = getattr(request.app.state, "store", None)
    if not store:
        raise HTTPException(status_code=500, detail="Store not initialized")
    return store


def get_pipeline(request: Request) -> ChatbotPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if not pipeline:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return pipeline


def get_predictor(request: Request) -> PredictionGenerator:
    predictor = getattr(request.app.state, "predictor", None)
    if not predictor:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return predictor
