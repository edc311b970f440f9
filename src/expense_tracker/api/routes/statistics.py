import asyncio
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from expense_tracker.api.dependencies import get_predictor, get_store, get_user_id
from expense_tracker.domain.dates import month_bounds
from expense_tracker.integration.storage import TransactionStore
from expense_tracker.logger import get_logger
from expense_tracker.models import PredictionReport, StatisticsReport
from expense_tracker.services.prediction import PredictionGenerator
from expense_tracker.services.statistics import build_statistics

logger = get_logger(__name__)

router = APIRouter()


@router.get("/api/statistics", response_model=StatisticsReport)
async def get_statistics(
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[TransactionStore, Depends(get_store)],
    year: Annotated[int | None, Query(ge=1970, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
) -> StatisticsReport:
    year = year or date.today().year
    start, end = month_bounds(year, month)

    user_ids = await asyncio.to_thread(store.family_user_ids, user_id)
    transactions = await asyncio.to_thread(store.list_transactions, user_ids, start, end)
    logger.debug("[STATS] %d transactions for %s (%s..%s)", len(transactions), user_ids, start, end)
    return build_statistics(transactions, year, month)


@router.get("/api/statistics/predict", response_model=PredictionReport)
async def predict(
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[TransactionStore, Depends(get_store)],
    predictor: Annotated[PredictionGenerator, Depends(get_predictor)],
) -> PredictionReport:
    today = date.today()
    user_ids = await asyncio.to_thread(store.family_user_ids, user_id)
    transactions = await asyncio.to_thread(
        store.list_transactions,
        user_ids,
        predictor.window_start(today),
        today,
    )
    return await asyncio.to_thread(predictor.predict, transactions, today)
