import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import get_store, get_user_id
from expense_tracker.integration.storage import TransactionStore
from expense_tracker.models import Category

router = APIRouter()


@router.get("/api/categories", response_model=list[Category])
async def get_categories(
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[TransactionStore, Depends(get_store)],
) -> list[Category]:
    return await asyncio.to_thread(store.list_categories, user_id)
