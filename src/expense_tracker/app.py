import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from expense_tracker.api.routes import categories, chatbot, statistics
from expense_tracker.core import settings
from expense_tracker.integration.llm import create_llm_client
from expense_tracker.integration.storage import TransactionStore
from expense_tracker.logger import get_logger, setup_logging
from expense_tracker.manager import ParserService
from expense_tracker.services.chatbot import ChatbotPipeline
from expense_tracker.services.prediction import PredictionGenerator

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        llm = create_llm_client()
        store = TransactionStore(data_path=os.path.join(settings.DATA_DIR, settings.STORE_FILENAME))
        service = ParserService(llm=llm)

        app.state.store = store
        app.state.service = service
        app.state.pipeline = ChatbotPipeline(service=service, store=store)
        app.state.predictor = PredictionGenerator(llm=llm)

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Expense Tracker", lifespan=lifespan)

    app.include_router(chatbot.router)
    app.include_router(statistics.router)
    app.include_router(categories.router)

    return app


app = create_app()
