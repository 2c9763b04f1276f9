"""FastAPI dependencies resolving the collaborators built by create_app"""

from fastapi import Depends, Request

from calltriage.services.analyzer import SentimentAnalyzer
from calltriage.services.openmic import OpenMicClient
from calltriage.services.postcall import PostCallPipeline
from calltriage.store.base import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_analyzer(request: Request) -> SentimentAnalyzer:
    return request.app.state.analyzer


def get_openmic(request: Request) -> OpenMicClient:
    return request.app.state.openmic


def get_pipeline(
    store: RecordStore = Depends(get_store),
    analyzer: SentimentAnalyzer = Depends(get_analyzer),
) -> PostCallPipeline:
    return PostCallPipeline(store=store, analyzer=analyzer)
