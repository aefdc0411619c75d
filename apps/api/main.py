from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator, List, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from notecraft.core.demo import DEMO_CHAT_MESSAGES, DEMO_DRAFT, DEMO_INSIGHTS
from notecraft.core.exceptions import ValidationError
from notecraft.core.markdown import draft_to_markdown
from notecraft.core.models import (
    ChatMessage,
    Draft,
    DraftFull,
    DraftMeta,
    GeneratedImage,
    Insights,
    Source,
)
from notecraft.core.settings import get_settings
from notecraft.core.snippets import image_html
from notecraft.core.sources import link_source, pdf_source, source_from_clipboard, text_source
from notecraft.llm import LLMClient, LLMClientError, ReplicateLLMClient
from notecraft.logging import setup_logging
from notecraft.storage import (
    AsyncioScheduler,
    DraftIndexStore,
    LocalDraftStore,
    StorageBackend,
    build_storage,
)
from notecraft.usecases import ChatWithSources, GenerateImage, GenerateInsights


# ---------------------------------------------------------------------------
# Dependency factories


@lru_cache
def get_storage() -> StorageBackend:
    return build_storage(get_settings())


@lru_cache
def get_draft_store() -> LocalDraftStore:
    settings = get_settings()
    return LocalDraftStore(
        get_storage(),
        AsyncioScheduler(),
        demo_draft=DEMO_DRAFT,
        debounce_ms=settings.save_debounce_ms,
    )


@lru_cache
def get_index_store() -> DraftIndexStore:
    return DraftIndexStore(get_storage(), excerpt_length=get_settings().excerpt_length)


def get_llm_client() -> LLMClient:
    return ReplicateLLMClient()


def insights_uc(llm: LLMClient = Depends(get_llm_client)) -> GenerateInsights:
    return GenerateInsights(llm)


def chat_uc(llm: LLMClient = Depends(get_llm_client)) -> ChatWithSources:
    return ChatWithSources(llm)


def image_uc(llm: LLMClient = Depends(get_llm_client)) -> GenerateImage:
    return GenerateImage(llm)


# ---------------------------------------------------------------------------
# Pydantic schemas


class TitleRequest(BaseModel):
    title: str


class ContentRequest(BaseModel):
    content: str


class InsertRequest(BaseModel):
    html: str


class SourceRequest(BaseModel):
    type: Literal["link", "text", "pdf"]
    title: Optional[str] = None
    url: Optional[str] = None
    content: Optional[str] = None


class PasteRequest(BaseModel):
    text: str = Field(..., min_length=1)


class DraftUpdateRequest(BaseModel):
    title: str = ""
    content: str = ""
    sources: List[Source] = Field(default_factory=list)


class DraftState(BaseModel):
    draft: Draft
    is_demo_mode: bool


class CreatedDraft(BaseModel):
    id: str


class InsightsRequest(BaseModel):
    sources: List[Source]


class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    sources: List[Source] = Field(default_factory=list)


class ImageRequest(BaseModel):
    prompt: str


class DemoData(BaseModel):
    insights: Insights
    messages: List[ChatMessage]


def _build_source(req: SourceRequest) -> Source:
    if req.type == "link":
        if not req.url:
            raise ValidationError("Link sources need a url")
        return link_source(req.url, req.title)
    if req.type == "pdf":
        return pdf_source(req.title or "document.pdf", req.content or "")
    return text_source(req.content or "", req.title)


def _state(store: LocalDraftStore) -> DraftState:
    return DraftState(draft=store.draft, is_demo_mode=store.is_demo_mode)


# ---------------------------------------------------------------------------
# FastAPI application


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    yield
    # Do not lose a write still waiting for its debounce window
    if get_draft_store.cache_info().currsize:
        get_draft_store().flush()


app = FastAPI(title="NoteCraft API", lifespan=lifespan)


# Single active draft ----------------------------------------------------------
# Handlers are async so the debounce timer lands on the running event loop.


@app.get("/draft")
async def read_draft(
    demo: Optional[str] = Query(None),
    store: LocalDraftStore = Depends(get_draft_store),
) -> DraftState:
    if not store.is_loaded:
        store.demo_requested = demo is not None
        store.load()
    return _state(store)


@app.put("/draft/title")
async def update_title(req: TitleRequest, store: LocalDraftStore = Depends(get_draft_store)) -> DraftState:
    store.update_title(req.title)
    return _state(store)


@app.put("/draft/content")
async def update_content(
    req: ContentRequest, store: LocalDraftStore = Depends(get_draft_store)
) -> DraftState:
    store.update_content(req.content)
    return _state(store)


@app.post("/draft/insert")
async def insert_content(req: InsertRequest, store: LocalDraftStore = Depends(get_draft_store)) -> DraftState:
    store.insert_content(req.html)
    return _state(store)


@app.post("/draft/sources", status_code=status.HTTP_201_CREATED)
async def add_source(req: SourceRequest, store: LocalDraftStore = Depends(get_draft_store)) -> DraftState:
    try:
        source = _build_source(req)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    store.add_source(source)
    return _state(store)


@app.post("/draft/sources/paste", status_code=status.HTTP_201_CREATED)
async def paste_source(req: PasteRequest, store: LocalDraftStore = Depends(get_draft_store)) -> DraftState:
    store.add_source(source_from_clipboard(req.text))
    return _state(store)


@app.delete("/draft/sources/{source_id}")
async def remove_source(source_id: str, store: LocalDraftStore = Depends(get_draft_store)) -> DraftState:
    store.remove_source(source_id)
    return _state(store)


@app.post("/draft/dismiss-demo")
async def dismiss_demo(store: LocalDraftStore = Depends(get_draft_store)) -> DraftState:
    store.dismiss_demo()
    return _state(store)


@app.delete("/draft")
async def clear_draft(store: LocalDraftStore = Depends(get_draft_store)) -> DraftState:
    store.clear_draft()
    return _state(store)


@app.get("/draft/export", response_class=PlainTextResponse)
async def export_draft(store: LocalDraftStore = Depends(get_draft_store)) -> PlainTextResponse:
    draft = store.draft
    return PlainTextResponse(draft_to_markdown(draft.title, draft.content), media_type="text/markdown")


@app.get("/demo")
def demo_data() -> DemoData:
    return DemoData(insights=DEMO_INSIGHTS, messages=DEMO_CHAT_MESSAGES)


# Draft collection -------------------------------------------------------------


@app.get("/drafts")
def list_drafts(store: DraftIndexStore = Depends(get_index_store)) -> List[DraftMeta]:
    return store.list_drafts()


@app.post("/drafts", status_code=status.HTTP_201_CREATED)
def create_draft(store: DraftIndexStore = Depends(get_index_store)) -> CreatedDraft:
    return CreatedDraft(id=store.create_draft())


@app.get("/drafts/{draft_id}")
def get_draft(draft_id: str, store: DraftIndexStore = Depends(get_index_store)) -> DraftFull:
    draft = store.get_draft(draft_id)
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft not found")
    return draft


@app.put("/drafts/{draft_id}")
def save_draft(
    draft_id: str,
    req: DraftUpdateRequest,
    store: DraftIndexStore = Depends(get_index_store),
) -> DraftFull:
    draft = DraftFull(id=draft_id, title=req.title, content=req.content, sources=req.sources)
    return store.save_draft(draft)


@app.delete("/drafts/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_draft(draft_id: str, store: DraftIndexStore = Depends(get_index_store)) -> Response:
    store.delete_draft(draft_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/drafts/{draft_id}/export", response_class=PlainTextResponse)
def export_saved_draft(draft_id: str, store: DraftIndexStore = Depends(get_index_store)) -> PlainTextResponse:
    draft = store.get_draft(draft_id)
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft not found")
    return PlainTextResponse(draft_to_markdown(draft.title, draft.content), media_type="text/markdown")


# Assistant --------------------------------------------------------------------


@app.post("/insights")
def generate_insights(req: InsightsRequest, uc: GenerateInsights = Depends(insights_uc)) -> Insights:
    try:
        return uc(req.sources)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except LLMClientError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@app.post("/chat")
def chat(req: ChatRequest, uc: ChatWithSources = Depends(chat_uc)) -> ChatMessage:
    try:
        return uc(req.messages, req.sources)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except LLMClientError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@app.post("/generate-image")
def generate_image(req: ImageRequest, uc: GenerateImage = Depends(image_uc)) -> GeneratedImage:
    try:
        return uc(req.prompt)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except LLMClientError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@app.post("/draft/image")
async def insert_image(
    req: ImageRequest,
    uc: GenerateImage = Depends(image_uc),
    store: LocalDraftStore = Depends(get_draft_store),
) -> DraftState:
    """Generate an illustration and append it to the active draft."""
    try:
        image = await run_in_threadpool(uc, req.prompt)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except LLMClientError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    store.insert_content(image_html(req.prompt.strip(), image))
    return _state(store)


__all__ = ["app"]
