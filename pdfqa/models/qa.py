from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class HistoryEntry(BaseModel):
    text: str = ""


class AskRequest(BaseModel):
    question: str | None = None
    # Prior exchange texts, oldest first; plain strings or {"text": ...} objects
    history: list[str | HistoryEntry] = Field(default_factory=list)

    def history_texts(self) -> list[str]:
        return [h if isinstance(h, str) else h.text for h in self.history]


class AskResponse(BaseModel):
    answer: str
    context: str


class IndexResponse(BaseModel):
    status: Literal["ok"] = "ok"
    message: str
    chunks: int


class ErrorResponse(BaseModel):
    error: str
