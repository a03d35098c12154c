"""Side-channel payloads handed to the pipeline by external collaborators."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class EmojiReaction(BaseModel):
    emoji: str
    count: int = 1


class PageSelection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    content: str = ""
    start_line: int | None = Field(default=None, alias="startLine")
    end_line: int | None = Field(default=None, alias="endLine")
    page_id: str | None = Field(default=None, alias="pageId")


class PageMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    document_id: str | None = Field(default=None, alias="documentId")
    char_count: int | None = Field(default=None, alias="charCount")
    line_count: int | None = Field(default=None, alias="lineCount")


class PageContentContext(BaseModel):
    markdown: str | None = None
    xml: str | None = None
    metadata: PageMetadata = Field(default_factory=PageMetadata)


class UserMemoryItem(BaseModel):
    id: str | None = None
    category: str | None = None
    title: str | None = None
    content: str


class TodoItem(BaseModel):
    content: str
    status: Literal["todo", "in_progress", "completed"] = "todo"
