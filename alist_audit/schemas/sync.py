from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class SyncRequest(BaseModel):
    username: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Letterboxd username (leading @ allowed). Defaults to the saved one.",
        examples=["cinefan"],
    )


class SyncResponse(BaseModel):
    source: str = Field(description="RSS URL that was fetched.")
    username: str
    fetched: int = Field(description="Usable items parsed from the feed.")
    added: int
    updated: int
    preserved: int = Field(description="Stored movies not present in this feed page.")
    total: int
    last_sync: datetime
