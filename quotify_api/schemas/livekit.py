from typing import Optional
from pydantic import BaseModel, Field


class TokenRequest(BaseModel):
    roomName: Optional[str] = Field(default=None, max_length=128)


class ConnectionDetails(BaseModel):
    url: str
    token: str
    session_id: str
