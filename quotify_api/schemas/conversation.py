from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ConversationLogIn(BaseModel):
    # presence is checked by the route so the error names every required field
    speaker: Optional[str] = None
    text: Optional[str] = None
    timestamp: Optional[datetime] = None
    session_id: Optional[str] = None
    room_name: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ConversationLogOut(BaseModel):
    id: int
    session_id: str
    room_name: str
    speaker: str
    text: str
    timestamp: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ConversationLogStored(BaseModel):
    status: str = "success"
    message: str = "Conversation log stored successfully"
    log_id: int


class ConversationLogList(BaseModel):
    status: str = "success"
    logs: List[ConversationLogOut]
    count: int
