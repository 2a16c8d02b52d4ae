from typing import Optional
from pydantic import BaseModel


class TokenData(BaseModel):
    sub: str
    exp: int
    scope: Optional[str] = None
