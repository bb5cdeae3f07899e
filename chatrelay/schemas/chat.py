from typing import Optional
from pydantic import BaseModel


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    response: str


class ErrorOut(BaseModel):
    error: str
    details: Optional[str] = None


class HealthOut(BaseModel):
    status: str
    message: str
