from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class AgentCreate(BaseModel):
    id: str = Field(..., min_length=1, description="User id issued by the auth provider")
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: str = Field(..., min_length=1)
    agent_code: str = Field(..., min_length=1)
    address: Optional[str] = None
    photo_url: str = ""

    class Config:
        str_strip_whitespace = True


class AgentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    photo_url: Optional[str] = None

    class Config:
        str_strip_whitespace = True
