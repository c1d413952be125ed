from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .models.note_model import Priority


# Descriptors are typed loosely here; face_utils owns the validation rules
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    faceDescriptor: Optional[List[Any]] = None
    profileImage: Optional[str] = None


class AuthenticateRequest(BaseModel):
    faceDescriptor: Optional[List[Any]] = None


class RegisterResponse(BaseModel):
    message: str
    userId: str
    name: str


class UserOut(BaseModel):
    id: str
    name: str
    profileImage: Optional[str] = None


class UserSummary(BaseModel):
    id: str
    name: str
    createdAt: datetime


class AuthenticateResponse(BaseModel):
    success: bool = True
    user: UserOut
    confidence: float
    accessToken: str
    tokenType: str = "bearer"


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = ""
    priority: Priority = Priority.medium
    completed: bool = False
    dueDate: Optional[datetime] = None


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    priority: Optional[Priority] = None
    completed: Optional[bool] = None
    dueDate: Optional[datetime] = None


class NoteOut(BaseModel):
    id: str
    userId: str
    title: str
    content: str
    priority: Priority
    completed: bool
    dueDate: Optional[datetime] = None
    createdAt: datetime
    updatedAt: datetime
