"""
Pydantic models for the Growlog journaling backend
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict
from datetime import date, datetime
import uuid

class UserCreate(BaseModel):
    email: EmailStr
    password: str
    nickname: str
    role: Optional[str] = None

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class User(BaseModel):
    id: uuid.UUID
    email: str
    nickname: str
    password_hash: str
    role: str = "USER"
    created_at: Optional[datetime] = None

class Profile(BaseModel):
    id: uuid.UUID
    email: str
    nickname: str
    role: str

class ProfileUpdate(BaseModel):
    nickname: str

class PasswordChange(BaseModel):
    current_password: str
    new_password: str

class AuthResponse(BaseModel):
    token: str
    message: str

class Sentiment(BaseModel):
    positive: float = 0
    neutral: float = 0
    negative: float = 0
    label: Optional[str] = None
    model: str = "unknown"
    version: Optional[str] = None

class Advice(BaseModel):
    advice: Optional[str] = None
    model: Optional[str] = None
    source: Optional[str] = None

class MoodEntryCreate(BaseModel):
    emoji: str
    note: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD, today when omitted

class MoodEntryUpdate(BaseModel):
    emoji: Optional[str] = None
    note: Optional[str] = None

class MoodEntry(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    date: datetime
    emoji: str
    note: Optional[str] = None
    positive: Optional[float] = None
    neutral: Optional[float] = None
    negative: Optional[float] = None
    ai_label: Optional[str] = None
    ai_model: Optional[str] = None
    ai_version: Optional[str] = None
    ai_advice: Optional[str] = None
    ai_advice_model: Optional[str] = None
    ai_advice_source: Optional[str] = None
    linked_reflection_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None

    def has_sentiment(self) -> bool:
        return any(
            value is not None
            for value in (self.ai_label, self.positive, self.neutral, self.negative)
        )

class ReflectionCreate(BaseModel):
    content: str
    date: Optional[str] = None

class ReflectionUpdate(BaseModel):
    content: str

class ReflectionEntry(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    date: datetime
    content: str
    linked_mood_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None

class ReflectionDetail(ReflectionEntry):
    mood: Optional[MoodEntry] = None

class TodoCreate(BaseModel):
    content: str
    date: Optional[str] = None

class TodoUpdate(BaseModel):
    content: Optional[str] = None
    is_done: Optional[bool] = None

class TodoItem(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    content: str
    is_done: bool = False
    created_at: datetime

class TodoSummary(BaseModel):
    total: int
    completed: int
    completion_rate: int  # 0~100

class DailySummary(BaseModel):
    date: date
    mood: Optional[MoodEntry] = None
    reflection: Optional[ReflectionEntry] = None
    todos: List[TodoItem] = []
    todo_summary: TodoSummary

class SentimentAggregate(BaseModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0

class StatsRange(BaseModel):
    start: datetime
    end: datetime

class WeeklyStats(BaseModel):
    emotion_stats: Dict[str, int] = Field(default_factory=dict)
    todo_stats: TodoSummary
    ai_aggregate: SentimentAggregate
    ai_sample_count: int
    period: str = "weekly"
    range: StatsRange

class CalendarDay(BaseModel):
    date: date
    mood: Optional[MoodEntry] = None
    reflection: Optional[ReflectionEntry] = None

class NicknameCheck(BaseModel):
    is_duplicate: bool
