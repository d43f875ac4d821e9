"""
Growlog - Personal Journaling Backend
Supabase + FastAPI implementation: daily moods, reflections, todos and statistics
"""
from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from dotenv import load_dotenv
import os
import uuid
import logging
from datetime import datetime
from typing import List, Optional
import auth
from auth import get_current_user
from daily_linker import create_mood, create_reflection
from daily_summary import get_daily_summary, get_month_calendar
from errors import JournalError, StoreFailure
from journal_store import JournalStore, SupabaseJournalStore
from sentiment_client import SentimentClient
from weekly_stats import get_weekly_stats
from models import *
import journal_entries
import todos

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    app.state.sentiment = SentimentClient()
    app.state.store = SupabaseJournalStore()
    yield
    # Shutdown
    app.state.sentiment.close()

app = FastAPI(title="Growlog - Personal Journal", version="1.0.0", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("FRONT_ORIGIN", "*")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def get_store(request: Request) -> JournalStore:
    return request.app.state.store

def get_sentiment_client(request: Request) -> Optional[SentimentClient]:
    return getattr(request.app.state, "sentiment", None)

@app.exception_handler(JournalError)
async def journal_error_handler(request: Request, exc: JournalError):
    if isinstance(exc, StoreFailure):
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

# =====================================================================================
# AUTHENTICATION
# =====================================================================================

@app.post("/api/auth/signup", status_code=status.HTTP_201_CREATED, response_model=Profile)
async def signup(user_data: UserCreate, store: JournalStore = Depends(get_store)):
    """Register a new user"""
    user = auth.signup(store, user_data)
    return Profile(**user.model_dump())

@app.post("/api/auth/login", response_model=AuthResponse)
async def login(user_data: UserLogin, store: JournalStore = Depends(get_store)):
    """Exchange email and password for a bearer token"""
    token = auth.login(store, user_data.email, user_data.password)
    return AuthResponse(token=token, message="Login successful")

@app.get("/api/auth/check-nickname", response_model=NicknameCheck)
async def check_nickname(nickname: str = "", store: JournalStore = Depends(get_store)):
    if not nickname:
        raise HTTPException(status_code=400, detail="Nickname is required")
    return NicknameCheck(is_duplicate=store.get_user_by_nickname(nickname) is not None)

@app.get("/api/auth/me", response_model=Profile)
async def get_me(
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    user = store.get_user(current_user)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return Profile(**user.model_dump())

@app.patch("/api/auth/me", response_model=Profile)
async def update_me(
    profile: ProfileUpdate,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    user = auth.update_profile(store, current_user, profile.nickname)
    return Profile(**user.model_dump())

@app.patch("/api/auth/password")
async def change_password(
    passwords: PasswordChange,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    auth.change_password(store, current_user, passwords.current_password, passwords.new_password)
    return {"message": "Password changed successfully"}

@app.delete("/api/auth/delete")
async def delete_account(
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Delete the account along with its moods, reflections and todos"""
    auth.delete_account(store, current_user)
    return {"message": "Account deleted successfully"}

@app.get("/api/auth/users", response_model=List[Profile])
async def list_users(
    admin_user: uuid.UUID = Depends(auth.require_admin),
    store: JournalStore = Depends(get_store)
):
    return [Profile(**user.model_dump()) for user in store.list_users()]

# =====================================================================================
# MOOD ENTRIES
# =====================================================================================

@app.post("/api/emotions", status_code=status.HTTP_201_CREATED, response_model=MoodEntry)
async def create_mood_entry(
    mood_data: MoodEntryCreate,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
    sentiment: Optional[SentimentClient] = Depends(get_sentiment_client)
):
    """Record the mood of a day (one per day)"""
    return await create_mood(store, sentiment, current_user, mood_data.date, mood_data.emoji, mood_data.note)

@app.get("/api/emotions", response_model=List[MoodEntry])
async def get_mood_entries(
    date: Optional[str] = None,
    emoji: Optional[str] = None,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Get the moods of a day (today when no date is given)"""
    return journal_entries.list_moods(store, current_user, date, emoji)

@app.patch("/api/emotions/{mood_id}", response_model=MoodEntry)
async def update_mood_entry(
    mood_id: uuid.UUID,
    mood_data: MoodEntryUpdate,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
    sentiment: Optional[SentimentClient] = Depends(get_sentiment_client)
):
    return await journal_entries.update_mood(
        store, sentiment, current_user, mood_id, mood_data.emoji, mood_data.note
    )

# =====================================================================================
# REFLECTIONS
# =====================================================================================

@app.post("/api/reflections", status_code=status.HTTP_201_CREATED, response_model=ReflectionEntry)
async def create_reflection_entry(
    reflection_data: ReflectionCreate,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Write the reflection of a day (one per day)"""
    return await create_reflection(store, current_user, reflection_data.date, reflection_data.content)

@app.get("/api/reflections", response_model=List[ReflectionEntry])
async def get_reflections(
    date: Optional[str] = None,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    return journal_entries.list_reflections(store, current_user, date)

@app.get("/api/reflections/{reflection_id}", response_model=ReflectionDetail)
async def get_reflection(
    reflection_id: uuid.UUID,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Get a reflection together with the mood linked to it"""
    return journal_entries.get_reflection(store, current_user, reflection_id)

@app.patch("/api/reflections/{reflection_id}", response_model=ReflectionEntry)
async def update_reflection(
    reflection_id: uuid.UUID,
    reflection_data: ReflectionUpdate,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    return journal_entries.update_reflection(store, current_user, reflection_id, reflection_data.content)

# =====================================================================================
# TODOS
# =====================================================================================

@app.post("/api/todos", status_code=status.HTTP_201_CREATED, response_model=TodoItem)
async def create_todo(
    todo_data: TodoCreate,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    return todos.create_todo(store, current_user, todo_data.content, todo_data.date)

@app.get("/api/todos", response_model=List[TodoItem])
async def get_todos(
    date: Optional[str] = None,
    done: Optional[bool] = None,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Get the todos created on a day (today when no date is given)"""
    return todos.list_todos(store, current_user, date, done)

@app.get("/api/todos/statistics", response_model=TodoSummary)
async def get_todo_statistics(
    date: Optional[str] = None,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    return todos.get_todo_statistics(store, current_user, date)

@app.patch("/api/todos/{todo_id}", response_model=TodoItem)
async def update_todo(
    todo_id: uuid.UUID,
    todo_data: TodoUpdate,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    return todos.update_todo(store, current_user, todo_id, todo_data.content, todo_data.is_done)

@app.patch("/api/todos/{todo_id}/toggle", response_model=TodoItem)
async def toggle_todo(
    todo_id: uuid.UUID,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    return todos.toggle_todo(store, current_user, todo_id)

@app.delete("/api/todos/{todo_id}")
async def delete_todo(
    todo_id: uuid.UUID,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    todos.delete_todo(store, current_user, todo_id)
    return {"message": "Todo deleted successfully"}

# =====================================================================================
# DAILY SUMMARY, CALENDAR & STATISTICS
# =====================================================================================

@app.get("/api/daily", response_model=DailySummary)
async def daily_summary(
    date: Optional[str] = None,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Mood, reflection, todos and completion rate of one day"""
    return await get_daily_summary(store, current_user, date)

@app.get("/api/calendar/{year}/{month}", response_model=List[CalendarDay])
async def get_calendar_data(
    year: int,
    month: int,
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Get calendar data for a specific month"""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
    return await get_month_calendar(store, current_user, year, month)

@app.get("/api/stats/summary", response_model=WeeklyStats)
async def get_statistics(
    date: Optional[str] = None,
    period: str = "weekly",
    current_user: uuid.UUID = Depends(get_current_user),
    store: JournalStore = Depends(get_store)
):
    """Emotion distribution, todo completion and AI sentiment ratios"""
    return get_weekly_stats(store, current_user, date, period)

# =====================================================================================
# HEALTH CHECK
# =====================================================================================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "message": "Growlog journal is running",
        "timestamp": datetime.now().isoformat(),
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8001")))
