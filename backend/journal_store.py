"""
Persistence boundary for users, moods, reflections and todos.

`JournalStore` is the interface the domain modules depend on. The Supabase
implementation below keeps the one-per-day guarantee in the database itself
(unique (user_id, date) on mood_entries and reflections, see
supabase_migration.sql) and turns a violation into `Conflict`.
"""
import logging
import os
import uuid
from typing import List, Optional

from postgrest.exceptions import APIError
from supabase import create_client, Client

from date_bucket import DateRange
from errors import Conflict, StoreFailure
from models import MoodEntry, ReflectionEntry, TodoItem, User

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class JournalStore:
    """Point and range access to a user's journal records"""

    # users
    def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        raise NotImplementedError

    def get_user_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_user_by_nickname(self, nickname: str) -> Optional[User]:
        raise NotImplementedError

    def insert_user(self, data: dict) -> User:
        raise NotImplementedError

    def update_user(self, user_id: uuid.UUID, data: dict) -> User:
        raise NotImplementedError

    def delete_user(self, user_id: uuid.UUID) -> None:
        """Removes the user together with every record they own"""
        raise NotImplementedError

    def list_users(self) -> List[User]:
        raise NotImplementedError

    # moods
    def find_mood(self, user_id: uuid.UUID, bucket: DateRange) -> Optional[MoodEntry]:
        """Earliest mood inside the bucket, if any"""
        raise NotImplementedError

    def list_moods(self, user_id: uuid.UUID, bucket: DateRange, emoji: Optional[str] = None) -> List[MoodEntry]:
        raise NotImplementedError

    def get_mood(self, mood_id: uuid.UUID) -> Optional[MoodEntry]:
        raise NotImplementedError

    def insert_mood(self, data: dict) -> MoodEntry:
        raise NotImplementedError

    def update_mood(self, mood_id: uuid.UUID, data: dict) -> MoodEntry:
        raise NotImplementedError

    # reflections
    def find_reflection(self, user_id: uuid.UUID, bucket: DateRange) -> Optional[ReflectionEntry]:
        raise NotImplementedError

    def list_reflections(self, user_id: uuid.UUID, bucket: Optional[DateRange] = None) -> List[ReflectionEntry]:
        """Newest first"""
        raise NotImplementedError

    def get_reflection(self, reflection_id: uuid.UUID) -> Optional[ReflectionEntry]:
        raise NotImplementedError

    def insert_reflection(self, data: dict) -> ReflectionEntry:
        raise NotImplementedError

    def update_reflection(self, reflection_id: uuid.UUID, data: dict) -> ReflectionEntry:
        raise NotImplementedError

    # todos
    def list_todos(self, user_id: uuid.UUID, bucket: Optional[DateRange] = None,
                   done: Optional[bool] = None, newest_first: bool = False) -> List[TodoItem]:
        raise NotImplementedError

    def get_todo(self, todo_id: uuid.UUID) -> Optional[TodoItem]:
        raise NotImplementedError

    def insert_todo(self, data: dict) -> TodoItem:
        raise NotImplementedError

    def update_todo(self, todo_id: uuid.UUID, data: dict) -> TodoItem:
        raise NotImplementedError

    def delete_todo(self, todo_id: uuid.UUID) -> None:
        raise NotImplementedError


def _in_range(query, column: str, bucket: DateRange):
    query = query.gte(column, bucket.start.isoformat())
    if bucket.closed:
        return query.lte(column, bucket.end.isoformat())
    return query.lt(column, bucket.end.isoformat())


def _serialize(data: dict) -> dict:
    serialized = {}
    for key, value in data.items():
        if isinstance(value, uuid.UUID):
            value = str(value)
        elif hasattr(value, "isoformat"):
            value = value.isoformat()
        serialized[key] = value
    return serialized


class SupabaseJournalStore(JournalStore):
    """JournalStore over the Supabase tables users, mood_entries, reflections, todos"""

    _shared: Optional[Client] = None

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @classmethod
    def shared_client(cls) -> Client:
        """Process-wide Supabase client, created on first use"""
        if cls._shared is None:
            supabase_url = os.getenv("SUPABASE_URL")
            supabase_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

            if not supabase_url or not supabase_key:
                raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

            cls._shared = create_client(supabase_url, supabase_key)
        return cls._shared

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = self.shared_client()
        return self._client

    def _execute(self, query, what: str):
        try:
            return query.execute().data or []
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.info(f"Duplicate {what} rejected by unique constraint")
                raise Conflict(f"A {what} already exists for this date")
            logger.error(f"Supabase error on {what}: {e}")
            raise StoreFailure(f"Error accessing {what}")

    def _first(self, query, what: str, model):
        rows = self._execute(query, what)
        return model(**rows[0]) if rows else None

    def _insert(self, table: str, data: dict, what: str, model):
        rows = self._execute(self.client.table(table).insert(_serialize(data)), what)
        if not rows:
            raise StoreFailure(f"Failed to create {what}")
        return model(**rows[0])

    def _update(self, table: str, record_id: uuid.UUID, data: dict, what: str, model):
        query = self.client.table(table).update(_serialize(data)).eq("id", str(record_id))
        rows = self._execute(query, what)
        if not rows:
            raise StoreFailure(f"Failed to update {what}")
        return model(**rows[0])

    # users

    def get_user(self, user_id):
        query = self.client.table("users").select("*").eq("id", str(user_id))
        return self._first(query, "user", User)

    def get_user_by_email(self, email):
        query = self.client.table("users").select("*").eq("email", email)
        return self._first(query, "user", User)

    def get_user_by_nickname(self, nickname):
        query = self.client.table("users").select("*").eq("nickname", nickname)
        return self._first(query, "user", User)

    def insert_user(self, data):
        return self._insert("users", data, "user", User)

    def update_user(self, user_id, data):
        return self._update("users", user_id, data, "user", User)

    def delete_user(self, user_id):
        # mood_entries, reflections and todos cascade on the foreign key
        self._execute(self.client.table("users").delete().eq("id", str(user_id)), "user")

    def list_users(self):
        rows = self._execute(self.client.table("users").select("*").order("created_at", desc=False), "user")
        return [User(**row) for row in rows]

    # moods

    def find_mood(self, user_id, bucket):
        query = self.client.table("mood_entries").select("*").eq("user_id", str(user_id))
        query = _in_range(query, "date", bucket).order("date", desc=False).limit(1)
        return self._first(query, "mood entry", MoodEntry)

    def list_moods(self, user_id, bucket, emoji=None):
        query = self.client.table("mood_entries").select("*").eq("user_id", str(user_id))
        query = _in_range(query, "date", bucket)
        if emoji:
            query = query.eq("emoji", emoji)
        rows = self._execute(query.order("date", desc=False), "mood entry")
        return [MoodEntry(**row) for row in rows]

    def get_mood(self, mood_id):
        query = self.client.table("mood_entries").select("*").eq("id", str(mood_id))
        return self._first(query, "mood entry", MoodEntry)

    def insert_mood(self, data):
        return self._insert("mood_entries", data, "mood entry", MoodEntry)

    def update_mood(self, mood_id, data):
        return self._update("mood_entries", mood_id, data, "mood entry", MoodEntry)

    # reflections

    def find_reflection(self, user_id, bucket):
        query = self.client.table("reflections").select("*").eq("user_id", str(user_id))
        query = _in_range(query, "date", bucket).order("date", desc=False).limit(1)
        return self._first(query, "reflection", ReflectionEntry)

    def list_reflections(self, user_id, bucket=None):
        query = self.client.table("reflections").select("*").eq("user_id", str(user_id))
        if bucket is not None:
            query = _in_range(query, "date", bucket)
        rows = self._execute(query.order("created_at", desc=True), "reflection")
        return [ReflectionEntry(**row) for row in rows]

    def get_reflection(self, reflection_id):
        query = self.client.table("reflections").select("*").eq("id", str(reflection_id))
        return self._first(query, "reflection", ReflectionEntry)

    def insert_reflection(self, data):
        return self._insert("reflections", data, "reflection", ReflectionEntry)

    def update_reflection(self, reflection_id, data):
        return self._update("reflections", reflection_id, data, "reflection", ReflectionEntry)

    # todos

    def list_todos(self, user_id, bucket=None, done=None, newest_first=False):
        query = self.client.table("todos").select("*").eq("user_id", str(user_id))
        if bucket is not None:
            query = _in_range(query, "created_at", bucket)
        if done is not None:
            query = query.eq("is_done", done)
        rows = self._execute(query.order("created_at", desc=newest_first), "todo")
        return [TodoItem(**row) for row in rows]

    def get_todo(self, todo_id):
        query = self.client.table("todos").select("*").eq("id", str(todo_id))
        return self._first(query, "todo", TodoItem)

    def insert_todo(self, data):
        return self._insert("todos", data, "todo", TodoItem)

    def update_todo(self, todo_id, data):
        return self._update("todos", todo_id, data, "todo", TodoItem)

    def delete_todo(self, todo_id):
        self._execute(self.client.table("todos").delete().eq("id", str(todo_id)), "todo")
