"""
Todo items and their per-day completion statistics
"""
import math
import uuid
from datetime import datetime
from typing import List, Optional

from date_bucket import DateLike, day_bucket
from errors import ValidationFailed, ensure_owner
from journal_store import JournalStore
from models import TodoItem, TodoSummary


def completion_rate(total: int, completed: int) -> int:
    """Whole percentage of completed todos, rounding halves up; 0 for no todos"""
    if total == 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


def summarize(todos: List[TodoItem]) -> TodoSummary:
    total = len(todos)
    completed = sum(1 for todo in todos if todo.is_done)
    return TodoSummary(total=total, completed=completed, completion_rate=completion_rate(total, completed))


def create_todo(store: JournalStore, user_id: uuid.UUID, content: str, date: DateLike = None) -> TodoItem:
    if not content or not content.strip():
        raise ValidationFailed("Todo content is required")

    # back-dated todos start at midnight of the chosen day
    created_at = day_bucket(date).start if date else datetime.now()

    return store.insert_todo({
        "user_id": user_id,
        "content": content,
        "is_done": False,
        "created_at": created_at,
    })


def list_todos(store: JournalStore, user_id: uuid.UUID, date: DateLike = None,
               done: Optional[bool] = None) -> List[TodoItem]:
    return store.list_todos(user_id, day_bucket(date), done=done, newest_first=True)


def update_todo(store: JournalStore, user_id: uuid.UUID, todo_id: uuid.UUID,
                content: Optional[str] = None, is_done: Optional[bool] = None) -> TodoItem:
    todo = ensure_owner(store.get_todo(todo_id), user_id, "Todo")

    update = {}
    if content is not None:
        if not content.strip():
            raise ValidationFailed("Todo content cannot be empty")
        update["content"] = content
    if is_done is not None:
        update["is_done"] = is_done

    if not update:
        return todo
    return store.update_todo(todo_id, update)


def toggle_todo(store: JournalStore, user_id: uuid.UUID, todo_id: uuid.UUID) -> TodoItem:
    todo = ensure_owner(store.get_todo(todo_id), user_id, "Todo")
    return store.update_todo(todo_id, {"is_done": not todo.is_done})


def delete_todo(store: JournalStore, user_id: uuid.UUID, todo_id: uuid.UUID) -> None:
    ensure_owner(store.get_todo(todo_id), user_id, "Todo")
    store.delete_todo(todo_id)


def get_todo_statistics(store: JournalStore, user_id: uuid.UUID, date: DateLike = None) -> TodoSummary:
    return summarize(store.list_todos(user_id, day_bucket(date)))
