import uuid
from datetime import datetime

import pytest

from errors import Conflict
from journal_store import JournalStore
from models import Advice, MoodEntry, ReflectionEntry, Sentiment, TodoItem, User


class InMemoryJournalStore(JournalStore):
    """JournalStore kept in dictionaries, with the same (user_id, date) uniqueness as the schema"""

    def __init__(self):
        self.users = {}
        self.moods = {}
        self.reflections = {}
        self.todos = {}

    @staticmethod
    def _new(data):
        return {"id": uuid.uuid4(), "created_at": datetime.now(), **data}

    @staticmethod
    def _unique(records, data, what):
        for record in records.values():
            if record.user_id == data["user_id"] and record.date == data["date"]:
                raise Conflict(f"A {what} already exists for this date")

    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def get_user_by_nickname(self, nickname):
        return next((u for u in self.users.values() if u.nickname == nickname), None)

    def insert_user(self, data):
        user = User(**self._new(data))
        self.users[user.id] = user
        return user

    def update_user(self, user_id, data):
        user = self.users[user_id].model_copy(update=data)
        self.users[user_id] = user
        return user

    def delete_user(self, user_id):
        del self.users[user_id]
        for records in (self.moods, self.reflections, self.todos):
            for record_id in [k for k, v in records.items() if v.user_id == user_id]:
                del records[record_id]

    def list_users(self):
        return sorted(self.users.values(), key=lambda u: u.created_at)

    def find_mood(self, user_id, bucket):
        moods = self.list_moods(user_id, bucket)
        return moods[0] if moods else None

    def list_moods(self, user_id, bucket, emoji=None):
        moods = [
            m for m in self.moods.values()
            if m.user_id == user_id and bucket.contains(m.date) and (not emoji or m.emoji == emoji)
        ]
        return sorted(moods, key=lambda m: m.date)

    def get_mood(self, mood_id):
        return self.moods.get(mood_id)

    def insert_mood(self, data):
        self._unique(self.moods, data, "mood entry")
        mood = MoodEntry(**self._new(data))
        self.moods[mood.id] = mood
        return mood

    def update_mood(self, mood_id, data):
        mood = self.moods[mood_id].model_copy(update=data)
        self.moods[mood_id] = mood
        return mood

    def find_reflection(self, user_id, bucket):
        reflections = sorted(
            (r for r in self.reflections.values() if r.user_id == user_id and bucket.contains(r.date)),
            key=lambda r: r.date,
        )
        return reflections[0] if reflections else None

    def list_reflections(self, user_id, bucket=None):
        reflections = [
            r for r in self.reflections.values()
            if r.user_id == user_id and (bucket is None or bucket.contains(r.date))
        ]
        return sorted(reflections, key=lambda r: r.created_at, reverse=True)

    def get_reflection(self, reflection_id):
        return self.reflections.get(reflection_id)

    def insert_reflection(self, data):
        self._unique(self.reflections, data, "reflection")
        reflection = ReflectionEntry(**self._new(data))
        self.reflections[reflection.id] = reflection
        return reflection

    def update_reflection(self, reflection_id, data):
        reflection = self.reflections[reflection_id].model_copy(update=data)
        self.reflections[reflection_id] = reflection
        return reflection

    def list_todos(self, user_id, bucket=None, done=None, newest_first=False):
        todos = [
            t for t in self.todos.values()
            if t.user_id == user_id
            and (bucket is None or bucket.contains(t.created_at))
            and (done is None or t.is_done == done)
        ]
        return sorted(todos, key=lambda t: t.created_at, reverse=newest_first)

    def get_todo(self, todo_id):
        return self.todos.get(todo_id)

    def insert_todo(self, data):
        todo = TodoItem(**{"id": uuid.uuid4(), **data})
        self.todos[todo.id] = todo
        return todo

    def update_todo(self, todo_id, data):
        todo = self.todos[todo_id].model_copy(update=data)
        self.todos[todo_id] = todo
        return todo

    def delete_todo(self, todo_id):
        del self.todos[todo_id]


class StubSentimentClient:
    """Stands in for SentimentClient; returns canned results or nothing"""

    def __init__(self, sentiment=None, advice=None):
        self.sentiment = sentiment
        self.advice = advice
        self.calls = []

    async def analyze(self, text):
        self.calls.append(("analyze", text))
        return self.sentiment

    async def advise(self, text, emoji=None):
        self.calls.append(("advise", text, emoji))
        return self.advice


@pytest.fixture
def store():
    return InMemoryJournalStore()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def sentiment():
    return StubSentimentClient(
        sentiment=Sentiment(positive=0.7, neutral=0.2, negative=0.1, label="positive", model="kobert"),
        advice=Advice(advice="Keep a short walk in your routine.", model="gpt", source="llm"),
    )


@pytest.fixture
def silent_sentiment():
    return StubSentimentClient()
