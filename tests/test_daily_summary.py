import asyncio
from datetime import date

import pytest

from daily_linker import create_mood, create_reflection
from daily_summary import get_daily_summary, get_month_calendar
from errors import InvalidDate
from todos import completion_rate, create_todo, update_todo


def test_completion_rate():
    assert completion_rate(0, 0) == 0
    assert completion_rate(3, 1) == 33
    assert completion_rate(3, 2) == 67
    assert completion_rate(8, 1) == 13  # 12.5 rounds up
    assert completion_rate(4, 4) == 100


def test_empty_day_is_not_an_error(store, user_id):
    summary = asyncio.run(get_daily_summary(store, user_id, "2025-05-01"))

    assert summary.date == date(2025, 5, 1)
    assert summary.mood is None
    assert summary.reflection is None
    assert summary.todos == []
    assert summary.todo_summary.model_dump() == {"total": 0, "completed": 0, "completion_rate": 0}


def test_daily_summary_combines_the_day(store, user_id, silent_sentiment):
    mood = asyncio.run(create_mood(store, silent_sentiment, user_id, "2025-05-01", "😄"))
    reflection = asyncio.run(create_reflection(store, user_id, "2025-05-01", "Good day"))
    done = create_todo(store, user_id, "Run", "2025-05-01")
    create_todo(store, user_id, "Read", "2025-05-01")
    create_todo(store, user_id, "Cook", "2025-05-01")
    create_todo(store, user_id, "Other day", "2025-05-02")
    update_todo(store, user_id, done.id, is_done=True)

    summary = asyncio.run(get_daily_summary(store, user_id, "2025-05-01"))

    assert summary.mood.id == mood.id
    assert summary.reflection.id == reflection.id
    assert sorted(t.content for t in summary.todos) == ["Cook", "Read", "Run"]
    assert summary.todo_summary.total == 3
    assert summary.todo_summary.completed == 1
    assert summary.todo_summary.completion_rate == 33


def test_daily_summary_rejects_bad_date(store, user_id):
    with pytest.raises(InvalidDate):
        asyncio.run(get_daily_summary(store, user_id, "2025-13-40"))


def test_month_calendar(store, user_id, silent_sentiment):
    asyncio.run(create_mood(store, silent_sentiment, user_id, "2025-02-03", "😄"))
    asyncio.run(create_reflection(store, user_id, "2025-02-28", "Month end"))
    asyncio.run(create_mood(store, silent_sentiment, user_id, "2025-03-01", "😢"))

    days = asyncio.run(get_month_calendar(store, user_id, 2025, 2))

    assert len(days) == 28
    assert days[0].date == date(2025, 2, 1)
    assert days[2].mood.emoji == "😄"
    assert days[27].reflection.content == "Month end"
    assert all(day.mood is None for day in days if day.date != date(2025, 2, 3))
