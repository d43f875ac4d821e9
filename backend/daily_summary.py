"""
Single-day and monthly calendar views over a user's journal.
"""
import asyncio
import uuid
from datetime import timedelta
from typing import List

from date_bucket import DateLike, day_bucket, month_bucket
from journal_store import JournalStore
from models import CalendarDay, DailySummary
from todos import summarize


async def get_daily_summary(store: JournalStore, user_id: uuid.UUID, date: DateLike = None) -> DailySummary:
    """Mood, reflection and todos of one day plus the todo completion summary.

    Missing mood or reflection come back as None; an empty day is not an error.
    """
    bucket = day_bucket(date)

    # the three reads touch disjoint records, so they can run side by side
    mood, reflection, todos = await asyncio.gather(
        asyncio.to_thread(store.find_mood, user_id, bucket),
        asyncio.to_thread(store.find_reflection, user_id, bucket),
        asyncio.to_thread(store.list_todos, user_id, bucket),
    )

    return DailySummary(
        date=bucket.start.date(),
        mood=mood,
        reflection=reflection,
        todos=todos,
        todo_summary=summarize(todos),
    )


async def get_month_calendar(store: JournalStore, user_id: uuid.UUID, year: int, month: int) -> List[CalendarDay]:
    """One CalendarDay per day of the month with that day's mood and reflection"""
    bucket = month_bucket(f"{year:04d}-{month:02d}-01")

    moods, reflections = await asyncio.gather(
        asyncio.to_thread(store.list_moods, user_id, bucket),
        asyncio.to_thread(store.list_reflections, user_id, bucket),
    )

    # list_moods is ascending; keep the earliest record of a day
    moods_by_day = {}
    for mood in moods:
        moods_by_day.setdefault(mood.date.date(), mood)
    reflections_by_day = {}
    for reflection in sorted(reflections, key=lambda r: r.date):
        reflections_by_day.setdefault(reflection.date.date(), reflection)

    calendar_data = []
    current_date = bucket.start.date()
    while current_date < bucket.end.date():
        calendar_data.append(CalendarDay(
            date=current_date,
            mood=moods_by_day.get(current_date),
            reflection=reflections_by_day.get(current_date),
        ))
        current_date += timedelta(days=1)

    return calendar_data
