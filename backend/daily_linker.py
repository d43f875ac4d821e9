"""
Mood and reflection creation: one of each per user per day, cross-linked
when both exist for the same day.
"""
import logging
import uuid
from typing import Optional

from date_bucket import DateLike, day_bucket
from errors import Conflict, StoreFailure, ValidationFailed
from journal_store import JournalStore
from models import MoodEntry, ReflectionEntry
from sentiment_client import SentimentClient, analyze_note

logger = logging.getLogger(__name__)


async def create_mood(
    store: JournalStore,
    sentiment: Optional[SentimentClient],
    user_id: uuid.UUID,
    date: DateLike,
    emoji: str,
    note: Optional[str] = None,
) -> MoodEntry:
    if not emoji:
        raise ValidationFailed("Emoji is required")

    bucket = day_bucket(date)

    if store.find_mood(user_id, bucket) is not None:
        raise Conflict("A mood is already recorded for this date")

    ai_fields = await analyze_note(sentiment, note, emoji)

    mood = store.insert_mood({
        "user_id": user_id,
        "date": bucket.start,
        "emoji": emoji,
        "note": note or None,
        **ai_fields,
    })
    logger.info(f"Mood {mood.id} recorded for user {user_id} on {bucket.start.date()}")

    reflection = store.find_reflection(user_id, bucket)
    if reflection is not None:
        try:
            store.update_reflection(reflection.id, {"linked_mood_id": mood.id})
            logger.info(f"Reflection {reflection.id} linked to mood {mood.id}")
        except StoreFailure as e:
            # the mood is saved; a missing link must not fail the write
            logger.warning(f"Could not link reflection {reflection.id} to mood {mood.id}: {e.detail}")

    return mood


async def create_reflection(
    store: JournalStore,
    user_id: uuid.UUID,
    date: DateLike,
    content: str,
) -> ReflectionEntry:
    if not content or not content.strip():
        raise ValidationFailed("Reflection content is required")

    bucket = day_bucket(date)

    if store.find_reflection(user_id, bucket) is not None:
        raise Conflict("A reflection is already recorded for this date")

    reflection = store.insert_reflection({
        "user_id": user_id,
        "date": bucket.start,
        "content": content,
    })
    logger.info(f"Reflection {reflection.id} recorded for user {user_id} on {bucket.start.date()}")

    mood = store.find_mood(user_id, bucket)
    if mood is not None:
        try:
            store.update_mood(mood.id, {"linked_reflection_id": reflection.id})
            logger.info(f"Mood {mood.id} linked to reflection {reflection.id}")
        except StoreFailure as e:
            logger.warning(f"Could not link mood {mood.id} to reflection {reflection.id}: {e.detail}")

    return reflection
