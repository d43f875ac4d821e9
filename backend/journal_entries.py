"""
Reading and editing existing moods and reflections
"""
import logging
import uuid
from typing import List, Optional

from date_bucket import DateLike, day_bucket
from errors import ValidationFailed, ensure_owner
from journal_store import JournalStore
from models import MoodEntry, ReflectionDetail, ReflectionEntry
from sentiment_client import SentimentClient, analyze_note

logger = logging.getLogger(__name__)


def list_moods(store: JournalStore, user_id: uuid.UUID, date: DateLike = None,
               emoji: Optional[str] = None) -> List[MoodEntry]:
    """Moods of one day (today by default), optionally narrowed to a single emoji"""
    return store.list_moods(user_id, day_bucket(date), emoji=emoji)


async def update_mood(
    store: JournalStore,
    sentiment: Optional[SentimentClient],
    user_id: uuid.UUID,
    mood_id: uuid.UUID,
    emoji: Optional[str] = None,
    note: Optional[str] = None,
) -> MoodEntry:
    if emoji is not None and not emoji.strip():
        raise ValidationFailed("Emoji cannot be empty")

    existing = ensure_owner(store.get_mood(mood_id), user_id, "Mood")

    update = {
        "emoji": existing.emoji if emoji is None else emoji,
        "note": existing.note if note is None else note,
    }

    # only a changed note is worth another round trip to the AI service
    if note is not None and note != existing.note:
        update.update(await analyze_note(sentiment, note, update["emoji"]))

    return store.update_mood(mood_id, update)


def list_reflections(store: JournalStore, user_id: uuid.UUID, date: DateLike = None) -> List[ReflectionEntry]:
    bucket = day_bucket(date) if date else None
    return store.list_reflections(user_id, bucket)


def get_reflection(store: JournalStore, user_id: uuid.UUID, reflection_id: uuid.UUID) -> ReflectionDetail:
    reflection = ensure_owner(store.get_reflection(reflection_id), user_id, "Reflection")

    mood = None
    if reflection.linked_mood_id is not None:
        mood = store.get_mood(reflection.linked_mood_id)
        # a stale link is left in place and simply resolves to nothing
        if mood is not None and mood.user_id != user_id:
            mood = None

    return ReflectionDetail(**reflection.model_dump(), mood=mood)


def update_reflection(store: JournalStore, user_id: uuid.UUID, reflection_id: uuid.UUID,
                      content: str) -> ReflectionEntry:
    if not content or not content.strip():
        raise ValidationFailed("Reflection content is required")

    ensure_owner(store.get_reflection(reflection_id), user_id, "Reflection")
    return store.update_reflection(reflection_id, {"content": content})
