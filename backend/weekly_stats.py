"""
Emotion distribution, todo completion and AI sentiment ratios over a
trailing window (a single day or a calendar month on request).
"""
import logging
import math
import uuid
from collections import Counter
from typing import Dict, Iterable, Tuple

from date_bucket import DateLike, bucket_for_period
from errors import ValidationFailed
from journal_store import JournalStore
from models import MoodEntry, SentimentAggregate, StatsRange, WeeklyStats
from todos import summarize

logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly")


def count_emotions(moods: Iterable[MoodEntry]) -> Dict[str, int]:
    return dict(Counter(mood.emoji for mood in moods if mood.emoji))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def aggregate_sentiment(moods: Iterable[MoodEntry]) -> Tuple[SentimentAggregate, int]:
    """Percentages of summed positive/neutral/negative probabilities.

    Positive and neutral are rounded on their own and negative takes the
    remainder (never below zero), so a non-empty result always sums to 100.
    Returns the aggregate and the number of moods that carried any AI field.
    """
    samples = [mood for mood in moods if mood.has_sentiment()]

    pos_sum = sum(mood.positive or 0 for mood in samples)
    neu_sum = sum(mood.neutral or 0 for mood in samples)
    neg_sum = sum(mood.negative or 0 for mood in samples)
    total = pos_sum + neu_sum + neg_sum

    if total <= 0:
        return SentimentAggregate(), len(samples)

    positive = _round_half_up(pos_sum / total * 100)
    neutral = _round_half_up(neu_sum / total * 100)
    negative = max(100 - positive - neutral, 0)

    return SentimentAggregate(positive=positive, neutral=neutral, negative=negative), len(samples)


def get_weekly_stats(store: JournalStore, user_id: uuid.UUID, date: DateLike = None,
                     period: str = "weekly") -> WeeklyStats:
    if period not in PERIODS:
        raise ValidationFailed(f"Unsupported period '{period}'. Use one of: {', '.join(PERIODS)}")

    bucket = bucket_for_period(period, date)

    moods = store.list_moods(user_id, bucket)
    todos = store.list_todos(user_id, bucket)

    ai_aggregate, ai_sample_count = aggregate_sentiment(moods)
    logger.debug(f"{period} stats for user {user_id}: {len(moods)} moods, {ai_sample_count} AI samples")

    return WeeklyStats(
        emotion_stats=count_emotions(moods),
        todo_stats=summarize(todos),
        ai_aggregate=ai_aggregate,
        ai_sample_count=ai_sample_count,
        period=period,
        range=StatsRange(start=bucket.start, end=bucket.end),
    )
