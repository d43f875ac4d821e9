"""
Client for the external sentiment/advice service.

Every call is best-effort: transport errors, non-2xx answers, malformed
bodies and timeouts all come back as None so a mood write never fails
because the AI side is down.
"""
import asyncio
import logging
import os
from typing import Optional

import requests

from errors import UpstreamUnavailable
from models import Advice, Sentiment

logger = logging.getLogger(__name__)

DEFAULT_AI_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 15.0


class SentimentClient:
    """Long-lived handle to the AI service, created once per process"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or os.getenv("AI_URL") or DEFAULT_AI_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else float(os.getenv("AI_TIMEOUT", DEFAULT_TIMEOUT))
        self.session = session or requests.Session()

    def close(self):
        self.session.close()

    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise UpstreamUnavailable(f"AI service call to {path} failed: {e}")
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"AI service returned an unexpected body from {path}")
        return data

    async def _call(self, path: str, payload: dict) -> Optional[dict]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._post, path, payload),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"AI service call to {path} timed out after {self.timeout}s")
        except UpstreamUnavailable as e:
            logger.error(e.detail)
        return None

    async def analyze(self, text: Optional[str]) -> Optional[Sentiment]:
        """Sentiment probabilities for a note, or None"""
        if not text or not text.strip():
            return None

        data = await self._call("/analyze", {"text": text})
        if data is None:
            return None

        def first(*keys, default=None):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return default

        try:
            return Sentiment(
                positive=first("positive", "pos", default=0),
                neutral=first("neutral", "neu", default=0),
                negative=first("negative", "neg", default=0),
                label=first("label", "prediction"),
                model=data.get("model") or "unknown",
                version=data.get("version"),
            )
        except ValueError as e:
            logger.error(f"AI analysis response could not be parsed: {e}")
            return None

    async def advise(self, text: Optional[str], emoji: Optional[str] = None) -> Optional[Advice]:
        if not text or not text.strip():
            return None

        data = await self._call("/advice", {"text": text, "emoji": emoji or None})
        if data is None:
            return None
        try:
            return Advice(**data)
        except ValueError as e:
            logger.error(f"AI advice response could not be parsed: {e}")
            return None


def sentiment_fields(sentiment: Optional[Sentiment], advice: Optional[Advice]) -> dict:
    """Mood columns to merge into a write; empty when the service produced nothing"""
    fields = {}
    if sentiment is not None:
        fields.update({
            "positive": sentiment.positive,
            "neutral": sentiment.neutral,
            "negative": sentiment.negative,
            "ai_label": sentiment.label,
            "ai_model": sentiment.model,
            "ai_version": sentiment.version,
        })
    if advice is not None:
        fields.update({
            "ai_advice": advice.advice,
            "ai_advice_model": advice.model,
            "ai_advice_source": advice.source,
        })
    return fields


async def analyze_note(client: Optional[SentimentClient], note: Optional[str], emoji: Optional[str]) -> dict:
    """Run analysis and advice concurrently and return the mood fields they produce"""
    if client is None or not note or not note.strip():
        return {}
    sentiment, advice = await asyncio.gather(
        client.analyze(note),
        client.advise(note, emoji),
    )
    return sentiment_fields(sentiment, advice)
