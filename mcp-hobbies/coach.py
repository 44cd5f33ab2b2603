"""AI coaching and hobby suggestions via the OpenAI chat completions API.

Both calls are best effort: any failure is logged and replaced by a static
fallback so the rest of the service keeps working without the remote model.
"""

import json
import logging
import os
import re
from datetime import datetime
from typing import Any, Optional

from openai import OpenAI

from models import AIAdvice, AISuggestion, Hobby
from progress import evaluate_progress

logger = logging.getLogger(__name__)

DEFAULT_MODEL = os.getenv("COACH_MODEL", "gpt-4.1-mini")

RECENT_LOG_COUNT = 5

FALLBACK_ADVICE = AIAdvice(
    tip="Consistency is key! Keep going.",
    motivation="Every expert was once a beginner.",
    challenge="Just show up for 5 minutes today.",
)

SYSTEM_PROMPT = "You are a friendly hobby coach. You always answer with valid JSON only."

COACHING_PROMPT = """I am tracking a hobby called "{name}".
Description: {description}.
Current goal: {count}/{target} sessions ({window}). Status: {status}.
My recent activity logs: {logs}.

Based on this, return a JSON object with exactly these string keys:
"tip": a practical improvement tip.
"motivation": a motivational quote or sentence specific to my progress.
"challenge": a small, achievable challenge for my next session."""

SUGGESTION_PROMPT = """I am looking for new hobbies. My interests are: "{interests}".
Suggest {count} unique hobbies that I might like.

Return a JSON object of the form
{{"suggestions": [{{"name": "...", "description": "...", "reason": "..."}}]}}"""


class CoachClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 600,
        client: Any = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client
        if self.client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if api_key:
                self.client = OpenAI(api_key=api_key)
            else:
                logger.warning("OPENAI_API_KEY is not set, coaching will use fallback text")

    def get_hobby_coaching(self, hobby: Hobby, now: Optional[datetime] = None) -> AIAdvice:
        """Tip, motivation and challenge for a hobby based on its recent logs."""
        progress = evaluate_progress(hobby, now or datetime.now().astimezone())
        recent = [
            {"date": l.date.isoformat(), "duration": l.duration_minutes, "notes": l.notes}
            for l in hobby.logs[-RECENT_LOG_COUNT:]
        ]
        prompt = COACHING_PROMPT.format(
            name=hobby.name,
            description=hobby.description,
            count=progress.completed_count,
            target=progress.target,
            window=progress.window_label,
            status=progress.status,
            logs=json.dumps(recent),
        )
        try:
            data = self._complete(prompt)
            return AIAdvice.model_validate(data)
        except Exception as e:
            logger.error("Coaching request failed: %s", e)
            return FALLBACK_ADVICE.model_copy()

    def suggest_new_hobbies(self, interests: str, count: int = 3) -> list[AISuggestion]:
        if not interests.strip():
            return []
        prompt = SUGGESTION_PROMPT.format(interests=interests.strip(), count=count)
        try:
            data = self._complete(prompt)
            if isinstance(data, dict):
                data = data.get("suggestions", [])
            if not isinstance(data, list):
                raise ValueError(f"unexpected suggestion payload: {data!r}")
            return [AISuggestion.model_validate(item) for item in data]
        except Exception as e:
            logger.error("Suggestion request failed: %s", e)
            return []

    def _complete(self, prompt: str) -> Any:
        if self.client is None:
            raise RuntimeError("no OpenAI client configured")
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )
        text = response.choices[0].message.content
        if not text:
            raise ValueError("empty response from model")
        logger.debug("Model response: %s", text)
        return self._parse_json(text)

    @staticmethod
    def _parse_json(text: str) -> Any:
        # Strip ```json fences some models add despite the JSON response format.
        text = re.sub(r"```(?:json)?\s*", "", text).strip()
        return json.loads(text)
