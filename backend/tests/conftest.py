"""
pytest configuration – fake model client, controllable clock and app fixtures.
"""
from __future__ import annotations

import asyncio
import json
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from assessment_ai.main import create_app
from assessment_ai.settings import Settings


WRITING_FEEDBACK = {
    "overallImpression": "A short, understandable sentence with a tense error.",
    "strengths": ["Clear meaning", "Correct word order"],
    "areasToImprove": ["Past simple", "Sentence length"],
    "grammarNotes": ["'go' should be 'went' with 'yesterday'"],
    "vocabularyNotes": ["Basic everyday vocabulary"],
    "coherenceNotes": "Single sentence, no linking needed.",
    "suggestedScore": {"range": "4-5 out of 10", "reasoning": "Meaning is clear, tense is wrong."},
    "teacherTip": "Practise past time markers with regular and irregular verbs.",
}

RECOMMENDATIONS_FEEDBACK = {
    "priorityFocus": "Writing accuracy",
    "weeklyPlan": {"week1": "Past tenses", "week2": "Paragraph structure"},
    "specificExercises": [
        {"skill": "writing", "activity": "Daily journal", "frequency": "daily"},
        {"skill": "grammar", "activity": "Tense drills", "frequency": "3x week"},
        {"skill": "speaking", "activity": "Retell a story", "frequency": "2x week"},
    ],
    "freeResources": [
        {"name": "BBC Learning English", "type": "website", "url": "https://www.bbc.co.uk/learningenglish", "why": "Graded lessons"},
        {"name": "British Council LearnEnglish", "type": "website", "url": "https://learnenglish.britishcouncil.org", "why": "Grammar practice"},
    ],
    "milestones": [{"timeframe": "1 week", "goal": "Use past simple correctly"}],
    "encouragement": "Your speaking is already solid; writing will follow.",
}


class FakeClock:
    """Wall-clock milliseconds that only move when told to."""

    def __init__(self, start: float = 1_700_000_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeModelClient:
    def __init__(self, reply: str = "", error: Optional[BaseException] = None, delay: float = 0.0) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []
        self.closed = 0

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        self.closed += 1


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_model() -> FakeModelClient:
    return FakeModelClient(reply=json.dumps(WRITING_FEEDBACK))


@pytest.fixture
def app(settings, fake_model, clock):
    return create_app(settings, client_factory=lambda _s: fake_model, clock=clock)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
