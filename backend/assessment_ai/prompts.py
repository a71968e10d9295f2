"""
Prompt templates for each assessment type.

Each builder is a pure function of the (already sanitized) request fields and
returns one text payload for the model. Builders are looked up by
``AssessmentType`` so adding a type means adding one entry to ``PROMPT_BUILDERS``.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Callable, Dict, Mapping, Optional


class AssessmentType(str, Enum):
	writing = "writing"
	speaking = "speaking"
	recommendations = "recommendations"


def _require(value: str, field: str) -> str:
	if not value or not value.strip():
		raise ValueError(f"{field} is required to build this prompt")
	return value


def build_writing_prompt(level: str, task: str, response: str) -> str:
	response = _require(response, "response")
	return f"""You are an English language assessment assistant helping teachers evaluate student writing. Provide constructive feedback aligned to CEFR standards.

STUDENT LEVEL: {level}
WRITING TASK: {task or 'General writing task'}

STUDENT'S RESPONSE:
---
{response}
---

Analyze this writing and respond with ONLY valid JSON (no markdown, no code blocks):

{{
    "overallImpression": "2-3 sentences summarizing the writing quality",
    "strengths": ["strength 1", "strength 2", "strength 3"],
    "areasToImprove": ["area 1", "area 2", "area 3"],
    "grammarNotes": ["specific grammar observation 1", "observation 2"],
    "vocabularyNotes": ["vocabulary observation 1", "observation 2"],
    "coherenceNotes": "comment on organization and flow",
    "suggestedScore": {{
        "range": "X-Y out of 10",
        "reasoning": "brief justification for this range"
    }},
    "teacherTip": "one specific actionable suggestion for the teacher to discuss with student"
}}

RULES:
- Be encouraging and constructive
- Align expectations to {level} CEFR level
- Limit to 3 items per list
- This is TEACHER ASSISTANCE only, not final scoring
- Output ONLY the JSON object, nothing else"""


def build_speaking_prompt(level: str, questions: str, notes: str) -> str:
	notes = _require(notes, "notes")
	return f"""You are an English speaking assessment assistant helping teachers evaluate student speaking performance. Provide CEFR-aligned feedback.

STUDENT LEVEL: {level}
SPEAKING QUESTIONS/TOPICS: {questions or 'General speaking assessment'}

TEACHER'S OBSERVATION NOTES:
---
{notes}
---

Based on these notes, provide structured feedback as ONLY valid JSON (no markdown, no code blocks):

{{
    "fluencyAssessment": "2 sentences about speech flow, pace, and hesitation patterns",
    "pronunciationNotes": "observations on pronunciation, stress, and intonation",
    "grammarInSpeech": "grammar patterns observed in spoken responses",
    "vocabularyRange": "assessment of vocabulary use and appropriateness",
    "interactionSkills": "ability to engage, respond to questions, maintain conversation",
    "suggestedCEFR": {{
        "level": "A1 or A2 or B1 or B2 or C1",
        "confidence": "high or medium or low",
        "reasoning": "why this level seems appropriate"
    }},
    "followUpSuggestions": ["suggested follow-up question 1", "question 2"],
    "teacherTip": "one actionable suggestion for helping this student improve"
}}

RULES:
- Base assessment on teacher's notes, not assumptions
- Align to {level} expected performance
- Be specific but concise
- This is TEACHER ASSISTANCE only, not final scoring
- Output ONLY the JSON object, nothing else"""


def build_recommendations_prompt(level: str, scores: Optional[Mapping[str, float]], weak_areas: str) -> str:
	weak_areas = _require(weak_areas, "weak_areas")
	serialized_scores = json.dumps(dict(scores or {}), separators=(",", ":"))
	return f"""You are a language learning advisor. Based on assessment results, create a personalized study plan.

STUDENT LEVEL: {level}
ASSESSMENT SCORES: {serialized_scores}
IDENTIFIED WEAK AREAS: {weak_areas}

Create actionable recommendations as ONLY valid JSON (no markdown, no code blocks):

{{
    "priorityFocus": "the single most important area to focus on first",
    "weeklyPlan": {{
        "week1": "specific focus and activities for week 1",
        "week2": "specific focus and activities for week 2"
    }},
    "specificExercises": [
        {{"skill": "listening/reading/writing/speaking/grammar", "activity": "specific exercise description", "frequency": "how often"}},
        {{"skill": "...", "activity": "...", "frequency": "..."}},
        {{"skill": "...", "activity": "...", "frequency": "..."}}
    ],
    "freeResources": [
        {{"name": "resource name", "type": "website/app/youtube/book", "url": "if applicable", "why": "why this helps"}},
        {{"name": "...", "type": "...", "url": "...", "why": "..."}}
    ],
    "milestones": [
        {{"timeframe": "1 week", "goal": "achievable goal"}},
        {{"timeframe": "1 month", "goal": "achievable goal"}}
    ],
    "encouragement": "personalized motivational message based on their performance"
}}

RULES:
- Maximum 3 exercises, 2 resources
- Resources must be free and real (no made-up URLs)
- Match difficulty to {level}
- Be specific and actionable
- These are TEACHER ASSISTANCE suggestions only, not an official assessment
- Output ONLY the JSON object, nothing else"""


PromptBuilder = Callable[[str, str, str, Mapping[str, float]], str]

PROMPT_BUILDERS: Dict[AssessmentType, PromptBuilder] = {
	AssessmentType.writing: lambda level, content, context, scores: build_writing_prompt(level, context, content),
	AssessmentType.speaking: lambda level, content, context, scores: build_speaking_prompt(level, context, content),
	AssessmentType.recommendations: lambda level, content, context, scores: build_recommendations_prompt(level, scores, content),
}


def build_prompt(
	assessment_type: str,
	level: str,
	content: str,
	additional_context: str = "",
	scores: Optional[Mapping[str, float]] = None,
) -> str:
	"""Render the template for ``assessment_type``.

	``content`` is the student response (writing), the teacher's notes
	(speaking) or the weak-area description (recommendations);
	``additional_context`` is the task or question text.
	"""
	builder = PROMPT_BUILDERS[AssessmentType(assessment_type)]
	return builder(level, content, additional_context, scores or {})
