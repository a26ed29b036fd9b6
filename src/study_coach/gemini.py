"""Plan generation and progress analysis through the Gemini REST API.

Both calls follow the same contract: no API key raises ConfigurationError
before any network traffic; anything that goes wrong afterwards (transport,
HTTP status, empty or unparseable response, missing fields) raises a single
CollaboratorError.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime

import requests

from study_coach.config import AppConfig
from study_coach.errors import CollaboratorError, ConfigurationError
from study_coach.models import (
    Analysis, Checkpoint, CreateProjectInput, DIFFICULTY_LABELS, IMPORTANCE_LABELS,
    Project, TaskType,
)
from study_coach.schedule import describe_schedule

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10

CATEGORY_TO_TASK_TYPE = {
    "KNOWLEDGE": TaskType.STUDY,
    "ABILITY": TaskType.PRACTICE,
    "REVIEW": TaskType.REVIEW,
    "TEST": TaskType.TEST,
    "TEACH": TaskType.TEACH,
}

PLAN_SYSTEM_INSTRUCTION = """
You are an expert learning-science coach and study-plan architect.

GOAL:
Create a highly detailed, mastery-oriented study plan.

PLANNING RULES:
1. Organize tasks logically based on the CHAPTER TITLES provided.
2. Respect the user's schedule. Do not assign tasks on empty days.
3. Include diagnostic "Checkpoints" (short questions) to track depth of understanding.
4. Task descriptions must be actionable and specific to the chapter name.

OUTPUT:
Return valid JSON matching the provided schema.
"""

ANALYSIS_SYSTEM_INSTRUCTION = """
You are a cognitive science expert. Analyze the learning journey based on activity logs.
Focus on detecting 'Illusion of Competence'. Provide actionable feedback.
"""

PLAN_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "checkpoints": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "day_offset": {"type": "NUMBER"},
                    "when_time": {"type": "STRING"},
                    "purpose": {"type": "STRING"},
                    "questions": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "qid": {"type": "STRING"},
                                "text": {"type": "STRING"},
                                "answer_type": {"type": "STRING", "enum": ["choice", "number", "text"]},
                                "choices": {
                                    "type": "ARRAY",
                                    "items": {
                                        "type": "OBJECT",
                                        "properties": {
                                            "key": {"type": "STRING"},
                                            "label": {"type": "STRING"},
                                        },
                                    },
                                },
                            },
                            "required": ["qid", "text", "answer_type"],
                        },
                    },
                },
                "required": ["id", "day_offset", "purpose", "questions"],
            },
        },
        "plan": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "day_offset": {"type": "NUMBER"},
                    "task_desc": {"type": "STRING"},
                    "category": {
                        "type": "STRING",
                        "enum": list(CATEGORY_TO_TASK_TYPE),
                    },
                },
                "required": ["day_offset", "task_desc", "category"],
            },
        },
    },
    "required": ["checkpoints", "plan"],
}

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "learning_state": {"type": "STRING", "enum": ["Superficial", "Fragile", "Stable", "Deep"]},
        "diagnosis": {"type": "STRING"},
        "illusion_of_competence": {
            "type": "OBJECT",
            "properties": {
                "detected": {"type": "BOOLEAN"},
                "reason": {"type": "STRING"},
                "corrective_action": {"type": "STRING"},
            },
            "required": ["detected"],
        },
        "next_action": {"type": "STRING", "enum": [t.value for t in TaskType]},
        "scheduling_recommendation": {"type": "STRING"},
        "future_projection": {"type": "STRING"},
        "user_feedback": {"type": "STRING"},
        "estimated_dou": {"type": "NUMBER"},
    },
    "required": ["learning_state", "user_feedback", "estimated_dou", "next_action"],
}


@dataclass
class TaskDescriptor:
    day_offset: int
    type: TaskType
    description: str


@dataclass
class PlanResult:
    tasks: list = field(default_factory=list)
    checkpoints: list = field(default_factory=list)


def map_category(tag) -> TaskType:
    """Map a plan category tag onto a task type; unknown tags are study tasks."""
    return CATEGORY_TO_TASK_TYPE.get(str(tag or "").upper(), TaskType.STUDY)


def build_plan_prompt(project_input: CreateProjectInput, start: date) -> str:
    chapter_list = [c.strip() for c in project_input.chapters if c.strip()]
    if chapter_list:
        structure = "Chapters with titles: " + ", ".join(
            f"{i}. {title}" for i, title in enumerate(chapter_list, 1)
        )
    else:
        structure = f"Number of Chapters: {project_input.chapter_count}"
    return f"""
PROJECT DETAILS:
- Name: {project_input.name}
- Total Pages: {project_input.page_count}
- Structure: {structure}
- Difficulty: {DIFFICULTY_LABELS[project_input.difficulty]}
- Importance: {IMPORTANCE_LABELS[project_input.importance]}
- Schedule: {describe_schedule(project_input.schedule)}
- Start Date: {start.isoformat()}

Generate a 14-day sample task schedule and a set of diagnostic checkpoints.
"""


def recent_activity(project: Project, limit: int = RECENT_ACTIVITY_LIMIT) -> list[dict]:
    completed = [t for t in project.tasks if t.is_completed]
    return [
        {"type": t.type.value, "date": t.date.isoformat(), "desc": t.description}
        for t in completed[-limit:]
    ]


def build_analysis_prompt(project: Project) -> str:
    return f"""
Project: {project.name}
Chapters: {', '.join(project.chapters)}
Progress: {project.progress}%
Logs: {json.dumps(recent_activity(project), ensure_ascii=False)}
"""


def parse_plan(data: dict) -> PlanResult:
    try:
        if not isinstance(data["plan"], list) or not isinstance(data["checkpoints"], list):
            raise TypeError("plan and checkpoints must be lists")
        tasks = [
            TaskDescriptor(
                day_offset=int(item["day_offset"]),
                type=map_category(item.get("category")),
                description=str(item["task_desc"]),
            )
            for item in data["plan"]
        ]
        checkpoints = [
            Checkpoint.from_dict({**cp, "isCompleted": False})
            for cp in data["checkpoints"]
        ]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CollaboratorError(f"Malformed study plan: {e}") from e
    return PlanResult(tasks=tasks, checkpoints=checkpoints)


def parse_analysis(data: dict) -> Analysis:
    try:
        analysis = Analysis.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CollaboratorError(f"Malformed progress analysis: {e}") from e
    analysis.analyzed_at = datetime.now().isoformat()
    return analysis


class GeminiClient:
    """Plan generator and progress analyzer backed by Gemini generateContent."""

    def __init__(self, api_key: str | None, model: str, base_url: str, timeout: float | None = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: AppConfig) -> "GeminiClient":
        return cls(config.api_key, config.model, config.base_url, config.request_timeout)

    def _generate(self, system_instruction: str, prompt: str, schema: dict) -> dict:
        if not self.api_key:
            raise ConfigurationError("API key is not set. Add your Gemini API key in settings.")
        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }
        logger.info("Calling %s", self.model)
        try:
            resp = requests.post(
                url,
                headers={"x-goog-api-key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            logger.warning("Gemini request failed: %s", e)
            raise CollaboratorError(f"Request to {self.model} failed: {e}") from e
        except ValueError as e:
            raise CollaboratorError(f"{self.model} returned a non-JSON response") from e

        try:
            text = "".join(
                part.get("text", "")
                for part in payload["candidates"][0]["content"]["parts"]
            )
        except (KeyError, IndexError, TypeError) as e:
            reason = (payload.get("promptFeedback") or {}).get("blockReason") if isinstance(payload, dict) else None
            logger.warning("Gemini returned no usable candidate (%s)", reason or "empty")
            raise CollaboratorError(f"{self.model} returned no content" + (f" ({reason})" if reason else "")) from e
        if not text.strip():
            logger.warning("Gemini returned an empty candidate")
            raise CollaboratorError(f"{self.model} returned no content")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Gemini returned invalid JSON: %s", e)
            raise CollaboratorError(f"{self.model} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CollaboratorError(f"{self.model} returned {type(data).__name__}, expected an object")
        return data

    def generate_study_plan(self, project_input: CreateProjectInput, start: date | None = None) -> PlanResult:
        start = start or date.today()
        data = self._generate(PLAN_SYSTEM_INSTRUCTION, build_plan_prompt(project_input, start), PLAN_SCHEMA)
        plan = parse_plan(data)
        logger.info("Received %d tasks and %d checkpoints", len(plan.tasks), len(plan.checkpoints))
        return plan

    def analyze_learning_progress(self, project: Project) -> Analysis:
        data = self._generate(ANALYSIS_SYSTEM_INSTRUCTION, build_analysis_prompt(project), ANALYSIS_SCHEMA)
        return parse_analysis(data)
