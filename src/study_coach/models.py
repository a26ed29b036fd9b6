"""Data classes for the study coach domain model."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Importance(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskType(str, Enum):
    STUDY = "STUDY"
    REVIEW = "REVIEW"
    TEST = "TEST"
    PRACTICE = "PRACTICE"
    TEACH = "TEACH"


class Phase(str, Enum):
    EDUCATION = "EDUCATION"
    PRACTICE = "PRACTICE"
    CONSOLIDATION = "CONSOLIDATION"
    MASTERY = "MASTERY"


class LearningState(str, Enum):
    SUPERFICIAL = "Superficial"
    FRAGILE = "Fragile"
    STABLE = "Stable"
    DEEP = "Deep"


class AnswerType(str, Enum):
    CHOICE = "choice"
    NUMBER = "number"
    TEXT = "text"


class PlacementPolicy(str, Enum):
    """How many tasks a project may hold on one calendar day."""
    MULTI_PER_DAY = "multi"
    SINGLE_PER_DAY = "single"


def require_total(table: dict, enum_cls: type) -> dict:
    """Return table unchanged, or raise if it misses a member of enum_cls."""
    missing = [member for member in enum_cls if member not in table]
    if missing:
        raise TypeError(f"{enum_cls.__name__} labels missing: {missing}")
    return table


TASK_TYPE_LABELS = require_total({
    TaskType.STUDY: "Study",
    TaskType.REVIEW: "Review",
    TaskType.TEST: "Test",
    TaskType.PRACTICE: "Practice",
    TaskType.TEACH: "Teach",
}, TaskType)

PHASE_LABELS = require_total({
    Phase.EDUCATION: "Education",
    Phase.PRACTICE: "Practice",
    Phase.CONSOLIDATION: "Consolidation",
    Phase.MASTERY: "Deep Mastery",
}, Phase)

DIFFICULTY_LABELS = require_total({
    Difficulty.EASY: "Easy",
    Difficulty.MEDIUM: "Medium",
    Difficulty.HARD: "Hard",
}, Difficulty)

IMPORTANCE_LABELS = require_total({
    Importance.LOW: "Low",
    Importance.MEDIUM: "Medium",
    Importance.HIGH: "High",
}, Importance)

LEARNING_STATE_LABELS = require_total({
    LearningState.SUPERFICIAL: "Superficial",
    LearningState.FRAGILE: "Fragile",
    LearningState.STABLE: "Stable",
    LearningState.DEEP: "Deep",
}, LearningState)

# Persian week: 0 = Saturday ... 6 = Friday
WEEKDAY_LABELS = (
    "Saturday", "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
)


def parse_day(value) -> date:
    """Parse a stored task date. Full ISO datetimes reduce to their local civil date."""
    if isinstance(value, datetime):
        return value.astimezone().date() if value.tzinfo else value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if "T" not in text:
        return date.fromisoformat(text)
    moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    return moment.astimezone().date() if moment.tzinfo else moment.date()


@dataclass
class TimeRange:
    start: str = "09:00"
    end: str = "10:00"

    def to_dict(self) -> dict:
        return {"startTime": self.start, "endTime": self.end}

    @classmethod
    def from_dict(cls, data: dict) -> "TimeRange":
        return cls(start=data.get("startTime", "09:00"), end=data.get("endTime", "10:00"))


@dataclass
class Schedule:
    is_daily: bool = True
    routine: Optional[TimeRange] = field(default_factory=TimeRange)
    weekly_custom: dict = field(default_factory=dict)  # weekday index -> TimeRange

    def to_dict(self) -> dict:
        return {
            "isDaily": self.is_daily,
            "routine": self.routine.to_dict() if self.routine else None,
            "weeklyCustom": {str(day): r.to_dict() for day, r in sorted(self.weekly_custom.items())},
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Schedule":
        if not data:
            return cls()
        routine = data.get("routine")
        weekly = {
            int(day): TimeRange.from_dict(r)
            for day, r in (data.get("weeklyCustom") or {}).items()
            if r
        }
        return cls(
            is_daily=bool(data.get("isDaily", True)),
            routine=TimeRange.from_dict(routine) if routine else None,
            weekly_custom=weekly,
        )


@dataclass
class Task:
    id: str
    project_id: str
    date: date
    type: TaskType
    description: str
    is_completed: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "description": self.description,
            "isCompleted": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        return cls(
            id=data["id"],
            project_id=data.get("projectId", ""),
            date=parse_day(data["date"]),
            type=TaskType(data["type"]),
            description=data.get("description", ""),
            is_completed=bool(data.get("isCompleted", False)),
        )


@dataclass
class ChoiceOption:
    key: str
    label: str


@dataclass
class Question:
    qid: str
    text: str
    answer_type: AnswerType = AnswerType.TEXT
    choices: list = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {"qid": self.qid, "text": self.text, "answer_type": self.answer_type.value}
        if self.choices:
            data["choices"] = [{"key": c.key, "label": c.label} for c in self.choices]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            qid=str(data["qid"]),
            text=data["text"],
            answer_type=AnswerType(data.get("answer_type", "text")),
            choices=[ChoiceOption(key=str(c["key"]), label=c["label"]) for c in data.get("choices") or []],
        )


@dataclass
class Checkpoint:
    id: str
    day_offset: int
    purpose: str
    questions: list = field(default_factory=list)
    when_time: Optional[str] = None
    is_completed: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "day_offset": self.day_offset,
            "when_time": self.when_time,
            "purpose": self.purpose,
            "questions": [q.to_dict() for q in self.questions],
            "isCompleted": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Checkpoint":
        return cls(
            id=str(data["id"]),
            day_offset=int(data["day_offset"]),
            purpose=data.get("purpose", ""),
            questions=[Question.from_dict(q) for q in data.get("questions") or []],
            when_time=data.get("when_time"),
            is_completed=bool(data.get("isCompleted", False)),
        )


@dataclass
class IllusionOfCompetence:
    detected: bool = False
    reason: Optional[str] = None
    corrective_action: Optional[str] = None


@dataclass
class Analysis:
    """Result of the progress analyzer, stored verbatim on the project."""
    learning_state: LearningState
    user_feedback: str
    estimated_dou: float
    next_action: TaskType
    diagnosis: str = ""
    illusion_of_competence: IllusionOfCompetence = field(default_factory=IllusionOfCompetence)
    scheduling_recommendation: str = ""
    future_projection: str = ""
    analyzed_at: Optional[str] = None

    def to_dict(self) -> dict:
        ioc = self.illusion_of_competence
        return {
            "learning_state": self.learning_state.value,
            "diagnosis": self.diagnosis,
            "illusion_of_competence": {
                "detected": ioc.detected,
                "reason": ioc.reason,
                "corrective_action": ioc.corrective_action,
            },
            "next_action": self.next_action.value,
            "scheduling_recommendation": self.scheduling_recommendation,
            "future_projection": self.future_projection,
            "user_feedback": self.user_feedback,
            "estimated_dou": self.estimated_dou,
            "analyzedAt": self.analyzed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Analysis":
        ioc = data.get("illusion_of_competence") or {}
        return cls(
            learning_state=LearningState(data["learning_state"]),
            user_feedback=data["user_feedback"],
            estimated_dou=float(data["estimated_dou"]),
            next_action=TaskType(data["next_action"]),
            diagnosis=data.get("diagnosis") or "",
            illusion_of_competence=IllusionOfCompetence(
                detected=bool(ioc.get("detected", False)),
                reason=ioc.get("reason"),
                corrective_action=ioc.get("corrective_action"),
            ),
            scheduling_recommendation=data.get("scheduling_recommendation") or "",
            future_projection=data.get("future_projection") or "",
            analyzed_at=data.get("analyzedAt"),
        )


@dataclass
class CreateProjectInput:
    name: str
    page_count: int = 100
    chapter_count: int = 5
    chapters: list = field(default_factory=lambda: [""] * 5)
    difficulty: Difficulty = Difficulty.MEDIUM
    importance: Importance = Importance.MEDIUM
    schedule: Schedule = field(default_factory=Schedule)


@dataclass
class Project:
    id: str
    name: str
    page_count: int
    chapter_count: int
    difficulty: Difficulty
    importance: Importance
    created_at: str
    chapters: list = field(default_factory=list)
    schedule: Schedule = field(default_factory=Schedule)
    color: str = "indigo"
    current_phase: Phase = Phase.EDUCATION
    progress: int = 0
    tasks: list = field(default_factory=list)
    checkpoints: list = field(default_factory=list)
    last_analysis: Optional[Analysis] = None

    @property
    def created_on(self) -> date:
        return parse_day(self.created_at)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "pageCount": self.page_count,
            "chapterCount": self.chapter_count,
            "chapters": list(self.chapters),
            "difficulty": self.difficulty.value,
            "importance": self.importance.value,
            "schedule": self.schedule.to_dict(),
            "color": self.color,
            "createdAt": self.created_at,
            "currentPhase": self.current_phase.value,
            "progress": self.progress,
            "tasks": [t.to_dict() for t in self.tasks],
            "checkpoints": [c.to_dict() for c in self.checkpoints],
            "lastAnalysis": self.last_analysis.to_dict() if self.last_analysis else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        chapters = data.get("chapters") or []
        analysis = data.get("lastAnalysis")
        return cls(
            id=data["id"],
            name=data["name"],
            page_count=int(data.get("pageCount", 0)),
            chapter_count=int(data.get("chapterCount", len(chapters))),
            chapters=list(chapters),
            difficulty=Difficulty(data.get("difficulty", "MEDIUM")),
            importance=Importance(data.get("importance", "MEDIUM")),
            schedule=Schedule.from_dict(data.get("schedule")),
            color=data.get("color", "indigo"),
            created_at=data["createdAt"],
            current_phase=Phase(data.get("currentPhase", "EDUCATION")),
            progress=int(data.get("progress", 0)),
            tasks=[Task.from_dict(t) for t in data.get("tasks") or []],
            checkpoints=[Checkpoint.from_dict(c) for c in data.get("checkpoints") or []],
            last_analysis=Analysis.from_dict(analysis) if analysis else None,
        )
