"""
Entity records for the EnQuest document store.

Documents are plain dicts in Firestore; these dataclasses are the typed view
used inside the services. Each record knows how to build itself from a stored
document (tolerating legacy or partial shapes) and how to serialise back to the
exact key spelling the clients read.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

BOARD_SIZE = 9

ROLE_ADMIN = "admin"
ROLE_PARTICIPANT = "participant"
ROLES = (ROLE_ADMIN, ROLE_PARTICIPANT)

SESSION_GENERATING = "generating"
SESSION_COMPLETED = "completed"
SESSION_ERROR = "error"

ROLE_INITIATOR = "initiator"
ROLE_RESPONDER = "responder"

MISSION_CATEGORIES = ("conversation", "photo", "discovery", "experience")
DEFAULT_MISSION_CATEGORY = "conversation"

# Older boards stored a "type" tag with a different vocabulary
LEGACY_MISSION_TYPES = {
    "talk": "conversation",
    "find": "discovery",
    "photo": "photo",
    "experience": "experience",
}


def now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def now_millis():
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def empty_completion():
    return [False] * BOARD_SIZE


@dataclass
class BingoMission:
    text: str
    category: str = DEFAULT_MISSION_CATEGORY

    @classmethod
    def from_raw(cls, raw):
        """
        Normalise one mission as produced by the model or stored by an older
        client: a bare string, {text, category} or legacy {text, type}.
        Returns None for entries with no usable text.
        """
        if isinstance(raw, str):
            text = raw.strip()
            return cls(text=text) if text else None

        if isinstance(raw, dict):
            text = str(raw.get("text") or "").strip()
            if not text:
                return None
            category = raw.get("category")
            if not category and raw.get("type"):
                category = LEGACY_MISSION_TYPES.get(str(raw["type"]).lower())
            category = str(category).lower() if category else DEFAULT_MISSION_CATEGORY
            if category not in MISSION_CATEGORIES:
                category = DEFAULT_MISSION_CATEGORY
            return cls(text=text, category=category)

        if raw is None:
            return None
        text = str(raw).strip()
        return cls(text=text) if text else None

    def to_dict(self):
        return {"text": self.text, "category": self.category}


@dataclass
class SurveyQuestion:
    id: int
    question: str

    @classmethod
    def from_dict(cls, data):
        return cls(id=data.get("id"), question=data.get("question", ""))

    def to_dict(self):
        return {"id": self.id, "question": self.question}


@dataclass
class User:
    id: str
    name: str = ""
    department: str = ""
    email: str = ""
    role: str = ROLE_PARTICIPANT
    short_code: Optional[str] = None
    age: Optional[str] = None
    gender: Optional[str] = None
    hobbies: Optional[str] = None
    hometown: Optional[str] = None
    favorite_food: Optional[str] = None
    music_genre: Optional[str] = None
    current_interest: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_doc(cls, user_id, data):
        data = data or {}
        return cls(
            id=user_id,
            name=data.get("name") or "",
            department=data.get("department") or "",
            email=data.get("email") or "",
            role=data.get("role") or ROLE_PARTICIPANT,
            short_code=data.get("shortCode"),
            age=data.get("age"),
            gender=data.get("gender"),
            hobbies=data.get("hobbies"),
            hometown=data.get("hometown"),
            favorite_food=data.get("favoriteFood"),
            music_genre=data.get("musicGenre"),
            current_interest=data.get("currentInterest"),
            message=data.get("message"),
        )

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def profile_fields(self):
        """Prompt-facing profile attributes, in display order."""
        return [
            ("Department", self.department),
            ("Age", self.age),
            ("Gender", self.gender),
            ("Hobbies", self.hobbies),
            ("Hometown", self.hometown),
            ("Favorite food", self.favorite_food),
        ]


@dataclass
class Event:
    id: str
    event_name: str = ""
    is_active: bool = False
    survey_questions: List[SurveyQuestion] = field(default_factory=list)
    created_at: Optional[str] = None

    @classmethod
    def from_doc(cls, event_id, data):
        data = data or {}
        return cls(
            id=event_id,
            event_name=data.get("eventName") or "",
            is_active=bool(data.get("isActive")),
            survey_questions=[
                SurveyQuestion.from_dict(q) for q in data.get("surveyQuestions") or []
                if isinstance(q, dict)
            ],
            created_at=data.get("createdAt"),
        )


@dataclass
class EventParticipant:
    user_id: str
    user_name: Optional[str] = None
    answers: Dict[str, Any] = field(default_factory=dict)
    bingo_board: List[BingoMission] = field(default_factory=list)
    bingo_completed: List[bool] = field(default_factory=empty_completion)
    has_bingo: bool = False
    bingo_achieved_at: Optional[str] = None
    bingo_ready: bool = False
    photo_uploads: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None

    @classmethod
    def from_doc(cls, user_id, data):
        data = data or {}
        board = [BingoMission.from_raw(m) for m in data.get("bingoBoard") or []]
        return cls(
            user_id=data.get("userId") or user_id,
            user_name=data.get("userName"),
            answers=dict(data.get("answers") or {}),
            bingo_board=[m for m in board if m is not None],
            bingo_completed=normalize_completion(data.get("bingoCompleted")),
            has_bingo=bool(data.get("hasBingo")),
            bingo_achieved_at=data.get("bingoAchievedAt"),
            bingo_ready=bool(data.get("bingoReady")),
            photo_uploads=dict(data.get("photoUploads") or {}),
            created_at=data.get("createdAt"),
        )

    @classmethod
    def new(cls, user, board=None, ready=False):
        return cls(
            user_id=user.id,
            user_name=user.name,
            bingo_board=list(board or []),
            bingo_ready=ready,
            created_at=now_iso(),
        )

    def to_doc(self):
        doc = {
            "userId": self.user_id,
            "userName": self.user_name,
            "answers": dict(self.answers),
            "bingoBoard": [m.to_dict() for m in self.bingo_board],
            "bingoCompleted": list(self.bingo_completed),
            "bingoReady": self.bingo_ready,
            "createdAt": self.created_at or now_iso(),
        }
        if self.has_bingo:
            doc["hasBingo"] = True
            doc["bingoAchievedAt"] = self.bingo_achieved_at
        return doc

    @property
    def completed_count(self):
        return sum(1 for cell in self.bingo_completed if cell)


@dataclass
class IcebreakContent:
    """The four generated artifacts of one scan."""

    topic: str
    questions: List[str]
    reverse_advice: str
    reverse_questions: List[str]

    @property
    def initiator_data(self):
        return {"topic": self.topic, "questions": list(self.questions)}

    @property
    def responder_data(self):
        return {"topic": self.reverse_advice, "questions": list(self.reverse_questions)}

    def to_icebreak_data(self):
        return {
            "topic": self.topic,
            "questions": list(self.questions),
            "reverseAdvice": self.reverse_advice,
            "reverseQuestions": list(self.reverse_questions),
            "user1Role": ROLE_INITIATOR,
            "user2Role": ROLE_RESPONDER,
            "initiatorData": self.initiator_data,
            "responderData": self.responder_data,
        }


def normalize_completion(raw):
    """Coerce a stored completion vector to exactly BOARD_SIZE booleans."""
    cells = [bool(c) for c in (raw or [])][:BOARD_SIZE]
    return cells + [False] * (BOARD_SIZE - len(cells))
