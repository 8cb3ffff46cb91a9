import random
import string

from enquest.errors import BadRequestError, NotFoundError
from enquest.models import EventParticipant, User, ROLES, ROLE_PARTICIPANT, now_iso
from enquest.prompts.survey_prompts import DEFAULT_EVENT_SURVEY
from enquest.services.content_generator import fallback_missions
from enquest.utils.logging_utils import get_logger

logger = get_logger("DIRECTORY")

SHORT_CODE_ALPHABET = string.ascii_uppercase + string.digits
SHORT_CODE_LENGTH = 6
SHORT_CODE_ATTEMPTS = 10

PROFILE_FIELDS = (
    "name", "department", "email", "age", "gender", "favoriteFood",
    "hobbies", "hometown", "musicGenre", "currentInterest", "message",
)


def generate_short_code(rng=random):
    return "".join(rng.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))


class Directory:
    """Users, events and event membership."""

    def __init__(self, store, identity):
        self.store = store
        self.identity = identity

    def unique_short_code(self):
        for _ in range(SHORT_CODE_ATTEMPTS):
            code = generate_short_code()
            if not self.store.short_code_exists(code):
                return code
            logger.warning(f"[SHORTCODE] Collision on {code}, retrying")
        raise RuntimeError("Could not allocate a unique short code")

    # ------------------ USERS ------------------
    def create_user(self, email, password, name, department, role=ROLE_PARTICIPANT):
        if role not in ROLES:
            raise BadRequestError("Valid role (admin or participant) is required")

        uid, stored_email = self.identity.create_user(email, password)
        short_code = self.unique_short_code()
        self.store.set_user(uid, {
            "name": name,
            "email": stored_email or email,
            "department": department,
            "role": role,
            "shortCode": short_code,
            "createdAt": now_iso(),
        })
        logger.info(f"[USERS] Created {uid} ({role}) with short code {short_code}")
        return uid, short_code

    def list_users(self):
        return [{"id": uid, **data} for uid, data in self.store.list_users()]

    def get_user(self, user_id):
        data = self.store.get_user(user_id)
        if data is None:
            raise NotFoundError("User not found")
        if not data.get("shortCode"):
            short_code = self.unique_short_code()
            self.store.update_user(user_id, {"shortCode": short_code})
            data = {**data, "shortCode": short_code}
            logger.info(f"[USERS] Backfilled short code for {user_id}")
        return {"id": user_id, **data}

    def get_user_by_short_code(self, code):
        found = self.store.find_user_by_short_code(str(code).strip().upper())
        if found is None:
            raise NotFoundError("User not found")
        user_id, data = found
        return {"id": user_id, **data}

    def update_profile(self, user_id, fields):
        if self.store.get_user(user_id) is None:
            raise NotFoundError("User not found")

        updates = {key: fields[key] for key in PROFILE_FIELDS if key in fields}
        if "email" in updates:
            try:
                self.identity.update_email(user_id, updates["email"])
            except Exception as e:
                # The profile document is still updated
                logger.error(f"[USERS] Error updating auth email for {user_id}: {e}")
        updates["profileUpdatedAt"] = now_iso()
        self.store.update_user(user_id, updates)

    def update_role(self, user_id, role):
        if not role or role not in ROLES:
            raise BadRequestError("Valid role (admin or participant) is required")
        if self.store.get_user(user_id) is None:
            raise NotFoundError("User not found")
        self.store.update_user(user_id, {"role": role})

    def delete_user(self, user_id):
        self.identity.delete_user(user_id)
        self.store.delete_user_cascade(user_id)

    # ------------------ EVENTS ------------------
    def create_event(self, event_name):
        event_id = self.store.add_event({
            "eventName": event_name,
            "isActive": True,
            "surveyQuestions": [dict(q) for q in DEFAULT_EVENT_SURVEY],
            "createdAt": now_iso(),
        })
        logger.info(f"[EVENTS] Created {event_id} '{event_name}'")
        return event_id

    def list_events(self):
        return [
            {"id": event_id, **data, "participantCount": self.store.count_participants(event_id)}
            for event_id, data in self.store.list_events()
        ]

    def active_event(self):
        """
        First event flagged active. Nothing stops several events from being
        active at once; the rest are ignored here and logged.
        """
        active = self.store.list_active_events()
        if not active:
            raise NotFoundError("No active event found")
        if len(active) > 1:
            logger.warning(f"[EVENTS] {len(active)} active events; returning {active[0][0]}")
        event_id, data = active[0]
        return {"id": event_id, **data}

    def update_event(self, event_id, fields):
        if self.store.get_event(event_id) is None:
            raise NotFoundError("Event not found")
        updates = {}
        if isinstance(fields.get("isActive"), bool):
            updates["isActive"] = fields["isActive"]
        if fields.get("eventName"):
            updates["eventName"] = fields["eventName"]
        if fields.get("surveyQuestions") is not None:
            updates["surveyQuestions"] = fields["surveyQuestions"]
        if updates:
            self.store.update_event(event_id, updates)

    def delete_event(self, event_id):
        self.store.delete_event_cascade(event_id)

    # ------------------ PARTICIPANTS ------------------
    def list_participants(self, event_id):
        participants = []
        for user_id, data in self.store.list_participants(event_id):
            user_data = self.store.get_user(user_id) or {}
            participants.append({"id": user_id, **data, "userName": user_data.get("name") or data.get("userName")})
        return participants

    def add_participant(self, event_id, user_id):
        """
        Join a user to an event. Admins get the default board and can play
        right away; everyone else waits for an admin to generate missions.
        """
        user_data = self.store.get_user(user_id)
        if user_data is None:
            raise NotFoundError("User not found")
        user = User.from_doc(user_id, user_data)

        if user.is_admin:
            participant = EventParticipant.new(user, board=fallback_missions(), ready=True)
        else:
            participant = EventParticipant.new(user)
        self.store.set_participant(event_id, user_id, participant.to_doc())
        logger.info(f"[PARTICIPANTS] {user_id} joined event {event_id}")

    def remove_participant(self, event_id, user_id):
        self.store.delete_participant(event_id, user_id)

    def save_answers(self, event_id, user_id, answers):
        """
        Store survey answers as answer1..answerN. The current board no longer
        reflects the answers, so bingoReady drops until an admin regenerates.
        """
        if self.store.get_user(user_id) is None:
            raise NotFoundError("User not found")
        if self.store.get_participant(event_id, user_id) is None:
            raise NotFoundError("Participant not found")

        answers_doc = {f"answer{i + 1}": item.get("answer") for i, item in enumerate(answers)}
        self.store.update_participant(event_id, user_id, {"answers": answers_doc, "bingoReady": False})

    # ------------------ ADMIN ------------------
    def stats(self):
        events = self.store.list_events()
        unique_participants = set()
        for event_id, _ in events:
            unique_participants.update(user_id for user_id, _ in self.store.list_participants(event_id))
        return {
            "totalEvents": len(events),
            "activeEvents": sum(1 for _, data in events if data.get("isActive")),
            "uniqueParticipants": len(unique_participants),
        }
