"""
Icebreak orchestration.

One scan produces one session document in icebreakSessions. The document is
written in "generating" state before any model call so the scanned party's
listener can show a waiting state, then completed with content for both sides:
the scanner (initiator) gets a topic plus discussion starters about the other
person, the scanned user (responder) gets advice plus things to share about
themself.
"""

import time
import queue
import json
from concurrent.futures import ThreadPoolExecutor

from enquest.errors import BadRequestError, NotFoundError
from enquest.models import (
    Event, EventParticipant, IcebreakContent, User,
    SESSION_GENERATING, SESSION_COMPLETED, SESSION_ERROR,
    ROLE_INITIATOR, ROLE_RESPONDER, now_iso, now_millis
)
from enquest.utils.logging_utils import get_logger

logger = get_logger("ICEBREAK")

TERMINAL_STATUSES = (SESSION_COMPLETED, SESSION_ERROR)


def normalize_short_code(code):
    return str(code).strip().upper()


def make_session_id(event_id, user1_id, user2_id, millis=None):
    return f"{event_id}_{user1_id}_{user2_id}_{millis if millis is not None else now_millis()}"


class IcebreakOrchestrator:
    def __init__(self, store, generator, max_workers=4):
        """
        Args:
            store: FirestoreStore
            generator: ContentGenerator
            max_workers: width of the pool each scan gets for its own model calls
        """
        self.store = store
        self.generator = generator
        self.max_workers = max_workers

    # ------------------ RESOLUTION ------------------
    def _resolve_scanned(self, user2_id, user2_code):
        if user2_code:
            code = normalize_short_code(user2_code)
            logger.debug(f"[ICEBREAK] Searching for user with short code: {code}")
            found = self.store.find_user_by_short_code(code)
            if found is None:
                raise NotFoundError("User with short code not found")
            return found[0]
        return user2_id

    def _ensure_participants(self, event_id, user1_id, user2_id):
        """
        Load both participant records, auto-joining whichever party is not yet
        in the event. Both joins go out in one batch.
        """
        data1 = self.store.get_participant(event_id, user1_id)
        data2 = self.store.get_participant(event_id, user2_id)
        if data1 is not None and data2 is not None:
            return data1, data2

        logger.info("[ICEBREAK] Adding missing participants to event")
        profile1 = self.store.get_user(user1_id)
        profile2 = self.store.get_user(user2_id)
        if profile1 is None or profile2 is None:
            raise NotFoundError("One or both users not found")

        new_records = {}
        if data1 is None:
            data1 = EventParticipant.new(User.from_doc(user1_id, profile1)).to_doc()
            new_records[user1_id] = data1
        if data2 is None:
            data2 = EventParticipant.new(User.from_doc(user2_id, profile2)).to_doc()
            new_records[user2_id] = data2
        self.store.create_participants(event_id, new_records)
        return data1, data2

    def _load_profile(self, user_id):
        data = self.store.get_user(user_id)
        if data is None:
            raise NotFoundError("One or both users not found")
        return User.from_doc(user_id, data)

    # ------------------ GENERATION ------------------
    def _generate(self, scanner, scanned, answers1, answers2, event):
        """
        Four independent calls, all in flight at once: topic + starters for the
        scanner, advice + starters for the scanned user. Generators never raise,
        so each slot resolves to either model output or fallback content.

        The pool belongs to this scan alone; concurrent scans never wait on
        each other's model calls.
        """
        start = time.time()
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="icebreak-gen") as pool:
            topic = pool.submit(self.generator.icebreak_topic, scanner, scanned, answers1, answers2, event)
            questions = pool.submit(self.generator.icebreak_questions, scanner, scanned, answers1, answers2, event)
            reverse_advice = pool.submit(self.generator.icebreak_topic, scanned, scanner, answers2, answers1, event)
            reverse_questions = pool.submit(self.generator.reverse_questions, scanner, scanned, answers1, answers2, event)

            content = IcebreakContent(
                topic=topic.result(),
                questions=questions.result(),
                reverse_advice=reverse_advice.result(),
                reverse_questions=reverse_questions.result(),
            )
        logger.info(f"[ICEBREAK] AI generation completed in {time.time() - start:.2f}s")
        return content

    # ------------------ ENTRY POINT ------------------
    def start(self, user1_id, event_id, user2_id=None, user2_code=None):
        """
        Run one icebreak between the scanner (user1) and the scanned user
        (given by id or short code) and return the response payload.

        Raises:
            BadRequestError: missing identifiers, or a user scanning themself
            NotFoundError: unknown event, short code or user
        """
        if not user1_id or not event_id or (not user2_id and not user2_code):
            raise BadRequestError("User1 ID, event ID, and either User2 ID or short code are required")

        event_data = self.store.get_event(event_id)
        if event_data is None:
            raise NotFoundError("Event not found")
        event = Event.from_doc(event_id, event_data)

        user2_id = self._resolve_scanned(user2_id, user2_code)
        if user2_id == user1_id:
            raise BadRequestError("Cannot start an icebreak with yourself")

        data1, data2 = self._ensure_participants(event_id, user1_id, user2_id)
        scanner = self._load_profile(user1_id)
        scanned = self._load_profile(user2_id)
        user1_name = scanner.name or data1.get("userName")
        user2_name = scanned.name or data2.get("userName")

        session_id = make_session_id(event_id, user1_id, user2_id)
        self.store.create_session(session_id, {
            "user1Id": user1_id,
            "user2Id": user2_id,
            "eventId": event_id,
            "status": SESSION_GENERATING,
            "createdAt": now_iso(),
            "user1Name": user1_name,
            "user2Name": user2_name,
        })
        logger.info(f"[ICEBREAK] Session {session_id} created: {user1_name} (initiator) -> {user2_name} (responder)")

        try:
            content = self._generate(
                scanner, scanned,
                data1.get("answers") or {}, data2.get("answers") or {},
                event
            )
            self.store.update_session(session_id, {
                "status": SESSION_COMPLETED,
                "icebreakData": content.to_icebreak_data(),
                "completedAt": now_iso(),
            })
        except Exception as e:
            logger.exception(f"[ICEBREAK] Session {session_id} failed: {e}")
            self._mark_failed(session_id, e)
            raise

        return {
            "sessionId": session_id,
            "topic": content.topic,
            "questions": content.questions,
            "reverseAdvice": content.reverse_advice,
            "reverseQuestions": content.reverse_questions,
            "users": {
                "user1": {"name": user1_name},
                "user2": {"name": user2_name},
            },
            "initiatorData": content.initiator_data,
            "responderData": content.responder_data,
            "roles": {
                "user1Id": user1_id,
                "user2Id": user2_id,
                "user1Role": ROLE_INITIATOR,
                "user2Role": ROLE_RESPONDER,
            },
        }

    def _mark_failed(self, session_id, error):
        try:
            self.store.update_session(session_id, {
                "status": SESSION_ERROR,
                "error": str(error),
                "failedAt": now_iso(),
            })
        except Exception as e:
            logger.error(f"[ICEBREAK] Could not mark session {session_id} as failed: {e}")

    # ------------------ READS ------------------
    def get_session(self, session_id):
        data = self.store.get_session(session_id)
        if data is None:
            raise NotFoundError("Session not found")
        return {"id": session_id, **data}

    def history_for_user(self, event_id, user_id):
        """Completed sessions the user took part in, newest first, tagged with their role."""
        sessions = []
        for _, data in self.store.list_sessions(event_id, SESSION_COMPLETED):
            if user_id not in (data.get("user1Id"), data.get("user2Id")):
                continue
            sessions.append({
                **(data.get("icebreakData") or {}),
                "users": {
                    "user1": {"name": data.get("user1Name")},
                    "user2": {"name": data.get("user2Name")},
                },
                "createdAt": data.get("createdAt"),
                "role": ROLE_INITIATOR if data.get("user1Id") == user_id else ROLE_RESPONDER,
            })
        sessions.sort(key=lambda s: s["createdAt"] or "", reverse=True)
        return sessions

    def sessions_for_event(self, event_id):
        sessions = [
            {
                "id": session_id,
                "user1Name": data.get("user1Name"),
                "user2Name": data.get("user2Name"),
                "topic": (data.get("icebreakData") or {}).get("topic"),
                "createdAt": data.get("createdAt"),
                "completedAt": data.get("completedAt"),
            }
            for session_id, data in self.store.list_sessions(event_id, SESSION_COMPLETED)
        ]
        sessions.sort(key=lambda s: s["createdAt"] or "", reverse=True)
        return sessions

    # ------------------ STREAM ------------------
    def stream_session(self, session_id, heartbeat=15.0):
        """
        Server-sent events for one session document. Yields every snapshot and
        stops after the session reaches a terminal status.
        """
        q = queue.Queue()
        watch = self.store.watch_session(session_id, q.put)
        try:
            while True:
                try:
                    data = q.get(timeout=heartbeat)
                except queue.Empty:
                    yield ": keep-alive\n\n"
                    continue
                if data is None:
                    yield f"event: missing\ndata: {json.dumps({'id': session_id})}\n\n"
                    return
                yield f"data: {json.dumps({'id': session_id, **data})}\n\n"
                if data.get("status") in TERMINAL_STATUSES:
                    return
        finally:
            watch.unsubscribe()
