import firebase_admin
from firebase_admin import credentials, firestore, auth

from enquest.utils.logging_utils import get_logger

logger = get_logger("FIRESTORE")

# ============================================
# COLLECTIONS
# ============================================
COLLECTION_USERS = "users"
COLLECTION_EVENTS = "events"
COLLECTION_PARTICIPANTS = "event_participants"
COLLECTION_SESSIONS = "icebreakSessions"
COLLECTION_CHAT_HISTORY = "chatHistory"

DELETE_FIELD = firestore.DELETE_FIELD

# Firestore rejects a batch holding more writes than this
BATCH_LIMIT = 500


def initialize_firebase(config):
    """Initialise the default Firebase app from the configured service account."""
    try:
        cred = credentials.Certificate(config.service_account_info())
        app = firebase_admin.initialize_app(cred)
        logger.info("Firebase initialized successfully")
        return app
    except Exception as e:
        logger.error(f"Firebase initialization failed: {e}")
        raise


class FirebaseIdentity:
    """Credential store operations backed by Firebase Authentication."""

    def __init__(self, app=None):
        self.app = app

    def create_user(self, email, password):
        record = auth.create_user(email=email, password=password, app=self.app)
        return record.uid, record.email

    def update_email(self, uid, email):
        auth.update_user(uid, email=email, app=self.app)

    def delete_user(self, uid):
        auth.delete_user(uid, app=self.app)


class FirestoreStore:
    """
    All document reads and writes go through this class. It holds no state
    besides the client, so every call reflects the current store contents.
    """

    def __init__(self, db):
        self.db = db

    @classmethod
    def from_app(cls, app=None):
        return cls(firestore.client(app))

    # ---------------- REFERENCES ----------------
    def _user_ref(self, user_id):
        return self.db.collection(COLLECTION_USERS).document(user_id)

    def _event_ref(self, event_id):
        return self.db.collection(COLLECTION_EVENTS).document(event_id)

    def _participants(self, event_id):
        return self._event_ref(event_id).collection(COLLECTION_PARTICIPANTS)

    def _participant_ref(self, event_id, user_id):
        return self._participants(event_id).document(user_id)

    def _session_ref(self, session_id):
        return self.db.collection(COLLECTION_SESSIONS).document(session_id)

    def _delete_in_batches(self, refs):
        """Delete every reference, committing a new batch each BATCH_LIMIT writes."""
        batch = self.db.batch()
        pending = 0
        for ref in refs:
            batch.delete(ref)
            pending += 1
            if pending == BATCH_LIMIT:
                batch.commit()
                batch = self.db.batch()
                pending = 0
        if pending:
            batch.commit()

    @staticmethod
    def _snapshot_dict(snapshot):
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    # ---------------- USERS ----------------
    def get_user(self, user_id):
        return self._snapshot_dict(self._user_ref(user_id).get())

    def set_user(self, user_id, data):
        self._user_ref(user_id).set(data)

    def update_user(self, user_id, updates):
        self._user_ref(user_id).update(updates)

    def list_users(self):
        return [(doc.id, doc.to_dict() or {}) for doc in self.db.collection(COLLECTION_USERS).stream()]

    def find_user_by_short_code(self, short_code):
        """Returns (user_id, data) of the first user holding the code, or None."""
        docs = list(
            self.db.collection(COLLECTION_USERS).where("shortCode", "==", short_code).limit(1).stream()
        )
        if not docs:
            return None
        return docs[0].id, docs[0].to_dict() or {}

    def short_code_exists(self, short_code):
        return self.find_user_by_short_code(short_code) is not None

    def delete_user_cascade(self, user_id):
        """
        Delete the participant record in every event, then the user document.
        Writes go out in chunked batches, so a failure part way leaves the
        user document in place for a retry.
        """
        refs = [
            self._participant_ref(event_doc.id, user_id)
            for event_doc in self.db.collection(COLLECTION_EVENTS).stream()
        ]
        event_count = len(refs)
        refs.append(self._user_ref(user_id))
        self._delete_in_batches(refs)
        logger.info(f"[USERS] Deleted {user_id} and its records in {event_count} event(s)")

    # ---------------- EVENTS ----------------
    def get_event(self, event_id):
        return self._snapshot_dict(self._event_ref(event_id).get())

    def add_event(self, data):
        _, ref = self.db.collection(COLLECTION_EVENTS).add(data)
        return ref.id

    def update_event(self, event_id, updates):
        self._event_ref(event_id).update(updates)

    def list_events(self):
        query = self.db.collection(COLLECTION_EVENTS).order_by("createdAt", direction=firestore.Query.DESCENDING)
        return [(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def list_active_events(self):
        query = self.db.collection(COLLECTION_EVENTS).where("isActive", "==", True)
        return [(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def delete_event_cascade(self, event_id):
        refs = [doc.reference for doc in self._participants(event_id).stream()]
        removed = len(refs)
        refs.append(self._event_ref(event_id))
        self._delete_in_batches(refs)
        logger.info(f"[EVENTS] Deleted event {event_id} with {removed} participant(s)")

    # ---------------- PARTICIPANTS ----------------
    def get_participant(self, event_id, user_id):
        return self._snapshot_dict(self._participant_ref(event_id, user_id).get())

    def set_participant(self, event_id, user_id, data):
        self._participant_ref(event_id, user_id).set(data)

    def update_participant(self, event_id, user_id, updates):
        self._participant_ref(event_id, user_id).update(updates)

    def delete_participant(self, event_id, user_id):
        self._participant_ref(event_id, user_id).delete()

    def list_participants(self, event_id):
        return [(doc.id, doc.to_dict() or {}) for doc in self._participants(event_id).stream()]

    def count_participants(self, event_id):
        return sum(1 for _ in self._participants(event_id).stream())

    def create_participants(self, event_id, records):
        """Write several participant documents ({user_id: data}) in a single batch."""
        if not records:
            return
        batch = self.db.batch()
        for user_id, data in records.items():
            batch.set(self._participant_ref(event_id, user_id), data)
        batch.commit()

    # ---------------- ICEBREAK SESSIONS ----------------
    def create_session(self, session_id, data):
        self._session_ref(session_id).set(data)

    def update_session(self, session_id, updates):
        self._session_ref(session_id).update(updates)

    def get_session(self, session_id):
        return self._snapshot_dict(self._session_ref(session_id).get())

    def list_sessions(self, event_id, status):
        query = (
            self.db.collection(COLLECTION_SESSIONS)
            .where("eventId", "==", event_id)
            .where("status", "==", status)
        )
        return [(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def watch_session(self, session_id, callback):
        """
        Subscribe to a session document. callback receives the document dict
        (None when the document does not exist). Returns the watch handle;
        call unsubscribe() on it to stop listening.
        """
        def on_snapshot(doc_snapshots, changes, read_time):
            for snapshot in doc_snapshots:
                callback(self._snapshot_dict(snapshot))

        return self._session_ref(session_id).on_snapshot(on_snapshot)

    # ---------------- CHAT HISTORY ----------------
    def add_chat_messages(self, user_id, messages):
        history = self._user_ref(user_id).collection(COLLECTION_CHAT_HISTORY)
        for message in messages:
            history.add(message)

    def chat_history(self, user_id, limit, newest_first=False):
        direction = firestore.Query.DESCENDING if newest_first else firestore.Query.ASCENDING
        query = (
            self._user_ref(user_id).collection(COLLECTION_CHAT_HISTORY)
            .order_by("timestamp", direction=direction)
            .limit(limit)
        )
        return [(doc.id, doc.to_dict() or {}) for doc in query.stream()]
