"""
In-memory stand-ins for the Firestore client, Firebase Auth and the model
endpoint. Only the calls FirestoreStore, FirebaseIdentity and
TextGenerationClient make are supported.
"""

import copy
import itertools
import json
import threading
import uuid

from firebase_admin import firestore
from google.api_core.exceptions import InvalidArgument, NotFound


# ============================================
# FIRESTORE
# ============================================
class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeWatch:
    def __init__(self, db, path, callback):
        self.db = db
        self.path = path
        self.callback = callback

    def unsubscribe(self):
        listeners = self.db.listeners.get(self.path, [])
        if self.callback in listeners:
            listeners.remove(self.callback)


class FakeDocumentReference:
    def __init__(self, db, path):
        self.db = db
        self.path = path
        self.id = path[-1]

    def get(self):
        return FakeSnapshot(self, self.db.docs.get(self.path))

    def set(self, data):
        self.db.docs[self.path] = copy.deepcopy(data)
        self.db.notify(self.path)

    def update(self, updates):
        if self.path not in self.db.docs:
            raise NotFound(f"No document to update: {'/'.join(self.path)}")
        doc = self.db.docs[self.path]
        for key, value in updates.items():
            parts = key.split(".")
            target = doc
            for part in parts[:-1]:
                target = target.setdefault(part, {})
            if value is firestore.DELETE_FIELD:
                target.pop(parts[-1], None)
            else:
                target[parts[-1]] = copy.deepcopy(value)
        self.db.notify(self.path)

    def delete(self):
        self.db.docs.pop(self.path, None)
        self.db.notify(self.path)

    def collection(self, name):
        return FakeQuery(self.db, self.path + (name,))

    def on_snapshot(self, callback):
        self.db.listeners.setdefault(self.path, []).append(callback)
        callback([self.get()], [], None)
        return FakeWatch(self.db, self.path, callback)


class FakeQuery:
    """A collection reference is a query with no filters."""

    def __init__(self, db, path, filters=(), order=None, max_results=None):
        self.db = db
        self.path = path
        self.filters = tuple(filters)
        self.order = order
        self.max_results = max_results

    def document(self, document_id=None):
        return FakeDocumentReference(self.db, self.path + (document_id or uuid.uuid4().hex[:20],))

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return None, ref

    def where(self, field, op, value):
        assert op == "==", f"unsupported operator {op}"
        return FakeQuery(self.db, self.path, self.filters + ((field, value),), self.order, self.max_results)

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return FakeQuery(self.db, self.path, self.filters, (field, direction), self.max_results)

    def limit(self, count):
        return FakeQuery(self.db, self.path, self.filters, self.order, count)

    def stream(self):
        depth = len(self.path) + 1
        matches = []
        for path, data in list(self.db.docs.items()):
            if len(path) != depth or path[:-1] != self.path:
                continue
            if any(data.get(field) != value for field, value in self.filters):
                continue
            matches.append((path, data))

        if self.order:
            field, direction = self.order
            matches = [m for m in matches if field in m[1]]
            matches.sort(key=lambda m: m[1][field], reverse=direction == firestore.Query.DESCENDING)
        if self.max_results is not None:
            matches = matches[:self.max_results]

        for path, data in matches:
            yield FakeSnapshot(FakeDocumentReference(self.db, path), data)


class FakeBatch:
    MAX_WRITES = 500

    def __init__(self, db):
        self.db = db
        self.ops = []

    def set(self, ref, data):
        self.ops.append(lambda: ref.set(data))

    def update(self, ref, updates):
        self.ops.append(lambda: ref.update(updates))

    def delete(self, ref):
        self.ops.append(ref.delete)

    def commit(self):
        if len(self.ops) > self.MAX_WRITES:
            raise InvalidArgument(f"maximum {self.MAX_WRITES} writes allowed per request")
        for op in self.ops:
            op()
        self.ops = []
        self.db.batch_commits += 1


class FakeFirestore:
    def __init__(self):
        self.docs = {}
        self.listeners = {}
        self.batch_commits = 0

    def collection(self, name):
        return FakeQuery(self, (name,))

    def batch(self):
        return FakeBatch(self)

    def notify(self, path):
        ref = FakeDocumentReference(self, path)
        for callback in list(self.listeners.get(path, [])):
            callback([ref.get()], [], None)


# ============================================
# AUTH
# ============================================
class FakeIdentity:
    def __init__(self):
        self.accounts = {}
        self._ids = itertools.count(1)

    def create_user(self, email, password):
        if any(a["email"] == email for a in self.accounts.values()):
            raise ValueError(f"The user with the provided email already exists ({email})")
        uid = f"uid{next(self._ids)}"
        self.accounts[uid] = {"email": email, "password": password}
        return uid, email

    def update_email(self, uid, email):
        if uid not in self.accounts:
            raise ValueError(f"No user record found for {uid}")
        self.accounts[uid]["email"] = email

    def delete_user(self, uid):
        self.accounts.pop(uid, None)


# ============================================
# MODEL ENDPOINT
# ============================================
GOOD_MISSIONS = [
    {"text": f"Mission number {i + 1}", "category": category}
    for i, category in enumerate(["conversation", "photo", "discovery", "experience"] * 2 + ["photo"])
]


def prompt_kind(prompt):
    if prompt.startswith("Suggest one question"):
        return "topic"
    if "on their own initiative" in prompt:
        return "reverse"
    if prompt.startswith("Suggest 5 pieces"):
        return "questions"
    if prompt.startswith("You are planning a bingo game"):
        return "bingo"
    if prompt.startswith("You are the organiser"):
        return "survey"
    return "chat"


def default_responder(prompt):
    kind = prompt_kind(prompt)
    if kind == "topic":
        return "Try asking what they did last weekend"
    if kind == "questions":
        return 'Here you go:\n["Ask about A", "Ask about B", "Ask about C", "Ask about D", "Ask about E"]'
    if kind == "reverse":
        return '["Share R1", "Share R2", "Share R3", "Share R4", "Share R5"]'
    if kind == "bingo":
        return "```json\n" + json.dumps(GOOD_MISSIONS) + "\n```"
    if kind == "survey":
        return '["Q one", "Q two", "Q three", "Q four", "Q five", "Q six", "Q seven", "Q eight", "Q nine", "Q ten"]'
    return "Hello! **Great** to see you."


class FakeTextClient:
    """
    responder(prompt) returns the reply text, or an exception instance to
    raise instead.
    """

    def __init__(self, responder=None):
        self.responder = responder or default_responder
        self.calls = []
        self._lock = threading.Lock()

    def complete(self, prompt, max_tokens=1024, temperature=0.8, top_p=0.95):
        with self._lock:
            self.calls.append({
                "kind": prompt_kind(prompt),
                "prompt": prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "top_p": top_p,
            })
        result = self.responder(prompt)
        if isinstance(result, Exception):
            raise result
        return result

    def kinds(self):
        return sorted(call["kind"] for call in self.calls)
