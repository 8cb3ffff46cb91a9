from jsonschema import Draft202012Validator

from enquest.errors import BadRequestError

NON_EMPTY = {"type": "string", "minLength": 1}
OPTIONAL_TEXT = {"type": ["string", "number", "null"]}

CREATE_USER = {
    "type": "object",
    "required": ["email", "password", "name", "department"],
    "properties": {
        "email": NON_EMPTY,
        "password": NON_EMPTY,
        "name": NON_EMPTY,
        "department": NON_EMPTY,
        "role": {"enum": ["admin", "participant"]},
    },
}

UPDATE_PROFILE = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "department": {"type": "string"},
        "email": {"type": "string"},
        "age": OPTIONAL_TEXT,
        "gender": OPTIONAL_TEXT,
        "favoriteFood": OPTIONAL_TEXT,
        "hobbies": OPTIONAL_TEXT,
        "hometown": OPTIONAL_TEXT,
        "musicGenre": OPTIONAL_TEXT,
        "currentInterest": OPTIONAL_TEXT,
        "message": OPTIONAL_TEXT,
    },
}

UPDATE_ROLE = {
    "type": "object",
    "required": ["role"],
    "properties": {"role": {"enum": ["admin", "participant"]}},
}

SURVEY_QUESTION = {
    "type": "object",
    "required": ["question"],
    "properties": {
        "id": {"type": ["integer", "string"]},
        "question": {"type": "string"},
    },
}

CREATE_EVENT = {
    "type": "object",
    "required": ["eventName"],
    "properties": {"eventName": NON_EMPTY},
}

UPDATE_EVENT = {
    "type": "object",
    "properties": {
        "eventName": {"type": "string"},
        "isActive": {"type": "boolean"},
        "surveyQuestions": {"type": "array", "items": SURVEY_QUESTION},
    },
}

ADD_PARTICIPANT = {
    "type": "object",
    "required": ["userId"],
    "properties": {"userId": NON_EMPTY},
}

SAVE_ANSWERS = {
    "type": "object",
    "required": ["userId", "answers"],
    "properties": {
        "userId": NON_EMPTY,
        "answers": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"answer": OPTIONAL_TEXT},
            },
        },
    },
}

ICEBREAK = {
    "type": "object",
    "required": ["user1Id", "eventId"],
    "properties": {
        "user1Id": NON_EMPTY,
        "user2Id": {"type": ["string", "null"]},
        "user2Code": {"type": ["string", "null"]},
        "eventId": NON_EMPTY,
    },
    "anyOf": [
        {"required": ["user2Id"], "properties": {"user2Id": NON_EMPTY}},
        {"required": ["user2Code"], "properties": {"user2Code": NON_EMPTY}},
    ],
}

PHOTO_UPLOAD = {
    "type": "object",
    "required": ["imageData"],
    "properties": {"imageData": NON_EMPTY},
}

SUGGEST_QUESTIONS = {
    "type": "object",
    "required": ["eventName"],
    "properties": {
        "eventName": NON_EMPTY,
        "eventType": {"type": ["string", "null"]},
        "count": {"type": "integer"},
    },
}

AI_CHAT = {
    "type": "object",
    "required": ["userId", "message"],
    "properties": {
        "userId": NON_EMPTY,
        "message": NON_EMPTY,
        "eventId": {"type": ["string", "null"]},
        "format": {"enum": ["plain", "html"]},
    },
}


def validate_payload(schema, data, message=None):
    """
    Validate a request body against a schema. The first violation (or the
    supplied message) becomes a 400.
    """
    if data is None:
        data = {}
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        if message:
            raise BadRequestError(message)
        error = errors[0]
        path = ".".join(str(p) for p in error.path) or "<root>"
        raise BadRequestError(f"{path}: {error.message}")
    return data
