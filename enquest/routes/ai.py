from flask import Blueprint, jsonify

from enquest import schemas
from enquest.errors import NotFoundError
from enquest.routes import services, json_body
from enquest.services import communication_agent
from enquest.utils.logging_utils import get_logger

bp = Blueprint("ai", __name__)
logger = get_logger("AGENT")

CHAT_CONTEXT_LIMIT = 5
CHAT_HISTORY_LIMIT = 20


@bp.route("/ai/suggest-questions", methods=["POST"])
def suggest_questions():
    data = schemas.validate_payload(schemas.SUGGEST_QUESTIONS, json_body(), "Event name is required")
    questions = services().generator.survey_questions(
        data["eventName"], data.get("count", 3), data.get("eventType")
    )
    return jsonify({
        "questions": [{"id": i + 1, "question": q} for i, q in enumerate(questions)]
    })


@bp.route("/ai/chat", methods=["POST"])
def chat():
    data = schemas.validate_payload(schemas.AI_CHAT, json_body(), "userId and message are required")
    svc = services()
    user_id = data["userId"]
    event_id = data.get("eventId")

    profile = svc.store.get_user(user_id)
    if profile is None:
        raise NotFoundError("User not found")
    logger.info(f"[AGENT] Chat message from {user_id} (event={event_id})")

    records = [r for _, r in svc.store.chat_history(user_id, CHAT_CONTEXT_LIMIT, newest_first=True)]
    history = communication_agent.history_from_records(reversed(records))

    event = svc.store.get_event(event_id) if event_id else None
    participant = svc.store.get_participant(event_id, user_id) if event_id else None
    enhanced_profile = {
        **profile,
        "surveyAnswers": (participant or {}).get("answers") or {},
        "bingoProgress": (participant or {}).get("bingoCompleted") or [],
        "bingoBoard": (participant or {}).get("bingoBoard") or [],
    }

    result = communication_agent.reply(svc.text_client, enhanced_profile, history, data["message"], event)
    if result.fallback:
        logger.warning(f"[AGENT] Fallback reply sent to {user_id}")

    # Last two entries are this exchange
    svc.store.add_chat_messages(user_id, communication_agent.records_from_history(result.history[-2:]))
    return jsonify({"response": communication_agent.render_reply(result.response, data.get("format", "plain"))})


@bp.route("/ai/chat-history/<user_id>", methods=["GET"])
def chat_history(user_id):
    history = [
        {"id": doc_id, **record}
        for doc_id, record in services().store.chat_history(user_id, CHAT_HISTORY_LIMIT)
    ]
    return jsonify({"history": history})
