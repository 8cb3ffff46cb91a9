from flask import Blueprint, Response, jsonify, stream_with_context

from enquest import schemas
from enquest.routes import services, json_body
from enquest.utils.logging_utils import get_logger

bp = Blueprint("icebreak", __name__)
logger = get_logger("ICEBREAK")


@bp.route("/icebreak", methods=["POST"])
def icebreak():
    data = schemas.validate_payload(
        schemas.ICEBREAK, json_body(),
        "User1 ID, event ID, and either User2 ID or short code are required"
    )
    logger.info(f"[ICEBREAK] Incoming request: user1={data['user1Id']} event={data['eventId']}")
    payload = services().icebreak.start(
        data["user1Id"], data["eventId"],
        user2_id=data.get("user2Id"), user2_code=data.get("user2Code")
    )
    return jsonify(payload)


@bp.route("/icebreak/sessions/<session_id>", methods=["GET"])
def get_session(session_id):
    return jsonify(services().icebreak.get_session(session_id))


@bp.route("/icebreak/sessions/<session_id>/stream", methods=["GET"])
def stream_session(session_id):
    orchestrator = services().icebreak
    # 404 up front; once streaming starts the status line is already sent
    orchestrator.get_session(session_id)
    return Response(
        stream_with_context(orchestrator.stream_session(session_id)),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache"}
    )


@bp.route("/events/<event_id>/icebreak-history/<user_id>", methods=["GET"])
def icebreak_history(event_id, user_id):
    return jsonify(services().icebreak.history_for_user(event_id, user_id))


@bp.route("/events/<event_id>/admin/icebreak-sessions", methods=["GET"])
def admin_icebreak_sessions(event_id):
    return jsonify(services().icebreak.sessions_for_event(event_id))
