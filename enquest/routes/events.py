from flask import Blueprint, jsonify

from enquest import schemas
from enquest.routes import services, json_body

bp = Blueprint("events", __name__)


@bp.route("/events", methods=["POST"])
def create_event():
    data = schemas.validate_payload(schemas.CREATE_EVENT, json_body(), "Event name is required")
    event_id = services().directory.create_event(data["eventName"])
    return jsonify({"eventId": event_id, "message": "Event created successfully"}), 201


@bp.route("/events", methods=["GET"])
def list_events():
    return jsonify(services().directory.list_events())


@bp.route("/events/active", methods=["GET"])
def active_event():
    return jsonify(services().directory.active_event())


@bp.route("/events/<event_id>", methods=["PUT"])
def update_event(event_id):
    data = schemas.validate_payload(schemas.UPDATE_EVENT, json_body())
    services().directory.update_event(event_id, data)
    return jsonify({"message": "Event updated successfully"})


@bp.route("/events/<event_id>", methods=["DELETE"])
def delete_event(event_id):
    services().directory.delete_event(event_id)
    return jsonify({"message": "Event deleted successfully"})


# ============================================
# PARTICIPANTS
# ============================================
@bp.route("/events/<event_id>/participants", methods=["GET"])
def list_participants(event_id):
    return jsonify(services().directory.list_participants(event_id))


@bp.route("/events/<event_id>/participants", methods=["POST"])
def add_participant(event_id):
    data = schemas.validate_payload(schemas.ADD_PARTICIPANT, json_body(), "User ID is required")
    services().directory.add_participant(event_id, data["userId"])
    return jsonify({"message": "Participant added successfully"})


@bp.route("/events/<event_id>/participants/me/answers", methods=["POST"])
def save_answers(event_id):
    data = schemas.validate_payload(
        schemas.SAVE_ANSWERS, json_body(), "User ID and answers array are required"
    )
    services().directory.save_answers(event_id, data["userId"], data["answers"])
    return jsonify({"message": "Answers saved successfully"})


@bp.route("/events/<event_id>/participants/<user_id>", methods=["DELETE"])
def remove_participant(event_id, user_id):
    services().directory.remove_participant(event_id, user_id)
    return jsonify({"message": "Participant removed successfully"})


# ============================================
# ADMIN
# ============================================
@bp.route("/admin/stats", methods=["GET"])
def admin_stats():
    return jsonify(services().directory.stats())
