from flask import Blueprint, jsonify

from enquest import schemas
from enquest.routes import services, json_body

bp = Blueprint("bingo", __name__)


@bp.route("/events/<event_id>/participants/<user_id>/bingo/<index>", methods=["POST"])
def toggle_square(event_id, user_id, index):
    return jsonify(services().bingo.toggle(event_id, user_id, index))


@bp.route("/events/<event_id>/participants/<user_id>/bingo", methods=["GET"])
def bingo_state(event_id, user_id):
    return jsonify(services().bingo.get_state(event_id, user_id))


@bp.route("/events/<event_id>/participants/<user_id>/bingo/<index>/photo", methods=["POST"])
def upload_photo(event_id, user_id, index):
    data = schemas.validate_payload(schemas.PHOTO_UPLOAD, json_body(), "Image data is required")
    services().bingo.upload_photo(event_id, user_id, index, data["imageData"])
    return jsonify({"message": "Photo uploaded successfully"})


@bp.route("/events/<event_id>/photos", methods=["GET"])
def event_photos(event_id):
    return jsonify(services().bingo.photos(event_id))


@bp.route("/events/<event_id>/participants/<user_id>/regenerate-bingo", methods=["POST"])
def regenerate_bingo(event_id, user_id):
    board = services().bingo.regenerate(event_id, user_id)
    return jsonify({"message": "Bingo missions regenerated successfully", "bingoBoard": board})


@bp.route("/events/<event_id>/regenerate-all-bingo", methods=["POST"])
def regenerate_all_bingo(event_id):
    return jsonify(services().bingo.regenerate_all(event_id))


@bp.route("/events/<event_id>/bingo-status", methods=["GET"])
def bingo_status(event_id):
    return jsonify(services().bingo.status(event_id))
