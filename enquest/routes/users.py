from flask import Blueprint, jsonify

from enquest import schemas
from enquest.routes import services, json_body

bp = Blueprint("users", __name__)


@bp.route("/users", methods=["POST"])
def create_user():
    data = schemas.validate_payload(
        schemas.CREATE_USER, json_body(), "Email, password, name, and department are required"
    )
    user_id, short_code = services().directory.create_user(
        data["email"], data["password"], data["name"], data["department"],
        role=data.get("role", "participant")
    )
    return jsonify({
        "userId": user_id,
        "shortCode": short_code,
        "message": "User created successfully"
    }), 201


@bp.route("/users", methods=["GET"])
def list_users():
    return jsonify(services().directory.list_users())


@bp.route("/users/<user_id>", methods=["GET"])
def get_user(user_id):
    return jsonify(services().directory.get_user(user_id))


@bp.route("/users/shortcode/<code>", methods=["GET"])
def get_user_by_short_code(code):
    return jsonify(services().directory.get_user_by_short_code(code))


@bp.route("/users/<user_id>/profile", methods=["PUT"])
def update_profile(user_id):
    data = schemas.validate_payload(schemas.UPDATE_PROFILE, json_body())
    services().directory.update_profile(user_id, data)
    return jsonify({"message": "Profile updated successfully"})


@bp.route("/users/<user_id>/role", methods=["PUT"])
def update_role(user_id):
    data = schemas.validate_payload(
        schemas.UPDATE_ROLE, json_body(), "Valid role (admin or participant) is required"
    )
    services().directory.update_role(user_id, data["role"])
    return jsonify({"message": "User role updated successfully"})


@bp.route("/users/<user_id>", methods=["DELETE"])
def delete_user(user_id):
    services().directory.delete_user(user_id)
    return jsonify({"message": "User deleted successfully"})
