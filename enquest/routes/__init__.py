from flask import current_app, request


def services():
    """The Services bundle attached by create_app."""
    return current_app.extensions["enquest"]


def json_body():
    return request.get_json(silent=True) or {}
