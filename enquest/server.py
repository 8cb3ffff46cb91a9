from dataclasses import dataclass

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from enquest.config import Config
from enquest.errors import EnQuestError
from enquest.models import now_iso
from enquest.routes import ai, bingo, events, icebreak, users
from enquest.services.bingo_tracker import BingoTracker
from enquest.services.content_generator import ContentGenerator
from enquest.services.directory import Directory
from enquest.services.icebreak_orchestrator import IcebreakOrchestrator
from enquest.utils.firestore_store import FirebaseIdentity, FirestoreStore, initialize_firebase
from enquest.utils.llm_client import TextGenerationClient
from enquest.utils.logging_utils import get_logger

logger = get_logger("EnQuestAPI", console=True)

API_PREFIX = "/api"


@dataclass
class Services:
    store: FirestoreStore
    text_client: TextGenerationClient
    generator: ContentGenerator
    directory: Directory
    bingo: BingoTracker
    icebreak: IcebreakOrchestrator


def create_app(config=None, store=None, identity=None, text_client=None):
    """
    Build the Flask app. Any of store/identity/text_client left out is built
    from config against the real Firebase project and model endpoint.
    """
    config = config or Config.from_env()

    if store is None or identity is None or text_client is None:
        config.validate()
    if store is None or identity is None:
        firebase_app = initialize_firebase(config)
        store = store or FirestoreStore.from_app(firebase_app)
        identity = identity or FirebaseIdentity(firebase_app)
    if text_client is None:
        text_client = TextGenerationClient.from_config(config)

    generator = ContentGenerator(text_client)
    services = Services(
        store=store,
        text_client=text_client,
        generator=generator,
        directory=Directory(store, identity),
        bingo=BingoTracker(store, generator),
        icebreak=IcebreakOrchestrator(store, generator, max_workers=config.generation_workers),
    )

    app = Flask(__name__)
    CORS(app)
    app.extensions["enquest"] = services

    for module in (users, events, icebreak, bingo, ai):
        app.register_blueprint(module.bp, url_prefix=API_PREFIX)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy", "timestamp": now_iso()})

    @app.errorhandler(EnQuestError)
    def handle_enquest_error(e):
        if e.status_code >= 500:
            logger.error(f"[API] {e.message}")
        else:
            logger.warning(f"[API] {e.status_code} {e.message}")
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"[API] Unhandled error: {e}")
        return jsonify({"error": str(e)}), 500

    logger.info("[SERVER] EnQuest API ready")
    return app


def main():
    config = Config.from_env()
    app = create_app(config)
    logger.info(f"[SERVER] Starting on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port, threaded=True)


if __name__ == "__main__":
    main()
