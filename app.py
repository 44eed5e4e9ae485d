import logging
import os
import time
import uuid
from typing import Any, Mapping, Optional
from flask import Flask, current_app, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from config import StoreConfig, settings_from_env
from csv_export import CsvProjector
from errors import SurveyError
from models import utc_now_iso
from questions import load_questions
from storage import ResponseStore
import survey

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger("survey_api")


def _store() -> ResponseStore:
    return current_app.extensions["survey_store"]


def _projector() -> CsvProjector:
    return current_app.extensions["survey_csv"]


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.update(settings_from_env())
    if overrides:
        app.config.update(overrides)

    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    # Survey frontends are hosted elsewhere and POST cross-origin
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}, r"/questions.json": {"origins": origins}},
        supports_credentials=True,
    )

    store_config = StoreConfig.from_mapping(app.config)
    app.extensions["survey_store"] = ResponseStore(store_config)
    app.extensions["survey_csv"] = CsvProjector(store_config)
    app.config["STARTED_AT"] = time.monotonic()

    register_routes(app)
    register_error_handlers(app)
    register_request_logging(app)
    return app


def register_routes(app: Flask) -> None:
    @app.get("/questions.json")
    def questions():
        return jsonify(load_questions(app.config["QUESTIONS_FILE"]))

    @app.post("/api/submit-survey")
    def submit_survey():
        payload = request.get_json(silent=True)
        if payload is None:
            return jsonify({"error": "Request body must be JSON"}), 400

        result = survey.submit_survey(_store(), _projector(), payload)
        return jsonify({"message": "Survey submitted successfully", **result}), 200

    @app.get("/api/responses")
    def responses():
        result = survey.get_all_responses(_store())
        return jsonify({"success": True, **result})

    @app.get("/api/download-csv")
    def download_csv():
        path = survey.get_csv_artifact(_projector())
        return send_file(
            os.path.abspath(path),
            mimetype="text/csv",
            as_attachment=True,
            download_name="survey_responses.csv",
            max_age=0,
        )

    @app.get("/api/stats")
    def stats():
        return jsonify({"success": True, "data": survey.get_stats(_store())})

    @app.get("/api/health")
    def health():
        """Simple health check endpoint."""
        return jsonify(
            {
                "status": "OK",
                "timestamp": utc_now_iso(),
                "uptime": time.monotonic() - app.config["STARTED_AT"],
            }
        )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SurveyError)
    def _survey_error(e: SurveyError):
        if e.status_code >= 500:
            logger.error("%s: %s", e.message, e.details)
        else:
            logger.info("%s %s rejected: %s", request.method, request.path, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "Not found", "path": request.path}), 404

    @app.errorhandler(405)
    def _405(e):
        return jsonify({"error": "Method not allowed", "path": request.path}), 405

    @app.errorhandler(413)
    def _413(e):
        return jsonify({"error": "Payload too large"}), 413

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.name, "message": e.description}), e.code
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error", "message": str(e)}), 500


def register_request_logging(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        request._start_time = time.time()
        request._request_id = str(uuid.uuid4())

    @app.after_request
    def _log(response):
        latency_ms = int(
            (time.time() - getattr(request, "_start_time", time.time())) * 1000
        )
        logger.info(
            {
                "request_id": getattr(request, "_request_id", "-"),
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "latency_ms": latency_ms,
            }
        )
        return response


app = create_app()


if __name__ == "__main__":
    port = int(os.getenv("PORT", "3000"))
    logger.info("Server running on port %d", port)
    app.run(host="0.0.0.0", port=port)
