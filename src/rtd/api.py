"""
RTD API

REST endpoints for server-side enrichment of bid requests, e.g. when
the identity SDK's store is mirrored to Redis.
"""

from flask import Blueprint, Flask, jsonify, request

from .logging import get_logger
from .provider import RtdProvider

logger = get_logger("rtd.api")


def create_rtd_api_blueprint(provider: RtdProvider) -> Blueprint:
    """Create Flask blueprint for the RTD API."""
    bp = Blueprint("rtd_api", __name__, url_prefix="/api/v1/rtd")

    def _safe_error_response(error: Exception, message: str, status_code: int = 500):
        """Return a safe error response."""
        logger.error(message, error=str(error), exc_info=True)
        return jsonify({"status": "error", "message": message}), status_code

    @bp.route("/enrich", methods=["POST"])
    def enrich_request():
        """Run a prepare pass over the posted request object."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("request"), dict):
            return jsonify({"status": "error", "message": "Body must contain a 'request' object"}), 400

        try:
            bid_request = data["request"]
            handle = provider.prepare(bid_request, data.get("config"))
            return jsonify(
                {
                    "status": "success",
                    "request": bid_request,
                    "complete": handle.done,
                }
            )
        except Exception as e:
            return _safe_error_response(e, "Failed to enrich request")

    @bp.route("/config", methods=["GET"])
    def get_config():
        """Get the resolved module config (defaults + platform)."""
        config = provider.get_module_config()
        return jsonify({"status": "success", "config": config.to_dict()})

    return bp


def create_app(provider: RtdProvider) -> Flask:
    """Create a Flask application serving the RTD API."""
    app = Flask(__name__)
    app.register_blueprint(create_rtd_api_blueprint(provider))
    return app


def run_server(provider: RtdProvider, host: str = "0.0.0.0", port: int = 5060, debug: bool = False) -> None:
    """
    Run the RTD API.

    Args:
        provider: Provider backed by the store the cohorts are mirrored to
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 5060)
        debug: Enable debug mode
    """
    app = create_app(provider)
    logger.info("Starting RTD API", host=host, port=port, debug=debug)
    app.run(host=host, port=port, debug=debug)
