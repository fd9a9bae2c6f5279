"""Flask application factory for the read-only certificate status API."""

from flask import Flask, jsonify

from config.settings import STATE_DB_PATH, VERSION


def create_app(state_db_path=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config["STATE_DB_PATH"] = str(state_db_path or STATE_DB_PATH)

    from web.routes.api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"error": "Internal server error"}), 500

    @app.route("/health")
    def health_check():
        return jsonify({"status": "healthy", "version": VERSION}), 200

    return app
