import logging

from flask import Flask, jsonify, make_response, render_template, request
from flask_compress import Compress

from octodash.aggregator import StatusAggregator
from octodash.config import load_config
from octodash.integrations.errors import ConfigurationError
from octodash.logger import configure_logging

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app(config_file=None, config_overrides=None, aggregator=None):
    config = load_config(config_file)
    if config_overrides:
        config.update(config_overrides)

    configure_logging(config)

    app = Flask(__name__)
    Compress(app)

    # Set up config in app.config
    for k, v in config.items():
        app.config[k.upper()] = v

    log_level = config.get("log_level", "INFO")
    app.logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    # Bad printer config is fatal at startup, not on the first poll
    if aggregator is None:
        aggregator = StatusAggregator.from_config(config)
    app.extensions["octodash_aggregator"] = aggregator
    app.logger.info(f"Serving {len(aggregator.printers)} printer(s)")

    @app.before_request
    def handle_preflight():
        if request.method == "OPTIONS":
            return make_response("", 200)
        return None

    @app.after_request
    def add_cors_headers(response):
        for header, value in CORS_HEADERS.items():
            response.headers[header] = value
        return response

    @app.route("/")
    def dashboard():
        printers = [printer.to_public_dict() for printer in aggregator.printers]
        return render_template("dashboard.html", printers=printers)

    @app.route("/api/status", methods=["GET"])
    def api_status():
        try:
            snapshot = aggregator.poll()
        except ConfigurationError as e:
            app.logger.error(f"Status poll aborted: {e}")
            return jsonify({"status": "error", "error": str(e)}), 500
        return jsonify(snapshot.to_dict())

    return app


if __name__ == "__main__":
    app = create_app()
    print(f"Printers: {[printer.id for printer in app.extensions['octodash_aggregator'].printers]}")

    if app.config.get("MODE", "PROD") == "DEV":
        app.run(host="0.0.0.0", port=app.config.get("PORT", 8080), debug=False)
    else:
        app.run()
