import logging

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from expense_api.config import Config
from expense_api.extensions import init_mongo

jwt = JWTManager()


def configure_logging(app):
    level = getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO)
    app.logger.setLevel(level)


def create_app(config_class=Config, mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    # Allow the web client to talk to Flask
    CORS(
        app,
        supports_credentials=True,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}
    )
    # Init extensions
    init_mongo(app, client=mongo_client)
    jwt.init_app(app)

    # Register blueprints
    from expense_api.auth.routes import auth_bp
    from expense_api.expenses.routes import expenses_bp

    app.register_blueprint(expenses_bp, url_prefix='/api/expenses')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    return app


# Token failures use the same {"message": ...} body as the rest of the API

@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({"message": reason}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({"message": reason}), 401


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return jsonify({"message": "Token has expired"}), 401
