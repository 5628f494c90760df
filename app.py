import logging
from datetime import datetime

from flask import Flask, jsonify, request
from flask_babel import Babel

from config import Config
from errors import register_error_handlers
from logging_setup import setup_logging
from models import db

logger = logging.getLogger(__name__)

babel = Babel()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    # /api/cash and /api/cash/ reach the same handler
    app.url_map.strict_slashes = False

    setup_logging(app)
    db.init_app(app)

    def get_locale():
        return app.config.get('BABEL_DEFAULT_LOCALE', 'en')
    babel.init_app(app, locale_selector=get_locale)

    register_error_handlers(app)

    # Register Blueprints
    from routes.suppliers import suppliers_bp
    app.register_blueprint(suppliers_bp)
    from routes.customers import customers_bp
    app.register_blueprint(customers_bp)
    from routes.inventory import inventory_bp
    app.register_blueprint(inventory_bp)
    from routes.cash import cash_bp
    app.register_blueprint(cash_bp)
    from routes.returns import returns_bp
    app.register_blueprint(returns_bp)
    from routes.dashboard import dashboard_bp
    app.register_blueprint(dashboard_bp)
    from routes.settings import settings_bp
    app.register_blueprint(settings_bp)

    @app.before_request
    def log_request():
        logger.debug('%s %s', request.method, request.path)

    @app.route('/health')
    def health():
        return jsonify({'status': 'OK', 'timestamp': datetime.utcnow().isoformat()})

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=True)
