import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from api import api_bp
from backups import start_scheduler
from config import get_config
from errors import PortfolioError, StorageError
from resources import Portfolio
from store import build_store


def create_app(test_config=None):
    """Create the Flask app; test_config overrides the FLASK_ENV configuration"""
    app = Flask(__name__)
    app.config.from_object(get_config())
    if test_config:
        app.config.update(test_config)
    app.json.ensure_ascii = app.config['JSON_AS_ASCII']
    app.json.sort_keys = app.config['JSON_SORT_KEYS']

    CORS(app, resources={r"/api/*": {"origins": "*"}})

    store = build_store(app)
    app.extensions['portfolio_store'] = store
    app.extensions['portfolio'] = Portfolio(
        store, enforce_required=app.config['ENFORCE_REQUIRED_FIELDS'])

    app.register_blueprint(api_bp)
    register_error_handlers(app)

    @app.route('/')
    def index():
        return jsonify({'status': 'ok', 'service': 'portfolio-api'})

    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'same-origin'
        return response

    if not app.config.get('ADMIN_PIN'):
        app.logger.warning("ADMIN_PIN is not set; admin login will fail until it is configured")

    # Create the data file with seed content on first boot
    with app.app_context():
        try:
            store.load()
        except StorageError as e:
            app.logger.error(f"Error loading portfolio data at startup: {e.message}")

    if app.config.get('BACKUP_SCHEDULE_ENABLED'):
        start_scheduler(app)
        app.logger.info("Hourly backup job scheduled")

    return app


def register_error_handlers(app):
    """Every error leaves the app as {success: false, message, error?} JSON"""

    @app.errorhandler(PortfolioError)
    def portfolio_error(e):
        if e.status_code >= 500:
            app.logger.error(f"{request.method} {request.path} failed: {e.message}"
                             + (f" ({e.error})" if e.error else ""))
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def http_error(e):
        if e.code is None or e.code < 400:
            return e
        return jsonify({'success': False, 'message': e.description,
                        'error': e.name, 'path': request.path}), e.code

    @app.errorhandler(Exception)
    def internal_server_error(e):
        app.logger.exception(f"Server Error: {str(e)}")
        return jsonify({'success': False, 'message': 'Internal server error',
                        'error': str(e)}), 500


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app()
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=app.config['DEBUG'])
