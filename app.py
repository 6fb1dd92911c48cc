import os
import logging
from datetime import datetime
from flask import Flask, jsonify
from config import get_config
from logging_config import setup_logging
from models import db
from services import RecordStore, ImageStore, ValidationError, NotFoundError, StorageIOError

logger = logging.getLogger(__name__)

STORE_MODES = ('customers', 'flat')


def create_app(config_class=None):
    if config_class is None:
        config_class = get_config()

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config['IMAGE_FOLDER'] = os.path.abspath(app.config['IMAGE_FOLDER'])

    mode = app.config['STORE_MODE']
    if mode not in STORE_MODES:
        raise ValueError(f"STORE_MODE must be one of {', '.join(STORE_MODES)}, got {mode!r}")

    setup_logging(app)
    db.init_app(app)

    # One store per app, owning the image directory for the process lifetime
    images = ImageStore(app.config['IMAGE_FOLDER'])
    app.extensions['record_store'] = RecordStore(db, images)

    # Register Blueprints
    if mode == 'flat':
        from routes.records import records_bp
        app.register_blueprint(records_bp)
    else:
        from routes.scans import scans_bp
        app.register_blueprint(scans_bp)
    from routes.images import images_bp
    app.register_blueprint(images_bp)

    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'mode': mode, 'timestamp': datetime.utcnow().isoformat()}

    # Error handlers
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({'success': False, 'message': str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({'success': False, 'message': str(e)}), 404

    @app.errorhandler(StorageIOError)
    def handle_storage_error(e):
        logger.error(f"Storage error: {e}")
        return jsonify({'success': False, 'message': 'Could not store image'}), 500

    @app.template_filter('format_datetime')
    def format_datetime(value, format='%Y-%m-%d %H:%M:%S'):
        if not value:
            return ''
        return value.strftime(format)

    with app.app_context():
        db.create_all()
        logger.info(f"Database tables checked/created ({mode} mode)")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config['HOST'], port=app.config['PORT'], debug=app.config['DEBUG'])
