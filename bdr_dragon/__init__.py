import os
import logging
from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

db = SQLAlchemy()
login_manager = LoginManager()

load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(app):
    """Attach handlers to the package logger according to the app config."""
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # create_app may run many times in one process (tests), so reset handlers
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    package_logger.addHandler(stream_handler)

    log_file = app.config.get('LOG_FILE')
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)


def create_app(config_name=None):
    from config import config, check_required_env

    config_name = config_name or os.environ.get('FLASK_ENV') or 'default'
    config_class = config.get(config_name, config['default'])
    check_required_env(config_class)

    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    from .errors import ErrorHandler
    ErrorHandler(app)

    from . import auth
    auth.init_login_manager(login_manager)

    from .validators import IdConverter
    app.url_map.converters['id'] = IdConverter

    # Register blueprints
    from . import users
    from . import markets
    from . import kpi
    from . import tasks
    from . import admin
    app.register_blueprint(auth.auth, url_prefix='/auth')
    app.register_blueprint(users.users, url_prefix='/users')
    app.register_blueprint(markets.markets, url_prefix='/market')
    app.register_blueprint(kpi.kpi, url_prefix='/kpi')
    app.register_blueprint(tasks.tasks, url_prefix='/tasks')
    app.register_blueprint(admin.admin, url_prefix='/admin')

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    logger.debug(f"Application created with config '{config_name}'")
    return app
