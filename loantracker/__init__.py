"""Application factory and initialization"""
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from config import config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()

def create_app(config_name='default'):
    """Create and configure the Flask application"""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    from loantracker.logging_config import configure_logging
    app.logger.setLevel(configure_logging(app.config.get('LOG_LEVEL')))

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    # Bearer tokens only, no cookie sessions
    login_manager.session_protection = None

    # Register blueprints
    from loantracker.auth import auth_bp
    from loantracker.main import main_bp
    from loantracker.loans import loans_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(main_bp)
    app.register_blueprint(loans_bp)

    from loantracker.utils.errors import register_error_handlers
    register_error_handlers(app)

    return app
