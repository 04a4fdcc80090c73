# app/__init__.py - Application Factory Pattern
"""
Flask application factory for the matrimonial profiles manager.
Used to build separate app instances for production, CLI and tests.
"""

import logging
import os
import sys

from flask import Flask


def _configure_logging(app):
    # prefer stdout (good for Docker); enable file logging with LOG_TO_FILE=1
    if os.environ.get('LOG_TO_FILE') == '1':
        from logging.handlers import RotatingFileHandler
        try:
            os.makedirs('logs', exist_ok=True)
            file_handler = RotatingFileHandler('logs/app.log', maxBytes=10240, backupCount=3)
            file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
        except OSError:
            # fallback to stderr if file logging cannot be configured
            app.logger.addHandler(logging.StreamHandler(sys.stderr))
            app.logger.warning('Could not configure file logging; logs will be sent to stderr')
    else:
        app.logger.addHandler(logging.StreamHandler(sys.stdout))
    app.logger.setLevel(logging.INFO)


def _ensure_sqlite_dir(app):
    """Create the data directory when using a local sqlite file."""
    db_uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if db_uri.startswith('sqlite:///'):
        db_dir = os.path.dirname(db_uri.replace('sqlite:///', ''))
        if db_dir and not os.path.exists(db_dir):
            try:
                os.makedirs(db_dir, exist_ok=True)
            except OSError:
                app.logger.warning(f'Could not create directory for sqlite DB: {db_dir}')


def create_app(config_class=None):
    """
    Application Factory Pattern

    Args:
        config_class: Configuration class (default: Config from config.py)

    Returns:
        Flask application instance
    """
    app = Flask(__name__,
                template_folder='../templates',
                static_folder='../static')

    # Load configuration
    if config_class is None:
        from config import Config
        config_class = Config
    app.config.from_object(config_class)

    _configure_logging(app)
    _ensure_sqlite_dir(app)

    # Initialize extensions
    from app.extensions import init_extensions, login_manager, db
    init_extensions(app)

    # User loader callback
    from models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Template helpers
    from utils import format_timestamp, extract_city
    app.add_template_filter(format_timestamp, 'timestamp')
    app.add_template_filter(extract_city, 'city')

    # Register blueprints
    from app.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp)

    from app.blueprints.profiles import profiles_bp
    app.register_blueprint(profiles_bp)

    _register_cli(app)

    app.logger.info('Application startup')
    return app


def _register_cli(app):
    """CLI commands for database and account management."""
    import click
    from models import User, log_action
    from app.extensions import db

    def _add_user(email, password):
        u = User(email=email.strip().lower())
        u.set_password(password)
        db.session.add(u)
        db.session.commit()
        return u

    @app.cli.command('init-db')
    def init_db():
        """Create database tables."""
        db.create_all()
        click.echo('Initialized the database.')

    @app.cli.command('create-user')
    @click.argument('email')
    @click.argument('password')
    def create_user(email, password):
        """Create a staff account: flask create-user <email> <password>"""
        if User.query.filter_by(email=email.strip().lower()).first():
            click.echo('User already exists.')
            return
        if len(password) < 6:
            click.echo('Password must be at least 6 characters long.')
            return
        u = _add_user(email, password)
        # audit (CLI-created)
        try:
            log_action(None, 'user.create', 'user', str(u.id), 'created by CLI')
        except Exception:
            app.logger.exception('Failed to write audit log for create-user')
        app.logger.info(f'User created by CLI: {u.email}')
        click.echo(f'Created user {u.email}')

    @app.cli.command('init-db-with-user')
    @click.option('--email', default='admin@example.com', help='Staff email')
    @click.option('--password', default='admin123', help='Staff password')
    def init_db_with_user(email, password):
        """Create database tables and a first staff account if not present."""
        db.create_all()
        if not User.query.filter_by(email=email.strip().lower()).first():
            u = _add_user(email, password)
            try:
                log_action(None, 'user.create', 'user', str(u.id), 'created by init-db-with-user')
            except Exception:
                app.logger.exception('Failed to write audit log for init-db-with-user')
            app.logger.info(f'User created during init: {u.email}')
            click.echo(f'Created user {u.email}')
        click.echo('Initialized the database (with user).')

    @app.cli.command('backup-db')
    @click.option('--output', '-o', default=None, help='Output file path (default: data/backup_YYYYMMDD_HHMMSS.db)')
    def backup_db(output):
        """Create a safe backup of the SQLite database (works with WAL mode)."""
        import sqlite3
        from datetime import datetime

        db_uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
        if not db_uri.startswith('sqlite:///'):
            click.echo('Backup command only works with SQLite database files')
            return

        source_path = db_uri.replace('sqlite:///', '')
        if not os.path.exists(source_path):
            click.echo(f'Database file not found: {source_path}')
            return

        if not output:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            output = os.path.join(os.path.dirname(source_path), f'backup_{timestamp}.db')

        output_dir = os.path.dirname(output)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        try:
            # SQLite backup API is safe while the app is running
            source_conn = sqlite3.connect(source_path)
            dest_conn = sqlite3.connect(output)
            source_conn.backup(dest_conn)
            source_conn.close()
            dest_conn.close()
        except sqlite3.Error as e:
            click.echo(f'Backup failed: {e}')
            app.logger.exception('Database backup failed')
            return

        size_mb = os.path.getsize(output) / (1024 * 1024)
        click.echo(f'Backup created successfully: {output} ({size_mb:.2f} MB)')
        app.logger.info(f'Database backup created: {output}')
