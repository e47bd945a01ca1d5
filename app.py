import os
import sys
import time

from flask import Flask, request, jsonify, g, send_from_directory
from werkzeug.middleware.proxy_fix import ProxyFix
from dotenv import load_dotenv

load_dotenv()

from config import config as config_map
from database import DatabaseManager
from extensions import Services, init_services
from event_manager import EventManager
from registration_workflow import RegistrationWorkflow
from site_manager import SiteManager
from team_manager import TeamManager
from team_resolver import TeamMembershipResolver
from user_manager import UserManager
from utils.blob_store import LocalBlobStore
from utils.errors import AppError
from utils.mailer import Mailer
from utils.notification_service import NotificationService
from utils.otp_service import get_challenge_issuer
from utils.security import TokenService
from utils.task_queue import create_dispatcher

from api.auth import auth_bp
from api.player import player_bp
from api.payment import payment_bp
from api.admin import admin_bp
from api.teams import teams_bp
from api.events import events_bp
from api.notifications import notifications_bp
from api.advertisements import advertisements_bp
from api.apartments import apartments_bp
from api.public import public_bp


def build_services(app, store, blob_store=None, dispatcher=None, challenges=None):
    """按配置组装业务服务，测试时可传入替身"""
    config = app.config

    mailer = None
    if config.get('MAIL_SERVER') or config.get('MAIL_SUPPRESS_SEND'):
        mailer = Mailer(app)

    blob_store = blob_store or LocalBlobStore(config['UPLOAD_FOLDER'], config['UPLOAD_URL_PREFIX'])
    dispatcher = dispatcher or create_dispatcher(config)
    challenges = challenges or get_challenge_issuer(config, mailer)
    tokens = TokenService.from_config(config)

    notifications = NotificationService(store, dispatcher, mailer)
    resolver = TeamMembershipResolver(store)

    return Services(
        store=store,
        tokens=tokens,
        blob_store=blob_store,
        dispatcher=dispatcher,
        notifications=notifications,
        challenges=challenges,
        resolver=resolver,
        workflow=RegistrationWorkflow(store, blob_store, notifications, resolver),
        users=UserManager(store, tokens, blob_store, notifications, challenges,
                          player_email_domain=config.get('PLAYER_EMAIL_DOMAIN', 'merasports.com')),
        teams=TeamManager(store),
        events=EventManager(store, blob_store),
        site=SiteManager(store, blob_store),
        mailer=mailer,
    )


def create_app(config_name=None, store=None, blob_store=None, dispatcher=None, challenges=None):
    app = Flask(__name__)
    env_name = (config_name or os.environ.get('APP_ENV', 'default')).lower()
    config_class = config_map.get(env_name, config_map['default'])
    app.config.from_object(config_class)

    if env_name == 'production' and not app.config.get('SECRET_KEY'):
        raise RuntimeError('SECRET_KEY environment variable is required in production')

    config_class.init_app(app)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    @app.before_request
    def start_request_timer():
        g.request_start_time = time.perf_counter()

    @app.after_request
    def log_request_time(response):
        start_time = getattr(g, 'request_start_time', None)
        if start_time is not None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            app.logger.info(
                "Request %s %s took %.2fms, status %d",
                request.method,
                request.path,
                duration_ms,
                response.status_code,
            )
        return response

    if store is None:
        # 启动时检查表结构（CREATE TABLE IF NOT EXISTS，不重建）
        store = DatabaseManager(app.config)
        try:
            store.init_database(force_recreate=False)
            app.logger.info("数据库初始化成功")
        except Exception as e:
            # 记录错误但不阻止应用启动
            app.logger.error(f"数据库初始化检查失败: {e}")

    init_services(app, build_services(app, store, blob_store, dispatcher, challenges))

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(player_bp, url_prefix='/api/player')
    app.register_blueprint(payment_bp, url_prefix='/api/payment')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(teams_bp, url_prefix='/api/teams')
    app.register_blueprint(events_bp, url_prefix='/api/events')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')
    app.register_blueprint(advertisements_bp, url_prefix='/api/advertisements')
    app.register_blueprint(apartments_bp, url_prefix='/api/apartments')
    app.register_blueprint(public_bp, url_prefix='/api/public')

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    @app.route('/health')
    def health():
        return jsonify({'success': True, 'status': 'ok', 'version': app.config.get('SYSTEM_VERSION')})

    @app.errorhandler(AppError)
    def app_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'message': 'Not found', 'code': 'NOT_FOUND'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'success': False, 'message': 'Internal server error', 'code': 'INTERNAL_ERROR'}), 500

    return app


if __name__ == '__main__':
    try:
        app = create_app()
        app.run(
            host=app.config.get('HOST', '0.0.0.0'),
            port=app.config.get('PORT', 5000),
            debug=app.config.get('DEBUG', True)
        )
    except KeyboardInterrupt:
        sys.exit(0)
