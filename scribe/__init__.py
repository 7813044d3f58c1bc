import os
import logging
import colorlog
from flask import Flask, render_template
from config import config
from scribe.extensions import db, migrate, login_manager, cache, csrf

from scribe import commands


def create_app(config_name='default'):
    """应用工厂函数"""
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. 初始化扩展
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    cache.init_app(app)
    csrf.init_app(app)

    # 3. 配置日志
    configure_logging(app)

    # 4. 注册蓝图 (Blueprints)
    register_blueprints(app)

    # 5. 注册全局错误处理
    register_error_handlers(app)

    # 6. 注册 CLI 命令
    register_commands(app)

    # 7. 生产环境自动建表
    auto_init_database(app)

    return app


def auto_init_database(app):
    """生产环境首次启动时自动创建数据库表"""
    if os.environ.get('FLASK_ENV', '') != 'production':
        return
    with app.app_context():
        try:
            from sqlalchemy import inspect
            tables = inspect(db.engine).get_table_names()
            if 'cms_articles' not in tables:
                app.logger.info('首次启动，正在创建数据库表...')
                db.create_all()
                app.logger.info('数据库初始化完成')
        except Exception:
            app.logger.exception('数据库初始化错误')


def register_blueprints(app):
    """注册所有业务模块蓝图"""
    # 文章前台蓝图
    from scribe.blueprints.article import article_bp
    app.register_blueprint(article_bp, url_prefix='/article')

    # 认证蓝图
    from scribe.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')


def register_error_handlers(app):
    @app.errorhandler(404)
    def page_not_found(e):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        return render_template('errors/500.html'), 500


def register_commands(app):
    """注册 Flask CLI 命令"""
    app.cli.add_command(commands.forge)
    app.cli.add_command(commands.status)
    app.cli.add_command(commands.option)


def configure_logging(app):
    """配置彩色控制台日志，提升开发体验"""
    if app.debug:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)

        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.INFO)
