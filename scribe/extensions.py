from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_caching import Cache
from flask_wtf.csrf import CSRFProtect

# 初始化扩展对象 (暂不绑定 app)
db = SQLAlchemy()
migrate = Migrate()
cache = Cache()
login_manager = LoginManager()
csrf = CSRFProtect()

# 配置 LoginManager
login_manager.login_view = 'auth.login'  # 未登录跳转视图
login_manager.login_message = '请先登录后再继续操作。'
login_manager.login_message_category = 'warning'
login_manager.session_protection = 'strong'


@login_manager.user_loader
def load_user(user_id):
    """Flask-Login 用户加载回调"""
    from scribe.models import User
    return db.session.get(User, int(user_id))
