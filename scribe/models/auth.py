from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from scribe.extensions import db
from .base import BaseModel


class User(UserMixin, BaseModel):
    """用户"""
    __tablename__ = 'auth_users'

    # 对外输出时必须去掉的敏感字段
    SENSITIVE_FIELDS = ('password_hash', 'email', 'is_deleted')

    username = db.Column(db.String(64), unique=True, index=True)
    nickname = db.Column(db.String(64))
    email = db.Column(db.String(128), unique=True, index=True)
    password_hash = db.Column(db.String(256))
    avatar = db.Column(db.String(256))  # 头像URL

    is_active_user = db.Column(db.Boolean, default=True)  # 封号开关
    is_admin = db.Column(db.Boolean, default=False)
    last_login = db.Column(db.DateTime)

    @property
    def password(self):
        raise AttributeError('密码不可读')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return bool(self.password_hash) and check_password_hash(self.password_hash, password)

    @property
    def display_name(self):
        return self.nickname or self.username

    def to_safe_dict(self):
        """可返回给前端的用户信息"""
        return self.to_dict(exclude=self.SENSITIVE_FIELDS)

    # Flask-Login 必须属性覆盖
    @property
    def is_active(self):
        return bool(self.is_active_user) and not self.is_deleted

    def __repr__(self):
        return f'<User {self.username}>'
