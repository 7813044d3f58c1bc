"""站内通知模型"""
from scribe.extensions import db
from .base import BaseModel


class Notification(BaseModel):
    """系统通知"""
    __tablename__ = 'sys_notifications'

    TYPE_INFO = 'info'
    TYPE_WARNING = 'warning'

    CATEGORY_COMMENT = 'comment'    # 新评论提醒
    CATEGORY_SYSTEM = 'system'      # 系统通知

    user_id = db.Column(db.Integer, db.ForeignKey('auth_users.id'), index=True)

    title = db.Column(db.String(128))
    content = db.Column(db.Text)

    type = db.Column(db.String(20), default=TYPE_INFO)
    category = db.Column(db.String(20), default=CATEGORY_SYSTEM)

    # 关联对象
    related_type = db.Column(db.String(32))  # article, comment
    related_id = db.Column(db.Integer)

    is_read = db.Column(db.Boolean, default=False)
    read_at = db.Column(db.DateTime)

    # 是否已发送邮件
    email_sent = db.Column(db.Boolean, default=False)
    email_sent_at = db.Column(db.DateTime)

    user = db.relationship('User')
