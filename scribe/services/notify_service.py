"""新评论通知服务"""
import smtplib
import threading
from datetime import datetime
from email.message import EmailMessage
from flask import current_app
from markupsafe import Markup
from scribe.extensions import db
from scribe.models.auth import User
from scribe.models.content import Article, Comment
from scribe.models.notification import Notification
from scribe.services.option_service import OptionService, COMMENT_EMAIL_NOTIFY_ENABLE


class NotifyService:
    """新评论通知服务"""

    @staticmethod
    def notify_admins(article, comment):
        """给所有管理员发送站内通知，按配置同时发送邮件"""
        admins = User.query.filter_by(is_admin=True, is_active_user=True, is_deleted=False).all()
        if not admins:
            return 0

        title = f"新评论 - {article.title}"
        body = f"{comment.author or '匿名用户'} 评论了文章《{article.title}》：{comment.content}"
        if comment.status == Comment.STATUS_UNAUDITED:
            body += "（待审核）"

        notifications = []
        for admin in admins:
            notification = Notification(
                user_id=admin.id,
                title=title,
                content=body,
                type=Notification.TYPE_WARNING if comment.status == Comment.STATUS_UNAUDITED
                else Notification.TYPE_INFO,
                category=Notification.CATEGORY_COMMENT,
                related_type='comment',
                related_id=comment.id
            )
            db.session.add(notification)
            notifications.append((admin, notification))
        db.session.commit()

        if NotifyService.email_enabled():
            # 评论内容入库时已转义，纯文本邮件需要还原
            text_body = Markup(body).unescape()
            for admin, notification in notifications:
                if admin.email:
                    NotifyService.send_email(admin.email, title, text_body)
                    notification.email_sent = True
                    notification.email_sent_at = datetime.utcnow()
            db.session.commit()

        return len(notifications)

    @staticmethod
    def email_enabled():
        return bool(current_app.config.get('MAIL_SERVER')) and \
            OptionService.find_as_bool(COMMENT_EMAIL_NOTIFY_ENABLE)

    @staticmethod
    def send_email(to, subject, body):
        config = current_app.config
        msg = EmailMessage()
        msg['Subject'] = subject
        msg['From'] = config['MAIL_DEFAULT_SENDER']
        msg['To'] = to
        msg.set_content(body)

        with smtplib.SMTP(config['MAIL_SERVER'], config['MAIL_PORT'], timeout=10) as smtp:
            if config.get('MAIL_USE_TLS'):
                smtp.starttls()
            if config.get('MAIL_USERNAME'):
                smtp.login(config['MAIL_USERNAME'], config['MAIL_PASSWORD'])
            smtp.send_message(msg)

    @staticmethod
    def safe_notify(article_id, comment_id):
        """通知失败只记录日志，不影响已创建的评论"""
        try:
            article = db.session.get(Article, article_id)
            comment = db.session.get(Comment, comment_id)
            if article is None or comment is None:
                return
            NotifyService.notify_admins(article, comment)
        except Exception:
            db.session.rollback()
            current_app.logger.exception(f'新评论通知发送失败: article={article_id} comment={comment_id}')

    @staticmethod
    def dispatch(article, comment):
        """
        异步发送新评论通知 (fire-and-forget)。
        NOTIFY_ASYNC 关闭时在当前线程执行，便于测试。
        """
        app = current_app._get_current_object()
        if not app.config.get('NOTIFY_ASYNC', True):
            NotifyService.safe_notify(article.id, comment.id)
            return None

        thread = threading.Thread(
            target=_run_in_app_context,
            args=(app, article.id, comment.id),
            name=f'comment-notify-{comment.id}',
            daemon=True
        )
        thread.start()
        return thread


def _run_in_app_context(app, article_id, comment_id):
    with app.app_context():
        NotifyService.safe_notify(article_id, comment_id)
