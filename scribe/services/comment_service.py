"""文章评论服务：评论发布的校验、状态判定与计数"""
from flask import current_app
from markupsafe import escape
from scribe.extensions import db
from scribe.exceptions import CommentRejected, LoginRequired
from scribe.models.content import Comment
from scribe.services.article_service import ArticleService, MAX_ID
from scribe.services.option_service import (
    OptionService, COMMENT_VCODE_ENABLE, COMMENT_ENABLE,
    COMMENT_UNLOGIN_ENABLE, COMMENT_REVIEW_ENABLE
)

MSG_CONTENT_EMPTY = 'comment content cannot be empty'
MSG_CAPTCHA_INCORRECT = 'captcha incorrect'
MSG_ARTICLE_COMMENT_CLOSED = 'comments are closed for this article'
MSG_COMMENT_DISABLED = 'commenting is disabled'
MSG_FIELD_TOO_LONG = '{field} is too long'


class CommentService:

    @staticmethod
    def find_by_id(comment_id):
        if comment_id is None or comment_id <= 0 or comment_id > MAX_ID:
            return None
        return db.session.get(Comment, comment_id)

    @staticmethod
    def find_page_by_article_id(article_id, page=1, per_page=10):
        """文章页展示的评论：只包含审核通过的，最新的在前"""
        return (Comment.query
                .filter_by(article_id=article_id, status=Comment.STATUS_NORMAL, is_deleted=False)
                .order_by(Comment.created_at.desc(), Comment.id.desc())
                .paginate(page=page, per_page=per_page, error_out=False))

    @staticmethod
    def inc_reply_count(comment_id):
        Comment.query.filter_by(id=comment_id).update(
            {Comment.reply_count: Comment.reply_count + 1}, synchronize_session=False)
        db.session.commit()

    @staticmethod
    def save(comment):
        comment.save()
        return comment

    @staticmethod
    def post_comment(article_id, content, user=None, nickname=None, pid=None,
                     email=None, wechat=None, qq=None, captcha=None, captcha_validator=None):
        """
        发布评论
        :param user: 当前登录用户，匿名时为 None
        :param captcha_validator: 验证码校验函数 token -> bool
        :return: (result, comment)，result 可直接作为 JSON 返回；
                 被拒绝时 comment 为 None，且不会产生任何写操作
        """
        try:
            article, content, pid = CommentService._check(
                article_id, content, user, pid, captcha, captcha_validator,
                {'author': None if user else nickname, 'email': email, 'wechat': wechat, 'qq': qq})
        except CommentRejected as e:
            current_app.logger.info(f'评论被拒绝: article={article_id} code={e.code} message={e.message}')
            return e.to_dict(), None

        comment = Comment(
            article_id=article.id,
            pid=pid,
            author=nickname,
            content=content,
            email=email,
            wechat=wechat,
            qq=qq,
        )
        # 登录用户以账号昵称为准，防止冒用他人昵称
        if user is not None:
            comment.user_id = user.id
            comment.author = user.display_name

        if OptionService.find_as_bool(COMMENT_REVIEW_ENABLE):
            comment.status = Comment.STATUS_UNAUDITED
        else:
            comment.status = Comment.STATUS_NORMAL

        # 记录文章评论数、被回复评论的回复数，然后保存评论
        ArticleService.inc_comment_count(article.id)
        if pid is not None:
            CommentService.inc_reply_count(pid)
        CommentService.save(comment)

        result = {'success': True, 'code': 0}
        if comment.is_normal():
            result['comment'] = comment.to_public_dict()
        if user is not None:
            result['user'] = user.to_safe_dict()

        current_app.logger.info(f'新评论 #{comment.id} article={article.id} status={comment.status}')
        return result, comment

    @staticmethod
    def _check(article_id, content, user, pid, captcha, captcha_validator, contact=None):
        """按顺序执行校验，任何一步失败立即抛出 CommentRejected"""
        # 1. 文章 ID
        if article_id is None or article_id <= 0:
            raise CommentRejected()

        # 2. 评论内容，校验通过后转义一次
        if content is None or not content.strip():
            raise CommentRejected(MSG_CONTENT_EMPTY)
        content = str(escape(content))

        # 3. 验证码
        if OptionService.find_as_bool(COMMENT_VCODE_ENABLE):
            if captcha_validator is None or not captcha_validator(captcha):
                raise CommentRejected(MSG_CAPTCHA_INCORRECT)

        # 4. 文章存在
        article = ArticleService.find_by_id(article_id)
        if article is None:
            raise CommentRejected()

        # 5. 文章自身的评论开关
        if not article.comment_enable:
            raise CommentRejected(MSG_ARTICLE_COMMENT_CLOSED)

        # 6. 全站评论开关
        if not OptionService.find_as_bool(COMMENT_ENABLE):
            raise CommentRejected(MSG_COMMENT_DISABLED)

        # 7. 是否允许匿名评论
        if not OptionService.find_as_bool(COMMENT_UNLOGIN_ENABLE) and user is None:
            raise LoginRequired()

        # 回复的评论必须属于同一篇文章
        if pid is not None and pid <= 0:
            pid = None
        if pid is not None:
            parent = CommentService.find_by_id(pid)
            if parent is None or parent.article_id != article.id:
                raise CommentRejected()

        # 昵称与联系方式不能超过字段长度，避免入库失败时计数已经增加
        for field, value in (contact or {}).items():
            max_length = Comment.__table__.c[field].type.length
            if value and len(value) > max_length:
                raise CommentRejected(MSG_FIELD_TOO_LONG.format(field=field))

        return article, content, pid
