"""站点选项读取服务"""
from flask import current_app
from scribe.extensions import db, cache
from scribe.models.sys import Option

# 评论相关开关
COMMENT_VCODE_ENABLE = 'comment_vcode_enable'
COMMENT_ENABLE = 'comment_enable'
COMMENT_UNLOGIN_ENABLE = 'comment_unlogin_enable'
COMMENT_REVIEW_ENABLE = 'comment_review_enable'
COMMENT_EMAIL_NOTIFY_ENABLE = 'comment_email_notify_enable'

TRUE_VALUES = ('1', 'true', 'yes', 'on')

# 缓存中区分 "未设置" 与 "值为空字符串"
_MISSING = '__missing__'


def _cache_key(key):
    return f'option:{key}'


class OptionService:

    @staticmethod
    def find_by_key(key):
        """读取选项原始值，不存在返回 None"""
        cached = cache.get(_cache_key(key))
        if cached is not None:
            return None if cached == _MISSING else cached

        option = Option.query.filter_by(key=key, is_deleted=False).first()
        value = option.value if option else None
        cache.set(_cache_key(key), _MISSING if value is None else value,
                  timeout=current_app.config.get('OPTION_CACHE_TIMEOUT'))
        return value

    @staticmethod
    def find_as_bool(key):
        """
        按布尔值读取开关。
        选项不存在或为空时一律视为关闭。
        """
        value = OptionService.find_by_key(key)
        if value is None:
            return False
        return value.strip().lower() in TRUE_VALUES

    @staticmethod
    def save_or_update(key, value):
        option = Option.query.filter_by(key=key).first()
        if option is None:
            option = Option(key=key)
            db.session.add(option)
        option.value = None if value is None else str(value)
        option.is_deleted = False
        db.session.commit()
        cache.delete(_cache_key(key))
        return option
