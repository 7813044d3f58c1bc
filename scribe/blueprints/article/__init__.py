from flask import Blueprint

# url_prefix 在 scribe/__init__.py 注册时设置
article_bp = Blueprint('article', __name__)

from . import routes
