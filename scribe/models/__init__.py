# 按照依赖顺序导入
from .base import BaseModel
from .auth import User
from .content import Article, ArticleCategory, Comment, article_category_mapping
from .sys import Option, Menu
from .notification import Notification
