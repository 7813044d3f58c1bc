from flask import url_for
from markupsafe import Markup
from scribe.extensions import db
from .base import BaseModel

# 多对多关系表：文章 <-> 分类
article_category_mapping = db.Table('cms_article_category_mapping',
    db.Column('article_id', db.Integer, db.ForeignKey('cms_articles.id'), primary_key=True),
    db.Column('category_id', db.Integer, db.ForeignKey('cms_article_categories.id'), primary_key=True)
)


class Article(BaseModel):
    """CMS 文章"""
    __tablename__ = 'cms_articles'

    STATUS_NORMAL = 'normal'
    STATUS_UNAUDITED = 'unaudited'  # 审核中
    STATUS_DRAFT = 'draft'
    STATUS_TRASH = 'trash'

    slug = db.Column(db.String(128), index=True)
    title = db.Column(db.String(256))
    content = db.Column(db.Text)  # HTML 内容
    style = db.Column(db.String(32))  # 指定渲染模板 article_<style>.html

    status = db.Column(db.String(20), default=STATUS_NORMAL, index=True)
    link_to = db.Column(db.String(512))  # 外链跳转地址

    # SEO
    meta_keywords = db.Column(db.String(512))
    meta_description = db.Column(db.String(512))

    comment_enable = db.Column(db.Boolean, default=True)

    # 冗余计数，只允许原子自增
    view_count = db.Column(db.Integer, default=0, nullable=False)
    comment_count = db.Column(db.Integer, default=0, nullable=False)

    author_id = db.Column(db.Integer, db.ForeignKey('auth_users.id'))

    author = db.relationship('User')
    categories = db.relationship('ArticleCategory', secondary=article_category_mapping,
                                 backref=db.backref('articles', lazy='dynamic'))

    def is_normal(self):
        return self.status == self.STATUS_NORMAL

    @property
    def url(self):
        return url_for('article.index', id_or_slug=self.slug or str(self.id))

    @property
    def text(self):
        """去掉 HTML 标签后的正文"""
        return Markup(self.content or '').striptags()

    @property
    def html_view(self):
        """按优先级排列的候选模板"""
        views = ['article/article.html']
        if self.style:
            views.insert(0, f'article/article_{self.style}.html')
        return views

    def __repr__(self):
        return f'<Article {self.id} {self.slug}>'


class ArticleCategory(BaseModel):
    """文章分类"""
    __tablename__ = 'cms_article_categories'

    STATUS_NORMAL = 'normal'
    STATUS_HIDDEN = 'hidden'

    title = db.Column(db.String(128))
    slug = db.Column(db.String(128), index=True)
    status = db.Column(db.String(20), default=STATUS_NORMAL)
    order_number = db.Column(db.Integer, default=0)


class Comment(BaseModel):
    """文章评论"""
    __tablename__ = 'cms_article_comments'

    STATUS_NORMAL = 'normal'        # 正常显示
    STATUS_UNAUDITED = 'unaudited'  # 待审核
    STATUS_TRASH = 'trash'          # 垃圾评论，由后台审核流程设置

    # 联系方式等不对外公开的字段
    PRIVATE_FIELDS = ('email', 'wechat', 'qq', 'is_deleted')

    pid = db.Column(db.Integer, db.ForeignKey('cms_article_comments.id'), nullable=True, index=True)
    article_id = db.Column(db.Integer, db.ForeignKey('cms_articles.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('auth_users.id'), nullable=True)

    author = db.Column(db.String(64))
    content = db.Column(db.Text)  # 入库前已做 HTML 转义
    email = db.Column(db.String(128))
    wechat = db.Column(db.String(64))
    qq = db.Column(db.String(32))

    status = db.Column(db.String(20), default=STATUS_UNAUDITED, index=True)
    reply_count = db.Column(db.Integer, default=0, nullable=False)

    article = db.relationship('Article', backref=db.backref('comments', lazy='dynamic'))
    user = db.relationship('User')

    def is_normal(self):
        return self.status == self.STATUS_NORMAL

    def to_public_dict(self):
        return self.to_dict(exclude=self.PRIVATE_FIELDS)
