import pytest
from scribe import create_app
from scribe.extensions import db
from scribe.models import User, Article, ArticleCategory, Comment
from scribe.services.option_service import OptionService, COMMENT_ENABLE


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def set_option(app):
    def _set(key, value):
        OptionService.save_or_update(key, value)
    return _set


@pytest.fixture
def comments_on(set_option):
    """全站评论开启，其余开关保持默认 (未设置)"""
    set_option(COMMENT_ENABLE, 'true')


@pytest.fixture
def make_article(app):
    def _make(**kwargs):
        fields = dict(title='Hello Scribe', slug='hello-scribe',
                      content='<p>Body text</p>', status=Article.STATUS_NORMAL,
                      comment_enable=True)
        fields.update(kwargs)
        article = Article(**fields)
        article.save()
        return article
    return _make


@pytest.fixture
def make_category(app):
    def _make(**kwargs):
        category = ArticleCategory(**kwargs)
        category.save()
        return category
    return _make


@pytest.fixture
def make_user(app):
    def _make(username='alice', password='secret', **kwargs):
        user = User(username=username, email=f'{username}@example.com', password=password, **kwargs)
        user.save()
        return user
    return _make


@pytest.fixture
def make_comment(app):
    def _make(article, **kwargs):
        fields = dict(article_id=article.id, author='bob', content='first',
                      status=Comment.STATUS_NORMAL)
        fields.update(kwargs)
        comment = Comment(**fields)
        comment.save()
        return comment
    return _make


@pytest.fixture
def login(client):
    def _login(username='alice', password='secret'):
        return client.post('/auth/login', data={'username': username, 'password': password})
    return _login
