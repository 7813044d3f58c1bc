import click
import random
from flask.cli import with_appcontext
from scribe.extensions import db
from scribe.models.auth import User
from scribe.models.content import Article, ArticleCategory, Comment
from scribe.models.sys import Option, Menu
from scribe.models.notification import Notification
from scribe.services.option_service import (
    OptionService, COMMENT_ENABLE, COMMENT_UNLOGIN_ENABLE,
    COMMENT_REVIEW_ENABLE, COMMENT_VCODE_ENABLE
)
from scribe.utils.fake_gen import fake, ScribeProvider


@click.command('status')
@with_appcontext
def status():
    """
    查看当前数据库中的数据统计。
    """
    click.echo(click.style('📊 数据库状态:', fg='cyan', bold=True))

    try:
        click.echo(f" - 用户 (Users): \t{User.query.count()}")
        click.echo(f" - 文章 (Articles): \t{Article.query.count()}")
        click.echo(f" - 分类 (Categories): \t{ArticleCategory.query.count()}")
        click.echo(f" - 评论 (Comments): \t{Comment.query.count()}")
        click.echo(f" - 待审核评论: \t\t{Comment.query.filter_by(status=Comment.STATUS_UNAUDITED).count()}")
        click.echo(f" - 通知 (Notifications): \t{Notification.query.count()}")

        for opt in Option.query.order_by(Option.key).all():
            click.echo(f"   {opt.key} = {opt.value}")
    except Exception as e:
        click.echo(click.style(f'✘ 数据库读取失败: {str(e)}', fg='red'))
        click.echo("请检查是否执行了 'flask db upgrade'")


@click.command('option')
@click.argument('key')
@click.argument('value')
@with_appcontext
def option(key, value):
    """设置站点选项，例如: flask option comment_review_enable true"""
    OptionService.save_or_update(key, value)
    click.echo(click.style(f'✔ {key} = {value}', fg='green'))


@click.command('forge')
@click.option('--scale', default=1, help='数据规模倍数 (默认1倍)')
@with_appcontext
def forge(scale):
    """
    初始化并填充演示数据。
    警告：这将清除数据库中的现有数据！
    """
    click.echo(click.style(f'⚡ 生成演示数据 (规模: {scale}x)...', fg='cyan', bold=True))

    db.drop_all()
    db.create_all()

    users = init_users(scale)
    categories = init_categories()
    articles = init_articles(users, categories, scale)
    init_menus(categories)
    init_options()
    init_comments(users, articles, scale)

    click.echo(click.style('✔ 演示数据构建完成！', fg='green', bold=True))
    click.echo("管理员账号: admin / 密码: admin")


def init_users(scale=1):
    admin = User(username='admin', nickname='管理员', email='admin@scribe.local',
                 password='admin', is_admin=True)
    db.session.add(admin)

    users = [admin]
    for i in range(10 * scale):
        u = User(
            username=f'{fake.user_name()}{i}',
            nickname=fake.name(),
            email=f'user{i}@scribe.local',
            password='password',
            avatar=f"https://ui-avatars.com/api/?name=U{i}&background=random"
        )
        db.session.add(u)
        users.append(u)
    db.session.commit()
    click.echo(f'  ✓ 已创建 {len(users)} 个用户')
    return users


def init_categories():
    categories = []
    for i, name in enumerate(ScribeProvider.category_names):
        c = ArticleCategory(title=name, slug=f'category-{i + 1}', order_number=i)
        db.session.add(c)
        categories.append(c)
    db.session.commit()
    return categories


def init_articles(users, categories, scale=1):
    articles = []
    for i in range(20 * scale):
        article = Article(
            slug=f'post-{i + 1}',
            title=fake.article_title(),
            content=''.join(f'<p>{p}</p>' for p in fake.paragraphs(nb=4)),
            meta_keywords=','.join(fake.words(nb=3)),
            status=random.choice([Article.STATUS_NORMAL] * 4 + [Article.STATUS_DRAFT]),
            comment_enable=random.random() > 0.1,
            author_id=users[0].id
        )
        article.categories = random.sample(categories, k=random.randint(1, 2))
        db.session.add(article)
        articles.append(article)
    db.session.commit()
    click.echo(f'  ✓ 已发布 {len(articles)} 篇文章')
    return articles


def init_menus(categories):
    for i, category in enumerate(categories):
        db.session.add(Menu(
            text=category.title,
            url=f'/category/{category.slug}',
            order_number=i,
            relative_table='article_category',
            relative_id=category.id
        ))
    db.session.commit()


def init_options():
    OptionService.save_or_update(COMMENT_ENABLE, 'true')
    OptionService.save_or_update(COMMENT_UNLOGIN_ENABLE, 'true')
    OptionService.save_or_update(COMMENT_REVIEW_ENABLE, 'false')
    OptionService.save_or_update(COMMENT_VCODE_ENABLE, 'false')


def init_comments(users, articles, scale=1):
    count = 0
    for article in articles:
        n = random.randint(0, 5 * scale)
        for _ in range(n):
            user = random.choice(users + [None])
            db.session.add(Comment(
                article_id=article.id,
                user_id=user.id if user else None,
                author=user.display_name if user else fake.name(),
                content=fake.comment_text(),
                status=random.choice([Comment.STATUS_NORMAL] * 3 + [Comment.STATUS_UNAUDITED])
            ))
        count += n
        article.comment_count = n
    db.session.commit()
    click.echo(f'  ✓ 已生成 {count} 条评论')
