from urllib.parse import unquote
from scribe.extensions import db
from scribe.models.content import Article, ArticleCategory, article_category_mapping

# 数据库 BIGINT 上限，超出的 ID 不可能存在
MAX_ID = 2 ** 63 - 1


class ArticleService:

    @staticmethod
    def find_by_id(article_id):
        article_id = int(article_id)
        if article_id <= 0 or article_id > MAX_ID:
            return None
        return db.session.get(Article, article_id)

    @staticmethod
    def find_first_by_slug(slug):
        """slug 理论上唯一，出现重复时取 id 最小的一条"""
        return Article.query.filter_by(slug=slug).order_by(Article.id.asc()).first()

    @staticmethod
    def find_by_id_or_slug(id_or_slug):
        """
        路由参数解析：纯数字按 ID 查询，否则 URL 解码后按 slug 查询。
        两种方式只会执行其中一种。
        """
        if not id_or_slug:
            return None
        if id_or_slug.isascii() and id_or_slug.isdigit():
            return ArticleService.find_by_id(id_or_slug)
        return ArticleService.find_first_by_slug(unquote(id_or_slug))

    @staticmethod
    def inc_view_count(article_id):
        # 直接在数据库中自增，避免先读后写的竞争
        Article.query.filter_by(id=article_id).update(
            {Article.view_count: Article.view_count + 1}, synchronize_session=False)
        db.session.commit()

    @staticmethod
    def inc_comment_count(article_id):
        Article.query.filter_by(id=article_id).update(
            {Article.comment_count: Article.comment_count + 1}, synchronize_session=False)
        db.session.commit()


class ArticleCategoryService:

    @staticmethod
    def find_active_by_article_id(article_id):
        """文章所属的、处于正常状态的分类"""
        return (ArticleCategory.query
                .join(article_category_mapping,
                      article_category_mapping.c.category_id == ArticleCategory.id)
                .filter(article_category_mapping.c.article_id == article_id,
                        ArticleCategory.status == ArticleCategory.STATUS_NORMAL,
                        ArticleCategory.is_deleted.is_(False))
                .order_by(ArticleCategory.order_number.asc())
                .all())
