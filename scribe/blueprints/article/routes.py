from flask import render_template, request, redirect, abort, jsonify, current_app
from flask_login import current_user
from scribe.blueprints.article import article_bp
from scribe.blueprints.article.forms import CommentForm
from scribe.services.article_service import ArticleService, ArticleCategoryService
from scribe.services.comment_service import CommentService
from scribe.services.notify_service import NotifyService
from scribe.services.option_service import OptionService, COMMENT_VCODE_ENABLE
from scribe.utils.captcha import issue_captcha, validate_captcha
from scribe.utils.menu import load_menus, flag_menu_active


def build_seo(article):
    """页面 SEO 信息，未填写描述时截取正文开头"""
    description = article.meta_description
    if not description or not description.strip():
        max_length = current_app.config.get('SEO_DESCRIPTION_LENGTH', 100)
        description = article.text[:max_length]
    return {
        'title': article.title,
        'keywords': article.meta_keywords,
        'description': description
    }


def flag_article_menus(article, menus):
    """文章页的菜单高亮：URL 前缀匹配 + 所属分类匹配"""
    article_url = article.url
    active_ids = flag_menu_active(menus, lambda menu: bool(menu.url) and menu.url.startswith(article_url))

    categories = ArticleCategoryService.find_active_by_article_id(article.id)
    if not categories:
        return active_ids

    category_ids = {category.id for category in categories}
    return flag_menu_active(
        menus,
        lambda menu: menu.relative_table == 'article_category' and menu.relative_id in category_ids,
        active_ids
    )


@article_bp.route('/<id_or_slug>')
def index(id_or_slug):
    """文章详情页"""
    article = ArticleService.find_by_id_or_slug(id_or_slug)
    if article is None:
        abort(404)

    # 审核中、草稿等状态一律 404
    if not article.is_normal():
        abort(404)

    if article.link_to and article.link_to.strip():
        return redirect(article.link_to.strip())

    seo = build_seo(article)
    menus = load_menus()
    active_menu_ids = flag_article_menus(article, menus)

    # 记录浏览量
    ArticleService.inc_view_count(article.id)

    page = request.args.get('page', 1, type=int)
    comments = CommentService.find_page_by_article_id(
        article.id, page=page, per_page=current_app.config['COMMENTS_PER_PAGE'])

    captcha_image = None
    if OptionService.find_as_bool(COMMENT_VCODE_ENABLE):
        captcha_image = issue_captcha()

    return render_template(article.html_view,
                           article=article,
                           seo=seo,
                           menus=menus,
                           active_menu_ids=active_menu_ids,
                           comments=comments,
                           form=CommentForm(),
                           captcha_image=captcha_image)


@article_bp.route('/comment', methods=['POST'])
def post_comment():
    """发布评论，始终返回 JSON"""
    form = CommentForm()
    user = current_user._get_current_object() if current_user.is_authenticated else None

    result, comment = CommentService.post_comment(
        article_id=form.article_id.data,
        content=form.content.data,
        user=user,
        nickname=form.nickname.data,
        pid=form.pid.data,
        email=form.email.data,
        wechat=form.wechat.data,
        qq=form.qq.data,
        captcha=form.captcha.data,
        captcha_validator=validate_captcha
    )
    response = jsonify(result)

    if comment is not None:
        NotifyService.dispatch(comment.article, comment)
    return response


@article_bp.route('/captcha')
def refresh_captcha():
    """AJAX刷新验证码"""
    return jsonify({'image': issue_captcha()})
