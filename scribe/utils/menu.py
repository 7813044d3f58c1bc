"""
前台导航菜单工具
"""
from scribe.models.sys import Menu


def load_menus():
    """按顺序读取全部导航菜单"""
    return Menu.query.filter_by(is_deleted=False).order_by(Menu.order_number.asc(), Menu.id.asc()).all()


def flag_menu_active(menus, predicate, active_ids=None):
    """
    把满足 predicate 的菜单 ID 加入高亮集合
    :param predicate: menu -> bool
    :return: 高亮菜单 ID 集合
    """
    if active_ids is None:
        active_ids = set()
    for menu in menus:
        if predicate(menu):
            active_ids.add(menu.id)
    return active_ids
