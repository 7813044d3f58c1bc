from scribe.extensions import db
from .base import BaseModel


class Option(BaseModel):
    """站点选项 (key-value)"""
    __tablename__ = 'sys_options'

    key = db.Column(db.String(128), unique=True, index=True, nullable=False)
    value = db.Column(db.Text)

    def __repr__(self):
        return f'<Option {self.key}={self.value}>'


class Menu(BaseModel):
    """前台导航菜单"""
    __tablename__ = 'sys_menus'

    pid = db.Column(db.Integer, db.ForeignKey('sys_menus.id'), nullable=True)
    text = db.Column(db.String(64))
    url = db.Column(db.String(512))
    target = db.Column(db.String(16), default='_self')
    order_number = db.Column(db.Integer, default=0)

    # 菜单所代表的数据，例如 relative_table='article_category', relative_id=分类ID
    relative_table = db.Column(db.String(64))
    relative_id = db.Column(db.Integer)
