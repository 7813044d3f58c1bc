from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, IntegerField, SubmitField
from wtforms.validators import Optional, Length


class CommentForm(FlaskForm):
    """
    评论表单
    只负责取值与类型转换，发布规则由 CommentService 按顺序校验
    """
    article_id = IntegerField('文章', validators=[Optional()])
    pid = IntegerField('回复', validators=[Optional()])
    nickname = StringField('昵称', validators=[Length(max=64)])
    content = TextAreaField('评论内容')
    email = StringField('邮箱', validators=[Length(max=128)])
    wechat = StringField('微信', validators=[Length(max=64)])
    qq = StringField('QQ', validators=[Length(max=32)])
    captcha = StringField('验证码')
    submit = SubmitField('发表评论')
