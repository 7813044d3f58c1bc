from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Length


class LoginForm(FlaskForm):
    """用户登录表单"""
    username = StringField('用户名', validators=[
        DataRequired(message="请输入用户名"),
        Length(max=64)
    ])
    password = PasswordField('密码', validators=[
        DataRequired(message="请输入密码")
    ])
    remember_me = BooleanField('记住我')
    submit = SubmitField('登录')
