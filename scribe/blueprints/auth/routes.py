from datetime import datetime
from urllib.parse import urlsplit
from flask import render_template, redirect, request, url_for, flash, current_app
from flask_login import login_user, logout_user, login_required, current_user

from scribe.extensions import db
from scribe.models.auth import User
from scribe.blueprints.auth import auth_bp
from scribe.blueprints.auth.forms import LoginForm


def safe_next_page():
    """只允许站内跳转 (防止开放重定向攻击)"""
    next_page = request.args.get('next')
    if not next_page or urlsplit(next_page).netloc != '':
        return url_for('auth.login')
    return next_page


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    # 已登录时页面只显示当前用户
    if current_user.is_authenticated:
        return render_template('auth/login.html', form=None)

    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(username=form.username.data).first()

        if user is None or not user.verify_password(form.password.data):
            current_app.logger.info(f'登录失败: {form.username.data}')
            flash('用户名或密码错误。', 'danger')
            return redirect(url_for('auth.login'))

        if not user.is_active:
            flash('该账户已被禁用，请联系管理员。', 'danger')
            return redirect(url_for('auth.login'))

        login_user(user, remember=form.remember_me.data)
        user.last_login = datetime.utcnow()
        db.session.commit()

        flash(f'欢迎回来，{user.display_name}。', 'success')
        return redirect(safe_next_page())

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    flash('您已退出登录。', 'info')
    return redirect(safe_next_page())
