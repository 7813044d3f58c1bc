import os
from scribe import create_app, db
from scribe.models import User, Article, ArticleCategory, Comment, Option, Menu, Notification

# 从环境变量获取配置模式
config_name = os.getenv('FLASK_ENV') or os.getenv('FLASK_CONFIG') or 'default'
if config_name in ('development', 'dev'):
    config_name = 'development'

app = create_app(config_name)


@app.shell_context_processor
def make_shell_context():
    """
    配置 Flask Shell 上下文。
    允许在命令行中使用 'flask shell' 时自动导入 db 和常用模型。
    """
    return dict(
        db=db,
        app=app,
        User=User,
        Article=Article,
        ArticleCategory=ArticleCategory,
        Comment=Comment,
        Option=Option,
        Menu=Menu,
        Notification=Notification,
    )


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000)
