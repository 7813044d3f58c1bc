from faker import Faker
from faker.providers import BaseProvider


class ScribeProvider(BaseProvider):
    """
    演示数据生成器
    生成文章标题、分类名与评论
    """

    topics = [
        'Flask', 'SQLAlchemy', 'Jinja2', '缓存', '部署', '日志',
        '数据库迁移', '单元测试', '性能优化', '安全', '国际化'
    ]

    title_patterns = [
        '{topic} 入门指南', '{topic} 实战笔记', '深入理解 {topic}',
        '{topic} 常见问题汇总', '我们是如何改进 {topic} 的'
    ]

    category_names = ['技术', '随笔', '教程', '公告', '产品']

    comment_phrases = [
        '写得很清楚，收藏了。', '请问第二步的配置放在哪里？', '感谢分享！',
        '我这边按文中步骤操作报错了。', '期待下一篇。', '有没有示例代码仓库？'
    ]

    def article_title(self):
        return self.random_element(self.title_patterns).format(topic=self.random_element(self.topics))

    def category_name(self):
        return self.random_element(self.category_names)

    def comment_text(self):
        return self.random_element(self.comment_phrases)


# 初始化 Faker 并添加自定义 Provider
fake = Faker('zh_CN')
fake.add_provider(ScribeProvider)
