"""
评论验证码
生成 SVG 图片验证码，验证码文本保存在 session 中，校验后立即作废
"""
import random
import base64
from flask import session

SESSION_KEY = 'comment_captcha'

# 排除 0, O, I, 1 等容易混淆的字符
CAPTCHA_CHARS = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
NOISE_COLORS = ['#3b82f6', '#a855f7', '#22c55e', '#f59e0b', '#ef4444']


def generate_captcha_code(length=4):
    return ''.join(random.choice(CAPTCHA_CHARS) for _ in range(length))


def generate_captcha_svg(code, width=120, height=40):
    """生成SVG格式的验证码图片"""
    parts = [f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">',
             f'<rect width="{width}" height="{height}" fill="#f8fafc"/>']

    # 干扰线
    for _ in range(5):
        parts.append(
            f'<line x1="{random.randint(0, width)}" y1="{random.randint(0, height)}" '
            f'x2="{random.randint(0, width)}" y2="{random.randint(0, height)}" '
            f'stroke="{random.choice(NOISE_COLORS)}" stroke-width="1" opacity="0.4"/>'
        )

    # 干扰点
    for _ in range(30):
        parts.append(
            f'<circle cx="{random.randint(0, width)}" cy="{random.randint(0, height)}" '
            f'r="{random.randint(1, 2)}" fill="{random.choice(NOISE_COLORS)}" opacity="0.5"/>'
        )

    char_width = width // (len(code) + 1)
    for i, char in enumerate(code):
        x = char_width * (i + 0.7)
        y = height // 2 + random.randint(-3, 3)
        rotation = random.randint(-20, 20)
        parts.append(
            f'<text x="{x}" y="{y}" font-family="Arial, sans-serif" font-size="{random.randint(18, 22)}" '
            f'font-weight="bold" fill="{random.choice(NOISE_COLORS[:3])}" '
            f'transform="rotate({rotation},{x},{y})" dominant-baseline="middle">{char}</text>'
        )

    parts.append('</svg>')
    return ''.join(parts)


def get_captcha_data_uri(code):
    """获取验证码的Data URI（用于直接嵌入HTML）"""
    encoded = base64.b64encode(generate_captcha_svg(code).encode('utf-8')).decode('utf-8')
    return f'data:image/svg+xml;base64,{encoded}'


def issue_captcha():
    """生成新验证码并写入 session，返回图片 Data URI"""
    code = generate_captcha_code()
    session[SESSION_KEY] = code
    return get_captcha_data_uri(code)


def validate_captcha(token):
    """校验用户输入（不区分大小写），无论成功与否验证码都只能使用一次"""
    expected = session.pop(SESSION_KEY, None)
    if not expected or not token:
        return False
    return expected == token.strip().upper()
