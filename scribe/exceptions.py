class ScribeException(Exception):
    """系统基础异常类"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        if self.message:
            rv['message'] = self.message
        rv['code'] = self.code
        rv['success'] = False
        return rv


class CommentRejected(ScribeException):
    """评论被拒绝 (参数校验失败或站点策略不允许)"""
    def __init__(self, message=None, payload=None):
        super().__init__(message, code=1, payload=payload)


class LoginRequired(CommentRejected):
    """未登录用户不能评论，客户端可据 code=9 引导登录"""
    def __init__(self, message="unauthenticated users may not comment", payload=None):
        super().__init__(message, payload=payload)
        self.code = 9
