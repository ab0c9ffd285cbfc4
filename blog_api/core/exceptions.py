# domain_exceptions.py
from typing import Optional


class PostNotFound(Exception):
    """找不到帖子"""
    def __init__(self, pid: str | None = None, message: str | None = None):
        if message:
            super().__init__(message)
        else:
            super().__init__(f"post {pid} not found")


class InvalidPostInput(Exception):
    """
    创建 / 更新帖子时缺少必填字段：
    - title / content 为空
    """
    def __init__(self, message: str = "Please provide all required fields"):
        super().__init__(message)


class ForbiddenAction(Exception):
    """
    权限校验失败：
    - 非管理员创建帖子
    - 非作者本人（或非管理员）更新 / 删除帖子
    """
    def __init__(self, message: str = "You are not allowed to perform this action"):
        super().__init__(message)


class StoreFailure(Exception):
    """
    数据库读写出现意外错误时抛出：
    - 由 transaction() 在回滚后包装 SQLAlchemyError
    - 不做自动重试，交给调用方决定
    """

    def __init__(self, operation: Optional[str] = None, message: Optional[str] = None):
        if message:
            self.message = message
        elif operation is not None:
            self.message = f"store failure during {operation}"
        else:
            self.message = "store failure"

        super().__init__(self.message)


class InvalidToken(Exception):
    """访问令牌缺失、签名错误或已过期"""
    def __init__(self, message: str = "invalid or expired access token"):
        super().__init__(message)
