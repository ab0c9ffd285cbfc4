# blog_api/storage/post/post_interface.py

from typing import Optional, List, Protocol
from datetime import datetime

from blog_api.schemas.post import (
    PostOnlyCreate,
    PostOut,
    PostUpdate,
    PostQuery,
)


class IPostRepository(Protocol):
    """
    帖子仓库接口协议（数据层抽象接口）
    业务层依赖本接口，而不是具体实现，方便后续替换为不同数据源
    """

    def create_post(self, data: PostOnlyCreate) -> PostOut:
        """
        创建帖子（点赞 / 踩集合为空）
        - 返回新建的帖子
        """
        ...

    def get_post_by_pid(self, pid: str) -> Optional[PostOut]:
        ...

    def get_post_by_slug(self, slug: str) -> Optional[PostOut]:
        """
        slug 不保证唯一：返回最近更新的那一篇
        """
        ...

    def list_posts(self, query: PostQuery) -> List[PostOut]:
        """
        按过滤条件分页查询：
        - 按 updated_at 排序（asc / desc），相同时间按存储顺序
        - 跳过 start_index 条，最多返回 limit 条
        """
        ...

    def count_posts(self, query: Optional[PostQuery] = None, created_since: Optional[datetime] = None) -> int:
        """
        统计帖子数：
        - query 为 None 时统计全部帖子（忽略分页参数）
        - created_since 不为 None 时只统计该时间之后创建的帖子
        """
        ...

    def update_post(self, pid: str, data: PostUpdate) -> Optional[PostOut]:
        """
        更新 title / content / category / image 中已传入的字段
        - 帖子不存在返回 None
        """
        ...

    def delete_post(self, pid: str) -> bool:
        """
        物理删除帖子及其全部反应
        - 返回是否删除成功
        """
        ...
