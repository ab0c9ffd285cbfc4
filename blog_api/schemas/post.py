from typing import Optional, List
from datetime import datetime
from enum import Enum

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# 对外 JSON 字段统一使用 camelCase（如 authorId / totalLikes），内部仍然是 snake_case
CAMEL_OUT = AliasGenerator(serialization_alias=to_camel)


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# 创建一篇帖子
class PostCreate(BaseModel):
    """
    创建帖子（管理员调用）
    - title / content 的非空校验放在业务层，缺失时返回 400 而不是 422
    - author_id 不由前端传，来自令牌
    """
    title: Optional[str] = None      # 标题
    content: Optional[str] = None    # 正文内容
    category: Optional[str] = None   # 分类，缺省为 uncategorized
    image: Optional[str] = None      # 封面图，缺省为占位图


class PostOnlyCreate(BaseModel):
    """
    创建帖子（内部调用插入帖子表中）：所有默认值都已在业务层补齐
    """
    author_id: str
    title: str
    slug: str
    content: str
    category: str
    image: str


class PostUpdate(BaseModel):
    """
    作者（管理员）更新帖子：
    - 只允许修改 title / content / category / image
    - slug / 点赞 / 踩 不受更新影响
    - 未传的字段保持不变
    """
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


# 查看帖子
class PostOut(BaseModel):
    """
    对外返回的帖子信息（含点赞 / 踩的用户集合）
    """
    pid: str                        # 帖子业务主键
    author_id: str                  # 作者 UID
    title: str
    slug: str
    content: str
    category: str
    image: str
    likes: List[str] = []           # 点赞用户
    dislikes: List[str] = []        # 踩的用户
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, alias_generator=CAMEL_OUT)


class PostListItem(PostOut):
    """列表项：在 PostOut 基础上附带本帖的点赞数 / 踩数"""
    total_likes: int = 0
    total_dislikes: int = 0


class PostQuery(BaseModel):
    """
    列表查询条件（全部可选，AND 组合；search_term 在标题 / 正文之间 OR）
    """
    author_id: Optional[str] = None
    category: Optional[str] = None
    slug: Optional[str] = None
    post_id: Optional[str] = None
    search_term: Optional[str] = None
    start_index: int = 0
    limit: int = 9
    order: SortOrder = SortOrder.DESC


class BatchPostsOut(BaseModel):
    """
    帖子列表返回：
    - total_posts: 全部帖子数（不受本次过滤条件影响，兼容旧接口）
    - filtered_posts: 满足本次过滤条件的帖子数
    - last_month_posts: 最近一个日历月内创建的帖子数（全局）
    - total_likes / total_dislikes: 仅统计当前页
    """
    posts: List[PostListItem]
    total_posts: int
    filtered_posts: int
    last_month_posts: int
    total_likes: int
    total_dislikes: int

    model_config = ConfigDict(alias_generator=CAMEL_OUT)


class PostPageOut(BaseModel):
    """
    帖子详情页所需的数据：
    - 帖子本身
    - 点赞 / 踩 数量，以及当前访问者是否已点赞 / 踩
    - 最近更新的几篇帖子
    """
    post: PostOut
    likes_count: int
    dislikes_count: int
    viewer_liked: bool = False
    viewer_disliked: bool = False
    recent_posts: List[PostOut] = []

    model_config = ConfigDict(alias_generator=CAMEL_OUT)
