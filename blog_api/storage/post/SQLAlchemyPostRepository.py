from typing import Optional, List
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from blog_api.models.post import Post
from blog_api.schemas.post import (
    PostOnlyCreate,
    PostOut,
    PostUpdate,
    PostQuery,
    SortOrder,
)
from blog_api.storage.post.post_interface import IPostRepository
from blog_api.core.db import transaction


def _like_pattern(term: str) -> str:
    """把搜索词转成 LIKE 子串模式，% _ / 按字面匹配（转义符为 /）"""
    escaped = term.replace("/", "//").replace("%", "/%").replace("_", "/_")
    return f"%{escaped}%"


class SQLAlchemyPostRepository(IPostRepository):
    """
    使用 SQLAlchemy 实现的帖子仓库
    业务层依赖 IPostRepository 抽象接口
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- 内部基础查询 ----------

    def _filtered_query(self, query: PostQuery):
        """
        按 PostQuery 中的过滤条件构造查询（不含排序、分页）：
        - author_id / category / slug / post_id 精确匹配
        - search_term 对 title 或 content 做大小写不敏感的子串匹配
        """
        q = self.db.query(Post)
        if query.author_id:
            q = q.filter(Post.author_id == query.author_id)
        if query.category:
            q = q.filter(Post.category == query.category)
        if query.slug:
            q = q.filter(Post.slug == query.slug)
        if query.post_id:
            q = q.filter(Post.pid == query.post_id)
        if query.search_term:
            pattern = _like_pattern(query.search_term)
            q = q.filter(
                or_(
                    Post.title.ilike(pattern, escape="/"),
                    Post.content.ilike(pattern, escape="/"),
                )
            )
        return q

    def _get(self, pid: str) -> Optional[Post]:
        return self.db.query(Post).filter(Post.pid == pid).first()

    # ---------- 创建 ----------

    def create_post(self, data: PostOnlyCreate) -> PostOut:
        post = Post(**data.model_dump())

        with transaction(self.db):
            self.db.add(post)

        # 刷新以获取 pid / 时间戳
        self.db.refresh(post)
        return PostOut.model_validate(post)

    # ---------- 查询 ----------

    def get_post_by_pid(self, pid: str) -> Optional[PostOut]:
        post = self._get(pid)
        if not post:
            return None
        return PostOut.model_validate(post)

    def get_post_by_slug(self, slug: str) -> Optional[PostOut]:
        post: Optional[Post] = (
            self.db.query(Post)
            .filter(Post.slug == slug)
            .order_by(Post.updated_at.desc(), Post._id.asc())
            .first()
        )
        if not post:
            return None
        return PostOut.model_validate(post)

    def list_posts(self, query: PostQuery) -> List[PostOut]:
        if query.order == SortOrder.ASC:
            order_by = Post.updated_at.asc()
        else:
            order_by = Post.updated_at.desc()

        posts: List[Post] = (
            self._filtered_query(query)
            .order_by(order_by, Post._id.asc())   # 时间相同按存储顺序
            .offset(query.start_index)
            .limit(query.limit)
            .all()
        )
        return [PostOut.model_validate(post) for post in posts]

    def count_posts(self, query: Optional[PostQuery] = None, created_since: Optional[datetime] = None) -> int:
        q = self._filtered_query(query) if query is not None else self.db.query(Post)
        if created_since is not None:
            q = q.filter(Post.created_at >= created_since)
        return q.count()

    # ---------- 更新 / 删除 ----------

    def update_post(self, pid: str, data: PostUpdate) -> Optional[PostOut]:
        post = self._get(pid)
        if not post:
            return None

        update_data = data.model_dump(exclude_none=True)

        with transaction(self.db):
            for field, value in update_data.items():
                setattr(post, field, value)

        self.db.refresh(post)
        return PostOut.model_validate(post)

    def delete_post(self, pid: str) -> bool:
        """
        硬删除：relationship.cascade 会一并删除 post_reactions 中的记录
        """
        post = self._get(pid)
        if not post:
            return False

        with transaction(self.db):
            self.db.delete(post)

        return True
