# blog_api/storage/reaction/SQLAlchemyReactionRepository.py

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blog_api.models.post import Post
from blog_api.models.reaction import PostReaction, ReactionKind
from blog_api.storage.reaction.reaction_interface import IReactionRepository
from blog_api.core.db import transaction
from blog_api.core.exceptions import PostNotFound, StoreFailure
from blog_api.core.time import now_utc8


class SQLAlchemyReactionRepository(IReactionRepository):
    """
    使用 SQLAlchemy 实现的反应仓库
    切换操作不做“先读后写”，而是条件删除 + 插入，依赖唯一约束处理并发
    """

    def __init__(self, db: Session):
        self.db = db

    def _membership(self, post_id: str, user_id: str, kind: ReactionKind):
        return self.db.query(PostReaction).filter(
            PostReaction.post_id == post_id,
            PostReaction.user_id == user_id,
            PostReaction.kind == int(kind),
        )

    def toggle(self, post_id: str, user_id: str, kind: ReactionKind, clears: Optional[ReactionKind] = None) -> bool:
        """
        1) 条件删除：删掉了说明原来存在 -> 本次是“取消”
        2) 没删到 -> 插入新反应，并按需删除互斥的另一种反应
        3) 并发下两个请求都走到插入时，后提交的会触发唯一约束：
           此时该反应已经存在，结果与“插入成功”一致
        4) 插入触发外键约束（帖子在校验之后被删除）时抛 PostNotFound
        """
        try:
            with transaction(self.db):
                removed = self._membership(post_id, user_id, kind).delete(synchronize_session=False)
                if not removed:
                    self.db.add(PostReaction(post_id=post_id, user_id=user_id, kind=int(kind)))
                    if clears is not None:
                        self._membership(post_id, user_id, clears).delete(synchronize_session=False)

                # 反应变化也算帖子的一次修改
                (
                    self.db.query(Post)
                    .filter(Post.pid == post_id)
                    .update({Post.updated_at: now_utc8()}, synchronize_session=False)
                )
        except StoreFailure as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise
            # 唯一约束冲突：另一个请求已插入同一反应
            if self.has_reaction(post_id, user_id, kind):
                return True
            # 外键冲突：帖子已被删除
            raise PostNotFound(pid=post_id) from e

        return not removed

    def count(self, post_id: str, kind: ReactionKind) -> int:
        return (
            self.db.query(PostReaction)
            .filter(PostReaction.post_id == post_id, PostReaction.kind == int(kind))
            .count()
        )

    def has_reaction(self, post_id: str, user_id: str, kind: ReactionKind) -> bool:
        return (
            self.db.query(PostReaction)
            .filter(
                PostReaction.post_id == post_id,
                PostReaction.user_id == user_id,
                PostReaction.kind == int(kind),
            )
            .first()
            is not None
        )
