# blog_api/storage/reaction/reaction_interface.py

from typing import Optional, Protocol

from blog_api.models.reaction import ReactionKind


class IReactionRepository(Protocol):
    """
    帖子反应（点赞 / 踩）仓库接口协议
    业务层依赖本接口，而不是具体实现
    """

    def toggle(self, post_id: str, user_id: str, kind: ReactionKind, clears: Optional[ReactionKind] = None) -> bool:
        """
        在同一个事务里切换一个用户对帖子的某种反应：
        - 已存在 => 删除，返回 False
        - 不存在 => 插入，返回 True；clears 不为 None 时同时删除该用户的 clears 反应
        - 帖子的 updated_at 会被刷新
        - 帖子已不存在（外键冲突）=> 抛 PostNotFound
        """
        ...

    def count(self, post_id: str, kind: ReactionKind) -> int:
        ...

    def has_reaction(self, post_id: str, user_id: str, kind: ReactionKind) -> bool:
        """该用户是否已对帖子做出 kind 反应"""
        ...
