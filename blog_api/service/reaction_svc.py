from typing import Dict

from blog_api.schemas.reaction import ReactionToggleOut, ReactionAction
from blog_api.models.reaction import ReactionKind

from blog_api.storage.post.post_interface import IPostRepository
from blog_api.storage.reaction.reaction_interface import IReactionRepository

from blog_api.core.config import settings
from blog_api.core.exceptions import PostNotFound
from blog_api.core.logx import logger


def _dump(result: ReactionToggleOut, to_dict: bool) -> Dict | ReactionToggleOut:
    return result.model_dump(by_alias=True, exclude_none=True, mode="json") if to_dict else result


# ----------------------------- 点赞 / 取消点赞 -----------------------------
def toggle_like(
    post_repo: IPostRepository,
    reaction_repo: IReactionRepository,
    post_id: str,
    user_id: str,
    to_dict: bool = True,
) -> Dict | ReactionToggleOut:
    """
    切换点赞：

    1. 校验帖子是否存在，不存在抛 PostNotFound
    2. 未点赞 -> 点赞；已点赞 -> 取消点赞
       - LIKE_CLEARS_DISLIKE=true（默认）时点赞会同时去掉该用户的踩，保证点赞与踩互斥
       - 为 false 时保留旧行为：点赞不影响已有的踩
    3. 返回 {message, action, likesCount}
    """
    if not post_repo.get_post_by_pid(post_id):
        raise PostNotFound(pid=post_id)

    clears = ReactionKind.DISLIKE if settings.like_clears_dislike else None
    liked = reaction_repo.toggle(post_id, user_id, ReactionKind.LIKE, clears=clears)
    likes_count = reaction_repo.count(post_id, ReactionKind.LIKE)

    if liked:
        result = ReactionToggleOut(message="Post liked", action=ReactionAction.LIKED, likes_count=likes_count)
    else:
        result = ReactionToggleOut(message="Post unliked", action=ReactionAction.UNLIKED, likes_count=likes_count)

    logger.info(f"User {user_id} {result.action.value} post {post_id}, likes={likes_count}")
    return _dump(result, to_dict)


# ----------------------------- 踩 / 取消踩 -----------------------------
def toggle_dislike(
    post_repo: IPostRepository,
    reaction_repo: IReactionRepository,
    post_id: str,
    user_id: str,
    to_dict: bool = True,
) -> Dict | ReactionToggleOut:
    """
    切换踩：

    1. 校验帖子是否存在
    2. 未踩 -> 踩，并去掉该用户的点赞（同一事务）
       返回 {message, action, dislikesCount, likesCount}
    3. 已踩 -> 取消踩，返回 {message, action, dislikesCount}
    """
    if not post_repo.get_post_by_pid(post_id):
        raise PostNotFound(pid=post_id)

    disliked = reaction_repo.toggle(post_id, user_id, ReactionKind.DISLIKE, clears=ReactionKind.LIKE)
    dislikes_count = reaction_repo.count(post_id, ReactionKind.DISLIKE)

    if disliked:
        result = ReactionToggleOut(
            message="Post disliked",
            action=ReactionAction.DISLIKED,
            dislikes_count=dislikes_count,
            likes_count=reaction_repo.count(post_id, ReactionKind.LIKE),
        )
    else:
        result = ReactionToggleOut(message="Post undisliked", action=ReactionAction.UNDISLIKED, dislikes_count=dislikes_count)

    logger.info(f"User {user_id} {result.action.value} post {post_id}, dislikes={dislikes_count}")
    return _dump(result, to_dict)
