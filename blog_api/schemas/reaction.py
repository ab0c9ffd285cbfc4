from typing import Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict

from blog_api.schemas.post import CAMEL_OUT


class ReactionAction(str, Enum):
    LIKED = "liked"
    UNLIKED = "unliked"
    DISLIKED = "disliked"
    UNDISLIKED = "undisliked"


class ReactionToggleOut(BaseModel):
    """
    点赞 / 踩 切换结果：
    - liked / unliked:       {message, action, likesCount}
    - disliked:              {message, action, dislikesCount, likesCount}
    - undisliked:            {message, action, dislikesCount}
    未涉及的计数为 None，序列化时用 exclude_none 去掉
    """
    message: str
    action: ReactionAction
    likes_count: Optional[int] = None
    dislikes_count: Optional[int] = None

    model_config = ConfigDict(alias_generator=CAMEL_OUT)
