import re
from typing import Dict, Optional

from blog_api.schemas.post import (
    PostCreate,
    PostOnlyCreate,
    PostOut,
    PostUpdate,
    PostQuery,
    PostListItem,
    BatchPostsOut,
    PostPageOut,
    SortOrder,
)
from blog_api.storage.post.post_interface import IPostRepository
from blog_api.core.config import settings
from blog_api.core.security import CurrentUser
from blog_api.core.time import one_month_ago
from blog_api.core.logx import logger
from blog_api.core.exceptions import PostNotFound, InvalidPostInput, ForbiddenAction

_SLUG_STRIP = re.compile(r"[^a-zA-Z0-9-]")


def make_slug(title: str) -> str:
    """
    由标题生成 slug：
    空格 -> '-'，转小写，去掉 [A-Za-z0-9-] 以外的字符
    例如 "Hello World!" -> "hello-world"
    """
    return _SLUG_STRIP.sub("", "-".join(title.split(" ")).lower())


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _parse_int(raw: Optional[str], default: int) -> int:
    try:
        return int(raw) if raw is not None else default
    except ValueError:
        return default


def build_post_query(
    author_id: Optional[str] = None,
    category: Optional[str] = None,
    slug: Optional[str] = None,
    post_id: Optional[str] = None,
    search_term: Optional[str] = None,
    start_index: Optional[str] = None,
    limit: Optional[str] = None,
    order: Optional[str] = None,
) -> PostQuery:
    """
    把查询字符串参数整理成 PostQuery：
    - startIndex 非数字或 < 0 时为 0
    - limit 非数字或 <= 0 时为默认每页数量
    - order 只有 "asc" 是升序，其余都按降序
    """
    start = max(_parse_int(start_index, 0), 0)
    size = _parse_int(limit, settings.posts_page_limit)
    if size <= 0:
        size = settings.posts_page_limit

    return PostQuery(
        author_id=author_id or None,
        category=category or None,
        slug=slug or None,
        post_id=post_id or None,
        search_term=search_term or None,
        start_index=start,
        limit=size,
        order=SortOrder.ASC if order == SortOrder.ASC.value else SortOrder.DESC,
    )


#---------------------------------------- 增 -----------------------------------------
def create_post(post_repo: IPostRepository, current_user: CurrentUser, data: PostCreate, to_dict: bool = True,) -> Dict | PostOut:
    """
    创建帖子（管理员）：
    1. 校验管理员权限（在访问数据库之前）
    2. 校验 title / content 非空
    3. 生成 slug，补齐分类和封面默认值
    4. 写入 posts 表，点赞 / 踩集合为空
    """
    if not current_user.is_admin:
        raise ForbiddenAction("You are not allowed to create a post")

    if _is_blank(data.title) or _is_blank(data.content):
        raise InvalidPostInput()

    post_only = PostOnlyCreate(
        author_id=current_user.uid,
        title=data.title,
        slug=make_slug(data.title),
        content=data.content,
        category=data.category or settings.default_category,
        image=data.image or settings.default_post_image,
    )
    post = post_repo.create_post(post_only)
    logger.info(f"Created post pid={post.pid} slug={post.slug} for author={current_user.uid}")

    return post.model_dump(by_alias=True) if to_dict else post


#---------------------------------------- 查 -----------------------------------------
def list_posts(post_repo: IPostRepository, query: PostQuery, to_dict: bool = True,) -> Dict | BatchPostsOut:
    """
    帖子列表 + 统计：
    - posts: 当前页，每条附带 total_likes / total_dislikes
    - total_posts: 全部帖子数（不受过滤影响）
    - filtered_posts: 满足过滤条件的帖子数
    - last_month_posts: 最近一个日历月内创建的帖子数
    - total_likes / total_dislikes: 当前页的合计
    """
    page = post_repo.list_posts(query)
    items = [
        PostListItem(
            **post.model_dump(),
            total_likes=len(post.likes),
            total_dislikes=len(post.dislikes),
        )
        for post in page
    ]

    result = BatchPostsOut(
        posts=items,
        total_posts=post_repo.count_posts(),
        filtered_posts=post_repo.count_posts(query=query),
        last_month_posts=post_repo.count_posts(created_since=one_month_ago()),
        total_likes=sum(item.total_likes for item in items),
        total_dislikes=sum(item.total_dislikes for item in items),
    )
    return result.model_dump(by_alias=True) if to_dict else result


def get_post_page(post_repo: IPostRepository, slug: str, viewer: Optional[CurrentUser] = None, to_dict: bool = True,) -> Dict | PostPageOut:
    """
    帖子详情页：
    - 按 slug 查帖子（重名时取最近更新的一篇），查不到抛 PostNotFound
    - 访客未登录时 viewer_liked / viewer_disliked 均为 False
    - 附带最近更新的几篇帖子
    """
    post = post_repo.get_post_by_slug(slug)
    if not post:
        raise PostNotFound(message=f"post with slug '{slug}' not found")

    recent = post_repo.list_posts(PostQuery(limit=settings.recent_posts_limit))

    page = PostPageOut(
        post=post,
        likes_count=len(post.likes),
        dislikes_count=len(post.dislikes),
        viewer_liked=viewer is not None and viewer.uid in post.likes,
        viewer_disliked=viewer is not None and viewer.uid in post.dislikes,
        recent_posts=recent,
    )
    return page.model_dump(by_alias=True) if to_dict else page


#------------------------------------- 改 / 删 ---------------------------------------
def _check_owner_access(current_user: CurrentUser, user_id: str, action: str) -> None:
    # 必须是管理员，且路径中的 user_id 就是调用者本人
    if not current_user.is_admin or current_user.uid != user_id:
        raise ForbiddenAction(f"You are not allowed to {action} this post")


def update_post(post_repo: IPostRepository, current_user: CurrentUser, pid: str, user_id: str, data: PostUpdate, to_dict: bool = True,) -> Dict | PostOut:
    """
    更新帖子：
    1. 管理员 + 本人校验（访问数据库之前）
    2. 帖子必须存在，且作者就是 user_id
    3. 只修改传入的 title / content / category / image；title / content 不能改成空
       category / image 传空值时恢复默认值
    """
    _check_owner_access(current_user, user_id, "update")

    if (data.title is not None and _is_blank(data.title)) or (data.content is not None and _is_blank(data.content)):
        raise InvalidPostInput("title and content cannot be empty")

    # 分类 / 封面传空值时回到默认值，与创建时一致
    defaults = {}
    if data.category is not None and _is_blank(data.category):
        defaults["category"] = settings.default_category
    if data.image is not None and _is_blank(data.image):
        defaults["image"] = settings.default_post_image
    if defaults:
        data = data.model_copy(update=defaults)

    post = post_repo.get_post_by_pid(pid)
    if not post:
        raise PostNotFound(pid=pid)
    if post.author_id != user_id:
        raise ForbiddenAction("You are not allowed to update this post")

    updated = post_repo.update_post(pid, data)
    if not updated:
        # 读取之后被并发删除
        raise PostNotFound(pid=pid)

    logger.info(f"Updated post pid={pid} with data={data.model_dump(exclude_none=True)}")
    return updated.model_dump(by_alias=True) if to_dict else updated


def delete_post(post_repo: IPostRepository, current_user: CurrentUser, pid: str, user_id: str) -> str:
    """
    删除帖子（物理删除，连同点赞 / 踩记录）
    """
    _check_owner_access(current_user, user_id, "delete")

    post = post_repo.get_post_by_pid(pid)
    if not post:
        raise PostNotFound(pid=pid)
    if post.author_id != user_id:
        raise ForbiddenAction("You are not allowed to delete this post")

    if not post_repo.delete_post(pid):
        logger.warning(f"Delete post failed, pid={pid} not found")
        raise PostNotFound(pid=pid)

    logger.info(f"Deleted post pid={pid} by user={user_id}")
    return "The post has been deleted"
