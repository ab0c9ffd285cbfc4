from typing import Optional

from fastapi import APIRouter, Depends, Query

from blog_api.schemas.post import PostCreate, PostUpdate
from blog_api.core.biz_response import BizResponse
from blog_api.core.security import CurrentUser, get_current_user, get_optional_user
from blog_api.service import post_svc, reaction_svc

from blog_api.storage.database import get_post_repo, get_reaction_repo
from blog_api.storage.post.post_interface import IPostRepository
from blog_api.storage.reaction.reaction_interface import IReactionRepository

from blog_api.core.exceptions import PostNotFound, InvalidPostInput, ForbiddenAction, StoreFailure
from blog_api.core.logx import logger
from fastapi.encoders import jsonable_encoder

posts_router = APIRouter(prefix="/api/post", tags=["posts"])


# --------------------------------- 创建帖子 ---------------------------------
@posts_router.post("/create")
def create_post(
    payload: PostCreate,
    current_user: CurrentUser = Depends(get_current_user),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    创建帖子（仅管理员）：
    - 生成 slug
    - 分类 / 封面缺省时使用默认值
    """
    try:
        post = post_svc.create_post(
            post_repo=post_repo,
            current_user=current_user,
            data=payload,
            to_dict=True,
        )
        return BizResponse(data=jsonable_encoder(post), status_code=201)
    except ForbiddenAction as e:
        return BizResponse(data=None, msg=str(e), status_code=403)
    except InvalidPostInput as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except StoreFailure as e:
        logger.exception("create_post store failure")
        return BizResponse(data=None, msg=str(e), status_code=500)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- 查询帖子 ---------------------------------
@posts_router.get("/getposts")
def list_posts(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    category: Optional[str] = None,
    slug: Optional[str] = None,
    post_id: Optional[str] = Query(default=None, alias="postId"),
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    start_index: Optional[str] = Query(default=None, alias="startIndex"),
    limit: Optional[str] = None,
    order: Optional[str] = None,
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    帖子列表（无需登录）：
    - 过滤：userId / category / slug / postId / searchTerm
    - 分页：startIndex（默认 0）/ limit（默认 9）
    - 排序：order=asc 按更新时间升序，其余降序
    """
    try:
        query = post_svc.build_post_query(
            author_id=user_id,
            category=category,
            slug=slug,
            post_id=post_id,
            search_term=search_term,
            start_index=start_index,
            limit=limit,
            order=order,
        )
        result = post_svc.list_posts(post_repo=post_repo, query=query, to_dict=True)
        return BizResponse(data=jsonable_encoder(result))
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/page/{slug}")
def get_post_page(
    slug: str,
    viewer: Optional[CurrentUser] = Depends(get_optional_user),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    帖子详情页数据：帖子、点赞 / 踩数、当前用户的反应、最近帖子
    """
    try:
        page = post_svc.get_post_page(post_repo=post_repo, slug=slug, viewer=viewer, to_dict=True)
        return BizResponse(data=jsonable_encoder(page))
    except PostNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- 更新 / 删除帖子 ---------------------------------
@posts_router.put("/updatepost/{post_id}/{user_id}")
def update_post(
    post_id: str,
    user_id: str,
    payload: PostUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    更新帖子（管理员且为作者本人）：只修改 title / content / category / image
    """
    try:
        post = post_svc.update_post(
            post_repo=post_repo,
            current_user=current_user,
            pid=post_id,
            user_id=user_id,
            data=payload,
            to_dict=True,
        )
        return BizResponse(data=jsonable_encoder(post))
    except ForbiddenAction as e:
        return BizResponse(data=None, msg=str(e), status_code=403)
    except InvalidPostInput as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except PostNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.delete("/deletepost/{post_id}/{user_id}")
def delete_post(
    post_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    post_repo: IPostRepository = Depends(get_post_repo),
):
    """
    删除帖子（管理员且为作者本人），物理删除
    """
    try:
        message = post_svc.delete_post(
            post_repo=post_repo,
            current_user=current_user,
            pid=post_id,
            user_id=user_id,
        )
        return BizResponse(data=message, msg=message)
    except ForbiddenAction as e:
        return BizResponse(data=None, msg=str(e), status_code=403)
    except PostNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


# -------------------------- 点赞 / 踩 -------------------------- #
@posts_router.post("/like/{post_id}")
def toggle_like(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    post_repo: IPostRepository = Depends(get_post_repo),
    reaction_repo: IReactionRepository = Depends(get_reaction_repo),
):
    """
    切换点赞：未点赞则点赞，已点赞则取消
    """
    try:
        result = reaction_svc.toggle_like(
            post_repo=post_repo,
            reaction_repo=reaction_repo,
            post_id=post_id,
            user_id=current_user.uid,
            to_dict=True,
        )
        return BizResponse(data=result, msg=result["message"])
    except PostNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("toggle_like error")
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.post("/dislike/{post_id}")
def toggle_dislike(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    post_repo: IPostRepository = Depends(get_post_repo),
    reaction_repo: IReactionRepository = Depends(get_reaction_repo),
):
    """
    切换踩：未踩则踩（同时取消点赞），已踩则取消
    """
    try:
        result = reaction_svc.toggle_dislike(
            post_repo=post_repo,
            reaction_repo=reaction_repo,
            post_id=post_id,
            user_id=current_user.uid,
            to_dict=True,
        )
        return BizResponse(data=result, msg=result["message"])
    except PostNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception("toggle_dislike error")
        return BizResponse(data=None, msg=str(e), status_code=500)
