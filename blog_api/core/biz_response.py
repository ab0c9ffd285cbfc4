from typing import Any

from fastapi.responses import JSONResponse


class BizResponse(JSONResponse):
    """
    统一响应包装：
    {
        "code": 200,      # 与 HTTP 状态码一致
        "msg": "ok",
        "data": ...
    }
    """

    def __init__(self, data: Any = None, msg: str = "ok", status_code: int = 200, **kwargs):
        super().__init__(
            content={"code": status_code, "msg": msg, "data": data},
            status_code=status_code,
            **kwargs,
        )
