import calendar
from datetime import datetime, timezone, timedelta

# 东八区
CN_TZ = timezone(timedelta(hours=8))


def now_utc8():
    """返回东八区的当前时间"""
    return datetime.now(CN_TZ)


def one_month_ago(now: datetime | None = None) -> datetime:
    """
    上个月的今天零点（按日历月回退，而不是固定 30 天）：
    - 3 月 31 日 -> 2 月 28/29 日（日期截断到目标月份的最后一天）
    - 1 月 15 日 -> 去年 12 月 15 日
    """
    now = now or now_utc8()
    year, month = now.year, now.month - 1
    if month == 0:
        year, month = year - 1, 12
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day, hour=0, minute=0, second=0, microsecond=0)
