# storefront/utils/paging.py
import math
from typing import Any, Dict

from storefront.utils import settings


def page_window(page: int, limit: int) -> tuple[int, int]:
    page = max(page, 1)
    limit = min(max(limit, 1), settings.MAX_PAGE_SIZE)
    return page, limit


def paginated(rows, page: int, limit: int, total: int) -> Dict[str, Any]:
    return {
        "data": rows,
        "pagination": {
            "page": page,
            "page_size": limit,
            "total": total,
            "total_pages": math.ceil(total / limit) if total else 0,
        },
    }
