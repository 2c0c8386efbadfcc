"""
List query building shared by the category and product endpoints.

A ListQuery bundles the filter criteria, the ordering and the requested page.
run_list_query executes it against a Store and returns the page of entities
together with the pagination block of the response envelope.
"""

from dataclasses import dataclass, field
import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import String, false, func

from models import Category, Product
from store import Store

DEFAULT_CATEGORY_LIMIT = 20
DEFAULT_PRODUCT_LIMIT = 10
MAX_PAGE_LIMIT = 100


@dataclass
class PageRequest:
    page: int = 1
    limit: int = DEFAULT_PRODUCT_LIMIT

    def __post_init__(self):
        if self.page < 1 or self.limit < 1:
            raise ValueError("page and limit must be positive")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def take(self) -> int:
        return self.limit


@dataclass
class ListQuery:
    page: PageRequest
    criteria: List[Any] = field(default_factory=list)
    order_by: Tuple[Any, ...] = ()


def contains_ignore_case(column, text: str):
    # autoescape makes % and _ in the text match literally
    return func.lower(column, type_=String).contains(text.lower(), autoescape=True)


def build_category_query(search: Optional[str], page: PageRequest) -> ListQuery:
    criteria = []
    if search:
        criteria.append(Category.name_key.contains(search.strip().lower(), autoescape=True))
    return ListQuery(page=page, criteria=criteria, order_by=(Category.name.asc(),))


def resolve_category_id(categories: Store, name: str) -> Optional[str]:
    category = categories.find_one([Category.name_key == name.strip().lower()])
    return category.id if category else None


def build_product_query(categories: Store, page: PageRequest, name: Optional[str] = None,
                        category: Optional[str] = None, in_stock: Optional[bool] = None) -> ListQuery:
    criteria = []
    if name:
        criteria.append(contains_ignore_case(Product.name, name.strip()))
    if category:
        category_id = resolve_category_id(categories, category)
        if category_id is None:
            # unknown category matches nothing
            criteria.append(false())
        else:
            criteria.append(Product.category_id == category_id)
    if in_stock is not None:
        criteria.append(Product.in_stock == in_stock)
    return ListQuery(page=page, criteria=criteria, order_by=(Product.created_at.desc(), Product.id.desc()))


def pagination(page: PageRequest, total: int) -> Dict[str, int]:
    return {
        "page": page.page,
        "limit": page.limit,
        "total": total,
        "pages": math.ceil(total / page.limit),
    }


def run_list_query(store: Store, query: ListQuery):
    total = store.count(query.criteria)
    if query.page.skip >= total:
        # past the last page, offsets this large may not fit the store
        return [], pagination(query.page, total)
    items = store.find(query.criteria, query.order_by, skip=query.page.skip, limit=query.page.take)
    return items, pagination(query.page, total)
