from fastapi import Query
from pydantic import BaseModel


def pagination_params(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
):
    return {"skip": skip, "limit": limit}


def paginate(rows, skip: int, limit: int, schema: type[BaseModel] | None = None):
    """
    Slice a query (or an already-filtered list) into one page.

    Rows are serialised through `schema` when given.
    """
    if isinstance(rows, list):
        total = len(rows)
        items = rows[skip:skip + limit]
    else:
        total = rows.count()
        items = rows.offset(skip).limit(limit).all()
    if schema is not None:
        items = [schema.model_validate(row) for row in items]
    return {"items": items, "total": total, "skip": skip, "limit": limit}
