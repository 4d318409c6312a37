def page_params(page, limit, max_limit=50):
    try:
        page = max(int(page) if page else 1, 1)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = max(int(limit) if limit else 10, 1)
    except (TypeError, ValueError):
        limit = 10
    return page, min(limit, max_limit)


def paginate_query(query, page, limit, max_limit=50):
    page, limit = page_params(page, limit, max_limit)
    items = query.offset((page - 1) * limit).limit(limit).all()
    total = query.order_by(None).count()
    total_pages = (total + limit - 1) // limit
    return items, {"total": total, "page": page, "limit": limit, "total_pages": total_pages}
