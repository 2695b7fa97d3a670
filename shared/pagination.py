"""
Pagination par offset (page / limit)
"""
import math

from .exceptions import ValidationError

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def parse_page_params(page=None, limit=None, default_limit=DEFAULT_LIMIT):
    """Convertit et contrôle les paramètres page et limit"""
    try:
        page = int(page) if page not in (None, '') else 1
        limit = int(limit) if limit not in (None, '') else default_limit
    except (TypeError, ValueError):
        raise ValidationError(details={'pagination': ['page et limit doivent être des entiers']})
    if page < 1 or limit < 1 or limit > MAX_LIMIT:
        raise ValidationError(
            details={'pagination': [f'page >= 1 et 1 <= limit <= {MAX_LIMIT} requis']}
        )
    return page, limit


def paginate(queryset, page=None, limit=None, default_limit=DEFAULT_LIMIT):
    """
    Découpe un queryset et retourne les éléments avec les métadonnées
    currentPage, totalPages, totalItems et itemsPerPage.
    """
    page, limit = parse_page_params(page, limit, default_limit)
    total = queryset.count()
    offset = (page - 1) * limit
    return {
        'items': list(queryset[offset:offset + limit]),
        'currentPage': page,
        'totalPages': math.ceil(total / limit) if total else 0,
        'totalItems': total,
        'itemsPerPage': limit,
    }
