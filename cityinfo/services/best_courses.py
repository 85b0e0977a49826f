"""
Расчёт выгодных курсов покупки/продажи по городу.
"""
from typing import Any, Dict, Iterable, Mapping, Optional

from ..models.exchange_rate import BUY_FIELDS, CURRENCY_FIELDS, SELL_FIELDS

BestCourses = Dict[str, Optional[float]]


def empty_best_courses() -> BestCourses:
    """None означает «нет данных» по полю."""
    return {field: None for field in CURRENCY_FIELDS}


def _positive(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def get_best_courses(rates: Iterable[Mapping[str, Any]]) -> Dict[str, BestCourses]:
    """
    Лучшая цена по каждому полю отдельно для розницы и опта.

    Покупка: максимум, продажа: минимум. Нулевые, отрицательные и
    отсутствующие значения пропускаются только для своего поля.
    """
    retail = empty_best_courses()
    gross = empty_best_courses()

    for rate in rates:
        best = gross if rate.get("gross") else retail
        for field in SELL_FIELDS:
            value = _positive(rate.get(field))
            if value is not None and (best[field] is None or value < best[field]):
                best[field] = value
        for field in BUY_FIELDS:
            value = _positive(rate.get(field))
            if value is not None and (best[field] is None or value > best[field]):
                best[field] = value

    return {"retail": retail, "gross": gross}
