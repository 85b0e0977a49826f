"""
API курсов обменных пунктов
"""
import json
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from cityinfo.core.security import require_courses_token
from cityinfo.services.intake import rate_intake
from cityinfo.services.rates_service import rates_service

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("/{city_id}/")
async def get_city_courses(
    city_id: int,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
):
    """
    Видимые курсы города, лучшие курсы (розница/опт) и курсы Нацбанка.
    Сортировка: любое из десяти полей buy*/sell*, иначе по времени обновления.
    """
    return await rates_service.list_city_rates(city_id, sort_by)


@router.post("/update/", dependencies=[Depends(require_courses_token)])
@router.post("/update", dependencies=[Depends(require_courses_token)], include_in_schema=False)
async def update_course(request: Request):
    """
    Обновление курса от внешней системы: проверка полей и рассылка в комнату города.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    await rate_intake.accept(payload)
    return {"success": True}


@router.post("/{path:path}", dependencies=[Depends(require_courses_token)], include_in_schema=False)
async def unknown_course_post(path: str):
    """Остальные POST под /courses: сначала токен, потом 404."""
    raise HTTPException(status_code=404)
