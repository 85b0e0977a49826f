"""
Справочник городов: кнопки бота, ссылки на сайт, город по умолчанию.
"""
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class City:
    id: int
    gross: bool = False


NUR_SULTAN = "Нур-Султан"
NUR_SULTAN_OPT = "Нур-Султан Опт"
ALMATY = "Алматы"
ALMATY_OPT = "Алматы Опт"
PAVLODAR = "Павлодар"
RIDDER = "Риддер"
UST_KAMENOGORSK = "Усть-Каменогорск"
UST_KAMENOGORSK_OPT = "Усть-Каменогорск Опт"

# Текст кнопки -> город и тип цены (розница/опт)
CITY_BUTTONS: Dict[str, City] = {
    NUR_SULTAN: City(id=3),
    NUR_SULTAN_OPT: City(id=3, gross=True),
    ALMATY: City(id=2),
    ALMATY_OPT: City(id=2, gross=True),
    PAVLODAR: City(id=1),
    RIDDER: City(id=6),
    UST_KAMENOGORSK: City(id=4),
    UST_KAMENOGORSK_OPT: City(id=4, gross=True),
}

CITY_KEYBOARD: List[List[str]] = [
    [NUR_SULTAN, NUR_SULTAN_OPT],
    [ALMATY, ALMATY_OPT],
    [PAVLODAR, RIDDER],
    [UST_KAMENOGORSK, UST_KAMENOGORSK_OPT],
]

# id города -> сегмент URL на сайте
CITY_URL_SEGMENTS: Dict[int, str] = {
    1: "pavlodar",
    2: "almaty",
    3: "astana",
    4: "ust-kamenogorsk",
    5: "ust-kamenogorsk",
    6: "ridder",
    7: "almaty",
    8: "astana",
}

DEFAULT_CITY = City(id=4, gross=False)


def city_url(site_url: str, city_id: int) -> str:
    """Ссылка «Больше обменных пунктов» для города."""
    base_url = site_url + "exchange/"
    segment = CITY_URL_SEGMENTS.get(city_id)
    if segment is not None:
        return base_url + segment + "/"
    return base_url
