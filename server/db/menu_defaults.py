# Static menu category defaults
# Used when the backend has no category rows to offer

from typing import List

from .models import MenuCategory

DEFAULT_CATEGORY_BACKGROUND = "linear-gradient(135deg, #334155 0%, #0f172a 100%)"

DEFAULT_MENU_CATEGORIES = [
    {"key": "classic", "label": "Классика", "full_label": "Классические пиццы"},
    {"key": "signature", "label": "Фирменные", "full_label": "Фирменные пиццы"},
    {"key": "roman", "label": "Римская", "full_label": "Римская пицца"},
    {"key": "seasonal", "label": "Сезонные", "full_label": "Сезонное меню"},
    {"key": "cold", "label": "Холодные", "full_label": "Холодные закуски и салаты"},
    {"key": "fried", "label": "Жареные", "full_label": "Жареные закуски"},
    {"key": "desserts", "label": "Десерты", "full_label": "Десерты"},
    {"key": "drinks", "label": "Напитки", "full_label": "Напитки"},
]

DEFAULT_CATEGORY_LABELS = {category["key"]: category["label"] for category in DEFAULT_MENU_CATEGORIES}


def default_category_image(key: str) -> str:
    return f"/menu-categories/{key}.svg"


def is_menu_category(key: str) -> bool:
    return key in DEFAULT_CATEGORY_LABELS


def get_default_menu_categories() -> List[MenuCategory]:
    """Static categories in display order (sort 10, 20, ...)"""
    return [
        MenuCategory(
            key=category["key"],
            label=category["label"],
            full_label=category["full_label"],
            image_url=default_category_image(category["key"]),
            background=DEFAULT_CATEGORY_BACKGROUND,
            sort=idx * 10 + 10,
        )
        for idx, category in enumerate(DEFAULT_MENU_CATEGORIES)
    ]
