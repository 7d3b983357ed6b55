"""Display hints for menu engineering categories."""

from typing import Union

from app.services.response_parser.data_models import MenuCategory

MENU_ICONS = {
    MenuCategory.STAR: "⭐",
    MenuCategory.PLOWHORSE: "🐴",
    MenuCategory.PUZZLE: "🧩",
    MenuCategory.DOG: "🐕",
}

MENU_COLORS = {
    MenuCategory.STAR: "text-warning",
    MenuCategory.PLOWHORSE: "text-info",
    MenuCategory.PUZZLE: "text-primary",
    MenuCategory.DOG: "text-muted-foreground",
}

DEFAULT_ICON = "📊"
DEFAULT_COLOR = "text-foreground"


def _as_category(category: Union[MenuCategory, str]):
    try:
        return MenuCategory(str(getattr(category, "value", category)).upper())
    except ValueError:
        return None


def get_menu_eng_icon(category: Union[MenuCategory, str]) -> str:
    return MENU_ICONS.get(_as_category(category), DEFAULT_ICON)


def get_menu_eng_color(category: Union[MenuCategory, str]) -> str:
    return MENU_COLORS.get(_as_category(category), DEFAULT_COLOR)
