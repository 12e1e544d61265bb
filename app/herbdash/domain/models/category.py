from enum import Enum
from typing import List


class Category(Enum):
    """
    Processing-method classes of Angelica sinensis (Danggui) slices.
    Declaration order defines the integer encoding used by the classifiers.
    """
    RAW = ("raw", "生当归")
    WINE_BROILED = ("wine_broiled", "酒炙当归")
    WINE_WASHED = ("wine_washed", "酒洗当归")
    WINE_STIR_FRIED = ("wine_stir_fried", "酒炒当归")
    WINE_SOAKED = ("wine_soaked", "酒浸当归")

    def __init__(self, code: str, display_name: str):
        self.code = code
        self.display_name = display_name

    @property
    def index(self) -> int:
        return list(Category).index(self)

    @classmethod
    def from_code(cls, code: str) -> "Category":
        for category in cls:
            if category.code == code or category.display_name == code:
                return category
        raise ValueError(f"Unknown category: {code!r}")

    @classmethod
    def from_index(cls, index: int) -> "Category":
        return list(cls)[int(index)]

    @classmethod
    def codes(cls) -> List[str]:
        return [category.code for category in cls]

    def __repr__(self):
        return f"Category.{self.name}"
