"""Data-access layer: one repository class per aggregate, sharing a session."""

from .base import BaseRepository
from .carts import CartsRepository
from .catalog import CategoriesRepository, ProductsRepository, SizesRepository
from .orders import OrdersRepository
from .pages import PagesRepository
from .reviews import ReviewsRepository, WishlistsRepository
from .settings import SettingsRepository
from .users import UsersRepository

__all__ = [
    "BaseRepository",
    "CartsRepository",
    "CategoriesRepository",
    "ProductsRepository",
    "SizesRepository",
    "OrdersRepository",
    "PagesRepository",
    "ReviewsRepository",
    "WishlistsRepository",
    "SettingsRepository",
    "UsersRepository",
]
