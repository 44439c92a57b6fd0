"""Data layer - persistence models, mappers, repositories and Unit of Work."""

from .models import Base
from .uow import UnitOfWork, create_uow

__all__ = ["Base", "UnitOfWork", "create_uow"]
