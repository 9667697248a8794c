"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.auth_models import Company, Member, Verification, ROLE_VIEWER, ROLE_EDITOR
from app.models.diner import Diner, DinerImage, DinerSubscription
from app.models.comment import Comment, Reply, SHARE_ME, SHARE_COMPANY

__all__ = [
    "Base",
    "Company", "Member", "Verification", "ROLE_VIEWER", "ROLE_EDITOR",
    "Diner", "DinerImage", "DinerSubscription",
    "Comment", "Reply", "SHARE_ME", "SHARE_COMPANY",
]
