"""
Saved recipe model.
"""

from sqlalchemy import Column, TIMESTAMP, ForeignKey, Integer, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base


class SavedRecipe(Base):
    """User bookmark of an externally sourced recipe; a row exists only while saved"""

    __tablename__ = "saved_recipe"

    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    recipe_id = Column(Integer, primary_key=True)
    saved_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="saved_recipes")
