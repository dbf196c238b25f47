from __future__ import annotations

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class RestaurantModel(Base):
    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    dishes: Mapped[list["DishModel"]] = relationship(
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="DishModel.id",
    )


class DishModel(Base):
    __tablename__ = "dishes"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    restaurant_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    image_url: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    dietary_tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    ingredients: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    restaurant: Mapped[RestaurantModel] = relationship(back_populates="dishes")
