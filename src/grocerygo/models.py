"""SQLAlchemy database models."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from grocerygo.database import Base


class User(Base):
    """User account owning meal plans and saved recipes."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    meal_plans: Mapped[list["MealPlan"]] = relationship("MealPlan", back_populates="user")
    saved_recipes: Mapped[list["SavedRecipe"]] = relationship(
        "SavedRecipe", back_populates="user"
    )


class Recipe(Base):
    """Recipe with ingredients and steps.

    ``ingredients`` and ``steps`` are JSON lists for new rows; rows written by
    the old importer hold a string-encoded list instead.
    """

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    prep_time_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cook_time_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    servings: Mapped[int | None] = mapped_column(Integer, nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    ingredients: Mapped[Any] = mapped_column(JSON, default=list)
    steps: Mapped[Any] = mapped_column(JSON, default=list)
    meal_type: Mapped[list] = mapped_column(JSON, default=list)
    dietary_tags: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    meal_plan_recipes: Mapped[list["MealPlanRecipe"]] = relationship(
        "MealPlanRecipe", back_populates="recipe"
    )


class MealPlan(Base):
    """A week of meals starting on ``week_of``."""

    __tablename__ = "meal_plans"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    week_of: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending"
    )  # pending, in-progress, completed, generating
    total_meals: Mapped[int] = mapped_column(Integer, default=0)
    generation_method: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )  # ai-generated, template, manual
    checkout_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    checkout_link_created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["User"] = relationship("User", back_populates="meal_plans")
    recipes: Mapped[list["MealPlanRecipe"]] = relationship(
        "MealPlanRecipe", back_populates="plan", cascade="all, delete-orphan"
    )
    grocery_items: Mapped[list["GroceryItem"]] = relationship(
        "GroceryItem", back_populates="plan", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_meal_plans_user_id", "user_id"),
        Index("idx_meal_plans_week_of", "week_of"),
    )


class MealPlanRecipe(Base):
    """One scheduled occurrence of a recipe in a meal plan."""

    __tablename__ = "meal_plan_recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meal_plan_id: Mapped[str] = mapped_column(String, ForeignKey("meal_plans.id"))
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id"))
    planned_for_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    meal_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    portion_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    day_hint: Mapped[str | None] = mapped_column(String(20), nullable=True)
    slot_label: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    plan: Mapped["MealPlan"] = relationship("MealPlan", back_populates="recipes")
    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="meal_plan_recipes")

    __table_args__ = (Index("idx_meal_plan_recipes_plan_id", "meal_plan_id"),)


class GroceryItem(Base):
    """Grocery row of a plan as returned by the generator or edited by the user."""

    __tablename__ = "grocery_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meal_plan_id: Mapped[str] = mapped_column(String, ForeignKey("meal_plans.id"))
    item_name: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    purchased: Mapped[bool] = mapped_column(Boolean, default=False)
    purchased_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    plan: Mapped["MealPlan"] = relationship("MealPlan", back_populates="grocery_items")


class SavedRecipe(Base):
    """A recipe the user marked as favorite."""

    __tablename__ = "saved_recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False)
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["User"] = relationship("User", back_populates="saved_recipes")
    recipe: Mapped["Recipe"] = relationship("Recipe")

    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_saved_recipe"),
        Index("idx_saved_recipes_user_id", "user_id"),
    )
