from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Text,
    Table,
    Index,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


# --- Catalog associations ---

menu_dishes = Table(
    "menu_dishes",
    Base.metadata,
    Column("menu_id", Integer, ForeignKey("menus.id", ondelete="CASCADE"), primary_key=True),
    Column("dish_id", Integer, ForeignKey("dishes.id", ondelete="CASCADE"), primary_key=True),
)

dish_allergens = Table(
    "dish_allergens",
    Base.metadata,
    Column("dish_id", Integer, ForeignKey("dishes.id", ondelete="CASCADE"), primary_key=True),
    Column("allergen_id", Integer, ForeignKey("allergens.id", ondelete="CASCADE"), primary_key=True),
)


class Diet(Base):
    __tablename__ = "diets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)  # e.g. "Végétarien", "Halal"
    description = Column(Text, nullable=True)

    menus = relationship("Menu", back_populates="diet")


class Theme(Base):
    __tablename__ = "themes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)  # e.g. "Mariage", "Noël"
    description = Column(Text, nullable=True)

    menus = relationship("Menu", back_populates="theme")


class Allergen(Base):
    __tablename__ = "allergens"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    dishes = relationship("Dish", secondary=dish_allergens, back_populates="allergens")


class Dish(Base):
    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    course_type = Column(String, nullable=False, default="plat")  # 'entrée', 'plat', 'dessert'

    allergens = relationship("Allergen", secondary=dish_allergens, back_populates="dishes")
    menus = relationship("Menu", secondary=menu_dishes, back_populates="dishes")


class Menu(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    conditions = Column(Text, nullable=True)  # delivery/ordering notes shown to customers
    person_min = Column(Integer, nullable=False, default=1)
    price_per_person = Column(Float, nullable=False)
    remaining_qty = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="published", index=True)  # published/draft
    is_seasonal = Column(Boolean, nullable=False, default=False)
    diet_id = Column(Integer, ForeignKey("diets.id"), nullable=True, index=True)
    theme_id = Column(Integer, ForeignKey("themes.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    diet = relationship("Diet", back_populates="menus")
    theme = relationship("Theme", back_populates="menus")
    dishes = relationship("Dish", secondary=menu_dishes, back_populates="menus")
    orders = relationship("Order", back_populates="menu")


# --- Customers ---

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    role = Column(String, nullable=False, default="client")  # client/employee/admin
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user")


class UserSession(Base):
    """Opaque bearer token for a signed-in customer."""
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="sessions")


# --- Orders ---

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False, index=True)  # e.g. VG-20260615-AB12CD
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=True)  # NULL for custom quote requests
    status = Column(String, nullable=False, default="pending", index=True)  # quote/pending/confirmed/.../cancelled
    delivery_date = Column(Date, nullable=False)
    delivery_hour = Column(String, nullable=False)
    delivery_address = Column(String, nullable=False)
    person_number = Column(Integer, nullable=False)
    menu_price = Column(Float, nullable=False, default=0.0)
    total_price = Column(Float, nullable=False, default=0.0)
    special_instructions = Column(Text, nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="orders")
    menu = relationship("Menu", back_populates="orders")

    # Composite index for common query pattern: filtering by status and sorting by date
    __table_args__ = (
        Index("ix_orders_status_created_at", "status", "created_at"),
    )


# --- Contact & support ---

class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    email = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id = Column(Integer, primary_key=True, index=True)
    ticket_number = Column(String, unique=True, nullable=False, index=True)  # e.g. TK202606-AB12CD
    category = Column(String, nullable=False, default="other")  # order/menu/other
    subject = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default="normal")
    status = Column(String, nullable=False, default="open", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
