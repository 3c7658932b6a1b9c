"""
Seed the catalog with diets, themes, allergens, dishes and menus, plus a demo
customer with a bearer token for trying the order endpoints.

    python -m vite_gourmand.seed_menu
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .auth import create_user_session
from .db import SessionLocal, init_db
from .logging_config import setup_logging
from .models import Allergen, Diet, Dish, Menu, Theme, User

logger = logging.getLogger(__name__)

DEMO_USER_EMAIL = "demo@vite-gourmand.fr"

DIETS = [
    ("Classique", "Cuisine traditionnelle sans restriction"),
    ("Végétarien", "Sans viande ni poisson"),
    ("Halal", "Viandes certifiées halal"),
]

THEMES = [
    ("Mariage", "Menus de réception pour mariages"),
    ("Entreprise", "Séminaires, cocktails et repas d'affaires"),
    ("Noël", "Menus de fêtes de fin d'année"),
]

ALLERGENS = ["Gluten", "Lait", "Œufs", "Fruits à coque", "Poisson", "Crustacés"]

# title, course type, description, allergen names
DISHES = [
    ("Velouté de potimarron", "entrée", "Crème de potimarron et éclats de noisette", ["Lait", "Fruits à coque"]),
    ("Tartare de saumon", "entrée", "Saumon frais, agrumes et aneth", ["Poisson"]),
    ("Salade de chèvre chaud", "entrée", "Chèvre rôti sur toast, miel et noix", ["Gluten", "Lait", "Fruits à coque"]),
    ("Coq au vin", "plat", "Volaille mijotée au vin rouge, lardons et champignons", []),
    ("Bœuf bourguignon", "plat", "Bœuf braisé au bourgogne, carottes fondantes", []),
    ("Ratatouille provençale", "plat", "Légumes du soleil confits à l'huile d'olive", []),
    ("Tajine d'agneau", "plat", "Agneau halal, abricots et amandes", ["Fruits à coque"]),
    ("Tarte Tatin", "dessert", "Pommes caramélisées, crème fraîche", ["Gluten", "Lait", "Œufs"]),
    ("Bûche chocolat", "dessert", "Bûche au chocolat noir et praliné", ["Gluten", "Lait", "Œufs", "Fruits à coque"]),
    ("Salade de fruits frais", "dessert", "Fruits de saison, menthe fraîche", []),
]

# title, price/person, min persons, stock, diet, theme, seasonal, dishes
MENUS = [
    ("Menu Mariage Élégance", 45.5, 10, 20, "Classique", "Mariage", False,
     ["Tartare de saumon", "Bœuf bourguignon", "Tarte Tatin"]),
    ("Menu Séminaire", 28.0, 8, 30, "Classique", "Entreprise", False,
     ["Salade de chèvre chaud", "Coq au vin", "Salade de fruits frais"]),
    ("Menu Végétarien du Marché", 24.0, 4, 15, "Végétarien", None, False,
     ["Velouté de potimarron", "Ratatouille provençale", "Salade de fruits frais"]),
    ("Menu Oriental", 32.0, 6, 10, "Halal", None, False,
     ["Velouté de potimarron", "Tajine d'agneau", "Salade de fruits frais"]),
    ("Menu de Noël", 52.0, 6, 12, "Classique", "Noël", True,
     ["Tartare de saumon", "Bœuf bourguignon", "Bûche chocolat"]),
]


def seed_catalog(db: Session) -> int:
    """Insert the demo catalog. Returns the number of menus created (0 if already seeded)."""
    existing = db.query(Menu).count()
    if existing > 0:
        logger.info("Catalog already has %d menus, not seeding again", existing)
        return 0

    diets = {name: Diet(name=name, description=desc) for name, desc in DIETS}
    themes = {name: Theme(name=name, description=desc) for name, desc in THEMES}
    allergens = {name: Allergen(name=name) for name in ALLERGENS}
    db.add_all(list(diets.values()) + list(themes.values()) + list(allergens.values()))

    dishes = {}
    for title, course, description, allergen_names in DISHES:
        dish = Dish(title=title, course_type=course, description=description)
        dish.allergens = [allergens[a] for a in allergen_names]
        dishes[title] = dish
    db.add_all(dishes.values())

    for title, price, person_min, stock, diet, theme, seasonal, dish_titles in MENUS:
        menu = Menu(
            title=title,
            description=f"{title} : entrée, plat et dessert préparés par notre chef",
            conditions="Commande au moins 7 jours avant la prestation.",
            person_min=person_min,
            price_per_person=price,
            remaining_qty=stock,
            status="published",
            is_seasonal=seasonal,
            diet=diets[diet] if diet else None,
            theme=themes[theme] if theme else None,
        )
        menu.dishes = [dishes[t] for t in dish_titles]
        db.add(menu)

    db.commit()
    logger.info("Seeded %d dishes and %d menus", len(DISHES), len(MENUS))
    return len(MENUS)


def seed_demo_user(db: Session, email: str = DEMO_USER_EMAIL) -> Optional[str]:
    """Create the demo customer if needed and return a fresh bearer token."""
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, first_name="Camille", last_name="Martin", phone="0556000000")
        db.add(user)
        db.commit()
        db.refresh(user)
    session = create_user_session(db, user)
    return session.token


def main() -> None:
    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        seed_catalog(db)
        token = seed_demo_user(db)
        print(f"Demo customer: {DEMO_USER_EMAIL}")
        print(f"Bearer token:  {token}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
