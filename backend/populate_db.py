import os
import sys
import logging
from decimal import Decimal

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.product import Product
from models.users import User
from services.catalog import create_product
from services.users import create_user

logger = logging.getLogger("populate_db")

IMG = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=800"

# Storefront catalog. Rating and review_count start at zero and follow real reviews.
SEED_PRODUCTS = [
    {
        "name": "Bakuchiol Glow Serum",
        "description": (
            "Our bestselling bakuchiol serum offers gentle anti-aging benefits without irritation. "
            "Derived from Psoralea corylifolia, this plant-based powerhouse is 100% vegan and cruelty-free."
        ),
        "price": Decimal("28.00"),
        "category": "serums",
        "subcategory": "anti-aging",
        "images": [IMG.format("1570194065650-d99fb4bedf0a")],
        "tags": ["bakuchiol", "retinol alternative", "anti-aging"],
        "skin_types": ["dry", "combination", "sensitive"],
        "sustainability_score": 95,
        "is_vegan": True,
        "is_cruelty_free": True,
        "is_organic": True,
        "recyclable_packaging": True,
        "carbon_footprint": Decimal("0.5"),
        "stock": 50,
        "featured": True,
        "trending": True,
    },
    {
        "name": "Beet Tinted Balm",
        "description": (
            "Multi-use vegan color made from natural beet extracts. This nourishing balm provides "
            "buildable color while moisturizing your lips with organic ingredients."
        ),
        "price": Decimal("15.00"),
        "category": "makeup",
        "subcategory": "lips",
        "images": [IMG.format("1586495777744-4413f21062fa")],
        "tags": ["beet", "lip", "tint"],
        "skin_types": ["all"],
        "sustainability_score": 90,
        "is_vegan": True,
        "is_cruelty_free": True,
        "is_organic": True,
        "recyclable_packaging": True,
        "carbon_footprint": Decimal("0.3"),
        "stock": 75,
        "featured": True,
        "trending": False,
    },
    {
        "name": "Complete Glow Kit",
        "description": (
            "5-piece sustainable routine with customizable options. Includes cleanser, toner, serum, "
            "moisturizer, and mask in eco-friendly packaging."
        ),
        "price": Decimal("65.00"),
        "category": "kits",
        "subcategory": "skincare",
        "images": [IMG.format("1556228720-195a672e8a03")],
        "tags": ["routine", "bundle"],
        "skin_types": ["all"],
        "sustainability_score": 98,
        "is_vegan": True,
        "is_cruelty_free": True,
        "is_organic": True,
        "recyclable_packaging": True,
        "carbon_footprint": Decimal("1.2"),
        "stock": 30,
        "featured": True,
        "trending": True,
    },
    {
        "name": "Beet Glow Gummies",
        "description": (
            "Internal radiance supplement with 500mg beet extract for natural glow and detoxification. "
            "Comes in compostable packaging."
        ),
        "price": Decimal("22.00"),
        "category": "supplements",
        "subcategory": "gummies",
        "images": [IMG.format("1584308666744-24d5c474f2ae")],
        "tags": ["beet", "supplement"],
        "skin_types": ["all"],
        "sustainability_score": 85,
        "is_vegan": True,
        "is_cruelty_free": True,
        "is_organic": False,
        "recyclable_packaging": False,
        "carbon_footprint": Decimal("0.8"),
        "stock": 100,
        "featured": False,
        "trending": True,
    },
]

DEMO_USER = {"email": "demo@example.com", "first_name": "Demo", "last_name": "Customer", "skin_type": "combination"}


def populate_database():
    """Seed the catalog and a demo customer. Safe to run more than once."""
    init_db()
    session = SessionLocal()
    try:
        if not session.query(User).filter(User.email == DEMO_USER["email"]).first():
            create_user(session, **DEMO_USER)
            logger.info("Created demo user %s", DEMO_USER["email"])

        existing = {name for (name,) in session.query(Product.name).all()}
        created = 0
        for data in SEED_PRODUCTS:
            if data["name"] in existing:
                continue
            create_product(session, dict(data))
            created += 1
        logger.info("Seeded %d products (%d already present)", created, len(SEED_PRODUCTS) - created)
    finally:
        session.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    populate_database()
