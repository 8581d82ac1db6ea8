# backend/config.py
from decimal import Decimal
from pathlib import Path
from typing import ClassVar, Dict

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./database_greenledger.db"
    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Flat shipping price per method (no distance-based pricing)
    SHIPPING_RATES: Dict[str, Decimal] = {
        "standard": Decimal("5.00"),
        "express": Decimal("15.00"),
        "overnight": Decimal("25.00"),
    }

    # Promo code -> percent off the subtotal
    PROMO_CODES: Dict[str, int] = {"GREEN10": 10}

    # Tree-planting policy applied to every order total
    TREE_SPEND_PER_TREE: Decimal = Decimal("30")
    CO2_PER_TREE_KG: Decimal = Decimal("0.6")

    # Carbon estimate inputs (kg CO2 per mile, per shipping method)
    SHIPPING_EMISSION_FACTORS: Dict[str, float] = {
        "standard": 0.0002,
        "express": 0.0008,
        "overnight": 0.0012,
    }
    DEFAULT_SHIPPING_DISTANCE: float = 500.0
    # Miles from the warehouse by destination zip code; unlisted codes use UNKNOWN_ZIP_DISTANCE
    ZIP_DISTANCES: Dict[str, float] = {
        "90210": 100.0,
        "10001": 2800.0,
        "60601": 1800.0,
        "33101": 2700.0,
        "98101": 1200.0,
    }
    UNKNOWN_ZIP_DISTANCE: float = 1000.0
    OFFSET_COST_PER_KG: float = 0.05
    CO2_PER_TREE_YEAR_KG: float = 22.0
    # kg of packaging saved by each extra line shipped in the same parcel
    PACKAGING_SAVED_PER_LINE_KG: Decimal = Decimal("0.1")

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"


def load_settings(env_file: Path = env_path) -> Settings:
    # Export the .env values first so os.environ and Settings agree
    load_dotenv(env_file)
    return Settings(_env_file=env_file)


settings = load_settings()
