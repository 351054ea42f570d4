"""
Car Prices SQL — Configuration: paths, schema, artifact names.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths, overridable via CARSQL_DATA_DIR / CARSQL_DB_PATH env vars
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("CARSQL_DATA_DIR", str(Path.home() / "car-prices-sql")))
DATA_DIR = _data_dir
DB_PATH = Path(os.environ.get("CARSQL_DB_PATH", str(_data_dir / "car_prices.db")))
DATASET_PATH = Path(os.environ.get("CARSQL_DATASET", str(_data_dir / "car_prices.csv")))
EXPORTS_FOLDER = _data_dir / "exports"

PACKAGE_DIR = Path(__file__).parent
DEFAULT_SCRIPT = PACKAGE_DIR / "sql" / "car_prices_analysis.sql"

# Rows printed per result set when the query carries no LIMIT of its own
DEFAULT_MAX_ROWS = 20

# ---------------------------------------------------------------------------
# Base table schema (CSV header name → SQLite column type)
# ---------------------------------------------------------------------------
BASE_TABLE = "car_prices"

COLUMN_TYPES = {
    "year": "INTEGER",
    "make": "TEXT",
    "model": "TEXT",
    "trim": "TEXT",
    "body": "TEXT",
    "transmission": "TEXT",
    "vin": "TEXT",
    "state": "TEXT",
    "condition": "REAL",
    "odometer": "REAL",
    "color": "TEXT",
    "interior": "TEXT",
    "seller": "TEXT",
    "mmr": "REAL",
    "sellingprice": "REAL",
    "saledate": "TEXT",
}

COLUMNS = list(COLUMN_TYPES.keys())
NUMERIC_COLUMNS = [c for c, t in COLUMN_TYPES.items() if t == "REAL"]
INTEGER_COLUMNS = [c for c, t in COLUMN_TYPES.items() if t == "INTEGER"]
TEXT_COLUMNS = [c for c, t in COLUMN_TYPES.items() if t == "TEXT"]

# ---------------------------------------------------------------------------
# Derived artifacts
# ---------------------------------------------------------------------------
SPECS_TABLE = "car_specs"
SUMMARY_VIEW = "v_make_year_summary"

# index name → indexed column
INDEXES = {
    "idx_car_prices_make": "make",
    "idx_car_prices_sellingprice": "sellingprice",
    "idx_car_prices_year": "year",
    "idx_car_prices_state": "state",
}
