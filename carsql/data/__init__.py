"""Data loading, statement types, and the SQLite-backed catalog."""
from .loader import load_csv
from .store import CarStore
from .schemas import Ack, LoadResult, ResultSet, Statement, StatementKind, classify
