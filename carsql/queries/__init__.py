"""Query script parsing, statement runner, and named analytical queries."""
from .script import parse_script, load_script
from .runner import QueryRunner, RunReport, StatementStatus, Status
