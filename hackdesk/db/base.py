"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from hackdesk.db.models.applicant import Applicant  # noqa: F401, E402
