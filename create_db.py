# create_db.py - Create (or with --reset, recreate) the shot-list tables
import sys

from sqlalchemy import inspect

from prepro.core.config import settings
from prepro.db.base import Base
from prepro.db.session import engine
from prepro import models  # noqa: F401  registers projects/scenes/shots/shot_references

if "--reset" in sys.argv:
    print(f"Dropping all tables on {settings.SQLALCHEMY_DATABASE_URI} ...")
    Base.metadata.drop_all(bind=engine)

print("Creating database tables...")
Base.metadata.create_all(bind=engine)

inspector = inspect(engine)
for table in inspector.get_table_names():
    columns = ", ".join(col["name"] for col in inspector.get_columns(table))
    print(f"   - {table}: {columns}")
