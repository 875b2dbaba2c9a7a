# clubhouse/models/__init__.py
# Import all models so Base.metadata knows every table

from clubhouse.db.base_class import Base
from clubhouse.models.document import Document
