"""SQLAlchemy Base class for all models."""
from hostel_rooms.models.base import Base


def import_models() -> None:
    """Import all models to register them with SQLAlchemy."""
    import hostel_rooms.models  # noqa: F401


import_models()

__all__ = ["Base", "import_models"]
