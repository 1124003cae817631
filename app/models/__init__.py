# Database models
from app.models.ctrl import CtrlRange
from app.models.reading import Reading
from app.models.site import Site

__all__ = ["CtrlRange", "Reading", "Site"]
