"""
Models module - SQLAlchemy ORM entities.

Importing this package registers every table on ``Base.metadata``.
"""

from visadocs.models.base import Base
from visadocs.models.user import User
from visadocs.models.analysis import Analysis, Feedback
from visadocs.models.offer_letter import OfferLetterInfo
from visadocs.models.coe import CoeInformation
from visadocs.models.document_analysis import EnrollmentAnalysis, OfferLetterAnalysis
from visadocs.models.consultation import Appointment, DocumentTemplate, Update, UpdateView
from visadocs.models.scholarship import Scholarship, WatchlistItem

__all__ = [
    "Base",
    "User",
    "Analysis",
    "Feedback",
    "OfferLetterInfo",
    "CoeInformation",
    "EnrollmentAnalysis",
    "OfferLetterAnalysis",
    "Appointment",
    "DocumentTemplate",
    "Update",
    "UpdateView",
    "Scholarship",
    "WatchlistItem",
]
