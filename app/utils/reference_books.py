"""
Legendary texts shown on the library page.

Each entry is marked as uploaded when some book title contains one of its
search terms.
"""

from app.models.book import BookCategory
from app.schemas.book import ReferenceBook


REFERENCE_BOOKS = (
    ReferenceBook(
        title="Emerald Tablet",
        description="A foundational text of alchemy attributed to Hermes Trismegistus, containing the secret of the prima materia.",
        author="Hermes Trismegistus",
        category=BookCategory.ALCHEMY,
        search_terms=["emerald", "tablet", "emerald tablet"],
    ),
    ReferenceBook(
        title="Voynich Manuscript",
        description="An illustrated codex hand-written in an unknown writing system that has baffled cryptographers for centuries.",
        author="Unknown",
        category=BookCategory.OTHER,
        search_terms=["voynich", "manuscript"],
    ),
    ReferenceBook(
        title="Book of Thoth",
        description="A legendary book of ancient Egyptian magic said to contain spells that can control the forces of nature.",
        author="Thoth",
        category=BookCategory.HERMETIC,
        search_terms=["thoth", "book of thoth"],
    ),
    ReferenceBook(
        title="Picatrix",
        description="A medieval grimoire of astrological magic that blends Arabic, Greek, and Persian occult traditions.",
        author="Unknown",
        category=BookCategory.QABALAH,
        search_terms=["picatrix"],
    ),
    ReferenceBook(
        title="Necronomicon",
        description="A fictional grimoire created by H.P. Lovecraft, said to contain forbidden knowledge about ancient deities and cosmic horrors.",
        author="Abdul Alhazred",
        category=BookCategory.OTHER,
        search_terms=["necronomicon"],
    ),
    ReferenceBook(
        title="Ripley Scroll",
        description="An alchemical manuscript depicting the process for creating the Philosopher's Stone through symbolic imagery.",
        author="George Ripley",
        category=BookCategory.ALCHEMY,
        search_terms=["ripley", "scroll"],
    ),
)
