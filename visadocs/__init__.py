"""
Visa Document Analysis Platform
Study-abroad document processing with LLM-assisted extraction.

Architecture:
- PostgreSQL (SQLAlchemy): users, analyses, offer letters, CoE records and catalog data
- OpenAI / Anthropic: structured extraction from visa letters, offer letters and CoEs
- PyPDF2 / Tesseract: text extraction from uploaded PDFs and images
"""

__version__ = "1.0.0"
