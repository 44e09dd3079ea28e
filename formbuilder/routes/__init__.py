"""Routes package for FastAPI endpoints.

This package contains all API route modules for the Airtable Form Builder.
"""

from formbuilder.routes import forms, health, responses, webhooks

__all__ = ["forms", "health", "responses", "webhooks"]
