"""
Shared utilities: JWT helpers, exception types, FastAPI dependencies and the listing generator.
"""
