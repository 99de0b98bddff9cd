"""
Database Base Module

Creates the SQLAlchemy database instance that all models inherit from.
This is separate to avoid circular imports.
"""

from flask_sqlalchemy import SQLAlchemy

# Initialized with the Flask app in app.py; the recipe repository
# reads and writes through db.session
db = SQLAlchemy()
