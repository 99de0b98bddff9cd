"""
Shared pytest fixtures.

FLASK_ENV is set before the app is imported so it picks up the testing
configuration (in-memory SQLite).
"""

import os

os.environ['FLASK_ENV'] = 'testing'

import pytest

from app import app as flask_app
from models import db


@pytest.fixture
def app():
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
