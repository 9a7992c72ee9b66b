# tests/conftest.py
import os, sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("APP_ENV", "test")

from flask_jwt_extended import create_access_token

from noteai import create_app
from noteai.config import TestConfig
from noteai.extensions import db
from noteai.common.errors import ServiceError
from noteai.notes.enrichment import EnrichmentPipeline
from noteai.notes.query import QueryEngine
from noteai.notes.stats import StatsAggregator
from noteai.notes.store import NoteStore


class FakeSummarizer:
    """Remplace le service OpenAI; `fail = True` simule une panne."""

    def __init__(self):
        self.fail = False
        self.summary = "A short summary."
        self.title = "Generated Title"
        self.tags = ["ideas", "work"]
        self.calls = []

    def _call(self, name, value):
        self.calls.append(name)
        if self.fail:
            raise ServiceError("simulated outage")
        return value

    def summarize(self, text, model):
        self.last_model = model
        return self._call("summarize", self.summary)

    def generate_title(self, text):
        return self._call("generate_title", self.title)

    def extract_tags(self, text):
        return self._call("extract_tags", list(self.tags))


@pytest.fixture()
def summarizer():
    return FakeSummarizer()


@pytest.fixture()
def app(summarizer):
    app = create_app(TestConfig, summarizer=summarizer)
    # base SQLite en mémoire, propre pour chaque test
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_headers(app):
    def _make(owner="alice"):
        token = create_access_token(identity=owner)
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture()
def store(app):
    return NoteStore(default_model="gpt-3.5-turbo")


@pytest.fixture()
def pipeline(store, summarizer):
    return EnrichmentPipeline(summarizer, store, default_model="gpt-3.5-turbo")


@pytest.fixture()
def query(store):
    return QueryEngine(store, default_limit=10, max_limit=100)


@pytest.fixture()
def aggregator(store):
    return StatsAggregator(store)
