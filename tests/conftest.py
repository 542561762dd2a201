"""
- Give every test a fresh in-memory SessionStore
- Override FastAPI's get_store so routes use it
- Run hint lookups inline (no worker threads) so results are there right away
- Provide a client fixture (TestClient(app)) that already has the override applied
"""
import pytest
from concurrent.futures import Executor, Future

from fastapi.testclient import TestClient

from digitduel.main import app, get_store
from digitduel.hint_client import Hint
from digitduel.store import SessionStore


class InlineExecutor(Executor):
    """Runs the job during submit() and hands back a finished future."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        future.set_result(fn(*args, **kwargs))
        return future


class ManualExecutor(Executor):
    """Holds jobs until the test decides to finish them, like a slow service."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        # Mark it running so cancel() fails, as for a call already on the wire
        future.set_running_or_notify_cancel()
        self.jobs.append((future, fn, args))
        return future

    def finish(self, index):
        future, fn, args = self.jobs[index]
        future.set_result(fn(*args))


def fake_advisor(history, secret_length):
    """Suggests the newest guess again, so tests can tell answers apart."""
    if not history:
        return Hint(ok=True, message="start anywhere", suggested_guess="0" * secret_length)
    newest_guess = history[0][0]
    return Hint(ok=True, message=f"{newest_guess} - keep going", suggested_guess=newest_guess,
                reasoning="keep going")


@pytest.fixture
def store():
    return SessionStore(executor=InlineExecutor(), advisor=fake_advisor)


@pytest.fixture(autouse=True)
def override_dep(store):
    """Force the app to use our test store for every request."""
    app.dependency_overrides[get_store] = lambda: store
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)
