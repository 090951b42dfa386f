"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from core.pipeline import ImagePipeline
    from core.session_manager import ImageSessionManager
    from main import app

    pipeline = ImagePipeline()
    session_manager = ImageSessionManager(max_sessions=10)

    # Set in app state
    app.state.pipeline = pipeline
    app.state.session_manager = session_manager
    app.state.config = {}
    app.state.debug = False

    # Create test client (no context manager so the lifespan does not replace state)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client

    session_manager.cleanup()


@pytest.fixture
def data_url(make_upload):
    """Factory for data URLs of solid-color images"""
    from core.image.converters import to_data_url

    def _make(width, height, rgba=(255, 255, 255, 255), ext=".png"):
        upload = make_upload(width, height, rgba=rgba, ext=ext)
        return to_data_url(upload.data, upload.media_type)

    return _make


@pytest.fixture
def served_client():
    """
    Client that runs the app lifespan, so every request shares one event loop.
    Needed to observe one request blocking another.
    """
    from main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
