import pytest
from fastapi.testclient import TestClient

from posts_server.config import ServerConfig
from posts_server.main import create_app

# Small ceiling so oversized uploads are cheap to build
TEST_MAX_UPLOAD_BYTES = 64


@pytest.fixture
def server_config(tmp_path):
    return ServerConfig(max_upload_bytes=TEST_MAX_UPLOAD_BYTES, base_dir=tmp_path)


@pytest.fixture
def client(server_config):
    """Test client with the lifespan run, so both roots exist."""
    with TestClient(create_app(server_config)) as test_client:
        yield test_client
