import pytest

from arg_exporter.config import ExporterSettings
from arg_exporter.errors import QueryTransportError
from tests.fakes import FakeSession, _DummyCredential


@pytest.fixture
def dummy_credential() -> _DummyCredential:
    return _DummyCredential()


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> ExporterSettings:
    for name in (
        "AZURE_BASE_URL",
        "API_VERSION",
        "AZURE_TENANT_ID",
        "AZURE_CLIENT_ID",
        "AZURE_CLIENT_SECRET",
        "MAX_ITERATIONS",
        "PAGE_SIZE",
        "JSON_DEPTH",
        "HTTP_TIMEOUT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"ARG_EXPORTER__{name}", raising=False)
    return ExporterSettings(_env_file=None)


@pytest.fixture
def transport_error() -> QueryTransportError:
    return QueryTransportError("Azure Resource Graph returned status 429", 429)
