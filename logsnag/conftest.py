import pytest
from pydantic import SecretStr

from logsnag.client import LogSnagClient
from logsnag.config import LogSnagConfig
from logsnag.primitives import ChannelName
from logsnag.primitives import ProjectName
from logsnag.testing import RecordingTransport


@pytest.fixture
def logsnag_config() -> LogSnagConfig:
    return LogSnagConfig(
        token=SecretStr("test-token"),
        project=ProjectName("my-saas"),
        default_channel=ChannelName("general"),
    )


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport(response={"id": "entry_123"})


@pytest.fixture
def client(logsnag_config: LogSnagConfig, recording_transport: RecordingTransport) -> LogSnagClient:
    return LogSnagClient(config=logsnag_config, transport=recording_transport)
