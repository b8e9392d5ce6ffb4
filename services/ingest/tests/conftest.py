import pytest

from services.common.core.request_context import clear_run

# Settings a developer shell or the runtime may export; tests pass everything
# explicitly.
_ENV_VARS = [
    "OBJECT_STORAGE_REGION_NAME",
    "OBJECT_STORAGE_PROJECT_ID",
    "OBJECT_STORAGE_USER_ID",
    "OBJECT_STORAGE_PASSWORD",
    "OBJECT_STORAGE_INCOMING_CONTAINER_NAME",
    "OBJECT_STORAGE_IDENTITY_URL",
    "SAVE_ACTION_NAME",
    "DISPATCH_POLICY",
    "LOG_CONFIG_PATH",
    "__OW_API_HOST",
    "__OW_API_KEY",
    "__OW_NAMESPACE",
    "__OW_ACTIVATION_ID",
]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    clear_run()


@pytest.fixture
def action_params():
    return {
        "OBJECT_STORAGE_REGION_NAME": "dallas",
        "OBJECT_STORAGE_PROJECT_ID": "p1",
        "OBJECT_STORAGE_USER_ID": "u1",
        "OBJECT_STORAGE_PASSWORD": "secret",
        "OBJECT_STORAGE_INCOMING_CONTAINER_NAME": "incoming",
        "__OW_API_HOST": "https://runtime.test",
        "__OW_API_KEY": "uuid:key",
        "__OW_ACTIVATION_ID": "act-parent",
        "VERIFY_SSL": False,
    }
