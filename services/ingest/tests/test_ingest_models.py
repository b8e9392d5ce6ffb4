import pytest
from pydantic import TypeAdapter, ValidationError

from services.ingest.models import (
    Activation,
    Credentials,
    FileDescriptor,
    InvocationFailure,
    InvocationOutcome,
    PipelineResult,
    PipelineState,
    PipelineStatus,
    Session,
)


def test_file_descriptor_from_listing_entry():
    entry = {
        "name": "chk1.png",
        "content_type": "image/png",
        "last_modified": "2017-03-01T10:00:00.000000",
        "bytes": 1024,
        "hash": "abc",
    }

    descriptor = FileDescriptor.model_validate(entry)

    assert descriptor.to_payload() == {
        "fileName": "chk1.png",
        "contentType": "image/png",
        "lastModified": "2017-03-01T10:00:00.000000",
    }


def test_file_descriptor_is_immutable():
    descriptor = FileDescriptor(name="a.png", content_type="image/png", last_modified="t1")
    with pytest.raises(ValidationError):
        descriptor.name = "b.png"


def test_file_descriptor_requires_metadata():
    with pytest.raises(ValidationError):
        FileDescriptor.model_validate({"name": "a.png"})


def test_credentials_hide_password():
    credentials = Credentials(region="dallas", project_id="p1", user_id="u1", password="pw")
    assert "pw" not in repr(credentials)


def test_session_authenticated():
    assert Session(base_url="https://x/", auth_token="t").is_authenticated
    assert not Session(base_url="https://x/").is_authenticated


def test_outcome_discriminator():
    adapter = TypeAdapter(InvocationOutcome)

    activation = adapter.validate_python(
        {"kind": "activation", "file_name": "a", "activation_id": "id1"}
    )
    failure = adapter.validate_python({"kind": "failure", "file_name": "b", "reason": "boom"})

    assert isinstance(activation, Activation) and activation.ok
    assert isinstance(failure, InvocationFailure) and not failure.ok


def test_success_response():
    result = PipelineResult.succeeded(
        [Activation(file_name="a", activation_id="id1")]
    )

    assert result.status == PipelineStatus.SUCCESS
    assert result.file_count == 1
    assert result.to_response() == {"status": "Success"}


def test_failure_response_lists_failed_files():
    outcomes = [
        Activation(file_name="a", activation_id="id1"),
        InvocationFailure(file_name="b", reason="boom"),
    ]
    result = PipelineResult.failed("boom", PipelineState.DISPATCHING, 2, outcomes)

    response = result.to_response()

    assert response["status"] == "Failure"
    assert response["error"] == "boom"
    assert response["stage"] == "Dispatching"
    assert response["failures"] == [{"kind": "failure", "file_name": "b", "reason": "boom"}]
