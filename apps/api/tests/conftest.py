import pytest
from botocore.exceptions import ClientError

from app.services.datasource import Datasource


class FakePresignClient:
    """Stands in for a boto3 S3 client; fails for keys listed in `failing`."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[dict] = []
        self.closed = False

    def generate_presigned_url(self, client_method, Params, ExpiresIn, HttpMethod):
        self.calls.append({"method": client_method, "params": Params, "expires_in": ExpiresIn, "http": HttpMethod})
        key = Params["Key"]
        if key in self.failing:
            raise ClientError(
                {"Error": {"Code": "InvalidAccessKeyId", "Message": "The AWS Access Key Id you provided does not exist"}},
                "GetObject",
            )
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{key}?X-Amz-Expires={ExpiresIn}&X-Amz-Signature=abc"

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_client():
    return FakePresignClient


@pytest.fixture
def fake_client(make_client) -> FakePresignClient:
    return make_client()


@pytest.fixture
def datasource(fake_client: FakePresignClient) -> Datasource:
    return Datasource(bucket="test", client=fake_client)
