# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError, ReadTimeoutError
from mock import MagicMock

import external_sns.definitions.aws.common as common
from external_sns.core.errors import RemoteOperationError
from external_sns.definitions.aws.common import (
    exponential_retry,
    get_aws_account_id_from_arn,
    get_aws_region_from_arn,
    get_code_for_exception,
    remote_call,
)


def _client_error(code):
    return ClientError(operation_name="op", error_response={"Error": {"Code": code, "Message": code}})


class TestCommon:
    def test_arn_fragments(self):
        arn = "arn:aws:lambda:eu-west-1:111122223333:function:notify-dev"
        assert get_aws_region_from_arn(arn) == "eu-west-1"
        assert get_aws_account_id_from_arn(arn) == "111122223333"

    def test_get_code_for_exception(self):
        assert get_code_for_exception(_client_error("Throttling")) == "Throttling"
        assert get_code_for_exception(ClientError(operation_name="op", error_response={"Error": {}})) == "ClientError"
        assert get_code_for_exception(ValueError()) == "ValueError"

    def test_exponential_retry_retries_retryables(self, monkeypatch):
        sleep = MagicMock()
        monkeypatch.setattr(common.time, "sleep", sleep)
        func = MagicMock(side_effect=[_client_error("Throttling"), _client_error("InternalErrorException"), "done"])

        assert exponential_retry(func, ["InternalErrorException"], 1, key="value") == "done"
        assert func.call_count == 3
        assert [c.args[0] for c in sleep.call_args_list] == [1, 2]

    def test_exponential_retry_gives_up(self, monkeypatch):
        monkeypatch.setattr(common.time, "sleep", MagicMock())
        func = MagicMock(side_effect=_client_error("Throttling"))

        with pytest.raises(ClientError):
            exponential_retry(func, [], _max_sleep_time_in_secs=4)
        # second backoff reaches the limit
        assert func.call_count == 2

    def test_exponential_retry_does_not_retry_others(self, monkeypatch):
        sleep = MagicMock()
        monkeypatch.setattr(common.time, "sleep", sleep)
        func = MagicMock(side_effect=_client_error("AuthorizationError"))

        with pytest.raises(ClientError):
            exponential_retry(func, ["InternalErrorException"])
        assert func.call_count == 1
        sleep.assert_not_called()

    def test_remote_call_wraps_client_errors(self):
        func = MagicMock(side_effect=_client_error("NotFound"))

        with pytest.raises(RemoteOperationError) as error:
            remote_call(func, "sns:Unsubscribe", [], SubscriptionArn="sub_arn")

        assert error.value.operation == "sns:Unsubscribe"
        assert error.value.params == {"SubscriptionArn": "sub_arn"}
        assert error.value.error_code == "NotFound"
        assert "sns:Unsubscribe" in str(error.value)

    def test_remote_call_does_not_wrap_other_errors(self):
        with pytest.raises(KeyError):
            remote_call(MagicMock(side_effect=KeyError("x")), "sns:Subscribe", [])

    def test_remote_call_wraps_connection_errors(self):
        func = MagicMock(side_effect=EndpointConnectionError(endpoint_url="https://sns.us-east-1.amazonaws.com/"))

        with pytest.raises(RemoteOperationError) as error:
            remote_call(func, "sns:ListSubscriptionsByTopic", [], TopicArn="topic_arn")

        assert func.call_count == 1
        assert error.value.error_code == "EndpointConnectionError"
        assert isinstance(error.value.cause, EndpointConnectionError)

    def test_remote_call_wraps_timeouts_after_retries(self, monkeypatch):
        monkeypatch.setattr(common.time, "sleep", MagicMock())
        func = MagicMock(side_effect=ReadTimeoutError(endpoint_url="https://lambda.us-east-1.amazonaws.com/"))

        with pytest.raises(RemoteOperationError) as error:
            remote_call(func, "lambda:GetFunction", [], FunctionName="notify-dev", _max_sleep_time_in_secs=4)

        assert func.call_count == 2
        assert error.value.error_code == "ReadTimeoutError"

    def test_remote_call_wraps_missing_credentials(self):
        with pytest.raises(RemoteOperationError) as error:
            remote_call(MagicMock(side_effect=NoCredentialsError()), "sns:Subscribe", [])
        assert error.value.error_code == "NoCredentialsError"
