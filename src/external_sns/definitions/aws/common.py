# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import time
from typing import Any, Iterable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from external_sns.core.errors import RemoteOperationError

module_logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"

SNS_ARN_ROOT = "arn:aws:sns"


def get_code_for_exception(error):
    if isinstance(error, ClientError) and "Code" in error.response["Error"]:
        return error.response["Error"]["Code"]
    elif isinstance(error, WaiterError) and "Error" in error.last_response:
        return error.last_response["Error"]["Code"]
    elif hasattr(error, "error_code"):
        return error.error_code

    return error.__class__.__name__


def get_aws_region_from_arn(arn: str) -> str:
    return arn.split(":")[3]


def get_aws_account_id_from_arn(arn: str) -> str:
    return arn.split(":")[4]


# common AWS service errors
AWS_COMMON_RETRYABLE_ERRORS = [
    "TooManyRequestsException",
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "Unavailable",
    "InternalFailure",
    "InternalError",
    "InternalServerError",
    "LimitExceededException",
    "ServiceUnavailable",
    "ServiceUnavailableException",
    # botocore common retryable errors
    "ConnectTimeoutError",
    "ReadTimeoutError",
]


MAX_SLEEP_INTERVAL_PARAM = "_max_sleep_time_in_secs"
MAX_SLEEP_INTERVAL_DEFAULT = 16 + 1


def exponential_retry(func, service_retryable_errors, *func_args, **func_kwargs):
    """
    Retries the specified function with a simple exponential backoff algorithm.
    :param func: The function to retry.
    :param service_retryable_errors: AWS service specific retryable error codes. These are added to an internal list
                                    of AWS common retryable errors to get a final list of retryable errors. Anything else
                                    is raised without a retry.
    :param func_args: The positional arguments to pass to the function.
    :param func_kwargs: The keyword arguments to pass to the function.
    :return: The return value of the retried function.
    """
    retryables = list(AWS_COMMON_RETRYABLE_ERRORS)
    retryables.extend(service_retryable_errors)
    sleepy_time = 1
    if MAX_SLEEP_INTERVAL_PARAM in func_kwargs:
        max_sleepy_time = func_kwargs.get(MAX_SLEEP_INTERVAL_PARAM)
        del func_kwargs[MAX_SLEEP_INTERVAL_PARAM]
    else:
        max_sleepy_time = MAX_SLEEP_INTERVAL_DEFAULT
    func_return = None
    while True:
        try:
            func_return = func(*func_args, **func_kwargs)
            module_logger.debug("Ran %s, got %s.", func.__name__ if hasattr(func, "__name__") else str(func), func_return)
            break
        except Exception as error:
            error_code = get_code_for_exception(error)
            if error_code in retryables:
                module_logger.critical(f"Sleeping for {sleepy_time} before retrying. Retryable error_code={error_code!r}")
                time.sleep(sleepy_time)
                sleepy_time = sleepy_time * 2
                if sleepy_time < max_sleepy_time:
                    continue
            raise
    return func_return


def remote_call(func, operation: str, service_retryable_errors: Iterable[str], **params) -> Any:
    """Run an AWS API call with `exponential_retry` and surface any service error as a :class:`RemoteOperationError`
    that carries the attempted operation and its parameters. Connection, timeout and credential failures
    (:class:`BotoCoreError`) are wrapped the same way."""
    try:
        return exponential_retry(func, list(service_retryable_errors), **params)
    except (ClientError, BotoCoreError) as error:
        error_code = get_code_for_exception(error)
        module_logger.error("Remote operation %r failed! Params: %r, error code: %r", operation, params, error_code)
        raise RemoteOperationError(operation, params, error, error_code) from error


def get_session(region: Optional[str] = None, profile_name: Optional[str] = None) -> boto3.Session:
    """
    Wrapper around boto3.Session()

    Parameters
    region: string, AWS region
    profile_name: string, named profile from the shared credentials file. System defaults are used if not provided.

    Returns
    boto3.Session
    """
    if not profile_name:
        # Use system defaults (~/.aws, etc).
        module_logger.debug("Creating boto3.Session with system defaults.")
        return boto3.Session(None, None, None, region)

    return boto3.Session(region_name=region, profile_name=profile_name)
