# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Dict, Optional

from external_sns.core.errors import RemoteOperationError
from external_sns.definitions.aws.common import remote_call

logger = logging.getLogger(__name__)

LAMBDA_RETRYABLE_ERRORS = {"ServiceException", "TooManyRequestsException"}

LAMBDA_INVOKE_ACTION = "lambda:InvokeFunction"


def get_lambda_arn(lambda_client, function_name: str) -> Optional[str]:
    """
    Get AWS Lambda function's ARN using function name, if such lambda exist in that region.
    :param lambda_client: The Boto3 AWS Lambda client object.
    :param function_name: The name of the function to find.
    :return: ARN of the lambda as str, None if such lambda cannot be found.
    """
    lambda_detail = _get_lambda_function_details(lambda_client, function_name)
    return lambda_detail["Configuration"]["FunctionArn"] if lambda_detail else None


def _get_lambda_function_details(lambda_client, function_name: str) -> Optional[Dict]:
    """
    Get details about an AWS Lambda function.
    :param lambda_client: The Boto3 AWS Lambda client object.
    :param function_name: The name of the function.
    :return: dictionary contains details about the lambda or None if no such lambda is found
    """
    try:
        return remote_call(lambda_client.get_function, "lambda:GetFunction", LAMBDA_RETRYABLE_ERRORS, FunctionName=function_name)
    except RemoteOperationError as error:
        if error.error_code == "ResourceNotFoundException":
            return None
        logger.error("Couldn't check lambda '%s'! Error: %s", function_name, str(error))
        raise
