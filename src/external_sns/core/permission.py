# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import re
from typing import Any, Dict, Optional, Tuple, Union

from external_sns.core.context import DeploymentContext
from external_sns.core.entity import FunctionDefinition, TopicBinding
from external_sns.definitions.aws.aws_lambda.client_wrapper import LAMBDA_INVOKE_ACTION
from external_sns.definitions.aws.common import SNS_ARN_ROOT

logger = logging.getLogger(__name__)

LAMBDA_PERMISSION_RESOURCE_TYPE = "AWS::Lambda::Permission"
SNS_SERVICE_PRINCIPAL = "sns.amazonaws.com"

_NON_ALPHANUMERIC = re.compile(r"[^0-9A-Za-z]")


def normalize(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return name[0].upper() + name[1:]


def normalize_topic_name(topic_name: Optional[str]) -> Optional[str]:
    if not topic_name:
        return None
    return normalize(_NON_ALPHANUMERIC.sub("", topic_name))


def function_resource_id(function_key: str) -> str:
    return f"{normalize(function_key)}LambdaFunction"


def permission_resource_id(function_key: str, topic_name: str) -> str:
    return f"{normalize(function_key)}LambdaPermission{normalize_topic_name(topic_name) or ''}"


def build_permission(function_key: str, binding: TopicBinding) -> Tuple[str, Dict[str, Any]]:
    """Template resource that lets SNS invoke the function for events published to the topic.

    The topic is assumed to live in the same account and region the stack is deployed to.
    """
    permission = {
        "Type": LAMBDA_PERMISSION_RESOURCE_TYPE,
        "Properties": {
            "FunctionName": {"Fn::GetAtt": [function_resource_id(function_key), "Arn"]},
            "Action": LAMBDA_INVOKE_ACTION,
            "Principal": SNS_SERVICE_PRINCIPAL,
            "SourceArn": {"Fn::Join": [":", [SNS_ARN_ROOT, {"Ref": "AWS::Region"}, {"Ref": "AWS::AccountId"}, binding.topic]]},
        },
    }
    return permission_resource_id(function_key, binding.topic), permission


def add_event_permission(
    context: DeploymentContext, function_key: str, function_def: FunctionDefinition, binding: Union[TopicBinding, str, Dict[str, Any]]
) -> str:
    binding = TopicBinding.parse(binding, function_key)
    resource_id, permission = build_permission(function_key, binding)
    context.template_resources[resource_id] = permission
    logger.debug("Added %s to the template for function %r and topic %r.", resource_id, function_def.name, binding.topic)
    return resource_id
