# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Optional

import validators

from external_sns.core.context import DeploymentContext
from external_sns.core.entity import FunctionDefinition
from external_sns.definitions.aws.apigateway.client_wrapper import build_invoke_url, get_rest_api_id
from external_sns.definitions.aws.common import DEFAULT_REGION

logger = logging.getLogger(__name__)


def get_function_endpoint(context: DeploymentContext, function_def: FunctionDefinition) -> Optional[str]:
    """Public invoke URL of an HTTP triggered function, None if the function has no 'http' event or if the REST API of
    the service is not deployed. Callers should fall back to the function ARN in that case."""
    api_path = function_def.http_path()
    if not api_path:
        return None

    api_id = get_rest_api_id(context.apigateway, context.api_gateway_name)
    if not api_id:
        logger.info("REST API %r not found, %r will be subscribed with its ARN.", context.api_gateway_name, function_def.name)
        return None

    url = build_invoke_url(api_id, context.region or DEFAULT_REGION, context.stage, api_path)
    if not validators.url(url):
        logger.warning("Invoke URL %r of %r is not a valid URL, falling back to the function ARN.", url, function_def.name)
        return None
    return url
