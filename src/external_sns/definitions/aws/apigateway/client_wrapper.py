# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, Dict, Iterator, Optional

from external_sns.definitions.aws.common import remote_call

logger = logging.getLogger(__name__)

APIGATEWAY_RETRYABLE_ERRORS = {"TooManyRequestsException", "ServiceUnavailableException"}

INVOKE_URL_TEMPLATE = "https://{api_id}.execute-api.{region}.amazonaws.com/{stage}/{path}"


def iter_rest_apis(apigateway) -> Iterator[Dict[str, Any]]:
    position = None
    while True:
        params = {"position": position} if position else {}
        response = remote_call(apigateway.get_rest_apis, "apigateway:GetRestApis", APIGATEWAY_RETRYABLE_ERRORS, **params)
        for item in response.get("items", []):
            yield item
        position = response.get("position", None)
        if not position:
            break


def get_rest_api_id(apigateway, api_name: str) -> Optional[str]:
    """Returns the id of the first REST API named 'api_name', None if there is no such API."""
    for item in iter_rest_apis(apigateway):
        if item.get("name", None) == api_name:
            return item["id"]
    return None


def build_invoke_url(api_id: str, region: str, stage: str, path: str) -> str:
    return INVOKE_URL_TEMPLATE.format(api_id=api_id, region=region, stage=stage, path=path.lstrip("/"))
