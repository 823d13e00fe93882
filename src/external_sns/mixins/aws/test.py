# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import io
import json
import os
import zipfile
from typing import Any, Dict, Iterable, Mapping, Optional
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from external_sns.core.configuration import PluginConfiguration, PluginParams
from external_sns.core.context import DeploymentContext, ServiceDefinition


class AWSTestBase:
    testing_keyname = "testing"
    region = "us-east-1"
    # default moto acc id
    account_id = "123456789012"
    service_name = "svc"
    stage = "dev"

    @pytest.fixture(scope="class")
    def aws_credentials(self):
        os.environ["AWS_ACCESS_KEY_ID"] = self.testing_keyname
        os.environ["AWS_SECRET_ACCESS_KEY"] = self.testing_keyname
        os.environ["AWS_SECURITY_TOKEN"] = self.testing_keyname
        os.environ["AWS_SESSION_TOKEN"] = self.testing_keyname
        os.environ["AWS_DEFAULT_REGION"] = self.region

    @pytest.fixture()
    def aws_session(self, aws_credentials):
        with mock_aws():
            yield boto3.Session(region_name=self.region)

    @pytest.fixture()
    def sns_client(self, aws_session):
        return aws_session.client(service_name="sns", region_name=self.region)

    @pytest.fixture()
    def apigateway_client(self, aws_session):
        return aws_session.client(service_name="apigateway", region_name=self.region)

    @pytest.fixture()
    def lambda_client(self, aws_session):
        return aws_session.client(service_name="lambda", region_name=self.region)

    def function_arn(self, function_name: str, account_id: Optional[str] = None, region: Optional[str] = None) -> str:
        return f"arn:aws:lambda:{region or self.region}:{account_id or self.account_id}:function:{function_name}"

    def topic_arn(self, topic_name: str, account_id: Optional[str] = None, region: Optional[str] = None) -> str:
        return f"arn:aws:sns:{region or self.region}:{account_id or self.account_id}:{topic_name}"

    def mock_lambda_client(self, function_arns: Mapping[str, str]) -> MagicMock:
        """Lambda client that knows only the functions in 'function_arns' (deployed name -> ARN)."""

        def _get_function(FunctionName: str) -> Dict[str, Any]:
            if FunctionName not in function_arns:
                raise ClientError(
                    operation_name="GetFunction",
                    error_response={"Error": {"Code": "ResourceNotFoundException", "Message": f"Function not found: {FunctionName}"}},
                )
            return {"Configuration": {"FunctionName": FunctionName, "FunctionArn": function_arns[FunctionName]}}

        lambda_client = MagicMock()
        lambda_client.get_function = MagicMock(side_effect=_get_function)
        return lambda_client

    def mock_sns_client(self, subscriptions: Optional[Iterable[Dict[str, Any]]] = None, subscribe_arn: Optional[str] = None) -> MagicMock:
        sns = MagicMock()
        sns.list_subscriptions_by_topic = MagicMock(return_value={"Subscriptions": list(subscriptions or [])})
        sns.subscribe = MagicMock(return_value={"SubscriptionArn": subscribe_arn})
        sns.unsubscribe = MagicMock(return_value={})
        sns.set_subscription_attributes = MagicMock(return_value={})
        return sns

    def mock_apigateway_client(self, apis: Optional[Iterable[Dict[str, Any]]] = None) -> MagicMock:
        apigateway = MagicMock()
        apigateway.get_rest_apis = MagicMock(return_value={"items": list(apis or [])})
        return apigateway

    def build_conf(self, **params) -> PluginConfiguration:
        builder = PluginConfiguration.builder().with_stage(self.stage).with_region(self.region)
        # no need to wait for SNS in tests
        builder.with_param(PluginParams.PENDING_CONFIRMATION_DELAY, 0)
        for key, value in params.items():
            builder.with_param(key, value)
        return builder.build()

    def build_context(
        self,
        functions: Mapping[str, Any],
        conf: Optional[PluginConfiguration] = None,
        session: Optional[boto3.Session] = None,
        clients: Optional[Mapping[str, Any]] = None,
        template: Optional[Dict[str, Any]] = None,
    ) -> DeploymentContext:
        conf = conf or self.build_conf()
        if session is not None:
            conf.add_param(PluginParams.BOTO_SESSION, session)
        context = DeploymentContext(ServiceDefinition(self.service_name, functions, template), conf)
        for service_name, client in (clients or {}).items():
            context._clients[service_name] = client
        return context

    def create_function(self, session: boto3.Session, function_name: str) -> str:
        """Create a lambda function in the mocked account, returns its ARN."""
        iam = session.client(service_name="iam", region_name=self.region)
        role_arn = iam.create_role(
            RoleName=f"{function_name}-role",
            AssumeRolePolicyDocument=json.dumps(
                {
                    "Version": "2012-10-17",
                    "Statement": [{"Effect": "Allow", "Principal": {"Service": "lambda.amazonaws.com"}, "Action": "sts:AssumeRole"}],
                }
            ),
        )["Role"]["Arn"]

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zipped:
            zipped.writestr("handler.py", "def main(event, context):\n    return event\n")
        buffer.seek(0)

        lambda_client = session.client(service_name="lambda", region_name=self.region)
        response = lambda_client.create_function(
            FunctionName=function_name,
            Runtime="python3.11",
            Role=role_arn,
            Handler="handler.main",
            Code={"ZipFile": buffer.read()},
        )
        return response["FunctionArn"]
