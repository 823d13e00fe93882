# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, Dict, Mapping, Optional

import boto3

from external_sns.core.configuration import PluginConfiguration, PluginParams
from external_sns.core.entity import CoreData, FunctionDefinition
from external_sns.definitions.aws.common import get_session

logger = logging.getLogger(__name__)


class ServiceDefinition(CoreData):
    """What the host tool knows about the service being deployed.

    `functions` is the raw 'functions' section of the service configuration and `template` is the compiled
    CloudFormation template the host packages and deploys after the compile step.
    """

    def __init__(self, service: str, functions: Optional[Mapping[str, Any]] = None, template: Optional[Dict[str, Any]] = None) -> None:
        self.service = service
        self.functions = dict(functions) if functions else {}
        self.template = template if template is not None else {"Resources": {}}


class DeploymentContext:
    """Explicit state shared by the actions of a single lifecycle event (configuration, service, AWS clients)."""

    def __init__(self, service: ServiceDefinition, conf: PluginConfiguration) -> None:
        self._service = service
        self._conf = conf
        self._clients: Dict[str, Any] = dict()

    @property
    def service(self) -> ServiceDefinition:
        return self._service

    @property
    def conf(self) -> PluginConfiguration:
        return self._conf

    @property
    def stage(self) -> str:
        return self._conf.stage

    @property
    def region(self) -> Optional[str]:
        return self._conf.region

    @property
    def no_deploy(self) -> bool:
        return self._conf.no_deploy

    @property
    def api_gateway_name(self) -> str:
        """Name of the REST API the host deploys for this service, '{stage}-{service}' unless overridden."""
        return self._conf.get_param(PluginParams.API_GATEWAY_NAME, f"{self.stage}-{self._service.service}")

    @property
    def template_resources(self) -> Dict[str, Any]:
        return self._service.template.setdefault("Resources", {})

    def functions(self) -> Dict[str, FunctionDefinition]:
        return {
            key: FunctionDefinition.from_config(key, raw_definition, self.default_function_name(key))
            for key, raw_definition in self._service.functions.items()
        }

    def default_function_name(self, function_key: str) -> str:
        return f"{self._service.service}-{self.stage}-{function_key}"

    @property
    def session(self) -> boto3.Session:
        session = self._conf.get_param(PluginParams.BOTO_SESSION)
        if session is None:
            session = get_session(self.region)
            self._conf.add_param(PluginParams.BOTO_SESSION, session)
        return session

    def client(self, service_name: str):
        if service_name not in self._clients:
            self._clients[service_name] = self.session.client(service_name=service_name, region_name=self.region)
        return self._clients[service_name]

    @property
    def lambda_client(self):
        return self.client("lambda")

    @property
    def sns(self):
        return self.client("sns")

    @property
    def apigateway(self):
        return self.client("apigateway")
