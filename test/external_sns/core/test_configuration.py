# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from mock import MagicMock

from external_sns.core.configuration import DEFAULT_STAGE, PENDING_CONFIRMATION_DELAY_IN_SECS, PluginConfiguration, PluginParams
from external_sns.core.context import DeploymentContext, ServiceDefinition


class TestPluginConfiguration:
    def test_configuration_defaults(self):
        conf = PluginConfiguration()
        assert conf.stage == DEFAULT_STAGE == "dev"
        assert conf.region is None
        assert not conf.no_deploy
        assert conf.pending_confirmation_delay == PENDING_CONFIRMATION_DELAY_IN_SECS == 10
        assert conf.log_dir is None

    def test_configuration_from_options(self):
        conf = PluginConfiguration.from_options({"stage": "prod", "region": "eu-west-1", "noDeploy": True, "logDir": "/tmp/sns-logs"})
        assert conf.stage == "prod"
        assert conf.region == "eu-west-1"
        assert conf.no_deploy
        assert conf.log_dir == "/tmp/sns-logs"

        conf = PluginConfiguration.from_options(None)
        assert conf.stage == "dev"
        assert not conf.no_deploy

    def test_configuration_builder(self):
        session = MagicMock()
        conf = (
            PluginConfiguration.builder()
            .with_stage("qa")
            .with_region("us-west-2")
            .with_no_deploy()
            .with_session(session)
            .with_api_name("qa-api")
            .with_param(PluginParams.PENDING_CONFIRMATION_DELAY, 1)
            .build()
        )
        assert conf.stage == "qa"
        assert conf.region == "us-west-2"
        assert conf.no_deploy
        assert conf.get_param(PluginParams.BOTO_SESSION) is session
        assert conf.get_param(PluginParams.API_GATEWAY_NAME) == "qa-api"
        assert conf.pending_confirmation_delay == 1
        # session is not part of the representation
        assert "AWS_BOTO_SESSION" not in repr(conf)

        conf.remove_param(PluginParams.API_GATEWAY_NAME)
        assert conf.get_param(PluginParams.API_GATEWAY_NAME) is None


class TestDeploymentContext:
    def test_context_naming(self):
        conf = PluginConfiguration.builder().with_stage("prod").build()
        context = DeploymentContext(ServiceDefinition("shop", {"notify": {}, "audit": {"name": "audit-fn"}}), conf)

        assert context.api_gateway_name == "prod-shop"
        functions = context.functions()
        assert functions["notify"].name == "shop-prod-notify"
        assert functions["audit"].name == "audit-fn"

    def test_context_clients_use_session_and_region(self):
        session = MagicMock()
        conf = PluginConfiguration.builder().with_region("eu-west-1").with_session(session).build()
        context = DeploymentContext(ServiceDefinition("shop"), conf)

        sns = context.sns
        assert context.sns is sns
        session.client.assert_called_once_with(service_name="sns", region_name="eu-west-1")

    def test_context_template_resources(self):
        service = ServiceDefinition("shop")
        context = DeploymentContext(service, PluginConfiguration())
        context.template_resources["X"] = {"Type": "T"}
        assert service.template == {"Resources": {"X": {"Type": "T"}}}
