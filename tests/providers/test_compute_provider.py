import pytest

from src.config.schemas import AppConfig
from src.domain.instance.instance_status import InstanceStatus
from src.domain.template.template_aggregate import ResourceTemplate
from src.infrastructure.exceptions import ConfigurationValidationError, TransientProviderError
from src.providers.dimensiondata.compute_provider import DimensionDataComputeProvider
from src.providers.dimensiondata.exceptions import UnauthorizedError


@pytest.fixture
def provider(fake_client, poller):
    config = AppConfig.from_dict({"provider": {"max_parallel_servers": 2},
                                  "server_defaults": {"cpu_count": 2, "memory_gb": 8}})
    return DimensionDataComputeProvider(fake_client, config, poller=poller)


def test_construction_verifies_connectivity(provider, fake_client):
    assert fake_client.calls_to("list_datacenters") == [("list_datacenters", 1)]


def test_connectivity_failure_is_transient(fake_client, poller):
    fake_client.failures["list_datacenters"] = UnauthorizedError("bad credentials", 401)

    with pytest.raises(TransientProviderError) as exc_info:
        DimensionDataComputeProvider(fake_client, poller=poller)

    assert str(exc_info.value).startswith("Unable to list datacenters:")


def test_connectivity_check_can_be_skipped(fake_client):
    DimensionDataComputeProvider(fake_client, verify_connectivity=False)

    assert fake_client.calls == []


def test_configuration_reaches_handlers(provider):
    assert provider.provisioning_handler.max_parallel_servers == 2
    assert provider.provisioning_handler.default_cpu_count == 2
    assert provider.poller.timeout == 180


def test_validate_template_raises_on_errors(provider, template_config):
    with pytest.raises(ConfigurationValidationError) as exc_info:
        provider.validate_template("t", {**template_config, "image": "nope"})

    assert "image" in exc_info.value.details.conditions_by_key


def test_lifecycle(provider, fake_client, template_config):
    # Arrange
    template = provider.create_resource_template("hadoop", template_config)
    assert isinstance(template, ResourceTemplate)

    # Act / Assert
    result = provider.allocate(template, ["a", "b"], 2)
    assert result.provisioned_ids == ["a", "b"]
    assert all(call[1].cpu_count == 2 for call in fake_client.calls_to("create_server"))

    instances = provider.find(template, ["a", "b"])
    assert [i.name for i in instances] == ["hdp-a", "hdp-b"]

    assert provider.get_instance_state(template, ["a", "b"]) == {
        "a": InstanceStatus.RUNNING, "b": InstanceStatus.RUNNING,
    }

    provider.delete(template, ["a", "b"])
    assert provider.get_instance_state(template, ["a", "b"]) == {
        "a": InstanceStatus.DELETED, "b": InstanceStatus.DELETED,
    }
