import pytest

from src.domain.template.template_aggregate import TemplateKeys
from src.infrastructure.exceptions import TransientProviderError
from src.providers.dimensiondata.configuration_validator import TemplateConfigurationValidator
from src.providers.dimensiondata.exceptions import ServiceUnavailableError


@pytest.fixture
def validator(fake_client):
    return TemplateConfigurationValidator(fake_client)


def test_valid_configuration_has_no_conditions(validator, fake_client, template_config):
    accumulator = validator.validate("t", template_config)

    assert not accumulator.has_conditions()
    assert [call[0] for call in fake_client.calls] == ["get_datacenter", "get_os_image"]


def test_unknown_datacenter(validator, template_config):
    accumulator = validator.validate("t", {**template_config, "datacenter": "XX1"})

    conditions = accumulator.get_conditions_by_key()[TemplateKeys.DATACENTER]
    assert conditions[0].message == "Datacenter 'XX1' not found."


def test_missing_datacenter_is_not_queried(validator, fake_client, template_config):
    configuration = dict(template_config)
    del configuration["datacenter"]

    accumulator = validator.validate("t", configuration)

    assert TemplateKeys.DATACENTER in accumulator.get_conditions_by_key()
    assert not fake_client.calls_to("get_datacenter")


def test_unknown_image(validator, template_config):
    accumulator = validator.validate("t", {**template_config, "image": "no-such-image"})

    conditions = accumulator.get_conditions_by_key()[TemplateKeys.IMAGE]
    assert conditions[0].message == "Image 'no-such-image' not found."


def test_local_and_remote_problems_accumulate(validator, template_config):
    accumulator = validator.validate("t", {**template_config, "datacenter": "XX1",
                                           "bootDiskSizeGb": "2", "instanceNamePrefix": "9lives"})

    assert set(accumulator.get_conditions_by_key()) == {
        TemplateKeys.DATACENTER, TemplateKeys.BOOT_DISK_SIZE_GB, TemplateKeys.INSTANCE_NAME_PREFIX,
    }


def test_other_client_errors_are_transient(validator, fake_client, template_config):
    fake_client.failures["get_datacenter"] = ServiceUnavailableError("down", 503)

    with pytest.raises(TransientProviderError):
        validator.validate("t", template_config)
