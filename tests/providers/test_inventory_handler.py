import pytest

from src.domain.instance.instance_status import InstanceStatus
from src.infrastructure.exceptions import TransientProviderError
from src.providers.dimensiondata.exceptions import NotFoundError, RequestError, ServiceUnavailableError
from src.providers.dimensiondata.infrastructure.handlers import InventoryHandler


@pytest.fixture
def handler(fake_client, poller):
    return InventoryHandler(fake_client, poller)


class TestFind:

    def test_returns_existing_instances_in_request_order(self, handler, fake_client, template):
        # Arrange
        fake_client.add_server("hdp-c", private_ipv4="10.0.3.12")
        fake_client.add_server("hdp-a", private_ipv4="10.0.3.11")

        # Act
        instances = handler.find(template, ["a", "b", "c"])

        # Assert
        assert [i.instance_id for i in instances] == ["a", "c"]
        assert instances[0].get_properties()["privateIpAddress"] == "10.0.3.11"
        assert instances[0].get_properties()["instanceType"] == "hdp-a"
        assert [call[1] for call in fake_client.calls_to("list_servers")] == ["hdp-a", "hdp-b", "hdp-c"]

    def test_not_found_is_skipped(self, handler, fake_client, template):
        fake_client.list_server_failures["hdp-a"] = NotFoundError("gone", 404)

        assert handler.find(template, ["a"]) == []

    def test_other_errors_fail_the_call(self, handler, fake_client, template):
        fake_client.add_server("hdp-a")
        fake_client.list_server_failures["hdp-b"] = ServiceUnavailableError("busy", 503)

        with pytest.raises(TransientProviderError):
            handler.find(template, ["a", "b"])

    def test_invalid_prefix_queries_nothing(self, handler, fake_client, invalid_prefix_template):
        assert handler.find(invalid_prefix_template, ["a", "b"]) == []
        assert fake_client.calls == []


class TestGetInstanceState:

    def test_one_status_per_requested_id(self, handler, fake_client, template):
        fake_client.add_server("hdp-a", "NORMAL", started=True)
        fake_client.add_server("hdp-b", "NORMAL", started=False)
        fake_client.add_server("hdp-c", "PENDING_ADD")
        fake_client.list_server_failures["hdp-e"] = RequestError("boom", 500)
        fake_client.list_server_failures["hdp-f"] = NotFoundError("gone", 404)

        states = handler.get_instance_state(template, ["a", "b", "c", "d", "e", "f"])

        assert states == {
            "a": InstanceStatus.RUNNING,
            "b": InstanceStatus.STOPPED,
            "c": InstanceStatus.PENDING,
            "d": InstanceStatus.DELETED,
            "e": InstanceStatus.UNKNOWN,
            "f": InstanceStatus.DELETED,
        }

    def test_failed_server(self, handler, fake_client, template):
        fake_client.add_server("hdp-a", "FAILED_ADD", started=False)

        assert handler.get_instance_state(template, ["a"]) == {"a": InstanceStatus.FAILED}

    def test_invalid_prefix_reports_unknown_without_queries(self, handler, fake_client,
                                                            invalid_prefix_template):
        states = handler.get_instance_state(invalid_prefix_template, ["a", "b"])

        assert states == {"a": InstanceStatus.UNKNOWN, "b": InstanceStatus.UNKNOWN}
        assert fake_client.calls == []
