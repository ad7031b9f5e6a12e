"""Template configuration validation against the local rules and the live API."""
import logging
from typing import Any, Mapping, Optional

from src.domain.base.ports.cloud_client_port import CloudResourceClientPort
from src.domain.core.conditions import ConditionAccumulator
from src.domain.template.template_aggregate import DEFAULT_IMAGE_ID, TemplateKeys
from src.domain.template.validation import validate_template_fields
from src.infrastructure.exceptions import TransientProviderError
from src.providers.dimensiondata.exceptions import CloudClientError, NotFoundError

logger = logging.getLogger(__name__)

DATACENTER_MISSING_MSG = "Datacenter must be provided."
DATACENTER_NOT_FOUND_MSG = "Datacenter '{}' not found."
IMAGE_NOT_FOUND_MSG = "Image '{}' not found."


class TemplateConfigurationValidator:
    """Validates raw template configuration before any cloud mutation."""

    def __init__(self, client: CloudResourceClientPort):
        self.client = client

    def validate(self, name: str, configuration: Mapping[str, Any],
                 accumulator: Optional[ConditionAccumulator] = None) -> ConditionAccumulator:
        """
        Run the local field checks, then check the datacenter and image exist.

        Args:
            name: Template name, used for logging
            configuration: Raw template configuration keyed by TemplateKeys
            accumulator: Receives keyed conditions; a new one is created if omitted

        Returns:
            The accumulator

        Raises:
            TransientProviderError: If a remote check fails for a reason other than not-found
        """
        accumulator = accumulator if accumulator is not None else ConditionAccumulator()
        logger.info(f"Validating template '{name}'")

        validate_template_fields(configuration, accumulator)
        self.check_datacenter(configuration, accumulator)
        self.check_image(configuration, accumulator)
        return accumulator

    def check_datacenter(self, configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
        datacenter = configuration.get(TemplateKeys.DATACENTER)
        if not datacenter:
            accumulator.add_error(TemplateKeys.DATACENTER, DATACENTER_MISSING_MSG)
            return

        logger.info(f">> Querying datacenter '{datacenter}'")
        try:
            self.client.get_datacenter(datacenter)
        except NotFoundError:
            accumulator.add_error(TemplateKeys.DATACENTER, DATACENTER_NOT_FOUND_MSG.format(datacenter))
        except CloudClientError as e:
            raise TransientProviderError(f"Unable to query datacenter '{datacenter}': {str(e)}", e) from e

    def check_image(self, configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
        image_id = configuration.get(TemplateKeys.IMAGE) or DEFAULT_IMAGE_ID
        try:
            self.client.get_os_image(image_id)
        except NotFoundError:
            accumulator.add_error(TemplateKeys.IMAGE, IMAGE_NOT_FOUND_MSG.format(image_id))
        except CloudClientError as e:
            raise TransientProviderError(f"Unable to query image '{image_id}': {str(e)}", e) from e
