"""Local (no I/O) validation of resource template configuration."""
import logging
import re
from typing import Any, List, Mapping, Optional

from src.domain.core.conditions import Condition, ConditionAccumulator, ConditionType
from src.domain.template.template_aggregate import TemplateKeys

logger = logging.getLogger(__name__)

MIN_PREFIX_LENGTH = 1
MAX_PREFIX_LENGTH = 26
MIN_BOOT_DISK_SIZE_GB = 10
MIN_DATA_DISK_SIZE_GB = 10
NETWORK_DOMAIN_TYPES = ("ESSENTIALS", "ADVANCED")

# Same as server names in general, but a trailing dash is allowed since
# "-<instanceId>" is always appended.
INSTANCE_NAME_PREFIX_PATTERN = re.compile(r"[a-z][-a-z0-9]*")

PREFIX_MISSING_MSG = "Instance name prefix must be provided."
INVALID_PREFIX_LENGTH_MSG = (
    f"Instance name prefix must be between {MIN_PREFIX_LENGTH} and {MAX_PREFIX_LENGTH} characters."
)
INVALID_PREFIX_MSG = (
    "Instance name prefix must follow this pattern: The first character must be a lowercase letter, "
    "and all following characters must be a dash, lowercase letter, or digit."
)
INVALID_BOOT_DISK_SIZE_FORMAT_MSG = "Boot disk size must be an integer: '{}'."
INVALID_BOOT_DISK_SIZE_MSG = "Boot disk size must be at least '{}GB'. Current configuration: '{}GB'."
INVALID_DATA_DISK_COUNT_FORMAT_MSG = "Data disk count must be an integer: '{}'."
INVALID_DATA_DISK_COUNT_NEGATIVE_MSG = "Data disk count must be non-negative. Current configuration: '{}'."
INVALID_DATA_DISK_SIZE_FORMAT_MSG = "Data disk size must be an integer: '{}'."
INVALID_DATA_DISK_SIZE_MSG = "Data disk size must be at least '{}GB'. Current configuration: '{}GB'."
INVALID_POSITIVE_INTEGER_MSG = "{} must be a positive integer: '{}'."
INVALID_NETWORK_TYPE_MSG = "Invalid network domain type '{}'. Available options: {}"


def check_prefix(instance_name_prefix: Optional[str]) -> List[Condition]:
    """
    Validate an instance name prefix.

    Args:
        instance_name_prefix: The configured prefix, possibly None

    Returns:
        List of error conditions keyed by the prefix config key; empty when valid
    """
    key = TemplateKeys.INSTANCE_NAME_PREFIX
    if not instance_name_prefix:
        return [Condition(ConditionType.ERROR, PREFIX_MISSING_MSG, key)]

    if not isinstance(instance_name_prefix, str):
        return [Condition(ConditionType.ERROR, INVALID_PREFIX_MSG, key)]

    if not MIN_PREFIX_LENGTH <= len(instance_name_prefix) <= MAX_PREFIX_LENGTH:
        return [Condition(ConditionType.ERROR, INVALID_PREFIX_LENGTH_MSG, key)]

    if not INSTANCE_NAME_PREFIX_PATTERN.fullmatch(instance_name_prefix):
        return [Condition(ConditionType.ERROR, INVALID_PREFIX_MSG, key)]

    return []


def is_prefix_valid(instance_name_prefix: Optional[str]) -> bool:
    """True when check_prefix reports no conditions. Logs invalid prefixes."""
    valid = not check_prefix(instance_name_prefix)
    if not valid:
        logger.info(f"Instance name prefix '{instance_name_prefix}' is invalid.")
    return valid


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def check_boot_disk_size(configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
    key = TemplateKeys.BOOT_DISK_SIZE_GB
    raw = configuration.get(key)
    if raw is None:
        return
    size = _parse_int(raw)
    if size is None:
        accumulator.add_error(key, INVALID_BOOT_DISK_SIZE_FORMAT_MSG.format(raw))
    elif size < MIN_BOOT_DISK_SIZE_GB:
        accumulator.add_error(key, INVALID_BOOT_DISK_SIZE_MSG.format(MIN_BOOT_DISK_SIZE_GB, size))


def check_data_disk_count(configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
    key = TemplateKeys.DATA_DISK_COUNT
    raw = configuration.get(key)
    if raw is None:
        return
    count = _parse_int(raw)
    if count is None:
        accumulator.add_error(key, INVALID_DATA_DISK_COUNT_FORMAT_MSG.format(raw))
    elif count < 0:
        accumulator.add_error(key, INVALID_DATA_DISK_COUNT_NEGATIVE_MSG.format(count))


def check_data_disk_size(configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
    key = TemplateKeys.DATA_DISK_SIZE_GB
    raw = configuration.get(key)
    if raw is None:
        return
    size = _parse_int(raw)
    if size is None:
        accumulator.add_error(key, INVALID_DATA_DISK_SIZE_FORMAT_MSG.format(raw))
    elif size < MIN_DATA_DISK_SIZE_GB:
        accumulator.add_error(key, INVALID_DATA_DISK_SIZE_MSG.format(MIN_DATA_DISK_SIZE_GB, size))


def check_compute_size(configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
    for key, label in ((TemplateKeys.CPU_COUNT, "CPU count"), (TemplateKeys.MEMORY_GB, "Memory (GB)")):
        raw = configuration.get(key)
        if raw is None:
            continue
        value = _parse_int(raw)
        if value is None or value < 1:
            accumulator.add_error(key, INVALID_POSITIVE_INTEGER_MSG.format(label, raw))


def check_network_type(configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
    network_type = configuration.get(TemplateKeys.NETWORK_TYPE)
    if network_type is not None and network_type not in NETWORK_DOMAIN_TYPES:
        accumulator.add_error(
            TemplateKeys.NETWORK_TYPE,
            INVALID_NETWORK_TYPE_MSG.format(network_type, ", ".join(NETWORK_DOMAIN_TYPES)),
        )


def validate_template_fields(configuration: Mapping[str, Any], accumulator: ConditionAccumulator) -> None:
    """Run every local check against raw template configuration."""
    check_boot_disk_size(configuration, accumulator)
    check_data_disk_count(configuration, accumulator)
    check_data_disk_size(configuration, accumulator)
    check_compute_size(configuration, accumulator)
    check_network_type(configuration, accumulator)
    accumulator.extend(check_prefix(configuration.get(TemplateKeys.INSTANCE_NAME_PREFIX)))
