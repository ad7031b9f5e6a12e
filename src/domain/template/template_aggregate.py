from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from src.domain.core.common_types import Tags
from src.domain.core.exceptions import TemplateValidationError

DEFAULT_IMAGE_ID = "4ef9c9d4-b188-4b71-9c94-c85e8f257b9e"
DEFAULT_NETWORK_DOMAIN_TYPE = "ADVANCED"
DEFAULT_VLAN_IPV4 = "10.0.3.0"
DEFAULT_CPU_COUNT = 4
DEFAULT_MEMORY_GB = 32


class TemplateKeys:
    """Configuration keys understood by ResourceTemplate.from_dict."""
    DATACENTER = "datacenter"
    NETWORK_NAME = "networkName"
    NETWORK_TYPE = "type"
    VLAN_IPV4 = "baseIpv4"
    IMAGE = "image"
    SSH_USERNAME = "sshUsername"
    SSH_PASSWORD = "sshPassword"
    INSTANCE_NAME_PREFIX = "instanceNamePrefix"
    CPU_COUNT = "cpuCount"
    MEMORY_GB = "memoryGb"
    BOOT_DISK_TYPE = "bootDiskType"
    BOOT_DISK_SIZE_GB = "bootDiskSizeGb"
    DATA_DISK_COUNT = "dataDiskCount"
    DATA_DISK_TYPE = "dataDiskType"
    DATA_DISK_SIZE_GB = "dataDiskSizeGb"

    REQUIRED = (DATACENTER, NETWORK_NAME)


def _optional_int(data: Mapping[str, Any], key: str, errors: Dict[str, str]) -> Optional[int]:
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        errors[key] = f"Value must be an integer: '{value}'."
        return None


@dataclass(frozen=True)
class ResourceTemplate:
    """Immutable description of the resources to provision for one request."""
    name: str
    datacenter: str
    network_name: str
    instance_name_prefix: Optional[str]
    network_domain_type: str = DEFAULT_NETWORK_DOMAIN_TYPE
    vlan_ipv4: str = DEFAULT_VLAN_IPV4
    image_id: str = DEFAULT_IMAGE_ID
    ssh_username: Optional[str] = None
    ssh_password: Optional[str] = None
    cpu_count: Optional[int] = None
    memory_gb: Optional[int] = None
    boot_disk_type: Optional[str] = None
    boot_disk_size_gb: Optional[int] = None
    data_disk_count: Optional[int] = None
    data_disk_type: Optional[str] = None
    data_disk_size_gb: Optional[int] = None
    tags: Tags = field(default_factory=Tags)

    @property
    def vlan_name(self) -> str:
        return f"{self.network_name}_Vlan"

    @property
    def has_ssh_credentials(self) -> bool:
        return bool(self.ssh_username) and bool(self.ssh_password)

    def decorate_instance_name(self, instance_id: str) -> str:
        """Return the caller-visible server name for a logical instance id."""
        return f"{self.instance_name_prefix}-{instance_id}"

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any],
                  tags: Optional[Dict[str, str]] = None) -> ResourceTemplate:
        """
        Create a template from plugin configuration values.

        Numeric values may be given as strings. The instance name prefix is
        not validated here so that an invalid prefix can be detected later by
        the lookup guards.

        Raises:
            TemplateValidationError: If required keys are missing or numeric values do not parse
        """
        errors: Dict[str, str] = {}
        for key in TemplateKeys.REQUIRED:
            if not data.get(key):
                errors[key] = f"'{key}' is mandatory"

        cpu_count = _optional_int(data, TemplateKeys.CPU_COUNT, errors)
        memory_gb = _optional_int(data, TemplateKeys.MEMORY_GB, errors)
        boot_disk_size_gb = _optional_int(data, TemplateKeys.BOOT_DISK_SIZE_GB, errors)
        data_disk_count = _optional_int(data, TemplateKeys.DATA_DISK_COUNT, errors)
        data_disk_size_gb = _optional_int(data, TemplateKeys.DATA_DISK_SIZE_GB, errors)

        if errors:
            raise TemplateValidationError(name, errors)

        return cls(
            name=name,
            datacenter=data[TemplateKeys.DATACENTER],
            network_name=data[TemplateKeys.NETWORK_NAME],
            instance_name_prefix=data.get(TemplateKeys.INSTANCE_NAME_PREFIX),
            network_domain_type=data.get(TemplateKeys.NETWORK_TYPE) or DEFAULT_NETWORK_DOMAIN_TYPE,
            vlan_ipv4=data.get(TemplateKeys.VLAN_IPV4) or DEFAULT_VLAN_IPV4,
            image_id=data.get(TemplateKeys.IMAGE) or DEFAULT_IMAGE_ID,
            ssh_username=data.get(TemplateKeys.SSH_USERNAME),
            ssh_password=data.get(TemplateKeys.SSH_PASSWORD),
            cpu_count=cpu_count,
            memory_gb=memory_gb,
            boot_disk_type=data.get(TemplateKeys.BOOT_DISK_TYPE),
            boot_disk_size_gb=boot_disk_size_gb,
            data_disk_count=data_disk_count,
            data_disk_type=data.get(TemplateKeys.DATA_DISK_TYPE),
            data_disk_size_gb=data_disk_size_gb,
            tags=Tags.from_dict(tags),
        )

    def __str__(self) -> str:
        return (f"ResourceTemplate(name={self.name}, datacenter={self.datacenter}, "
                f"network={self.network_name}, prefix={self.instance_name_prefix})")


@dataclass(frozen=True)
class ProvisioningRequest:
    """A template, the logical instance ids to create and the minimum that must succeed."""
    template: ResourceTemplate
    instance_ids: Tuple[str, ...]
    min_count: int

    def __post_init__(self):
        if self.min_count < 0:
            raise ValueError(f"min_count must be non-negative, got {self.min_count}")

    @classmethod
    def create(cls, template: ResourceTemplate, instance_ids: Iterable[str],
               min_count: int) -> ProvisioningRequest:
        # dict.fromkeys keeps caller order while dropping duplicates
        return cls(template, tuple(dict.fromkeys(instance_ids)), min_count)

    @property
    def requested_count(self) -> int:
        return len(self.instance_ids)
