"""Template bounded context - what to provision and how it is validated."""

from .template_aggregate import ProvisioningRequest, ResourceTemplate, TemplateKeys
from .validation import check_prefix, is_prefix_valid, validate_template_fields

__all__ = [
    "ResourceTemplate",
    "ProvisioningRequest",
    "TemplateKeys",
    "check_prefix",
    "is_prefix_valid",
    "validate_template_fields",
]
