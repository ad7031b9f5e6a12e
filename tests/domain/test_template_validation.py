import pytest

from src.domain.core.conditions import ConditionAccumulator
from src.domain.template.template_aggregate import TemplateKeys
from src.domain.template.validation import (
    INVALID_PREFIX_LENGTH_MSG,
    INVALID_PREFIX_MSG,
    PREFIX_MISSING_MSG,
    check_prefix,
    is_prefix_valid,
    validate_template_fields,
)


class TestPrefixValidation:
    """Instance name prefix rules."""

    @pytest.mark.parametrize("prefix", ["a", "hdp", "web-", "a1-b2", "x" * 26])
    def test_valid_prefixes(self, prefix):
        assert check_prefix(prefix) == []
        assert is_prefix_valid(prefix)

    @pytest.mark.parametrize("prefix", [None, ""])
    def test_missing_prefix(self, prefix):
        conditions = check_prefix(prefix)

        assert len(conditions) == 1
        assert conditions[0].message == PREFIX_MISSING_MSG
        assert conditions[0].key == TemplateKeys.INSTANCE_NAME_PREFIX

    def test_prefix_too_long(self):
        conditions = check_prefix("a" * 27)

        assert [c.message for c in conditions] == [INVALID_PREFIX_LENGTH_MSG]

    @pytest.mark.parametrize("prefix", ["Hdp", "1abc", "-abc", "a_b", "ab.c", "ab c", "cluster\n"])
    def test_prefix_pattern(self, prefix):
        conditions = check_prefix(prefix)

        assert [c.message for c in conditions] == [INVALID_PREFIX_MSG]
        assert not is_prefix_valid(prefix)

    @pytest.mark.parametrize("prefix", [42, ["hdp"]])
    def test_non_string_prefix(self, prefix):
        conditions = check_prefix(prefix)

        assert [c.message for c in conditions] == [INVALID_PREFIX_MSG]


class TestTemplateFieldValidation:
    """Numeric and enumerated template fields."""

    def _validate(self, configuration):
        accumulator = ConditionAccumulator()
        validate_template_fields({"instanceNamePrefix": "hdp", **configuration}, accumulator)
        return accumulator.get_conditions_by_key()

    def test_valid_configuration(self):
        conditions = self._validate({
            "bootDiskSizeGb": "10",
            "dataDiskCount": 0,
            "dataDiskSizeGb": 500,
            "cpuCount": "8",
            "memoryGb": 64,
            "type": "ESSENTIALS",
        })

        assert conditions == {}

    def test_boot_disk_too_small(self):
        conditions = self._validate({"bootDiskSizeGb": "9"})

        assert conditions[TemplateKeys.BOOT_DISK_SIZE_GB][0].message == (
            "Boot disk size must be at least '10GB'. Current configuration: '9GB'.")

    def test_boot_disk_not_an_integer(self):
        conditions = self._validate({"bootDiskSizeGb": "big"})

        assert conditions[TemplateKeys.BOOT_DISK_SIZE_GB][0].message == "Boot disk size must be an integer: 'big'."

    def test_negative_data_disk_count(self):
        conditions = self._validate({"dataDiskCount": "-1"})

        assert conditions[TemplateKeys.DATA_DISK_COUNT][0].message == (
            "Data disk count must be non-negative. Current configuration: '-1'.")

    def test_data_disk_too_small(self):
        conditions = self._validate({"dataDiskSizeGb": 5})

        assert TemplateKeys.DATA_DISK_SIZE_GB in conditions

    @pytest.mark.parametrize("key", [TemplateKeys.CPU_COUNT, TemplateKeys.MEMORY_GB])
    def test_compute_size_must_be_positive(self, key):
        conditions = self._validate({key: "0"})

        assert key in conditions

    def test_unknown_network_type(self):
        conditions = self._validate({"type": "PREMIUM"})

        assert conditions[TemplateKeys.NETWORK_TYPE][0].message == (
            "Invalid network domain type 'PREMIUM'. Available options: ESSENTIALS, ADVANCED")

    def test_prefix_checked_with_fields(self):
        accumulator = ConditionAccumulator()

        validate_template_fields({"bootDiskSizeGb": "5"}, accumulator)

        keys = set(accumulator.get_conditions_by_key())
        assert keys == {TemplateKeys.BOOT_DISK_SIZE_GB, TemplateKeys.INSTANCE_NAME_PREFIX}
