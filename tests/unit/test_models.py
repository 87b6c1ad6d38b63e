"""Tests for record types and type profiles."""

from opsctl.config.defaults import DEFAULT_PROFILES
from opsctl.models.records import RecordType, Service


class TestRecordType:
    def test_values(self):
        assert RecordType.SYSTEM == "system"
        assert RecordType.ENVIRONMENT == "environment"
        assert RecordType.INSTANCE == "instance"
        assert RecordType.SERVICE == "service"
        assert RecordType.HOST == "host"

    def test_from_string(self):
        assert RecordType("instance") is RecordType.INSTANCE

    def test_service(self):
        assert RecordType.SYSTEM.service is Service.CMDB
        assert RecordType.ENVIRONMENT.service is Service.CMDB
        assert RecordType.INSTANCE.service is Service.INSTANCE
        assert RecordType.SERVICE.service is Service.MONITOR
        assert RecordType.HOST.service is Service.MONITOR


class TestDefaultProfiles:
    def test_every_type_has_profile(self):
        assert set(DEFAULT_PROFILES) == set(RecordType)

    def test_profiles_keyed_by_own_type(self):
        for record_type, profile in DEFAULT_PROFILES.items():
            assert profile.record_type is record_type

    def test_default_fields_have_widths(self):
        for profile in DEFAULT_PROFILES.values():
            assert profile.fields
            for name in profile.fields:
                assert profile.lengths[name] > 0
