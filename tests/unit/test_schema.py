import pytest
from pydantic import ValidationError

from opsctl.config.schema import OpsctlConfig, PollConfig, ProfileConfig, ServicesConfig
from opsctl.models.records import RecordType, TypeProfile


class TestServicesConfig:
    def test_defaults(self) -> None:
        config = ServicesConfig()
        assert config.cmdb_url.startswith("http://")
        assert config.timeout == 30.0


class TestPollConfig:
    def test_zero_interval_allowed(self) -> None:
        assert PollConfig(interval=0).interval == 0

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValidationError, match="interval"):
            PollConfig(interval=-1)

    def test_zero_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError, match="timeout"):
            PollConfig(timeout=0)


class TestProfileConfig:
    def test_empty_fields_rejected(self) -> None:
        with pytest.raises(ValidationError, match="must not be empty"):
            ProfileConfig(fields=[])

    def test_negative_width_rejected(self) -> None:
        with pytest.raises(ValidationError, match="positive"):
            ProfileConfig(lengths={"name": -3})

    def test_merge_into(self) -> None:
        base = TypeProfile(
            record_type=RecordType.SYSTEM, fields=("name",), lengths={"name": 5, "status": 7}
        )
        merged = ProfileConfig(fields=["status", "name"], lengths={"name": 9}).merge_into(base)
        assert merged.record_type is RecordType.SYSTEM
        assert merged.fields == ("status", "name")
        assert merged.lengths == {"name": 9, "status": 7}


class TestOpsctlConfig:
    def test_profile_keys_are_record_types(self) -> None:
        config = OpsctlConfig.model_validate({"profiles": {"instance": {"lengths": {"id": 8}}}})
        assert RecordType.INSTANCE in config.profiles

    def test_unknown_profile_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OpsctlConfig.model_validate({"profiles": {"router": {}}})
