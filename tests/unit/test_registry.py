import pytest

from opsctl.config.defaults import DEFAULT_PROFILES
from opsctl.config.registry import ProfileRegistry
from opsctl.models.records import RecordType


class TestProfileRegistry:
    def test_get_by_enum_and_string(self) -> None:
        reg = ProfileRegistry(DEFAULT_PROFILES)
        assert reg.get(RecordType.SYSTEM) is reg.get("system")
        assert "system" in reg
        assert len(reg) == len(RecordType)

    def test_get_unknown_raises(self) -> None:
        reg = ProfileRegistry(DEFAULT_PROFILES)
        with pytest.raises(KeyError, match="Unknown record type"):
            reg.get("router")

    def test_missing_profile_rejected(self) -> None:
        profiles = dict(DEFAULT_PROFILES)
        del profiles[RecordType.HOST]
        with pytest.raises(ValueError, match="host"):
            ProfileRegistry(profiles)

    def test_resolve_persists_width_override(self) -> None:
        reg = ProfileRegistry(DEFAULT_PROFILES)
        selection = reg.resolve("system", "name=10,status")
        assert selection.fields == ("name", "status")
        assert reg.get("system").width("name") == 10
        assert reg.get("system").width("status") == DEFAULT_PROFILES[RecordType.SYSTEM].width("status")
        # A later resolve without overrides still sees the new width.
        assert reg.resolve("system", None).profile.width("name") == 10

    def test_resolve_does_not_touch_other_types(self) -> None:
        reg = ProfileRegistry(DEFAULT_PROFILES)
        reg.resolve("system", "name=10")
        assert reg.get("host").width("name") == DEFAULT_PROFILES[RecordType.HOST].width("name")

    def test_defaults_not_mutated(self) -> None:
        before = DEFAULT_PROFILES[RecordType.SYSTEM].width("name")
        ProfileRegistry(DEFAULT_PROFILES).resolve("system", "name=3")
        assert DEFAULT_PROFILES[RecordType.SYSTEM].width("name") == before

    def test_iterates_profiles(self) -> None:
        reg = ProfileRegistry(DEFAULT_PROFILES)
        assert {p.record_type for p in reg} == set(RecordType)
