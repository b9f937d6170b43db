import pytest

from hermesadmit.model import (
    AdmissionDenied,
    HermesInstance,
    HermesSelfConfig,
    HermesSelfConfigSpec,
    SelfConfigEnvVar,
    SelfConfigProfileSnapshot,
    SelfConfigSkill,
    WorkspaceFile,
)
from hermesadmit.selfconfig import SelfConfigValidator
from hermesadmit.store import ObjectStore


def _parent(name, profile_enabled):
    inst = HermesInstance(name=name, namespace="default")
    if profile_enabled:
        inst.spec.profile_store.honcho.enabled = True
    return inst


def _validator(*objs):
    return SelfConfigValidator(ObjectStore(*objs))


def _sc(**spec):
    return HermesSelfConfig(name="x", namespace="default", spec=HermesSelfConfigSpec(**spec))


def test_nil_store_still_rejects_empty_instance_ref():
    v = SelfConfigValidator()
    with pytest.raises(AdmissionDenied) as exc:
        v.validate_create(HermesSelfConfig(name="demo"))
    assert "instanceRef" in str(exc.value)


def test_rejects_missing_instance():
    with pytest.raises(AdmissionDenied) as exc:
        _validator().validate_create(_sc(instance_ref="nope"))
    assert "instanceRef" in str(exc.value)
    assert "nope" in str(exc.value)


def test_rejects_empty_instance_ref():
    with pytest.raises(AdmissionDenied) as exc:
        _validator().validate_create(_sc())
    assert "instanceRef" in str(exc.value)


def test_accepts_valid_request():
    v = _validator(_parent("my-hermes", False))
    warns = v.validate_create(
        _sc(instance_ref="my-hermes", add_skills=[SelfConfigSkill(source="git+x")])
    )
    assert warns == []


def test_warns_on_multiple_mutations():
    v = _validator(_parent("my-hermes", False))
    warns = v.validate_create(
        _sc(
            instance_ref="my-hermes",
            add_skills=[SelfConfigSkill(source="git+x")],
            add_env_vars=[SelfConfigEnvVar(name="X", value="y")],
        )
    )
    assert len(warns) == 1
    assert "atomic" in warns[0]


def test_rejects_invalid_json_patch():
    v = _validator(_parent("my-hermes", False))
    with pytest.raises(AdmissionDenied) as exc:
        v.validate_create(_sc(instance_ref="my-hermes", patch_config=b"{not-json"))
    assert "patchConfig" in str(exc.value)


def test_rejects_non_object_json_patch():
    v = _validator(_parent("my-hermes", False))
    with pytest.raises(AdmissionDenied) as exc:
        v.validate_create(_sc(instance_ref="my-hermes", patch_config="[1, 2]"))
    assert "patchConfig" in str(exc.value)


def test_accepts_valid_json_patch_as_text():
    v = _validator(_parent("my-hermes", False))
    assert v.validate_create(_sc(instance_ref="my-hermes", patch_config='{"a": 1}')) == []


def test_empty_patch_is_not_a_mutation():
    v = _validator(_parent("my-hermes", False))
    warns = v.validate_create(
        _sc(
            instance_ref="my-hermes",
            patch_config=b"",
            add_env_vars=[SelfConfigEnvVar(name="X", value="y")],
        )
    )
    assert warns == []


def test_patch_and_workspace_files_warn():
    v = _validator(_parent("my-hermes", False))
    warns = v.validate_create(
        _sc(
            instance_ref="my-hermes",
            patch_config=b"{}",
            add_workspace_files=[WorkspaceFile(path="a.md", content="x")],
        )
    )
    assert len(warns) == 1


def test_rejects_snapshot_without_honcho():
    v = _validator(_parent("my-hermes", False))
    with pytest.raises(AdmissionDenied) as exc:
        v.validate_create(
            _sc(
                instance_ref="my-hermes",
                add_profile_snapshot=SelfConfigProfileSnapshot(profile_id="u", data="d"),
            )
        )
    assert "honcho" in str(exc.value)


def test_accepts_snapshot_with_honcho():
    v = _validator(_parent("my-hermes", True))
    warns = v.validate_create(
        _sc(
            instance_ref="my-hermes",
            add_profile_snapshot=SelfConfigProfileSnapshot(profile_id="u", data="d"),
        )
    )
    assert warns == []


def test_parent_in_other_namespace_is_not_found():
    parent = HermesInstance(name="my-hermes", namespace="elsewhere")
    with pytest.raises(AdmissionDenied) as exc:
        _validator(parent).validate_create(_sc(instance_ref="my-hermes"))
    assert "default" in str(exc.value)


def test_lookup_failure_is_wrapped():
    class _BrokenStore:
        def get(self, kind, name, namespace=""):
            raise RuntimeError("timeout")

    with pytest.raises(AdmissionDenied) as exc:
        SelfConfigValidator(_BrokenStore()).validate_create(_sc(instance_ref="my-hermes"))
    assert "loading parent instance" in str(exc.value)


def test_update_validates_new_object():
    v = _validator(_parent("my-hermes", False))
    good = _sc(instance_ref="my-hermes")
    with pytest.raises(AdmissionDenied):
        v.validate_update(good, _sc())
    assert v.validate_update(_sc(), good) == []


def test_delete_is_noop():
    assert SelfConfigValidator().validate_delete(_sc()) == []


def test_rejects_wrong_type():
    with pytest.raises(TypeError):
        SelfConfigValidator().validate_create(HermesInstance(name="x"))