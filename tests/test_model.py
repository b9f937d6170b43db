import pytest

from hermesadmit.model import (
    AdmissionDenied,
    FieldError,
    HermesClusterDefaults,
    HermesInstance,
    MigrationFromOpenClawSpec,
    MigrationSource,
    NamespacedObjectReference,
    SelfConfigAction,
)


@pytest.mark.parametrize(
    "value, member",
    [
        ("skills", "SKILLS"),
        ("config", "CONFIG"),
        ("envVars", "ENV_VARS"),
        ("workspaceFiles", "WORKSPACE_FILES"),
        ("profiles", "PROFILES"),
    ],
)
def test_self_config_action_values(value, member):
    action = SelfConfigAction(value)
    assert action.value == value
    assert action.name == member


def test_self_config_action_has_exactly_five_members():
    assert sorted(SelfConfigAction(a).value for a in
                  ["skills", "config", "envVars", "workspaceFiles", "profiles"]) == sorted(
        a.value for a in SelfConfigAction
    )
    assert len(SelfConfigAction) == 5


def test_self_config_action_compares_to_string():
    assert SelfConfigAction("profiles") is SelfConfigAction.PROFILES
    assert SelfConfigAction.SKILLS == "skills"


def test_self_config_action_rejects_unknown():
    with pytest.raises(ValueError):
        SelfConfigAction("reboot-cluster")


def test_instance_copy_is_deep():
    inst = HermesInstance(name="demo", namespace="agents")
    inst.spec.migration.from_openclaw = MigrationFromOpenClawSpec(
        mode="copy",
        source=MigrationSource(openclaw_instance_ref=NamespacedObjectReference("x", "y")),
    )
    dup = inst.copy()
    dup.spec.migration.from_openclaw.mode = "move"
    dup.spec.image.tag = "changed"
    assert inst.spec.migration.from_openclaw.mode == "copy"
    assert inst.spec.image.tag == ""
    assert dup == inst.copy() or dup != inst


def test_instance_copy_equals_original():
    inst = HermesInstance(name="demo")
    inst.spec.storage.persistence.storage_class_name = "gp3"
    assert inst.copy() == inst


def test_instance_defaults_are_unset():
    inst = HermesInstance(name="demo")
    assert inst.spec.storage.persistence.storage_class_name is None
    assert inst.spec.self_configure.enabled is None
    assert inst.spec.migration.from_openclaw is None
    assert inst.status.migration.completed is False


def test_instances_do_not_share_mutable_defaults():
    a = HermesInstance(name="a")
    b = HermesInstance(name="b")
    a.spec.workspace.initial_dirs.append("data")
    assert b.spec.workspace.initial_dirs == []


def test_cluster_defaults_is_cluster_scoped():
    assert HermesClusterDefaults(name="cluster").namespace == ""


def test_forbidden_field_error_format():
    err = FieldError(path="spec.restoreFrom", detail="immutable", kind="Forbidden")
    assert str(err) == "spec.restoreFrom: Forbidden: immutable"


def test_invalid_field_error_quotes_value():
    err = FieldError(path="spec", detail="pick one", value="a + b")
    assert str(err) == 'spec: Invalid value: "a + b": pick one'


def test_admission_denied_carries_warnings():
    exc = AdmissionDenied("denied", warnings=["w1"])
    assert str(exc) == "denied"
    assert exc.warnings == ["w1"]
    assert exc.errors == []