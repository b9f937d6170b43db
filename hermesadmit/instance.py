"""Admission validation for HermesInstance resources."""

from __future__ import annotations

from typing import Any, List, Optional

from hermesadmit.model import (
    AdmissionDenied,
    FieldError,
    HermesInstance,
    Secret,
    SelfConfigAction,
)
from hermesadmit.store import NotFoundError

CONFIG_MERGE_WARNING = (
    "spec.config.raw and spec.config.configMapRef are both set without "
    "spec.config.mergeMode; defaults to 'replace' (Raw wins)"
)
AUTO_UPDATE_LATEST_WARNING = (
    'spec.autoUpdate.enabled with spec.image.tag="latest": the operator will '
    "resolve to a concrete tag, but please pin spec.image.tag for GitOps "
    "deterministic apply"
)
_KNOWN_ACTIONS = {a.value for a in SelfConfigAction}


def _deny_fields(errors: List[FieldError], warnings: List[str]) -> AdmissionDenied:
    text = str(errors[0]) if len(errors) == 1 else "[" + ", ".join(map(str, errors)) + "]"
    return AdmissionDenied(text, warnings, errors)


def _require(obj: Any) -> HermesInstance:
    if not isinstance(obj, HermesInstance):
        raise TypeError(f"expected HermesInstance, got {type(obj).__name__}")
    return obj


class InstanceValidator:
    """Validates HermesInstance creates and updates; Secret lookups need a store."""

    def __init__(self, store: Any = None) -> None:
        self.store = store

    def validate_create(self, obj: Any) -> List[str]:
        inst = _require(obj)
        errors = validate_restore_migration_mutual_exclusion(inst)
        errors += validate_migration_source_exactly_one(inst)
        warnings = self._cross_check_secrets(inst)
        if errors:
            raise _deny_fields(errors, warnings)
        return self._validate_rest(inst, warnings)

    def validate_update(self, old: Any, new: Any) -> List[str]:
        if not isinstance(old, HermesInstance) or not isinstance(new, HermesInstance):
            raise TypeError(
                f"validate_update types: old={type(old).__name__} new={type(new).__name__}"
            )
        errors = validate_immutable_terminals(old, new)
        errors += validate_restore_migration_mutual_exclusion(new)
        errors += validate_migration_source_exactly_one(new)
        warnings = self._cross_check_secrets(new)
        if errors:
            raise _deny_fields(errors, warnings)
        try:
            validate_immutable(old, new)
        except AdmissionDenied as err:
            raise AdmissionDenied(err.message, warnings) from err
        return self._validate_rest(new, warnings)

    def validate_delete(self, obj: Any) -> List[str]:
        _require(obj)
        return []

    def _validate_rest(self, inst: HermesInstance, warnings: List[str]) -> List[str]:
        try:
            warnings = warnings + validate_common(inst)
        except AdmissionDenied as err:
            raise AdmissionDenied(err.message, warnings + err.warnings) from err
        self._validate_gateways(inst, warnings)
        return warnings

    def _validate_gateways(self, inst: HermesInstance, warnings: List[str]) -> None:
        """Append gateway warnings to warnings; raise on a missing required ref."""
        g = inst.spec.gateways
        honcho = inst.spec.profile_store.honcho
        checks = [
            ("spec.gateways.telegram.botTokenSecretRef", g.telegram.enabled, g.telegram.bot_token_secret_ref, True),
            ("spec.gateways.discord.botTokenSecretRef", g.discord.enabled, g.discord.bot_token_secret_ref, True),
            ("spec.gateways.slack.botTokenSecretRef", g.slack.enabled, g.slack.bot_token_secret_ref, True),
            ("spec.gateways.slack.appTokenSecretRef", g.slack.enabled, g.slack.app_token_secret_ref, False),
            ("spec.gateways.slack.signingSecretRef", g.slack.enabled, g.slack.signing_secret_ref, False),
            ("spec.gateways.whatsapp.providerSecretRef", g.whatsapp.enabled, g.whatsapp.provider_secret_ref, True),
            ("spec.gateways.signal.phoneNumberSecretRef", g.signal.enabled, g.signal.phone_number_secret_ref, True),
            ("spec.gateways.signal.authTokenSecretRef", g.signal.enabled, g.signal.auth_token_secret_ref, True),
            ("spec.profileStore.honcho.apiKeySecretRef", honcho.enabled, honcho.api_key_secret_ref, True),
        ]
        for field_name, enabled, ref, required in checks:
            if not enabled:
                continue
            if ref is None:
                if required:
                    raise AdmissionDenied(
                        f"{field_name} is required when the gateway is enabled", list(warnings)
                    )
                continue
            if self.store is None:
                continue
            try:
                found = self.store.get(Secret, ref.name, inst.namespace)
            except NotFoundError:
                warnings.append(
                    f'{field_name} references Secret "{ref.name}" which is not present '
                    f'yet in namespace "{inst.namespace}"; the instance will block on '
                    "rollout until the secret is created"
                )
                continue
            except Exception as err:
                raise AdmissionDenied(f"look up {field_name}: {err}", list(warnings)) from err
            if ref.key and ref.key not in found.data:
                warnings.append(
                    f'{field_name} references key "{ref.key}" in Secret "{ref.name}" '
                    "which is not present in the Secret's data"
                )

    def _cross_check_secrets(self, inst: HermesInstance) -> List[str]:
        warnings: List[str] = []
        s3 = inst.spec.backup.s3
        if s3 is not None and self.store is not None and s3.credentials_secret_name:
            name = s3.credentials_secret_name
            try:
                self.store.get(Secret, name, inst.namespace)
            except Exception as err:
                warnings.append(
                    f'spec.backup.s3.credentialsSecretRef "{name}" is not resolvable '
                    f'in namespace "{inst.namespace}": {err}'
                )
        if inst.spec.auto_update.enabled and inst.spec.image.tag == "latest":
            warnings.append(AUTO_UPDATE_LATEST_WARNING)
        return warnings


def validate_common(inst: HermesInstance) -> List[str]:
    """Apply the rules shared by create and update; return warnings."""
    warnings: List[str] = []
    spec = inst.spec

    def deny(message: str) -> AdmissionDenied:
        return AdmissionDenied(message, warnings)

    if not spec.image.repository:
        raise deny(
            "spec.image.repository is required (set on the instance or via HermesClusterDefaults)"
        )
    if not spec.storage.persistence.size:
        raise deny("spec.storage.persistence.size is required")

    config = spec.config
    if config.raw is not None and config.config_map_ref is not None and not config.merge_mode:
        warnings.append(CONFIG_MERGE_WARNING)

    sc = spec.self_configure
    if sc.enabled:
        if not sc.protected_keys:
            raise deny(
                "spec.selfConfigure.enabled=true requires non-empty "
                "spec.selfConfigure.protectedKeys (explicit allowlist policy)"
            )
        if not sc.allowed_actions:
            raise deny(
                "spec.selfConfigure.enabled=true requires non-empty spec.selfConfigure.allowedActions"
            )
        for action in sc.allowed_actions:
            if action not in _KNOWN_ACTIONS:
                raise deny(
                    f'spec.selfConfigure.allowedActions contains unknown action "{action}" '
                    "(allowed: skills,config,envVars,workspaceFiles,profiles)"
                )

    pdb = spec.availability.pod_disruption_budget
    if pdb.min_available is not None and pdb.max_unavailable is not None:
        raise deny(
            "spec.availability.podDisruptionBudget: MinAvailable and MaxUnavailable "
            "are mutually exclusive"
        )

    hpa = spec.availability.horizontal_pod_autoscaler
    if (hpa.min_replicas is not None and hpa.max_replicas is not None
            and hpa.min_replicas > hpa.max_replicas):
        raise deny("spec.availability.horizontalPodAutoscaler: MinReplicas > MaxReplicas")

    return warnings


def validate_immutable(old: HermesInstance, new: HermesInstance) -> None:
    """Raise AdmissionDenied when an immutable field changed."""
    old_class = old.spec.storage.persistence.storage_class_name
    if old_class is not None and old_class != new.spec.storage.persistence.storage_class_name:
        raise AdmissionDenied("spec.storage.persistence.storageClassName is immutable")
    if old.name != new.name:
        raise AdmissionDenied("metadata.name is immutable")


def validate_immutable_terminals(
    old: Optional[HermesInstance], updated: HermesInstance
) -> List[FieldError]:
    """Check the restore and migration one-shot latches; old is None on create."""
    errors: List[FieldError] = []
    if old is None:
        return errors
    restored = old.status.restored_from
    if restored and restored == old.spec.restore_from and old.spec.restore_from != updated.spec.restore_from:
        errors.append(FieldError(
            path="spec.restoreFrom",
            kind="Forbidden",
            detail=(
                "spec.restoreFrom is immutable after status.restoredFrom is set "
                f'(current: "{restored}"). This is intentional to prevent accidental '
                "re-restore on restart."
            ),
        ))
    if old.status.migration.completed and old.spec.migration != updated.spec.migration:
        errors.append(FieldError(
            path="spec.migration.fromOpenClaw",
            kind="Forbidden",
            detail=(
                "spec.migration.fromOpenClaw is immutable after "
                "status.migration.completed is true (one-shot migration)."
            ),
        ))
    return errors


def validate_restore_migration_mutual_exclusion(inst: HermesInstance) -> List[FieldError]:
    """Reject setting both restoreFrom and migration.fromOpenClaw."""
    if inst.spec.restore_from and inst.spec.migration.from_openclaw is not None:
        return [FieldError(
            path="spec",
            value="restoreFrom + migration.fromOpenClaw",
            detail=(
                "set exactly one of spec.restoreFrom or spec.migration.fromOpenClaw: "
                "the combined order of operations is ambiguous (which source wins?). "
                "To both restore and migrate, do them as two separate instances."
            ),
        )]
    return []


def validate_migration_source_exactly_one(inst: HermesInstance) -> List[FieldError]:
    """Require exactly one of openclawInstanceRef or backupRef as migration source."""
    fc = inst.spec.migration.from_openclaw
    if fc is None:
        return []
    ref_set = fc.source.openclaw_instance_ref is not None
    backup_set = fc.source.backup_ref is not None
    if ref_set == backup_set:
        return [FieldError(
            path="spec.migration.fromOpenClaw.source",
            value={"openclawInstanceRef": ref_set, "backupRef": backup_set},
            detail="set exactly one of source.openclawInstanceRef or source.backupRef",
        )]
    return []