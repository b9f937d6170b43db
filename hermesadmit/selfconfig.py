"""Admission validation for HermesSelfConfig resources."""

from __future__ import annotations

import json
from typing import Any, List

from hermesadmit.model import AdmissionDenied, HermesInstance, HermesSelfConfig
from hermesadmit.store import NotFoundError

MULTIPLE_MUTATIONS_WARNING = (
    "this HermesSelfConfig requests multiple mutations; "
    "consider one mutation per resource for atomic audit trails"
)


def _require(obj: Any) -> HermesSelfConfig:
    if not isinstance(obj, HermesSelfConfig):
        raise TypeError(f"expected HermesSelfConfig, got {type(obj).__name__}")
    return obj


class SelfConfigValidator:
    """Validates HermesSelfConfig creates and updates; without a store the parent lookup is skipped."""

    def __init__(self, store: Any = None) -> None:
        self.store = store

    def validate_create(self, obj: Any) -> List[str]:
        return self._validate(obj)

    def validate_update(self, old: Any, new: Any) -> List[str]:
        return self._validate(new)

    def validate_delete(self, obj: Any) -> List[str]:
        _require(obj)
        return []

    def _validate(self, obj: Any) -> List[str]:
        sc = _require(obj)
        spec = sc.spec
        if not spec.instance_ref:
            raise AdmissionDenied("spec.instanceRef is required")

        if self.store is not None:
            try:
                parent = self.store.get(HermesInstance, spec.instance_ref, sc.namespace)
            except NotFoundError as err:
                raise AdmissionDenied(
                    f'spec.instanceRef "{spec.instance_ref}": no HermesInstance with that '
                    f'name in namespace "{sc.namespace}"'
                ) from err
            except Exception as err:
                raise AdmissionDenied(f"loading parent instance: {err}") from err
            if spec.add_profile_snapshot is not None and not parent.spec.profile_store.honcho.enabled:
                raise AdmissionDenied(
                    "spec.addProfileSnapshot requires parent .spec.profileStore.honcho.enabled=true"
                )

        has_patch = bool(spec.patch_config)
        if has_patch:
            try:
                parsed = json.loads(spec.patch_config)
                if parsed is not None and not isinstance(parsed, dict):
                    raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
            except ValueError as err:
                raise AdmissionDenied(
                    f"spec.patchConfig is not a valid JSON merge patch: {err}"
                ) from err

        mutations = sum([
            bool(spec.add_skills),
            has_patch,
            bool(spec.add_env_vars),
            bool(spec.add_workspace_files),
            spec.add_profile_snapshot is not None,
        ])
        return [MULTIPLE_MUTATIONS_WARNING] if mutations > 1 else []