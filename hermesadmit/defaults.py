"""Admission handling for HermesClusterDefaults and instance defaulting."""

from __future__ import annotations

import dataclasses
from typing import Any, List

from hermesadmit.model import AdmissionDenied, HermesClusterDefaults, HermesInstance
from hermesadmit.store import NotFoundError

CLUSTER_DEFAULTS_NAME = "cluster"


def _require(obj: Any) -> HermesClusterDefaults:
    if not isinstance(obj, HermesClusterDefaults):
        raise TypeError(f"expected HermesClusterDefaults, got {type(obj).__name__}")
    return obj


class ClusterDefaultsValidator:
    """Enforces that HermesClusterDefaults is the singleton named "cluster"."""

    def validate_create(self, obj: Any) -> List[str]:
        return self._validate(obj)

    def validate_update(self, old: Any, new: Any) -> List[str]:
        return self._validate(new)

    def validate_delete(self, obj: Any) -> List[str]:
        _require(obj)
        return []

    @staticmethod
    def _validate(obj: Any) -> List[str]:
        hcd = _require(obj)
        if hcd.name != CLUSTER_DEFAULTS_NAME:
            raise AdmissionDenied(
                f'HermesClusterDefaults must be the singleton named "cluster" (got "{hcd.name}")'
            )
        return []


class InstanceDefaulter:
    """Fills unset instance fields from the cluster defaults singleton."""

    def __init__(self, store: Any) -> None:
        self.store = store

    def default(self, obj: Any) -> None:
        if not isinstance(obj, HermesInstance):
            raise TypeError(f"expected HermesInstance, got {type(obj).__name__}")
        try:
            hcd = self.store.get(HermesClusterDefaults, CLUSTER_DEFAULTS_NAME)
        except NotFoundError:
            return
        except Exception as err:
            raise AdmissionDenied(f"get HermesClusterDefaults: {err}") from err
        apply_cluster_defaults(obj, hcd)


def apply_cluster_defaults(inst: HermesInstance, hcd: HermesClusterDefaults) -> None:
    """Mutate inst in place, filling unset fields from hcd; explicit values win."""
    spec, dflt = inst.spec, hcd.spec

    image = spec.image
    image.repository = image.repository or dflt.image.repository
    image.tag = image.tag or dflt.image.tag
    image.pull_policy = image.pull_policy or dflt.image.pull_policy

    pers = spec.storage.persistence
    pers.size = pers.size or dflt.storage.persistence.size
    if pers.storage_class_name is None:
        pers.storage_class_name = dflt.storage.persistence.storage_class_name

    if spec.resources.requests is None:
        spec.resources.requests = dflt.resources.requests
    if spec.resources.limits is None:
        spec.resources.limits = dflt.resources.limits

    sec = spec.security
    if sec.rbac.annotations is None:
        sec.rbac.annotations = dflt.security.service_account_annotations
    if sec.network_policy.enabled is None:
        sec.network_policy.enabled = dflt.security.network_policy.enabled
    if sec.network_policy.allow_dns is None:
        sec.network_policy.allow_dns = dflt.security.network_policy.allow_dns
    if not sec.ca_bundle.config_map_name and not sec.ca_bundle.secret_name:
        sec.ca_bundle = dataclasses.replace(dflt.security.ca_bundle)

    spec.networking.service.type = spec.networking.service.type or dflt.networking.service.type

    obs, dobs = spec.observability, dflt.observability
    if obs.metrics.enabled is None:
        obs.metrics.enabled = dobs.metrics.enabled
    if obs.metrics.port == 0:
        obs.metrics.port = dobs.metrics.port
    if obs.metrics.secure is None:
        obs.metrics.secure = dobs.metrics.secure
    if obs.service_monitor_enabled is None:
        obs.service_monitor_enabled = dobs.service_monitor_enabled
    if obs.prometheus_rule_enabled is None:
        obs.prometheus_rule_enabled = dobs.prometheus_rule_enabled
    obs.logging.format = obs.logging.format or dobs.logging.format
    obs.logging.level = obs.logging.level or dobs.logging.level