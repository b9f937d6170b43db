"""Data model for Hermes custom resources and admission results."""

from __future__ import annotations

import copy as _copy
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

IntOrString = Union[int, str]


class AdmissionDenied(Exception):
    """Raised when an admission request is rejected.

    Warnings gathered before the rejection travel with the exception.
    """

    def __init__(
        self,
        message: str,
        warnings: Optional[Sequence[str]] = None,
        errors: Optional[Sequence["FieldError"]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.warnings: List[str] = list(warnings or [])
        self.errors: List[FieldError] = list(errors or [])


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value)
    try:
        return json.dumps(value, sort_keys=True)
    except TypeError:
        return repr(value)


@dataclass
class FieldError:
    """A validation error attached to a field path."""

    path: str
    detail: str
    kind: str = "Invalid"
    value: Any = None

    def __str__(self) -> str:
        if self.kind == "Invalid":
            return f"{self.path}: Invalid value: {_format_value(self.value)}: {self.detail}"
        return f"{self.path}: {self.kind}: {self.detail}"


class SelfConfigAction(str, Enum):
    """Mutation kinds a self-configuring instance may request."""

    SKILLS = "skills"
    CONFIG = "config"
    ENV_VARS = "envVars"
    WORKSPACE_FILES = "workspaceFiles"
    PROFILES = "profiles"

    def __str__(self) -> str:
        return self.value


@dataclass
class SecretKeySelector:
    name: str
    key: str = ""


@dataclass
class Secret:
    name: str
    namespace: str = ""
    data: Dict[str, bytes] = field(default_factory=dict)


@dataclass
class ImageSpec:
    repository: str = ""
    tag: str = ""
    pull_policy: str = ""


@dataclass
class PersistenceSpec:
    enabled: Optional[bool] = None
    size: str = ""
    storage_class_name: Optional[str] = None


@dataclass
class StorageSpec:
    persistence: PersistenceSpec = field(default_factory=PersistenceSpec)


@dataclass
class ResourcesSpec:
    requests: Optional[Dict[str, str]] = None
    limits: Optional[Dict[str, str]] = None


@dataclass
class CABundleSpec:
    config_map_name: str = ""
    secret_name: str = ""
    key: str = ""


@dataclass
class NetworkPolicySpec:
    enabled: Optional[bool] = None
    allow_dns: Optional[bool] = None


@dataclass
class RBACSpec:
    annotations: Optional[Dict[str, str]] = None


@dataclass
class SecuritySpec:
    rbac: RBACSpec = field(default_factory=RBACSpec)
    network_policy: NetworkPolicySpec = field(default_factory=NetworkPolicySpec)
    ca_bundle: CABundleSpec = field(default_factory=CABundleSpec)


@dataclass
class ServiceSpec:
    type: str = ""


@dataclass
class NetworkingSpec:
    service: ServiceSpec = field(default_factory=ServiceSpec)


@dataclass
class MetricsSpec:
    enabled: Optional[bool] = None
    port: int = 0
    secure: Optional[bool] = None


@dataclass
class LoggingSpec:
    format: str = ""
    level: str = ""


@dataclass
class ObservabilitySpec:
    metrics: MetricsSpec = field(default_factory=MetricsSpec)
    service_monitor_enabled: Optional[bool] = None
    prometheus_rule_enabled: Optional[bool] = None
    logging: LoggingSpec = field(default_factory=LoggingSpec)


@dataclass
class ConfigSpec:
    raw: Any = None
    config_map_ref: Optional[str] = None
    merge_mode: str = ""


@dataclass
class SelfConfigureSpec:
    enabled: Optional[bool] = None
    protected_keys: List[str] = field(default_factory=list)
    allowed_actions: List[Union[SelfConfigAction, str]] = field(default_factory=list)


@dataclass
class PDBSpec:
    enabled: Optional[bool] = None
    min_available: Optional[IntOrString] = None
    max_unavailable: Optional[IntOrString] = None


@dataclass
class HPASpec:
    enabled: Optional[bool] = None
    min_replicas: Optional[int] = None
    max_replicas: Optional[int] = None


@dataclass
class AvailabilitySpec:
    pod_disruption_budget: PDBSpec = field(default_factory=PDBSpec)
    horizontal_pod_autoscaler: HPASpec = field(default_factory=HPASpec)


@dataclass
class GatewaySpec:
    """One messaging gateway; each gateway uses the refs that apply to it."""

    enabled: Optional[bool] = None
    bot_token_secret_ref: Optional[SecretKeySelector] = None
    app_token_secret_ref: Optional[SecretKeySelector] = None
    signing_secret_ref: Optional[SecretKeySelector] = None
    provider_secret_ref: Optional[SecretKeySelector] = None
    phone_number_secret_ref: Optional[SecretKeySelector] = None
    auth_token_secret_ref: Optional[SecretKeySelector] = None


@dataclass
class GatewaysSpec:
    telegram: GatewaySpec = field(default_factory=GatewaySpec)
    discord: GatewaySpec = field(default_factory=GatewaySpec)
    slack: GatewaySpec = field(default_factory=GatewaySpec)
    whatsapp: GatewaySpec = field(default_factory=GatewaySpec)
    signal: GatewaySpec = field(default_factory=GatewaySpec)


@dataclass
class HonchoSpec:
    enabled: Optional[bool] = None
    api_key_secret_ref: Optional[SecretKeySelector] = None


@dataclass
class ProfileStoreSpec:
    honcho: HonchoSpec = field(default_factory=HonchoSpec)


@dataclass
class NamespacedObjectReference:
    name: str
    namespace: str = ""


@dataclass
class MigrationBackupS3:
    bucket: str = ""
    key: str = ""
    endpoint: str = ""
    region: str = ""
    credentials_secret_name: str = ""


@dataclass
class MigrationBackupRef:
    s3: MigrationBackupS3 = field(default_factory=MigrationBackupS3)


@dataclass
class MigrationSource:
    openclaw_instance_ref: Optional[NamespacedObjectReference] = None
    backup_ref: Optional[MigrationBackupRef] = None


@dataclass
class MigrationFromOpenClawSpec:
    mode: str = ""
    source: MigrationSource = field(default_factory=MigrationSource)


@dataclass
class MigrationSpec:
    from_openclaw: Optional[MigrationFromOpenClawSpec] = None


@dataclass
class S3BackupSpec:
    bucket: str = ""
    endpoint: str = ""
    region: str = ""
    path_prefix: str = ""
    credentials_secret_name: str = ""


@dataclass
class BackupSpec:
    s3: Optional[S3BackupSpec] = None
    schedule: str = ""
    on_delete: bool = False


@dataclass
class AutoUpdateSpec:
    enabled: bool = False


@dataclass
class WorkspaceFile:
    path: str
    content: str = ""


@dataclass
class WorkspaceSpec:
    initial_files: List[WorkspaceFile] = field(default_factory=list)
    initial_dirs: List[str] = field(default_factory=list)


@dataclass
class HermesInstanceSpec:
    image: ImageSpec = field(default_factory=ImageSpec)
    storage: StorageSpec = field(default_factory=StorageSpec)
    resources: ResourcesSpec = field(default_factory=ResourcesSpec)
    security: SecuritySpec = field(default_factory=SecuritySpec)
    networking: NetworkingSpec = field(default_factory=NetworkingSpec)
    observability: ObservabilitySpec = field(default_factory=ObservabilitySpec)
    config: ConfigSpec = field(default_factory=ConfigSpec)
    self_configure: SelfConfigureSpec = field(default_factory=SelfConfigureSpec)
    availability: AvailabilitySpec = field(default_factory=AvailabilitySpec)
    gateways: GatewaysSpec = field(default_factory=GatewaysSpec)
    profile_store: ProfileStoreSpec = field(default_factory=ProfileStoreSpec)
    migration: MigrationSpec = field(default_factory=MigrationSpec)
    backup: BackupSpec = field(default_factory=BackupSpec)
    auto_update: AutoUpdateSpec = field(default_factory=AutoUpdateSpec)
    workspace: WorkspaceSpec = field(default_factory=WorkspaceSpec)
    restore_from: str = ""


@dataclass
class MigrationStatus:
    completed: bool = False


@dataclass
class HermesInstanceStatus:
    restored_from: str = ""
    migration: MigrationStatus = field(default_factory=MigrationStatus)


@dataclass
class HermesInstance:
    name: str
    namespace: str = ""
    spec: HermesInstanceSpec = field(default_factory=HermesInstanceSpec)
    status: HermesInstanceStatus = field(default_factory=HermesInstanceStatus)

    def copy(self) -> "HermesInstance":
        """Return an independent deep copy."""
        return _copy.deepcopy(self)


@dataclass
class ClusterSecuritySpec:
    service_account_annotations: Optional[Dict[str, str]] = None
    network_policy: NetworkPolicySpec = field(default_factory=NetworkPolicySpec)
    ca_bundle: CABundleSpec = field(default_factory=CABundleSpec)


@dataclass
class HermesClusterDefaultsSpec:
    image: ImageSpec = field(default_factory=ImageSpec)
    storage: StorageSpec = field(default_factory=StorageSpec)
    resources: ResourcesSpec = field(default_factory=ResourcesSpec)
    security: ClusterSecuritySpec = field(default_factory=ClusterSecuritySpec)
    networking: NetworkingSpec = field(default_factory=NetworkingSpec)
    observability: ObservabilitySpec = field(default_factory=ObservabilitySpec)


@dataclass
class HermesClusterDefaults:
    name: str
    spec: HermesClusterDefaultsSpec = field(default_factory=HermesClusterDefaultsSpec)

    @property
    def namespace(self) -> str:
        """Cluster-scoped: always the empty namespace."""
        return ""


@dataclass
class SelfConfigSkill:
    source: str


@dataclass
class SelfConfigEnvVar:
    name: str
    value: str = ""


@dataclass
class SelfConfigProfileSnapshot:
    profile_id: str
    data: str = ""


@dataclass
class HermesSelfConfigSpec:
    instance_ref: str = ""
    add_skills: List[SelfConfigSkill] = field(default_factory=list)
    patch_config: Optional[Union[bytes, str]] = None
    add_env_vars: List[SelfConfigEnvVar] = field(default_factory=list)
    add_workspace_files: List[WorkspaceFile] = field(default_factory=list)
    add_profile_snapshot: Optional[SelfConfigProfileSnapshot] = None


@dataclass
class HermesSelfConfig:
    name: str
    namespace: str = ""
    spec: HermesSelfConfigSpec = field(default_factory=HermesSelfConfigSpec)