# hermesadmit

Admission-time rules for Hermes agent resources, as a plain Python library:
validators for `HermesInstance`, `HermesClusterDefaults` and
`HermesSelfConfig` objects, a defaulter that fills unset instance fields from
the cluster-wide defaults singleton, and a builder for the workspace
ConfigMap that seeds an agent's files and directories.

It has no dependencies outside the standard library.

## The object model

`hermesadmit.model` holds dataclasses for every resource the rules look at:
`HermesInstance` (with `HermesInstanceSpec` and `HermesInstanceStatus`),
`HermesClusterDefaults`, `HermesSelfConfig`, `Secret` and the nested specs
(`ImageSpec`, `StorageSpec`, `PersistenceSpec`, `GatewaysSpec`,
`MigrationSpec`, `SelfConfigureSpec` and so on). Unset optional fields are
`None`; `HermesInstance.copy()` returns an independent deep copy.
`SelfConfigAction` enumerates the self-configuration actions
(`skills`, `config`, `envVars`, `workspaceFiles`, `profiles`).

A rule that rejects an object raises `AdmissionDenied`. Its `message` states
the reason, its `warnings` list carries any warnings gathered before the
rejection, and for field-level rejections its `errors` list holds
`FieldError` objects (path, kind, detail, value). Passing an object of the
wrong type to a validator raises `TypeError`.

`hermesadmit.store.ObjectStore` is an in-memory lookup of objects keyed by
type name, namespace and name. `ObjectStore(*objects)` or `add(obj)` stores a
copy of each object; `get(kind, name, namespace="")` takes a class or a type
name, returns a copy, and raises `NotFoundError` for anything missing.

## Validating instances

```python
from hermesadmit.model import (
    HermesInstance, HermesInstanceSpec, ImageSpec, PersistenceSpec, StorageSpec,
)
from hermesadmit.instance import InstanceValidator

inst = HermesInstance(
    name="demo",
    namespace="agents",
    spec=HermesInstanceSpec(
        image=ImageSpec(repository="registry.example.com/hermes-agent"),
        storage=StorageSpec(persistence=PersistenceSpec(size="1Gi")),
    ),
)
warnings = InstanceValidator().validate_create(inst)
```

`InstanceValidator(store=None)` offers `validate_create(obj)`,
`validate_update(old, new)` and `validate_delete(obj)`; each returns a list of
warning strings and raises `AdmissionDenied` on a rule breach. The rules:

- `spec.image.repository` and `spec.storage.persistence.size` are required;
- with self-configuration enabled, `protectedKeys` and `allowedActions` must
  be non-empty and every action must be a known one;
- a PodDisruptionBudget may not set both `minAvailable` and `maxUnavailable`;
  an autoscaler's `minReplicas` may not exceed `maxReplicas`;
- `restoreFrom` and `migration.fromOpenClaw` are mutually exclusive, and a
  migration source names exactly one of an instance reference or a backup;
- on update, a set `storageClassName` and the name are immutable, as are
  `restoreFrom` once `status.restoredFrom` latched it and the migration spec
  once `status.migration.completed` is true;
- an enabled gateway (Telegram, Discord, Slack, WhatsApp, Signal) or Honcho
  profile store must reference its required secrets.

Warnings, not rejections, are returned when `config.raw` and
`config.configMapRef` are both set without a merge mode, when auto-update is
enabled with the tag `latest`, and, given a store, when a referenced Secret
or Secret key is missing or the backup S3 credentials Secret cannot be found.

The individual rules are importable on their own: `validate_common(inst)`
returns warnings, `validate_immutable(old, new)` raises, and
`validate_immutable_terminals(old, updated)`,
`validate_restore_migration_mutual_exclusion(inst)` and
`validate_migration_source_exactly_one(inst)` return lists of `FieldError`.

## Cluster defaults

```python
from hermesadmit.defaults import InstanceDefaulter
from hermesadmit.model import HermesClusterDefaults
from hermesadmit.store import ObjectStore

store = ObjectStore(HermesClusterDefaults(name="cluster"))
InstanceDefaulter(store).default(inst)
```

`InstanceDefaulter.default` looks up the `HermesClusterDefaults` named
`cluster` and calls `apply_cluster_defaults(inst, hcd)`, which fills unset
fields in place and never overwrites an explicit value. A missing defaults
object is not an error; any other lookup failure raises `AdmissionDenied`.
`ClusterDefaultsValidator` accepts only the singleton named `cluster` on
create and update.

## Self-configuration requests

`SelfConfigValidator(store=None)` requires `spec.instanceRef`. Given a store,
it checks that the parent `HermesInstance` exists in the same namespace and
refuses a profile snapshot unless the parent has Honcho enabled. A non-empty
`patchConfig` (bytes or str) must parse as a JSON object. A request carrying
more than one mutation is accepted with a warning.

## Workspace ConfigMap

```python
from hermesadmit.workspace import build_workspace_configmap, encode_workspace_path

encode_workspace_path("notes/finance/2026.md")   # "notes__finance__2026.md"
cm = build_workspace_configmap(inst)
cm.name                                           # "demo-workspace"
```

Initial files are stored under path-encoded keys (`decode_workspace_path`
reverses the encoding); initial directories are sorted and joined, one per
line, under the reserved key `INITIAL_DIRS_KEY` (`__hermes_initial_dirs__`).
The ConfigMap carries the labels from `labels_for_workspace(inst)`.

## What this package does not do

It is a library only. It serves no admission webhook endpoint, talks to no
Kubernetes API server and has no command-line interface; lookups go through
the in-memory `ObjectStore`, and building the ConfigMap does not create it
anywhere.