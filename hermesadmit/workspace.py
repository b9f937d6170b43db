"""Workspace ConfigMap construction and path key encoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from hermesadmit.model import HermesInstance

# Reserved key holding the newline-separated list of directories to create.
# The "__" prefix cannot be produced by encode_workspace_path for a real file.
INITIAL_DIRS_KEY = "__hermes_initial_dirs__"


@dataclass
class ConfigMap:
    name: str
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, str] = field(default_factory=dict)


def workspace_configmap_name(inst: HermesInstance) -> str:
    """Return the deterministic workspace ConfigMap name."""
    return f"{inst.name}-workspace"


def encode_workspace_path(path: str) -> str:
    """Turn "a/b/c.md" into "a__b__c.md"."""
    return path.replace("/", "__")


def decode_workspace_path(key: str) -> str:
    """Inverse of encode_workspace_path."""
    return key.replace("__", "/")


def labels_for_workspace(inst: HermesInstance) -> Dict[str, str]:
    """Labels identifying the resources that belong to an instance."""
    return {
        "app.kubernetes.io/name": "hermes-agent",
        "app.kubernetes.io/instance": inst.name,
    }


def build_workspace_configmap(inst: HermesInstance) -> ConfigMap:
    """Build the ConfigMap holding initial workspace files and directories."""
    workspace = inst.spec.workspace
    data = {encode_workspace_path(f.path): f.content for f in workspace.initial_files}
    if workspace.initial_dirs:
        data[INITIAL_DIRS_KEY] = "\n".join(sorted(workspace.initial_dirs)) + "\n"
    return ConfigMap(
        name=workspace_configmap_name(inst),
        namespace=inst.namespace,
        labels=labels_for_workspace(inst),
        data=data,
    )