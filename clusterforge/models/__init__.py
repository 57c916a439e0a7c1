"""Clusterforge data models: all Pydantic v2, all frozen (immutable)."""

from clusterforge.models.agent import AgentConfigDocument, HostConfig, Interface, RootDeviceHints
from clusterforge.models.ignition import (
    IgnitionConfig,
    IgnitionFile,
    SystemdUnit,
    decode_data_url,
    encode_data_url,
)
from clusterforge.models.install_config import (
    AROSettings,
    ClusterInstallConfig,
    HyperthreadingMode,
    MachinePool,
    Platform,
)
from clusterforge.models.machineconfig import MachineConfig
from clusterforge.models.output import (
    FileDigest,
    OutputManifest,
    ResolutionRecord,
    ResolutionSource,
)
from clusterforge.models.validation import AggregateValidationError, FieldError

__all__ = [
    # install config
    "AROSettings",
    "ClusterInstallConfig",
    "HyperthreadingMode",
    "MachinePool",
    "Platform",
    # agent config
    "AgentConfigDocument",
    "HostConfig",
    "Interface",
    "RootDeviceHints",
    # ignition / machine config
    "IgnitionConfig",
    "IgnitionFile",
    "SystemdUnit",
    "MachineConfig",
    "decode_data_url",
    "encode_data_url",
    # output
    "FileDigest",
    "OutputManifest",
    "ResolutionRecord",
    "ResolutionSource",
    # validation
    "AggregateValidationError",
    "FieldError",
]
