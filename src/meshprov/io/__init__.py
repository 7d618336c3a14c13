"""
meshprov.io — Network membership, settings and persistence for Provisioners.

## Responsibilities
- Admit Provisioners into a network after checking their ranges for conflicts.
- Load/save networks as JSON documents, merging stored ranges on load.
- Resolve runtime settings from environment, TOML and defaults.

## Public API
- MeshSettings — Conflict/allocation policy and output formatting.
- ProvisionerNetwork — Admission, allocation routing, load/save.
- configure_logging — Root logging setup for applications embedding meshprov.

## Import DAG discipline
- Depends on stdlib and meshprov.core.*; meshprov.core never imports meshprov.io.

## Examples
```python
from meshprov.core import AddressRange, Provisioner
from meshprov.io import MeshSettings, ProvisionerNetwork

net = ProvisionerNetwork(MeshSettings.load())  # doctest: +SKIP
net.add(Provisioner("phone"))  # doctest: +SKIP
net.save("network.json")  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import MeshSettings
from .logging_utils import configure_logging
from .network import ProvisionerNetwork

__all__ = [
    "MeshSettings",
    "ProvisionerNetwork",
    "configure_logging",
]
