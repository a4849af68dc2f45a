"""Build artifact loading for contract deployments."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .base import ExecutionError


class ArtifactNotFoundError(ExecutionError):
    """No build artifact exists under the requested name."""
    pass


@dataclass(frozen=True)
class ContractArtifact:
    """ABI and creation bytecode for one contract."""
    name: str
    abi: list
    bytecode: str

    @property
    def deployable(self) -> bool:
        """Interfaces and abstract contracts carry no creation bytecode."""
        return self.bytecode not in ("", "0x")


def parse_artifact(name: str, data: dict[str, Any]) -> ContractArtifact:
    """
    Parse an artifact document.

    Supports the compiler-output layout (compilerOutput.abi,
    compilerOutput.evm.bytecode.object) and the flat layout (abi, bytecode
    as a string or an {object: ...} mapping).
    """
    if "compilerOutput" in data:
        output = data["compilerOutput"]
        abi = output.get("abi", [])
        bytecode = output.get("evm", {}).get("bytecode", {}).get("object", "")
    else:
        abi = data.get("abi", [])
        bytecode = data.get("bytecode", "")
        if isinstance(bytecode, dict):
            bytecode = bytecode.get("object", "")

    if bytecode and not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode

    return ContractArtifact(name=name, abi=abi, bytecode=bytecode or "")


class ArtifactStore:
    """Loads and caches JSON build artifacts from a directory."""

    def __init__(self, artifacts_dir: Union[str, Path]):
        self.artifacts_dir = Path(artifacts_dir)
        self._cache: dict[str, ContractArtifact] = {}

    def get(self, name: str) -> ContractArtifact:
        """Get an artifact by contract name."""
        if name not in self._cache:
            artifact_file = self.artifacts_dir / f"{name}.json"

            if not artifact_file.exists():
                raise ArtifactNotFoundError(f"Artifact not found: {artifact_file}")

            with open(artifact_file) as f:
                data = json.load(f)

            self._cache[name] = parse_artifact(name, data)

        return self._cache[name]

    def __contains__(self, name: str) -> bool:
        return name in self._cache or (self.artifacts_dir / f"{name}.json").exists()
