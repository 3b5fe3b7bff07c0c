"""Problem parameters.

The defaults reproduce the reference cantilever: E=30e6, nu=0.3, L=48, c=3,
tip load P=1000, two 10 x 8 grids meeting at x=24 and a Nitsche penalty of
1e10. Units are whatever the user keeps consistent (psi / in for the defaults).
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import InvalidConfiguration, InvalidMesh

PAIRINGS = ("geometric", "ratio")
BACKENDS = ("dense", "sparse")


@dataclass(frozen=True)
class Material:
    E: float = 30e6
    nu: float = 0.3


@dataclass(frozen=True)
class BeamGeometry:
    length: float = 48.0
    half_height: float = 3.0
    interface_x: float = 24.0

    @property
    def depth(self) -> float:
        return 2.0 * self.half_height


@dataclass(frozen=True)
class Grid:
    nx: int = 10
    ny: int = 8


@dataclass(frozen=True)
class ProblemConfig:
    material: Material = field(default_factory=Material)
    geometry: BeamGeometry = field(default_factory=BeamGeometry)
    domain1: Grid = field(default_factory=Grid)
    domain2: Grid = field(default_factory=Grid)
    load: float = 1000.0
    alpha: float = 1e10
    pairing: str = "geometric"
    backend: str = "dense"
    tolerance: float = 1e-9

    def validate(self) -> "ProblemConfig":
        for name, grid in (("domain1", self.domain1), ("domain2", self.domain2)):
            if grid.nx < 1 or grid.ny < 1:
                raise InvalidMesh("subdivision counts must be >= 1", domain=name, nx=grid.nx, ny=grid.ny)
        if not self.alpha > 0:
            raise InvalidConfiguration("Nitsche penalty must be positive", alpha=self.alpha)
        if self.material.E <= 0:
            raise InvalidConfiguration("Young's modulus must be positive", E=self.material.E)
        if not -1.0 < self.material.nu < 0.5:
            raise InvalidConfiguration("Poisson's ratio must lie in (-1, 0.5)", nu=self.material.nu)
        g = self.geometry
        if g.length <= 0 or g.half_height <= 0:
            raise InvalidConfiguration("beam dimensions must be positive", length=g.length, half_height=g.half_height)
        if not 0.0 < g.interface_x < g.length:
            raise InvalidConfiguration("interface must lie strictly inside the beam",
                                       interface_x=g.interface_x, length=g.length)
        if self.pairing not in PAIRINGS:
            raise InvalidConfiguration(f"pairing must be one of {PAIRINGS}", pairing=self.pairing)
        if self.backend not in BACKENDS:
            raise InvalidConfiguration(f"backend must be one of {BACKENDS}", backend=self.backend)
        if self.tolerance <= 0:
            raise InvalidConfiguration("tolerance must be positive", tolerance=self.tolerance)
        return self

    def with_overrides(self, **kw: Any) -> "ProblemConfig":
        """Copy with flat overrides: alpha, load, pairing, backend, nx1, ny1, nx2, ny2, E, nu."""
        kw = {k: v for k, v in kw.items() if v is not None}
        d1 = replace(self.domain1, **{k[:2]: kw.pop(k) for k in ("nx1", "ny1") if k in kw})
        d2 = replace(self.domain2, **{k[:2]: kw.pop(k) for k in ("nx2", "ny2") if k in kw})
        mat = replace(self.material, **{k: kw.pop(k) for k in ("E", "nu") if k in kw})
        unknown = set(kw) - {"alpha", "load", "pairing", "backend", "tolerance"}
        if unknown:
            raise InvalidConfiguration("unknown override", keys=sorted(unknown))
        return replace(self, domain1=d1, domain2=d2, material=mat, **kw)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ProblemConfig":
        data = dict(data)
        try:
            material = Material(**data.pop("material", {}))
            geometry = BeamGeometry(**data.pop("geometry", {}))
            domain1 = Grid(**data.pop("domain1", {}))
            domain2 = Grid(**data.pop("domain2", {}))
            return cls(material=material, geometry=geometry, domain1=domain1, domain2=domain2, **data)
        except TypeError as e:
            raise InvalidConfiguration(f"bad configuration keys: {e}") from e


def load_config(path: str | Path) -> ProblemConfig:
    """Read a JSON file with the nested layout of `ProblemConfig.to_dict()`."""
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    return ProblemConfig.from_dict(data).validate()


def heuristic_penalty(E: float, nx: int, length: float) -> float:
    """alpha ~ 4 E nx / L. Never applied automatically."""
    return 4.0 * E * nx / length
