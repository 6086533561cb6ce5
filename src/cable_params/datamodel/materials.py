"""Electromagnetic material properties and a named library of common materials."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, Mapping

from pydantic import ConfigDict, Field

from cable_params.datamodel.base import CoreModel, core_type
from cable_params.errors import InvalidArgumentError
from cable_params.numeric.resolve import Scalar
from cable_params.validation.rules import Finite, Nonneg, Positive
from cable_params.validation.traits import TraitSpec, register

logger = logging.getLogger(__name__)


class Material(CoreModel):
    """Material properties consumed by every cable part."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    rho: Scalar = Field(description="Electrical resistivity at T0 [Ω·m]")
    eps_r: Scalar = Field(description="Relative permittivity")
    mu_r: Scalar = Field(description="Relative permeability")
    T0: Scalar = Field(description="Reference temperature [°C]")
    alpha: Scalar = Field(description="Temperature coefficient of resistivity [1/°C]")

    @classmethod
    def build(cls, rho, eps_r, mu_r, T0, alpha) -> Material:
        core_type("Material", rho=rho, eps_r=eps_r, mu_r=mu_r, T0=T0, alpha=alpha)
        return cls(rho=rho, eps_r=eps_r, mu_r=mu_r, T0=T0, alpha=alpha)


register(
    Material,
    TraitSpec(
        required=("rho", "eps_r", "mu_r", "T0", "alpha"),
        extra_rules=(
            Positive("rho"),
            Nonneg("eps_r"),
            Positive("mu_r"),
            Finite("T0"),
            Finite("alpha"),
        ),
        description="Electromagnetic material properties",
    ),
)


# name -> (rho, eps_r, mu_r, T0, alpha)
DEFAULT_MATERIALS = {
    "air": (float("inf"), 1.0, 1.0, 20.0, 0.0),
    "pec": (sys.float_info.epsilon, 1.0, 1.0, 20.0, 0.0),
    "copper": (1.7241e-8, 1.0, 0.999994, 20.0, 0.00393),
    "aluminum": (2.8264e-8, 1.0, 1.000022, 20.0, 0.00429),
    "xlpe": (1.97e14, 2.5, 1.0, 20.0, 0.0),
    "pe": (1.97e14, 2.3, 1.0, 20.0, 0.0),
    "semicon1": (1000.0, 1000.0, 1.0, 20.0, 0.0),
    "semicon2": (500.0, 1000.0, 1.0, 20.0, 0.0),
    "polyacrylate": (5.3e3, 32.3, 1.0, 20.0, 0.0),
}


class MaterialsLibrary(Mapping):
    """Named collection of :class:`Material` objects."""

    def __init__(self, add_defaults: bool = True):
        self._materials: dict[str, Material] = {}
        if add_defaults:
            for name, values in DEFAULT_MATERIALS.items():
                self.add(name, Material.create(*values))

    def __getitem__(self, name: str) -> Material:
        try:
            return self._materials[name]
        except KeyError:
            raise KeyError(f"Material '{name}' not found in library") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._materials)

    def __len__(self) -> int:
        return len(self._materials)

    def add(self, name: str, material: Material) -> None:
        if not isinstance(material, Material):
            raise InvalidArgumentError(
                "MaterialsLibrary", f"expected a Material, got {type(material).__name__}"
            )
        if name in self._materials:
            raise InvalidArgumentError(
                "MaterialsLibrary", f"material '{name}' already exists in the library"
            )
        self._materials[name] = material
        logger.debug("Added material '%s'", name)

    def remove(self, name: str) -> None:
        if name not in self._materials:
            raise KeyError(f"Material '{name}' not found in library")
        del self._materials[name]
