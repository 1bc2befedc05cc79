"""mnastamp: Modified Nodal Analysis assembly and solve, built on JAX."""
import jax

# Enable 64-bit precision (Critical for Circuit Simulation)
jax.config.update("jax_enable_x64", True)

from mnastamp.errors import (  # noqa: E402
    InvalidStateError,
    MnaError,
    SingularSystemError,
    UnsupportedAnalysisError,
    UnsupportedElementError,
)
from mnastamp.netlist import Element, ElementType, Netlist, element_type  # noqa: E402
from mnastamp.registry import BranchId, NodeRegistry  # noqa: E402
from mnastamp.system import Analysis, CircuitSystem  # noqa: E402
from mnastamp.analysis import ac_sweep, analyze_circuit  # noqa: E402

__all__ = [
    "Analysis",
    "BranchId",
    "CircuitSystem",
    "Element",
    "ElementType",
    "InvalidStateError",
    "MnaError",
    "Netlist",
    "NodeRegistry",
    "SingularSystemError",
    "UnsupportedAnalysisError",
    "UnsupportedElementError",
    "ac_sweep",
    "analyze_circuit",
    "element_type",
]
