"""
Convolution workload definition for the simple mapper.
"""

from dataclasses import dataclass
from typing import Sequence

from simple_mapper.utils import product


DIM_NAMES = ["R", "S", "P", "Q", "C", "K", "N"]
NUM_DIMS = len(DIM_NAMES)

DATATYPE_NAMES = ["Inputs", "Weights", "Outputs"]
NUM_DATATYPES = len(DATATYPE_NAMES)

# O[j][t] = 1 if dimension j indexes datatype t
#   t:  Inputs, Weights, Outputs    j:
RELEVANCY = [
    [1, 1, 0],  # 0: R
    [1, 1, 0],  # 1: S
    [1, 0, 1],  # 2: P
    [1, 0, 1],  # 3: Q
    [1, 1, 0],  # 4: C
    [0, 1, 1],  # 5: K
    [1, 0, 1],  # 6: N
]


def dim_index(name: str) -> int:
    """Map a dimension letter to its index."""
    try:
        return DIM_NAMES.index(name.upper())
    except ValueError:
        raise ValueError(f"Unknown problem dimension: {name!r}") from None


def datatype_index(name: str) -> int:
    """Map a datatype name (Inputs/Weights/Outputs, any case, singular ok) to its index."""
    key = name.strip().lower().rstrip("s")
    for t, dt_name in enumerate(DATATYPE_NAMES):
        if dt_name.lower().rstrip("s") == key:
            return t
    raise ValueError(f"Unknown datatype: {name!r}")


@dataclass
class Workload:
    """
    Convolution workload definition.

    7 dimensions for standard CNN conv2d:
    - R: Kernel width
    - S: Kernel height
    - P: Output width
    - Q: Output height
    - C: Input channels
    - K: Output channels (filters)
    - N: Batch size

    Attributes:
        name: Optional name for the workload
        R, S, P, Q, C, K, N: Problem dimensions
        stride: (width_stride, height_stride)
        dilation: (width_dilation, height_dilation)
    """

    name: str = "conv_workload"
    R: int = 3
    S: int = 3
    P: int = 56
    Q: int = 56
    C: int = 64
    K: int = 64
    N: int = 1
    stride: tuple[int, int] = (1, 1)
    dilation: tuple[int, int] = (1, 1)

    def __post_init__(self):
        self.bounds = [self.R, self.S, self.P, self.Q, self.C, self.K, self.N]
        for name, bound in zip(DIM_NAMES, self.bounds):
            _check_positive(name, bound)
        for name, value in zip(("Wstride", "Hstride"), self.stride):
            _check_positive(name, value)
        for name, value in zip(("Wdilation", "Hdilation"), self.dilation):
            _check_positive(name, value)

        self.maccs = product(self.bounds)

    def is_relevant(self, dim: int, datatype: int) -> bool:
        """Check if a dimension indexes a datatype."""
        return RELEVANCY[dim][datatype] == 1

    def data_space_size(self, datatype: int, extents: Sequence[int]) -> int:
        """
        Size of the data space of a datatype touched by a tile.

        Args:
            datatype: 0 = Inputs, 1 = Weights, 2 = Outputs
            extents: Per-dimension tile extents (R, S, P, Q, C, K, N order)
        """
        R, S, P, Q, C, K, N = extents
        if datatype == 0:
            # W_in = Wstride * (P - 1) + Wdilation * (R - 1) + 1
            w_in = self.stride[0] * (P - 1) + self.dilation[0] * (R - 1) + 1
            h_in = self.stride[1] * (Q - 1) + self.dilation[1] * (S - 1) + 1
            return N * C * h_in * w_in
        if datatype == 1:
            return K * C * R * S
        if datatype == 2:
            return N * K * P * Q
        raise ValueError(f"Unknown datatype index: {datatype}")

    @classmethod
    def from_dict(cls, config: dict, name: str = "workload") -> "Workload":
        """
        Create Workload from a dictionary.

        Accepts either the bare problem mapping, a mapping with a 'problem'
        key, or either of those with the dimensions under 'instance'.
        """
        if not isinstance(config, dict):
            raise ValueError(f"'problem' must be a mapping, got {config!r}")
        prob = config.get("problem", config) or {}
        if isinstance(prob, dict) and "instance" in prob:
            prob = prob["instance"] or {}
        if not isinstance(prob, dict):
            raise ValueError(f"Problem dimensions must be a mapping, got {prob!r}")

        return cls(
            name=config.get("name", prob.get("name", name)),
            R=prob.get("R", 1),
            S=prob.get("S", 1),
            P=prob.get("P", 1),
            Q=prob.get("Q", 1),
            C=prob.get("C", 1),
            K=prob.get("K", 1),
            N=prob.get("N", 1),
            stride=(prob.get("Wstride", 1), prob.get("Hstride", 1)),
            dilation=(prob.get("Wdilation", 1), prob.get("Hdilation", 1)),
        )

    def summary(self) -> str:
        dims = ", ".join(f"{n}={b}" for n, b in zip(DIM_NAMES, self.bounds))
        lines = [
            f"Workload: {self.name}",
            f"  Dimensions: {dims}",
            f"  Stride: {self.stride}, Dilation: {self.dilation}",
            f"  MACCs: {self.maccs:,}",
        ]
        return "\n".join(lines)


def _check_positive(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"'{name}' must be a positive int, got {value!r}")
