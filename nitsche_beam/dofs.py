from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class DofMap:
    """Global dof numbering for several independently numbered meshes.

    Layout: [x of domain 0][x of domain 1]...[y of domain 0][y of domain 1]...
    The x and y dofs of a node differ by `num_nodes`.
    """
    node_counts: tuple[int, ...]

    @classmethod
    def for_meshes(cls, *meshes) -> "DofMap":
        return cls(tuple(int(m.num_nodes) for m in meshes))

    @property
    def num_nodes(self) -> int:
        return int(sum(self.node_counts))

    @property
    def num_dofs(self) -> int:
        return 2 * self.num_nodes

    def node_offset(self, domain: int) -> int:
        return int(sum(self.node_counts[:domain]))

    def global_nodes(self, domain: int, nodes) -> np.ndarray:
        nodes = np.asarray(nodes, dtype=int)
        if nodes.size and (nodes.min() < 0 or nodes.max() >= self.node_counts[domain]):
            raise IndexError(f"node id out of range for domain {domain}")
        return nodes + self.node_offset(domain)

    def x_dofs(self, domain: int, nodes) -> np.ndarray:
        return self.global_nodes(domain, nodes)

    def y_dofs(self, domain: int, nodes) -> np.ndarray:
        return self.global_nodes(domain, nodes) + self.num_nodes

    def element_dofs(self, domain: int, element_nodes) -> np.ndarray:
        """Scatter vector [x dofs..., y dofs...] matching the B-matrix column order."""
        g = self.global_nodes(domain, element_nodes)
        return np.concatenate([g, g + self.num_nodes]).astype(int)

    def split(self, U: np.ndarray, domain: int) -> tuple[np.ndarray, np.ndarray]:
        """(ux, uy) nodal arrays of one domain."""
        n0 = self.node_offset(domain)
        n1 = n0 + self.node_counts[domain]
        return U[n0:n1], U[self.num_nodes + n0:self.num_nodes + n1]
