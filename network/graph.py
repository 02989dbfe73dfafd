# network/graph.py
import sys

from network.builder import GraphBuilder
from network.exceptions import ConfigurationError, EvaluationError
from utils.logger import get_logger

logger = get_logger("graph")


class Graph:
    """
    Owns every Node and LayerStack built from one descriptor list.

    The structure is fixed once __init__ returns; compute() never caches, so
    each call re-runs the whole chain below the requested node.
    """

    def __init__(self, nodes, layers):
        builder = GraphBuilder(nodes, layers)
        try:
            built = builder.build()
        except RecursionError as e:
            logger.error("Dependency chain too deep to build (%d nodes)", len(builder.node_configs))
            raise ConfigurationError(
                f"dependency chain too deep to build ({len(builder.node_configs)} nodes), "
                f"exceeds the recursion limit of {sys.getrecursionlimit()}") from e
        self._nodes = tuple(built)
        self._stacks = tuple(builder.stacks)
        logger.info("Graph ready: %d nodes, %d stacks", len(self._nodes), len(self._stacks))

    @classmethod
    def from_config(cls, config):
        return cls(config.nodes, config.layers)

    @property
    def nodes(self):
        return self._nodes

    @property
    def stacks(self):
        return self._stacks

    def __len__(self):
        return len(self._nodes)

    def compute(self, source, node_number=None):
        """
        Output of node `node_number`, or of the terminal (last) node when
        no number is given.
        """
        if node_number is None:
            if not self._nodes:
                raise EvaluationError("Graph: no nodes to compute")
            node_number = len(self._nodes) - 1
        elif node_number < 0 or node_number >= len(self._nodes):
            raise EvaluationError(f"Graph: no node at {node_number}")
        logger.debug("Computing node %d", node_number)
        try:
            return self._nodes[node_number].compute(source)
        except RecursionError as e:
            logger.error("Dependency chain below node %d too deep to evaluate", node_number)
            raise EvaluationError(
                f"Graph: dependency chain below node {node_number} too deep to evaluate") from e

    def __repr__(self):
        lines = ["Graph:"]
        for i, node in enumerate(self._nodes):
            lines.append(f"  Node {i}: {node!r}")
        return "\n".join(lines)
