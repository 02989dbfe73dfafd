# network/builder.py
from descriptors.config import NodeType
from network.exceptions import ConfigurationError
from network.node import ConcatenateNode, FeedForwardNode, InputNode
from network.stack import LayerStack
from utils.logger import get_logger

logger = get_logger("builder")


class GraphBuilder:
    """
    Turns node and layer descriptors into linked Node / LayerStack objects.

    Nodes are built depth first: every predecessor is built before the node
    that reads from it, whatever order the descriptors come in. Built nodes
    are memoized by descriptor index, stacks by layer index, so diamond
    shapes and shared layers are materialized once.
    """

    def __init__(self, nodes, layers):
        self.node_configs = list(nodes)
        self.layer_configs = list(layers)
        self.nodes = []          # in build order
        self.stacks = []         # in build order
        self.node_map = {}       # descriptor index -> Node
        self.stack_map = {}      # layer index -> LayerStack

    def build(self):
        """Build every node; returns the nodes in descriptor order."""
        logger.info("Building graph: %d nodes, %d layers",
                    len(self.node_configs), len(self.layer_configs))
        for index in range(len(self.node_configs)):
            self.build_node(index)
        assert len(self.node_map) == len(self.node_configs)
        return [self.node_map[i] for i in range(len(self.node_configs))]

    def build_node(self, index, ancestors=frozenset()):
        """
        ancestors holds the indices on the current discovery path only, so a
        node reached twice through different paths is not a cycle.
        """
        if index in self.node_map:
            return self.node_map[index]
        if index < 0 or index >= len(self.node_configs):
            raise ConfigurationError(f"no node index {index}")

        config = self.node_configs[index]

        if config.type == NodeType.INPUT:
            return self._record(index, self._input_node(index, config))

        if index in ancestors:
            logger.error("Cycle through node %d, path %s", index, sorted(ancestors))
            raise ConfigurationError(f"found cycle in graph at node {index}")
        path = ancestors | {index}
        for source_index in config.sources:
            self.build_node(source_index, path)

        if config.type == NodeType.FEED_FORWARD:
            return self._record(index, self._feed_forward_node(index, config))

        if config.type == NodeType.CONCATENATE:
            if not config.sources:
                raise ConfigurationError(f"concatenate node {index} needs at least one source")
            in_nodes = [self.node_map[s] for s in config.sources]
            return self._record(index, ConcatenateNode(in_nodes))

        raise ConfigurationError(f"unknown node type {config.type!r} at node {index}")

    def _record(self, index, node):
        self.nodes.append(node)
        self.node_map[index] = node
        logger.debug("Built node %d: %r", index, node)
        return node

    def _input_node(self, index, config):
        n_sources = len(config.sources)
        if n_sources != 1:
            raise ConfigurationError(
                f"input node {index} needs one source, got {n_sources}")
        slot = config.sources[0]
        if slot < 0:
            raise ConfigurationError(
                f"input node {index} needs a non-negative input slot, got {slot}")
        if config.index <= 0:
            raise ConfigurationError(
                f"input node {index} needs positive size, got {config.index}")
        return InputNode(slot, config.index)

    def _feed_forward_node(self, index, config):
        n_sources = len(config.sources)
        if n_sources != 1:
            raise ConfigurationError(
                f"feed forward node {index} needs one source, found {n_sources}")
        source = self.node_map[config.sources[0]]
        return FeedForwardNode(self._get_stack(index, config.index, source.output_size()), source)

    def _get_stack(self, index, layer_n, n_inputs):
        if layer_n < 0:
            raise ConfigurationError(f"negative layer number {layer_n} at node {index}")
        if layer_n >= len(self.layer_configs):
            raise ConfigurationError(f"no layer number {layer_n} at node {index}")

        if layer_n in self.stack_map:
            stack = self.stack_map[layer_n]
            if stack.input_size() != n_inputs:
                raise ConfigurationError(
                    f"node {index} feeds {n_inputs} values to layer {layer_n}, "
                    f"which was built for {stack.input_size()}")
            logger.debug("Node %d reuses stack for layer %d", index, layer_n)
            return stack

        try:
            stack = LayerStack(n_inputs, [self.layer_configs[layer_n]])
        except ConfigurationError as e:
            raise ConfigurationError(f"layer {layer_n} (node {index}): {e}") from e
        self.stacks.append(stack)
        self.stack_map[layer_n] = stack
        return stack
