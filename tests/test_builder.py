# tests/test_builder.py
import pytest

from descriptors.config import LayerConfig, NodeConfig, NodeType
from network.builder import GraphBuilder
from network.exceptions import ConfigurationError
from network.node import ConcatenateNode, FeedForwardNode, InputNode

INPUT = NodeType.INPUT
FF = NodeType.FEED_FORWARD
CAT = NodeType.CONCATENATE


def identity_layer(n):
    weights = [1.0 if i == j else 0.0 for i in range(n) for j in range(n)]
    return LayerConfig(weights=weights)


def test_out_of_order_descriptors():
    # terminal node first, inputs last
    nodes = [
        NodeConfig(FF, [1], 0),
        NodeConfig(CAT, [2, 3]),
        NodeConfig(INPUT, [0], 2),
        NodeConfig(INPUT, [1], 3),
    ]
    built = GraphBuilder(nodes, [identity_layer(5)]).build()
    assert len(built) == 4
    assert isinstance(built[0], FeedForwardNode)
    assert isinstance(built[1], ConcatenateNode)
    assert isinstance(built[2], InputNode)
    assert built[0].source is built[1]
    assert built[1].sources == (built[2], built[3])


def test_diamond_builds_shared_ancestor_once():
    nodes = [
        NodeConfig(INPUT, [0], 2),
        NodeConfig(FF, [0], 0),
        NodeConfig(FF, [0], 1),
        NodeConfig(CAT, [1, 2]),
    ]
    builder = GraphBuilder(nodes, [identity_layer(2), identity_layer(2)])
    built = builder.build()
    assert len(builder.nodes) == 4
    assert built[1].source is built[0]
    assert built[2].source is built[0]
    assert len(builder.stacks) == 2


def test_shared_layer_index_builds_one_stack():
    nodes = [
        NodeConfig(INPUT, [0], 2),
        NodeConfig(FF, [0], 0),
        NodeConfig(FF, [1], 0),
    ]
    builder = GraphBuilder(nodes, [identity_layer(2)])
    built = builder.build()
    assert len(builder.stacks) == 1
    assert built[1].stack is built[2].stack


def test_disconnected_nodes_are_built():
    nodes = [
        NodeConfig(INPUT, [0], 1),
        NodeConfig(INPUT, [1], 1),
        NodeConfig(INPUT, [2], 4),
    ]
    assert len(GraphBuilder(nodes, []).build()) == 3


@pytest.mark.parametrize("nodes", [
    [NodeConfig(FF, [0], 0)],                                  # self loop
    [NodeConfig(INPUT, [0], 2),
     NodeConfig(CAT, [0, 2]),
     NodeConfig(FF, [1], 0)],                                  # 1 -> 2 -> 1
    [NodeConfig(CAT, [1]), NodeConfig(CAT, [2]), NodeConfig(CAT, [0])],
])
def test_cycles_are_rejected(nodes):
    with pytest.raises(ConfigurationError, match="cycle"):
        GraphBuilder(nodes, [identity_layer(2)]).build()


@pytest.mark.parametrize("nodes,match", [
    ([NodeConfig(INPUT, [0, 1], 2)], "needs one source, got 2"),
    ([NodeConfig(INPUT, [], 2)], "needs one source, got 0"),
    ([NodeConfig(INPUT, [0], 0)], "positive size"),
    ([NodeConfig(INPUT, [-1], 2)], "non-negative input slot"),
    ([NodeConfig(INPUT, [0], 2), NodeConfig(FF, [0, 0], 0)], "needs one source, found 2"),
    ([NodeConfig(INPUT, [0], 2), NodeConfig(FF, [0], -1)], "negative layer number -1"),
    ([NodeConfig(INPUT, [0], 2), NodeConfig(FF, [0], 3)], "no layer number 3"),
    ([NodeConfig(INPUT, [0], 2), NodeConfig(CAT, [0, 5])], "no node index 5"),
    ([NodeConfig(INPUT, [0], 2), NodeConfig(CAT, [-1])], "no node index -1"),
    ([NodeConfig(INPUT, [0], 2), NodeConfig("maxout", [0], 0)], "unknown node type"),
    ([NodeConfig(CAT, []), NodeConfig(FF, [0], 0)], "concatenate node 0 needs at least one source"),
])
def test_bad_descriptors(nodes, match):
    with pytest.raises(ConfigurationError, match=match):
        GraphBuilder(nodes, [identity_layer(2)]).build()


def test_shared_layer_with_conflicting_input_size():
    nodes = [
        NodeConfig(INPUT, [0], 2),
        NodeConfig(INPUT, [1], 3),
        NodeConfig(FF, [0], 0),
        NodeConfig(FF, [1], 0),
    ]
    with pytest.raises(ConfigurationError, match="built for 2"):
        GraphBuilder(nodes, [identity_layer(2)]).build()


def test_malformed_layer_names_layer_and_node():
    nodes = [NodeConfig(INPUT, [0], 2), NodeConfig(FF, [0], 0)]
    with pytest.raises(ConfigurationError, match=r"layer 0 \(node 1\)"):
        GraphBuilder(nodes, [LayerConfig(weights=[1, 2, 3])]).build()
