# descriptors/config.py
from enum import Enum


class NodeType(Enum):
    INPUT = "input"
    FEED_FORWARD = "feed_forward"
    CONCATENATE = "concatenate"


class Architecture(Enum):
    NONE = "none"
    DENSE = "dense"
    NORMALIZATION = "normalization"


class Activation(Enum):
    LINEAR = "linear"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    RECTIFIED = "rectified"
    SOFTMAX = "softmax"
    ELU = "elu"


class NodeConfig:
    def __init__(self, node_type, sources, index=-1):
        """
        node_type : NodeType
        sources   : list[int]  (input slot for INPUT, predecessor nodes otherwise)
        index     : int        (declared size for INPUT, layer index for FEED_FORWARD)
        """
        self.type = node_type
        self.sources = list(sources)
        self.index = index

    def __repr__(self):
        return f"NodeConfig(type={self.type.name}, sources={self.sources}, index={self.index})"


class LayerConfig:
    def __init__(self, weights=(), bias=(),
                 activation=Activation.LINEAR,
                 architecture=Architecture.DENSE):
        self.weights = [float(w) for w in weights]
        self.bias = [float(b) for b in bias]
        self.activation = activation
        self.architecture = architecture

    def __repr__(self):
        return (f"LayerConfig(architecture={self.architecture.name}, "
                f"activation={self.activation.name}, "
                f"n_weights={len(self.weights)}, n_bias={len(self.bias)})")


class InputVariable:
    def __init__(self, name, offset=0.0, scale=1.0):
        self.name = name
        self.offset = float(offset)
        self.scale = float(scale)


class InputGroup:
    def __init__(self, name, variables):
        self.name = name
        self.variables = list(variables)

    def size(self):
        return len(self.variables)


class GraphConfig:
    def __init__(self, inputs=None, nodes=None, layers=None):
        self.inputs = list(inputs or [])
        self.nodes = list(nodes or [])
        self.layers = list(layers or [])

    def input_sizes(self):
        return [group.size() for group in self.inputs]


def dummy_config():
    """
    Two 2-variable inputs, concatenated, then pushed twice through the same
    linear layer. The layer reverses its 4-vector, so the terminal node gives
    back the concatenated input.
    """
    variables = [InputVariable("one"), InputVariable("two")]
    inputs = [InputGroup("one", variables), InputGroup("two", variables)]
    nodes = [
        NodeConfig(NodeType.INPUT, [0], 2),
        NodeConfig(NodeType.INPUT, [1], 2),
        NodeConfig(NodeType.CONCATENATE, [0, 1]),
        NodeConfig(NodeType.FEED_FORWARD, [2], 0),
        NodeConfig(NodeType.FEED_FORWARD, [3], 0),
    ]
    dense = LayerConfig(
        weights=[0, 0, 0, 1,
                 0, 0, 1, 0,
                 0, 1, 0, 0,
                 1, 0, 0, 0],
        activation=Activation.LINEAR,
        architecture=Architecture.DENSE,
    )
    return GraphConfig(inputs=inputs, nodes=nodes, layers=[dense])
