# descriptors/parse_json.py
"""
Read a graph description from JSON.

Layout::

    {"inputs": [{"name": "jets", "variables": [{"name": "pt", "offset": 0, "scale": 1}]}],
     "nodes":  [{"type": "input", "sources": [0], "size": 1}, ...],
     "layers": [{"architecture": "dense", "activation": "linear",
                 "weights": [...], "bias": [...]}]}

Node "size" is only read for input nodes and "layer_index" only for
feed_forward nodes.
"""
import json

from descriptors.config import (
    Activation, Architecture, GraphConfig, InputGroup, InputVariable,
    LayerConfig, NodeConfig, NodeType,
)
from network.exceptions import ConfigurationError
from utils.logger import get_logger

logger = get_logger("parse_json")


def _enum_value(enum_cls, name, what):
    try:
        return enum_cls(str(name).lower())
    except ValueError:
        allowed = [e.value for e in enum_cls]
        raise ConfigurationError(f"unknown {what} '{name}', expected one of {allowed}") from None


def _parse_inputs(raw_inputs):
    groups = []
    for raw in raw_inputs:
        variables = [
            InputVariable(v["name"], v.get("offset", 0.0), v.get("scale", 1.0))
            for v in raw["variables"]
        ]
        groups.append(InputGroup(raw["name"], variables))
    return groups


def _parse_node(number, raw):
    node_type = _enum_value(NodeType, raw["type"], "node type")
    sources = [int(s) for s in raw["sources"]]
    if node_type == NodeType.INPUT:
        index = int(raw["size"])
    elif node_type == NodeType.FEED_FORWARD:
        index = int(raw["layer_index"])
    else:
        index = -1
    logger.debug("Parsed node %d: type=%s sources=%s index=%d",
                 number, node_type.value, sources, index)
    return NodeConfig(node_type, sources, index)


def _parse_layer(raw):
    return LayerConfig(
        weights=raw.get("weights", []),
        bias=raw.get("bias", []),
        activation=_enum_value(Activation, raw.get("activation", "linear"), "activation"),
        architecture=_enum_value(Architecture, raw.get("architecture", "dense"), "architecture"),
    )


def parse_json_graph(stream):
    """
    stream : str or text file-like object
    Returns a GraphConfig. Any malformed content raises ConfigurationError.
    """
    try:
        data = json.loads(stream) if isinstance(stream, str) else json.load(stream)
    except json.JSONDecodeError as e:
        logger.error("Could not decode graph JSON: %s", e)
        raise ConfigurationError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("graph JSON must be an object")

    try:
        config = GraphConfig(
            inputs=_parse_inputs(data.get("inputs", [])),
            nodes=[_parse_node(i, raw) for i, raw in enumerate(data.get("nodes", []))],
            layers=[_parse_layer(raw) for raw in data.get("layers", [])],
        )
    except KeyError as e:
        logger.error("Graph JSON is missing key %s", e)
        raise ConfigurationError(f"missing key {e} in graph JSON") from e
    except (AttributeError, TypeError, ValueError) as e:
        logger.error("Graph JSON has a malformed entry: %s", e)
        raise ConfigurationError(f"malformed graph JSON: {e}") from e

    logger.info("Parsed graph config: %d input groups, %d nodes, %d layers",
                len(config.inputs), len(config.nodes), len(config.layers))
    return config
