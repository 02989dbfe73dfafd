# network/stack.py
import torch
import torch.nn as nn

from descriptors.config import Activation, Architecture
from network.exceptions import ConfigurationError
from utils.logger import get_logger

logger = get_logger("stack")

DTYPE = torch.float64


class ElementwiseAffine(nn.Module):
    """weights * x + bias, one scale and shift per element."""

    def __init__(self, weights, bias):
        super().__init__()
        self.register_buffer("weight", torch.tensor(weights, dtype=DTYPE))
        self.register_buffer("bias", torch.tensor(bias, dtype=DTYPE))

    def forward(self, x):
        return self.weight * x + self.bias


def build_activation(activation):
    if activation == Activation.LINEAR:
        return nn.Identity()
    if activation == Activation.SIGMOID:
        return nn.Sigmoid()
    if activation == Activation.TANH:
        return nn.Tanh()
    if activation == Activation.RECTIFIED:
        return nn.ReLU()
    if activation == Activation.SOFTMAX:
        return nn.Softmax(dim=-1)
    if activation == Activation.ELU:
        return nn.ELU()
    raise ConfigurationError(f"unknown activation {activation}")


class LayerStack(nn.Module):
    """
    Fixed (pre-trained) sequence of layers mapping one vector to another.
    Built from LayerConfig descriptors; never trained.
    """

    def __init__(self, n_inputs, layers):
        super().__init__()
        self.n_inputs = n_inputs
        self.n_outputs = n_inputs
        self.layers = nn.Sequential()
        logger.info("Building stack: n_inputs=%d, %d layer(s)", n_inputs, len(layers))
        for number, layer in enumerate(layers):
            try:
                self._add_layer(number, layer)
            except ConfigurationError:
                logger.error("Malformed layer %d: %s", number, layer)
                raise
        self.eval()

    def _add_layer(self, number, layer):
        n_in = self.n_outputs
        if n_in <= 0:
            raise ConfigurationError(f"layer {number} has no inputs")
        arch = layer.architecture
        if arch == Architecture.DENSE:
            n_weights = len(layer.weights)
            if n_weights == 0 or n_weights % n_in != 0:
                raise ConfigurationError(
                    f"dense layer {number}: {n_weights} weights don't fit {n_in} inputs")
            n_out = n_weights // n_in
            bias = layer.bias or [0.0] * n_out
            if len(bias) != n_out:
                raise ConfigurationError(
                    f"dense layer {number}: bias has {len(bias)} entries, expected {n_out}")
            dense = nn.Linear(n_in, n_out, dtype=DTYPE)
            with torch.no_grad():
                dense.weight.copy_(torch.tensor(layer.weights, dtype=DTYPE).view(n_out, n_in))
                dense.bias.copy_(torch.tensor(bias, dtype=DTYPE))
            self.layers.append(dense)
            self.n_outputs = n_out
            logger.debug("Created dense layer %d: in=%d out=%d", number, n_in, n_out)
        elif arch == Architecture.NORMALIZATION:
            if len(layer.weights) != n_in or len(layer.bias) != n_in:
                raise ConfigurationError(
                    f"normalization layer {number}: need {n_in} weights and biases, "
                    f"got {len(layer.weights)} and {len(layer.bias)}")
            self.layers.append(ElementwiseAffine(layer.weights, layer.bias))
            logger.debug("Created normalization layer %d: size=%d", number, n_in)
        elif arch == Architecture.NONE:
            logger.debug("Layer %d is activation only", number)
        else:
            raise ConfigurationError(f"unknown layer architecture {arch}")

        self.layers.append(build_activation(layer.activation))

    def forward(self, x):
        return self.layers(x)

    def compute(self, vector):
        with torch.no_grad():
            return self(torch.as_tensor(vector, dtype=DTYPE))

    def input_size(self):
        return self.n_inputs

    def output_size(self):
        return self.n_outputs
