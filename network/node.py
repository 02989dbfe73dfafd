# network/node.py
from abc import ABC, abstractmethod

import torch

from network.exceptions import EvaluationError
from network.stack import DTYPE


class Node(ABC):
    """One vector-producing unit of the graph."""

    @abstractmethod
    def compute(self, source):
        ...

    @abstractmethod
    def output_size(self):
        ...


class InputNode(Node):
    def __init__(self, index, n_outputs):
        """
        index     : int  input slot read from the source
        n_outputs : int  declared vector length
        """
        self.index = index
        self.n_outputs = n_outputs

    def compute(self, source):
        output = torch.as_tensor(source.at(self.index), dtype=DTYPE)
        if output.dim() != 1:
            raise EvaluationError(
                f"Found input of shape {tuple(output.shape)}, expected a vector of length {self.n_outputs}")
        if output.shape[0] != self.n_outputs:
            raise EvaluationError(
                f"Found vector of length {output.shape[0]}, expected {self.n_outputs}")
        return output

    def output_size(self):
        return self.n_outputs

    def __repr__(self):
        return f"InputNode(index={self.index}, n_outputs={self.n_outputs})"


class FeedForwardNode(Node):
    def __init__(self, stack, source):
        self.stack = stack
        self.source = source

    def compute(self, source):
        return self.stack.compute(self.source.compute(source))

    def output_size(self):
        return self.stack.output_size()

    def __repr__(self):
        return f"FeedForwardNode(n_outputs={self.output_size()})"


class ConcatenateNode(Node):
    def __init__(self, sources):
        self.sources = tuple(sources)
        self.n_outputs = sum(node.output_size() for node in self.sources)

    def compute(self, source):
        output = torch.empty(self.n_outputs, dtype=DTYPE)
        offset = 0
        for node in self.sources:
            values = node.compute(source)
            n_elements = values.shape[0]
            assert n_elements == node.output_size()
            output[offset:offset + n_elements] = values
            offset += n_elements
        assert offset == self.n_outputs
        return output

    def output_size(self):
        return self.n_outputs

    def __repr__(self):
        return f"ConcatenateNode(n_sources={len(self.sources)}, n_outputs={self.n_outputs})"
