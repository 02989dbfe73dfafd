# network/source.py
from abc import ABC, abstractmethod
from collections.abc import Mapping

import torch

from network.exceptions import EvaluationError
from utils.logger import get_logger

logger = get_logger("source")


class Source(ABC):
    """Hands out one raw input vector per input slot."""

    @abstractmethod
    def at(self, index):
        ...


class VectorSource(Source):
    def __init__(self, vectors):
        self._inputs = list(vectors)

    @classmethod
    def from_named(cls, inputs, values):
        """
        Build one vector per input group from {group: {variable: value}}.

        inputs : list[InputGroup], in slot order
        values : mapping of group name -> mapping of variable name -> number

        Each value is normalized as (value + offset) * scale.
        """
        if not isinstance(values, Mapping):
            raise EvaluationError("VectorSource: input values must map group names to variables")
        vectors = []
        for group in inputs:
            if group.name not in values:
                raise EvaluationError(f"VectorSource: no values for input group '{group.name}'")
            group_values = values[group.name]
            if not isinstance(group_values, Mapping):
                logger.error("Input group %s is not a mapping: %r", group.name, group_values)
                raise EvaluationError(
                    f"VectorSource: values for group '{group.name}' must be a mapping")
            vec = torch.empty(group.size(), dtype=torch.float64)
            for i, var in enumerate(group.variables):
                if var.name not in group_values:
                    raise EvaluationError(
                        f"VectorSource: no value for '{var.name}' in group '{group.name}'")
                value = group_values[var.name]
                try:
                    vec[i] = (float(value) + var.offset) * var.scale
                except (TypeError, ValueError) as e:
                    logger.error("Bad value for %s.%s: %r", group.name, var.name, value)
                    raise EvaluationError(
                        f"VectorSource: value for '{var.name}' in group '{group.name}' "
                        f"is not a number: {value!r}") from e
            logger.debug("Input group %s -> %s", group.name, vec.tolist())
            vectors.append(vec)
        return cls(vectors)

    def at(self, index):
        if index < 0 or index >= len(self._inputs):
            raise EvaluationError(f"VectorSource: no source vector defined at {index}")
        return self._inputs[index]

    def __len__(self):
        return len(self._inputs)


class DummySource(Source):
    """Placeholder data [0, 1, ..., n-1] for each declared input size."""

    def __init__(self, input_sizes):
        self._sizes = list(input_sizes)

    @classmethod
    def from_config(cls, config):
        return cls(config.input_sizes())

    def at(self, index):
        if index < 0 or index >= len(self._sizes):
            raise EvaluationError(f"DummySource: no size defined at {index}")
        return torch.arange(self._sizes[index], dtype=torch.float64)

    def __len__(self):
        return len(self._sizes)
