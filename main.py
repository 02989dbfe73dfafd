# main.py
import json
import logging
import sys

import click

from descriptors.config import dummy_config
from descriptors.parse_json import parse_json_graph
from network.exceptions import GraphError
from network.graph import Graph
from network.source import DummySource, VectorSource
from utils.logger import add_logfile, get_logger

logger = get_logger("main")

LIBRARY_LOGGERS = ("parse_json", "source", "stack", "builder", "graph")
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(log_level, log_file):
    """Apply --log-level and --log-file to this script and the library loggers."""
    loggers = [logger] + [logging.getLogger(name) for name in LIBRARY_LOGGERS]
    handler = add_logfile(logger, log_file) if log_file else None
    for lg in loggers:
        if log_level:
            lg.setLevel(log_level.upper())
        if handler is not None and lg is not logger:
            lg.addHandler(handler)


def read_config(config_file):
    """
    Config from --config, else from piped stdin, else the built-in dummy graph.
    """
    if config_file is not None:
        return parse_json_graph(config_file)
    if not sys.stdin.isatty():
        text = sys.stdin.read()
        if text.strip():
            return parse_json_graph(text)
    return dummy_config()


def read_source(config, inputs_file):
    if inputs_file is None:
        return DummySource.from_config(config)
    try:
        values = json.load(inputs_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"invalid inputs JSON: {e}")
    return VectorSource.from_named(config.inputs, values)


@click.command()
@click.argument("node_number", type=int, required=False)
@click.option("--config", "config_file", type=click.File("r"),
              help="Graph description (JSON). Read from stdin when piped.")
@click.option("--inputs", "inputs_file", type=click.File("r"),
              help="Input values as {group: {variable: value}}. Dummy data if omitted.")
@click.option("--log-level", type=click.Choice(LEVELS, case_sensitive=False), default=None)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None)
def main(node_number, config_file, inputs_file, log_level, log_file):
    """Build a feed-forward graph and print the output of NODE_NUMBER (default: terminal node)."""
    configure_logging(log_level, log_file)

    try:
        config = read_config(config_file)
        graph = Graph.from_config(config)
        source = read_source(config, inputs_file)
        output = graph.compute(source, node_number)
    except GraphError as e:
        logger.error("Graph evaluation failed: %s", e)
        raise click.ClickException(str(e))

    logger.info("Node %s produced %d values",
                "terminal" if node_number is None else node_number, output.shape[0])
    for value in output.tolist():
        click.echo(f"{value:g}")


if __name__ == "__main__":
    main()
