from playground.playground_runtime import Playground
from playground.playground_config import PlaygroundConfig, load_config
from playground.playground_gateway import EvaluationGateway
from playground.playground_catalog import CatalogLoader
from playground.playground_datatypes import Session, ExampleRef, Notice, Ok, Err

__all__ = [
    "Playground",
    "PlaygroundConfig",
    "load_config",
    "EvaluationGateway",
    "CatalogLoader",
    "Session",
    "ExampleRef",
    "Notice",
    "Ok",
    "Err",
]
