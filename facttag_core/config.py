import copy
import os
from typing import Any

import yaml
from rich.console import Console

console = Console()

DEFAULT_USER_AGENT = "FactTagEstimator/2.1 (Educational Research; Statistical Sampling)"

DEFAULT_CONFIG: dict[str, Any] = {
    "corpus": {
        "api_url": "https://en.wikipedia.org/w/api.php",
        "category": "All articles with unsourced statements",
        "namespace": 0,
        "user_agent": DEFAULT_USER_AGENT,
        "timeout": 30.0,
        "request_delay": 0.2,
        # None = ask the corpus for the category size
        "population_size": None,
        "fallback_population_size": 553000,
    },
    "sampling": {
        "sample_size": 100,
        "strategy": "category",
        "search_terms": ["citation needed", "fact", "dubious"],
        "seed": None,
    },
    "estimation": {"confidence_level": 0.95, "critical_value": "table"},
    "logging": {"level": "INFO"},
    "report": {
        "output_path": None,
        "corpus_label": "Wikipedia \"Category:All articles with unsourced statements\"",
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str = "config.yaml") -> dict[str, Any]:
    """
    From config.yaml, layered over DEFAULT_CONFIG.

    Args:
        config_path: Path to config file (default: config.yaml)

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        console.print(f"[yellow]Warning: {config_path} not found. Using default config.[/yellow]")
        loaded = {}

    if not isinstance(loaded, dict):
        raise ValueError(f"{config_path} must contain a YAML mapping")

    config = _merge(DEFAULT_CONFIG, loaded)

    user_agent = os.getenv("FACTTAG_USER_AGENT")
    if user_agent:
        config["corpus"]["user_agent"] = user_agent

    return config
