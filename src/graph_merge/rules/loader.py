"""Load property merge rules from YAML rule files."""

import logging
from pathlib import Path

import yaml

from graph_merge.rules.base import PropertiesMergeRule
from graph_merge.rules.models import RuleConfig, RuleFile

logger = logging.getLogger(__name__)


class ConfiguredPropertiesMergeRule(PropertiesMergeRule):
    """Property merge rule built from a RuleConfig."""

    def __init__(self, config: RuleConfig) -> None:
        self.config = config
        self.require_all_properties = config.require_all_properties

    @property
    def label(self) -> str:
        return self.config.label

    @property
    def properties(self) -> list[str]:
        return list(self.config.properties)

    @property
    def rule_name(self) -> str:
        return self.config.name or super().rule_name


def read_rule_file(path: Path) -> RuleFile:
    """Read and validate a rules YAML file.

    Raises:
        ValueError: If the file does not exist
        pydantic.ValidationError: If a rule is malformed
    """
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Rule file not found: {path}")
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return RuleFile()
    # A bare list of rules is accepted as well as a 'rules:' mapping
    if isinstance(data, list):
        data = {"rules": data}
    return RuleFile.model_validate(data)


def rules_from_file(rule_file: RuleFile) -> list[PropertiesMergeRule]:
    """Build rule instances from a parsed rule file, in file order."""
    return [ConfiguredPropertiesMergeRule(config) for config in rule_file.rules]


def load_rules(path: Path) -> list[PropertiesMergeRule]:
    """Load rules from a YAML file."""
    rules = rules_from_file(read_rule_file(path))
    logger.info(f"Loaded {len(rules)} rules from {path}")
    return rules
