"""Pydantic models for rule files.

A rule file lists property merge rules in the order they are applied::

    rules:
      - label: Person
        properties: [sameAs]
      - label: Person
        properties: [name]
        name: person-by-name
"""

from pydantic import BaseModel, Field


class RuleConfig(BaseModel):
    """A property merge rule declared in a rule file."""

    label: str = Field(min_length=1)
    properties: list[str] = Field(min_length=1)
    name: str | None = None
    require_all_properties: bool = True


class RuleFile(BaseModel):
    """Top-level model for a rules YAML file."""

    rules: list[RuleConfig] = Field(default_factory=list)
