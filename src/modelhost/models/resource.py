"""Model (resource) records."""

from typing import List
from pydantic import BaseModel, Field


def split_qualifier(reference: str) -> tuple[str, str]:
    """Split ``name:tag`` into ``(name, tag)``.

    Only a colon after the last ``/`` is a qualifier, so registry hosts with
    ports (``host:5000/model``) keep their port.
    """
    head, sep, tail = reference.rpartition(":")
    if not sep or "/" in tail:
        return reference, ""
    return head, tail


class ModelEntry(BaseModel):
    """A model as reported by the service's list command."""
    name: str = Field(..., description="Fully qualified model name")

    @property
    def base_name(self) -> str:
        return normalize_name(self.name)


def normalize_name(reference: str) -> str:
    """Base name used for presence matching: qualifier stripped, lowercased."""
    return split_qualifier(reference.strip())[0].lower()


def parse_model_listing(output: str) -> List[ModelEntry]:
    """Tokenize ``ollama list`` style output into records.

    The first row is a header when it starts with ``NAME``; every other
    non-blank row contributes its first column.
    """
    entries = []
    for line in output.splitlines():
        parts = line.split()
        if not parts:
            continue
        if parts[0].upper() == "NAME":
            continue
        entries.append(ModelEntry(name=parts[0]))
    return entries
