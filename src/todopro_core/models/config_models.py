"""Configuration models for the storage context system.

A context names one storage backend and where its data lives. The active
context decides which repository adapter the application runs against.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

BackendName = Literal["memory", "sqlite", "sqlalchemy", "peewee", "mongodb"]

BACKENDS: tuple[str, ...] = ("memory", "sqlite", "sqlalchemy", "peewee", "mongodb")


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["table", "json", "yaml"] = Field(default="table")
    color: bool = Field(default=True)


class StorageContext(BaseModel):
    """Context configuration for a storage backend.

    ``source`` is a database path (sqlite, peewee), an SQLAlchemy URL or a
    MongoDB connection string. The memory backend needs none.
    """

    name: str = Field(..., description="Unique context name")
    backend: BackendName = Field(..., description="Storage backend")
    source: str = Field(default="", description="Database path or URL")
    description: str = Field(default="", description="Human-readable description")

    @model_validator(mode="after")
    def validate_source(self) -> StorageContext:
        """Require a source for every backend except memory."""
        self.source = self.source.strip()
        if self.backend != "memory" and not self.source:
            raise ValueError(f"source is required for the {self.backend} backend")
        return self


class AppConfig(BaseModel):
    """Main TodoPro core configuration"""

    current_context_name: str = Field(default="local", description="Active context name")
    contexts: list[StorageContext] = Field(
        default_factory=list, description="Available contexts"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)

    def get_context(self, name: str) -> StorageContext:
        """Get context by name."""
        for ctx in self.contexts:
            if ctx.name == name:
                return ctx
        raise ValueError(f"Context '{name}' not found")

    def get_current_context(self) -> StorageContext:
        """Get the currently active context."""
        return self.get_context(self.current_context_name)

    def add_context(self, context: StorageContext):
        """Add a new context.

        Raises:
            ValueError: If context with the same name already exists
        """
        if any(ctx.name == context.name for ctx in self.contexts):
            raise ValueError(
                f"Context '{context.name}' already exists."
                " Use a different name or remove the existing context first."
            )
        self.contexts.append(context)

    def remove_context(self, name: str):
        """Remove a context by name."""
        if name == self.current_context_name:
            raise ValueError(f"Context '{name}' is active and cannot be removed")
        original_len = len(self.contexts)
        self.contexts = [ctx for ctx in self.contexts if ctx.name != name]
        if len(self.contexts) == original_len:
            raise ValueError(f"Context '{name}' not found")
        return True
