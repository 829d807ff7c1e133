"""Reporting of progress, secrets, outputs and failures to the CI runner."""

import json
import os
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional
import click


def to_command_value(value: Any) -> str:
    """Convert an output value to the string the runner stores."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def escape_data(value: str) -> str:
    """Escape workflow command data."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ReportingSink(ABC):
    """Abstract base class for result reporting."""

    def __init__(self):
        self.failed = False

    @abstractmethod
    def info(self, message: str) -> None:
        """Emit an informational message."""
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        """Emit an error message."""
        pass

    @abstractmethod
    def set_secret(self, secret: Any) -> None:
        """Register a value to be masked in all later output."""
        pass

    @abstractmethod
    def set_output(self, name: str, value: Any) -> None:
        """Publish a named output."""
        pass

    def set_failed(self, message: str) -> None:
        """
        Mark the run as failed.

        Args:
            message: Failure message, also emitted as an error
        """
        self.failed = True
        self.error(message)


class GitHubActionsReporter(ReportingSink):
    """Reports through GitHub Actions workflow commands."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize reporter.

        Args:
            environ: Environment mapping (default: os.environ)
        """
        super().__init__()
        self.environ = os.environ if environ is None else environ

    def _issue(
        self,
        command: str,
        message: str = "",
        properties: Optional[Dict[str, str]] = None,
    ) -> None:
        props = ""
        if properties:
            props = " " + ",".join(
                f"{key}={escape_property(value)}"
                for key, value in properties.items()
                if value
            )
        click.echo(f"::{command}{props}::{escape_data(message)}")

    def info(self, message: str) -> None:
        click.echo(message)

    def error(self, message: str) -> None:
        self._issue("error", message)

    def set_secret(self, secret: Any) -> None:
        self._issue("add-mask", to_command_value(secret))

    def set_output(self, name: str, value: Any) -> None:
        output_file = self.environ.get("GITHUB_OUTPUT")
        if output_file:
            with open(output_file, "a", encoding="utf-8") as f:
                f.write(self._key_value_message(name, value) + os.linesep)
            return

        # Runners without file commands still accept the legacy command
        click.echo("")
        self._issue("set-output", to_command_value(value), {"name": name})

    @staticmethod
    def _key_value_message(name: str, value: Any) -> str:
        """Format a multiline-safe file command entry."""
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        converted = to_command_value(value)

        if delimiter in name:
            raise ValueError(
                f'Unexpected input: name should not contain the delimiter "{delimiter}"'
            )
        if delimiter in converted:
            raise ValueError(
                f'Unexpected input: value should not contain the delimiter "{delimiter}"'
            )

        return f"{name}<<{delimiter}{os.linesep}{converted}{os.linesep}{delimiter}"
