"""Configuration snapshot model for runshell."""

from pydantic import BaseModel, ConfigDict, field_validator

from runshell.constants import DEFAULT_SHELL, DEFAULT_SHELL_INTEGRATION


class ShellOptions(BaseModel):
    """The two settings runshell reads from its configuration file."""

    model_config = ConfigDict(frozen=True)

    shell: str = DEFAULT_SHELL
    shell_integration: str = DEFAULT_SHELL_INTEGRATION

    @field_validator("shell", "shell_integration", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("shell")
    @classmethod
    def _default_blank_shell(cls, value: str) -> str:
        return value or DEFAULT_SHELL
